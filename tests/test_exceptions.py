import pytest

from fnt import (
    ConfigurationError,
    FntError,
    NumericalError,
    SequenceError,
    UnsupportedOperation,
)
from fnt.methods import Simpson


@pytest.mark.parametrize(
    "exc, builtin",
    [
        (ConfigurationError, ValueError),
        (SequenceError, RuntimeError),
        (NumericalError, ArithmeticError),
        (UnsupportedOperation, NotImplementedError),
    ],
)
def test_hierarchy(exc, builtin):
    assert issubclass(exc, FntError)
    assert issubclass(exc, builtin)


def test_unsupported_operation_message():
    with pytest.raises(UnsupportedOperation, match="simpson does not support seed"):
        Simpson(1).seed([0.0])

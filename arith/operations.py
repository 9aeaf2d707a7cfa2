"""Basic arithmetic operations."""

from typing import Union

Number = Union[int, float]


class DivisionByZeroError(ZeroDivisionError):
    """Raised when the divisor is exactly zero."""

    def __init__(self, message: str = "Division by zero is not allowed"):
        super().__init__(message)


def add(a: Number, b: Number) -> Number:
    return a + b


def subtract(a: Number, b: Number) -> Number:
    return a - b


def multiply(a: Number, b: Number) -> Number:
    return a * b


def divide(a: Number, b: Number) -> float:
    """
    Divide a by b.

    Raises:
        DivisionByZeroError: If b == 0
    """
    if b == 0:
        raise DivisionByZeroError()
    return a / b

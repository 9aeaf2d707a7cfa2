import math

import pytest
from hypothesis import given, strategies as st

from arith import DivisionByZeroError, add, divide, multiply, subtract

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
nonzero = st.one_of(
    st.floats(min_value=1e-3, max_value=1e6),
    st.floats(min_value=-1e6, max_value=-1e-3),
)
numbers = st.one_of(st.integers(), st.floats(allow_nan=False))


def test_add() -> None:
    assert add(2, 3) == 5
    assert add(-1, 1) == 0


def test_subtract() -> None:
    assert subtract(5, 3) == 2
    assert subtract(10, 15) == -5


def test_multiply() -> None:
    assert multiply(4, 3) == 12
    assert multiply(7, 0) == 0


def test_divide() -> None:
    assert divide(10, 2) == 5
    assert divide(9, 3) == 3


def test_divide_by_zero_raises() -> None:
    with pytest.raises(DivisionByZeroError, match="Division by zero is not allowed"):
        divide(5, 0)


def test_division_by_zero_error_is_zero_division_error() -> None:
    with pytest.raises(ZeroDivisionError):
        divide(1.5, 0.0)


@given(finite, finite)
def test_add_and_subtract_are_inverses(a: float, b: float) -> None:
    assert math.isclose(subtract(add(a, b), b), a, rel_tol=1e-9, abs_tol=1e-6)


@given(st.one_of(st.integers(), finite))
def test_multiply_by_zero_is_zero(x) -> None:
    assert multiply(x, 0) == 0


@given(finite, nonzero)
def test_divide_inverts_multiply(a: float, b: float) -> None:
    assert math.isclose(divide(multiply(a, b), b), a, rel_tol=1e-9, abs_tol=1e-9)


@given(numbers, st.sampled_from([0, 0.0, -0.0]))
def test_divide_by_zero_never_returns(x, zero) -> None:
    with pytest.raises(DivisionByZeroError):
        divide(x, zero)

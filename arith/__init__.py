"""
Arithmetic utilities.

Four basic operations over numeric pairs. Division by exactly zero raises
DivisionByZeroError instead of producing inf or NaN.
"""

__version__ = "1.0.0"

from .operations import DivisionByZeroError, add, divide, multiply, subtract

__all__ = [
    "DivisionByZeroError",
    "add",
    "divide",
    "multiply",
    "subtract",
]

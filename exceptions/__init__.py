"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,

    # Dekoji
    DegenerateYieldInputError,
    InvalidYieldRateError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",

    # Dekoji
    "DegenerateYieldInputError",
    "InvalidYieldRateError",
]

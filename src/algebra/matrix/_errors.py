"""
Error handling for algebra matrices.

Validation helpers report failures as integer codes; ``check_error``
turns a non-OK code into the matching exception. Every failure is a
local, recoverable validation error raised to the immediate caller.
"""

from __future__ import annotations

from typing import Dict, Optional, Type

__all__ = [
    'ALGEBRA_OK',
    'ALGEBRA_ERROR_INVALID_DIMENSIONS',
    'ALGEBRA_ERROR_DIMENSION_MISMATCH',
    'ALGEBRA_ERROR_NEGATIVE_INDEX',
    'ALGEBRA_ERROR_INDEX_OUT_OF_RANGE',
    'AlgebraError',
    'InvalidDimensionsError',
    'DimensionMismatchError',
    'NegativeIndexError',
    'IndexOutOfRangeError',
    'check_error',
]


# =============================================================================
# Error Codes
# =============================================================================

# Success
ALGEBRA_OK = 0

# Shape errors (10-13)
ALGEBRA_ERROR_INVALID_DIMENSIONS = 10
ALGEBRA_ERROR_DIMENSION_MISMATCH = 11

# Index errors (14-19)
ALGEBRA_ERROR_NEGATIVE_INDEX = 14
ALGEBRA_ERROR_INDEX_OUT_OF_RANGE = 15


_ERROR_MESSAGES = {
    ALGEBRA_OK: "Success",
    ALGEBRA_ERROR_INVALID_DIMENSIONS: "Invalid dimensions",
    ALGEBRA_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    ALGEBRA_ERROR_NEGATIVE_INDEX: "Negative index",
    ALGEBRA_ERROR_INDEX_OUT_OF_RANGE: "Index out of range",
}


# =============================================================================
# Exception Classes
# =============================================================================

class AlgebraError(Exception):
    """
    Base exception for all matrix validation failures.

    Attributes:
        code: One of the ``ALGEBRA_ERROR_*`` codes.
        message: Human readable description.
    """

    OK = ALGEBRA_OK
    ERROR_INVALID_DIMENSIONS = ALGEBRA_ERROR_INVALID_DIMENSIONS
    ERROR_DIMENSION_MISMATCH = ALGEBRA_ERROR_DIMENSION_MISMATCH
    ERROR_NEGATIVE_INDEX = ALGEBRA_ERROR_NEGATIVE_INDEX
    ERROR_INDEX_OUT_OF_RANGE = ALGEBRA_ERROR_INDEX_OUT_OF_RANGE

    def __init__(self, code: int, message: Optional[str] = None):
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "AlgebraError":
        """Create the exception subclass registered for ``code``."""
        base_msg = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        msg = f"{base_msg}: {context}" if context else base_msg
        exc_type = _EXCEPTION_TYPES.get(code, AlgebraError)
        return exc_type(code, msg)


class InvalidDimensionsError(AlgebraError, ValueError):
    """Matrix constructed with a negative row or column count."""


class DimensionMismatchError(AlgebraError, ValueError):
    """Binary operation between matrices of different shapes."""


class NegativeIndexError(AlgebraError, IndexError):
    """Accessor called with a negative row or column index."""


class IndexOutOfRangeError(AlgebraError, IndexError):
    """Accessor called with an index at or beyond the matrix extent."""


_EXCEPTION_TYPES: Dict[int, Type[AlgebraError]] = {
    ALGEBRA_ERROR_INVALID_DIMENSIONS: InvalidDimensionsError,
    ALGEBRA_ERROR_DIMENSION_MISMATCH: DimensionMismatchError,
    ALGEBRA_ERROR_NEGATIVE_INDEX: NegativeIndexError,
    ALGEBRA_ERROR_INDEX_OUT_OF_RANGE: IndexOutOfRangeError,
}


# =============================================================================
# Error Checking
# =============================================================================

def check_error(code: int, context: str = "") -> None:
    """
    Check error code and raise exception if not OK.

    Args:
        code: Code returned by a validation helper
        context: Optional detail appended to the message

    Raises:
        AlgebraError: Subclass matching ``code`` when it is not ALGEBRA_OK
    """
    if code == ALGEBRA_OK:
        return
    raise AlgebraError.from_code(code, context)

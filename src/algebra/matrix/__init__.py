"""Algebra Matrix Module.

Dense 2-D float64 matrices with bounds-checked element access,
elementwise and scalar arithmetic, transpose, Frobenius dot product and
a per-instance reader/writer lock.

Type Overview:

    Matrix                       # Row-major float64 storage + RWLock
    ├── shared=True  (default)   # RWLock guards every element access
    └── shared=False             # NullLock, single-threaded use only

Quick Start:
    >>> from algebra.matrix import Matrix
    >>>
    >>> m = Matrix(2, 3)
    >>> m.set(0, 1, 4.5)
    >>> t = m.T                  # New 3x2 matrix
    >>> t.scale(2.0)
    >>> print(t)

Errors:
    - InvalidDimensionsError: negative shape
    - NegativeIndexError: negative row/column index
    - IndexOutOfRangeError: index beyond the extent
    - DimensionMismatchError: add/sub/dot on different shapes

Locking:
    - LockGranularity.ELEMENT: one critical section per element access
    - LockGranularity.OPERATION: one critical section per operation
"""

# =============================================================================
# Errors
# =============================================================================
from ._errors import (
    ALGEBRA_OK,
    ALGEBRA_ERROR_INVALID_DIMENSIONS,
    ALGEBRA_ERROR_DIMENSION_MISMATCH,
    ALGEBRA_ERROR_NEGATIVE_INDEX,
    ALGEBRA_ERROR_INDEX_OUT_OF_RANGE,
    AlgebraError,
    InvalidDimensionsError,
    DimensionMismatchError,
    NegativeIndexError,
    IndexOutOfRangeError,
    check_error,
)

# =============================================================================
# Configuration
# =============================================================================
from ._config import (
    GRANULARITY_ENV,
    LockGranularity,
    LockConfig,
    FormatConfig,
    AlgebraConfig,
    config,
    get_config,
    set_lock_granularity,
    get_lock_granularity,
    set_format,
)

# =============================================================================
# Locks and Matrix
# =============================================================================
from ._lock import RWLock, NullLock
from ._dense import Matrix, new

__all__ = [
    # Errors
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

    # Configuration
    'GRANULARITY_ENV',
    'LockGranularity',
    'LockConfig',
    'FormatConfig',
    'AlgebraConfig',
    'config',
    'get_config',
    'set_lock_granularity',
    'get_lock_granularity',
    'set_format',

    # Locks
    'RWLock',
    'NullLock',

    # Matrix
    'Matrix',
    'new',
]

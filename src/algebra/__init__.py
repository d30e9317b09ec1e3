"""
Algebra - Dense Matrices

Minimal dense 2-D matrix container with:
- Row-major float64 storage (numpy)
- Bounds-checked element access
- Elementwise and scalar arithmetic, transpose, Frobenius dot product
- Per-instance reader/writer lock for concurrent use

Modules:
- matrix: Matrix type, errors, locks and configuration

Example:
    >>> import algebra
    >>> from algebra import Matrix
    >>>
    >>> m = Matrix(2, 3)
    >>> m.each(lambda i, j, v: i + j)
    >>> t = m.T
    >>> t.addn(10)
    >>> print(t)
"""

__version__ = '0.1.0'

from . import matrix

from .matrix import (
    # Core class
    Matrix,
    new,

    # Errors
    AlgebraError,
    InvalidDimensionsError,
    DimensionMismatchError,
    NegativeIndexError,
    IndexOutOfRangeError,

    # Configuration
    LockGranularity,
    LockConfig,
    FormatConfig,
    config,
    get_config,
    set_lock_granularity,
    get_lock_granularity,
    set_format,
)

__all__ = [
    # Version
    '__version__',

    # Modules
    'matrix',

    # Core class
    'Matrix',
    'new',

    # Errors
    'AlgebraError',
    'InvalidDimensionsError',
    'DimensionMismatchError',
    'NegativeIndexError',
    'IndexOutOfRangeError',

    # Configuration
    'LockGranularity',
    'LockConfig',
    'FormatConfig',
    'config',
    'get_config',
    'set_lock_granularity',
    'get_lock_granularity',
    'set_format',
]

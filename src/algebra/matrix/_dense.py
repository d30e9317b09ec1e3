"""
Matrix - Thread-safe dense 2-D matrix.

Storage is a single contiguous float64 buffer in row-major order:
element ``(i, j)`` lives at ``data[i * cols + j]`` and the buffer always
holds exactly ``rows * cols`` values. Every matrix owns its buffer;
``clone()``, ``transpose()`` and the factory methods always copy.

Concurrency:
    Each matrix carries one reader/writer lock guarding its buffer.
    ``get`` reads one element under the shared lock and ``set`` writes
    one element under the exclusive lock. ``rows`` and ``cols`` never
    change after construction and are read without locking.

    With the default ``LockGranularity.ELEMENT`` the compound operations
    (``each``, ``add``, ``sub``, ``addn``, ``scale``) are sequences of
    independent per-cell read and write sections. They are NOT atomic:
    a concurrent writer can slip in between the read and the write of a
    cell and that write is lost. With ``LockGranularity.OPERATION`` the
    same operations hold the write lock for the whole pass.

    Apart from ``each`` callbacks, no lock is held while another one is
    acquired: operands of binary operations are read under their own
    lock before the receiver's lock is taken. Under OPERATION
    granularity ``each`` runs its callback inside the receiver's write
    section, so the callback must not touch other shared matrices
    (snapshot them with ``to_numpy()`` first).

Typical usage:
    >>> m = Matrix(2, 3)
    >>> m.each(lambda i, j, v: i * 3 + j)
    >>> t = m.T
    >>> t.addn(1.0)
    >>> print(t)
"""

from __future__ import annotations

import logging
import operator
from typing import Callable, List, Sequence, Tuple

import numpy as np

from ._config import get_config
from ._errors import (
    ALGEBRA_OK,
    ALGEBRA_ERROR_INVALID_DIMENSIONS,
    ALGEBRA_ERROR_DIMENSION_MISMATCH,
    ALGEBRA_ERROR_NEGATIVE_INDEX,
    ALGEBRA_ERROR_INDEX_OUT_OF_RANGE,
    check_error,
)
from ._lock import NullLock, RWLock

__all__ = ['Matrix', 'new']

logger = logging.getLogger("algebra.matrix")

#: Signature of the callback accepted by ``Matrix.each``.
ElementFunc = Callable[[int, int, float], float]


def _check_dimensions(rows: int, cols: int) -> int:
    if rows < 0 or cols < 0:
        return ALGEBRA_ERROR_INVALID_DIMENSIONS
    return ALGEBRA_OK


def _is_sequence(value) -> bool:
    """True for nested containers; strings and 0-d arrays count as scalars."""
    if isinstance(value, (str, bytes)):
        return False
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return hasattr(value, "__len__")


class Matrix:
    """
    Dense 2-D float64 matrix with per-instance reader/writer locking.

    Attributes:
        rows (int): Number of rows
        cols (int): Number of columns
        is_shared (bool): False when built on the unshared path

    Example:
        >>> a = Matrix.from_list([[1, 2], [3, 4]])
        >>> b = Matrix.from_list([[5, 6], [7, 8]])
        >>> a.dot(b)
        70.0
    """

    __slots__ = ("_rows", "_cols", "_data", "_lock")

    def __init__(self, rows: int, cols: int, shared: bool = True):
        """
        Allocate a zero-filled matrix.

        Args:
            rows: Number of rows (>= 0)
            cols: Number of columns (>= 0)
            shared: When False the matrix skips locking entirely. Use it
                only for matrices confined to a single thread.

        Raises:
            InvalidDimensionsError: If rows or cols is negative
            TypeError: If rows or cols is not an integer
        """
        rows = operator.index(rows)
        cols = operator.index(cols)
        code = _check_dimensions(rows, cols)
        if code != ALGEBRA_OK:
            check_error(code, f"{rows}x{cols} must not be negative")

        self._rows = rows
        self._cols = cols
        self._data = np.zeros(rows * cols, dtype=np.float64)
        self._lock = RWLock() if shared else NullLock()
        logger.debug("Allocated %dx%d matrix (shared=%s)", rows, cols, shared)

    @classmethod
    def _from_buffer(cls, rows: int, cols: int, data: np.ndarray, shared: bool) -> "Matrix":
        """Internal: adopt ``data`` (already validated and owned) as storage."""
        m = cls.__new__(cls)
        m._rows = rows
        m._cols = cols
        m._data = data
        m._lock = RWLock() if shared else NullLock()
        return m

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def zeros(cls, rows: int, cols: int, shared: bool = True) -> "Matrix":
        """Create zero-filled matrix."""
        return cls(rows, cols, shared=shared)

    @classmethod
    def from_list(cls, values: Sequence[Sequence[float]], shared: bool = True) -> "Matrix":
        """
        Create matrix from nested Python sequences (one per row).

        Raises:
            InvalidDimensionsError: If the input is not a 2-D grid (a row
                is a scalar, a cell is a sequence, or rows differ in length)
        """
        nrows = len(values)
        for k, row in enumerate(values):
            if not _is_sequence(row):
                check_error(
                    ALGEBRA_ERROR_INVALID_DIMENSIONS,
                    f"row {k} is not a sequence, expected 2-D data",
                )
        ncols = len(values[0]) if nrows else 0
        for k, row in enumerate(values):
            if len(row) != ncols:
                check_error(
                    ALGEBRA_ERROR_INVALID_DIMENSIONS,
                    f"row {k} has {len(row)} values, expected {ncols}",
                )
            for j, cell in enumerate(row):
                if _is_sequence(cell):
                    check_error(
                        ALGEBRA_ERROR_INVALID_DIMENSIONS,
                        f"cell ({k}, {j}) is a sequence, expected 2-D data",
                    )
        data = np.array(values, dtype=np.float64).reshape(nrows * ncols)
        return cls._from_buffer(nrows, ncols, data, shared)

    @classmethod
    def from_numpy(cls, array: np.ndarray, shared: bool = True) -> "Matrix":
        """
        Create matrix from a 2-D array-like. The data is always copied.

        Raises:
            InvalidDimensionsError: If the input is not 2-D
        """
        arr = np.asarray(array, dtype=np.float64)
        if arr.ndim != 2:
            check_error(ALGEBRA_ERROR_INVALID_DIMENSIONS, f"expected 2-D data, got {arr.ndim}-D")
        nrows, ncols = arr.shape
        data = np.array(arr, dtype=np.float64, order="C").reshape(nrows * ncols)
        logger.debug("Copied %dx%d array into matrix", nrows, ncols)
        return cls._from_buffer(nrows, ncols, data, shared)

    # =========================================================================
    # Properties
    # =========================================================================

    def dimensions(self) -> Tuple[int, int]:
        """Return ``(rows, cols)``."""
        return self._rows, self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def size(self) -> int:
        """Total number of elements."""
        return self._rows * self._cols

    @property
    def is_shared(self) -> bool:
        return self._lock.is_shared

    # =========================================================================
    # Validation
    # =========================================================================

    def _check_range(self, i: int, j: int) -> int:
        if i < 0 or j < 0:
            return ALGEBRA_ERROR_NEGATIVE_INDEX
        if i >= self._rows or j >= self._cols:
            return ALGEBRA_ERROR_INDEX_OUT_OF_RANGE
        return ALGEBRA_OK

    def _check_equal_dimensions(self, x: "Matrix") -> int:
        if self._rows != x._rows or self._cols != x._cols:
            return ALGEBRA_ERROR_DIMENSION_MISMATCH
        return ALGEBRA_OK

    def _validate_position(self, i: int, j: int) -> None:
        code = self._check_range(i, j)
        if code == ALGEBRA_ERROR_NEGATIVE_INDEX:
            check_error(code, f"position ({i}, {j}) must not be negative")
        elif code != ALGEBRA_OK:
            check_error(
                code,
                f"position ({i}, {j}) is out of the range "
                f"(0:{self._rows - 1}, 0:{self._cols - 1})",
            )

    def _validate_operand(self, x: "Matrix") -> None:
        if not isinstance(x, Matrix):
            raise TypeError(f"Expected Matrix operand, got {type(x).__name__}")
        code = self._check_equal_dimensions(x)
        if code != ALGEBRA_OK:
            check_error(
                code,
                f"{self._rows}x{self._cols} and {x._rows}x{x._cols} are not equal",
            )

    # =========================================================================
    # Locked Storage Access
    # =========================================================================

    def _load(self, k: int) -> float:
        """Read flat element ``k`` under the shared lock."""
        lock = self._lock
        lock.acquire_read()
        try:
            return float(self._data[k])
        finally:
            lock.release_read()

    def _store(self, k: int, v: float) -> None:
        """Write flat element ``k`` under the exclusive lock."""
        lock = self._lock
        lock.acquire_write()
        try:
            self._data[k] = v
        finally:
            lock.release_write()

    def _snapshot(self) -> np.ndarray:
        """Copy of the whole buffer taken in one read section."""
        with self._lock.read_locked():
            return self._data.copy()

    def _read_all(self) -> np.ndarray:
        """Buffer copy honouring the configured granularity."""
        if get_config().atomic_operations:
            return self._snapshot()
        out = np.empty(self.size, dtype=np.float64)
        for k in range(self.size):
            out[k] = self._load(k)
        return out

    # =========================================================================
    # Element Access
    # =========================================================================

    def get(self, i: int, j: int) -> float:
        """
        Get element at (i, j).

        Raises:
            NegativeIndexError: If i or j is negative
            IndexOutOfRangeError: If i >= rows or j >= cols
        """
        i = operator.index(i)
        j = operator.index(j)
        self._validate_position(i, j)
        return self._load(i * self._cols + j)

    def set(self, i: int, j: int, v: float) -> None:
        """
        Set element at (i, j).

        Raises:
            NegativeIndexError: If i or j is negative
            IndexOutOfRangeError: If i >= rows or j >= cols
        """
        i = operator.index(i)
        j = operator.index(j)
        v = float(v)
        self._validate_position(i, j)
        self._store(i * self._cols + j, v)

    def __getitem__(self, key) -> float:
        """Get element at (row, col)."""
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Index must be (row, col) tuple")
        return self.get(key[0], key[1])

    def __setitem__(self, key, value: float) -> None:
        """Set element at (row, col)."""
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Index must be (row, col) tuple")
        self.set(key[0], key[1], value)

    # =========================================================================
    # Bulk Transform
    # =========================================================================

    def each(self, f: ElementFunc) -> None:
        """
        Replace every element with ``f(i, j, value)``, in row-major order.

        Under element granularity each cell is read and written in two
        separate critical sections, so a concurrent ``set`` on the same
        cell may be overwritten.

        Under operation granularity ``f`` runs while this matrix's write
        lock is held. ``f`` may call ``get``/``set`` on this matrix, but
        must not touch another shared matrix: two threads doing
        ``a.each(<reads b>)`` and ``b.each(<reads a>)`` deadlock. Read
        other matrices through a ``to_numpy()`` snapshot taken before
        the call.
        """
        rows, cols = self._rows, self._cols
        if get_config().atomic_operations:
            with self._lock.write_locked():
                data = self._data
                for i in range(rows):
                    for j in range(cols):
                        k = i * cols + j
                        data[k] = float(f(i, j, float(data[k])))
            return
        for i in range(rows):
            for j in range(cols):
                k = i * cols + j
                self._store(k, float(f(i, j, self._load(k))))

    # =========================================================================
    # New Matrices
    # =========================================================================

    def transpose(self) -> "Matrix":
        """Return a new matrix with rows and columns swapped."""
        rows, cols = self._rows, self._cols
        src = self._read_all().reshape(rows, cols)
        data = np.ascontiguousarray(src.T).reshape(rows * cols)
        return Matrix._from_buffer(cols, rows, data, self.is_shared)

    @property
    def T(self) -> "Matrix":
        """Transposed copy (same as ``transpose()``)."""
        return self.transpose()

    def clone(self) -> "Matrix":
        """Return an independent copy with the same shape."""
        return Matrix._from_buffer(self._rows, self._cols, self._snapshot(), self.is_shared)

    def to_numpy(self) -> np.ndarray:
        """Return an independent ``(rows, cols)`` float64 array."""
        return self._snapshot().reshape(self._rows, self._cols)

    def tolist(self) -> List[List[float]]:
        return self.to_numpy().tolist()

    # =========================================================================
    # Dimension-matched Arithmetic
    # =========================================================================

    def add(self, x: "Matrix") -> None:
        """
        Add ``x`` elementwise, in place.

        Raises:
            DimensionMismatchError: If shapes differ (receiver untouched)
        """
        self._validate_operand(x)
        if get_config().atomic_operations:
            other = x._snapshot()
            with self._lock.write_locked():
                self._data += other
            return
        for k in range(self.size):
            self._store(k, self._load(k) + x._load(k))

    def sub(self, x: "Matrix") -> None:
        """
        Subtract ``x`` elementwise, in place.

        Raises:
            DimensionMismatchError: If shapes differ (receiver untouched)
        """
        self._validate_operand(x)
        if get_config().atomic_operations:
            other = x._snapshot()
            with self._lock.write_locked():
                self._data -= other
            return
        for k in range(self.size):
            self._store(k, self._load(k) - x._load(k))

    def dot(self, x: "Matrix") -> float:
        """
        Sum of elementwise products (Frobenius inner product).

        This is not matrix multiplication: both operands must have the
        same shape.

        Raises:
            DimensionMismatchError: If shapes differ
        """
        self._validate_operand(x)
        if get_config().atomic_operations:
            return float(np.dot(self._snapshot(), x._snapshot()))
        r = 0.0
        for k in range(self.size):
            r += self._load(k) * x._load(k)
        return r

    # =========================================================================
    # Scalar Operations
    # =========================================================================

    def addn(self, n: float) -> None:
        """Add ``n`` to every element, in place."""
        n = float(n)
        if get_config().atomic_operations:
            with self._lock.write_locked():
                self._data += n
            return
        for k in range(self.size):
            self._store(k, self._load(k) + n)

    def scale(self, n: float) -> None:
        """Multiply every element by ``n``, in place."""
        n = float(n)
        if get_config().atomic_operations:
            with self._lock.write_locked():
                self._data *= n
            return
        for k in range(self.size):
            self._store(k, self._load(k) * n)

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __str__(self) -> str:
        spec = get_config().format.spec
        values = self._read_all()
        cols = self._cols
        lines = []
        for i in range(self._rows):
            row = values[i * cols:(i + 1) * cols]
            lines.append("".join(format(float(v), spec) for v in row) + "\n")
        return "".join(lines)

    def __repr__(self) -> str:
        mode = "shared" if self.is_shared else "unshared"
        return f"<Matrix {self._rows}x{self._cols} [{mode}]>"


def new(rows: int, cols: int, shared: bool = True) -> Matrix:
    """
    Create a zero-filled ``rows x cols`` matrix.

    Raises:
        InvalidDimensionsError: If rows or cols is negative
    """
    return Matrix(rows, cols, shared=shared)

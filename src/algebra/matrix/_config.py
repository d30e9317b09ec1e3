"""
Matrix Config - Locking and Rendering Configuration

Provides property-based configuration for matrix operations: how wide
the critical section of a compound operation is, and how matrices are
rendered as text. Settings can be changed globally or overridden for
the current thread inside a ``local()`` block.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger("algebra.config")

#: Environment variable selecting the initial lock granularity.
GRANULARITY_ENV = "ALGEBRA_LOCK_GRANULARITY"


# =============================================================================
# Strategy Enumerations
# =============================================================================

class LockGranularity(IntEnum):
    """
    Extent of one critical section in compound operations.
    """
    ELEMENT = 0        # One lock acquisition per element access
    OPERATION = 1      # One acquisition spanning the whole operation

    @classmethod
    def parse(cls, value: Union["LockGranularity", int, str]) -> "LockGranularity":
        """Accept an enum member, its integer value or its name (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(
                    f"Unknown lock granularity {value!r}. "
                    f"Supported: {[m.name.lower() for m in cls]}"
                ) from None
        return cls(value)


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class LockConfig:
    """Configuration for the locking discipline."""
    granularity: LockGranularity = LockGranularity.ELEMENT


@dataclass
class FormatConfig:
    """Configuration for text rendering."""
    width: int = 15                # Minimum field width per value
    precision: int = 3             # Digits after the decimal point

    def __post_init__(self):
        if self.width < 0 or self.precision < 0:
            raise ValueError(
                f"width and precision must be non-negative, "
                f"got width={self.width}, precision={self.precision}"
            )

    @property
    def spec(self) -> str:
        """Format spec for one value, e.g. ``'<15.3f'``."""
        return f"<{self.width}.{self.precision}f"


def _granularity_from_env() -> LockGranularity:
    raw = os.environ.get(GRANULARITY_ENV, "")
    if not raw:
        return LockGranularity.ELEMENT
    try:
        return LockGranularity.parse(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, using element granularity", GRANULARITY_ENV, raw)
        return LockGranularity.ELEMENT


# =============================================================================
# Global Configuration Manager
# =============================================================================

class AlgebraConfig:
    """
    Global configuration manager for matrices.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        algebra.config.locking = LockConfig(LockGranularity.OPERATION)

        # Local configuration (context manager)
        with algebra.config.local(format=FormatConfig(width=8, precision=1)):
            print(m)
        # Back to global config
    """

    _SECTIONS = ("locking", "format")

    def __init__(self):
        self._global_locking = LockConfig(granularity=_granularity_from_env())
        self._global_format = FormatConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def locking(self) -> LockConfig:
        """Get locking configuration."""
        override = getattr(self._local, "locking", None)
        if override is not None:
            return override
        return self._global_locking

    @locking.setter
    def locking(self, value: LockConfig):
        """Set global locking configuration."""
        self._global_locking = value
        logger.debug("Lock granularity set to %s", value.granularity.name)

    @property
    def format(self) -> FormatConfig:
        """Get rendering configuration."""
        override = getattr(self._local, "format", None)
        if override is not None:
            return override
        return self._global_format

    @format.setter
    def format(self, value: FormatConfig):
        """Set global rendering configuration."""
        self._global_format = value
        logger.debug("Render format set to %r", value.spec)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def granularity(self) -> LockGranularity:
        """Effective lock granularity for the calling thread."""
        return self.locking.granularity

    @property
    def atomic_operations(self) -> bool:
        """Whether compound operations run as one critical section."""
        return self.granularity is LockGranularity.OPERATION

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(
        self,
        locking: Optional[LockConfig] = None,
        format: Optional[FormatConfig] = None,
    ) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Overrides apply to the calling thread only and are restored
        when the block exits, including nested blocks.

        Args:
            locking: Locking override
            format: Rendering override

        Returns:
            Context manager
        """
        return _LocalConfigContext(self, locking=locking, format=format)

    def _swap_local(self, **kwargs) -> Dict[str, Any]:
        """Install thread-local overrides, returning the previous ones."""
        previous = {}
        for key, value in kwargs.items():
            previous[key] = getattr(self._local, key, None)
            setattr(self._local, key, value)
        return previous

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_locking = LockConfig(granularity=_granularity_from_env())
        self._global_format = FormatConfig()
        for key in self._SECTIONS:
            setattr(self._local, key, None)

    def to_dict(self) -> Dict[str, Any]:
        """Export effective configuration as dictionary."""
        return {
            "locking": {
                "granularity": self.locking.granularity.name,
            },
            "format": {
                "width": self.format.width,
                "precision": self.format.precision,
            },
        }

    def __repr__(self) -> str:
        return f"AlgebraConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: AlgebraConfig, **kwargs):
        self._config = config
        self._kwargs = {k: v for k, v in kwargs.items() if v is not None}
        # One entry per active __enter__ so a re-entered context unwinds in order.
        self._previous: List[Dict[str, Any]] = []

    def __enter__(self):
        self._previous.append(self._config._swap_local(**self._kwargs))
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._swap_local(**self._previous.pop())
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = AlgebraConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> AlgebraConfig:
    """Get the global configuration instance."""
    return config


def set_lock_granularity(granularity: Union[LockGranularity, int, str]) -> None:
    """
    Set the global lock granularity.

    Args:
        granularity: ``LockGranularity`` member, or 'element' / 'operation'

    Example:
        >>> algebra.set_lock_granularity('operation')
    """
    config.locking = LockConfig(granularity=LockGranularity.parse(granularity))


def get_lock_granularity() -> LockGranularity:
    """Get the lock granularity in effect for the calling thread."""
    return config.granularity


def set_format(width: int = 15, precision: int = 3) -> None:
    """Configure text rendering globally."""
    config.format = FormatConfig(width=width, precision=precision)


__all__ = [
    "GRANULARITY_ENV",
    "LockGranularity",
    "LockConfig",
    "FormatConfig",
    "AlgebraConfig",
    "config",
    "get_config",
    "set_lock_granularity",
    "get_lock_granularity",
    "set_format",
]

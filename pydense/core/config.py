"""
Global configuration for PyDense.

Provides:
    - Runtime borrow checking switch (aliasing discipline of views)
    - Environment override read once at import
    - Scoped override via a context manager

Environment:
    PYDENSE_BORROW_CHECK: '0', 'false', 'no' or 'off' disables borrow
    checking for the whole process. Any other value (or unset) enables it.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

ENV_BORROW_CHECK = "PYDENSE_BORROW_CHECK"

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_VALUES


class _Config:
    """
    Global configuration singleton.

    Holds process-wide switches. Read by the matrix layer on every view
    creation and write, so reads must stay cheap.
    """

    def __init__(self):
        self._borrow_checking = _env_flag(ENV_BORROW_CHECK, True)

    @property
    def borrow_checking(self) -> bool:
        """Whether view creation and writes validate the aliasing discipline."""
        return self._borrow_checking

    @borrow_checking.setter
    def borrow_checking(self, value: bool):
        self._borrow_checking = bool(value)

    def __repr__(self) -> str:
        return f"_Config(borrow_checking={self._borrow_checking})"


# Global config instance
_config = _Config()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get global configuration instance."""
    return _config


def set_borrow_checking(enabled: bool) -> None:
    """
    Enable or disable runtime borrow checking.

    With checking disabled the aliasing rule becomes a caller contract:
    writing through one handle while another live handle reads an
    overlapping region gives unspecified results.
    """
    _config.borrow_checking = enabled


def get_borrow_checking() -> bool:
    """Get current borrow checking setting."""
    return _config.borrow_checking


@contextmanager
def borrow_checking(enabled: bool) -> Iterator[None]:
    """
    Temporarily override borrow checking.

    Usage:
        with borrow_checking(False):
            a += a.transpose()
    """
    previous = _config.borrow_checking
    _config.borrow_checking = enabled
    try:
        yield
    finally:
        _config.borrow_checking = previous


__all__ = [
    "ENV_BORROW_CHECK",
    "get_config",
    "set_borrow_checking",
    "get_borrow_checking",
    "borrow_checking",
]

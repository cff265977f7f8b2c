"""Shared utilities for plaguedna."""

from .rng_manager import RNGManager
from .validation import ValidationError

__all__ = [
    'RNGManager',
    'ValidationError',
]

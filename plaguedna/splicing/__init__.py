"""Splice transactions for plaguedna."""

from .transaction import SpliceBuffer, SpliceTransaction  # noqa: F401

__all__ = [
    'SpliceBuffer',
    'SpliceTransaction',
]

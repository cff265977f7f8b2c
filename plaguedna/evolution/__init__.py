"""Trait mutation for plaguedna."""

from .mutation_graph import ANTAGONISTS, EditOutcome, apply_edit, coerce_direction

__all__ = [
    'ANTAGONISTS',
    'EditOutcome',
    'apply_edit',
    'coerce_direction',
]

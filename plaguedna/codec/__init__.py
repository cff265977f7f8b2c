"""Fixed-section trait codec and variable-section token stream."""

from .tokens import (  # noqa: F401
    SEPARATOR,
    assemble,
    commit,
    extract_completed_effect_groups,
    is_coherent,
    tokenize,
)
from .traits import TRAIT_ORDER, Trait, TraitSet, decode, decode_into, encode  # noqa: F401

__all__ = [
    'SEPARATOR',
    'tokenize',
    'assemble',
    'commit',
    'is_coherent',
    'extract_completed_effect_groups',
    'Trait',
    'TRAIT_ORDER',
    'TraitSet',
    'encode',
    'decode',
    'decode_into',
]

"""Capability registry and round-scoped identifier allocation."""

from .allocator import IdentifierAllocator
from .registry import (
    UNLIMITED_CAPACITY,
    BodyType,
    Capability,
    CapabilityKind,
    Registry,
)

__all__ = [
    'IdentifierAllocator',
    'UNLIMITED_CAPACITY',
    'BodyType',
    'Capability',
    'CapabilityKind',
    'Registry',
]

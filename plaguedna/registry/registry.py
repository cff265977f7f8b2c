"""In-memory capability and body-type registry.

Holds the identifier↔capability maps for each kind, the body-type table and
the round counter. Identifier maps are rebuilt by :meth:`Registry.begin_round`
through the :class:`IdentifierAllocator`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Sequence

from plaguedna.registry.allocator import IdentifierAllocator
from plaguedna.utils.rng_manager import RNGManager
from plaguedna.utils.validation import ValidationError

UNLIMITED_CAPACITY = -1
MAX_BODY_TYPE_ID = 0x7FFF


class CapabilityKind(Enum):
    SUPPRESSANT = "suppressant"
    CARRIER = "carrier"
    EFFECT = "effect"


@dataclass(frozen=True)
class Capability:
    """A suppressant, carrier or effect type.

    Attributes:
        name: Unique name within its kind
        kind: Namespace the capability belongs to
        rarity: Tier 1..5 for effects; always 1 for the other kinds
    """

    name: str
    kind: CapabilityKind
    rarity: int = 1

    @property
    def weight(self) -> int:
        return self.rarity if self.kind is CapabilityKind.EFFECT else 0


@dataclass(frozen=True)
class BodyType:
    name: str
    body_type_id: int
    capacity: int = UNLIMITED_CAPACITY

    @property
    def is_unlimited(self) -> bool:
        return self.capacity == UNLIMITED_CAPACITY

    def fits(self, weight: int) -> bool:
        return self.is_unlimited or weight <= self.capacity


def default_name(suppressant: Optional[Capability], carriers: Sequence[Capability],
                 effects: Sequence[Capability]) -> str:
    """Name after the rarest effect and the suppressant, e.g. ``"Coughing Fever"``."""
    parts: list[str] = []
    if effects:
        rarest = max(effects, key=lambda e: e.rarity)
        parts.append(rarest.name.title())
    if suppressant is not None:
        parts.append(suppressant.name.title())
    return " ".join(parts)


class Registry:
    """Bidirectional identifier tables for one game session."""

    def __init__(self, allocator: IdentifierAllocator | None = None,
                 name_deriver: Callable[..., str] | None = None,
                 config: Optional[dict] = None) -> None:
        config = config or {}
        if allocator is None:
            allocator = IdentifierAllocator(
                chunk_width=int(config.get('chunk_width', 3)),
                max_tier=int(config.get('max_tier', 5)),
            )
        self.allocator = allocator
        self.name_deriver = name_deriver or default_name
        self.round_id = 0
        self._capabilities: dict[CapabilityKind, list[Capability]] = {k: [] for k in CapabilityKind}
        self._by_identifier: dict[CapabilityKind, dict[str, Capability]] = {k: {} for k in CapabilityKind}
        self._identifier_of: dict[Capability, str] = {}
        self._body_types: dict[int, BodyType] = {}

    # ---------- registration ----------

    def register(self, capability: Capability) -> Capability:
        if capability.kind is CapabilityKind.EFFECT:
            max_tier = self.allocator.max_tier
            if not 1 <= capability.rarity <= max_tier:
                raise ValidationError(
                    "invalid_tier",
                    f"Effect rarity must be between 1 and {max_tier}",
                    capability=capability.name,
                    rarity=capability.rarity,
                )
        elif capability.rarity != 1:
            raise ValidationError(
                "invalid_tier",
                "Only effects carry a rarity tier",
                capability=capability.name,
                kind=capability.kind.value,
            )
        existing = {c.name for c in self._capabilities[capability.kind]}
        if capability.name in existing:
            raise ValidationError(
                "duplicate_capability",
                f"{capability.kind.value} {capability.name} already registered",
                capability=capability.name,
            )
        self._capabilities[capability.kind].append(capability)
        return capability

    def register_many(self, capabilities: Iterable[Capability]) -> None:
        for capability in capabilities:
            self.register(capability)

    def register_body_type(self, body_type: BodyType) -> BodyType:
        if not 0 <= body_type.body_type_id <= MAX_BODY_TYPE_ID:
            raise ValidationError(
                "invalid_body_type_id",
                "Body type identifier does not fit the fixed field",
                body_type=body_type.name,
                body_type_id=body_type.body_type_id,
            )
        if body_type.body_type_id in self._body_types:
            raise ValidationError(
                "duplicate_body_type",
                f"Body type id {body_type.body_type_id} already registered",
                body_type=body_type.name,
            )
        self._body_types[body_type.body_type_id] = body_type
        return body_type

    def capabilities(self, kind: CapabilityKind) -> list[Capability]:
        return list(self._capabilities[kind])

    # ---------- round lifecycle ----------

    def _clear_identifiers(self) -> None:
        for table in self._by_identifier.values():
            table.clear()
        self._identifier_of.clear()

    def begin_round(self, rng_manager: RNGManager) -> int:
        """Start a new round: reset the allocator and reassign every identifier."""
        self.round_id += 1
        self.allocator.reset()
        self._clear_identifiers()
        for kind in CapabilityKind:
            rng = rng_manager.get_rng_for_allocation(kind, self.round_id)
            demand = [(c, c.rarity) for c in self._capabilities[kind]]
            assigned = self.allocator.allocate(kind, demand, rng)
            for capability, identifier in assigned.items():
                self.bind(capability, identifier)
        logging.info(
            "Round %d identifiers assigned: %s",
            self.round_id,
            {k.value: len(self._by_identifier[k]) for k in CapabilityKind},
        )
        return self.round_id

    def bind(self, capability: Capability, identifier: str) -> None:
        """Bind ``identifier`` to ``capability`` for the current round."""
        if capability not in self._capabilities[capability.kind]:
            self.register(capability)
        table = self._by_identifier[capability.kind]
        owner = table.get(identifier)
        if owner is not None and owner != capability:
            raise ValidationError(
                "duplicate_identifier",
                f"Identifier {identifier} already bound in {capability.kind.value}",
                identifier=identifier,
                owner=owner.name,
            )
        previous = self._identifier_of.get(capability)
        if previous is not None and previous != identifier:
            table.pop(previous, None)
        table[identifier] = capability
        self._identifier_of[capability] = identifier

    # ---------- lookups ----------

    def lookup(self, kind: CapabilityKind, identifier: str) -> Optional[Capability]:
        return self._by_identifier[kind].get(identifier)

    def identifier_for(self, capability: Capability) -> Optional[str]:
        return self._identifier_of.get(capability)

    def body_type_for(self, body_type_id: int) -> Optional[BodyType]:
        return self._body_types.get(body_type_id)

    def derive_name(self, suppressant: Optional[Capability], carriers: Sequence[Capability],
                    effects: Sequence[Capability]) -> str:
        return self.name_deriver(suppressant, carriers, effects)

    def snapshot(self) -> dict[str, Any]:
        """Plain view of the current identifier tables (for reports and tests)."""
        return {
            "round_id": self.round_id,
            "identifiers": {
                kind.value: {ident: cap.name for ident, cap in sorted(table.items())}
                for kind, table in self._by_identifier.items()
            },
        }


__all__ = [
    "UNLIMITED_CAPACITY",
    "CapabilityKind",
    "Capability",
    "BodyType",
    "Registry",
    "default_name",
]

"""DNA string model: derived fixed section plus editable variable section."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from plaguedna.codec.tokens import SEPARATOR
from plaguedna.codec.traits import encode


def encode_capabilities(entity: Any, registry: Any, separator: str = SEPARATOR) -> str:
    """Write the entity's current capabilities as a variable section.

    Returns ``""`` when the entity has no suppressant or any capability has no
    identifier in the current round.
    """
    if entity.suppressant is None:
        return ""
    suppressant_id = registry.identifier_for(entity.suppressant)
    carrier_ids = [registry.identifier_for(c) for c in entity.carriers]
    effect_ids = [registry.identifier_for(e) for e in entity.effects]
    if suppressant_id is None or None in carrier_ids or None in effect_ids:
        return ""
    return suppressant_id + separator + "".join(carrier_ids) + separator + separator.join(effect_ids)


@dataclass
class DNA:
    """The two halves of the DNA string and the validity flag.

    ``fixed`` is regenerated from traits and never edited directly;
    ``variable`` is what the player splices.
    """

    fixed: str = ""
    variable: str = ""
    valid: bool = False

    @classmethod
    def empty(cls) -> "DNA":
        return cls()

    @classmethod
    def from_entity(cls, entity: Any, registry: Any, separator: str = SEPARATOR) -> "DNA":
        return cls(
            fixed=encode(entity.trait_set()),
            variable=encode_capabilities(entity, registry, separator),
            valid=False,
        )

    @property
    def full(self) -> str:
        return self.fixed + self.variable

    def set_variable(self, text: str) -> None:
        self.variable = text
        self.valid = False

    def refresh_fixed(self, entity: Any) -> str:
        self.fixed = encode(entity.trait_set())
        return self.fixed


__all__ = ["DNA", "encode_capabilities"]

"""Trait codec for the fixed DNA section.

Layout (26 characters)::

    BODYTYPE(4 hex) T1(4 hex) T2(4 hex) T3(4 hex) T4(4 hex) T5(4 hex) STAGES(1) SYMPTOMATIC(1)

Every 4-hex field is a 16-bit two's-complement integer written in uppercase:
``value & 0xFFFF``. The representable range is -32768..32767; anything outside
raises ``ValueError`` instead of wrapping, which keeps the mapping bijective.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

FIELD_WIDTH = 4
FIELD_MIN = -0x8000
FIELD_MAX = 0x7FFF
FIXED_LENGTH = FIELD_WIDTH * 6 + 2

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class Trait(Enum):
    """The five mutable numeric traits, in encoding order (T1..T5)."""

    INFECTIVITY = "infectivity"
    MUTATION_SPEED = "mutation_speed"
    PROGRESSION = "progression"
    LETHALITY = "lethality"
    RESISTANCE = "resistance"


TRAIT_ORDER: tuple[Trait, ...] = (
    Trait.INFECTIVITY,
    Trait.MUTATION_SPEED,
    Trait.PROGRESSION,
    Trait.LETHALITY,
    Trait.RESISTANCE,
)


@dataclass
class TraitSet:
    """Numeric state carried by the fixed section."""

    infectivity: float = 0
    mutation_speed: float = 0
    progression: float = 0
    lethality: float = 0
    resistance: float = 0
    stages: int = 0
    symptomatic: bool = False
    body_type_id: int = 0

    def get(self, trait: Trait) -> float:
        return getattr(self, trait.value)

    def set(self, trait: Trait, value: float) -> None:
        setattr(self, trait.value, value)

    def as_tuple(self) -> tuple:
        return tuple(self.get(t) for t in TRAIT_ORDER) + (
            self.stages, bool(self.symptomatic), self.body_type_id
        )


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def encode_field(value: float) -> str:
    """Encode one number as a 4-hex-digit two's-complement field."""
    number = _round_half_away(value)
    if number < FIELD_MIN or number > FIELD_MAX:
        raise ValueError(f"Value {value!r} outside 16-bit signed range")
    return f"{number & 0xFFFF:04X}"


def decode_field(text: str) -> int:
    if len(text) != FIELD_WIDTH or not set(text) <= _HEX_DIGITS:
        raise ValueError(f"Invalid hex field: {text!r}")
    raw = int(text, 16)
    return raw - 0x10000 if raw & 0x8000 else raw


def encode(traits: TraitSet) -> str:
    """Produce the fixed section for a trait set."""
    stages = int(traits.stages)
    if stages < 0 or stages > 9:
        raise ValueError(f"Stage count {stages} does not fit one decimal digit")
    parts = [encode_field(traits.body_type_id)]
    parts.extend(encode_field(traits.get(t)) for t in TRAIT_ORDER)
    parts.append(str(stages))
    parts.append("1" if traits.symptomatic else "0")
    return "".join(parts)


def decode(fixed: str) -> TraitSet:
    """Exact inverse of :func:`encode`."""
    if len(fixed) != FIXED_LENGTH:
        raise ValueError(f"Fixed section must be {FIXED_LENGTH} characters, got {len(fixed)}")
    fields = [fixed[i:i + FIELD_WIDTH] for i in range(0, FIELD_WIDTH * 6, FIELD_WIDTH)]
    stages_char = fixed[-2]
    symptomatic_char = fixed[-1]
    if stages_char not in "0123456789":
        raise ValueError(f"Invalid stage digit: {stages_char!r}")
    if symptomatic_char not in ("0", "1"):
        raise ValueError(f"Invalid symptomatic flag: {symptomatic_char!r}")

    values = [decode_field(f) for f in fields]
    traits = TraitSet(
        stages=int(stages_char),
        symptomatic=symptomatic_char == "1",
        body_type_id=values[0],
    )
    for trait, value in zip(TRAIT_ORDER, values[1:]):
        traits.set(trait, value)
    return traits


def decode_into(fixed: str, entity: Any, registry: Any) -> TraitSet:
    """Decode ``fixed`` onto ``entity``, resolving the body type via ``registry``.

    An unknown body-type identifier leaves the entity's body type untouched.
    """
    decoded = decode(fixed)
    for trait in TRAIT_ORDER:
        entity.traits.set(trait, decoded.get(trait))
    entity.traits.stages = decoded.stages
    entity.traits.symptomatic = decoded.symptomatic

    body_type = registry.body_type_for(decoded.body_type_id) if registry is not None else None
    if body_type is not None:
        entity.body_type = body_type
        entity.traits.body_type_id = body_type.body_type_id
    else:
        logging.debug("Body type %04X not registered; keeping previous body type", decoded.body_type_id & 0xFFFF)
    return decoded


__all__ = [
    "Trait",
    "TRAIT_ORDER",
    "TraitSet",
    "FIXED_LENGTH",
    "FIELD_MIN",
    "FIELD_MAX",
    "encode_field",
    "decode_field",
    "encode",
    "decode",
    "decode_into",
]

"""Coupled trait edits.

Each trait has exactly two antagonists; the graph is the cycle
infectivity - progression - lethality - mutation_speed - resistance - infectivity.
Raising a trait may lower its antagonists by 0 or 1 each, and vice versa.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Optional

from plaguedna.codec.traits import FIELD_MAX, FIELD_MIN, TRAIT_ORDER, Trait, encode
from plaguedna.utils.rng_manager import RNGManager

ANTAGONIST_PAIRS: tuple[tuple[Trait, Trait], ...] = (
    (Trait.INFECTIVITY, Trait.PROGRESSION),
    (Trait.INFECTIVITY, Trait.RESISTANCE),
    (Trait.RESISTANCE, Trait.MUTATION_SPEED),
    (Trait.MUTATION_SPEED, Trait.LETHALITY),
    (Trait.LETHALITY, Trait.PROGRESSION),
)


def _build_adjacency() -> dict[Trait, tuple[Trait, ...]]:
    adjacency: dict[Trait, list[Trait]] = {t: [] for t in Trait}
    for a, b in ANTAGONIST_PAIRS:
        adjacency[a].append(b)
        adjacency[b].append(a)
    return {t: tuple(v) for t, v in adjacency.items()}


ANTAGONISTS: dict[Trait, tuple[Trait, ...]] = _build_adjacency()


class EditOutcome(Enum):
    APPLIED = "applied"
    RANDOM_MUTATION_TRIGGERED = "random_mutation_triggered"
    OBJECT_GONE = "object_gone"


def coerce_direction(direction: float) -> int:
    return 1 if direction > 0 else -1


def apply_edit(entity: Optional[Any], trait: Trait, direction: float, rng_manager: RNGManager,
               config: Optional[dict] = None) -> EditOutcome:
    """Apply one directed edit to ``trait`` and its antagonists.

    Behavior:
    - ``direction`` is coerced to +1 or -1 (zero counts as -1).
    - With probability ``random_mutation_probability`` the edit is replaced by
      the entity's random mutation strategy.
    - Otherwise the target moves by ``primary_step_range`` steps in
      ``direction`` and each antagonist moves by ``antagonist_step_range``
      steps against it.
    - Traits are clamped to the 16-bit field range and mutation speed to
      ``min_mutation_speed``; the fixed DNA section is re-encoded on both
      branches. If encoding still fails the traits are restored, the counter
      is left alone and the ``ValueError`` propagates.

    Returns ``EditOutcome.OBJECT_GONE`` when no entity is given.
    """
    if entity is None:
        return EditOutcome.OBJECT_GONE

    config = config or {}
    sign = coerce_direction(direction)
    rng = rng_manager.get_rng_for_mutation(entity.entity_id)
    before = replace(entity.traits)
    traits = entity.traits

    if rng.random() < float(config.get('random_mutation_probability', 0.04)):
        logging.info("Edit on %s replaced by random mutation", trait.value)
        entity.trigger_random_mutation(rng)
        outcome = EditOutcome.RANDOM_MUTATION_TRIGGERED
    else:
        lo, hi = config.get('primary_step_range', (1, 3))
        traits.set(trait, traits.get(trait) + rng.randint(int(lo), int(hi)) * sign)
        lo, hi = config.get('antagonist_step_range', (0, 1))
        for antagonist in ANTAGONISTS[trait]:
            traits.set(antagonist, traits.get(antagonist) - rng.randint(int(lo), int(hi)) * sign)
        outcome = EditOutcome.APPLIED

    # entity.traits may have been replaced by the random mutation strategy
    traits = entity.traits
    for t in TRAIT_ORDER:
        traits.set(t, min(max(traits.get(t), FIELD_MIN), FIELD_MAX))
    floor = config.get('min_mutation_speed', 0)
    if traits.mutation_speed < floor:
        traits.mutation_speed = floor

    try:
        fixed = encode(entity.trait_set())
    except ValueError:
        entity.traits = before
        raise
    entity.mutations_this_round += 1
    entity.dna.fixed = fixed
    return outcome


__all__ = [
    "ANTAGONIST_PAIRS",
    "ANTAGONISTS",
    "EditOutcome",
    "coerce_direction",
    "apply_edit",
]

"""Pathogen entity: traits, capabilities and its DNA."""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from plaguedna.codec.traits import TRAIT_ORDER, TraitSet
from plaguedna.entity.dna import DNA
from plaguedna.registry.registry import BodyType, Capability


def default_random_mutation(entity: "Pathogen", rng: random.Random) -> None:
    """Nudge one random trait by up to three points either way."""
    trait = rng.choice(TRAIT_ORDER)
    entity.traits.set(trait, entity.traits.get(trait) + rng.choice((-3, -2, -1, 1, 2, 3)))


@dataclass(eq=False)
class Pathogen:
    """Entity whose state the DNA describes.

    Attributes:
        traits: Numeric traits, stage count and symptomatic flag
        body_type: Current body type (capacity cap for effects)
        suppressant: Resolved suppressant, ``None`` when cleared
        carriers: Resolved carriers in DNA order
        effects: Resolved effects in DNA order, without duplicates
        name: Name derived from capabilities by the registry
        mutations_this_round: Edits applied since the current round began
        round_id: Round the mutation counter belongs to
        random_mutation: Strategy used when an edit turns into a random mutation
    """

    traits: TraitSet = field(default_factory=TraitSet)
    body_type: Optional[BodyType] = None
    suppressant: Optional[Capability] = None
    carriers: tuple[Capability, ...] = ()
    effects: tuple[Capability, ...] = ()
    name: str = ""
    description: str = ""
    mutations_this_round: int = 0
    round_id: int = 0
    entity_id: uuid.UUID = field(default_factory=uuid.uuid4)
    random_mutation: Callable[["Pathogen", random.Random], None] = default_random_mutation
    dna: DNA = field(default_factory=DNA.empty)

    def trait_set(self) -> TraitSet:
        """Traits with the body-type field taken from the current body type."""
        if self.body_type is None:
            return replace(self.traits)
        return replace(self.traits, body_type_id=self.body_type.body_type_id)

    def capability_weight(self) -> int:
        return sum(e.weight for e in self.effects)

    def clear_capabilities(self) -> None:
        self.suppressant = None
        self.carriers = ()
        self.effects = ()
        self.name = ""

    def trigger_random_mutation(self, rng: random.Random) -> None:
        self.random_mutation(self, rng)

    def refresh_round(self, round_id: int) -> None:
        if round_id != self.round_id:
            self.round_id = round_id
            self.mutations_this_round = 0


__all__ = ["Pathogen", "default_random_mutation"]

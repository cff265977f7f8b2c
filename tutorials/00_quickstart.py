"""
Quickstart Tutorial

Goals:
- Register capabilities and start a round (identifiers are assigned)
- Encode a pathogen's DNA and validate it
- Splice two tier-1 effects into a tier-2 effect
- Apply a coupled trait edit and watch the fixed section change
"""

from plaguedna.codec.traits import Trait, TraitSet
from plaguedna.config import PRESET_DETERMINISTIC
from plaguedna.entity.dna import DNA
from plaguedna.entity.pathogen import Pathogen
from plaguedna.evolution.mutation_graph import apply_edit
from plaguedna.registry.registry import BodyType, Capability, CapabilityKind, Registry
from plaguedna.splicing.transaction import SpliceTransaction
from plaguedna.utils.rng_manager import RNGManager
from plaguedna.validation.validator import validate


def main():
    rng = RNGManager(seed=42)

    registry = Registry(config=PRESET_DETERMINISTIC)
    registry.register_many([
        Capability("fever", CapabilityKind.SUPPRESSANT),
        Capability("air", CapabilityKind.CARRIER),
        Capability("sweating", CapabilityKind.EFFECT, 1),
        Capability("farting", CapabilityKind.EFFECT, 1),
        Capability("coughing", CapabilityKind.EFFECT, 2),
    ])
    lungs = registry.register_body_type(BodyType("lungs", 1, capacity=5))
    registry.begin_round(rng)
    print("identifiers:", registry.snapshot()["identifiers"])

    pathogen = Pathogen(
        traits=TraitSet(infectivity=19, mutation_speed=6, progression=5, lethality=7,
                        resistance=5, stages=5, symptomatic=True),
        body_type=lungs,
        suppressant=registry.capabilities(CapabilityKind.SUPPRESSANT)[0],
        effects=tuple(registry.capabilities(CapabilityKind.EFFECT)[:2]),
    )
    pathogen.dna = DNA.from_entity(pathogen, registry)
    result = validate(pathogen.dna, pathogen, registry)
    print("dna:", pathogen.dna.full, "valid:", result.ok, "name:", pathogen.name)

    # Remove the separator between the two tier-1 effects
    tx = SpliceTransaction(pathogen.dna, pathogen, registry)
    tx.begin()
    tx.buffer.remove(len(tx.buffer.tokens) - 2)
    result = tx.commit()
    print("spliced:", pathogen.dna.variable, "->", result.ok, result.error,
          [e.name for e in pathogen.effects])

    outcome = apply_edit(pathogen, Trait.INFECTIVITY, +1, rng, PRESET_DETERMINISTIC)
    print("edit:", outcome.value, "fixed:", pathogen.dna.fixed)


if __name__ == "__main__":
    main()

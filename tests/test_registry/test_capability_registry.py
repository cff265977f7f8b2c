import pytest

from plaguedna.codec.traits import TraitSet
from plaguedna.config import merge_config
from plaguedna.entity.dna import DNA
from plaguedna.entity.pathogen import Pathogen
from plaguedna.registry.registry import (
    UNLIMITED_CAPACITY,
    BodyType,
    Capability,
    CapabilityKind,
    Registry,
    default_name,
)
from plaguedna.utils.rng_manager import RNGManager
from plaguedna.utils.validation import ValidationError
from plaguedna.validation.validator import validate


def _populated_registry() -> Registry:
    registry = Registry()
    registry.register_many([
        Capability("fever", CapabilityKind.SUPPRESSANT),
        Capability("rash", CapabilityKind.SUPPRESSANT),
        Capability("air", CapabilityKind.CARRIER),
        Capability("rats", CapabilityKind.CARRIER),
        Capability("sweating", CapabilityKind.EFFECT, 1),
        Capability("farting", CapabilityKind.EFFECT, 1),
        Capability("coughing", CapabilityKind.EFFECT, 2),
        Capability("bleeding", CapabilityKind.EFFECT, 3),
    ])
    return registry


def test_begin_round_assigns_every_capability():
    registry = _populated_registry()
    round_id = registry.begin_round(RNGManager(seed=1))
    assert round_id == 1
    for kind in CapabilityKind:
        for capability in registry.capabilities(kind):
            identifier = registry.identifier_for(capability)
            assert identifier is not None
            assert len(identifier) == 3 * capability.rarity
            assert registry.lookup(kind, identifier) == capability


def test_effect_identifiers_compose_from_lower_tiers():
    registry = _populated_registry()
    registry.begin_round(RNGManager(seed=4))
    ident = registry.identifier_for(Capability("coughing", CapabilityKind.EFFECT, 2))
    assert registry.allocator.decompositions(CapabilityKind.EFFECT, ident)


def test_new_round_reassigns_and_drops_stale_identifiers():
    registry = _populated_registry()
    rng = RNGManager(seed=2)
    registry.begin_round(rng)
    before = registry.snapshot()
    registry.begin_round(rng)
    after = registry.snapshot()
    assert after["round_id"] == 2
    for kind in CapabilityKind:
        current = after["identifiers"][kind.value]
        assert len(current) == len(before["identifiers"][kind.value])
        for ident in before["identifiers"][kind.value]:
            if ident not in current:
                assert registry.lookup(kind, ident) is None


def test_same_seed_gives_same_round():
    a = _populated_registry()
    b = _populated_registry()
    a.begin_round(RNGManager(seed=9))
    b.begin_round(RNGManager(seed=9))
    assert a.snapshot() == b.snapshot()


def test_bind_rejects_identifier_collisions():
    registry = Registry()
    registry.bind(Capability("fever", CapabilityKind.SUPPRESSANT), "0C3")
    with pytest.raises(ValidationError) as info:
        registry.bind(Capability("rash", CapabilityKind.SUPPRESSANT), "0C3")
    assert info.value.error_type == "duplicate_identifier"
    # same identifier in a different namespace is fine
    registry.bind(Capability("air", CapabilityKind.CARRIER), "0C3")
    assert registry.lookup(CapabilityKind.CARRIER, "0C3").name == "air"


def test_rebind_moves_identifier():
    registry = Registry()
    fever = Capability("fever", CapabilityKind.SUPPRESSANT)
    registry.bind(fever, "0C3")
    registry.bind(fever, "0C4")
    assert registry.lookup(CapabilityKind.SUPPRESSANT, "0C3") is None
    assert registry.identifier_for(fever) == "0C4"


def test_registration_checks():
    registry = Registry()
    with pytest.raises(ValidationError):
        registry.register(Capability("plague", CapabilityKind.EFFECT, 6))
    with pytest.raises(ValidationError):
        registry.register(Capability("air", CapabilityKind.CARRIER, 2))
    registry.register(Capability("air", CapabilityKind.CARRIER))
    with pytest.raises(ValidationError):
        registry.register(Capability("air", CapabilityKind.CARRIER))
    with pytest.raises(ValidationError):
        registry.register_body_type(BodyType("giant", 0x8000))
    registry.register_body_type(BodyType("lungs", 1))
    with pytest.raises(ValidationError):
        registry.register_body_type(BodyType("liver", 1))


def test_body_type_capacity():
    assert BodyType("lungs", 1, capacity=3).fits(3)
    assert not BodyType("lungs", 1, capacity=3).fits(4)
    assert BodyType("blood", 2, capacity=UNLIMITED_CAPACITY).fits(10_000)


def test_default_name_uses_rarest_effect():
    fever = Capability("fever", CapabilityKind.SUPPRESSANT)
    effects = [
        Capability("sweating", CapabilityKind.EFFECT, 1),
        Capability("coughing", CapabilityKind.EFFECT, 2),
    ]
    assert default_name(fever, [], effects) == "Coughing Fever"
    assert default_name(fever, [], []) == "Fever"


def test_config_sizes_the_identifier_space():
    config = merge_config({'max_tier': 2, 'chunk_width': 2})
    registry = Registry(config=config)
    fever = registry.register(Capability("fever", CapabilityKind.SUPPRESSANT))
    air = registry.register(Capability("air", CapabilityKind.CARRIER))
    sweating = registry.register(Capability("sweating", CapabilityKind.EFFECT, 1))
    coughing = registry.register(Capability("coughing", CapabilityKind.EFFECT, 2))
    with pytest.raises(ValidationError) as excinfo:
        registry.register(Capability("bleeding", CapabilityKind.EFFECT, 3))
    assert excinfo.value.error_type == "invalid_tier"

    registry.begin_round(RNGManager(seed=6))
    assert len(registry.identifier_for(fever)) == 2
    assert len(registry.identifier_for(sweating)) == 2
    assert len(registry.identifier_for(coughing)) == 4

    entity = Pathogen(
        traits=TraitSet(infectivity=3, stages=1),
        body_type=BodyType("lungs", 1, capacity=UNLIMITED_CAPACITY),
        suppressant=fever,
        carriers=(air,),
        effects=(sweating, coughing),
    )
    entity.dna = DNA.from_entity(entity, registry)
    result = validate(entity.dna, entity, registry, config=config)
    assert result.ok
    assert set(entity.effects) == {sweating, coughing}
    assert entity.carriers == (air,)

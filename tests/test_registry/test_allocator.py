import random

import pytest

from plaguedna.registry.allocator import HEX_ALPHABET, IdentifierAllocator
from plaguedna.utils.validation import ValidationError

KIND = "effect"


def _demand(counts: dict[int, int]) -> list[tuple[str, int]]:
    return [(f"t{tier}-{i}", tier) for tier, n in sorted(counts.items()) for i in range(n)]


def test_tier1_identifiers_are_unique_chunks():
    allocator = IdentifierAllocator()
    assigned = allocator.allocate(KIND, _demand({1: 200}), random.Random(1))
    ids = list(assigned.values())
    assert len(set(ids)) == 200
    for ident in ids:
        assert len(ident) == 3
        assert set(ident) <= set(HEX_ALPHABET)
    assert allocator.tier1_capacity == 4096


def test_all_tiers_unique_within_round():
    allocator = IdentifierAllocator()
    demand = _demand({1: 6, 2: 8, 3: 8, 4: 5, 5: 3})
    assigned = allocator.allocate(KIND, demand, random.Random(7))
    ids = list(assigned.values())
    assert len(ids) == len(set(ids)) == len(demand)
    for key, tier in demand:
        assert len(assigned[key]) == 3 * tier


def test_higher_tiers_compose_from_lower_tiers():
    allocator = IdentifierAllocator()
    demand = _demand({1: 3, 2: 4, 3: 4})
    assigned = allocator.allocate(KIND, demand, random.Random(3))
    for key, tier in demand:
        if tier == 1:
            continue
        assert allocator.decompositions(KIND, assigned[key]), key


def test_exhausted_pool_falls_back_to_unconstrained_identifiers():
    allocator = IdentifierAllocator()
    # one tier-1 id yields a single tier-2 composition (a + a)
    demand = _demand({1: 1, 2: 3})
    assigned = allocator.allocate(KIND, demand, random.Random(11))
    tier2 = [assigned[k] for k, t in demand if t == 2]
    assert len(set(tier2)) == 3
    assert all(len(ident) == 6 for ident in tier2)
    composable = [ident for ident in tier2 if allocator.decompositions(KIND, ident)]
    assert len(composable) >= 1
    single = assigned["t1-0"]
    assert single + single in tier2


def test_composable_count_is_at_least_min_of_pool_and_demand():
    allocator = IdentifierAllocator()
    demand = _demand({1: 2, 2: 20})
    assigned = allocator.allocate(KIND, demand, random.Random(5))
    t1 = [assigned[k] for k, t in demand if t == 1]
    pool = {a + b for a in t1 for b in t1}
    tier2 = [assigned[k] for k, t in demand if t == 2]
    composable = [ident for ident in tier2 if allocator.decompositions(KIND, ident)]
    assert len(composable) >= min(len(pool), 20)
    assert len(set(tier2)) == 20


def test_missing_lower_tier_means_no_composition():
    allocator = IdentifierAllocator()
    assigned = allocator.allocate(KIND, _demand({3: 2}), random.Random(2))
    assert all(len(ident) == 9 for ident in assigned.values())
    assert allocator.candidate_pool(KIND, 3) == []


def test_same_seed_same_round():
    demand = _demand({1: 5, 2: 5, 3: 2})
    first = IdentifierAllocator().allocate(KIND, demand, random.Random(42))
    second = IdentifierAllocator().allocate(KIND, demand, random.Random(42))
    assert first == second


def test_kinds_have_separate_namespaces():
    allocator = IdentifierAllocator(chunk_width=1)
    a = allocator.allocate("suppressant", _demand({1: 16}), random.Random(0))
    b = allocator.allocate("carrier", _demand({1: 16}), random.Random(0))
    assert sorted(a.values()) == sorted(b.values()) == sorted(HEX_ALPHABET)


def test_tier1_space_exhaustion_raises():
    allocator = IdentifierAllocator(chunk_width=1)
    with pytest.raises(ValidationError) as info:
        allocator.allocate(KIND, _demand({1: 17}), random.Random(0))
    assert info.value.error_type == "identifier_space_exhausted"


def test_reset_frees_identifiers_for_next_round():
    allocator = IdentifierAllocator(chunk_width=1)
    allocator.allocate(KIND, _demand({1: 16}), random.Random(0))
    with pytest.raises(ValidationError):
        allocator.allocate(KIND, [("extra", 1)], random.Random(0))
    allocator.reset()
    assert allocator.assigned == {}
    assigned = allocator.allocate(KIND, _demand({1: 16}), random.Random(9))
    assert len(set(assigned.values())) == 16


def test_invalid_tier_rejected():
    allocator = IdentifierAllocator()
    with pytest.raises(ValidationError) as info:
        allocator.allocate(KIND, [("x", 6)], random.Random(0))
    assert info.value.error_type == "invalid_tier"

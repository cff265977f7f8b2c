"""Round-scoped identifier allocation by rarity tier.

Identifiers are built from fixed-width chunks over a hex alphabet; a tier-R
identifier is R chunks long. Tier 1 draws from the whole chunk space. Tier R
draws from compositions of an already-assigned tier-(R-1) identifier with an
already-assigned tier-1 identifier (either side), so that a player holding the
lower-tier tokens can splice the higher-tier one together. Once those
compositions run out, the remaining tier-R capabilities get unconstrained
identifiers for the rest of the round.
"""

from __future__ import annotations

import itertools
import logging
import random
from typing import Any, Hashable, Sequence

from plaguedna.utils.validation import ValidationError

HEX_ALPHABET = "0123456789ABCDEF"


class IdentifierAllocator:
    """Assigns unique identifiers per kind and tier for one round.

    ``assigned[kind][tier]`` keeps identifiers in assignment order; ``reset()``
    is the round-boundary hook and must be called before the next round's
    assignment.
    """

    def __init__(self, chunk_width: int = 3, alphabet: str = HEX_ALPHABET, max_tier: int = 5) -> None:
        if chunk_width <= 0:
            raise ValueError("chunk_width must be positive")
        if max_tier < 1:
            raise ValueError("max_tier must be at least 1")
        self.chunk_width = int(chunk_width)
        self.alphabet = "".join(sorted(set(alphabet)))
        self.max_tier = int(max_tier)
        self.assigned: dict[Hashable, dict[int, list[str]]] = {}
        self._used: dict[Hashable, dict[int, set[str]]] = {}
        self._chunk_space: list[str] | None = None

    @property
    def tier1_capacity(self) -> int:
        return len(self.alphabet) ** self.chunk_width

    def reset(self) -> None:
        self.assigned.clear()
        self._used.clear()

    def chunk_space(self) -> list[str]:
        if self._chunk_space is None:
            self._chunk_space = [
                "".join(chars) for chars in itertools.product(self.alphabet, repeat=self.chunk_width)
            ]
        return self._chunk_space

    def used(self, kind: Hashable, tier: int) -> set[str]:
        return self._used.setdefault(kind, {}).setdefault(int(tier), set())

    def _record(self, kind: Hashable, tier: int, identifier: str) -> None:
        self.used(kind, tier).add(identifier)
        self.assigned.setdefault(kind, {}).setdefault(int(tier), []).append(identifier)

    def _random_identifier(self, tier: int, rng: random.Random) -> str:
        return "".join(
            rng.choice(self.alphabet) for _ in range(self.chunk_width * tier)
        )

    def _allocate_tier1(self, kind: Hashable, keys: Sequence[Any], rng: random.Random) -> dict[Any, str]:
        used = self.used(kind, 1)
        available = [c for c in self.chunk_space() if c not in used]
        if len(keys) > len(available):
            raise ValidationError(
                "identifier_space_exhausted",
                "Not enough tier-1 identifiers for this round",
                kind=getattr(kind, "value", kind),
                requested=len(keys),
                available=len(available),
            )
        result: dict[Any, str] = {}
        for key in keys:
            identifier = available.pop(rng.randrange(len(available)))
            self._record(kind, 1, identifier)
            result[key] = identifier
        return result

    def candidate_pool(self, kind: Hashable, tier: int) -> list[str]:
        """Unused compositions of assigned tier-(R-1) and tier-1 identifiers, sorted."""
        by_tier = self.assigned.get(kind, {})
        lower = by_tier.get(tier - 1, [])
        singles = by_tier.get(1, [])
        pool: set[str] = set()
        for low in lower:
            for single in singles:
                pool.add(single + low)
                pool.add(low + single)
        pool -= self.used(kind, tier)
        return sorted(pool)

    def _allocate_composed(self, kind: Hashable, tier: int, keys: Sequence[Any],
                           rng: random.Random) -> dict[Any, str]:
        pool = self.candidate_pool(kind, tier)
        used = self.used(kind, tier)
        result: dict[Any, str] = {}
        fallbacks = 0
        for key in keys:
            if pool:
                identifier = pool.pop(rng.randrange(len(pool)))
            else:
                identifier = self._random_identifier(tier, rng)
                while identifier in used:
                    identifier = self._random_identifier(tier, rng)
                fallbacks += 1
            self._record(kind, tier, identifier)
            result[key] = identifier
        if fallbacks:
            logging.info(
                "Tier %d pool exhausted for %s; %d identifier(s) are not composable this round",
                tier, getattr(kind, "value", kind), fallbacks,
            )
        return result

    def allocate(self, kind: Hashable, demand: Sequence[tuple[Any, int]], rng: random.Random) -> dict[Any, str]:
        """Assign identifiers for ``demand``, a sequence of ``(key, tier)`` pairs.

        Tiers are processed in increasing order; keys within a tier keep their
        given order. Returns ``{key: identifier}``.
        """
        by_tier: dict[int, list[Any]] = {}
        for key, tier in demand:
            tier = int(tier)
            if tier < 1 or tier > self.max_tier:
                raise ValidationError(
                    "invalid_tier",
                    f"Tier must be between 1 and {self.max_tier}",
                    key=key,
                    tier=tier,
                )
            by_tier.setdefault(tier, []).append(key)

        result: dict[Any, str] = {}
        for tier in range(1, self.max_tier + 1):
            keys = by_tier.get(tier, [])
            if tier == 1:
                result.update(self._allocate_tier1(kind, keys, rng))
            elif keys:
                result.update(self._allocate_composed(kind, tier, keys, rng))
        return result

    def decompositions(self, kind: Hashable, identifier: str) -> list[tuple[str, str]]:
        """Ways ``identifier`` splits into an assigned lower-tier id plus an assigned tier-1 id."""
        width = self.chunk_width
        if len(identifier) % width or len(identifier) < 2 * width:
            return []
        tier = len(identifier) // width
        by_tier = self.assigned.get(kind, {})
        lower = set(by_tier.get(tier - 1, []))
        singles = set(by_tier.get(1, []))
        found: list[tuple[str, str]] = []
        head, tail = identifier[:width], identifier[width:]
        if head in singles and tail in lower:
            found.append((head, tail))
        head, tail = identifier[:-width], identifier[-width:]
        if head in lower and tail in singles:
            found.append((head, tail))
        return found


__all__ = ["HEX_ALPHABET", "IdentifierAllocator"]

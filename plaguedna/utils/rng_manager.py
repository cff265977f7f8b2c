"""Seedable random source shared by the allocator and the mutation graph.

Every consumer asks for a named context RNG. Contexts are derived from the
master seed and the context name, so the same seed always yields the same
stream per context regardless of the order in which contexts are requested.
"""

from __future__ import annotations

import hashlib
import random
from typing import Any


class RNGManager:
    """Owns a master seed and hands out per-context `random.Random` streams."""

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = random.SystemRandom().randrange(2**32)
        self.seed = int(seed)
        self._contexts: dict[str, random.Random] = {}

    def _derive_seed(self, context: str) -> int:
        digest = hashlib.sha256(f"{self.seed}:{context}".encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big")

    def get_context_rng(self, context: str) -> random.Random:
        rng = self._contexts.get(context)
        if rng is None:
            rng = random.Random(self._derive_seed(context))
            self._contexts[context] = rng
        return rng

    def get_rng_for_allocation(self, kind: Any, round_id: int) -> random.Random:
        name = getattr(kind, "value", kind)
        return self.get_context_rng(f"allocation:{name}:{int(round_id)}")

    def get_rng_for_mutation(self, entity_id: Any) -> random.Random:
        return self.get_context_rng(f"mutation:{entity_id}")


__all__ = ["RNGManager"]

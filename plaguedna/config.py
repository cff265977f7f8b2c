"""Configuration presets.

Configs are plain dicts; every consumer reads them with ``config.get(key, default)``
so a partial dict is always valid.
"""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    # Variable-section grammar
    'separator': '|',
    'chunk_width': 3,
    'max_tier': 5,
    # Trait mutation graph
    'random_mutation_probability': 0.04,
    'primary_step_range': (1, 3),
    'antagonist_step_range': (0, 1),
    'min_mutation_speed': 0,
}

PRESET_STANDARD: dict[str, Any] = dict(DEFAULT_CONFIG)

# Random-mutation branch disabled; useful for reproducible walkthroughs.
PRESET_DETERMINISTIC: dict[str, Any] = dict(DEFAULT_CONFIG, random_mutation_probability=0.0)


def merge_config(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    merged = dict(DEFAULT_CONFIG)
    merged.update(overrides or {})
    return merged


__all__ = [
    'DEFAULT_CONFIG',
    'PRESET_STANDARD',
    'PRESET_DETERMINISTIC',
    'merge_config',
]

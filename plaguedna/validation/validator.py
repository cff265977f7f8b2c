"""DNA validator: compiles the variable section into a capability set.

Grammar over the token stream::

    SUPPRESSANT SEP CARRIER* SEP EFFECT_GROUP (SEP EFFECT_GROUP)*

An effect group is the concatenation of consecutive chunks up to the next
separator. A single trailing separator is tolerated; two adjacent separators
in the effect section are an empty symptom slot.

Failures are returned as :class:`ValidationResult`, never raised to callers.
Traits that no longer fit the fixed section fail as ``UNENCODABLE_TRAITS``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from plaguedna.codec.tokens import CHUNK_WIDTH, SEPARATOR, tokenize
from plaguedna.codec.traits import encode
from plaguedna.registry.registry import BodyType, Capability, CapabilityKind
from plaguedna.utils.validation import ValidationError


class ValidationErrorKind(Enum):
    EMPTY_DNA = "empty_dna"
    INVALID_SUPPRESSANT = "invalid_suppressant"
    MISSING_SEPARATOR_AFTER_SUPPRESSANT = "missing_separator_after_suppressant"
    INVALID_CARRIER = "invalid_carrier"
    UNTERMINATED_CARRIER_BLOCK = "unterminated_carrier_block"
    INVALID_EFFECT = "invalid_effect"
    EMPTY_SYMPTOM_SLOT = "empty_symptom_slot"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    UNENCODABLE_TRAITS = "unencodable_traits"


@dataclass(frozen=True)
class CompiledCapabilities:
    suppressant: Capability
    carriers: tuple[Capability, ...]
    effects: tuple[Capability, ...]

    @property
    def weight(self) -> int:
        return sum(e.weight for e in self.effects)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation pass.

    Attributes:
        ok: True when the variable section compiled and fits the body type
        capabilities: Resolved capabilities on success
        error: Failure kind, ``None`` on success
        message: Human-readable failure description
        details: Token/position information for the failure
    """

    ok: bool
    capabilities: Optional[CompiledCapabilities] = None
    error: Optional[ValidationErrorKind] = None
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.ok


def _fail(kind: ValidationErrorKind, message: str, **details: Any) -> ValidationError:
    return ValidationError(kind.value, message, **details)


def _unique(items: list[Capability]) -> tuple[Capability, ...]:
    seen: list[Capability] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return tuple(seen)


def compile_variable(variable: str, registry: Any, body_type: Optional[BodyType] = None,
                     config: Optional[dict] = None) -> CompiledCapabilities:
    """Resolve ``variable`` against ``registry``; raises ``ValidationError`` on failure."""
    config = config or {}
    sep = str(config.get('separator', SEPARATOR))
    width = int(config.get('chunk_width', CHUNK_WIDTH))
    tokens = tokenize(variable, separator=sep, chunk_width=width)
    if not tokens:
        raise _fail(ValidationErrorKind.EMPTY_DNA, "Variable section is empty")

    head = tokens[0]
    suppressant = None if head == sep else registry.lookup(CapabilityKind.SUPPRESSANT, head)
    if suppressant is None:
        raise _fail(ValidationErrorKind.INVALID_SUPPRESSANT, f"Unknown suppressant {head!r}",
                    token=head, position=0)

    if len(tokens) < 2 or tokens[1] != sep:
        raise _fail(ValidationErrorKind.MISSING_SEPARATOR_AFTER_SUPPRESSANT,
                    "Expected separator after suppressant", position=1)

    pos = 2
    carriers: list[Capability] = []
    while pos < len(tokens) and tokens[pos] != sep:
        carrier = registry.lookup(CapabilityKind.CARRIER, tokens[pos])
        if carrier is None:
            raise _fail(ValidationErrorKind.INVALID_CARRIER, f"Unknown carrier {tokens[pos]!r}",
                        token=tokens[pos], position=pos)
        carriers.append(carrier)
        pos += 1
    if pos >= len(tokens):
        raise _fail(ValidationErrorKind.UNTERMINATED_CARRIER_BLOCK,
                    "Carrier block has no closing separator", position=pos)
    pos += 1

    effects: list[Capability] = []
    group = ""
    group_start = pos

    def resolve(text: str, start: int) -> None:
        effect = registry.lookup(CapabilityKind.EFFECT, text)
        if effect is None:
            raise _fail(ValidationErrorKind.INVALID_EFFECT, f"Unknown effect {text!r}",
                        token=text, position=start)
        effects.append(effect)

    while pos < len(tokens):
        token = tokens[pos]
        if token == sep:
            if not group:
                raise _fail(ValidationErrorKind.EMPTY_SYMPTOM_SLOT,
                            "Adjacent separators leave an empty symptom slot", position=pos)
            resolve(group, group_start)
            group = ""
            group_start = pos + 1
        else:
            group += token
        pos += 1
    if group:
        resolve(group, group_start)

    compiled = CompiledCapabilities(
        suppressant=suppressant,
        carriers=_unique(carriers),
        effects=_unique(effects),
    )
    if body_type is not None and not body_type.fits(compiled.weight):
        raise _fail(ValidationErrorKind.CAPACITY_EXCEEDED,
                    f"Effect weight {compiled.weight} exceeds {body_type.name} capacity {body_type.capacity}",
                    weight=compiled.weight, capacity=body_type.capacity)
    return compiled


def validate(dna: Any, entity: Any, registry: Any, *, apply: bool = True,
             config: Optional[dict] = None) -> ValidationResult:
    """Validate ``dna.variable`` for ``entity``.

    With ``apply=True`` the entity's capabilities, name and round counter are
    replaced on success and cleared on failure, ``dna.valid`` is updated and
    the fixed section is regenerated on success. With ``apply=False`` nothing
    is mutated.
    """
    body_type = getattr(entity, 'body_type', None)
    try:
        compiled = compile_variable(dna.variable, registry, body_type, config)
        try:
            fixed = encode(entity.trait_set())
        except ValueError as exc:
            raise _fail(ValidationErrorKind.UNENCODABLE_TRAITS, str(exc)) from exc
    except ValidationError as exc:
        kind = ValidationErrorKind(exc.error_type)
        logging.debug("DNA rejected: %s", exc)
        if apply:
            entity.clear_capabilities()
            dna.valid = False
        return ValidationResult(ok=False, error=kind, message=exc.message, details=dict(exc.details))

    if apply:
        entity.suppressant = compiled.suppressant
        entity.carriers = compiled.carriers
        entity.effects = compiled.effects
        entity.refresh_round(registry.round_id)
        entity.name = registry.derive_name(compiled.suppressant, compiled.carriers, compiled.effects)
        dna.fixed = fixed
        dna.valid = True
    return ValidationResult(ok=True, capabilities=compiled)


__all__ = [
    "ValidationErrorKind",
    "CompiledCapabilities",
    "ValidationResult",
    "compile_variable",
    "validate",
]

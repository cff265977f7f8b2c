"""Transaction management for staged DNA splices.

Implements a SpliceTransaction with a SpliceBuffer that:
- On begin(), snapshots the DNA variable section and validity and loads its tokens
- Stages coherent-token edits (move, swap, remove, insert) and rejects
  structurally illegal ones immediately
- On commit(), assembles the staged tokens back into the variable section and
  runs the validator, returning its result
- On rollback(), discards staged edits and restores the snapshot
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from plaguedna.codec.tokens import CHUNK_WIDTH, SEPARATOR, commit, is_coherent, tokenize
from plaguedna.utils.validation import ValidationError
from plaguedna.validation.validator import ValidationResult, validate


class SpliceBuffer:
    """Token sequence being edited prior to commit."""

    def __init__(self, separator: str = SEPARATOR, chunk_width: int = CHUNK_WIDTH) -> None:
        self.separator = separator
        self.chunk_width = chunk_width
        self.tokens: list[str] = []
        self.edits: list[tuple[str, tuple]] = []

    def reset(self, tokens: list[str] | None = None) -> None:
        self.tokens = list(tokens or [])
        self.edits.clear()

    def _check_index(self, index: int, *, allow_end: bool = False) -> None:
        upper = len(self.tokens) + (1 if allow_end else 0)
        if not 0 <= index < upper:
            raise ValidationError(
                "illegal_splice",
                "Token index out of range",
                index=index,
                length=len(self.tokens),
            )

    def move(self, source: int, target: int) -> None:
        """Relocate the token at ``source`` so it ends up at ``target``."""
        self._check_index(source)
        self._check_index(target)
        token = self.tokens.pop(source)
        self.tokens.insert(target, token)
        self.edits.append(("move", (source, target)))

    def swap(self, first: int, second: int) -> None:
        self._check_index(first)
        self._check_index(second)
        self.tokens[first], self.tokens[second] = self.tokens[second], self.tokens[first]
        self.edits.append(("swap", (first, second)))

    def remove(self, index: int) -> str:
        self._check_index(index)
        token = self.tokens.pop(index)
        self.edits.append(("remove", (index,)))
        return token

    def insert(self, index: int, token: str) -> None:
        self._check_index(index, allow_end=True)
        if not is_coherent(token, separator=self.separator, chunk_width=self.chunk_width):
            raise ValidationError(
                "illegal_splice",
                "Only whole chunks or separators can be inserted",
                token=token,
            )
        self.tokens.insert(index, token)
        self.edits.append(("insert", (index, token)))


@dataclass
class SpliceTransaction:
    dna: Any
    entity: Any
    registry: Any
    config: dict = field(default_factory=dict)
    buffer: SpliceBuffer | None = None

    _snapshot: tuple[str, bool] | None = None

    def __post_init__(self) -> None:
        if self.buffer is None:
            self.buffer = SpliceBuffer(
                separator=str(self.config.get('separator', SEPARATOR)),
                chunk_width=int(self.config.get('chunk_width', CHUNK_WIDTH)),
            )

    def begin(self) -> None:
        """Snapshot the DNA and load its tokens into the buffer."""
        self._snapshot = (self.dna.variable, self.dna.valid)
        self.buffer.reset(tokenize(
            self.dna.variable,
            separator=self.buffer.separator,
            chunk_width=self.buffer.chunk_width,
        ))

    def rollback(self) -> None:
        """Discard staged edits and restore the snapshot."""
        self.buffer.reset()
        if self._snapshot is not None:
            self.dna.variable, self.dna.valid = self._snapshot
            self._snapshot = None

    def commit(self) -> ValidationResult:
        """Write staged tokens back and validate. Returns the validation result."""
        if self._snapshot is None:
            raise ValidationError("no_transaction", "commit() called without begin()")
        edit_count = len(self.buffer.edits)
        commit(self.dna, self.buffer.tokens)
        result = validate(self.dna, self.entity, self.registry, config=self.config)
        if not result.ok:
            logging.warning("Splice of %d edit(s) rejected: %s", edit_count, result.error.value)
        # Rejected text stays in place so the player can keep editing
        self.buffer.reset()
        self._snapshot = None
        return result


__all__ = ["SpliceBuffer", "SpliceTransaction"]

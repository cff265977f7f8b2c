"""Token stream over the variable DNA section.

A token is either the single separator character or a fixed-width identifier
chunk. Tokens are the coherent parts a splice may relocate.
"""

from __future__ import annotations

from typing import Any, Iterable

SEPARATOR = "|"
CHUNK_WIDTH = 3
CHUNK_ALPHABET = frozenset("0123456789ABCDEF")


def tokenize(variable: str, *, separator: str = SEPARATOR, chunk_width: int = CHUNK_WIDTH) -> list[str]:
    """Split a variable section into separator and chunk tokens.

    Chunk alignment is assumed; a short trailing chunk is returned as-is.
    """
    tokens: list[str] = []
    pos = 0
    while pos < len(variable):
        if variable[pos] == separator:
            tokens.append(separator)
            pos += 1
        else:
            tokens.append(variable[pos:pos + chunk_width])
            pos += chunk_width
    return tokens


def assemble(tokens: Iterable[str]) -> str:
    return "".join(tokens)


def is_coherent(token: str, *, separator: str = SEPARATOR, chunk_width: int = CHUNK_WIDTH) -> bool:
    if token == separator:
        return True
    return len(token) == chunk_width and set(token) <= CHUNK_ALPHABET


def commit(dna: Any, tokens: Iterable[str]) -> str:
    """Write an edited token sequence back to ``dna``; validity is reset."""
    text = assemble(tokens)
    dna.set_variable(text)
    return text


def extract_completed_effect_groups(tokens: list[str], *, separator: str = SEPARATOR) -> list[str]:
    """Lenient preview of the effect section.

    Skips the suppressant and carrier sections (the first two separators) and
    splits the rest on separators. Returns ``[]`` when there are fewer than two
    leading separators or any resulting segment is empty. This is not a
    validation; the validator is the authority.
    """
    seen = 0
    start = None
    for index, token in enumerate(tokens):
        if token == separator:
            seen += 1
            if seen == 2:
                start = index + 1
                break
    if start is None:
        return []

    groups: list[str] = []
    current = ""
    for token in tokens[start:]:
        if token == separator:
            if not current:
                return []
            groups.append(current)
            current = ""
        else:
            current += token
    if not current:
        return []
    groups.append(current)
    return groups


__all__ = [
    "SEPARATOR",
    "CHUNK_WIDTH",
    "CHUNK_ALPHABET",
    "tokenize",
    "assemble",
    "is_coherent",
    "commit",
    "extract_completed_effect_groups",
]

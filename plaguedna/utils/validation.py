"""Structured error type shared across the package."""

from __future__ import annotations

from typing import Any


class ValidationError(Exception):
    """Error with a machine-readable type and keyword details.

    Example:
        raise ValidationError("illegal_splice", "Index out of range", index=7)
    """

    def __init__(self, error_type: str, message: str, **details: Any) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            extras = ", ".join(f"{k}={v!r}" for k, v in sorted(self.details.items()))
            return f"[{self.error_type}] {self.message} ({extras})"
        return f"[{self.error_type}] {self.message}"


__all__ = ["ValidationError"]

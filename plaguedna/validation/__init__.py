"""DNA validation for plaguedna."""

from .validator import (
    CompiledCapabilities,
    ValidationErrorKind,
    ValidationResult,
    compile_variable,
    validate,
)

__all__ = [
    'CompiledCapabilities',
    'ValidationErrorKind',
    'ValidationResult',
    'compile_variable',
    'validate',
]

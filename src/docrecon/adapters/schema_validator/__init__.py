"""Schema validator adapters."""

from __future__ import annotations

from .bridge import SubprocessSchemaValidator
from .builtin import SCHEMAS, BuiltinSchemaValidator

__all__ = ["SCHEMAS", "BuiltinSchemaValidator", "SubprocessSchemaValidator"]

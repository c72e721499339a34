"""Schema validation delegated to an external validator process."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Final

from pydantic import ValidationError

from docrecon.domain.model import DocumentType
from docrecon.domain.ports import SchemaValidationError, SchemaValidationResult

from .schema import ValidationPayload

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0

# Types the external validator can decode; anything else is accepted unchecked.
SUPPORTED_TYPES: Final[frozenset[str]] = frozenset(
    {
        DocumentType.README,
        DocumentType.LICENSE,
        DocumentType.SECURITY,
        DocumentType.CONTRIBUTING,
        DocumentType.CODE_OF_CONDUCT,
        DocumentType.FUNDING,
        DocumentType.CITATION,
        DocumentType.CHANGELOG,
    }
)


@dataclass(frozen=True, slots=True)
class SubprocessSchemaValidator:
    """Run ``command`` with ``[type, content]`` JSON on stdin and parse stdout.

    The validator exits non-zero for invalid documents, so the exit status is
    ignored; only unparseable output counts as a failure.
    """

    command: tuple[str, ...]
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def validate(self, document_type: str, content: str) -> SchemaValidationResult:
        if document_type not in SUPPORTED_TYPES:
            return SchemaValidationResult(is_valid=True)

        payload = json.dumps([document_type, content])
        try:
            completed = subprocess.run(  # noqa: S603
                self.command,
                input=payload,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise SchemaValidationError(f"Validator {self.command[0]!r} failed: {exc}") from exc

        try:
            result = ValidationPayload.model_validate_json(completed.stdout)
        except ValidationError as exc:
            log.debug("Validator stderr: %s", completed.stderr.strip())
            raise SchemaValidationError(
                f"Validator {self.command[0]!r} returned unusable output "
                f"(exit status {completed.returncode})"
            ) from exc
        return result.to_result()

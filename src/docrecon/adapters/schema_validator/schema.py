"""Pydantic models for the external validator's JSON output."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from docrecon.domain.ports import (
    SchemaValidationResult,
    SchemaViolation,
    ViolationSeverity,
)


class ValidatorBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ViolationPayload(ValidatorBaseModel):
    field: str = Field(alias="violationField")
    message: str = Field(alias="violationMessage")
    severity: ViolationSeverity = Field(alias="violationSeverity")
    line: int | None = Field(default=None, alias="violationLine")


class ValidationPayload(ValidatorBaseModel):
    is_valid: bool = Field(alias="isValid")
    violations: list[ViolationPayload] = Field(default_factory=list[ViolationPayload])
    confidence: float = Field(ge=0.0, le=1.0)

    def to_result(self) -> SchemaValidationResult:
        return SchemaValidationResult(
            is_valid=self.is_valid,
            violations=tuple(
                SchemaViolation(
                    field=violation.field,
                    message=violation.message,
                    severity=violation.severity,
                )
                for violation in self.violations
            ),
            confidence=self.confidence,
        )

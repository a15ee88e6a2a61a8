"""Validation report types for product mutation checks."""


import dataclasses
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    severity: str = "error"
    field: str | None = None
    operation: str | None = None
    details: dict[str, Any] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        if self.operation is not None:
            data["operation"] = self.operation
        if self.details:
            data["details"] = dict(self.details)
        return data


@dataclass(frozen=True)
class AggregatedError:
    """Every violation of one validator, collected into a single response."""

    code: str
    message: str
    field: str | None = None
    sub_errors: tuple[ValidationIssue, ...] = ()

    @property
    def sub_codes(self) -> list[str]:
        return [issue.code for issue in self.sub_errors]

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "details": {"subErrors": [issue.to_dict() for issue in self.sub_errors]},
        }


@dataclass
class ValidationReport:
    valid: bool
    issues: list[ValidationIssue] = dataclasses.field(default_factory=list)
    error: AggregatedError | None = None

    @property
    def codes(self) -> list[str]:
        return [issue.code for issue in self.issues]


def build_report(
    issues: list[ValidationIssue],
    *,
    code: str,
    noun: str,
    field: str,
) -> ValidationReport:
    if not issues:
        return ValidationReport(valid=True)
    plural = "s" if len(issues) > 1 else ""
    error = AggregatedError(
        code=code,
        message=f"Found {len(issues)} validation error{plural} in {noun}",
        field=field,
        sub_errors=tuple(issues),
    )
    return ValidationReport(valid=False, issues=list(issues), error=error)


__all__ = ["AggregatedError", "ValidationIssue", "ValidationReport", "build_report"]

"""Validation report for collecting issues found in a finance snapshot."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """A single validation finding.

    Attributes:
        severity: The severity level of the issue
        field: Dotted path of the offending field (e.g. 'time_entries.hours')
        message: Human-readable description of the issue
        value: The value that caused the issue
        context: Record identifiers (entry_id, cost_id, task_id, ...)
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        context_str = ""
        if self.context:
            parts = [f"{k}={v}" for k, v in self.context.items()]
            context_str = f" ({', '.join(parts)})"
        return f"[{self.severity.name}] {self.field}: {self.message}{context_str}"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation of the issue."""
        return {
            "severity": self.severity.name,
            "field": self.field,
            "message": self.message,
            "value": None if self.value is None else str(self.value),
            "context": self.context or {},
        }


class ValidationReport:
    """Collects validation issues.

    Only errors make a report invalid; warnings describe input the engine
    will still process, with degraded results.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("cost_items.amount_cents", "Negative amount", -500)
        >>> report.add_warning("time_entries.billing_type", "Unknown type", "fix")
        >>> report.summary()
        '1 error(s), 1 warning(s)'
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def is_valid(self) -> bool:
        """True when the report holds no errors."""
        return self.error_count == 0

    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record an issue.

        Args:
            severity: Severity of the issue
            field: Field path the issue refers to
            message: Human-readable description
            value: Offending value
            context: Optional record identifiers
        """
        self.issues.append(
            ValidationIssue(
                severity=severity,
                field=field,
                message=message,
                value=value,
                context=context,
            )
        )

    def add_error(self, field, message, value, context=None) -> None:
        self.add(ValidationSeverity.ERROR, field, message, value, context)

    def add_warning(self, field, message, value, context=None) -> None:
        self.add(ValidationSeverity.WARNING, field, message, value, context)

    def add_info(self, field, message, value, context=None) -> None:
        self.add(ValidationSeverity.INFO, field, message, value, context)

    def get_issues(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        """Issues of one severity, in the order they were added."""
        return [issue for issue in self.issues if issue.severity == severity]

    def get_errors(self) -> List[ValidationIssue]:
        return self.get_issues(ValidationSeverity.ERROR)

    def get_warnings(self) -> List[ValidationIssue]:
        return self.get_issues(ValidationSeverity.WARNING)

    def merge(self, other: "ValidationReport") -> None:
        """Append another report's issues to this one."""
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Counts of errors, warnings and info messages."""
        parts = []
        if self.error_count:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count:
            parts.append(f"{self.info_count} info message(s)")
        return ", ".join(parts) if parts else "No issues found"

    def format(self) -> str:
        """Format the report for display, grouped by severity."""
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]
        for severity, heading in (
            (ValidationSeverity.ERROR, "ERRORS"),
            (ValidationSeverity.WARNING, "WARNINGS"),
            (ValidationSeverity.INFO, "INFO"),
        ):
            issues = self.get_issues(severity)
            if issues:
                lines.append(f"\n{heading}:")
                lines.extend(f"  - {issue}" for issue in issues)
        return "\n".join(lines)

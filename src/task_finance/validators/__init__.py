"""Validation of finance snapshots at the ingestion boundary."""

from task_finance.validators.snapshot_validator import SnapshotValidator
from task_finance.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "SnapshotValidator",
    "ValidationIssue",
    "ValidationReport",
    "ValidationSeverity",
]

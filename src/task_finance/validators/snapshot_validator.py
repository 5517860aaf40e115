"""Ingestion-boundary validation of finance snapshots.

The engine itself never rejects input: an unresolved rate prices at zero
and an unknown billing type counts as regular. This validator reports such
records so that the data layer can fix or reject them before a report is
shown.

Errors: negative cost amounts, records referencing tasks that are not in
the snapshot, hours with more than 3 fractional digits.

Warnings: unknown billing types, unresolved rates, zero-hour entries,
stored amounts that differ from the recomputed amount, commission
percentages outside 0-100.
"""

import logging
from decimal import Decimal
from typing import Dict, Optional

from task_finance.calculators.billing_classifier import is_known_billing_type
from task_finance.calculators.entry_pricing import price_entry
from task_finance.models.finance_settings import FinanceSettings
from task_finance.models.project import Task
from task_finance.models.snapshot import FinanceSnapshot
from task_finance.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

HOURS_PRECISION = Decimal("0.001")
DRIFT_TOLERANCE_CENTS = 1


class SnapshotValidator:
    """Validates a FinanceSnapshot before it is handed to the engine.

    Example:
        >>> validator = SnapshotValidator()
        >>> report = validator.validate(snapshot)
        >>> if not report.is_valid():
        ...     print(report.format())
    """

    def validate(self, snapshot: FinanceSnapshot) -> ValidationReport:
        """Validate every record of a snapshot.

        Args:
            snapshot: Snapshot to check

        Returns:
            ValidationReport with all issues found
        """
        report = ValidationReport()
        tasks: Dict[str, Task] = {task.id: task for task in snapshot.tasks}

        if snapshot.project is not None:
            self._validate_settings(
                snapshot.project.finance, report, {"project_id": snapshot.project.id}
            )
        for task in snapshot.tasks:
            self._validate_settings(task.finance, report, {"task_id": task.id})

        self._validate_entries(snapshot, tasks, report)
        self._validate_costs(snapshot, tasks, report)

        logger.info(f"Snapshot validation finished: {report.summary()}")
        return report

    def _validate_settings(
        self, settings: FinanceSettings, report: ValidationReport, context: Dict
    ) -> None:
        percent = settings.sales_commission_percent
        if percent is not None and not (Decimal("0") <= percent <= Decimal("100")):
            report.add_warning(
                "finance.sales_commission_percent",
                "Commission percentage is outside 0-100",
                percent,
                context,
            )

    def _validate_entries(
        self,
        snapshot: FinanceSnapshot,
        tasks: Dict[str, Task],
        report: ValidationReport,
    ) -> None:
        for entry in snapshot.time_entries:
            context = {"entry_id": entry.id, "task_id": entry.task_id}
            task: Optional[Task] = tasks.get(entry.task_id)

            if task is None:
                report.add_error(
                    "time_entries.task_id",
                    "Entry references a task that is not in the snapshot",
                    entry.task_id,
                    context,
                )

            if entry.hours != entry.hours.quantize(HOURS_PRECISION):
                report.add_error(
                    "time_entries.hours",
                    "Hours have more than 3 fractional digits",
                    entry.hours,
                    context,
                )
            elif entry.hours == 0:
                report.add_warning(
                    "time_entries.hours", "Entry has zero hours", entry.hours, context
                )

            if not is_known_billing_type(entry.billing_type):
                report.add_warning(
                    "time_entries.billing_type",
                    "Unknown billing type, entry will be treated as regular",
                    entry.billing_type,
                    context,
                )

            priced = price_entry(
                entry, task, snapshot.project, snapshot.user_default_rates
            )
            if not priced.rate_was_resolved:
                report.add_warning(
                    "time_entries.hourly_rate_cents",
                    "No hourly rate could be resolved, entry will be priced at 0",
                    None,
                    context,
                )

            if (
                entry.amount_cents is not None
                and abs(entry.amount_cents - priced.amount_cents)
                > DRIFT_TOLERANCE_CENTS
            ):
                report.add_warning(
                    "time_entries.amount_cents",
                    f"Stored amount differs from recomputed amount "
                    f"{priced.amount_cents}",
                    entry.amount_cents,
                    context,
                )

    def _validate_costs(
        self,
        snapshot: FinanceSnapshot,
        tasks: Dict[str, Task],
        report: ValidationReport,
    ) -> None:
        for cost in snapshot.cost_items:
            context = {"cost_id": cost.id}
            if cost.task_id is not None:
                context["task_id"] = cost.task_id
                if cost.task_id not in tasks:
                    report.add_error(
                        "cost_items.task_id",
                        "Cost item references a task that is not in the snapshot",
                        cost.task_id,
                        context,
                    )

            if cost.amount_cents < 0:
                report.add_error(
                    "cost_items.amount_cents",
                    "Cost amount is negative",
                    cost.amount_cents,
                    context,
                )

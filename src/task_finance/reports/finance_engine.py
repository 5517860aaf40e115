"""Finance engine facade.

FinanceEngine is the single entry point used by the dashboard, the task
finance panel and the printable report. Each call prices the snapshot's
entries once and feeds that one priced set to the aggregator, the summary,
the chart series and the ledger, so every figure in a report agrees with
every other.

Example:
    >>> engine = FinanceEngine()
    >>> report = engine.build_task_report(snapshot, "task-1")
    >>> report.summary.extra_cents
    25000
    >>> report.ledger_total_cents == (
    ...     report.summary.total_cost_cents + report.commission_cents
    ... )
    True
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from task_finance.aggregators.cost_aggregator import (
    AggregationResult,
    CostAggregator,
    in_window,
)
from task_finance.aggregators.project_aggregator import (
    ProjectFinanceAggregator,
    TaskContribution,
)
from task_finance.calculators.commission_calculator import CommissionCalculator
from task_finance.calculators.entry_pricing import PricedEntry, price_entries
from task_finance.calculators.finance_summary import (
    FinanceSummary,
    FinanceSummaryBuilder,
)
from task_finance.config.settings import FinanceEngineConfig, get_config
from task_finance.models.cost_item import CostItem
from task_finance.models.finance_settings import FinanceSettings
from task_finance.models.snapshot import FinanceSnapshot
from task_finance.models.time_entry import TimeEntry
from task_finance.reports.time_series import (
    DailyActivity,
    DistributionSlice,
    SeriesPoint,
    TimeSeriesBuilder,
)
from task_finance.reports.transaction_list import (
    Transaction,
    TransactionListBuilder,
    ledger_total,
)
from task_finance.utils.logging_utils import LogContext, log_function_call

logger = logging.getLogger(__name__)


@dataclass
class TaskFinanceReport:
    """Every finance figure of one task.

    Attributes:
        task_id: Task identifier
        snapshot_id: Identifier of the source snapshot (optional)
        settings: Effective settings (task values, project fallbacks)
        priced_entries: Entries with resolved rate, amount and class
        costs: Cost items of the task
        aggregation: Totals and day buckets
        summary: Spent / remaining / extra figures
        commission_cents: Sales commission
        commission_percent: Percentage the commission was computed with
        series: Cumulative cost series
        distribution: Cost distribution slices
        daily_activity: Daily activity rows
        ledger: Transactions, newest first
    """

    task_id: str
    snapshot_id: Optional[str]
    settings: FinanceSettings
    priced_entries: List[PricedEntry]
    costs: List[CostItem]
    aggregation: AggregationResult
    summary: FinanceSummary
    commission_cents: int
    commission_percent: Decimal
    series: List[SeriesPoint] = field(default_factory=list)
    distribution: List[DistributionSlice] = field(default_factory=list)
    daily_activity: List[DailyActivity] = field(default_factory=list)
    ledger: List[Transaction] = field(default_factory=list)

    @property
    def ledger_total_cents(self) -> int:
        return ledger_total(self.ledger)

    def user_matrix(self) -> pd.DataFrame:
        """User-by-day hours matrix of the task."""
        return TimeSeriesBuilder().build_user_matrix(self.aggregation.daily_data)


@dataclass
class ProjectFinanceReport:
    """Project roll-up of task reports.

    Attributes:
        project_id: Project identifier (None for a snapshot without project)
        snapshot_id: Identifier of the source snapshot (optional)
        completed_only: Whether only done tasks were included
        task_reports: Reports of the included tasks
        project_costs: Project-level cost items (no task)
        aggregation: Totals and day buckets over all included records
        summary: Project spent / remaining / extra figures
        commission_cents: Sum of task commissions
        series: Cumulative cost series
        distribution: Cost distribution slices
        ledger: All task ledger lines plus project-level costs, newest first
    """

    project_id: Optional[str]
    snapshot_id: Optional[str]
    completed_only: bool
    task_reports: List[TaskFinanceReport]
    project_costs: List[CostItem]
    aggregation: AggregationResult
    summary: FinanceSummary
    commission_cents: int
    series: List[SeriesPoint] = field(default_factory=list)
    distribution: List[DistributionSlice] = field(default_factory=list)
    ledger: List[Transaction] = field(default_factory=list)

    @property
    def ledger_total_cents(self) -> int:
        return ledger_total(self.ledger)

    def get_task_report(self, task_id: str) -> TaskFinanceReport:
        """Look up an included task's report.

        Raises:
            KeyError: If the task is not part of the roll-up
        """
        for report in self.task_reports:
            if report.task_id == task_id:
                return report
        raise KeyError(f"Task '{task_id}' is not part of the project report")


class FinanceEngine:
    """Builds task and project finance reports from snapshots.

    The engine holds no state between calls; a report is returned only
    after the whole snapshot has been processed.

    Attributes:
        config: Engine configuration (commission default, currency symbol)
    """

    def __init__(self, config: Optional[FinanceEngineConfig] = None):
        self.config = config or get_config()
        self.cost_aggregator = CostAggregator()
        self.project_aggregator = ProjectFinanceAggregator(self.cost_aggregator)
        self.commission_calculator = CommissionCalculator(
            self.config.default_commission_percent
        )
        self.summary_builder = FinanceSummaryBuilder()
        self.series_builder = TimeSeriesBuilder()
        self.ledger_builder = TransactionListBuilder(self.config.currency_symbol)

    @staticmethod
    def _windowed(
        snapshot: FinanceSnapshot,
        entries: Sequence[TimeEntry],
        costs: Sequence[CostItem],
    ) -> Tuple[List[TimeEntry], List[CostItem]]:
        start, end = snapshot.window_start, snapshot.window_end
        return (
            [e for e in entries if in_window(e.date, start, end)],
            [c for c in costs if in_window(c.date, start, end)],
        )

    @log_function_call
    def build_task_report(
        self, snapshot: FinanceSnapshot, task_id: str
    ) -> TaskFinanceReport:
        """Build the finance report of one task.

        Args:
            snapshot: Engine input
            task_id: Task to report on

        Returns:
            TaskFinanceReport

        Raises:
            KeyError: If the task is not part of the snapshot
        """
        with LogContext(snapshot_id=snapshot.snapshot_id, task_id=task_id):
            task = snapshot.get_task(task_id)
            settings = task.effective_settings(snapshot.project)
            entries, costs = self._windowed(
                snapshot,
                snapshot.entries_for_task(task_id),
                snapshot.costs_for_task(task_id),
            )

            priced = price_entries(
                entries, [task], snapshot.project, snapshot.user_default_rates
            )
            aggregation = self.cost_aggregator.aggregate(priced, costs)
            summary = self.summary_builder.build(
                settings, aggregation.labor_cost_cents, aggregation.external_cost_cents
            )
            commission = self.commission_calculator.commission(
                summary.budget_amount_cents, summary.extra_cents, settings
            )
            percent = self.commission_calculator.effective_percent(settings)

            report = TaskFinanceReport(
                task_id=task_id,
                snapshot_id=snapshot.snapshot_id,
                settings=settings,
                priced_entries=priced,
                costs=costs,
                aggregation=aggregation,
                summary=summary,
                commission_cents=commission,
                commission_percent=percent,
                series=self.series_builder.build_series(
                    aggregation.daily_data, summary.budget_amount_cents
                ),
                distribution=self.series_builder.build_distribution(
                    summary.labor_cost_cents,
                    summary.external_cost_cents,
                    summary.budget_amount_cents,
                    commission,
                ),
                daily_activity=self.series_builder.build_daily_activity(
                    aggregation.daily_data
                ),
                ledger=self.ledger_builder.build_ledger(
                    priced,
                    costs,
                    commission,
                    summary.budget_amount_cents,
                    summary.extra_cents,
                    percent,
                    snapshot.as_of,
                    source_id=task_id,
                ),
            )

            logger.info(
                f"Task report built: spent={summary.spent_cents}, "
                f"remaining={summary.remaining_cents}, "
                f"extra={summary.extra_cents}, commission={commission}"
            )
            return report

    @log_function_call
    def build_project_report(
        self, snapshot: FinanceSnapshot, completed_only: bool = False
    ) -> ProjectFinanceReport:
        """Build the project roll-up.

        Args:
            snapshot: Engine input
            completed_only: Include only tasks whose status is done.
                Project-level cost items are always included.

        Returns:
            ProjectFinanceReport
        """
        project_id = snapshot.project.id if snapshot.project else None
        with LogContext(snapshot_id=snapshot.snapshot_id, project_id=project_id):
            tasks = [
                t for t in snapshot.tasks if t.is_done or not completed_only
            ]
            logger.info(
                f"Building project report over {len(tasks)} of "
                f"{len(snapshot.tasks)} tasks (completed_only={completed_only})"
            )

            task_reports = [self.build_task_report(snapshot, t.id) for t in tasks]
            _, project_costs = self._windowed(
                snapshot, [], snapshot.project_level_costs()
            )

            rollup = self.project_aggregator.roll_up(
                [
                    TaskContribution(
                        task_id=r.task_id,
                        budget_cents=r.summary.budget_amount_cents,
                        commission_cents=r.commission_cents,
                        entries=r.priced_entries,
                        costs=r.costs,
                    )
                    for r in task_reports
                ],
                project_costs,
            )
            aggregation = rollup.aggregation
            summary = self.summary_builder.build_from_budget(
                rollup.budget_cents,
                aggregation.labor_cost_cents,
                aggregation.external_cost_cents,
            )

            ledger_lines = [t for r in task_reports for t in r.ledger]
            ledger_lines.extend(
                self.ledger_builder.cost_transaction(c) for c in project_costs
            )

            return ProjectFinanceReport(
                project_id=project_id,
                snapshot_id=snapshot.snapshot_id,
                completed_only=completed_only,
                task_reports=task_reports,
                project_costs=project_costs,
                aggregation=aggregation,
                summary=summary,
                commission_cents=rollup.commission_cents,
                series=self.series_builder.build_series(
                    aggregation.daily_data, rollup.budget_cents
                ),
                distribution=self.series_builder.build_distribution(
                    summary.labor_cost_cents,
                    summary.external_cost_cents,
                    summary.budget_amount_cents,
                    rollup.commission_cents,
                ),
                ledger=self.ledger_builder.sort_ledger(ledger_lines),
            )

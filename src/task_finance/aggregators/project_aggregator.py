"""Project roll-up of per-task finance figures.

The project budget and commission are sums over the contributing tasks.
Labor and external cost are re-aggregated from the tasks' priced entries
and cost items plus the project-level cost items, so project day buckets
and totals come from the same records as the task figures.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from task_finance.aggregators.cost_aggregator import AggregationResult, CostAggregator
from task_finance.calculators.entry_pricing import PricedEntry
from task_finance.models.cost_item import CostItem

logger = logging.getLogger(__name__)


@dataclass
class TaskContribution:
    """What one task contributes to its project.

    Attributes:
        task_id: Task identifier
        budget_cents: Task fixed budget (0 when unset)
        commission_cents: Task commission
        entries: Priced entries of the task
        costs: Cost items of the task
    """

    task_id: str
    budget_cents: int
    commission_cents: int
    entries: List[PricedEntry] = field(default_factory=list)
    costs: List[CostItem] = field(default_factory=list)


@dataclass
class ProjectRollup:
    """Aggregated project figures.

    Attributes:
        task_ids: Contributing tasks, in snapshot order
        budget_cents: Sum of task budgets
        commission_cents: Sum of task commissions
        aggregation: Totals and day buckets over all contributing records
    """

    task_ids: List[str]
    budget_cents: int
    commission_cents: int
    aggregation: AggregationResult


class ProjectFinanceAggregator:
    """Rolls task contributions up to project level.

    Example:
        >>> aggregator = ProjectFinanceAggregator()
        >>> rollup = aggregator.roll_up(contributions, project_costs)
        >>> rollup.budget_cents == sum(c.budget_cents for c in contributions)
        True
    """

    def __init__(self, cost_aggregator: Optional[CostAggregator] = None):
        self.cost_aggregator = cost_aggregator or CostAggregator()

    def roll_up(
        self,
        contributions: Sequence[TaskContribution],
        project_costs: Sequence[CostItem] = (),
    ) -> ProjectRollup:
        """Combine task contributions and project-level costs.

        Args:
            contributions: Per-task figures and records
            project_costs: Cost items attached to the project but no task

        Returns:
            ProjectRollup for the given contributions
        """
        entries: List[PricedEntry] = []
        costs: List[CostItem] = []
        for contribution in contributions:
            entries.extend(contribution.entries)
            costs.extend(contribution.costs)
        costs.extend(project_costs)

        rollup = ProjectRollup(
            task_ids=[c.task_id for c in contributions],
            budget_cents=sum(c.budget_cents for c in contributions),
            commission_cents=sum(c.commission_cents for c in contributions),
            aggregation=self.cost_aggregator.aggregate(entries, costs),
        )

        logger.info(
            f"Rolled up {len(contributions)} tasks and "
            f"{len(project_costs)} project-level costs "
            f"(budget={rollup.budget_cents}, "
            f"commission={rollup.commission_cents})"
        )
        return rollup

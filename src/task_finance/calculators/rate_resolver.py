"""Hourly rate resolution for time entries.

When a time entry does not carry an explicit rate, the rate falls back
through the task, the project and the user's default rate. An entry that
resolves to no rate at all is still priced (at zero) and flagged so that a
consumer can warn about it; it is never an error.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from task_finance.models.project import Project, Task
from task_finance.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)


class RateSource(str, Enum):
    """Where a resolved hourly rate came from."""

    ENTRY = "entry"
    TASK = "task"
    PROJECT = "project"
    USER_DEFAULT = "user_default"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class RateContext:
    """Fallback rates for one entry, in cents.

    Attributes:
        task_rate_cents: Task-level rate override
        project_rate_cents: Project default rate
        user_default_rate_cents: The logging user's default rate
    """

    task_rate_cents: Optional[int] = None
    project_rate_cents: Optional[int] = None
    user_default_rate_cents: Optional[int] = None

    @classmethod
    def build(
        cls,
        task: Optional[Task],
        project: Optional[Project],
        user_default_rate_cents: Optional[int],
    ) -> "RateContext":
        """Collect the fallback rates of a task, its project and a user."""
        return cls(
            task_rate_cents=task.hourly_rate_cents if task else None,
            project_rate_cents=project.hourly_rate_cents if project else None,
            user_default_rate_cents=user_default_rate_cents,
        )


@dataclass(frozen=True)
class ResolvedRate:
    """Result of rate resolution.

    Attributes:
        rate_cents: Hourly rate to apply (0 when unresolved)
        source: Which level of the fallback chain supplied the rate
    """

    rate_cents: int
    source: RateSource

    @property
    def rate_was_resolved(self) -> bool:
        """False when no level supplied a rate and the entry costs nothing."""
        return self.source is not RateSource.UNRESOLVED


UNRESOLVED_RATE = ResolvedRate(rate_cents=0, source=RateSource.UNRESOLVED)


def _usable(rate_cents: Optional[int]) -> bool:
    return rate_cents is not None and rate_cents > 0


class RateResolver:
    """Resolves the hourly rate of a time entry.

    Precedence (first non-null, non-zero wins):
    1. the entry's own ``hourly_rate_cents``
    2. the task's rate override
    3. the project's default rate
    4. the user's default rate
    5. zero, flagged as unresolved

    Example:
        >>> resolver = RateResolver()
        >>> resolved = resolver.resolve(entry, task, project, 4000)
        >>> resolved.source
        <RateSource.PROJECT: 'project'>
    """

    def resolve(
        self,
        entry: TimeEntry,
        task: Optional[Task],
        project: Optional[Project],
        user_default_rate_cents: Optional[int] = None,
    ) -> ResolvedRate:
        """Resolve the rate for one entry.

        Args:
            entry: Time entry to price
            task: Task the entry was logged on (may be None)
            project: Project owning the task (may be None)
            user_default_rate_cents: Default rate of the entry's user

        Returns:
            ResolvedRate with the rate and its source
        """
        if _usable(entry.hourly_rate_cents):
            return ResolvedRate(entry.hourly_rate_cents, RateSource.ENTRY)

        context = RateContext.build(task, project, user_default_rate_cents)
        return self.resolve_from_context(context, entry_id=entry.id)

    def resolve_from_context(
        self, context: RateContext, entry_id: Optional[str] = None
    ) -> ResolvedRate:
        """Resolve a rate from the fallback chain alone."""
        candidates = (
            (context.task_rate_cents, RateSource.TASK),
            (context.project_rate_cents, RateSource.PROJECT),
            (context.user_default_rate_cents, RateSource.USER_DEFAULT),
        )
        for rate_cents, source in candidates:
            if _usable(rate_cents):
                return ResolvedRate(rate_cents, source)

        logger.debug(f"No hourly rate resolved for entry {entry_id}, pricing at 0")
        return UNRESOLVED_RATE

"""Caller-side cache of finance reports with event-driven invalidation.

The engine itself is stateless. Views that rebuild the same report often
(the dashboard polling, the finance panel re-rendering) go through this
cache, which drops entries when a FinanceEventBus reports a change.

Invalidation rules:
- an event carrying a ``task_id`` drops that task's reports and every
  project report
- an event without a ``task_id`` (project-level cost, project settings)
  drops everything

A report whose build overlaps an invalidation is returned to its caller
but not stored.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, Hashable, Optional, Tuple

from task_finance.config.settings import FinanceEngineConfig, get_config
from task_finance.models.snapshot import FinanceSnapshot
from task_finance.reports.finance_engine import (
    FinanceEngine,
    ProjectFinanceReport,
    TaskFinanceReport,
)
from task_finance.services.event_bus import FinanceEvent, FinanceEventBus

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]

TASK_REPORT = "task"
PROJECT_REPORT = "project"


class FinanceReportCache:
    """
    Thread-safe LRU cache in front of a FinanceEngine.

    Features:
    - One entry per (report kind, task or project, snapshot, window)
    - Snapshots without a ``snapshot_id`` are never cached
    - LRU eviction when ``cache_max_size`` is exceeded
    - Invalidation driven by FinanceEventBus events
    - Hit/miss statistics

    Example:
        >>> bus = FinanceEventBus()
        >>> cache = FinanceReportCache(FinanceEngine(), event_bus=bus)
        >>> report = cache.get_task_report(snapshot, "task-1")
        >>> bus.publish("time_entry_changed", task_id="task-1")
        >>> cache.get_task_report(snapshot, "task-1")  # rebuilt
    """

    def __init__(
        self,
        engine: Optional[FinanceEngine] = None,
        config: Optional[FinanceEngineConfig] = None,
        event_bus: Optional[FinanceEventBus] = None,
    ):
        """
        Initialize the cache.

        Args:
            engine: Engine used to build reports on a miss
            config: Configuration with cache settings
            event_bus: Bus to subscribe to for invalidation (optional)
        """
        self.config = config or get_config()
        self.engine = engine or FinanceEngine(self.config)
        self.enabled = self.config.enable_report_cache
        self.max_size = self.config.cache_max_size

        self._cache: "OrderedDict[CacheKey, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0, "evictions": 0, "invalidations": 0}
        self._generation = 0
        self._unsubscribers = []

        if event_bus is not None:
            self.attach(event_bus)

        logger.info(
            f"FinanceReportCache initialized (enabled={self.enabled}, "
            f"max_size={self.max_size})"
        )

    def attach(self, event_bus: FinanceEventBus) -> None:
        """Subscribe to every finance event on the bus."""
        for event in FinanceEvent:
            self._unsubscribers.append(event_bus.subscribe(event, self._on_event))

    def detach(self) -> None:
        """Remove all bus subscriptions."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    @staticmethod
    def _snapshot_key(snapshot: FinanceSnapshot) -> Tuple[Hashable, ...]:
        return (
            snapshot.snapshot_id,
            snapshot.as_of,
            snapshot.window_start,
            snapshot.window_end,
        )

    def get_task_report(
        self, snapshot: FinanceSnapshot, task_id: str
    ) -> TaskFinanceReport:
        """Cached ``FinanceEngine.build_task_report``."""
        key = (TASK_REPORT, task_id) + self._snapshot_key(snapshot)
        return self._get_or_build(
            snapshot, key, lambda: self.engine.build_task_report(snapshot, task_id)
        )

    def get_project_report(
        self, snapshot: FinanceSnapshot, completed_only: bool = False
    ) -> ProjectFinanceReport:
        """Cached ``FinanceEngine.build_project_report``."""
        project_id = snapshot.project.id if snapshot.project else None
        key = (PROJECT_REPORT, project_id, completed_only) + self._snapshot_key(
            snapshot
        )
        return self._get_or_build(
            snapshot,
            key,
            lambda: self.engine.build_project_report(snapshot, completed_only),
        )

    def _get_or_build(self, snapshot: FinanceSnapshot, key: CacheKey, build) -> Any:
        if not self.enabled or snapshot.snapshot_id is None:
            return build()

        with self._lock:
            if key in self._cache:
                self._stats["hits"] += 1
                self._cache.move_to_end(key)
                logger.debug(f"Report cache hit for {key}")
                return self._cache[key]
            self._stats["misses"] += 1
            generation = self._generation

        # Built outside the lock; a concurrent miss on the same key only
        # builds the same report twice.
        report = build()

        with self._lock:
            if generation != self._generation:
                logger.debug(f"Not caching {key}: invalidated during build")
                return report
            self._cache[key] = report
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_size:
                evicted, _ = self._cache.popitem(last=False)
                self._stats["evictions"] += 1
                logger.debug(f"Evicted report {evicted} from cache")
        return report

    def _on_event(self, event: FinanceEvent, task_id: Optional[str] = None, **_) -> None:
        self.invalidate(task_id)

    def invalidate(self, task_id: Optional[str] = None) -> int:
        """
        Drop cached reports.

        Args:
            task_id: Task whose reports to drop together with every project
                report. If None, clear the whole cache.

        Returns:
            Number of entries removed
        """
        with self._lock:
            self._generation += 1
            if task_id is None:
                keys = list(self._cache)
            else:
                keys = [
                    key
                    for key in self._cache
                    if key[0] == PROJECT_REPORT
                    or (key[0] == TASK_REPORT and key[1] == task_id)
                ]
            for key in keys:
                del self._cache[key]
            self._stats["invalidations"] += len(keys)

        logger.info(
            f"Invalidated {len(keys)} cached reports "
            f"(task_id={task_id or 'all'})"
        )
        return len(keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_cache_statistics(self) -> Dict[str, Any]:
        """Hit/miss counters and current size."""
        with self._lock:
            lookups = self._stats["hits"] + self._stats["misses"]
            return {
                **self._stats,
                "entries": len(self._cache),
                "max_size": self.max_size,
                "hit_rate_percent": (
                    self._stats["hits"] / lookups * 100 if lookups else 0.0
                ),
            }

"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import json
from decimal import Decimal
from typing import Any, Dict

import pytest

from task_finance.config import FinanceEngineConfig, reload_config
from task_finance.config.logging_config import reset_logging
from task_finance.models import (
    CostItem,
    FinanceSettings,
    FinanceSnapshot,
    Project,
    Task,
    TimeEntry,
)


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'ENVIRONMENT': 'testing',
        'DEBUG': 'true',
        'LOG_LEVEL': 'DEBUG',
        'DISPLAY_TIMEZONE': 'Europe/Bratislava',
        'DEFAULT_COMMISSION_PERCENT': '10',
    }


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Drop the cached global config and logging handlers around each test."""
    import task_finance.config.settings

    for key in ('LOG_LEVEL', 'LOG_FORMAT', 'LOG_FILE', 'LOG_FILE_ENABLED'):
        monkeypatch.delenv(key, raising=False)
    task_finance.config.settings._config = None

    yield

    task_finance.config.settings._config = None
    reset_logging()


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    yield test_env_vars


@pytest.fixture
def test_config(mock_env) -> FinanceEngineConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def make_entry():
    """Factory for TimeEntry objects with sensible defaults."""
    counter = {'n': 0}

    def factory(**overrides) -> TimeEntry:
        counter['n'] += 1
        values: Dict[str, Any] = {
            'id': f"te-{counter['n']}",
            'task_id': 'task-1',
            'user_id': 'user-1',
            'user_name': 'Alice',
            'date': dt.date(2024, 3, 4),
            'hours': Decimal('1'),
            'billing_type': 'regular',
        }
        values.update(overrides)
        return TimeEntry(**values)

    return factory


@pytest.fixture
def make_cost():
    """Factory for CostItem objects with sensible defaults."""
    counter = {'n': 0}

    def factory(**overrides) -> CostItem:
        counter['n'] += 1
        values: Dict[str, Any] = {
            'id': f"cost-{counter['n']}",
            'task_id': 'task-1',
            'name': 'Figma licence',
            'amount_cents': 4500,
            'date': dt.date(2024, 3, 5),
        }
        values.update(overrides)
        return CostItem(**values)

    return factory


@pytest.fixture
def sample_project() -> Project:
    """Project with a default rate of 50 €/h."""
    return Project(
        id='proj-1',
        name='Website Redesign',
        client_name='ACME s.r.o.',
        finance=FinanceSettings(hourly_rate_cents=5000),
    )


@pytest.fixture
def budget_task() -> Task:
    """Task with a 1000 € fixed budget."""
    return Task(
        id='task-1',
        title='Landing page',
        status='in_progress',
        project_id='proj-1',
        finance=FinanceSettings(fixed_budget_cents=100000),
    )


@pytest.fixture
def sample_snapshot(sample_project, budget_task, make_entry, make_cost) -> FinanceSnapshot:
    """Snapshot with regular, extra and external activity on one task."""
    return FinanceSnapshot(
        snapshot_id='snap-1',
        project=sample_project,
        tasks=[budget_task],
        time_entries=[
            make_entry(date=dt.date(2024, 3, 4), hours=Decimal('8')),
            make_entry(date=dt.date(2024, 3, 5), hours=Decimal('6'),
                       user_id='user-2', user_name='Bob'),
            make_entry(date=dt.date(2024, 3, 6), hours=Decimal('10'),
                       billing_type='extra'),
        ],
        cost_items=[make_cost(date=dt.date(2024, 3, 5))],
        as_of=dt.date(2024, 3, 31),
    )


@pytest.fixture
def sample_snapshot_data() -> Dict[str, Any]:
    """Raw JSON snapshot document in the shapes the data layer produces."""
    return {
        'snapshot_id': 'snap-json',
        'as_of': '2024-03-31',
        'project': {
            'id': 'proj-1',
            'name': 'Website Redesign',
            'client': {'name': 'ACME s.r.o.'},
            'hourly_rate': 50,
            'sales_commission_enabled': True,
        },
        'tasks': [
            {'id': 'task-1', 'title': 'Landing page', 'status': 'done',
             'budget_cents': 100000},
            {'id': 'task-2', 'title': 'Blog', 'status': 'todo',
             'finance': {'fixed_budget_cents': 50000,
                         'sales_commission_percent': 5}},
        ],
        'time_entries': [
            {'id': 'te-1', 'task_id': 'task-1', 'user_id': 'user-1',
             'user_name': 'Alice', 'date': '2024-03-04', 'hours': 10},
            {'id': 'te-2', 'task_id': 'task-1', 'user': {'id': 'user-2', 'name': 'Bob'},
             'date': '2024-03-05', 'hours': '15', 'billing_type': 'tm'},
            {'id': 'te-3', 'task_id': 'task-2', 'assignee': {'user_id': 'user-1'},
             'date': '2024-03-05', 'duration_seconds': 5400, 'hourly_rate': 40},
        ],
        'cost_items': [
            {'id': 'cost-1', 'task_id': 'task-1', 'name': 'Figma',
             'amount': 45.0, 'date': '2024-03-05'},
            {'id': 'cost-2', 'project_id': 'proj-1', 'name': 'Hosting',
             'amount_cents': 2000, 'date': '2024-03-10'},
        ],
        'user_default_rates': {'user-1': 4000},
    }


@pytest.fixture
def snapshot_file(tmp_path, sample_snapshot_data):
    """Sample snapshot document written to a temporary JSON file."""
    path = tmp_path / 'snapshot.json'
    path.write_text(json.dumps(sample_snapshot_data), encoding='utf-8')
    return path


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

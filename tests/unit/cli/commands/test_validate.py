"""Unit tests for the validate command."""

import json

import pytest
from click.testing import CliRunner

from task_finance.cli.commands.validate import validate_snapshot


@pytest.fixture
def write_snapshot(tmp_path, sample_snapshot_data):
    """Write a modified copy of the sample snapshot and return its path."""

    def writer(modify):
        data = json.loads(json.dumps(sample_snapshot_data))
        modify(data)
        path = tmp_path / "modified.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return writer


class TestValidateCommand:
    """Test suite for the validate command."""

    @pytest.fixture
    def runner(self):
        """Create a Click CLI test runner."""
        return CliRunner()

    def test_clean_snapshot(self, runner, snapshot_file):
        """Test a clean snapshot passes."""
        result = runner.invoke(validate_snapshot, [str(snapshot_file)])

        assert result.exit_code == 0
        assert "No issues found" in result.output
        assert "Validation passed!" in result.output

    def test_warnings_do_not_fail(self, runner, write_snapshot):
        """Test warnings are listed but the exit code stays 0."""
        path = write_snapshot(
            lambda d: d["time_entries"][0].update(billing_type="fixed")
        )

        result = runner.invoke(validate_snapshot, [path])

        assert result.exit_code == 0
        assert "time_entries.billing_type" in result.output
        assert "1 warning(s)" in result.output

    def test_severity_filter(self, runner, write_snapshot):
        """Test --severity error hides warnings."""
        path = write_snapshot(
            lambda d: d["time_entries"][0].update(billing_type="fixed")
        )

        result = runner.invoke(validate_snapshot, [path, "--severity", "error"])

        assert result.exit_code == 0
        assert "time_entries.billing_type" not in result.output

    def test_errors_fail(self, runner, write_snapshot):
        """Test errors exit with the data validation code."""
        path = write_snapshot(lambda d: d["cost_items"][0].update(amount=-10))

        result = runner.invoke(validate_snapshot, [path])

        assert result.exit_code == 2
        assert "cost_items.amount_cents" in result.output
        assert "Validation failed with 1 error(s)" in result.output

    def test_json_output(self, runner, write_snapshot):
        """Test JSON output lists issues."""
        path = write_snapshot(lambda d: d["time_entries"][1].update(hours="0"))

        result = runner.invoke(validate_snapshot, [path, "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["warnings"] == 1
        assert data["issues"][0]["context"] == {"entry_id": "te-2", "task_id": "task-1"}

    def test_unreadable_snapshot(self, runner, tmp_path):
        """Test an unreadable snapshot exits with the data validation code."""
        path = tmp_path / "broken.json"
        path.write_text("[", encoding="utf-8")

        result = runner.invoke(validate_snapshot, [str(path)])

        assert result.exit_code == 2
        assert "not valid JSON" in result.output

"""Readers that turn raw snapshot documents into engine models."""

from task_finance.readers.snapshot_reader import SnapshotReader, SnapshotReadError

__all__ = ["SnapshotReadError", "SnapshotReader"]

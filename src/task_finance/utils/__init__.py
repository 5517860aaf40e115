"""Shared utilities for the finance engine."""

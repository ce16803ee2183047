"""Shared fixtures for the health scoring tests."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from health_engine import ProjectHealthData

FROZEN_NOW = datetime(2025, 1, 7, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock():
    return lambda: FROZEN_NOW


@pytest.fixture
def make_data():
    """Factory for ProjectHealthData; every metric defaults to a healthy value."""

    def _make(**overrides):
        base = dict(
            start_date=datetime(2024, 1, 1),
            end_date=datetime(2024, 12, 31),
            current_date=datetime(2023, 12, 1),   # before start: nothing expected yet
            budget_allocated=0,
            budget_spent=0,
            assigned_resources=10,
            required_resources=10,
            high_risks=0,
            medium_risks=0,
            low_risks=0,
            completed_tasks=10,
            total_tasks=10,
            open_issues=0,
            critical_issues=0,
            resolved_issues=0,
        )
        base.update(overrides)
        return ProjectHealthData(**base)

    return _make


@pytest.fixture
def portal_project():
    """Mid-schedule project used as the reference scenario."""
    return ProjectHealthData(
        start_date=datetime(2024, 1, 15),
        end_date=datetime(2025, 12, 31),
        current_date=datetime(2025, 1, 7),
        budget_allocated=5_000_000,
        budget_spent=1_750_000,
        assigned_resources=8,
        required_resources=10,
        high_risks=2,
        medium_risks=3,
        low_risks=1,
        completed_tasks=15,
        total_tasks=25,
        open_issues=2,
        critical_issues=1,
        resolved_issues=5,
    )


@pytest.fixture
def health_body():
    return {
        "startDate": "2024-01-15",
        "endDate": "2025-12-31",
        "currentDate": "2025-01-07T00:00:00Z",
        "budgetAllocated": 5000000,
        "budgetSpent": 1750000,
        "assignedResources": 8,
        "requiredResources": 10,
        "highRisks": 2,
        "mediumRisks": 3,
        "lowRisks": 1,
        "completedTasks": 15,
        "totalTasks": 25,
        "openIssues": 2,
        "criticalIssues": 1,
        "resolvedIssues": 5,
    }

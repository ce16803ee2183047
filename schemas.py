"""Request schemas for the health API (camelCase wire format)."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from health_engine import ProjectHealthData


class HealthRequest(BaseModel):
    """Body of ``POST /api/health/calculate``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")
    current_date: Optional[datetime] = Field(default=None, alias="currentDate")

    budget_allocated: float = Field(ge=0, alias="budgetAllocated")
    budget_spent: float = Field(ge=0, alias="budgetSpent")

    assigned_resources: float = Field(ge=0, alias="assignedResources")
    required_resources: float = Field(ge=0, alias="requiredResources")

    # risks, tasks and issues are whole counts: 2.0 is accepted, 2.5 is refused
    high_risks: int = Field(ge=0, alias="highRisks")
    medium_risks: int = Field(ge=0, alias="mediumRisks")
    low_risks: int = Field(ge=0, alias="lowRisks")

    completed_tasks: int = Field(ge=0, alias="completedTasks")
    total_tasks: int = Field(ge=0, alias="totalTasks")

    open_issues: int = Field(ge=0, alias="openIssues")
    critical_issues: int = Field(ge=0, alias="criticalIssues")
    resolved_issues: int = Field(ge=0, alias="resolvedIssues")

    @field_validator("start_date", "end_date", "current_date", mode="before")
    @classmethod
    def _require_iso_string(cls, v):
        # pydantic parses the ISO-8601 text itself; other shapes (epoch numbers) are refused
        if v is None or isinstance(v, datetime):
            return v
        if not isinstance(v, str):
            raise ValueError("expected an ISO-8601 date string")
        return v

    def to_health_data(self) -> ProjectHealthData:
        return ProjectHealthData(**self.model_dump())

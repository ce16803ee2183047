"""
Project health scoring.

Turns raw project metrics (schedule, budget, staffing, risk, task completion,
issue backlog) into six factor scores, a weighted overall score, a status /
color pair and a list of recommendations. Pure computation: the only outside
input is the clock, and that can be passed in.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from health_config import (
    CRITICAL_THRESHOLD,
    FACTOR_ORDER,
    FACTOR_WEIGHTS,
    HEALTH_COLORS,
    RECOMMENDATIONS,
    SCORING_PARAMS,
    STATUS_THRESHOLDS,
    WARNING_THRESHOLD,
)

logger = logging.getLogger(__name__)

LogFn = Callable[..., None]
Clock = Callable[[], datetime]


def clamp(v, lo=0.0, hi=100.0):
    return max(lo, min(hi, v))


def _finite_or(v, fallback):
    return float(v) if np.isfinite(v) else float(fallback)


def _as_float(v):
    # counts arrive as unbounded ints; past float range they saturate to inf
    try:
        return float(v)
    except OverflowError:
        return float("inf") if v > 0 else float("-inf")


def _utc(dt: datetime) -> datetime:
    # naive datetimes are taken as UTC so naive and aware inputs can be mixed
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProjectHealthData:
    """Raw metrics for one project at one point in time."""

    start_date: datetime
    end_date: datetime
    budget_allocated: float
    budget_spent: float
    assigned_resources: float
    required_resources: float
    high_risks: int
    medium_risks: int
    low_risks: int
    completed_tasks: int
    total_tasks: int
    open_issues: int
    critical_issues: int
    resolved_issues: int
    current_date: Optional[datetime] = None


@dataclass
class HealthFactors:
    timeline_health: float
    budget_health: float
    resource_health: float
    risk_health: float
    progress_health: float
    issue_health: float

    def by_name(self) -> Dict[str, float]:
        return {
            "timeline": self.timeline_health,
            "budget":   self.budget_health,
            "resource": self.resource_health,
            "risk":     self.risk_health,
            "progress": self.progress_health,
            "issue":    self.issue_health,
        }

    def as_ranked(self) -> List[Tuple[str, float]]:
        """(factor, score) pairs worst first; ties keep FACTOR_ORDER."""
        scores = self.by_name()
        return sorted(((name, scores[name]) for name in FACTOR_ORDER), key=lambda x: x[1])

    def to_dict(self) -> Dict[str, float]:
        return {
            "timelineHealth": round(self.timeline_health, 2),
            "budgetHealth":   round(self.budget_health, 2),
            "resourceHealth": round(self.resource_health, 2),
            "riskHealth":     round(self.risk_health, 2),
            "progressHealth": round(self.progress_health, 2),
            "issueHealth":    round(self.issue_health, 2),
        }


@dataclass
class HealthScore:
    overall_score: int
    health_status: str
    health_color: str
    factors: HealthFactors
    recommendations: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, object]:
        return {
            "overallScore":    self.overall_score,
            "healthStatus":    self.health_status,
            "healthColor":     self.health_color,
            "factors":         self.factors.to_dict(),
            "recommendations": list(self.recommendations),
            "lastUpdated":     self.last_updated.isoformat(),
        }


# ── Shared ratios ─────────────────────────────────────────────────────────────

def expected_progress(start: datetime, end: datetime, current: datetime) -> float:
    """
    Fraction of the schedule that has elapsed, in [0, 1].

    Before the start this is 0, on or after the end it is 1. A zero or
    negative duration counts as fully elapsed once the start has passed.
    """
    start, end, current = _utc(start), _utc(end), _utc(current)
    if current >= end:
        return 1.0
    total = (end - start).total_seconds()
    if total <= 0:
        return 1.0 if current >= start else 0.0
    elapsed = (current - start).total_seconds()
    return clamp(elapsed / total, 0.0, 1.0)


def task_completion(completed, total) -> float:
    """completed / total in [0, 1]; 0 when there are no tasks."""
    completed, total = _as_float(completed), _as_float(total)
    if total <= 0:
        return 0.0
    ratio = completed / total
    if np.isnan(ratio):
        return 0.0
    return clamp(ratio, 0.0, 1.0)


# ── Factor scores (each in [0, 100]) ──────────────────────────────────────────

def timeline_health(expected: float, actual: float, params=None) -> float:
    # Only lagging behind the elapsed-time expectation costs points
    P = params or SCORING_PARAMS
    lag = max(0.0, expected - actual)
    return clamp(100.0 - lag * 100.0 * P["schedule_lag_penalty"])


def budget_health(allocated, spent, expected: float, params=None) -> float:
    P = params or SCORING_PARAMS
    allocated, spent = _as_float(allocated), _as_float(spent)
    if allocated <= 0:
        # nothing allocated, nothing can be overspent
        return 100.0
    ratio = spent / allocated
    if not np.isfinite(ratio):
        # spend too large to express as a ratio of the allocation
        return 0.0 if spent > 0 else 100.0
    overrun = max(0.0, ratio - expected)
    return clamp(100.0 - overrun * 100.0 * P["budget_overrun_penalty"])


def resource_health(assigned, required) -> float:
    assigned, required = _as_float(assigned), _as_float(required)
    if required <= 0:
        return 100.0
    ratio = _finite_or(assigned / required, 1.0)
    return clamp(min(ratio, 1.0) * 100.0)


def risk_health(high, medium, low, params=None) -> float:
    P = params or SCORING_PARAMS
    penalty = (_as_float(high)   * P["risk_weight_high"] +
               _as_float(medium) * P["risk_weight_medium"] +
               _as_float(low)    * P["risk_weight_low"])
    if not np.isfinite(penalty):
        return 0.0
    return clamp(100.0 - penalty)


def progress_health(actual: float) -> float:
    return clamp(actual * 100.0)


def issue_health(open_issues, critical, resolved, params=None) -> float:
    P = params or SCORING_PARAMS
    penalty = (_as_float(open_issues) * P["issue_weight_open"] +
               _as_float(critical)    * P["issue_weight_critical"])
    if not np.isfinite(penalty):
        return 0.0
    credit = min(_as_float(resolved) * P["issue_credit_resolved"], penalty * P["issue_credit_cap"])
    return clamp(100.0 - penalty + credit)


def calculate_health_factors(data: ProjectHealthData, current: datetime) -> HealthFactors:
    expected = expected_progress(data.start_date, data.end_date, current)
    actual   = task_completion(data.completed_tasks, data.total_tasks)

    return HealthFactors(
        timeline_health=_finite_or(timeline_health(expected, actual), 100.0),
        budget_health=_finite_or(
            budget_health(data.budget_allocated, data.budget_spent, expected), 100.0),
        resource_health=_finite_or(
            resource_health(data.assigned_resources, data.required_resources), 100.0),
        risk_health=_finite_or(
            risk_health(data.high_risks, data.medium_risks, data.low_risks), 100.0),
        progress_health=_finite_or(progress_health(actual), 0.0),
        issue_health=_finite_or(
            issue_health(data.open_issues, data.critical_issues, data.resolved_issues), 100.0),
    )


# ── Aggregation, status, recommendations ──────────────────────────────────────

def overall_score(factors: HealthFactors, weights=None) -> int:
    W = weights or FACTOR_WEIGHTS
    scores = factors.by_name()
    vec_s = np.array([scores[name] for name in FACTOR_ORDER], dtype=float)
    vec_w = np.array([W[name] for name in FACTOR_ORDER], dtype=float)
    total = _finite_or(float(np.dot(vec_s, vec_w)), 0.0)
    return int(round(clamp(total)))


def health_status(score) -> str:
    for floor, status in STATUS_THRESHOLDS:
        if score >= floor:
            return status
    return STATUS_THRESHOLDS[-1][1]


def health_color(status: str) -> str:
    return HEALTH_COLORS[status]


def generate_recommendations(factors: HealthFactors) -> List[str]:
    """One message per factor under WARNING_THRESHOLD, worst factor first."""
    recs = []
    for name, score in factors.as_ranked():
        if score >= WARNING_THRESHOLD:
            continue
        advisory, urgent = RECOMMENDATIONS[name]
        recs.append(urgent if score < CRITICAL_THRESHOLD else advisory)
    return recs


def _default_log(message: str, **fields) -> None:
    if fields:
        message = message + " " + " ".join(f"{k}={v}" for k, v in fields.items())
    logger.debug(message)


def calculate_health_score(
    data: ProjectHealthData,
    log: Optional[LogFn] = None,
    now: Optional[Clock] = None,
) -> HealthScore:
    """
    Score one project.

    Parameters
    ----------
    data : ProjectHealthData
        Raw metrics. ``current_date`` falls back to ``now()`` when unset.
    log : callable, optional
        ``log(message, **fields)`` observability hook. Defaults to the
        module logger at DEBUG.
    now : callable, optional
        Clock returning a datetime; used for the default current date and
        for ``last_updated``. Defaults to the UTC wall clock.

    Never raises for well-typed input; every score is finite and in [0, 100].
    """
    log = log or _default_log
    clock = now or _utcnow

    computed_at = _utc(clock())
    current = data.current_date if data.current_date is not None else computed_at

    factors = calculate_health_factors(data, current)
    score   = overall_score(factors)
    status  = health_status(score)
    recs    = generate_recommendations(factors)

    log("project health calculated",
        overall_score=score, status=status, recommendations=len(recs))

    return HealthScore(
        overall_score=score,
        health_status=status,
        health_color=health_color(status),
        factors=factors,
        recommendations=recs,
        last_updated=computed_at,
    )

"""
Scoring constants for the project health engine.

Everything numeric the scorer depends on lives here so the weights, the
status bands and the recommendation wording are stated in one place.
"""

# Overall score = sum(factor * weight). Timeline and budget are leading
# indicators, risk is weighted with them; issues lag the most.
FACTOR_WEIGHTS = {
    "timeline":  0.20,
    "budget":    0.20,
    "resource":  0.15,
    "risk":      0.20,
    "progress":  0.15,
    "issue":     0.10,
}

# Fixed evaluation / tie-break order for factors
FACTOR_ORDER = ("timeline", "budget", "resource", "risk", "progress", "issue")

# Descending (floor, status). First floor the score reaches wins.
STATUS_THRESHOLDS = (
    (85, "excellent"),
    (70, "good"),
    (50, "fair"),
    (30, "poor"),
    (0,  "critical"),
)

HEALTH_COLORS = {
    "excellent": "green",
    "good":      "yellow",
    "fair":      "orange",
    "poor":      "red",
    "critical":  "dark-red",
}

WARNING_THRESHOLD  = 60   # factor below this gets a recommendation
CRITICAL_THRESHOLD = 40   # factor below this gets the urgent wording

SCORING_PARAMS = {
    "schedule_lag_penalty":   1.0,   # pts lost per pct point behind expected progress
    "budget_overrun_penalty": 2.0,   # pts lost per pct point of spend ahead of schedule
    "risk_weight_high":       10,
    "risk_weight_medium":     5,
    "risk_weight_low":        2,
    "issue_weight_open":      5,
    "issue_weight_critical":  15,
    "issue_credit_resolved":  2,     # pts back per resolved issue
    "issue_credit_cap":       0.5,   # resolved credit never exceeds half the penalty
}

# factor -> (advisory, urgent)
RECOMMENDATIONS = {
    "timeline": (
        "Schedule is slipping behind elapsed time - review the timeline and identify bottlenecks",
        "Project is far behind schedule - re-baseline the plan and add resources to critical path tasks",
    ),
    "budget": (
        "Budget utilization is outpacing schedule progress - review spending controls",
        "Budget overrun detected - review expenses immediately",
    ),
    "resource": (
        "Resource allocation needs attention - rebalance assignments to cover required roles",
        "Project is severely understaffed - consider hiring or reassigning team members",
    ),
    "risk": (
        "Open risk load is high - develop mitigation strategies for high-severity risks",
        "Risk exposure is critical - escalate high-severity risks and schedule a risk review",
    ),
    "progress": (
        "Task completion is low - review task assignments and dependencies",
        "Very few tasks are complete - reassess scope and delivery plan",
    ),
    "issue": (
        "Issue backlog is growing - prioritize resolution of open issues",
        "Critical issues require immediate attention - set up an issue triage process",
    ),
}


def _check_weights(weights):
    if set(weights) != set(FACTOR_ORDER):
        raise ValueError(f"weights must cover exactly {FACTOR_ORDER}, got {sorted(weights)}")
    total = sum(weights.values())
    if abs(total - 1.0) > 1e-9:
        raise ValueError(f"factor weights must sum to 1.0, got {total}")


_check_weights(FACTOR_WEIGHTS)


def defaults():
    """JSON-ready snapshot of the scoring configuration."""
    return {
        "weights":           dict(FACTOR_WEIGHTS),
        "statusThresholds":  [{"min": floor, "status": s} for floor, s in STATUS_THRESHOLDS],
        "colors":            dict(HEALTH_COLORS),
        "warningThreshold":  WARNING_THRESHOLD,
        "criticalThreshold": CRITICAL_THRESHOLD,
        "params":            dict(SCORING_PARAMS),
    }

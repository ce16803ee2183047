import logging
import os

import pandas as pd
from flask import Flask, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

import health_config
from health_engine import ProjectHealthData, calculate_health_score
from schemas import HealthRequest

app = Flask(__name__)

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

DATA_PATH = os.environ.get(
    "PROJECT_DATA_PATH",
    os.path.join(os.path.dirname(__file__), "data.csv"),
)

DATE_COLS  = ["start_date", "end_date", "current_date"]
COUNT_COLS = ["high_risks", "medium_risks", "low_risks", "completed_tasks", "total_tasks",
              "open_issues", "critical_issues", "resolved_issues"]
AMOUNT_COLS = ["budget_allocated", "budget_spent", "assigned_resources", "required_resources"]


class ProjectNotFoundError(Exception):
    """No row for the requested project id."""


def load_data(path=None):
    df = pd.read_csv(path or DATA_PATH, dtype={"project_id": str})
    df = df.dropna(how="all")
    for col in DATE_COLS:
        if col not in df.columns:
            df[col] = pd.NaT
        df[col] = pd.to_datetime(df[col], errors="coerce")
    df[COUNT_COLS]  = df[COUNT_COLS].fillna(0).astype(int)
    df[AMOUNT_COLS] = df[AMOUNT_COLS].fillna(0).astype(float)
    return df


def row_to_health_data(r):
    """Build ProjectHealthData from one CSV row; blank current_date means now."""
    return ProjectHealthData(
        start_date=r["start_date"].to_pydatetime(),
        end_date=r["end_date"].to_pydatetime(),
        current_date=r["current_date"].to_pydatetime() if pd.notna(r["current_date"]) else None,
        **{c: float(r[c]) for c in AMOUNT_COLS},
        **{c: int(r[c]) for c in COUNT_COLS},
    )


def find_project(df, project_id):
    match = df[df["project_id"] == str(project_id)]
    if match.empty:
        raise ProjectNotFoundError(project_id)
    return match.iloc[0]


def _log_to_app(message, **fields):
    app.logger.debug("%s %s", message, fields)


def score_payload(data):
    health = calculate_health_score(data, log=_log_to_app)
    return health.to_dict()


# ── Error handlers ────────────────────────────────────────────────────────────

@app.errorhandler(ValidationError)
def handle_validation_error(err):
    details = [
        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
        for e in err.errors()
    ]
    return jsonify({"success": False, "error": "Invalid project health data",
                    "details": details}), 400


@app.errorhandler(ProjectNotFoundError)
def handle_not_found(err):
    return jsonify({"success": False, "error": f"Project not found: {err}"}), 404


@app.errorhandler(Exception)
def handle_unexpected(err):
    if isinstance(err, HTTPException):
        return err
    app.logger.exception("Error calculating project health")
    return jsonify({"success": False, "error": "Failed to calculate project health"}), 500


# ── Routes ────────────────────────────────────────────────────────────────────

@app.route("/api/health", methods=["GET"])
def list_project_health():
    df = load_data()
    projects = []
    for _, r in df.iterrows():
        health = score_payload(row_to_health_data(r))
        projects.append({
            "projectId":   r["project_id"],
            "projectName": None if pd.isna(r.get("project_name")) else r.get("project_name"),
            "health":      health,
        })
    projects.sort(key=lambda p: p["health"]["overallScore"])
    return jsonify({"success": True, "projects": projects})


@app.route("/api/health/<project_id>", methods=["GET"])
def project_health(project_id):
    r = find_project(load_data(), project_id)
    return jsonify({
        "success":   True,
        "projectId": r["project_id"],
        "health":    score_payload(row_to_health_data(r)),
    })


@app.route("/api/health/calculate", methods=["POST"])
def calculate_health():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"success": False, "error": "Request body must be a JSON object"}), 400
    data = HealthRequest.model_validate(body).to_health_data()
    return jsonify({"success": True, "health": score_payload(data)})


@app.route("/api/health/config/defaults", methods=["GET"])
def scoring_defaults():
    return jsonify(health_config.defaults())


if __name__ == "__main__":
    app.run(debug=True, port=int(os.environ.get("PORT", 5050)))

"""Prometheus metrics for monitoring risk tiers, DSCR statuses and simulation outcomes"""

from typing import Iterable, Optional

from prometheus_client import Counter, Histogram

# Engine outcome metrics
dscr_status_counter = Counter(
    "finrisk_dscr_evaluations_total",
    "DSCR evaluations by status",
    ["status"],  # ok | warning | critical
)

risk_level_counter = Counter(
    "finrisk_risk_analysis_total",
    "Scenario comparisons by base risk tier",
    ["risk_level"],
)

cash_gap_level_counter = Counter(
    "finrisk_cash_gap_analysis_total",
    "Cash gap analyses by risk tier",
    ["risk_level"],
)

runway_status_counter = Counter(
    "finrisk_runway_analysis_total",
    "Runway analyses by status",
    ["status"],  # healthy | warning | critical
)

dashboard_risk_counter = Counter(
    "finrisk_dashboard_overview_total",
    "Dashboard overviews by combined risk tier",
    ["risk_level"],
)

aging_record_counter = Counter(
    "finrisk_aging_records_total",
    "Classified AR/AP records by report type and risk tier",
    ["report_type", "risk_level"],
)

simulation_counter = Counter(
    "finrisk_simulation_runs_total",
    "Forward simulations by horizon and outcome",
    ["horizon_months", "outcome"],  # outcome: deficit | solvent
)

validation_failure_counter = Counter(
    "finrisk_validation_failures_total",
    "Inputs rejected by the engine",
    ["error"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(horizon_months: int, cash_deficit_month: Optional[int]) -> None:
    """Record a simulation run, split by whether cash went negative"""
    outcome = "deficit" if cash_deficit_month is not None else "solvent"
    simulation_counter.labels(horizon_months=str(horizon_months), outcome=outcome).inc()


def record_aging(report_type: str, risk_levels: Iterable[str]) -> None:
    for risk_level in risk_levels:
        aging_record_counter.labels(report_type=report_type, risk_level=risk_level).inc()


def record_validation_failure(error: Exception) -> None:
    validation_failure_counter.labels(error=type(error).__name__).inc()

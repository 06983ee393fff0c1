"""Weights, tier thresholds and projection assumptions shared by every engine component.

Widgets that display the same figure must read it through these constants so
the summary card and the detail table can never disagree.
"""

from decimal import Decimal

# Risk factor weights (impact points per percentage point of delta)
FX_WEIGHT = Decimal("2.0")
RATE_WEIGHT = Decimal("1.0")
INFLATION_WEIGHT = Decimal("1.5")
LIQUIDITY_WEIGHT = Decimal("2.0")

MAX_SCORE = Decimal("100")
MIN_SCORE = Decimal("0")

# Score tiers: score >= threshold lands in that tier
SCORE_LOW_RISK = Decimal("80")
SCORE_MEDIUM_RISK = Decimal("60")
SCORE_HIGH_RISK = Decimal("40")

# Recommendation triggers on the base score
SCORE_URGENT_RECOMMENDATION = Decimal("50")
SCORE_HEALTHY_RECOMMENDATION = Decimal("70")

# DSCR bands (lower edge inclusive)
DSCR_OK = Decimal("1.5")
DSCR_WARNING = Decimal("1.0")

# Best/worst scenarios scale every delta of the base scenario
BEST_CASE_MULTIPLIER = Decimal("0.5")
WORST_CASE_MULTIPLIER = Decimal("1.5")

# Cash sensitivity used when a scenario's cash is derived from a snapshot
SCENARIO_FX_EXPOSURE = Decimal("0.10")
SCENARIO_RATE_SENSITIVITY = Decimal("0.20")

# Advisory parameter ranges (inclusive), as offered by the dashboard sliders
PARAMETER_LIMITS = {
    "fx_delta": (Decimal("-50"), Decimal("50")),
    "rate_delta": (Decimal("-20"), Decimal("20")),
    "inflation_delta": (Decimal("-10"), Decimal("100")),
    "liquidity_gap": (Decimal("0"), Decimal("100")),
}

# Cash gap: shortfall as a share of total AP
CASH_GAP_MEDIUM_SHORTFALL = Decimal("0.10")
CASH_GAP_HIGH_SHORTFALL = Decimal("0.25")
CASH_GAP_NEAR_WINDOW_DAYS = 30
CASH_GAP_FAR_WINDOW_DAYS = 60

# Aging buckets: upper bound (inclusive) in days past due
AGING_BUCKETS = (
    (30, "0-30"),
    (60, "30-60"),
    (90, "60-90"),
)
AGING_OVERFLOW_BUCKET = "90+"
AGING_BUCKET_ORDER = ("0-30", "30-60", "60-90", "90+")

# Overdue balances at or above materiality escalate one tier, at or above
# this multiple of materiality two tiers
AGING_MAJOR_MATERIALITY_MULTIPLE = Decimal("2")

# Forward simulation
SIMULATION_HORIZONS = (3, 6, 12)
MONTHS_PER_YEAR = Decimal("12")
DEFAULT_FOREIGN_CURRENCY_SHARE = Decimal("0.15")

RISK_TIERS = ("low", "medium", "high", "critical")

# Runway: months of cash at the current burn (lower edge of the next tier)
RUNWAY_CRITICAL_MONTHS = Decimal("3")
RUNWAY_WARNING_MONTHS = Decimal("6")
DAYS_PER_MONTH = Decimal("30")
DEFAULT_RUNWAY_MONTHS = 12

# Cash-flow forecast confidence falls off with distance from as_of
FORECAST_HIGH_CONFIDENCE_MONTHS = 3
FORECAST_MEDIUM_CONFIDENCE_MONTHS = 6

"""Domain models - pure Python dataclasses representing engine inputs and results"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class ScenarioParameters:
    """Caller-supplied scenario deltas, in signed percentage points"""

    fx_delta: Decimal
    rate_delta: Decimal
    inflation_delta: Decimal
    liquidity_gap: Decimal

    def scaled(self, multiplier: Decimal) -> "ScenarioParameters":
        """Same scenario with every delta multiplied"""
        return ScenarioParameters(
            fx_delta=self.fx_delta * multiplier,
            rate_delta=self.rate_delta * multiplier,
            inflation_delta=self.inflation_delta * multiplier,
            liquidity_gap=self.liquidity_gap * multiplier,
        )


@dataclass(frozen=True)
class RiskFactors:
    """Weighted impact of each scenario delta"""

    fx_impact: Decimal
    rate_impact: Decimal
    inflation_impact: Decimal
    liquidity_impact: Decimal

    @property
    def total_impact(self) -> Decimal:
        return self.fx_impact + self.rate_impact + self.inflation_impact + self.liquidity_impact


@dataclass(frozen=True)
class RiskScenario:
    """One scored leg of a scenario comparison"""

    cash: Decimal
    score: Decimal  # 0-100, higher = lower risk
    factors: RiskFactors


@dataclass(frozen=True)
class RiskLevel:
    """Discrete risk tier with a human-readable description"""

    level: str  # low | medium | high | critical
    description: str


@dataclass(frozen=True)
class ScenarioInput:
    """Parameters and cash for a single comparison leg"""

    parameters: ScenarioParameters
    cash: Decimal


@dataclass
class ScenarioComparison:
    """Best/base/worst comparison with tier and recommendations"""

    best: RiskScenario
    base: RiskScenario
    worst: RiskScenario
    risk_level: RiskLevel
    recommendations: List[str]
    parameters: ScenarioParameters


@dataclass(frozen=True)
class DSCRResult:
    """Debt service coverage ratio and its status band"""

    dscr: Decimal  # may be Decimal("Infinity")
    status: str  # ok | warning | critical


@dataclass(frozen=True)
class LedgerItem:
    """Raw AR or AP line item supplied by persistence"""

    item_id: str
    kind: str  # "receivable" or "payable"
    counterparty: str
    invoice_date: Optional[date]
    due_date: Optional[date]
    current_amount: Decimal
    settled: bool = False


@dataclass(frozen=True)
class AgingRecord:
    """Classified AR/AP line item"""

    item_id: str
    counterparty: str
    invoice_date: Optional[date]
    due_date: date
    current_amount: Decimal
    aging_days: int
    aging_bucket: str  # 0-30 | 30-60 | 60-90 | 90+
    status: str  # outstanding | paid | overdue
    risk_level: str  # low | medium | high | critical


@dataclass(frozen=True)
class AgingBucketSummary:
    bucket: str
    amount: Decimal
    count: int
    percentage: Decimal


@dataclass
class AgingSummary:
    """Bucketed totals for an AR or AP aging report"""

    report_type: str  # ar | ap
    total_amount: Decimal
    total_count: int
    buckets: List[AgingBucketSummary]
    average_aging_days: int
    overdue_amount: Decimal
    overdue_count: int
    overdue_percentage: Decimal


@dataclass(frozen=True)
class TimelinePeriod:
    """One forward month of the cash-gap timeline"""

    period: str  # YYYY-MM
    ar_amount: Decimal
    ap_amount: Decimal
    net_cash_flow: Decimal
    cumulative_cash: Decimal


@dataclass
class CashGapAnalysis:
    """Reconciliation of receivables against payables"""

    total_ar: Decimal
    total_ap: Decimal
    cash_gap: Decimal
    ar_due_in_30_days: Decimal
    ap_due_in_30_days: Decimal
    net_gap_30_days: Decimal
    ar_due_in_60_days: Decimal
    ap_due_in_60_days: Decimal
    net_gap_60_days: Decimal
    risk_level: str
    recommendations: List[str] = field(default_factory=list)
    timeline: List[TimelinePeriod] = field(default_factory=list)


@dataclass(frozen=True)
class FinancialState:
    """Cash, debt and net worth at a point in time"""

    cash: Decimal
    debt: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class MonthProjection:
    month: int
    cash: Decimal
    debt: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class SimulationSummary:
    cash_deficit_month: Optional[int]
    total_cash_change: Decimal
    total_debt_change: Decimal
    total_net_worth_change: Decimal


@dataclass
class SimulationResult:
    """Output of a forward projection"""

    parameters: ScenarioParameters
    horizon_months: int
    current_state: FinancialState
    projections: List[MonthProjection]
    summary: SimulationSummary
    narrative: str  # human-readable digest of the summary


@dataclass(frozen=True)
class RunwayMonth:
    period: str  # YYYY-MM
    projected_cash: Decimal  # floored at zero
    expenses: Decimal
    net_cash: Decimal


@dataclass
class RunwayAnalysis:
    """How long current cash lasts at a given monthly burn"""

    current_cash: Decimal
    monthly_expenses: Decimal
    runway_months: Decimal  # may be Decimal("Infinity")
    runway_days: Decimal  # may be Decimal("Infinity")
    status: str  # healthy | warning | critical
    recommendations: List[str] = field(default_factory=list)
    monthly_breakdown: List[RunwayMonth] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardSummary:
    total_cash: Decimal
    total_ar: Decimal
    total_ap: Decimal
    net_position: Decimal
    runway_status: str
    cash_gap_status: str


@dataclass
class DashboardOverview:
    """Runway and cash gap side by side with a combined tier"""

    runway: RunwayAnalysis
    cash_gap: CashGapAnalysis
    overall_risk: str  # low | medium | high | critical
    summary: DashboardSummary


@dataclass(frozen=True)
class ForecastMonth:
    """One month of the opening-to-closing cash forecast"""

    period: str
    opening_cash: Decimal
    projected_inflows: Decimal
    projected_outflows: Decimal
    net_cash_flow: Decimal
    closing_cash: Decimal
    confidence: str  # high | medium | low

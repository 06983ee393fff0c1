"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finrisk_engine.domain.models import (
    AgingRecord,
    AgingSummary,
    CashGapAnalysis,
    DashboardOverview,
    ForecastMonth,
    RiskScenario,
    RunwayAnalysis,
    ScenarioComparison,
    ScenarioParameters,
    SimulationResult,
)


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportType(str, Enum):
    AR = "ar"
    AP = "ap"

    @property
    def ledger_kind(self) -> str:
        return "receivable" if self is ReportType.AR else "payable"


# --- DSCR ---


class DSCRResponse(CamelModel):
    """Response for GET /api/dscr"""

    dscr: str = Field(..., description="Decimal string; 'Infinity' when there is no debt service")
    status: str


# --- Risk ---


class ScenarioParametersSchema(CamelModel):
    """Request body for POST /api/risk/analyze"""

    fx_delta: Decimal = Field(..., description="FX rate change (%)")
    rate_delta: Decimal = Field(..., description="Interest rate change (%)")
    inflation_delta: Decimal = Field(..., description="Inflation change (%)")
    liquidity_gap: Decimal = Field(..., description="Liquidity gap (%)")

    @classmethod
    def from_domain(cls, params: ScenarioParameters) -> "ScenarioParametersSchema":
        return cls(
            fx_delta=params.fx_delta,
            rate_delta=params.rate_delta,
            inflation_delta=params.inflation_delta,
            liquidity_gap=params.liquidity_gap,
        )


class RiskFactorsSchema(CamelModel):
    fx_impact: Decimal
    rate_impact: Decimal
    inflation_impact: Decimal
    liquidity_impact: Decimal
    total_impact: Decimal


class RiskScenarioSchema(CamelModel):
    cash: Decimal
    score: Decimal
    factors: RiskFactorsSchema

    @classmethod
    def from_domain(cls, scenario: RiskScenario) -> "RiskScenarioSchema":
        factors = scenario.factors
        return cls(
            cash=scenario.cash,
            score=scenario.score,
            factors=RiskFactorsSchema(
                fx_impact=factors.fx_impact,
                rate_impact=factors.rate_impact,
                inflation_impact=factors.inflation_impact,
                liquidity_impact=factors.liquidity_impact,
                total_impact=factors.total_impact,
            ),
        )


class RiskLevelSchema(CamelModel):
    level: str
    description: str


class ScenarioComparisonResponse(CamelModel):
    """Response for POST /api/risk/analyze"""

    best: RiskScenarioSchema
    base: RiskScenarioSchema
    worst: RiskScenarioSchema
    risk_level: RiskLevelSchema
    recommendations: List[str]
    parameters: ScenarioParametersSchema
    base_cash: Decimal

    @classmethod
    def from_domain(cls, comparison: ScenarioComparison, base_cash: Decimal) -> "ScenarioComparisonResponse":
        return cls(
            best=RiskScenarioSchema.from_domain(comparison.best),
            base=RiskScenarioSchema.from_domain(comparison.base),
            worst=RiskScenarioSchema.from_domain(comparison.worst),
            risk_level=RiskLevelSchema(
                level=comparison.risk_level.level,
                description=comparison.risk_level.description,
            ),
            recommendations=comparison.recommendations,
            parameters=ScenarioParametersSchema.from_domain(comparison.parameters),
            base_cash=base_cash,
        )


class ParameterCheckSchema(CamelModel):
    value: Decimal
    min: Decimal
    max: Decimal
    valid: bool
    message: str


class ParameterValidationResponse(CamelModel):
    """Response for GET /api/risk/parameters/validate"""

    valid: bool
    validation: Dict[str, ParameterCheckSchema]


# --- Cash gap ---


class TimelinePeriodSchema(CamelModel):
    period: str
    ar_amount: Decimal
    ap_amount: Decimal
    net_cash_flow: Decimal
    cumulative_cash: Decimal


class CashGapResponse(CamelModel):
    """Response for GET /api/dashboard/cashgap"""

    total_ar: Decimal = Field(..., alias="totalAR")
    total_ap: Decimal = Field(..., alias="totalAP")
    cash_gap: Decimal
    ar_due_in_30_days: Decimal = Field(..., alias="arDueIn30Days")
    ap_due_in_30_days: Decimal = Field(..., alias="apDueIn30Days")
    net_gap_30_days: Decimal = Field(..., alias="netGap30Days")
    ar_due_in_60_days: Decimal = Field(..., alias="arDueIn60Days")
    ap_due_in_60_days: Decimal = Field(..., alias="apDueIn60Days")
    net_gap_60_days: Decimal = Field(..., alias="netGap60Days")
    risk_level: str
    recommendations: List[str]
    timeline: List[TimelinePeriodSchema]
    as_of: date

    @classmethod
    def from_domain(cls, analysis: CashGapAnalysis, as_of: date) -> "CashGapResponse":
        return cls(
            total_ar=analysis.total_ar,
            total_ap=analysis.total_ap,
            cash_gap=analysis.cash_gap,
            ar_due_in_30_days=analysis.ar_due_in_30_days,
            ap_due_in_30_days=analysis.ap_due_in_30_days,
            net_gap_30_days=analysis.net_gap_30_days,
            ar_due_in_60_days=analysis.ar_due_in_60_days,
            ap_due_in_60_days=analysis.ap_due_in_60_days,
            net_gap_60_days=analysis.net_gap_60_days,
            risk_level=analysis.risk_level,
            recommendations=analysis.recommendations,
            timeline=[
                TimelinePeriodSchema(
                    period=p.period,
                    ar_amount=p.ar_amount,
                    ap_amount=p.ap_amount,
                    net_cash_flow=p.net_cash_flow,
                    cumulative_cash=p.cumulative_cash,
                )
                for p in analysis.timeline
            ],
            as_of=as_of,
        )


# --- Runway and dashboard ---


class RunwayMonthSchema(CamelModel):
    period: str
    projected_cash: Decimal
    expenses: Decimal
    net_cash: Decimal


class RunwayResponse(CamelModel):
    """Response for GET /api/dashboard/runway"""

    current_cash: Decimal
    monthly_expenses: Decimal
    runway_months: str = Field(..., description="Decimal string; 'Infinity' when there are no expenses")
    runway_days: str = Field(..., description="Whole days; 'Infinity' when there are no expenses")
    status: str
    recommendations: List[str]
    monthly_breakdown: List[RunwayMonthSchema]

    @classmethod
    def from_domain(cls, runway: RunwayAnalysis) -> "RunwayResponse":
        return cls(
            current_cash=runway.current_cash,
            monthly_expenses=runway.monthly_expenses,
            runway_months=str(runway.runway_months),
            runway_days=str(runway.runway_days),
            status=runway.status,
            recommendations=runway.recommendations,
            monthly_breakdown=[
                RunwayMonthSchema(
                    period=m.period,
                    projected_cash=m.projected_cash,
                    expenses=m.expenses,
                    net_cash=m.net_cash,
                )
                for m in runway.monthly_breakdown
            ],
        )


class DashboardSummarySchema(CamelModel):
    total_cash: Decimal
    total_ar: Decimal = Field(..., alias="totalAR")
    total_ap: Decimal = Field(..., alias="totalAP")
    net_position: Decimal
    runway_status: str
    cash_gap_status: str


class DashboardOverviewResponse(CamelModel):
    """Response for GET /api/dashboard/overview"""

    runway: RunwayResponse
    cash_gap: CashGapResponse
    overall_risk: str
    summary: DashboardSummarySchema

    @classmethod
    def from_domain(cls, overview: DashboardOverview, as_of: date) -> "DashboardOverviewResponse":
        summary = overview.summary
        return cls(
            runway=RunwayResponse.from_domain(overview.runway),
            cash_gap=CashGapResponse.from_domain(overview.cash_gap, as_of),
            overall_risk=overview.overall_risk,
            summary=DashboardSummarySchema(
                total_cash=summary.total_cash,
                total_ar=summary.total_ar,
                total_ap=summary.total_ap,
                net_position=summary.net_position,
                runway_status=summary.runway_status,
                cash_gap_status=summary.cash_gap_status,
            ),
        )


class ForecastMonthSchema(CamelModel):
    period: str
    opening_cash: Decimal
    projected_inflows: Decimal
    projected_outflows: Decimal
    net_cash_flow: Decimal
    closing_cash: Decimal
    confidence: str

    @classmethod
    def from_domain(cls, month: ForecastMonth) -> "ForecastMonthSchema":
        return cls(
            period=month.period,
            opening_cash=month.opening_cash,
            projected_inflows=month.projected_inflows,
            projected_outflows=month.projected_outflows,
            net_cash_flow=month.net_cash_flow,
            closing_cash=month.closing_cash,
            confidence=month.confidence,
        )


class CashFlowForecastResponse(CamelModel):
    """Response for GET /api/dashboard/forecast"""

    months: List[ForecastMonthSchema]
    as_of: date


# --- Aging ---


class AgingRecordSchema(CamelModel):
    id: str
    counterparty: str
    invoice_date: Optional[date] = None
    due_date: date
    current_amount: Decimal
    aging_days: int
    aging_bucket: str
    status: str
    risk_level: str

    @classmethod
    def from_domain(cls, record: AgingRecord) -> "AgingRecordSchema":
        return cls(
            id=record.item_id,
            counterparty=record.counterparty,
            invoice_date=record.invoice_date,
            due_date=record.due_date,
            current_amount=record.current_amount,
            aging_days=record.aging_days,
            aging_bucket=record.aging_bucket,
            status=record.status,
            risk_level=record.risk_level,
        )


class AgingBucketSchema(CamelModel):
    bucket: str
    amount: Decimal
    count: int
    percentage: Decimal


class AgingSummaryResponse(CamelModel):
    """Response for GET /api/aging/{reportType}/summary"""

    report_type: str
    total_amount: Decimal
    total_count: int
    buckets: List[AgingBucketSchema]
    average_aging_days: int
    overdue_amount: Decimal
    overdue_count: int
    overdue_percentage: Decimal

    @classmethod
    def from_domain(cls, summary: AgingSummary) -> "AgingSummaryResponse":
        return cls(
            report_type=summary.report_type,
            total_amount=summary.total_amount,
            total_count=summary.total_count,
            buckets=[
                AgingBucketSchema(bucket=b.bucket, amount=b.amount, count=b.count, percentage=b.percentage)
                for b in summary.buckets
            ],
            average_aging_days=summary.average_aging_days,
            overdue_amount=summary.overdue_amount,
            overdue_count=summary.overdue_count,
            overdue_percentage=summary.overdue_percentage,
        )


# --- Simulation ---


class SimulationRequest(CamelModel):
    """Request body for POST /api/simulation/run"""

    fx_delta: Decimal
    rate_delta: Decimal
    inflation_delta: Decimal
    horizon_months: int = Field(..., description="3, 6 or 12")
    monthly_net_cash_flow: Decimal = Field(Decimal("0"), description="Net operating cash added each month")


class SimulationParametersSchema(CamelModel):
    fx_delta: Decimal
    rate_delta: Decimal
    inflation_delta: Decimal
    horizon_months: int


class FinancialStateSchema(CamelModel):
    cash: Decimal
    debt: Decimal
    net_worth: Decimal


class MonthProjectionSchema(CamelModel):
    month: int
    cash: Decimal
    debt: Decimal
    net_worth: Decimal


class SimulationSummarySchema(CamelModel):
    cash_deficit_month: Optional[int] = None
    total_cash_change: Decimal
    total_debt_change: Decimal
    total_net_worth_change: Decimal


class SimulationResponse(CamelModel):
    """Response for POST /api/simulation/run"""

    id: Optional[str] = None
    parameters: SimulationParametersSchema
    current_state: FinancialStateSchema
    projections: List[MonthProjectionSchema]
    summary: SimulationSummarySchema
    narrative: str

    @classmethod
    def from_domain(cls, result: SimulationResult, run_id: Optional[str] = None) -> "SimulationResponse":
        state = result.current_state
        summary = result.summary
        return cls(
            id=run_id,
            parameters=SimulationParametersSchema(
                fx_delta=result.parameters.fx_delta,
                rate_delta=result.parameters.rate_delta,
                inflation_delta=result.parameters.inflation_delta,
                horizon_months=result.horizon_months,
            ),
            current_state=FinancialStateSchema(cash=state.cash, debt=state.debt, net_worth=state.net_worth),
            projections=[
                MonthProjectionSchema(month=p.month, cash=p.cash, debt=p.debt, net_worth=p.net_worth)
                for p in result.projections
            ],
            summary=SimulationSummarySchema(
                cash_deficit_month=summary.cash_deficit_month,
                total_cash_change=summary.total_cash_change,
                total_debt_change=summary.total_debt_change,
                total_net_worth_change=summary.total_net_worth_change,
            ),
            narrative=result.narrative,
        )


class SimulationHistoryItem(CamelModel):
    id: str
    horizon_months: int
    cash_deficit_month: Optional[int] = None
    parameters: dict
    created_at: str


class SimulationHistoryResponse(CamelModel):
    """Response for GET /api/simulation/history"""

    runs: List[SimulationHistoryItem]

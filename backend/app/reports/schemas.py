from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Status = Literal["excellent", "good", "fair", "poor"]
Priority = Literal["high", "medium", "low"]
EventType = Literal["submission", "results", "auction", "review", "task", "payment"]


class CamelModel(BaseModel):
    """Serialized with camelCase keys (``by_alias=True``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Department report
# ---------------------------------------------------------------------------


class DepartmentOverview(CamelModel):
    total_tenders: int = 0
    active_tenders: int = 0
    won_tenders: int = 0
    lost_tenders: int = 0
    cancelled_tenders: int = 0
    win_rate: float = 0.0
    total_nmck: int = 0
    total_contract_price: int = 0
    avg_processing_days: int = 0
    tenders_per_specialist: int = 0


class SpecialistStats(CamelModel):
    id: uuid.UUID
    name: str
    role: str
    total_tenders: int
    active_tenders: int
    won_tenders: int
    lost_tenders: int
    win_rate: float
    total_nmck: int
    avg_processing_days: int


class StageStats(CamelModel):
    stage_id: uuid.UUID
    stage_name: str
    stage_color: str
    category: str
    count: int
    total_nmck: int
    avg_days_in_stage: int
    percent: float


class TypeStats(CamelModel):
    type_id: uuid.UUID
    type_name: str
    count: int
    won_count: int
    lost_count: int
    win_rate: float
    total_nmck: int


class PlatformStats(CamelModel):
    platform_id: uuid.UUID
    platform_name: str
    count: int
    won_count: int
    win_rate: float
    total_nmck: int


class MonthlyStats(CamelModel):
    month: str
    month_label: str
    submitted: int
    won: int
    lost: int
    win_rate: float
    total_nmck: int


class ProcessingTime(CamelModel):
    stage_name: str
    avg_days: int
    min_days: int
    max_days: int
    tenders_count: int


class Workload(CamelModel):
    urgent: int = 0
    this_week: int = 0
    next_week: int = 0
    overdue: int = 0
    total: int = 0


class LossReason(CamelModel):
    reason: str
    count: int
    percent: float


class DepartmentReport(CamelModel):
    overview: DepartmentOverview = Field(default_factory=DepartmentOverview)
    specialists: list[SpecialistStats] = Field(default_factory=list)
    stages: list[StageStats] = Field(default_factory=list)
    by_type: list[TypeStats] = Field(default_factory=list)
    by_platform: list[PlatformStats] = Field(default_factory=list)
    monthly: list[MonthlyStats] = Field(default_factory=list)
    processing_times: list[ProcessingTime] = Field(default_factory=list)
    workload: Workload = Field(default_factory=Workload)
    loss_reasons: list[LossReason] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Tender calendar
# ---------------------------------------------------------------------------


class CalendarEvent(CamelModel):
    id: str
    date: dt.date
    time: str | None = None
    type: EventType
    title: str
    description: str | None = None
    tender_id: uuid.UUID | None = None
    tender_number: str | None = None
    customer: str | None = None
    nmck: int | None = None
    contract_price: int | None = None
    amount: int | None = None
    status: str | None = None
    is_urgent: bool = False
    days_left: int | None = None
    task_id: uuid.UUID | None = None
    task_status: str | None = None


class CalendarDay(CamelModel):
    date: dt.date
    events: list[CalendarEvent] = Field(default_factory=list)
    has_submission: bool = False
    has_results: bool = False
    has_auction: bool = False
    has_review: bool = False
    has_task: bool = False
    has_payment: bool = False
    total_events: int = 0


class CalendarStats(CamelModel):
    total_events: int = 0
    submissions_count: int = 0
    results_count: int = 0
    tasks_count: int = 0
    payments_count: int = 0
    urgent_count: int = 0
    this_week_events: list[CalendarEvent] = Field(default_factory=list)
    upcoming_events: list[CalendarEvent] = Field(default_factory=list)


class TenderCalendar(CamelModel):
    events: list[CalendarEvent] = Field(default_factory=list)
    days: list[CalendarDay] = Field(default_factory=list)
    stats: CalendarStats = Field(default_factory=CalendarStats)


# ---------------------------------------------------------------------------
# Financial health
# ---------------------------------------------------------------------------


class CategoryScore(BaseModel):
    score: int
    weight: float
    status: Status
    details: str


class HealthCategories(BaseModel):
    savings: CategoryScore
    budget: CategoryScore
    debt: CategoryScore
    stability: CategoryScore


class Recommendation(BaseModel):
    priority: Priority
    category: str
    title: str
    description: str
    impact: int


class FinancialHealthReport(BaseModel):
    overall_score: int
    grade: Status
    color: str
    categories: HealthCategories
    insights: list[str]
    recommendations: list[Recommendation]


# ---------------------------------------------------------------------------
# Seasonality
# ---------------------------------------------------------------------------


class CategoryAmount(BaseModel):
    category: str
    amount: int


class MonthlyPattern(BaseModel):
    month: int
    month_name: str
    average_spending: int
    transaction_count: int
    compared_to_average: float
    trend: Literal["high", "normal", "low"]
    top_categories: list[CategoryAmount]


class SeasonPattern(BaseModel):
    season: Literal["winter", "spring", "summer", "autumn"]
    season_name: str
    months: list[int]
    average_spending: int
    transaction_count: int
    compared_to_average: float
    characteristics: str


class WeekdayPattern(BaseModel):
    weekday: int
    weekday_name: str
    average_spending: int
    transaction_count: int
    compared_to_average: float
    peak_hours: list[int]


class DayOfMonthPattern(BaseModel):
    day_range: str
    average_spending: int
    transaction_count: int
    compared_to_average: float


class HeatmapData(BaseModel):
    months: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    data: list[list[int]] = Field(default_factory=list)
    max_value: int = 0


class SeasonalityReport(BaseModel):
    by_month: list[MonthlyPattern] = Field(default_factory=list)
    by_season: list[SeasonPattern] = Field(default_factory=list)
    by_weekday: list[WeekdayPattern] = Field(default_factory=list)
    by_day_of_month: list[DayOfMonthPattern] = Field(default_factory=list)
    heatmap_data: HeatmapData = Field(default_factory=HeatmapData)
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Payment calendar / cash flow
# ---------------------------------------------------------------------------


class FlowTotals(BaseModel):
    income: int = 0
    expense: int = 0
    balance: int = 0


class CountAmount(BaseModel):
    count: int = 0
    amount: int = 0


class PaymentSummary(BaseModel):
    today: FlowTotals = Field(default_factory=FlowTotals)
    this_week: FlowTotals = Field(default_factory=FlowTotals)
    this_month: FlowTotals = Field(default_factory=FlowTotals)
    overdue: CountAmount = Field(default_factory=CountAmount)
    upcoming: CountAmount = Field(default_factory=CountAmount)


class CashFlowMonth(BaseModel):
    month: int
    month_label: str
    planned_income: int = 0
    planned_expense: int = 0
    paid_income: int = 0
    paid_expense: int = 0
    net: int = 0
    running_balance: int = 0


class CashFlowReport(BaseModel):
    year: int
    opening_balance: int = 0
    closing_balance: int = 0
    total_planned_income: int = 0
    total_planned_expense: int = 0
    total_paid_income: int = 0
    total_paid_expense: int = 0
    months: list[CashFlowMonth] = Field(default_factory=list)

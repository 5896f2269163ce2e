"""Tender department report.

Folds the company's tenders into per-employee, per-stage, per-type,
per-platform and per-month statistics. Only tenders sitting in a tender
department stage (or already archived) are counted; realization stages are
reported elsewhere.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from app.reports.accumulators import Accumulator, GroupTotals, elapsed_days, month_key
from app.reports.metrics import average, percent, round_half_up, win_rate
from app.reports.records import TenderRecord, as_utc, utc_now
from app.reports.schemas import (
    DepartmentOverview,
    DepartmentReport,
    LossReason,
    MonthlyStats,
    PlatformStats,
    ProcessingTime,
    SpecialistStats,
    StageStats,
    TypeStats,
    Workload,
)
from app.tenders.models import StageCategory, TenderStatus

DEPARTMENT_CATEGORIES = frozenset({StageCategory.TENDER_DEPT, StageCategory.ARCHIVE})
TERMINAL_STATUSES = frozenset(
    {TenderStatus.WON, TenderStatus.LOST, TenderStatus.CANCELLED, TenderStatus.COMPLETED}
)
PROCESSED_STATUSES = frozenset({TenderStatus.WON, TenderStatus.LOST})

DEFAULT_STAGE_COLOR = "#6b7280"
DEFAULT_EMPLOYEE_ROLE = "Specialist"
MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def is_department_tender(tender: TenderRecord) -> bool:
    return tender.stage is not None and tender.stage.category in DEPARTMENT_CATEGORIES


def is_active(tender: TenderRecord) -> bool:
    return tender.status not in TERMINAL_STATUSES


def processing_days(tender: TenderRecord) -> int:
    return elapsed_days(tender.created_at, tender.updated_at)


def empty_department_report() -> DepartmentReport:
    return DepartmentReport()


def build_department_report(
    tenders: Iterable[TenderRecord],
    now: datetime | None = None,
    monthly_window: int = 12,
) -> DepartmentReport:
    now = as_utc(now) if now is not None else utc_now()
    dept = [t for t in tenders if is_department_tender(t)]
    if not dept:
        return empty_department_report()

    specialists = _specialist_stats(dept)
    stage_totals = _stage_totals(dept, now)
    overview = _overview(dept, len(specialists))
    stages = _stage_stats(stage_totals, overview.total_tenders)

    return DepartmentReport(
        overview=overview,
        specialists=specialists,
        stages=stages,
        by_type=_type_stats(dept),
        by_platform=_platform_stats(dept),
        monthly=_monthly_stats(dept, now, monthly_window),
        processing_times=_processing_times(stage_totals),
        workload=_workload(dept, now, overview.active_tenders),
        loss_reasons=_loss_reasons(dept),
    )


def _overview(dept: list[TenderRecord], specialist_count: int) -> DepartmentOverview:
    total = len(dept)
    won = sum(1 for t in dept if t.status == TenderStatus.WON)
    processed = [t for t in dept if t.status in PROCESSED_STATUSES]

    return DepartmentOverview(
        total_tenders=total,
        active_tenders=sum(1 for t in dept if is_active(t)),
        won_tenders=won,
        lost_tenders=sum(1 for t in dept if t.status == TenderStatus.LOST),
        cancelled_tenders=sum(1 for t in dept if t.status == TenderStatus.CANCELLED),
        win_rate=win_rate(won, total),
        total_nmck=sum(t.nmck or 0 for t in dept),
        total_contract_price=sum(
            t.contract_price or t.nmck or 0 for t in dept if t.status == TenderStatus.WON
        ),
        avg_processing_days=average(sum(processing_days(t) for t in processed), len(processed)),
        tenders_per_specialist=round_half_up(total / specialist_count) if specialist_count else 0,
    )


def _specialist_stats(dept: list[TenderRecord]) -> list[SpecialistStats]:
    acc: Accumulator = Accumulator()
    for tender in dept:
        for employee in tender.employees:
            totals = acc.bucket(
                employee.id,
                lambda e=employee: GroupTotals(name=e.full_name, role=e.role or DEFAULT_EMPLOYEE_ROLE),
            )
            totals.count += 1
            totals.amount += tender.nmck or 0
            if tender.status in PROCESSED_STATUSES:
                if tender.status == TenderStatus.WON:
                    totals.won += 1
                else:
                    totals.lost += 1
                totals.processed += 1
                totals.add_days(processing_days(tender))
            elif is_active(tender):
                totals.active += 1

    stats = [
        SpecialistStats(
            id=employee_id,
            name=totals.name,
            role=totals.role,
            total_tenders=totals.count,
            active_tenders=totals.active,
            won_tenders=totals.won,
            lost_tenders=totals.lost,
            win_rate=win_rate(totals.won, totals.count),
            total_nmck=totals.amount,
            avg_processing_days=average(totals.total_days, totals.processed),
        )
        for employee_id, totals in acc.items()
    ]
    stats.sort(key=lambda s: s.won_tenders, reverse=True)
    return stats


def _stage_totals(dept: list[TenderRecord], now: datetime) -> Accumulator:
    acc: Accumulator = Accumulator()
    for tender in dept:
        stage = tender.stage
        totals = acc.bucket(
            stage.id,
            lambda s=stage: GroupTotals(name=s.name, color=s.color or DEFAULT_STAGE_COLOR, category=s.category.value),
        )
        totals.count += 1
        totals.amount += tender.nmck or 0
        totals.add_days(elapsed_days(tender.created_at, now))
    return acc


def _stage_stats(acc: Accumulator, total: int) -> list[StageStats]:
    stats = [
        StageStats(
            stage_id=stage_id,
            stage_name=totals.name,
            stage_color=totals.color,
            category=totals.category,
            count=totals.count,
            total_nmck=totals.amount,
            avg_days_in_stage=average(totals.total_days, totals.count),
            percent=percent(totals.count, total),
        )
        for stage_id, totals in acc.items()
    ]
    stats.sort(key=lambda s: s.count, reverse=True)
    return stats


def _processing_times(acc: Accumulator) -> list[ProcessingTime]:
    times = [
        ProcessingTime(
            stage_name=totals.name,
            avg_days=average(totals.total_days, totals.count),
            min_days=totals.min_days or 0,
            max_days=totals.max_days or 0,
            tenders_count=totals.count,
        )
        for _, totals in acc.items()
    ]
    times.sort(key=lambda p: p.tenders_count, reverse=True)
    return times


def _type_stats(dept: list[TenderRecord]) -> list[TypeStats]:
    acc: Accumulator = Accumulator()
    for tender in dept:
        ref = tender.type
        totals = acc.bucket(ref.id if ref else None, lambda r=ref: GroupTotals(name=r.name))
        if totals is None:
            continue
        _count_outcome(totals, tender)

    stats = [
        TypeStats(
            type_id=type_id,
            type_name=totals.name,
            count=totals.count,
            won_count=totals.won,
            lost_count=totals.lost,
            win_rate=win_rate(totals.won, totals.count),
            total_nmck=totals.amount,
        )
        for type_id, totals in acc.items()
    ]
    stats.sort(key=lambda s: s.count, reverse=True)
    return stats


def _platform_stats(dept: list[TenderRecord]) -> list[PlatformStats]:
    acc: Accumulator = Accumulator()
    for tender in dept:
        ref = tender.platform
        totals = acc.bucket(ref.id if ref else None, lambda r=ref: GroupTotals(name=r.name))
        if totals is None:
            continue
        _count_outcome(totals, tender)

    stats = [
        PlatformStats(
            platform_id=platform_id,
            platform_name=totals.name,
            count=totals.count,
            won_count=totals.won,
            win_rate=win_rate(totals.won, totals.count),
            total_nmck=totals.amount,
        )
        for platform_id, totals in acc.items()
    ]
    stats.sort(key=lambda s: s.count, reverse=True)
    return stats


def _count_outcome(totals: GroupTotals, tender: TenderRecord) -> None:
    totals.count += 1
    totals.amount += tender.nmck or 0
    if tender.status == TenderStatus.WON:
        totals.won += 1
    elif tender.status == TenderStatus.LOST:
        totals.lost += 1


def _monthly_stats(dept: list[TenderRecord], now: datetime, window: int) -> list[MonthlyStats]:
    first_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    months: dict[str, GroupTotals] = {}
    for offset in range(window - 1, -1, -1):
        start = first_of_month - relativedelta(months=offset)
        months[month_key(start)] = GroupTotals(name=f"{MONTH_ABBR[start.month - 1]} {start.year}")

    for tender in dept:
        totals = months.get(month_key(tender.created_at))
        if totals is None:
            continue
        _count_outcome(totals, tender)

    return [
        MonthlyStats(
            month=key,
            month_label=totals.name,
            submitted=totals.count,
            won=totals.won,
            lost=totals.lost,
            win_rate=win_rate(totals.won, totals.won + totals.lost),
            total_nmck=totals.amount,
        )
        for key, totals in sorted(months.items())
    ]


def _workload(dept: list[TenderRecord], now: datetime, active: int) -> Workload:
    tomorrow = now + timedelta(days=1)
    week_end = now + timedelta(days=7)
    next_week_end = now + timedelta(days=14)
    workload = Workload(total=active)

    for tender in dept:
        deadline = tender.submission_deadline
        if deadline is None or tender.status in TERMINAL_STATUSES:
            continue
        if deadline < now:
            workload.overdue += 1
        elif deadline <= tomorrow:
            workload.urgent += 1
        elif deadline <= week_end:
            workload.this_week += 1
        elif deadline <= next_week_end:
            workload.next_week += 1
    return workload


def _loss_reasons(dept: list[TenderRecord]) -> list[LossReason]:
    counts: dict[str, int] = {}
    for tender in dept:
        if tender.status != TenderStatus.LOST:
            continue
        reason = (tender.loss_reason or "").strip()
        if not reason:
            continue
        counts[reason] = counts.get(reason, 0) + 1

    recorded = sum(counts.values())
    reasons = [
        LossReason(reason=reason, count=count, percent=percent(count, recorded))
        for reason, count in counts.items()
    ]
    reasons.sort(key=lambda r: r.count, reverse=True)
    return reasons

"""Every report serializes to finite numbers, whether empty or built from one record."""

import json
import math
from datetime import timedelta

import pytest

from app.finance.models import Direction
from app.reports.cashflow import build_cash_flow, build_payment_summary
from app.reports.department import build_department_report
from app.reports.health import analyze_financial_health
from app.reports.seasonality import analyze_seasonality
from app.reports.tender_calendar import build_tender_calendar

from conftest import (
    NOW,
    TODAY,
    make_budget,
    make_goal,
    make_payment,
    make_stage,
    make_task,
    make_tender,
    make_transaction,
)


def _walk(value):
    if isinstance(value, dict):
        for item in value.values():
            yield from _walk(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _walk(item)
    else:
        yield value


def _reports(with_record):
    tenders = [make_tender(make_stage(), submission_deadline=NOW + timedelta(days=2))] if with_record else []
    tasks = [make_task(due_date=NOW + timedelta(days=1))] if with_record else []
    expense = make_transaction(5_000, category="Rent")
    transactions = [expense] if with_record else []
    payments = [make_payment(1_000)] if with_record else []
    return {
        "department": build_department_report(tenders, now=NOW),
        "calendar": build_tender_calendar(tenders, tasks, payments, now=NOW),
        "health": analyze_financial_health(
            transactions,
            [make_budget(expense.category_key, 10_000)] if with_record else [],
            [make_goal()] if with_record else [],
        ),
        "income_only_health": analyze_financial_health(
            [make_transaction(5_000, Direction.INCOME)] if with_record else []
        ),
        "seasonality": analyze_seasonality(transactions),
        "payment_summary": build_payment_summary(payments, TODAY),
        "cash_flow": build_cash_flow(payments, TODAY.year),
    }


@pytest.mark.parametrize("with_record", [False, True], ids=["empty", "one-record"])
def test_reports_serialize_without_nan_or_infinity(with_record):
    for name, report in _reports(with_record).items():
        body = report.model_dump(mode="json")
        numbers = [v for v in _walk(body) if isinstance(v, float)]
        assert all(math.isfinite(v) for v in numbers), name
        text = json.dumps(body, allow_nan=False, ensure_ascii=False)
        assert "NaN" not in text and "Infinity" not in text, name


def test_empty_department_report_has_zeroed_overview():
    body = build_department_report([], now=NOW).model_dump(mode="json", by_alias=True)
    assert body["overview"]["totalTenders"] == 0
    assert body["overview"]["winRate"] == 0.0
    assert body["specialists"] == []

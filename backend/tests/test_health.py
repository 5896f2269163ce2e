"""Tests for the financial health score."""

from datetime import datetime, timezone

from app.finance.models import Direction, GoalStatus
from app.reports.health import (
    analyze_financial_health,
    budget_score,
    debt_score,
    savings_score,
    stability_score,
)

from conftest import make_budget, make_goal, make_transaction


def _income(amount, month=3):
    return make_transaction(
        amount, Direction.INCOME, occurred_at=datetime(2026, month, 5, tzinfo=timezone.utc)
    )


def _expense(amount, month=3, **fields):
    return make_transaction(
        amount, Direction.EXPENSE, occurred_at=datetime(2026, month, 10, tzinfo=timezone.utc), **fields
    )


class TestEmptyReport:
    def test_no_transactions(self):
        report = analyze_financial_health([])
        assert report.overall_score == 0
        assert report.grade == "poor"
        assert report.categories.savings.details == "No data"
        assert report.categories.savings.weight == 0.35
        assert report.insights == ["Not enough data to assess financial health"]
        assert report.recommendations == []


class TestOverall:
    def test_healthy_month(self):
        report = analyze_financial_health([_income(200_000), _expense(150_000)])
        savings = report.categories.savings
        assert savings.score == 100
        assert savings.weight == 0.35
        assert savings.status == "excellent"
        assert report.categories.budget.score == 50
        assert report.categories.debt.score == 100
        assert report.categories.stability.score == 100
        # 100*0.35 + 50*0.25 + 100*0.2 + 100*0.2 = 87.5
        assert report.overall_score == 88
        assert report.grade == "excellent"
        assert report.color == "#10b981"

    def test_insights_name_strongest_and_weakest(self):
        report = analyze_financial_health([_income(200_000), _expense(150_000)])
        assert report.insights[0] == "Excellent financial health. Keep it up."
        assert report.insights[1] == "Strongest area: Savings (100 points)"
        assert report.insights[2] == "Needs attention: Budget (50 points)"

    def test_missing_budgets_recommend_planning(self):
        report = analyze_financial_health([_income(200_000), _expense(150_000)])
        assert [r.category for r in report.recommendations] == ["Budget", "Planning"]

    def test_recommendations_high_priority_first(self):
        report = analyze_financial_health([_income(100_000), _expense(120_000)])
        priorities = [r.priority for r in report.recommendations]
        assert priorities == sorted(priorities, key={"high": 0, "medium": 1, "low": 2}.get)
        assert report.recommendations[0].category == "Savings"

    def test_transfers_ignored_for_savings(self):
        transfer = make_transaction(500_000, Direction.TRANSFER)
        report = analyze_financial_health([_income(200_000), _expense(150_000), transfer])
        assert report.categories.savings.score == 100


class TestSavings:
    def test_no_income(self):
        score = savings_score(0, 1000)
        assert (score.score, score.status, score.details) == (0, "poor", "No income recorded")

    def test_spending_exceeds_income(self):
        score = savings_score(1000, 2000)
        assert score.score == 0
        assert score.details == "Spending exceeds income"

    def test_active_goal_bonus(self):
        score = savings_score(1000, 880, [make_goal(), make_goal(GoalStatus.PAUSED)])
        assert score.score == 85
        assert score.status == "good"
        assert score.details == "Good savings rate: 12.0% | 1 active goals"

    def test_bonus_capped(self):
        assert savings_score(1000, 500, [make_goal()]).score == 100


class TestBudget:
    def test_compliance(self):
        office = _expense(900, category="Office")
        travel = _expense(3000, category="Travel")
        budgets = [make_budget(office.category_id, 1000), make_budget(travel.category_id, 2000)]
        score = budget_score([office, travel], budgets)
        assert (score.score, score.status) == (50, "fair")
        assert score.details == "Budget compliance: 50% (1/2)"

    def test_budget_without_spending_is_met(self):
        score = budget_score([], [make_budget(None, 100)])
        assert score.score == 100


class TestDebt:
    def test_no_debt(self):
        score = debt_score([_expense(1000, description="Office rent")])
        assert (score.score, score.details) == (100, "No debt obligations")

    def test_keywords_match_case_insensitively(self):
        expenses = [_expense(700, description="Rent"), _expense(300, description="Bank LOAN repayment")]
        score = debt_score(expenses)
        assert (score.score, score.status) == (30, "poor")
        assert score.details == "High debt load: 30.0%"

    def test_russian_keywords(self):
        expenses = [_expense(950), _expense(50, description="Платёж по кредиту")]
        score = debt_score(expenses)
        assert (score.score, score.status) == (85, "good")


class TestStability:
    def test_steady_months(self):
        txs = [_income(1000, m) for m in (1, 2, 3)] + [_expense(800, m) for m in (1, 2, 3)]
        assert stability_score(txs).score == 100

    def test_volatile_months(self):
        txs = [_income(100, 1), _income(1900, 2), _expense(100, 1), _expense(1900, 2)]
        score = stability_score(txs)
        assert (score.score, score.status) == (25, "poor")
        assert score.details == "High volatility"

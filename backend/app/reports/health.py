"""Financial health score.

Four weighted category scores (savings, budget compliance, debt load and
income/expense stability) are combined into a 0-100 overall score with a
grade, human-readable insights and prioritised recommendations.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from app.finance.models import Direction, GoalStatus
from app.reports.accumulators import group_amounts, month_key
from app.reports.metrics import (
    BUDGET_BANDS,
    DEBT_BANDS,
    EXCELLENT,
    FAIR,
    GOOD,
    POOR,
    SAVINGS_BANDS,
    STABILITY_BANDS,
    coefficient_of_variation,
    grade_for,
    percent,
    pick_band,
    round_half_up,
    score_color,
)
from app.reports.records import BudgetRecord, SavingsGoalRecord, TransactionRecord
from app.reports.schemas import CategoryScore, FinancialHealthReport, HealthCategories, Recommendation

SAVINGS_WEIGHT = 0.35
BUDGET_WEIGHT = 0.25
DEBT_WEIGHT = 0.20
STABILITY_WEIGHT = 0.20

ACTIVE_GOAL_BONUS = 10
RECOMMENDATION_THRESHOLD = 70

DEBT_KEYWORDS = ("credit", "loan", "debt", "mortgage", "кредит", "долг", "заем", "заём", "ипотека")

CATEGORY_LABELS = {
    "savings": "Savings",
    "budget": "Budget",
    "debt": "Debt",
    "stability": "Stability",
}
PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def empty_health_report() -> FinancialHealthReport:
    def no_data(weight: float) -> CategoryScore:
        return CategoryScore(score=0, weight=weight, status=POOR, details="No data")

    return FinancialHealthReport(
        overall_score=0,
        grade=POOR,
        color=score_color(0),
        categories=HealthCategories(
            savings=no_data(SAVINGS_WEIGHT),
            budget=no_data(BUDGET_WEIGHT),
            debt=no_data(DEBT_WEIGHT),
            stability=no_data(STABILITY_WEIGHT),
        ),
        insights=["Not enough data to assess financial health"],
        recommendations=[],
    )


def analyze_financial_health(
    transactions: Iterable[TransactionRecord],
    budgets: Iterable[BudgetRecord] = (),
    goals: Iterable[SavingsGoalRecord] = (),
) -> FinancialHealthReport:
    transactions = list(transactions)
    if not transactions:
        return empty_health_report()

    income = [t for t in transactions if t.direction == Direction.INCOME]
    expenses = [t for t in transactions if t.direction == Direction.EXPENSE]
    total_income = sum(t.magnitude for t in income)
    total_expenses = sum(t.magnitude for t in expenses)

    categories = HealthCategories(
        savings=savings_score(total_income, total_expenses, goals),
        budget=budget_score(expenses, list(budgets)),
        debt=debt_score(expenses),
        stability=stability_score(transactions),
    )
    overall = round_half_up(
        sum(c.score * c.weight for c in (categories.savings, categories.budget, categories.debt, categories.stability))
    )

    return FinancialHealthReport(
        overall_score=overall,
        grade=grade_for(overall),
        color=score_color(overall),
        categories=categories,
        insights=_insights(overall, categories),
        recommendations=_recommendations(categories),
    )


def savings_score(
    total_income: int, total_expenses: int, goals: Iterable[SavingsGoalRecord] = ()
) -> CategoryScore:
    if total_income == 0:
        return CategoryScore(score=0, weight=SAVINGS_WEIGHT, status=POOR, details="No income recorded")

    rate = (total_income - total_expenses) / total_income * 100
    score, status = pick_band(rate, SAVINGS_BANDS, (0, POOR))
    if rate <= 0:
        details = "Spending exceeds income"
    else:
        label = {EXCELLENT: "Excellent", GOOD: "Good", FAIR: "Moderate"}.get(status, "Low")
        details = f"{label} savings rate: {rate:.1f}%"

    active_goals = sum(1 for g in goals if g.status == GoalStatus.ACTIVE)
    if active_goals:
        score = min(100, score + ACTIVE_GOAL_BONUS)
        details += f" | {active_goals} active goals"

    return CategoryScore(score=score, weight=SAVINGS_WEIGHT, status=status, details=details)


def budget_score(expenses: Sequence[TransactionRecord], budgets: Sequence[BudgetRecord]) -> CategoryScore:
    if not budgets:
        return CategoryScore(score=50, weight=BUDGET_WEIGHT, status=FAIR, details="Budgets are not configured")

    spent_by_category = group_amounts(expenses, lambda t: t.category_key, lambda t: t.magnitude)
    within = sum(1 for b in budgets if spent_by_category.get(b.category_id, 0) <= b.amount_limit)
    compliance = percent(within, len(budgets))
    score, status = pick_band(compliance, BUDGET_BANDS, (25, POOR))

    return CategoryScore(
        score=score,
        weight=BUDGET_WEIGHT,
        status=status,
        details=f"Budget compliance: {compliance:.0f}% ({within}/{len(budgets)})",
    )


def is_debt_payment(transaction: TransactionRecord) -> bool:
    description = (transaction.description or "").lower()
    return any(keyword in description for keyword in DEBT_KEYWORDS)


def debt_score(expenses: Sequence[TransactionRecord]) -> CategoryScore:
    total = sum(t.magnitude for t in expenses)
    debt = sum(t.magnitude for t in expenses if is_debt_payment(t))
    ratio = percent(debt, total)
    score, status = pick_band(ratio, DEBT_BANDS, (30, POOR))

    if ratio == 0:
        details = "No debt obligations"
    else:
        label = {GOOD: "Low", FAIR: "Moderate"}.get(status, "High")
        details = f"{label} debt load: {ratio:.1f}%"
    return CategoryScore(score=score, weight=DEBT_WEIGHT, status=status, details=details)


def stability_score(transactions: Sequence[TransactionRecord]) -> CategoryScore:
    monthly_income = group_amounts(
        (t for t in transactions if t.direction == Direction.INCOME),
        lambda t: month_key(t.occurred_at),
        lambda t: t.magnitude,
    )
    monthly_expenses = group_amounts(
        (t for t in transactions if t.direction == Direction.EXPENSE),
        lambda t: month_key(t.occurred_at),
        lambda t: t.magnitude,
    )
    avg_cv = (
        coefficient_of_variation(list(monthly_income.values()))
        + coefficient_of_variation(list(monthly_expenses.values()))
    ) / 2
    score, status = pick_band(avg_cv, STABILITY_BANDS, (25, POOR))

    details = {
        EXCELLENT: "Very stable finances",
        GOOD: "Stable finances",
        FAIR: "Moderate volatility",
    }.get(status, "High volatility")
    return CategoryScore(score=score, weight=STABILITY_WEIGHT, status=status, details=details)


def _insights(overall: int, categories: HealthCategories) -> list[str]:
    if overall >= 80:
        banner = "Excellent financial health. Keep it up."
    elif overall >= 60:
        banner = "Good financial health with room for improvement."
    elif overall >= 40:
        banner = "Moderate financial health. Pay attention to the weak spots."
    else:
        banner = "Financial health needs attention. Follow the recommendations."

    scored = list(categories.model_dump().items())
    # max/min return the first of equal scores
    best_key, best = max(scored, key=lambda item: item[1]["score"])
    worst_key, worst = min(scored, key=lambda item: item[1]["score"])
    return [
        banner,
        f"Strongest area: {CATEGORY_LABELS[best_key]} ({best['score']} points)",
        f"Needs attention: {CATEGORY_LABELS[worst_key]} ({worst['score']} points)",
    ]


def _recommendations(categories: HealthCategories) -> list[Recommendation]:
    recommendations: list[Recommendation] = []

    if categories.savings.score < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            Recommendation(
                priority="high",
                category=CATEGORY_LABELS["savings"],
                title="Increase the savings rate",
                description="Aim to set aside at least 10-20% of income. "
                "Schedule automatic transfers to a reserve account.",
                impact=15,
            )
        )
    if categories.budget.score < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            Recommendation(
                priority="high" if categories.budget.score < 50 else "medium",
                category=CATEGORY_LABELS["budget"],
                title="Stay within the configured budgets",
                description="Review spending by category regularly and react before a limit is reached.",
                impact=10,
            )
        )
    if categories.debt.score < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            Recommendation(
                priority="high",
                category=CATEGORY_LABELS["debt"],
                title="Reduce the debt load",
                description="Draw up a repayment plan and consider refinancing at a lower rate.",
                impact=12,
            )
        )
    if categories.stability.score < RECOMMENDATION_THRESHOLD:
        recommendations.append(
            Recommendation(
                priority="medium",
                category=CATEGORY_LABELS["stability"],
                title="Build a cash reserve",
                description="Keep a reserve covering 3-6 months of expenses to absorb irregular months.",
                impact=8,
            )
        )
    if categories.budget.score == 50:
        recommendations.append(
            Recommendation(
                priority="medium",
                category="Planning",
                title="Set up budgets",
                description="Create budgets for the main expense categories to keep spending under control.",
                impact=10,
            )
        )

    recommendations.sort(key=lambda r: PRIORITY_ORDER[r.priority])
    return recommendations

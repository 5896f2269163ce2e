"""Tests for the tender department report."""

from datetime import timedelta

import pytest

from app.reports.department import build_department_report
from app.reports.schemas import DepartmentReport
from app.tenders.models import StageCategory, TenderStatus

from conftest import NOW, make_employee, make_ref, make_stage, make_tender


@pytest.fixture
def stages():
    return {
        "prep": make_stage("Preparation"),
        "bid": make_stage("Bidding"),
        "archive": make_stage("Archive", category=StageCategory.ARCHIVE),
    }


@pytest.fixture
def tenders(stages):
    """Five tenders in preparation, three bidding and one archived."""
    return (
        [make_tender(stages["prep"], nmck=100_00) for _ in range(5)]
        + [make_tender(stages["bid"], nmck=50_00) for _ in range(3)]
        + [make_tender(stages["archive"], status=TenderStatus.WON, nmck=10_00)]
    )


class TestEmptyInput:
    def test_no_tenders(self):
        assert build_department_report([], now=NOW) == DepartmentReport()

    def test_only_realization_tenders(self):
        realization = make_stage("Delivery", category=StageCategory.REALIZATION)
        report = build_department_report([make_tender(realization)], now=NOW)
        assert report.overview.total_tenders == 0
        assert report.stages == []

    def test_tender_without_stage_is_ignored(self):
        tender = make_tender().model_copy(update={"stage": None})
        assert build_department_report([tender], now=NOW) == DepartmentReport()

    def test_empty_report_serializes_with_camel_case(self):
        body = DepartmentReport().model_dump(mode="json", by_alias=True)
        assert body["overview"]["winRate"] == 0.0
        assert body["byPlatform"] == []
        assert body["lossReasons"] == []


class TestOverview:
    def test_ten_tenders_six_won_two_lost_two_active(self, stages):
        dept = (
            [make_tender(stages["prep"], status=TenderStatus.WON) for _ in range(6)]
            + [make_tender(stages["prep"], status=TenderStatus.LOST) for _ in range(2)]
            + [make_tender(stages["prep"], status=TenderStatus.ACTIVE) for _ in range(2)]
        )
        overview = build_department_report(dept, now=NOW).overview
        assert overview.total_tenders == 10
        assert (overview.won_tenders, overview.lost_tenders) == (6, 2)
        assert overview.active_tenders == 2
        assert overview.win_rate == pytest.approx(60.0)

    def test_win_rate_and_active(self, stages):
        dept = [
            make_tender(stages["prep"], status=TenderStatus.WON),
            make_tender(stages["prep"], status=TenderStatus.WON),
            make_tender(stages["prep"], status=TenderStatus.WON),
            make_tender(stages["prep"], status=TenderStatus.ACTIVE),
            make_tender(stages["prep"], status=TenderStatus.DRAFT),
        ]
        overview = build_department_report(dept, now=NOW).overview
        assert overview.total_tenders == 5
        assert overview.won_tenders == 3
        assert overview.active_tenders == 2
        assert overview.win_rate == pytest.approx(60.0)

    def test_contract_price_falls_back_to_nmck(self, stages):
        dept = [
            make_tender(stages["prep"], status=TenderStatus.WON, nmck=1000, contract_price=800),
            make_tender(stages["prep"], status=TenderStatus.WON, nmck=500),
            make_tender(stages["prep"], status=TenderStatus.LOST, nmck=300),
        ]
        overview = build_department_report(dept, now=NOW).overview
        assert overview.total_nmck == 1800
        assert overview.total_contract_price == 1300

    def test_avg_processing_days_over_processed_only(self, stages):
        dept = [
            make_tender(stages["prep"], status=TenderStatus.WON, processing_days=4),
            make_tender(stages["prep"], status=TenderStatus.LOST, processing_days=6),
            make_tender(stages["prep"], status=TenderStatus.ACTIVE, processing_days=30),
        ]
        assert build_department_report(dept, now=NOW).overview.avg_processing_days == 5

    def test_tenders_per_specialist(self, stages):
        anna, ivan = make_employee("Anna"), make_employee("Ivan")
        dept = [
            make_tender(stages["prep"], manager=anna),
            make_tender(stages["prep"], manager=anna, specialist=ivan),
            make_tender(stages["prep"], specialist=ivan),
        ]
        assert build_department_report(dept, now=NOW).overview.tenders_per_specialist == 2


class TestStages:
    def test_sorted_by_count(self, tenders):
        report = build_department_report(tenders, now=NOW)
        assert [s.count for s in report.stages] == [5, 3, 1]

    def test_counts_sum_to_total(self, tenders):
        report = build_department_report(tenders, now=NOW)
        assert sum(s.count for s in report.stages) == report.overview.total_tenders
        assert sum(s.percent for s in report.stages) == pytest.approx(100.0)
        assert all(0 <= s.percent <= 100 for s in report.stages)

    def test_default_color_and_category(self, tenders):
        stage = build_department_report(tenders, now=NOW).stages[-1]
        assert stage.stage_color == "#6b7280"
        assert stage.category == "archive"

    def test_processing_times_are_observed_extremes(self, stages):
        dept = [
            make_tender(stages["prep"], created_days_ago=2),
            make_tender(stages["prep"], created_days_ago=8),
        ]
        (times,) = build_department_report(dept, now=NOW).processing_times
        assert times.avg_days == 5
        assert times.min_days == 2
        assert times.max_days == 8
        assert times.tenders_count == 2


class TestSpecialists:
    def test_manager_and_specialist_count_separately(self, stages):
        anna = make_employee("Anna", role="Lead")
        tender = make_tender(stages["prep"], status=TenderStatus.WON, manager=anna, specialist=anna, nmck=100)
        (stats,) = build_department_report([tender], now=NOW).specialists
        assert stats.total_tenders == 2
        assert stats.won_tenders == 2
        assert stats.total_nmck == 200
        assert stats.role == "Lead"

    def test_outcomes_and_processing(self, stages):
        anna = make_employee("Anna")
        dept = [
            make_tender(stages["prep"], status=TenderStatus.WON, specialist=anna, processing_days=2, nmck=100),
            make_tender(stages["prep"], status=TenderStatus.LOST, specialist=anna, processing_days=4, nmck=200),
            make_tender(stages["prep"], status=TenderStatus.ACTIVE, specialist=anna, nmck=300),
            make_tender(stages["prep"], status=TenderStatus.CANCELLED, specialist=anna),
        ]
        (stats,) = build_department_report(dept, now=NOW).specialists
        assert stats.role == "Specialist"
        assert (stats.won_tenders, stats.lost_tenders, stats.active_tenders) == (1, 1, 1)
        assert stats.win_rate == pytest.approx(25.0)
        assert stats.total_nmck == 600
        assert stats.avg_processing_days == 3

    def test_sorted_by_wins(self, stages):
        anna, ivan = make_employee("Anna"), make_employee("Ivan")
        dept = [
            make_tender(stages["prep"], status=TenderStatus.LOST, specialist=anna),
            make_tender(stages["prep"], status=TenderStatus.WON, specialist=ivan),
        ]
        report = build_department_report(dept, now=NOW)
        assert [s.name for s in report.specialists] == ["Ivan", "Anna"]


class TestDimensions:
    def test_type_and_platform(self, stages):
        auction, portal = make_ref("Electronic auction"), make_ref("Portal")
        dept = [
            make_tender(stages["prep"], status=TenderStatus.WON, type=auction, platform=portal, nmck=100),
            make_tender(stages["prep"], status=TenderStatus.LOST, type=auction, platform=portal, nmck=50),
            make_tender(stages["prep"]),
        ]
        report = build_department_report(dept, now=NOW)
        (by_type,) = report.by_type
        assert (by_type.count, by_type.won_count, by_type.lost_count) == (2, 1, 1)
        assert by_type.win_rate == pytest.approx(50.0)
        (by_platform,) = report.by_platform
        assert by_platform.platform_name == "Portal"
        assert by_platform.total_nmck == 150

    def test_monthly_window(self, stages):
        dept = [
            make_tender(stages["prep"], status=TenderStatus.WON, created_days_ago=1),
            make_tender(stages["prep"], status=TenderStatus.LOST, created_days_ago=2),
            make_tender(stages["prep"], created_days_ago=800),
        ]
        monthly = build_department_report(dept, now=NOW).monthly
        assert len(monthly) == 12
        assert monthly[0].month == "2025-04"
        assert monthly[-1].month == "2026-03"
        assert monthly[-1].month_label == "Mar 2026"
        assert (monthly[-1].submitted, monthly[-1].won, monthly[-1].lost) == (2, 1, 1)
        assert monthly[-1].win_rate == pytest.approx(50.0)
        assert sum(m.submitted for m in monthly) == 2


class TestWorkload:
    def test_deadline_buckets(self, stages):
        dept = [
            make_tender(stages["prep"], submission_deadline=NOW - timedelta(hours=1)),
            make_tender(stages["prep"], submission_deadline=NOW + timedelta(hours=12)),
            make_tender(stages["prep"], submission_deadline=NOW + timedelta(days=3)),
            make_tender(stages["prep"], submission_deadline=NOW + timedelta(days=10)),
            make_tender(stages["prep"], status=TenderStatus.WON, submission_deadline=NOW - timedelta(days=1)),
        ]
        workload = build_department_report(dept, now=NOW).workload
        assert (workload.overdue, workload.urgent, workload.this_week, workload.next_week) == (1, 1, 1, 1)
        assert workload.total == 4


class TestLossReasons:
    def test_only_recorded_reasons(self, stages):
        dept = [
            make_tender(stages["prep"], status=TenderStatus.LOST, loss_reason="Price"),
            make_tender(stages["prep"], status=TenderStatus.LOST, loss_reason="Price "),
            make_tender(stages["prep"], status=TenderStatus.LOST),
            make_tender(stages["prep"], status=TenderStatus.WON, loss_reason="Ignored"),
        ]
        (reason,) = build_department_report(dept, now=NOW).loss_reasons
        assert reason.reason == "Price"
        assert reason.count == 2
        assert reason.percent == pytest.approx(100.0)

    def test_no_lost_tenders(self, tenders):
        assert build_department_report(tenders, now=NOW).loss_reasons == []


def test_report_is_deterministic(tenders):
    assert build_department_report(tenders, now=NOW) == build_department_report(tenders, now=NOW)

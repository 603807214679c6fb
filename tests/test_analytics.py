from __future__ import annotations

import pytest

from scholarport.models import FinancialGoalRecord, ScholarshipRecord, ScholarshipStatus
from scholarport.processing.analytics import calculate_financial_analytics


def _record(amount: float, status: ScholarshipStatus | None) -> ScholarshipRecord:
    return ScholarshipRecord(name=f"S{amount}", amount=amount, deadline="2025-05-01", status=status)


def test_portfolio_analytics_buckets_and_gap(scholarships, goals) -> None:
    analytics = calculate_financial_analytics(scholarships, goals)

    assert analytics.total_awarded == 12000
    assert analytics.total_applied == 5000
    assert analytics.total_need == 25000
    assert analytics.current_savings == 3000
    assert analytics.remaining_need == 10000
    assert analytics.funding_gap == 10000
    assert analytics.gap_covered_by_pending == 5000
    assert analytics.remaining_gap_after_pending == 5000
    assert analytics.gap_coverage_percentage == pytest.approx(60.0)
    assert analytics.application_success_rate == 50.0
    assert analytics.average_award_amount == 12000
    assert analytics.status_breakdown.awarded == 1
    assert analytics.status_breakdown.pending == 1
    assert analytics.status_breakdown.draft == 1
    assert analytics.status_breakdown.total == 3


def test_gap_coverage_is_full_once_awards_and_savings_meet_need() -> None:
    goals = [FinancialGoalRecord(title="Tuition", target_amount=10000, current_amount=4000)]
    scholarships = [_record(8000, ScholarshipStatus.RECEIVED)]

    analytics = calculate_financial_analytics(scholarships, goals)

    assert analytics.gap_coverage_percentage == 100
    assert analytics.funding_gap == 0
    assert analytics.remaining_need == 0


def test_no_need_means_full_coverage() -> None:
    analytics = calculate_financial_analytics([_record(500, None)], [])

    assert analytics.gap_coverage_percentage == 100
    assert analytics.application_success_rate == 0.0
    assert analytics.average_award_amount == 0.0


def test_rejected_counts_as_active_but_not_pending() -> None:
    scholarships = [
        _record(1000, ScholarshipStatus.AWARDED),
        _record(500, ScholarshipStatus.REJECTED),
        _record(700, ScholarshipStatus.NOT_STARTED),
    ]

    analytics = calculate_financial_analytics(scholarships, [])

    assert analytics.application_success_rate == 50.0
    assert analytics.total_applied == 0
    assert analytics.status_breakdown.rejected == 1
    assert analytics.status_breakdown.draft == 1


def test_success_rate_rounds_to_one_decimal() -> None:
    scholarships = [
        _record(100, ScholarshipStatus.AWARDED),
        _record(200, ScholarshipStatus.SUBMITTED),
        _record(300, ScholarshipStatus.IN_PROGRESS),
    ]

    analytics = calculate_financial_analytics(scholarships, [])

    assert analytics.application_success_rate == 33.3
    assert analytics.applications_submitted == 1
    assert analytics.applications_in_progress == 1

"""Financial analytics over a scholarship portfolio and its funding goals.

A single pass over the scholarships buckets each record by status:

- awarded-like: ``awarded``/``received``
- applied-like: ``submitted``/``in-progress``
- draft-like: ``draft``/``not-started`` or no status

``rejected`` records fall in no amount bucket but still count as active
applications when computing the success rate.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from scholarport.models.envelope import FinancialAnalytics, StatusBreakdown
from scholarport.models.records import (
    FinancialGoalRecord,
    ScholarshipRecord,
    ScholarshipStatus,
)

logger = logging.getLogger(__name__)

AWARDED_STATUSES = frozenset({ScholarshipStatus.AWARDED, ScholarshipStatus.RECEIVED})
APPLIED_STATUSES = frozenset({ScholarshipStatus.SUBMITTED, ScholarshipStatus.IN_PROGRESS})
DRAFT_STATUSES = frozenset({ScholarshipStatus.DRAFT, ScholarshipStatus.NOT_STARTED, None})


@dataclass
class _ScholarshipTally:
    awarded_count: int = 0
    applied_count: int = 0
    draft_count: int = 0
    rejected_count: int = 0
    submitted_count: int = 0
    in_progress_count: int = 0
    active_applications: int = 0
    total: int = 0
    total_awarded: float = 0.0
    total_applied: float = 0.0

    def add(self, scholarship: ScholarshipRecord) -> None:
        status = scholarship.status
        amount = scholarship.amount or 0.0
        self.total += 1

        if status in AWARDED_STATUSES:
            self.awarded_count += 1
            self.total_awarded += amount
        elif status in APPLIED_STATUSES:
            self.applied_count += 1
            self.total_applied += amount
            if status == ScholarshipStatus.SUBMITTED:
                self.submitted_count += 1
            else:
                self.in_progress_count += 1
        elif status in DRAFT_STATUSES:
            self.draft_count += 1
        else:
            self.rejected_count += 1

        if status not in DRAFT_STATUSES:
            self.active_applications += 1


def calculate_financial_analytics(
    scholarships: Iterable[ScholarshipRecord],
    financial_goals: Iterable[FinancialGoalRecord],
) -> FinancialAnalytics:
    """Compute award, application and funding-gap statistics.

    Args:
        scholarships: Tracked scholarship records
        financial_goals: Funding goals supplying the total need and savings

    Returns:
        FinancialAnalytics block suitable for export metadata
    """
    tally = _ScholarshipTally()
    for scholarship in scholarships:
        tally.add(scholarship)

    total_need = 0.0
    current_savings = 0.0
    for goal in financial_goals:
        total_need += goal.target_amount or 0.0
        current_savings += goal.current_amount or 0.0

    total_awarded = tally.total_awarded
    total_applied = tally.total_applied
    covered = total_awarded + current_savings

    remaining_need = max(0.0, total_need - current_savings - total_awarded)
    funding_gap = max(0.0, total_need - total_awarded - current_savings)
    gap_covered_by_pending = min(funding_gap, total_applied)
    remaining_gap_after_pending = max(0.0, funding_gap - total_applied)

    if total_need > 0:
        gap_coverage = min(100.0, covered / total_need * 100)
    else:
        gap_coverage = 100.0

    if tally.active_applications > 0:
        success_rate = round(tally.awarded_count / tally.active_applications * 100, 1)
    else:
        success_rate = 0.0

    average_award = total_awarded / tally.awarded_count if tally.awarded_count > 0 else 0.0

    logger.debug(
        f"Analytics over {tally.total} scholarships: awarded={total_awarded}, "
        f"applied={total_applied}, need={total_need}"
    )

    return FinancialAnalytics(
        total_awarded=total_awarded,
        total_applied=total_applied,
        total_need=total_need,
        current_savings=current_savings,
        remaining_need=remaining_need,
        funding_gap=funding_gap,
        gap_covered_by_pending=gap_covered_by_pending,
        remaining_gap_after_pending=remaining_gap_after_pending,
        gap_coverage_percentage=gap_coverage,
        application_success_rate=success_rate,
        average_award_amount=average_award,
        total_applications_submitted=tally.applied_count + tally.awarded_count,
        applications_submitted=tally.submitted_count,
        applications_awarded=tally.awarded_count,
        applications_in_progress=tally.in_progress_count,
        status_breakdown=StatusBreakdown(
            awarded=tally.awarded_count,
            pending=tally.applied_count,
            draft=tally.draft_count,
            rejected=tally.rejected_count,
            total=tally.total,
        ),
    )

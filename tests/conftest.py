from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from scholarport.models import (
    FinancialGoalRecord,
    ScholarshipRecord,
    ScholarshipStatus,
    StudentProfile,
)


@pytest.fixture
def today() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def exported_at() -> datetime:
    return datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def profile() -> StudentProfile:
    return StudentProfile(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.edu",
        gpa=3.8,
        major="Computer Science",
        graduation_year=2027,
        school="State University",
        state="CA",
        first_generation=True,
        financial_need=False,
    )


@pytest.fixture
def scholarships() -> list[ScholarshipRecord]:
    return [
        ScholarshipRecord(
            id="s-1",
            name="Merit Award",
            organization="City Foundation",
            application_url="https://example.org/merit",
            amount=5000,
            deadline="2025-03-01",
            description="For students with strong grades",
            requirements=["Minimum GPA 3.5", "Transcript"],
            status=ScholarshipStatus.SUBMITTED,
            notes="Sent on time",
        ),
        ScholarshipRecord(
            id="s-2",
            name="STEM Futures",
            organization="Tech Council",
            amount=12000,
            deadline="2025-04-15",
            description="Engineering and science majors",
            requirements=["Essay", "Two references", "Financial need statement"],
            status=ScholarshipStatus.AWARDED,
        ),
        ScholarshipRecord(
            id="s-3",
            name="Community Service Grant",
            amount=1500,
            deadline="2025-06-30",
            requirements=["Community service log"],
            status=ScholarshipStatus.DRAFT,
        ),
    ]


@pytest.fixture
def goals() -> list[FinancialGoalRecord]:
    return [
        FinancialGoalRecord(
            id="g-1",
            title="Sophomore tuition",
            target_amount=25000,
            current_amount=3000,
            deadline="2025-08-01",
            calculation_method="tuition-based",
        )
    ]

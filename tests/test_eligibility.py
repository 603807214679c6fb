from __future__ import annotations

from scholarport.models import ScholarshipRecord, StudentProfile
from scholarport.processing.eligibility import (
    assess_difficulty,
    check_eligibility,
    minimum_gpa,
    recommend_for,
)


def test_minimum_gpa_reads_highest_threshold() -> None:
    assert minimum_gpa(["GPA of 3.0 or higher", "Honors: GPA 3.50"]) == 3.5
    assert minimum_gpa(["Version 2.0 of the form"]) is None
    assert minimum_gpa([]) is None


def test_unmet_requirements_fail_eligibility() -> None:
    scholarship = ScholarshipRecord(
        name="First Gen Fund",
        requirements=["Minimum 3.2 GPA", "First generation college student"],
    )

    assert check_eligibility(scholarship, StudentProfile(gpa=3.5, first_generation=True))
    assert not check_eligibility(scholarship, StudentProfile(gpa=3.0, first_generation=True))
    assert not check_eligibility(scholarship, StudentProfile(gpa=3.5, first_generation=False))


def test_missing_profile_data_never_disqualifies() -> None:
    scholarship = ScholarshipRecord(name="Need Grant", requirements=["Demonstrated financial need", "GPA 3.9"])

    assert check_eligibility(scholarship, StudentProfile())
    assert check_eligibility(scholarship, None)


def test_difficulty_from_amount_and_requirement_count() -> None:
    assert assess_difficulty(ScholarshipRecord(name="A", amount=15000)) == "Competitive"
    assert assess_difficulty(ScholarshipRecord(name="B", amount=500, requirements=list("abcdef"))) == "Competitive"
    assert assess_difficulty(ScholarshipRecord(name="C", amount=2500)) == "Medium"
    assert assess_difficulty(ScholarshipRecord(name="D", amount=500, requirements=list("abc"))) == "Medium"
    assert assess_difficulty(ScholarshipRecord(name="E", amount=2000)) == "Easy"


def test_recommendations_from_keywords() -> None:
    scholarship = ScholarshipRecord(
        name="Women in Engineering",
        description="Supports first generation students",
        requirements=["GPA 3.5 minimum"],
    )

    assert recommend_for(scholarship) == ["STEM Students", "First-Generation", "High GPA", "Women"]
    assert recommend_for(ScholarshipRecord(name="Plain")) == ["All Students"]

"""Categorical summaries used in place of identifying data when anonymizing."""

from datetime import date
from typing import Optional

STEM_FIELDS = ("engineering", "computer", "science", "math", "technology")
BUSINESS_FIELDS = ("business", "finance", "accounting", "economics")
ARTS_FIELDS = ("art", "music", "theater", "english", "literature")

# (threshold, label), checked from the largest threshold down
GOAL_CATEGORIES = [
    (50000, "Full College Funding"),
    (20000, "Annual Tuition"),
    (10000, "Semester Support"),
]


def gpa_range(gpa: Optional[float]) -> str:
    if not gpa:
        return "Not provided"
    if gpa >= 3.7:
        return "3.7-4.0"
    if gpa >= 3.3:
        return "3.3-3.7"
    if gpa >= 3.0:
        return "3.0-3.3"
    return "2.0-3.0"


def major_category(major: Optional[str]) -> str:
    """Bucket a major into STEM, Business, Arts & Humanities or Other by keyword."""
    if not major:
        return "Undeclared"

    lower_major = major.lower()
    if any(field in lower_major for field in STEM_FIELDS):
        return "STEM"
    if any(field in lower_major for field in BUSINESS_FIELDS):
        return "Business"
    if any(field in lower_major for field in ARTS_FIELDS):
        return "Arts & Humanities"
    return "Other"


def class_standing(graduation_year: Optional[int], today: Optional[date] = None) -> str:
    """Class standing from the years left until graduation."""
    if not graduation_year:
        return "Unknown"

    current_year = (today or date.today()).year
    years_remaining = graduation_year - current_year

    if years_remaining <= 0:
        return "Graduate/Alumni"
    if years_remaining == 1:
        return "Senior"
    if years_remaining == 2:
        return "Junior"
    if years_remaining == 3:
        return "Sophomore"
    return "Freshman"


def goal_category(target_amount: Optional[float]) -> str:
    amount = target_amount or 0
    for threshold, label in GOAL_CATEGORIES:
        if amount >= threshold:
            return label
    return "Supplemental Funding"

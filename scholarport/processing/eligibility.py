"""Eligibility checks and counselor-style curation heuristics.

Requirement text is free-form, so eligibility only looks for the few rules
that can be read off it reliably (a minimum GPA, first-generation and
financial-need requirements). Missing profile data never disqualifies.
"""

import logging
import re
from typing import List, Optional

from scholarport.models.records import ScholarshipRecord, StudentProfile

logger = logging.getLogger(__name__)

GPA_PATTERN = re.compile(r"\b([0-4]\.\d{1,2})\b")

# Keyword tags for template exports: (tag, all of these words must appear)
RECOMMENDATION_RULES = [
    ("STEM Students", ("stem",)),
    ("STEM Students", ("engineering",)),
    ("First-Generation", ("first", "generation")),
    ("Financial Need", ("financial", "need")),
    ("High GPA", ("gpa", "3.5")),
    ("High GPA", ("gpa", "high")),
    ("Community Leaders", ("community", "service")),
    ("Diversity", ("minority",)),
    ("Diversity", ("diversity",)),
    ("Women", ("woman",)),
    ("Women", ("women",)),
    ("Women", ("female",)),
]


def minimum_gpa(requirements: List[str]) -> Optional[float]:
    """Return the highest GPA threshold mentioned in the requirements, if any."""
    thresholds = []
    for requirement in requirements:
        text = requirement.lower()
        if "gpa" not in text:
            continue
        thresholds.extend(float(value) for value in GPA_PATTERN.findall(text))
    return max(thresholds) if thresholds else None


def check_eligibility(
    scholarship: ScholarshipRecord,
    profile: Optional[StudentProfile],
) -> bool:
    """Check whether the student meets the scholarship's readable requirements.

    Args:
        scholarship: Scholarship to check
        profile: Student profile, or None when unknown

    Returns:
        False only when a requirement is explicitly unmet
    """
    if profile is None:
        return True

    min_gpa = minimum_gpa(scholarship.requirements)
    if min_gpa is not None and profile.gpa is not None and profile.gpa < min_gpa:
        logger.debug(f"{scholarship.name}: GPA {profile.gpa} below {min_gpa}")
        return False

    text = " ".join(scholarship.requirements).lower()
    if "first" in text and "generation" in text and profile.first_generation is False:
        return False
    if "financial need" in text and profile.financial_need is False:
        return False

    return True


def assess_difficulty(scholarship: ScholarshipRecord) -> str:
    """Rough competitiveness label from amount and requirement count."""
    amount = scholarship.amount or 0
    requirement_count = len(scholarship.requirements)

    if amount > 10000 or requirement_count > 5:
        return "Competitive"
    if amount > 2000 or requirement_count > 2:
        return "Medium"
    return "Easy"


def recommend_for(scholarship: ScholarshipRecord) -> List[str]:
    """Student groups a scholarship suits, from keywords in its text."""
    all_text = " ".join(
        [
            " ".join(scholarship.requirements),
            scholarship.name or "",
            scholarship.description or "",
        ]
    ).lower()

    tags: List[str] = []
    for tag, words in RECOMMENDATION_RULES:
        if tag not in tags and all(word in all_text for word in words):
            tags.append(tag)
    return tags or ["All Students"]

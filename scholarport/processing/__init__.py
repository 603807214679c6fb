"""Processing module for normalization, analytics, eligibility and CSV encoding."""

from scholarport.processing.analytics import calculate_financial_analytics
from scholarport.processing.eligibility import (
    assess_difficulty,
    check_eligibility,
    recommend_for,
)
from scholarport.processing.normalizer import FieldNormalizer

__all__ = [
    "FieldNormalizer",
    "assess_difficulty",
    "calculate_financial_analytics",
    "check_eligibility",
    "recommend_for",
]

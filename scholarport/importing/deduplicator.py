"""Duplicate detection between import candidates and tracked scholarships.

Two records are duplicates when their normalized names are equal and either
their amounts are within ``AMOUNT_TOLERANCE`` dollars or their deadlines are
identical. The predicate is symmetric; when a candidate matches several
tracked records the first one in collection order wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from scholarport.models.records import ScholarshipRecord
from scholarport.processing.normalizer import FieldNormalizer

logger = logging.getLogger(__name__)


@dataclass
class DuplicateMatch:
    """A candidate paired with the index of its matching existing record, if any."""

    candidate: ScholarshipRecord
    existing_index: Optional[int] = None

    @property
    def is_duplicate(self) -> bool:
        return self.existing_index is not None


class Deduplicator:
    """Pairs import candidates with existing records."""

    # Amounts closer than this are treated as the same award
    AMOUNT_TOLERANCE = 100

    def __init__(self) -> None:
        self.normalizer = FieldNormalizer()

    def _normalize_name(self, name: Optional[str]) -> str:
        """Normalize name for comparison (trimmed, single-spaced, case-folded)."""
        if not name:
            return ""
        return re.sub(r"\s+", " ", name.strip()).casefold()

    def _normalize_deadline(self, deadline: Optional[str]) -> str:
        if not deadline:
            return ""
        parsed = self.normalizer.parse_date(deadline)
        return parsed.isoformat() if parsed else deadline.strip()

    def is_duplicate(self, a: ScholarshipRecord, b: ScholarshipRecord) -> bool:
        """Check whether two records describe the same scholarship.

        Args:
            a: First record
            b: Second record

        Returns:
            True when names match and amount or deadline matches
        """
        name_a = self._normalize_name(a.name)
        if not name_a or name_a != self._normalize_name(b.name):
            return False

        amount_match = abs((a.amount or 0) - (b.amount or 0)) < self.AMOUNT_TOLERANCE

        deadline_a = self._normalize_deadline(a.deadline)
        deadline_match = bool(deadline_a) and deadline_a == self._normalize_deadline(b.deadline)

        return amount_match or deadline_match

    def find_match(
        self,
        candidate: ScholarshipRecord,
        existing: Sequence[ScholarshipRecord],
    ) -> Optional[int]:
        """Index of the first existing record matching the candidate, or None."""
        for index, record in enumerate(existing):
            if self.is_duplicate(record, candidate):
                return index
        return None

    def detect(
        self,
        candidates: Sequence[ScholarshipRecord],
        existing: Sequence[ScholarshipRecord],
    ) -> List[DuplicateMatch]:
        """Pair every candidate with its match in the existing collection.

        Args:
            candidates: Parsed and validated import candidates
            existing: Tracked scholarships, in collection order

        Returns:
            One DuplicateMatch per candidate, in candidate order
        """
        matches = [DuplicateMatch(c, self.find_match(c, existing)) for c in candidates]

        duplicate_count = sum(1 for m in matches if m.is_duplicate)
        logger.info(f"Found {duplicate_count} duplicates among {len(candidates)} candidates")
        return matches

"""Field normalization for scholarship and goal records.

Resolves aliased/duck-typed input records (spreadsheet rows, older exports,
records handed over by the dashboard) into the canonical record models, and
standardizes dates, amounts, statuses and requirement lists on the way.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

from scholarport.models.records import (
    FinancialGoalRecord,
    ScholarshipRecord,
    ScholarshipStatus,
)

logger = logging.getLogger(__name__)

RawRecord = Union[Mapping[str, Any], BaseModel]

DEFAULT_SCHOLARSHIP_NAME = "Scholarship Application"


class FieldNormalizer:
    """Normalizes heterogeneous records into canonical models.

    ``FIELD_ALIASES`` is the single precedence table for aliased fields: the
    first key holding a non-empty value wins. Both camelCase and snake_case
    spellings are listed where records arrive in either form.
    """

    FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
        "name": ("name", "title", "organization"),
        "organization": ("organization", "provider", "sponsor"),
        "application_url": ("applicationUrl", "application_url", "link", "url"),
        "status": ("status", "applicationStatus", "application_status"),
        "notes": ("notes", "personalNotes", "personal_notes"),
        "submission_date": ("submissionDate", "submission_date"),
        "follow_up_date": ("followUpDate", "follow_up_date"),
        "target_amount": ("targetAmount", "target_amount"),
        "current_amount": ("currentAmount", "current_amount"),
        "calculation_method": ("calculationMethod", "calculation_method"),
        "goal_title": ("title", "name"),
    }

    # Common date formats from spreadsheets and older exports
    DATE_FORMATS = [
        "%Y-%m-%d",           # ISO format
        "%m/%d/%Y",           # US format
        "%m/%d/%y",           # US short year
        "%B %d, %Y",          # January 15, 2026
        "%B %d %Y",           # January 15 2026
        "%b %d, %Y",          # Jan 15, 2026
        "%b %d %Y",           # Jan 15 2026
        "%d %B %Y",           # 15 January 2026
        "%d %b %Y",           # 15 Jan 2026
        "%Y/%m/%d",           # ISO with slashes
        "%m-%d-%Y",           # US with dashes
    ]

    ISO_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")
    REQUIREMENT_SPLIT = re.compile(r"[;,\n]")

    @staticmethod
    def _as_mapping(raw: RawRecord) -> Mapping[str, Any]:
        if isinstance(raw, BaseModel):
            return raw.model_dump(by_alias=True)
        return raw

    def resolve(
        self,
        raw: RawRecord,
        field: str,
        default: Any = None,
    ) -> Any:
        """Return the first non-empty value among a canonical field's aliases.

        Args:
            raw: Input record (mapping or model)
            field: Canonical field name, a key of ``FIELD_ALIASES``
            default: Value returned when no alias holds a value

        Returns:
            The resolved value or ``default``
        """
        record = self._as_mapping(raw)
        for key in self.FIELD_ALIASES.get(field, (field,)):
            value = record.get(key)
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            return value
        return default

    def parse_date(self, value: Any) -> Optional[date]:
        """Parse a date from a string or date object, None when it cannot be parsed."""
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        date_str = str(value).strip()
        if not date_str:
            return None

        iso_match = self.ISO_PREFIX.match(date_str)
        if iso_match:
            try:
                return date.fromisoformat(iso_match.group(1))
            except ValueError:
                return None

        # Remove ordinal suffixes like "st", "nd", "rd", "th"
        date_str = re.sub(r"(\d+)(st|nd|rd|th)", r"\1", date_str)

        for fmt in self.DATE_FORMATS:
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                continue
        return None

    def normalize_date(self, value: Any) -> Optional[str]:
        """Convert a date in any supported format to ISO (YYYY-MM-DD).

        Unparseable text is returned stripped rather than dropped so that
        validation can report it; empty input yields None.
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None

        parsed = self.parse_date(value)
        if parsed is not None:
            return parsed.isoformat()

        logger.warning(f"Could not parse date: {value}")
        return str(value).strip()

    def clean_amount(self, value: Any) -> float:
        """Convert an amount to non-negative dollars.

        Handles numbers and strings like "$5,000", "€1 200" or "1,200.50".
        Anything unparseable or negative becomes 0.
        """
        if value is None or isinstance(value, bool):
            return 0.0

        if isinstance(value, (int, float)):
            amount = float(value)
        else:
            clean = re.sub(r"[$€£¥,\s]", "", str(value))
            try:
                amount = float(clean)
            except ValueError:
                logger.debug(f"Unparseable amount {value!r}, using 0")
                return 0.0

        if amount != amount or amount < 0:  # NaN or negative
            logger.warning(f"Discarding invalid amount {value!r}")
            return 0.0
        return amount

    def split_requirements(self, value: Any) -> List[str]:
        """Turn a requirement list or delimited string into trimmed, non-empty entries."""
        if not value:
            return []
        if isinstance(value, str):
            parts = self.REQUIREMENT_SPLIT.split(value)
        elif isinstance(value, (list, tuple)):
            parts = [str(item) for item in value if item is not None]
        else:
            parts = [str(value)]
        return [part.strip() for part in parts if part.strip()]

    def normalize_status(self, value: Any) -> Optional[ScholarshipStatus]:
        """Map free-form status text onto ``ScholarshipStatus``, None when unknown."""
        if value is None:
            return None
        if isinstance(value, ScholarshipStatus):
            return value

        key = re.sub(r"[\s_]+", "-", str(value).strip().lower())
        if not key:
            return None
        try:
            return ScholarshipStatus(key)
        except ValueError:
            logger.debug(f"Unknown status {value!r}, leaving status unset")
            return None

    def normalize_scholarship(
        self,
        raw: RawRecord,
        fill_defaults: bool = True,
    ) -> ScholarshipRecord:
        """Normalize a single scholarship record.

        Args:
            raw: Raw scholarship mapping or model
            fill_defaults: Substitute a literal name when no name alias is set.
                Export paths fill it in; import paths leave it empty so the
                validator can report the missing name.

        Returns:
            Canonical ScholarshipRecord
        """
        record = self._as_mapping(raw)
        application = record.get("applicationData") or record.get("application_data") or {}

        name = self.resolve(record, "name")
        if name is None and fill_defaults:
            name = DEFAULT_SCHOLARSHIP_NAME

        essays = record.get("essays") or application.get("essays") or []
        documents = record.get("documents") or application.get("documents") or []
        notes = self.resolve(record, "notes") or self.resolve(application, "notes")

        record_id = record.get("id")
        return ScholarshipRecord(
            id=str(record_id) if record_id not in (None, "") else None,
            name=str(name).strip() if name is not None else None,
            organization=self.resolve(record, "organization"),
            application_url=self.resolve(record, "application_url"),
            amount=self.clean_amount(record.get("amount")),
            deadline=self.normalize_date(record.get("deadline")),
            description=str(record.get("description") or ""),
            requirements=self.split_requirements(record.get("requirements")),
            status=self.normalize_status(self.resolve(record, "status")),
            essays=essays,
            documents=documents,
            notes=notes,
            submission_date=self.normalize_date(self.resolve(record, "submission_date")),
            follow_up_date=self.normalize_date(self.resolve(record, "follow_up_date")),
        )

    def normalize_goal(self, raw: RawRecord) -> FinancialGoalRecord:
        """Normalize a single financial goal record."""
        record = self._as_mapping(raw)
        goal_id = record.get("id")
        return FinancialGoalRecord(
            id=str(goal_id) if goal_id not in (None, "") else None,
            title=str(self.resolve(record, "goal_title", "")).strip(),
            target_amount=self.clean_amount(self.resolve(record, "target_amount")),
            current_amount=self.clean_amount(self.resolve(record, "current_amount")),
            deadline=self.normalize_date(record.get("deadline")),
            calculation_method=self.resolve(record, "calculation_method"),
        )

    def normalize_batch(
        self,
        scholarships: List[RawRecord],
        fill_defaults: bool = True,
    ) -> List[ScholarshipRecord]:
        """Normalize a batch of scholarships, preserving order."""
        normalized = [self.normalize_scholarship(s, fill_defaults) for s in scholarships]
        logger.debug(f"Normalized {len(normalized)} scholarships")
        return normalized

"""Structural and semantic checks on parsed import candidates.

Hard errors block the import; warnings are reported alongside them but never
change the outcome. All checks run so one pass reports every problem.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from scholarport.importing.parser import ParsedImport
from scholarport.processing.normalizer import FieldNormalizer

logger = logging.getLogger(__name__)

WARNING_PREFIX = "Warning:"
STALE_AFTER_DAYS = 6 * 30


@dataclass
class ValidationReport:
    """Errors and warnings from one validation pass."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        """Errors followed by warnings, in the order they were found."""
        return [*self.errors, *self.warnings]


def _parse_export_date(value: object) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        return FieldNormalizer().parse_date(value)


class ImportValidator:
    """Validates the output of ``ImportParser.parse``."""

    def __init__(self) -> None:
        self.normalizer = FieldNormalizer()

    def validate(self, parsed: ParsedImport, today: Optional[date] = None) -> ValidationReport:
        """Run envelope and per-record checks.

        Args:
            parsed: Parser output
            today: Reference date for staleness and past-deadline warnings

        Returns:
            ValidationReport, valid when there are no hard errors
        """
        today = today or date.today()
        report = ValidationReport()

        if parsed.header is not None:
            self._check_envelope(parsed, today, report)

        for index, candidate in enumerate(parsed.candidates, 1):
            label = f"Scholarship {index}"

            if not candidate.name:
                report.errors.append(f"{label}: Missing name")

            if not candidate.deadline:
                report.errors.append(f"{label}: Missing deadline")
            else:
                deadline = self.normalizer.parse_date(candidate.deadline)
                if deadline is None:
                    report.errors.append(f"{label}: Invalid deadline format ({candidate.deadline})")
                elif deadline < today:
                    report.warnings.append(
                        f'{WARNING_PREFIX} Scholarship "{candidate.name or label}": '
                        f"Deadline has passed ({candidate.deadline})"
                    )

            if candidate.amount <= 0:
                report.errors.append(f"{label}: Invalid amount")

        if report.valid:
            logger.info(f"Validated {len(parsed.candidates)} candidates with {len(report.warnings)} warnings")
        else:
            logger.info(f"Validation found {len(report.errors)} errors")
        return report

    def _check_envelope(self, parsed: ParsedImport, today: date, report: ValidationReport) -> None:
        header = parsed.header or {}
        export_date_raw = header.get("exportDate")

        if not export_date_raw:
            report.errors.append("Missing export date")
        else:
            export_date = _parse_export_date(export_date_raw)
            if export_date is None:
                report.errors.append(f"Invalid export date ({export_date_raw})")
            else:
                age_days = (today - export_date).days
                if age_days > STALE_AFTER_DAYS:
                    months_old = round(age_days / 30)
                    report.warnings.append(
                        f"{WARNING_PREFIX} Import data is {months_old} months old. "
                        "Scholarship deadlines may be outdated."
                    )

        if not parsed.scholarships_is_list:
            report.errors.append("Invalid or missing scholarships data")

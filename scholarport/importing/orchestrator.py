"""Import pipeline: parse, validate, detect duplicates, resolve, commit.

The pipeline never raises for expected problems. A malformed payload or any
hard validation error ends in the ``REJECTED`` state with nothing committed;
otherwise the whole resolved collection is returned at once.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from scholarport.importing.deduplicator import Deduplicator
from scholarport.importing.parser import ImportParser, ParseError, Payload
from scholarport.importing.resolver import ConflictRecord, ConflictResolver, reconcile_goals
from scholarport.importing.validator import ImportValidator
from scholarport.models.options import ImportOptions, MergeStrategy, SourceKind
from scholarport.models.records import FinancialGoalRecord, ScholarshipRecord
from scholarport.processing.normalizer import FieldNormalizer, RawRecord

logger = logging.getLogger(__name__)


class ImportState(str, Enum):
    PARSED = "parsed"
    VALIDATED = "validated"
    DUPLICATES_DETECTED = "duplicates-detected"
    RESOLVED = "resolved"
    COMMITTED = "committed"
    REJECTED = "rejected"


@dataclass
class ImportSummary:
    scholarships_imported: int = 0
    duplicates_found: int = 0
    conflicts_resolved: int = 0
    goals_imported: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "scholarshipsImported": self.scholarships_imported,
            "duplicatesFound": self.duplicates_found,
            "conflictsResolved": self.conflicts_resolved,
            "goalsImported": self.goals_imported,
        }


@dataclass
class ImportOutcome:
    """Result of one import call.

    ``errors`` holds hard errors and ``Warning:``-prefixed warnings in one
    ordered list. ``records`` and ``goals`` are the full resolved
    collections and are empty unless the import was committed.
    """

    success: bool
    state: ImportState
    summary: ImportSummary = field(default_factory=ImportSummary)
    conflicts: List[ConflictRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    records: List[ScholarshipRecord] = field(default_factory=list)
    goals: List[FinancialGoalRecord] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [e for e in self.errors if e.startswith("Warning:")]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "state": self.state.value,
            "summary": self.summary.to_dict(),
            "conflicts": [c.to_dict() for c in self.conflicts],
            "errors": list(self.errors),
        }


def _advance(state: ImportState) -> None:
    logger.debug(f"Import pipeline reached {state.value}")


def _rejected(errors: List[str]) -> ImportOutcome:
    logger.info(f"Import rejected with {len(errors)} messages")
    return ImportOutcome(success=False, state=ImportState.REJECTED, errors=errors)


class ImportOrchestrator:
    """Runs the import pipeline against an existing scholarship collection."""

    def __init__(self) -> None:
        self.parser = ImportParser()
        self.validator = ImportValidator()
        self.deduplicator = Deduplicator()
        self.resolver = ConflictResolver()
        self.normalizer = FieldNormalizer()

    def run(
        self,
        payload: Payload,
        existing: Iterable[Union[ScholarshipRecord, RawRecord]],
        source_kind: Union[SourceKind, str] = SourceKind.STRUCTURED,
        options: Optional[ImportOptions] = None,
        today: Optional[date] = None,
        existing_goals: Optional[Iterable[Union[FinancialGoalRecord, RawRecord]]] = None,
    ) -> ImportOutcome:
        """Import a payload.

        Args:
            payload: Structured (JSON) or delimited (CSV) payload
            existing: Currently tracked scholarships
            source_kind: ``json`` or ``csv``
            options: Merge and decoding options, defaults when omitted
            today: Reference date for date-based warnings
            existing_goals: Currently tracked financial goals

        Returns:
            ImportOutcome in the ``COMMITTED`` or ``REJECTED`` state
        """
        options = options or ImportOptions()

        try:
            parsed = self.parser.parse(
                payload,
                source_kind,
                column_mapping=options.column_mapping,
                has_headers=options.has_headers,
            )
        except ParseError as e:
            return _rejected([f"Import failed: {e}"])
        _advance(ImportState.PARSED)

        report = self.validator.validate(parsed, today)
        if not report.valid:
            return _rejected(report.messages)
        _advance(ImportState.VALIDATED)

        existing_records = [
            record if isinstance(record, ScholarshipRecord)
            else self.normalizer.normalize_scholarship(record, fill_defaults=False)
            for record in existing
        ]
        matches = self.deduplicator.detect(parsed.candidates, existing_records)
        _advance(ImportState.DUPLICATES_DETECTED)

        resolution = self.resolver.resolve(matches, existing_records, options)
        _advance(ImportState.RESOLVED)

        goals_imported = 0
        if parsed.goals and options.merge_strategy != MergeStrategy.SKIP_DUPLICATES:
            goals_imported = len(parsed.goals)
        tracked_goals = [
            goal if isinstance(goal, FinancialGoalRecord) else self.normalizer.normalize_goal(goal)
            for goal in existing_goals or []
        ]

        outcome = ImportOutcome(
            success=True,
            state=ImportState.COMMITTED,
            summary=ImportSummary(
                scholarships_imported=resolution.imported,
                duplicates_found=resolution.duplicates,
                conflicts_resolved=resolution.resolved,
                goals_imported=goals_imported,
            ),
            conflicts=resolution.conflicts,
            errors=report.messages,
            records=resolution.records,
            goals=reconcile_goals(tracked_goals, parsed.goals, options.merge_strategy),
        )
        logger.info(
            f"Import committed: {outcome.summary.scholarships_imported} new, "
            f"{outcome.summary.duplicates_found} duplicates, "
            f"{outcome.summary.conflicts_resolved} resolved"
        )
        return outcome


def import_json(
    payload: Union[str, bytes, Mapping[str, Any]],
    existing: Iterable[Union[ScholarshipRecord, RawRecord]],
    options: Optional[ImportOptions] = None,
    today: Optional[date] = None,
) -> ImportOutcome:
    """Import a structured export envelope."""
    return ImportOrchestrator().run(payload, existing, SourceKind.STRUCTURED, options, today)


def import_csv(
    payload: Union[str, bytes],
    existing: Iterable[Union[ScholarshipRecord, RawRecord]],
    options: Optional[ImportOptions] = None,
    today: Optional[date] = None,
) -> ImportOutcome:
    """Import spreadsheet rows."""
    return ImportOrchestrator().run(payload, existing, SourceKind.DELIMITED, options, today)

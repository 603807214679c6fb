"""Conflict resolution for duplicate import candidates."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from scholarport.importing.deduplicator import DuplicateMatch
from scholarport.models.options import ImportOptions, MergeStrategy
from scholarport.models.records import FinancialGoalRecord, ScholarshipRecord
from scholarport.processing.normalizer import FieldNormalizer

logger = logging.getLogger(__name__)


class ConflictType(str, Enum):
    DUPLICATE = "duplicate-scholarship"
    DATE_CONFLICT = "date-conflict"


class Resolution(str, Enum):
    REPLACE = "replace"
    MERGE = "merge"
    SKIP = "skip"
    MANUAL = "manual"


@dataclass
class ConflictRecord:
    """Audit entry for one matched candidate/existing pair."""

    conflict_type: ConflictType
    scholarship_name: str
    existing: ScholarshipRecord
    incoming: ScholarshipRecord
    resolution: Resolution

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.conflict_type.value,
            "scholarshipName": self.scholarship_name,
            "existingData": self.existing.to_wire(),
            "importedData": self.incoming.to_wire(),
            "resolution": self.resolution.value,
        }


@dataclass
class ResolutionResult:
    """Resolved collection plus the bookkeeping the import summary needs."""

    records: List[ScholarshipRecord] = field(default_factory=list)
    conflicts: List[ConflictRecord] = field(default_factory=list)
    imported: int = 0
    duplicates: int = 0
    resolved: int = 0


def merge_records(
    existing: ScholarshipRecord,
    incoming: ScholarshipRecord,
    preserve_progress: bool,
) -> ScholarshipRecord:
    """Take descriptive fields from the incoming record onto the existing one.

    Essays, documents, notes and the id stay with the existing record. The
    status is kept only when ``preserve_progress`` is set. Description,
    requirements, organization and URL fall back to the existing values when
    the incoming ones are empty. Name, amount and deadline always come from
    the incoming record.

    When both records carry every descriptive field, the result matches
    ``replace_record`` except for status and the tracked application detail
    (essays, documents, notes and dates).
    """
    return existing.model_copy(
        update={
            "name": incoming.name,
            "amount": incoming.amount,
            "deadline": incoming.deadline,
            "description": incoming.description or existing.description,
            "requirements": list(incoming.requirements or existing.requirements),
            "organization": incoming.organization or existing.organization,
            "application_url": incoming.application_url or existing.application_url,
            "status": existing.status if preserve_progress else incoming.status,
        }
    )


def replace_record(existing: ScholarshipRecord, incoming: ScholarshipRecord) -> ScholarshipRecord:
    """The incoming record supersedes the existing one, which keeps only its id.

    Unlike ``merge_records`` nothing falls back: an empty incoming
    description or requirement list clears the tracked one. Essays,
    documents, notes and dates are whatever the incoming record carries.
    """
    return incoming.model_copy(update={"id": existing.id or incoming.id})


class ConflictResolver:
    """Applies one merge strategy to every matched pair of an import."""

    def __init__(self) -> None:
        self.normalizer = FieldNormalizer()

    def _conflict_type(self, existing: ScholarshipRecord, incoming: ScholarshipRecord) -> ConflictType:
        existing_deadline = self.normalizer.parse_date(existing.deadline)
        incoming_deadline = self.normalizer.parse_date(incoming.deadline)
        if existing_deadline and incoming_deadline and existing_deadline != incoming_deadline:
            return ConflictType.DATE_CONFLICT
        return ConflictType.DUPLICATE

    def resolve(
        self,
        matches: Sequence[DuplicateMatch],
        existing: Sequence[ScholarshipRecord],
        options: ImportOptions,
    ) -> ResolutionResult:
        """Resolve matched pairs and append new records.

        Args:
            matches: Detector output, one entry per candidate
            existing: Tracked scholarships the matches index into
            options: Import options carrying the strategy

        Returns:
            ResolutionResult whose records are the existing collection with
            matched entries resolved in place, followed by new records
        """
        strategy = MergeStrategy(options.merge_strategy)
        result = ResolutionResult(records=list(existing))

        for match in matches:
            incoming = match.candidate
            if not match.is_duplicate:
                result.records.append(incoming)
                result.imported += 1
                continue

            index = match.existing_index
            current = result.records[index]
            result.duplicates += 1

            if not options.auto_resolve_conflicts:
                resolution = Resolution.MANUAL
            elif strategy == MergeStrategy.REPLACE:
                result.records[index] = replace_record(current, incoming)
                resolution = Resolution.REPLACE
            elif strategy == MergeStrategy.MERGE:
                result.records[index] = merge_records(
                    current, incoming, options.preserve_existing_progress
                )
                resolution = Resolution.MERGE
            else:
                resolution = Resolution.SKIP

            if resolution in (Resolution.REPLACE, Resolution.MERGE):
                result.resolved += 1

            result.conflicts.append(
                ConflictRecord(
                    conflict_type=self._conflict_type(current, incoming),
                    scholarship_name=incoming.name or current.name or "",
                    existing=current,
                    incoming=incoming,
                    resolution=resolution,
                )
            )
            logger.debug(f"{incoming.name}: {resolution.value}")

        return result


def _same_goal(existing: FinancialGoalRecord, incoming: FinancialGoalRecord) -> bool:
    if existing.id and incoming.id:
        return existing.id == incoming.id
    title = existing.title.strip().casefold()
    return bool(title) and title == incoming.title.strip().casefold() and existing.deadline == incoming.deadline


def _merge_goal(existing: FinancialGoalRecord, incoming: FinancialGoalRecord) -> FinancialGoalRecord:
    return existing.model_copy(
        update={
            "title": incoming.title or existing.title,
            "target_amount": incoming.target_amount or existing.target_amount,
            "current_amount": incoming.current_amount or existing.current_amount,
            "deadline": incoming.deadline or existing.deadline,
            "calculation_method": incoming.calculation_method or existing.calculation_method,
        }
    )


def reconcile_goals(
    existing: Sequence[FinancialGoalRecord],
    incoming: Sequence[FinancialGoalRecord],
    strategy: MergeStrategy,
) -> List[FinancialGoalRecord]:
    """Fold imported financial goals into the tracked ones.

    A goal matches when both ids are set and equal, or, lacking ids, when
    the title (case-insensitive) and deadline agree. Under ``replace`` a
    matched goal becomes the incoming one under the existing id; under
    ``merge`` empty incoming amounts and fields keep the tracked values.
    Unmatched goals are appended. ``skip-duplicates`` leaves the tracked
    goals untouched.

    Returns:
        The full goal collection after the import
    """
    strategy = MergeStrategy(strategy)
    goals = list(existing)
    if strategy == MergeStrategy.SKIP_DUPLICATES:
        return goals

    for goal in incoming:
        index: Optional[int] = next(
            (i for i, current in enumerate(goals) if _same_goal(current, goal)), None
        )
        if index is None:
            goals.append(goal)
            continue

        if strategy == MergeStrategy.REPLACE:
            goals[index] = goal.model_copy(update={"id": goals[index].id or goal.id})
        else:
            goals[index] = _merge_goal(goals[index], goal)
        logger.debug(f"Goal {goal.title!r}: {strategy.value}")
    return goals

"""Decode import payloads into candidate scholarship records.

Structured payloads are export envelopes (JSON). Delimited payloads are
spreadsheet rows; their columns are mapped to canonical fields by an explicit
caller mapping, by recognised header names, or by position.
"""

import csv
import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from scholarport.models.options import SourceKind
from scholarport.models.records import FinancialGoalRecord, ScholarshipRecord
from scholarport.processing.delimited import decode_rows
from scholarport.processing.normalizer import FieldNormalizer

logger = logging.getLogger(__name__)

Payload = Union[str, bytes, Mapping[str, Any]]


class ParseError(ValueError):
    """Raised when an import payload cannot be decoded."""


# Canonical column name -> record field it fills
COLUMN_FIELDS: Dict[str, str] = {
    "Scholarship Name": "name",
    "Amount": "amount",
    "Deadline": "deadline",
    "Requirements": "requirements",
    "Description": "description",
    "Organization": "organization",
    "Application Status": "status",
    "Website/Contact": "applicationUrl",
    "Notes": "notes",
}

# Positional layout used when there is no mapping and no recognised header
DEFAULT_COLUMNS: Dict[str, int] = {
    "Scholarship Name": 0,
    "Amount": 1,
    "Deadline": 2,
    "Requirements": 3,
    "Description": 4,
}

# Lower-cased header text -> canonical column name
HEADER_ALIASES: Dict[str, str] = {
    "scholarship name": "Scholarship Name",
    "scholarship": "Scholarship Name",
    "name": "Scholarship Name",
    "title": "Scholarship Name",
    "amount": "Amount",
    "award amount": "Amount",
    "deadline": "Deadline",
    "due date": "Deadline",
    "requirements": "Requirements",
    "description": "Description",
    "organization": "Organization",
    "provider": "Organization",
    "sponsor": "Organization",
    "application status": "Application Status",
    "status": "Application Status",
    "website/contact": "Website/Contact",
    "website": "Website/Contact",
    "application url": "Website/Contact",
    "url": "Website/Contact",
    "link": "Website/Contact",
    "notes": "Notes",
}


@dataclass
class ParsedImport:
    """Output of the parse stage."""

    source_kind: SourceKind
    candidates: List[ScholarshipRecord] = field(default_factory=list)
    goals: List[FinancialGoalRecord] = field(default_factory=list)
    header: Optional[Dict[str, Any]] = None    # envelope fields, structured input only
    scholarships_is_list: bool = True          # False when the envelope's list was malformed


def canonical_column(name: str) -> Optional[str]:
    """Resolve a header or mapping key to a canonical column name."""
    return HEADER_ALIASES.get(str(name).strip().lower())


def imported_id(index: int, name: Optional[str], deadline: Optional[str]) -> str:
    """Deterministic id for an imported record that arrived without one."""
    key = f"{index}|{(name or '').lower()}|{deadline or ''}"
    return f"imported-{hashlib.md5(key.encode()).hexdigest()[:12]}"


class ImportParser:
    """Parses structured or delimited payloads into candidate records."""

    def __init__(self) -> None:
        self.normalizer = FieldNormalizer()

    def parse(
        self,
        payload: Payload,
        source_kind: Union[SourceKind, str] = SourceKind.STRUCTURED,
        column_mapping: Optional[Mapping[str, Any]] = None,
        has_headers: bool = True,
    ) -> ParsedImport:
        """Decode a payload into candidate records.

        Args:
            payload: JSON text/bytes or decoded mapping, or delimited text
            source_kind: ``json`` or ``csv``
            column_mapping: Column name -> index for delimited text
            has_headers: Whether the first delimited row is a header

        Returns:
            ParsedImport with candidates in payload order

        Raises:
            ParseError: If the payload is malformed
        """
        source_kind = SourceKind(source_kind)
        if source_kind == SourceKind.STRUCTURED:
            parsed = self.parse_structured(payload)
        else:
            parsed = self.parse_delimited(payload, column_mapping, has_headers)

        logger.info(f"Parsed {len(parsed.candidates)} candidate scholarships from {source_kind.value}")
        return parsed

    def parse_structured(self, payload: Payload) -> ParsedImport:
        if isinstance(payload, Mapping):
            data = payload
        else:
            try:
                data = json.loads(payload)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ParseError(f"Invalid JSON: {e}") from e

        if not isinstance(data, Mapping):
            raise ParseError("Structured payload must be a JSON object")

        header = {k: v for k, v in data.items() if k not in ("scholarships", "financialGoals")}
        parsed = ParsedImport(source_kind=SourceKind.STRUCTURED, header=header)

        entries = data.get("scholarships")
        if not isinstance(entries, list):
            parsed.scholarships_is_list = False
        else:
            for index, entry in enumerate(entries):
                parsed.candidates.append(self._candidate(entry, index))

        goals = data.get("financialGoals")
        if isinstance(goals, list):
            for index, goal in enumerate(goals):
                if not isinstance(goal, Mapping):
                    raise ParseError(f"Financial goal {index + 1} is not an object")
                try:
                    parsed.goals.append(self.normalizer.normalize_goal(goal))
                except ValidationError as e:
                    raise ParseError(f"Financial goal {index + 1}: {e}") from e

        return parsed

    def parse_delimited(
        self,
        payload: Payload,
        column_mapping: Optional[Mapping[str, Any]] = None,
        has_headers: bool = True,
    ) -> ParsedImport:
        if isinstance(payload, bytes):
            try:
                payload = payload.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Delimited payload is not UTF-8 text: {e}") from e
        if not isinstance(payload, str):
            raise ParseError("Delimited payload must be text")

        try:
            rows = decode_rows(payload)
        except csv.Error as e:
            raise ParseError(f"Malformed delimited text: {e}") from e

        parsed = ParsedImport(source_kind=SourceKind.DELIMITED)
        if not rows:
            return parsed

        header = rows[0] if has_headers else None
        data_rows = rows[1:] if has_headers else rows
        expected = len(rows[0])

        columns = self._resolve_columns(header, column_mapping)
        logger.debug(f"Delimited column layout: {columns}")

        for offset, row in enumerate(data_rows):
            row_number = offset + (2 if has_headers else 1)
            if len(row) != expected:
                raise ParseError(
                    f"Row {row_number} has {len(row)} fields, expected {expected}"
                )

            raw: Dict[str, Any] = {}
            for column, index in columns.items():
                value = row[index] if 0 <= index < len(row) else ""
                raw[COLUMN_FIELDS[column]] = value
            parsed.candidates.append(self._candidate(raw, offset))

        return parsed

    def _resolve_columns(
        self,
        header: Optional[List[str]],
        column_mapping: Optional[Mapping[str, Any]],
    ) -> Dict[str, int]:
        """Work out which index feeds each canonical column."""
        if column_mapping:
            columns: Dict[str, int] = {}
            for key, index in column_mapping.items():
                column = key if key in COLUMN_FIELDS else canonical_column(key)
                if column is None:
                    logger.warning(f"Ignoring unknown mapped column {key!r}")
                    continue
                try:
                    columns[column] = int(index)
                except (TypeError, ValueError) as e:
                    raise ParseError(f"Column mapping for {key!r} is not an index: {index!r}") from e
            # Unmapped core columns keep their positional default
            for column, index in DEFAULT_COLUMNS.items():
                columns.setdefault(column, index)
            return columns

        if header:
            from_header: Dict[str, int] = {}
            for index, name in enumerate(header):
                column = canonical_column(name)
                if column is not None and column not in from_header:
                    from_header[column] = index
            if from_header:
                return from_header

        return dict(DEFAULT_COLUMNS)

    def _candidate(self, entry: Any, index: int) -> ScholarshipRecord:
        if not isinstance(entry, Mapping):
            raise ParseError(f"Scholarship {index + 1} is not an object")
        try:
            candidate = self.normalizer.normalize_scholarship(entry, fill_defaults=False)
        except (ValidationError, AttributeError, TypeError) as e:
            raise ParseError(f"Scholarship {index + 1}: {e}") from e

        if candidate.id is None:
            candidate.id = imported_id(index, candidate.name, candidate.deadline)
        return candidate

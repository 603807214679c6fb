from __future__ import annotations

from datetime import date

from scholarport.importing.parser import ImportParser
from scholarport.importing.validator import ImportValidator

TODAY = date(2025, 1, 15)


def _validate(payload, source_kind="json", **kwargs):
    parsed = ImportParser().parse(payload, source_kind, **kwargs)
    return ImportValidator().validate(parsed, TODAY)


def test_clean_payload_is_valid() -> None:
    report = _validate(
        {
            "exportDate": "2025-01-10T12:00:00Z",
            "scholarships": [{"name": "A", "amount": 100, "deadline": "2025-03-01"}],
        }
    )

    assert report.valid
    assert report.messages == []


def test_every_record_problem_is_reported() -> None:
    report = _validate(
        {
            "exportDate": "2025-01-10",
            "scholarships": [
                {"amount": 100, "deadline": "2025-03-01"},
                {"name": "B", "amount": 0},
                {"name": "C", "amount": 50, "deadline": "next spring"},
            ],
        }
    )

    assert not report.valid
    assert report.errors == [
        "Scholarship 1: Missing name",
        "Scholarship 2: Missing deadline",
        "Scholarship 2: Invalid amount",
        "Scholarship 3: Invalid deadline format (next spring)",
    ]


def test_envelope_errors() -> None:
    assert _validate({"scholarships": []}).errors == ["Missing export date"]
    assert _validate({"exportDate": "yesterday", "scholarships": []}).errors == [
        "Invalid export date (yesterday)"
    ]
    assert _validate({"exportDate": "2025-01-01"}).errors == ["Invalid or missing scholarships data"]


def test_stale_export_and_past_deadline_only_warn() -> None:
    report = _validate(
        {
            "exportDate": "2024-03-01T00:00:00Z",
            "scholarships": [{"name": "Old", "amount": 100, "deadline": "2020-01-01"}],
        }
    )

    assert report.valid
    assert report.warnings == [
        "Warning: Import data is 11 months old. Scholarship deadlines may be outdated.",
        'Warning: Scholarship "Old": Deadline has passed (2020-01-01)',
    ]


def test_delimited_input_skips_envelope_checks() -> None:
    report = _validate("Name,Amount,Deadline\nA,$100,2025-02-01\n", "csv")

    assert report.valid

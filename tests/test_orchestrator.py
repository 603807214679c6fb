from __future__ import annotations

import json

from scholarport.importing import ImportOrchestrator, ImportState, import_csv, import_json
from scholarport.models import ExportOptions, ImportOptions, MergeStrategy, ScholarshipStatus
from scholarport.output import build_envelope, serialize


def _previous_export(scholarships, goals, exported_at) -> str:
    options = ExportOptions(include_personal_responses=True, include_financial_info=True)
    return serialize(build_envelope(scholarships, None, goals, options, "full-backup", exported_at), options)


def test_reimporting_an_export_with_skip_is_idempotent(scholarships, goals, exported_at, today) -> None:
    payload = _previous_export(scholarships, goals, exported_at)
    options = ImportOptions(merge_strategy=MergeStrategy.SKIP_DUPLICATES)

    outcome = import_json(payload, scholarships, options, today)

    assert outcome.success
    assert outcome.state == ImportState.COMMITTED
    assert outcome.summary.scholarships_imported == 0
    assert outcome.summary.duplicates_found == len(scholarships)
    assert outcome.summary.conflicts_resolved == 0
    assert outcome.summary.goals_imported == 0
    assert len(outcome.conflicts) == len(scholarships)
    assert outcome.records == scholarships


def test_merge_import_counts_goals(scholarships, goals, exported_at, today) -> None:
    payload = _previous_export(scholarships, goals, exported_at)

    outcome = import_json(payload, scholarships, ImportOptions(), today)

    assert outcome.summary.conflicts_resolved == 3
    assert outcome.summary.goals_imported == 1
    assert outcome.goals[0].title == "Sophomore tuition"


def test_reimport_updates_tracked_goals_instead_of_duplicating(scholarships, goals, exported_at, today) -> None:
    payload = _previous_export(scholarships, goals, exported_at)

    outcome = ImportOrchestrator().run(payload, scholarships, "json", ImportOptions(), today, existing_goals=goals)

    assert outcome.summary.goals_imported == 1
    assert [(g.id, g.title) for g in outcome.goals] == [("g-1", "Sophomore tuition")]


def test_skip_keeps_tracked_goals(scholarships, goals, exported_at, today) -> None:
    payload = _previous_export(scholarships, goals, exported_at)
    options = ImportOptions(merge_strategy=MergeStrategy.SKIP_DUPLICATES)

    outcome = ImportOrchestrator().run(payload, scholarships, "json", options, today, existing_goals=goals)

    assert outcome.goals == goals


def test_imported_plus_duplicates_equals_candidates(scholarships, today) -> None:
    payload = (
        "Scholarship Name,Amount,Deadline,Requirements\n"
        "Merit Award,\"$5,000\",2025-03-01,Transcript\n"
        "Research Grant,\"$1,200\",2025-05-01,transcript; essay\n"
        "Art Prize,$800,2025-02-20,Portfolio\n"
    )

    outcome = import_csv(payload, scholarships, today=today)

    summary = outcome.summary
    assert summary.scholarships_imported + summary.duplicates_found == 3
    assert summary.scholarships_imported == 2
    assert [r.name for r in outcome.records][-2:] == ["Research Grant", "Art Prize"]
    assert outcome.records[0].status == ScholarshipStatus.SUBMITTED


def test_unnamed_existing_mapping_is_not_given_a_default_name(today) -> None:
    existing = [{"amount": 500, "deadline": "2025-03-01"}]
    payload = {
        "exportDate": "2025-01-01",
        "scholarships": [{"name": "Scholarship Application", "amount": 500, "deadline": "2025-03-01"}],
    }

    outcome = import_json(payload, existing, today=today)

    assert outcome.summary.duplicates_found == 0
    assert outcome.summary.scholarships_imported == 1
    assert [r.name for r in outcome.records] == [None, "Scholarship Application"]


def test_past_deadline_warns_but_still_imports(today) -> None:
    payload = json.dumps(
        {
            "exportDate": "2025-01-01T00:00:00Z",
            "scholarships": [{"name": "Expired Award", "amount": 1000, "deadline": "2020-01-01"}],
        }
    )

    outcome = import_json(payload, [], today=today)

    assert outcome.success
    assert outcome.summary.scholarships_imported == 1
    assert outcome.warnings == ['Warning: Scholarship "Expired Award": Deadline has passed (2020-01-01)']


def test_malformed_json_is_rejected_without_raising(scholarships, today) -> None:
    outcome = import_json("{broken", scholarships, today=today)

    assert not outcome.success
    assert outcome.state == ImportState.REJECTED
    assert outcome.errors[0].startswith("Import failed: Invalid JSON")
    assert outcome.records == []


def test_row_arity_mismatch_is_rejected(today) -> None:
    outcome = import_csv("Name,Amount\nA,100\nB\n", [], today=today)

    assert outcome.state == ImportState.REJECTED
    assert outcome.errors == ["Import failed: Row 3 has 1 fields, expected 2"]


def test_validation_errors_reject_whole_import(scholarships, today) -> None:
    payload = {
        "exportDate": "2025-01-01",
        "scholarships": [
            {"name": "Good", "amount": 100, "deadline": "2025-06-01"},
            {"name": "Bad", "amount": 100},
        ],
    }

    outcome = ImportOrchestrator().run(payload, scholarships, "json", today=today)

    assert not outcome.success
    assert outcome.summary.scholarships_imported == 0
    assert outcome.records == []
    assert outcome.errors == ["Scholarship 2: Missing deadline"]


def test_existing_mappings_are_normalized(today) -> None:
    existing = [{"title": "Merit Award", "amount": "$5,000", "deadline": "03/01/2025", "status": "submitted"}]
    payload = {
        "exportDate": "2025-01-01",
        "scholarships": [{"name": "Merit Award", "amount": 5050, "deadline": "2025-03-01"}],
    }

    outcome = import_json(payload, existing, today=today)

    assert outcome.summary.duplicates_found == 1
    assert outcome.records[0].amount == 5050
    assert outcome.records[0].status == ScholarshipStatus.SUBMITTED


def test_outcome_serializes_with_camel_case_summary(today) -> None:
    payload = {"exportDate": "2025-01-01", "scholarships": []}

    data = import_json(payload, [], today=today).to_dict()

    assert data == {
        "success": True,
        "state": "committed",
        "summary": {
            "scholarshipsImported": 0,
            "duplicatesFound": 0,
            "conflictsResolved": 0,
            "goalsImported": 0,
        },
        "conflicts": [],
        "errors": [],
    }

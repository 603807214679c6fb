from __future__ import annotations

import json

import pytest
from reportlab.platypus import Paragraph

from scholarport.importing import ImportParser
from scholarport.models import ExportOptions, ExportType, ScholarshipRecord
from scholarport.output import (
    build_envelope,
    export_portfolio,
    export_scholarships,
    extension_for,
    filename_for,
    get_encoder,
    narrow_envelope,
    serialize,
    supported_formats,
)
from scholarport.output.encoders import (
    APPLICATION_COLUMNS,
    ENCODERS,
    SCHOLARSHIP_COLUMNS,
    PdfEncoder,
    format_money,
    rtf_escape,
)
from scholarport.processing.delimited import decode_rows

ALL_FIELDS = ExportOptions(
    include_personal_responses=True,
    include_eligibility_criteria=True,
    include_application_progress=True,
    include_financial_info=True,
)


def test_format_extensions() -> None:
    assert supported_formats() == {
        "json": ".json",
        "csv": ".csv",
        "applications-csv": ".csv",
        "text": ".txt",
        "rtf": ".rtf",
        "html": ".html",
        "pdf": ".pdf",
    }
    assert extension_for("rtf") == ".rtf"
    assert extension_for("pdf") == ".pdf"
    assert filename_for("html", "portfolio") == "portfolio.html"
    assert filename_for("json", "portfolio.json") == "portfolio.json"


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported export format"):
        get_encoder("docx")


def test_structured_export_round_trips_through_parser(scholarships, goals, profile, exported_at) -> None:
    envelope = build_envelope(scholarships, profile, goals, ALL_FIELDS, ExportType.FULL_BACKUP, exported_at)

    payload = serialize(envelope, ALL_FIELDS, "json")
    parsed = ImportParser().parse(payload, "json")

    def key(record: ScholarshipRecord) -> tuple:
        return record.name, record.amount, record.deadline, record.requirements

    assert [key(c) for c in parsed.candidates] == [key(s) for s in scholarships]
    assert parsed.candidates[0].notes == "Sent on time"
    assert parsed.candidates[0].status == scholarships[0].status
    assert parsed.goals[0].target_amount == 25000


def test_json_uses_camel_case_keys(scholarships, exported_at) -> None:
    payload = json.loads(serialize(build_envelope(scholarships, exported_at=exported_at)))

    assert payload["exportType"] == "template"
    assert payload["exportVersion"] == "1.0.0"
    assert "applicationUrl" in payload["scholarships"][0]
    assert payload["metadata"]["financialAnalytics"]["gapCoveragePercentage"] == 100
    assert payload["metadata"]["exportSettings"]["includeEligibilityCriteria"] is True


def test_csv_export_flattens_and_quotes(exported_at) -> None:
    records = [
        ScholarshipRecord(
            name='The "Big" Award, Inc.',
            amount=1200,
            deadline="2025-05-01",
            requirements=["transcript", "essay"],
            description="Line one\nLine two",
        ),
        ScholarshipRecord(name="Unknown Amount", deadline="2025-06-01"),
    ]

    text = serialize(build_envelope(records, exported_at=exported_at), target_format="csv")
    rows = decode_rows(text)

    assert rows[0] == SCHOLARSHIP_COLUMNS
    assert rows[1][:5] == [
        'The "Big" Award, Inc.',
        "$1,200",
        "2025-05-01",
        "transcript; essay",
        "Line one\nLine two",
    ]
    assert rows[1][7] == "Not Started"
    assert rows[2][1] == "Amount TBD"


def test_applications_csv_lists_tracked_applications(scholarships, exported_at) -> None:
    envelope = build_envelope(scholarships, options=ALL_FIELDS, exported_at=exported_at)

    rows = decode_rows(serialize(envelope, ALL_FIELDS, "applications-csv"))

    assert len(rows) == 4
    assert rows[1][:2] == ["Merit Award", "submitted"]
    assert rows[1][3] == "No"
    assert rows[1][7] == "Sent on time"


def test_text_report_contains_summary(scholarships, goals, exported_at) -> None:
    envelope = build_envelope(scholarships, financial_goals=goals, exported_at=exported_at)

    text = serialize(envelope, target_format="text")

    assert "Generated: 2025-01-10" in text
    assert "Total Scholarships: 3" in text
    assert "1. Merit Award (City Foundation)" in text
    assert "Gap Coverage: 60.0%" in text
    assert "Still Need to Apply: $5,000" in text


def test_html_report_escapes_content(exported_at) -> None:
    records = [ScholarshipRecord(name="<script>alert(1)</script>", amount=100, deadline="2025-05-01")]

    page = serialize(build_envelope(records, exported_at=exported_at), target_format="html")

    assert page.startswith("<!DOCTYPE html>")
    assert "<script>" not in page
    assert "&lt;script&gt;" in page


def test_rtf_escaping() -> None:
    assert rtf_escape("a{b}\\c") == "a\\{b\\}\\\\c"
    assert rtf_escape("café") == "caf\\u233?"
    assert rtf_escape("one\ntwo") == "one\\line two"


def test_rtf_document_is_balanced(scholarships, exported_at) -> None:
    document = serialize(build_envelope(scholarships, exported_at=exported_at), target_format="rtf")

    assert document.startswith("{\\rtf1")
    assert document.count("{") - document.count("\\{") == document.count("}") - document.count("\\}")


def test_format_money() -> None:
    assert format_money(1200) == "$1,200"
    assert format_money(99.5) == "$99.50"
    assert format_money(None) == "TBD"


def test_export_portfolio_names_download(scholarships, exported_at) -> None:
    result = export_portfolio(scholarships, target_format="csv", exported_at=exported_at)

    assert result.filename == "scholarship-template-2025-01-10.csv"
    assert result.media_type == "text/csv"
    assert result.payload.startswith("Scholarship Name,Amount")


def test_export_scholarships_picks_format_from_extension(scholarships, tmp_path) -> None:
    path = export_scholarships(scholarships, tmp_path / "out" / "portfolio.html")

    assert path.exists()
    assert "<h1>" in path.read_text(encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported file format"):
        export_scholarships(scholarships, tmp_path / "portfolio.docx")


def test_serialize_options_withhold_content_in_every_format(scholarships, profile, exported_at) -> None:
    envelope = build_envelope(scholarships, profile, options=ALL_FIELDS, exported_at=exported_at)
    stricter = ExportOptions(include_application_progress=False, include_personal_responses=False)

    for name, encoder in ENCODERS.items():
        if encoder.binary:
            continue
        assert "Sent on time" in serialize(envelope, target_format=name), name
        assert "Sent on time" not in serialize(envelope, stricter, name), name

    data = json.loads(serialize(envelope, stricter, "json"))
    assert all("applicationStatus" not in s for s in data["scholarships"])
    assert all("applicationData" not in s for s in data["scholarships"])
    assert "studentProfile" not in data
    assert data["metadata"]["exportSettings"]["includeApplicationProgress"] is False

    rows = decode_rows(serialize(envelope, stricter, "csv"))
    assert {row[7] for row in rows[1:]} == {"Not Tracked"}
    assert decode_rows(serialize(envelope, stricter, "applications-csv")) == [APPLICATION_COLUMNS]

    def headings(env) -> list:
        return [f.getPlainText() for f in PdfEncoder().story(env) if isinstance(f, Paragraph)]

    assert {"Active Applications", "Contact Information"} <= set(headings(envelope))
    narrowed = headings(narrow_envelope(envelope, stricter))
    assert "Active Applications" not in narrowed
    assert "Contact Information" not in narrowed


def test_serialize_options_cannot_add_back_withheld_content(scholarships, exported_at) -> None:
    envelope = build_envelope(scholarships, exported_at=exported_at)

    data = json.loads(serialize(envelope, ALL_FIELDS, "json"))

    assert all("applicationData" not in s for s in data["scholarships"])
    assert data["metadata"]["exportSettings"]["includePersonalResponses"] is False


def test_narrowing_to_anonymized_buckets_profile_and_goals(scholarships, goals, profile, exported_at) -> None:
    envelope = build_envelope(scholarships, profile, goals, ALL_FIELDS, ExportType.FULL_BACKUP, exported_at)

    narrowed = narrow_envelope(envelope, ALL_FIELDS.model_copy(update={"anonymize_data": True}))

    assert narrowed.exported_by == "Anonymous User"
    assert narrowed.student_profile.email is None
    assert narrowed.student_profile.academic_profile.gpa_range == "3.7-4.0"
    assert narrowed.student_profile.academic_profile.class_standing == "Junior"
    assert narrowed.financial_goals[0].target_amount is None
    assert narrowed.financial_goals[0].goal_category == "Annual Tuition"
    assert all(s.application_data is None for s in narrowed.scholarships)
    assert envelope.exported_by == "Ada Lovelace"


def test_pdf_export_is_a_pdf_document(scholarships, goals, profile, exported_at, tmp_path) -> None:
    result = export_portfolio(
        scholarships,
        profile,
        goals,
        ALL_FIELDS,
        ExportType.PORTFOLIO,
        "pdf",
        exported_at=exported_at,
    )

    assert result.filename == "scholarship-portfolio-2025-01-10.pdf"
    assert result.media_type == "application/pdf"
    assert result.payload.startswith(b"%PDF")

    path = export_scholarships(scholarships, tmp_path / "portfolio.pdf")
    assert path.read_bytes().startswith(b"%PDF")

"""Encoders that render an export envelope into a target format.

Each encoder renders the already-filtered envelope; option handling lives in
``scholarport.output.envelope`` so every format carries the same content.
Only the JSON encoder is guaranteed to round-trip through the importer. The
PDF encoder is the one binary format.
"""

import html
import json
from abc import ABC, abstractmethod
from datetime import datetime
from io import BytesIO
from typing import Dict, List, Optional, Union

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from scholarport.models.envelope import (
    ExportEnvelope,
    FinancialAnalytics,
    ScholarshipExport,
)
from scholarport.models.options import ExportOptions
from scholarport.processing.delimited import encode_rows

SCHOLARSHIP_COLUMNS = [
    "Scholarship Name",
    "Amount",
    "Deadline",
    "Requirements",
    "Description",
    "Organization",
    "Eligibility Met",
    "Application Status",
    "Website/Contact",
    "Notes",
    "Difficulty Level",
    "Recommended For",
]

APPLICATION_COLUMNS = [
    "Scholarship Name",
    "Status",
    "Deadline",
    "Essay Required",
    "Documents Needed",
    "Submission Date",
    "Follow-up Date",
    "Notes",
]


def format_money(amount: Optional[float]) -> str:
    """Format dollars as "$1,200" (cents shown only when present)."""
    if amount is None:
        return "TBD"
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_export_date(export_date: str) -> str:
    """Render the envelope's ISO timestamp as a plain date."""
    try:
        return datetime.fromisoformat(export_date.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return export_date


def _title(envelope: ExportEnvelope) -> str:
    kind = envelope.export_type.value
    return kind[:1].upper() + kind[1:]


class Encoder(ABC):
    """Renders an export envelope into one output format."""

    name: str
    extension: str
    media_type: str

    binary = False

    @abstractmethod
    def render(self, envelope: ExportEnvelope) -> Union[str, bytes]:
        """Render the envelope as filtered by its own export settings."""


class JsonEncoder(Encoder):
    """Canonical structured format, round-trippable through the importer."""

    name = "json"
    extension = ".json"
    media_type = "application/json"

    def render(self, envelope: ExportEnvelope) -> str:
        return json.dumps(envelope.to_wire(), indent=2, ensure_ascii=False)


class CsvEncoder(Encoder):
    """Flattened one-row-per-scholarship delimited text."""

    name = "csv"
    extension = ".csv"
    media_type = "text/csv"

    def render(self, envelope: ExportEnvelope) -> str:
        options = envelope.metadata.export_settings
        rows: List[List[str]] = [SCHOLARSHIP_COLUMNS]
        for scholarship in envelope.scholarships:
            rows.append(self._scholarship_row(scholarship, options))
        return encode_rows(rows)

    @staticmethod
    def _scholarship_row(scholarship: ScholarshipExport, options: ExportOptions) -> List[str]:
        if options.include_eligibility_criteria and scholarship.eligibility_met is not None:
            eligibility = "Yes" if scholarship.eligibility_met else "No"
        else:
            eligibility = "Not Evaluated"

        if options.include_application_progress:
            status = scholarship.application_status.value if scholarship.application_status else "Not Started"
        else:
            status = "Not Tracked"

        notes = ""
        if scholarship.application_data and scholarship.application_data.personal_notes:
            notes = scholarship.application_data.personal_notes

        return [
            scholarship.name,
            format_money(scholarship.amount) if scholarship.amount else "Amount TBD",
            scholarship.deadline or "No deadline specified",
            "; ".join(scholarship.requirements),
            scholarship.description,
            scholarship.organization or "",
            eligibility,
            status,
            scholarship.application_url or "",
            notes,
            scholarship.difficulty_level or "",
            ", ".join(scholarship.recommended_for or []),
        ]


class ApplicationsCsvEncoder(Encoder):
    """Application-status delimited text, one row per scholarship with a status."""

    name = "applications-csv"
    extension = ".csv"
    media_type = "text/csv"

    def render(self, envelope: ExportEnvelope) -> str:
        options = envelope.metadata.export_settings
        rows: List[List[str]] = [APPLICATION_COLUMNS]
        if options.include_application_progress:
            for scholarship in envelope.scholarships:
                if scholarship.application_status is None:
                    continue
                rows.append(self._application_row(scholarship))
        return encode_rows(rows)

    @staticmethod
    def _application_row(scholarship: ScholarshipExport) -> List[str]:
        application = scholarship.application_data
        if application is None:
            essay_required = "Not Included"
            documents = "Not Included"
            notes = ""
        else:
            essay_required = "Yes" if application.essays else "No"
            documents = "; ".join(d.name for d in application.documents) or "None"
            notes = application.personal_notes or ""

        return [
            scholarship.name,
            scholarship.application_status.value,
            scholarship.deadline or "No deadline specified",
            essay_required,
            documents,
            scholarship.submission_date or "",
            scholarship.follow_up_date or "",
            notes,
        ]


class TextEncoder(Encoder):
    """Plain-text report."""

    name = "text"
    extension = ".txt"
    media_type = "text/plain"

    def render(self, envelope: ExportEnvelope) -> str:
        options = envelope.metadata.export_settings
        metadata = envelope.metadata
        lines = [
            f"SCHOLARSHIP {envelope.export_type.value.upper()} EXPORT",
            f"Generated: {format_export_date(envelope.export_date)}",
            f"Exported by: {envelope.exported_by}",
            "=" * 60,
            "",
            "SUMMARY",
            f"Total Scholarships: {metadata.total_scholarships}",
            f"Completed Applications: {metadata.completed_applications}",
            f"Pending Applications: {metadata.pending_applications}",
            f"Total Potential Funding: {format_money(metadata.total_potential_funding)}",
            "",
        ]

        if metadata.financial_analytics:
            lines.extend(self._analytics_lines(metadata.financial_analytics))

        lines.append("SCHOLARSHIPS")
        lines.append("-" * 40)
        for index, scholarship in enumerate(envelope.scholarships, 1):
            lines.extend(self._scholarship_lines(index, scholarship, options))

        if envelope.financial_goals:
            lines.append("FINANCIAL GOALS")
            lines.append("-" * 40)
            for index, goal in enumerate(envelope.financial_goals, 1):
                lines.append(f"{index}. {goal.title}")
                if goal.goal_category:
                    lines.append(f"   Category: {goal.goal_category}")
                else:
                    lines.append(f"   Target: {format_money(goal.target_amount)}")
                lines.append(f"   Deadline: {goal.deadline or 'No deadline'}")
                lines.append("")

        return "\n".join(lines)

    @staticmethod
    def _analytics_lines(analytics: FinancialAnalytics) -> List[str]:
        lines = [
            "FINANCIAL PROGRESS & GAP ANALYSIS",
            "-" * 40,
            f"Total Awarded: {format_money(analytics.total_awarded)}",
            f"Pending Applications: {format_money(analytics.total_applied)}",
            f"Total Financial Need: {format_money(analytics.total_need)}",
            f"Current Savings: {format_money(analytics.current_savings)}",
            f"Gap Coverage: {analytics.gap_coverage_percentage:.1f}%",
            f"Success Rate: {analytics.application_success_rate}%",
        ]
        if analytics.funding_gap > 0:
            lines.extend(
                [
                    "",
                    "FUNDING GAP ANALYSIS:",
                    f"   Remaining Gap: {format_money(analytics.funding_gap)}",
                    f"   Covered by Pending: {format_money(analytics.gap_covered_by_pending)}",
                    f"   Still Need to Apply: {format_money(analytics.remaining_gap_after_pending)}",
                ]
            )
        lines.append("")
        return lines

    @staticmethod
    def _scholarship_lines(
        index: int,
        scholarship: ScholarshipExport,
        options: ExportOptions,
    ) -> List[str]:
        header = f"{index}. {scholarship.name}"
        if scholarship.organization:
            header += f" ({scholarship.organization})"

        lines = [
            header,
            f"   Amount: {format_money(scholarship.amount)}",
            f"   Deadline: {scholarship.deadline or 'No deadline'}",
        ]
        if scholarship.application_url:
            lines.append(f"   Apply: {scholarship.application_url}")
        if scholarship.requirements:
            lines.append(f"   Requirements: {', '.join(scholarship.requirements)}")
        if options.include_eligibility_criteria and scholarship.eligibility_met is not None:
            lines.append(f"   Eligible: {'Yes' if scholarship.eligibility_met else 'No'}")
        if options.include_application_progress and scholarship.application_status:
            lines.append(f"   Status: {scholarship.application_status.value}")
        if scholarship.description:
            lines.append(f"   Description: {scholarship.description}")
        if scholarship.application_data and scholarship.application_data.personal_notes:
            lines.append(f"   Notes: {scholarship.application_data.personal_notes}")
        lines.append("")
        return lines


def rtf_escape(text: object) -> str:
    """Escape text for an RTF body: control characters and non-ASCII code points."""
    out = []
    for char in str(text):
        code = ord(char)
        if char in "\\{}":
            out.append("\\" + char)
        elif char == "\n":
            out.append("\\line ")
        elif code > 127:
            # RTF \u takes a signed 16-bit value; astral characters use surrogate pairs
            encoded = char.encode("utf-16-le")
            for i in range(0, len(encoded), 2):
                unit = int.from_bytes(encoded[i:i + 2], "little", signed=True)
                out.append(f"\\u{unit}?")
        else:
            out.append(char)
    return "".join(out)


class RtfEncoder(Encoder):
    """Lightweight rich-text document, opens in word processors."""

    name = "rtf"
    extension = ".rtf"
    media_type = "application/rtf"

    HEADER = (
        "{\\rtf1\\ansi\\deff0"
        "{\\fonttbl{\\f0\\froman Times New Roman;}{\\f1\\fswiss Arial;}}"
        "{\\colortbl;\\red0\\green0\\blue0;\\red59\\green130\\blue246;}\n"
    )

    def render(self, envelope: ExportEnvelope) -> str:
        options = envelope.metadata.export_settings
        metadata = envelope.metadata
        e = rtf_escape

        parts = [
            self.HEADER,
            f"{{\\pard\\qc\\f1\\fs28\\b\\cf2 Scholarship {e(_title(envelope))} Portfolio}}\\par\\par\n",
            "{\\pard\\sa150\\f0\\fs20 ",
            f"{{\\b Generated:}} {e(format_export_date(envelope.export_date))}\\tab ",
            f"{{\\b Exported by:}} {e(envelope.exported_by)}}}\\par\\par\n",
            "{\\pard\\sa100\\f1\\fs22\\b\\cf2 PORTFOLIO SUMMARY}\\par\n",
            "{\\pard\\fi720\\f0\\fs20 ",
            f"{{\\b Total Scholarships:}}\\tab {metadata.total_scholarships}\\par\n",
            f"{{\\b Completed Applications:}}\\tab {metadata.completed_applications}\\par\n",
            f"{{\\b Pending Applications:}}\\tab {metadata.pending_applications}\\par\n",
            f"{{\\b Total Potential Funding:}}\\tab {{\\b {e(format_money(metadata.total_potential_funding))}}}\\par}}\\par\n",
        ]

        analytics = metadata.financial_analytics
        if analytics:
            if analytics.gap_coverage_percentage >= 100:
                gap_status = "Goals Met"
            else:
                gap_status = f"Gap: {format_money(analytics.funding_gap)}"
            parts.append("{\\pard\\sa50\\f1\\fs18\\b FINANCIAL SUMMARY:} ")
            parts.append(
                f"{{\\f0\\fs18 {e(format_money(analytics.total_awarded))} awarded \\bullet "
                f"{e(format_money(analytics.total_applied))} pending \\bullet "
                f"{analytics.application_success_rate}% success \\bullet "
                f"{e(gap_status)}}}\\par\\par\n"
            )

        parts.append("{\\pard\\sa150\\f1\\fs22\\b\\cf2 SCHOLARSHIP PORTFOLIO}\\par\n")
        for index, scholarship in enumerate(envelope.scholarships, 1):
            title = f"{{\\pard\\sa100\\f1\\fs20\\b {index}. {e(scholarship.name)}"
            if scholarship.organization:
                title += f" {{\\f0\\fs18\\i by {e(scholarship.organization)}}}"
            parts.append(title + "}\\par\n")

            parts.append("{\\pard\\fi360\\f0\\fs18 ")
            parts.append(f"{{\\b Amount:}}\\tab {e(format_money(scholarship.amount))}\\par\n")
            parts.append(f"{{\\b Deadline:}}\\tab {e(scholarship.deadline or 'No deadline specified')}\\par\n")
            if scholarship.application_url:
                parts.append(f"{{\\b Apply:}}\\tab {e(scholarship.application_url)}\\par\n")
            if scholarship.requirements:
                parts.append(f"{{\\b Requirements:}}\\tab {e(', '.join(scholarship.requirements))}\\par\n")
            if options.include_eligibility_criteria and scholarship.eligibility_met is not None:
                parts.append(f"{{\\b Eligible:}}\\tab {'Yes' if scholarship.eligibility_met else 'No'}\\par\n")
            if options.include_application_progress and scholarship.application_status:
                parts.append(
                    f"{{\\b Status:}}\\tab {{\\b {e(scholarship.application_status.value.upper())}}}\\par\n"
                )
            if scholarship.description:
                parts.append(f"{{\\b Description:}}\\tab {e(scholarship.description)}\\par\n")
            if scholarship.application_data and scholarship.application_data.personal_notes:
                parts.append(f"{{\\b Notes:}}\\tab {e(scholarship.application_data.personal_notes)}\\par\n")
            parts.append("}\\par\n")

        if envelope.financial_goals:
            parts.append("{\\pard\\sa150\\f1\\fs22\\b\\cf2 FINANCIAL GOALS}\\par\n")
            for index, goal in enumerate(envelope.financial_goals, 1):
                target = goal.goal_category or format_money(goal.target_amount)
                parts.append(
                    f"{{\\pard\\fi360\\f0\\fs18 {{\\b {index}. {e(goal.title)}}}\\tab "
                    f"{e(target)}\\tab {e(goal.deadline or 'No deadline')}\\par}}\n"
                )

        parts.append("}")
        return "".join(parts)


class HtmlEncoder(Encoder):
    """Browser-displayable, print-friendly report."""

    name = "html"
    extension = ".html"
    media_type = "text/html"

    STYLE = """
        body { font-family: 'Segoe UI', Arial, sans-serif; margin: 40px; line-height: 1.6; color: #374151; }
        h1 { color: #1f2937; border-bottom: 3px solid #3b82f6; padding-bottom: 15px; }
        h2 { color: #1e40af; margin-top: 40px; }
        .header-info { background: #f9fafb; padding: 8px; border: 1px solid #e5e7eb; border-radius: 6px; }
        .summary { background: #eff6ff; padding: 12px; border: 1px solid #bfdbfe; border-radius: 8px; }
        .financial-analytics { background: #f0fdf4; padding: 8px 12px; border: 1px solid #bbf7d0; border-radius: 6px; }
        .metric-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(120px, 1fr)); gap: 8px; }
        .metric { padding: 8px; background: white; border: 1px solid #e5e7eb; border-radius: 6px; text-align: center; }
        .metric-value { font-size: 1.2em; font-weight: bold; }
        .metric-label { font-size: 0.8em; color: #6b7280; }
        .amount { font-weight: bold; color: #059669; }
        .deadline { color: #dc2626; font-weight: bold; }
        .scholarship { margin: 15px 0; padding: 12px; border-left: 4px solid #3b82f6; background: #f8fafc; page-break-inside: avoid; }
        .status { padding: 4px 12px; border-radius: 20px; font-size: 0.85em; font-weight: bold; text-transform: uppercase; }
        .status.awarded { background: #dcfce7; color: #166534; }
        .status.pending { background: #fef3c7; color: #a16207; }
        .status.not-started { background: #fee2e2; color: #991b1b; }
        .requirements { font-style: italic; color: #6b7280; }
        .progress-bar { width: 100%; height: 16px; background: #e5e7eb; border-radius: 4px; overflow: hidden; }
        .progress-fill { height: 100%; background: linear-gradient(90deg, #10b981, #059669); }
        @media print {
            body { margin: 15mm; font-size: 12pt; }
            .header-info, .summary, .financial-analytics, .scholarship, .metric { background: none !important; border: 1px solid #ccc; }
            .status { background: none !important; border: 1px solid #666; color: #000 !important; }
        }
    """

    STATUS_CLASSES: Dict[str, str] = {
        "awarded": "awarded",
        "received": "awarded",
        "submitted": "pending",
        "in-progress": "pending",
    }

    def render(self, envelope: ExportEnvelope) -> str:
        options = envelope.metadata.export_settings
        h = html.escape
        metadata = envelope.metadata

        parts = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '    <meta charset="utf-8">',
            f"    <title>Scholarship {h(envelope.export_type.value)} Export</title>",
            f"    <style>{self.STYLE}    </style>",
            "</head>",
            "<body>",
            f"    <h1>Scholarship {h(_title(envelope))} Portfolio</h1>",
            '    <div class="header-info">',
            f"        <strong>Generated:</strong> {h(format_export_date(envelope.export_date))}<br>",
            f"        <strong>Exported by:</strong> {h(envelope.exported_by)}",
            "    </div>",
            '    <div class="summary">',
            "        <h2>Portfolio Summary</h2>",
            '        <div class="metric-grid">',
            self._metric(str(metadata.total_scholarships), "Total Scholarships"),
            self._metric(str(metadata.completed_applications), "Completed Applications"),
            self._metric(str(metadata.pending_applications), "Pending Applications"),
            self._metric(format_money(metadata.total_potential_funding), "Total Potential Funding"),
            "        </div>",
            "    </div>",
        ]

        if metadata.financial_analytics:
            parts.append(self._analytics(metadata.financial_analytics))

        parts.append("    <h2>Scholarship Portfolio</h2>")
        for index, scholarship in enumerate(envelope.scholarships, 1):
            parts.append(self._scholarship(index, scholarship, options))

        if envelope.financial_goals:
            parts.append("    <h2>Financial Goals</h2>")
            for index, goal in enumerate(envelope.financial_goals, 1):
                target = goal.goal_category or format_money(goal.target_amount)
                parts.extend(
                    [
                        '    <div class="scholarship">',
                        f"        <h3>{index}. {h(goal.title)}</h3>",
                        f'        <p><strong>Target:</strong> <span class="amount">{h(target)}</span></p>',
                        f'        <p><strong>Deadline:</strong> <span class="deadline">'
                        f"{h(goal.deadline or 'No deadline specified')}</span></p>",
                        "    </div>",
                    ]
                )

        parts.extend(["</body>", "</html>", ""])
        return "\n".join(parts)

    @staticmethod
    def _metric(value: str, label: str) -> str:
        return (
            '            <div class="metric">'
            f'<div class="metric-value">{html.escape(value)}</div>'
            f'<div class="metric-label">{html.escape(label)}</div></div>'
        )

    @staticmethod
    def _progress(label: str, percent: float) -> str:
        width = max(0, min(100, round(percent)))
        return (
            f'        <div>{html.escape(label)}: {width}%'
            f'<div class="progress-bar"><div class="progress-fill" style="width: {width}%;"></div></div></div>'
        )

    def _analytics(self, analytics: FinancialAnalytics) -> str:
        if analytics.gap_coverage_percentage >= 100:
            gap_status = "Goals Met!"
        else:
            gap_status = f"Gap: {format_money(analytics.funding_gap)}"
        breakdown = analytics.status_breakdown
        return "\n".join(
            [
                '    <div class="financial-analytics">',
                f"        <p><strong>{format_money(analytics.total_awarded)}</strong> awarded &middot; "
                f"<strong>{format_money(analytics.total_applied)}</strong> pending &middot; "
                f"<strong>{analytics.application_success_rate}%</strong> success &middot; "
                f"<strong>{html.escape(gap_status)}</strong></p>",
                self._progress("Funding Progress", analytics.gap_coverage_percentage),
                self._progress("Success Rate", analytics.application_success_rate),
                f"        <p>Awarded: {breakdown.awarded} &middot; Pending: {breakdown.pending} "
                f"&middot; Draft: {breakdown.draft}</p>",
                "    </div>",
            ]
        )

    def _scholarship(self, index: int, scholarship: ScholarshipExport, options: ExportOptions) -> str:
        h = html.escape
        heading = f"{index}. {h(scholarship.name)}"
        if scholarship.organization:
            heading += f' <span class="organization">by {h(scholarship.organization)}</span>'

        lines = [
            '    <div class="scholarship">',
            f"        <h3>{heading}</h3>",
            f'        <p><strong>Amount:</strong> <span class="amount">{format_money(scholarship.amount)}</span></p>',
            f'        <p><strong>Deadline:</strong> <span class="deadline">'
            f"{h(scholarship.deadline or 'No deadline specified')}</span></p>",
        ]
        if scholarship.application_url:
            url = h(scholarship.application_url, quote=True)
            lines.append(f'        <p><strong>Apply:</strong> <a href="{url}" target="_blank">{url}</a></p>')
        if scholarship.requirements:
            lines.append(
                '        <p><strong>Requirements:</strong> <span class="requirements">'
                f"{h(', '.join(scholarship.requirements))}</span></p>"
            )
        if options.include_eligibility_criteria and scholarship.eligibility_met is not None:
            lines.append(f"        <p><strong>Eligible:</strong> {'Yes' if scholarship.eligibility_met else 'No'}</p>")
        if options.include_application_progress and scholarship.application_status:
            status = scholarship.application_status.value
            css = self.STATUS_CLASSES.get(status, "not-started")
            lines.append(f'        <p><strong>Status:</strong> <span class="status {css}">{h(status)}</span></p>')
        if scholarship.description:
            lines.append(f"        <p><strong>Description:</strong> {h(scholarship.description)}</p>")
        if scholarship.application_data and scholarship.application_data.personal_notes:
            lines.append(f"        <p><strong>Notes:</strong> {h(scholarship.application_data.personal_notes)}</p>")
        lines.append("    </div>")
        return "\n".join(lines)


class PdfEncoder(Encoder):
    """Printable portfolio document laid out with reportlab."""

    name = "pdf"
    extension = ".pdf"
    media_type = "application/pdf"
    binary = True

    ACTIVE_STATUSES = ("submitted", "in-progress")
    AWARDED_STATUSES = ("awarded", "received")
    # Active applications listed before the "... and N more" line
    ACTIVE_LIMIT = 6

    def render(self, envelope: ExportEnvelope) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            title=f"Scholarship {_title(envelope)} Portfolio",
            author=envelope.exported_by,
        )
        doc.build(self.story(envelope))
        return buffer.getvalue()

    def story(self, envelope: ExportEnvelope) -> list:
        """Flowables for the document, section by section."""
        styles = getSampleStyleSheet()
        story = []
        story.extend(self._header(envelope, styles))
        story.extend(self._summary(envelope, styles))
        story.extend(self._active_applications(envelope, styles))
        story.extend(self._awards(envelope, styles))
        story.extend(self._financial_progress(envelope, styles))
        story.extend(self._requirements(envelope, styles))
        story.extend(self._contact(envelope, styles))
        return story

    @staticmethod
    def _text(value: object) -> str:
        return html.escape(str(value), quote=False)

    @staticmethod
    def _table(rows: List[List[str]]) -> Table:
        table = Table(rows, hAlign="LEFT")
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                ]
            )
        )
        return table

    def _status(self, scholarship: ScholarshipExport) -> Optional[str]:
        return scholarship.application_status.value if scholarship.application_status else None

    def _header(self, envelope: ExportEnvelope, styles) -> list:
        t = self._text
        story = [
            Paragraph(f"Scholarship {t(_title(envelope))} Portfolio", styles["Title"]),
            Paragraph(t(envelope.exported_by), styles["Heading2"]),
        ]

        info = []
        profile = envelope.student_profile
        if profile is not None and profile.academic_profile is not None:
            academic = profile.academic_profile
            info.extend([academic.class_standing, f"GPA: {academic.gpa_range}", academic.major_category])
        elif profile is not None:
            if profile.graduation_year:
                info.append(f"Class of {profile.graduation_year}")
            if profile.gpa:
                info.append(f"GPA: {profile.gpa}")
            if profile.school:
                info.append(profile.school)
        if info:
            story.append(Paragraph(t(" • ".join(info)), styles["Normal"]))

        story.append(Paragraph(f"Generated: {t(format_export_date(envelope.export_date))}", styles["Normal"]))
        story.append(Spacer(1, 12))
        return story

    def _summary(self, envelope: ExportEnvelope, styles) -> list:
        metadata = envelope.metadata
        awarded = metadata.financial_analytics.total_awarded if metadata.financial_analytics else 0
        rows = [
            ["Scholarship Summary", ""],
            ["Total Applications", str(metadata.total_scholarships)],
            ["Awards Received", str(metadata.completed_applications)],
            ["Pending Applications", str(metadata.pending_applications)],
            ["Total Awarded", format_money(awarded)],
            ["Total Potential Funding", format_money(metadata.total_potential_funding)],
        ]
        return [self._table(rows), Spacer(1, 12)]

    def _active_applications(self, envelope: ExportEnvelope, styles) -> list:
        t = self._text
        active = [s for s in envelope.scholarships if self._status(s) in self.ACTIVE_STATUSES]
        if not active:
            return []

        story = [Paragraph("Active Applications", styles["Heading2"])]
        for scholarship in active[: self.ACTIVE_LIMIT]:
            story.append(
                Paragraph(
                    f"<b>{t(scholarship.name)}</b> {t(format_money(scholarship.amount))}",
                    styles["Normal"],
                )
            )
            details = [f"Status: {self._status(scholarship)}"]
            if scholarship.deadline:
                details.append(f"Due: {scholarship.deadline}")
            story.append(Paragraph(t(" • ".join(details)), styles["Italic"]))

        if len(active) > self.ACTIVE_LIMIT:
            story.append(
                Paragraph(f"... and {len(active) - self.ACTIVE_LIMIT} more applications", styles["Italic"])
            )
        story.append(Spacer(1, 12))
        return story

    def _awards(self, envelope: ExportEnvelope, styles) -> list:
        awarded = [s for s in envelope.scholarships if self._status(s) in self.AWARDED_STATUSES]
        if not awarded:
            return []

        rows = [["Scholarship", "Amount"]]
        rows.extend([s.name, format_money(s.amount)] for s in awarded)
        return [Paragraph("Scholarship Awards", styles["Heading2"]), self._table(rows), Spacer(1, 12)]

    def _financial_progress(self, envelope: ExportEnvelope, styles) -> list:
        goals = envelope.financial_goals
        if not goals:
            return []

        story = [Paragraph("Financial Goals Progress", styles["Heading2"])]
        targets = [g.target_amount for g in goals if g.target_amount is not None]
        analytics = envelope.metadata.financial_analytics
        if targets and analytics is not None:
            total_goals = sum(targets)
            progress = analytics.total_awarded / total_goals * 100 if total_goals else 0.0
            story.append(Paragraph(f"Total Financial Goals: {format_money(total_goals)}", styles["Normal"]))
            story.append(
                Paragraph(f"Total Funding Secured: {format_money(analytics.total_awarded)}", styles["Normal"])
            )
            story.append(Paragraph(f"Progress: {progress:.1f}%", styles["Normal"]))

        rows = [["Goal", "Target", "Deadline"]]
        for goal in goals:
            rows.append(
                [
                    goal.title,
                    goal.goal_category or format_money(goal.target_amount),
                    goal.deadline or "No deadline",
                ]
            )
        story.extend([Spacer(1, 6), self._table(rows), Spacer(1, 12)])
        return story

    def _requirements(self, envelope: ExportEnvelope, styles) -> list:
        t = self._text
        items = []
        for scholarship in envelope.scholarships:
            application = scholarship.application_data
            if application is None:
                continue
            for essay in application.essays:
                mark = "[x]" if essay.response else "[ ]"
                items.append(f"{mark} {scholarship.name}: Essay - {essay.prompt or 'Untitled prompt'}")
            for document in application.documents:
                mark = "[x]" if document.submitted else "[ ]"
                items.append(f"{mark} {scholarship.name}: {document.name}")
        if not items:
            return []

        story = [Paragraph("Application Requirements", styles["Heading2"])]
        story.extend(Paragraph(t(item), styles["Normal"]) for item in items)
        story.append(Spacer(1, 12))
        return story

    def _contact(self, envelope: ExportEnvelope, styles) -> list:
        t = self._text
        profile = envelope.student_profile
        if profile is None or not profile.email:
            return []
        return [
            Paragraph("Contact Information", styles["Heading2"]),
            Paragraph(f"Email: {t(profile.email)}", styles["Normal"]),
        ]


ENCODERS: Dict[str, Encoder] = {
    encoder.name: encoder
    for encoder in (
        JsonEncoder(),
        CsvEncoder(),
        ApplicationsCsvEncoder(),
        TextEncoder(),
        RtfEncoder(),
        HtmlEncoder(),
        PdfEncoder(),
    )
}


def get_encoder(target_format: str) -> Encoder:
    """Look up the encoder for a format name.

    Raises:
        ValueError: If the format is not recognized
    """
    encoder = ENCODERS.get(str(target_format).lower())
    if encoder is None:
        raise ValueError(
            f"Unsupported export format: {target_format}. "
            f"Supported formats: {', '.join(sorted(ENCODERS))}"
        )
    return encoder

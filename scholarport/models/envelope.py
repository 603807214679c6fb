"""Export envelope: the serializable container for one export operation."""

from typing import Optional

from pydantic import Field

from scholarport.models.options import ExportOptions, ExportType
from scholarport.models.records import (
    CamelModel,
    DocumentRecord,
    EssayRecord,
    ScholarshipStatus,
)

EXPORT_VERSION = "1.0.0"


class ApplicationData(CamelModel):
    """Personal application detail, present only when personal responses are exported."""

    essays: list[EssayRecord] = Field(default_factory=list)
    documents: list[DocumentRecord] = Field(default_factory=list)
    personal_notes: Optional[str] = None


class ScholarshipExport(CamelModel):
    """One scholarship as it appears in an export."""

    id: Optional[str] = None
    name: str
    organization: Optional[str] = None
    application_url: Optional[str] = None
    amount: float = 0.0
    deadline: Optional[str] = None
    description: str = ""
    requirements: list[str] = Field(default_factory=list)
    eligibility_met: Optional[bool] = None
    application_status: Optional[ScholarshipStatus] = None
    submission_date: Optional[str] = None
    follow_up_date: Optional[str] = None

    # Counselor curation, filled in for template exports
    difficulty_level: Optional[str] = None
    recommended_for: Optional[list[str]] = None

    application_data: Optional[ApplicationData] = None


class AcademicProfile(CamelModel):
    """Categorical stand-in for the student profile when anonymizing."""

    gpa_range: str
    major_category: str
    class_standing: str


class StudentProfileExport(CamelModel):
    """Student profile projection carried by an export."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    gpa: Optional[float] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    school: Optional[str] = None
    state: Optional[str] = None
    ethnicity: Optional[str] = None
    first_generation: Optional[bool] = None
    financial_need: Optional[bool] = None
    academic_profile: Optional[AcademicProfile] = None


class GoalExport(CamelModel):
    """Financial goal as exported; amounts are dropped when anonymizing."""

    id: Optional[str] = None
    title: str = ""
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    deadline: Optional[str] = None
    calculation_method: Optional[str] = None
    goal_category: Optional[str] = None


class StatusBreakdown(CamelModel):
    awarded: int = 0
    pending: int = 0
    draft: int = 0
    rejected: int = 0
    total: int = 0


class FinancialAnalytics(CamelModel):
    """Award, application and funding-gap statistics."""

    total_awarded: float = 0.0
    total_applied: float = 0.0
    total_need: float = 0.0
    current_savings: float = 0.0
    remaining_need: float = 0.0

    funding_gap: float = 0.0
    gap_covered_by_pending: float = 0.0
    remaining_gap_after_pending: float = 0.0
    gap_coverage_percentage: float = 100.0

    application_success_rate: float = 0.0
    average_award_amount: float = 0.0
    total_applications_submitted: int = 0

    applications_submitted: int = 0
    applications_awarded: int = 0
    applications_in_progress: int = 0

    status_breakdown: StatusBreakdown = Field(default_factory=StatusBreakdown)


class ExportMetadata(CamelModel):
    total_scholarships: int = 0
    completed_applications: int = 0
    pending_applications: int = 0
    total_potential_funding: float = 0.0
    export_settings: ExportOptions = Field(default_factory=ExportOptions)
    financial_analytics: Optional[FinancialAnalytics] = None


class ExportEnvelope(CamelModel):
    """Top-level container written by every export format."""

    export_type: ExportType = ExportType.TEMPLATE
    export_date: str
    export_version: str = EXPORT_VERSION
    exported_by: str = ""
    scholarships: list[ScholarshipExport] = Field(default_factory=list)
    student_profile: Optional[StudentProfileExport] = None
    financial_goals: Optional[list[GoalExport]] = None
    metadata: ExportMetadata = Field(default_factory=ExportMetadata)

"""Data models for scholarship records, options and export envelopes."""

from scholarport.models.envelope import (
    AcademicProfile,
    ApplicationData,
    ExportEnvelope,
    ExportMetadata,
    FinancialAnalytics,
    GoalExport,
    ScholarshipExport,
    StatusBreakdown,
    StudentProfileExport,
)
from scholarport.models.options import (
    ExportOptions,
    ExportType,
    ImportOptions,
    MergeStrategy,
    SourceKind,
)
from scholarport.models.records import (
    DocumentRecord,
    EssayRecord,
    FinancialGoalRecord,
    ScholarshipRecord,
    ScholarshipStatus,
    StudentProfile,
)

__all__ = [
    "AcademicProfile",
    "ApplicationData",
    "DocumentRecord",
    "EssayRecord",
    "ExportEnvelope",
    "ExportMetadata",
    "ExportOptions",
    "ExportType",
    "FinancialAnalytics",
    "FinancialGoalRecord",
    "GoalExport",
    "ImportOptions",
    "MergeStrategy",
    "ScholarshipExport",
    "ScholarshipRecord",
    "ScholarshipStatus",
    "SourceKind",
    "StatusBreakdown",
    "StudentProfile",
    "StudentProfileExport",
]

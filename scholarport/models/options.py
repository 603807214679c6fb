"""Option objects and enumerations that steer export and import."""

from enum import Enum

from pydantic import Field

from scholarport.models.records import CamelModel


class ExportType(str, Enum):
    """Kind of export being produced."""

    FULL_BACKUP = "full-backup"
    TEMPLATE = "template"
    PORTFOLIO = "portfolio"


class MergeStrategy(str, Enum):
    """How an imported record reconciles with a matching existing record."""

    REPLACE = "replace"
    MERGE = "merge"
    SKIP_DUPLICATES = "skip-duplicates"


class SourceKind(str, Enum):
    """Encoding of an import payload."""

    STRUCTURED = "json"
    DELIMITED = "csv"


class ExportOptions(CamelModel):
    """Privacy/detail switches for an export."""

    include_personal_responses: bool = Field(
        False, description="Include essays, documents and personal notes"
    )
    include_eligibility_criteria: bool = Field(
        True, description="Attach a computed eligibility flag"
    )
    include_application_progress: bool = Field(
        True, description="Attach application status and dates"
    )
    include_financial_info: bool = Field(False, description="Attach the financial goal list")
    anonymize_data: bool = Field(
        False, description="Replace identifying fields with categorical summaries"
    )


class ImportOptions(CamelModel):
    """Merge behaviour plus delimited-text decoding switches for an import."""

    merge_strategy: MergeStrategy = Field(MergeStrategy.MERGE)
    auto_resolve_conflicts: bool = Field(
        True, description="Apply the merge strategy; otherwise flag conflicts for manual review"
    )
    preserve_existing_progress: bool = Field(
        True, description="Keep the existing status when merging"
    )
    has_headers: bool = Field(True, description="First delimited-text row is a header")
    column_mapping: dict[str, int] = Field(
        default_factory=dict, description="Column name -> zero-based index"
    )

"""Import pipeline for exported portfolios and spreadsheet rows."""

from scholarport.importing.deduplicator import Deduplicator, DuplicateMatch
from scholarport.importing.orchestrator import (
    ImportOrchestrator,
    ImportOutcome,
    ImportState,
    ImportSummary,
    import_csv,
    import_json,
)
from scholarport.importing.parser import ImportParser, ParsedImport, ParseError
from scholarport.importing.resolver import (
    ConflictRecord,
    ConflictResolver,
    ConflictType,
    Resolution,
    reconcile_goals,
)
from scholarport.importing.validator import ImportValidator, ValidationReport

__all__ = [
    "ConflictRecord",
    "ConflictResolver",
    "ConflictType",
    "Deduplicator",
    "DuplicateMatch",
    "ImportOrchestrator",
    "ImportOutcome",
    "ImportParser",
    "ImportState",
    "ImportSummary",
    "ImportValidator",
    "ParseError",
    "ParsedImport",
    "Resolution",
    "ValidationReport",
    "import_csv",
    "import_json",
    "reconcile_goals",
]

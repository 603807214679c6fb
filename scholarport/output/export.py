"""Export functions for scholarship portfolios in multiple formats."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from scholarport.models.envelope import ExportEnvelope
from scholarport.models.options import ExportOptions, ExportType
from scholarport.models.records import FinancialGoalRecord, StudentProfile
from scholarport.output.encoders import ENCODERS, get_encoder
from scholarport.output.envelope import build_envelope, narrow_envelope
from scholarport.processing.normalizer import RawRecord

logger = logging.getLogger(__name__)

# File extension -> format used when writing to a path
EXTENSION_FORMATS: Dict[str, str] = {
    ".json": "json",
    ".csv": "csv",
    ".txt": "text",
    ".rtf": "rtf",
    ".html": "html",
    ".htm": "html",
    ".pdf": "pdf",
}


@dataclass
class ExportResult:
    """A rendered export ready to hand to the download boundary."""

    payload: Union[str, bytes]
    filename: str
    media_type: str
    target_format: str


def extension_for(target_format: str) -> str:
    """Return the file extension (with dot) for an export format."""
    return get_encoder(target_format).extension


def filename_for(target_format: str, stem: str) -> str:
    """Build a download filename for an export format."""
    extension = extension_for(target_format)
    return stem if stem.endswith(extension) else f"{stem}{extension}"


def default_stem(export_type: Union[ExportType, str], exported_at: Optional[datetime] = None) -> str:
    """Default filename stem, e.g. ``scholarship-portfolio-2026-03-01``."""
    stamp = (exported_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d")
    return f"scholarship-{ExportType(export_type).value}-{stamp}"


def serialize(
    envelope: ExportEnvelope,
    options: Optional[ExportOptions] = None,
    target_format: str = "json",
) -> Union[str, bytes]:
    """Render an export envelope into the target format.

    Options given here can only withhold more than the envelope was built
    with; see ``narrow_envelope``.

    Args:
        envelope: Envelope built by ``build_envelope``
        options: Export options, defaults to the envelope's export settings
        target_format: One of the registered format names

    Returns:
        Serialized payload, bytes for binary formats such as PDF

    Raises:
        ValueError: If the format is not recognized
    """
    encoder = get_encoder(target_format)
    if options is not None:
        envelope = narrow_envelope(envelope, options)
    return encoder.render(envelope)


def export_portfolio(
    scholarships: Iterable[RawRecord],
    student_profile: Union[StudentProfile, Mapping[str, Any], None] = None,
    financial_goals: Optional[Iterable[Union[FinancialGoalRecord, RawRecord]]] = None,
    options: Optional[ExportOptions] = None,
    export_type: Union[ExportType, str] = ExportType.TEMPLATE,
    target_format: str = "json",
    stem: Optional[str] = None,
    exported_at: Optional[datetime] = None,
) -> ExportResult:
    """Build the envelope and render it in one step.

    Returns:
        ExportResult with payload, filename and media type
    """
    encoder = get_encoder(target_format)
    exported_at = exported_at or datetime.now(timezone.utc)
    envelope = build_envelope(
        scholarships,
        student_profile,
        financial_goals,
        options,
        ExportType(export_type),
        exported_at,
    )
    payload = encoder.render(envelope)

    stem = stem or default_stem(export_type, exported_at)
    unit = "bytes" if encoder.binary else "chars"
    logger.info(f"Rendered {encoder.name} export ({len(payload)} {unit})")
    return ExportResult(
        payload=payload,
        filename=filename_for(encoder.name, stem),
        media_type=encoder.media_type,
        target_format=encoder.name,
    )


def write_export(payload: Union[str, bytes], filepath: Union[str, Path]) -> Path:
    """Write a rendered payload to disk.

    Args:
        payload: Serialized export; bytes are written as-is
        filepath: Destination path; parent directories are created

    Returns:
        Path written

    Raises:
        IOError: If file cannot be written
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(payload, bytes):
        path.write_bytes(payload)
    else:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(payload)

    logger.info(f"Wrote export to {path}")
    return path


def export_scholarships(
    scholarships: Iterable[RawRecord],
    filepath: Union[str, Path],
    student_profile: Union[StudentProfile, Mapping[str, Any], None] = None,
    financial_goals: Optional[Iterable[Union[FinancialGoalRecord, RawRecord]]] = None,
    options: Optional[ExportOptions] = None,
    export_type: Union[ExportType, str] = ExportType.TEMPLATE,
) -> Path:
    """Export scholarships with format auto-detection from file extension.

    Raises:
        ValueError: If file extension is not recognized
        IOError: If file cannot be written
    """
    path = Path(filepath)
    extension = path.suffix.lower()

    target_format = EXTENSION_FORMATS.get(extension)
    if target_format is None:
        raise ValueError(
            f"Unsupported file format: {extension}. "
            f"Supported formats: {', '.join(sorted(EXTENSION_FORMATS))}"
        )

    result = export_portfolio(
        scholarships,
        student_profile,
        financial_goals,
        options,
        export_type,
        target_format,
        stem=path.stem,
    )
    return write_export(result.payload, path)


def supported_formats() -> Dict[str, str]:
    """Map each format name to its file extension."""
    return {name: encoder.extension for name, encoder in ENCODERS.items()}


def safe_stem(text: str) -> str:
    """Reduce free text to a filesystem-friendly filename stem."""
    stem = re.sub(r"[^\w\-]+", "-", text.strip().lower()).strip("-")
    return stem or "scholarships"

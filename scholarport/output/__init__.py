"""Output module for exporting scholarship portfolios."""

from scholarport.output.encoders import (
    ApplicationsCsvEncoder,
    CsvEncoder,
    Encoder,
    HtmlEncoder,
    JsonEncoder,
    PdfEncoder,
    RtfEncoder,
    TextEncoder,
    get_encoder,
)
from scholarport.output.envelope import build_envelope, narrow_envelope
from scholarport.output.export import (
    ExportResult,
    export_portfolio,
    export_scholarships,
    extension_for,
    filename_for,
    serialize,
    supported_formats,
    write_export,
)

__all__ = [
    "ApplicationsCsvEncoder",
    "CsvEncoder",
    "Encoder",
    "ExportResult",
    "HtmlEncoder",
    "JsonEncoder",
    "PdfEncoder",
    "RtfEncoder",
    "TextEncoder",
    "build_envelope",
    "export_portfolio",
    "export_scholarships",
    "extension_for",
    "filename_for",
    "get_encoder",
    "narrow_envelope",
    "serialize",
    "supported_formats",
    "write_export",
]

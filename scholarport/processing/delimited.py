"""Delimited-text (CSV) encoding shared by export and import.

Fields containing the delimiter, the quote character or a newline are quoted
and embedded quotes are doubled, following RFC 4180. The decoder accepts the
same dialect, including quoted fields that span lines.
"""

import csv
import io
from typing import Iterable, List, Sequence

DELIMITER = ","
QUOTECHAR = '"'


def encode_rows(rows: Iterable[Sequence[object]], delimiter: str = DELIMITER) -> str:
    """Encode rows of cells into delimited text.

    Args:
        rows: Rows of cell values; None is written as an empty cell
        delimiter: Field delimiter

    Returns:
        Delimited text with one ``\\n``-terminated line per row
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quotechar=QUOTECHAR,
        quoting=csv.QUOTE_MINIMAL,
        doublequote=True,
        lineterminator="\n",
    )
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue()


def decode_rows(text: str, delimiter: str = DELIMITER) -> List[List[str]]:
    """Decode delimited text into rows of trimmed cells.

    Blank lines are skipped. Raises ``csv.Error`` on malformed quoting.
    """
    # Strip a UTF-8 byte order mark left by spreadsheet exports
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(
        io.StringIO(text, newline=""),
        delimiter=delimiter,
        quotechar=QUOTECHAR,
        doublequote=True,
        skipinitialspace=True,
        strict=True,
    )
    rows = []
    for row in reader:
        if not row or all(not cell.strip() for cell in row):
            continue
        rows.append([cell.strip() for cell in row])
    return rows

import csv
import io
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from models.conversion import ConversionOptions, ConversionResult
from services.errors import CsvConversionError, EmptyInputError, InvalidDelimiterError

VALID_FORMATS = ("json", "array", "object")


def validate_input(csv_text: str, target_format: str, options: ConversionOptions) -> None:
    """Raise a CsvConversionError for input that can never convert."""
    if target_format not in VALID_FORMATS:
        raise CsvConversionError(f"Unsupported target format: {target_format}")
    if not options.delimiter:
        raise InvalidDelimiterError("Delimiter must be a non-empty string")
    if options.quoted and len(options.delimiter) != 1:
        raise InvalidDelimiterError("Quoted parsing requires a single-character delimiter")
    if not csv_text or not csv_text.strip():
        raise EmptyInputError("CSV data is empty")


def split_rows(csv_text: str, options: ConversionOptions) -> List[List[str]]:
    """Split trimmed CSV text into rows of raw string cells.

    Plain mode splits every line on the delimiter with no quote handling, so a
    delimiter inside a quoted field starts a new cell. ``options.quoted`` switches
    to RFC 4180 parsing (quoted fields, doubled quotes, embedded newlines).
    """
    delimiter = options.delimiter
    text = csv_text.strip()
    if options.quoted:
        return [row for row in csv.reader(io.StringIO(text), delimiter=delimiter)]

    return [line.rstrip("\r").split(delimiter) for line in text.split("\n")]


def zip_row(header: Sequence[str], values: Sequence[str]) -> Dict[str, str]:
    # missing cells become "", extra cells are dropped
    return {name: (values[i] if i < len(values) else "") for i, name in enumerate(header)}


def convert(csv_text: str, target_format: str = "json", options: Optional[ConversionOptions] = None) -> ConversionResult:
    """Convert delimited text into array or object shaped records."""
    options = options or ConversionOptions()
    validate_input(csv_text, target_format, options)

    rows = split_rows(csv_text, options)
    header_row = rows[0] if options.headers else None
    data_rows = rows[1:] if options.headers else rows

    if target_format == "array":
        result = [list(row) for row in data_rows]
        if header_row is not None:
            result.insert(0, list(header_row))
    elif header_row is not None:
        # "object" and "json" share the same projection when a header exists
        result = [zip_row(header_row, row) for row in data_rows]
    else:
        result = [list(row) for row in data_rows]

    return ConversionResult(
        result=result,
        format=target_format,
        row_count=len(data_rows),
        original_size=len(csv_text),
        processed_at=datetime.now(timezone.utc),
    )


def to_csv_text(records: Sequence[Dict[str, str]], headers: Sequence[str], delimiter: str = ",") -> str:
    """Serialise object-shaped records back to delimited text in header order."""
    lines = [delimiter.join(headers)]
    for record in records:
        lines.append(delimiter.join(record.get(name, "") for name in headers))
    return "\n".join(lines)

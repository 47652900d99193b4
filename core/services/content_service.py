# =============================================================================
# core/services/content_service.py - File Content for the Message Constructor
# =============================================================================
# Reads an uploaded file back from S3 and turns it into constructor input:
# - CSV: one column per header plus the first data row
# - Anything else (or a CSV that won't parse): a single "content" column
#   holding the first few lines of text
# =============================================================================

import io
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

import pandas as pd

from app.config import settings
from app.exceptions import FileContentUnavailableError
from core.services.file_service import FileService
from core.services.storage_service import ObjectNotFoundError, StorageService

logger = logging.getLogger(__name__)

# utf-8-sig also reads plain utf-8 and drops a leading BOM
ENCODINGS_TO_TRY = ["utf-8-sig", "cp1252", "latin-1"]

CSV_EMPTY_MESSAGE = "CSV file is empty or has no valid records"
CSV_MALFORMED_MESSAGE = "Failed to parse CSV file. File may be malformed."

TEXT_COLUMN_ID = "content-column"


@dataclass
class CsvParseResult:
    """Outcome of reading a CSV for the constructor."""
    is_valid: bool
    columns: list[dict[str, Any]] = field(default_factory=list)
    first_row: dict[str, str] = field(default_factory=dict)
    error: str | None = None


def _reject_row(fields: list[str]) -> None:
    """Bad-line hook: a record wider than the header fails the whole file."""
    raise pd.errors.ParserError(f"Record has {len(fields)} fields, more than the header")


def _read_csv(data: bytes) -> pd.DataFrame:
    """
    Read CSV bytes as raw records, trying encodings in turn.

    The header is read as row 0 so every record, the first data row
    included, is checked against its width. Cells missing from a short
    record come back as NA; explicit empty cells stay "".
    """
    for encoding in ENCODINGS_TO_TRY:
        try:
            return pd.read_csv(
                io.BytesIO(data),
                encoding=encoding,
                header=None,
                dtype=object,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=_reject_row,
            )
        except (UnicodeDecodeError, UnicodeError):
            continue
    raise ValueError("Could not decode CSV with any known encoding")


def parse_csv_content(data: bytes) -> CsvParseResult:
    """
    Parse CSV bytes into constructor columns and the first record.

    The first line is the header. Blank lines are skipped and headers and
    values are trimmed. Every record must have exactly as many fields as
    the header.

    Returns:
        CsvParseResult; is_valid is False (with error set) when the file
        has no records or can't be parsed
    """
    try:
        df = _read_csv(data)
    except pd.errors.EmptyDataError:
        return CsvParseResult(is_valid=False, error=CSV_EMPTY_MESSAGE)
    except (pd.errors.ParserError, ValueError) as e:
        logger.warning(f"CSV parse failed: {e}")
        return CsvParseResult(is_valid=False, error=CSV_MALFORMED_MESSAGE)

    if df.isna().to_numpy().any():
        logger.warning("CSV parse failed: record with fewer fields than the header")
        return CsvParseResult(is_valid=False, error=CSV_MALFORMED_MESSAGE)

    if len(df.index) < 2:
        return CsvParseResult(is_valid=False, error=CSV_EMPTY_MESSAGE)

    headers = [str(name).strip() for name in df.iloc[0].tolist()]
    values = [str(value).strip() for value in df.iloc[1].tolist()]

    return CsvParseResult(
        is_valid=True,
        columns=[
            {"id": f"col-{index}", "name": header, "selected": False}
            for index, header in enumerate(headers)
        ],
        first_row=dict(zip(headers, values)),
    )


def extract_text_preview(data: bytes, max_lines: int | None = None) -> str:
    """First `max_lines` lines of a file, decoded as UTF-8."""
    max_lines = max_lines or settings.TEXT_PREVIEW_LINES
    content = data.decode("utf-8", errors="replace")
    return "\n".join(content.split("\n")[:max_lines])


def build_text_content(original_name: str, data: bytes) -> dict[str, Any]:
    """Expose a file as one pre-selected column holding its first lines."""
    column_name = f"{original_name} content"
    return {
        "type": "text",
        "columns": [
            {"id": TEXT_COLUMN_ID, "name": column_name, "selected": True},
        ],
        "first_row": {column_name: extract_text_preview(data)},
    }


class ContentService:
    """
    Service for reading file content back for the message constructor.
    """

    @staticmethod
    def get_file_content(
        user_id: UUID | str,
        file_id: UUID | str,
        storage: StorageService,
    ) -> dict[str, Any]:
        """
        Columns and first row of one of the caller's files.

        Args:
            user_id: The caller
            file_id: The file to read
            storage: S3 storage service

        Returns:
            Dict with type ("csv" or "text"), columns, first_row and, when a
            CSV had to be shown as text, warning

        Raises:
            FileRecordNotFoundError: If no such file exists
            FileAccessDeniedError: If it belongs to another user
            FileContentUnavailableError: If the object is missing
            StorageError: If the download fails
        """
        record = FileService.get_owned_file(user_id, file_id)
        original_name = record.get("original_name") or ""

        try:
            data = storage.read_object(
                record["s3_key"],
                max_bytes=settings.max_upload_size_bytes,
            )
        except ObjectNotFoundError:
            logger.warning(f"No object behind file {file_id} ({record['s3_key']})")
            raise FileContentUnavailableError(str(file_id))

        if original_name.lower().endswith(".csv"):
            result = parse_csv_content(data)
            if result.is_valid:
                return {
                    "type": "csv",
                    "columns": result.columns,
                    "first_row": result.first_row,
                }

            logger.info(f"File {file_id} is not a valid CSV, showing as text: {result.error}")
            content = build_text_content(original_name, data)
            content["warning"] = result.error
            return content

        return build_text_content(original_name, data)

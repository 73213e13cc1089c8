import logging
from pathlib import Path

from .errors import CsvParseError, MalformedFileError
from .schemas import RawRecord
from .utils import read_text

logger = logging.getLogger(__name__)


def read_upload(file_path: Path) -> str:
    """
    Loads the text of an uploaded file. Only '.csv' files are accepted;
    anything else, or a file that cannot be opened, aborts the upload
    before parsing starts.
    """
    file_path = Path(file_path)
    if file_path.suffix.lower() != ".csv":
        raise MalformedFileError(
            f"Please upload a valid CSV file (got '{file_path.name}').",
            details={"path": str(file_path)},
        )

    try:
        return read_text(file_path)
    except OSError as e:
        raise MalformedFileError(
            f"Could not read {file_path.name}. Reason: {e}",
            details={"path": str(file_path)},
        ) from e


def parse_csv(text: str) -> list[RawRecord]:
    """
    Splits comma-separated text into raw records.

    The first line holds the headers. Every later non-blank line is split on
    ',' and zipped with the headers by position: missing trailing fields
    become '' and surplus fields are dropped. Quoted values are not
    understood, so a value with a literal comma shifts the remaining columns.
    """
    # Only "\n" ends a line; the per-field strip drops a trailing "\r".
    lines = text.split("\n")
    if not lines or not lines[0].strip():
        raise CsvParseError("CSV file is empty or is missing its header row.")

    headers = [header.strip() for header in lines[0].split(",")]
    if not any(headers):
        raise CsvParseError("CSV header row has no column names.")

    records = []
    for line in lines[1:]:
        if not line.strip():
            continue

        values = [value.strip() for value in line.split(",")]
        row = {}
        for index, header in enumerate(headers):
            row[header] = values[index] if index < len(values) else ""

        if len(values) > len(headers):
            logger.debug(
                f"Row {len(records) + 1} has {len(values)} fields for {len(headers)} headers."
            )
        records.append(RawRecord(row_number=len(records) + 1, values=row))

    logger.info(f"Parsed {len(records)} data rows across {len(headers)} columns.")
    return records

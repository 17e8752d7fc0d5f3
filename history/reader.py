"""
Confirmation Log Reader

Loads the whole confirmation history log into memory.

READ POLICY:

  - a missing log file means zero records, not an error
  - records are separated by LF only; U+2028, U+0085 and other Unicode
    separators may appear unescaped inside JSON strings and are not line breaks
  - blank lines are ignored
  - stored requests are validated leniently (STORED_RECORD_CONTEXT)
  - any line that is not a valid record fails the whole read with
    LogFormatError naming the line; no partial results are returned
"""

import logging
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from shared.models import STORED_RECORD_CONTEXT, ConfirmationRecord

logger = logging.getLogger(__name__)


class LogFormatError(ValueError):
    """A log line could not be parsed as a ConfirmationRecord."""

    def __init__(self, log_path: Path, line_number: int, reason: str):
        super().__init__(f"Malformed record at {log_path}:{line_number}: {reason}")
        self.log_path = log_path
        self.line_number = line_number


def parse_records(lines: List[str], source: Union[str, Path] = "<log>") -> List[ConfirmationRecord]:
    """Parse newline-delimited JSON records, failing on the first bad line."""
    records: List[ConfirmationRecord] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = ConfirmationRecord.model_validate_json(line, context=STORED_RECORD_CONTEXT)
            records.append(record)
        except ValidationError as e:
            reason = e.errors()[0].get("msg", str(e)) if e.errors() else str(e)
            raise LogFormatError(Path(source), line_number, reason) from e
    return records


def load_records(log_path: Union[str, Path]) -> List[ConfirmationRecord]:
    """Read every record from the log in append (completion) order."""
    path = Path(log_path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug(f"No confirmation log at {path}, treating as empty")
        return []

    records = parse_records(content.split("\n"), source=path)
    logger.debug(f"Loaded {len(records)} confirmation records from {path}")
    return records

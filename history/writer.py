"""
Confirmation Log Writer

Appends one ConfirmationRecord per line to the confirmation history log.

Logging is a side channel to the elicitation itself: a failure to create
the log directory or to append a record is logged at debug level and
swallowed, never raised into the elicitation transaction.

Each record is written with a single write() on a file opened in append
mode, and appends are serialized through a process-wide lock so concurrent
transactions never interleave partial lines.
"""

import logging
import threading
from pathlib import Path
from typing import Union

from shared.models import ConfirmationRecord

logger = logging.getLogger(__name__)


class ConfirmationLogWriter:
    """Best-effort, append-only writer for the confirmation history log."""

    def __init__(self, log_path: Union[str, Path]):
        self.log_path = Path(log_path)
        self._lock = threading.Lock()

    def ensure_log_directory(self) -> None:
        """Create the log's parent directory. Failures are logged, not raised."""
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug(f"Failed to create log directory {self.log_path.parent}: {e}")

    def append(self, record: ConfirmationRecord) -> bool:
        """
        Append a record to the log.

        Returns True when the record was written. The directory is ensured
        first; if that fails the append is still attempted, and only the
        append's own failure decides the result.
        """
        self.ensure_log_directory()
        line = record.to_log_line()

        try:
            with self._lock:
                with open(self.log_path, "a", encoding="utf-8") as log_file:
                    log_file.write(line)
                    log_file.flush()
        except OSError as e:
            logger.debug(f"Failed to write confirmation log {self.log_path}: {e}")
            return False

        logger.debug(
            f"Logged {record.confirmation_type.value} confirmation "
            f"(success={record.success}, {record.response_time_ms}ms)"
        )
        return True

"""Collection of executed SQL statements for diagnostics."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

MODE_DISABLED = "0"
MODE_LOGGER = "1"
MODE_FILE = "2"

LOG_FILENAME = "entities_manager.log"


class SqlLog:
    """Buffer of executed statements, flushed to the logger or to a file.

    Modes:
        "0": nothing is recorded
        "1": entries are flushed through the logger
        "2": entries are appended as one JSON line to ``entities_manager.log``
             in the data directory
    """

    def __init__(self, mode: str = MODE_DISABLED, data_directory: Path | str | None = None) -> None:
        self.mode = str(mode)
        self.data_directory = Path(data_directory) if data_directory is not None else Path.cwd()
        self.entries: list[dict[str, Any]] = []

    @property
    def enabled(self) -> bool:
        return self.mode != MODE_DISABLED

    @property
    def log_file(self) -> Path:
        return self.data_directory / LOG_FILENAME

    def record(self, sql: str, values: dict[str, Any], elapsed: float) -> None:
        if not self.enabled:
            return
        self.entries.append({"sql": sql, "values": values, "time": elapsed})

    def flush(self) -> None:
        """Write out and clear the buffered entries."""
        if not self.entries:
            return

        to_log = {"date": datetime.now().strftime("%Y-%m-%d_%H:%M:%S"), "log": self.entries}
        self.entries = []

        if self.mode == MODE_FILE:
            # Never raise from here: flush runs on manager exit, possibly while unwinding an error.
            try:
                self.data_directory.mkdir(parents=True, exist_ok=True)
                with open(self.log_file, "a") as f:
                    f.write(json.dumps(to_log, default=str) + "\n")
            except OSError as e:
                logger.warning("Could not write SQL log", path=str(self.log_file), error=str(e))
            return

        logger.info("SQL log", entries=to_log["log"], date=to_log["date"])

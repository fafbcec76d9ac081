"""Execution sinks for storing rule execution records."""

from collections import deque

import pandas as pd
from loguru import logger

from luxpulse.rules.domain.models import RuleExecutionRecord
from luxpulse.rules.domain.protocols import ExecutionSink


class InMemoryExecutionSink(ExecutionSink):
    """
    The worker's recent execution history, kept in process memory.

    Holds at most ``max_records`` records; older ones are dropped as new ticks
    arrive, so a long-running worker stays bounded.
    """

    def __init__(self, max_records: int = 500):
        self.records: deque[RuleExecutionRecord] = deque(maxlen=max_records)

    def write_records(self, records: list[RuleExecutionRecord]) -> None:
        self.records.extend(records)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the retained records to a DataFrame (oldest first)."""
        if not self.records:
            return pd.DataFrame()

        return pd.DataFrame([record.to_dict() for record in self.records])

    def __len__(self):
        return len(self.records)


class CSVExecutionSink(ExecutionSink):
    """Sink that appends records to a CSV file incrementally."""

    COLUMNS = [
        "ruleId",
        "ruleVersion",
        "executedAt",
        "inputRef",
        "outputEventId",
        "outputTicketId",
        "outcome",
        "error",
    ]

    def __init__(self, filepath: str, mode: str = "a", buffer_size: int = 100):
        """
        Initialize CSV sink.

        Args:
            filepath: Path to CSV file
            mode: 'w' to start a new file, 'a' to append to an existing one
            buffer_size: Flush after this many buffered records
        """
        self.filepath = filepath
        self.mode = mode
        self._buffer: list[RuleExecutionRecord] = []
        self._buffer_size = buffer_size
        self._header_written = mode == "a" and self._has_content()

    def write_records(self, records: list[RuleExecutionRecord]) -> None:
        """Buffer records and write when buffer full."""
        self._buffer.extend(records)

        if len(self._buffer) >= self._buffer_size:
            self.flush()

    def flush(self):
        """Write buffered records to CSV."""
        if not self._buffer:
            return

        df = pd.DataFrame([record.to_dict() for record in self._buffer], columns=self.COLUMNS)

        df.to_csv(
            self.filepath,
            mode="a" if self._header_written else "w",
            header=not self._header_written,
            index=False,
        )

        self._header_written = True
        self._buffer.clear()
        logger.debug(f"Flushed {len(df)} execution records to {self.filepath}")

    def to_dataframe(self) -> pd.DataFrame:
        """Read all flushed records from CSV."""
        try:
            return pd.read_csv(self.filepath)
        except FileNotFoundError:
            return pd.DataFrame()

    def _has_content(self) -> bool:
        try:
            with open(self.filepath, "rb") as fh:
                return bool(fh.read(1))
        except FileNotFoundError:
            return False

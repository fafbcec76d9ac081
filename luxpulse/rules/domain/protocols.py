"""Protocols (interfaces) for rule evaluation components."""

from typing import Protocol

import pandas as pd

from luxpulse.rules.domain.models import RuleExecutionRecord


class IdentifierFactory(Protocol):
    """Interface for synthesising event and ticket identifiers."""

    def event_id(self, rule_id: str, input_ref: str) -> str:
        """
        Create the identifier of the event a matching rule raises.

        Args:
            rule_id: Id of the rule that matched
            input_ref: Reference of the snapshot that was evaluated

        Returns:
            Identifier prefixed with ``evt-``
        """
        ...

    def ticket_id(self, rule_id: str, input_ref: str) -> str:
        """Create the identifier of the ticket a matching rule opens (``tkt-`` prefix)."""
        ...


class ExecutionSink(Protocol):
    """Interface for storing/shipping execution records."""

    def write_records(self, records: list[RuleExecutionRecord]) -> None:
        """Write the records of one evaluation pass."""
        ...

    def to_dataframe(self) -> pd.DataFrame:
        """Convert stored records to DataFrame."""
        ...

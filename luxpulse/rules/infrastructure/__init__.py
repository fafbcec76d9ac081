"""Infrastructure layer for rule evaluation."""

from luxpulse.rules.infrastructure.definitions import (
    builtin_rules,
    describe_rules,
    validate_rule_set,
    with_enabled,
)
from luxpulse.rules.infrastructure.execution_sink import CSVExecutionSink, InMemoryExecutionSink
from luxpulse.rules.infrastructure.fixtures import get_fixture, list_fixtures, utc_now_iso
from luxpulse.rules.infrastructure.identifiers import (
    DeterministicIdentifierFactory,
    RandomIdentifierFactory,
    create_identifier_factory,
)

__all__ = [
    "builtin_rules",
    "describe_rules",
    "validate_rule_set",
    "with_enabled",
    "CSVExecutionSink",
    "InMemoryExecutionSink",
    "get_fixture",
    "list_fixtures",
    "utc_now_iso",
    "DeterministicIdentifierFactory",
    "RandomIdentifierFactory",
    "create_identifier_factory",
]

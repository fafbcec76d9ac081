"""Exceptions for rule evaluation."""


class RuleError(Exception):
    """Base exception for rule evaluation errors."""


class RuleEvaluationError(RuleError):
    """Raised when a rule predicate fails on a snapshot."""

    def __init__(self, rule_id: str, rule_version: int, cause: Exception):
        self.rule_id = rule_id
        self.rule_version = rule_version
        self.cause = cause
        super().__init__(f"Rule {rule_id} v{rule_version} failed: {type(cause).__name__}: {cause}")

    @property
    def outcome(self) -> str:
        """Outcome text recorded for the failed rule."""
        return f"error: {type(self.cause).__name__}: {self.cause}"


class InvalidRuleSetError(RuleError):
    """Raised when a rule set has duplicate ids or non-positive versions."""


class UnknownFixtureError(RuleError, KeyError):
    """Raised when a replay fixture name is not in the catalogue."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(f"Unknown fixture '{name}' (available: {', '.join(available)})")

    def __str__(self) -> str:
        return self.args[0]

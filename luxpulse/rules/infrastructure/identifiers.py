"""Identifier factories for events and tickets raised by matching rules."""

import hashlib
import uuid

from luxpulse.rules.domain.protocols import IdentifierFactory


class RandomIdentifierFactory(IdentifierFactory):
    """Fresh uuid4 per call. Two evaluations of the same snapshot never share ids."""

    def event_id(self, rule_id: str, input_ref: str) -> str:
        return f"evt-{uuid.uuid4()}"

    def ticket_id(self, rule_id: str, input_ref: str) -> str:
        return f"tkt-{uuid.uuid4()}"


class DeterministicIdentifierFactory(IdentifierFactory):
    """
    Ids derived from ``(rule_id, input_ref)`` with SHA-256.

    Replaying the same snapshot yields the same ids, so a replay can be diffed
    byte-for-byte against an earlier run.
    """

    def event_id(self, rule_id: str, input_ref: str) -> str:
        return f"evt-{self._digest('event', rule_id, input_ref)}"

    def ticket_id(self, rule_id: str, input_ref: str) -> str:
        return f"tkt-{self._digest('ticket', rule_id, input_ref)}"

    @staticmethod
    def _digest(kind: str, rule_id: str, input_ref: str) -> str:
        digest = hashlib.sha256(f"{kind}:{rule_id}:{input_ref}".encode("utf-8")).hexdigest()
        # Shape it like a uuid so consumers see one id format either way
        return str(uuid.UUID(digest[:32]))


def create_identifier_factory(deterministic: bool = False) -> IdentifierFactory:
    """Pick the identifier strategy from configuration."""
    if deterministic:
        return DeterministicIdentifierFactory()
    return RandomIdentifierFactory()

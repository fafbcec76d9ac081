"""Application layer for rule evaluation."""

from luxpulse.rules.application.engine import RuleEngine, evaluate_rules
from luxpulse.rules.application.replay import ReplayResult, replay_fixture

__all__ = ["RuleEngine", "evaluate_rules", "ReplayResult", "replay_fixture"]

"""Dependency injection container shared by the API process."""

from dependency_injector import containers, providers

from luxpulse.api.infrastructure.database import Database
from luxpulse.rules.application.engine import RuleEngine
from luxpulse.rules.infrastructure.definitions import builtin_rules
from luxpulse.rules.infrastructure.identifiers import create_identifier_factory


class APIContainer(containers.DeclarativeContainer):
    """Process-wide singletons: the SQLite store and the rule engine."""

    config = providers.Configuration()

    database = providers.Singleton(
        Database,
        database_url=config.database.url,
        async_database_url=config.database.async_url,
    )

    rules = providers.Callable(builtin_rules)
    id_factory = providers.Singleton(
        create_identifier_factory,
        deterministic=config.worker.deterministic_ids.as_(bool),
    )
    rule_engine = providers.Singleton(RuleEngine, rules=rules, id_factory=id_factory)


_container: APIContainer | None = None


def init_container(config: dict) -> APIContainer:
    """Build the container from a plain config dict (see ``main_app.lifespan``)."""
    global _container
    _container = APIContainer()
    _container.config.from_dict(config)
    return _container


def get_container() -> APIContainer:
    if _container is None:
        raise RuntimeError("Container not initialized. Call init_container() first.")
    return _container

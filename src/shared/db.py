"""Schema management for domains backed by a relational database."""

from protean.domain import Domain
from sqlalchemy import create_engine

_RDBMS_PROVIDERS = ("sqlite", "postgresql")


def _rdbms_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _RDBMS_PROVIDERS:
            yield provider


def setup_db(domain: Domain):
    """Create tables for every aggregate, entity and projection of the domain."""
    with domain.domain_context():
        for provider in _rdbms_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Accessing _dao registers each model with SQLAlchemy's metadata
            for registry in (
                domain.registry.aggregates,
                domain.registry.entities,
                domain.registry.projections,
            ):
                for _, record in registry.items():
                    if record.cls.meta_.provider == provider.name:
                        domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop the domain's tables."""
    with domain.domain_context():
        for provider in _rdbms_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)

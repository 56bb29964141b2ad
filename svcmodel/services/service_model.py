"""
Service Model
=============

Helper around a SQLAlchemy engine: validates the database configuration,
owns the engine and its session factory, checks connectivity and,
when an audit endpoint is configured, mirrors every write to the audit sink.

Usage:
    service = ServiceModel({
        "dbName": "offers",
        "dbUser": "svc",
        "dbPass": "secret",
        "dbHost": "localhost",
    })
    service.check_db_connectivity()
    with service.session_scope() as db:
        db.add(offer)
    service.close_db()
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Generator, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from svcmodel.audit.client import AuditClient, create_audit_client
from svcmodel.audit.hooks import HookRegistration, attach_audit_hooks, detach_audit_hooks
from svcmodel.config.settings import DbConfig, Settings, get_settings
from svcmodel.core.constants import CONNECTIVITY_CHECK_QUERY
from svcmodel.core.exceptions import ConfigurationError, ConnectivityError
from svcmodel.core.logging import configure_logging
from svcmodel.database.session import create_db_engine, create_session_factory, session_scope
from svcmodel.services.json_parse import json_parse
from svcmodel.services.pagination import generate_page_links, generate_pagination_links

logger = logging.getLogger(__name__)

EngineFactory = Callable[[DbConfig], Engine]
AuditClientFactory = Callable[[DbConfig], Optional[AuditClient]]


class ServiceModel:
    """
    Database service wrapper.

    Attributes:
        config: The validated ``DbConfig``
        db: The SQLAlchemy engine (the connection handle)
        session_factory: sessionmaker bound to ``db``; audit hooks live here
        audit: The audit client, or None when auditing is off

    Collaborators are injected: ``engine_factory`` builds the engine from
    the validated config and ``audit_client_factory`` builds the audit
    client (returning None disables auditing).
    """

    generate_pagination_links = staticmethod(generate_pagination_links)
    generate_page_links = staticmethod(generate_page_links)
    json_parse = staticmethod(json_parse)

    def __init__(self, config: Union[DbConfig, Mapping[str, Any]],
                 engine_factory: EngineFactory = create_db_engine,
                 audit_client_factory: AuditClientFactory = create_audit_client):
        self.config = self.validate_db_config(config)
        self._engine_factory = engine_factory

        self.db: Engine = engine_factory(self.config)
        self.session_factory: sessionmaker = create_session_factory(self.db)

        self.audit: Optional[AuditClient] = None
        self._hooks: List[HookRegistration] = []
        if self.config.audit_es:
            self.audit = audit_client_factory(self.config)
        if self.audit is not None:
            self.attach_hooks()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "ServiceModel":
        """Build a service from environment-backed settings, configuring logging from them."""
        settings = settings or get_settings()
        configure_logging(settings.log_level, debug=settings.debug)
        return cls(settings.to_db_config(), **kwargs)

    # ========================================
    # Configuration
    # ========================================

    @staticmethod
    def validate_db_config(config: Union[DbConfig, Mapping[str, Any], None]) -> DbConfig:
        """
        Validate the DB config.

        Args:
            config: ``DbConfig`` or a mapping with ``dbName``, ``dbUser``,
                ``dbPass``, ``dbHost`` and the optional fields

        Returns:
            The validated ``DbConfig``

        Raises:
            ConfigurationError: "Invalid DB credentials" (status 500)
        """
        if isinstance(config, DbConfig):
            return config
        if not isinstance(config, Mapping):
            raise ConfigurationError()
        try:
            return DbConfig.model_validate(dict(config))
        except PydanticValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            logger.error(f"Invalid DB config, rejected fields: {fields}")
            raise ConfigurationError(errors=e.errors(include_url=False, include_input=False)) from e

    @staticmethod
    def is_valid_db_config(config: Union[DbConfig, Mapping[str, Any], None]) -> bool:
        """True/false based on config validity."""
        try:
            ServiceModel.validate_db_config(config)
        except ConfigurationError:
            return False
        return True

    def get_engine_factory(self) -> EngineFactory:
        """Return the factory this service built its engine with."""
        return self._engine_factory

    # ========================================
    # Connection lifecycle
    # ========================================

    def get_db(self) -> Engine:
        """Return the engine."""
        return self.db

    def get_session_factory(self) -> sessionmaker:
        return self.session_factory

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Transactional session: commit on success, rollback on error."""
        with session_scope(self.session_factory) as session:
            yield session

    def close_db(self) -> None:
        """Close every pooled connection used by this engine."""
        if self._hooks:
            detach_audit_hooks(self.session_factory, self._hooks)
            self._hooks = []
        if self.audit is not None:
            self.audit.close()
        self.db.dispose()
        logger.info("Database connections closed")

    def check_db_connectivity(self) -> None:
        """
        Check the database connection.

        Raises:
            ConnectivityError: "Unable to connect to the database" (status 500)
        """
        try:
            with self.db.connect() as connection:
                connection.execute(text(CONNECTIVITY_CHECK_QUERY))
        except Exception as e:
            logger.error(f"Database connectivity check failed: {e}")
            raise ConnectivityError() from e

    # ========================================
    # Audit
    # ========================================

    def get_audit(self) -> Optional[AuditClient]:
        return self.audit

    def attach_hooks(self) -> List[HookRegistration]:
        """Register the audit callbacks on this service's session factory."""
        if self.audit is None:
            raise ConfigurationError("Audit endpoint is not configured")
        if not self._hooks:
            self._hooks = attach_audit_hooks(self.session_factory, self.audit)
        return self._hooks

    def __enter__(self) -> "ServiceModel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_db()

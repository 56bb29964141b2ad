"""
Audit Hooks
===========

Wires an ``AuditClient`` onto a session factory's lifecycle events.

Each ``HookEvent`` maps to exactly one SQLAlchemy session event
registration:

- AFTER_CREATE / AFTER_UPDATE / AFTER_SAVE / AFTER_DESTROY: ``after_flush``,
  reading the session's new, dirty and deleted objects.
- AFTER_UPSERT: ``do_orm_execute`` for ``INSERT ... ON CONFLICT`` statements.
- BEFORE_BULK_UPDATE / BEFORE_BULK_DESTROY: ``do_orm_execute`` for ORM-enabled
  ``update()`` / ``delete()`` statements. The affected rows are loaded before
  the statement runs and audited one by one, so bulk operations never skip
  the audit trail.
"""

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from sqlalchemy import event, inspect, select
from sqlalchemy.orm import Mapper, ORMExecuteState, Session, sessionmaker

from svcmodel.audit.client import AuditClient
from svcmodel.core.constants import HookEvent
from svcmodel.models.base import serialize_instance, to_jsonable

logger = logging.getLogger(__name__)


class HookRegistration(NamedTuple):
    """One listener registered on a session factory."""

    hook: HookEvent
    identifier: str
    fn: Callable


def _table_name(mapper: Mapper) -> str:
    return mapper.local_table.name


def _changes(instance: Any) -> Dict[str, Dict[str, Any]]:
    """Collect per-column old/new values from attribute history."""
    state = inspect(instance)
    changes = {}
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue
        changes[attr.key] = {
            "old": to_jsonable(history.deleted[0]) if history.deleted else None,
            "new": to_jsonable(history.added[0]) if history.added else None,
        }
    return changes


class AuditHooks:
    """
    Lifecycle callbacks forwarding ORM changes to an audit client.

    Attributes:
        audit: The audit client entries are submitted to
    """

    def __init__(self, audit: AuditClient):
        self.audit = audit

    # ========================================
    # Flush-time hooks
    # ========================================

    def after_create(self, session: Session, flush_context) -> None:
        for instance in session.new:
            mapper = inspect(instance).mapper
            self.audit.after_create(
                _table_name(mapper),
                serialize_instance(instance),
                {"hook": HookEvent.AFTER_CREATE.value},
            )

    def after_update(self, session: Session, flush_context) -> None:
        for instance in session.dirty:
            if not session.is_modified(instance, include_collections=False):
                continue
            mapper = inspect(instance).mapper
            self.audit.after_update(
                _table_name(mapper),
                serialize_instance(instance),
                {"hook": HookEvent.AFTER_UPDATE.value, "changes": _changes(instance)},
            )

    def after_save(self, session: Session, flush_context) -> None:
        saved = list(session.new) + [
            instance for instance in session.dirty
            if session.is_modified(instance, include_collections=False)
        ]
        for instance in saved:
            mapper = inspect(instance).mapper
            self.audit.after_save(
                _table_name(mapper),
                serialize_instance(instance),
                {"hook": HookEvent.AFTER_SAVE.value},
            )

    def after_destroy(self, session: Session, flush_context) -> None:
        for instance in session.deleted:
            mapper = inspect(instance).mapper
            self.audit.after_destroy(
                _table_name(mapper),
                serialize_instance(instance),
                {"hook": HookEvent.AFTER_DESTROY.value},
            )

    # ========================================
    # Statement-level hooks
    # ========================================

    def after_upsert(self, orm_execute_state: ORMExecuteState):
        """Audit each row of an ``INSERT ... ON CONFLICT`` statement."""
        mapper = orm_execute_state.bind_mapper
        if not orm_execute_state.is_insert or mapper is None:
            return None
        if not is_upsert(orm_execute_state.statement):
            return None

        result = orm_execute_state.invoke_statement()
        table = mapper.local_table
        for params in _parameter_sets(orm_execute_state, mapper):
            record = to_jsonable({key: value for key, value in params.items() if key in table.c})
            self.audit.after_upsert(
                _table_name(mapper),
                record,
                {"hook": HookEvent.AFTER_UPSERT.value},
            )
        return result

    def before_bulk_update(self, orm_execute_state: ORMExecuteState):
        """Run an ORM bulk update, then audit every affected row individually."""
        mapper = orm_execute_state.bind_mapper
        if not orm_execute_state.is_update or mapper is None:
            return None

        session = orm_execute_state.session
        affected = _load_affected(orm_execute_state, mapper)
        before = {inspect(obj).identity: serialize_instance(obj) for obj in affected}

        result = orm_execute_state.invoke_statement()

        for instance in affected:
            session.refresh(instance)
            record = serialize_instance(instance)
            old = before.get(inspect(instance).identity, {})
            changes = {
                key: {"old": old.get(key), "new": value}
                for key, value in record.items() if old.get(key) != value
            }
            self.audit.after_update(
                _table_name(mapper),
                record,
                {"hook": HookEvent.BEFORE_BULK_UPDATE.value, "bulk": True, "changes": changes},
            )
        return result

    def before_bulk_destroy(self, orm_execute_state: ORMExecuteState):
        """Load the rows an ORM bulk delete will remove and audit each one."""
        mapper = orm_execute_state.bind_mapper
        if not orm_execute_state.is_delete or mapper is None:
            return None

        records = [serialize_instance(obj) for obj in _load_affected(orm_execute_state, mapper)]

        result = orm_execute_state.invoke_statement()

        for record in records:
            self.audit.after_destroy(
                _table_name(mapper),
                record,
                {"hook": HookEvent.BEFORE_BULK_DESTROY.value, "bulk": True},
            )
        return result


def is_upsert(statement: Any) -> bool:
    """True for dialect inserts carrying an ON CONFLICT / ON DUPLICATE KEY clause."""
    return getattr(statement, "_post_values_clause", None) is not None


def _parameter_sets(orm_execute_state: ORMExecuteState, mapper: Mapper) -> List[Dict[str, Any]]:
    params = orm_execute_state.parameters
    if isinstance(params, list):
        return params
    if params:
        return [params]
    bind = orm_execute_state.session.get_bind(mapper=mapper)
    return [orm_execute_state.statement.compile(dialect=bind.dialect).params]


def _load_affected(orm_execute_state: ORMExecuteState, mapper: Mapper) -> List[Any]:
    """
    Load the entities a bulk UPDATE/DELETE statement will touch.

    Statements executed with a list of parameter sets address rows by
    primary key; otherwise the statement's WHERE clause is reused.
    """
    session = orm_execute_state.session
    entity = mapper.class_

    params = orm_execute_state.parameters
    if isinstance(params, list):
        pk_keys = [mapper.get_property_by_column(col).key for col in mapper.primary_key]
        loaded = []
        for param in params:
            ident = tuple(param.get(key) for key in pk_keys)
            instance = session.get(entity, ident if len(ident) > 1 else ident[0])
            if instance is not None:
                loaded.append(instance)
        return loaded

    query = select(entity)
    whereclause = orm_execute_state.statement.whereclause
    if whereclause is not None:
        query = query.where(whereclause)
    return list(session.execute(query).scalars().all())


def attach_audit_hooks(session_factory: sessionmaker,
                       audit: AuditClient) -> List[HookRegistration]:
    """
    Register the audit callbacks on ``session_factory``.

    Args:
        session_factory: The sessionmaker all audited sessions come from
        audit: Audit client receiving one entry per affected row

    Returns:
        The registrations, in order, for ``detach_audit_hooks``
    """
    hooks = AuditHooks(audit)
    registrations = [
        HookRegistration(HookEvent.AFTER_CREATE, "after_flush", hooks.after_create),
        HookRegistration(HookEvent.AFTER_DESTROY, "after_flush", hooks.after_destroy),
        HookRegistration(HookEvent.AFTER_UPDATE, "after_flush", hooks.after_update),
        HookRegistration(HookEvent.AFTER_SAVE, "after_flush", hooks.after_save),
        HookRegistration(HookEvent.AFTER_UPSERT, "do_orm_execute", hooks.after_upsert),
        HookRegistration(HookEvent.BEFORE_BULK_UPDATE, "do_orm_execute", hooks.before_bulk_update),
        HookRegistration(HookEvent.BEFORE_BULK_DESTROY, "do_orm_execute", hooks.before_bulk_destroy),
    ]
    for registration in registrations:
        event.listen(session_factory, registration.identifier, registration.fn)
        logger.debug(f"Registered audit hook {registration.hook.value}")

    logger.info(f"Attached {len(registrations)} audit hooks")
    return registrations


def detach_audit_hooks(session_factory: sessionmaker,
                       registrations: Optional[List[HookRegistration]]) -> None:
    """Remove previously attached audit callbacks."""
    for registration in registrations or []:
        if event.contains(session_factory, registration.identifier, registration.fn):
            event.remove(session_factory, registration.identifier, registration.fn)

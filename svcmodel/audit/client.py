"""
Audit sink client.

Submits audit entries to an Elasticsearch-compatible HTTP endpoint
(``POST {host}/{index}/_doc``). One entry is written per affected row.
"""

import logging
from datetime import datetime, UTC
from typing import Any, Dict, Optional

import requests

from svcmodel.config.settings import DbConfig
from svcmodel.core.constants import AuditOperation, DEFAULT_AUDIT_INDEX
from svcmodel.models.base import to_jsonable

logger = logging.getLogger(__name__)


class AuditClient:
    """
    HTTP client for the audit sink.

    Attributes:
        host: Base URL of the sink (e.g. ``http://audit-es:9200``)
        index: Index the entries are written to
        user_id: Identifier attributed to every entry, may be None

    Example:
        client = AuditClient("http://audit-es:9200", user_id=user_uuid)
        client.log(AuditOperation.CREATE, "offers", {"id": 1, "title": "Book"})
    """

    def __init__(self, host: str, index: str = DEFAULT_AUDIT_INDEX,
                 user_id: Optional[str] = None, timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        if not host:
            raise ValueError("Audit host is required")
        self.host = host.rstrip("/")
        self.index = index
        self.user_id = user_id
        self.timeout = timeout
        self.session = session or requests.Session()

    def set_user_id(self, user_id: Optional[Any]) -> None:
        """Set the user every subsequent entry is attributed to."""
        self.user_id = str(user_id) if user_id is not None else None

    @property
    def endpoint(self) -> str:
        return f"{self.host}/{self.index}/_doc"

    def build_entry(self, operation: AuditOperation, table: str,
                    record: Dict[str, Any],
                    metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Build the document submitted for one audited row."""
        return {
            "operation": AuditOperation(operation).value,
            "table": table,
            "userId": self.user_id,
            "record": to_jsonable(record),
            "metadata": to_jsonable(metadata or {}),
            "timestamp": datetime.now(UTC).isoformat(),
        }

    def log(self, operation: AuditOperation, table: str, record: Dict[str, Any],
            metadata: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Submit one audit entry.

        Transport, encoding and response-decoding failures are logged and
        reported as ``None``; a sink outage never aborts the database
        operation being audited.

        Returns:
            The sink's JSON response, None if the submission failed or
            the sink answered without a JSON body
        """
        entry = self.build_entry(operation, table, record, metadata)
        try:
            response = self.session.post(
                self.endpoint,
                json=entry,
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.debug(f"Audited {entry['operation']} on {table}")
            if not response.content:
                return None
            return response.json()
        except (requests.RequestException, TypeError, ValueError) as e:
            logger.error(f"Failed to submit audit entry ({entry['operation']} on {table}): {e}")
            return None

    def after_create(self, table: str, record: Dict[str, Any],
                     metadata: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.log(AuditOperation.CREATE, table, record, metadata)

    def after_update(self, table: str, record: Dict[str, Any],
                     metadata: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.log(AuditOperation.UPDATE, table, record, metadata)

    def after_destroy(self, table: str, record: Dict[str, Any],
                      metadata: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.log(AuditOperation.DESTROY, table, record, metadata)

    def after_save(self, table: str, record: Dict[str, Any],
                   metadata: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.log(AuditOperation.SAVE, table, record, metadata)

    def after_upsert(self, table: str, record: Dict[str, Any],
                     metadata: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.log(AuditOperation.UPSERT, table, record, metadata)

    def close(self) -> None:
        self.session.close()


def create_audit_client(config: DbConfig) -> Optional[AuditClient]:
    """
    Build the audit client for a configuration.

    Returns:
        An ``AuditClient`` bound to ``config.audit_es`` and
        ``config.user_id``, or None when auditing is not configured
    """
    if not config.audit_es:
        return None

    client = AuditClient(str(config.audit_es), index=config.audit_index)
    client.set_user_id(config.user_id)
    return client

"""
Library-wide constants.

Error messages, default codes and the enumerations shared by the
service wrapper, the audit hooks and the pagination helpers.
"""

from enum import Enum


# ========================================
# Audit Operations
# ========================================

class AuditOperation(str, Enum):
    """
    Operation types submitted to the audit sink.

    Usage:
        op = AuditOperation.CREATE
        print(op == "create")  # True
    """

    CREATE = "create"
    """A new row was inserted."""

    UPDATE = "update"
    """An existing row was modified."""

    DESTROY = "destroy"
    """A row was deleted."""

    SAVE = "save"
    """A row was inserted or modified (fires alongside CREATE/UPDATE)."""

    UPSERT = "upsert"
    """A row was inserted-or-updated through an ON CONFLICT statement."""


# ========================================
# Lifecycle Hooks
# ========================================

class HookEvent(str, Enum):
    """Lifecycle events the audit layer registers callbacks for."""

    AFTER_CREATE = "afterCreate"
    AFTER_DESTROY = "afterDestroy"
    AFTER_UPDATE = "afterUpdate"
    AFTER_SAVE = "afterSave"
    AFTER_UPSERT = "afterUpsert"
    BEFORE_BULK_UPDATE = "beforeBulkUpdate"
    BEFORE_BULK_DESTROY = "beforeBulkDestroy"


# ========================================
# Database Defaults
# ========================================

DEFAULT_DIALECT = "postgresql"
DEFAULT_AUDIT_INDEX = "audit"
CONNECTIVITY_CHECK_QUERY = "SELECT 1"

# ========================================
# Error Messages & Codes
# ========================================

MSG_INVALID_DB_CONFIG = "Invalid DB credentials"
MSG_DB_UNREACHABLE = "Unable to connect to the database"
MSG_INVALID_PAGINATION = "Please provide valid pagination options."
MSG_INVALID_JSON = "Invalid json input"

DEFAULT_ERROR_STATUS = 500
DEFAULT_JSON_STATUS = 400
DEFAULT_JSON_ERROR_CODE = 1000300

# ========================================
# Pagination
# ========================================

OFFSET_PARAM = "offset"
LIMIT_PARAM = "limit"
SECURE_SCHEME = "https"
WEB_SCHEMES = ("http", "https")

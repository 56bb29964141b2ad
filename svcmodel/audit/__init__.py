"""
Audit package.

Mirrors create/update/delete/save/upsert operations to an external audit sink.
"""

from svcmodel.audit.client import AuditClient, create_audit_client
from svcmodel.audit.hooks import (
    AuditHooks,
    HookRegistration,
    attach_audit_hooks,
    detach_audit_hooks,
)

__all__ = [
    "AuditClient",
    "AuditHooks",
    "HookRegistration",
    "attach_audit_hooks",
    "create_audit_client",
    "detach_audit_hooks",
]

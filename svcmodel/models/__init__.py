"""
Models package.

Declarative base and serialization helpers for the application's own ORM models.
"""

from svcmodel.models.base import (
    Base,
    SerializationMixin,
    serialize_instance,
    to_jsonable,
)

__all__ = [
    "Base",
    "SerializationMixin",
    "serialize_instance",
    "to_jsonable",
]

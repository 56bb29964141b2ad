"""
Base Model
==========

Declarative base and serialization helpers for models managed through
``ServiceModel``.
"""

from typing import Any, Dict, Optional, Set

from pydantic_core import to_jsonable_python
from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class SerializationMixin:
    """Mixin that adds to_dict() serialization method."""

    def to_dict(self, exclude: Optional[Set[str]] = None) -> Dict[str, Any]:
        """Convert model instance to dictionary."""
        return serialize_instance(self, exclude)


def to_jsonable(value: Any) -> Any:
    """
    Convert a column value (or a dict of them) to JSON-compatible data.

    Dates and times become ISO strings, ``bytes`` become base64 and any
    type pydantic cannot encode falls back to ``str()``.
    """
    return to_jsonable_python(value, bytes_mode="base64", fallback=str)


def serialize_instance(instance: Any, exclude: Optional[Set[str]] = None) -> Dict[str, Any]:
    """
    Convert a mapped instance's column values to JSON-compatible values.

    Only attributes already loaded on the instance are read, so calling
    this from a flush hook never triggers a lazy load.

    Args:
        instance: Any SQLAlchemy-mapped object
        exclude: Attribute keys to leave out

    Returns:
        Dictionary of attribute key to value, run through ``to_jsonable``
    """
    exclude = exclude or set()
    state = inspect(instance)
    result = {}
    for attr in state.mapper.column_attrs:
        if attr.key in exclude or attr.key in state.unloaded:
            continue
        result[attr.key] = getattr(instance, attr.key)
    return to_jsonable(result)

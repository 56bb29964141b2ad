"""
svcmodel
========

SQLAlchemy service helper: config validation, connection lifecycle,
audit hooks, pagination links and JSON parsing.
"""

from svcmodel.config import DbConfig, Settings, get_settings
from svcmodel.core.exceptions import (
    ConfigurationError,
    ConnectivityError,
    ParseError,
    ServiceModelError,
    ValidationError,
)
from svcmodel.services import (
    PaginationLinks,
    ServiceModel,
    generate_page_links,
    generate_pagination_links,
    json_parse,
    json_parse_async,
)

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "DbConfig",
    "PaginationLinks",
    "ParseError",
    "ServiceModel",
    "ServiceModelError",
    "Settings",
    "ValidationError",
    "generate_page_links",
    "generate_pagination_links",
    "get_settings",
    "json_parse",
    "json_parse_async",
]

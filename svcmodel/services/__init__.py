"""
Services Package
================

- ServiceModel: database configuration, lifecycle and audit wiring
- Pagination: prev/next link generation (offset and page based)
- json_parse: JSON decoding with normalized errors
"""

from svcmodel.services.json_parse import json_parse, json_parse_async
from svcmodel.services.pagination import (
    OffsetPaginationOptions,
    PagePaginationOptions,
    PaginationLinks,
    generate_page_links,
    generate_pagination_links,
)
from svcmodel.services.service_model import ServiceModel

__all__ = [
    "OffsetPaginationOptions",
    "PagePaginationOptions",
    "PaginationLinks",
    "ServiceModel",
    "generate_page_links",
    "generate_pagination_links",
    "json_parse",
    "json_parse_async",
]

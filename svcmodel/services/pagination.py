"""
Pagination Links
================

Builds "prev"/"next" navigation links for paginated list endpoints.

Two addressing modes are supported:

- Offset based: ``offset``/``limit`` query parameters are written onto the
  base URL, replacing any existing values and keeping other parameters.
- Page based: the target page number is appended to the base link as a
  plain string suffix (e.g. ``https://api/offers?page=`` + ``2``).
"""

import logging
from math import ceil
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from svcmodel.core.constants import LIMIT_PARAM, OFFSET_PARAM, SECURE_SCHEME, WEB_SCHEMES
from svcmodel.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _check_absolute_url(value: str, schemes: Tuple[str, ...]) -> str:
    parts = urlsplit(value)
    if parts.scheme not in schemes or not parts.netloc:
        raise ValueError(f"must be an absolute URL with scheme {' or '.join(schemes)}")
    return value


class PaginationLinks(BaseModel):
    """
    Navigation links for one page of results.

    A link is None when there is no page in that direction;
    ``to_dict()`` leaves absent links out entirely.
    """

    model_config = ConfigDict(frozen=True)

    prev: Optional[str] = None
    next: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        return self.model_dump(exclude_none=True)


class OffsetPaginationOptions(BaseModel):
    """
    Input for offset based pagination.

    ``count``, ``limit`` and ``offset`` must be real integers: floats
    (even whole ones such as ``10.0``), numeric strings and booleans are
    rejected rather than coerced.

    Attributes:
        count: Total number of results the query produced
        limit: Size of one page
        offset: Offset of the page currently being accessed
        base_link: https link to the endpoint that needs pagination,
            e.g. ``https://services.packpub.com/offers``
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    count: StrictInt = Field(ge=0)
    limit: StrictInt = Field(ge=1)
    offset: StrictInt = Field(default=0, ge=0)
    base_link: str = Field(alias="baseLink")

    @field_validator("base_link")
    @classmethod
    def validate_base_link(cls, v: str) -> str:
        return _check_absolute_url(v, (SECURE_SCHEME,))


class PagePaginationOptions(BaseModel):
    """
    Input for page based pagination.

    Numbers follow the same strict integer rule as
    ``OffsetPaginationOptions``.

    Attributes:
        count: Total number of results the query produced
        page_size: Size of one page
        page_number: 1-indexed page currently being accessed
        base_link: Absolute link the target page number is appended to
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    count: StrictInt = Field(ge=0)
    page_size: StrictInt = Field(alias="pageSize", ge=1)
    page_number: StrictInt = Field(default=1, alias="pageNumber", ge=1)
    base_link: str = Field(alias="baseLink")

    @field_validator("base_link")
    @classmethod
    def validate_base_link(cls, v: str) -> str:
        return _check_absolute_url(v, WEB_SCHEMES)


def _validate(model: type, options: Any) -> Any:
    if isinstance(options, model):
        return options
    if not isinstance(options, Mapping):
        raise ValidationError()
    try:
        return model.model_validate(dict(options))
    except PydanticValidationError as e:
        logger.debug(f"Rejected pagination options: {e}")
        raise ValidationError(errors=e.errors(include_url=False)) from e


def set_query_params(url: str, params: Dict[str, Any]) -> str:
    """
    Set query parameters on ``url``.

    An existing parameter keeps its position and takes the new value;
    further duplicates of it are dropped. New parameters are appended.
    Every other parameter is preserved as is.

    The query is re-encoded with ``urllib.parse.urlencode``: spaces become
    ``+``, ``~`` stays literal and ``*`` is percent-encoded, which differs
    from the WHATWG form encoder (``~`` escaped, ``*`` literal). The host
    and port are kept exactly as given; no case or default-port
    normalisation is applied.
    """
    parts = urlsplit(url)
    pending = {key: str(value) for key, value in params.items()}
    query: List[Tuple[str, str]] = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in params:
            if key in pending:
                query.append((key, pending.pop(key)))
            continue
        query.append((key, value))
    query.extend(pending.items())

    return urlunsplit((
        parts.scheme,
        parts.netloc,
        parts.path or "/",
        urlencode(query),
        parts.fragment,
    ))


def generate_pagination_links(
    options: Union[OffsetPaginationOptions, Mapping[str, Any], None]
) -> PaginationLinks:
    """
    Return the prev/next links for an offset based page.

    Args:
        options: ``OffsetPaginationOptions`` or a mapping with ``count``,
            ``limit``, optional ``offset`` (default 0) and ``baseLink``

    Returns:
        PaginationLinks; ``prev`` is set when there are results and
        ``offset >= 1``, ``next`` when ``offset < count - limit``

    Raises:
        ValidationError: If the options are missing or invalid

    Example:
        links = generate_pagination_links({
            "count": 30, "offset": 10, "limit": 10,
            "baseLink": "https://x/offers",
        })
        links.prev  # "https://x/offers?offset=0&limit=10"
        links.next  # "https://x/offers?offset=20&limit=10"
    """
    opts = _validate(OffsetPaginationOptions, options)
    count, offset, limit = opts.count, opts.offset, opts.limit

    has_results = count > 0
    has_prev = has_results and offset >= 1
    has_next = offset < count - limit

    prev_link = None
    next_link = None

    if has_prev:
        new_offset = 0 if offset < limit else offset - limit
        prev_link = set_query_params(opts.base_link, {OFFSET_PARAM: new_offset, LIMIT_PARAM: limit})

    if has_next:
        new_offset = offset + limit
        next_link = set_query_params(opts.base_link, {OFFSET_PARAM: new_offset, LIMIT_PARAM: limit})

    return PaginationLinks(prev=prev_link, next=next_link)


def generate_page_links(
    options: Union[PagePaginationOptions, Mapping[str, Any], None]
) -> PaginationLinks:
    """
    Return the prev/next links for a page-number based page.

    Args:
        options: ``PagePaginationOptions`` or a mapping with ``count``,
            ``pageSize``, optional ``pageNumber`` (default 1) and ``baseLink``

    Returns:
        PaginationLinks with ``baseLink + str(page)`` for each direction

    Raises:
        ValidationError: If the options are missing or invalid

    Example:
        generate_page_links({"count": 23, "pageSize": 10,
                             "baseLink": "https://x/offers?page="}).next
        # "https://x/offers?page=2"
    """
    opts = _validate(PagePaginationOptions, options)
    page_number = opts.page_number
    total_pages = ceil(opts.count / opts.page_size)

    has_prev = opts.count > 0 and page_number > 1
    has_next = page_number < total_pages

    return PaginationLinks(
        prev=f"{opts.base_link}{page_number - 1}" if has_prev else None,
        next=f"{opts.base_link}{page_number + 1}" if has_next else None,
    )

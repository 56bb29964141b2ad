"""JSON parsing with normalized errors."""

import json
import logging
from typing import Any

from svcmodel.core.constants import DEFAULT_JSON_ERROR_CODE, DEFAULT_JSON_STATUS, MSG_INVALID_JSON
from svcmodel.core.exceptions import ParseError

logger = logging.getLogger(__name__)


def json_parse(value: Any, status_code: int = DEFAULT_JSON_STATUS,
               error_code: int = DEFAULT_JSON_ERROR_CODE) -> Any:
    """
    Parse a JSON string.

    Args:
        value: The JSON string. Anything that is not a ``str`` is treated
            as already parsed and returned unchanged.
        status_code: Status code carried by the error on failure
        error_code: Error code carried by the error on failure

    Returns:
        The decoded value

    Raises:
        ParseError: "Invalid json input" with the given codes
    """
    if not isinstance(value, str):
        return value

    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        logger.debug(f"Invalid json input at position {e.pos}: {e.msg}")
        raise ParseError(MSG_INVALID_JSON, status_code, error_code) from e


async def json_parse_async(value: Any, status_code: int = DEFAULT_JSON_STATUS,
                           error_code: int = DEFAULT_JSON_ERROR_CODE) -> Any:
    """Awaitable variant of ``json_parse`` with identical semantics."""
    return json_parse(value, status_code, error_code)

"""Tests for json_parse."""

import asyncio
import json

import pytest

from svcmodel.core.exceptions import ParseError
from svcmodel.services.json_parse import json_parse, json_parse_async
from svcmodel.services.service_model import ServiceModel


def test_parses_json_string():
    body = json_parse('{"message": "test"}')
    assert body == {"message": "test"}


def test_passes_through_non_strings():
    payload = {"message": "test"}
    assert json_parse(payload) is payload
    assert json_parse(None) is None
    assert json_parse(42) == 42


def test_invalid_json_uses_default_codes():
    with pytest.raises(ParseError) as exc_info:
        json_parse('{"message": "test"')

    err = exc_info.value
    assert err.message == "Invalid json input"
    assert err.status_code == 400
    assert err.error_code == 1000300
    assert isinstance(err.__cause__, json.JSONDecodeError)


def test_invalid_json_uses_custom_codes():
    with pytest.raises(ParseError) as exc_info:
        json_parse('{"message": "test"', 500, 1000)

    assert exc_info.value.message == "Invalid json input"
    assert exc_info.value.status_code == 500
    assert exc_info.value.error_code == 1000


def test_error_serializes():
    with pytest.raises(ParseError) as exc_info:
        json_parse("not json")
    assert exc_info.value.to_dict() == {
        "message": "Invalid json input",
        "statusCode": 400,
        "errorCode": 1000300,
    }


def test_async_variant():
    assert asyncio.run(json_parse_async('{"a": 1}')) == {"a": 1}
    with pytest.raises(ParseError):
        asyncio.run(json_parse_async('{"a": 1'))


def test_reachable_from_service_model():
    assert ServiceModel.json_parse("[1, 2]") == [1, 2]

"""
Tests for the request pipeline and body parsing.
"""

import pytest

from shared.errors import MalformedInputError
from service_dns_gateway.app.auth.token import TokenAuthenticator
from service_dns_gateway.app.domain.dispatcher import OperationDispatcher
from service_dns_gateway.app.domain.gateway import RequestGateway, parse_body
from service_dns_gateway.app.domain.models import HeaderMap, IncomingRequest, ProviderIdentity
from service_dns_gateway.app.domain.validation import RequestValidator


@pytest.fixture
def gateway(pool, service_factory):
    validator = RequestValidator(ProviderIdentity(provider="Desec", apikey="provider-key"))
    dispatcher = OperationDispatcher(validator, pool, service_factory)
    return RequestGateway(TokenAuthenticator("test-token"), dispatcher)


def make_request(method, path, body=b"", token="test-token"):
    headers = {"X-API-Token": token} if token is not None else {}
    return IncomingRequest(method=method, path=path, headers=HeaderMap(headers), body=body)


def test_parse_body_empty():
    assert parse_body(b"") == {}


def test_parse_body_object():
    assert parse_body(b'{"a": 1}') == {"a": 1}


@pytest.mark.parametrize("raw", [
    b"not json",
    b"[1, 2]",
    b'"text"',
    b"42",
    b"null",
    b"\xff\xfe",
    b"[" * 100000,
    b'{"a":' * 100000,
])
def test_parse_body_rejects_non_objects(raw):
    with pytest.raises(MalformedInputError) as exc_info:
        parse_body(raw)
    assert exc_info.value.message == "Invalid JSON payload"


@pytest.mark.parametrize("raw", [
    b'{"ttl": NaN}',
    b'{"ttl": Infinity}',
    b'{"ttl": -Infinity}',
    '{"a": 1}'.encode("utf-16"),
    '{"a": 1}'.encode("utf-16-le"),
    '{"a": 1}'.encode("utf-32"),
    b'\xef\xbb\xbf{"a": 1}',
])
def test_parse_body_accepts_only_strict_utf8_json(raw):
    with pytest.raises(MalformedInputError):
        parse_body(raw)


class TestRequestGateway:
    """Test cases for RequestGateway."""

    @pytest.mark.asyncio
    async def test_unauthorized_short_circuits(self, gateway, dns_service, pool):
        response = await gateway.handle(make_request("POST", "/install", b"garbage", token="wrong"))

        assert response.status_code == 401
        assert response.body == {"error": "Unauthorized"}
        assert pool.acquired == 0
        dns_service.install.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unauthorized_beats_unknown_route(self, gateway):
        response = await gateway.handle(make_request("GET", "/nowhere", token=None))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_body_checked_before_routing(self, gateway):
        response = await gateway.handle(make_request("GET", "/nowhere", b"{oops"))

        assert response.status_code == 400
        assert response.body == {"error": "Invalid JSON payload"}

    @pytest.mark.asyncio
    async def test_unknown_route(self, gateway):
        response = await gateway.handle(make_request("GET", "/record"))

        assert response.status_code == 404
        assert response.body == {"error": "Endpoint not found"}

    @pytest.mark.asyncio
    async def test_validation_error_becomes_400(self, gateway):
        body = b'{"domain_name": "example.com", "record_name": "www", "record_type": "A", ' \
               b'"record_value": "192.0.2.1", "record_ttl": "abc"}'
        response = await gateway.handle(make_request("POST", "/record", body))

        assert response.status_code == 400
        assert response.body == {"error": "Invalid record_ttl"}

    @pytest.mark.asyncio
    async def test_facade_error_becomes_400(self, gateway, dns_service):
        dns_service.delete_domain.side_effect = LookupError("Domain example.com not found")

        response = await gateway.handle(
            make_request("DELETE", "/domain", b'{"config": {"domain_name": "example.com"}}')
        )

        assert response.status_code == 400
        assert response.body == {"error": "Domain example.com not found"}

    @pytest.mark.asyncio
    async def test_success(self, gateway, dns_service):
        response = await gateway.handle(make_request("POST", "/uninstall"))

        assert response.status_code == 200
        assert response.body == {"status": "success", "message": "Database structure uninstalled"}

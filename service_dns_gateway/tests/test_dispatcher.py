"""
Unit tests for OperationDispatcher.
"""

import pytest

from shared.errors import FacadeError, RouteNotFoundError, ValidationError
from shared.metrics import MetricsCollector
from service_dns_gateway.app.domain.dispatcher import OperationDispatcher
from service_dns_gateway.app.domain.models import ROUTES, Operation, ProviderIdentity, resolve_route
from service_dns_gateway.app.domain.validation import RequestValidator


@pytest.fixture
def metrics():
    return MetricsCollector("dns_gateway_test")


@pytest.fixture
def dispatcher(pool, service_factory, metrics):
    validator = RequestValidator(ProviderIdentity(provider="Desec", apikey="provider-key"))
    return OperationDispatcher(validator, pool, service_factory, metrics=metrics)


def operation_count(metrics, operation, outcome):
    return metrics.registry.get_sample_value(
        "dns_operations_total", {"operation": operation, "outcome": outcome}
    )


def test_route_table_covers_every_operation():
    assert set(ROUTES.values()) == set(Operation)
    assert len(ROUTES) == len(Operation)


@pytest.mark.parametrize("method,path", [
    ("GET", "/install"),
    ("POST", "/install/"),
    ("POST", "/Install"),
    ("PATCH", "/record"),
    ("GET", "/"),
    ("POST", "/records"),
])
def test_resolve_route_is_exact(method, path):
    assert resolve_route(method, path) is None


def test_resolve_route_uppercases_method():
    assert resolve_route("delete", "/record") is Operation.DELETE_RECORD


class TestOperationDispatcher:
    """Test cases for OperationDispatcher."""

    @pytest.mark.asyncio
    async def test_install(self, dispatcher, dns_service, pool, service_factory):
        response = await dispatcher.dispatch("POST", "/install", {})

        assert response.status_code == 200
        assert response.body == {"status": "success", "message": "Database structure installed"}
        dns_service.install.assert_awaited_once_with()
        service_factory.assert_called_once_with(pool.conn)

    @pytest.mark.asyncio
    async def test_uninstall(self, dispatcher, dns_service):
        response = await dispatcher.dispatch("POST", "/uninstall", {})

        assert response.body == {"status": "success", "message": "Database structure uninstalled"}
        dns_service.uninstall.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_create_domain_returns_facade_value(self, dispatcher, dns_service):
        dns_service.create_domain.return_value = 42

        response = await dispatcher.dispatch(
            "POST", "/domain", {"client_id": "3", "config": {"domain_name": "example.com"}}
        )

        assert response.body == {"status": "success", "domain": 42}
        dns_service.create_domain.assert_awaited_once_with(
            {"client_id": 3, "config": '{"domain_name":"example.com"}'}
        )

    @pytest.mark.asyncio
    async def test_add_record_returns_record_id(self, dispatcher, dns_service):
        dns_service.add_record.return_value = 7

        response = await dispatcher.dispatch("POST", "/record", {
            "domain_name": "example.com",
            "record_name": "www",
            "record_type": "A",
            "record_value": "192.0.2.1",
            "record_ttl": 300,
            "apikey": "caller-key",
        })

        assert response.body == {"status": "success", "record_id": 7}
        order = dns_service.add_record.await_args.args[0]
        assert order["apikey"] == "provider-key"
        assert order["provider"] == "Desec"

    @pytest.mark.asyncio
    async def test_delete_record(self, dispatcher, dns_service, pool):
        response = await dispatcher.dispatch(
            "DELETE", "/record", {"domain_name": "example.com", "record_id": "9"}
        )

        assert response.body == {"status": "success", "message": "DNS record deleted"}
        dns_service.del_record.assert_awaited_once_with({
            "domain_name": "example.com",
            "record_id": "9",
            "provider": "Desec",
            "apikey": "provider-key",
        })
        assert pool.acquired == pool.released == 1

    @pytest.mark.asyncio
    async def test_unknown_route(self, dispatcher, pool):
        with pytest.raises(RouteNotFoundError):
            await dispatcher.dispatch("GET", "/domain", {})
        assert pool.acquired == 0

    @pytest.mark.asyncio
    async def test_validation_failure_never_checks_out_connection(self, dispatcher, pool, dns_service, metrics):
        with pytest.raises(ValidationError):
            await dispatcher.dispatch("POST", "/domain", {"client_id": 1})

        assert pool.acquired == 0
        dns_service.create_domain.assert_not_awaited()
        assert operation_count(metrics, "create_domain", "failure") == 1.0

    @pytest.mark.asyncio
    async def test_facade_error_is_wrapped_and_connection_released(self, dispatcher, dns_service, pool, metrics):
        dns_service.install.side_effect = RuntimeError('relation "dns_domains" already exists')

        with pytest.raises(FacadeError) as exc_info:
            await dispatcher.dispatch("POST", "/install", {})

        assert exc_info.value.message == 'relation "dns_domains" already exists'
        assert exc_info.value.status_code == 400
        assert pool.acquired == pool.released == 1
        assert operation_count(metrics, "install", "failure") == 1.0

    @pytest.mark.asyncio
    async def test_facade_error_without_message_uses_type_name(self, dispatcher, dns_service):
        dns_service.uninstall.side_effect = TimeoutError()

        with pytest.raises(FacadeError) as exc_info:
            await dispatcher.dispatch("POST", "/uninstall", {})

        assert exc_info.value.message == "TimeoutError"

    @pytest.mark.asyncio
    async def test_success_is_counted(self, dispatcher, metrics):
        await dispatcher.dispatch("POST", "/install", {})
        assert operation_count(metrics, "install", "success") == 1.0

"""
Operation dispatch for the DNS gateway.
"""

from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from shared.errors import FacadeError, GatewayException, RouteNotFoundError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..adapters.service import DNSService, ServiceFactory
from .models import GatewayResponse, Operation, OperationRequest, resolve_route
from .validation import RequestValidator

Handler = Callable[[DNSService, Dict[str, Any]], Awaitable[GatewayResponse]]


class OperationDispatcher:
    """Routes a request to its operation and runs it against the service facade.

    A connection is checked out of the pool only once validation has passed,
    and the facade is bound to that connection for the one call.
    """

    def __init__(
        self,
        validator: RequestValidator,
        pool: Any,
        service_factory: ServiceFactory,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.validator = validator
        self.pool = pool
        self.service_factory = service_factory
        self.metrics = metrics
        self.logger = get_logger("dns_gateway.dispatcher")
        self._handlers: Dict[Operation, Handler] = {
            Operation.INSTALL: self._install,
            Operation.UNINSTALL: self._uninstall,
            Operation.CREATE_DOMAIN: self._create_domain,
            Operation.DELETE_DOMAIN: self._delete_domain,
            Operation.ADD_RECORD: self._add_record,
            Operation.UPDATE_RECORD: self._update_record,
            Operation.DELETE_RECORD: self._delete_record,
        }
        missing = set(Operation) - set(self._handlers)
        if missing:
            raise ValueError(f"No handler for operations: {sorted(op.value for op in missing)}")

    async def dispatch(self, method: str, path: str, payload: Mapping[str, Any]) -> GatewayResponse:
        """Resolve, validate and execute one operation."""
        operation = resolve_route(method, path)
        if operation is None:
            raise RouteNotFoundError(details={"method": method, "path": path})

        try:
            request = OperationRequest(operation, self.validator.validate(operation, payload))
            response = await self._execute(request)
        except GatewayException:
            self._record(operation, "failure")
            raise

        self._record(operation, "success")
        self.logger.info("Operation completed", operation=operation.value)
        return response

    async def _execute(self, request: OperationRequest) -> GatewayResponse:
        operation = request.operation
        handler = self._handlers[operation]
        try:
            async with self.pool.acquire() as conn:
                service = self.service_factory(conn)
                return await handler(service, request.payload)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            self.logger.warning(
                "Service facade error",
                operation=operation.value,
                error=message,
                error_type=e.__class__.__name__
            )
            raise FacadeError(message, details={"operation": operation.value})

    def _record(self, operation: Operation, outcome: str) -> None:
        if self.metrics:
            self.metrics.record_operation(operation.value, outcome)

    async def _install(self, service: DNSService, order: Dict[str, Any]) -> GatewayResponse:
        await service.install()
        return GatewayResponse.success(message="Database structure installed")

    async def _uninstall(self, service: DNSService, order: Dict[str, Any]) -> GatewayResponse:
        await service.uninstall()
        return GatewayResponse.success(message="Database structure uninstalled")

    async def _create_domain(self, service: DNSService, order: Dict[str, Any]) -> GatewayResponse:
        domain = await service.create_domain(order)
        return GatewayResponse.success(domain=domain)

    async def _delete_domain(self, service: DNSService, order: Dict[str, Any]) -> GatewayResponse:
        await service.delete_domain(order)
        return GatewayResponse.success(message="Domain deleted")

    async def _add_record(self, service: DNSService, order: Dict[str, Any]) -> GatewayResponse:
        record_id = await service.add_record(order)
        return GatewayResponse.success(record_id=record_id)

    async def _update_record(self, service: DNSService, order: Dict[str, Any]) -> GatewayResponse:
        await service.update_record(order)
        return GatewayResponse.success(message="DNS record updated")

    async def _delete_record(self, service: DNSService, order: Dict[str, Any]) -> GatewayResponse:
        await service.del_record(order)
        return GatewayResponse.success(message="DNS record deleted")

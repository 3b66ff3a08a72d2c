"""
DNS gateway service.
"""

import sys
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SettingsError

from shared.base_service import BaseService
from shared.config import GatewaySettings, get_config
from shared.logging import configure_logging, get_logger
from .adapters.postgres_service import PostgresDNSService
from .adapters.service import ServiceFactory
from .auth.token import TokenAuthenticator
from .domain.dispatcher import OperationDispatcher
from .domain.gateway import RequestGateway
from .domain.models import GatewayResponse, HeaderMap, IncomingRequest, ProviderIdentity
from .domain.validation import RequestValidator
from .persistence.pool import ConnectionPool


def encode_response(result: GatewayResponse) -> JSONResponse:
    """Render a gateway result as exactly one JSON object."""
    return JSONResponse(status_code=result.status_code, content=result.body)


class GatewayService(BaseService):
    """DNS gateway service implementation."""

    def __init__(
        self,
        config: Optional[GatewaySettings] = None,
        pool: Optional[Any] = None,
        service_factory: ServiceFactory = PostgresDNSService,
    ):
        super().__init__("dns_gateway", config or get_config())
        self.pool = pool or ConnectionPool(
            self.config.postgres_dsn,
            min_size=self.config.db_pool_min_size,
            max_size=self.config.db_pool_max_size,
            command_timeout=self.config.db_command_timeout,
        )

        identity = ProviderIdentity(provider=self.config.provider, apikey=self.config.api_key)
        self.dispatcher = OperationDispatcher(
            RequestValidator(identity),
            self.pool,
            service_factory,
            metrics=self.metrics,
        )
        self.gateway = RequestGateway(
            TokenAuthenticator(self.config.api_token),
            self.dispatcher,
            metrics=self.metrics,
        )

        @self.app.on_event("startup")
        async def _startup():
            await self.pool.start()
            self.logger.info(
                "DNS gateway started",
                host=self.config.host,
                port=self.config.port,
                provider=self.config.provider
            )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.pool.stop()

        self._setup_gateway_routes()

        self.app.state.gateway_service = self

    def _setup_gateway_routes(self):
        """Bind the gateway to every method and path."""

        async def gateway_entry(request: Request):
            incoming = IncomingRequest(
                method=request.method.upper(),
                path=request.url.path,
                headers=HeaderMap(request.headers),
                body=await request.body(),
            )
            result = await self.gateway.handle(incoming)
            return encode_response(result)

        # No method list: unknown verbs reach the gateway and get 401 or 404, never 405
        self.app.add_route("/{full_path:path}", gateway_entry, include_in_schema=False)


def create_app(
    config: Optional[GatewaySettings] = None,
    pool: Optional[Any] = None,
    service_factory: ServiceFactory = PostgresDNSService,
):
    """Create FastAPI application."""
    service = GatewayService(config=config, pool=pool, service_factory=service_factory)
    return service.app


def main():
    """Console entry point."""
    configure_logging("dns_gateway")
    logger = get_logger("dns_gateway.main")
    try:
        config = get_config()
    except SettingsError as e:
        logger.error("Invalid gateway configuration", errors=e.errors(include_url=False, include_context=False, include_input=False))
        sys.exit(1)
    GatewayService(config=config).run()


if __name__ == "__main__":
    main()

"""
Base service class for the DNS gateway.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import time

from shared.config import GatewaySettings
from shared.logging import (
    configure_logging,
    get_logger,
    set_request_id,
    clear_context,
    request_id_var,
)
from shared.metrics import get_metrics_collector
from shared.errors import ErrorResponse


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, service_name: str, config: GatewaySettings):
        self.service_name = service_name
        self.config = config
        self.logger = get_logger(f"{service_name}.service")
        self.metrics = get_metrics_collector(service_name)

        configure_logging(service_name, self.config.log_level)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_error_handlers()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        # Every path is owned by the gateway, so the docs routes stay off
        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description="Authenticated HTTP gateway for DNS domains and records",
            version="1.0.0",
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )

    def _setup_middleware(self):
        """Set up middleware."""

        @self.app.middleware("http")
        async def add_request_context(request: Request, call_next):
            request_id = set_request_id(request.headers.get("X-Request-ID"))
            request.state.request_id = request_id
            start_time = time.time()

            try:
                response = await call_next(request)

                duration = time.time() - start_time

                self.metrics.record_http_request(
                    method=request.method,
                    endpoint=request.url.path,
                    status_code=response.status_code,
                    duration=duration
                )

                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration * 1000, 2)
                )

                response.headers["X-Request-ID"] = request_id
                return response
            finally:
                clear_context()

    def _setup_error_handlers(self):
        """Set up error handlers."""

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            self.metrics.record_error("INTERNAL_ERROR")
            response = JSONResponse(
                status_code=500,
                content=ErrorResponse(error="Internal server error").model_dump()
            )
            # Runs outside the request middleware, whose context is already cleared
            request_id = getattr(request.state, "request_id", None) or request_id_var.get()
            if request_id:
                response.headers["X-Request-ID"] = request_id
            return response

    def run(self):
        """Run the service."""
        import uvicorn
        if self.config.metrics_port:
            self.metrics.start_metrics_server(self.config.metrics_port)
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )

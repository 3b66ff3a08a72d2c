"""
Request gateway: authenticate, parse, dispatch, encode.
"""

import json
from typing import Any, Dict, Optional

from shared.errors import GatewayException, MalformedInputError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..auth.token import TokenAuthenticator
from .dispatcher import OperationDispatcher
from .models import GatewayResponse, IncomingRequest


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_body(raw: bytes) -> Dict[str, Any]:
    """Decode a request body; an empty body is an empty mapping.

    Only strict UTF-8 JSON is accepted: no BOM, no NaN or Infinity, and
    nesting too deep for the decoder is malformed input, not a crash.
    """
    if not raw:
        return {}
    try:
        payload = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError):
        raise MalformedInputError()
    if not isinstance(payload, dict):
        raise MalformedInputError(details={"type": type(payload).__name__})
    return payload


class RequestGateway:
    """Runs one request through the pipeline and always returns one envelope."""

    def __init__(
        self,
        authenticator: TokenAuthenticator,
        dispatcher: OperationDispatcher,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.authenticator = authenticator
        self.dispatcher = dispatcher
        self.metrics = metrics
        self.logger = get_logger("dns_gateway.gateway")

    async def handle(self, request: IncomingRequest) -> GatewayResponse:
        try:
            self.authenticator.authenticate(request.headers)
            payload = parse_body(request.body)
            return await self.dispatcher.dispatch(request.method, request.path, payload)
        except GatewayException as exc:
            self.logger.warning(
                "Request rejected",
                code=exc.code,
                status_code=exc.status_code,
                message=exc.message,
                method=request.method,
                path=request.path
            )
            if self.metrics:
                self.metrics.record_error(exc.code)
            return GatewayResponse(exc.status_code, exc.to_response().model_dump())

"""ProtocolEngine — turns one JSON-RPC request into one JSON-RPC response.

``handle()`` is total: whatever goes wrong while computing a result is
reported as an error response, never raised to the transport.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from datetime_mcp.config import ServerSettings
from datetime_mcp.protocols.errors import INTERNAL_ERROR, InvalidArgumentError, MethodNotFoundError, ProtocolError
from datetime_mcp.protocols.mcp.models import (
    CallToolResult,
    InitializeResult,
    JsonRpcResponse,
    ListToolsResult,
    ServerInfo,
    ToolCallParams,
)
from datetime_mcp.tools.dispatcher import ToolDispatcher
from datetime_mcp.tools.registry import ToolRegistry
from datetime_mcp.utils.telemetry import get_tracer, record_error_code, request_span, tool_span

if TYPE_CHECKING:
    from collections.abc import Callable

    from datetime_mcp.protocols.mcp.models import JsonRpcRequest

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


def _call_params_error(exc: ValidationError) -> InvalidArgumentError:
    """Condense a pydantic error on ``tools/call`` params into one readable line."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "params"
    return InvalidArgumentError(location, first["msg"])


class ProtocolEngine:
    """Routes requests by method name to the registry or the dispatcher.

    Usage::

        engine = ProtocolEngine()
        response = engine.handle(JsonRpcRequest(method="tools/list", id=1))
        line = response.to_json()
    """

    def __init__(
        self,
        settings: ServerSettings | None = None,
        *,
        registry: ToolRegistry | None = None,
        dispatcher: ToolDispatcher | None = None,
    ) -> None:
        self._settings = settings or ServerSettings()
        self._registry = registry or ToolRegistry()
        self._dispatcher = dispatcher or ToolDispatcher(default_timezone=self._settings.default_timezone)
        self._routes: dict[str, Callable[[JsonRpcRequest], dict[str, Any]]] = {
            "initialize": self._initialize,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    @property
    def settings(self) -> ServerSettings:
        return self._settings

    def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Compute the response for *request*; never raises."""
        logger.debug("Received %s (id=%s)", request.method, request.id)
        with request_span(_tracer, request.method, request.id) as span:
            response = self._respond(request)
            if response.error is not None:
                record_error_code(span, response.error.code)
        return response

    def _respond(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            route = self._route(request)
            result = route(request)
        except ProtocolError as exc:
            logger.warning("Request %s failed: %s", request.method, exc)
            return JsonRpcResponse.failure(request.id, exc.code, str(exc))
        except Exception as exc:
            logger.exception("Error handling %s", request.method)
            return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, str(exc) or type(exc).__name__)
        return JsonRpcResponse.success(request.id, result)

    def _route(self, request: JsonRpcRequest) -> Callable[[JsonRpcRequest], dict[str, Any]]:
        route = self._routes.get(request.method)
        # tools/call without params is treated as an unknown method
        if route is None or (request.method == "tools/call" and request.params is None):
            raise MethodNotFoundError(request.method)
        return route

    # -- methods ------------------------------------------------------------

    def _initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        result = InitializeResult(
            protocol_version=self._settings.protocol_version,
            server_info=ServerInfo(name=self._settings.server_name, version=self._settings.server_version),
        )
        return result.model_dump(by_alias=True)

    def _list_tools(self, request: JsonRpcRequest) -> dict[str, Any]:
        return ListToolsResult(tools=self._registry.list_tools()).model_dump(by_alias=True)

    def _call_tool(self, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            params = ToolCallParams.model_validate(request.params)
        except ValidationError as exc:
            raise _call_params_error(exc) from exc

        with tool_span(_tracer, params.name):
            value = self._dispatcher.dispatch(params.name, params.arguments)

        return CallToolResult.from_value(value).model_dump(by_alias=True)

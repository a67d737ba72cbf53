"""
JSON-RPC 2.0 message handling for the MCP server
"""

import json
import logging
import traceback
from collections.abc import Callable, Coroutine
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
SERVER_ERROR = -32000

RequestHandler = Callable[[dict[str, Any], "RequestHandlerExtra"], Coroutine[Any, Any, Any]]
MessageSender = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]


class RequestHandlerExtra(NamedTuple):
    """Extra information passed to request handlers"""

    id: str | int | None  # Request ID
    method: str | None = None


class JSONRPCError(Exception):
    """Raised by handlers to answer with a specific JSON-RPC error"""

    def __init__(self, code: int, message: str, data: Any | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def format_result(req_id: str | int | None, result: Any) -> dict[str, Any]:
    """Format a successful JSON-RPC response"""
    try:
        json.dumps(result)
    except (TypeError, ValueError) as e:
        logger.error(f"Result for request ID {req_id} is not JSON serializable: {e}")
        result = f"[Non-Serializable Result: {type(result).__name__}] {str(result)[:500]}"

    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def format_error(
    req_id: str | int | None, code: int, message: str, data: Any | None = None
) -> dict[str, Any]:
    """Format a JSON-RPC error response"""
    error_obj: dict[str, Any] = {"code": code, "message": message}

    if data is not None:
        if isinstance(data, (str, int, float, bool, list, dict)):
            error_obj["data"] = data
        else:
            logger.warning(f"Error data contains non-standard type {type(data).__name__}")
            error_obj["data"] = f"Non-serializable data of type {type(data).__name__}: {str(data)[:100]}"

    return {"jsonrpc": "2.0", "id": req_id, "error": error_obj}


class MCPProtocol:
    """Parses JSON-RPC messages, routes them to handlers and formats replies"""

    def __init__(self):
        self._request_handlers: dict[str, RequestHandler] = {}
        self._send_message_impl: MessageSender | None = None
        logger.debug("MCPProtocol initialized")

    def set_request_handler(self, method: str, handler: RequestHandler) -> None:
        """Register a handler for a specific request or notification method"""
        self._request_handlers[method] = handler
        logger.debug(f"Registered request handler for method: {method}")

    @property
    def methods(self) -> list[str]:
        return list(self._request_handlers)

    async def handle_message(self, message_data: Any) -> dict[str, Any] | None:
        """
        Process an incoming message, route it to its handler and format the reply.

        Args:
            message_data: The parsed JSON object from the incoming message

        Returns:
            The JSON-RPC response to send, or None for notifications
        """
        if not isinstance(message_data, dict) or message_data.get("jsonrpc") != "2.0":
            logger.warning(f"Invalid JSON-RPC message: {str(message_data)[:150]}")
            return format_error(None, INVALID_REQUEST, "Invalid Request", "Invalid JSON-RPC version")

        request_id = message_data.get("id")
        method = message_data.get("method")
        params = message_data.get("params") or {}
        is_notification = "id" not in message_data

        if not method:
            logger.warning(f"Missing method in message: {str(message_data)[:150]}")
            return format_error(
                request_id, INVALID_REQUEST, "Invalid Request", "'method' parameter is missing"
            )

        handler = self._request_handlers.get(method)
        if handler is None:
            if is_notification:
                logger.debug(f"Ignoring unhandled notification '{method}'")
                return None
            logger.warning(f"No handler found for method '{method}' (ID: {request_id})")
            return format_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        if not isinstance(params, dict):
            return format_error(request_id, INVALID_PARAMS, "Invalid params", "'params' must be an object")

        try:
            logger.debug(f"Calling handler for method '{method}' (ID: {request_id})")
            result = await handler(params, RequestHandlerExtra(id=request_id, method=method))
        except JSONRPCError as e:
            logger.info(f"Handler for '{method}' rejected request {request_id}: {e.message}")
            if is_notification:
                return None
            return format_error(request_id, e.code, e.message, e.data)
        except Exception as e:
            detailed_error = (
                f"Server error executing method '{method}': {type(e).__name__}: {e}"
            )
            logger.error(
                f"Exception during handler execution for '{method}' (ID: {request_id}): {detailed_error}",
                exc_info=True,
            )
            if is_notification:
                return None
            # Traceback only in debug mode
            error_data = traceback.format_exc() if logger.isEnabledFor(logging.DEBUG) else None
            return format_error(request_id, SERVER_ERROR, detailed_error, error_data)

        if is_notification:
            logger.debug(f"Notification for method '{method}' processed")
            return None

        return format_result(request_id, result)

    def set_send_implementation(self, sender: MessageSender) -> None:
        """Set the coroutine used to push messages out via the transport"""
        self._send_message_impl = sender
        logger.info("Send implementation configured for MCPProtocol")

    async def send_notification(self, method: str, params: dict[str, Any] | None = None) -> None:
        """Build and send a JSON-RPC notification via the configured sender"""
        if self._send_message_impl is None:
            logger.error("Cannot send notification: No send implementation configured")
            return

        message = {"jsonrpc": "2.0", "method": method, "params": params or {}}

        try:
            logger.debug(f"Sending notification: Method={method}")
            await self._send_message_impl(message)
        except Exception as e:
            logger.error(f"Failed to send notification '{method}': {e}", exc_info=True)

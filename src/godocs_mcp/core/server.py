"""
MCP server wiring the protocol, the tool registry and a transport together
"""

import inspect
import json
import logging
from typing import Any

from pydantic import BaseModel

from .protocol import INVALID_PARAMS, JSONRPCError, MCPProtocol, RequestHandlerExtra
from .registry import ToolRegistry
from .transport import StdioTransport, Transport

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


def render_tool_result(result: Any) -> tuple[str, bool]:
    """
    Turn a tool's return value into MCP text content.

    Returns:
        (text, is_error). Pydantic models and dicts are rendered as JSON; a
        model whose `ok` is False, or a dict carrying "error", is an error.
    """
    if isinstance(result, BaseModel):
        payload = result.to_payload() if hasattr(result, "to_payload") else result.model_dump()
        return json.dumps(payload, indent=2), not getattr(result, "ok", True)
    if isinstance(result, dict):
        return json.dumps(result, indent=2, default=str), "error" in result
    if isinstance(result, str):
        return result, False
    return str(result), False


class MCPServer:
    """
    Core MCP server: protocol handling, tool registry and transport connection.
    """

    def __init__(
        self,
        name: str = "godocs-mcp",
        version: str = "0.1.0",
        description: str | None = None,
    ):
        self.name = name
        self.version = version
        self.description = description
        self.protocol = MCPProtocol()
        self.tool_registry = ToolRegistry()
        self.transport: Transport | None = None
        self.initialized = False

        logger.info(f"MCPServer '{name}' v{version} initialized")
        self._register_default_handlers()

    def _register_default_handlers(self) -> None:
        handlers = {
            "initialize": self._handle_initialize,
            "notifications/initialized": self._handle_initialized,
            "ping": self._handle_ping,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
        }

        for method, handler in handlers.items():
            self.protocol.set_request_handler(method, handler)

        logger.debug(f"Registered {len(handlers)} default MCP handlers")

    def tool(self):
        """Get tool decorator from registry"""
        return self.tool_registry.tool()

    async def run(self, transport: Transport | None = None) -> None:
        """Serve messages from the transport until it closes"""
        if transport is None:
            transport = StdioTransport()

        await self.connect(transport)
        logger.info(f"Serving {len(self.tool_registry.list_tools())} tools")

        try:
            while True:
                try:
                    message = await transport.receive()
                    if message is None:
                        logger.info("Transport closed, shutting down")
                        break

                    response = await self.protocol.handle_message(message)
                    if response:
                        await transport.send(response)

                except Exception as e:
                    logger.error(f"Error in message processing loop: {e}", exc_info=True)
        finally:
            await transport.close()

    async def connect(self, transport: Transport) -> None:
        """Connect the server to a transport"""
        if not transport:
            raise ValueError("Cannot connect to null transport")

        if self.transport:
            logger.warning("MCPServer already connected, overwriting")

        self.transport = transport
        logger.info(f"Connecting to transport: {type(transport).__name__}")

        transport.set_message_handler(self.protocol.handle_message)
        self.protocol.set_send_implementation(transport.send)

        await transport.connect()
        logger.info("MCPServer connected to transport")

    async def _handle_initialize(
        self, params: dict[str, Any], extra: RequestHandlerExtra
    ) -> dict[str, Any]:
        client_info = params.get("clientInfo", {})
        logger.info(
            f"Initialize request from {client_info.get('name', 'Unknown Client')} "
            f"v{client_info.get('version', 'N/A')} (ID: {extra.id})"
        )

        self.initialized = True

        server_info = {"name": self.name, "version": self.version}
        result: dict[str, Any] = {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": server_info,
            "capabilities": {"tools": {"listChanged": False}},
        }
        if self.description:
            result["instructions"] = self.description
        return result

    async def _handle_initialized(
        self, params: dict[str, Any], extra: RequestHandlerExtra
    ) -> None:
        logger.debug("Client finished initialization")

    async def _handle_ping(self, params: dict[str, Any], extra: RequestHandlerExtra) -> dict[str, Any]:
        return {}

    async def _handle_list_tools(
        self, params: dict[str, Any], extra: RequestHandlerExtra
    ) -> dict[str, Any]:
        logger.info(f"Tools list request (ID: {extra.id})")

        tools = [
            {
                "name": schema["function"]["name"],
                "description": schema["function"]["description"],
                "inputSchema": schema["function"]["parameters"],
            }
            for schema in self.tool_registry.tools
        ]

        logger.debug(f"Returning {len(tools)} tools")
        return {"tools": tools}

    async def _handle_call_tool(
        self, params: dict[str, Any], extra: RequestHandlerExtra
    ) -> dict[str, Any]:
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        if not tool_name:
            raise JSONRPCError(INVALID_PARAMS, "Missing required parameter: 'name'")
        if not isinstance(arguments, dict):
            raise JSONRPCError(INVALID_PARAMS, "'arguments' must be an object")

        logger.info(f"Tool call: {tool_name} (ID: {extra.id})")

        tool_func = self.tool_registry.get_tool(tool_name)
        if tool_func is None:
            return _text_content(f"Tool not found: {tool_name}", is_error=True)

        try:
            inspect.signature(tool_func).bind(**arguments)
        except TypeError as e:
            logger.warning(f"Bad arguments for '{tool_name}': {e}")
            return _text_content(f"Invalid arguments for {tool_name}: {e}", is_error=True)

        try:
            result = await self.tool_registry.call(tool_name, arguments)
        except Exception as e:
            logger.error(f"Tool '{tool_name}' execution failed: {e}", exc_info=True)
            return _text_content(f"Tool execution error: {e}", is_error=True)

        text, is_error = render_tool_result(result)
        logger.info(f"Tool '{tool_name}' finished (isError={is_error})")
        return _text_content(text, is_error=is_error)


def _text_content(text: str, is_error: bool) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}

"""Core MCP components: protocol, registry, server and transports"""

from .protocol import JSONRPCError, MCPProtocol, RequestHandlerExtra
from .registry import ToolRegistry
from .server import MCPServer
from .transport import SSETransport, StdioTransport, Transport

__all__ = [
    "MCPServer",
    "ToolRegistry",
    "MCPProtocol",
    "JSONRPCError",
    "RequestHandlerExtra",
    "Transport",
    "StdioTransport",
    "SSETransport",
]

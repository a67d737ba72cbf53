"""
godocs-mcp - Go package documentation from pkg.go.dev for MCP clients and agents
"""

__version__ = "1.0.0"

from .core.server import MCPServer
from .godoc.models import DocError, DocOutcome, DocResult, FunctionInfo, TypeInfo
from .tools.decorators import tool
from .tools.go_docs import fetch_go_doc

__all__ = [
    "__version__",
    "MCPServer",
    "tool",
    "fetch_go_doc",
    "DocResult",
    "DocError",
    "DocOutcome",
    "FunctionInfo",
    "TypeInfo",
]

"""
Entry point for the Go Documentation MCP Server
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from typing import Any

import uvicorn
from fastapi import FastAPI

from . import __version__, tools
from .agents import AGENT_DESCRIPTION, AGENT_KEY, AGENT_NAME, create_go_docs_agent
from .config import Settings, load_settings
from .core.server import MCPServer
from .core.transport import SSETransport, StdioTransport
from .utils.logging import setup_logging

SERVER_DESCRIPTION = (
    "Real-time Go documentation from pkg.go.dev - fetch package docs, function "
    "signatures, type definitions, and Effective Go best practices."
)


def create_server(settings: Settings | None = None) -> MCPServer:
    """Build the MCP server with fetch_go_doc and the documentation agent"""
    settings = settings or load_settings()
    server = MCPServer(
        name=settings.server_name,
        version=__version__,
        description=SERVER_DESCRIPTION,
    )

    server.tool_registry.auto_discover_tools(tools)
    server.tool_registry.register_agent(
        AGENT_KEY,
        lambda: create_go_docs_agent(settings),
        description=f"Ask the {AGENT_NAME}. {AGENT_DESCRIPTION}",
    )
    return server


async def run_stdio_server(settings: Settings | None = None) -> None:
    """Run MCP server with stdio transport"""
    settings = settings or load_settings()
    setup_logging(level=settings.log_level)

    server = create_server(settings)
    await server.run(StdioTransport())


def create_http_app(server: MCPServer) -> FastAPI:
    app = FastAPI(title=server.name, version=server.version)

    @app.get("/")
    async def root() -> dict[str, Any]:
        return {
            "message": server.name,
            "version": server.version,
            "transport": "HTTP/SSE",
            "tools": server.tool_registry.list_tools(),
            "endpoints": {
                "mcp": "POST /mcp (or POST /) - Send MCP messages",
                "sse": "GET /sse - Server-sent events stream",
                "ping": "GET /ping - Health check",
            },
        }

    return app


async def run_http_server(settings: Settings | None = None) -> None:
    """Run MCP server with HTTP/SSE transport"""
    settings = settings or load_settings()
    setup_logging(level=settings.log_level)

    server = create_server(settings)
    app = create_http_app(server)
    transport = SSETransport(settings.host, settings.port, app=app)
    await server.connect(transport)

    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    try:
        await uvicorn.Server(config).serve()
    finally:
        await transport.close()


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="godocs-mcp",
        description="Go Documentation MCP Server - live docs from pkg.go.dev",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  GODOCS_MCP_TRANSPORT     Transport (stdio or http)
  GODOCS_MCP_HOST          Host for HTTP transport
  GODOCS_MCP_PORT          Port for HTTP transport
  GODOCS_MCP_LOG_LEVEL     Logging level (DEBUG, INFO, WARNING, ERROR)
  GODOCS_MCP_SERVER_NAME   Server name reported to clients
  GODOCS_DOC_HOST          Documentation host (default https://pkg.go.dev)
  OPENAI_API_KEY           API key for the ask_goDocsAgent tool

Examples:
  # Run with stdio (for editor integration)
  godocs-mcp

  # Run HTTP server
  godocs-mcp --transport http --port 8080
""",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default=settings.transport,
        help="Transport method (default: stdio, env: GODOCS_MCP_TRANSPORT)",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Host for HTTP transport (default: localhost, env: GODOCS_MCP_HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port for HTTP transport (default: 8000, env: GODOCS_MCP_PORT)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level,
        help="Logging level (default: INFO, env: GODOCS_MCP_LOG_LEVEL)",
    )
    parser.add_argument(
        "--server-name",
        default=settings.server_name,
        help="Server name reported to clients (env: GODOCS_MCP_SERVER_NAME)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def cli_main(argv: list[str] | None = None) -> None:
    """CLI entry point"""
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)
    settings = replace(
        settings,
        transport=args.transport,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        server_name=args.server_name,
    )

    try:
        if settings.transport == "stdio":
            asyncio.run(run_stdio_server(settings))
        else:
            asyncio.run(run_http_server(settings))
    except KeyboardInterrupt:
        print("Server stopped by user", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Server error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli_main()

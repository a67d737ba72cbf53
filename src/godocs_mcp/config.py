"""
Runtime configuration for godocs-mcp, read from the environment
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DOC_HOST = "https://pkg.go.dev"
DEFAULT_USER_AGENT = "Go-Docs-MCP/1.0"
DEFAULT_SERVER_NAME = "Go Documentation MCP Server"


@dataclass(frozen=True)
class Settings:
    """Settings shared by the fetcher, the agent and the server"""

    doc_host: str = DEFAULT_DOC_HOST
    fetch_timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    openai_api_key: str | None = None
    agent_model: str = "gpt-5-nano"
    agent_base_url: str | None = None
    transport: str = "stdio"
    host: str = "localhost"
    port: int = 8000
    log_level: str = "INFO"
    server_name: str = DEFAULT_SERVER_NAME


def _env_number(name: str, default, cast):
    """Read a numeric variable, keeping the default when it does not parse"""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a valid {cast.__name__}, using {default}")
        return default


def load_settings(use_dotenv: bool = True) -> Settings:
    """
    Build Settings from GODOCS_* environment variables.

    Args:
        use_dotenv: Load a local .env file first (existing variables win)
    """
    if use_dotenv:
        load_dotenv()

    return Settings(
        doc_host=os.getenv("GODOCS_DOC_HOST", DEFAULT_DOC_HOST).rstrip("/"),
        fetch_timeout=_env_number("GODOCS_FETCH_TIMEOUT", 10.0, float),
        user_agent=os.getenv("GODOCS_USER_AGENT", DEFAULT_USER_AGENT),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        agent_model=os.getenv("GODOCS_AGENT_MODEL", "gpt-5-nano"),
        agent_base_url=os.getenv("GODOCS_AGENT_BASE_URL") or None,
        transport=os.getenv("GODOCS_MCP_TRANSPORT", "stdio"),
        host=os.getenv("GODOCS_MCP_HOST", "localhost"),
        port=_env_number("GODOCS_MCP_PORT", 8000, int),
        log_level=os.getenv("GODOCS_MCP_LOG_LEVEL", "INFO").upper(),
        server_name=os.getenv("GODOCS_MCP_SERVER_NAME", DEFAULT_SERVER_NAME),
    )

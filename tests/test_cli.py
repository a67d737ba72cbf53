"""
Tests for CLI functionality
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from rich.console import Console
from typer.testing import CliRunner

from godocs_mcp import __version__
from godocs_mcp.cli import app
from godocs_mcp.config import Settings
from godocs_mcp.godoc.models import DocError, DocResult, FunctionInfo
from godocs_mcp.server import build_parser, cli_main, create_http_app, create_server, run_stdio_server

runner = CliRunner()

FMT_RESULT = DocResult(
    title="fmt package - fmt - Go Packages",
    url="https://pkg.go.dev/fmt",
    synopsis="Package fmt implements formatted I/O.",
    description="Package fmt implements formatted I/O.",
    exported=["func Printf(format string, a ...any) (n int, err error)"],
    functions=[
        FunctionInfo(
            name="Printf",
            signature="func Printf(format string, a ...any) (n int, err error)",
            description="Printf formats according to a format specifier.",
        )
    ],
    note="Live data from pkg.go.dev",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GODOCS_MCP_TRANSPORT",
        "GODOCS_MCP_HOST",
        "GODOCS_MCP_PORT",
        "GODOCS_MCP_LOG_LEVEL",
        "GODOCS_MCP_SERVER_NAME",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    with (
        patch("godocs_mcp.cli.setup_rich_logging"),
        patch("godocs_mcp.cli.console", Console(width=200)),
    ):
        yield


def test_doc_command_json():
    with patch("godocs_mcp.cli.fetch_go_doc", AsyncMock(return_value=FMT_RESULT)) as mock_fetch:
        result = runner.invoke(app, ["doc", "fmt", "--section", "functions", "--json"])

    assert result.exit_code == 0
    mock_fetch.assert_awaited_once_with("fmt", "functions")
    assert '"title": "fmt package - fmt - Go Packages"' in result.output


def test_doc_command_table():
    with patch("godocs_mcp.cli.fetch_go_doc", AsyncMock(return_value=FMT_RESULT)):
        result = runner.invoke(app, ["doc", "fmt"])

    assert result.exit_code == 0
    assert "Printf" in result.output
    assert "Live data from pkg.go.dev" in result.output


def test_doc_command_error_exit_code():
    error = DocError(error="Package 'nosuch' not found on pkg.go.dev", suggestion="Check the package path.")

    with patch("godocs_mcp.cli.fetch_go_doc", AsyncMock(return_value=error)):
        result = runner.invoke(app, ["doc", "nosuch"])

    assert result.exit_code == 1
    assert "not found on pkg.go.dev" in result.output
    assert "Check the package path." in result.output


def test_chat_requires_message():
    result = runner.invoke(app, ["chat"])

    assert result.exit_code == 1
    assert "Provide a message" in result.output


def test_chat_requires_api_key():
    with patch("godocs_mcp.cli.load_settings", return_value=Settings()):
        result = runner.invoke(app, ["chat", "What is fmt?"])

    assert result.exit_code == 1
    assert "OPENAI_API_KEY" in result.output


def make_chat_agent(**kwargs):
    agent = MagicMock()
    agent.process_message = AsyncMock(**kwargs)
    agent.close = AsyncMock()
    return agent


def test_chat_single_message():
    agent = make_chat_agent(return_value="fmt formats things.")

    with patch("godocs_mcp.cli.create_go_docs_agent", return_value=agent):
        result = runner.invoke(app, ["chat", "What is fmt?"])

    assert result.exit_code == 0
    agent.process_message.assert_awaited_once_with("What is fmt?")
    agent.close.assert_awaited_once()
    assert "fmt formats things." in result.output


def test_chat_interactive_turns_share_one_event_loop():
    loops = []

    async def answer(message):
        loops.append(asyncio.get_running_loop())
        return f"answer to {message}"

    agent = make_chat_agent(side_effect=answer)

    with (
        patch("godocs_mcp.cli.create_go_docs_agent", return_value=agent),
        patch("godocs_mcp.cli.Prompt.ask", side_effect=["What is fmt?", "And io?", "exit"]),
    ):
        result = runner.invoke(app, ["chat", "--interactive"])

    assert result.exit_code == 0
    assert agent.process_message.await_count == 2
    assert len(loops) == 2
    assert loops[0] is loops[1]
    agent.close.assert_awaited_once()
    assert "answer to And io?" in result.output


def test_chat_agent_failure_is_reported():
    agent = make_chat_agent(side_effect=RuntimeError("rate limited"))

    with patch("godocs_mcp.cli.create_go_docs_agent", return_value=agent):
        result = runner.invoke(app, ["chat", "What is fmt?"])

    assert result.exit_code == 0
    assert "rate limited" in result.output
    agent.close.assert_awaited_once()


def test_tools_command():
    result = runner.invoke(app, ["tools"])

    assert result.exit_code == 0
    assert "fetch_go_doc" in result.output
    assert "ask_goDocsAgent" in result.output


def test_build_parser_defaults():
    args = build_parser(Settings()).parse_args([])

    assert args.transport == "stdio"
    assert args.host == "localhost"
    assert args.port == 8000
    assert args.log_level == "INFO"
    assert args.server_name == "Go Documentation MCP Server"


def test_build_parser_uses_settings_as_defaults():
    args = build_parser(Settings(transport="http", port=9100)).parse_args(["--host", "0.0.0.0"])

    assert args.transport == "http"
    assert args.port == 9100
    assert args.host == "0.0.0.0"


def test_build_parser_version(capsys):
    with pytest.raises(SystemExit):
        build_parser(Settings()).parse_args(["--version"])

    assert __version__ in capsys.readouterr().out


def test_cli_main_stdio():
    """Test CLI main function with stdio transport"""
    with patch("godocs_mcp.server.run_stdio_server", AsyncMock()) as mock_run:
        cli_main([])

    settings = mock_run.call_args[0][0]
    assert settings.transport == "stdio"


def test_cli_main_http():
    """Test CLI main function with HTTP transport"""
    with patch("godocs_mcp.server.run_http_server", AsyncMock()) as mock_run:
        cli_main(["--transport", "http", "--host", "0.0.0.0", "--port", "9000", "--log-level", "DEBUG"])

    settings = mock_run.call_args[0][0]
    assert (settings.host, settings.port, settings.log_level) == ("0.0.0.0", 9000, "DEBUG")


def test_cli_main_env_defaults(monkeypatch):
    monkeypatch.setenv("GODOCS_MCP_TRANSPORT", "http")
    monkeypatch.setenv("GODOCS_MCP_PORT", "8123")

    with patch("godocs_mcp.server.run_http_server", AsyncMock()) as mock_run:
        cli_main([])

    assert mock_run.call_args[0][0].port == 8123


def test_cli_main_keyboard_interrupt():
    with patch("godocs_mcp.server.run_stdio_server", AsyncMock(side_effect=KeyboardInterrupt)):
        with pytest.raises(SystemExit) as exc_info:
            cli_main([])

    assert exc_info.value.code == 0


def test_cli_main_server_error(capsys):
    with patch("godocs_mcp.server.run_stdio_server", AsyncMock(side_effect=RuntimeError("boom"))):
        with pytest.raises(SystemExit) as exc_info:
            cli_main([])

    assert exc_info.value.code == 1
    assert "Server error: boom" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_run_stdio_server():
    """Test stdio server run function"""
    with (
        patch("godocs_mcp.server.create_server") as mock_create,
        patch("godocs_mcp.server.StdioTransport") as mock_transport_class,
        patch("godocs_mcp.server.setup_logging") as mock_logging,
    ):
        mock_server = MagicMock()
        mock_server.run = AsyncMock()
        mock_create.return_value = mock_server

        await run_stdio_server(Settings(log_level="DEBUG"))

    mock_logging.assert_called_once_with(level="DEBUG")
    mock_server.run.assert_awaited_once_with(mock_transport_class.return_value)


@pytest.mark.asyncio
async def test_http_app_info_endpoint():
    app = create_http_app(create_server(Settings()))

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/")

    body = response.json()
    assert body["message"] == "Go Documentation MCP Server"
    assert body["version"] == __version__
    assert body["tools"] == ["fetch_go_doc", "ask_goDocsAgent"]
    assert json.dumps(body["endpoints"])

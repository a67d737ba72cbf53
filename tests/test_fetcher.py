"""
Tests for page retrieval and error mapping
"""

import httpx
import pytest

from godocs_mcp.config import Settings
from godocs_mcp.errors import DocFetchError, PackageNotFoundError
from godocs_mcp.godoc.fetcher import build_doc_url, fetch_page, request_headers, search_url
from godocs_mcp.godoc.models import DocError, normalize_request
from godocs_mcp.tools.go_docs import lookup


def test_build_doc_url():
    assert build_doc_url("net/http") == "https://pkg.go.dev/net/http"
    assert build_doc_url("fmt", "http://localhost:8080") == "http://localhost:8080/fmt"


def test_search_url_encodes_package():
    assert search_url("notapkg") == "https://pkg.go.dev/search?q=notapkg"
    assert search_url("net/htp") == "https://pkg.go.dev/search?q=net%2Fhtp"


def test_request_headers():
    headers = request_headers(Settings(user_agent="test-agent/2.0"))
    assert headers == {"User-Agent": "test-agent/2.0", "Accept": "text/html"}


@pytest.mark.asyncio
async def test_fetch_page_success(fmt_page, mock_http_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=fmt_page)

    async with mock_http_client(handler) as client:
        fetched = await fetch_page("fmt", Settings(), client=client)

    assert fetched.url == "https://pkg.go.dev/fmt"
    assert fetched.soup.select_one("title").get_text() == "fmt package - fmt - Go Packages"
    assert len(seen) == 1
    assert str(seen[0].url) == "https://pkg.go.dev/fmt"
    assert seen[0].headers["User-Agent"] == "Go-Docs-MCP/1.0"
    assert seen[0].headers["Accept"] == "text/html"


@pytest.mark.asyncio
async def test_fetch_page_uses_configured_host(fmt_page, mock_http_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text=fmt_page)

    async with mock_http_client(handler) as client:
        await fetch_page("net/http", Settings(doc_host="http://docs.internal"), client=client)

    assert seen == ["http://docs.internal/net/http"]


@pytest.mark.asyncio
async def test_fetch_page_404(mock_http_client):
    async with mock_http_client(lambda request: httpx.Response(404, text="Not Found")) as client:
        with pytest.raises(PackageNotFoundError) as exc_info:
            await fetch_page("notapkg", Settings(), client=client)

    error = exc_info.value
    assert str(error) == "Package 'notapkg' not found on pkg.go.dev"
    assert "https://pkg.go.dev/search?q=notapkg" in error.suggestion
    assert "'fmt'" in error.suggestion


@pytest.mark.asyncio
async def test_fetch_page_not_found_page(not_found_page, mock_http_client):
    async with mock_http_client(lambda request: httpx.Response(200, text=not_found_page)) as client:
        with pytest.raises(PackageNotFoundError) as exc_info:
            await fetch_page("nosuch", Settings(), client=client)

    assert "search?q=nosuch" in exc_info.value.suggestion


@pytest.mark.asyncio
async def test_fetch_page_server_error(mock_http_client):
    async with mock_http_client(lambda request: httpx.Response(500, text="boom")) as client:
        with pytest.raises(DocFetchError) as exc_info:
            await fetch_page("fmt", Settings(), client=client)

    error = exc_info.value
    assert not isinstance(error, PackageNotFoundError)
    assert str(error).startswith("Failed to fetch 'fmt': ")
    assert "500" in str(error)
    assert "internet connection" in error.suggestion


@pytest.mark.asyncio
async def test_fetch_page_timeout(mock_http_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with mock_http_client(handler) as client:
        with pytest.raises(DocFetchError, match="Failed to fetch 'fmt': timed out"):
            await fetch_page("fmt", Settings(), client=client)


@pytest.mark.asyncio
@pytest.mark.parametrize("package", ["net\nhttp", "fmt\x00x", "a" * 70000])
async def test_unbuildable_url_becomes_doc_error(fmt_page, mock_http_client, package):
    async with mock_http_client(lambda request: httpx.Response(200, text=fmt_page)) as client:
        with pytest.raises(DocFetchError) as exc_info:
            await fetch_page(package, Settings(), client=client)

        outcome = await lookup(normalize_request(package), Settings(), client=client)

    assert not isinstance(exc_info.value, PackageNotFoundError)
    assert isinstance(outcome, DocError)
    assert outcome.error.startswith("Failed to fetch '")
    assert "internet connection" in outcome.suggestion


@pytest.mark.asyncio
async def test_fetch_page_connection_error(mock_http_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_http_client(handler) as client:
        with pytest.raises(DocFetchError, match="connection refused"):
            await fetch_page("fmt", Settings(), client=client)

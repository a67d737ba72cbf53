"""
The fetch_go_doc tool: live Go package documentation from pkg.go.dev
"""

import logging

import httpx

from ..config import Settings, load_settings
from ..errors import DocFetchError
from ..godoc.effective_go import effective_go_result
from ..godoc.extraction import extract_doc
from ..godoc.fetcher import fetch_page
from ..godoc.models import DocError, DocOutcome, DocRequest, Section, normalize_request
from .decorators import tool

logger = logging.getLogger(__name__)


async def lookup(
    request: DocRequest,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> DocOutcome:
    """Fetch and summarize the page for an already-normalized request"""
    try:
        page = await fetch_page(request.package, settings, client=client)
    except DocFetchError as e:
        return DocError(error=str(e), suggestion=e.suggestion)

    return extract_doc(page.soup, request.package, page.url, request.section)


@tool(name="fetch_go_doc")
async def fetch_go_doc(package: str, section: Section = "auto") -> DocOutcome:
    """
    Fetches real-time official Go documentation from pkg.go.dev.

    Use this to get package docs, function signatures, type definitions, and
    examples. Supports standard library packages like 'fmt', 'net/http',
    'context', 'encoding/json', and third-party packages.

    Args:
        package: Go package path, e.g. 'fmt', 'net/http', 'context', 'encoding/json'
        section: Section of documentation to fetch. Use 'auto' (default) to
            intelligently detect based on the query context
    """
    logger.info(f"fetch_go_doc: package={package!r} section={section!r}")

    if section == "effective-go":
        return effective_go_result()

    request = normalize_request(package, section)
    if isinstance(request, DocError):
        logger.info(f"Rejected request: {request.error}")
        return request

    outcome = await lookup(request, load_settings())
    if isinstance(outcome, DocError):
        logger.info(f"fetch_go_doc failed for '{request.package}': {outcome.error}")
    else:
        logger.info(
            f"fetch_go_doc returned '{outcome.title}' with {len(outcome.exported)} exported names"
        )
    return outcome

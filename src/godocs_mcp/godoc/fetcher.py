"""
Retrieval of package pages from the documentation host.

This is the only module that performs network I/O; failures surface here as
DocFetchError / PackageNotFoundError.
"""

import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from ..config import DEFAULT_DOC_HOST, Settings
from ..errors import DocFetchError, PackageNotFoundError
from .extraction import is_not_found_page, parse_html

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    """A successfully retrieved package page"""

    url: str
    soup: BeautifulSoup


def build_doc_url(package: str, host: str = DEFAULT_DOC_HOST) -> str:
    return f"{host}/{package}"


def search_url(package: str, host: str = DEFAULT_DOC_HOST) -> str:
    return f"{host}/search?q={quote(package, safe='')}"


def request_headers(settings: Settings) -> dict[str, str]:
    return {"User-Agent": settings.user_agent, "Accept": "text/html"}


async def fetch_page(
    package: str,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> FetchedPage:
    """
    Fetch and parse the documentation page for a cleaned package path.

    Args:
        package: Package path, already cleaned by normalize_request()
        settings: Host, timeout and User-Agent (defaults when omitted)
        client: Pre-built client to use instead of a one-off client

    Raises:
        PackageNotFoundError: The host answered 404 or served a not-found page
        DocFetchError: Timeout, connection failure or any other HTTP error
    """
    settings = settings or Settings()
    url = build_doc_url(package, settings.doc_host)
    logger.info(f"Fetching documentation for '{package}' from {url}")

    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=settings.fetch_timeout,
                follow_redirects=True,
                headers=request_headers(settings),
            ) as one_off:
                response = await one_off.get(url)
        else:
            response = await client.get(
                url, headers=request_headers(settings), timeout=settings.fetch_timeout
            )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            logger.info(f"Package '{package}' not found (HTTP 404)")
            raise PackageNotFoundError(package, search_url(package, settings.doc_host)) from e
        logger.warning(f"HTTP {e.response.status_code} fetching '{package}'")
        raise DocFetchError(package, str(e)) from e
    except httpx.InvalidURL as e:
        # Not an HTTPError: raised for control characters or over-long paths
        logger.info(f"Cannot build a request URL for '{package}': {e}")
        raise DocFetchError(package, str(e)) from e
    except httpx.TimeoutException as e:
        logger.warning(f"Timeout fetching '{package}' after {settings.fetch_timeout}s")
        raise DocFetchError(package, str(e) or "request timed out") from e
    except httpx.HTTPError as e:
        logger.warning(f"Request error fetching '{package}': {e}")
        raise DocFetchError(package, str(e) or type(e).__name__) from e

    soup = parse_html(response.text)
    if is_not_found_page(soup):
        logger.info(f"Package '{package}' not found (not-found page)")
        raise PackageNotFoundError(package, search_url(package, settings.doc_host))

    logger.debug(f"Fetched {len(response.text)} bytes for '{package}'")
    return FetchedPage(url=url, soup=soup)

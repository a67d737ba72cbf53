"""
HTML extraction for pkg.go.dev package pages.

Every field is read through an ordered list of strategies, most specific
selector first. A strategy returns None (or empty text) when its hook is
missing from the page and the next one is tried. Fields no strategy can
fill get a fixed placeholder, so extraction never fails on unexpected markup.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from bs4 import BeautifulSoup, Tag

from .models import DocResult, FunctionInfo, Section, TypeInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

Strategy = Callable[[BeautifulSoup], str | None]

NO_SYNOPSIS = "No synopsis available"
NO_DESCRIPTION = "No description available"
LIVE_NOTE = "Live data from pkg.go.dev"
ELLIPSIS = "..."

MAX_EXPORTED = 50
MAX_DESCRIPTION = 800
OVERVIEW_EXCERPT = 500
MAX_MEMBER_DESCRIPTION = 200
MAX_DEFINITION = 300
OVERVIEW_MEMBER_LIMIT = 15

EXPORTED_SELECTOR = ".Documentation-index a, nav.Documentation-index a, [class*='Index'] a"
FUNCTION_BLOCK_SELECTOR = ".Documentation-function, [data-kind='function'], .Documentation h4"
FUNCTION_HEADER_SELECTOR = "h4, .Documentation-functionHeader"
FUNCTION_BODY_SELECTOR = ".Documentation-functionBody p"
TYPE_BLOCK_SELECTOR = ".Documentation-type, [data-kind='type']"
TYPE_HEADER_SELECTOR = "h4, .Documentation-typeHeader"
INDEX_ANCHOR_SELECTOR = 'a[href^="#"]'
NOT_FOUND_SELECTOR = ".NotFound, .Error"

_WHITESPACE = re.compile(r"\s+")
# Receiver and type parameters are skipped: "func (b *Buffer) Write(" -> "Write"
_FUNC_NAME = re.compile(r"^func\s+(?:\([^)]*\)\s*)?([^\s(\[]+)")
_FUNC_KEYWORD = re.compile(r"^func\s+")
_TYPE_KEYWORD = re.compile(r"^type\s+")


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def collapse(text: str) -> str:
    """Collapse runs of whitespace into single spaces"""
    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, limit: int, marker: str = ELLIPSIS) -> str:
    """
    Cut text to at most `limit` characters.

    The marker is appended only when something was cut, and counts toward
    the limit.
    """
    if len(text) <= limit:
        return text
    return text[: limit - len(marker)].rstrip() + marker


def element_text(element: Tag | None) -> str:
    if element is None:
        return ""
    return collapse(element.get_text())


def selector_text(selector: str, limit: int | None = None) -> Strategy:
    """Strategy returning the text of the first element matching `selector`"""

    def strategy(soup: BeautifulSoup) -> str | None:
        text = element_text(soup.select_one(selector))
        if limit is not None:
            text = text[:limit]
        return text or None

    strategy.__name__ = f"selector_text({selector!r})"
    return strategy


def first_match(soup: BeautifulSoup, strategies: Iterable[Strategy]) -> str | None:
    """Run strategies in order; first non-empty result wins"""
    for strategy in strategies:
        value = strategy(soup)
        if value:
            logger.debug(f"Matched {strategy.__name__}")
            return value
    return None


SYNOPSIS_STRATEGIES: tuple[Strategy, ...] = (
    selector_text(".Documentation-overview .Documentation-synopsis"),
    selector_text(".Documentation-synopsis"),
    selector_text('[data-kind="doc"] p'),
    selector_text(".go-Main-content p"),
)

DESCRIPTION_STRATEGIES: tuple[Strategy, ...] = (
    selector_text(".Documentation-description"),
    selector_text(".Documentation-overview", limit=OVERVIEW_EXCERPT),
)


def is_not_found_page(soup: BeautifulSoup) -> bool:
    """Detect pkg.go.dev's "not found" pages served with a 200 status"""
    if soup.select_one(NOT_FOUND_SELECTOR) is not None:
        return True
    return "not found" in element_text(soup.select_one("title")).lower()


def extract_title(soup: BeautifulSoup, package: str) -> str:
    return element_text(soup.select_one("title")) or f"Package {package}"


def extract_synopsis(soup: BeautifulSoup) -> str:
    return first_match(soup, SYNOPSIS_STRATEGIES) or NO_SYNOPSIS


def extract_description(soup: BeautifulSoup, synopsis: str) -> str:
    description = first_match(soup, DESCRIPTION_STRATEGIES) or synopsis
    return description[:MAX_DESCRIPTION] or NO_DESCRIPTION


def extract_exported(soup: BeautifulSoup) -> list[str]:
    """Identifiers listed in the package index, in document order"""
    exported: list[str] = []
    for link in soup.select(EXPORTED_SELECTOR):
        text = element_text(link)
        if not text or text.startswith("package") or ELLIPSIS in text:
            continue
        exported.append(text)
        if len(exported) == MAX_EXPORTED:
            break
    return exported


def function_name(signature: str) -> str:
    match = _FUNC_NAME.match(signature)
    if match:
        return match.group(1)
    return _FUNC_KEYWORD.sub("", signature).split("(")[0]


def type_name(header: str) -> str:
    return _TYPE_KEYWORD.sub("", header).split(" ")[0]


def _following_paragraph(block: Tag) -> str:
    sibling = block.find_next_sibling()
    if sibling is not None and sibling.name == "p":
        return element_text(sibling)
    return ""


def _unique(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    seen: set[str] = set()
    unique = []
    for item in items:
        marker = key(item)
        if marker not in seen:
            seen.add(marker)
            unique.append(item)
    return unique


def functions_from_blocks(soup: BeautifulSoup) -> list[FunctionInfo]:
    """Function documentation blocks with a `func ...` header"""
    functions = []
    for block in soup.select(FUNCTION_BLOCK_SELECTOR):
        signature = element_text(block.select_one(FUNCTION_HEADER_SELECTOR)) or element_text(block)
        if not signature.startswith("func "):
            continue

        description = _following_paragraph(block) or element_text(
            block.select_one(FUNCTION_BODY_SELECTOR)
        )
        functions.append(
            FunctionInfo(
                name=function_name(signature),
                signature=signature,
                description=truncate(description, MAX_MEMBER_DESCRIPTION),
            )
        )
    return _unique(functions, key=lambda f: f.signature)


def functions_from_index(soup: BeautifulSoup) -> list[FunctionInfo]:
    """In-page index anchors reading `func ...`"""
    functions = []
    for link in soup.select(INDEX_ANCHOR_SELECTOR):
        text = element_text(link)
        if text.startswith("func "):
            functions.append(FunctionInfo(name=function_name(text), signature=text))
    return _unique(functions, key=lambda f: f.signature)


def types_from_blocks(soup: BeautifulSoup) -> list[TypeInfo]:
    """Type documentation blocks with a header"""
    types = []
    for block in soup.select(TYPE_BLOCK_SELECTOR):
        header = element_text(block.select_one(TYPE_HEADER_SELECTOR))
        if not header:
            continue

        code = block.select_one("pre, code")
        definition = code.get_text().strip() if code is not None else ""
        types.append(
            TypeInfo(
                name=type_name(header),
                definition=truncate(definition or header, MAX_DEFINITION),
                description=truncate(
                    element_text(block.select_one("p")), MAX_MEMBER_DESCRIPTION
                ),
            )
        )
    return _unique(types, key=lambda t: t.name)


def types_from_index(soup: BeautifulSoup) -> list[TypeInfo]:
    """In-page index anchors reading `type ...`"""
    types = []
    for link in soup.select(INDEX_ANCHOR_SELECTOR):
        text = element_text(link)
        if text.startswith("type "):
            types.append(
                TypeInfo(name=type_name(text), definition=truncate(text, MAX_DEFINITION))
            )
    return _unique(types, key=lambda t: t.name)


FUNCTION_TIERS: tuple[Callable[[BeautifulSoup], list[FunctionInfo]], ...] = (
    functions_from_blocks,
    functions_from_index,
)

TYPE_TIERS: tuple[Callable[[BeautifulSoup], list[TypeInfo]], ...] = (
    types_from_blocks,
    types_from_index,
)


def _first_populated(
    soup: BeautifulSoup, tiers: Sequence[Callable[[BeautifulSoup], list[T]]]
) -> list[T]:
    for tier in tiers:
        items = tier(soup)
        if items:
            logger.debug(f"{tier.__name__} found {len(items)} entries")
            return items
    return []


def extract_functions(soup: BeautifulSoup) -> list[FunctionInfo]:
    return _first_populated(soup, FUNCTION_TIERS)


def extract_types(soup: BeautifulSoup) -> list[TypeInfo]:
    return _first_populated(soup, TYPE_TIERS)


def extract_doc(
    soup: BeautifulSoup, package: str, url: str, section: Section = "auto"
) -> DocResult:
    """
    Build the documentation summary for a parsed package page.

    Args:
        soup: Parsed page
        package: Cleaned package path, used for the fallback title
        url: Page URL reported back to the caller
        section: Which member listings to include. "auto"/"overview" list
            up to 15 functions and types, "functions"/"types" list all of
            one kind, "examples" adds nothing to the base fields.
    """
    synopsis = extract_synopsis(soup)

    functions = None
    types = None
    if section in ("auto", "overview"):
        functions = extract_functions(soup)[:OVERVIEW_MEMBER_LIMIT]
        types = extract_types(soup)[:OVERVIEW_MEMBER_LIMIT]
    elif section == "functions":
        functions = extract_functions(soup)
    elif section == "types":
        types = extract_types(soup)

    return DocResult(
        title=extract_title(soup, package),
        url=url,
        synopsis=synopsis,
        description=extract_description(soup, synopsis),
        exported=extract_exported(soup),
        functions=functions,
        types=types,
        note=LIVE_NOTE,
    )

"""Go documentation lookup: request cleaning, page fetching and extraction"""

from .effective_go import EFFECTIVE_GO_CONTENT, effective_go_result
from .extraction import extract_doc
from .fetcher import fetch_page
from .models import (
    SECTIONS,
    DocError,
    DocOutcome,
    DocRequest,
    DocResult,
    FunctionInfo,
    Section,
    TypeInfo,
    normalize_request,
)

__all__ = [
    "SECTIONS",
    "Section",
    "DocRequest",
    "DocResult",
    "DocError",
    "DocOutcome",
    "FunctionInfo",
    "TypeInfo",
    "normalize_request",
    "fetch_page",
    "extract_doc",
    "effective_go_result",
    "EFFECTIVE_GO_CONTENT",
]

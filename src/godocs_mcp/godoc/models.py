"""
Value records for Go documentation lookups
"""

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict

Section = Literal["auto", "overview", "functions", "types", "examples", "effective-go"]

SECTIONS: tuple[str, ...] = get_args(Section)

EMPTY_PACKAGE_SUGGESTION = (
    "Try common packages: 'fmt', 'net/http', 'context', 'sync', 'io', 'os'"
)


class FunctionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    signature: str
    description: str = ""


class TypeInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    definition: str
    description: str = ""


class DocResult(BaseModel):
    """Documentation summary for one package (or the Effective Go guide)"""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    synopsis: str
    description: str
    exported: list[str]
    functions: list[FunctionInfo] | None = None
    types: list[TypeInfo] | None = None
    note: str

    @property
    def ok(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        """JSON-shaped dict; absent sections are omitted"""
        return self.model_dump(exclude_none=True)


class DocError(BaseModel):
    """Failed lookup, with a hint for the caller"""

    model_config = ConfigDict(frozen=True)

    error: str
    suggestion: str

    @property
    def ok(self) -> bool:
        return False

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()


DocOutcome = DocResult | DocError


class DocRequest(BaseModel):
    """A cleaned lookup request; build it through normalize_request()"""

    model_config = ConfigDict(frozen=True)

    package: str
    section: Section = "auto"


def clean_package_path(package: str) -> str:
    """Trim whitespace and leading/trailing slashes from a package path"""
    return package.strip().strip("/")


def normalize_request(package: str, section: str = "auto") -> DocRequest | DocError:
    """
    Validate and clean raw tool input.

    Returns a DocError instead of raising on an unknown section or a
    package path that is not a non-empty string after cleaning.
    """
    if section not in SECTIONS:
        allowed = ", ".join(f"'{s}'" for s in SECTIONS)
        return DocError(
            error=f"Invalid section '{section}'",
            suggestion=f"Use one of: {allowed}",
        )

    if package is not None and not isinstance(package, str):
        return DocError(
            error=f"Invalid package path {package!r}: expected a string",
            suggestion=EMPTY_PACKAGE_SUGGESTION,
        )

    cleaned = clean_package_path(package or "")
    if not cleaned:
        return DocError(
            error="Package path is required",
            suggestion=EMPTY_PACKAGE_SUGGESTION,
        )

    return DocRequest(package=cleaned, section=section)

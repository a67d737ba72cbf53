"""
Exception types for godocs-mcp
"""

COMMON_PACKAGES_HINT = "'fmt', 'net/http', 'encoding/json'"


class GoDocsError(Exception):
    """Base exception for godocs-mcp errors"""

    pass


class DocFetchError(GoDocsError):
    """Raised when a documentation page cannot be retrieved"""

    def __init__(self, package: str, reason: str):
        self.package = package
        self.reason = reason
        super().__init__(f"Failed to fetch '{package}': {reason}")

    @property
    def suggestion(self) -> str:
        return (
            "Check your internet connection or try again. "
            "Common packages: 'fmt', 'net/http', 'context'"
        )


class PackageNotFoundError(DocFetchError):
    """Raised when the documentation host has no page for a package"""

    def __init__(self, package: str, search_url: str):
        self.search_url = search_url
        super().__init__(package, "not found")

    def __str__(self) -> str:
        return f"Package '{self.package}' not found on pkg.go.dev"

    @property
    def suggestion(self) -> str:
        return (
            f"Check the package path. Try {COMMON_PACKAGES_HINT}, "
            f"or search at {self.search_url}"
        )


class AgentConfigurationError(GoDocsError):
    """Raised when the documentation agent cannot be created"""

    pass

"""
Keep the package version and the version advertised by the MCP server in step.

pyproject.toml's [project].version is the source of truth; `__version__` in
the package __init__ (reported as serverInfo.version) must match it.
"""

import re
import tomllib
from pathlib import Path

import typer
from rich.console import Console

PYPROJECT = "pyproject.toml"
VERSION_MODULE = Path("src") / "godocs_mcp" / "__init__.py"

_VERSION_LINE = re.compile(r"""^__version__\s*=\s*["']([^"']+)["']""", re.MULTILINE)

app = typer.Typer(help="Check or synchronize godocs-mcp version strings")
console = Console()


class VersionFileError(Exception):
    """Raised when a version string cannot be located"""


def read_project_version(root: Path) -> str:
    with open(root / PYPROJECT, "rb") as f:
        data = tomllib.load(f)
    try:
        return data["project"]["version"]
    except KeyError:
        raise VersionFileError(f"No [project].version in {root / PYPROJECT}") from None


def read_server_version(root: Path) -> str | None:
    match = _VERSION_LINE.search((root / VERSION_MODULE).read_text(encoding="utf-8"))
    return match.group(1) if match else None


def sync_versions(root: Path) -> tuple[str | None, str]:
    """
    Rewrite __version__ to match pyproject.toml.

    Returns:
        (previous server version, project version)
    """
    project_version = read_project_version(root)
    module_path = root / VERSION_MODULE
    content = module_path.read_text(encoding="utf-8")

    match = _VERSION_LINE.search(content)
    if match is None:
        raise VersionFileError(f"No __version__ assignment in {module_path}")

    previous = match.group(1)
    if previous != project_version:
        content = _VERSION_LINE.sub(f'__version__ = "{project_version}"', content, count=1)
        module_path.write_text(content, encoding="utf-8")
    return previous, project_version


@app.command()
def check(root: Path = typer.Option(Path("."), help="Repository root")):
    """Exit with status 1 when the versions differ"""
    project_version = read_project_version(root)
    server_version = read_server_version(root)

    console.print(f"pyproject.toml version:  {project_version}")
    console.print(f"MCP server version:      {server_version or 'Not found'}")

    if server_version is None:
        console.print(f"[red]Could not find __version__ in {VERSION_MODULE}[/red]")
        raise typer.Exit(1)

    if server_version != project_version:
        console.print("[red]Version mismatch detected![/red] Run 'godocs-versions sync'.")
        raise typer.Exit(1)

    console.print("[green]Versions are synchronized![/green]")


@app.command()
def sync(root: Path = typer.Option(Path("."), help="Repository root")):
    """Set __version__ to the pyproject.toml version"""
    previous, current = sync_versions(root)
    if previous == current:
        console.print("[green]Versions are already synchronized![/green]")
    else:
        console.print(f"[green]Updated MCP server version: {previous} -> {current}[/green]")


def cli_main():
    app()

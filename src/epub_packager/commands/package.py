"""Package command implementation."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from epub_packager.config import PackagerConfig
from epub_packager.core.loader import load_document
from epub_packager.core.packager import Packager
from epub_packager.core.tools import resolve_tool, run_tool
from epub_packager.models.document import TargetFormat
from epub_packager.models.package import PackageResult


def display_result(result: PackageResult, console: Console) -> None:
    """Summarize the artifacts of a packaging run."""
    lines = [f"[dim]Archive:[/] {escape(str(result.epub_path))}"]
    if result.extract_dir:
        lines.append(f"[dim]Extracted to:[/] {escape(str(result.extract_dir))}")
    if result.mobi_path:
        lines.append(f"[dim]MOBI:[/] {escape(str(result.mobi_path))}")
    if result.tool_exit_code is not None:
        status = "[green]ok[/]" if result.tool_exit_code == 0 else f"[red]exit {result.tool_exit_code}[/]"
        lines.append(f"[dim]Tool status:[/] {status}")
    if result.warnings:
        lines.append("")
        lines.append(f"[yellow]{len(result.warnings)} warning(s)[/]")

    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title="Package Complete",
            border_style="yellow" if result.warnings else "green",
        )
    )


def execute_package(
    manifest_path: Path,
    dest_dir: Path | None,
    target_format: TargetFormat,
    extract: bool,
    validate: bool,
    console: Console,
) -> PackageResult:
    """Load the book manifest and package it."""
    document = load_document(manifest_path)
    console.print(
        f"[bold]{escape(document.title)}[/] [dim]({len(document.spine)} chapter(s))[/]"
    )

    packager = Packager(
        document,
        dest_dir or manifest_path.parent,
        target_format=target_format,
        config=PackagerConfig.from_env(),
        console=console,
    )
    result = packager.package(extract=extract, validate=validate)
    display_result(result, console)
    return result


def execute_validate(epub_path: Path, console: Console) -> int:
    """Run epubcheck against an existing archive."""
    config = PackagerConfig.from_env()
    epubcheck = resolve_tool("epubcheck", config.epubcheck, ["epubcheck"])
    return run_tool([epubcheck, str(epub_path)], console)

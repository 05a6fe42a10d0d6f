"""Main CLI application."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from epub_packager.models.document import TargetFormat

app = typer.Typer(
    name="epub-packager",
    help="Package converted documents into EPUB3 and Kindle archives.",
    add_completion=False,
)

console = Console()


@app.command()
def package(
    manifest_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the book manifest (JSON)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    dest_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--dest",
            "-d",
            help="Destination directory (default: next to the manifest)",
        ),
    ] = None,
    target_format: Annotated[
        TargetFormat,
        typer.Option(
            "--format",
            "-f",
            help="Target format: epub3, or kf8 to also convert with kindlegen",
        ),
    ] = TargetFormat.EPUB3,
    extract: Annotated[
        bool,
        typer.Option(
            "--extract",
            "-x",
            help="Also unpack the archive into a directory beside it",
        ),
    ] = False,
    validate: Annotated[
        bool,
        typer.Option(
            "--validate",
            "-v",
            help="Run epubcheck on the archive (ignored for kf8)",
        ),
    ] = False,
) -> None:
    """Package a book manifest into an EPUB archive."""
    try:
        from epub_packager.commands.package import execute_package

        execute_package(
            manifest_path=manifest_path,
            dest_dir=dest_dir,
            target_format=target_format,
            extract=extract,
            validate=validate,
            console=console,
        )
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


@app.command()
def validate(
    epub_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the EPUB archive",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
) -> None:
    """Validate an existing EPUB archive with epubcheck."""
    try:
        from epub_packager.commands.package import execute_validate

        returncode = execute_validate(epub_path, console)
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    if returncode != 0:
        raise typer.Exit(returncode)


if __name__ == "__main__":
    app()

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.table import Table

from asciidoc_bt.core import corrector
from asciidoc_bt.core.config import DEFAULT_CONFIG_PATH
from asciidoc_bt.core.errors import BilingualTranslationError
from asciidoc_bt.core.pipelines import translate_paths_pipeline
from asciidoc_bt.core.resolver import get_resolver


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _preview(text: str, limit: int = 80) -> str:
    value = text.replace("\r", "").replace("\n", "⏎").strip()
    if len(value) > limit:
        value = value[:limit].rstrip() + "…"
    return value


@app.command("translate")
def translate_cmd(
    targets: List[Path] = typer.Argument(..., help="Files or directories to translate"),
    mode: Optional[str] = typer.Option(None, "--mode", help="Translation direction: en2ja or ja2en"),
    file_pattern: Optional[str] = typer.Option(
        None, "--file-pattern", help="Comma-separated glob patterns for directory targets"
    ),
    out_dir: Optional[Path] = typer.Option(None, "--out", help="Output directory (default: in place)"),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to translate.yaml"),
    llm_model: Optional[str] = typer.Option(None, "--llm-model", help="Override the LLM model"),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="LLM temperature"),
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", help="Directory for JSONL run logs"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Resolve and reassemble without translating; writes only into --out"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    _setup_logging(verbose)

    try:
        results = asyncio.run(
            translate_paths_pipeline(
                targets,
                mode=mode,
                file_pattern=file_pattern,
                llm_model=llm_model,
                temperature=temperature,
                out_dir=out_dir,
                config_path=config,
                dry_run=dry_run,
                report_dir=report_dir,
            )
        )
    except BilingualTranslationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if not results:
        print("[yellow]No files to translate[/yellow]")
        return

    table = Table(title="Translated files" if not dry_run else "Dry run")
    table.add_column("Source")
    table.add_column("Output")
    table.add_column("Paragraphs", justify="right")
    table.add_column("Translated", justify="right")
    table.add_column("Ignored", justify="right")
    for diag in results:
        table.add_row(
            diag.source,
            diag.output or "—",
            str(diag.paragraphs),
            str(diag.translated),
            str(diag.ignored),
        )
    print(table)


@app.command("paragraphs")
def paragraphs_cmd(
    path: Path = typer.Argument(..., help="Document to resolve"),
    show_empty: bool = typer.Option(False, "--show-empty", help="Also list empty units"),
):
    """Show how a document is split into translation units."""
    resolver = get_resolver(path)
    try:
        paragraphs = resolver.resolve_file(path)
    except BilingualTranslationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    table = Table(title=f"Paragraphs: {path.name} ({type(resolver).__name__})")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Ignored")
    table.add_column("Prefix")
    table.add_column("Text")
    for idx, para in enumerate(paragraphs, start=1):
        if para.is_empty and not show_empty:
            continue
        table.add_row(
            str(idx),
            str(para.line_count),
            "yes" if para.ignored else "",
            para.escape_prefix,
            _preview(para.text) or "—",
        )
    print(table)
    print(
        f"[dim]units={len(paragraphs)} "
        f"to_translate={sum(1 for p in paragraphs if not p.ignored and p.body_for_translation.strip())}[/dim]"
    )


@app.command("correct-text")
def correct_text_cmd(
    translated: str = typer.Argument(..., help="Translated paragraph text"),
    escape_prefix: str = typer.Option("", "--escape-prefix", help="Escape prefix saved by the resolver"),
):
    """Apply the AsciiDoc correction rules to a translated string."""
    typer.echo(corrector.correct(translated, translated, escape_prefix, False))


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()

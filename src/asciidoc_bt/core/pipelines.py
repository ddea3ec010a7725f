"""
================================================================================
EN: Translation pipelines
RU: Конвейеры перевода
================================================================================

EN: resolve → translate → correct → assemble, per document:
    1. translate_document: paragraphs of one document through a translator
    2. translate_file_pipeline: one file on disk → translated file
    3. translate_paths_pipeline: files/directories + pattern → translated files
RU: резолв → перевод → исправление → сборка, для каждого документа:
    1. translate_document: абзацы одного документа через переводчик
    2. translate_file_pipeline: один файл → переведённый файл
    3. translate_paths_pipeline: файлы/директории + шаблон → переведённые файлы

EN: Only non-ignored paragraphs reach the translator; everything else is
    copied verbatim, so the output keeps the document's structure.
RU: Переводчику отправляются только непропускаемые абзацы; остальное
    копируется как есть, поэтому структура документа сохраняется.
================================================================================
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .config import DEFAULT_CONFIG_PATH, TranslateConfig, load_translate_config
from .diagnostics import FileDiagnostics, write_run_log
from .errors import ConfigError
from .io import assemble, iter_target_files, read_document_lines, save_document
from .paragraph import Paragraph
from .resolver import ParagraphResolver, get_resolver
from asciidoc_bt.providers.translator import EchoTranslator, LLMTranslator, Translator

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """Paragraphs of a document together with the reassembled output."""

    paragraphs: List[Paragraph]
    text: str


async def translate_document(
    lines: Sequence[str],
    translator: Translator,
    *,
    resolver: ParagraphResolver,
) -> DocumentResult:
    """
    EN: Resolve, translate and correct one document.
    RU: Резолвит, переводит и исправляет один документ.

    Translated text gets the paragraph's own trailing line breaks back, so
    the assembled document keeps the source line layout.
    """
    paragraphs = resolver.resolve_exact(lines)

    for para in paragraphs:
        if para.ignored:
            continue
        body = para.body_for_translation
        if not body.strip():
            continue
        translated = await translator.translate(body)
        para.translated_text = translated.rstrip("\r\n") + para.trailing_breaks

    corrected = [resolver.correct(p) for p in paragraphs]
    return DocumentResult(paragraphs=paragraphs, text=assemble(corrected))


async def translate_file_pipeline(
    source: str | Path,
    out_path: Optional[str | Path],
    translator: Translator,
    *,
    mode_name: str = "",
    resolver: Optional[ParagraphResolver] = None,
    report_dir: Optional[str | Path] = None,
) -> FileDiagnostics:
    """
    EN: Translate one file and write the result to ``out_path``
        (``None``: nothing is written).
    RU: Переводит один файл и записывает результат в ``out_path``
        (``None``: ничего не записывается).

    Read and translation errors are recorded in the diagnostics (and the run
    log, when ``report_dir`` is set) and re-raised.
    """
    src = Path(source)
    out = Path(out_path) if out_path is not None else None
    diag = FileDiagnostics(source=str(src), output=str(out) if out else None, mode=mode_name)
    res = resolver or get_resolver(src)
    tokens_before = getattr(translator, "tokens_sent", None)
    started = time.perf_counter()

    try:
        lines = read_document_lines(src)
        result = await translate_document(lines, translator, resolver=res)
        if out is not None:
            save_document(result.text, out)
        diag.count(result.paragraphs)
        logger.info(
            "Translated %s → %s: %d paragraphs, %d sent to translator",
            src,
            out,
            diag.paragraphs,
            diag.translated,
        )
    except Exception as exc:
        diag.error = str(exc)
        diag.output = None
        logger.error("Failed to translate %s: %s", src, exc)
        raise
    finally:
        diag.duration_ms = (time.perf_counter() - started) * 1000.0
        tokens_after = getattr(translator, "tokens_sent", None)
        if tokens_before is not None and tokens_after is not None:
            diag.tokens_sent = tokens_after - tokens_before
        if report_dir is not None:
            write_run_log(diag, report_dir)

    return diag


def _output_path(base: Path, source: Path, out_dir: Optional[Path], dry_run: bool) -> Optional[Path]:
    if out_dir is not None:
        return out_dir / source.relative_to(base)
    # dry runs never overwrite sources
    return None if dry_run else source


async def translate_paths_pipeline(
    targets: Sequence[str | Path],
    *,
    mode: Optional[str] = None,
    file_pattern: Optional[str] = None,
    llm_model: Optional[str] = None,
    temperature: Optional[float] = None,
    out_dir: Optional[str | Path] = None,
    config_path: Optional[str | Path] = None,
    translator: Optional[Translator] = None,
    report_dir: Optional[str | Path] = None,
    dry_run: bool = False,
) -> List[FileDiagnostics]:
    """
    EN: Translate every file found under ``targets``.
    RU: Переводит все файлы, найденные в ``targets``.

    Explicit arguments take precedence over the configuration. Without
    ``out_dir`` each file is translated in place.

    ``dry_run`` reassembles documents without a translation engine; the
    result is written only into ``out_dir``, never over the sources.
    """
    cfg: TranslateConfig = load_translate_config(config_path or DEFAULT_CONFIG_PATH)
    overrides = {
        key: value
        for key, value in (("mode", mode), ("llm_model", llm_model), ("temperature", temperature))
        if value is not None
    }
    if overrides:
        try:
            cfg = TranslateConfig.model_validate({**cfg.model_dump(), **overrides})
        except ValidationError as exc:
            raise ConfigError(f"Invalid option: {exc}", code="invalid_config") from exc
    translation_mode = cfg.translation_mode

    engine = translator
    if engine is None:
        engine = EchoTranslator() if dry_run else LLMTranslator(
            translation_mode,
            model=cfg.llm_model,
            temperature=cfg.temperature,
            max_retries=cfg.max_retries,
            max_input_tokens=cfg.max_input_tokens,
        )
    pattern = file_pattern if file_pattern is not None else cfg.file_pattern
    out_p = Path(out_dir) if out_dir is not None else None
    log_dir = report_dir if report_dir is not None else cfg.report_dir

    results: List[FileDiagnostics] = []
    for base, source in iter_target_files(targets, pattern):
        diag = await translate_file_pipeline(
            source,
            _output_path(base, source, out_p, dry_run),
            engine,
            mode_name=translation_mode.name,
            report_dir=log_dir,
        )
        results.append(diag)

    if not results:
        logger.warning("No files matched %s in %s", pattern, ", ".join(str(t) for t in targets))
    return results

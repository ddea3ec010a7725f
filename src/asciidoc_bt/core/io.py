"""
Input/Output module for document translation.
Модуль ввода/вывода для перевода документов.

This module handles:
Этот модуль обрабатывает:
- Reading source documents line by line / Построчное чтение исходных документов
- Writing translated documents / Запись переведённых документов
- Expanding targets and file patterns / Раскрытие целей и шаблонов файлов
- Token counting for translator requests / Подсчёт токенов для запросов переводчику
"""
from __future__ import annotations

# Standard library imports / Импорты стандартной библиотеки
import fnmatch  # Glob matching of file names / Сопоставление имён файлов с шаблонами
import io  # In-memory line splitting / Разбиение строк в памяти
import logging
from functools import lru_cache  # Caching decorator / Декоратор кэширования
from pathlib import Path  # Modern path handling / Современная работа с путями
from typing import Iterable, Iterator, List, Sequence, Tuple

# Third-party imports / Импорты сторонних библиотек
import tiktoken  # OpenAI tokenizer / Токенизатор OpenAI

from .errors import DocumentReadError

logger = logging.getLogger(__name__)


# =============================================================================
# TOKENIZATION HELPERS / ПОМОЩНИКИ ДЛЯ ТОКЕНИЗАЦИИ
# =============================================================================

@lru_cache(maxsize=None)
def _encoding() -> tiktoken.Encoding:
    """
    Tokenizer used by OpenAI models (cl100k_base), loaded on first use.
    Токенизатор моделей OpenAI (cl100k_base), загружается при первом вызове.
    """
    return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str) -> int:
    """
    Count the number of tokens in text using OpenAI's tokenizer.
    Подсчитывает количество токенов в тексте с помощью токенизатора OpenAI.

    Parameters / Параметры:
        text: Input text / Входной текст

    Returns / Возвращает:
        Number of tokens / Количество токенов
    """
    return len(_encoding().encode(text or ""))


# =============================================================================
# READING & WRITING / ЧТЕНИЕ И ЗАПИСЬ
# =============================================================================

def read_document_lines(path: str | Path) -> List[str]:
    """
    Read a UTF-8 document as a list of lines that keep their terminators.
    Читает документ UTF-8 как список строк с сохранёнными переводами строк.

    Keeping the terminators makes the paragraph split lossless: joining the
    lines back yields the file byte for byte (CRLF and a missing final
    newline included).

    Raises / Исключения:
        DocumentReadError: file is missing, unreadable or not valid UTF-8
    """
    p = Path(path)
    try:
        # newline="" keeps "\r\n" / "\r" / "\n" as they are
        # newline="" сохраняет окончания строк как есть
        with p.open("r", encoding="utf-8", newline="") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(
            f"Cannot read document {p}: {exc}",
            code="read_failed",
            details={"path": str(p)},
        ) from exc
    return lines


def split_document(text: str) -> List[str]:
    """Split an in-memory document the same way ``read_document_lines`` does."""
    return io.StringIO(text, newline="").readlines()


def save_document(text: str, out_path: str | Path) -> None:
    """
    Save a document to a file.
    Сохраняет документ в файл.

    Parameters / Параметры:
        text: Document text / Текст документа
        out_path: Output file path / Путь к выходному файлу
    """
    out_p = Path(out_path)
    # Create parent directories if they don't exist
    # Создаем родительские директории, если их нет
    out_p.parent.mkdir(parents=True, exist_ok=True)
    with out_p.open("w", encoding="utf-8", newline="") as f:
        f.write(text)


def assemble(corrected: Iterable[str]) -> str:
    """
    Join corrected paragraphs into the output document.
    Собирает исправленные абзацы в итоговый документ.

    No separators are added: each paragraph already carries its line breaks.
    """
    return "".join(corrected)


# =============================================================================
# TARGET DISCOVERY / ПОИСК ФАЙЛОВ
# =============================================================================

def split_patterns(file_pattern: str | Sequence[str] | None) -> List[str]:
    """'*.adoc, *.asciidoc' → ['*.adoc', '*.asciidoc']"""
    if not file_pattern:
        return []
    if isinstance(file_pattern, str):
        items = file_pattern.split(",")
    else:
        items = list(file_pattern)
    return [item.strip() for item in items if item and item.strip()]


def _matches(path: Path, patterns: Sequence[str]) -> bool:
    if not patterns:
        return True
    return any(fnmatch.fnmatch(path.name, pat) or fnmatch.fnmatch(path.as_posix(), pat) for pat in patterns)


def iter_target_files(
    targets: Iterable[str | Path],
    file_pattern: str | Sequence[str] | None = None,
) -> Iterator[Tuple[Path, Path]]:
    """
    Expand target files and directories into the files to translate.
    Раскрывает файлы и директории в список файлов для перевода.

    Yields (base, file) pairs: ``base`` is the directory target the file was
    found in, or the parent of an explicitly given file, so that
    ``file.relative_to(base)`` mirrors the source layout.

    Files given explicitly are always yielded. Directories are walked
    recursively (sorted for a stable order) and filtered by the patterns.
    Each file is yielded once.
    """
    patterns = split_patterns(file_pattern)
    seen: set[Path] = set()

    for target in targets:
        t = Path(target)
        if t.is_dir():
            base = t
            candidates = sorted(p for p in t.rglob("*") if p.is_file() and _matches(p, patterns))
        elif t.exists():
            base = t.parent
            candidates = [t]
        else:
            logger.warning("Target not found, skipped: %s", t)
            continue

        for cand in candidates:
            key = cand.resolve()
            if key in seen:
                continue
            seen.add(key)
            yield base, cand

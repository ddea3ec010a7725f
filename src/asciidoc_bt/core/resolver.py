"""
Paragraph resolvers: split a document into translation units.

RU: Резолверы абзацев: делят документ на единицы перевода.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from . import corrector
from .corrector import VERTICAL_BAR_PLACEHOLDER
from .io import read_document_lines, split_document
from .paragraph import Paragraph

logger = logging.getLogger(__name__)

# Delimited blocks (listing, literal, passthrough) are never translated.
_FENCES = ("----", "....", "++++")

ASCIIDOC_SUFFIXES = frozenset({".adoc", ".asciidoc", ".asc", ".ad"})


def _fence_of(line: str) -> Optional[str]:
    for fence in _FENCES:
        if line.startswith(fence):
            return fence
    return None


def _is_blank(line: str) -> bool:
    return not line.strip()


class ParagraphResolver(ABC):
    """Splits a document into paragraphs and repairs their translations."""

    @abstractmethod
    def resolve(self, lines: Sequence[str]) -> List[Paragraph]:
        ...

    @abstractmethod
    def correct(self, paragraph: Paragraph) -> str:
        ...

    def resolve_exact(self, lines: Sequence[str]) -> List[Paragraph]:
        """
        Resolve lines that carry their own terminators (as read from a file),
        keeping a final line without one unterminated.
        """
        paragraphs = self.resolve(lines)
        if lines and not lines[-1].endswith(("\n", "\r")):
            # Paragraph.append terminated the last line; undo it
            for para in reversed(paragraphs):
                if para.text:
                    para.text = para.text[:-1]
                    break
        return paragraphs

    def resolve_text(self, document: str) -> List[Paragraph]:
        return self.resolve_exact(split_document(document))

    def resolve_file(self, path: str | Path) -> List[Paragraph]:
        """Read and resolve a file. ``DocumentReadError`` propagates to the caller."""
        return self.resolve_exact(read_document_lines(path))


class AsciiDocParagraphResolver(ParagraphResolver):
    """
    Line-by-line splitter for AsciiDoc.

    Rules, applied per line with a single open paragraph:

    - inside a delimited block, the closing fence of the same family is
      appended and the block is sealed as an ignored paragraph;
    - a blank line seals the open paragraph and becomes its own ignored unit;
      a delimited block stays open across it;
    - a first line starting with ``.`` (block title) records the escape prefix;
    - in a table row (line starting with ``|``) every ``|`` is replaced with
      the placeholder, since translators drop or mangle cell delimiters;
    - an opening fence marks the open paragraph ignored (placeholders already
      in it are reverted); it stays open until the closing fence.
    """

    def resolve(self, lines: Sequence[str]) -> List[Paragraph]:
        paragraphs: List[Paragraph] = []
        paragraph = Paragraph()
        open_fence: Optional[str] = None

        for line in lines:
            if open_fence is not None and line.startswith(open_fence):
                paragraph.append(line)
                paragraphs.append(paragraph)
                paragraph = Paragraph()
                open_fence = None
                continue

            if _is_blank(line):
                paragraphs.append(paragraph)
                blank = Paragraph(ignored=True)
                blank.append(line)
                paragraphs.append(blank)
                paragraph = Paragraph(ignored=open_fence is not None)
                continue

            # only a block title on the first line is stripped and restored
            if line.startswith(".") and paragraph.is_empty:
                paragraph.escape_prefix = self._find_prefix(line)

            stored = line
            # block interior is emitted verbatim, so it keeps its "|"
            if line.startswith("|") and open_fence is None:
                stored = line.replace("|", VERTICAL_BAR_PLACEHOLDER)

            paragraph.append(stored)

            if open_fence is None:
                open_fence = _fence_of(line)
                if open_fence is not None:
                    paragraph.ignored = True
                    # rows collected before the fence are now emitted verbatim
                    paragraph.text = corrector.restore_placeholders(paragraph.text)

        paragraphs.append(paragraph)

        logger.debug(
            "Resolved %d paragraphs (%d ignored) from %d lines",
            len(paragraphs),
            sum(1 for p in paragraphs if p.ignored),
            len(lines),
        )
        return paragraphs

    @staticmethod
    def _find_prefix(line: str) -> str:
        # heading runs carry no escape prefix
        if corrector.is_heading_run(line):
            logger.warning("Line is both a block title and a heading run: %r", line)
            return ""
        return "."

    def correct(self, paragraph: Paragraph) -> str:
        return corrector.correct_paragraph(paragraph)

    def correct_text(
        self,
        original_text: str,
        translated_text: str | None,
        escape_prefix: str,
        ignored: bool,
    ) -> str:
        return corrector.correct(original_text, translated_text, escape_prefix, ignored)


class PlainTextParagraphResolver(ParagraphResolver):
    """Blank-line separated paragraphs, no markup handling."""

    def resolve(self, lines: Sequence[str]) -> List[Paragraph]:
        paragraphs: List[Paragraph] = []
        paragraph = Paragraph()

        for line in lines:
            if _is_blank(line):
                paragraphs.append(paragraph)
                blank = Paragraph(ignored=True)
                blank.append(line)
                paragraphs.append(blank)
                paragraph = Paragraph()
                continue
            paragraph.append(line)

        paragraphs.append(paragraph)
        return paragraphs

    def correct(self, paragraph: Paragraph) -> str:
        if paragraph.ignored or paragraph.translated_text is None:
            return paragraph.text
        return paragraph.translated_text


def get_resolver(path: str | Path) -> ParagraphResolver:
    """Pick a resolver by file extension."""
    if Path(path).suffix.lower() in ASCIIDOC_SUFFIXES:
        return AsciiDocParagraphResolver()
    return PlainTextParagraphResolver()

"""
================================================================================
EN: Correction of translated paragraphs
RU: Исправление переведённых абзацев
================================================================================

EN: Machine translation is markup-unaware and damages AsciiDoc syntax in
    predictable ways: spaces appear inside emphasis markers, ``NOTE:`` turns
    into ``NOTE :``, ``WARNING:`` into ``WARNING -``, ``== Title`` into
    ``= = Title``. The functions below undo these artifacts, in a fixed order,
    and restore what the resolver escaped before translation.
RU: Машинный перевод не знает разметки и предсказуемо ломает синтаксис
    AsciiDoc. Функции ниже откатывают эти искажения в фиксированном порядке
    и возвращают то, что резолвер экранировал перед переводом.
================================================================================
"""

from __future__ import annotations

import re
from typing import Optional

from .paragraph import Paragraph

# Stand-in for "|" while a table row travels through the translator.
# Tag-like tokens are kept verbatim by translation engines.
VERTICAL_BAR_PLACEHOLDER = "<VB>"

# Whole-text patterns: matched with fullmatch, "." spans newlines.
_RE_SUPERSCRIPT = re.compile(r"(.*?) ?\^ (.*) \^ ?(.*)", re.DOTALL)
_RE_SUBSCRIPT = re.compile(r"(.*?) ?~ (.*) ~ ?(.*)", re.DOTALL)
_RE_ADMONITION = re.compile(r"(TIP|IMPORTANT|CAUTION|NOTE)(\s+)(:.*)", re.DOTALL)
_RE_WARNING = re.compile(r"(WARNING)(\s+)(-.*)", re.DOTALL)
_RE_HEADING_RUN = re.compile(r"(= ){2,6}(.*)", re.DOTALL)
_RE_EQUALS_RUN = re.compile(r"(=*)[ \t]*(.*)", re.DOTALL)


def restore_placeholders(text: str) -> str:
    """Replace the table-cell placeholder with the literal ``|``."""
    if VERTICAL_BAR_PLACEHOLDER in text:
        text = text.replace(VERTICAL_BAR_PLACEHOLDER, "|")
    return text


def trim_marker_spaces(text: str) -> str:
    """
    ``x ^ super ^ y`` → ``x^super^y`` (and the ``~`` subscript equivalent).

    Fires only when the whole text has the shape, i.e. the markers dominate
    the unit.
    """
    for pattern, marker in ((_RE_SUPERSCRIPT, "^"), (_RE_SUBSCRIPT, "~")):
        m = pattern.fullmatch(text)
        if m:
            text = f"{m.group(1)}{marker}{m.group(2)}{marker}{m.group(3)}"
    return text


def fix_admonition_label(text: str) -> str:
    """``NOTE : x`` → ``NOTE: x``; ``WARNING - x`` → ``WARNING: x``."""
    m = _RE_ADMONITION.fullmatch(text)
    if m:
        text = m.group(1) + m.group(3)
    m = _RE_WARNING.fullmatch(text)
    if m:
        text = (m.group(1) + m.group(3)).replace("-", ":", 1)
    return text


def fix_heading_markers(text: str) -> str:
    """``= = Title`` → ``== Title``: one space between the ``=`` run and the title."""
    if not _RE_HEADING_RUN.fullmatch(text):
        return text
    collapsed = text.replace("= ", "=")
    m = _RE_EQUALS_RUN.fullmatch(collapsed)
    # _RE_EQUALS_RUN matches any string
    return f"{m.group(1)} {m.group(2)}"


def is_heading_run(line: str) -> bool:
    """True for lines that start with two to six ``"= "`` tokens."""
    return _RE_HEADING_RUN.match(line) is not None


def adjust(translated_text: str) -> str:
    """Run the artifact fixes in order; non-matching text passes unchanged."""
    text = restore_placeholders(translated_text)
    text = trim_marker_spaces(text)
    text = fix_admonition_label(text)
    text = fix_heading_markers(text)
    return text


def correct(
    original_text: str,
    translated_text: Optional[str],
    escape_prefix: str,
    ignored: bool,
) -> str:
    """
    Produce the text that replaces a paragraph in the output document.

    Ignored paragraphs always come back as ``original_text``. A missing
    translation (nothing was sent to the engine, e.g. a dry run) falls back
    to the original with table delimiters restored.
    """
    if ignored:
        return original_text
    if translated_text is None:
        return restore_placeholders(original_text)

    text = adjust(translated_text)

    if not escape_prefix:
        return text
    return escape_prefix + text


def correct_paragraph(paragraph: Paragraph) -> str:
    return correct(
        paragraph.text,
        paragraph.translated_text,
        paragraph.escape_prefix,
        paragraph.ignored,
    )

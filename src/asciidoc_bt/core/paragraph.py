from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Paragraph:
    """
    Unit of translation: a run of document lines sent to (or withheld from)
    the translator as one piece.

    RU: Единица перевода: группа строк документа, которая целиком
    отправляется переводчику или пропускается.

    Attributes:
        text: accumulated source lines, each with its line terminator.
        translated_text: result of the translator, only for non-ignored units.
        ignored: emitted verbatim, never translated.
        escape_prefix: block-title marker (".") restored after translation.
    """

    text: str = ""
    translated_text: Optional[str] = None
    ignored: bool = False
    escape_prefix: str = ""

    def append(self, line: str) -> None:
        if not line.endswith(("\n", "\r")):
            line += "\n"
        self.text += line

    @property
    def is_empty(self) -> bool:
        return not self.text

    @property
    def line_count(self) -> int:
        return len(self.text.splitlines())

    @property
    def trailing_breaks(self) -> str:
        """Line terminators at the end of ``text`` (re-attached after translation)."""
        body = self.text.rstrip("\r\n")
        return self.text[len(body):]

    @property
    def body_for_translation(self) -> str:
        """
        Text handed to the translator: without the escape prefix (it is
        prepended again on correction) and without trailing line breaks.
        """
        body = self.text.rstrip("\r\n")
        if self.escape_prefix and body.startswith(self.escape_prefix):
            body = body[len(self.escape_prefix):]
        return body

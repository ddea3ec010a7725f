from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .paragraph import Paragraph


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass
class FileDiagnostics:
    """
    Summary of one translated document.
    """

    source: str
    output: Optional[str]
    mode: str
    paragraphs: int = 0
    ignored: int = 0
    translated: int = 0
    skipped_empty: int = 0
    tokens_sent: Optional[int] = None
    duration_ms: Optional[float] = None
    timestamp_utc: str = field(default_factory=_utc_now)
    error: Optional[str] = None

    def count(self, paragraphs: List[Paragraph]) -> None:
        self.paragraphs = len(paragraphs)
        self.ignored = sum(1 for p in paragraphs if p.ignored)
        self.skipped_empty = sum(1 for p in paragraphs if not p.ignored and not p.body_for_translation.strip())
        self.translated = sum(1 for p in paragraphs if not p.ignored and p.translated_text is not None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "output": self.output,
            "mode": self.mode,
            "paragraphs": self.paragraphs,
            "ignored": self.ignored,
            "translated": self.translated,
            "skipped_empty": self.skipped_empty,
            "tokens_sent": self.tokens_sent,
            "duration_ms": self.duration_ms,
            "timestamp_utc": self.timestamp_utc,
            "error": self.error,
        }


def write_run_log(diagnostics: FileDiagnostics, directory: str | Path) -> Path:
    """
    Append diagnostics as JSONL into <directory>/YYYY-MM-DD.jsonl.
    """

    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now(timezone.utc)
    log_path = out_dir / f"{ts:%Y-%m-%d}.jsonl"

    with log_path.open("a", encoding="utf-8") as fp:
        fp.write(json.dumps(diagnostics.to_dict(), ensure_ascii=False) + "\n")

    return log_path

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass(frozen=True)
class TranslationMode:
    """Translation direction, e.g. ``en2ja``."""

    name: str
    source_code: str
    target_code: str
    source_language: str
    target_language: str

    @classmethod
    def parse(cls, value: str) -> "TranslationMode":
        key = (value or "").strip().lower()
        try:
            return _MODES[key]
        except KeyError:
            raise ValueError(
                f"Unknown translation mode {value!r}; expected one of: {', '.join(sorted(_MODES))}"
            ) from None


_MODES: Dict[str, TranslationMode] = {
    "en2ja": TranslationMode("en2ja", "en", "ja", "English", "Japanese"),
    "ja2en": TranslationMode("ja2en", "ja", "en", "Japanese", "English"),
}


def _resolve_default_prompts_path() -> Path:
    start = Path(__file__).resolve()
    for p in [start] + list(start.parents):
        cand = p / "configs" / "prompts.yaml"
        if cand.exists():
            return cand
    return Path("configs/prompts.yaml")


DEFAULT_PROMPTS_PATH = _resolve_default_prompts_path()

_FALLBACK_SYSTEM_PROMPT = (
    "You are a professional technical translator. Translate the user's text "
    "from {source_language} to {target_language}. The text is a fragment of an "
    "AsciiDoc document: keep markup symbols, placeholders such as <VB>, "
    "attribute references like {{name}}, URLs and inline code unchanged. "
    "Return only the translation, without comments or explanations."
)


@lru_cache(maxsize=8)
def _load_prompt_data(path: Optional[str | Path]) -> Dict[str, Any]:
    target = Path(path) if path is not None else DEFAULT_PROMPTS_PATH
    if not target.exists():
        return {}
    with target.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return data if isinstance(data, dict) else {}


def get_system_prompt(mode: TranslationMode, path: Optional[str | Path] = None) -> str:
    data = _load_prompt_data(path)
    template = _FALLBACK_SYSTEM_PROMPT
    if "system_prompt" in data:
        template = str(data["system_prompt"])
    else:
        prompts = data.get("prompts")
        if isinstance(prompts, dict) and "system" in prompts:
            template = str(prompts["system"])
    return template.format(
        source_language=mode.source_language,
        target_language=mode.target_language,
    )

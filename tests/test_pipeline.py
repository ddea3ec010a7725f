from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

import pytest

from asciidoc_bt.core.errors import ConfigError, TranslationError
from asciidoc_bt.core.io import split_document
from asciidoc_bt.core.pipelines import (
    translate_document,
    translate_file_pipeline,
    translate_paths_pipeline,
)
from asciidoc_bt.core.resolver import AsciiDocParagraphResolver
from asciidoc_bt.providers.translator import EchoTranslator, Translator


SOURCE = (
    "== Overview\n"
    "\n"
    ".Example Title\n"
    "\n"
    "NOTE: Remember this.\n"
    "\n"
    "----\n"
    "code\n"
    "----\n"
    "|A|B|\n"
)


class FakeTranslator(Translator):
    """Mimics the artifacts a markup-unaware engine introduces."""

    def __init__(self, table: Dict[str, str]):
        self.table = table
        self.calls: List[str] = []
        self.tokens_sent = 0

    async def translate(self, text: str) -> str:
        self.calls.append(text)
        self.tokens_sent += 1
        return self.table.get(text, text) + "\n"


class FailingTranslator(Translator):
    async def translate(self, text: str) -> str:
        raise TranslationError("engine down", code="engine_failed")


def _fake() -> FakeTranslator:
    return FakeTranslator(
        {
            "== Overview": "= = Vue d'ensemble",
            "Example Title": "Titre d'exemple",
            "NOTE: Remember this.": "NOTE : Souvenez-vous.",
        }
    )


@pytest.mark.asyncio
async def test_translate_document_repairs_artifacts() -> None:
    translator = _fake()
    result = await translate_document(
        split_document(SOURCE),
        translator,
        resolver=AsciiDocParagraphResolver(),
    )

    assert result.text == (
        "== Vue d'ensemble\n"
        "\n"
        ".Titre d'exemple\n"
        "\n"
        "NOTE: Souvenez-vous.\n"
        "\n"
        "----\n"
        "code\n"
        "----\n"
        "|A|B|\n"
    )
    assert translator.calls == [
        "== Overview",
        "Example Title",
        "NOTE: Remember this.",
        "<VB>A<VB>B<VB>",
    ]


@pytest.mark.asyncio
async def test_echo_translation_reproduces_document() -> None:
    doc = SOURCE + "\nLast line without newline"
    result = await translate_document(
        split_document(doc),
        EchoTranslator(),
        resolver=AsciiDocParagraphResolver(),
    )
    assert result.text == doc


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "doc",
    [
        "a|cell\n|x|y\n----\ncode\n----\n",
        "Steps:\n. first\n. second\n",
        ".Title\n. first\n|A|B|\n",
    ],
)
async def test_echo_translation_keeps_lists_and_cells(doc: str) -> None:
    result = await translate_document(
        split_document(doc),
        EchoTranslator(),
        resolver=AsciiDocParagraphResolver(),
    )
    assert result.text == doc


@pytest.mark.asyncio
async def test_file_pipeline_writes_output_and_log(tmp_path: Path) -> None:
    src = tmp_path / "guide.adoc"
    src.write_text(SOURCE, encoding="utf-8")
    out = tmp_path / "out" / "guide.adoc"
    logs = tmp_path / "logs"

    diag = await translate_file_pipeline(src, out, _fake(), mode_name="en2ja", report_dir=logs)

    assert out.read_text(encoding="utf-8").startswith("== Vue d'ensemble\n")
    assert diag.translated == 4
    assert diag.ignored == 4
    assert diag.tokens_sent == 4
    assert diag.error is None

    log_files = list(logs.glob("*.jsonl"))
    assert len(log_files) == 1
    row = json.loads(log_files[0].read_text(encoding="utf-8").strip())
    assert row["source"] == str(src)
    assert row["mode"] == "en2ja"


@pytest.mark.asyncio
async def test_file_pipeline_records_failure(tmp_path: Path) -> None:
    src = tmp_path / "guide.adoc"
    src.write_text("Hello\n", encoding="utf-8")
    logs = tmp_path / "logs"

    with pytest.raises(TranslationError):
        await translate_file_pipeline(src, tmp_path / "out.adoc", FailingTranslator(), report_dir=logs)

    row = json.loads(next(logs.glob("*.jsonl")).read_text(encoding="utf-8").strip())
    assert row["error"] == "engine down"
    assert row["output"] is None
    assert not (tmp_path / "out.adoc").exists()


@pytest.mark.asyncio
async def test_paths_pipeline_mirrors_layout(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    (docs / "sub").mkdir(parents=True)
    (docs / "sub" / "a.adoc").write_text("NOTE: Remember this.\n", encoding="utf-8")
    (docs / "b.txt").write_text("plain\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    results = await translate_paths_pipeline(
        [docs],
        mode="ja2en",
        file_pattern="*.adoc",
        out_dir=out_dir,
        config_path=tmp_path / "missing.yaml",
        translator=_fake(),
    )

    assert [Path(r.source).name for r in results] == ["a.adoc"]
    assert results[0].mode == "ja2en"
    assert (out_dir / "sub" / "a.adoc").read_text(encoding="utf-8") == "NOTE: Souvenez-vous.\n"
    assert not (out_dir / "b.txt").exists()


@pytest.mark.asyncio
async def test_paths_pipeline_dry_run_writes_nothing_in_place(tmp_path: Path) -> None:
    src = tmp_path / "guide.adoc"
    src.write_text(SOURCE, encoding="utf-8")

    results = await translate_paths_pipeline(
        [src],
        config_path=tmp_path / "missing.yaml",
        dry_run=True,
    )

    assert results[0].output is None
    assert results[0].error is None
    assert src.read_text(encoding="utf-8") == SOURCE
    assert [p.name for p in tmp_path.iterdir()] == ["guide.adoc"]


@pytest.mark.asyncio
async def test_paths_pipeline_rejects_unknown_mode(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        await translate_paths_pipeline(
            [tmp_path],
            mode="fr2de",
            config_path=tmp_path / "missing.yaml",
            translator=EchoTranslator(),
        )

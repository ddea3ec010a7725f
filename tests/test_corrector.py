from __future__ import annotations

import unittest

from asciidoc_bt.core import corrector
from asciidoc_bt.core.corrector import VERTICAL_BAR_PLACEHOLDER, correct
from asciidoc_bt.core.paragraph import Paragraph
from asciidoc_bt.core.resolver import AsciiDocParagraphResolver


class CorrectTests(unittest.TestCase):
    def test_ignored_returns_original(self):
        for translated in ("anything", "", None, "NOTE : x"):
            with self.subTest(translated=translated):
                self.assertEqual(correct("----\ncode\n----\n", translated, ".", True), "----\ncode\n----\n")

    def test_admonition_labels(self):
        self.assertEqual(correct("TIP: Do this", "TIP : Do this", "", False), "TIP: Do this")
        for label in ("IMPORTANT", "CAUTION", "NOTE"):
            with self.subTest(label=label):
                self.assertEqual(correct("", f"{label}  : text", "", False), f"{label}: text")

    def test_warning_dash(self):
        self.assertEqual(correct("WARNING: Stop now", "WARNING - Stop now", "", False), "WARNING: Stop now")

    def test_warning_only_first_dash_replaced(self):
        self.assertEqual(
            correct("", "WARNING - read-only mode", "", False),
            "WARNING: read-only mode",
        )

    def test_superscript_and_subscript(self):
        self.assertEqual(correct("", "x ^ super ^ y", "", False), "x^super^y")
        self.assertEqual(correct("", "H ~ 2 ~ O", "", False), "H~2~O")
        self.assertEqual(correct("", "^ super ^", "", False), "^super^")

    def test_heading_markers(self):
        self.assertEqual(correct("== Overview", "= = Overview", "", False), "== Overview")
        self.assertEqual(correct("", "= = =   Details", "", False), "=== Details")
        self.assertEqual(correct("", "= = Title\n", "", False), "== Title\n")

    def test_single_equals_title_untouched(self):
        self.assertEqual(correct("", "= Document Title", "", False), "= Document Title")

    def test_placeholder_restoration(self):
        translated = f"{VERTICAL_BAR_PLACEHOLDER}A{VERTICAL_BAR_PLACEHOLDER}B{VERTICAL_BAR_PLACEHOLDER}"
        self.assertEqual(correct("", translated, "", False), "|A|B|")

    def test_escape_prefix_is_prepended(self):
        self.assertEqual(correct(".Example Title", "Example Title", ".", False), ".Example Title")

    def test_missing_translation_falls_back_to_original(self):
        original = f"{VERTICAL_BAR_PLACEHOLDER}A{VERTICAL_BAR_PLACEHOLDER}\n"
        self.assertEqual(correct(original, None, "", False), "|A|\n")

    def test_correct_text_is_idempotent(self):
        samples = [
            "Plain sentence.",
            "NOTE: Already fine.",
            "WARNING: Careful.",
            "== Overview",
            "E=mc^2^ and H~2~O",
            "Multi\nline\ntext\n",
        ]
        for text in samples:
            with self.subTest(text=text):
                self.assertEqual(correct(text, text, "", False), text)


class AdjustStepTests(unittest.TestCase):
    def test_steps_leave_non_matching_text(self):
        text = "Nothing to fix here."
        self.assertEqual(corrector.restore_placeholders(text), text)
        self.assertEqual(corrector.trim_marker_spaces(text), text)
        self.assertEqual(corrector.fix_admonition_label(text), text)
        self.assertEqual(corrector.fix_heading_markers(text), text)

    def test_admonition_must_start_text(self):
        text = "See NOTE : below"
        self.assertEqual(corrector.fix_admonition_label(text), text)

    def test_multiline_admonition(self):
        self.assertEqual(
            corrector.fix_admonition_label("NOTE : first line\nsecond line"),
            "NOTE: first line\nsecond line",
        )

    def test_is_heading_run(self):
        self.assertTrue(corrector.is_heading_run("= = Title"))
        self.assertFalse(corrector.is_heading_run("== Title"))
        self.assertFalse(corrector.is_heading_run(".Title"))


class ResolveThenCorrectTests(unittest.TestCase):
    def setUp(self):
        self.resolver = AsciiDocParagraphResolver()

    def test_table_row_round_trip(self):
        paragraphs = self.resolver.resolve_text("|A|B|\n")
        para = paragraphs[0]
        self.assertIn(VERTICAL_BAR_PLACEHOLDER, para.text)
        para.translated_text = para.text
        self.assertEqual(self.resolver.correct(para), "|A|B|\n")

    def test_block_title_round_trip(self):
        para = self.resolver.resolve_text(".Example Title\n")[0]
        para.translated_text = "Example Title\n"
        self.assertEqual(self.resolver.correct(para), ".Example Title\n")

    def test_correct_text_matches_correct(self):
        para = Paragraph(text="NOTE: x\n", translated_text="NOTE : x\n")
        self.assertEqual(
            self.resolver.correct(para),
            self.resolver.correct_text(para.text, para.translated_text, para.escape_prefix, para.ignored),
        )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

"""Tests for vaultcards.core.sanitize module."""

import pytest

from vaultcards.core.sanitize import ELLIPSIS, make_preview, sanitize


class TestSanitize:
    """Tests for sanitize()."""

    def test_strips_emphasis_links_and_images(self):
        """Emphasis keeps its text, links and images vanish."""
        raw = "**bold** and *italic* and [[Link]] and ![[img.png]]"

        assert sanitize(raw) == "bold and italic and  and"

    def test_removes_heading_lines(self):
        """Heading lines are dropped entirely."""
        assert sanitize("# Title\nBody text") == "Body text"
        assert sanitize("Intro\n### Section\nMore") == "Intro\nMore"

    def test_removes_heading_on_last_line(self):
        """A heading without a trailing newline is removed too."""
        assert sanitize("Body\n## End") == "Body"

    def test_hashtag_is_not_a_heading(self):
        """Tags have no space after the hash and survive."""
        assert sanitize("#idea worth keeping") == "#idea worth keeping"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("~~gone~~ kept", "gone kept"),
            ("use `print()` here", "use print() here"),
            ("> quoted line", "quoted line"),
            ("- item one\n- item two", "item one\nitem two"),
            ("1. first\n2. second", "first\nsecond"),
            ("- [ ] open task", "open task"),
            ("- [x] done task", "done task"),
        ],
    )
    def test_unwraps_markup(self, raw, expected):
        """Inline markup and line prefixes are stripped."""
        assert sanitize(raw) == expected

    def test_removes_fenced_code_blocks_with_content(self):
        """Fenced blocks are removed, content included."""
        raw = "Before\n```python\nprint('x')\n# not a heading\n```\nAfter"

        assert sanitize(raw) == "Before\n\nAfter"

    def test_blockquote_keeps_text(self):
        """Only the quote prefix goes, the quoted text stays."""
        assert sanitize("Said:\n> be kind\n> always") == "Said:\nbe kind\nalways"

    @pytest.mark.parametrize(
        "raw",
        ["**unclosed bold", "lone ` backtick", "[[broken link", "~~half"],
    )
    def test_unbalanced_markup_is_left_literal(self, raw):
        """Unmatched delimiters stay as literal text."""
        assert sanitize(raw) == raw

    def test_trims_surrounding_whitespace(self):
        assert sanitize("\n\n  text  \n") == "text"

    def test_empty_input(self):
        assert sanitize("") == ""


class TestMakePreview:
    """Tests for make_preview()."""

    def test_short_text_is_not_truncated(self):
        assert make_preview("**short**", 50) == "short"

    def test_long_text_is_cut_with_ellipsis(self):
        """Text longer than the limit is cut and marked."""
        preview = make_preview("x" * 60, 50)

        assert preview == "x" * 50 + ELLIPSIS

    def test_exact_length_has_no_ellipsis(self):
        assert make_preview("y" * 50, 50) == "y" * 50

from __future__ import annotations

import unittest

from xpost.inline_markdown import render_inline_markdown

_LINK_ENTITIES = {"0": {"type": "LINK", "mutability": "MUTABLE", "data": {"url": "https://x.test"}}}


class TestRenderInlineMarkdown(unittest.TestCase):
    def test_empty_text_is_empty(self) -> None:
        self.assertEqual(render_inline_markdown("", [{"offset": 0, "length": 3, "style": "BOLD"}]), "")

    def test_plain_text_passes_through(self) -> None:
        self.assertEqual(render_inline_markdown("just text"), "just text")

    def test_overlapping_bold_and_italic(self) -> None:
        styles = [
            {"offset": 0, "length": 3, "style": "BOLD"},
            {"offset": 2, "length": 3, "style": "ITALIC"},
        ]
        self.assertEqual(render_inline_markdown("abcde", styles), "**ab*c**de*")

    def test_link_wraps_run(self) -> None:
        out = render_inline_markdown(
            "see more",
            [],
            [{"offset": 4, "length": 4, "key": 0}],
            _LINK_ENTITIES,
        )
        self.assertEqual(out, "see [more](https://x.test)")

    def test_link_opens_outside_style_starting_at_same_position(self) -> None:
        out = render_inline_markdown(
            "go here now",
            [{"offset": 3, "length": 4, "style": "BOLD"}],
            [{"offset": 3, "length": 4, "key": "0"}],
            _LINK_ENTITIES,
        )
        # The link closes before the bold run closes at the same boundary.
        self.assertEqual(out, "go [**here](https://x.test)** now")

    def test_unclosed_markers_close_bold_italic_then_link(self) -> None:
        out = render_inline_markdown(
            "ab",
            [
                {"offset": 0, "length": 2, "style": "ITALIC"},
                {"offset": 0, "length": 2, "style": "BOLD"},
            ],
            [{"offset": 0, "length": 2, "key": "0"}],
            _LINK_ENTITIES,
        )
        self.assertEqual(out, "[***ab***](https://x.test)")

    def test_non_link_entity_is_ignored(self) -> None:
        entities = {"0": {"type": "MENTION", "data": {"url": "https://nope.test"}}}
        out = render_inline_markdown("hi @bob", [], [{"offset": 3, "length": 4, "key": 0}], entities)
        self.assertEqual(out, "hi @bob")

    def test_first_link_range_wins_on_overlap(self) -> None:
        entities = [
            {"key": "0", "value": {"type": "LINK", "data": {"url": "https://a.test"}}},
            {"key": "1", "value": {"type": "LINK", "data": {"url": "https://b.test"}}},
        ]
        out = render_inline_markdown(
            "abcd",
            [],
            [{"offset": 0, "length": 2, "key": 0}, {"offset": 1, "length": 3, "key": 1}],
            entities,
        )
        self.assertEqual(out, "[ab](https://a.test)[cd](https://b.test)")

    def test_adjacent_ranges_of_same_entity_form_one_link(self) -> None:
        out = render_inline_markdown(
            "abcd",
            [],
            [{"offset": 0, "length": 2, "key": 0}, {"offset": 2, "length": 2, "key": "0"}],
            _LINK_ENTITIES,
        )
        self.assertEqual(out, "[abcd](https://x.test)")

    def test_out_of_range_offsets_are_clamped(self) -> None:
        styles = [
            {"offset": 2, "length": 50, "style": "BOLD"},
            {"offset": 10, "length": 2, "style": "ITALIC"},
            {"offset": -3, "length": 4, "style": "ITALIC"},
        ]
        self.assertEqual(render_inline_markdown("abcd", styles), "*a*b**cd**")

    def test_unknown_styles_emit_nothing(self) -> None:
        out = render_inline_markdown("abc", [{"offset": 0, "length": 3, "style": "UNDERLINE"}])
        self.assertEqual(out, "abc")

    def test_offsets_count_utf16_code_units(self) -> None:
        # The emoji occupies two code units, so "x" starts at offset 3.
        out = render_inline_markdown("a\U0001F600x", [{"offset": 3, "length": 1, "style": "BOLD"}])
        self.assertEqual(out, "a\U0001F600**x**")

    def test_missing_entity_key_renders_plain(self) -> None:
        out = render_inline_markdown("abc", [], [{"offset": 0, "length": 3, "key": 7}], _LINK_ENTITIES)
        self.assertEqual(out, "abc")


if __name__ == "__main__":
    unittest.main()

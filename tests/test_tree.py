"""test_tree.py - Unit tests for the exception tree renderer.

Covers:
    - build_tree(): empty input, single line, start/item/end glyphs
    - build_tree(): subtree start glyph, open-ended trees, base indent
    - ExceptionNode.from_exception(): __cause__, __context__, suppressed
      context, cycle guard
    - render_exception(): header only when there is no stack trace
    - render_exception(): inner exception labels and 4-space nesting
    - render_exception(): live exceptions with real tracebacks
    - render_exception(): chains longer than the recursion limit
"""

import sys

from metalog.tree import ExceptionNode, build_tree, render_exception

TRACE = '  File "app.py", line 3, in run\n    step()\n'


def _raise_chain():
    try:
        raise ValueError("inner")
    except ValueError as exc:
        raise RuntimeError("outer") from exc


def _caught(fn):
    try:
        fn()
    except Exception as exc:
        return exc
    raise AssertionError("expected an exception")


def _leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


# ---------------------------------------------------------------------------
# build_tree()
# ---------------------------------------------------------------------------


class TestBuildTree:
    def test_build_tree_empty_input_returns_empty_string(self):
        assert build_tree("") == ""
        assert build_tree("\n\n") == ""

    def test_build_tree_single_line_uses_horizontal_spacer(self):
        """A single line gets the ─ connector and no tree glyphs."""
        assert build_tree("only line") == "─ only line"

    def test_build_tree_single_line_drops_all_indentation(self):
        """Neither the line's own whitespace nor base_indent survives."""
        assert build_tree("    only line", base_indent=4) == "─ only line"
        assert build_tree("\tonly line", subtree=True, is_end=False) == "─ only line"

    def test_build_tree_marks_start_items_and_end(self):
        result = build_tree("a\nb\nc\nd")
        assert result == "┌ a\n├ b\n├ c\n└ d"

    def test_build_tree_reindents_to_first_line_whitespace(self):
        """The first line's indent moves in front of every glyph."""
        result = build_tree("  a\n  b\n  c")
        assert result == "  ┌ a\n  ├   b\n  └   c"

    def test_build_tree_subtree_starts_with_tee(self):
        assert build_tree("a\nb", subtree=True) == "┬ a\n└ b"

    def test_build_tree_open_end_appends_closing_line(self):
        assert build_tree("a\nb", is_end=False) == "┌ a\n├ b\n└─"

    def test_build_tree_base_indent_adds_to_line_indent(self):
        assert build_tree(" a\n b", base_indent=2) == "   ┌ a\n   └  b"

    def test_build_tree_ignores_empty_lines(self):
        assert build_tree("a\n\nb\n") == "┌ a\n└ b"


# ---------------------------------------------------------------------------
# ExceptionNode.from_exception()
# ---------------------------------------------------------------------------


class TestExceptionNode:
    def test_from_exception_follows_cause(self):
        node = ExceptionNode.from_exception(_caught(_raise_chain))
        assert node.type_name == "RuntimeError"
        assert node.message == "outer"
        assert node.inner.type_name == "ValueError"
        assert node.inner.message == "inner"
        assert node.inner.inner is None

    def test_from_exception_follows_implicit_context(self):
        def fail():
            try:
                raise KeyError("k")
            except KeyError:
                raise TypeError("while handling")

        node = ExceptionNode.from_exception(_caught(fail))
        assert node.type_name == "TypeError"
        assert node.inner.type_name == "KeyError"

    def test_from_exception_respects_suppressed_context(self):
        def fail():
            try:
                raise KeyError("k")
            except KeyError:
                raise TypeError("clean") from None

        node = ExceptionNode.from_exception(_caught(fail))
        assert node.inner is None

    def test_from_exception_unraised_exception_has_no_trace(self):
        node = ExceptionNode.from_exception(ValueError("never raised"))
        assert node.stack_trace is None

    def test_from_exception_captures_traceback_text(self):
        node = ExceptionNode.from_exception(_caught(_raise_chain))
        assert "_raise_chain" in node.stack_trace

    def test_from_exception_qualifies_non_builtin_types(self):
        import json

        exc = _caught(lambda: json.loads("{"))
        node = ExceptionNode.from_exception(exc)
        assert node.type_name == "json.decoder.JSONDecodeError"

    def test_from_exception_cuts_cycles(self):
        """A chain that loops back is visited once per exception."""
        a = ValueError("a")
        b = ValueError("b")
        a.__cause__ = b
        b.__cause__ = a

        node = ExceptionNode.from_exception(a)
        assert node.message == "a"
        assert node.inner.message == "b"
        assert node.inner.inner is None


# ---------------------------------------------------------------------------
# render_exception()
# ---------------------------------------------------------------------------


class TestRenderException:
    def test_render_without_trace_is_header_only(self):
        """No stack trace means no tree block and no dangling glyphs."""
        assert render_exception(ExceptionNode("ValueError", "bad")) == "ValueError: bad"

    def test_render_without_inner_has_no_inner_label(self):
        result = render_exception(ExceptionNode("ValueError", "bad", TRACE))
        assert "Inner Exception:" not in result
        assert result == 'ValueError: bad\n  ┌ File "app.py", line 3, in run\n  └     step()'

    def test_render_chain_of_three_nests_by_four_spaces(self):
        chain = ExceptionNode(
            "A", "a", TRACE,
            ExceptionNode("B", "b", TRACE, ExceptionNode("C", "c", TRACE)),
        )
        lines = render_exception(chain).split("\n")

        labels = [line for line in lines if line.strip() == "Inner Exception:"]
        assert len(labels) == 2
        assert [_leading_spaces(line) for line in labels] == [4, 8]
        assert "    B: b" in lines
        assert "        C: c" in lines

    def test_render_inner_trace_uses_subtree_glyph(self):
        chain = ExceptionNode("A", "a", TRACE, ExceptionNode("B", "b", TRACE))
        lines = render_exception(chain).split("\n")

        assert lines[1].lstrip().startswith("┌")
        label = lines.index("    Inner Exception:")
        assert lines[label + 1] == "    B: b"
        assert lines[label + 2] == '      ┬ File "app.py", line 3, in run'

    def test_render_live_exception_chain(self):
        """A wraps B: header, trace tree, indented label, nested subtree."""
        lines = render_exception(_caught(_raise_chain)).split("\n")

        assert lines[0] == "RuntimeError: outer"
        assert lines[1].lstrip().startswith("┌ File")
        label = lines.index("    Inner Exception:")
        assert all(line.lstrip()[0] in "├└" for line in lines[2:label])
        assert lines[label + 1] == "    ValueError: inner"
        assert lines[label + 2].lstrip().startswith("┬ File")

    def test_render_survives_chains_deeper_than_recursion_limit(self):
        depth = sys.getrecursionlimit() + 200
        head = current = ValueError("0")
        for i in range(1, depth):
            nxt = ValueError(str(i))
            current.__cause__ = nxt
            current = nxt

        result = render_exception(head)
        assert result.count("Inner Exception:") == depth - 1

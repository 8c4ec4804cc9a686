"""
Unit tests for the display tree compiler.
"""

import pytest

from htmlview.compiler import TreeCompiler, is_blockquote, normalize_text, strip_indent
from htmlview.models import ContainerKind, NodeKind, NodeStyle, ParsedNode, StyleKey

tag = ParsedNode.tag
text = ParsedNode.text


@pytest.fixture
def opened():
    return []


@pytest.fixture
def shared():
    return []


@pytest.fixture
def compiler(opened, shared):
    return TreeCompiler(on_open=opened.append, on_share=shared.append)


class TestSuppression:
    """Nothing empty ever reaches the renderer."""

    def test_empty_input_is_absent(self, compiler):
        assert compiler.compile([]) is None
        assert compiler.compile(None) is None

    def test_childless_tag_suppressed(self, compiler):
        assert compiler.compile([tag("p")]) is None

    def test_tag_with_only_suppressed_children(self, compiler):
        assert compiler.compile([tag("p", children=[tag("br"), tag("span")])]) is None

    def test_suppressed_sibling_dropped(self, compiler):
        nodes = compiler.compile([tag("br"), text("x")])
        assert len(nodes) == 1
        assert nodes[0].content == "x"

    def test_comments_ignored(self, compiler):
        nodes = compiler.compile([ParsedNode(kind=NodeKind.COMMENT, data="c"), text("x")])
        assert [n.content for n in nodes] == ["x"]


class TestStyles:

    def test_paragraph(self, compiler):
        [p] = compiler.compile([tag("p", children=[text("Hello")])])
        assert p.style_key == StyleKey.P
        assert p.container == ContainerKind.TEXT
        assert p.content[0].style_key == StyleKey.P
        assert p.content[0].content == "Hello"

    def test_unknown_tag_uses_default(self, compiler):
        [div] = compiler.compile([tag("div", children=[text("x")])])
        assert div.style_key == StyleKey.DEFAULT
        assert div.content[0].style_key == StyleKey.DEFAULT

    def test_top_level_text_default(self, compiler):
        [node] = compiler.compile([text("x\n")])
        assert node.style_key == StyleKey.DEFAULT
        assert node.content == "x "

    def test_injected_style_table(self):
        compiler = TreeCompiler(styles={StyleKey.DEFAULT: NodeStyle()})
        [p] = compiler.compile([tag("p", children=[text("x")])])
        assert p.style_key == StyleKey.DEFAULT

    def test_keys_unique_within_compilation(self, compiler):
        nodes = compiler.compile([
            tag("p", children=[text("a"), tag("i", children=[text("b")])]),
            tag("p", children=[text("c")]),
        ])
        keys = [n.key for root in nodes for n in root.iter_nodes()]
        assert len(keys) == len(set(keys)) == 6


class TestWhitespace:

    def test_collapses_runs(self):
        assert normalize_text("a \n\t b", "p") == "a b"

    def test_code_dedent_and_trailing_newline(self):
        assert normalize_text("  foo\n  bar\n", "code") == "foo\nbar"

    def test_code_keeps_relative_indentation(self):
        assert normalize_text("  if x:\n      y\n", "code") == "if x:\n    y"

    def test_code_trims_only_one_newline(self):
        assert normalize_text("a\n\n", "code") == "a\n"

    def test_blank_lines_ignored_for_indent(self):
        assert strip_indent("    a\n\n    b") == "a\n\nb"

    def test_no_common_indent(self):
        assert strip_indent("a\n  b") == "a\n  b"

    def test_code_text_node(self, compiler):
        [code] = compiler.compile([tag("code", children=[text("  foo\n  bar\n")])])
        assert code.style_key == StyleKey.CODE
        assert code.content[0].content == "foo\nbar"


class TestPre:

    def test_pre_is_scroll_container(self, compiler):
        [pre] = compiler.compile([tag("pre", children=[tag("code", children=[text("x = 1\n")])])])
        assert pre.container == ContainerKind.SCROLL
        assert pre.style_key == StyleKey.PRE
        assert pre.content[0].style_key == StyleKey.CODE
        assert pre.content[0].content[0].content == "x = 1"

    def test_empty_pre_suppressed(self, compiler):
        assert compiler.compile([tag("pre")]) is None


class TestAnchors:

    def test_text_anchor(self, compiler, opened, shared):
        url = "https://x.test"
        [a] = compiler.compile([tag("a", {"href": url}, [text(url)])])
        assert a.style_key == StyleKey.A
        assert a.content == url
        assert a.handlers.href == url

        a.handlers.on_activate()
        assert opened == [url]
        a.handlers.on_long_activate()
        assert shared == [url]

    def test_label_is_raw_text(self, compiler):
        [a] = compiler.compile([tag("a", {"href": "h"}, [text("a  \n b")])])
        assert a.content == "a  \n b"

    def test_nested_markup_falls_back_to_children(self, compiler):
        [a] = compiler.compile([tag("a", {"href": "h"}, [tag("b", children=[text("bold")])])])
        assert isinstance(a.content, list)
        assert a.content[0].style_key == StyleKey.B

    def test_anchor_without_href_has_no_handlers(self, compiler):
        [a] = compiler.compile([tag("a", children=[text("x")])])
        assert a.handlers is None

    def test_empty_anchor_suppressed(self, compiler):
        assert compiler.compile([tag("a", {"href": "h"})]) is None


class TestBlockquote:

    @pytest.mark.parametrize("first", [">> a quoted line", "> quoted", ">", ">\nmore"])
    def test_quoted_paragraph(self, compiler, first):
        [p] = compiler.compile([tag("p", children=[text(first)])])
        assert p.style_key == StyleKey.BLOCKQUOTE

    @pytest.mark.parametrize("first", ["plain text", ">>> three", ">>", "a > b"])
    def test_plain_paragraph(self, compiler, first):
        [p] = compiler.compile([tag("p", children=[text(first)])])
        assert p.style_key == StyleKey.P

    def test_marker_kept_verbatim(self, compiler):
        [p] = compiler.compile([tag("p", children=[text(">> a quoted line")])])
        assert p.content[0].content == ">> a quoted line"

    def test_marker_inside_leading_italic(self, compiler):
        para = tag("p", children=[tag("i", children=[text("> quoted")]), text(" rest")])
        [p] = compiler.compile([para])
        assert p.style_key == StyleKey.BLOCKQUOTE

    def test_empty_paragraph_is_not_a_quote(self):
        assert is_blockquote(tag("p")) is False
        assert is_blockquote(tag("p", children=[tag("i")])) is False

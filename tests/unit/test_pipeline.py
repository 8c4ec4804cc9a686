"""
End-to-end tests: HTML string -> display tree.
"""

import logging

import pytest

from htmlview import pipeline
from htmlview.compiler import TreeCompiler
from htmlview.exceptions import MarkupParseError
from htmlview.models import ContainerKind, StyleKey
from htmlview.pipeline import CompilationTracker, prepare_markup, process_html


@pytest.fixture
def compiler():
    return TreeCompiler(on_open=lambda url: None, on_share=lambda url: None)


class TestProcessHtml:

    @pytest.mark.parametrize("html", ["", "   ", "\n\t"])
    def test_blank_input(self, compiler, html):
        assert process_html(html, compiler=compiler) is None

    def test_linkify_end_to_end(self, compiler):
        nodes = process_html("Check http://example.com now", linkify=True, compiler=compiler)
        [p] = nodes
        assert p.style_key == StyleKey.P
        before, link, after = p.content
        assert before.content == "Check "
        assert link.style_key == StyleKey.A
        assert link.content == "http://example.com"
        assert link.handlers.href == "http://example.com"
        assert after.content == " now"

    def test_without_linkify_no_links(self, compiler):
        [p] = process_html("Check http://example.com now", compiler=compiler)
        assert [n.content for n in p.content] == ["Check http://example.com now"]

    def test_linkify_guard(self, compiler, caplog):
        html = '<a href="http://x.test">x</a> http://y.test'
        with caplog.at_level(logging.WARNING, logger="htmlview.linkify"):
            nodes = process_html(html, linkify=True, compiler=compiler)
        links = [n for root in nodes for n in root.iter_nodes() if n.handlers is not None]
        assert [n.handlers.href for n in links] == ["http://x.test"]
        assert caplog.records

    def test_code_block_flow(self, compiler):
        html = "<p>Intro</p><pre>\n  <code>  x = 1\n  y = 2\n</code></pre>After"
        assert prepare_markup(html) == (
            "<p>Intro</p><pre><code>  x = 1\n  y = 2\n</code></pre><p>After"
        )

        intro, pre, after = process_html(html, compiler=compiler)
        assert intro.style_key == StyleKey.P
        assert pre.container == ContainerKind.SCROLL
        [code] = pre.content
        assert code.content[0].content == "x = 1\ny = 2"
        assert after.style_key == StyleKey.P
        assert after.content[0].content == "After"

    def test_leading_pre_not_in_paragraph(self, compiler):
        nodes = process_html("<pre><code>a\n</code></pre>", compiler=compiler)
        assert [n.container for n in nodes] == [ContainerKind.SCROLL]

    def test_encoded_blockquote(self, compiler):
        quote, plain = process_html("<p>&gt;&gt; quoted</p><p>normal</p>", compiler=compiler)
        assert quote.style_key == StyleKey.BLOCKQUOTE
        assert quote.content[0].content == ">> quoted"
        assert plain.style_key == StyleKey.P

    def test_parser_failure_contained(self, compiler, monkeypatch, caplog):
        def fail(html):
            raise MarkupParseError("boom", snippet=html)

        monkeypatch.setattr(pipeline, "parse_markup", fail)
        with caplog.at_level(logging.ERROR, logger="htmlview.pipeline"):
            assert process_html("<p>x</p>", compiler=compiler) is None
        assert any("boom" in r.message for r in caplog.records)


class TestCompilationTracker:

    def test_latest_wins(self):
        tracker = CompilationTracker()
        first = tracker.begin("a", False)
        second = tracker.begin("b", True)
        assert not tracker.is_current(first)
        assert tracker.is_current(second)
        assert tracker.latest == second

    def test_same_input_resubmitted(self):
        tracker = CompilationTracker()
        first = tracker.begin("a", False)
        second = tracker.begin("a", False)
        assert first.serial != second.serial
        assert not tracker.is_current(first)
        assert tracker.is_current(second)

    def test_out_of_order_completion(self):
        tracker = CompilationTracker()
        tickets = [tracker.begin(f"html {i}", False) for i in range(3)]
        applied = [t for t in reversed(tickets) if tracker.is_current(t)]
        assert applied == [tickets[-1]]

"""
Unit tests for markup repair rules.
"""

import re

import pytest

from htmlview.preprocess import RULES, normalize


SAMPLES = [
    "hello",
    "  <P>already wrapped</P>",
    "<pre>code</pre>",
    "<p>intro<p> <pre>x</pre>",
    "<pre>a</pre>tail",
    "  text <p>\n<pre>z</pre>",
    "<p>x</p><pre>\n  <code>y</code></pre>\nafter",
    "",
]


class TestParagraphRule:
    """Rule 1: top-level content is paragraph-wrapped."""

    def test_prepends_paragraph(self):
        assert normalize("hello") == "<p>hello"

    def test_empty_input(self):
        assert normalize("") == "<p>"

    def test_existing_paragraph_case_insensitive(self):
        assert normalize("  <P>x</P>") == "  <P>x</P>"

    @pytest.mark.parametrize("html", SAMPLES)
    def test_output_starts_with_paragraph_or_pre(self, html):
        out = normalize(html)
        assert re.match(r'^\s*<(p|pre)>', out, re.IGNORECASE)


class TestPreRules:
    """Rules 2-5: <pre> is never wrapped by <p>."""

    def test_leading_pre_is_unwrapped(self):
        assert normalize("<pre>code</pre>") == "<pre>code</pre>"

    def test_leading_paragraph_pre_is_unwrapped(self):
        assert normalize("<p> <pre>code</pre>") == "<pre>code</pre>"

    def test_inner_paragraph_pre_is_closed(self):
        assert normalize("<p>intro<p> <pre>x</pre>") == "<p>intro</p><pre>x</pre>"

    def test_pre_code_whitespace_collapsed(self):
        out = normalize("<p>a</p><pre>\n  <CODE>x</CODE></pre>")
        assert "<pre><code>x</CODE>" in out

    def test_text_after_pre_gets_paragraph(self):
        assert normalize("<pre>a</pre>tail") == "<pre>a</pre><p>tail"

    def test_newline_after_pre_counts_as_text(self):
        assert normalize("<pre>a</pre>\nmore") == "<pre>a</pre><p>\nmore"

    def test_existing_paragraph_after_pre_disables_rule(self):
        html = "<pre>a</pre> <p>b</p><pre>c</pre>d"
        assert normalize(html) == html

    def test_pre_followed_by_tag_untouched(self):
        assert normalize("<pre>a</pre><div>b</div>") == "<pre>a</pre><div>b</div>"

    def test_pre_with_attributes_not_matched(self):
        out = normalize('<p><pre class="x">a</pre>')
        assert out == '<p><pre class="x">a</pre>'

    @pytest.mark.parametrize("html", SAMPLES)
    def test_pre_never_directly_inside_paragraph(self, html):
        out = normalize(html)
        assert re.search(r'<p>\s*<pre>', out, re.IGNORECASE) is None


class TestNormalizeProperties:

    @pytest.mark.parametrize("html", SAMPLES)
    def test_idempotent(self, html):
        once = normalize(html)
        assert normalize(once) == once

    def test_rules_are_ordered(self):
        assert [rule.name for rule in RULES] == [
            "unwrap-leading-pre",
            "close-p-before-pre",
            "join-pre-code",
            "paragraph-after-pre",
        ]

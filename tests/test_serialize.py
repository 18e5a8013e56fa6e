from __future__ import annotations

import unittest
from contextlib import redirect_stdout
from io import StringIO

from safetag import HtmlTag, RecognizerOpts, SafetyPolicy, UrlRule, filter_html, recognize, to_html
from safetag.serialize import escape_tag, serialize_end_tag, serialize_start_tag


class TestSerializeTags(unittest.TestCase):
    def test_start_tag(self) -> None:
        assert serialize_start_tag(HtmlTag("div", {"class": "x", "id": "y"})) == '<div class="x" id="y">'
        assert serialize_start_tag(HtmlTag("b")) == "<b>"

    def test_closed_tag(self) -> None:
        assert serialize_start_tag(HtmlTag("br", closed=True)) == "<br />"
        assert serialize_start_tag(HtmlTag("img", {"src": "x"}, closed=True)) == '<img src="x" />'

    def test_comment(self) -> None:
        assert serialize_start_tag(HtmlTag.comment(" abc ")) == "<!-- abc -->"

    def test_end_tag(self) -> None:
        assert serialize_end_tag(HtmlTag("div", closing=True)) == "</div>"

    def test_values_stay_undecoded(self) -> None:
        tag = HtmlTag("a", {"title": 'say "hi" &amp; go'})
        assert serialize_start_tag(tag) == '<a title="say &quot;hi&quot; &amp; go">'

    def test_serialized_tag_is_recognized_again(self) -> None:
        tag, _ = recognize("<img src=x width=1/>", 0)
        markup = to_html(tag)
        assert markup == '<img src="x" width="1" />'
        again, pos = recognize(markup, 0)
        assert again == tag
        assert pos == len(markup)

    def test_quote_in_unquoted_value_is_encoded(self) -> None:
        tag, _ = recognize('<img src=x"y>', 0)
        assert tag.attributes["src"] == 'x"y'
        assert to_html(tag) == '<img src="x&quot;y">'


class TestToHtml(unittest.TestCase):
    def test_unsafe_mode_is_verbatim(self) -> None:
        assert to_html(HtmlTag("script")) == "<script>"
        assert to_html(HtmlTag("script", closing=True)) == "</script>"

    def test_safe_mode_escapes_unsafe_tags(self) -> None:
        assert to_html(HtmlTag("script"), safe=True) == "&lt;script&gt;"
        assert to_html(HtmlTag("div", closing=True), safe=True) == "&lt;/div&gt;"
        assert to_html(HtmlTag.comment("x"), safe=True) == "&lt;!--x--&gt;"

    def test_safe_mode_keeps_safe_tags(self) -> None:
        tag = HtmlTag("a", {"href": "http://example.com"})
        assert to_html(tag, safe=True) == '<a href="http://example.com">'
        assert to_html(HtmlTag("a", closing=True), safe=True) == "</a>"

    def test_safe_mode_with_custom_policy(self) -> None:
        policy = SafetyPolicy(allowed_tags=["div"], allowed_attributes={"div": ["class"]})
        assert to_html(HtmlTag("div", {"class": "x"}), safe=True, policy=policy) == '<div class="x">'

    def test_escape_tag(self) -> None:
        assert escape_tag("") == ""
        assert escape_tag(None) == ""
        assert escape_tag("<a&b>") == "&lt;a&amp;b&gt;"


class TestFilterHtml(unittest.TestCase):
    def _assert_markup_is_canonical(self, html: str) -> None:
        # Every '<' left in the output must be a safe tag in its serialized form
        pos = html.find("<")
        while pos >= 0:
            tag, end = recognize(html, pos)
            assert tag is not None, html
            assert tag.is_safe(), html
            assert html[pos:end] == to_html(tag), html
            pos = html.find("<", end)

    def test_safe_tags_are_reserialized(self) -> None:
        text = 'Hello <B>world</B> and <a href="http://example.com" title=t>link</a>'
        assert filter_html(text) == 'Hello <B>world</B> and <a href="http://example.com" title="t">link</a>'

    def test_single_quote_cannot_smuggle_an_attribute(self) -> None:
        text = "<a href=\"http://example.com\" title='x'onmouseover=alert(1)>hi</a>"
        result = filter_html(text)
        assert result == '<a href="http://example.com" title="\'x\'onmouseover=alert(1)">hi</a>'
        assert " onmouseover=" not in result
        self._assert_markup_is_canonical(result)

    def test_single_quoted_values(self) -> None:
        assert filter_html("<a title='t'>x</a>") == "<a title=\"'t'\">x</a>"
        # "y'" after the space is read as an attribute name without '='
        assert filter_html("<a title='x y'>x</a>") == "&lt;a title='x y'>x</a>"

    def test_back_to_back_attributes(self) -> None:
        result = filter_html('<a href="http://example.com"title="t">x</a>')
        assert result == '<a href="http://example.com" title="t">x</a>'
        assert (
            filter_html('<a href="http://example.com"onclick="y">x</a>')
            == '&lt;a href="http://example.com"onclick="y"&gt;x</a>'
        )

    def test_output_markup_is_always_canonical(self) -> None:
        samples = [
            "<a href=\"http://x.org\" title='a'b=c>t</a><img src=\"http://x.org/i.png\" alt=''/>",
            '<b><i>x</i></b><a href="http://x.org"title="\'"onclick=y>z</a>',
            "<a title=\"x'y\" href='http://x.org'>q</a>",
            '<img src="http://x.org/a.png" alt="a"b=c width=1 height=2 />',
            "<<a title=>>>",
        ]
        for text in samples:
            self._assert_markup_is_canonical(filter_html(text))

    def test_unsafe_tags_are_escaped(self) -> None:
        assert filter_html("<script>alert(1)</script>") == "&lt;script&gt;alert(1)&lt;/script&gt;"
        assert (
            filter_html('<a href="javascript:x">y</a>')
            == '&lt;a href="javascript:x"&gt;y</a>'
        )
        assert filter_html('<p class="x">t</p>') == '&lt;p class="x"&gt;t</p>'

    def test_comments_are_escaped(self) -> None:
        assert filter_html("a<!-- c -->b") == "a&lt;!-- c --&gt;b"

    def test_line_breaks_are_not_whitelisted(self) -> None:
        assert filter_html("a<br/>b") == "a&lt;br/&gt;b"

    def test_stray_lt_is_escaped(self) -> None:
        assert filter_html("1 < 2 > 0") == "1 &lt; 2 > 0"
        assert filter_html("x<b") == "x&lt;b"
        assert filter_html("<<b>") == "&lt;<b>"

    def test_text_without_tags(self) -> None:
        assert filter_html("") == ""
        assert filter_html("plain & simple") == "plain & simple"

    def test_custom_policy(self) -> None:
        policy = SafetyPolicy(
            allowed_tags=["img"],
            allowed_attributes={"img": ["src"]},
            url_rule=UrlRule(allow_relative=True),
        )
        assert filter_html('<img src="/x.png"><b>', policy=policy) == '<img src="/x.png">&lt;b&gt;'

    def test_debug_reports_escaped_tags(self) -> None:
        out = StringIO()
        with redirect_stdout(out):
            filter_html("<script>", opts=RecognizerOpts(debug=True))
        assert "escaping unsafe <start:script>" in out.getvalue()


if __name__ == "__main__":
    unittest.main()

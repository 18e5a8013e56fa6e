"""Markup serialization and safe-mode filtering for recognized tags."""

from __future__ import annotations

from .sanitize import DEFAULT_POLICY, SafetyPolicy, is_safe
from .scanner import StringScanner
from .tokenizer import RecognizerOpts, TagRecognizer
from .tokens import HtmlTag


def escape_tag(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str) -> str:
    # Values are kept undecoded; only the quote character needs encoding.
    return value.replace('"', "&quot;")


def serialize_start_tag(tag: HtmlTag) -> str:
    if tag.is_comment:
        return f"<!--{tag.attributes.get('content', '')}-->"

    parts = ["<", tag.name]
    for name, value in tag.attributes.items():
        parts.append(f' {name}="{_escape_attr_value(value)}"')
    if tag.closed:
        parts.append(" /")
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(tag: HtmlTag) -> str:
    return f"</{tag.name}>"


def to_html(tag: HtmlTag, *, safe: bool = False, policy: SafetyPolicy = DEFAULT_POLICY) -> str:
    """Render `tag` back to markup.

    With `safe=True`, tags rejected by `policy` are returned HTML-escaped so
    they display as text instead of taking effect.
    """
    markup = serialize_end_tag(tag) if tag.closing else serialize_start_tag(tag)
    if safe and not is_safe(tag, policy=policy):
        return escape_tag(markup)
    return markup


def filter_html(
    text: str,
    *,
    policy: SafetyPolicy = DEFAULT_POLICY,
    opts: RecognizerOpts | None = None,
) -> str:
    """Escape every raw tag in `text` that `policy` does not allow.

    Safe tags are re-serialized from what was recognized, so every attribute
    value comes out double-quoted. Unsafe tags, comments and stray '<'
    characters are escaped from the source; other text is untouched.
    """
    if not text:
        return ""

    recognizer = TagRecognizer(opts)
    scanner = StringScanner(text)
    out = []
    length = len(text)

    while scanner.position < length:
        start = scanner.position
        lt = text.find("<", start)
        if lt < 0:
            out.append(text[start:])
            break
        out.append(text[start:lt])
        scanner.position = lt

        tag = recognizer.recognize(scanner)
        if tag is None:
            out.append("&lt;")
            scanner.position = lt + 1
            continue

        if is_safe(tag, policy=policy):
            # The source slice may read differently to a browser, e.g. title='x'onclick=y
            out.append(serialize_end_tag(tag) if tag.closing else serialize_start_tag(tag))
        else:
            if recognizer.opts.debug:
                recognizer.debug(f"escaping unsafe {tag!r}")
            out.append(escape_tag(text[lt : scanner.position]))

    return "".join(out)

"""Recognizer for a single raw HTML tag or comment.

Recognition is all-or-nothing: the scanner either ends up just past a
complete tag, or is rewound to where it started.
"""

from __future__ import annotations

from .scanner import StringScanner
from .tokens import Attributes, HtmlTag, ParseError

_UNQUOTED_VALUE_TERMINATORS = ">/"


class RecognizerOpts:
    __slots__ = ("debug", "exact_errors")

    def __init__(self, debug=False, exact_errors=False):
        self.debug = bool(debug)
        self.exact_errors = bool(exact_errors)


class TagRecognizer:
    __slots__ = ("errors", "opts")

    def __init__(self, opts=None):
        self.opts = opts or RecognizerOpts()
        self.errors = []

    def debug(self, message, indent=4):
        if self.opts.debug:
            print(f"{' ' * indent}{message}")

    def recognize(self, scanner: StringScanner) -> HtmlTag | None:
        start = scanner.position
        tag = self._parse(scanner)
        if tag is not None:
            if self.opts.debug:
                self.debug(f"recognized {tag!r} at {start}..{scanner.position}")
            return tag

        scanner.position = start
        return None

    def _fail(self, scanner, code, message=None):
        if self.opts.debug:
            self.debug(f"no tag: {code} at {scanner.position}")
        if self.opts.exact_errors:
            self.errors.append(ParseError(code, offset=scanner.position, message=message))
        return None

    def _parse(self, scanner):
        if scanner.current != "<":
            return self._fail(scanner, "expected-tag-open")
        scanner.skip_forward(1)

        if scanner.skip_string("!--"):
            return self._parse_comment(scanner)

        closing = scanner.skip_char("/")

        name = scanner.skip_identifier()
        if name is None:
            return self._fail(scanner, "missing-tag-name")

        if closing:
            # Nothing, not even whitespace, may sit between the name and '>'
            if not scanner.skip_char(">"):
                return self._fail(scanner, "unexpected-character-in-end-tag")
            return HtmlTag(name, closing=True)

        attrs = Attributes()
        while not scanner.eof:
            if scanner.skip_whitespace() and scanner.eof:
                break

            if scanner.skip_string("/>"):
                return HtmlTag(name, attrs, closed=True)

            if scanner.skip_char(">"):
                return HtmlTag(name, attrs)

            attr_name = scanner.skip_identifier()
            if attr_name is None:
                return self._fail(scanner, "missing-attribute-name")

            scanner.skip_whitespace()
            if not scanner.skip_char("="):
                return self._fail(scanner, "missing-equals-after-attribute-name")
            scanner.skip_whitespace()

            value = self._parse_attribute_value(scanner)
            if value is None:
                return None

            if not attrs._add(attr_name, value):
                return self._fail(scanner, "duplicate-attribute", f"Duplicate attribute {attr_name!r}")

        return self._fail(scanner, "eof-in-tag")

    def _parse_comment(self, scanner):
        scanner.set_mark()
        if not scanner.find("-->"):
            return self._fail(scanner, "unterminated-comment")
        content = scanner.extract()
        scanner.skip_forward(3)
        return HtmlTag.comment(content)

    def _parse_attribute_value(self, scanner):
        if scanner.skip_char('"'):
            scanner.set_mark()
            if not scanner.find('"'):
                return self._fail(scanner, "unterminated-attribute-value")
            value = scanner.extract()
            scanner.skip_forward(1)
            return value

        scanner.set_mark()
        while not scanner.eof:
            c = scanner.current
            if c.isspace() or c in _UNQUOTED_VALUE_TERMINATORS:
                return scanner.extract()
            scanner.skip_forward(1)
        return self._fail(scanner, "eof-in-attribute-value")


def recognize_from(scanner: StringScanner, *, opts: RecognizerOpts | None = None) -> HtmlTag | None:
    """Recognize a tag at the scanner position, advancing only on success."""
    return TagRecognizer(opts).recognize(scanner)


def recognize(text: str, pos: int = 0, *, opts: RecognizerOpts | None = None) -> tuple[HtmlTag | None, int]:
    """Recognize a tag starting at `text[pos]`.

    Returns the tag and the offset just past it, or `(None, pos)` when the
    input at `pos` is not a tag or comment.
    """
    if pos < 0 or pos >= len(text or ""):
        return None, pos
    scanner = StringScanner(text, pos)
    tag = recognize_from(scanner, opts=opts)
    if tag is None:
        return None, pos
    return tag, scanner.position

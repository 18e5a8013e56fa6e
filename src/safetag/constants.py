"""Tag classification and whitelist tables.

This module defines the read-only lookup data shared by every recognizer
and safety check:

- TAG_FLAGS: default content model (block, inline, no-closing) per tag name.
- ALLOWED_TAGS: tag names that may pass through unescaped in safe mode.
- ALLOWED_ATTRIBUTES: attribute names permitted per whitelisted tag.

Tag names are lowercase. Lookups are expected to lowercase first.

Usage:
    from safetag.constants import ALLOWED_TAGS, TAG_FLAGS
"""

import enum
from types import MappingProxyType


class TagFlags(enum.IntFlag):
    """Default rendering category of a tag name."""

    BLOCK = 0x0001
    INLINE = 0x0002
    # No closing tag, eg: <hr> and comments
    NO_CLOSING = 0x0004


_BLOCK_ELEMENTS = [
    "p",
    "div",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "blockquote",
    "pre",
    "table",
    "dl",
    "ol",
    "ul",
    "script",
    "noscript",
    "form",
    "fieldset",
    "iframe",
    "math",
]

# Elements that may appear either at block level or inline
_BLOCK_OR_INLINE_ELEMENTS = [
    "ins",
    "del",
    "img",
]

# "!" is the synthetic name given to comments
_NO_CLOSING_BLOCK_ELEMENTS = [
    "hr",
    "!",
]

TAG_FLAGS = MappingProxyType(
    {
        **{name: TagFlags.BLOCK for name in _BLOCK_ELEMENTS},
        **{name: TagFlags.BLOCK | TagFlags.INLINE for name in _BLOCK_OR_INLINE_ELEMENTS},
        **{name: TagFlags.BLOCK | TagFlags.NO_CLOSING for name in _NO_CLOSING_BLOCK_ELEMENTS},
    }
)

DEFAULT_TAG_FLAGS = TagFlags.INLINE

ALLOWED_TAGS = frozenset(
    [
        # Text formatting
        "b",
        "i",
        "em",
        "strong",
        "s",
        "strike",
        "del",
        "sub",
        "sup",
        "kbd",
        "code",
        # Headings
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        # Blocks
        "p",
        "pre",
        "blockquote",
        # Lists
        "ul",
        "ol",
        "li",
        "dl",
        "dt",
        "dd",
        # Links and images
        "a",
        "img",
    ]
)

ALLOWED_ATTRIBUTES = MappingProxyType(
    {
        "a": frozenset(["href", "title"]),
        "img": frozenset(["src", "width", "height", "alt", "title"]),
    }
)

# Attributes whose values are checked with the URL predicate
URL_ATTRIBUTES = ("href", "src")

DEFAULT_URL_SCHEMES = frozenset(["http", "https", "ftp"])

# Schemes that are followed directly by their payload, not by "//"
OPAQUE_URL_SCHEMES = frozenset(["mailto", "tel"])

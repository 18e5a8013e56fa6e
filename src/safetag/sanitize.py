"""Whitelist safety checks for recognized tags.

When output runs in safe mode, a raw tag may only pass through unescaped
if `is_safe()` says so. The check is closed-world:

- Tags not in `allowed_tags` are unsafe.
- Tags without an entry in `allowed_attributes` must carry no attributes.
- Attributes not in `allowed_attributes[tag]` are unsafe.
- URL-valued attributes (`url_attributes`) must pass `is_safe_url()`.

All tag and attribute names in a policy are ASCII-lowercase.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from .constants import (
    ALLOWED_ATTRIBUTES,
    ALLOWED_TAGS,
    DEFAULT_URL_SCHEMES,
    OPAQUE_URL_SCHEMES,
    URL_ATTRIBUTES,
)

if TYPE_CHECKING:
    from .tokens import HtmlTag

_URL_SCHEME_PATTERN = re.compile(r"([a-z][a-z0-9+.\-]*):")


def _lowercase_set(values: Collection[str]) -> frozenset[str]:
    if isinstance(values, str):
        raise TypeError("expected a collection of names, not a string")
    return frozenset(str(v).lower() for v in values)


@dataclass(frozen=True, slots=True)
class UrlRule:
    """Which URL forms may appear in a URL-valued attribute."""

    # Allow absolute URLs with these schemes (lowercase), e.g. {"https"}.
    allowed_schemes: Collection[str] = field(default_factory=lambda: DEFAULT_URL_SCHEMES)

    # Allow relative URLs (/path, ./path, ../path, ?query, path).
    allow_relative: bool = False

    # Allow same-document fragments (#foo).
    allow_fragment: bool = False

    # Allow protocol-relative URLs (//example.com).
    allow_protocol_relative: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_schemes", _lowercase_set(self.allowed_schemes))


@dataclass(frozen=True, slots=True)
class SafetyPolicy:
    """An allow-list deciding which raw tags may reach safe-mode output."""

    allowed_tags: Collection[str]
    allowed_attributes: Mapping[str, Collection[str]]
    url_attributes: Collection[str] = URL_ATTRIBUTES
    url_rule: UrlRule = field(default_factory=UrlRule)

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_tags", _lowercase_set(self.allowed_tags))

        if not isinstance(self.allowed_attributes, Mapping):
            raise TypeError("allowed_attributes must be a mapping of tag name to attribute names")
        normalized_attrs: dict[str, frozenset[str]] = {}
        for tag, attrs in self.allowed_attributes.items():
            normalized_attrs[str(tag).lower()] = _lowercase_set(attrs)
        object.__setattr__(self, "allowed_attributes", MappingProxyType(normalized_attrs))

        object.__setattr__(self, "url_attributes", _lowercase_set(self.url_attributes))


DEFAULT_URL_RULE: UrlRule = UrlRule()

DEFAULT_POLICY: SafetyPolicy = SafetyPolicy(
    allowed_tags=ALLOWED_TAGS,
    allowed_attributes=ALLOWED_ATTRIBUTES,
    url_rule=DEFAULT_URL_RULE,
)


def is_safe_url(url: str, rule: UrlRule = DEFAULT_URL_RULE) -> bool:
    """Return True if `url` may be emitted as a link or image source."""
    if not url:
        return False

    # No whitespace or control characters anywhere, eg: "java\tscript:"
    for ch in url:
        if ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F:
            return False

    lower = url.lower()
    if lower.startswith("//"):
        return rule.allow_protocol_relative
    if lower.startswith("#"):
        return rule.allow_fragment

    match = _URL_SCHEME_PATTERN.match(lower)
    if match is None:
        return rule.allow_relative

    scheme = match.group(1)
    if scheme not in rule.allowed_schemes:
        return False
    if scheme in OPAQUE_URL_SCHEMES:
        return True
    return lower.startswith("//", match.end())


def is_safe(tag: HtmlTag, *, policy: SafetyPolicy = DEFAULT_POLICY) -> bool:
    """Return True if `tag` may pass through unescaped under `policy`."""
    name = tag.name.lower()
    if name not in policy.allowed_tags:
        return False

    attributes = tag.attributes
    allowed = policy.allowed_attributes.get(name)
    if allowed is None:
        return len(attributes) == 0

    for attr_name in attributes:
        if attr_name.lower() not in allowed:
            return False

    for attr_name in policy.url_attributes:
        value = attributes.get(attr_name)
        if value is not None and not is_safe_url(value, policy.url_rule):
            return False

    return True

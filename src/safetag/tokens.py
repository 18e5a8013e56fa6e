from __future__ import annotations

from collections.abc import Iterator, Mapping

from .constants import DEFAULT_TAG_FLAGS, TAG_FLAGS, TagFlags
from .sanitize import DEFAULT_POLICY, SafetyPolicy
from .sanitize import is_safe as _is_safe


class Attributes(Mapping):
    """Read-only attribute map with case-insensitive names.

    Names keep the case they were written with; lookups and membership
    tests ignore case. Values are stored exactly as found in the source,
    without entity decoding.
    """

    __slots__ = ("_items",)

    def __init__(self, items=None):
        # lowercase name -> (name as written, value)
        self._items: dict[str, tuple[str, str]] = {}
        if items:
            pairs = items.items() if isinstance(items, Mapping) else items
            for name, value in pairs:
                if not self._add(name, value):
                    raise ValueError(f"Duplicate attribute: {name!r}")

    def _add(self, name: str, value: str) -> bool:
        key = name.lower()
        if key in self._items:
            return False
        self._items[key] = (name, value)
        return True

    def __getitem__(self, name: str) -> str:
        if not isinstance(name, str):
            raise KeyError(name)
        return self._items[name.lower()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        for name, _ in self._items.values():
            yield name

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other):
        if isinstance(other, Attributes):
            return self._lowered() == other._lowered()
        if isinstance(other, Mapping):
            return self._lowered() == {str(k).lower(): v for k, v in other.items()}
        return NotImplemented

    __hash__ = None  # Unhashable since we define __eq__

    def _lowered(self) -> dict[str, str]:
        return {key: value for key, (_, value) in self._items.items()}

    def __repr__(self):
        return f"Attributes({dict(self.items())!r})"


class HtmlTag:
    """One recognized opening tag, closing tag or comment.

    Comments are represented as a tag named "!" whose single "content"
    attribute holds the text between the comment markers.
    """

    __slots__ = ("_attributes", "_classification", "_closed", "_closing", "_name")

    COMMENT = "!"

    def __init__(self, name, attributes=None, *, closed=False, closing=False):
        if not name:
            raise ValueError("Tag name must not be empty")
        attrs = attributes if isinstance(attributes, Attributes) else Attributes(attributes)
        if closing and attrs:
            raise ValueError("Closing tags cannot carry attributes")
        self._name = name
        self._attributes = attrs
        self._closed = bool(closed)
        self._closing = bool(closing)
        self._classification = None

    @classmethod
    def comment(cls, content):
        attrs = Attributes()
        attrs._add("content", content)
        return cls(cls.COMMENT, attrs, closed=True)

    @property
    def name(self) -> str:
        return self._name

    @property
    def attributes(self) -> Attributes:
        return self._attributes

    @property
    def closed(self) -> bool:
        """True for self-closing tags like <br/> (and comments)."""
        return self._closed

    @property
    def closing(self) -> bool:
        """True for end tags like </div>."""
        return self._closing

    @property
    def is_comment(self) -> bool:
        return self._name == self.COMMENT

    @property
    def classification(self) -> TagFlags:
        # Concurrent first reads may both compute; the result is identical.
        flags = self._classification
        if flags is None:
            flags = TAG_FLAGS.get(self._name.lower(), DEFAULT_TAG_FLAGS)
            self._classification = flags
        return flags

    @property
    def is_block(self) -> bool:
        return bool(self.classification & TagFlags.BLOCK)

    @property
    def is_inline(self) -> bool:
        return bool(self.classification & TagFlags.INLINE)

    @property
    def needs_closing(self) -> bool:
        return not self.classification & TagFlags.NO_CLOSING

    def is_safe(self, *, policy: SafetyPolicy = DEFAULT_POLICY) -> bool:
        return _is_safe(self, policy=policy)

    def __eq__(self, other):
        if not isinstance(other, HtmlTag):
            return NotImplemented
        return (
            self._name.lower() == other._name.lower()
            and self._attributes == other._attributes
            and self._closed == other._closed
            and self._closing == other._closing
        )

    __hash__ = None  # Unhashable since we define __eq__

    def __repr__(self):
        if self.is_comment:
            return f"<comment {self._attributes.get('content', '')!r}>"
        if self._closing:
            return f"<end:{self._name}>"
        parts = [f"{name}={value!r}" for name, value in self._attributes.items()]
        attrs = (" " + " ".join(parts)) if parts else ""
        closing = " /" if self._closed else ""
        return f"<start:{self._name}{attrs}{closing}>"


class ParseError:
    """Why a recognition attempt failed, with the offset where it failed."""

    __slots__ = ("code", "message", "offset")

    def __init__(self, code, offset=None, message=None):
        self.code = code
        self.offset = offset
        self.message = message or code

    def __repr__(self):
        if self.offset is not None:
            return f"ParseError({self.code!r}, offset={self.offset})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        prefix = f"({self.offset}): " if self.offset is not None else ""
        if self.message != self.code:
            return f"{prefix}{self.code} - {self.message}"
        return f"{prefix}{self.code}"

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.offset == other.offset

    __hash__ = None  # Unhashable since we define __eq__

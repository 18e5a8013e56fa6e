"""Position-tracking cursor over a text buffer.

The recognizer only ever moves forward through the buffer, except when it
rewinds to a saved position after a failed attempt. Every skip method either
advances and returns True, or leaves the position alone and returns False.
"""

from __future__ import annotations


class StringScanner:
    __slots__ = ("buffer", "length", "mark", "position")

    def __init__(self, buffer: str, position: int = 0) -> None:
        self.buffer = buffer or ""
        self.length = len(self.buffer)
        self.position = min(max(position, 0), self.length)
        self.mark = self.position

    def __repr__(self) -> str:
        return f"StringScanner(position={self.position}, length={self.length})"

    @property
    def eof(self) -> bool:
        return self.position >= self.length

    @property
    def current(self) -> str:
        """Character at the cursor, or "" at end of input."""
        if self.position >= self.length:
            return ""
        return self.buffer[self.position]

    def peek(self, offset: int = 1) -> str:
        index = self.position + offset
        if index < 0 or index >= self.length:
            return ""
        return self.buffer[index]

    def set_mark(self) -> None:
        self.mark = self.position

    def extract(self) -> str:
        """Text between the mark and the cursor."""
        if self.mark >= self.position:
            return ""
        return self.buffer[self.mark : self.position]

    def skip_forward(self, count: int) -> None:
        self.position = min(self.position + count, self.length)

    def skip_char(self, char: str) -> bool:
        if self.position < self.length and self.buffer[self.position] == char:
            self.position += 1
            return True
        return False

    def skip_string(self, literal: str) -> bool:
        if self.buffer.startswith(literal, self.position):
            self.position += len(literal)
            return True
        return False

    def skip_whitespace(self) -> bool:
        start = self.position
        buffer = self.buffer
        while self.position < self.length and buffer[self.position].isspace():
            self.position += 1
        return self.position > start

    def skip_identifier(self) -> str | None:
        """Consume an identifier and return it, or return None.

        Identifiers start with a letter or underscore and continue with
        letters, digits or underscores.
        """
        buffer = self.buffer
        start = self.position
        if start >= self.length:
            return None
        first = buffer[start]
        if not (first.isalpha() or first == "_"):
            return None
        end = start + 1
        while end < self.length and (buffer[end].isalnum() or buffer[end] == "_"):
            end += 1
        self.position = end
        return buffer[start:end]

    def find(self, literal: str) -> bool:
        """Move the cursor to the next occurrence of `literal`.

        The cursor stays put when there is no occurrence.
        """
        index = self.buffer.find(literal, self.position)
        if index < 0:
            return False
        self.position = index
        return True

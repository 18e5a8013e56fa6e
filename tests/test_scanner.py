from __future__ import annotations

import unittest

from safetag.scanner import StringScanner


class TestStringScanner(unittest.TestCase):
    def test_current_peek_and_eof(self) -> None:
        s = StringScanner("ab")
        assert s.current == "a"
        assert s.peek() == "b"
        assert s.peek(2) == ""
        assert s.peek(-1) == ""
        assert not s.eof
        s.skip_forward(2)
        assert s.eof
        assert s.current == ""

    def test_position_is_clamped(self) -> None:
        assert StringScanner("abc", 10).position == 3
        assert StringScanner("abc", -4).position == 0
        assert StringScanner(None).length == 0

        s = StringScanner("abc")
        s.skip_forward(99)
        assert s.position == 3

    def test_skip_char_and_string(self) -> None:
        s = StringScanner("<!--x")
        assert not s.skip_char("!")
        assert s.skip_char("<")
        assert not s.skip_string("!-x")
        assert s.position == 1
        assert s.skip_string("!--")
        assert s.position == 4

    def test_skip_whitespace(self) -> None:
        s = StringScanner(" \t\n x")
        assert s.skip_whitespace()
        assert s.current == "x"
        assert not s.skip_whitespace()
        assert s.position == 4

    def test_skip_identifier(self) -> None:
        s = StringScanner("h1 class")
        assert s.skip_identifier() == "h1"
        assert s.position == 2

        s = StringScanner("_a9-b")
        assert s.skip_identifier() == "_a9"
        assert s.current == "-"

    def test_skip_identifier_rejects_bad_start(self) -> None:
        for text in ["1abc", "-x", " div", "", ">"]:
            s = StringScanner(text)
            assert s.skip_identifier() is None, text
            assert s.position == 0

    def test_find_moves_only_on_success(self) -> None:
        s = StringScanner("abc-->def")
        assert s.find("-->")
        assert s.position == 3

        s = StringScanner("abc--")
        assert not s.find("-->")
        assert s.position == 0

    def test_mark_and_extract(self) -> None:
        s = StringScanner('"value" rest', 1)
        s.set_mark()
        assert s.find('"')
        assert s.extract() == "value"

        s.set_mark()
        assert s.extract() == ""


if __name__ == "__main__":
    unittest.main()

import pytest

from parlance.blocks import n_block, n_blocks, parse_int, pop_chars
from parlance.parser import ParsingError


class TestPopChars:
    def test_takes_exactly_n(self) -> None:
        values, rest = pop_chars(3)("abcdef")

        assert values == ("abc",)
        assert str(rest) == "def"

    def test_n_equal_to_remaining_length(self) -> None:
        values, rest = pop_chars(2)("ab")

        assert values == ("ab",)
        assert len(rest) == 0

    def test_short_input_fails(self) -> None:
        """Fewer than n characters is a recoverable error, nothing is consumed."""
        res = pop_chars(3)("ab")

        assert isinstance(res, ParsingError)
        assert res.recoverable
        assert res.rest.pos == 0
        assert res.message == "expected 3 characters, found 2 before end of input"

    def test_zero(self) -> None:
        values, rest = pop_chars(0)("ab")

        assert values == ("",)
        assert str(rest) == "ab"

    def test_negative(self) -> None:
        with pytest.raises(ValueError):
            pop_chars(-1)


class TestBlocks:
    def test_parse_int(self) -> None:
        assert parse_int("42") == 42

    def test_n_block(self) -> None:
        values, rest = n_block("10abcdefghijrest")

        assert values == ("abcdefghij",)
        assert str(rest) == "rest"

    def test_n_blocks(self) -> None:
        """Blocks are parsed until the rest doesn't start with a length."""
        values, rest = n_blocks("5hallo7ingbertrest")

        assert values == ("hallo", "ingbert")
        assert str(rest) == "rest"

    def test_n_blocks_stops_before_short_block(self) -> None:
        values, rest = n_blocks("3abc9xy")

        assert values == ("abc",)
        assert str(rest) == "9xy"

    def test_n_blocks_needs_one_block(self) -> None:
        assert isinstance(n_blocks("0abc"), ParsingError)
        assert isinstance(n_blocks("5hal"), ParsingError)

import logging

import pytest

import parlance.parser
from parlance.parser import (
    ErrorKind,
    Input,
    NoParseError,
    ParsingError,
    ParsingSuccess,
    Parser,
    ParsingResult,
    and_then,
    bind,
    chain,
    choice,
    eoi,
    epsilon,
    fail,
    fmap,
    forward_decl,
    ignore,
    must,
    nothing,
    one_or_more,
    opt,
    or_else,
    pure,
    zero_or_more,
)
from parlance.text import char, word


class TestInput:
    def test_drop_returns_new_view(self) -> None:
        """Dropping characters leaves the original view untouched."""
        inp = Input("abc")
        rest = inp.drop(2)

        assert inp.pos == 0
        assert str(inp) == "abc"
        assert str(rest) == "c"
        assert len(rest) == 1

    def test_drop_is_clamped_to_end(self) -> None:
        """Dropping past the end gives an empty view."""
        rest = Input("ab").drop(5)

        assert rest.pos == 2
        assert not rest
        assert rest.peek() is None

    def test_line_col(self) -> None:
        """Line and column are 1-based."""
        assert Input("ab\ncd").line_col() == (1, 1)
        assert Input("ab\ncd", 4).line_col() == (2, 2)


class TestCore:
    def test_pure_consumes_nothing(self) -> None:
        """pure(v) produces v and leaves the input as is."""
        values, rest = pure(1)("abc")

        assert values == (1,)
        assert str(rest) == "abc"

    def test_bind_left_identity(self) -> None:
        """bind(pure(v), f) behaves like f(v)."""

        def f(c: str):
            return char(c)

        assert bind(pure("a"), f)("ab") == f("a")("ab")
        assert bind(pure("a"), f)("xb") == f("a")("xb")

    def test_bind_does_not_call_function_on_failure(self) -> None:
        """The function is only called after a success."""
        calls = []

        def f(c: str):
            calls.append(c)
            return char(c)

        res = bind(char("a"), f)("b")

        assert isinstance(res, ParsingError)
        assert calls == []

    def test_fmap_gets_values_as_arguments(self) -> None:
        """fmap replaces the produced values with a single value."""
        expr = fmap(lambda a, b: a + b, char("a") + char("b"))
        values, rest = expr("abc")

        assert values == ("ab",)
        assert str(rest) == "c"

    def test_fmap_propagates_failure(self) -> None:
        """fmap returns the failure of the inner parser unchanged."""
        assert (char("a") >> str.upper)("b") == char("a")("b")

    def test_ignore_keeps_rest(self) -> None:
        """ignore drops the values but consumes the input."""
        values, rest = ignore(char("a"))("ab")

        assert values == ()
        assert str(rest) == "b"

    def test_and_then_concatenates_values(self) -> None:
        """Sequencing is associative up to flattening."""
        a, b, c = char("a"), char("b"), char("c")

        assert and_then(and_then(a, b), c)("abcd") == and_then(a, and_then(b, c))("abcd")
        assert (a + b + c).parse("abc") == ("a", "b", "c")

    def test_and_then_returns_first_failure(self) -> None:
        """The failure of the second parser is reported at its position."""
        res = (char("a") + char("b"))("ax")

        assert isinstance(res, ParsingError)
        assert res.rest.pos == 1
        assert res.message == "expected any of \"b\", found 'x'"

    def test_or_else_backtracks_to_original_input(self) -> None:
        """The second alternative starts where the first one started."""
        expr = or_else(char("a") + char("b"), char("a") + char("c"))
        values, rest = expr("ac")

        assert values == ("a", "c")
        assert not rest

    def test_or_else_reports_last_failure(self) -> None:
        """When all alternatives fail the last failure is returned."""
        res = (char("a") | char("b"))("c")

        assert isinstance(res, ParsingError)
        assert res.message == "expected any of \"b\", found 'c'"

    def test_or_else_passes_fatal_error_through(self) -> None:
        """A fatal failure is not a reason to try another alternative."""
        calls = []

        def other(inp: Input):
            calls.append(inp)
            return ParsingSuccess(("other",), inp)

        res = or_else(fail("boom", fatal=True), parlance.parser.Parser(other))("x")

        assert isinstance(res, ParsingError)
        assert res.kind is ErrorKind.FATAL
        assert res.message == "boom"
        assert calls == []

    def test_choice_order_decides(self) -> None:
        """The first matching alternative wins on ambiguous input."""
        assert choice(char("a"), word("a")).parse("aa") == ("a",)
        assert choice(word("a"), char("a")).parse("aa") == ("aa",)

    def test_choice_is_associative(self) -> None:
        a, b, c = char("a"), char("b"), char("c")

        for text in ["a", "b", "c", "d"]:
            assert choice(a, choice(b, c))(text) == choice(choice(a, b), c)(text)

    def test_chain_and_choice_need_two_parsers(self) -> None:
        with pytest.raises(TypeError):
            chain(char("a"))
        with pytest.raises(TypeError):
            choice(char("a"))

    def test_chain_runs_in_order(self) -> None:
        assert chain(char("a"), char("b"), char("c"), char("d")).parse("abcd") == (
            "a",
            "b",
            "c",
            "d",
        )

    def test_user_exception_propagates(self) -> None:
        """Errors raised by functions are not parsing failures."""
        bad = char("a") >> int

        with pytest.raises(ValueError):
            bad("a")
        with pytest.raises(ValueError):
            (bad | char("a"))("a")

    def test_parser_is_reusable(self) -> None:
        expr = char("a") + char("b")

        assert expr.parse("ab") == ("a", "b")
        assert isinstance(expr("ax"), ParsingError)
        assert expr.parse("abab") == ("a", "b")

    def test_repr_uses_name(self) -> None:
        assert repr(char("a")) == "<Parser 'a'>"
        assert repr(char("a").named("letter a")) == "<Parser letter a>"


class TestRepetition:
    def test_zero_or_more_on_no_match(self) -> None:
        """Zero repetitions is a success with untouched input."""
        values, rest = zero_or_more(char("abc"))("xyz")

        assert values == ()
        assert rest.pos == 0

    def test_one_or_more_on_no_match(self) -> None:
        res = one_or_more(char("abc"))("xyz")

        assert isinstance(res, ParsingError)
        assert res.recoverable

    def test_zero_or_more_flattens_values(self) -> None:
        values, rest = zero_or_more(char("a") + char("b"))("ababx")

        assert values == ("a", "b", "a", "b")
        assert str(rest) == "x"

    def test_zero_or_more_stops_where_failing_attempt_started(self) -> None:
        """A partially matched repetition is not consumed."""
        values, rest = zero_or_more(char("a") + char("b"))("abac")

        assert values == ("a", "b")
        assert str(rest) == "ac"

    def test_zero_or_more_passes_fatal_error_through(self) -> None:
        expr = zero_or_more(char("a") | fail("stop", fatal=True))
        res = expr("aab")

        assert isinstance(res, ParsingError)
        assert res.kind is ErrorKind.FATAL
        assert res.rest.pos == 2

    def test_opt_on_no_match(self) -> None:
        values, rest = opt(char("a"))("b")

        assert values == ()
        assert rest.pos == 0

    def test_opt_on_match(self) -> None:
        assert opt(char("a")).parse("ab") == ("a",)


class TestPrimitives:
    def test_nothing_and_epsilon(self) -> None:
        assert nothing.parse("abc") == ()
        assert epsilon.parse("abc") == ("",)

    def test_eoi_on_empty_input(self) -> None:
        values, rest = eoi("")

        assert values == ()
        assert not rest

    def test_eoi_on_trailing_characters(self) -> None:
        """Trailing characters are a recoverable parse error."""
        res = eoi("x")

        assert isinstance(res, ParsingError)
        assert res.recoverable
        assert res.message == "trailing characters"
        assert (eoi | char("x")).parse("x") == ("x",)

    def test_fail(self) -> None:
        res = fail("nope")("abc")

        assert isinstance(res, ParsingError)
        assert res.kind is ErrorKind.PARSE_ERROR
        assert res.message == "nope"

    def test_must_makes_failure_fatal(self) -> None:
        """Alternatives after a must() failure are not tried."""
        res = (must(char("a"), "need an a") | char("b"))("b")

        assert isinstance(res, ParsingError)
        assert res.kind is ErrorKind.FATAL
        assert res.message == "need an a"

    def test_must_keeps_success(self) -> None:
        assert must(char("a")).parse("a") == ("a",)

    def test_forward_decl(self) -> None:
        """Forward declarations allow recursive grammars."""
        expr = forward_decl()
        expr.define(char("(") + opt(expr) + char(")"))

        assert expr.parse("(())") == ("(", "(", ")", ")")
        assert isinstance(expr("(()"), ParsingError)

    def test_undefined_forward_decl(self) -> None:
        with pytest.raises(NotImplementedError):
            forward_decl()("x")


class TestErrors:
    def test_parse_raises_with_position(self) -> None:
        expr = char("a") + char("\n") + char("b")

        with pytest.raises(NoParseError) as exc_info:
            expr.parse("a\nc")

        assert str(exc_info.value) == "2,1: expected any of \"b\", found 'c'"
        assert exc_info.value.kind is ErrorKind.PARSE_ERROR

    def test_unpacking_failure_raises(self) -> None:
        with pytest.raises(NoParseError):
            values, rest = char("a")("b")

    def test_values_of_failure_raises(self) -> None:
        with pytest.raises(NoParseError):
            char("a")("b").values


class TestDebugLog:
    def test_parsers_log_when_debug_is_enabled(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setattr(parlance.parser, "debug", True)
        caplog.set_level(logging.DEBUG, logger="parlance")
        expr = zero_or_more(char("a"))

        expr("aab")

        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("trying ") for m in messages)
        assert any("*matched* 'a'" in m for m in messages)
        assert any("*matched* 2 instances" in m for m in messages)

    def test_flag_is_read_when_parser_is_built(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Parsers built with debug off stay silent after it is turned on."""
        caplog.set_level(logging.DEBUG, logger="parlance")
        expr = zero_or_more(char("a"))
        monkeypatch.setattr(parlance.parser, "debug", True)

        expr("aab")

        assert caplog.records == []


class TestFatalPropagation:
    @pytest.mark.parametrize(
        "combine",
        [
            lambda p: p + char("x"),
            lambda p: -p,
            lambda p: p >> str.upper,
            lambda p: p.bind(char),
            lambda p: opt(p),
            lambda p: zero_or_more(p),
            lambda p: one_or_more(p),
            lambda p: must(p),
            lambda p: choice(p, char("x")),
            lambda p: choice(char("y"), p, char("x")),
        ],
        ids=[
            "and_then",
            "ignore",
            "fmap",
            "bind",
            "opt",
            "zero_or_more",
            "one_or_more",
            "must",
            "choice_first",
            "choice_middle",
        ],
    )
    def test_fatal_error_is_returned_unchanged(self, combine) -> None:
        """No combinator turns a fatal failure into a success or another error."""
        res = combine(fail("stop", fatal=True))("x")

        assert res == ParsingError(Input("x"), "stop", ErrorKind.FATAL)


class TestTyping:
    def test_parser_and_result_are_generic(self) -> None:
        assert len(Parser.__parameters__) == 1
        assert len(ParsingResult.__parameters__) == 1
        assert Parser[str] is not None
        assert ParsingResult[int] is not None

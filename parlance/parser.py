# Copyright © 2009/2023 Andrey Vlasovskikh
#
# Permission is hereby granted, free of charge, to any person obtaining a copy of this
# software and associated documentation files (the "Software"), to deal in the Software
# without restriction, including without limitation the rights to use, copy, modify,
# merge, publish, distribute, sublicense, and/or sell copies of the Software, and to
# permit persons to whom the Software is furnished to do so, subject to the following
# conditions:
#
# The above copyright notice and this permission notice shall be included in all copies
# or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED,
# INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A
# PARTICULAR PURPOSE AND NON-INFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT
# HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF
# CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
# OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.

"""Monadic parsing combinators for text.

A parser is a value that takes the input text and either succeeds, producing an
ordered tuple of values together with the rest of the input, or fails with a
`ParsingError`. Parsers are combined into bigger parsers until they cover the whole
grammar you want to parse.

The structure of the language:

* Class `Parser`
    * All the primitives and combinators of the language return `Parser` objects
    * It defines the main `Parser.parse(text)` method
* Input and results
    * `Input`, `ParsingSuccess`, `ParsingError`, `ErrorKind`, `NoParseError`
* Primitive parsers
    * `pure(x)`, `nothing`, `epsilon`, `eoi`, `fail(msg)`, `forward_decl()`
* Parser combinators
    * `p1 + p2`, `p1 | p2`, `p >> f`, `p.bind(f)`, `-p`, `chain(...)`,
      `choice(...)`, `zero_or_more(p)`, `one_or_more(p)`, `opt(p)`, `must(p)`
* Abstraction
    * Use regular Python variables `p = ...  # Expression of type Parser` to define new
      rules (non-terminals) of your grammar

The character-level parsers (`char`, `word`, numbers, identifiers) are defined in
`parlance.text`.

A mismatch is not an exception: every parser returns a result value, and the
combinators inspect its `kind`. Only recoverable parse errors make `p1 | p2` try the
other alternative or stop the repetition of `zero_or_more(p)`. Fatal errors are
passed through every combinator unchanged.
"""

__all__ = [
    "pure",
    "return_",
    "nothing",
    "epsilon",
    "eoi",
    "fail",
    "fmap",
    "action",
    "bind",
    "ignore",
    "and_then",
    "or_else",
    "chain",
    "choice",
    "zero_or_more",
    "one_or_more",
    "zero_or_one",
    "opt",
    "must",
    "forward_decl",
    "Parser",
    "Input",
    "ErrorKind",
    "NoParseError",
    "ParsingResult",
    "ParsingSuccess",
    "ParsingError",
]

import dataclasses as dc
import enum
import functools
import logging
import sys
from collections.abc import Iterator, Iterable
from typing import (
    Any,
    Callable,
    Generic,
    Optional,
    TypeVar,
    Union,
    Protocol,
    final,
)

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

log = logging.getLogger("parlance")

debug = False

_A = TypeVar("_A")
_B = TypeVar("_B")
_C = TypeVar("_C")

# Produced value
_R = TypeVar("_R", covariant=True)

_DC_KWARGS: dict[str, bool] = {}
if sys.version_info >= (3, 10):
    _DC_KWARGS["slots"] = True


@final
@dc.dataclass(frozen=True, repr=False, **_DC_KWARGS)
class Input:
    """Immutable view of the text that is left to parse.

    It consists of the whole text being parsed and the current position `pos` in it.
    Consuming characters creates a new view, the old one stays valid, so an
    alternative can be tried again from the same place.
    """

    text: str
    pos: int = 0

    def peek(self) -> Optional[str]:
        """Return the next character, or `None` at the end of input."""
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def take(self, k: int) -> str:
        return self.text[self.pos : self.pos + k]

    def drop(self, k: int) -> "Input":
        """Return the view that starts `k` characters further."""
        return Input(self.text, min(self.pos + k, len(self.text)))

    def line_col(self) -> tuple[int, int]:
        """Return the line and the column of the current position, both 1-based."""
        line = self.text.count("\n", 0, self.pos) + 1
        col = self.pos - self.text.rfind("\n", 0, self.pos)
        return line, col

    def __len__(self) -> int:
        return len(self.text) - self.pos

    def __bool__(self) -> bool:
        return self.pos < len(self.text)

    def __str__(self) -> str:
        return self.text[self.pos :]

    def __repr__(self) -> str:
        return "Input(%r, %r)" % (self.text, self.pos)


def _as_input(text: Union[str, Input]) -> Input:
    if isinstance(text, Input):
        return text
    return Input(text)


class ErrorKind(enum.Enum):
    """Kind of a parsing failure.

    `PARSE_ERROR` means "the parser did not match here" and lets the alternatives be
    tried. `FATAL` stops the whole parse.
    """

    PARSE_ERROR = "parse-error"
    FATAL = "fatal"


class NoParseError(Exception):
    def __init__(
        self, msg: str, pos: Input, kind: ErrorKind = ErrorKind.PARSE_ERROR
    ) -> None:
        self.msg = msg
        self.pos = pos
        self.kind = kind

    def __str__(self) -> str:
        return self.msg


class ParsingResult(Protocol[_R], Iterable):
    """Result monad for parsing combinators.

    Immutable (objects' data should not be changed after creation).
    """

    rest: Input

    def map(self, f: Callable[..., _C]) -> "ParsingResult[_C]":
        ...

    def bind(
        self, f: Callable[[tuple[_R, ...], Input], "ParsingResult[_C]"]
    ) -> "ParsingResult[_C]":
        ...

    def __add__(self, other: "ParsingResult[_C]") -> "ParsingResult":
        ...


@final
@dc.dataclass(**_DC_KWARGS)
class ParsingSuccess(ParsingResult[_R]):
    values: tuple[_R, ...]
    rest: Input

    def __iter__(self) -> Iterator:
        yield self.values
        yield self.rest

    def map(self, f: Callable[..., _C]) -> ParsingResult[_C]:
        return ParsingSuccess((f(*self.values),), self.rest)

    def bind(
        self, f: Callable[[tuple[_R, ...], Input], ParsingResult[_C]]
    ) -> ParsingResult[_C]:
        return f(self.values, self.rest)

    def __add__(self, other: ParsingResult[_C]) -> ParsingResult:
        # The other result continues where this one stopped
        if isinstance(other, ParsingSuccess):
            return ParsingSuccess(self.values + other.values, other.rest)
        return other


@final
@dc.dataclass(**_DC_KWARGS)
class ParsingError(ParsingResult[_R]):
    rest: Input
    message: str = "got unexpected input"
    kind: ErrorKind = ErrorKind.PARSE_ERROR

    @property
    def recoverable(self) -> bool:
        return self.kind is ErrorKind.PARSE_ERROR

    def as_fatal(self, message: Optional[str] = None) -> Self:
        return ParsingError(self.rest, message or self.message, ErrorKind.FATAL)

    @property
    def _error(self) -> NoParseError:
        return NoParseError(self.message, self.rest, self.kind)

    @property
    def values(self) -> tuple[_R, ...]:
        raise self._error

    def __iter__(self) -> Iterator:
        raise self._error

    def map(self, f: Callable[..., _C]) -> ParsingResult[_C]:
        return self  # type: ignore

    def bind(
        self, f: Callable[[tuple[_R, ...], Input], ParsingResult[_C]]
    ) -> ParsingResult[_C]:
        return self  # type: ignore

    def __add__(self, other: ParsingResult[_C]) -> ParsingResult:
        return self


_ParserFn = Callable[[Input], ParsingResult[_B]]
_ParserObjOrFn = Union["Parser[_B]", _ParserFn[_B]]


@final
@dc.dataclass(frozen=True, init=False, repr=False, **_DC_KWARGS)
class Parser(Generic[_B]):
    """A parser object that can parse text or can be combined with other parsers
    using `+`, `|`, `>>`, `-`, `zero_or_more()`, and other parsing combinators.

    In order to define a parser for your grammar:

    1. You start with primitive parsers like `char(chars)` from `parlance.text`,
       `pure(x)`, `eoi`, `forward_decl()`
    2. You use parsing combinators `p1 + p2`, `p1 | p2`, `p >> f`, `p.bind(f)`,
       `zero_or_more(p)`, and others to combine parsers into a more complex parser
    3. You can assign complex parsers to variables to define names that correspond to
       the rules of your grammar

    A parser never changes after it is created (except for `define()` of a forward
    declaration), so the same object can be used for many inputs at once.

    !!! Note

        The constructor `Parser.__init__()` is considered **internal**. Use
        primitive parsers and parsing combinators to construct new parsers.
    """

    run: _ParserFn[_B]
    """Run the parser against the input view.

    Type: `(Input) -> ParsingResult[B]`

    It returns `ParsingSuccess(values, rest)` or `ParsingError(rest, message, kind)`.
    It doesn't raise on a mismatch.
    """

    name: str = dc.field(compare=False)

    def __init__(self, p: _ParserObjOrFn[_B]) -> None:
        """Wrap the parser function `p` into a `Parser` object."""
        self.define(p)

    def named(self, name: str) -> Self:
        """Specify the name of the parser for easier debugging.

        Type: `(str) -> Parser`

        This name is used in the debug-level parsing log and in `repr()`.

        Examples:

        ```pycon
        >>> from parlance.text import char
        >>> expr = (char("x") + char("y")).named("expr")
        >>> expr.name
        'expr'

        ```

        !!! Note

            You can enable the parsing log this way:

            ```python
            import logging
            logging.basicConfig(level=logging.DEBUG)
            import parlance.parser
            parlance.parser.debug = True
            ```

            The flag is read when parsers are created, so set it before you define
            your grammar.
        """
        object.__setattr__(self, "name", name)
        return self

    def _named_from(self, p: _ParserObjOrFn[_B]) -> Self:
        name = getattr(p, "name", None) or p.__doc__ or getattr(p, "__name__", None)
        if name is not None:
            return self.named(name)
        return self

    def define(self, p: _ParserObjOrFn[_B]) -> None:
        """Define the parser created earlier as a forward declaration.

        Type: `(Parser) -> None`

        Use `p = forward_decl()` in combination with `p.define(...)` to define
        recursive parsers.

        See the examples in the docs for `forward_decl()`.
        """
        f = p.run if isinstance(p, Parser) else p
        object.__setattr__(self, "run", self._wrap_for_debug(f) if debug else f)

        self._named_from(p)

    def _wrap_for_debug(self, f: _ParserFn[_B]) -> _ParserFn[_B]:
        def run_parser_verbose(inp: Input) -> ParsingResult[_B]:
            log.debug("trying %s at %d" % (self.name, inp.pos))
            return f(inp)

        return run_parser_verbose

    def __call__(self, text: Union[str, Input]) -> ParsingResult[_B]:
        """Run the parser against a string or an `Input` view and return the result.

        Type: `(str | Input) -> ParsingResult[B]`

        A successful result unpacks into the produced values and the rest of the
        input:

        ```pycon
        >>> from parlance.text import word
        >>> values, rest = word("abc")("aabbccx")
        >>> values
        ('aabbcc',)
        >>> str(rest)
        'x'

        ```
        """
        return self.run(_as_input(text))

    def parse(self, text: Union[str, Input]) -> tuple[_B, ...]:
        """Parse the text and return the tuple of produced values.

        Type: `(str | Input) -> tuple[B, ...]`

        The rest of the input is ignored, add `+ eoi` to your parser if the whole
        text must match. If the parser fails, it raises `NoParseError` with the line
        and the column of the failure in its message.

        Examples:

        ```pycon
        >>> from parlance.text import char
        >>> expr = char("x") + char("y")
        >>> expr.parse("xy")
        ('x', 'y')
        >>> expr.parse("xz")
        Traceback (most recent call last):
            ...
        parlance.parser.NoParseError: 1,2: expected any of "y", found 'z'

        ```
        """
        try:
            (values, _) = self.run(_as_input(text))
            return values
        except NoParseError as e:
            _format_parsing_error(e)
            raise

    def __add__(self, other: "Parser[_C]") -> "Parser[Union[_B, _C]]":
        """Sequential combination of parsers. It runs this parser, then the other
        parser on the rest of the input.

        The produced values of the resulting parser are the values of this parser
        followed by the values of the other one. The first failure is returned.

        Examples:

        ```pycon
        >>> from parlance.text import char
        >>> expr = char("x") + char("y") + char("z")
        >>> expr.parse("xyz")
        ('x', 'y', 'z')

        ```
        """

        @parser("(%s, %s)" % (self.name, other.name))
        def _add(inp: Input) -> ParsingResult:
            res_l = self.run(inp)
            if isinstance(res_l, ParsingSuccess):
                return res_l + other.run(res_l.rest)
            return res_l

        return _add

    def __or__(self, other: "Parser[_C]") -> "Parser[Union[_B, _C]]":
        """Choice combination of parsers.

        It runs this parser and returns its result. If the parser fails with a
        recoverable error, it runs the other parser at the same point in input. A
        fatal error is returned without trying the other parser.

        Examples:

        ```pycon
        >>> from parlance.text import char
        >>> expr = char("x") | char("y")
        >>> expr.parse("x")
        ('x',)
        >>> expr.parse("y")
        ('y',)

        ```
        """

        @parser(f"{self.name} or {other.name}")
        def _or(inp: Input) -> ParsingResult:
            res = self.run(inp)
            if isinstance(res, ParsingError) and res.recoverable:
                return other.run(inp)
            return res

        return _or

    def __rshift__(self, f: Callable[..., _C]) -> "Parser[_C]":
        """Transform the produced values by applying the specified function.

        Type: `(Callable[..., C]) -> Parser[C]`

        The function gets the produced values as its positional arguments. Its return
        value becomes the only produced value of the resulting parser.

        Examples:

        ```pycon
        >>> from parlance.text import digits
        >>> expr = digits >> int
        >>> expr.parse("42")
        (42,)

        ```
        """

        @parser(self.name)
        def _shift(inp: Input) -> ParsingResult[_C]:
            return self.run(inp).map(f)

        return _shift

    def bind(self, f: Callable[..., "Parser[_C]"]) -> "Parser[_C]":
        """Bind the parser to a monadic function that returns a new parser.

        Type: `(Callable[..., Parser[C]]) -> Parser[C]`

        Also known as `>>=` in Haskell. The function gets the produced values as its
        positional arguments, and the parser it returns is run on the rest of the
        input. This way the values parsed earlier decide how the rest is parsed.
        """

        @parser(f"({self.name} >>=)")
        def _bind(inp: Input) -> ParsingResult[_C]:
            res = self.run(inp)
            return res.bind(lambda values, rest: f(*values).run(rest))

        return _bind

    def __neg__(self) -> "Parser[_B]":
        """Return a parser that consumes the same input, but produces no values.

        Type: `(Parser[B]) -> Parser[B]`

        You can use it for throwing away elements of concrete syntax (e.g. `","`,
        `";"`).

        Examples:

        ```pycon
        >>> from parlance.text import char
        >>> expr = char("x") + -char(",") + char("y")
        >>> expr.parse("x,y")
        ('x', 'y')

        ```
        """

        @parser(self.name)
        def _ignored(inp: Input) -> ParsingResult:
            res = self.run(inp)
            if isinstance(res, ParsingSuccess):
                return ParsingSuccess((), res.rest)
            return res

        return _ignored

    def __repr__(self) -> str:
        return "<Parser %s>" % (self.name,)


def parser(name: str) -> Callable[[_ParserFn[_B]], Parser[_B]]:
    """Decorator to create named parsers directly."""

    def _parser(f: _ParserFn[_B]) -> Parser[_B]:
        return Parser(f).named(name)

    return _parser


def _format_parsing_error(e: NoParseError) -> None:
    line, col = e.pos.line_col()
    e.msg = f"{line},{col}: {e.msg}"


def pure(x: _A) -> Parser[_A]:
    """Wrap any object into a parser.

    Type: `(A) -> Parser[A]`

    A pure parser doesn't consume any input, it just produces its pure `x` value.

    Also known as `return` in Haskell.
    """

    @parser("(pure %r)" % (x,))
    def _pure(inp: Input) -> ParsingResult[_A]:
        return ParsingSuccess((x,), inp)

    return _pure


return_ = pure


@parser("nothing")
def nothing(inp: Input) -> ParsingResult:
    """A parser that produces no values and consumes no input."""
    return ParsingSuccess((), inp)


epsilon = pure("").named("epsilon")


@parser("end of input")
def eoi(inp: Input) -> ParsingResult:
    """A parser that fails if there are any characters left in the input.

    The failure is a recoverable parse error, so `eoi` can be used as an alternative
    like any other parser.
    """
    if not inp:
        return ParsingSuccess((), inp)
    return ParsingError(inp, "trailing characters")


def fail(message: str, fatal: bool = False) -> Parser[Any]:
    """Return a parser that always fails with the message."""
    kind = ErrorKind.FATAL if fatal else ErrorKind.PARSE_ERROR

    @parser("(fail %r)" % (message,))
    def _fail(inp: Input) -> ParsingResult:
        return ParsingError(inp, message, kind)

    return _fail


def fmap(f: Callable[..., _C], p: Parser[_B]) -> Parser[_C]:
    """An alias for `p >> f`."""
    return p >> f


action = fmap


def bind(p: Parser[_B], f: Callable[..., Parser[_C]]) -> Parser[_C]:
    """An alias for `p.bind(f)`."""
    return p.bind(f)


def ignore(p: Parser[_B]) -> Parser[_B]:
    """An alias for `-p`."""
    return -p


def and_then(p1: Parser[_A], p2: Parser[_B]) -> Parser[Union[_A, _B]]:
    """An alias for `p1 + p2`."""
    return p1 + p2


def or_else(p1: Parser[_A], p2: Parser[_B]) -> Parser[Union[_A, _B]]:
    """An alias for `p1 | p2`."""
    return p1 | p2


def chain(p1: Parser[Any], p2: Parser[Any], *ps: Parser[Any]) -> Parser[Any]:
    """Return a parser that runs all the parsers in sequence.

    Each one starts off where the previous one stopped.
    """
    return functools.reduce(and_then, ps, p1 + p2)


def choice(p1: Parser[Any], p2: Parser[Any], *ps: Parser[Any]) -> Parser[Any]:
    """Return a parser that tries the parsers one by one at the same point in input.

    The first success becomes the result. If all of them fail, the failure of the
    last one is returned.
    """
    return functools.reduce(or_else, ps, p1 | p2)


def zero_or_more(p: Parser[_B]) -> Parser[_B]:
    """Return a parser that applies the parser `p` as many times as it succeeds at
    parsing the input.

    The produced values of all the applications are joined into one tuple. If `p`
    never succeeds, the result is an empty tuple and the input is left untouched. A
    fatal error of `p` is returned as is.

    Examples:

    ```pycon
    >>> from parlance.text import char
    >>> expr = zero_or_more(char("x"))
    >>> expr.parse("xxxy")
    ('x', 'x', 'x')
    >>> expr.parse("y")
    ()

    ```

    !!! Warning

        The parser `p` must consume at least one character every time it succeeds,
        otherwise `zero_or_more(p)` never stops.
    """

    verbose = debug

    @parser("{ %s }" % p.name)
    def _many(inp: Input) -> ParsingResult[_B]:
        acc: list = []
        n = 0
        while True:
            res = p.run(inp)
            if isinstance(res, ParsingSuccess):
                acc.extend(res.values)
                inp = res.rest
                n += 1
            elif res.recoverable:
                break
            else:
                return res

        if verbose:
            log.debug(f"*matched* {n} instances of {_many.name}, new state = {inp.pos}")
        return ParsingSuccess(tuple(acc), inp)

    return _many


def one_or_more(p: Parser[_B]) -> Parser[_B]:
    """Return a parser that applies the parser `p` one or more times.

    A similar parser combinator `zero_or_more(p)` means apply `p` zero or more times,
    whereas `one_or_more(p)` means apply `p` one or more times.

    Examples:

    ```pycon
    >>> from parlance.text import char
    >>> expr = one_or_more(char("x"))
    >>> expr.parse("xx")
    ('x', 'x')
    >>> expr.parse("y")
    Traceback (most recent call last):
        ...
    parlance.parser.NoParseError: 1,1: expected any of "x", found 'y'

    ```
    """
    return (p + zero_or_more(p)).named("(%s, { %s })" % (p.name, p.name))


def zero_or_one(p: Parser[_B]) -> Parser[_B]:
    """Return a parser that produces no values if the parser `p` fails."""
    return (p | nothing).named("[ %s ]" % (p.name,))


opt = zero_or_one


def must(p: Parser[_B], message: Optional[str] = None) -> Parser[_B]:
    """Return a parser that turns a recoverable failure of `p` into a fatal one.

    Use it once the input can't be anything else, so that the alternatives around
    it are not tried anymore.
    """

    @parser(f"must({p.name})")
    def _must(inp: Input) -> ParsingResult:
        res = p.run(inp)
        if isinstance(res, ParsingError) and res.recoverable:
            return res.as_fatal(message)
        return res

    return _must


def forward_decl() -> Parser[Any]:
    """Return an undefined parser that can be used as a forward declaration.

    Type: `Parser`

    Use `p = forward_decl()` in combination with `p.define(...)` to define recursive
    parsers.

    Examples:

    ```pycon
    >>> from parlance.text import char
    >>> expr = forward_decl()
    >>> expr.define(char("(") + opt(expr) + char(")"))
    >>> expr.parse("(())")
    ('(', '(', ')', ')')

    ```
    """

    @parser("forward_decl()")
    def f(_inp: Any) -> Any:
        raise NotImplementedError("you must define() a forward_decl somewhere")

    return f


if __name__ == "__main__":
    import doctest

    doctest.testmod()

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

"""Character-level parsers.

`char(chars)` is the only primitive here, everything else is a combination of it
with the combinators from `parlance.parser`. Every parser produces strings: `char`
produces one-character strings and `join(p)` folds them into a single token.

Examples:

```pycon
>>> from parlance.text import integer, decimal, identifier
>>> integer.parse("-042rest")
('-042',)
>>> decimal.parse("3.14,")
('3.14',)
>>> identifier.parse("x1 y2")
('x1',)

```
"""

__all__ = [
    "char",
    "join",
    "word",
    "space",
    "tab",
    "nl",
    "spaces",
    "tabs",
    "nls",
    "ws",
    "opt_ws",
    "positive_digit",
    "digit",
    "digits",
    "positive_integer",
    "non_negative_integer",
    "opt_sign",
    "integer",
    "decimal",
    "lower_char",
    "upper_char",
    "alpha_char",
    "alphanum_char",
    "lower_word",
    "upper_word",
    "alpha_word",
    "alphanum_word",
    "capitalized",
    "identifier",
]

import logging
import string

import parlance.parser as _core
from parlance.parser import (
    Input,
    Parser,
    ParsingError,
    ParsingResult,
    ParsingSuccess,
    chain,
    choice,
    one_or_more,
    opt,
    parser,
)

log = logging.getLogger("parlance")


def char(chars: str) -> Parser[str]:
    """Return a parser that parses a single character, if it occurs in `chars`.

    Type: `(str) -> Parser[str]`

    The produced value is the character itself.

    Examples:

    ```pycon
    >>> expr = char("ab")
    >>> expr.parse("b")
    ('b',)
    >>> expr.parse("")
    Traceback (most recent call last):
        ...
    parlance.parser.NoParseError: 1,1: expected any of "ab", found end of input

    ```
    """
    charset = frozenset(chars)
    verbose = _core.debug

    @parser(repr(chars))
    def _char(inp: Input) -> ParsingResult[str]:
        c = inp.peek()
        if c is not None and c in charset:
            rest = inp.drop(1)
            if verbose:
                log.debug("*matched* %r, new state = %d" % (c, rest.pos))
            return ParsingSuccess((c,), rest)

        found = "end of input" if c is None else repr(c)
        if verbose:
            log.debug("failed %s at %d, expected: %s" % (found, inp.pos, _char.name))
        return ParsingError(inp, f'expected any of "{chars}", found {found}')

    return _char


def _concat(*values: str) -> str:
    return "".join(values)


def join(p: Parser[str]) -> Parser[str]:
    """Return a parser that joins the strings produced by `p` into a single string."""
    return (p >> _concat).named(p.name)


def word(chars: str) -> Parser[str]:
    """Return a parser that parses the longest non-empty run of characters from
    `chars` as a single string.

    Examples:

    ```pycon
    >>> expr = word("abc")
    >>> expr.parse("aabbccx")
    ('aabbcc',)

    ```
    """
    return join(one_or_more(char(chars))).named("word(%r)" % (chars,))


space = char(" ")
tab = char("\t")
nl = char("\n")
spaces = word(" ")
tabs = word("\t")
nls = word("\n")
ws = word(" \t\n").named("whitespace")
opt_ws = opt(ws)

positive_digit = char("123456789")
digit = char(string.digits).named("digit")
digits = join(one_or_more(digit)).named("digits")
positive_integer = join(chain(positive_digit, opt(digits))).named("positive integer")
# Leading zeros stay in the token: "042" is one non-negative integer
non_negative_integer = choice(join(chain(char("0"), opt(digits))), positive_integer)
opt_sign = opt(char("-+"))
integer = join(chain(opt_sign, non_negative_integer)).named("integer")
decimal = join(chain(integer, opt(chain(char("."), digits)))).named("decimal")

lower_char = char(string.ascii_lowercase)
upper_char = char(string.ascii_uppercase)
alpha_char = choice(lower_char, upper_char)
alphanum_char = choice(lower_char, upper_char, digit)

lower_word = word(string.ascii_lowercase)
upper_word = word(string.ascii_uppercase)
alpha_word = join(one_or_more(alpha_char))
alphanum_word = join(one_or_more(alphanum_char))

capitalized = join(chain(upper_char, opt(lower_word))).named("capitalized")
identifier = join(chain(alpha_char, opt(alphanum_word))).named("identifier")

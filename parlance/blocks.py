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

"""Length-prefixed blocks.

The length of a block is data, not grammar: `n_block` parses a positive integer `n`
and then takes exactly `n` characters, whatever they are. This can't be expressed
with `+` and `|` alone, it needs `Parser.bind()`.

Examples:

```pycon
>>> from parlance.blocks import n_blocks
>>> values, rest = n_blocks("5hallo7ingbertrest")
>>> values
('hallo', 'ingbert')
>>> str(rest)
'rest'

```
"""

__all__ = [
    "pop_chars",
    "parse_int",
    "n_block",
    "n_blocks",
]

import logging

import parlance.parser as _core
from parlance.parser import (
    Input,
    Parser,
    ParsingError,
    ParsingResult,
    ParsingSuccess,
    bind,
    fmap,
    one_or_more,
    parser,
)
from parlance.text import positive_integer

log = logging.getLogger("parlance")


def pop_chars(n: int) -> Parser[str]:
    """Return a parser that takes the next `n` characters as a single string.

    Type: `(int) -> Parser[str]`

    If fewer than `n` characters are left, the parser fails with a recoverable
    error and consumes nothing.
    """
    if n < 0:
        raise ValueError(f"cannot take a negative number of characters: {n}")
    verbose = _core.debug

    @parser(f"pop_chars({n})")
    def _pop_chars(inp: Input) -> ParsingResult[str]:
        if len(inp) < n:
            return ParsingError(
                inp, f"expected {n} characters, found {len(inp)} before end of input"
            )
        rest = inp.drop(n)
        if verbose:
            log.debug("*matched* block of %d, new state = %d" % (n, rest.pos))
        return ParsingSuccess((inp.take(n),), rest)

    return _pop_chars


def parse_int(s: str) -> int:
    return int(s)


n_block = bind(fmap(parse_int, positive_integer), pop_chars).named("n_block")
n_blocks = one_or_more(n_block).named("n_blocks")

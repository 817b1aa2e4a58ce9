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

"""Monadic parser combinators for text.

See `parlance.parser` for the combinators, `parlance.text` for the character-level
parsers and `parlance.blocks` for parsing that depends on values parsed earlier.
"""

from parlance.parser import (
    pure,
    return_,
    nothing,
    epsilon,
    eoi,
    fail,
    fmap,
    action,
    bind,
    ignore,
    and_then,
    or_else,
    chain,
    choice,
    zero_or_more,
    one_or_more,
    zero_or_one,
    opt,
    must,
    forward_decl,
    Parser,
    Input,
    ErrorKind,
    NoParseError,
    ParsingResult,
    ParsingSuccess,
    ParsingError,
)
from parlance.text import (
    char,
    join,
    word,
    space,
    tab,
    nl,
    spaces,
    tabs,
    nls,
    ws,
    opt_ws,
    positive_digit,
    digit,
    digits,
    positive_integer,
    non_negative_integer,
    opt_sign,
    integer,
    decimal,
    lower_char,
    upper_char,
    alpha_char,
    alphanum_char,
    lower_word,
    upper_word,
    alpha_word,
    alphanum_word,
    capitalized,
    identifier,
)
from parlance.blocks import pop_chars, parse_int, n_block, n_blocks

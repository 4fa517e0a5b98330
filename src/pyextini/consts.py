# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/10/10 01:15:56
# @Author : Kariko Lin

from enum import Enum


class DuplicateAction(str, Enum):
    """What to do when a key or a section name shows up again.

    Key and section duplicates are configured independently,
    since MERGE means different things for them.
    """
    ABORT = 'abort'
    IGNORE = 'ignore'
    REPLACE = 'replace'
    MERGE = 'merge'
    APPEND = 'append'


class MultiValueMode(str, Enum):
    REPEATED_KEY = 'repeated_key'  # `K = A` `K = B`
    SEPARATED = 'separated'        # `K = A, B`
    OFF = 'off'


class EscapeMode(str, Enum):
    NEVER = 'never'
    ALWAYS = 'always'
    QUOTED = 'quoted'  # only inside quotes (keys excepted)


class StringQuoteMode(str, Enum):
    NEVER = 'never'
    ALWAYS = 'always'
    AUTO = 'auto'        # anything special, whitespace included
    SPECIAL = 'special'  # like AUTO, but plain spaces are fine


class MissingVariableMode(str, Enum):
    ERROR = 'error'
    BLANK = 'blank'
    SKIP = 'skip'


ESCAPE_CHAR = '\\'

# escaped char -> real char
UNESCAPES = {
    '\\': '\\',
    "'": "'",
    '"': '"',
    '#': '#',
    ':': ':',
    '0': '\0',
    'a': '\a',
    'b': '\b',
    't': '\t',
    'n': '\n',
    'r': '\r',
}

# real char -> escape sequence, for the control chars only.
CONTROL_ESCAPES = {
    '\r': '\\r',
    '\n': '\\n',
    '\0': '\\0',
    '\b': '\\b',
    '\a': '\\a',
}

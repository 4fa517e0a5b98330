# -*- encoding: utf-8 -*-
# @File   : dialect.py
# @Time   : 2024/10/12 21:40:07
# @Author : Kariko Lin

"""Grammar choices shared by `IniParser` and `IniWriter`.

A `Dialect` is frozen. Derive variants with `dataclasses.replace()`
or `Dialect.derive()`; reader and writer usually hold the same one.
"""

from dataclasses import dataclass, fields, replace
from os import PathLike
from typing import Any, Mapping, Self

import yaml

from .consts import (
    DuplicateAction,
    EscapeMode,
    MultiValueMode,
    StringQuoteMode
)


_SINGLE_CHARS = (
    'section_path_separator', 'value_separator',
    'comment_character', 'multi_value_separator', 'quote_character'
)

_ENUMS = {
    'escape_mode': EscapeMode,
    'multi_value_mode': MultiValueMode,
    'duplicate_keys_action': DuplicateAction,
    'duplicate_section_action': DuplicateAction,
    'string_quote_mode': StringQuoteMode,
}


@dataclass(frozen=True, kw_only=True)
class Dialect:
    # shared
    section_path_separator: str = '.'
    value_separator: str = '='
    comment_character: str = ';'
    line_continuations: bool = True
    value_separator_whitespace: bool = True
    trimmed_value: bool = True
    multi_value_mode: MultiValueMode = MultiValueMode.REPEATED_KEY
    multi_value_separator: str = ','
    empty_values: bool = True
    escape_mode: EscapeMode = EscapeMode.QUOTED
    case_sensitive_keys: bool = False
    case_sensitive_sections: bool = False
    preserve_order: bool = True

    # reading
    comments: bool = True
    inline_comments: bool = True
    quote_characters: str = '"\''
    global_section: bool = True
    nested_sections: bool = True
    parse_exceptions: bool = True
    malformed_section_as_key: bool = False
    duplicate_keys_action: DuplicateAction = DuplicateAction.REPLACE
    duplicate_section_action: DuplicateAction = DuplicateAction.REPLACE

    # writing
    string_quote_mode: StringQuoteMode = StringQuoteMode.SPECIAL
    quote_character: str = '"'
    empty_values_have_separator: bool = True
    indent: int = 2
    indent_character: str = ' '

    def __post_init__(self) -> None:
        for name in _SINGLE_CHARS:
            if len(getattr(self, name)) != 1:
                raise ValueError(f'`{name}` must be exactly one character.')
        if self.indent_character not in (' ', '\t'):
            raise ValueError('Only space or tab may be used for indenting.')
        if self.indent < 0:
            raise ValueError('`indent` must not be negative.')
        # tuples/lists of chars are fine too.
        object.__setattr__(
            self, 'quote_characters', ''.join(self.quote_characters))
        for name, enum in _ENUMS.items():
            v = getattr(self, name)
            if not isinstance(v, enum):
                object.__setattr__(self, name, enum(str(v).lower()))

    def derive(self, **changes: Any) -> Self:
        return replace(self, **changes)

    def without_string_quoting(self) -> Self:
        """Neither expect nor write any kind of string quotes."""
        return replace(
            self, quote_characters='',
            string_quote_mode=StringQuoteMode.NEVER)

    def is_quote(self, ch: str) -> bool:
        return ch in self.quote_characters

    @classmethod
    def from_mapping(cls, conf: Mapping[str, Any]) -> Self:
        """Build from plain data, e.g. a loaded YAML document.

        Enum fields accept either member names or values
        (`APPEND`, `append`). Unknown keys raise `ValueError`.
        """
        known = {f.name for f in fields(cls)}
        for k in conf:
            if k not in known:
                raise ValueError(f'Unknown dialect option "{k}".')
        return cls(**conf)

    def to_mapping(self) -> dict[str, Any]:
        ret: dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            ret[f.name] = v.value if f.name in _ENUMS else v
        return ret


DEFAULT_DIALECT = Dialect()


def load_dialect(
    filename: str | PathLike[str], encoding: str = 'utf-8'
) -> Dialect:
    """Read a dialect from a YAML file like

        ```yaml
        comment_character: '#'
        multi_value_mode: separated
        duplicate_keys_action: append
        ```
    """
    with open(filename, 'r', encoding=encoding) as fp:
        conf = yaml.safe_load(fp)
    return Dialect.from_mapping(conf or {})

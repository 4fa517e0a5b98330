# -*- encoding: utf-8 -*-
# @File   : writer.py
# @Time   : 2024/10/14 00:31:09
# @Author : Kariko Lin

"""Serializer, the reverse of `scanner` + `builder`.

Writes global pairs first, then every section (DFS), each instance of
repeated sections as a block of its own:

    ```ini
    key = val

    [section]
      key233 = val666

      [section.nested]
        key = "quoted; value"
    ```
"""

from io import StringIO, TextIOBase
from typing import Mapping, Sequence
from warnings import warn

from .consts import (
    CONTROL_ESCAPES,
    ESCAPE_CHAR,
    EscapeMode,
    MultiValueMode,
    StringQuoteMode
)
from .dialect import DEFAULT_DIALECT, Dialect
from .model import Data


class IniWriter:
    def __init__(self, dialect: Dialect = DEFAULT_DIALECT) -> None:
        self._d = dialect
        self._indent = dialect.indent_character * dialect.indent
        specials = {
            '\t', '\r', '\n', '\0', '\b', '\a', ESCAPE_CHAR,
            dialect.comment_character,
            dialect.value_separator,
            dialect.multi_value_separator,
            *dialect.quote_characters,
            dialect.quote_character,
        }
        self.__special = frozenset(specials)
        self.__auto = frozenset(specials | {' '})

    # -- escaping & quoting

    def needs_quote(self, value: str) -> bool:
        match self._d.string_quote_mode:
            case StringQuoteMode.NEVER:
                return False
            case StringQuoteMode.ALWAYS:
                return True
            case StringQuoteMode.AUTO:
                return value != value.strip() or any(
                    c in self.__auto for c in value)
            case _:
                # padding would be trimmed away when read back.
                return value != value.strip() or any(
                    c in self.__special for c in value)

    def escape(self, value: str, quoted: bool) -> str:
        d = self._d
        if d.escape_mode is EscapeMode.NEVER or (
            d.escape_mode is EscapeMode.QUOTED and not quoted
        ):
            return value
        value = value.replace(ESCAPE_CHAR, ESCAPE_CHAR * 2)
        for c, e in CONTROL_ESCAPES.items():
            value = value.replace(c, e)
        if d.string_quote_mode in (StringQuoteMode.NEVER,
                                   StringQuoteMode.ALWAYS):
            value = value.replace('\t', '\\t')
        if quoted:
            return value.replace(
                d.quote_character, ESCAPE_CHAR + d.quote_character)
        # bare text: nothing may start a quote or a comment.
        for c in self.__bare_specials():
            value = value.replace(c, ESCAPE_CHAR + c)
        return value

    def __bare_specials(self) -> list[str]:
        d = self._d
        ret = [*d.quote_characters]
        if d.comments:
            ret.append(d.comment_character)
        if d.multi_value_mode is MultiValueMode.SEPARATED:
            ret.append(d.multi_value_separator)
        return ret

    def escape_name(self, name: str) -> str:
        """Escape a key or section path; names honour escapes
        unless `EscapeMode.NEVER`."""
        if self._d.escape_mode is EscapeMode.NEVER:
            return name
        name = name.replace(ESCAPE_CHAR, ESCAPE_CHAR * 2)
        for c, e in CONTROL_ESCAPES.items():
            name = name.replace(c, e)
        name = name.replace('\t', '\\t')
        for c in {self._d.value_separator, *self.__bare_specials()}:
            name = name.replace(c, ESCAPE_CHAR + c)
        return name

    def escape_key(self, key: str) -> str:
        """Like `escape_name()`, quoting keys which would otherwise
        read back as section headers or lose their padding."""
        ret = self.escape_name(key)
        if not key.startswith('[') and key == key.strip():
            return ret
        q = self._d.quote_character
        if not self._d.is_quote(q):
            warn(f'Key {key!r} can not be written without quotes.')
            return ret
        return q + ret + q

    def __trimmed(self, value: str) -> str:
        if self._d.trimmed_value:
            return value.strip()
        if self._d.value_separator_whitespace:
            return value.lstrip()
        return value

    def quote(self, value: str) -> str:
        if not self.needs_quote(value):
            if self.__trimmed(value) != value:
                warn(f'Padding of {value!r} is lost without quotes.')
            # unquoted specials only survive by escaping.
            return self.escape(value, False)
        q = self._d.quote_character
        if q in value and self._d.escape_mode is EscapeMode.NEVER:
            warn(f'Unable to quote {value!r} without escaping `{q}`.')
        return q + self.escape(value, True) + q

    # -- output

    def dumps(self, data: Data) -> str:
        buf = StringIO()
        self.write(data, buf)
        return buf.getvalue()

    def write(self, data: Data, buf: TextIOBase) -> None:
        """Write a whole document, or just a section (as if it was one)."""
        values = data.raw_values()
        wrote = False
        for k, v in values.items():
            wrote = self._write_property(0, buf, k, v) or wrote
        self._write_sections(0, buf, wrote, data.sections, [])

    def _write_sections(
        self, depth: int, buf: TextIOBase, newline: bool,
        sections: Mapping[str, Sequence[Data]], path: list[str]
    ) -> bool:
        for name, secs in sections.items():
            newline = self._write_section(depth, buf, newline, name, secs, path)
        return newline

    def _write_section(
        self, depth: int, buf: TextIOBase, newline: bool,
        name: str, secs: Sequence[Data], path: list[str]
    ) -> bool:
        path.append(name)
        header = self.escape_name(self._d.section_path_separator.join(path))
        try:
            for sect in secs:
                if newline:
                    buf.write('\n')
                buf.write(f'{self._indent * depth}[{header}]\n')
                for k, v in sect.raw_values().items():
                    self._write_property(depth + 1, buf, k, v)
                newline = self._write_sections(
                    depth + 1, buf, True, sect.sections, path)
        finally:
            path.pop()
        return newline

    def _write_property(
        self, depth: int, buf: TextIOBase, key: str, values: list[str]
    ) -> bool:
        d = self._d
        indent = self._indent * depth
        if not values:
            if not d.empty_values:
                return False
            line = indent + self.escape_key(key)
            if d.empty_values_have_separator:
                line += f' {d.value_separator}' \
                    if d.value_separator_whitespace else d.value_separator
            buf.write(line + '\n')
        elif len(values) == 1:
            self._write_one(buf, indent, key, self.quote(values[0]))
        else:
            match d.multi_value_mode:
                case MultiValueMode.REPEATED_KEY:
                    for v in values:
                        self._write_one(buf, indent, key, self.quote(v))
                case MultiValueMode.SEPARATED:
                    sep = d.multi_value_separator + (
                        ' ' if d.trimmed_value else '')
                    self._write_one(
                        buf, indent, key,
                        sep.join(self.quote(v) for v in values))
                case _:
                    warn(
                        f'"{key}" has {len(values)} values but multiple '
                        'values are off, only the first one is written.')
                    self._write_one(buf, indent, key, self.quote(values[0]))
        return True

    def _write_one(
        self, buf: TextIOBase, indent: str, key: str, value: str
    ) -> None:
        sep = self._d.value_separator
        if self._d.value_separator_whitespace:
            buf.write(f'{indent}{self.escape_key(key)} {sep} {value}\n')
        else:
            buf.write(f'{indent}{self.escape_key(key)}{sep}{value}\n')

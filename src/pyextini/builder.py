# -*- encoding: utf-8 -*-
# @File   : builder.py
# @Time   : 2024/10/13 14:27:51
# @Author : Kariko Lin

"""Grows a `Document` from scanned tokens.

Duplicate keys and duplicate sections are resolved here, each by its
own `DuplicateAction`:

| action  | duplicate key        | duplicate section                   |
|---------|----------------------|-------------------------------------|
| ABORT   | error                | error                               |
| IGNORE  | keep old values      | header ignored, stay where we were  |
| REPLACE | new values only      | old instances dropped               |
| APPEND  | old + new            | another instance of the same name   |
| MERGE   | old + new            | folded into the first instance;     |
|         |                      | old keys keep their first values    |
"""

import logging
from typing import Iterable

from .abstract import IniParseError
from .consts import DuplicateAction, MultiValueMode
from .dialect import DEFAULT_DIALECT, Dialect
from .model import Document, Section, _Node
from .scanner import (
    Fragment,
    KeyValues,
    LineAssembler,
    LineScanner,
    LogicalLine,
    MalformedSection,
    SectionHeader
)


class TreeBuilder:
    def __init__(
        self,
        dialect: Dialect = DEFAULT_DIALECT,
        document: Document | None = None
    ) -> None:
        self._d = dialect
        self._doc = Document(dialect) if document is None else document
        self._assembler = LineAssembler(dialect)
        self._scanner = LineScanner(dialect)
        # None means the global scope.
        self._current: Section | None = None
        # (first same-named section, block being collected) under MERGE.
        self._merging: tuple[Section, Section] | None = None

    @property
    def document(self) -> Document:
        return self._doc

    def build(self, buf: Iterable[str]) -> Document:
        """Feed every line of `buf`, returning the finished document."""
        for line in self._assembler(buf):
            try:
                self._feed(line)
            except IniParseError as e:
                if self._d.parse_exceptions:
                    raise
                logging.debug(
                    f'Skipped line {line.lineno} ({e}): {line.text!r}')
        self.finish()
        return self._doc

    def _feed(self, line: LogicalLine) -> None:
        try:
            token = self._scanner.scan(line)
        except MalformedSection as e:
            if self._d.parse_exceptions or not self._d.malformed_section_as_key:
                raise
            token = e.fallback
        match token:
            case None:
                return
            case SectionHeader(path):
                self._open_section(path, line)
            case KeyValues(key, values):
                self._put_values(key, values, line)

    def finish(self) -> None:
        """End any pending MERGE block."""
        if self._merging is not None:
            target, block = self._merging
            target._merge_values(block)
            self._merging = None

    @staticmethod
    def _error(message: str, line: LogicalLine) -> IniParseError:
        return IniParseError(message, line.offset, line.lineno)

    def _switch(self, section: Section) -> None:
        self.finish()
        self._current = section

    def _open_section(self, path: tuple[str, ...], line: LogicalLine) -> None:
        parent: _Node = self._doc
        for name in path[:-1]:
            existing = parent._sections.get(name)
            if not existing:
                existing = parent._sections[name] = [Section(parent, name)]
            parent = existing[0]

        name = path[-1]
        existing = parent._sections.get(name)
        if not existing:
            new = Section(parent, name)
            parent._sections[name] = [new]
            self._switch(new)
            return

        match self._d.duplicate_section_action:
            case DuplicateAction.ABORT:
                raise self._error(f'Duplicate section key {name}.', line)
            case DuplicateAction.IGNORE:
                logging.debug(f'Ignored duplicate section [{name}].')
            case DuplicateAction.REPLACE:
                new = Section(parent, name)
                parent._sections[name] = [new]
                self._switch(new)
            case DuplicateAction.APPEND:
                new = Section(parent, name)
                existing.append(new)
                self._switch(new)
            case DuplicateAction.MERGE:
                # collected aside, folded in when the block ends.
                block = Section(parent, name)
                self._switch(block)
                self._merging = (existing[0], block)

    def _trim(self, frag: Fragment) -> str:
        if self._d.trimmed_value:
            return frag.strip()
        if self._d.value_separator_whitespace:
            return frag.strip(right=False)
        return frag.text

    def _put_values(
        self, key: str, fragments: list[Fragment], line: LogicalLine
    ) -> None:
        d = self._d
        vals = [self._trim(i) for i in fragments or [Fragment('')]]
        if not d.empty_values and not all(vals):
            raise self._error('Empty values are not allowed.', line)
        vals = [i for i in vals if i]

        if self._current is not None:
            table = self._current._values
        elif d.global_section:
            table = self._doc._values
        else:
            raise self._error(
                'Global properties are not allowed, '
                'all properties must be in a [Section].', line)

        old = table.get(key)
        if old is None:
            table[key] = vals
            return

        action = d.duplicate_keys_action
        if d.multi_value_mode is MultiValueMode.OFF and action in (
            DuplicateAction.MERGE, DuplicateAction.APPEND
        ):
            action = DuplicateAction.REPLACE
        match action:
            case DuplicateAction.ABORT:
                raise self._error(f'Duplicate property key {key}.', line)
            case DuplicateAction.IGNORE:
                pass
            case DuplicateAction.REPLACE:
                table[key] = vals
            case DuplicateAction.MERGE | DuplicateAction.APPEND:
                old.extend(vals)

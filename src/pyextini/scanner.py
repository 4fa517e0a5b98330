# -*- encoding: utf-8 -*-
# @File   : scanner.py
# @Time   : 2024/10/12 23:02:18
# @Author : Kariko Lin

"""Physical lines -> logical lines -> tokens.

`LineAssembler` glues lines ending with an odd number of `\\`
to their successors. `LineScanner` then classifies every logical line
as a section header or a key with its raw value fragments.

Neither of them knows about the document tree; see `builder`.
"""

from enum import Enum, auto
from typing import Iterable, Iterator, NamedTuple

from .abstract import IniIOError, IniParseError
from .consts import ESCAPE_CHAR, UNESCAPES, EscapeMode, MultiValueMode
from .dialect import DEFAULT_DIALECT, Dialect


class LogicalLine(NamedTuple):
    text: str
    lineno: int  # of the first physical line, 1-based.
    offset: int  # chars before the first physical line.


class Fragment(NamedTuple):
    """Raw text, plus the span which came from quotes or escapes.

    Trimming never cuts into `protected` (`lo`, `hi`), so
    `K = "  spaced  "` keeps its spaces.
    """
    text: str
    protected: tuple[int, int] | None = None

    def strip(self, left: bool = True, right: bool = True) -> str:
        text = self.text
        lo, hi = self.protected or (len(text), len(text))
        head, body, tail = text[:lo], text[lo:hi], text[hi:]
        if left:
            head = head.lstrip()
        if right:
            if self.protected is None:
                head = head.rstrip()
            tail = tail.rstrip()
        return head + body + tail


class SectionHeader(NamedTuple):
    path: tuple[str, ...]


class KeyValues(NamedTuple):
    key: str
    values: list[Fragment]  # empty for a bare `key` line.


Token = SectionHeader | KeyValues


class MalformedSection(IniParseError):
    """Bad `[section]` syntax. `fallback` is the line read as a plain key."""
    def __init__(
        self, message: str, line: LogicalLine, fallback: KeyValues
    ) -> None:
        super().__init__(message, line.offset, line.lineno)
        self.fallback = fallback


class LineAssembler:
    def __init__(self, dialect: Dialect = DEFAULT_DIALECT) -> None:
        self._d = dialect

    @staticmethod
    def is_continuation(line: str) -> bool:
        cnt = len(line) - len(line.rstrip(ESCAPE_CHAR))
        return cnt % 2 == 1

    @staticmethod
    def _physical(buf: Iterable[str]) -> Iterator[str]:
        it = None
        while True:
            try:
                if it is None:
                    it = iter(buf)
                raw = next(it)
            except StopIteration:
                return
            except UnicodeDecodeError:
                raise  # let callers retry with another codec.
            except (OSError, ValueError) as e:
                # closed streams give ValueError.
                raise IniIOError(f'Unable to read INI stream: {e}') from e
            yield raw

    def __call__(self, buf: Iterable[str]) -> Iterator[LogicalLine]:
        pending: list[str] = []
        offset = start_offset = 0
        start_no = 0
        for lineno, raw in enumerate(self._physical(buf), 1):
            line = raw.rstrip('\r\n')
            if pending:
                line = line.lstrip()
            else:
                start_no, start_offset = lineno, offset
            offset += len(raw)

            if self._d.line_continuations and self.is_continuation(line):
                pending.append(line[:-1])
                continue

            pending.append(line)
            full = ' '.join(pending)
            pending.clear()
            if full:
                yield LogicalLine(full, start_no, start_offset)
        # dangling continuation at EOF
        if pending and (full := ' '.join(pending)):
            yield LogicalLine(full, start_no, start_offset)


class _State(Enum):
    BEFORE_KEY = auto()
    IN_VALUE = auto()
    IN_QUOTE = auto()
    ESCAPE = auto()


class _Buffer:
    """Chars of the fragment being scanned, tracking the protected span."""
    def __init__(self) -> None:
        self.chars: list[str] = []
        self.lo = -1
        self.hi = -1

    def add(self, ch: str, protected: bool = False) -> None:
        if protected:
            if self.lo < 0:
                self.lo = len(self.chars)
            self.hi = len(self.chars) + len(ch)
        self.chars.append(ch)

    def mark(self) -> None:
        """Protect the current position, e.g. for an empty `""`."""
        if self.lo < 0:
            self.lo = len(self.chars)
        self.hi = max(self.hi, len(self.chars))

    def pop(self) -> Fragment:
        ret = Fragment(
            ''.join(self.chars),
            None if self.lo < 0 else (self.lo, self.hi))
        self.chars.clear()
        self.lo = self.hi = -1
        return ret


class LineScanner:
    """Character level state machine over one logical line.

    States are `BEFORE_KEY`, `IN_VALUE`, `IN_QUOTE` and `ESCAPE`
    (which returns to whichever state it interrupted).
    """

    def __init__(self, dialect: Dialect = DEFAULT_DIALECT) -> None:
        self._d = dialect
        self._literal_escapes = {
            dialect.value_separator,
            dialect.multi_value_separator,
            *dialect.quote_characters,
        }
        if dialect.comments:
            self._literal_escapes.add(dialect.comment_character)

    def unescape_char(self, ch: str) -> str:
        """Meaning of `\\` + `ch`. Unknown escapes keep the backslash."""
        if ch in UNESCAPES:
            return UNESCAPES[ch]
        if ch in self._literal_escapes:
            return ch
        return ESCAPE_CHAR + ch

    def unescape(self, text: str) -> str:
        ret: list[str] = []
        escaped = False
        for ch in text:
            if escaped:
                ret.append(self.unescape_char(ch))
                escaped = False
            elif ch == ESCAPE_CHAR:
                escaped = True
            else:
                ret.append(ch)
        if escaped:
            ret.append(ESCAPE_CHAR)
        return ''.join(ret)

    def _escaping(self, state: _State) -> bool:
        match self._d.escape_mode:
            case EscapeMode.ALWAYS:
                return True
            case EscapeMode.QUOTED:
                # keys always honour escapes, values only in quotes.
                return state in (_State.IN_QUOTE, _State.BEFORE_KEY)
            case _:
                return False

    def tokenize(self, text: str) -> tuple[Fragment, list[Fragment] | None]:
        """Split `text` into the key and value fragments.

        Fragments are `None` if no value separator was found.
        """
        d = self._d
        separated = d.multi_value_mode is MultiValueMode.SEPARATED
        inline_comments = d.comments and d.inline_comments

        state = resume = _State.BEFORE_KEY
        quote = ''
        buf = _Buffer()
        key: Fragment | None = None
        values: list[Fragment] = []

        for ch in text:
            if state is _State.ESCAPE:
                buf.add(self.unescape_char(ch), protected=True)
                state = resume
                continue
            if ch == ESCAPE_CHAR and self._escaping(state):
                resume, state = state, _State.ESCAPE
                continue
            if state is _State.IN_QUOTE:
                if ch == quote:
                    buf.mark()
                    state = _State.BEFORE_KEY if key is None \
                        else _State.IN_VALUE
                else:
                    buf.add(ch, protected=True)
                continue

            if d.is_quote(ch):
                quote, state = ch, _State.IN_QUOTE
                buf.mark()
            elif ch == d.comment_character and inline_comments:
                break
            elif state is _State.BEFORE_KEY:
                if ch == d.value_separator:
                    key = buf.pop()
                    state = _State.IN_VALUE
                else:
                    buf.add(ch)
            elif separated and ch == d.multi_value_separator:
                values.append(buf.pop())
            else:
                buf.add(ch)

        if state is _State.ESCAPE:
            buf.add(ESCAPE_CHAR)
        if key is None:
            return buf.pop(), None
        values.append(buf.pop())
        return key, values

    def scan(self, line: LogicalLine) -> Token | None:
        """Classify `line`; `None` for blanks and comments.

        Raises `MalformedSection` for bad headers, whatever
        `parse_exceptions` says; the caller decides what to do.
        """
        d = self._d
        text = line.text.lstrip()
        if not text or (d.comments and text[0] == d.comment_character):
            return None

        rawkey, values = self.tokenize(text)
        key = rawkey.strip(left=False, right=d.value_separator_whitespace)
        token = KeyValues(key, values or [])

        head = key.rstrip()
        if not head.startswith('[') or (
            rawkey.protected and rawkey.protected[0] == 0
        ):
            return token
        end = head.find(']', 1)
        if end < 0:
            raise MalformedSection(
                "Incorrect syntax for section name, no closing ']'.",
                line, token)
        if end != len(head) - 1:
            raise MalformedSection(
                'Incorrect syntax for section name, '
                "trailing content after closing ']'.",
                line, token)

        name = head[1:end]
        if d.nested_sections:
            path = tuple(i for i in name.split(d.section_path_separator) if i)
        else:
            path = (name,) if name else ()
        if not path:
            raise MalformedSection(
                'Incorrect syntax for section name, no name.', line, token)
        return SectionHeader(path)

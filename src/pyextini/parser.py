# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/10 01:04:45
# @Author : Kariko Lin

"""Reading and writing INI files, strings and streams.

```python
parser = IniParser('settings.ini', dialect=Dialect(comment_character='#'))
doc = parser.read()
doc.section('server')['port'] = 8080
parser.write(doc)
```

Files are opened with the given `encoding` (or the platform default).
If that does not decode, `chardet` gets to guess.
"""

import logging
from io import BufferedIOBase, RawIOBase, StringIO, TextIOBase
from os import PathLike
from typing import IO, Optional
from warnings import warn

import chardet

from .abstract import FileHandler, IniIOError
from .builder import TreeBuilder
from .consts import MissingVariableMode
from .dialect import DEFAULT_DIALECT, Dialect
from .interpolation import Resolver
from .model import Data, Document
from .writer import IniWriter


def _decode(raw: bytes, encoding: str | None = None) -> str:
    if encoding is not None:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            logging.info(f'Not {encoding}, guessing the codec.')

    codec = chardet.detect(raw)
    if codec is None or codec['encoding'] is None \
            or codec['confidence'] < 0.8:
        codec = {'encoding': 'utf-8', 'confidence': 0.0}

    # fallbacks
    try:
        return raw.decode(codec['encoding'])
    except (UnicodeDecodeError, LookupError):
        warn(f'Unable to decode as {codec["encoding"]}, using latin-1.')
        return raw.decode('latin-1')


class IniParser(FileHandler[Document]):
    def __init__(
        self,
        filename: str | PathLike[str],
        encoding: str | None = None, *,
        dialect: Dialect = DEFAULT_DIALECT,
        writer_dialect: Dialect | None = None,
        interpolator: Optional[Resolver] = None,
        variable_pattern: str | None = None,
        missing_variables: MissingVariableMode = MissingVariableMode.ERROR
    ) -> None:
        """`writer_dialect` defaults to the reading one."""
        super().__init__(filename, encoding)
        self._dialect = dialect
        self._writer = IniWriter(writer_dialect or dialect)
        self._interpolator = interpolator
        self._pattern = variable_pattern
        self._missing = missing_variables

    def _new_document(self) -> Document:
        return Document(
            self._dialect,
            interpolator=self._interpolator,
            variable_pattern=self._pattern,
            missing_variables=self._missing)

    def readstream(self, buf: TextIOBase | IO[str]) -> Document:
        """读取解码好的字符串流。

        如没有特殊需求，直接调用`self.read()`便是。
        """
        return TreeBuilder(self._dialect, self._new_document()).build(buf)

    @staticmethod
    def _decode_file(filename: str | PathLike[str]) -> StringIO:
        try:
            with open(filename, 'rb') as fp:
                raw = fp.read()
        except OSError as e:
            raise IniIOError(f'Unable to read `{filename}`: {e}') from e
        return StringIO(_decode(raw))

    def read(self) -> Document:
        try:
            # when encoding is None, `open()` would fallback to system default.
            # and when encoding got wrong,
            # just `UnicodeDecodeError` and fallback to `chardet`.
            return super().read()
        except UnicodeDecodeError:
            logging.info(f'`{self._fn}` is not {self._codec}, guessing.')
            return self.readstream(self._decode_file(self._fn))

    def writestream(self, instance: Data, buf: TextIOBase | IO[str]) -> None:
        self._writer.write(instance, buf)

    def __str__(self) -> str:
        return "INI file: " + super().__str__() + f"({self._codec})"


def loads(text: str, dialect: Dialect = DEFAULT_DIALECT, **kwargs) -> Document:
    """Parse INI text. `kwargs` go to `IniParser` (interpolation etc)."""
    return IniParser('<string>', dialect=dialect, **kwargs).readstream(
        StringIO(text))


def load(
    fp: IO[str] | IO[bytes],
    dialect: Dialect = DEFAULT_DIALECT,
    encoding: str | None = None,
    **kwargs
) -> Document:
    """Parse a text stream, or a binary one (decoded like files are)."""
    parser = IniParser(
        getattr(fp, 'name', '<stream>'), encoding,
        dialect=dialect, **kwargs)
    if isinstance(fp, (BufferedIOBase, RawIOBase)) or 'b' in getattr(
        fp, 'mode', ''
    ):
        try:
            raw = fp.read()
        except (OSError, ValueError) as e:
            raise IniIOError(f'Unable to read INI stream: {e}') from e
        return parser.readstream(StringIO(_decode(raw, encoding)))
    return parser.readstream(fp)  # type: ignore[arg-type]


def dumps(data: Data, dialect: Dialect = DEFAULT_DIALECT) -> str:
    return IniWriter(dialect).dumps(data)


def dump(
    data: Data, fp: IO[str], dialect: Dialect = DEFAULT_DIALECT
) -> None:
    IniWriter(dialect).write(data, fp)  # type: ignore[arg-type]

# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2024/09/08 20:22:30
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from io import TextIOBase
from os import PathLike
from typing import Generic, TypeVar

T = TypeVar('T')


class IniParseError(ValueError):
    """Syntax, duplicate policy, empty value or global scope violation.

    `offset` counts characters from the start of input to the
    logical line in trouble, `lineno` is 1-based.
    """
    def __init__(self, message: str, offset: int = 0, lineno: int = 0):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.lineno = lineno

    def __str__(self) -> str:
        return self.message


class IniIOError(OSError):
    """Unreadable file or closed stream. Always fatal."""
    pass


class FileHandler(Generic[T], metaclass=ABCMeta):
    def __init__(
        self, filename: str | PathLike[str], encoding: str | None = None
    ) -> None:
        self._fn = filename
        self._codec = encoding

    @abstractmethod
    def readstream(self, buf: TextIOBase) -> T:
        raise NotImplementedError

    @abstractmethod
    def writestream(self, instance: T, buf: TextIOBase) -> None:
        raise NotImplementedError

    def read(self) -> T:
        try:
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return self.readstream(fp)
        except IniIOError:
            raise
        except OSError as e:
            raise IniIOError(f'Unable to read `{self._fn}`: {e}') from e

    def write(self, instance: T) -> None:
        try:
            with open(self._fn, 'w', encoding=self._codec) as fp:
                self.writestream(instance, fp)
        except OSError as e:
            raise IniIOError(f'Unable to write `{self._fn}`: {e}') from e

    def __str__(self) -> str:
        return str(self._fn)

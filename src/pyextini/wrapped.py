# -*- encoding: utf-8 -*-
# @File   : wrapped.py
# @Time   : 2024/10/16 20:48:31
# @Author : Kariko Lin

"""Decorators over `Data`.

Anything a wrapper does not override goes straight to the delegate,
including `Section` attributes like `key` or `path`.
"""

from typing import Any, Iterator, Mapping

from .model import CaseFoldDict, Data, Scalar, Section, _to_str


class DataWrapper(Data):
    def __init__(self, delegate: Data) -> None:
        self._delegate = delegate

    @property
    def delegate(self) -> Data:
        return self._delegate

    def __getattr__(self, name: str) -> Any:
        if name == '_delegate':
            raise AttributeError(name)
        return getattr(self._delegate, name)

    def _wrap(self, section: Section) -> Data:
        """Hook for subclasses to decorate child sections too."""
        return section

    def _raw(self, key: str) -> list[str] | None:
        return self._delegate._raw(key)

    def put_all(self, key: str, *values: Scalar) -> None:
        self._delegate.put_all(key, *values)

    def __delitem__(self, key: str) -> None:
        del self._delegate[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._delegate)

    def __len__(self) -> int:
        return len(self._delegate)

    @property
    def sections(self) -> Mapping[str, tuple[Any, ...]]:
        return {
            k: tuple(self._wrap(i) for i in v)
            for k, v in self._delegate.sections.items()
        }

    def create(self, *path: str) -> Any:
        return self._wrap(self._delegate.create(*path))

    def remove_section(self, section: Any) -> None:
        while isinstance(section, DataWrapper):
            section = section.delegate
        self._delegate.remove_section(section)

    def interpolate(self, value: str) -> str:
        return self._delegate.interpolate(value)

    def __repr__(self) -> str:
        return f'<{type(self).__name__}> {self._delegate!r}'


class ReadOnlyWrapper(DataWrapper):
    """Every mutation raises `TypeError`, children included."""

    def _wrap(self, section: Section) -> Data:
        return ReadOnlyWrapper(section)

    def __readonly(self, *_: Any) -> Any:
        raise TypeError(f'{self._delegate!r} is read-only.')

    put_all = __readonly
    __delitem__ = __readonly
    create = __readonly
    remove_section = __readonly

    def clear(self) -> None:
        self.__readonly()


class DefaultsWrapper(DataWrapper):
    """Keys (and sections) missing from the delegate come from `defaults`.

    `defaults` is another `Data`, or a plain mapping of
    `key -> value or list of values`. It is never modified, and neither is
    the delegate unless written to.
    """
    def __init__(
        self,
        delegate: Data,
        defaults: Data | Mapping[str, Scalar | list[Scalar]]
    ) -> None:
        super().__init__(delegate)
        if not isinstance(defaults, Data):
            defaults = _StaticData(defaults)
        self._defaults = defaults

    def _raw(self, key: str) -> list[str] | None:
        ret = self._delegate._raw(key)
        return self._defaults._raw(key) if ret is None else ret

    def __keys(self) -> list[str]:
        ret = list(self._delegate)
        ret.extend(k for k in self._defaults if k not in self._delegate)
        return ret

    def __iter__(self) -> Iterator[str]:
        return iter(self.__keys())

    def __len__(self) -> int:
        return len(self.__keys())

    def __delitem__(self, key: str) -> None:
        # defaulted keys can not go away.
        del self._delegate[key]

    @property
    def sections(self) -> Mapping[str, tuple[Any, ...]]:
        mine = self._delegate.sections
        theirs = self._defaults.sections
        ret: dict[str, tuple[Any, ...]] = {}
        for k, v in mine.items():
            fallback = theirs.get(k)
            ret[k] = tuple(
                DefaultsWrapper(i, fallback[0]) if fallback else i
                for i in v)
        for k, v in theirs.items():
            if k not in mine:
                ret[k] = tuple(ReadOnlyWrapper(i) for i in v)
        return ret


class _StaticData(Data):
    """Read-only `Data` over a plain mapping, with no sections."""
    def __init__(self, values: Mapping[str, Scalar | list[Scalar]]) -> None:
        self.__values: CaseFoldDict[list[str]] = CaseFoldDict()
        for k, v in values.items():
            vals = v if isinstance(v, list) else [v]
            self.__values[k] = [_to_str(i) for i in vals]

    def _raw(self, key: str) -> list[str] | None:
        return self.__values.get(key)

    def put_all(self, key: str, *values: Scalar) -> None:
        raise TypeError('Defaults are read-only.')

    def __delitem__(self, key: str) -> None:
        raise TypeError('Defaults are read-only.')

    def __iter__(self) -> Iterator[str]:
        return iter(self.__values)

    def __len__(self) -> int:
        return len(self.__values)

    @property
    def sections(self) -> Mapping[str, tuple[Section, ...]]:
        return {}

    def create(self, *path: str) -> Section:
        raise TypeError('Defaults are read-only.')

    def remove_section(self, section: Section) -> None:
        raise TypeError('Defaults are read-only.')

    def interpolate(self, value: str) -> str:
        return value

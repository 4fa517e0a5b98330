# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/10 00:57:10
# @Author : Kariko Lin

"""
INI document tree: a `Document` holding global pairs and `Section`s,
which may hold further (nested) sections.

Every key maps to a *list* of values. The mapping protocol only shows
the first one (or `None` for a key without value); use `get_all()` /
`put_all()` for the whole list.

Sections of the same name may repeat, so `sections` maps a name
to a tuple of instances in declaration order.
"""

from abc import abstractmethod
from collections.abc import MutableMapping
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    TypeVar
)

from .consts import MissingVariableMode
from .dialect import DEFAULT_DIALECT, Dialect

if TYPE_CHECKING:
    from .interpolation import Resolver

V = TypeVar('V')

_UNSET: Any = object()

Scalar = str | int | float | bool


def _identity(key: str) -> str:
    return key


def _to_str(value: Scalar) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _to_bool(value: str) -> bool:
    return bool(value) and value[0].lower() in ('1', 'y', 't')


class CaseFoldDict(MutableMapping[str, V]):
    """Dict keeping the *first* spelling of each key,
    while looking keys up by `normalize(key)`.

    Iterates in insertion order, or sorted (by normalized key)
    when `preserve_order` is off.
    """
    def __init__(
        self,
        normalize: Callable[[str], str] = _identity,
        preserve_order: bool = True
    ) -> None:
        self.__raw: dict[str, tuple[str, V]] = {}
        self.__norm = normalize
        self.__ordered = preserve_order

    @classmethod
    def create(
        cls, case_sensitive: bool, preserve_order: bool
    ) -> 'CaseFoldDict[V]':
        return cls(_identity if case_sensitive else str.lower, preserve_order)

    def __getitem__(self, key: str) -> V:
        return self.__raw[self.__norm(key)][1]

    def __setitem__(self, key: str, value: V) -> None:
        nk = self.__norm(key)
        if nk in self.__raw:
            key = self.__raw[nk][0]
        self.__raw[nk] = (key, value)

    def __delitem__(self, key: str) -> None:
        del self.__raw[self.__norm(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.__norm(key) in self.__raw

    def __len__(self) -> int:
        return len(self.__raw)

    def __iter__(self) -> Iterator[str]:
        if self.__ordered:
            return (k for k, _ in self.__raw.values())
        return (self.__raw[nk][0] for nk in sorted(self.__raw))

    def __repr__(self) -> str:
        return repr(dict(self.items()))

    def original_key(self, key: str) -> str:
        """Spelling of `key` as first stored."""
        return self.__raw[self.__norm(key)][0]


class Data(MutableMapping[str, Optional[str]]):
    """Capabilities shared by documents, sections and their wrappers.

    Subclasses provide the storage primitives (`_raw`, `put_all`,
    `__delitem__`, `__iter__`, `__len__`, `sections`, `create`,
    `remove_section`, `interpolate`); everything else is derived.
    """

    # -- primitives

    @abstractmethod
    def _raw(self, key: str) -> list[str] | None:
        """Stored values of `key` (uninterpolated), `None` if missing."""
        raise NotImplementedError

    @abstractmethod
    def put_all(self, key: str, *values: Scalar) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def sections(self) -> Mapping[str, tuple['Section', ...]]:
        raise NotImplementedError

    @abstractmethod
    def create(self, *path: str) -> 'Section':
        raise NotImplementedError

    @abstractmethod
    def remove_section(self, section: 'Section') -> None:
        raise NotImplementedError

    @abstractmethod
    def interpolate(self, value: str) -> str:
        raise NotImplementedError

    # -- mapping protocol

    def __getitem__(self, key: str) -> Optional[str]:
        """First value of `key`; `None` if it has no value."""
        vals = self._raw(key)
        if vals is None:
            raise KeyError(key)
        return self.interpolate(vals[0]) if vals else None

    def __setitem__(self, key: str, value: Optional[Scalar]) -> None:
        if value is None:
            self.put_all(key)
        else:
            self.put_all(key, value)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._raw(key) is not None

    # -- values

    @property
    def empty(self) -> bool:
        return len(self) == 0 and len(self.sections) == 0

    def raw_values(self) -> dict[str, list[str]]:
        """Snapshot of all pairs, without interpolation."""
        ret: dict[str, list[str]] = {}
        for k in self:
            if (vals := self._raw(k)) is not None:
                ret[k] = list(vals)
        return ret

    def get_all(self, key: str, default: Any = _UNSET) -> list[str]:
        vals = self._raw(key)
        if vals is None:
            if default is _UNSET:
                raise KeyError(key)
            return default
        return [self.interpolate(v) for v in vals]

    def get_or(self, key: str, default: Any = None) -> Any:
        """Like `get()`, but a key without value gives `default` too."""
        vals = self._raw(key)
        if not vals:
            return default
        return self.interpolate(vals[0])

    def __convert(
        self, key: str, conv: Callable[[str], Any], default: Any
    ) -> Any:
        val = self.get_or(key, _UNSET)
        if val is _UNSET:
            if default is _UNSET:
                raise KeyError(key)
            return default
        try:
            return conv(val)
        except ValueError as e:
            raise ValueError(f'Value of "{key}" is not valid: {e}') from e

    def get_int(self, key: str, default: Any = _UNSET) -> int:
        return self.__convert(key, int, default)

    def get_float(self, key: str, default: Any = _UNSET) -> float:
        return self.__convert(key, float, default)

    def get_bool(self, key: str, default: Any = _UNSET) -> bool:
        return self.__convert(key, _to_bool, default)

    def get_all_int(self, key: str, default: Any = _UNSET) -> list[int]:
        vals = self.get_all(key, _UNSET if default is _UNSET else None)
        return default if vals is None else [int(i) for i in vals]

    def get_all_float(self, key: str, default: Any = _UNSET) -> list[float]:
        vals = self.get_all(key, _UNSET if default is _UNSET else None)
        return default if vals is None else [float(i) for i in vals]

    def get_all_bool(self, key: str, default: Any = _UNSET) -> list[bool]:
        vals = self.get_all(key, _UNSET if default is _UNSET else None)
        return default if vals is None else [_to_bool(i) for i in vals]

    # -- sections

    def contains_section(self, name: str) -> bool:
        return name in self.sections

    def all_sections(self, name: str) -> tuple['Section', ...]:
        secs = self.sections.get(name)
        if not secs:
            raise KeyError(name)
        return secs

    def section(self, *path: str) -> 'Section':
        """Walk `path`, always taking the first of same-named sections."""
        if not path:
            raise ValueError('No section path.')
        cur: Data = self
        for name in path:
            cur = cur.all_sections(name)[0]
        return cur  # type: ignore[return-value]

    def section_or(self, *path: str) -> Optional['Section']:
        try:
            return self.section(*path)
        except KeyError:
            return None

    def obtain(self, *path: str) -> 'Section':
        """`section(*path)` if it exists, otherwise `create(*path)`."""
        # sections without keys are falsy.
        sect = self.section_or(*path)
        return sect if sect is not None else self.create(*path)


class _Node(Data):
    """Storage shared by `Document` and `Section`."""

    def __init__(
        self, *,
        case_sensitive_keys: bool,
        case_sensitive_sections: bool,
        preserve_order: bool,
    ) -> None:
        self._case_keys = case_sensitive_keys
        self._case_sections = case_sensitive_sections
        self._ordered = preserve_order
        # for TreeBuilder, which grows these tables directly.
        self._values: CaseFoldDict[list[str]] = CaseFoldDict.create(
            case_sensitive_keys, preserve_order)
        self._sections: CaseFoldDict[list[Section]] = CaseFoldDict.create(
            case_sensitive_sections, preserve_order)

    def _raw(self, key: str) -> list[str] | None:
        return self._values.get(key)

    def put_all(self, key: str, *values: Scalar) -> None:
        self._values[key] = [_to_str(v) for v in values]

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def sections(self) -> Mapping[str, tuple['Section', ...]]:
        snapshot: CaseFoldDict[tuple[Section, ...]] = CaseFoldDict.create(
            self._case_sections, self._ordered)
        for k, v in self._sections.items():
            snapshot[k] = tuple(v)
        return snapshot

    def _new_child(self, name: str) -> 'Section':
        return Section(self, name)

    def create(self, *path: str) -> 'Section':
        """Create the section at `path`, below this one.

        Missing intermediate sections are created, existing ones are
        reused. The last one is always new, added after any same-named
        siblings.
        """
        if not path:
            raise ValueError('No section path.')
        cur: _Node = self
        for idx, name in enumerate(path):
            existing = cur._sections.get(name)
            if existing and idx < len(path) - 1:
                cur = existing[0]
                continue
            sect = cur._new_child(name)
            if existing:
                existing.append(sect)
            else:
                cur._sections[name] = [sect]
            cur = sect
        return cur  # type: ignore[return-value]

    def remove_section(self, section: 'Section') -> None:
        secs = self._sections.get(section.key)
        if not secs or not any(i is section for i in secs):
            raise ValueError(f'{section} is not a child of {self}.')
        secs[:] = [i for i in secs if i is not section]
        if not secs:
            del self._sections[section.key]

    def _merge_values(self, other: '_Node') -> None:
        """Fold `other`'s pairs in; keys already here keep their values."""
        for k, v in other._values.items():
            if k not in self._values:
                self._values[k] = list(v)


class Document(_Node):
    """... is the root of an INI tree,
    holding global (sectionless) pairs and top level sections.

    ```ini
    key = val  ; global pair

    [section]
    key233 = val666
    [section.nested]
    key = a, b  ; with MultiValueMode.SEPARATED
    ```

    When an `interpolator` is given, `${name}` placeholders in values
    get resolved whenever they are *read* (`doc[key]`, `get_all()`, ...);
    `raw_values()` and writers always see the stored text.
    """
    def __init__(
        self,
        dialect: Dialect = DEFAULT_DIALECT, *,
        interpolator: Optional['Resolver'] = None,
        variable_pattern: str | None = None,
        missing_variables: MissingVariableMode = MissingVariableMode.ERROR
    ) -> None:
        super().__init__(
            case_sensitive_keys=dialect.case_sensitive_keys,
            case_sensitive_sections=dialect.case_sensitive_sections,
            preserve_order=dialect.preserve_order)
        self._dialect = dialect
        self.interpolator = interpolator
        self.variable_pattern = variable_pattern
        self.missing_variables = missing_variables

    @property
    def document(self) -> 'Document':
        return self

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def _expand(self, data: Data, value: str) -> str:
        if self.interpolator is None:
            return value
        from .interpolation import expand
        return expand(
            data, value, self.interpolator,
            pattern=self.variable_pattern, missing=self.missing_variables)

    def interpolate(self, value: str) -> str:
        return self._expand(self, value)

    def __repr__(self) -> str:
        return '<Document> { .keys = %d, .sections = %d }' % (
            len(self), len(self._sections))

    def __str__(self) -> str:
        from .writer import IniWriter
        return IniWriter(self._dialect).dumps(self)


class Section(_Node):
    """A named node of the tree. Same-named siblings are allowed.

    The parent is referenced, never owned; a section lives exactly as
    long as its document keeps it in the tree.
    """
    def __init__(self, parent: _Node, key: str) -> None:
        super().__init__(
            case_sensitive_keys=parent._case_keys,
            case_sensitive_sections=parent._case_sections,
            preserve_order=parent._ordered)
        self._parent = parent
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @property
    def parent(self) -> _Node:
        return self._parent

    @property
    def document(self) -> Document:
        p: _Node = self._parent
        while isinstance(p, Section):
            p = p._parent
        return p  # type: ignore[return-value]

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(reversed(
            [self._key] + [i.key for i in self.parents()]))

    def parents(self) -> tuple['Section', ...]:
        """Ancestor sections, nearest first."""
        ret: list[Section] = []
        p = self._parent
        while isinstance(p, Section):
            ret.append(p)
            p = p._parent
        return tuple(ret)

    def remove(self) -> None:
        self._parent.remove_section(self)

    def interpolate(self, value: str) -> str:
        return self.document._expand(self, value)

    def __str__(self) -> str:
        sep = self.document.dialect.section_path_separator
        return f'[{sep.join(self.path)}]'

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._key, len(self._values))


def iter_tree(
    root: Data
) -> Iterable[tuple[tuple[str, ...], Section]]:
    """DFS walk, yielding `(path, section)` for every section instance."""
    stack: list[tuple[tuple[str, ...], Section]] = []
    for name, secs in reversed(list(root.sections.items())):
        stack.extend(((name,), s) for s in reversed(secs))
    while stack:
        path, sect = stack.pop()
        yield path, sect
        for name, secs in reversed(list(sect.sections.items())):
            stack.extend(((*path, name), s) for s in reversed(secs))

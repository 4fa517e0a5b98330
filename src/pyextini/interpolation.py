# -*- encoding: utf-8 -*-
# @File   : interpolation.py
# @Time   : 2024/10/15 22:10:43
# @Author : Kariko Lin

"""`${name}` substitution, applied when values are read.

A resolver takes the `Data` being read plus the variable name, and gives
the replacement or `None` if it does not know the name:

```python
doc = loads(text, interpolator=compound(environment(), document()))
doc.section('paths')['home']  # '${env:HOME}/.app' -> '/home/kariko/.app'
```
"""

import os
import re
from typing import TYPE_CHECKING, Callable, Mapping, Optional

from .consts import MissingVariableMode

if TYPE_CHECKING:
    from .model import Data

Resolver = Callable[['Data', str], Optional[str]]

DEFAULT_PATTERN = r'\$\{(.*?)\}'


def expand(
    data: 'Data', text: str, resolver: Resolver, *,
    pattern: str | None = None,
    missing: MissingVariableMode = MissingVariableMode.ERROR
) -> str:
    """Replace every match of `pattern` (group 1 is the name) in `text`."""
    def repl(m: re.Match[str]) -> str:
        name = m.group(1)
        ret = resolver(data, name)
        if ret is not None:
            return ret
        match missing:
            case MissingVariableMode.ERROR:
                raise KeyError(f'Unknown string variable ${{{name}}}')
            case MissingVariableMode.BLANK:
                return ''
            case _:
                return m.group(0)

    return re.sub(pattern or DEFAULT_PATTERN, repl, text)


def environment(prefix: str = 'env:') -> Resolver:
    """`${env:HOME}` -> `os.environ['HOME']`."""
    def resolve(data: 'Data', name: str) -> Optional[str]:
        if not name.startswith(prefix):
            return None
        return os.environ.get(name[len(prefix):])
    return resolve


def mapping(values: Mapping[str, object], prefix: str = '') -> Resolver:
    def resolve(data: 'Data', name: str) -> Optional[str]:
        if not name.startswith(prefix):
            return None
        ret = values.get(name[len(prefix):])
        return None if ret is None else str(ret)
    return resolve


def document(separator: str = '.') -> Resolver:
    """Refer to other values of the same document.

    `${a.b.key}` reads `key` of section `[a.b]`; a plain `${key}`
    looks at the data being read first, then the global pairs.
    Referenced values are taken as stored (no nested substitution).
    """
    def first(data: 'Data', key: str) -> Optional[str]:
        vals = data._raw(key)
        return vals[0] if vals else None

    def resolve(data: 'Data', name: str) -> Optional[str]:
        doc = getattr(data, 'document', data)
        *path, key = name.split(separator)
        if path:
            sect = doc.section_or(*path)
            return None if sect is None else first(sect, key)
        ret = first(data, key)
        if ret is None and doc is not data:
            ret = first(doc, key)
        return ret
    return resolve


def compound(*resolvers: Resolver) -> Resolver:
    """First resolver knowing the name wins."""
    def resolve(data: 'Data', name: str) -> Optional[str]:
        for r in resolvers:
            if (ret := r(data, name)) is not None:
                return ret
        return None
    return resolve

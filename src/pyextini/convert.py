# -*- encoding: utf-8 -*-
# @File   : convert.py
# @Time   : 2024/10/16 23:37:02
# @Author : Kariko Lin

"""INI trees as plain dicts, and YAML / JSON files made of them.

```python
{
    'values': {'key': 'val', 'list': ['a', 'b'], 'flag': None},
    'sections': {
        'section': {'values': {...}, 'sections': {...}},
        'repeated': [{'values': {...}}, {'values': {...}}],
    }
}
```

A single value is unwrapped, `None` marks a key without value.
"""

import json
from io import TextIOBase
from typing import IO, Any, Mapping

import yaml

from .abstract import FileHandler
from .dialect import DEFAULT_DIALECT, Dialect
from .model import Data, Document

PROTOCOL = 1


def _export_value(vals: list[str]) -> str | list[str] | None:
    if not vals:
        return None
    return vals[0] if len(vals) == 1 else vals


def to_dict(data: Data) -> dict[str, Any]:
    """Uninterpolated snapshot of `data` and everything below it."""
    ret: dict[str, Any] = {
        'values': {k: _export_value(v) for k, v in data.raw_values().items()},
        'sections': {},
    }
    for name, secs in data.sections.items():
        if len(secs) == 1:
            ret['sections'][name] = to_dict(secs[0])
        else:
            ret['sections'][name] = [to_dict(i) for i in secs]
    return ret


def _import_into(data: Data, src: Mapping[str, Any]) -> None:
    for k, v in (src.get('values') or {}).items():
        if v is None:
            data.put_all(k)
        elif isinstance(v, list):
            data.put_all(k, *v)
        else:
            data.put_all(k, v)
    for name, secs in (src.get('sections') or {}).items():
        if isinstance(secs, Mapping):
            secs = [secs]
        for i in secs:
            _import_into(data.create(name), i or {})


def from_dict(
    src: Mapping[str, Any], dialect: Dialect = DEFAULT_DIALECT
) -> Document:
    """Reverse of `to_dict()`."""
    ret = Document(dialect)
    _import_into(ret, src)
    return ret


class IniJsonParser(FileHandler[Document]):
    JSON_HEAD = {'protocol': PROTOCOL}

    def __init__(
        self, filename: str, encoding: str | None = 'utf-8', *,
        dialect: Dialect = DEFAULT_DIALECT, indent: int = 2
    ) -> None:
        super().__init__(filename, encoding)
        self._dialect = dialect
        self._indent = indent

    def readstream(self, buf: TextIOBase | IO[str]) -> Document:
        src = json.load(buf)
        if src.get('protocol') != PROTOCOL:
            raise ValueError(f'Unsupported protocol {src.get("protocol")}.')
        return from_dict(src['data'], self._dialect)

    def writestream(self, instance: Data, buf: TextIOBase | IO[str]) -> None:
        ret: dict[str, Any] = self.JSON_HEAD.copy()
        ret['data'] = to_dict(instance)
        json.dump(ret, buf, ensure_ascii=False, indent=self._indent)


class IniYamlParser(FileHandler[Document]):
    def __init__(
        self, filename: str, encoding: str | None = 'utf-8', *,
        dialect: Dialect = DEFAULT_DIALECT
    ) -> None:
        super().__init__(filename, encoding)
        self._dialect = dialect

    def readstream(self, buf: TextIOBase | IO[str]) -> Document:
        src = yaml.safe_load(buf) or {}
        if src.get('protocol', PROTOCOL) != PROTOCOL:
            raise ValueError(f'Unsupported protocol {src.get("protocol")}.')
        return from_dict(src.get('data') or {}, self._dialect)

    def writestream(self, instance: Data, buf: TextIOBase | IO[str]) -> None:
        yaml.safe_dump(
            {'protocol': PROTOCOL, 'data': to_dict(instance)}, buf,
            allow_unicode=True, sort_keys=False)

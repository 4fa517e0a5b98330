# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/10 00:52:18
# @Author : Kariko Lin

import logging

from .abstract import IniIOError, IniParseError
from .builder import TreeBuilder
from .consts import (
    DuplicateAction,
    EscapeMode,
    MissingVariableMode,
    MultiValueMode,
    StringQuoteMode
)
from .convert import IniJsonParser, IniYamlParser, from_dict, to_dict
from .dialect import DEFAULT_DIALECT, Dialect, load_dialect
from .model import Data, Document, Section, iter_tree
from .parser import IniParser, dump, dumps, load, loads
from .wrapped import DataWrapper, DefaultsWrapper, ReadOnlyWrapper
from .writer import IniWriter

__all__ = [
    'IniIOError', 'IniParseError',
    'DuplicateAction', 'EscapeMode', 'MissingVariableMode',
    'MultiValueMode', 'StringQuoteMode',
    'Dialect', 'DEFAULT_DIALECT', 'load_dialect',
    'Data', 'Document', 'Section', 'iter_tree',
    'TreeBuilder', 'IniWriter',
    'IniParser', 'load', 'loads', 'dump', 'dumps',
    'IniJsonParser', 'IniYamlParser', 'to_dict', 'from_dict',
    'DataWrapper', 'DefaultsWrapper', 'ReadOnlyWrapper',
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')

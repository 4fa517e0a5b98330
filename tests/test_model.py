"""Tests for the document model."""

import pytest

from pyextini import Dialect, Document, iter_tree, loads
from pyextini.model import CaseFoldDict


class TestCaseFoldDict:
    """Test the normalizing lookup table."""

    def test_keeps_first_spelling(self):
        d = CaseFoldDict.create(False, True)
        d['Key'] = 1
        d['KEY'] = 2
        assert list(d) == ['Key']
        assert d['key'] == 2
        assert d.original_key('kEy') == 'Key'

    def test_case_sensitive(self):
        d = CaseFoldDict.create(True, True)
        d['Key'] = 1
        assert 'key' not in d
        assert 'Key' in d

    def test_unordered_iterates_sorted(self):
        d = CaseFoldDict.create(False, False)
        d['b'] = 1
        d['A'] = 2
        d['c'] = 3
        assert list(d) == ['A', 'b', 'c']

    def test_delete(self):
        d = CaseFoldDict.create(False, True)
        d['Key'] = 1
        del d['KEY']
        assert len(d) == 0


class TestValues:
    """Test value accessors."""

    @pytest.fixture
    def doc(self):
        return loads(
            'name = kariko\n'
            'port = 8080\n'
            'ratio = 0.5\n'
            'on = yes\n'
            'off = false\n'
            'flag\n'
            'ports = 1\n'
            'ports = 2\n',
            Dialect(duplicate_keys_action='append'))

    def test_first_value(self, doc):
        assert doc['name'] == 'kariko'
        assert doc['ports'] == '1'
        assert doc.get_all('ports') == ['1', '2']

    def test_missing_key(self, doc):
        with pytest.raises(KeyError):
            doc['missing']
        assert doc.get('missing') is None
        assert doc.get_all('missing', []) == []

    def test_valueless_key(self, doc):
        assert 'flag' in doc
        assert doc['flag'] is None
        assert doc.get_or('flag', 'dflt') == 'dflt'
        assert doc.get_or('name', 'dflt') == 'kariko'

    def test_typed_getters(self, doc):
        assert doc.get_int('port') == 8080
        assert doc.get_float('ratio') == 0.5
        assert doc.get_bool('on') is True
        assert doc.get_bool('off') is False
        assert doc.get_all_int('ports') == [1, 2]
        assert doc.get_int('missing', 42) == 42
        assert doc.get_all_bool('missing', None) is None

    def test_typed_getter_bad_value(self, doc):
        with pytest.raises(ValueError):
            doc.get_int('name')

    def test_typed_getter_missing(self, doc):
        with pytest.raises(KeyError):
            doc.get_float('missing')

    def test_put_values(self):
        doc = Document()
        doc['b'] = True
        doc['i'] = 3
        doc.put_all('many', 1, 2.5, 'x')
        assert doc.raw_values() == {
            'b': ['true'], 'i': ['3'], 'many': ['1', '2.5', 'x']}
        doc['b'] = None
        assert doc.get_all('b') == []

    def test_delete(self, doc):
        del doc['name']
        assert 'name' not in doc
        with pytest.raises(KeyError):
            del doc['name']

    def test_empty(self):
        doc = Document()
        assert doc.empty
        doc.create('S')
        assert not doc.empty


class TestSections:
    """Test section access and tree edits."""

    def test_create_reuses_intermediates(self):
        doc = Document()
        c = doc.create('A', 'B', 'C')
        c2 = doc.create('A', 'B', 'C')
        assert c is not c2
        assert len(doc.all_sections('A')) == 1
        assert doc.section('A', 'B').all_sections('C') == (c, c2)

    def test_section_lookups(self):
        doc = loads('[Sec]\nk = v\n')
        assert doc.contains_section('SEC')
        assert doc.section('sec')['k'] == 'v'
        assert doc.section_or('nope') is None
        with pytest.raises(KeyError):
            doc.section('nope')
        with pytest.raises(KeyError):
            doc.all_sections('nope')

    def test_obtain(self):
        doc = Document()
        a = doc.obtain('A')
        assert doc.obtain('A') is a

    def test_obtain_keeps_empty_section(self):
        doc = loads('[A]\n[A.B]\n')
        a = doc.section('A')
        assert not a
        assert doc.obtain('A') is a
        assert doc.obtain('A', 'B') is doc.section('A', 'B')
        assert len(doc.all_sections('A')) == 1
        assert len(doc.section('A').all_sections('B')) == 1

    def test_relations(self):
        doc = loads('[A.B.C]\n')
        c = doc.section('A', 'B', 'C')
        assert c.key == 'C'
        assert c.path == ('A', 'B', 'C')
        assert [i.key for i in c.parents()] == ['B', 'A']
        assert c.document is doc
        assert doc.section('A').parent is doc

    def test_remove(self):
        doc = loads('[A]\n[B]\n[B]\n', Dialect(duplicate_section_action='append'))
        first, second = doc.all_sections('B')
        first.remove()
        assert doc.all_sections('B') == (second,)
        second.remove()
        assert not doc.contains_section('B')
        with pytest.raises(ValueError):
            doc.remove_section(second)

    def test_sections_snapshot_is_read_only_copy(self):
        doc = loads('[A]\n')
        snapshot = doc.sections
        doc.create('B')
        assert list(snapshot) == ['A']
        assert list(doc.sections) == ['A', 'B']

    def test_iter_tree(self):
        doc = loads('[A]\n[A.B]\n[C]\n[A.D]\n')
        assert [p for p, _ in iter_tree(doc)] == [
            ('A',), ('A', 'B'), ('A', 'D'), ('C',)]

    def test_repr(self):
        doc = loads('k = v\n[S]\na = 1\n')
        assert repr(doc) == '<Document> { .keys = 1, .sections = 1 }'
        assert repr(doc.section('S')) == '[S] { .cnt = 1 }'
        assert str(doc.section('S')) == '[S]'

    def test_str_uses_path_separator(self):
        dialect = Dialect(section_path_separator='/')
        doc = loads('[a/b]\nk = v\n', dialect)
        assert str(doc.section('a', 'b')) == '[a/b]'
        assert doc.dialect is dialect
        assert '[a/b]' in str(doc)

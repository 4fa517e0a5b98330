"""Tests for `${name}` substitution."""

import pytest

from pyextini import Dialect, MissingVariableMode, loads
from pyextini.interpolation import (
    compound,
    document,
    environment,
    expand,
    mapping
)


class TestResolvers:
    """Test the built-in resolvers."""

    def test_environment(self, monkeypatch):
        monkeypatch.setenv('PYEXTINI_HOME', '/home/kariko')
        doc = loads('k = ${env:PYEXTINI_HOME}/.app\n',
                    interpolator=environment())
        assert doc['k'] == '/home/kariko/.app'
        assert doc.raw_values() == {'k': ['${env:PYEXTINI_HOME}/.app']}

    def test_environment_ignores_other_names(self, monkeypatch):
        monkeypatch.setenv('PYEXTINI_HOME', '/home/kariko')
        assert environment()(None, 'PYEXTINI_HOME') is None

    def test_mapping(self):
        doc = loads('k = ${x}-${y}\n', interpolator=mapping({'x': 1, 'y': 'b'}))
        assert doc['k'] == '1-b'

    def test_document(self):
        doc = loads(
            'name = root\n'
            '[paths]\n'
            'root = /srv\n'
            '[app]\n'
            'name = app\n'
            'data = ${paths.root}/data\n'
            'log = ${name}.log\n'
            'top = ${nope}\n',
            interpolator=document(),
            missing_variables=MissingVariableMode.SKIP)
        app = doc.section('app')
        assert app['data'] == '/srv/data'
        assert app['log'] == 'app.log'
        assert app['top'] == '${nope}'

    def test_document_falls_back_to_globals(self):
        doc = loads('base = /srv\n[app]\ndata = ${base}/data\n',
                    interpolator=document())
        assert doc.section('app')['data'] == '/srv/data'

    def test_compound(self):
        doc = loads('k = ${a} ${b}\n', interpolator=compound(
            mapping({'a': 'first'}), mapping({'a': 'second', 'b': 'x'})))
        assert doc['k'] == 'first x'

    def test_get_all_interpolates(self):
        doc = loads('k = ${a}\nk = ${b}\n', Dialect(duplicate_keys_action='append'),
                    interpolator=mapping({'a': 1, 'b': 2}))
        assert doc.get_all('k') == ['1', '2']


class TestMissing:
    """Test unknown variables."""

    @pytest.fixture
    def resolver(self):
        return mapping({'known': 'v'})

    def test_error(self, resolver):
        doc = loads('k = ${unknown}\n', interpolator=resolver)
        with pytest.raises(KeyError) as e:
            doc['k']
        assert 'Unknown string variable ${unknown}' in str(e.value)

    def test_blank(self, resolver):
        doc = loads('k = [${unknown}]\n', interpolator=resolver,
                    missing_variables=MissingVariableMode.BLANK)
        assert doc['k'] == '[]'

    def test_skip(self, resolver):
        assert expand(None, '${known} ${unknown}', resolver,
                      missing=MissingVariableMode.SKIP) == 'v ${unknown}'

    def test_custom_pattern(self, resolver):
        assert expand(None, '%(known)s', resolver,
                      pattern=r'%\((.*?)\)s') == 'v'

"""Tests for line assembling and scanning."""

import pytest

from pyextini.consts import EscapeMode, MultiValueMode
from pyextini.dialect import Dialect
from pyextini.scanner import (
    Fragment,
    KeyValues,
    LineAssembler,
    LineScanner,
    LogicalLine,
    MalformedSection,
    SectionHeader
)


def _line(text: str) -> LogicalLine:
    return LogicalLine(text, 1, 0)


class TestLineAssembler:
    """Test joining of continued physical lines."""

    def test_plain_lines_keep_numbers_and_offsets(self):
        lines = list(LineAssembler()(['a = 1\n', 'b = 2\n']))
        assert lines == [
            LogicalLine('a = 1', 1, 0),
            LogicalLine('b = 2', 2, 6),
        ]

    def test_blank_lines_skipped(self):
        lines = list(LineAssembler()(['\n', 'a = 1\n', '\n']))
        assert [i.text for i in lines] == ['a = 1']
        assert lines[0].lineno == 2

    def test_single_backslash_joins_with_one_space(self):
        lines = list(LineAssembler()(['a = 1\\\n', '    b\n']))
        assert [i.text for i in lines] == ['a = 1 b']

    def test_double_backslash_does_not_continue(self):
        lines = list(LineAssembler()(['a = 1\\\\\n', 'b = 2\n']))
        assert [i.text for i in lines] == ['a = 1\\\\', 'b = 2']

    def test_without_continuations(self):
        assembler = LineAssembler(Dialect(line_continuations=False))
        lines = list(assembler(['a = 1\\\n', 'b = 2\n']))
        assert [i.text for i in lines] == ['a = 1\\', 'b = 2']

    def test_dangling_continuation_flushed(self):
        lines = list(LineAssembler()(['a = 1\\']))
        assert [i.text for i in lines] == ['a = 1']

    @pytest.mark.parametrize('text,expected', [
        ('abc', False),
        ('abc\\', True),
        ('abc\\\\', False),
        ('abc\\\\\\', True),
    ])
    def test_is_continuation(self, text, expected):
        assert LineAssembler.is_continuation(text) is expected


class TestLineScanner:
    """Test classification of logical lines."""

    @pytest.fixture
    def scanner(self):
        return LineScanner()

    def test_section_header(self, scanner):
        assert scanner.scan(_line('[Sec]')) == SectionHeader(('Sec',))

    def test_nested_section_header(self, scanner):
        assert scanner.scan(_line('[a.b.c]')) == SectionHeader(('a', 'b', 'c'))

    def test_header_with_trailing_comment(self, scanner):
        assert scanner.scan(_line('[Sec]  ; note')) == SectionHeader(('Sec',))

    def test_comment_and_blank(self, scanner):
        assert scanner.scan(_line('; just a comment')) is None
        assert scanner.scan(_line('   ')) is None

    def test_key_value_with_inline_comment(self, scanner):
        token = scanner.scan(_line('Key = Val ; comment'))
        assert isinstance(token, KeyValues)
        assert token.key == 'Key'
        assert [i.strip() for i in token.values] == ['Val']

    def test_key_only(self, scanner):
        assert scanner.scan(_line('Flag')) == KeyValues('Flag', [])

    def test_quoted_value_is_literal(self, scanner):
        token = scanner.scan(_line('K = "a ; b = c"'))
        assert token.values[0].strip() == 'a ; b = c'

    def test_quoted_spaces_survive_trimming(self, scanner):
        token = scanner.scan(_line("K = '  spaced  '  "))
        assert token.values[0].strip() == '  spaced  '

    def test_escapes_only_in_quotes(self, scanner):
        quoted = scanner.scan(_line('K = "a\\tb"'))
        bare = scanner.scan(_line('K = a\\tb'))
        assert quoted.values[0].strip() == 'a\tb'
        assert bare.values[0].strip() == 'a\\tb'

    def test_escaped_key(self, scanner):
        token = scanner.scan(_line('K\\=1 = v'))
        assert token.key == 'K=1'
        assert token.values[0].strip() == 'v'

    def test_escape_always(self):
        scanner = LineScanner(Dialect(escape_mode=EscapeMode.ALWAYS))
        token = scanner.scan(_line('K = a\\;b'))
        assert token.values[0].strip() == 'a;b'

    def test_escape_never(self):
        scanner = LineScanner(Dialect(escape_mode=EscapeMode.NEVER))
        token = scanner.scan(_line('K = "a\\nb"'))
        assert token.values[0].strip() == 'a\\nb'

    def test_separated_fragments(self):
        scanner = LineScanner(
            Dialect(multi_value_mode=MultiValueMode.SEPARATED))
        token = scanner.scan(_line('K = V1, V2,V3'))
        assert [i.strip() for i in token.values] == ['V1', 'V2', 'V3']

    def test_separated_quoted_separator(self):
        scanner = LineScanner(
            Dialect(multi_value_mode=MultiValueMode.SEPARATED))
        token = scanner.scan(_line('K = "a,b", c'))
        assert [i.strip() for i in token.values] == ['a,b', 'c']

    def test_quoted_bracket_is_not_a_header(self, scanner):
        token = scanner.scan(_line('"[x]" = 1'))
        assert token == KeyValues('[x]', [Fragment(' 1')])

    def test_no_closing_bracket(self, scanner):
        with pytest.raises(MalformedSection) as e:
            scanner.scan(_line('[Sec1'))
        assert str(e.value) == \
            "Incorrect syntax for section name, no closing ']'."
        assert e.value.fallback.key == '[Sec1'

    def test_trailing_content(self, scanner):
        with pytest.raises(MalformedSection) as e:
            scanner.scan(_line('[Sec1]XXX'))
        assert str(e.value) == ('Incorrect syntax for section name, '
                                "trailing content after closing ']'.")

    def test_empty_header(self, scanner):
        with pytest.raises(MalformedSection):
            scanner.scan(_line('[]'))


class TestUnescape:
    """Test the escape table."""

    @pytest.mark.parametrize('escaped,expected', [
        ('\\\\', '\\'),
        ('\\"', '"'),
        ("\\'", "'"),
        ('\\#', '#'),
        ('\\:', ':'),
        ('\\0', '\0'),
        ('\\a', '\a'),
        ('\\b', '\b'),
        ('\\t', '\t'),
        ('\\n', '\n'),
        ('\\r', '\r'),
        ('\\;', ';'),
        ('\\=', '='),
        ('\\W', '\\W'),
    ])
    def test_unescape(self, escaped, expected):
        assert LineScanner().unescape(escaped) == expected

    def test_trailing_backslash_kept(self):
        assert LineScanner().unescape('abc\\') == 'abc\\'

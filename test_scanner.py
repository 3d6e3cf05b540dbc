"""Tests del scanner: separadores, palabras, líneas y contextos literales"""
import pytest

from neomips.model.ensamblador import scanner
from neomips.model.ensamblador.scanner import Context
from neomips.model.errors import ErrorKind, NeoMIPSError


def test_separators():
    for c in " \t\n:(),\"+-#'":
        assert scanner.is_separator(c)
    for c in "a$.%_0":
        assert not scanner.is_separator(c)


def test_digit_start_is_ascii_only():
    assert scanner.is_digit_start("7")
    assert not scanner.is_digit_start("a")
    assert not scanner.is_digit_start("٣")


def test_get_next_word():
    assert scanner.get_next_word("add $t0, $t1", 0) == ("add", 3)
    assert scanner.get_next_word("add $t0, $t1", 4) == ("$t0", 7)
    assert scanner.get_next_word("lw $t0, 4($sp)", 8) == ("4", 9)
    assert scanner.get_next_word("word", 4) == ("", 4)


def test_index_to_line():
    text = "a\nb\nc"
    assert scanner.index_to_line(text, 0) == 1
    assert scanner.index_to_line(text, 2) == 2
    assert scanner.index_to_line(text, 4) == 3


def test_line_at_matches_index_to_line():
    text = "nop\n\n  add $t0, $t1, $t2\n# x\n"
    offsets = scanner.newline_offsets(text)
    assert offsets == [3, 4, 24, 28]
    for index in range(len(text) + 1):
        assert scanner.line_at(offsets, index) == scanner.index_to_line(text, index)


def test_is_tag():
    assert scanner.is_tag("main: nop", 0)
    assert not scanner.is_tag("main : nop", 0)
    assert not scanner.is_tag("nop", 0)


def test_line_end():
    assert scanner.line_end("ab\ncd", 0) == 2
    assert scanner.line_end("ab\ncd", 3) == 5


@pytest.mark.parametrize("word", ["main", "_start", "loop.1", "L2", "🚀go", "go🚀", "ñandú"])
def test_identifiers(word):
    assert scanner.is_identifier(word)


@pytest.mark.parametrize("word", ["1abc", "$t0", "a-b", ""])
def test_not_identifiers(word):
    assert not scanner.is_identifier(word)


def test_scan_contexts_comment_and_string():
    text = 'li $t0, 1 # c "x"\n.asciiz "a#b"'
    kinds = [s.kind for s in scanner.scan_contexts(text)]
    assert kinds == [Context.CODE, Context.COMMENT, Context.CODE, Context.STRING]


def test_scan_contexts_escaped_quote():
    text = '"a\\"b" x'
    segments = scanner.scan_contexts(text)
    assert segments[0] == scanner.Segment(Context.STRING, 0, 6)
    assert segments[1] == scanner.Segment(Context.CODE, 6, 8)


def test_scan_contexts_char_literal():
    text = "li $t0, '#' # real"
    segments = scanner.scan_contexts(text)
    assert [s.kind for s in segments] == [Context.CODE, Context.CHAR, Context.CODE, Context.COMMENT]
    assert scanner.context_at(segments, text.index("'") + 1) is Context.CHAR


def test_unterminated_literal_ends_at_newline():
    text = '"open\nnop'
    segments = scanner.scan_contexts(text)
    assert scanner.context_at(segments, text.index("nop")) is Context.CODE


def test_segments_cover_the_text():
    text = 'a "b" \'c\' # d\ne'
    segments = scanner.scan_contexts(text)
    assert segments[0].start == 0
    assert segments[-1].end == len(text)
    for left, right in zip(segments, segments[1:]):
        assert left.end == right.start


def test_strip_comment():
    assert scanner.strip_comment('.asciiz "a#b" # c') == '.asciiz "a#b" '
    assert scanner.strip_comment("nop") == "nop"


def test_decode_escapes():
    assert scanner.decode_escapes("a\\nb\\t\\0\\\\\\\"") == 'a\nb\t\0\\"'
    assert scanner.decode_escapes("\\'") == "'"


@pytest.mark.parametrize("body", ["\\q", "abc\\"])
def test_decode_escapes_invalid(body):
    with pytest.raises(NeoMIPSError) as exc:
        scanner.decode_escapes(body)
    assert exc.value.kind is ErrorKind.INVALID_ESCAPE_SEQUENCE

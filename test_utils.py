"""Tests de utilidades: conversión numérica, lectura de archivos y errores"""
import pytest

from neomips.model.errors import ErrorKind, NeoMIPSError
from neomips.utils import FileManager, IntBase
from neomips.utils import NumberConversion as NC


# -----------------------
# NumberConversion
# -----------------------

def test_to_integer_bases():
    assert NC.to_integer("0x10") == 16
    assert NC.to_integer("10") == 10
    assert NC.to_integer("10", IntBase.DECIMAL) == 10
    assert NC.to_integer("ff", IntBase.HEX) == 255


def test_to_integer_rejects_garbage():
    with pytest.raises(NeoMIPSError) as exc:
        NC.to_integer("0x10", IntBase.DECIMAL)
    assert exc.value.kind is ErrorKind.INTEGER_PARSING


@pytest.mark.parametrize("text,value", [
    ("0", 0),
    ("42", 42),
    ("0x1F", 31),
    ("0XFFFFFFFF", 0xFFFFFFFF),
    ("-2147483648", -(1 << 31)),
    ("4294967295", (1 << 32) - 1),
])
def test_parse_immediate(text, value):
    assert NC.parse_immediate(text) == value


@pytest.mark.parametrize("text", ["0x123456789", "4294967296", "-2147483649", "abc", "0x", "1.5"])
def test_parse_immediate_errors(text):
    with pytest.raises(NeoMIPSError) as exc:
        NC.parse_immediate(text)
    assert exc.value.kind is ErrorKind.INTEGER_PARSING


def test_two_complement_words():
    assert NC.int2word(-1) == 0xFFFFFFFF
    assert NC.int2word(0xFFFFFFFF) == 0xFFFFFFFF
    assert NC.int2word(-1, 8) == 0xFF
    assert NC.int2word(-128, 8) == 0x80
    assert NC.word2int(0xFFFFFFFC) == -4
    assert NC.word2int(0x7FFFFFFF) == 0x7FFFFFFF


@pytest.mark.parametrize("value,bits", [(256, 8), (-129, 8), (1 << 32, 32), (-(1 << 31) - 1, 32)])
def test_int2word_out_of_range(value, bits):
    with pytest.raises(NeoMIPSError) as exc:
        NC.int2word(value, bits)
    assert exc.value.kind is ErrorKind.INTEGER_PARSING


# -----------------------
# FileManager
# -----------------------

def test_read_source(tmp_path):
    f = tmp_path / "prog.asm"
    f.write_text("nop\n# ñandú 🚀\n", encoding="utf-8")
    assert FileManager.read_source(f) == "nop\n# ñandú 🚀\n"


def test_read_source_missing(tmp_path):
    with pytest.raises(NeoMIPSError) as exc:
        FileManager.read_source(tmp_path / "nope.asm")
    assert exc.value.kind is ErrorKind.FILE_NOT_FOUND
    assert "nope.asm" in exc.value.why


def test_read_source_directory(tmp_path):
    with pytest.raises(NeoMIPSError) as exc:
        FileManager.read_source(tmp_path)
    assert exc.value.kind is ErrorKind.FILE_READ


def test_read_source_bad_encoding(tmp_path):
    f = tmp_path / "bad.asm"
    f.write_bytes(b"nop \xff\xfe\n")
    with pytest.raises(NeoMIPSError) as exc:
        FileManager.read_source(f)
    assert exc.value.kind is ErrorKind.ENCODING_TRANSLATION

    with pytest.raises(NeoMIPSError) as exc:
        FileManager.read_source(f, encoding="no-such-codec")
    assert exc.value.kind is ErrorKind.ENCODING_TRANSLATION


# -----------------------
# NeoMIPSError
# -----------------------

def test_error_rendering():
    err = NeoMIPSError(ErrorKind.INVALID_SYNTAX, "5", "bad")
    assert str(err) == "line: 5, what: InvalidSyntax, why: bad"


def test_error_location_is_filled_once():
    err = NeoMIPSError(ErrorKind.INVALID_DIRECTIVE, "", "x")
    assert err.at(3).where == "3"
    assert err.at(9).where == "3"
    assert str(NeoMIPSError(ErrorKind.FILE_READ, "", "y")) == "line: ?, what: FileRead, why: y"

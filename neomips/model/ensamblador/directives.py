"""
Parsers de directivas.

Each handler receives the directive, the rest of its line (comment already
stripped) and the line number, and returns the tokens the statement yields.
Data directives lay out their values as little-endian bytes with numpy.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List

import numpy as np

from neomips import constants
from neomips.model.ensamblador import lex_mips
from neomips.model.ensamblador.isa import Directive
from neomips.model.ensamblador.scanner import decode_escapes
from neomips.model.ensamblador.tokens import DirectiveToken
from neomips.model.errors import ErrorKind, NeoMIPSError
from neomips.utils import NumberConversion as NC

logger = logging.getLogger(__name__)

DirectiveParser = Callable[[Directive, str, int], List[DirectiveToken]]

_INT_LAYOUT = {
    Directive.BYTE: (constants.BYTE_SIZE_BITS, "<u1"),
    Directive.HALF: (constants.HALF_SIZE_BITS, "<u2"),
    Directive.WORD: (constants.WORD_SIZE_BITS, "<u4"),
}

_FLOAT_LAYOUT = {
    Directive.FLOAT: "<f4",
    Directive.DOUBLE: "<f8",
}


def _syntax(directive: Directive, why: str) -> NeoMIPSError:
    return NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f"{directive.spelling}: {why}")


def _char_value(body: str) -> int:
    decoded = decode_escapes(body)
    if len(decoded) != 1:
        raise NeoMIPSError(
            ErrorKind.INVALID_SYNTAX, "", f"'{body}' is not a single character"
        )
    return ord(decoded)


def _values(directive: Directive, text: str, kinds) -> list:
    """
    Read a list of optionally signed values.

    :param kinds: accepted token types among NUMBER, FLOAT and CHAR
    """
    toks = lex_mips.tokenize(text)
    values = []
    i = 0
    while i < len(toks):
        sign = 1
        if toks[i][0] in ("PLUS", "MINUS"):
            sign = -1 if toks[i][0] == "MINUS" else 1
            i += 1
            if i == len(toks) or toks[i][0] not in ("NUMBER", "FLOAT"):
                raise _syntax(directive, "sign must be followed by a number")
        kind, value, _ = toks[i]
        if kind not in kinds:
            raise _syntax(directive, f"unexpected operand {value!r}")
        if kind == "CHAR":
            value = _char_value(value)
        values.append(sign * value)
        i += 1
    return values


def _require_one_number(directive: Directive, text: str) -> int:
    values = _values(directive, text, ("NUMBER",))
    if len(values) != 1:
        raise _syntax(directive, "expects exactly one integer")
    return values[0]


def parse_integer_data(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    bits, dtype = _INT_LAYOUT[directive]
    values = _values(directive, text, ("NUMBER", "CHAR"))
    if not values:
        raise _syntax(directive, "expects at least one value")
    words = [NC.int2word(v, bits) for v in values]
    data = np.array(words, dtype=dtype).tobytes()
    return [DirectiveToken(line, directive, values, data)]


def parse_float_data(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    values = [float(v) for v in _values(directive, text, ("NUMBER", "FLOAT"))]
    if not values:
        raise _syntax(directive, "expects at least one value")
    data = np.array(values, dtype=_FLOAT_LAYOUT[directive]).tobytes()
    return [DirectiveToken(line, directive, values, data)]


def parse_string_data(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    toks = lex_mips.tokenize(text)
    if not toks or any(kind != "STRING" for kind, _, _ in toks):
        raise _syntax(directive, "expects one or more string literals")
    strings = [decode_escapes(value) for _, value, _ in toks]
    data = b""
    for s in strings:
        data += s.encode("utf-8")
        if directive is Directive.ASCIIZ:
            data += b"\0"
    return [DirectiveToken(line, directive, strings, data)]


def parse_align(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    n = _require_one_number(directive, text)
    if not 0 <= n <= 3:
        raise NeoMIPSError(ErrorKind.INTEGER_PARSING, "", f".align expects 0..3, got {n}")
    return [DirectiveToken(line, directive, [n])]


def parse_space(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    n = _require_one_number(directive, text)
    if n < 0:
        raise NeoMIPSError(ErrorKind.INTEGER_PARSING, "", f".space expects a size >= 0, got {n}")
    data = np.zeros(n, dtype="<u1").tobytes()
    return [DirectiveToken(line, directive, [n], data)]


def parse_section(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    values = _values(directive, text, ("NUMBER",))
    if len(values) > 1:
        raise _syntax(directive, "expects at most one address")
    return [DirectiveToken(line, directive, [NC.int2word(v) for v in values])]


def parse_globl(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    toks = lex_mips.tokenize(text)
    if not toks or any(kind != "LABEL" for kind, _, _ in toks):
        raise _syntax(directive, "expects one or more labels")
    return [DirectiveToken(line, directive, [value for _, value, _ in toks])]


def parse_extern(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    toks = lex_mips.tokenize(text)
    if [kind for kind, _, _ in toks] != ["LABEL", "NUMBER"]:
        raise _syntax(directive, "expects a label and a size")
    return [DirectiveToken(line, directive, [toks[0][1], toks[1][1]])]


def parse_set(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    logger.warning("line %d: .set %s ignored", line, text.strip())
    return []


def reject_preprocessor_directive(directive: Directive, text: str, line: int) -> List[DirectiveToken]:
    raise NeoMIPSError(
        ErrorKind.INVALID_DIRECTIVE, "",
        f"{directive.spelling} must be resolved by the preprocessor"
    )


DIRECTIVE_PARSERS: Dict[Directive, DirectiveParser] = {
    Directive.ALIGN: parse_align,
    Directive.ASCII: parse_string_data,
    Directive.ASCIIZ: parse_string_data,
    Directive.BYTE: parse_integer_data,
    Directive.DATA: parse_section,
    Directive.DOUBLE: parse_float_data,
    Directive.END_MACRO: reject_preprocessor_directive,
    Directive.EQV: reject_preprocessor_directive,
    Directive.EXTERN: parse_extern,
    Directive.FLOAT: parse_float_data,
    Directive.GLOBL: parse_globl,
    Directive.HALF: parse_integer_data,
    Directive.INCLUDE: reject_preprocessor_directive,
    Directive.KDATA: parse_section,
    Directive.KTEXT: parse_section,
    Directive.MACRO: reject_preprocessor_directive,
    Directive.SET: parse_set,
    Directive.SPACE: parse_space,
    Directive.TEXT: parse_section,
    Directive.WORD: parse_integer_data,
}

"""
Operand tokenizer for MIPS statements using PLY (lex).

Tokenizes the text that follows a mnemonic or a directive. Commas and
blanks are ignored; signs are separate tokens so that both ``-5`` and
``label-5`` read the same way.
"""
from __future__ import annotations

import ply.lex as lex
from ply.lex import TOKEN

from neomips.model.ensamblador.isa import register_index
from neomips.model.ensamblador.scanner import IDENTIFIER_PATTERN
from neomips.model.errors import ErrorKind, NeoMIPSError
from neomips.utils import NumberConversion as NC

# Token names
tokens = (
    'REGISTER',
    'FLOAT',
    'NUMBER',
    'LABEL',
    'STRING',
    'CHAR',
    'LPAREN',
    'RPAREN',
    'PLUS',
    'MINUS',
)

# Simple tokens
t_LPAREN = r"\("
t_RPAREN = r"\)"
t_PLUS = r"\+"
t_MINUS = r"-"

# Order matters in PLY! FLOAT must come before NUMBER.


def t_REGISTER(t):
    r"\$\w+"
    t.value = register_index(t.value)
    return t


def t_FLOAT(t):
    r"[0-9]+(?:\.[0-9]*(?:[eE][+-]?[0-9]+)?|[eE][+-]?[0-9]+)"
    t.value = float(t.value)
    return t


def t_NUMBER(t):
    r"0[xX][0-9A-Fa-f]+|[0-9]+"
    t.value = NC.parse_immediate(t.value)
    return t


@TOKEN(IDENTIFIER_PATTERN)
def t_LABEL(t):
    return t


def t_STRING(t):
    r'"(?:[^"\\\n]|\\.)*"'
    t.value = t.value[1:-1]
    return t


def t_CHAR(t):
    r"'(?:[^'\\\n]|\\.)'"
    t.value = t.value[1:-1]
    return t


t_ignore = ' \t\r\f\v,'


def t_newline(t):
    r"\n+"
    t.lexer.lineno += len(t.value)


def t_error(t):
    raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f"Illegal character '{t.value[0]}'")


def build_lexer(**kwargs):
    return lex.lex(**kwargs)


_lexer = None


def tokenize(text: str):
    """
    :param text: operand text of a single statement
    :return: list of (type, value, lexpos)
    """
    global _lexer
    if _lexer is None:
        _lexer = build_lexer()
    lexer = _lexer.clone()
    lexer.input(text)
    out = []
    while True:
        tok = lexer.token()
        if not tok:
            break
        out.append((tok.type, tok.value, tok.lexpos))
    return out

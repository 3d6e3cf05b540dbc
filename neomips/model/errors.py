"""
Errores del ensamblador.

Every stage raises a single exception type, NeoMIPSError, tagged with an
ErrorKind. The payload is the location ("where", usually a 1-based line
number) and a human readable reason ("why").
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INTEGER_PARSING = "IntegerParsing"
    FILE_NOT_FOUND = "FileNotFound"
    FILE_READ = "FileRead"
    ENCODING_TRANSLATION = "EncodingTranslation"
    INVALID_SYNTAX = "InvalidSyntax"
    INVALID_INSTRUCTION = "InvalidInstruction"
    INVALID_DIRECTIVE = "InvalidDirective"
    INVALID_ESCAPE_SEQUENCE = "InvalidEscapeSequence"
    RECURSION_LIMIT = "RecursionLimit"


class NeoMIPSError(Exception):
    """Error durante el preprocesamiento o el análisis léxico"""

    def __init__(self, kind: ErrorKind, where: str, why: str):
        super().__init__(why)
        self.kind = kind
        self.where = where
        self.why = why

    def at(self, where) -> NeoMIPSError:
        """Fill in the location when the raising code did not know it."""
        if not self.where:
            self.where = str(where)
        return self

    def __str__(self) -> str:
        return f"line: {self.where or '?'}, what: {self.kind.value}, why: {self.why}"

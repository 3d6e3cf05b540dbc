"""Ensamblador package: scanner, ISA tables, operand matcher and lexer"""

from .isa import Archetype, Directive, Instruction, Pseudoinstruction
from .lexer import Lexer, tokenize
from .operands import InstructionParameters, match_operands
from .tokens import DirectiveToken, InstructionToken, LabelToken, TokenType

__all__ = [
    "Archetype", "Directive", "Instruction", "Pseudoinstruction",
    "Lexer", "tokenize",
    "InstructionParameters", "match_operands",
    "DirectiveToken", "InstructionToken", "LabelToken", "TokenType",
]

"""Tokens produced by the lexer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from neomips.model.ensamblador.isa import AnyInstruction, Directive
from neomips.model.ensamblador.operands import InstructionParameters


class TokenType(Enum):
    LABEL = "label"
    DIRECTIVE = "directive"
    INSTRUCTION = "instruction"


@dataclass
class Token:
    line: int

    @property
    def type(self) -> TokenType:
        raise NotImplementedError


@dataclass
class LabelToken(Token):
    name: str = ""

    @property
    def type(self) -> TokenType:
        return TokenType.LABEL

    def __str__(self) -> str:
        return f"{self.line}: LABEL {self.name}"


@dataclass
class DirectiveToken(Token):
    directive: Directive = Directive.TEXT
    arguments: list = field(default_factory=list)
    # Little-endian bytes laid out by data directives
    data: bytes = b""

    @property
    def type(self) -> TokenType:
        return TokenType.DIRECTIVE

    def __str__(self) -> str:
        text = f"{self.line}: DIRECTIVE {self.directive.spelling}"
        if self.arguments:
            text += " " + ", ".join(str(a) for a in self.arguments)
        if self.data:
            text += f" [{self.data.hex()}]"
        return text


@dataclass
class InstructionToken(Token):
    mnemonic: str = ""
    instruction: AnyInstruction = None
    parameters: InstructionParameters = field(default_factory=InstructionParameters)

    @property
    def type(self) -> TokenType:
        return TokenType.INSTRUCTION

    def __str__(self) -> str:
        p = self.parameters
        fields = [f"{k}={v}" for k, v in (
            ("reg1", p.reg1), ("reg2", p.reg2), ("reg3", p.reg3),
            ("label", p.label), ("resolved", p.resolved_label),
        ) if v is not None]
        if p.immediate:
            fields.append(f"imm=0x{p.immediate:08x}")
        if p.offset:
            fields.append(f"offset=0x{p.offset:08x}")
        return f"{self.line}: INSTRUCTION {self.instruction.name} {' '.join(fields)}".rstrip()


AnyToken = Union[LabelToken, DirectiveToken, InstructionToken]

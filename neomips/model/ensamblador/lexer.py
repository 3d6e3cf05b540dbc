"""
Lexer over the preprocessed buffer.

Index driven state machine: every state is a function that consumes part of
the buffer and returns the next state, or None at the end of the buffer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from neomips.model.ensamblador import scanner
from neomips.model.ensamblador.directives import DIRECTIVE_PARSERS
from neomips.model.ensamblador.isa import (
    AnyInstruction,
    Archetype,
    Instruction,
    Pseudoinstruction,
    lookup_directive,
    lookup_instruction,
)
from neomips.model.ensamblador.operands import InstructionParameters, match_operands
from neomips.model.ensamblador.tokens import (
    AnyToken,
    InstructionToken,
    LabelToken,
)
from neomips.model.errors import ErrorKind, NeoMIPSError

logger = logging.getLogger(__name__)

StateFn = Callable[["Lexer"], Optional["StateFn"]]

InstructionParser = Callable[
    [AnyInstruction, str], Optional[Tuple[AnyInstruction, InstructionParameters]]
]


def parse_generic(instruction: AnyInstruction, text: str):
    params = match_operands(text, instruction.archetypes)
    if params is None:
        return None
    return instruction, params


def parse_jalr(instruction: AnyInstruction, text: str):
    """``jalr $rs`` links into $ra; ``jalr $rd, $rs`` names the link register."""
    params = match_operands(text, instruction.archetypes)
    if params is None:
        return None
    if params.archetype == Archetype.REG:
        return Instruction.JALR_RA, params
    return instruction, params


def _build_instruction_parsers() -> Dict[AnyInstruction, InstructionParser]:
    parsers: Dict[AnyInstruction, InstructionParser] = {}
    for member in list(Instruction) + list(Pseudoinstruction):
        parsers[member] = parse_generic
    parsers[Instruction.JALR] = parse_jalr
    return parsers


INSTRUCTION_PARSERS = _build_instruction_parsers()


@dataclass
class Lexer:
    input: str
    pos: int = 0
    # Start of the statement being lexed, used for line attribution
    start: int = 0
    tokens: list = field(default_factory=list)
    _newlines: list = field(init=False, repr=False)

    def __post_init__(self):
        self._newlines = scanner.newline_offsets(self.input)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    @staticmethod
    def lex_initial(l: Lexer) -> Optional[StateFn]:
        while l.pos < len(l.input) and scanner.is_space(l.input[l.pos]):
            l.pos += 1
        if l.pos >= len(l.input):
            return None
        l.start = l.pos
        c = l.input[l.pos]
        if c == "#":
            return Lexer.lex_comment
        if c == ".":
            return Lexer.lex_directive
        if scanner.is_digit_start(c):
            raise NeoMIPSError(
                ErrorKind.INVALID_SYNTAX, "", "Statements cannot start with a number."
            )
        return Lexer.lex_alphabetic

    @staticmethod
    def lex_comment(l: Lexer) -> Optional[StateFn]:
        l.pos = scanner.line_end(l.input, l.pos)
        return Lexer.lex_initial

    @staticmethod
    def lex_directive(l: Lexer) -> Optional[StateFn]:
        word, end = scanner.get_next_word(l.input, l.pos)
        directive = lookup_directive(word)
        if directive is None:
            raise NeoMIPSError(
                ErrorKind.INVALID_DIRECTIVE, "", f"{word} is not a valid directive."
            )
        eol = scanner.line_end(l.input, end)
        text = scanner.strip_comment(l.input[end:eol])
        line = l.line()
        logger.debug("line %d: directive %s %s", line, directive.spelling, text)
        l.tokens.extend(DIRECTIVE_PARSERS[directive](directive, text, line))
        l.pos = eol
        return Lexer.lex_initial

    @staticmethod
    def lex_alphabetic(l: Lexer) -> Optional[StateFn]:
        if scanner.is_tag(l.input, l.pos):
            return Lexer.lex_label
        word, end = scanner.get_next_word(l.input, l.pos)
        if not word:
            raise NeoMIPSError(
                ErrorKind.INVALID_SYNTAX, "", f"Unexpected character '{l.input[l.pos]}'."
            )
        candidates = lookup_instruction(word)
        if not candidates:
            raise NeoMIPSError(
                ErrorKind.INVALID_SYNTAX, "", f"{word} is not a valid instruction statement."
            )
        eol = scanner.line_end(l.input, end)
        text = scanner.strip_comment(l.input[end:eol])
        for candidate in candidates:
            parsed = INSTRUCTION_PARSERS[candidate](candidate, text)
            if parsed is not None:
                instruction, params = parsed
                line = l.line()
                logger.debug("line %d: %s %s", line, instruction.name, params.archetype)
                l.tokens.append(InstructionToken(line, word, instruction, params))
                break
        else:
            raise NeoMIPSError(
                ErrorKind.INVALID_INSTRUCTION, "",
                f"Invalid operands for {word}: {text.strip()!r}"
            )
        l.pos = eol
        return Lexer.lex_initial

    @staticmethod
    def lex_label(l: Lexer) -> Optional[StateFn]:
        word, end = scanner.get_next_word(l.input, l.pos)
        if not scanner.is_identifier(word):
            raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f"{word} is not a valid label.")
        l.tokens.append(LabelToken(l.line(), word))
        # skip the ':'
        l.pos = end + 1
        return Lexer.lex_initial

    # ------------------------------------------------------------------

    def line(self) -> int:
        return scanner.line_at(self._newlines, self.start)

    def run(self) -> list:
        state: Optional[StateFn] = Lexer.lex_initial
        try:
            while state is not None:
                state = state(self)
            self._resolve_labels()
        except NeoMIPSError as e:
            self.tokens.clear()
            raise e.at(self.line())
        return self.tokens

    def _resolve_labels(self):
        labels: Dict[str, int] = {}
        for index, token in enumerate(self.tokens):
            if isinstance(token, LabelToken):
                if token.name in labels:
                    raise NeoMIPSError(
                        ErrorKind.INVALID_SYNTAX, str(token.line), f"Label {token.name} is already defined."
                    )
                labels[token.name] = index
        for token in self.tokens:
            if isinstance(token, InstructionToken) and token.parameters.label is not None:
                token.parameters.resolved_label = labels.get(token.parameters.label)


def tokenize(text: str) -> list[AnyToken]:
    """Lex a preprocessed buffer into tokens."""
    return Lexer(text).run()

"""Tests del lexer y de los parsers de directivas"""
import numpy as np
import pytest

from neomips.model.ensamblador import lexer
from neomips.model.ensamblador.isa import Archetype, Directive, Instruction, Pseudoinstruction
from neomips.model.ensamblador.lexer import INSTRUCTION_PARSERS, Lexer
from neomips.model.ensamblador.tokens import DirectiveToken, InstructionToken, LabelToken, TokenType
from neomips.model.errors import ErrorKind, NeoMIPSError
from neomips.model.pipeline import pipeline_from_file, pipeline_from_text

PROGRAM = """\
.data
msg: .asciiz "hi"
.text
main: li $v0, 4
      la $a0, msg   # address
      syscall
      j main
"""


def raises_kind(kind, text):
    with pytest.raises(NeoMIPSError) as exc:
        lexer.tokenize(text)
    assert exc.value.kind is kind
    return exc.value


# -----------------------
# Statements
# -----------------------

def test_program_tokens():
    tokens = lexer.tokenize(PROGRAM)
    assert [t.type for t in tokens] == [
        TokenType.DIRECTIVE, TokenType.LABEL, TokenType.DIRECTIVE, TokenType.DIRECTIVE,
        TokenType.LABEL, TokenType.INSTRUCTION, TokenType.INSTRUCTION,
        TokenType.INSTRUCTION, TokenType.INSTRUCTION,
    ]
    assert [t.line for t in tokens] == [1, 2, 2, 3, 4, 4, 5, 6, 7]

    li, la, syscall, jump = tokens[5:]
    assert li.instruction is Pseudoinstruction.LI
    assert (li.parameters.reg1, li.parameters.immediate) == (2, 4)
    assert la.instruction is Pseudoinstruction.LA
    assert la.parameters.archetype is Archetype.REG_LABEL
    assert la.parameters.resolved_label == 1
    assert syscall.instruction is Instruction.SYSCALL
    assert jump.parameters.label == "main"
    assert jump.parameters.resolved_label == 4
    assert tokens[2].data == b"hi\0"


def test_labels_and_statements_share_a_line():
    tokens = lexer.tokenize("a: b: nop")
    assert [type(t) for t in tokens] == [LabelToken, LabelToken, InstructionToken]
    assert [tokens[0].name, tokens[1].name] == ["a", "b"]


def test_emoji_label():
    tokens = lexer.tokenize("🚀: j 🚀")
    assert tokens[0].name == "🚀"
    assert tokens[1].parameters.resolved_label == 0


def test_unresolved_label_stays_none():
    tokens = lexer.tokenize("j elsewhere")
    assert tokens[0].parameters.label == "elsewhere"
    assert tokens[0].parameters.resolved_label is None


def test_mnemonics_are_case_insensitive():
    token = lexer.tokenize("ADD $t0, $t1, $t2")[0]
    assert token.instruction is Instruction.ADD
    assert token.mnemonic == "ADD"


def test_comments_and_blank_lines():
    tokens = lexer.tokenize('# only a comment "\n\n   \n nop # trailing ( \n')
    assert len(tokens) == 1
    assert tokens[0].line == 4


def test_pseudoinstruction_fallback():
    real = lexer.tokenize("loop: beq $t0, $t1, loop")[1]
    pseudo = lexer.tokenize("loop: beq $t0, 5, loop")[1]
    assert real.instruction is Instruction.BEQ
    assert pseudo.instruction is Pseudoinstruction.BEQ
    assert pseudo.parameters.immediate == 5


def test_jalr_forms():
    assert lexer.tokenize("jalr $t0")[0].instruction is Instruction.JALR_RA
    token = lexer.tokenize("jalr $s0, $t0")[0]
    assert token.instruction is Instruction.JALR
    assert (token.parameters.reg1, token.parameters.reg2) == (16, 8)


def test_every_member_has_a_parser():
    assert set(INSTRUCTION_PARSERS) == set(Instruction) | set(Pseudoinstruction)


# -----------------------
# Errors
# -----------------------

def test_invalid_mnemonic_reports_line():
    err = raises_kind(ErrorKind.INVALID_SYNTAX, "nop\nnop\n\nnop\nfrobnicate $t0\nnop")
    assert err.where == "5"
    assert "frobnicate" in err.why
    assert str(err).startswith("line: 5, what: InvalidSyntax")


def test_line_attribution_in_a_long_buffer():
    err = raises_kind(ErrorKind.INVALID_SYNTAX, "nop\n" * 20000 + "frobnicate")
    assert err.where == "20001"


def test_unknown_directive():
    err = raises_kind(ErrorKind.INVALID_DIRECTIVE, ".text\n.bogus 1")
    assert ".bogus" in err.why
    assert err.where == "2"


def test_statement_cannot_start_with_digit():
    raises_kind(ErrorKind.INVALID_SYNTAX, "nop\n4 $t0")


def test_invalid_operands():
    err = raises_kind(ErrorKind.INVALID_INSTRUCTION, "add $t0, $t1")
    assert "add" in err.why


def test_invalid_label():
    raises_kind(ErrorKind.INVALID_SYNTAX, "bad-label: nop")


def test_duplicate_label():
    err = raises_kind(ErrorKind.INVALID_SYNTAX, "x: nop\nx: nop")
    assert err.where == "2"


def test_error_discards_tokens():
    lx = Lexer("nop\nnop\nfrobnicate")
    with pytest.raises(NeoMIPSError):
        lx.run()
    assert lx.tokens == []


def test_preprocessor_directives_must_not_reach_the_lexer():
    for text in (".eqv X 1", '.include "x.asm"', ".macro m", ".end_macro"):
        raises_kind(ErrorKind.INVALID_DIRECTIVE, text)


# -----------------------
# Directives
# -----------------------

def directive(text):
    tokens = lexer.tokenize(text)
    assert len(tokens) == 1 and isinstance(tokens[0], DirectiveToken)
    return tokens[0]


def test_word_half_byte_layout():
    assert directive(".word -1, 0x10").data == bytes.fromhex("ffffffff10000000")
    assert directive(".half 0x1234, -2").data == bytes.fromhex("3412feff")
    t = directive(".byte 'A', '\\n', 255")
    assert t.data == bytes([65, 10, 255])
    assert t.directive is Directive.BYTE


@pytest.mark.parametrize("text", [".byte 256", ".half 0x10000", ".byte -129"])
def test_data_range_checks(text):
    raises_kind(ErrorKind.INTEGER_PARSING, text)


def test_float_double_layout():
    assert directive(".float 1.5, 2").data == np.array([1.5, 2.0], dtype="<f4").tobytes()
    assert directive(".double -0.25").data == np.array([-0.25], dtype="<f8").tobytes()


def test_ascii_and_asciiz():
    assert directive('.ascii "a\\tb", "c"').data == b"a\tbc"
    t = directive('.asciiz "x", "ñ"')
    assert t.data == b"x\0" + "ñ".encode("utf-8") + b"\0"
    assert t.arguments == ["x", "ñ"]
    raises_kind(ErrorKind.INVALID_ESCAPE_SEQUENCE, '.ascii "bad\\q"')
    raises_kind(ErrorKind.INVALID_SYNTAX, ".ascii 12")


def test_space_and_align():
    assert directive(".space 3").data == b"\0\0\0"
    assert directive(".align 2").arguments == [2]
    raises_kind(ErrorKind.INTEGER_PARSING, ".align 4")


def test_sections_globl_extern():
    assert directive(".data 0x10010000").arguments == [0x10010000]
    assert directive(".ktext").arguments == []
    assert directive(".globl main, helper").arguments == ["main", "helper"]
    assert directive(".extern buf 16").arguments == ["buf", 16]
    raises_kind(ErrorKind.INVALID_SYNTAX, ".extern 16")


def test_set_is_ignored(caplog):
    assert lexer.tokenize(".set noreorder\nnop")[0].type is TokenType.INSTRUCTION
    assert "noreorder" in caplog.text


def test_directive_comment_with_quote():
    assert directive('.word 1 # "').arguments == [1]


# -----------------------
# Pipeline
# -----------------------

def test_pipeline_expands_before_lexing():
    src = ".eqv COUNT 3\n.macro add2(%a,%b)\nadd %a,%a,%b\n.end_macro\nli $t0, COUNT\nadd2($t0,$t1)"
    tokens = pipeline_from_text(src)
    assert [t.instruction for t in tokens] == [Pseudoinstruction.LI, Instruction.ADD]
    assert tokens[0].parameters.immediate == 3
    assert tokens[1].line == 6


def test_pipeline_line_numbers_survive_macro_blocks():
    src = ".macro m\nnop\n.end_macro\nm\nfrobnicate"
    with pytest.raises(NeoMIPSError) as exc:
        pipeline_from_text(src)
    assert exc.value.where == "5"


def test_pipeline_from_file(tmp_path):
    (tmp_path / "inc.asm").write_text("helper: jr $ra\n", encoding="utf-8")
    main = tmp_path / "main.asm"
    main.write_text('.text\njal helper\n.include "inc.asm"\n', encoding="utf-8")
    tokens = pipeline_from_file(main)
    assert tokens[1].parameters.resolved_label == 2

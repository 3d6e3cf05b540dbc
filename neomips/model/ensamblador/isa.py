"""
Tablas del ISA MIPS32: directivas, instrucciones, pseudoinstrucciones,
arquetipos de operandos y nombres de registros.

Pure data. Every spelling maps to exactly one member of its table.
"""
from __future__ import annotations

from enum import Enum, Flag
from typing import Dict, Optional, Union

from neomips import constants
from neomips.model.errors import ErrorKind, NeoMIPSError


class Archetype(Flag):
    """Legal operand shapes of a mnemonic."""
    NO_PARAMS = 1 << 0
    IMM = 1 << 1
    LABEL = 1 << 2
    REG = 1 << 3
    REG_IMM = 1 << 4
    REG_LABEL = 1 << 5
    IMM_LABEL = 1 << 6
    REG_REG = 1 << 7
    REG_REG_REG = 1 << 8
    REG_REG_IMM = 1 << 9
    REG_REG_LABEL = 1 << 10
    IMM_REG_REG = 1 << 11
    REG_MEM_REG = 1 << 12
    REG_OFFSET_FOR_REG = 1 << 13
    REG_IMM_LABEL = 1 << 14
    REG_LABEL_PLUS_IMM = 1 << 15
    REG_LABEL_PLUS_IMM_OFFSET_FOR_REG = 1 << 16
    REG_LABEL_AS_OFFSET_REG = 1 << 17


# Specific shapes first, structural fallbacks last
ARCHETYPE_PRIORITY = (
    Archetype.REG_LABEL_AS_OFFSET_REG,
    Archetype.REG_LABEL_PLUS_IMM_OFFSET_FOR_REG,
    Archetype.REG_LABEL_PLUS_IMM,
    Archetype.REG_OFFSET_FOR_REG,
    Archetype.REG_MEM_REG,
    Archetype.REG_REG_IMM,
    Archetype.REG_REG_LABEL,
    Archetype.REG_IMM_LABEL,
    Archetype.IMM_REG_REG,
    Archetype.REG_IMM,
    Archetype.REG_LABEL,
    Archetype.IMM_LABEL,
    Archetype.REG_REG,
    Archetype.REG,
    Archetype.IMM,
    Archetype.LABEL,
    Archetype.REG_REG_REG,
    Archetype.NO_PARAMS,
)

_A = Archetype
NONE = _A.NO_PARAMS
R = _A.REG
RR = _A.REG_REG
RRR = _A.REG_REG_REG
RI = _A.REG_IMM
RRI = _A.REG_REG_IMM
R_LABEL = _A.REG_LABEL
RR_LABEL = _A.REG_REG_LABEL
JUMP = _A.LABEL | _A.IMM
LOAD_STORE = (
    _A.REG_OFFSET_FOR_REG
    | _A.REG_MEM_REG
    | _A.REG_IMM
    | _A.REG_LABEL
    | _A.REG_LABEL_PLUS_IMM
    | _A.REG_LABEL_AS_OFFSET_REG
    | _A.REG_LABEL_PLUS_IMM_OFFSET_FOR_REG
)


class Directive(Enum):
    ALIGN = ".align"
    ASCII = ".ascii"
    ASCIIZ = ".asciiz"
    BYTE = ".byte"
    DATA = ".data"
    DOUBLE = ".double"
    END_MACRO = ".end_macro"
    EQV = ".eqv"
    EXTERN = ".extern"
    FLOAT = ".float"
    GLOBL = ".globl"
    HALF = ".half"
    INCLUDE = ".include"
    KDATA = ".kdata"
    KTEXT = ".ktext"
    MACRO = ".macro"
    SET = ".set"
    SPACE = ".space"
    TEXT = ".text"
    WORD = ".word"

    @property
    def spelling(self) -> str:
        return self.value


class Instruction(Enum):
    ABS_D = ("abs.d", RR)
    ABS_S = ("abs.s", RR)
    ADD = ("add", RRR)
    ADD_D = ("add.d", RRR)
    ADD_S = ("add.s", RRR)
    ADDI = ("addi", RRI)
    ADDIU = ("addiu", RRI)
    ADDU = ("addu", RRR)
    AND = ("and", RRR)
    ANDI = ("andi", RRI)
    BC1F = ("bc1f", _A.LABEL | _A.IMM_LABEL)
    BC1T = ("bc1t", _A.LABEL | _A.IMM_LABEL)
    BEQ = ("beq", RR_LABEL)
    BGEZ = ("bgez", R_LABEL)
    BGEZAL = ("bgezal", R_LABEL)
    BGTZ = ("bgtz", R_LABEL)
    BLEZ = ("blez", R_LABEL)
    BLTZ = ("bltz", R_LABEL)
    BLTZAL = ("bltzal", R_LABEL)
    BNE = ("bne", RR_LABEL)
    BREAK = ("break", NONE | _A.IMM)
    C_EQ_D = ("c.eq.d", RR | _A.IMM_REG_REG)
    C_EQ_S = ("c.eq.s", RR | _A.IMM_REG_REG)
    C_LE_D = ("c.le.d", RR | _A.IMM_REG_REG)
    C_LE_S = ("c.le.s", RR | _A.IMM_REG_REG)
    C_LT_D = ("c.lt.d", RR | _A.IMM_REG_REG)
    C_LT_S = ("c.lt.s", RR | _A.IMM_REG_REG)
    CEIL_W_D = ("ceil.w.d", RR)
    CEIL_W_S = ("ceil.w.s", RR)
    CLO = ("clo", RR)
    CLZ = ("clz", RR)
    CVT_D_S = ("cvt.d.s", RR)
    CVT_D_W = ("cvt.d.w", RR)
    CVT_S_D = ("cvt.s.d", RR)
    CVT_S_W = ("cvt.s.w", RR)
    CVT_W_D = ("cvt.w.d", RR)
    CVT_W_S = ("cvt.w.s", RR)
    DIV = ("div", RR)
    DIV_D = ("div.d", RRR)
    DIV_S = ("div.s", RRR)
    DIVU = ("divu", RR)
    ERET = ("eret", NONE)
    FLOOR_W_D = ("floor.w.d", RR)
    FLOOR_W_S = ("floor.w.s", RR)
    J = ("j", JUMP)
    JAL = ("jal", JUMP)
    # Not reachable by spelling: the jalr handler refines JALR to it
    JALR_RA = ("jalr", R)
    JALR = ("jalr", R | RR)
    JR = ("jr", R)
    LB = ("lb", LOAD_STORE)
    LBU = ("lbu", LOAD_STORE)
    LDC1 = ("ldc1", LOAD_STORE)
    LH = ("lh", LOAD_STORE)
    LHU = ("lhu", LOAD_STORE)
    LL = ("ll", LOAD_STORE)
    LUI = ("lui", RI)
    LW = ("lw", LOAD_STORE)
    LWC1 = ("lwc1", LOAD_STORE)
    LWL = ("lwl", LOAD_STORE)
    LWR = ("lwr", LOAD_STORE)
    MADD = ("madd", RR)
    MADDU = ("maddu", RR)
    MFC0 = ("mfc0", RR)
    MFC1 = ("mfc1", RR)
    MFHI = ("mfhi", R)
    MFLO = ("mflo", R)
    MOV_D = ("mov.d", RR)
    MOV_S = ("mov.s", RR)
    MOVF = ("movf", RR | RRI)
    MOVF_D = ("movf.d", RR | RRI)
    MOVF_S = ("movf.s", RR | RRI)
    MOVN = ("movn", RRR)
    MOVN_D = ("movn.d", RRR)
    MOVN_S = ("movn.s", RRR)
    MOVT = ("movt", RR | RRI)
    MOVT_D = ("movt.d", RR | RRI)
    MOVT_S = ("movt.s", RR | RRI)
    MOVZ = ("movz", RRR)
    MOVZ_D = ("movz.d", RRR)
    MOVZ_S = ("movz.s", RRR)
    MSUB = ("msub", RR)
    MSUBU = ("msubu", RR)
    MTC0 = ("mtc0", RR)
    MTC1 = ("mtc1", RR)
    MTHI = ("mthi", R)
    MTLO = ("mtlo", R)
    MUL = ("mul", RRR)
    MUL_D = ("mul.d", RRR)
    MUL_S = ("mul.s", RRR)
    MULT = ("mult", RR)
    MULTU = ("multu", RR)
    NEG_D = ("neg.d", RR)
    NEG_S = ("neg.s", RR)
    NOP = ("nop", NONE)
    NOR = ("nor", RRR)
    OR = ("or", RRR)
    ORI = ("ori", RRI)
    ROUND_W_D = ("round.w.d", RR)
    ROUND_W_S = ("round.w.s", RR)
    SB = ("sb", LOAD_STORE)
    SC = ("sc", LOAD_STORE)
    SDC1 = ("sdc1", LOAD_STORE)
    SH = ("sh", LOAD_STORE)
    SLL = ("sll", RRI)
    SLLV = ("sllv", RRR)
    SLT = ("slt", RRR)
    SLTI = ("slti", RRI)
    SLTIU = ("sltiu", RRI)
    SLTU = ("sltu", RRR)
    SQRT_D = ("sqrt.d", RR)
    SQRT_S = ("sqrt.s", RR)
    SRA = ("sra", RRI)
    SRAV = ("srav", RRR)
    SRL = ("srl", RRI)
    SRLV = ("srlv", RRR)
    SUB = ("sub", RRR)
    SUB_D = ("sub.d", RRR)
    SUB_S = ("sub.s", RRR)
    SUBU = ("subu", RRR)
    SW = ("sw", LOAD_STORE)
    SWC1 = ("swc1", LOAD_STORE)
    SWL = ("swl", LOAD_STORE)
    SWR = ("swr", LOAD_STORE)
    SYSCALL = ("syscall", NONE)
    TEQ = ("teq", RR)
    TEQI = ("teqi", RI)
    TGE = ("tge", RR)
    TGEI = ("tgei", RI)
    TGEIU = ("tgeiu", RI)
    TGEU = ("tgeu", RR)
    TLT = ("tlt", RR)
    TLTI = ("tlti", RI)
    TLTIU = ("tltiu", RI)
    TLTU = ("tltu", RR)
    TNE = ("tne", RR)
    TNEI = ("tnei", RI)
    TRUNC_W_D = ("trunc.w.d", RR)
    TRUNC_W_S = ("trunc.w.s", RR)
    XOR = ("xor", RRR)
    XORI = ("xori", RRI)

    def __init__(self, spelling: str, archetypes: Archetype):
        self.spelling = spelling
        self.archetypes = archetypes


_BRANCH_CMP = RR_LABEL | _A.REG_IMM_LABEL
_RRR_OR_RRI = RRR | RRI


class Pseudoinstruction(Enum):
    B = ("b", _A.LABEL)
    BEQ = ("beq", _BRANCH_CMP)
    BEQZ = ("beqz", R_LABEL)
    BGE = ("bge", _BRANCH_CMP)
    BGEU = ("bgeu", _BRANCH_CMP)
    BGT = ("bgt", _BRANCH_CMP)
    BGTU = ("bgtu", _BRANCH_CMP)
    BLE = ("ble", _BRANCH_CMP)
    BLEU = ("bleu", _BRANCH_CMP)
    BLT = ("blt", _BRANCH_CMP)
    BLTU = ("bltu", _BRANCH_CMP)
    BNEZ = ("bnez", R_LABEL)
    L_D = ("l.d", LOAD_STORE)
    L_S = ("l.s", LOAD_STORE)
    LA = ("la", LOAD_STORE)
    LD = ("ld", LOAD_STORE)
    LI = ("li", RI)
    MFC1_D = ("mfc1.d", RR)
    MOVE = ("move", RR)
    MTC1_D = ("mtc1.d", RR)
    MULO = ("mulo", _RRR_OR_RRI)
    MULOU = ("mulou", _RRR_OR_RRI)
    MULU = ("mulu", _RRR_OR_RRI)
    NEG = ("neg", RR)
    NEGU = ("negu", RR)
    NOT = ("not", RR)
    REM = ("rem", _RRR_OR_RRI)
    REMU = ("remu", _RRR_OR_RRI)
    ROL = ("rol", _RRR_OR_RRI)
    ROR = ("ror", _RRR_OR_RRI)
    S_D = ("s.d", LOAD_STORE)
    S_S = ("s.s", LOAD_STORE)
    SD = ("sd", LOAD_STORE)
    SEQ = ("seq", _RRR_OR_RRI)
    SGE = ("sge", _RRR_OR_RRI)
    SGEU = ("sgeu", _RRR_OR_RRI)
    SGT = ("sgt", _RRR_OR_RRI)
    SGTU = ("sgtu", _RRR_OR_RRI)
    SLE = ("sle", _RRR_OR_RRI)
    SLEU = ("sleu", _RRR_OR_RRI)
    SNE = ("sne", _RRR_OR_RRI)
    SUBI = ("subi", RRI)
    SUBIU = ("subiu", RRI)
    ULH = ("ulh", LOAD_STORE)
    ULHU = ("ulhu", LOAD_STORE)
    ULW = ("ulw", LOAD_STORE)
    USH = ("ush", LOAD_STORE)
    USW = ("usw", LOAD_STORE)

    def __init__(self, spelling: str, archetypes: Archetype):
        self.spelling = spelling
        self.archetypes = archetypes


AnyInstruction = Union[Instruction, Pseudoinstruction]

DIRECTIVES: Dict[str, Directive] = {d.spelling: d for d in Directive}

INSTRUCTIONS: Dict[str, Instruction] = {
    i.spelling: i for i in Instruction if i is not Instruction.JALR_RA
}

PSEUDOINSTRUCTIONS: Dict[str, Pseudoinstruction] = {p.spelling: p for p in Pseudoinstruction}

REGISTER_NAMES: Dict[str, int] = {
    "zero": 0, "at": 1,
    "v0": 2, "v1": 3,
    "a0": 4, "a1": 5, "a2": 6, "a3": 7,
    "t0": 8, "t1": 9, "t2": 10, "t3": 11, "t4": 12, "t5": 13, "t6": 14, "t7": 15,
    "s0": 16, "s1": 17, "s2": 18, "s3": 19, "s4": 20, "s5": 21, "s6": 22, "s7": 23,
    "t8": 24, "t9": 25,
    "k0": 26, "k1": 27,
    "gp": 28, "sp": 29, "fp": 30, "ra": 31,
}


def lookup_directive(word: str) -> Optional[Directive]:
    return DIRECTIVES.get(word.lower())


def lookup_instruction(word: str) -> list:
    """
    Candidates for a mnemonic, instruction table first.

    :param word: mnemonic as written in the source
    :return: list with zero, one or two members
    """
    low = word.lower()
    return [c for c in (INSTRUCTIONS.get(low), PSEUDOINSTRUCTIONS.get(low)) if c is not None]


def register_index(text: str) -> int:
    """
    Resolve ``$name``, ``$N`` or ``$fN`` to a register index 0-31.
    """
    name = text[1:] if text.startswith("$") else text
    name = name.lower()
    if name in REGISTER_NAMES:
        return REGISTER_NAMES[name]
    digits = name[1:] if name.startswith("f") else name
    if digits.isdecimal() and digits.isascii():
        index = int(digits)
        if index < constants.REGISTER_COUNT:
            return index
    raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f"{text} is not a valid register")

"""
Instruction operand matcher.

Given the archetype mask of a mnemonic and the text after it, try every
archetype of the mask in ARCHETYPE_PRIORITY order and extract the typed
operands of the first shape that consumes the whole operand list.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from neomips.model.ensamblador import lex_mips
from neomips.model.ensamblador.isa import ARCHETYPE_PRIORITY, Archetype, register_index
from neomips.utils import NumberConversion as NC

logger = logging.getLogger(__name__)


@dataclass
class InstructionParameters:
    reg1: Optional[int] = None
    reg2: Optional[int] = None
    reg3: Optional[int] = None
    offset: int = 0
    immediate: int = 0
    resolved_label: Optional[int] = None
    label: Optional[str] = None
    archetype: Archetype = Archetype(0)


def get_reg_index(text: str) -> int:
    """Register name (``$t0``, ``$8``, ``$f2``...) to its index."""
    return register_index(text)


# Slot roles of each shape, in textual order
_SHAPES = {
    Archetype.REG_LABEL_AS_OFFSET_REG: ("reg1", "label", "mem"),
    Archetype.REG_LABEL_PLUS_IMM_OFFSET_FOR_REG: ("reg1", "label+off", "mem"),
    Archetype.REG_LABEL_PLUS_IMM: ("reg1", "label+imm"),
    Archetype.REG_OFFSET_FOR_REG: ("reg1", "off", "mem"),
    Archetype.REG_MEM_REG: ("reg1", "mem"),
    Archetype.REG_REG_IMM: ("reg1", "reg2", "imm"),
    Archetype.REG_REG_LABEL: ("reg1", "reg2", "label"),
    Archetype.REG_IMM_LABEL: ("reg1", "imm", "label"),
    Archetype.IMM_REG_REG: ("imm", "reg1", "reg2"),
    Archetype.REG_IMM: ("reg1", "imm"),
    Archetype.REG_LABEL: ("reg1", "label"),
    Archetype.IMM_LABEL: ("imm", "label"),
    Archetype.REG_REG: ("reg1", "reg2"),
    Archetype.REG: ("reg1",),
    Archetype.IMM: ("imm",),
    Archetype.LABEL: ("label",),
    Archetype.REG_REG_REG: ("reg1", "reg2", "reg3"),
    Archetype.NO_PARAMS: (),
}


def _kind(toks, i):
    return toks[i][0] if i < len(toks) else None


def _signed_number(toks, i, sign_required=False):
    """Read ``[+|-] NUMBER``. Returns (value, next index) or None."""
    sign = 1
    if _kind(toks, i) in ("PLUS", "MINUS"):
        sign = -1 if toks[i][0] == "MINUS" else 1
        i += 1
    elif sign_required:
        return None
    if _kind(toks, i) != "NUMBER":
        return None
    return NC.int2word(sign * toks[i][1]), i + 1


def _take(role, toks, i, params: InstructionParameters):
    """Consume one slot. Returns the next index, or None if it does not fit."""
    kind = _kind(toks, i)
    if role in ("reg1", "reg2", "reg3"):
        if kind != "REGISTER":
            return None
        setattr(params, role, toks[i][1])
        return i + 1
    if role in ("imm", "off"):
        read = _signed_number(toks, i)
        if read is None:
            return None
        value, i = read
        if role == "imm":
            params.immediate = value
        else:
            params.offset = value
        return i
    if role == "label":
        if kind != "LABEL":
            return None
        params.label = toks[i][1]
        return i + 1
    if role in ("label+imm", "label+off"):
        if kind != "LABEL":
            return None
        read = _signed_number(toks, i + 1, sign_required=True)
        if read is None:
            return None
        params.label = toks[i][1]
        value, i = read
        if role == "label+imm":
            params.immediate = value
        else:
            params.offset = value
        return i
    if role == "mem":
        if [_kind(toks, i + k) for k in range(3)] != ["LPAREN", "REGISTER", "RPAREN"]:
            return None
        params.reg2 = toks[i + 1][1]
        return i + 3
    raise ValueError(f"unknown operand role {role}")


def _try_shape(archetype: Archetype, toks) -> Optional[InstructionParameters]:
    params = InstructionParameters(archetype=archetype)
    i = 0
    for role in _SHAPES[archetype]:
        i = _take(role, toks, i, params)
        if i is None:
            return None
    if i != len(toks):
        return None
    return params


def match_operands(text: str, archetypes: Archetype) -> Optional[InstructionParameters]:
    """
    :param text: operand text after the mnemonic, comment already removed
    :param archetypes: legal archetypes of the mnemonic
    :return: populated InstructionParameters, or None when no archetype fits
    """
    toks = lex_mips.tokenize(text)
    for archetype in ARCHETYPE_PRIORITY:
        if not archetype & archetypes:
            continue
        params = _try_shape(archetype, toks)
        if params is not None:
            logger.debug("operands %r matched %s", text, archetype.name)
            return params
    return None

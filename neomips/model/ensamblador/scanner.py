"""
Primitive character classification and word/line extraction over the
source buffer. Shared by the preprocessor and the lexer.
"""
from __future__ import annotations

import bisect
import re
from enum import Enum
from typing import NamedTuple

from neomips import constants
from neomips.model.errors import ErrorKind, NeoMIPSError

SEPARATORS = frozenset(" \t\n\r\f\v:()\",+-#'")

# Emoji code points accepted in identifiers (regex character class body)
EMOJI = (
    r"©®‼⁉™ℹ↔-↪⌚-⏿Ⓜ"
    r"▪-◾☀-➿⤴⤵⬅-⭕〰〽㊗"
    r"㊙‍️\U0001F000-\U0001FAFF"
)
IDENTIFIER_PATTERN = rf"(?:[^\W\d]|[{EMOJI}])(?:[\w.]|[{EMOJI}])*"

_IDENTIFIER = re.compile(IDENTIFIER_PATTERN)
WORD = re.compile("[^" + re.escape("".join(sorted(SEPARATORS))) + "]+")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def is_space(c: str) -> bool:
    return c.isspace()


def is_separator(c: str) -> bool:
    return c in SEPARATORS


def is_digit_start(c: str) -> bool:
    return "0" <= c <= "9"


def is_identifier(word: str) -> bool:
    return _IDENTIFIER.fullmatch(word) is not None


def get_next_word(buffer: str, index: int) -> tuple[str, int]:
    """Read up to the next separator. Returns the word and the index after it."""
    end = index
    while end < len(buffer) and not is_separator(buffer[end]):
        end += 1
    return buffer[index:end], end


def is_tag(buffer: str, index: int) -> bool:
    """True when the word at index is immediately followed by ':'."""
    word, end = get_next_word(buffer, index)
    return bool(word) and end < len(buffer) and buffer[end] == ":"


def line_end(buffer: str, index: int) -> int:
    end = buffer.find("\n", index)
    return len(buffer) if end == -1 else end


def index_to_line(buffer: str, index: int) -> int:
    """1-based line: newlines strictly before index, plus one."""
    return buffer.count("\n", 0, index) + 1


def newline_offsets(buffer: str) -> list[int]:
    """Offsets of every newline in buffer, computed once for line_at."""
    return [m.start() for m in re.finditer("\n", buffer)]


def line_at(offsets: list[int], index: int) -> int:
    """Same as index_to_line, over precomputed newline offsets."""
    return bisect.bisect_left(offsets, index) + 1


# ----------------------------------------------------------------------
# Literal / comment tracking
# ----------------------------------------------------------------------

class Context(Enum):
    CODE = "code"
    STRING = "string"
    CHAR = "char"
    COMMENT = "comment"


class Segment(NamedTuple):
    kind: Context
    start: int
    end: int


def scan_contexts(text: str) -> list[Segment]:
    """
    Split text into contiguous code, literal and comment segments in one
    forward pass. Literals and comments end at the end of their line; an
    escaped quote does not close a literal.
    """
    segments: list[Segment] = []
    state = Context.CODE
    start = 0
    i = 0
    n = len(text)

    def close(end: int, next_state: Context):
        nonlocal start, state
        if end > start:
            segments.append(Segment(state, start, end))
        start = end
        state = next_state

    while i < n:
        c = text[i]
        if state is Context.CODE:
            if c == constants.COMMENT_CHAR:
                close(i, Context.COMMENT)
            elif c == '"':
                close(i, Context.STRING)
            elif c == "'":
                close(i, Context.CHAR)
            i += 1
        elif state is Context.COMMENT:
            if c == "\n":
                close(i, Context.CODE)
            i += 1
        else:
            quote = '"' if state is Context.STRING else "'"
            if c == "\\" and i + 1 < n and text[i + 1] != "\n":
                i += 2
            elif c == quote:
                i += 1
                close(i, Context.CODE)
            elif c == "\n":
                close(i, Context.CODE)
                i += 1
            else:
                i += 1
    close(n, Context.CODE)
    return segments


def context_at(segments: list[Segment], pos: int) -> Context:
    starts = [s.start for s in segments]
    k = bisect.bisect_right(starts, pos) - 1
    if k < 0 or pos >= segments[k].end:
        return Context.CODE
    return segments[k].kind


def strip_comment(text: str) -> str:
    for seg in scan_contexts(text):
        if seg.kind is Context.COMMENT:
            return text[:seg.start]
    return text


def decode_escapes(body: str) -> str:
    """Decode the escape sequences of a literal body (quotes removed)."""
    out = []
    i = 0
    while i < len(body):
        c = body[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue
        nxt = body[i + 1] if i + 1 < len(body) else ""
        if nxt not in _ESCAPES or not nxt:
            raise NeoMIPSError(
                ErrorKind.INVALID_ESCAPE_SEQUENCE, "",
                f"\\{nxt} is not a valid escape sequence"
            )
        out.append(_ESCAPES[nxt])
        i += 2
    return "".join(out)

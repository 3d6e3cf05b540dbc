"""
Lectura de argumentos de la línea de comandos.

Any argument that is not a known option (unknown flags included) is taken
as the source file path; the last one wins.
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List, Optional

from neomips import constants
from neomips.utils import IntBase
from neomips.utils import NumberConversion as NC


@dataclass
class Options:
    unicode: bool = False
    freq: int = constants.DEFAULT_MAX_FREQ
    interactive: bool = False
    max_memory: int = constants.DEFAULT_MAX_MEMORY
    mem_chunk_size: int = constants.DEFAULT_MEM_CHUNK_SIZE
    self_modifying: bool = False
    libs: List[str] = field(default_factory=list)
    verbose: bool = False
    source: Optional[str] = None


def _decimal(text: str) -> int:
    return NC.to_integer(text, IntBase.DECIMAL)


def _any_base(text: str) -> int:
    return NC.to_integer(text, IntBase.ANY)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="neomips",
        description="MIPS32 assembler front end: preprocess and tokenize a source file",
        allow_abbrev=False,
    )
    p.add_argument('-u', '--unicode', action='store_true',
                   help="decode the source with the locale's preferred encoding")
    p.add_argument('-f', '--freq', type=_decimal, default=constants.DEFAULT_MAX_FREQ)
    p.add_argument('-i', '--interactive', action='store_true')
    p.add_argument('--maxmemoryusage', dest='max_memory', type=_any_base,
                   default=constants.DEFAULT_MAX_MEMORY)
    p.add_argument('--memchunksize', dest='mem_chunk_size', type=_any_base,
                   default=constants.DEFAULT_MEM_CHUNK_SIZE)
    p.add_argument('-s', '--selfmodifying', dest='self_modifying', action='store_true')
    p.add_argument('-l', '--lib', dest='libs', action='append', default=[],
                   help="additional directory searched by .include (repeatable)")
    p.add_argument('-v', '--verbose', action='store_true', help="debug logging")
    return p


def read_arguments(argv=None) -> Options:
    """
    :param argv: argumentos sin el nombre del programa (por defecto sys.argv[1:])
    :return: Options
    """
    args, rest = build_parser().parse_known_args(argv)
    return Options(
        unicode=args.unicode,
        freq=args.freq,
        interactive=args.interactive,
        max_memory=args.max_memory,
        mem_chunk_size=args.mem_chunk_size,
        self_modifying=args.self_modifying,
        libs=list(args.libs),
        verbose=args.verbose,
        source=rest[-1] if rest else None,
    )

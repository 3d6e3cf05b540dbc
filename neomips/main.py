"""
Punto de entrada de la línea de comandos.
"""
from __future__ import annotations

import logging
import sys

from neomips.controller.arguments import read_arguments
from neomips.controller.execution import ExecutionContext
from neomips.model.errors import NeoMIPSError

BANNER = "NeoMIPS - MIPS32 assembler front end"


def main(argv=None) -> int:
    """
    return:
        0 éxito
        1 fracaso
    """
    try:
        options = read_arguments(argv)
        logging.basicConfig(
            level=logging.DEBUG if options.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        print(BANNER)
        tokens = ExecutionContext(options).run()
    except NeoMIPSError as err:
        print(str(err), file=sys.stderr)
        return 1

    for token in tokens:
        print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())

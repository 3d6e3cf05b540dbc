"""
NeoMIPS: front end of a MIPS32 assembler.

Preprocesa (.include, .eqv, .macro) y tokeniza código fuente MIPS.
"""

__version__ = "0.1.0"

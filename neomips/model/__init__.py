"""Modelo: errores, preprocesador, ensamblador y pipeline"""

from .errors import ErrorKind, NeoMIPSError

__all__ = ["ErrorKind", "NeoMIPSError"]

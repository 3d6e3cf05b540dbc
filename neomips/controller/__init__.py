"""Controlador: argumentos de línea de comandos y ejecución"""

from .arguments import Options, read_arguments
from .execution import ExecutionContext

__all__ = ["Options", "read_arguments", "ExecutionContext"]

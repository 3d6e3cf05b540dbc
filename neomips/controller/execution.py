"""
Contexto de ejecución: carga el archivo fuente y ejecuta el pipeline.
"""
from __future__ import annotations

import locale
import logging

from neomips import constants
from neomips.controller.arguments import Options
from neomips.model.errors import ErrorKind, NeoMIPSError
from neomips.model.pipeline import pipeline_from_file

logger = logging.getLogger(__name__)


class ExecutionContext:

    def __init__(self, options: Options):
        self.options = options

    @property
    def encoding(self) -> str:
        if self.options.unicode:
            return locale.getpreferredencoding(False)
        return constants.SOURCE_ENCODING

    def run(self) -> list:
        """
        return:
            lista de tokens del archivo fuente
        """
        if not self.options.source:
            raise NeoMIPSError(ErrorKind.FILE_NOT_FOUND, "", "No source file given.")
        logger.info("assembling %s (%s)", self.options.source, self.encoding)
        return pipeline_from_file(self.options.source, self.encoding, self.options.libs)

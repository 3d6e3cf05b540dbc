"""
Pipeline that takes MIPS assembly source text and produces the token list.

Flujo completo:
1. Preprocesador: .include, .eqv y .macro
2. Lexer: etiquetas, directivas e instrucciones con sus operandos
"""
from __future__ import annotations

import logging
from pathlib import Path

from neomips import constants
from neomips.model.ensamblador.lexer import tokenize
from neomips.model.preprocesador.preprocessor import preprocess
from neomips.utils import FileManager

logger = logging.getLogger(__name__)


def pipeline_from_text(source_text: str, source_file: Path = None, libs=(),
                       encoding: str = constants.SOURCE_ENCODING) -> list:
    """
    Process source_text through the preprocessor and the lexer.

    :param source_text: código fuente
    :param source_file: archivo de origen, para resolver includes relativos
    :param libs: directorios de librerías para .include
    :return: lista de tokens
    """
    # 1. PREPROCESADOR
    preprocessed_text = preprocess(source_text, source_file, libs, encoding)
    logger.debug("preprocessed %d -> %d characters", len(source_text), len(preprocessed_text))

    # 2. LEXER
    tokens = tokenize(preprocessed_text)
    logger.debug("%d tokens", len(tokens))
    return tokens


def pipeline_from_file(path, encoding: str = constants.SOURCE_ENCODING, libs=()) -> list:
    path = Path(path)
    return pipeline_from_text(FileManager.read_source(path, encoding), path, libs, encoding)

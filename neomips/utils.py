"""
Utilidades: conversión numérica y lectura de archivos fuente.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

from neomips import constants
from neomips.model.errors import ErrorKind, NeoMIPSError

logger = logging.getLogger(__name__)

_HEX_IMMEDIATE = re.compile(r"([+-]?)0[xX]([0-9A-Fa-f]+)")
_DEC_IMMEDIATE = re.compile(r"[+-]?[0-9]+")


class IntBase(Enum):
    DECIMAL = 10
    HEX = 16
    ANY = 0


class NumberConversion:
    """
    Conversiones entre enteros, palabras de N bits y bitarray.
    """

    @staticmethod
    def to_integer(text: str, base: IntBase = IntBase.ANY) -> int:
        """
        Parse a command line style number.

        :param text: texto a convertir
        :param base: DECIMAL, HEX, or ANY (hex when the text contains an x)
        """
        if base == IntBase.ANY:
            radix = 16 if ("x" in text or "X" in text) else 10
        else:
            radix = base.value
        try:
            return int(text, radix)
        except ValueError as e:
            raise NeoMIPSError(
                ErrorKind.INTEGER_PARSING, "",
                f"Failed to read input as number: {text}. Inner exception: {e}"
            )

    @staticmethod
    def parse_immediate(text: str) -> int:
        """
        Parse an assembler immediate: signed decimal, or 0x/0X hex with at
        most 8 digits. Decimal values must fit in 32 bits, signed or not.
        """
        m = _HEX_IMMEDIATE.fullmatch(text)
        if m:
            digits = m.group(2)
            if len(digits) > constants.MAX_HEX_DIGITS:
                raise NeoMIPSError(
                    ErrorKind.INTEGER_PARSING, "",
                    f"{text} has more than {constants.MAX_HEX_DIGITS} hexadecimal digits"
                )
            value = int(digits, 16)
            return -value if m.group(1) == "-" else value
        if _DEC_IMMEDIATE.fullmatch(text):
            value = int(text, 10)
            if not -(1 << 31) <= value <= (1 << 32) - 1:
                raise NeoMIPSError(
                    ErrorKind.INTEGER_PARSING, "",
                    f"{text} does not fit in {constants.WORD_SIZE_BITS} bits"
                )
            return value
        raise NeoMIPSError(ErrorKind.INTEGER_PARSING, "", f"{text} is not a valid immediate")

    @staticmethod
    def natural2bitarray(value: int, bits: int = constants.WORD_SIZE_BITS) -> bitarray:
        try:
            return int2ba(value, length=bits)
        except (OverflowError, ValueError):
            raise NeoMIPSError(
                ErrorKind.INTEGER_PARSING, "", f"Value {value} does not fit in {bits} bits"
            )

    @staticmethod
    def int2bitarray(value: int, bits: int = constants.WORD_SIZE_BITS) -> bitarray:
        """
        Two's complement encoding. Accepts the signed range and the unsigned
        range of the width, so both -1 and 0xFFFFFFFF give 32 ones.
        """
        if value >= 0:
            return NumberConversion.natural2bitarray(value, bits)
        try:
            return int2ba(value, length=bits, signed=True)
        except (OverflowError, ValueError):
            raise NeoMIPSError(
                ErrorKind.INTEGER_PARSING, "", f"Value {value} does not fit in {bits} bits"
            )

    @staticmethod
    def bitarray2natural(bits: bitarray) -> int:
        return ba2int(bits)

    @staticmethod
    def bitarray2int(bits: bitarray) -> int:
        return ba2int(bits, signed=True)

    @staticmethod
    def int2word(value: int, bits: int = constants.WORD_SIZE_BITS) -> int:
        """Signed or unsigned value -> unsigned word of the given width."""
        return NumberConversion.bitarray2natural(NumberConversion.int2bitarray(value, bits))

    @staticmethod
    def word2int(word: int, bits: int = constants.WORD_SIZE_BITS) -> int:
        """Unsigned word -> signed value."""
        return NumberConversion.bitarray2int(NumberConversion.natural2bitarray(word, bits))


class FileManager:
    """
    Lectura de archivos fuente decodificados a texto.
    """

    @staticmethod
    def read_source(path, encoding: str = constants.SOURCE_ENCODING) -> str:
        """
        :param path: ruta del archivo fuente
        :param encoding: codificación del archivo
        :return: contenido completo del archivo como str
        """
        path = Path(path)
        if not path.exists():
            raise NeoMIPSError(ErrorKind.FILE_NOT_FOUND, "", f'File "{path}" does not exist.')
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise NeoMIPSError(ErrorKind.FILE_READ, "", f"Could not read input file {path}: {e}")
        try:
            text = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise NeoMIPSError(
                ErrorKind.ENCODING_TRANSLATION, "",
                f"Failed to convert {path} from {encoding}: {e}"
            )
        logger.debug("read %d characters from %s", len(text), path)
        return text

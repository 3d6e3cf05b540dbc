"""
Preprocesador del ensamblador MIPS
Soporta directivas:
- .include "archivo"          : Incluye el contenido de otro archivo
- .eqv NOMBRE valor           : Define una constante de sustitución
- .macro nombre(%a, %b) ... .end_macro : Define una macro con parámetros

Works line by line: strings and comments never span lines in MIPS assembly,
so each line's literal/comment segments are computed once with
scanner.scan_contexts and only code segments are rewritten.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from neomips import constants
from neomips.model.ensamblador import scanner
from neomips.model.ensamblador.scanner import Context
from neomips.model.errors import ErrorKind, NeoMIPSError
from neomips.utils import FileManager

logger = logging.getLogger(__name__)

_SEP = re.escape("".join(sorted(scanner.SEPARATORS)))
_DIRECTIVE = re.compile(rf"\.(include|eqv|macro|end_macro)(?=[{_SEP}]|$)", re.IGNORECASE)
_END_MACRO = re.compile(rf"\.end_macro(?=[{_SEP}]|$)", re.IGNORECASE)
_MACRO_NAME = re.compile(r"\s*([^\s(,]*)(.*)", re.DOTALL)
_MACRO_PARAM = re.compile(r"[%$][^\s,()]*")
_BARE_PATH = re.compile(r"[^\s#\"]+")


@dataclass
class MacroDefinition:
    name: str
    params: List[str] = field(default_factory=list)
    body: str = ""
    line: int = 0

    def instantiate(self, args: List[str]) -> str:
        """Copy of the body with every parameter replaced by its argument."""
        if not self.params:
            return self.body
        mapping = dict(zip(self.params, args))
        alternatives = "|".join(re.escape(p) for p in sorted(self.params, key=len, reverse=True))
        pattern = re.compile(rf"(?:{alternatives})(?!\w)")
        return pattern.sub(lambda m: mapping[m.group()], self.body)


def split_arguments(text: str) -> List[str]:
    """
    Arguments of a macro invocation: top-level commas, or whitespace when
    there is no comma. Separators inside string or char literals do not count.
    """
    text = text.strip()
    if not text:
        return []
    commas, blanks, depth = [], [], 0
    for seg in scanner.scan_contexts(text):
        if seg.kind is not Context.CODE:
            continue
        for k in range(seg.start, seg.end):
            c = text[k]
            if c == "(":
                depth += 1
            elif c == ")":
                depth -= 1
            elif depth == 0 and c == ",":
                commas.append(k)
            elif depth == 0 and c.isspace():
                blanks.append(k)
    args, last = [], 0
    for k in commas or blanks:
        args.append(text[last:k].strip())
        last = k + 1
    args.append(text[last:].strip())
    if not commas:
        args = [a for a in args if a]
    return args


class Preprocessor:
    """
    Resolves .include, .eqv and .macro spans. Symbols and macros are shared
    across included files, and one depth counter bounds include nesting and
    macro expansion together.
    """

    def __init__(self, source_file=None, libs=(), encoding: str = constants.SOURCE_ENCODING,
                 max_depth: int = constants.MAX_PREPROCESS_DEPTH):
        self.source_file = Path(source_file) if source_file else None
        self.libs = [Path(p) for p in libs]
        self.encoding = encoding
        self.max_depth = max_depth
        self.symbols: Dict[str, str] = {}
        self.macros: Dict[str, MacroDefinition] = {}
        self._include_stack: List[Path] = []

    def process(self, text: str) -> str:
        if self.source_file:
            self._include_stack.append(self.source_file.resolve())
        try:
            return self._apply_symbols(self._process_text(text, self.source_file, 0))
        finally:
            self._include_stack.clear()

    # ------------------------------------------------------------------

    def _process_text(self, text: str, current_file: Optional[Path], depth: int) -> str:
        """Procesa recursivamente el texto, manejando includes, eqv y macros"""
        if depth > self.max_depth:
            raise NeoMIPSError(
                ErrorKind.RECURSION_LIMIT, "",
                f"Include/macro nesting deeper than {self.max_depth} levels"
            )
        lines = text.split("\n")
        out: List[str] = []
        i = 0
        while i < len(lines):
            try:
                chunk, i = self._process_line(lines, i, current_file, depth)
            except NeoMIPSError as e:
                raise e.at(i + 1)
            out.append(chunk)
        return "\n".join(out)

    def _find_directive(self, line: str, segments, pattern=_DIRECTIVE):
        for m in pattern.finditer(line):
            if m.start() > 0 and not scanner.is_separator(line[m.start() - 1]):
                continue
            if scanner.context_at(segments, m.start()) is Context.CODE:
                return m
        return None

    def _process_line(self, lines: List[str], i: int, current_file, depth):
        """Process lines[i] (and a macro body after it). Returns (text, next index)."""
        line = lines[i]
        segments = scanner.scan_contexts(line)
        m = self._find_directive(line, segments)
        if m is None:
            return self._substitute(line, segments, current_file, depth), i + 1

        prefix = self._substitute(line[:m.start()], None, current_file, depth)
        rest = line[m.end():]
        directive = m.group(1).lower()
        logger.debug("line %d: .%s%s", i + 1, directive, rest.rstrip())

        if directive == "include":
            content, suffix = self._include(rest, current_file, depth)
            return prefix + content + self._substitute(suffix, None, current_file, depth), i + 1
        if directive == "eqv":
            # Kept in place for _apply_symbols, which runs once the whole unit is expanded
            self._parse_eqv(rest)
            return prefix + line[m.start():], i + 1
        if directive == "macro":
            return self._declare_macro(lines, i, prefix, rest, current_file, depth)
        raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", ".end_macro without a matching .macro")

    # ------------------------------------------------------------------
    # .include
    # ------------------------------------------------------------------

    def _include(self, rest: str, current_file, depth):
        stripped = rest.lstrip()
        if stripped.startswith('"'):
            close = stripped.find('"', 1)
            if close == -1:
                raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", "Unterminated .include path")
            name, end = stripped[1:close], close + 1
        else:
            m = _BARE_PATH.match(stripped)
            name, end = (m.group(), m.end()) if m else ("", 0)
        if not name:
            raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", ".include expects a file name")

        path = self._resolve_include(name, current_file)
        key = path.resolve()
        if key in self._include_stack:
            raise NeoMIPSError(ErrorKind.RECURSION_LIMIT, "", f"{name} includes itself")
        content = FileManager.read_source(path, self.encoding)
        self._include_stack.append(key)
        try:
            processed = self._process_text(content, path, depth + 1)
        except NeoMIPSError as e:
            # Locations inside an included file carry its name
            if e.where and ":" not in e.where:
                e.where = f"{path.name}:{e.where}"
            raise
        finally:
            self._include_stack.pop()
        logger.debug("included %s (%d characters)", path, len(processed))
        return processed, stripped[end:]

    def _resolve_include(self, name: str, current_file) -> Path:
        p = Path(name)
        if p.is_absolute():
            return p
        candidates = []
        if current_file:
            candidates.append(Path(current_file).parent / p)
        candidates += [lib / p for lib in self.libs]
        candidates.append(p)
        for candidate in candidates:
            if candidate.exists():
                return candidate
        return candidates[0]

    # ------------------------------------------------------------------
    # .eqv
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_eqv(rest: str):
        text = scanner.strip_comment(rest).strip()
        m = scanner.WORD.match(text)
        if not m:
            raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", ".eqv expects a symbol name")
        symbol = m.group()
        replacement = text[m.end():].strip()
        if not replacement:
            raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f".eqv {symbol} has no replacement")
        return symbol, replacement

    def _apply_symbols(self, text: str) -> str:
        """
        Erase the .eqv lines of the expanded unit and replace their symbols
        over the whole buffer, lines before the definition included.

        A symbol takes the value of the latest definition above the line, or
        its first definition when none is above. Replacements are not scanned
        again.
        """
        lines = text.split("\n")
        definitions = {}
        first: Dict[str, str] = {}
        running: Dict[str, str] = {}
        for i, line in enumerate(lines):
            m = self._find_directive(line, scanner.scan_contexts(line))
            if m is None or m.group(1).lower() != "eqv":
                continue
            symbol, replacement = self._parse_eqv(line[m.end():])
            # Earlier symbols are expanded once, at definition time
            replacement = self._replace_words(replacement, running)
            definitions[i] = (m.start(), symbol, replacement)
            running[symbol] = replacement
            first.setdefault(symbol, replacement)
            logger.debug(".eqv %s -> %s", symbol, replacement)
        if not definitions:
            return text

        self.symbols = dict(first)
        out = []
        for i, line in enumerate(lines):
            if i in definitions:
                start, symbol, replacement = definitions[i]
                out.append(self._replace_in_code(line[:start]))
                self.symbols[symbol] = replacement
            else:
                out.append(self._replace_in_code(line))
        return "\n".join(out)

    @staticmethod
    def _replace_words(text: str, table: Dict[str, str]) -> str:
        return scanner.WORD.sub(lambda m: table.get(m.group(), m.group()), text)

    def _replace_in_code(self, line: str) -> str:
        out = []
        for seg in scanner.scan_contexts(line):
            chunk = line[seg.start:seg.end]
            out.append(self._replace_words(chunk, self.symbols) if seg.kind is Context.CODE else chunk)
        return "".join(out)

    # ------------------------------------------------------------------
    # .macro / .end_macro
    # ------------------------------------------------------------------

    def _declare_macro(self, lines, i, prefix, rest, current_file, depth):
        header = scanner.strip_comment(rest)
        m = _MACRO_NAME.match(header)
        name = m.group(1)
        if not name or not scanner.is_identifier(name):
            raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f"Invalid macro name '{name}'")
        params = _MACRO_PARAM.findall(m.group(2))
        for param in params:
            if len(param) == 1:
                raise NeoMIPSError(
                    ErrorKind.INVALID_SYNTAX, "", f"Empty parameter name in macro {name}"
                )

        j = i + 1
        while j < len(lines):
            end = self._find_directive(lines[j], scanner.scan_contexts(lines[j]), _END_MACRO)
            if end:
                break
            j += 1
        else:
            raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f"Macro {name} has no .end_macro")

        body = lines[i + 1:j]
        # Code before .end_macro on its own line belongs to the body
        if lines[j][:end.start()].strip():
            body.append(lines[j][:end.start()])
        macro = MacroDefinition(name, params, "\n".join(body), i + 1)
        self.macros[name] = macro
        logger.debug("macro %s(%s), %d body lines", name, ", ".join(params), j - i - 1)

        suffix = self._substitute(lines[j][end.end():], None, current_file, depth)
        # The block becomes blank lines so later line numbers still match the source
        return prefix + "\n" * (j - i) + suffix, j + 1

    def _expand(self, name: str, rest: str, current_file, depth) -> str:
        macro = self.macros[name]
        call = scanner.strip_comment(rest).strip()
        if call.startswith("("):
            close = call.rfind(")")
            if close == -1:
                raise NeoMIPSError(ErrorKind.INVALID_SYNTAX, "", f"Unbalanced parentheses calling {name}")
            call = call[1:close]
        args = split_arguments(call)
        if len(args) != len(macro.params):
            raise NeoMIPSError(
                ErrorKind.INVALID_SYNTAX, "",
                f"Macro {name} expects {len(macro.params)} arguments, got {len(args)}"
            )
        logger.debug("expanding %s(%s)", name, ", ".join(args))
        return self._process_text(macro.instantiate(args), current_file, depth + 1)

    # ------------------------------------------------------------------
    # Substitution over code segments
    # ------------------------------------------------------------------

    def _substitute(self, line: str, segments, current_file, depth) -> str:
        """
        Expand a macro invocation in the code segments of a line. Literals
        and comments are copied untouched.
        """
        if not self.macros:
            return line
        if segments is None:
            segments = scanner.scan_contexts(line)
        out = []
        for seg in segments:
            if seg.kind is not Context.CODE:
                out.append(line[seg.start:seg.end])
                continue
            for m in scanner.WORD.finditer(line, seg.start, seg.end):
                if m.group() in self.macros:
                    out.append(line[seg.start:m.start()])
                    out.append(self._expand(m.group(), line[m.end():], current_file, depth))
                    return "".join(out)
            out.append(line[seg.start:seg.end])
        return "".join(out)


def preprocess(source_text: str, source_file=None, libs=(),
               encoding: str = constants.SOURCE_ENCODING) -> str:
    """
    Procesa el texto fuente resolviendo includes, constantes y macros.

    :param source_text: el código fuente a preprocesar
    :param source_file: archivo fuente (para resolver includes relativos)
    :param libs: directorios adicionales donde buscar includes
    :return: el texto preprocesado
    """
    return Preprocessor(source_file, libs, encoding).process(source_text)


def preprocess_file(path, libs=(), encoding: str = constants.SOURCE_ENCODING) -> str:
    path = Path(path)
    return preprocess(FileManager.read_source(path, encoding), path, libs, encoding)

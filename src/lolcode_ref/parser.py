"""lark front-end: grammar loading, YARN unescaping and error reporting.

``parse_source`` returns the canonical AST consumed by the evaluator: a
``program`` tree whose children are statement trees labelled as in
``grammar.lark``. String literals arrive as ``YARN`` tokens holding the
unescaped text.
"""
from __future__ import annotations

import logging
import re
import unicodedata
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Transformer, Tree, UnexpectedEOF, UnexpectedInput
from lark.exceptions import VisitError
from lark.visitors import v_args

from .tree import is_token

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

class ParseError(Exception):
    def __init__(self, message: str, line: Optional[int]=None, column: Optional[int]=None) -> None:
        self.message = message
        self.line = line
        self.column = column

        if line is not None:
            super().__init__(f"{message} at line {line}, col {column}")
        else:
            super().__init__(message)

# ---------------- YARN escapes ----------------

_SIMPLE_ESCAPES = {
    ')': "\n",
    '>': "\t",
    'o': "\a",
    '"': '"',
    ':': ":",
}

_ESCAPE_RE = re.compile(r":(\((?P<hex>[^)]*)\)|\[(?P<name>[^\]]*)\]|\{(?P<var>[^}]*)\}|(?P<ch>.))", re.S)

def unescape_yarn(body: str, token: Optional[Token]=None) -> str:
    """Resolve ``:`` escapes inside a string literal body (quotes removed)."""
    line = getattr(token, "line", None)
    column = getattr(token, "column", None)
    out: List[str] = []
    pos = 0

    for m in _ESCAPE_RE.finditer(body):
        out.append(body[pos:m.start()])
        pos = m.end()

        if m.group("hex") is not None:
            try:
                out.append(chr(int(m.group("hex"), 16)))
            except (ValueError, OverflowError) as exc:
                raise ParseError(f"Bad code point escape ':({m.group('hex')})'", line, column) from exc
            continue

        if m.group("name") is not None:
            try:
                out.append(unicodedata.lookup(m.group("name")))
            except KeyError as exc:
                raise ParseError(f"Unknown Unicode name ':[{m.group('name')}]'", line, column) from exc
            continue

        if m.group("var") is not None:
            raise ParseError(f"YARN interpolation ':{{{m.group('var')}}}' is not supported", line, column)

        ch = m.group("ch")
        if ch not in _SIMPLE_ESCAPES:
            raise ParseError(f"Unknown escape ':{ch}'", line, column)

        out.append(_SIMPLE_ESCAPES[ch])

    out.append(body[pos:])

    return "".join(out)

# ---------------- Tree normalisation ----------------

class LolTransformer(Transformer):
    """Turn raw string tokens into YARN values and check loop labels."""

    def STRING(self, tok: Token) -> Token:
        return Token.new_borrow_pos('YARN', unescape_yarn(tok.value[1:-1], tok), tok)

    @v_args(meta=True)
    def loop(self, meta, children):
        opening, closing = children[0], children[-1]

        if str(opening) != str(closing):
            raise ParseError(
                f"Loop '{opening}' closed by 'IM OUTTA YR {closing}'",
                getattr(closing, "line", None),
                getattr(closing, "column", None),
            )

        return Tree('loop', children, meta)

# ---------------- Parsing ----------------

@lru_cache(maxsize=1)
def build_parser() -> Lark:
    grammar_text = GRAMMAR_PATH.read_text(encoding="utf-8")

    return Lark(
        grammar_text,
        parser="earley",
        lexer="basic",
        start="program",
        maybe_placeholders=True,
        propagate_positions=True,
    )

def _describe_unexpected(err: UnexpectedInput, code: str) -> str:
    ctx = err.get_context(code, span=40)
    token = getattr(err, "token", None)
    char = getattr(err, "char", None)

    if is_token(token):
        saw = f"{token.type} {str(token)!r}"
    elif char is not None:
        saw = repr(char)
    else:
        saw = "end of input"

    return f"Unexpected {saw}\n{ctx}"

def parse_source(code: str) -> Tree:
    """Parse LOLCODE text into the canonical ``program`` tree."""
    if not code.endswith("\n"):
        code += "\n"

    try:
        raw = build_parser().parse(code)
    except UnexpectedEOF as err:
        raise ParseError("Unexpected end of input; a block is missing its closing keyword") from err
    except UnexpectedInput as err:
        raise ParseError(_describe_unexpected(err, code), err.line, err.column) from err

    try:
        tree = LolTransformer().transform(raw)
    except VisitError as err:
        if isinstance(err.orig_exc, ParseError):
            raise err.orig_exc from None
        raise

    logger.debug("Parsed %d top-level statement(s)", len(tree.children))

    return tree

__all__ = [
    "GRAMMAR_PATH",
    "LolTransformer",
    "ParseError",
    "build_parser",
    "parse_source",
    "unescape_yarn",
]

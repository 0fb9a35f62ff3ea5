from __future__ import annotations

"""
Static indexer for gune documents.

The document is lexed and parsed but never evaluated. We keep enough structure
to power LSP features: identifier occurrences (document symbols, completion,
hover) and the first lexer or parser error (diagnostics).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from gune.errors import LexError, ParseError
from gune.reader.lexer import Token, TokenKind, lex
from gune.reader.parser import parse_tokens


@dataclass
class Occurrence:
    name: str
    line: int
    col: int


@dataclass
class Problem:
    message: str
    kind: str
    line: int
    col: int
    length: int = 1


@dataclass
class DocumentIndex:
    tokens: List[Token] = field(default_factory=list)
    identifiers: Dict[str, List[Occurrence]] = field(default_factory=dict)
    problems: List[Problem] = field(default_factory=list)


def position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start


def offset_from_position(text: str, line: int, col: int) -> int:
    lines = text.splitlines(True)
    if line >= len(lines):
        return len(text)
    return sum(len(ln) for ln in lines[:line]) + min(col, len(lines[line]))


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    try:
        for tok in lex(text):
            idx.tokens.append(tok)
    except LexError as ex:
        line, col = position_from_offset(text, ex.position)
        idx.problems.append(Problem(str(ex), ex.kind, line, col))

    for tok in idx.tokens:
        if tok.kind is TokenKind.IDENTIFIER:
            line, col = position_from_offset(text, tok.position)
            idx.identifiers.setdefault(tok.text, []).append(Occurrence(tok.text, line, col))

    # Only a complete token stream is worth parsing
    if not idx.problems:
        try:
            parse_tokens(idx.tokens)
        except ParseError as ex:
            line, col = position_from_offset(text, ex.token.position)
            idx.problems.append(Problem(str(ex), ex.kind, line, col, max(len(ex.token.text), 1)))
    return idx


def token_at(idx: DocumentIndex, text: str, line: int, col: int) -> Optional[Token]:
    """Token covering (line, col), if any."""
    if line >= len(text.splitlines(True)):
        return None
    offset = offset_from_position(text, line, col)
    for tok in idx.tokens:
        if tok.kind is TokenKind.EOF:
            continue
        if tok.position <= offset <= tok.position + len(tok.text):
            return tok
    return None

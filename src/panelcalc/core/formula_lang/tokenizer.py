"""
Tokenizer for the panel formula language.

Converts a formula string into a sequence of typed tokens.
"""

from __future__ import annotations

import re
from enum import StrEnum, auto

from panelcalc.core.errors import FormulaSyntaxError


class TokenKind(StrEnum):
    """Token types for the formula language."""

    # Literals and names
    NUMBER = auto()
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    QUESTION = auto()
    COLON = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the formula tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.pos) == (other.kind, other.value, other.pos)

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.pos))


# Number pattern: digits with an optional fraction. No sign, no exponent.
_NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]+)?")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "?": TokenKind.QUESTION,
    ":": TokenKind.COLON,
}

_DESCRIPTIONS: dict[TokenKind, str] = {
    TokenKind.NUMBER: "number",
    TokenKind.IDENT: "identifier",
    TokenKind.EOF: "end of input",
    **{kind: f"'{char}'" for char, kind in _SINGLE_CHAR.items()},
}


def describe(kind: TokenKind) -> str:
    """Human-readable token name for error messages."""
    return _DESCRIPTIONS[kind]


def tokenize(source: str) -> list[Token]:
    """Tokenize a formula string into a list of tokens ending with EOF.

    Raises:
        FormulaSyntaxError: At the first unrecognised character.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c in " \t\n\r":
            i += 1
            continue

        if "0" <= c <= "9":
            m = _NUMBER_RE.match(source, i)
            assert m is not None
            tokens.append(Token(TokenKind.NUMBER, m.group(0), i))
            i = m.end()
            continue

        # str.isalpha() would also accept non-ASCII letters
        m = _IDENT_RE.match(source, i)
        if m is not None:
            tokens.append(Token(TokenKind.IDENT, m.group(0), i))
            i = m.end()
            continue

        kind = _SINGLE_CHAR.get(c)
        if kind is not None:
            tokens.append(Token(kind, c, i))
            i += 1
            continue

        raise FormulaSyntaxError(f"Unexpected character: {c!r}", i)

    tokens.append(Token(TokenKind.EOF, "", n))
    return tokens

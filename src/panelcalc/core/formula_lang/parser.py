"""
Recursive descent parser for the panel formula language.

Grammar (precedence low to high):
    expr           → ternary
    ternary        → additive ("?" expr ":" expr)?
    additive       → multiplicative (("+"|"-") multiplicative)*
    multiplicative → unary (("*"|"/") unary)*
    unary          → "-"? primary
    primary        → NUMBER | IDENT | "(" expr ")"

The ternary condition is an additive expression; nesting is only possible in
the then/else slots, so ``a ? b : c ? d : e`` reads as ``a ? b : (c ? d : e)``.
Names are not resolved and types are not checked here; both happen when the
formula is evaluated.

Trees deeper than MAX_DEPTH are rejected with a syntax error, which keeps
parsing, printing and evaluation well inside the interpreter's stack.
"""

from __future__ import annotations

import math

from panelcalc.core.errors import FormulaSyntaxError
from panelcalc.core.formula_lang.tokenizer import Token, TokenKind, describe, tokenize
from panelcalc.core.ir.formulas import (
    BinaryExpr,
    BinaryOp,
    Conditional,
    Expr,
    NumberLiteral,
    UnaryMinus,
    VariableRef,
)

_ADDITIVE_OPS = {TokenKind.PLUS: BinaryOp.ADD, TokenKind.MINUS: BinaryOp.SUB}
_MULTIPLICATIVE_OPS = {TokenKind.STAR: BinaryOp.MUL, TokenKind.SLASH: BinaryOp.DIV}

MAX_DEPTH = 64


class _Parser:
    """Recursive descent parser for formulas."""

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            raise ValueError("token stream must end with EOF")
        self.tokens = tokens
        self.pos = 0
        self.nesting = 0
        self.depths: dict[int, int] = {}

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def expect(self, kind: TokenKind) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise FormulaSyntaxError(
                f"Expected {describe(kind)}, got {_found(tok)}",
                tok.pos,
            )
        return self.advance()

    def match(self, *kinds: TokenKind) -> Token | None:
        if self.current.kind in kinds:
            return self.advance()
        return None

    def build(self, node: Expr, *children: Expr, at: Token) -> Expr:
        """Record the depth of a new node, rejecting trees deeper than MAX_DEPTH."""
        depth = 1 + max(self.depths.get(id(child), 1) for child in children)
        if depth > MAX_DEPTH:
            raise FormulaSyntaxError("Formula nested too deeply", at.pos)
        self.depths[id(node)] = depth
        return node

    # -- Grammar rules --

    def parse_expr(self) -> Expr:
        self.nesting += 1
        if self.nesting > MAX_DEPTH:
            raise FormulaSyntaxError("Formula nested too deeply", self.current.pos)
        try:
            return self.parse_ternary()
        finally:
            self.nesting -= 1

    def parse_ternary(self) -> Expr:
        """additive ('?' expr ':' expr)?"""
        condition = self.parse_additive()
        question = self.match(TokenKind.QUESTION)
        if question is None:
            return condition
        then_branch = self.parse_expr()
        self.expect(TokenKind.COLON)
        else_branch = self.parse_expr()
        return self.build(
            Conditional(condition=condition, then_branch=then_branch, else_branch=else_branch),
            condition,
            then_branch,
            else_branch,
            at=question,
        )

    def parse_additive(self) -> Expr:
        """multiplicative (('+' | '-') multiplicative)*"""
        left = self.parse_multiplicative()
        while self.current.kind in _ADDITIVE_OPS:
            tok = self.advance()
            right = self.parse_multiplicative()
            node = BinaryExpr(op=_ADDITIVE_OPS[tok.kind], left=left, right=right)
            left = self.build(node, left, right, at=tok)
        return left

    def parse_multiplicative(self) -> Expr:
        """unary (('*' | '/') unary)*"""
        left = self.parse_unary()
        while self.current.kind in _MULTIPLICATIVE_OPS:
            tok = self.advance()
            right = self.parse_unary()
            node = BinaryExpr(op=_MULTIPLICATIVE_OPS[tok.kind], left=left, right=right)
            left = self.build(node, left, right, at=tok)
        return left

    def parse_unary(self) -> Expr:
        """'-'? primary"""
        minus = self.match(TokenKind.MINUS)
        if minus is not None:
            operand = self.parse_primary()
            return self.build(UnaryMinus(operand=operand), operand, at=minus)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        """NUMBER | IDENT | '(' expr ')'"""
        tok = self.current

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN)
            return expr

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            value = float(tok.value)
            if not math.isfinite(value):
                raise FormulaSyntaxError(f"Number out of range: {tok.value}", tok.pos)
            return NumberLiteral(value=value)

        if tok.kind == TokenKind.IDENT:
            self.advance()
            return VariableRef(name=tok.value)

        raise FormulaSyntaxError(
            f"Expected number, identifier or '(', got {_found(tok)}",
            tok.pos,
        )


def _found(tok: Token) -> str:
    if tok.kind in (TokenKind.NUMBER, TokenKind.IDENT):
        return f"{describe(tok.kind)} {tok.value!r}"
    return describe(tok.kind)


def parse_tokens(tokens: list[Token]) -> Expr:
    """Parse a complete token stream (as produced by ``tokenize``) into an AST.

    Raises:
        FormulaSyntaxError: If the tokens do not form exactly one formula.
    """
    parser = _Parser(tokens)
    expr = parser.parse_expr()

    # Ensure all tokens consumed
    if parser.current.kind != TokenKind.EOF:
        raise FormulaSyntaxError(
            f"Unexpected {_found(parser.current)} after formula",
            parser.current.pos,
        )

    return expr


def parse_expr(source: str) -> Expr:
    """Parse a formula string into an AST.

    Args:
        source: Formula text (e.g., "width - (2 * side)")

    Returns:
        Parsed formula AST.

    Raises:
        FormulaSyntaxError: If the formula is invalid.
    """
    return parse_tokens(tokenize(source))

"""Tests for the panel formula language.

Covers:
- Tokenizer: all token kinds, offsets, rejected characters
- Parser: precedence, associativity, ternary nesting, error positions
- Printer: str() output re-parses to the same tree
- Evaluator: arithmetic, flag coercion, conditionals, error cases
"""

from __future__ import annotations

import pytest

from panelcalc.core.errors import (
    DivisionByZeroError,
    FormulaSyntaxError,
    NumericOverflowError,
    TypeMismatchError,
    UndefinedVariableError,
)
from panelcalc.core.formula_lang.evaluator import evaluate, evaluate_number
from panelcalc.core.formula_lang.parser import MAX_DEPTH, parse_expr, parse_tokens
from panelcalc.core.formula_lang.tokenizer import Token, TokenKind, tokenize
from panelcalc.core.ir import (
    BinaryExpr,
    BinaryOp,
    BindingSet,
    Boolean,
    Conditional,
    Number,
    NumberLiteral,
    NumericOverflow,
    UnaryMinus,
    ValueKind,
    VariableRef,
)

# ============================================================================
# Tokenizer tests
# ============================================================================


class TestTokenizer:
    """Tokenizer produces correct token sequences."""

    def test_integer(self) -> None:
        tokens = tokenize("42")
        assert tokens[0].kind == TokenKind.NUMBER
        assert tokens[0].value == "42"

    def test_decimal(self) -> None:
        tokens = tokenize("2.5")
        assert tokens[0].kind == TokenKind.NUMBER
        assert tokens[0].value == "2.5"

    def test_identifier(self) -> None:
        tokens = tokenize("topBottom")
        assert tokens[0].kind == TokenKind.IDENT
        assert tokens[0].value == "topBottom"

    def test_identifier_with_underscore_and_digits(self) -> None:
        tokens = tokenize("_panel2")
        assert tokens[0] == Token(TokenKind.IDENT, "_panel2", 0)

    def test_operators_and_punctuation(self) -> None:
        tokens = tokenize("+ - * / ( ) ? :")
        assert [t.kind for t in tokens] == [
            TokenKind.PLUS,
            TokenKind.MINUS,
            TokenKind.STAR,
            TokenKind.SLASH,
            TokenKind.LPAREN,
            TokenKind.RPAREN,
            TokenKind.QUESTION,
            TokenKind.COLON,
            TokenKind.EOF,
        ]

    def test_offsets(self) -> None:
        tokens = tokenize("width - (2 * side)")
        assert [(t.value, t.pos) for t in tokens] == [
            ("width", 0),
            ("-", 6),
            ("(", 8),
            ("2", 9),
            ("*", 11),
            ("side", 13),
            (")", 17),
            ("", 18),
        ]

    def test_sign_is_not_part_of_number(self) -> None:
        tokens = tokenize("-5")
        assert [t.kind for t in tokens] == [TokenKind.MINUS, TokenKind.NUMBER, TokenKind.EOF]

    def test_number_followed_by_identifier(self) -> None:
        tokens = tokenize("2side")
        assert [t.kind for t in tokens[:2]] == [TokenKind.NUMBER, TokenKind.IDENT]

    def test_whitespace_handling(self) -> None:
        tokens = tokenize(" \t width\n+\r\nside  ")
        kinds = [t.kind for t in tokens if t.kind != TokenKind.EOF]
        assert kinds == [TokenKind.IDENT, TokenKind.PLUS, TokenKind.IDENT]

    def test_empty_source(self) -> None:
        tokens = tokenize("")
        assert tokens == [Token(TokenKind.EOF, "", 0)]

    def test_unexpected_character(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Unexpected character") as exc_info:
            tokenize("width % 2")
        assert exc_info.value.position == 6

    def test_trailing_dot_is_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError) as exc_info:
            tokenize("3.")
        assert exc_info.value.position == 1

    def test_leading_dot_is_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError) as exc_info:
            tokenize(".5")
        assert exc_info.value.position == 0

    def test_comparison_operators_are_not_tokens(self) -> None:
        with pytest.raises(FormulaSyntaxError):
            tokenize("doorCount > 1")

    def test_non_ascii_letter_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError):
            tokenize("breite + é")


# ============================================================================
# Parser tests
# ============================================================================


class TestParserPrimaries:
    """Parser handles numbers, names and grouping."""

    def test_number(self) -> None:
        expr = parse_expr("18")
        assert expr == NumberLiteral(value=18)

    def test_decimal(self) -> None:
        expr = parse_expr("2.5")
        assert isinstance(expr, NumberLiteral)
        assert expr.value == 2.5

    def test_variable(self) -> None:
        assert parse_expr("width") == VariableRef(name="width")

    def test_parentheses_are_pure_grouping(self) -> None:
        assert parse_expr("((width))") == VariableRef(name="width")

    def test_parse_tokens_matches_parse_expr(self) -> None:
        source = "height - topBottom - 3"
        assert parse_tokens(tokenize(source)) == parse_expr(source)


class TestParserArithmetic:
    """Parser handles arithmetic with correct precedence."""

    def test_mul_before_add(self) -> None:
        # 2 + 3 * 4 is 2 + (3 * 4)
        expr = parse_expr("2 + 3 * 4")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.ADD
        assert isinstance(expr.right, BinaryExpr)
        assert expr.right.op == BinaryOp.MUL

    def test_parentheses_override_precedence(self) -> None:
        expr = parse_expr("(2 + 3) * 4")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.MUL
        assert isinstance(expr.left, BinaryExpr)
        assert expr.left.op == BinaryOp.ADD

    def test_subtraction_is_left_associative(self) -> None:
        # a - b - c is (a - b) - c
        expr = parse_expr("height - topBottom - 3")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.SUB
        assert expr.right == NumberLiteral(value=3)
        assert isinstance(expr.left, BinaryExpr)
        assert expr.left.op == BinaryOp.SUB

    def test_division_is_left_associative(self) -> None:
        expr = parse_expr("a / b / c")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.DIV
        assert isinstance(expr.left, BinaryExpr)

    def test_unary_minus(self) -> None:
        assert parse_expr("-side") == UnaryMinus(operand=VariableRef(name="side"))

    def test_unary_binds_tighter_than_multiplication(self) -> None:
        expr = parse_expr("-2 * 3")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.MUL
        assert isinstance(expr.left, UnaryMinus)

    def test_unary_after_binary_operator(self) -> None:
        expr = parse_expr("width - -side")
        assert isinstance(expr, BinaryExpr)
        assert isinstance(expr.right, UnaryMinus)

    def test_double_minus_needs_parentheses(self) -> None:
        with pytest.raises(FormulaSyntaxError):
            parse_expr("--side")
        assert parse_expr("-(-side)") == UnaryMinus(
            operand=UnaryMinus(operand=VariableRef(name="side"))
        )


class TestParserConditional:
    """Parser handles the ternary conditional."""

    def test_simple_ternary(self) -> None:
        expr = parse_expr("hasBack ? back : 0")
        assert expr == Conditional(
            condition=VariableRef(name="hasBack"),
            then_branch=VariableRef(name="back"),
            else_branch=NumberLiteral(value=0),
        )

    def test_ternary_has_lowest_precedence(self) -> None:
        expr = parse_expr("hasBack ? back + 1 : depth - 2")
        assert isinstance(expr, Conditional)
        assert isinstance(expr.then_branch, BinaryExpr)
        assert isinstance(expr.else_branch, BinaryExpr)

    def test_condition_is_additive(self) -> None:
        expr = parse_expr("isCorner + 1 ? 2 : 3")
        assert isinstance(expr, Conditional)
        assert isinstance(expr.condition, BinaryExpr)

    def test_ternary_nests_right(self) -> None:
        # a ? b : c ? d : e is a ? b : (c ? d : e)
        expr = parse_expr("a ? b : c ? d : e")
        assert isinstance(expr, Conditional)
        assert expr.condition == VariableRef(name="a")
        assert isinstance(expr.else_branch, Conditional)
        assert expr.else_branch.condition == VariableRef(name="c")

    def test_ternary_in_then_slot(self) -> None:
        expr = parse_expr("a ? b ? c : d : e")
        assert isinstance(expr, Conditional)
        assert isinstance(expr.then_branch, Conditional)
        assert expr.else_branch == VariableRef(name="e")

    def test_ternary_inside_arithmetic_needs_parentheses(self) -> None:
        expr = parse_expr("depth - (hasBack ? back : 0)")
        assert isinstance(expr, BinaryExpr)
        assert isinstance(expr.right, Conditional)


class TestParserErrors:
    """Parser reports the expected token and where parsing stopped."""

    def test_empty(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="end of input") as exc_info:
            parse_expr("")
        assert exc_info.value.position == 0

    def test_dangling_operator(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="end of input") as exc_info:
            parse_expr("width -")
        assert exc_info.value.position == 7

    def test_unmatched_open_paren(self) -> None:
        with pytest.raises(FormulaSyntaxError, match=r"Expected '\)'") as exc_info:
            parse_expr("(width - side")
        assert exc_info.value.position == 13

    def test_missing_colon(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Expected ':'") as exc_info:
            parse_expr("hasBack ? back")
        assert exc_info.value.position == 14

    def test_unmatched_close_paren(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="after formula") as exc_info:
            parse_expr("width)")
        assert exc_info.value.position == 5

    def test_two_operands_in_a_row(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="identifier 'side'") as exc_info:
            parse_expr("width side")
        assert exc_info.value.position == 6

    def test_operator_where_operand_expected(self) -> None:
        with pytest.raises(FormulaSyntaxError, match=r"got '\*'") as exc_info:
            parse_expr("width - * 2")
        assert exc_info.value.position == 8

    def test_lexer_error_surfaces_as_syntax_error(self) -> None:
        with pytest.raises(FormulaSyntaxError) as exc_info:
            parse_expr("width # 2")
        assert exc_info.value.position == 6

    def test_huge_literal_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="out of range"):
            parse_expr("1" + "0" * 400)

    def test_error_format_marks_position(self) -> None:
        source = "width - * 2"
        with pytest.raises(FormulaSyntaxError) as exc_info:
            parse_expr(source)
        lines = exc_info.value.format(source).splitlines()
        assert lines[0] == source
        assert lines[1] == " " * 8 + "^"

    def test_payload(self) -> None:
        with pytest.raises(FormulaSyntaxError) as exc_info:
            parse_expr("width -")
        payload = exc_info.value.payload
        assert payload.position == 7
        assert "end of input" in payload.message

    def test_deep_parentheses_rejected(self) -> None:
        depth = 200
        with pytest.raises(FormulaSyntaxError, match="nested too deeply") as exc_info:
            parse_expr("(" * depth + "1" + ")" * depth)
        assert exc_info.value.position == MAX_DEPTH

    def test_parentheses_within_limit(self) -> None:
        depth = MAX_DEPTH - 1
        expr = parse_expr("(" * depth + "width" + ")" * depth)
        assert expr == VariableRef(name="width")

    def test_long_operator_chain_rejected(self) -> None:
        # The 64th '+' makes the tree 65 levels deep
        with pytest.raises(FormulaSyntaxError, match="nested too deeply") as exc_info:
            parse_expr("+".join(["1"] * 100))
        assert exc_info.value.position == 127

    def test_long_operator_chain_within_limit(self) -> None:
        expr = parse_expr("+".join(["1"] * MAX_DEPTH))
        assert evaluate_number(expr, BindingSet()) == MAX_DEPTH

    def test_deep_ternary_chain_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="nested too deeply"):
            parse_expr("hasBack ? 1 : " * 100 + "0")


# ============================================================================
# Printer tests
# ============================================================================


class TestPrinter:
    """str() on AST nodes produces re-parseable formula text."""

    @pytest.mark.parametrize(
        "source",
        [
            "width - (2 * side)",
            "height - (hasTop ? topBottom : 0) - (hasBottom ? topBottom : 0)",
            "-(2 + 3)",
            "-(-side)",
            "a ? b : c ? d : e",
            "(height - 12) / drawerCount - 3",
            "0.1 + 2.25 * -width",
        ],
    )
    def test_reparse_gives_same_tree(self, source: str) -> None:
        expr = parse_expr(source)
        assert parse_expr(str(expr)) == expr

    def test_binary_is_parenthesised(self) -> None:
        assert str(parse_expr("width - 2 * side")) == "(width - (2 * side))"

    def test_conditional(self) -> None:
        assert str(parse_expr("hasBack ? back : 0")) == "(hasBack ? back : 0)"

    def test_integral_number_prints_without_fraction(self) -> None:
        assert str(NumberLiteral(value=600.0)) == "600"

    def test_small_number_prints_positionally(self) -> None:
        assert str(NumberLiteral(value=1e-7)) == "0.0000001"

    def test_negative_literal_is_grouped(self) -> None:
        text = str(UnaryMinus(operand=NumberLiteral(value=-5)))
        assert text == "-(-5)"
        assert evaluate_number(parse_expr(text), BindingSet()) == 5


# ============================================================================
# Evaluator tests
# ============================================================================


class TestEvaluateArithmetic:
    """Arithmetic evaluation."""

    def test_precedence(self) -> None:
        assert evaluate_number(parse_expr("2 + 3 * 4"), BindingSet()) == 14

    def test_unary_on_group(self) -> None:
        assert evaluate_number(parse_expr("-(2 + 3)"), BindingSet()) == -5

    def test_left_associative_subtraction(self) -> None:
        assert evaluate_number(parse_expr("10 - 4 - 3"), BindingSet()) == 3

    def test_left_associative_division(self) -> None:
        assert evaluate_number(parse_expr("100 / 5 / 2"), BindingSet()) == 10

    def test_inner_width(self) -> None:
        bindings = BindingSet.of(width=600, side=18)
        assert evaluate_number(parse_expr("width - (2 * side)"), bindings) == 564

    def test_side_height(self) -> None:
        bindings = BindingSet.of(height=720, topBottom=18)
        assert evaluate_number(parse_expr("height - topBottom - 3"), bindings) == 699

    def test_fractional_result(self) -> None:
        bindings = BindingSet.of(width=400)
        assert evaluate_number(parse_expr("width / 3"), bindings) == pytest.approx(133.3333333)

    def test_result_is_float(self) -> None:
        result = evaluate_number(parse_expr("2 + 2"), BindingSet())
        assert isinstance(result, float)

    def test_evaluate_returns_value(self) -> None:
        assert evaluate(parse_expr("1 + 1"), BindingSet()) == Number(value=2)


class TestEvaluateFlags:
    """Construction flags in conditionals and arithmetic."""

    def test_ternary_true(self) -> None:
        bindings = BindingSet.of(hasBack=True, back=6)
        assert evaluate_number(parse_expr("hasBack ? back : 0"), bindings) == 6

    def test_ternary_false(self) -> None:
        bindings = BindingSet.of(hasBack=False, back=6)
        assert evaluate_number(parse_expr("hasBack ? back : 0"), bindings) == 0

    def test_untaken_branch_is_not_evaluated(self) -> None:
        # back is unbound; the false branch never reads it
        bindings = BindingSet.of(hasBack=False)
        assert evaluate_number(parse_expr("hasBack ? back : 0"), bindings) == 0

    def test_untaken_else_branch_is_not_evaluated(self) -> None:
        bindings = BindingSet.of(hasBack=True, back=12)
        assert evaluate_number(parse_expr("hasBack ? back : 1 / 0"), bindings) == 12

    def test_flag_in_addition(self) -> None:
        bindings = BindingSet.of(isCorner=True)
        assert evaluate_number(parse_expr("isCorner + 1"), bindings) == 2.0

    def test_false_flag_counts_as_zero(self) -> None:
        bindings = BindingSet.of(isCorner=False)
        assert evaluate_number(parse_expr("isCorner * 100 + 5"), bindings) == 5.0

    def test_negated_flag(self) -> None:
        bindings = BindingSet.of(hasTop=True)
        assert evaluate(parse_expr("-hasTop"), bindings) == Number(value=-1.0)

    def test_nested_conditionals(self) -> None:
        expr = parse_expr("hasTop ? topBottom : hasBottom ? 1 : 2")
        bindings = BindingSet.of(hasTop=False, hasBottom=False)
        assert evaluate_number(expr, bindings) == 2

    def test_carcass_height(self, full_bindings: BindingSet) -> None:
        expr = parse_expr("height - (hasTop ? topBottom : 0) - (hasBottom ? topBottom : 0)")
        assert evaluate_number(expr, full_bindings) == 684
        no_top = full_bindings.with_updates(hasTop=False)
        assert evaluate_number(expr, no_top) == 702


class TestEvaluateErrors:
    """Typed evaluation failures."""

    def test_division_by_zero(self) -> None:
        bindings = BindingSet.of(depth=0)
        with pytest.raises(DivisionByZeroError):
            evaluate_number(parse_expr("100 / depth"), bindings)

    def test_division_by_false_flag(self) -> None:
        bindings = BindingSet.of(hasBack=False)
        with pytest.raises(DivisionByZeroError):
            evaluate_number(parse_expr("10 / hasBack"), bindings)

    def test_undefined_variable(self) -> None:
        bindings = BindingSet.of(width=600, side=18)
        with pytest.raises(UndefinedVariableError) as exc_info:
            evaluate_number(parse_expr("width - sideX"), bindings)
        assert exc_info.value.name == "sideX"
        assert exc_info.value.payload.name == "sideX"

    def test_unbound_canonical_parameter(self) -> None:
        with pytest.raises(UndefinedVariableError, match="shelf"):
            evaluate_number(parse_expr("shelf * 2"), BindingSet.of(width=1))

    def test_number_condition(self) -> None:
        bindings = BindingSet.of(width=600)
        with pytest.raises(TypeMismatchError) as exc_info:
            evaluate_number(parse_expr("width ? 1 : 2"), bindings)
        assert exc_info.value.expected == ValueKind.BOOLEAN
        assert exc_info.value.found == ValueKind.NUMBER

    def test_boolean_result(self) -> None:
        bindings = BindingSet.of(hasBack=True)
        with pytest.raises(TypeMismatchError) as exc_info:
            evaluate_number(parse_expr("hasBack"), bindings)
        assert exc_info.value.expected == ValueKind.NUMBER
        assert exc_info.value.found == ValueKind.BOOLEAN

    def test_evaluate_allows_boolean_result(self) -> None:
        bindings = BindingSet.of(hasBack=True)
        assert evaluate(parse_expr("hasBack"), bindings) == Boolean(value=True)

    def test_conditional_selecting_a_flag(self) -> None:
        bindings = BindingSet.of(isCorner=True, hasBack=False)
        expr = parse_expr("isCorner ? hasBack : 1")
        assert evaluate(expr, bindings) == Boolean(value=False)
        with pytest.raises(TypeMismatchError):
            evaluate_number(expr, bindings)

    def test_multiplication_overflow(self) -> None:
        big = "1" + "0" * 300
        with pytest.raises(NumericOverflowError) as exc_info:
            evaluate_number(parse_expr(f"width * {big} * {big}"), BindingSet.of(width=600))
        assert exc_info.value.payload == NumericOverflow(op="*")

    def test_division_overflow(self) -> None:
        tiny = "0." + "0" * 300 + "1"
        with pytest.raises(NumericOverflowError, match="'/'"):
            evaluate_number(parse_expr(f"width / {tiny}"), BindingSet.of(width=1e10))

    def test_unknown_node_type(self) -> None:
        with pytest.raises(TypeError, match="Unknown expression type"):
            evaluate("width", BindingSet.of(width=1))  # type: ignore[arg-type]


class TestEvaluatePurity:
    """Evaluation leaves its inputs untouched."""

    def test_repeated_evaluation(self, full_bindings: BindingSet) -> None:
        expr = parse_expr("depth - (hasBack ? back : 0) - 50")
        first = evaluate_number(expr, full_bindings)
        second = evaluate_number(expr, full_bindings)
        assert first == second == 498

    def test_inputs_unchanged(self, full_bindings: BindingSet) -> None:
        expr = parse_expr("width / 2 - side")
        expr_before = expr.model_copy(deep=True)
        bindings_before = full_bindings.as_dict()
        evaluate_number(expr, full_bindings)
        assert expr == expr_before
        assert full_bindings.as_dict() == bindings_before

from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from monkey.monkey_ast import (
    ArrayLiteral,
    Boolean,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    WhileExpression,
)
from monkey.monkey_lexer import CharacterStream, Lexer
from monkey.monkey_parser import Parser, parse


def parse_ok(source: str) -> Program:
    program, errors = parse(source)
    assert errors == [], f"unexpected parse errors: {errors}"
    return program


def single_expression(source: str) -> Any:
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def test_let_statements() -> None:
    program = parse_ok("let x = 5; let y = true; let foobar = y;")
    assert [s.name.value for s in program.statements] == ["x", "y", "foobar"]  # type: ignore[attr-defined]
    assert all(isinstance(s, LetStatement) for s in program.statements)
    assert str(program) == "let x = 5;let y = true;let foobar = y;"


def test_return_statements() -> None:
    program = parse_ok("return 5; return x + y;")
    assert all(isinstance(s, ReturnStatement) for s in program.statements)
    assert str(program.statements[1]) == "return (x + y);"


def test_semicolons_are_optional() -> None:
    program = parse_ok("let x = 1\nx")
    assert len(program.statements) == 2


def test_empty_program() -> None:
    program = parse_ok("")
    assert program.statements == []
    assert str(program) == ""


def test_literals() -> None:
    assert single_expression("foobar") == Identifier(
        Lexer(CharacterStream("foobar")).next_token(), "foobar"
    )
    integer = single_expression("5")
    assert isinstance(integer, IntegerLiteral) and integer.value == 5
    string = single_expression('"hello world"')
    assert isinstance(string, StringLiteral) and string.value == "hello world"
    boolean = single_expression("false")
    assert isinstance(boolean, Boolean) and boolean.value is False


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,operator,value",
    [("!5", "!", 5), ("-15", "-", 15)],
)
def test_prefix_expressions(source: str, operator: str, value: int) -> None:
    expr = single_expression(source)
    assert isinstance(expr, PrefixExpression)
    assert expr.operator == operator
    assert expr.right.value == value  # type: ignore[attr-defined]


@pytest.mark.parametrize(  # type: ignore[misc]
    "operator", ["+", "-", "*", "/", ">", "<", "==", "!="]
)
def test_infix_expressions(operator: str) -> None:
    expr = single_expression(f"5 {operator} 6")
    assert isinstance(expr, InfixExpression)
    assert expr.operator == operator
    assert expr.left.value == 5  # type: ignore[attr-defined]
    assert expr.right.value == 6  # type: ignore[attr-defined]


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,expected",
    [
        ("-a * b", "((-a) * b)"),
        ("!-a", "(!(-a))"),
        ("a + b + c", "((a + b) + c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("3 + 4; -5 * 5", "(3 + 4)((-5) * 5)"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("3 > 5 == false", "((3 > 5) == false)"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
        ("-(5 + 5)", "(-(5 + 5))"),
        ("!(true == true)", "(!(true == true))"),
        ("a + add(b * c) + d", "((a + add((b * c))) + d)"),
        (
            "add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))",
            "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))",
        ),
        ("a * [1, 2, 3, 4][b * c] * d", "((a * ([1, 2, 3, 4][(b * c)])) * d)"),
        (
            "add(a * b[2], b[1], 2 * [1, 2][1])",
            "add((a * (b[2])), (b[1]), (2 * ([1, 2][1])))",
        ),
    ],
)
def test_operator_precedence_rendering(source: str, expected: str) -> None:
    assert str(parse_ok(source)) == expected


def test_if_expression() -> None:
    expr = single_expression("if (x < y) { x }")
    assert isinstance(expr, IfExpression)
    assert str(expr.condition) == "(x < y)"
    assert str(expr.consequence) == "{ x; }"
    assert expr.alternative is None


def test_if_else_expression() -> None:
    expr = single_expression("if (x < y) { x } else { y }")
    assert isinstance(expr, IfExpression)
    assert expr.alternative is not None
    assert str(expr) == "if ((x < y)) { x; } else { y; }"


def test_while_expression() -> None:
    expr = single_expression("while (i < 3) { let i = i + 1; }")
    assert isinstance(expr, WhileExpression)
    assert str(expr) == "while ((i < 3)) { let i = (i + 1); }"


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,params",
    [("fn() {};", []), ("fn(x) {};", ["x"]), ("fn(x, y, z) {};", ["x", "y", "z"])],
)
def test_function_parameters(source: str, params: list[str]) -> None:
    expr = single_expression(source)
    assert isinstance(expr, FunctionLiteral)
    assert [p.value for p in expr.parameters] == params


def test_function_literal_rendering() -> None:
    assert str(parse_ok("fn(x, y) { x + y; }")) == "fn(x, y) { (x + y); }"


def test_call_expression() -> None:
    expr = single_expression("add(1, 2 * 3, 4 + 5);")
    assert isinstance(expr, CallExpression)
    assert str(expr.function) == "add"
    assert [str(a) for a in expr.arguments] == ["1", "(2 * 3)", "(4 + 5)"]


def test_array_and_index() -> None:
    array = single_expression("[1, 2 * 2, 3 + 3]")
    assert isinstance(array, ArrayLiteral)
    assert [str(e) for e in array.elements] == ["1", "(2 * 2)", "(3 + 3)"]
    assert single_expression("[]").elements == []
    index = single_expression("myArray[1 + 1]")
    assert isinstance(index, IndexExpression)
    assert str(index) == "(myArray[(1 + 1)])"


def test_hash_literals() -> None:
    expr = single_expression('{"one": 1, "two": 2, "three": 3}')
    assert isinstance(expr, HashLiteral)
    assert [(k.value, v.value) for k, v in expr.pairs] == [  # type: ignore[attr-defined]
        ("one", 1),
        ("two", 2),
        ("three", 3),
    ]
    empty = single_expression("{}")
    assert isinstance(empty, HashLiteral) and empty.pairs == []
    mixed = single_expression('{"one": 0 + 1, true: 2, 3: 15 / 5}')
    assert str(mixed) == '{"one": (0 + 1), true: 2, 3: (15 / 5)}'


def test_golden_let_recovery_errors() -> None:
    program, errors = parse("let x 5; let = 10; let 838383;")
    assert errors == [
        "expected next token to be ASSIGN, got INT instead",
        "expected next token to be IDENT, got ASSIGN instead",
        "no prefix parse function for ASSIGN found",
        "expected next token to be IDENT, got INT instead",
    ]
    assert not any(isinstance(s, LetStatement) for s in program.statements)


def test_errors_accumulate_on_parser() -> None:
    parser = Parser(Lexer(CharacterStream("let = 1;")))
    parser.parse_program()
    assert parser.errors[0] == "expected next token to be IDENT, got ASSIGN instead"


def test_integer_overflow_is_parse_error() -> None:
    _, errors = parse("9223372036854775808")
    assert errors == ['could not parse "9223372036854775808" as integer']
    _, errors = parse("9223372036854775807")
    assert errors == []


def test_very_long_integer_literal_is_parse_error() -> None:
    literal = "1" * 5000
    program, errors = parse(literal)
    assert program.statements == []
    assert errors == [f'could not parse "{literal}" as integer']


def test_leading_zeros_do_not_count_toward_integer_width() -> None:
    expr = single_expression("0" * 5000 + "42")
    assert isinstance(expr, IntegerLiteral)
    assert expr.value == 42
    assert single_expression("000").value == 0


def test_missing_closing_brace() -> None:
    _, errors = parse("if (x) { y")
    assert "expected next token to be RBRACE, got EOF instead" in errors


def test_missing_closing_paren() -> None:
    _, errors = parse("(1 + 2")
    assert errors == ["expected next token to be RPAREN, got EOF instead"]


def test_function_parameters_must_be_identifiers() -> None:
    _, errors = parse("fn(1) {}")
    assert errors[0] == "expected next token to be IDENT, got INT instead"


def test_illegal_token_has_no_prefix_rule() -> None:
    _, errors = parse("@")
    assert errors == ["no prefix parse function for ILLEGAL found"]


IDENTS = ["a", "b", "foo", "bar"]
OPERATORS = ["+", "-", "*", "/", "<", ">", "==", "!="]


def string_source(content: str) -> str:
    return '"' + content.replace("\n", "\\n").replace("\t", "\\t") + '"'


@composite  # type: ignore[misc]
def expressions(draw: Any, depth: int = 3) -> str:
    if depth == 0:
        return draw(
            st.one_of(
                st.integers(min_value=0, max_value=10**6).map(str),
                st.sampled_from(IDENTS),
                st.sampled_from(["true", "false"]),
                st.text(alphabet="abc xyz{}\n\t", max_size=5).map(string_source),
            )
        )
    sub = expressions(depth=depth - 1)
    choice = draw(st.integers(min_value=0, max_value=11))
    if choice == 0:
        return draw(sub)
    if choice == 1:
        return f"{draw(st.sampled_from(['-', '!']))}{draw(sub)}"
    if choice == 2:
        return f"{draw(sub)} {draw(st.sampled_from(OPERATORS))} {draw(sub)}"
    if choice == 3:
        args = draw(st.lists(sub, max_size=3))
        return f"{draw(st.sampled_from(IDENTS))}({', '.join(args)})"
    if choice == 4:
        elems = draw(st.lists(sub, max_size=3))
        return f"[{', '.join(elems)}]"
    if choice == 5:
        return f"{draw(sub)}[{draw(sub)}]"
    if choice == 6:
        pairs = draw(st.lists(st.tuples(sub, sub), max_size=2))
        return "{" + ", ".join(f"{k}: {v}" for k, v in pairs) + "}"
    if choice == 7:
        out = f"if ({draw(sub)}) {draw(blocks(depth - 1))}"
        if draw(st.booleans()):
            out += f" else {draw(blocks(depth - 1))}"
        return out
    if choice == 8:
        return f"while ({draw(sub)}) {draw(blocks(depth - 1))}"
    if choice == 9:
        params = draw(st.lists(st.sampled_from(IDENTS), max_size=3, unique=True))
        return f"fn({', '.join(params)}) {draw(blocks(depth - 1))}"
    if choice == 10:
        return f"{draw(sub)}({draw(sub)})"
    return f"({draw(sub)})"


@composite  # type: ignore[misc]
def blocks(draw: Any, depth: int) -> str:
    sub = expressions(depth=depth)
    statements = draw(
        st.lists(
            st.one_of(
                sub,
                sub.map(lambda e: f"return {e}"),
                sub.map(lambda e: f"let {IDENTS[0]} = {e}"),
            ),
            max_size=2,
        )
    )
    return "{ " + "; ".join(statements) + " }"


@settings(max_examples=200)  # type: ignore[misc]
@given(expressions())  # type: ignore[misc]
def test_rendering_is_stable_under_reparse(source: str) -> None:
    rendered = str(parse_ok(source))
    assert str(parse_ok(rendered)) == rendered


@given(st.text(max_size=100))  # type: ignore[misc]
def test_parser_never_raises(source: str) -> None:
    program, errors = parse(source)
    assert isinstance(program, Program)
    assert all(isinstance(e, str) for e in errors)

import pytest
from hypothesis import given
from hypothesis import strategies as st

from monkey.monkey_ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
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
)
from monkey.monkey_lexer import Token, tokenize
from monkey.monkey_parser import Parser, Precedence, parse_program


def parse(source: str) -> Program:
    program, errors = parse_program(tokenize(source))
    assert errors == [], f"parser errors: {errors}"
    return program


def parse_errors(source: str) -> list[str]:
    _, errors = parse_program(tokenize(source))
    return errors


def only_expression(source: str):
    program = parse(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def test_let_statements() -> None:
    program = parse("let x = 5; let y = true; let foobar = y;")
    assert program.statements == (
        LetStatement(Identifier("x"), IntegerLiteral(5)),
        LetStatement(Identifier("y"), BooleanLiteral(True)),
        LetStatement(Identifier("foobar"), Identifier("y")),
    )


def test_return_statements() -> None:
    program = parse("return 5; return x; return add(1, 2);")
    assert [type(s) for s in program.statements] == [ReturnStatement] * 3
    assert program.statements[1] == ReturnStatement(Identifier("x"))


def test_trailing_semicolon_is_optional() -> None:
    assert parse("let x = 5") == parse("let x = 5;")
    assert parse("return 1") == parse("return 1;")


def test_empty_program() -> None:
    assert parse("").statements == ()


@pytest.mark.parametrize(
    "source,expected",
    [
        ("-a * b", "((-a) * b)"),
        ("!-a", "(!(-a))"),
        ("a + b + c", "((a + b) + c)"),
        ("a + b - c", "((a + b) - c)"),
        ("a * b * c", "((a * b) * c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b / c", "(a + (b / c))"),
        ("1 + 2 * 3", "(1 + (2 * 3))"),
        ("-1 + 2", "((-1) + 2)"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("3 + 4; -5 * 5", "(3 + 4)((-5) * 5)"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("true", "true"),
        ("3 > 5 == false", "((3 > 5) == false)"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
        ("(5 + 5) * 2", "((5 + 5) * 2)"),
        ("-(5 + 5)", "(-(5 + 5))"),
        ("!(true == true)", "(!(true == true))"),
        ("a + add(b * c) + d", "((a + add((b * c))) + d)"),
        (
            "add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))",
            "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))",
        ),
        ("add(a + b + c * d / f + g)", "add((((a + b) + ((c * d) / f)) + g))"),
        ("a * [1, 2, 3, 4][b * c] * d", "((a * ([1, 2, 3, 4][(b * c)])) * d)"),
        (
            "add(a * b[2], b[1], 2 * [1, 2][1])",
            "add((a * (b[2])), (b[1]), (2 * ([1, 2][1])))",
        ),
    ],
)
def test_operator_precedence(source: str, expected: str) -> None:
    assert str(parse(source)) == expected


def test_prefix_expressions() -> None:
    assert only_expression("!5") == PrefixExpression("!", IntegerLiteral(5))
    assert only_expression("-x") == PrefixExpression("-", Identifier("x"))
    assert only_expression("!true") == PrefixExpression("!", BooleanLiteral(True))


@pytest.mark.parametrize("op", ["+", "-", "*", "/", ">", "<", "==", "!="])
def test_infix_expressions(op: str) -> None:
    assert only_expression(f"5 {op} 6") == InfixExpression(
        op, IntegerLiteral(5), IntegerLiteral(6)
    )


def test_if_expression() -> None:
    expr = only_expression("if (x < y) { x }")
    assert expr == IfExpression(
        InfixExpression("<", Identifier("x"), Identifier("y")),
        BlockStatement((ExpressionStatement(Identifier("x")),)),
    )
    assert expr.alternative is None


def test_if_else_expression() -> None:
    expr = only_expression("if (x < y) { x } else { y }")
    assert isinstance(expr, IfExpression)
    assert expr.alternative == BlockStatement((ExpressionStatement(Identifier("y")),))
    assert str(expr) == "if(x < y) xelse y"


def test_empty_block() -> None:
    expr = only_expression("if (true) {}")
    assert expr.consequence == BlockStatement(())


def test_function_literal() -> None:
    expr = only_expression("fn(x, y) { x + y; }")
    assert expr == FunctionLiteral(
        (Identifier("x"), Identifier("y")),
        BlockStatement(
            (ExpressionStatement(InfixExpression("+", Identifier("x"), Identifier("y"))),)
        ),
    )
    assert str(expr) == "fn(x, y) (x + y)"


@pytest.mark.parametrize(
    "source,params",
    [("fn() {};", []), ("fn(x) {};", ["x"]), ("fn(x, y, z) {};", ["x", "y", "z"])],
)
def test_function_parameters(source: str, params: list[str]) -> None:
    expr = only_expression(source)
    assert [p.name for p in expr.parameters] == params


def test_call_expression() -> None:
    expr = only_expression("add(1, 2 * 3, 4 + 5);")
    assert isinstance(expr, CallExpression)
    assert expr.callee == Identifier("add")
    assert [str(a) for a in expr.arguments] == ["1", "(2 * 3)", "(4 + 5)"]


def test_call_on_function_literal() -> None:
    expr = only_expression("fn(x) { x }(5)")
    assert isinstance(expr, CallExpression)
    assert isinstance(expr.callee, FunctionLiteral)


def test_string_literal() -> None:
    assert only_expression('"hello world";') == StringLiteral("hello world")


def test_array_literal() -> None:
    expr = only_expression("[1, 2 * 2, 3 + 3]")
    assert isinstance(expr, ArrayLiteral)
    assert [str(e) for e in expr.elements] == ["1", "(2 * 2)", "(3 + 3)"]
    assert only_expression("[]") == ArrayLiteral(())


def test_index_expression() -> None:
    assert only_expression("myArray[1 + 1]") == IndexExpression(
        Identifier("myArray"),
        InfixExpression("+", IntegerLiteral(1), IntegerLiteral(1)),
    )


def test_hash_literal_string_keys() -> None:
    expr = only_expression('{"one": 1, "two": 2, "three": 3}')
    assert isinstance(expr, HashLiteral)
    assert {str(k): str(v) for k, v in expr.pairs} == {
        "one": "1",
        "two": "2",
        "three": "3",
    }


def test_hash_literal_mixed_keys_and_expressions() -> None:
    expr = only_expression('{"one": 0 + 1, true: 2, 3: 15 / 5}')
    assert [str(v) for _, v in expr.pairs] == ["(0 + 1)", "2", "(15 / 5)"]


def test_empty_hash_literal() -> None:
    assert only_expression("{}") == HashLiteral(())


def test_hash_literal_duplicate_keys_keep_last_value() -> None:
    expr = only_expression('{"a": 1, "b": 2, "a": 3}')
    assert expr.pairs == (
        (StringLiteral("a"), IntegerLiteral(3)),
        (StringLiteral("b"), IntegerLiteral(2)),
    )


def test_nodes_record_source_position() -> None:
    program = parse("let x = 1;\nlet y = x;")
    second = program.statements[1]
    assert (second.line, second.col) == (2, 1)
    assert (second.value.line, second.value.col) == (2, 9)


def test_let_string_form() -> None:
    assert str(parse("let myVar = anotherVar;")) == "let myVar = anotherVar;"
    assert str(parse("return x")) == "return x;"


# Errors


def test_three_malformed_lets_give_three_errors() -> None:
    errors = parse_errors("let x 5; let = 10; let 838383;")
    assert errors == [
        "expected next token to be ASSIGN, got INT instead",
        "expected next token to be IDENT, got ASSIGN instead",
        "expected next token to be IDENT, got INT instead",
    ]


def test_failed_statement_is_omitted_and_parsing_continues() -> None:
    program, errors = parse_program(tokenize("let = 1; let y = 2; y"))
    assert len(errors) == 1
    assert str(program) == "let y = 2;y"


def test_no_prefix_parse_function() -> None:
    assert parse_errors("let x = ;") == ["no prefix parse function for SEMICOLON found"]
    assert parse_errors("*5") == ["no prefix parse function for ASTERISK found"]


def test_illegal_token_is_a_parse_error() -> None:
    assert parse_errors("@") == ["no prefix parse function for ILLEGAL found"]


def test_integer_out_of_range() -> None:
    assert parse_errors("9223372036854775808") == [
        "could not parse 9223372036854775808 as integer"
    ]
    assert parse("9223372036854775807") is not None


def test_missing_closing_delimiters() -> None:
    assert parse_errors("(1 + 2") == ["expected next token to be RPAREN, got EOF instead"]
    assert parse_errors("[1, 2") == ["expected next token to be RBRACKET, got EOF instead"]
    assert parse_errors("add(1, 2") == ["expected next token to be RPAREN, got EOF instead"]
    assert parse_errors('{"a": 1') == ["expected next token to be COMMA, got EOF instead"]
    assert parse_errors("if (x) { 1") == ["expected next token to be RBRACE, got EOF instead"]


def test_error_inside_block_recovers_within_block() -> None:
    program, errors = parse_program(tokenize("fn() { let = 1; 2 }; 3"))
    assert errors == ["expected next token to be IDENT, got ASSIGN instead"]
    assert str(program) == "fn() 23"


@pytest.mark.parametrize(
    "source,error,printed",
    [
        ("fn() { let x = {1: }; 3 }; 4", "no prefix parse function for RBRACE found", "fn() 34"),
        ("fn() { let x = {1: ; 2}; 3 }", "no prefix parse function for SEMICOLON found", "fn() 3"),
        ("let x = {1: ; 2}; let y = 3; y", "no prefix parse function for SEMICOLON found", "let y = 3;y"),
        ("fn() { let x = {1: {2: }}; 5 }; 6", "no prefix parse function for RBRACE found", "fn() 56"),
    ],
)
def test_recovery_skips_braces_opened_by_failed_statement(
    source: str, error: str, printed: str
) -> None:
    program, errors = parse_program(tokenize(source))
    assert errors == [error]
    assert str(program) == printed


def test_unterminated_string_parses_as_string_literal() -> None:
    program, errors = parse_program(tokenize('let s = "abc def'))
    assert errors == []
    assert str(program) == "let s = abc def;"


def test_bad_function_parameters() -> None:
    assert parse_errors("fn(1) {}") == ["expected next token to be IDENT, got INT instead"]


def test_if_requires_parentheses_and_braces() -> None:
    assert parse_errors("if x { 1 }") == ["expected next token to be LPAREN, got IDENT instead"]
    assert parse_errors("if (x) 1") == ["expected next token to be LBRACE, got INT instead"]


def test_parser_without_eof_token() -> None:
    parser = Parser([Token("INT", "5")])
    program = parser.parse_program()
    assert parser.errors == []
    assert program.statements == (ExpressionStatement(IntegerLiteral(5)),)


def test_parse_expression_entry_point() -> None:
    parser = Parser(tokenize("1 + 2 * 3 == 7"))
    assert str(parser.parse_expression(Precedence.LOWEST)) == "((1 + (2 * 3)) == 7)"


def test_parse_expression_respects_min_precedence() -> None:
    parser = Parser(tokenize("1 + 2 * 3"))
    assert str(parser.parse_expression(Precedence.SUM)) == "1"


def test_parse_program_never_raises_on_garbage() -> None:
    _, errors = parse_program(tokenize("} ) ] let let fn ( { [ , : ; if else"))
    assert errors


@given(st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=8))
def test_sums_associate_left(numbers: list[int]) -> None:
    source = " + ".join(str(n) for n in numbers)
    expected = str(numbers[0])
    for n in numbers[1:]:
        expected = f"({expected} + {n})"
    assert str(parse(source)) == expected


@given(
    st.lists(
        st.sampled_from(["a", "b", "c", "1", "2", "(x)", "f(y)", "[z][0]"]),
        min_size=1,
        max_size=6,
    ),
    st.lists(st.sampled_from(["+", "-", "*", "/", "<", ">", "==", "!="]), min_size=5),
)
def test_reparsing_printed_form_is_stable(operands: list[str], ops: list[str]) -> None:
    source = operands[0]
    for operand, op in zip(operands[1:], ops):
        source += f" {op} {operand}"
    printed = str(parse(source))
    assert str(parse(printed)) == printed

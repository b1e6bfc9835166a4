import dataclasses
import json

import pytest

from monkey.monkey_ast import (
    NODE_TYPES,
    BlockStatement,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Program,
    StringLiteral,
)


def test_program_string() -> None:
    program = Program(
        (LetStatement(Identifier("myVar"), Identifier("anotherVar")),)
    )
    assert str(program) == "let myVar = anotherVar;"


def test_equality_ignores_position() -> None:
    assert Identifier("x", line=1, col=1) == Identifier("x", line=3, col=7)
    assert IntegerLiteral(1) != IntegerLiteral(2)
    assert IntegerLiteral(1) != Identifier("1")


def test_nodes_are_immutable() -> None:
    node = Identifier("x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = "y"  # type: ignore[misc]


def test_nodes_are_hashable_by_structure() -> None:
    a = InfixExpression("+", Identifier("a"), IntegerLiteral(1), line=1, col=3)
    b = InfixExpression("+", Identifier("a"), IntegerLiteral(1), line=9, col=9)
    assert len({a, b}) == 1


def test_every_node_kind_is_unique() -> None:
    kinds = [node_type.kind for node_type in NODE_TYPES]
    assert len(kinds) == len(set(kinds))


def test_to_dict_basic() -> None:
    node = LetStatement(Identifier("x", line=1, col=5), IntegerLiteral(5), line=1, col=1)
    d = node.to_dict()
    assert d["kind"] == "let"
    assert d["line"] == 1
    assert d["col"] == 1
    assert d["name"]["kind"] == "identifier"
    assert d["name"]["name"] == "x"
    assert d["value"] == {"kind": "integer", "value": 5, "line": 0, "col": 0}


def test_to_dict_sequences_and_optional_children() -> None:
    fn = FunctionLiteral(
        (Identifier("x"),),
        BlockStatement((ExpressionStatement(Identifier("x")),)),
    )
    d = fn.to_dict()
    assert [p["name"] for p in d["parameters"]] == ["x"]
    assert d["body"]["statements"][0]["kind"] == "expression_statement"

    if_expr = IfExpression(Identifier("c"), BlockStatement(()))
    assert if_expr.to_dict()["alternative"] is None


def test_to_dict_hash_pairs() -> None:
    node = HashLiteral(((StringLiteral("k"), IntegerLiteral(1)),))
    d = node.to_dict()
    assert d["pairs"] == [
        {
            "key": {"kind": "string", "value": "k", "line": 0, "col": 0},
            "value": {"kind": "integer", "value": 1, "line": 0, "col": 0},
        }
    ]


def test_to_dict_is_json_serializable() -> None:
    program = Program(
        (
            ExpressionStatement(
                HashLiteral(((StringLiteral("k"), IntegerLiteral(1)),))
            ),
        )
    )
    assert json.loads(json.dumps(program.to_dict()))["kind"] == "program"

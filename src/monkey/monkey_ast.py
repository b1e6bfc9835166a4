"""
Defines the abstract syntax tree (AST) node structure for the Monkey language.

The AST is a closed set of node variants, each an immutable dataclass:

Statements:
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement

Expressions:
    Identifier, IntegerLiteral, BooleanLiteral, StringLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral

Root:
    Program

Each node tracks:
    kind (str): The variant name used for evaluator dispatch (e.g. "let", "infix").
    line (int): Source line of the node's leading token, for diagnostics.
    col (int): Source column of the node's leading token, for diagnostics.

Nodes compare structurally and ignore `line`/`col`, so a parsed tree can be
checked against a hand-built one. `str(node)` re-prints the node in a fully
parenthesized canonical form, e.g. `1 + 2 * 3` prints as `(1 + (2 * 3))`.
`to_dict()` converts a node and all its descendants into plain dictionaries
for JSON output.

Children are stored in tuples and never reassigned once the node is built,
so one subtree (a function body, say) can be evaluated any number of times.

Example:
    node = InfixExpression("+", IntegerLiteral(1), IntegerLiteral(2))
    str(node)  # "(1 + 2)"
"""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, TypedDict, cast


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of a serialized AST node.

    Only `kind`, `line` and `col` are present on every node; the remaining keys
    depend on the variant.
    """

    kind: str
    line: int
    col: int
    name: Any
    value: Any
    operator: str
    operand: "ASTDict"
    left: "ASTDict"
    right: "ASTDict"
    condition: "ASTDict"
    consequence: "ASTDict"
    alternative: "ASTDict | None"
    parameters: list["ASTDict"]
    body: "ASTDict"
    callee: "ASTDict"
    arguments: list["ASTDict"]
    elements: list["ASTDict"]
    collection: "ASTDict"
    index: "ASTDict"
    pairs: list[dict[str, "ASTDict"]]
    statements: list["ASTDict"]
    expression: "ASTDict"


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        if value and isinstance(value[0], tuple):  # hash pairs
            return [{"key": _serialize(k), "value": _serialize(v)} for k, v in value]
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class Node:
    """Base class for every AST node."""

    kind: ClassVar[str] = "node"

    line: int = field(default=0, compare=False, kw_only=True)
    col: int = field(default=0, compare=False, kw_only=True)

    def to_dict(self) -> ASTDict:
        data: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            data[f.name] = _serialize(getattr(self, f.name))
        return cast(ASTDict, data)


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


# Expressions


@dataclass(frozen=True)
class Identifier(Expression):
    kind: ClassVar[str] = "identifier"

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    kind: ClassVar[str] = "integer"

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    kind: ClassVar[str] = "boolean"

    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class StringLiteral(Expression):
    kind: ClassVar[str] = "string"

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PrefixExpression(Expression):
    kind: ClassVar[str] = "prefix"

    operator: str
    operand: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.operand})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    kind: ClassVar[str] = "infix"

    operator: str
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    kind: ClassVar[str] = "if"

    condition: Expression
    consequence: "BlockStatement"
    alternative: "BlockStatement | None" = None

    def __str__(self) -> str:
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    kind: ClassVar[str] = "function"

    parameters: tuple[Identifier, ...]
    body: "BlockStatement"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    kind: ClassVar[str] = "call"

    callee: Expression
    arguments: tuple[Expression, ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.callee}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    kind: ClassVar[str] = "array"

    elements: tuple[Expression, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Expression):
    kind: ClassVar[str] = "index"

    collection: Expression
    index: Expression

    def __str__(self) -> str:
        return f"({self.collection}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Expression):
    kind: ClassVar[str] = "hash"

    pairs: tuple[tuple[Expression, Expression], ...]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}:{v}" for k, v in self.pairs) + "}"


# Statements


@dataclass(frozen=True)
class LetStatement(Statement):
    kind: ClassVar[str] = "let"

    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    kind: ClassVar[str] = "return"

    value: Expression

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    kind: ClassVar[str] = "expression_statement"

    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    kind: ClassVar[str] = "block"

    statements: tuple[Statement, ...] = ()

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Program(Node):
    kind: ClassVar[str] = "program"

    statements: tuple[Statement, ...] = ()

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


NODE_TYPES: tuple[type[Node], ...] = (
    Program,
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    ArrayLiteral,
    IndexExpression,
    HashLiteral,
)

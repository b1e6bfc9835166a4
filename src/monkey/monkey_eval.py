"""
Tree-walking evaluator for the Monkey language.

This module defines the `Evaluator` class, which interprets a parsed `Program`
directly against a chain of `Environment` scopes and produces runtime
`Object` values. There is no compilation step.

Behavior:
    - Dispatches on `node.kind` to the matching `eval_<kind>` method.
    - Failures are values, not exceptions: an `Error` object is returned and
      every composite construct (operands, call arguments, array and hash
      elements, if conditions, let values) stops at the first one.
    - `return` wraps its value in `ReturnValue`; blocks pass it through
      unchanged so it reaches the nearest function call, which unwraps it.
      The program unwraps a top-level return and stops there.
    - Calls bind arguments in a fresh environment enclosed by the function's
      captured environment, giving lexical closures.
    - Identifiers resolve through the scope chain first, then the builtins.

Integer semantics:
    Values are 64-bit signed. `/` truncates toward zero. A result outside the
    64-bit range and division by zero both produce an `Error`.

Raises:
    - `NotImplementedError`: If a node kind has no `eval_<kind>` method.
    - `RecursionError`: Runaway recursion exhausts the host stack. This is
      fatal for the evaluation and is not turned into an `Error` value.

`call_with_deep_stack()` runs an evaluation on a thread with a large stack and a
raised recursion limit; the REPL and CLI evaluate through it.
"""

from __future__ import annotations

import logging
import operator
import sys
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from monkey.monkey_ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from monkey.monkey_builtins import builtins as default_builtins
from monkey.monkey_constants import (
    DEFAULT_RECURSION_LIMIT,
    EVAL_STACK_SIZE,
    INT_MAX,
    INT_MIN,
)
from monkey.monkey_env import Environment, new_enclosed_environment
from monkey.monkey_object import (
    NULL,
    Array,
    Boolean,
    Builtin,
    Error,
    Function,
    Hash,
    Hashable,
    HashKey,
    HashPair,
    Integer,
    Null,
    Object,
    ReturnValue,
    String,
    native_bool_to_boolean,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


_integer_arithmetic: dict[str, Callable[[int, int], int]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _truncating_div,
}

_integer_comparison: dict[str, Callable[[int, int], bool]] = {
    "<": operator.lt,
    ">": operator.gt,
    "==": operator.eq,
    "!=": operator.ne,
}


def new_error(message: str) -> Error:
    logger.debug("evaluation error: %s", message)
    return Error(message)


def is_truthy(obj: Object) -> bool:
    """`null` and `false` are falsy; everything else, including 0 and "", is truthy."""
    if isinstance(obj, Null):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


def unwrap_return_value(obj: Object) -> Object:
    if isinstance(obj, ReturnValue):
        return obj.value
    return obj


class Evaluator:
    """Evaluates Monkey AST nodes.

    Attributes:
        builtins (dict[str, Builtin]): Native functions consulted after the scope
            chain when resolving identifiers.

    Methods:
        eval(node, env): Dispatches to the appropriate eval_* method for a node.
        apply_function(fn, args): Calls a Function or Builtin with evaluated arguments.
    """

    def __init__(self, builtins: dict[str, Builtin] | None = None) -> None:
        self.builtins = default_builtins if builtins is None else builtins

    def eval(self, node: Node, env: Environment) -> Object:
        method = getattr(self, f"eval_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No evaluator for node kind: {node.kind}")
        return method(node, env)

    # Statements

    def eval_program(self, node: Program, env: Environment) -> Object:
        result: Object = NULL
        for statement in node.statements:
            result = self.eval(statement, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def eval_block(self, node: BlockStatement, env: Environment) -> Object:
        """Evaluate statements in order, passing a ReturnValue or Error straight up."""
        result: Object = NULL
        for statement in node.statements:
            result = self.eval(statement, env)
            if isinstance(result, (ReturnValue, Error)):
                return result
        return result

    def eval_expression_statement(
        self, node: ExpressionStatement, env: Environment
    ) -> Object:
        return self.eval(node.expression, env)

    def eval_let(self, node: LetStatement, env: Environment) -> Object:
        value = self.eval(node.value, env)
        if isinstance(value, Error):
            return value
        return env.set(node.name.name, value)

    def eval_return(self, node: ReturnStatement, env: Environment) -> Object:
        value = self.eval(node.value, env)
        if isinstance(value, Error):
            return value
        return ReturnValue(value)

    # Literals

    def eval_integer(self, node: IntegerLiteral, env: Environment) -> Object:
        return Integer(node.value)

    def eval_boolean(self, node: BooleanLiteral, env: Environment) -> Object:
        return native_bool_to_boolean(node.value)

    def eval_string(self, node: StringLiteral, env: Environment) -> Object:
        return String(node.value)

    def eval_array(self, node: ArrayLiteral, env: Environment) -> Object:
        elements = self.eval_expressions(node.elements, env)
        if isinstance(elements, Error):
            return elements
        return Array(elements)

    def eval_hash(self, node: HashLiteral, env: Environment) -> Object:
        pairs: dict[HashKey, HashPair] = {}
        for key_node, value_node in node.pairs:
            key = self.eval(key_node, env)
            if isinstance(key, Error):
                return key
            if not isinstance(key, Hashable):
                return new_error(f"unusable as hash key: {key.type_name()}")

            value = self.eval(value_node, env)
            if isinstance(value, Error):
                return value

            pairs[key.hash_key()] = HashPair(key, value)
        return Hash(pairs)

    def eval_function(self, node: FunctionLiteral, env: Environment) -> Object:
        return Function(node.parameters, node.body, env)

    # Expressions

    def eval_identifier(self, node: Identifier, env: Environment) -> Object:
        value = env.get(node.name)
        if value is not None:
            return value
        builtin = self.builtins.get(node.name)
        if builtin is not None:
            return builtin
        return new_error(f"identifier not found: {node.name}")

    def eval_prefix(self, node: PrefixExpression, env: Environment) -> Object:
        operand = self.eval(node.operand, env)
        if isinstance(operand, Error):
            return operand
        return self.eval_prefix_operator(node.operator, operand)

    def eval_prefix_operator(self, op: str, operand: Object) -> Object:
        if op == "!":
            return native_bool_to_boolean(not is_truthy(operand))
        if op == "-":
            if not isinstance(operand, Integer):
                return new_error(f"unknown operator: -{operand.type_name()}")
            if -operand.value > INT_MAX:
                return new_error(f"integer overflow: -{operand.value}")
            return Integer(-operand.value)
        return new_error(f"unknown operator: {op}{operand.type_name()}")

    def eval_infix(self, node: InfixExpression, env: Environment) -> Object:
        left = self.eval(node.left, env)
        if isinstance(left, Error):
            return left
        right = self.eval(node.right, env)
        if isinstance(right, Error):
            return right
        return self.eval_infix_operator(node.operator, left, right)

    def eval_infix_operator(self, op: str, left: Object, right: Object) -> Object:
        if left.type_name() != right.type_name():
            return new_error(
                f"type mismatch: {left.type_name()} {op} {right.type_name()}"
            )
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.eval_integer_infix(op, left.value, right.value)
        if isinstance(left, String) and isinstance(right, String):
            return self.eval_string_infix(op, left, right)
        if op == "==":
            return native_bool_to_boolean(left == right)
        if op == "!=":
            return native_bool_to_boolean(left != right)
        return new_error(
            f"unknown operator: {left.type_name()} {op} {right.type_name()}"
        )

    def eval_integer_infix(self, op: str, left: int, right: int) -> Object:
        if op in _integer_comparison:
            return native_bool_to_boolean(_integer_comparison[op](left, right))
        if op not in _integer_arithmetic:
            return new_error(f"unknown operator: INTEGER {op} INTEGER")
        if op == "/" and right == 0:
            return new_error(f"division by zero: {left} / {right}")

        result = _integer_arithmetic[op](left, right)
        if not INT_MIN <= result <= INT_MAX:
            return new_error(f"integer overflow: {left} {op} {right}")
        return Integer(result)

    def eval_string_infix(self, op: str, left: String, right: String) -> Object:
        if op != "+":
            return new_error(
                f"unknown operator: {left.type_name()} {op} {right.type_name()}"
            )
        return String(left.value + right.value)

    def eval_if(self, node: IfExpression, env: Environment) -> Object:
        condition = self.eval(node.condition, env)
        if isinstance(condition, Error):
            return condition
        if is_truthy(condition):
            return self.eval(node.consequence, env)
        if node.alternative is not None:
            return self.eval(node.alternative, env)
        return NULL

    def eval_call(self, node: CallExpression, env: Environment) -> Object:
        fn = self.eval(node.callee, env)
        if isinstance(fn, Error):
            return fn
        args = self.eval_expressions(node.arguments, env)
        if isinstance(args, Error):
            return args
        return self.apply_function(fn, args)

    def eval_expressions(
        self, nodes: tuple[Expression, ...], env: Environment
    ) -> list[Object] | Error:
        """Evaluate left to right, stopping at the first Error."""
        result: list[Object] = []
        for node in nodes:
            evaluated = self.eval(node, env)
            if isinstance(evaluated, Error):
                return evaluated
            result.append(evaluated)
        return result

    def apply_function(self, fn: Object, args: list[Object]) -> Object:
        if isinstance(fn, Function):
            if len(args) != len(fn.parameters):
                return new_error(
                    f"wrong number of arguments. got={len(args)}, want={len(fn.parameters)}"
                )
            logger.debug("calling fn(%s)", ", ".join(p.name for p in fn.parameters))
            call_env = new_enclosed_environment(fn.env)
            for param, arg in zip(fn.parameters, args):
                call_env.set(param.name, arg)
            return unwrap_return_value(self.eval(fn.body, call_env))

        if isinstance(fn, Builtin):
            logger.debug("calling builtin %s", fn.name)
            return fn.fn(args)

        return new_error(f"not a function: {fn.type_name()}")

    def eval_index(self, node: IndexExpression, env: Environment) -> Object:
        collection = self.eval(node.collection, env)
        if isinstance(collection, Error):
            return collection
        index = self.eval(node.index, env)
        if isinstance(index, Error):
            return index
        return self.eval_index_operator(collection, index)

    def eval_index_operator(self, collection: Object, index: Object) -> Object:
        if isinstance(collection, Array) and isinstance(index, Integer):
            if index.value < 0 or index.value >= len(collection.elements):
                return NULL
            return collection.elements[index.value]
        if isinstance(collection, Hash):
            if not isinstance(index, Hashable):
                return new_error(f"unusable as hash key: {index.type_name()}")
            pair = collection.pairs.get(index.hash_key())
            return pair.value if pair is not None else NULL
        return new_error(f"index operator not supported: {collection.type_name()}")


def evaluate(node: Node, env: Environment | None = None) -> Object:
    """Evaluate `node` in `env` (a fresh root environment if omitted)."""
    return Evaluator().eval(node, env if env is not None else Environment())


def call_with_deep_stack(
    fn: Callable[..., T], *args: Any, recursion_limit: int | None = None
) -> T:
    """
    Call `fn(*args)` on a worker thread sized for deep Monkey recursion.

    The host recursion limit is raised to `recursion_limit` (default
    `DEFAULT_RECURSION_LIMIT`) for the duration of the call and the worker gets
    an `EVAL_STACK_SIZE` stack, so bounded recursion a few thousand calls deep
    evaluates normally. Whatever `fn` raises, `RecursionError` included, is
    re-raised in the calling thread.
    """
    limit = recursion_limit or DEFAULT_RECURSION_LIMIT
    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = fn(*args)
        except BaseException as e:
            outcome["error"] = e

    previous_limit = sys.getrecursionlimit()
    previous_size = threading.stack_size(EVAL_STACK_SIZE)
    sys.setrecursionlimit(limit)
    logger.debug("evaluating with recursion limit %d", limit)
    try:
        worker = threading.Thread(target=target, name="monkey-eval", daemon=True)
        worker.start()
        worker.join()
    finally:
        threading.stack_size(previous_size)
        sys.setrecursionlimit(previous_limit)

    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]

"""
Runtime values for the Monkey interpreter.

Every value produced by the evaluator is one of a closed set of variants:

    Integer, Boolean, String, Null, Array, Hash, Function, Builtin, Error,
    ReturnValue

`ReturnValue` is an internal control-flow wrapper. It carries the value of a
`return` statement up through nested blocks and is unwrapped at the nearest
function call (or at the end of the program); it never reaches user code.

`Error` is how evaluation failures travel: the evaluator returns it like any
other value and every composite construct stops as soon as one appears.

Values compare structurally (`Integer(1) == Integer(1)`), except functions and
builtins, which compare by identity. `NULL`, `TRUE` and `FALSE` are shared
immutable constants; constructing a fresh `Boolean(True)` is equally valid.

Integers, booleans and strings are hashable: `hash_key()` reduces them to a
`HashKey(type_name, value)` so two equal strings built separately address the
same hash entry.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from monkey.monkey_constants import (
    ARRAY_OBJ,
    BOOLEAN_OBJ,
    BUILTIN_OBJ,
    ERROR_OBJ,
    FUNCTION_OBJ,
    HASH_OBJ,
    INTEGER_OBJ,
    NULL_OBJ,
    RETURN_VALUE_OBJ,
    STRING_OBJ,
)

if TYPE_CHECKING:
    from monkey.monkey_ast import BlockStatement, Identifier
    from monkey.monkey_env import Environment


@dataclass(frozen=True)
class HashKey:
    """Identity of a hashable value inside a `Hash`: its type name plus its raw value."""

    type_name: str
    value: int | bool | str


class Object:
    """Base class for all runtime values."""

    type: ClassVar[str] = ""

    def type_name(self) -> str:
        return self.type

    def inspect(self) -> str:
        raise NotImplementedError(f"{type(self).__name__} has no inspect()")

    def __str__(self) -> str:
        return self.inspect()


class Hashable(Object):
    """Mixin for values that may be used as hash keys."""

    value: int | bool | str

    def hash_key(self) -> HashKey:
        return HashKey(self.type, self.value)


@dataclass(frozen=True)
class Integer(Hashable):
    type: ClassVar[str] = INTEGER_OBJ

    value: int

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Hashable):
    type: ClassVar[str] = BOOLEAN_OBJ

    value: bool

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(Hashable):
    type: ClassVar[str] = STRING_OBJ

    value: str

    def inspect(self) -> str:
        return self.value


@dataclass(frozen=True)
class Null(Object):
    type: ClassVar[str] = NULL_OBJ

    def inspect(self) -> str:
        return "null"


@dataclass
class Array(Object):
    type: ClassVar[str] = ARRAY_OBJ

    elements: list[Object] = field(default_factory=list)

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(frozen=True)
class HashPair:
    """A hash entry; keeps the original key object so the hash can be printed."""

    key: Object
    value: Object


@dataclass
class Hash(Object):
    type: ClassVar[str] = HASH_OBJ

    pairs: dict[HashKey, HashPair] = field(default_factory=dict)

    def inspect(self) -> str:
        items = ", ".join(
            f"{pair.key.inspect()}: {pair.value.inspect()}" for pair in self.pairs.values()
        )
        return "{" + items + "}"


@dataclass(eq=False)
class Function(Object):
    """A user-defined function closing over the environment it was created in.

    `env` is fixed when the function literal is evaluated and never reassigned.
    """

    type: ClassVar[str] = FUNCTION_OBJ

    parameters: tuple[Identifier, ...]
    body: BlockStatement
    env: Environment = field(repr=False)

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


BuiltinFunction = Callable[[list[Object]], Object]


@dataclass(eq=False)
class Builtin(Object):
    """A native function called with the evaluated argument list."""

    type: ClassVar[str] = BUILTIN_OBJ

    name: str
    fn: BuiltinFunction = field(repr=False)

    def inspect(self) -> str:
        return "builtin function"


@dataclass(frozen=True)
class Error(Object):
    type: ClassVar[str] = ERROR_OBJ

    message: str

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


@dataclass(frozen=True)
class ReturnValue(Object):
    type: ClassVar[str] = RETURN_VALUE_OBJ

    value: Object

    def inspect(self) -> str:
        return self.value.inspect()


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE

"""
Native functions available to every Monkey program.

Each builtin takes the already evaluated argument list and returns a value or
an `Error`; the evaluator calls it exactly once per call expression. Builtins
are looked up only after the whole scope chain fails to resolve a name, so a
`let len = ...` binding shadows the native `len`.

Functions:
    len(x)      Length of a STRING or ARRAY.
    first(a)    First element of an ARRAY, or null when empty.
    last(a)     Last element of an ARRAY, or null when empty.
    rest(a)     New ARRAY without the first element, or null when empty.
    push(a, x)  New ARRAY with `x` appended; `a` is left untouched.
    puts(...)   Print each argument's inspect() form on its own line; returns null.
"""

from monkey.monkey_object import (
    NULL,
    Array,
    Builtin,
    BuiltinFunction,
    Error,
    Integer,
    Object,
    String,
)


def _wrong_arg_count(got: int, want: int) -> Error:
    return Error(f"wrong number of arguments. got={got}, want={want}")


def _builtin_len(args: list[Object]) -> Object:
    if len(args) != 1:
        return _wrong_arg_count(len(args), 1)
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return Error(f"argument to `len` not supported, got {arg.type_name()}")


def _array_argument(name: str, args: list[Object], want: int) -> Array | Error:
    if len(args) != want:
        return _wrong_arg_count(len(args), want)
    if not isinstance(args[0], Array):
        return Error(f"argument to `{name}` must be ARRAY, got {args[0].type_name()}")
    return args[0]


def _builtin_first(args: list[Object]) -> Object:
    arr = _array_argument("first", args, 1)
    if isinstance(arr, Error):
        return arr
    return arr.elements[0] if arr.elements else NULL


def _builtin_last(args: list[Object]) -> Object:
    arr = _array_argument("last", args, 1)
    if isinstance(arr, Error):
        return arr
    return arr.elements[-1] if arr.elements else NULL


def _builtin_rest(args: list[Object]) -> Object:
    arr = _array_argument("rest", args, 1)
    if isinstance(arr, Error):
        return arr
    if not arr.elements:
        return NULL
    return Array(list(arr.elements[1:]))


def _builtin_push(args: list[Object]) -> Object:
    arr = _array_argument("push", args, 2)
    if isinstance(arr, Error):
        return arr
    return Array([*arr.elements, args[1]])


def _builtin_puts(args: list[Object]) -> Object:
    for arg in args:
        print(arg.inspect())
    return NULL


_natives: dict[str, BuiltinFunction] = {
    "len": _builtin_len,
    "first": _builtin_first,
    "last": _builtin_last,
    "rest": _builtin_rest,
    "push": _builtin_push,
    "puts": _builtin_puts,
}

builtins: dict[str, Builtin] = {name: Builtin(name, fn) for name, fn in _natives.items()}


def get_builtin(name: str) -> Builtin | None:
    return builtins.get(name)

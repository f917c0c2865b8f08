"""
Built-in functions available to every Monkey program.

The evaluator consults `BUILTINS` only after a name is missing from the whole
environment chain, so user bindings may shadow a built-in.

Each built-in checks its own arity and argument types and reports misuse as
an ErrorValue rather than raising. None of them mutate their arguments: `rest`
and `push` always return a new Array.
"""

from monkey.monkey_object import (
    ARRAY_OBJ,
    NULL,
    Array,
    Builtin,
    ErrorValue,
    Integer,
    Object,
    String,
    new_error,
)


def _wrong_arity(got: int, want: str = "1") -> ErrorValue:
    return new_error("wrong number of arguments. got=%d, want=%s", got, want)


def _len(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arity(len(args))
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value.encode("utf-8")))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return new_error("argument to `len` not supported, got %s", arg.type())


def _first(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arity(len(args))
    arg = args[0]
    if not isinstance(arg, Array):
        return new_error("argument to `first` must be %s, got %s", ARRAY_OBJ, arg.type())
    return arg.elements[0] if arg.elements else NULL


def _last(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arity(len(args))
    arg = args[0]
    if not isinstance(arg, Array):
        return new_error("argument to `last` must be %s, got %s", ARRAY_OBJ, arg.type())
    return arg.elements[-1] if arg.elements else NULL


def _rest(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arity(len(args))
    arg = args[0]
    if not isinstance(arg, Array):
        return new_error("argument to `rest` must be %s, got %s", ARRAY_OBJ, arg.type())
    if not arg.elements:
        return NULL
    return Array(arg.elements[1:])


def _push(*args: Object) -> Object:
    if not args:
        return _wrong_arity(0, "at least 1")
    arg = args[0]
    if not isinstance(arg, Array):
        return new_error("argument to `push` must be %s, got %s", ARRAY_OBJ, arg.type())
    return Array(arg.elements + list(args[1:]))


BUILTINS: dict[str, Builtin] = {
    "len": Builtin(_len, "len"),
    "first": Builtin(_first, "first"),
    "last": Builtin(_last, "last"),
    "rest": Builtin(_rest, "rest"),
    "push": Builtin(_push, "push"),
}


def lookup_builtin(name: str) -> Builtin | None:
    return BUILTINS.get(name)

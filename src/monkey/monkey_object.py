"""
Runtime values for the Monkey interpreter.

Every value the evaluator produces is an `Object` subclass reporting a type
tag (`type()`) and a display form (`inspect()`):

    Integer, Boolean, String, Null, Array, Hash, Function, Builtin,
    ReturnValue, ErrorValue

`ReturnValue` and `ErrorValue` are control-flow signals: the evaluator wraps a
`return` operand in a ReturnValue and represents runtime failures as
ErrorValues, and both travel up through the recursive evaluation like ordinary
values until something unwraps or reports them.

Integers, booleans and strings can be used as hash keys. Their `hash_key()`
is a `HashKey(type, value)` pair; the type tag keeps keys of different types
apart even when the numeric parts collide.

`TRUE`, `FALSE` and `NULL` are process-wide singletons. The evaluator never
allocates other Boolean or Null instances, so `==` on these values can fall
back to identity.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from monkey.monkey_ast import BlockStatement, Identifier
    from monkey.monkey_environment import Environment

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
STRING_OBJ = "STRING"
NULL_OBJ = "NULL"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"

FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    """64-bit FNV-1a hash of `data`."""
    h = FNV_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV_PRIME) & _MASK64
    return h


class HashKey(NamedTuple):
    type: str
    value: int


class Object:
    """Base class of all runtime values."""

    def type(self) -> str:  # pragma: no cover
        raise NotImplementedError

    def inspect(self) -> str:  # pragma: no cover
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.inspect()!r})"


class Integer(Object):
    def __init__(self, value: int) -> None:
        self.value = value

    def type(self) -> str:
        return INTEGER_OBJ

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER_OBJ, self.value)


class Boolean(Object):
    def __init__(self, value: bool) -> None:
        self.value = value

    def type(self) -> str:
        return BOOLEAN_OBJ

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN_OBJ, 1 if self.value else 0)


class String(Object):
    def __init__(self, value: str) -> None:
        self.value = value

    def type(self) -> str:
        return STRING_OBJ

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING_OBJ, fnv1a_64(self.value.encode("utf-8")))


class Null(Object):
    def type(self) -> str:
        return NULL_OBJ

    def inspect(self) -> str:
        return "null"


class Array(Object):
    def __init__(self, elements: list[Object]) -> None:
        self.elements = elements

    def type(self) -> str:
        return ARRAY_OBJ

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


class HashPair(NamedTuple):
    key: Object
    value: Object


class Hash(Object):
    def __init__(self, pairs: dict[HashKey, HashPair]) -> None:
        self.pairs = pairs

    def type(self) -> str:
        return HASH_OBJ

    def inspect(self) -> str:
        items = (f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values())
        return "{" + ", ".join(items) + "}"


class Function(Object):
    """A user-defined function closed over the environment it was created in."""

    def __init__(
        self, parameters: list[Identifier], body: BlockStatement, env: Environment
    ) -> None:
        self.parameters = parameters
        self.body = body
        self.env = env

    def type(self) -> str:
        return FUNCTION_OBJ

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


BuiltinFunction = Callable[..., Object]


class Builtin(Object):
    def __init__(self, fn: BuiltinFunction, name: str = "") -> None:
        self.fn = fn
        self.name = name

    def type(self) -> str:
        return BUILTIN_OBJ

    def inspect(self) -> str:
        return f"builtin function {self.name}".rstrip()


class ReturnValue(Object):
    def __init__(self, value: Object) -> None:
        self.value = value

    def type(self) -> str:
        return RETURN_VALUE_OBJ

    def inspect(self) -> str:
        return self.value.inspect()


class ErrorValue(Object):
    def __init__(self, message: str) -> None:
        self.message = message

    def type(self) -> str:
        return ERROR_OBJ

    def inspect(self) -> str:
        return f"[error]: {self.message}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def is_hashable(obj: Object) -> bool:
    return isinstance(obj, (Integer, Boolean, String))


def is_error(obj: Object | None) -> bool:
    return isinstance(obj, ErrorValue)


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


def new_error(fmt: str, *args: object) -> ErrorValue:
    return ErrorValue(fmt % args if args else fmt)


__all__ = [
    "ARRAY_OBJ",
    "Array",
    "BOOLEAN_OBJ",
    "BUILTIN_OBJ",
    "Boolean",
    "Builtin",
    "ERROR_OBJ",
    "ErrorValue",
    "FALSE",
    "FUNCTION_OBJ",
    "Function",
    "HASH_OBJ",
    "Hash",
    "HashKey",
    "HashPair",
    "INTEGER_OBJ",
    "Integer",
    "NULL",
    "NULL_OBJ",
    "Null",
    "Object",
    "RETURN_VALUE_OBJ",
    "ReturnValue",
    "STRING_OBJ",
    "String",
    "TRUE",
    "fnv1a_64",
    "is_error",
    "is_hashable",
    "native_bool_to_boolean",
    "new_error",
]

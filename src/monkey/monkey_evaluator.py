"""
Tree-walking evaluator for the Monkey language.

`evaluate(node, env)` computes the value of an AST node in an environment. It
keeps no state of its own beyond the environment it is handed, and it never
raises for problems in the evaluated program: runtime failures are returned as
`ErrorValue` objects, and every composite rule checks its sub-results and
stops at the first error. Early `return` works the same way through
`ReturnValue`, which a function call unwraps exactly once and a Program
unwraps at top level.

Arithmetic follows signed 64-bit integer semantics: results wrap on overflow
and division truncates toward zero. Division by zero is a runtime error.

Raises:
    NotImplementedError: If handed a node type with no evaluation rule. That
        is a bug in the caller, not an error in the Monkey program.
"""

from collections.abc import Callable

from monkey.monkey_ast import (
    ArrayLiteral,
    ASTNode,
    BlockStatement,
    Boolean,
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
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    WhileExpression,
)
from monkey.monkey_builtins import lookup_builtin
from monkey.monkey_constants import INT64_MIN
from monkey.monkey_environment import Environment
from monkey.monkey_object import (
    FALSE,
    NULL,
    TRUE,
    Array,
    Builtin,
    ErrorValue,
    Function,
    Hash,
    HashKey,
    HashPair,
    Integer,
    Object,
    ReturnValue,
    String,
    is_error,
    is_hashable,
    native_bool_to_boolean,
    new_error,
)


def _wrap_int64(value: int) -> int:
    return ((value - INT64_MIN) % 2**64) + INT64_MIN


def is_truthy(obj: Object) -> bool:
    """NULL and FALSE are falsy, integers are truthy only when positive, the rest is truthy."""
    if obj is NULL or obj is FALSE:
        return False
    if obj is TRUE:
        return True
    if isinstance(obj, Integer):
        return obj.value > 0
    return True


def evaluate(node: ASTNode, env: Environment) -> Object | None:
    """Evaluates `node` in `env`.

    Returns None only for statements that produce no value (a `let`, or a
    program whose last statement is a `let`).
    """
    handler = _EVALUATORS.get(node.kind)
    if handler is None:
        raise NotImplementedError(
            f"No evaluation rule for node kind '{node.kind}' "
            f"(line {node.line}, col {node.col})"
        )
    return handler(node, env)


def _eval_expression(node: Expression, env: Environment) -> Object:
    result = evaluate(node, env)
    return NULL if result is None else result


# Statements


def _eval_program(node: Program, env: Environment) -> Object | None:
    result: Object | None = None
    for stmt in node.statements:
        result = evaluate(stmt, env)
        if isinstance(result, ReturnValue):
            return result.value
        if isinstance(result, ErrorValue):
            return result
    return result


def _eval_block(node: BlockStatement, env: Environment) -> Object:
    result: Object | None = None
    for stmt in node.statements:
        result = evaluate(stmt, env)
        if isinstance(result, (ReturnValue, ErrorValue)):
            return result
    return NULL if result is None else result


def _eval_expression_statement(node: ExpressionStatement, env: Environment) -> Object:
    return _eval_expression(node.expression, env)


def _eval_let(node: LetStatement, env: Environment) -> Object | None:
    value = _eval_expression(node.value, env)
    if is_error(value):
        return value
    env.set(node.name.value, value)
    return None


def _eval_return(node: ReturnStatement, env: Environment) -> Object:
    value = _eval_expression(node.return_value, env)
    if is_error(value):
        return value
    return ReturnValue(value)


# Literals


def _eval_integer(node: IntegerLiteral, env: Environment) -> Object:
    return Integer(node.value)


def _eval_string(node: StringLiteral, env: Environment) -> Object:
    return String(node.value)


def _eval_boolean(node: Boolean, env: Environment) -> Object:
    return native_bool_to_boolean(node.value)


def _eval_function(node: FunctionLiteral, env: Environment) -> Object:
    return Function(node.parameters, node.body, env)


def _eval_expressions(
    nodes: list[Expression], env: Environment
) -> list[Object] | ErrorValue:
    """Evaluates `nodes` left to right, stopping at the first error."""
    result: list[Object] = []
    for expr in nodes:
        value = _eval_expression(expr, env)
        if isinstance(value, ErrorValue):
            return value
        result.append(value)
    return result


def _eval_array(node: ArrayLiteral, env: Environment) -> Object:
    elements = _eval_expressions(node.elements, env)
    if isinstance(elements, ErrorValue):
        return elements
    return Array(elements)


def _eval_hash(node: HashLiteral, env: Environment) -> Object:
    pairs: dict[HashKey, HashPair] = {}
    for key_node, value_node in node.pairs:
        key = _eval_expression(key_node, env)
        if is_error(key):
            return key
        if not is_hashable(key):
            return new_error("unusable as hash key: %s", key.type())
        value = _eval_expression(value_node, env)
        if is_error(value):
            return value
        pairs[key.hash_key()] = HashPair(key, value)  # type: ignore[attr-defined]
    return Hash(pairs)


# Names


def _eval_identifier(node: Identifier, env: Environment) -> Object:
    value = env.get(node.value)
    if value is not None:
        return value
    builtin = lookup_builtin(node.value)
    if builtin is not None:
        return builtin
    return new_error("identifier not found: %s", node.value)


# Operators


def _eval_prefix(node: PrefixExpression, env: Environment) -> Object:
    right = _eval_expression(node.right, env)
    if is_error(right):
        return right
    return eval_prefix_expression(node.operator, right)


def eval_prefix_expression(operator: str, right: Object) -> Object:
    if operator == "!":
        return _eval_bang_operator(right)
    if operator == "-":
        if not isinstance(right, Integer):
            return new_error("unknown operator: -%s", right.type())
        return Integer(_wrap_int64(-right.value))
    return new_error("unknown operator: %s%s", operator, right.type())


def _eval_bang_operator(right: Object) -> Object:
    if right is TRUE:
        return FALSE
    if right is FALSE or right is NULL:
        return TRUE
    if isinstance(right, Integer):
        return FALSE if right.value > 0 else TRUE
    return FALSE


def _eval_infix(node: InfixExpression, env: Environment) -> Object:
    left = _eval_expression(node.left, env)
    if is_error(left):
        return left
    right = _eval_expression(node.right, env)
    if is_error(right):
        return right
    return eval_infix_expression(node.operator, left, right)


def eval_infix_expression(operator: str, left: Object, right: Object) -> Object:
    if isinstance(left, Integer) and isinstance(right, Integer):
        return _eval_integer_infix(operator, left, right)
    if isinstance(left, String) and isinstance(right, String):
        return _eval_string_infix(operator, left, right)
    # Anything else compares by identity; TRUE/FALSE/NULL are singletons.
    if operator == "==":
        return native_bool_to_boolean(left is right)
    if operator == "!=":
        return native_bool_to_boolean(left is not right)
    if left.type() != right.type():
        return new_error(
            "type mismatch: %s %s %s", left.type(), operator, right.type()
        )
    return new_error("unknown operator: %s %s %s", left.type(), operator, right.type())


def _eval_integer_infix(operator: str, left: Integer, right: Integer) -> Object:
    lval, rval = left.value, right.value
    if operator == "+":
        return Integer(_wrap_int64(lval + rval))
    if operator == "-":
        return Integer(_wrap_int64(lval - rval))
    if operator == "*":
        return Integer(_wrap_int64(lval * rval))
    if operator == "/":
        if rval == 0:
            return new_error("division by zero: %s / %s", left.type(), right.type())
        quotient = abs(lval) // abs(rval)
        if (lval < 0) != (rval < 0):
            quotient = -quotient
        return Integer(_wrap_int64(quotient))
    if operator == "<":
        return native_bool_to_boolean(lval < rval)
    if operator == ">":
        return native_bool_to_boolean(lval > rval)
    if operator == "==":
        return native_bool_to_boolean(lval == rval)
    if operator == "!=":
        return native_bool_to_boolean(lval != rval)
    return new_error("unknown operator: %s %s %s", left.type(), operator, right.type())


def _eval_string_infix(operator: str, left: String, right: String) -> Object:
    if operator == "+":
        return String(left.value + right.value)
    if operator == "==":
        return native_bool_to_boolean(left.value == right.value)
    if operator == "!=":
        return native_bool_to_boolean(left.value != right.value)
    return new_error("unknown operator: %s %s %s", left.type(), operator, right.type())


# Control flow


def _eval_if(node: IfExpression, env: Environment) -> Object:
    condition = _eval_expression(node.condition, env)
    if is_error(condition):
        return condition
    if is_truthy(condition):
        return _eval_block(node.consequence, env)
    if node.alternative is not None:
        return _eval_block(node.alternative, env)
    return NULL


def _eval_while(node: WhileExpression, env: Environment) -> Object:
    while True:
        condition = _eval_expression(node.condition, env)
        if is_error(condition):
            return condition
        if not is_truthy(condition):
            return NULL
        result = _eval_block(node.body, env)
        if isinstance(result, (ReturnValue, ErrorValue)):
            return result


# Calls and indexing


def _eval_call(node: CallExpression, env: Environment) -> Object:
    function = _eval_expression(node.function, env)
    if is_error(function):
        return function
    args = _eval_expressions(node.arguments, env)
    if isinstance(args, ErrorValue):
        return args
    return apply_function(function, args)


def apply_function(fn: Object, args: list[Object]) -> Object:
    """Calls a Function or Builtin with already-evaluated arguments."""
    if isinstance(fn, Function):
        if len(args) != len(fn.parameters):
            return new_error(
                "wrong number of arguments: want=%d, got=%d",
                len(fn.parameters),
                len(args),
            )
        extended_env = Environment.new_enclosed(fn.env)
        for param, arg in zip(fn.parameters, args):
            extended_env.set(param.value, arg)
        evaluated = _eval_block(fn.body, extended_env)
        return unwrap_return_value(evaluated)
    if isinstance(fn, Builtin):
        return fn.fn(*args)
    return new_error("not a function: %s", fn.type())


def unwrap_return_value(obj: Object) -> Object:
    if isinstance(obj, ReturnValue):
        return obj.value
    return obj


def _eval_index(node: IndexExpression, env: Environment) -> Object:
    left = _eval_expression(node.left, env)
    if is_error(left):
        return left
    index = _eval_expression(node.index, env)
    if is_error(index):
        return index
    return eval_index_expression(left, index)


def eval_index_expression(left: Object, index: Object) -> Object:
    if isinstance(left, Array) and isinstance(index, Integer):
        if index.value < 0 or index.value >= len(left.elements):
            return NULL
        return left.elements[index.value]
    if isinstance(left, Hash):
        if not is_hashable(index):
            return new_error("unusable as hash key: %s", index.type())
        pair = left.pairs.get(index.hash_key())  # type: ignore[attr-defined]
        return NULL if pair is None else pair.value
    return new_error("index operator not supported: %s", left.type())


_EVALUATORS: dict[str, Callable[..., Object | None]] = {
    "program": _eval_program,
    "block": _eval_block,
    "expr_stmt": _eval_expression_statement,
    "let": _eval_let,
    "return": _eval_return,
    "integer": _eval_integer,
    "string": _eval_string,
    "boolean": _eval_boolean,
    "function": _eval_function,
    "array": _eval_array,
    "hash": _eval_hash,
    "identifier": _eval_identifier,
    "prefix": _eval_prefix,
    "infix": _eval_infix,
    "if": _eval_if,
    "while": _eval_while,
    "call": _eval_call,
    "index": _eval_index,
}


__all__ = [
    "apply_function",
    "eval_index_expression",
    "eval_infix_expression",
    "eval_prefix_expression",
    "evaluate",
    "is_truthy",
    "unwrap_return_value",
]

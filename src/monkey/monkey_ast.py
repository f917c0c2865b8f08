"""
Defines the abstract syntax tree (AST) node structure for the Monkey programming language.

Classes:
    ASTNode:
        Base of every node. Carries the token that introduced the node (for
        diagnostics) and provides structural equality, a debugging `repr`, and
        `to_dict()` for JSON output.

    Statement / Expression:
        The two capability sets. Every concrete node derives from exactly one.

    Program, LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Identifier, IntegerLiteral, StringLiteral, Boolean, PrefixExpression,
    InfixExpression, IfExpression, WhileExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral:
        The closed set of node variants produced by the parser.

    ASTDict:
        TypedDict shape of a serialized node.

Rendering:
    `str(node)` is the canonical, precedence-explicit form of a node: every
    prefix and infix expression is wrapped in parentheses, so
    `-a * b` renders as `((-a) * b)`. Expression renderings are valid Monkey
    source and re-parse to an identical rendering.

Example:
    node = InfixExpression(tok, "+", IntegerLiteral(one, 1), IntegerLiteral(two, 2))
    str(node)  # "(1 + 2)"
"""

from typing import Any, TypedDict

from monkey.monkey_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "let", "call", "if").
        token (str): Literal text of the node's introducing token.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.

    Every other key is one of the node's own fields (see `ASTNode._fields`),
    serialized recursively.
    """

    kind: str
    token: str
    line: int
    col: int


def _serialize(value: Any) -> Any:
    if isinstance(value, ASTNode):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


def _terminated(stmt: "Statement") -> str:
    text = str(stmt)
    return text if text.endswith(";") else text + ";"


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the Monkey language.

    Subclasses declare `kind` (a short tag such as "let" or "infix") and
    `_fields`, the names of the attributes that make up the node. Equality,
    `repr` and `to_dict` are all driven by `_fields`.

    Attributes:
        token (Token): The token that introduced this node.
        line (int): Source line number, taken from the token.
        col (int): Source column number, taken from the token.
    """

    kind = "node"
    _fields: tuple[str, ...] = ()

    def __init__(self, token: Token) -> None:
        self.token = token

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def col(self) -> int:
        return self.token.col

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:  # pragma: no cover
        raise NotImplementedError(f"{type(self).__name__} has no rendering")

    def __repr__(self) -> str:
        parts = [self.kind]
        for name in self._fields:
            value = getattr(self, name)
            if isinstance(value, list):
                preview = ", ".join(repr(c) for c in value[:3])
                if len(value) > 3:
                    preview += ", ..."
                parts.append(f"{name}=[{preview}]")
            else:
                parts.append(f"{name}={value!r}")
        return f"{type(self).__name__}({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode) or type(self) is not type(other):
            return False
        return (
            self.line == other.line
            and self.col == other.col
            and all(getattr(self, f) == getattr(other, f) for f in self._fields)
        )

    def to_dict(self) -> ASTDict:
        d: dict[str, Any] = {
            "kind": self.kind,
            "token": self.token.value,
            "line": self.line,
            "col": self.col,
        }
        for name in self._fields:
            d[name] = _serialize(getattr(self, name))
        return d  # type: ignore[return-value]


class Statement(ASTNode):
    """A node that appears in statement position."""


class Expression(ASTNode):
    """A node that produces a value."""


class Program(ASTNode):
    """Root node: the ordered top-level statements of a source unit."""

    kind = "program"
    _fields = ("statements",)

    def __init__(self, statements: list[Statement] | None = None) -> None:
        first = statements[0].token if statements else Token("EOF", "")
        super().__init__(first)
        self.statements: list[Statement] = statements or []

    def token_literal(self) -> str:
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


class Identifier(Expression):
    kind = "identifier"
    _fields = ("value",)

    def __init__(self, token: Token, value: str) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        return self.value


class LetStatement(Statement):
    kind = "let"
    _fields = ("name", "value")

    def __init__(self, token: Token, name: Identifier, value: Expression) -> None:
        super().__init__(token)
        self.name = name
        self.value = value

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {self.value};"


class ReturnStatement(Statement):
    kind = "return"
    _fields = ("return_value",)

    def __init__(self, token: Token, return_value: Expression) -> None:
        super().__init__(token)
        self.return_value = return_value

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.return_value};"


class ExpressionStatement(Statement):
    """An expression used as a statement; its token is the expression's first token."""

    kind = "expr_stmt"
    _fields = ("expression",)

    def __init__(self, token: Token, expression: Expression) -> None:
        super().__init__(token)
        self.expression = expression

    def __str__(self) -> str:
        return str(self.expression)


class BlockStatement(Statement):
    """A `{ ... }` sequence of statements (function, if and while bodies)."""

    kind = "block"
    _fields = ("statements",)

    def __init__(self, token: Token, statements: list[Statement] | None = None) -> None:
        super().__init__(token)
        self.statements: list[Statement] = statements or []

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(_terminated(s) for s in self.statements) + " }"


class IntegerLiteral(Expression):
    kind = "integer"
    _fields = ("value",)

    def __init__(self, token: Token, value: int) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        return str(self.value)


class StringLiteral(Expression):
    kind = "string"
    _fields = ("value",)

    def __init__(self, token: Token, value: str) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        escaped = self.value.replace("\n", "\\n").replace("\t", "\\t")
        return f'"{escaped}"'


class Boolean(Expression):
    kind = "boolean"
    _fields = ("value",)

    def __init__(self, token: Token, value: bool) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        return self.token_literal()


class PrefixExpression(Expression):
    kind = "prefix"
    _fields = ("operator", "right")

    def __init__(self, token: Token, operator: str, right: Expression) -> None:
        super().__init__(token)
        self.operator = operator
        self.right = right

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


class InfixExpression(Expression):
    kind = "infix"
    _fields = ("left", "operator", "right")

    def __init__(
        self, token: Token, operator: str, left: Expression, right: Expression
    ) -> None:
        super().__init__(token)
        self.operator = operator
        self.left = left
        self.right = right

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


class IfExpression(Expression):
    kind = "if"
    _fields = ("condition", "consequence", "alternative")

    def __init__(
        self,
        token: Token,
        condition: Expression,
        consequence: BlockStatement,
        alternative: BlockStatement | None = None,
    ) -> None:
        super().__init__(token)
        self.condition = condition
        self.consequence = consequence
        self.alternative = alternative

    def __str__(self) -> str:
        out = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out


class WhileExpression(Expression):
    kind = "while"
    _fields = ("condition", "body")

    def __init__(
        self, token: Token, condition: Expression, body: BlockStatement
    ) -> None:
        super().__init__(token)
        self.condition = condition
        self.body = body

    def __str__(self) -> str:
        return f"while ({self.condition}) {self.body}"


class FunctionLiteral(Expression):
    kind = "function"
    _fields = ("parameters", "body")

    def __init__(
        self, token: Token, parameters: list[Identifier], body: BlockStatement
    ) -> None:
        super().__init__(token)
        self.parameters = parameters
        self.body = body

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


class CallExpression(Expression):
    kind = "call"
    _fields = ("function", "arguments")

    def __init__(
        self, token: Token, function: Expression, arguments: list[Expression]
    ) -> None:
        super().__init__(token)
        self.function = function
        self.arguments = arguments

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


class ArrayLiteral(Expression):
    kind = "array"
    _fields = ("elements",)

    def __init__(self, token: Token, elements: list[Expression]) -> None:
        super().__init__(token)
        self.elements = elements

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


class IndexExpression(Expression):
    kind = "index"
    _fields = ("left", "index")

    def __init__(self, token: Token, left: Expression, index: Expression) -> None:
        super().__init__(token)
        self.left = left
        self.index = index

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


class HashLiteral(Expression):
    """`{key: value, ...}`; pairs keep source order, duplicates are resolved at evaluation."""

    kind = "hash"
    _fields = ("pairs",)

    def __init__(
        self, token: Token, pairs: list[tuple[Expression, Expression]]
    ) -> None:
        super().__init__(token)
        self.pairs = pairs

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


__all__ = [
    "ASTDict",
    "ASTNode",
    "ArrayLiteral",
    "Boolean",
    "BlockStatement",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "HashLiteral",
    "Identifier",
    "IfExpression",
    "IndexExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
    "StringLiteral",
    "WhileExpression",
]

"""
Monkey Language Parser

Parses a Monkey token stream into an abstract syntax tree rooted at `Program`.

Statements are parsed by recursive descent with a fixed dispatch on the
leading token (`let`, `return`, or an expression statement). Expressions are
parsed with operator precedence (Pratt) parsing: every token type may have a
prefix rule and an infix rule, and infix rules keep folding into the left-hand
side while the next token binds tighter than the caller's minimum precedence.

Supported Constructs
--------------------
- Statements: `let x = expr;`, `return expr;`, `expr;` (the `;` is optional)
- Prefix operators `!` and `-`; infix `+ - * / < > == !=`
- Grouping `( expr )`, arrays `[a, b]`, hashes `{k: v}`, index `a[i]`
- Function literals `fn(a, b) { ... }` and calls `f(x, y)`
- `if (cond) { ... } else { ... }` and `while (cond) { ... }`

Parser Behavior
---------------
- Never raises on malformed input. Each syntax error is appended to
  `Parser.errors` and the parser moves on to the next statement, so a single
  pass reports as many problems as possible.
- A program with a non-empty error list is partial and must not be evaluated;
  enforcing that is the caller's job.

Entry Points
------------
- `Parser(lexer).parse_program()`: parse a full program.
- `parse(source)`: convenience wrapper returning `(program, errors)`.
"""

from __future__ import annotations

from collections.abc import Callable

from monkey.monkey_ast import (
    ArrayLiteral,
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
    Statement,
    StringLiteral,
    WhileExpression,
)
from monkey.monkey_constants import (
    ASSIGN,
    ASTERISK,
    BANG,
    COLON,
    COMMA,
    ELSE,
    EOF,
    EQ,
    FALSE,
    FUNCTION,
    GT,
    IDENT,
    IF,
    INT,
    INT64_MAX,
    LBRACE,
    LBRACKET,
    LET,
    LOWEST,
    LPAREN,
    LT,
    MINUS,
    NOT_EQ,
    PLUS,
    PREFIX,
    RBRACE,
    RBRACKET,
    RETURN,
    RPAREN,
    SEMICOLON,
    SLASH,
    STRING,
    TRUE,
    WHILE,
    precedences,
)
from monkey.monkey_lexer import CharacterStream, Lexer, Token

PrefixParseFn = Callable[[], Expression | None]
InfixParseFn = Callable[[Expression], Expression | None]


class Parser:
    """
    Monkey Parser Class

    Pulls tokens from a `Lexer` with one token of lookahead and builds a
    `Program`. The two-token window is `cur_token` (being parsed) and
    `peek_token` (next up).

    Attributes
    ----------
    lexer : Lexer
        Token source.
    cur_token : Token
        Token under examination.
    peek_token : Token
        The token after `cur_token`.
    errors : list[str]
        Accumulated human-readable syntax errors, in source order.
    prefix_parse_fns : dict[str, PrefixParseFn]
        Prefix rule per token type.
    infix_parse_fns : dict[str, InfixParseFn]
        Infix rule per token type.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.errors: list[str] = []

        self.prefix_parse_fns: dict[str, PrefixParseFn] = {
            IDENT: self.parse_identifier,
            INT: self.parse_integer_literal,
            STRING: self.parse_string_literal,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
            TRUE: self.parse_boolean,
            FALSE: self.parse_boolean,
            LPAREN: self.parse_grouped_expression,
            LBRACKET: self.parse_array_literal,
            LBRACE: self.parse_hash_literal,
            IF: self.parse_if_expression,
            WHILE: self.parse_while_expression,
            FUNCTION: self.parse_function_literal,
        }

        self.infix_parse_fns: dict[str, InfixParseFn] = {
            op: self.parse_infix_expression
            for op in (PLUS, MINUS, ASTERISK, SLASH, EQ, NOT_EQ, LT, GT)
        }
        self.infix_parse_fns[LPAREN] = self.parse_call_expression
        self.infix_parse_fns[LBRACKET] = self.parse_index_expression

        # Read two tokens, so cur_token and peek_token are both set
        self.cur_token: Token = self.lexer.next_token()
        self.peek_token: Token = self.lexer.next_token()

    # Token window

    def advance(self) -> Token:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()
        return self.cur_token

    def cur_token_is(self, type_: str) -> bool:
        return self.cur_token.type == type_

    def peek_token_is(self, type_: str) -> bool:
        return self.peek_token.type == type_

    def expect_peek(self, type_: str) -> bool:
        """Advances if the next token has `type_`; otherwise records an error."""
        if self.peek_token_is(type_):
            self.advance()
            return True
        self.peek_error(type_)
        return False

    def peek_precedence(self) -> int:
        return precedences.get(self.peek_token.type, LOWEST)

    def cur_precedence(self) -> int:
        return precedences.get(self.cur_token.type, LOWEST)

    # Diagnostics

    def peek_error(self, type_: str) -> None:
        self.errors.append(
            f"expected next token to be {type_}, got {self.peek_token.type} instead"
        )

    def no_prefix_parse_fn_error(self, type_: str) -> None:
        self.errors.append(f"no prefix parse function for {type_} found")

    # Statements

    def parse_program(self) -> Program:
        """Parse a full Monkey program. Failed statements are dropped, not kept as holes."""
        statements: list[Statement] = []
        while not self.cur_token_is(EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()
        return Program(statements)

    def parse_statement(self) -> Statement | None:
        if self.cur_token.type == LET:
            return self.parse_let_statement()
        if self.cur_token.type == RETURN:
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement | None:
        tok = self.cur_token
        if not self.expect_peek(IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.value)
        if not self.expect_peek(ASSIGN):
            return None
        self.advance()

        value = self.parse_expression(LOWEST)
        if self.peek_token_is(SEMICOLON):
            self.advance()
        if value is None:
            return None
        return LetStatement(tok, name, value)

    def parse_return_statement(self) -> ReturnStatement | None:
        tok = self.cur_token
        self.advance()

        value = self.parse_expression(LOWEST)
        if self.peek_token_is(SEMICOLON):
            self.advance()
        if value is None:
            return None
        return ReturnStatement(tok, value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        tok = self.cur_token
        expression = self.parse_expression(LOWEST)
        if self.peek_token_is(SEMICOLON):
            self.advance()
        if expression is None:
            return None
        return ExpressionStatement(tok, expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse statements until the matching `}` (or EOF); `cur_token` is the `{`."""
        block = BlockStatement(self.cur_token)
        self.advance()

        while not self.cur_token_is(RBRACE) and not self.cur_token_is(EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.advance()

        if self.cur_token_is(EOF):
            self.errors.append(f"expected next token to be {RBRACE}, got {EOF} instead")
        return block

    # Expressions

    def parse_expression(self, precedence: int) -> Expression | None:
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.type)
            return None

        left = prefix()
        while (
            left is not None
            and not self.peek_token_is(SEMICOLON)
            and precedence < self.peek_precedence()
        ):
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self.advance()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.value)

    def parse_integer_literal(self) -> Expression | None:
        literal = self.cur_token.value
        # INT64_MAX has 19 digits; longer literals never fit and are not converted
        digits = literal.lstrip("0") or "0"
        if len(digits) > 19 or int(digits) > INT64_MAX:
            self.errors.append(f'could not parse "{literal}" as integer')
            return None
        return IntegerLiteral(self.cur_token, int(digits))

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.value)

    def parse_boolean(self) -> Expression:
        return Boolean(self.cur_token, self.cur_token_is(TRUE))

    def parse_prefix_expression(self) -> Expression | None:
        tok = self.cur_token
        self.advance()
        right = self.parse_expression(PREFIX)
        if right is None:
            return None
        return PrefixExpression(tok, tok.value, right)

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        tok = self.cur_token
        precedence = self.cur_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(tok, tok.value, left, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.advance()
        expression = self.parse_expression(LOWEST)
        if not self.expect_peek(RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Expression | None:
        tok = self.cur_token
        if not self.expect_peek(LPAREN):
            return None
        self.advance()
        condition = self.parse_expression(LOWEST)
        if not self.expect_peek(RPAREN):
            return None
        if not self.expect_peek(LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(ELSE):
            self.advance()
            if not self.expect_peek(LBRACE):
                return None
            alternative = self.parse_block_statement()

        if condition is None:
            return None
        return IfExpression(tok, condition, consequence, alternative)

    def parse_while_expression(self) -> Expression | None:
        tok = self.cur_token
        if not self.expect_peek(LPAREN):
            return None
        self.advance()
        condition = self.parse_expression(LOWEST)
        if not self.expect_peek(RPAREN):
            return None
        if not self.expect_peek(LBRACE):
            return None
        body = self.parse_block_statement()

        if condition is None:
            return None
        return WhileExpression(tok, condition, body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        identifiers: list[Identifier] = []

        # fn() { ... }
        if self.peek_token_is(RPAREN):
            self.advance()
            return identifiers

        if not self.expect_peek(IDENT):
            return None
        identifiers.append(Identifier(self.cur_token, self.cur_token.value))

        while self.peek_token_is(COMMA):
            self.advance()
            if not self.expect_peek(IDENT):
                return None
            identifiers.append(Identifier(self.cur_token, self.cur_token.value))

        if not self.expect_peek(RPAREN):
            return None
        return identifiers

    def parse_function_literal(self) -> Expression | None:
        tok = self.cur_token
        if not self.expect_peek(LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(LBRACE):
            return None
        body = self.parse_block_statement()
        return FunctionLiteral(tok, parameters, body)

    def parse_expression_list(self, end: str) -> list[Expression] | None:
        """Parse `e, e, ...` up to the closing `end` token."""
        items: list[Expression] = []

        # [] or ()
        if self.peek_token_is(end):
            self.advance()
            return items

        self.advance()
        item = self.parse_expression(LOWEST)
        if item is None:
            return None
        items.append(item)

        while self.peek_token_is(COMMA):
            self.advance()
            self.advance()
            item = self.parse_expression(LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None
        return items

    def parse_array_literal(self) -> Expression | None:
        tok = self.cur_token
        elements = self.parse_expression_list(RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(tok, elements)

    def parse_call_expression(self, function: Expression) -> Expression | None:
        tok = self.cur_token
        arguments = self.parse_expression_list(RPAREN)
        if arguments is None:
            return None
        return CallExpression(tok, function, arguments)

    def parse_index_expression(self, left: Expression) -> Expression | None:
        tok = self.cur_token
        self.advance()
        index = self.parse_expression(LOWEST)
        if not self.expect_peek(RBRACKET):
            return None
        if index is None:
            return None
        return IndexExpression(tok, left, index)

    def parse_hash_literal(self) -> Expression | None:
        tok = self.cur_token
        pairs: list[tuple[Expression, Expression]] = []

        while not self.peek_token_is(RBRACE):
            self.advance()
            key = self.parse_expression(LOWEST)
            if not self.expect_peek(COLON):
                return None
            self.advance()
            value = self.parse_expression(LOWEST)
            if key is None or value is None:
                return None
            pairs.append((key, value))
            if not self.peek_token_is(RBRACE) and not self.expect_peek(COMMA):
                return None

        if not self.expect_peek(RBRACE):  # pragma: no cover
            return None
        return HashLiteral(tok, pairs)


def parse(source: str | bytes) -> tuple[Program, list[str]]:
    """Parse `source` and return the program together with its syntax errors."""
    parser = Parser(Lexer(CharacterStream(source)))
    program = parser.parse_program()
    return program, parser.errors


__all__ = ["Parser", "parse"]

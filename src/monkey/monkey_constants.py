"""
Shared lexical and grammatical tables for the Monkey language.

Token types are plain upper-case strings so they read naturally in error
messages ("expected next token to be RPAREN, got EOF instead").

Exports:
    - token type constants (EOF, ILLEGAL, IDENT, ...)
    - keywords: identifier text -> keyword token type
    - token_hashmap: fixed operator/delimiter text -> token type
    - precedence levels and the infix precedence table
"""

# Special
ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Identifiers + literals
IDENT = "IDENT"
INT = "INT"
STRING = "STRING"

# Operators
ASSIGN = "ASSIGN"
PLUS = "PLUS"
MINUS = "MINUS"
BANG = "BANG"
ASTERISK = "ASTERISK"
SLASH = "SLASH"
LT = "LT"
GT = "GT"
EQ = "EQ"
NOT_EQ = "NOT_EQ"

# Delimiters
COMMA = "COMMA"
SEMICOLON = "SEMICOLON"
COLON = "COLON"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"

# Keywords
FUNCTION = "FUNCTION"
LET = "LET"
RETURN = "RETURN"
IF = "IF"
ELSE = "ELSE"
WHILE = "WHILE"
TRUE = "TRUE"
FALSE = "FALSE"

keywords: dict[str, str] = {
    "fn": FUNCTION,
    "let": LET,
    "return": RETURN,
    "if": IF,
    "else": ELSE,
    "while": WHILE,
    "true": TRUE,
    "false": FALSE,
}

# Longest match wins, so "==" beats "=" and "!=" beats "!".
token_hashmap: dict[str, str] = {
    "=": ASSIGN,
    "==": EQ,
    "+": PLUS,
    "-": MINUS,
    "!": BANG,
    "!=": NOT_EQ,
    "*": ASTERISK,
    "/": SLASH,
    "<": LT,
    ">": GT,
    ",": COMMA,
    ";": SEMICOLON,
    ":": COLON,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    "[": LBRACKET,
    "]": RBRACKET,
}

# Precedence levels, lowest first
LOWEST = 1
EQUALS = 2  # ==
LESSGREATER = 3  # > or <
SUM = 4  # +
PRODUCT = 5  # *
PREFIX = 6  # -x or !x
CALL = 7  # myFunction(x)
INDEX = 8  # array[index]

precedences: dict[str, int] = {
    EQ: EQUALS,
    NOT_EQ: EQUALS,
    LT: LESSGREATER,
    GT: LESSGREATER,
    PLUS: SUM,
    MINUS: SUM,
    SLASH: PRODUCT,
    ASTERISK: PRODUCT,
    LPAREN: CALL,
    LBRACKET: INDEX,
}

# Signed 64-bit integer bounds
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def lookup_ident(ident: str) -> str:
    """Returns the keyword token type for `ident`, or IDENT."""
    return keywords.get(ident, IDENT)

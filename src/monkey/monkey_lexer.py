"""
Lexical analyzer for the Monkey programming language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a lazy sequence of tokens.

Features:
    - Skips whitespace (there are no comments in Monkey)
    - Supports longest-match recognition of operators (`==` over `=`, `!=` over `!`)
    - Recognizes:
        * Identifiers and keywords
        * Integer literals (base 10)
        * Strings (with `\\n` and `\\t` escapes; unterminated strings run to end of input)
        * Operators and delimiters

The lexer never raises on malformed input: characters that match no rule come
back as ILLEGAL tokens, and the parser decides what to do with them.

Example:
    >>> lexer = Lexer(CharacterStream("let x = 5;"))
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - token_hashmap
"""

from collections.abc import Iterator
from typing import Any

from monkey.monkey_constants import (
    EOF,
    ILLEGAL,
    INT,
    STRING,
    lookup_ident,
    token_hashmap,
)

_ESCAPES = {"n": "\n", "t": "\t"}


def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class CharacterStream:
    """
    A utility for reading characters from a source buffer with line and column tracking.

    The buffer may be given as `str` or as UTF-8 encoded `bytes`. It is never
    modified after construction, which is what makes `Lexer.reset()` possible.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(
        self, source: str | bytes, position: int = 0, line: int = 1, column: int = 1
    ):
        if isinstance(source, bytes):
            source = source.decode("utf-8", errors="replace")
        self.source = source
        self.position = position
        self.line = line
        self.column = column
        self._start = (position, line, column)

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def rewind(self) -> None:
        """Moves the cursor back to where the stream started."""
        self.position, self.line, self.column = self._start


class Token:
    """Represents a single lexical token in the Monkey language.

    Attributes:
        type (str): The token type (e.g. 'IDENT', 'INT', 'EOF').
        value (str): The literal text of the token. For strings this is the
            decoded content without the surrounding quotes.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Monkey language.

    The Lexer pulls characters from a CharacterStream one token at a time.
    Once the input is exhausted every further call to `next_token` returns an
    EOF token, so callers may keep asking without bounds checks.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including the first EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == EOF:
                return

    def reset(self) -> None:
        """Restarts tokenization from the beginning of the source."""
        self.stream.rewind()

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in " \t\r\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest fixed-text token from the current position.

        Operators are at most two characters long, so one character of
        lookahead past the current one is all that is ever needed.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(2):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def read_string(self, line: int, col: int) -> Token:
        """Reads a string literal; the opening quote is the current character."""
        self.advance()
        val = ""
        while not self.stream.end_of_file():
            ch = self.advance()
            if ch == '"':
                break
            if ch == "\\" and not self.stream.end_of_file():
                nxt = self.advance()
                val += _ESCAPES.get(nxt, ch + nxt)
            else:
                val += ch
        return Token(STRING, val, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream."""
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(EOF, "", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if _is_letter(ch):
            ident = ""
            while not self.stream.end_of_file() and (
                _is_letter(self.peek()) or _is_digit(self.peek())
            ):
                ident += self.advance()
            return Token(lookup_ident(ident), ident, line, col)

        # 2. Integer
        if _is_digit(ch):
            num = ""
            while not self.stream.end_of_file() and _is_digit(self.peek()):
                num += self.advance()
            return Token(INT, num, line, col)

        # 3. String
        if ch == '"':
            return self.read_string(line, col)

        # 4. Operator or delimiter
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        return Token(ILLEGAL, self.advance(), line, col)


def tokenize(source: str | bytes) -> list[Token]:
    """Returns every token of `source`, ending with the EOF token."""
    return list(Lexer(CharacterStream(source)))


__all__ = ["CharacterStream", "Lexer", "Token", "token_hashmap", "tokenize"]

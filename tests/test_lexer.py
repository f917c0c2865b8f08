import pytest
from hypothesis import given
from hypothesis import strategies as st

from monkey.monkey_constants import keywords
from monkey.monkey_lexer import CharacterStream, Lexer, Token, tokenize


def types(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def test_single_char_tokens() -> None:
    code = "= + - ! * / < > , ; : ( ) { } [ ]"
    expected = [
        "ASSIGN",
        "PLUS",
        "MINUS",
        "BANG",
        "ASTERISK",
        "SLASH",
        "LT",
        "GT",
        "COMMA",
        "SEMICOLON",
        "COLON",
        "LPAREN",
        "RPAREN",
        "LBRACE",
        "RBRACE",
        "LBRACKET",
        "RBRACKET",
        "EOF",
    ]
    assert types(code) == expected


def test_two_char_operators_win_longest_match() -> None:
    assert types("10 == 10; 10 != 9; !x; a = b") == [
        "INT",
        "EQ",
        "INT",
        "SEMICOLON",
        "INT",
        "NOT_EQ",
        "INT",
        "SEMICOLON",
        "BANG",
        "IDENT",
        "SEMICOLON",
        "IDENT",
        "ASSIGN",
        "IDENT",
        "EOF",
    ]


def test_full_program_token_stream() -> None:
    source = """let five = 5;
let add = fn(x, y) {
  x + y;
};
let result = add(five, 10);
if (5 < 10) { return true; } else { return false; }
"foobar"
[1, 2];
{"foo": "bar"}
while (x) { x }
"""
    tokens = tokenize(source)
    pairs = [(t.type, t.value) for t in tokens[:9]]
    assert pairs == [
        ("LET", "let"),
        ("IDENT", "five"),
        ("ASSIGN", "="),
        ("INT", "5"),
        ("SEMICOLON", ";"),
        ("LET", "let"),
        ("IDENT", "add"),
        ("ASSIGN", "="),
        ("FUNCTION", "fn"),
    ]
    values = [t.value for t in tokens]
    assert "foobar" in values
    assert [t.type for t in tokens].count("WHILE") == 1
    assert tokens[-1].type == "EOF"


def test_keywords_are_recognized() -> None:
    for text, type_ in keywords.items():
        tok = Lexer(CharacterStream(text)).next_token()
        assert tok == Token(type_, text, 1, 1)


def test_identifier_with_digits_and_underscore() -> None:
    tok = Lexer(CharacterStream("_foo_bar9")).next_token()
    assert tok.type == "IDENT"
    assert tok.value == "_foo_bar9"


def test_digits_then_letters_split() -> None:
    tokens = tokenize("12abc")
    assert [(t.type, t.value) for t in tokens[:2]] == [("INT", "12"), ("IDENT", "abc")]


def test_string_token() -> None:
    tok = Lexer(CharacterStream('"hello world"')).next_token()
    assert tok.type == "STRING"
    assert tok.value == "hello world"


def test_empty_string_token() -> None:
    tok = Lexer(CharacterStream('""')).next_token()
    assert tok.type == "STRING"
    assert tok.value == ""


def test_string_escapes() -> None:
    tok = Lexer(CharacterStream(r'"a\nb\tc"')).next_token()
    assert tok.value == "a\nb\tc"


def test_unknown_escape_is_kept_and_quote_does_not_terminate() -> None:
    tok = Lexer(CharacterStream(r'"say \"hi\""')).next_token()
    assert tok.value == r"say \"hi\""


def test_unterminated_string_runs_to_eof() -> None:
    lexer = Lexer(CharacterStream('"abc'))
    tok = lexer.next_token()
    assert tok.type == "STRING"
    assert tok.value == "abc"
    assert lexer.next_token().type == "EOF"


def test_illegal_character() -> None:
    tokens = tokenize("let @ = 1")
    assert tokens[1] == Token("ILLEGAL", "@", 1, 5)


def test_eof_repeats_forever() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token().type == "IDENT"
    for _ in range(5):
        tok = lexer.next_token()
        assert tok.type == "EOF"
        assert tok.value == ""


def test_token_positions() -> None:
    tokens = tokenize("let x\n  = 5;")
    assert [(t.line, t.col) for t in tokens[:4]] == [(1, 1), (1, 5), (2, 3), (2, 5)]


def test_reset_restarts_from_beginning() -> None:
    lexer = Lexer(CharacterStream("let x = 1;"))
    first = list(lexer)
    lexer.reset()
    assert list(lexer) == first


def test_bytes_input_is_decoded() -> None:
    assert tokenize(b'"caf\xc3\xa9"')[0].value == "café"


def test_token_repr_and_hash() -> None:
    tok = Token("INT", "5", 1, 1)
    assert repr(tok) == "Token(INT, 5)"
    assert tok == Token("INT", "5", 1, 1)
    assert tok != Token("INT", "5", 1, 2)
    assert len({tok, Token("INT", "5", 1, 1)}) == 1


def test_character_stream_bounds() -> None:
    cs = CharacterStream("a")
    assert cs.peek() == "a"
    assert cs.peek(1) == ""
    assert cs.peek(-1) == ""
    assert cs.next() == "a"
    assert cs.end_of_file()
    with pytest.raises(Exception, match="past end of source"):
        cs.next()


@given(st.integers(min_value=0, max_value=10**30))  # type: ignore[misc]
def test_integer_literal_value_preserved(n: int) -> None:
    tokens = tokenize(str(n))
    assert tokens[0] == Token("INT", str(n), 1, 1)
    assert tokens[1].type == "EOF"


@given(st.text(alphabet=st.characters(blacklist_characters='"\\'), max_size=30))  # type: ignore[misc]
def test_plain_string_content_preserved(s: str) -> None:
    tok = Lexer(CharacterStream(f'"{s}"')).next_token()
    assert tok.type == "STRING"
    assert tok.value == s


@given(st.text(max_size=200))  # type: ignore[misc]
def test_lexer_never_raises_and_ends_in_eof(source: str) -> None:
    tokens = tokenize(source)
    assert tokens[-1].type == "EOF"
    assert all(tok.type != "EOF" for tok in tokens[:-1])

import pytest
from exasm.lexer import tokenize, detokenize, LexicalError
from exasm.tokens import Identifier, IntegerLiteral, Register, Operator, LParen, RParen, Assign


def test_tokenize_assignment():
    toks = tokenize("x = (a + 12) * $s0")
    assert toks == [
        Identifier("x"), Assign(), LParen(), Identifier("a"), Operator("+"),
        IntegerLiteral(12), RParen(), Operator("*"), Register("$s0"),
    ]


def test_whitespace_and_commas_dropped():
    assert tokenize("  a ,+,\tb\n") == [Identifier("a"), Operator("+"), Identifier("b")]


def test_empty_input():
    assert tokenize("") == []
    assert tokenize("   ") == []


def test_identifier_with_underscore_and_digits():
    assert tokenize("_tmp1 - x2") == [Identifier("_tmp1"), Operator("-"), Identifier("x2")]


def test_digits_then_letters_split():
    assert tokenize("2a") == [IntegerLiteral(2), Identifier("a")]


@pytest.mark.parametrize("src, char", [
    ("a # b", "#"),
    ("a % b", "%"),
    ("a[3]", "["),
    ("$", "$"),
])
def test_unexpected_character(src, char):
    with pytest.raises(LexicalError) as ei:
        tokenize(src)
    assert ei.value.char == char


def test_lexical_error_column():
    with pytest.raises(LexicalError) as ei:
        tokenize("a # b")
    assert ei.value.column == 3


@pytest.mark.parametrize("src", ["$foo + a", "a = $t10", "$T0"])
def test_unknown_register(src):
    with pytest.raises(LexicalError) as ei:
        tokenize(src)
    assert "Unknown register" in str(ei.value)


@pytest.mark.parametrize("src", [
    "a + b * c",
    "x=(a+b)*c",
    "$t0 = a / 4 - b",
    "y = y1,  + 300",
])
def test_retokenize_is_stable(src):
    toks = tokenize(src)
    assert tokenize(detokenize(toks)) == toks


def test_tokenize_is_pure():
    assert tokenize("a + b") == tokenize("a + b")

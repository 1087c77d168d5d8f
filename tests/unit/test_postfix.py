import pytest
from exasm.lexer import tokenize, detokenize
from exasm.postfix import to_postfix, ExpressionSyntaxError


def _rpn(src, **kw):
    return detokenize(to_postfix(tokenize(src), **kw))


@pytest.mark.parametrize("src, expected", [
    ("a + b * c", "a b c * +"),
    ("(a + b) * c", "a b + c *"),
    ("a - b + c", "a b - c +"),
    ("a / b * c", "a b / c *"),
    ("a * (b - 3) / c", "a b 3 - * c /"),
    ("x = a + b", "x a b + ="),
    ("x = y = a", "x y a = ="),
    ("$t0 = a * b + c", "$t0 a b * c + ="),
    ("a", "a"),
])
def test_postfix_order(src, expected):
    assert _rpn(src) == expected


def test_empty_input_gives_empty_output():
    assert to_postfix([]) == []


def test_no_parens_in_output():
    out = _rpn("((a + b))")
    assert "(" not in out and ")" not in out
    assert out == "a b +"


def test_lenient_unmatched_close():
    assert _rpn("a + b) * c") == "a b + c *"


def test_lenient_unclosed_open():
    assert _rpn("(a + b") == "a b +"


def test_strict_unmatched_close():
    with pytest.raises(ExpressionSyntaxError):
        to_postfix(tokenize("a + b) * c"), strict=True)


def test_strict_unclosed_open():
    with pytest.raises(ExpressionSyntaxError):
        to_postfix(tokenize("(a + b"), strict=True)


def test_strict_accepts_balanced():
    assert detokenize(to_postfix(tokenize("(a + b) * (c - d)"), strict=True)) == "a b + c d - *"

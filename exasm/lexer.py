from typing import List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from . import tokens
from .tokens import CompileError


GRAMMAR = r"""
// One expression, optionally prefixed by (chained) assignment targets
start: (target ASSIGN)* expr

?target: IDENT | REGISTER

?expr: expr PLUS term  -> add
     | expr MINUS term -> sub
     | term
?term: term STAR factor  -> mul
     | term SLASH factor -> div
     | factor
?factor: IDENT
       | INT
       | REGISTER
       | LPAR expr RPAR

REGISTER: /\$[A-Za-z0-9]+/
IDENT: /[A-Za-z_][A-Za-z0-9_]*/
INT: /[0-9]+/
PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
LPAR: "("
RPAR: ")"
ASSIGN: "="

COMMA: ","
%ignore /[ \t\r\n]+/
%ignore COMMA
"""


class LexicalError(CompileError):
    """Raised when the input holds a character sequence matching no token."""

    def __init__(self, message, char=None, column=None):
        super().__init__(message)
        self.char = char
        self.column = column


_parser = None


def parser() -> Lark:
    """Shared LALR parser over GRAMMAR (its basic lexer drives tokenize())."""
    global _parser
    if _parser is None:
        _parser = Lark(GRAMMAR, parser="lalr", lexer="basic")
    return _parser


_OPERATORS = {'PLUS': '+', 'MINUS': '-', 'STAR': '*', 'SLASH': '/'}


def _classify(tok):
    """Turn a lark Token into one of the tokens.* variants."""
    kind = tok.type
    text = tok.value
    if kind == 'REGISTER':
        if not tokens.is_register(text):
            raise LexicalError(f"Unknown register '{text}' at column {tok.column}",
                               char=text, column=tok.column)
        return tokens.Register(text)
    if kind == 'IDENT':
        return tokens.Identifier(text)
    if kind == 'INT':
        return tokens.IntegerLiteral(int(text))
    if kind in _OPERATORS:
        return tokens.Operator(_OPERATORS[kind])
    if kind == 'LPAR':
        return tokens.LParen()
    if kind == 'RPAR':
        return tokens.RParen()
    if kind == 'ASSIGN':
        return tokens.Assign()
    raise LexicalError(f"Unrecognized token '{text}' at column {tok.column}",
                       char=text, column=tok.column)


def tokenize(text: str) -> List[tokens.Token]:
    """Scan expression text into a flat token list.

    Whitespace and commas are dropped. Raises LexicalError on the first
    character that starts no token, or on a '$name' outside the register file.
    """
    try:
        raw = list(parser().lex(text))
    except UnexpectedCharacters as e:
        raise LexicalError(f"Unexpected character {e.char!r} at column {e.column}",
                           char=e.char, column=e.column) from e
    return [_classify(tok) for tok in raw]


def detokenize(toks) -> str:
    """Serialize tokens back to source text, one space between tokens."""
    return " ".join(str(t) for t in toks)

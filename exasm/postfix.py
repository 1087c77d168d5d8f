"""Infix to postfix (RPN) translation using the shunting-yard algorithm."""
from typing import List

from . import tokens
from .tokens import CompileError, Operator, Assign, LParen, RParen


class ExpressionSyntaxError(CompileError):
    """Malformed expression: unbalanced parentheses (strict mode), missing operands, bad targets."""
    pass


def to_postfix(toks, strict: bool = False) -> List[tokens.Token]:
    """Reorder an infix token list into postfix.

    '*' and '/' bind tighter than '+' and '-', all four left-associative.
    '=' is right-associative with the lowest precedence, so it trails both
    of its operands: "x = a + b" -> x a b + =.

    Parenthesis handling depends on ``strict``. Lenient (default): a ')'
    without a matching '(' flushes the pending operators and is otherwise
    ignored, and a '(' never closed is dropped. Strict: both raise
    ExpressionSyntaxError.
    """
    out = []
    ops = []

    for tok in toks:
        if tokens.is_operand(tok):
            out.append(tok)
        elif isinstance(tok, Operator):
            while ops and isinstance(ops[-1], Operator) and ops[-1].precedence >= tok.precedence:
                out.append(ops.pop())
            ops.append(tok)
        elif isinstance(tok, Assign):
            # Right-associative: only pop operators that bind tighter
            while ops and isinstance(ops[-1], Operator):
                out.append(ops.pop())
            ops.append(tok)
        elif isinstance(tok, LParen):
            ops.append(tok)
        elif isinstance(tok, RParen):
            while ops and not isinstance(ops[-1], LParen):
                out.append(ops.pop())
            if ops:
                ops.pop()
            elif strict:
                raise ExpressionSyntaxError("Unmatched ')' in expression")

    while ops:
        op = ops.pop()
        if isinstance(op, LParen):
            if strict:
                raise ExpressionSyntaxError("Unmatched '(' in expression")
            continue
        out.append(op)

    return out

"""Expression -> pseudo-assembly pipeline: tokenize, reorder to postfix, generate."""
import sys
from typing import List

from . import lexer, postfix
from .codegen import InstructionGenerator, InstructionRecord


def compile_expression(text: str, manual_map=None, strict: bool = False,
                       debug: bool = False, gen=None) -> List[InstructionRecord]:
    """Compile one expression into an ordered list of instruction records.

    ``manual_map`` pre-binds variables to registers ({'a': '$s0'}); those
    registers are never handed out as temporaries. Pass ``gen`` to supply
    the InstructionGenerator yourself (it then owns the manual map) and
    inspect its allocator afterwards. Raises a CompileError subclass on
    failure, never returns partial output.
    """
    toks = lexer.tokenize(text)
    rpn = postfix.to_postfix(toks, strict=strict)
    if debug:
        print(f"[DEBUG] postfix: {lexer.detokenize(rpn)}", file=sys.stderr)
    if gen is None:
        gen = InstructionGenerator(manual_map)
    gen.print_debug = debug
    return gen.generate(rpn)

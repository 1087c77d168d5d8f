"""Reading hand-written assembly listings back into instruction records."""
import re
from typing import List

from .codegen import InstructionRecord, Mnemonic
from .render import ASM_NAMES, IMMEDIATE_MAX, MEM_OPERAND_RE
from .tokens import CompileError, is_register

ASM_TO_MNEMONIC = {name: mn for mn, name in ASM_NAMES.items()}

OPERAND_SPLIT_RE = re.compile(r"[\s,]+")
IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Words that make 'sub = a + b' an expression rather than a SUB instruction
EXPRESSION_CHARS = "=+-*/)"


class ListingError(CompileError):
    pass


def looks_like_listing(text: str) -> bool:
    """True if ``text`` starts with an instruction name followed by an operand.

    'add $t2, $t0, $t1' is a listing; 'sub = a + b' and 'add * 2' are
    expressions that happen to use an instruction name as a variable.
    """
    words = text.split()
    if len(words) < 2 or words[0].lower() not in ASM_TO_MNEMONIC:
        return False
    return words[1][0] not in EXPRESSION_CHARS


def _check_operand(op, lineno):
    m = MEM_OPERAND_RE.match(op)
    if m:
        imm, reg = int(m.group(1)), m.group(2)
    elif op.isdigit():
        imm, reg = int(op), None
    elif op.startswith('$'):
        imm, reg = 0, op
    elif IDENT_RE.match(op):
        return
    else:
        raise ListingError(f"Line {lineno}: bad operand '{op}'")
    if reg is not None and not is_register(reg):
        raise ListingError(f"Line {lineno}: unknown register '{reg}'")
    if imm > IMMEDIATE_MAX:
        raise ListingError(f"Line {lineno}: immediate {imm} does not fit in 16 bits")


def parse_line(line: str, lineno: int = 1) -> InstructionRecord:
    """Parse 'ADD $t2, $t0, $t1 # a + b' into a record."""
    code, _, comment = line.partition('#')
    parts = [p for p in OPERAND_SPLIT_RE.split(code.strip()) if p]
    if not parts:
        raise ListingError(f"Line {lineno}: missing instruction")
    name = parts[0].lower()
    if name not in ASM_TO_MNEMONIC:
        raise ListingError(f"Line {lineno}: unknown instruction '{parts[0]}'")
    mn = ASM_TO_MNEMONIC[name]
    args = parts[1:]
    expected = 2 if mn in (Mnemonic.LOAD, Mnemonic.STORE, Mnemonic.MOVE) else 3
    if len(args) != expected:
        raise ListingError(f"Line {lineno}: {name} takes {expected} operands, got {len(args)}")
    for op in args:
        _check_operand(op, lineno)

    if mn == Mnemonic.STORE:
        dest, src_a, src_b = args[1], args[0], None
    elif expected == 2:
        dest, src_a, src_b = args[0], args[1], None
    else:
        dest, src_a, src_b = args
    return InstructionRecord(mn, destination=dest, source_a=src_a,
                             source_b=src_b, comment=comment.strip())


def parse_listing(text: str) -> List[InstructionRecord]:
    """One record per instruction line; '#' starts the record's comment."""
    records = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        records.append(parse_line(line, lineno))
    return records

"""Text listing and machine-code breakdown for instruction records."""
import re
from dataclasses import dataclass
from typing import Optional

from .codegen import Mnemonic
from .tokens import REGISTER_NUMBERS


# Assembly spelling of each mnemonic
ASM_NAMES = {
    Mnemonic.LOAD: 'lw',
    Mnemonic.STORE: 'sw',
    Mnemonic.MOVE: 'move',
    Mnemonic.ADD: 'add',
    Mnemonic.SUB: 'sub',
    Mnemonic.MULTIPLY: 'mul',
    Mnemonic.DIVIDE: 'div',
}


@dataclass(frozen=True)
class InstrMeta:
    fmt: str          # 'R' or 'I'
    opcode: str       # 6 bits
    funct: Optional[str] = None  # 6 bits, R-type only


INSTRUCTION_META = {
    Mnemonic.ADD: InstrMeta('R', '000000', '100000'),
    Mnemonic.SUB: InstrMeta('R', '000000', '100010'),
    Mnemonic.MULTIPLY: InstrMeta('R', '000000', '011000'),
    Mnemonic.DIVIDE: InstrMeta('R', '000000', '011010'),
    Mnemonic.MOVE: InstrMeta('R', '000000', '100000'),
    Mnemonic.LOAD: InstrMeta('I', '100011'),
    Mnemonic.STORE: InstrMeta('I', '101011'),
}

MEM_OPERAND_RE = re.compile(r"^(\d+)\((\$[A-Za-z0-9]+)\)$")
IMMEDIATE_MAX = (1 << 16) - 1


def to_bin(value: int, width: int) -> str:
    """Unsigned binary string of ``value`` truncated/padded to ``width`` bits."""
    return format(value & ((1 << width) - 1), f"0{width}b")


def _reg_bits(name) -> str:
    # Names outside the register file (variables, literals) encode as 0
    return to_bin(REGISTER_NUMBERS.get(name, 0), 5)


def operands(rec):
    """Operands of a record in assembly order (a, b, c), missing ones as ''."""
    mn = rec.mnemonic
    if mn == Mnemonic.STORE:
        return (rec.source_a or '', rec.destination or '', '')
    if mn in (Mnemonic.LOAD, Mnemonic.MOVE):
        return (rec.destination or '', rec.source_a or '', '')
    return (rec.destination or '', rec.source_a or '', rec.source_b or '')


def format_record(rec) -> str:
    """One listing line: 'ADD $t2, $t0, $t1 # a + b'."""
    a, b, c = operands(rec)
    line = f"{ASM_NAMES[rec.mnemonic].upper()} {a}"
    if b:
        line += f", {b}"
    if c:
        line += f", {c}"
    if rec.comment:
        line += f" # {rec.comment}"
    return line


@dataclass(frozen=True)
class Breakdown:
    fmt: str
    opcode: str
    rs: str
    rt: str
    rd: str = '00000'
    shamt: str = '00000'
    funct: str = '000000'
    immediate: str = '0' * 16

    @property
    def machine_code(self) -> str:
        if self.fmt == 'R':
            return f"{self.opcode}{self.rs}{self.rt}{self.rd}{self.shamt}{self.funct}"
        return f"{self.opcode}{self.rs}{self.rt}{self.immediate}"

    def fields(self):
        """(name, width, bits) rows in encoding order."""
        rows = [('opcode', 6, self.opcode), ('rs', 5, self.rs), ('rt', 5, self.rt)]
        if self.fmt == 'R':
            rows += [('rd', 5, self.rd), ('shamt', 5, self.shamt), ('funct', 6, self.funct)]
        else:
            rows.append(('immediate', 16, self.immediate))
        return rows


def breakdown(rec) -> Breakdown:
    """Split a record into its MIPS bit fields."""
    meta = INSTRUCTION_META[rec.mnemonic]
    a, b, c = operands(rec)
    if meta.fmt == 'R':
        return Breakdown('R', meta.opcode, rs=_reg_bits(b), rt=_reg_bits(c), rd=_reg_bits(a),
                         funct=meta.funct)

    rt = _reg_bits(a)
    rs = '00000'
    imm = '0' * 16
    m = MEM_OPERAND_RE.match(b)
    if m:
        imm = to_bin(int(m.group(1)), 16)
        rs = _reg_bits(m.group(2))
    elif b.isdigit():
        imm = to_bin(int(b), 16)
    else:
        rs = _reg_bits(b)
    return Breakdown('I', meta.opcode, rs=rs, rt=rt, immediate=imm)


def format_breakdown(bd: Breakdown, indent: str = "    ") -> str:
    lines = [f"{indent}{'Field':<10} {'Bits':>4}  Binary"]
    for name, width, bits in bd.fields():
        lines.append(f"{indent}{name:<10} {width:>4}  {bits}")
    lines.append(f"{indent}Full Machine Code -> {bd.machine_code}")
    return "\n".join(lines)


def render_listing(records, mode: str = 'mips') -> str:
    """Render records as text; 'mips' mode adds the bit-field breakdown under each line."""
    if mode not in ('mips', 'text'):
        raise ValueError(f"Unknown render mode: {mode}")
    out = []
    for rec in records:
        out.append(format_record(rec))
        if mode == 'mips':
            out.append(format_breakdown(breakdown(rec)))
    return "\n".join(out)

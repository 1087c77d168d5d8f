import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from . import tokens
from .tokens import IntegerLiteral, Register, Operator, Assign
from .postfix import ExpressionSyntaxError
from .register_allocator import RegisterAllocator


class Mnemonic(str, Enum):
    LOAD = 'load'
    STORE = 'store'
    MOVE = 'move'
    ADD = 'add'
    SUB = 'sub'
    MULTIPLY = 'multiply'
    DIVIDE = 'divide'


OPERATOR_MNEMONICS = {
    '+': Mnemonic.ADD,
    '-': Mnemonic.SUB,
    '*': Mnemonic.MULTIPLY,
    '/': Mnemonic.DIVIDE,
}


@dataclass(frozen=True)
class InstructionRecord:
    """One emitted pseudo-instruction.

    - load:  destination <- source_a (a variable name)
    - store: destination (a variable name) <- source_a
    - move:  destination (a register) <- source_a
    - add/sub/multiply/divide: destination <- source_a op source_b
    """
    mnemonic: Mnemonic
    destination: Optional[str] = None
    source_a: Optional[str] = None
    source_b: Optional[str] = None
    comment: str = ''


def source_registers(postfix):
    """Registers the expression reads as values. Assignment targets are not reads."""
    reads = set()
    stack = []
    for tok in postfix:
        if tokens.is_operand(tok):
            stack.append(tok)
            continue
        if not isinstance(tok, (Operator, Assign)) or len(stack) < 2:
            break
        right = stack.pop()
        left = stack.pop()
        reads.add(right)
        if isinstance(tok, Assign):
            stack.append(right)
        else:
            reads.add(left)
            stack.append(None)
    reads.update(stack)
    return sorted(t.name for t in reads if isinstance(t, Register))


class InstructionGenerator:
    """Walks a postfix token list with an operand stack and emits records.

    Owns the allocator (bindings + temporary pool) for exactly one
    compilation; create a fresh generator for every expression.
    """

    def __init__(self, manual_map=None):
        self.print_debug = False  # Set to True to trace every postfix step
        self.alloc = RegisterAllocator(manual_map)
        self.records = []

    def _emit(self, record):
        if self.print_debug:
            print(f"[DEBUG] emit: {record}", file=sys.stderr)
        self.records.append(record)

    def ensure_loaded(self, operand) -> str:
        """Return the register (or literal text) holding ``operand``.

        Registers and integer literals are used as-is. A variable already
        bound reuses its register; otherwise it is loaded into a fresh
        temporary and bound to it.
        """
        if isinstance(operand, (Register, IntegerLiteral)):
            return str(operand)
        reg = self.alloc.lookup(operand.name)
        if reg is not None:
            return reg
        reg = self.alloc.allocate()
        self._emit(InstructionRecord(Mnemonic.LOAD, destination=reg, source_a=operand.name,
                                     comment=f"load {operand.name}"))
        self.alloc.bind(operand.name, reg)
        return reg

    def _pop(self, stack, what):
        if not stack:
            raise ExpressionSyntaxError(f"Missing operand for '{what}'")
        return stack.pop()

    def _arith(self, stack, op: Operator):
        right = self._pop(stack, op.symbol)
        left = self._pop(stack, op.symbol)
        ra = self.ensure_loaded(left)
        rb = self.ensure_loaded(right)
        dest = self.alloc.allocate()
        self._emit(InstructionRecord(OPERATOR_MNEMONICS[op.symbol], destination=dest,
                                     source_a=ra, source_b=rb,
                                     comment=f"{left} {op.symbol} {right}"))
        stack.append(Register(dest))

    def _assign(self, stack):
        value = self._pop(stack, '=')
        target = self._pop(stack, '=')
        if isinstance(target, IntegerLiteral):
            raise ExpressionSyntaxError(f"Cannot assign to literal {target}")
        src = self.ensure_loaded(value)
        if isinstance(target, Register):
            self._emit(InstructionRecord(Mnemonic.MOVE, destination=target.name, source_a=src,
                                         comment=f"move to {target.name}"))
        else:
            self._emit(InstructionRecord(Mnemonic.STORE, destination=target.name, source_a=src,
                                         comment=f"store {target.name}"))
            # Later reads of the target see the register just stored from
            if tokens.is_register(src):
                self.alloc.bind(target.name, src)
        # Leave the value for an enclosing assignment (x = y = a)
        stack.append(value if isinstance(value, IntegerLiteral) else Register(src))

    def generate(self, postfix) -> List[InstructionRecord]:
        """Compile a postfix token list into instruction records."""
        for reg in source_registers(postfix):
            self.alloc.reserve(reg)
        stack = []
        for tok in postfix:
            if self.print_debug:
                print(f"[DEBUG] step: {tok} stack={[str(s) for s in stack]}", file=sys.stderr)
            if tokens.is_operand(tok):
                stack.append(tok)
            elif isinstance(tok, Operator):
                self._arith(stack, tok)
            elif isinstance(tok, Assign):
                self._assign(stack)
            else:
                raise ExpressionSyntaxError(f"Unexpected token '{tok}' in postfix sequence")
        return list(self.records)

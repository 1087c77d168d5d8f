from dataclasses import dataclass
from typing import Union


# MIPS register file: name -> register number
REGISTER_NUMBERS = {
    '$zero': 0, '$at': 1, '$v0': 2, '$v1': 3,
    '$a0': 4, '$a1': 5, '$a2': 6, '$a3': 7,
    '$t0': 8, '$t1': 9, '$t2': 10, '$t3': 11, '$t4': 12, '$t5': 13, '$t6': 14, '$t7': 15,
    '$s0': 16, '$s1': 17, '$s2': 18, '$s3': 19, '$s4': 20, '$s5': 21, '$s6': 22, '$s7': 23,
    '$t8': 24, '$t9': 25, '$k0': 26, '$k1': 27, '$gp': 28, '$sp': 29, '$fp': 30, '$ra': 31,
}

# Scratch registers handed out by the allocator, in allocation order
TEMP_REGISTERS = ['$t0', '$t1', '$t2', '$t3', '$t4', '$t5', '$t6', '$t7', '$t8', '$t9']

# Binary operators by precedence (higher binds tighter)
PRECEDENCE = {'+': 1, '-': 1, '*': 2, '/': 2}


def is_register(name: str) -> bool:
    """Check if a name is one of the architectural registers."""
    return name in REGISTER_NUMBERS


class CompileError(Exception):
    """Base class for every failure raised while compiling an expression."""
    pass


@dataclass(frozen=True)
class Identifier:
    """Source variable, memory-backed until loaded into a register."""
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class IntegerLiteral:
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Register:
    """Register named directly in the source (or a temporary pushed by the generator)."""
    name: str  # e.g. '$t0', '$s1'

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Operator:
    symbol: str  # one of + - * /

    @property
    def precedence(self) -> int:
        return PRECEDENCE[self.symbol]

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class LParen:
    def __str__(self):
        return '('


@dataclass(frozen=True)
class RParen:
    def __str__(self):
        return ')'


@dataclass(frozen=True)
class Assign:
    """Assignment marker; trails its operands in postfix form."""
    def __str__(self):
        return '='


Operand = Union[Identifier, IntegerLiteral, Register]
Token = Union[Identifier, IntegerLiteral, Register, Operator, LParen, RParen, Assign]


def is_operand(token) -> bool:
    return isinstance(token, (Identifier, IntegerLiteral, Register))

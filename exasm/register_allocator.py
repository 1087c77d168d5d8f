"""Register allocation for expression compilation."""
from .tokens import CompileError, TEMP_REGISTERS, is_register


class RegisterPoolExhausted(CompileError):
    """Raised when every temporary register is already in use."""
    pass


class BindingError(CompileError):
    """Raised when a manual binding names something that is not a register."""
    pass


class RegisterAllocator:
    """Hands out temporary registers and remembers which variable lives where.

    Allocation strategy:

    Temporary registers ($t0-$t9):
    - Scanned in fixed order, the first one not in use is taken
    - Registers named by a manual binding are in use from the start
    - So are registers the expression reads directly ($t0 + a)
    - Nothing is ever freed: once a temporary has held a value it stays
      taken until the compilation ends

    Variable bindings:
    - Seeded from the caller's manual map (variable -> register)
    - Grown as variables are loaded or assigned
    - Later references to a bound variable reuse its register

    One allocator serves one compilation; build a new one per expression.
    """

    def __init__(self, manual_map=None):
        self.temp_regs = list(TEMP_REGISTERS)
        self.bindings = {}
        self.in_use = set()
        self.manual = dict(manual_map) if manual_map else {}

        for var, reg in self.manual.items():
            if not is_register(reg):
                raise BindingError(f"Manual binding {var} -> '{reg}' is not a register")
            self.bindings[var] = reg
            self.in_use.add(reg)

    def allocate(self):
        """Allocate the first free temporary register."""
        for reg in self.temp_regs:
            if reg not in self.in_use:
                self.in_use.add(reg)
                return reg
        raise RegisterPoolExhausted(
            f"No free temporary registers ({self.temp_regs[0]}-{self.temp_regs[-1]})")

    def reserve(self, reg):
        """Mark ``reg`` as holding a live value so it is never handed out."""
        self.in_use.add(reg)

    def lookup(self, var):
        """Register currently holding ``var``, or None if it has not been bound."""
        return self.bindings.get(var)

    def bind(self, var, reg):
        """Record that ``var`` now lives in ``reg`` (replaces any earlier binding)."""
        self.bindings[var] = reg
        self.in_use.add(reg)

    def get_allocation_summary(self):
        """Get human-readable summary of current allocations (for debugging)."""
        return {
            'bindings': dict(self.bindings),
            'temps_in_use': [r for r in self.temp_regs if r in self.in_use],
            'temps_available': [r for r in self.temp_regs if r not in self.in_use],
        }

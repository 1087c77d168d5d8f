import argparse
import sys

from . import compiler, listing, render, validator
from .codegen import InstructionGenerator
from .tokens import CompileError


def parse_manual_map(pairs):
    """Turn ['a=$s0', 'b=$s1'] into {'a': '$s0', 'b': '$s1'}."""
    manual = {}
    for pair in pairs or []:
        var, sep, reg = pair.partition('=')
        if not sep or not var.strip() or not reg.strip():
            raise ValueError(f"Bad binding '{pair}' (expected VAR=REG)")
        manual[var.strip()] = reg.strip()
    return manual


def main(argv=None):
    ap = argparse.ArgumentParser(prog="exasm", description="Expression to MIPS-style assembly converter")
    ap.add_argument("input", nargs="?", help="Input file holding an expression or an assembly listing")
    ap.add_argument("-e", "--expr", help="Expression to convert (instead of an input file)")
    ap.add_argument("-m", "--map", action="append", metavar="VAR=REG",
                    help="Bind a variable to a register, e.g. -m a=$s0 (repeatable)")
    ap.add_argument("--mode", choices=["mips", "text"], default="mips",
                    help="mips: listing with machine-code breakdown; text: listing only")
    ap.add_argument("--strict", action="store_true", help="Reject unbalanced parentheses")
    ap.add_argument("--no-validate", action="store_true", help="Skip validation checks")
    ap.add_argument("--show-registers", action="store_true", help="Print register allocation summary")
    ap.add_argument("--debug", action="store_true", help="Trace code generation on stderr")
    ap.add_argument("-o", "--output", help="Output assembly file (default: stdout)")
    args = ap.parse_args(argv)

    if args.expr is not None:
        src = args.expr
        where = "<expr>"
    elif args.input:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                src = f.read()
        except FileNotFoundError:
            print(f"Error: Input file not found: {args.input}", file=sys.stderr)
            sys.exit(1)
        except IOError as e:
            print(f"Error: Failed to read input file: {e}", file=sys.stderr)
            sys.exit(1)
        where = args.input
    else:
        ap.error("an input file or --expr is required")

    if not src.strip():
        print("Error: Please enter an equation or instruction.", file=sys.stderr)
        sys.exit(1)

    try:
        manual_map = parse_manual_map(args.map)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    gen = None
    try:
        if listing.looks_like_listing(src):
            records = listing.parse_listing(src)
        else:
            if not args.no_validate:
                try:
                    val = validator.Validator(src, manual_map)
                    for warning in val.validate():
                        print(f"Warning: {warning}", file=sys.stderr)
                except validator.ValidationError as e:
                    print(f"Validation error in {where}:", file=sys.stderr)
                    print(f"  {e}", file=sys.stderr)
                    sys.exit(1)
            gen = InstructionGenerator(manual_map)
            records = compiler.compile_expression(src, strict=args.strict, debug=args.debug, gen=gen)
    except CompileError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    asm = render.render_listing(records, mode=args.mode)
    if not asm:
        asm = "No output generated."

    if args.show_registers and gen is not None:
        summary = gen.alloc.get_allocation_summary()
        for var, reg in summary['bindings'].items():
            print(f"  {var} -> {reg}", file=sys.stderr)
        print(f"  temporaries in use: {', '.join(summary['temps_in_use']) or '-'}", file=sys.stderr)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(asm + "\n")
        print(f"Wrote assembly to {args.output}")
    else:
        print(asm)
    return 0


if __name__ == "__main__":
    main()

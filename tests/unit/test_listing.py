import pytest
from exasm.codegen import InstructionRecord, Mnemonic
from exasm.compiler import compile_expression
from exasm.listing import looks_like_listing, parse_line, parse_listing, ListingError
from exasm.render import format_record, render_listing


@pytest.mark.parametrize("text, expected", [
    ("add $t2, $t0, $t1", True),
    ("LW $t0, a", True),
    ("x = a + b", False),
    ("a + b", False),
    ("sub = a + b", False),
    ("add * 2 - mul", False),
    ("div", False),
    ("", False),
])
def test_looks_like_listing(text, expected):
    assert looks_like_listing(text) == expected


def test_parse_line_arith():
    rec = parse_line("ADD $t2, $t0, $t1 # a + b")
    assert rec == InstructionRecord(Mnemonic.ADD, "$t2", "$t0", "$t1", comment="a + b")


def test_parse_line_store_and_load():
    assert parse_line("sw $t2, x") == InstructionRecord(Mnemonic.STORE, "x", "$t2")
    assert parse_line("lw $t0 8($sp)") == InstructionRecord(Mnemonic.LOAD, "$t0", "8($sp)")
    assert parse_line("mul $t3,$t1,$t2").mnemonic == Mnemonic.MULTIPLY


def test_parse_unknown_instruction():
    with pytest.raises(ListingError) as ei:
        parse_line("jr $ra", lineno=4)
    assert "Line 4" in str(ei.value)


def test_parse_listing_skips_blank_and_comment_lines():
    recs = parse_listing("\n# header\nlw $t0, a\n\n  sw $t0, b  # copy\n")
    assert [r.mnemonic for r in recs] == [Mnemonic.LOAD, Mnemonic.STORE]
    assert recs[1].comment == "copy"


def test_rendered_listing_reads_back():
    records = compile_expression("$t0 = a * (b - 2)")
    text = render_listing(records, mode="text")
    assert parse_listing(text) == records
    assert [format_record(r) for r in parse_listing(text)] == text.splitlines()


@pytest.mark.parametrize("line, message", [
    ("add $t2, $t0", "takes 3 operands"),
    ("sw $t0, x, y", "takes 2 operands"),
    ("sub =, a, +", "bad operand '='"),
    ("move $t0, $q7", "unknown register '$q7'"),
    ("lw $t0, 70000", "does not fit in 16 bits"),
    ("lw $t0, 65536($sp)", "does not fit in 16 bits"),
])
def test_parse_line_rejects_bad_operands(line, message):
    with pytest.raises(ListingError) as ei:
        parse_line(line, lineno=2)
    assert "Line 2" in str(ei.value)
    assert message in str(ei.value)


def test_largest_immediate_accepted():
    rec = parse_line("lw $t0, 65535")
    assert rec.source_a == "65535"

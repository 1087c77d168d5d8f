"""Syntax and binding validation for expressions, run before compilation."""
from lark.exceptions import UnexpectedInput

from . import lexer, tokens


class ValidationError(Exception):
    """Exception raised for validation errors."""
    pass


class Validator:
    """Checks an expression against the full grammar and sanity-checks the manual map.

    The compiler itself is lenient (see postfix.to_postfix); the validator is
    where malformed input gets reported before any code is generated.
    """

    def __init__(self, text, manual_map=None):
        self.text = text
        self.manual_map = dict(manual_map) if manual_map else {}
        self.errors = []
        self.warnings = []

    def validate(self):
        """Run all checks. Returns warnings, raises ValidationError on errors."""
        toks = []
        try:
            toks = lexer.tokenize(self.text)
        except lexer.LexicalError as e:
            self.errors.append(str(e))

        if toks:
            self._validate_syntax()

        self._validate_bindings(toks)

        if self.errors:
            error_msg = "\n".join(self.errors)
            raise ValidationError(f"Validation failed:\n{error_msg}")

        return self.warnings

    def _validate_syntax(self):
        try:
            lexer.parser().parse(self.text)
        except UnexpectedInput as e:
            tok = getattr(e, 'token', None)
            if tok is None or tok.type == '$END':
                self.errors.append("Syntax error: unexpected end of expression")
            else:
                self.errors.append(f"Syntax error: unexpected '{tok}' at column {e.column}")

    def _validate_bindings(self, toks):
        referenced = {t.name for t in toks if isinstance(t, tokens.Identifier)}
        owners = {}
        for var, reg in self.manual_map.items():
            if not tokens.is_register(reg):
                self.errors.append(f"Manual binding {var} -> '{reg}': not a register")
                continue
            if reg in owners:
                self.warnings.append(f"Variables '{owners[reg]}' and '{var}' are both bound to {reg}")
            else:
                owners[reg] = var
            if reg in tokens.TEMP_REGISTERS:
                self.warnings.append(f"Binding {var} -> {reg} removes {reg} from the temporary pool")
            if var not in referenced:
                self.warnings.append(f"Manual binding for '{var}' is never used")

"""Central place for exprtree default settings."""

# Variable cells
DEFAULT_VARIABLE_VALUE: float = 0.0  # Value of a cell created on first reference

# Tokenizer
UNARY_MINUS: str = "-u"  # Synthesized lexeme for prefix minus
DECIMAL_SEPARATOR: str = "."

# Integer coercion for bitwise and shift operators
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1
INT64_BITS: int = 64

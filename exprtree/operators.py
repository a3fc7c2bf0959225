"""Operator table: lexeme -> kind, arity, precedence and associativity."""

import enum
from dataclasses import dataclass

from .defaults import UNARY_MINUS


class Op(enum.Enum):
    """Operator kinds understood by the evaluator."""

    # Unary
    NEGATE = "negate"
    LOGICAL_NOT = "logical_not"
    BITWISE_NOT = "bitwise_not"
    SQRT = "sqrt"

    # Binary
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    REMAINDER = "remainder"
    ADD = "add"
    SUBTRACT = "subtract"
    SHIFT_LEFT = "shift_left"
    SHIFT_RIGHT = "shift_right"
    LESS = "less"
    LESS_EQUAL = "less_equal"
    GREATER = "greater"
    GREATER_EQUAL = "greater_equal"
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    BITWISE_AND = "bitwise_and"
    BITWISE_XOR = "bitwise_xor"
    BITWISE_OR = "bitwise_or"
    LOGICAL_AND = "logical_and"
    LOGICAL_OR = "logical_or"
    ASSIGN = "assign"


@dataclass(frozen=True)
class OperatorInfo:
    """One row of the operator table.

    Attributes:
        lexeme: Source text of the operator ("-u" for prefix minus)
        op: Operator kind
        arity: 1 for prefix operators, 2 for infix operators
        precedence: Binding level, 1 binds tightest
        right_assoc: True for prefix operators and assignment
    """
    lexeme: str
    op: Op
    arity: int
    precedence: int
    right_assoc: bool = False

    @property
    def is_unary(self) -> bool:
        return self.arity == 1

    def yields_to(self, stacked: "OperatorInfo") -> bool:
        """True if *stacked* must be bound before this operator is pushed."""
        if stacked.precedence < self.precedence:
            return True
        return stacked.precedence == self.precedence and not self.right_assoc


def _table(*levels: tuple[tuple[str, Op], ...], arity: int, first: int, right_assoc: bool = False):
    rows = {}
    for offset, level in enumerate(levels):
        for lexeme, op in level:
            rows[lexeme] = OperatorInfo(lexeme, op, arity, first + offset, right_assoc)
    return rows


UNARY_OPERATORS: dict[str, OperatorInfo] = _table(
    ((UNARY_MINUS, Op.NEGATE), ("!", Op.LOGICAL_NOT), ("~", Op.BITWISE_NOT), ("√", Op.SQRT)),
    arity=1, first=1, right_assoc=True,
)

BINARY_OPERATORS: dict[str, OperatorInfo] = _table(
    (("*", Op.MULTIPLY), ("/", Op.DIVIDE), ("%", Op.REMAINDER)),
    (("+", Op.ADD), ("-", Op.SUBTRACT)),
    (("<<", Op.SHIFT_LEFT), (">>", Op.SHIFT_RIGHT)),
    (("<", Op.LESS), ("<=", Op.LESS_EQUAL), (">", Op.GREATER), (">=", Op.GREATER_EQUAL)),
    (("==", Op.EQUAL), ("!=", Op.NOT_EQUAL)),
    (("&", Op.BITWISE_AND),),
    (("^", Op.BITWISE_XOR),),
    (("|", Op.BITWISE_OR),),
    (("&&", Op.LOGICAL_AND),),
    (("||", Op.LOGICAL_OR),),
    arity=2, first=2,
)
BINARY_OPERATORS["="] = OperatorInfo("=", Op.ASSIGN, 2, 12, right_assoc=True)

OPERATORS: dict[str, OperatorInfo] = {**UNARY_OPERATORS, **BINARY_OPERATORS}

def by_length(table: dict[str, OperatorInfo]) -> tuple[str, ...]:
    """Lexemes of *table*, longest first, for maximal-munch matching."""
    return tuple(sorted(table, key=len, reverse=True))


_BY_LENGTH = by_length(OPERATORS)


def match_operator(text: str, pos: int, candidates: tuple[str, ...] = _BY_LENGTH) -> str | None:
    """Return the first of *candidates* found at text[pos].

    Candidates must be ordered longest first (see by_length).
    """
    for lexeme in candidates:
        if text.startswith(lexeme, pos):
            return lexeme
    return None

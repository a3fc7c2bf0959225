"""Expression tree nodes and their evaluation.

Every node exposes evaluate() -> float. Evaluation never raises: division
and remainder by zero give 0, and integer coercions of NaN or infinite
values are pinned to a fixed 64-bit value.
"""

import math
from typing import Callable, Iterator

from .defaults import DEFAULT_VARIABLE_VALUE, INT64_BITS, INT64_MAX, INT64_MIN
from .errors import BadAssignmentError
from .operators import Op

_UINT64_MASK = (1 << INT64_BITS) - 1


def to_int64(x: float) -> int:
    """Truncate toward zero to a signed 64-bit integer.

    NaN, infinities and values outside the int64 range map to INT64_MIN.
    """
    if not math.isfinite(x):
        return INT64_MIN
    n = int(x)
    if n < INT64_MIN or n > INT64_MAX:
        return INT64_MIN
    return n


def wrap_int64(n: int) -> int:
    """Wrap an arbitrary Python int to the signed 64-bit range."""
    n &= _UINT64_MASK
    return n - (1 << INT64_BITS) if n > INT64_MAX else n


def _shift_count(x: float) -> int:
    # Negative counts reinterpret as huge unsigned counts
    return to_int64(x) & _UINT64_MASK


def _shift_left(a: float, b: float) -> float:
    count = _shift_count(b)
    if count >= INT64_BITS:
        return 0.0
    return float(wrap_int64(to_int64(a) << count))


def _shift_right(a: float, b: float) -> float:
    n = to_int64(a)
    count = _shift_count(b)
    if count >= INT64_BITS:
        return -1.0 if n < 0 else 0.0
    return float(n >> count)


def _divide(a: float, b: float) -> float:
    if b == 0:
        return 0.0
    return a / b


def _remainder(a: float, b: float) -> float:
    """IEEE-754 remainder; 0 for a zero divisor, NaN for a non-finite dividend."""
    if b == 0:
        return 0.0
    if math.isinf(a):
        return math.nan
    return math.remainder(a, b)


def _sqrt(x: float) -> float:
    if x >= 0:
        return math.sqrt(x)
    return math.nan


UNARY_FUNCTIONS: dict[Op, Callable[[float], float]] = {
    Op.NEGATE: lambda x: -x,
    Op.LOGICAL_NOT: lambda x: float(x == 0),
    Op.BITWISE_NOT: lambda x: float(~to_int64(x)),
    Op.SQRT: _sqrt,
}

BINARY_FUNCTIONS: dict[Op, Callable[[float, float], float]] = {
    Op.MULTIPLY: lambda a, b: a * b,
    Op.DIVIDE: _divide,
    Op.REMAINDER: _remainder,
    Op.ADD: lambda a, b: a + b,
    Op.SUBTRACT: lambda a, b: a - b,
    Op.SHIFT_LEFT: _shift_left,
    Op.SHIFT_RIGHT: _shift_right,
    Op.LESS: lambda a, b: float(a < b),
    Op.LESS_EQUAL: lambda a, b: float(a <= b),
    Op.GREATER: lambda a, b: float(a > b),
    Op.GREATER_EQUAL: lambda a, b: float(a >= b),
    Op.EQUAL: lambda a, b: float(a == b),
    Op.NOT_EQUAL: lambda a, b: float(a != b),
    Op.BITWISE_AND: lambda a, b: float(to_int64(a) & to_int64(b)),
    Op.BITWISE_XOR: lambda a, b: float(to_int64(a) ^ to_int64(b)),
    Op.BITWISE_OR: lambda a, b: float(to_int64(a) | to_int64(b)),
    # Both operands are always evaluated: no short-circuit
    Op.LOGICAL_AND: lambda a, b: float(a != 0 and b != 0),
    Op.LOGICAL_OR: lambda a, b: float(a != 0 or b != 0),
}

# Divisor is evaluated first; a zero divisor skips the dividend entirely
_DIVISOR_FIRST = frozenset({Op.DIVIDE, Op.REMAINDER})


class Node:
    """Base class for expression tree nodes."""

    __slots__ = ()

    def evaluate(self) -> float:
        raise NotImplementedError

    def children(self) -> tuple["Node", ...]:
        return ()


class Constant(Node):
    """Immutable numeric literal."""

    __slots__ = ("value",)

    def __init__(self, value: float = 0.0):
        self.value = float(value)

    def evaluate(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"Constant({self.value!r})"


class Variable(Node):
    """Mutable numeric cell.

    Cells belong to the caller's name -> Variable mapping and may be shared
    by any number of trees; a tree only holds a reference.
    """

    __slots__ = ("value", "name")

    def __init__(self, value: float = DEFAULT_VARIABLE_VALUE, name: str | None = None):
        self.value = float(value)
        self.name = name

    def evaluate(self) -> float:
        return self.value

    def set(self, value: float) -> None:
        self.value = float(value)

    def __repr__(self) -> str:
        if self.name is None:
            return f"Variable({self.value!r})"
        return f"Variable({self.name}={self.value!r})"


class Unary(Node):
    """Prefix operator applied to one operand."""

    __slots__ = ("op", "operand", "_apply")

    def __init__(self, op: Op, operand: Node):
        self.op = op
        self.operand = operand
        self._apply = UNARY_FUNCTIONS[op]

    def evaluate(self) -> float:
        return self._apply(self.operand.evaluate())

    def children(self) -> tuple[Node, ...]:
        return (self.operand,)

    def __repr__(self) -> str:
        return f"Unary({self.op.value}, {self.operand!r})"


class Binary(Node):
    """Infix operator applied to two operands, evaluated left to right.

    Divide and remainder evaluate the divisor first. When it is zero the
    result is 0 and the dividend is never evaluated.

    Raises:
        BadAssignmentError: If op is ASSIGN and left is not a Variable
    """

    __slots__ = ("op", "left", "right", "_apply")

    def __init__(self, op: Op, left: Node, right: Node):
        if op is Op.ASSIGN and not isinstance(left, Variable):
            raise BadAssignmentError(f"Cannot assign to {left!r}")
        self.op = op
        self.left = left
        self.right = right
        self._apply = BINARY_FUNCTIONS.get(op)

    def evaluate(self) -> float:
        if self._apply is None:
            value = self.right.evaluate()
            self.left.set(value)
            return self.left.value
        if self.op in _DIVISOR_FIRST:
            divisor = self.right.evaluate()
            if divisor == 0:
                return 0.0
            return self._apply(self.left.evaluate(), divisor)
        a = self.left.evaluate()
        return self._apply(a, self.right.evaluate())

    def children(self) -> tuple[Node, ...]:
        return (self.left, self.right)

    def __repr__(self) -> str:
        return f"Binary({self.op.value}, {self.left!r}, {self.right!r})"


FuncImpl = Callable[[tuple[Node, ...], dict[str, float]], float]


class Call(Node):
    """A function bound to its arguments at one call site.

    The implementation receives the unevaluated argument nodes and a private
    environment dict that persists across evaluations of this node only.
    """

    __slots__ = ("impl", "args", "env", "name")

    def __init__(self, impl: FuncImpl, args: tuple[Node, ...], name: str | None = None):
        self.impl = impl
        self.args = tuple(args)
        self.env: dict[str, float] = {}
        self.name = name

    def evaluate(self) -> float:
        return float(self.impl(self.args, self.env))

    def children(self) -> tuple[Node, ...]:
        return self.args

    def __repr__(self) -> str:
        args = ", ".join(repr(arg) for arg in self.args)
        return f"Call({self.name or '?'}, [{args}])"


def walk(node: Node) -> Iterator[Node]:
    """Yield *node* and all of its descendants, depth first, left to right."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))

"""Function binding and the built-in function registry."""

import math
from typing import Callable

import numpy as np

from .errors import BadCallError
from .nodes import Call, FuncImpl, Node, Variable


class Function:
    """A named function implementation that can be bound to call sites.

    Attributes:
        impl: Called as impl(args, env) with the unevaluated argument nodes and
              the call site's private environment dict
        arity: Required number of arguments, or None for any number
        name: Display name used in reprs
    """

    def __init__(self, impl: FuncImpl, arity: int | None = None, name: str | None = None):
        self.impl = impl
        self.arity = arity
        self.name = name if name is not None else getattr(impl, '__name__', None)

    def bind(self, args: list[Node] | tuple[Node, ...]) -> Call:
        """Bind to one call site, giving it a fresh private environment."""
        if self.arity is not None and len(args) != self.arity:
            raise BadCallError(f"{self.name} expects {self.arity} args, got {len(args)}")
        return Call(self.impl, tuple(args), self.name)

    def __repr__(self) -> str:
        return f"Function({self.name}, arity={self.arity})"


def function(arity: int | None = None, name: str | None = None) -> Callable[[FuncImpl], Function]:
    """Decorator turning impl(args, env) into a Function.

    Example:
        @function(arity=1)
        def accum(args, env):
            env['total'] = env.get('total', 0.0) + args[0].evaluate()
            return env['total']
    """

    def wrap(impl: FuncImpl) -> Function:
        return Function(impl, arity, name)

    return wrap


def _last_argument(args, env):
    result = 0.0
    for arg in args:
        result = arg.evaluate()
    return result


# Implicit function for bare "(a, b, c)" groups: evaluates all, returns the last
LAST_ARGUMENT = Function(_last_argument, name='last')


# === Built-ins ===

def _pointwise(np_fn, nargs: int) -> Function:
    """Wrap a numpy kernel as a function of its evaluated arguments."""

    def impl(args, env):
        values = [arg.evaluate() for arg in args]
        with np.errstate(all='ignore'):
            return float(np_fn(*values))

    return Function(impl, nargs)


def _np_lerp(a, b, t):
    return a + t * (b - a)


def _np_smoothstep(edge0, edge1, x):
    if edge1 == edge0:
        return np.float64(x >= edge0)
    t = np.clip((x - edge0) / (edge1 - edge0), 0, 1)
    return t * t * (3 - 2 * t)


def _reduce(np_fn) -> Function:
    """Variadic reduction; zero arguments give 0."""

    def impl(args, env):
        if not args:
            return 0.0
        return float(np_fn([arg.evaluate() for arg in args]))

    return Function(impl)


def _if(args, env):
    # Only the selected branch is evaluated
    cond, then, otherwise = args
    if cond.evaluate() != 0:
        return then.evaluate()
    return otherwise.evaluate()


# Function registry: name -> Function
FUNCTIONS: dict[str, Function] = {
    # Pointwise math (1 arg)
    'sin': _pointwise(np.sin, 1),
    'cos': _pointwise(np.cos, 1),
    'tan': _pointwise(np.tan, 1),
    'exp': _pointwise(np.exp, 1),
    'log': _pointwise(np.log, 1),
    'log10': _pointwise(np.log10, 1),
    'abs': _pointwise(np.abs, 1),
    'floor': _pointwise(np.floor, 1),
    'ceil': _pointwise(np.ceil, 1),

    # Two-arg pointwise
    'pow': _pointwise(np.power, 2),
    'atan2': _pointwise(np.arctan2, 2),

    # Three-arg pointwise
    'clamp': _pointwise(np.clip, 3),
    'lerp': _pointwise(_np_lerp, 3),
    'smoothstep': _pointwise(_np_smoothstep, 3),

    # Reductions (any number of args)
    'min': _reduce(np.min),
    'max': _reduce(np.max),

    # Lazy conditional
    'if': Function(_if, 3),
}

for _name, _fn in FUNCTIONS.items():
    _fn.name = _name


# Built-in constants, seeded as ordinary variable cells
CONSTANTS: dict[str, float] = {
    'pi': math.pi,
    'e': math.e,
    'tau': math.tau,
}


def default_functions() -> dict[str, Function]:
    """Fresh copy of the built-in function registry."""
    return dict(FUNCTIONS)


def default_variables() -> dict[str, Variable]:
    """Fresh variable map pre-seeded with the built-in constants."""
    return {name: Variable(value, name) for name, value in CONSTANTS.items()}


def get_num_args(name: str) -> int | None:
    """Get expected number of arguments for a built-in function."""
    if name not in FUNCTIONS:
        return None
    return FUNCTIONS[name].arity

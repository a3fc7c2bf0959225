"""Test configuration for exprtree."""

import pytest

from exprtree import Function, Variable, function


@pytest.fixture
def variables():
    """A shared variable map, reused across parses within one test."""
    return {'x': Variable(5, 'x')}


@pytest.fixture
def functions():
    """Functions used by the formula scenarios."""

    @function(arity=3)
    def add3(args, env):
        return args[0].evaluate() + args[1].evaluate() + args[2].evaluate()

    @function(arity=1)
    def accum(args, env):
        env['total'] = env.get('total', 0.0) + args[0].evaluate()
        return env['total']

    return {
        'add3': add3,
        'accum': accum,
        'f': Function(lambda args, env: args[-1].evaluate() if args else 0.0, name='f'),
        'plusone': Function(lambda args, env: args[0].evaluate() + 1, arity=1, name='plusone'),
    }

"""Tests for function binding and the built-in function library."""

import math

import numpy as np
import pytest

from exprtree import (
    BadCallError,
    Function,
    default_functions,
    default_variables,
    function,
    get_variables,
    list_constants,
    list_functions,
    parse,
)
from exprtree.functions import FUNCTIONS, get_num_args


def calc(text, variables=None):
    return parse(text, variables if variables is not None else default_variables(),
                 default_functions()).evaluate()


class TestFunctionBinding:
    """Test Function and the function decorator."""

    def test_decorator_uses_function_name(self):
        @function(arity=2)
        def hypot(args, env):
            return math.hypot(args[0].evaluate(), args[1].evaluate())

        assert isinstance(hypot, Function)
        assert hypot.name == 'hypot'
        assert hypot.arity == 2

    def test_decorator_name_override(self):
        @function(name='twice')
        def impl(args, env):
            return 2 * args[0].evaluate()

        assert impl.name == 'twice'

    def test_variadic_accepts_any_count(self):
        f = Function(lambda args, env: len(args))
        assert f.bind([]).evaluate() == 0

    def test_arity_checked_at_bind(self):
        f = Function(lambda args, env: 0, arity=2, name='f')
        with pytest.raises(BadCallError, match="f expects 2 args, got 1"):
            parse("f(1)", functions={'f': f})

    def test_lazy_arguments(self):
        """Implementations decide which arguments get evaluated."""
        variables = {}

        @function(arity=2)
        def first(args, env):
            return args[0].evaluate()

        tree = parse("first(1, x = 5)", variables, {'first': first})
        assert tree.evaluate() == 1
        assert variables['x'].value == 0


class TestBuiltinFunctions:
    """Test the built-in functions."""

    def test_sin(self):
        assert calc("sin(pi / 2)") == pytest.approx(1.0)

    def test_cos(self):
        assert calc("cos(pi)") == pytest.approx(-1.0)

    def test_tan(self):
        assert calc("tan(pi / 4)") == pytest.approx(1.0)

    def test_exp_log(self):
        assert calc("log(exp(2))") == pytest.approx(2.0)

    def test_log10(self):
        assert calc("log10(1000)") == pytest.approx(3.0)

    def test_abs(self):
        assert calc("abs(-3)") == 3

    def test_floor_ceil(self):
        assert calc("floor(2.7)") == 2
        assert calc("ceil(2.1)") == 3
        assert calc("floor(-2.5)") == -3

    def test_pow(self):
        assert calc("pow(2, 10)") == 1024

    def test_atan2(self):
        assert calc("atan2(1, 1)") == pytest.approx(np.pi / 4)

    def test_clamp(self):
        assert calc("clamp(-0.5, 0, 1)") == 0
        assert calc("clamp(0.5, 0, 1)") == 0.5
        assert calc("clamp(1.5, 0, 1)") == 1

    def test_lerp(self):
        assert calc("lerp(0, 10, 0.5)") == pytest.approx(5.0)
        assert calc("lerp(5, 15, 0)") == pytest.approx(5.0)
        assert calc("lerp(5, 15, 1)") == pytest.approx(15.0)

    def test_smoothstep(self):
        assert calc("smoothstep(0, 1, 0)") == 0
        assert calc("smoothstep(0, 1, 0.5)") == pytest.approx(0.5)
        assert calc("smoothstep(0, 1, 2)") == 1

    def test_smoothstep_equal_edges(self):
        assert calc("smoothstep(1, 1, 0.5)") == 0
        assert calc("smoothstep(1, 1, 2)") == 1

    def test_min_max(self):
        assert calc("min(5, 2, 8)") == 2
        assert calc("max(5, 2, 8)") == 8
        assert calc("max(3)") == 3

    def test_min_max_without_arguments(self):
        assert calc("min()") == 0
        assert calc("max()") == 0

    def test_results_are_plain_floats(self):
        assert type(calc("sin(1)")) is float
        assert type(calc("max(1, 2)")) is float

    def test_if_selects_branch(self):
        assert calc("if(1, 10, 20)") == 10
        assert calc("if(0, 10, 20)") == 20

    def test_if_only_evaluates_selected_branch(self):
        variables = {}
        calc("if(1, a = 1, b = 1)", variables)
        assert variables['a'].value == 1
        assert variables['b'].value == 0

    def test_wrong_arg_count(self):
        with pytest.raises(BadCallError, match="expects"):
            calc("sin(1, 2)")


class TestBuiltinEdgeCases:
    """Built-ins never raise on degenerate input."""

    def test_log_zero(self):
        assert calc("log(0)") == -math.inf

    def test_log_negative(self):
        assert math.isnan(calc("log(-1)"))

    def test_pow_overflow(self):
        assert calc("pow(10, 400)") == math.inf

    def test_no_floating_point_warnings(self, recwarn):
        calc("log(0) + log(-1) + pow(0, -1)")
        assert len(recwarn) == 0


class TestConstants:
    """Test seeded constant cells."""

    def test_constants(self):
        assert calc("pi") == pytest.approx(np.pi)
        assert calc("e") == pytest.approx(np.e)
        assert calc("tau") == pytest.approx(2 * np.pi)

    def test_constants_are_reassignable_cells(self):
        variables = default_variables()
        calc("pi = 3", variables)
        assert variables['pi'].value == 3
        # Fresh maps are unaffected
        assert default_variables()['pi'].value == pytest.approx(np.pi)

    def test_default_functions_is_a_copy(self):
        functions = default_functions()
        functions['custom'] = Function(lambda args, env: 1)
        assert 'custom' not in FUNCTIONS


class TestListHelpers:
    """Test helper functions."""

    def test_list_functions(self):
        funcs = list_functions()
        assert funcs['sin'] == 1
        assert funcs['clamp'] == 3
        assert funcs['min'] is None

    def test_list_functions_complete(self):
        expected = {
            'sin', 'cos', 'tan', 'exp', 'log', 'log10', 'abs', 'floor', 'ceil',
            'pow', 'atan2', 'clamp', 'lerp', 'smoothstep', 'min', 'max', 'if',
        }
        assert set(list_functions()) == expected

    def test_list_constants(self):
        assert set(list_constants()) == {'pi', 'e', 'tau'}

    def test_get_num_args(self):
        assert get_num_args('pow') == 2
        assert get_num_args('nope') is None

    def test_builtin_names(self):
        assert FUNCTIONS['abs'].name == 'abs'
        assert repr(FUNCTIONS['pow']) == "Function(pow, arity=2)"


class TestGetVariables:
    """Test variable extraction."""

    def test_single_variable(self):
        assert get_variables("x") == {'x'}

    def test_multiple_variables(self):
        assert get_variables("x + y * z") == {'x', 'y', 'z'}

    def test_excludes_functions(self):
        assert get_variables("sin(x) + cos(y)", default_functions()) == {'x', 'y'}

    def test_repeated_variable(self):
        assert get_variables("x + x * x") == {'x'}

    def test_assignment_target(self):
        assert get_variables("a = b, c") == {'a', 'b', 'c'}

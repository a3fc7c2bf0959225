"""Arithmetic expression trees: parse once, evaluate many times.

Parse formulas with numbers, variables, function calls and C-like operators
into a tree whose evaluate() is a cheap tree walk. Variable cells live in a
caller-owned map, so values persist across evaluations and across parses.

Example:
    from exprtree import parse, Variable

    variables = {'x': Variable(5)}
    tree = parse("y = x * 2, y + 1", variables)
    tree.evaluate()           # 11.0
    variables['x'].set(10)
    tree.evaluate()           # 21.0
    variables['y'].value      # 20.0
"""

from collections.abc import Mapping, MutableMapping

from .errors import (
    ExprError,
    ParseError,
    ParenthesisMismatchError,
    BadCallError,
    BadAssignmentError,
    BadOperatorError,
    OperandMissingError,
    OperatorMissingError,
    UnexpectedNumberError,
    UnexpectedIdentifierError,
)
from .functions import (
    CONSTANTS,
    FUNCTIONS,
    Function,
    default_functions,
    default_variables,
    function,
)
from .nodes import Binary, Call, Constant, Node, Unary, Variable, walk
from .parser import parse
from .tokenizer import Token, TokenKind, tokenize


def evaluate(
    text: str,
    variables: MutableMapping[str, Variable] | None = None,
    functions: Mapping[str, Function] | None = None,
) -> float:
    """Parse an expression and evaluate it once.

    Args:
        text: Expression string like "2 + 3 * 4"
        variables: Optional shared name -> Variable map
        functions: Optional name -> Function map

    Returns:
        The value of the expression

    Raises:
        ParseError: If the expression is malformed
    """
    return parse(text, variables, functions).evaluate()


def get_variables(text: str, functions: Mapping[str, Function] | None = None) -> set[str]:
    """Get the set of variable names referenced in an expression.

    Useful for knowing which cells a formula reads or writes.

    Args:
        text: Expression string
        functions: Names in this map are calls, not variables

    Returns:
        Set of variable names
    """
    tree = parse(text, {}, functions)
    return {node.name for node in walk(tree) if isinstance(node, Variable)}


def list_functions() -> dict[str, int | None]:
    """List built-in functions and their argument counts (None: any)."""
    return {name: fn.arity for name, fn in FUNCTIONS.items()}


def list_constants() -> dict[str, float]:
    """List built-in constants."""
    return dict(CONSTANTS)


__all__ = [
    'parse',
    'evaluate',
    'tokenize',
    'get_variables',
    'list_functions',
    'list_constants',
    'default_functions',
    'default_variables',
    'function',
    # Tree
    'Node',
    'Constant',
    'Variable',
    'Unary',
    'Binary',
    'Call',
    'Function',
    'Token',
    'TokenKind',
    'walk',
    # Errors
    'ExprError',
    'ParseError',
    'ParenthesisMismatchError',
    'BadCallError',
    'BadAssignmentError',
    'BadOperatorError',
    'OperandMissingError',
    'OperatorMissingError',
    'UnexpectedNumberError',
    'UnexpectedIdentifierError',
]

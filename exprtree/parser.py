"""Parse formula text into an expression tree.

Operator-precedence parsing with two stacks: a marker stack of operators,
pending calls and open groups, and a value stack of tree nodes where None
marks the start of an argument list or group.
"""

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass

from .defaults import DEFAULT_VARIABLE_VALUE
from .errors import BadCallError, BadOperatorError, OperandMissingError, ParenthesisMismatchError
from .functions import LAST_ARGUMENT, Function
from .nodes import Binary, Constant, Node, Unary, Variable
from .operators import OPERATORS, OperatorInfo
from .tokenizer import CLOSE, OPEN, Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


class _Group:
    """Marker for an open parenthesis."""

    def __repr__(self) -> str:
        return "("


GROUP = _Group()


@dataclass(frozen=True)
class PendingCall:
    """Marker for a function name waiting for its argument list."""
    name: str
    function: Function


class Parser:
    """Builds one expression tree from a token sequence.

    Args:
        variables: Name -> Variable map; unknown names are added to it
        functions: Name -> Function map (read only)
    """

    def __init__(self, variables: MutableMapping[str, Variable], functions: Mapping[str, Function]):
        self.variables = variables
        self.functions = functions
        self.markers: list[OperatorInfo | PendingCall | _Group] = []
        self.values: list[Node | None] = []

    def parse(self, tokens: list[Token]) -> Node:
        # The implicit outer group lets "a, b" work like "(a, b)"
        expect_args = False
        for token in [OPEN, *tokens, CLOSE]:
            if token.kind is TokenKind.OPEN:
                expect_args = False
                self.markers.append(GROUP)
                self.values.append(None)
            elif expect_args:
                raise BadCallError(f"Expected '(' after {self.markers[-1].name}, got {token.text!r}")
            elif token.kind is TokenKind.CLOSE:
                self._close_group()
            elif token.kind is TokenKind.COMMA:
                self._fold_to_group()
            elif token.kind is TokenKind.NUMBER:
                self.values.append(Constant(float(token.text)))
            elif token.kind is TokenKind.IDENTIFIER:
                if token.text in self.functions:
                    self.markers.append(PendingCall(token.text, self.functions[token.text]))
                    expect_args = True
                else:
                    self.values.append(self._variable(token.text))
            else:
                self._push_operator(token.text)

        while self.markers:
            marker = self.markers.pop()
            if not isinstance(marker, OperatorInfo):
                raise ParenthesisMismatchError("Unclosed '('")
            self.values.append(self._bind(marker))

        if not self.values:
            return Constant(0.0)
        return self.values[-1]

    def _variable(self, name: str) -> Variable:
        var = self.variables.get(name)
        if var is None:
            logger.debug("Creating variable %r", name)
            var = Variable(DEFAULT_VARIABLE_VALUE, name)
            self.variables[name] = var
        return var

    def _push_operator(self, lexeme: str) -> None:
        info = OPERATORS.get(lexeme)
        if info is None:
            raise BadOperatorError(f"Unknown operator: {lexeme}")
        while self.markers:
            top = self.markers[-1]
            if not isinstance(top, OperatorInfo) or not info.yields_to(top):
                break
            self.markers.pop()
            self.values.append(self._bind(top))
        self.markers.append(info)

    def _fold_to_group(self) -> None:
        """Bind pending operators down to the innermost open group."""
        while self.markers and self.markers[-1] is not GROUP:
            self.values.append(self._bind(self.markers.pop()))
        if not self.markers:
            raise ParenthesisMismatchError("Unmatched ')' or ','")

    def _close_group(self) -> None:
        self._fold_to_group()
        self.markers.pop()
        if self.markers and isinstance(self.markers[-1], PendingCall):
            call = self.markers.pop()
            self.values.append(call.function.bind(self._arguments()))
            return

        args = self._arguments()
        if not args:
            self.values.append(Constant(0.0))
        elif len(args) == 1:
            self.values.append(args[0])
        else:
            self.values.append(LAST_ARGUMENT.bind(args))

    def _arguments(self) -> list[Node]:
        """Pop values back to (and including) the innermost boundary."""
        args = []
        while self.values and self.values[-1] is not None:
            args.append(self.values.pop())
        if self.values:
            self.values.pop()
        args.reverse()
        return args

    def _pop_operand(self) -> Node | None:
        return self.values.pop() if self.values else None

    def _bind(self, marker: OperatorInfo) -> Node:
        if marker.is_unary:
            operand = self._pop_operand()
            if operand is None:
                raise OperandMissingError(f"Missing operand for {marker.lexeme!r}")
            return Unary(marker.op, operand)
        right = self._pop_operand()
        left = self._pop_operand()
        if left is None or right is None:
            raise OperandMissingError(f"Missing operand for {marker.lexeme!r}")
        return Binary(marker.op, left, right)


def parse(
    text: str,
    variables: MutableMapping[str, Variable] | None = None,
    functions: Mapping[str, Function] | None = None,
) -> Node:
    """Parse formula text into an evaluable expression tree.

    Args:
        text: Formula like "x = 2 + 3 * (x / (42 + plusone(x))), x"
        variables: Name -> Variable map shared across parses. Unknown names
                   are inserted with value 0. Defaults to a fresh dict.
        functions: Name -> Function map. Defaults to no functions.

    Returns:
        Root node; call evaluate() on it as often as needed

    Raises:
        ParseError: Any of its subclasses, on malformed input
    """
    if variables is None:
        variables = {}
    if functions is None:
        functions = {}
    tree = Parser(variables, functions).parse(tokenize(text))
    logger.debug("Parsed %r into %r", text, tree)
    return tree

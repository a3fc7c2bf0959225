"""Expression parsing errors."""


class ExprError(Exception):
    """Base class for expression errors."""
    pass


class ParseError(ExprError):
    """Failed to parse expression."""
    pass


class ParenthesisMismatchError(ParseError):
    """Unbalanced or misplaced parenthesis."""
    pass


class BadCallError(ParseError):
    """Function name not followed by '(' or called with the wrong arguments."""
    pass


class BadAssignmentError(ParseError):
    """Left-hand side of '=' is not a plain variable."""
    pass


class BadOperatorError(ParseError):
    """Operator-position characters match no known operator."""
    pass


class OperandMissingError(ParseError):
    """An operator has fewer operands than it needs."""
    pass


class UnexpectedNumberError(OperandMissingError):
    """Number literal where an operator was expected."""
    pass


class UnexpectedIdentifierError(OperandMissingError):
    """Identifier where an operator was expected."""
    pass


class OperatorMissingError(ParseError):
    """Reserved: adjacent values are reported as UnexpectedNumberError or
    UnexpectedIdentifierError instead."""
    pass

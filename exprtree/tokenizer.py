"""Split formula text into tokens."""

import enum
from dataclasses import dataclass

from .defaults import DECIMAL_SEPARATOR, UNARY_MINUS
from .errors import (
    BadOperatorError,
    OperandMissingError,
    UnexpectedIdentifierError,
    UnexpectedNumberError,
)
from .operators import OPERATORS, OperatorInfo, by_length, match_operator


class TokenKind(enum.Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    OPEN = "("
    CLOSE = ")"
    COMMA = ","


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


OPEN = Token(TokenKind.OPEN, "(")
CLOSE = Token(TokenKind.CLOSE, ")")
COMMA = Token(TokenKind.COMMA, ",")

_PUNCTUATION = {"(": OPEN, ")": CLOSE, ",": COMMA}


def _scan_number(text: str, pos: int) -> int:
    """Return the end of the number literal starting at *pos*."""
    seen_separator = False
    end = pos
    while end < len(text):
        c = text[end]
        if c == DECIMAL_SEPARATOR and not seen_separator:
            seen_separator = True
        elif not c.isdecimal():
            break
        end += 1
    return end


def _scan_identifier(text: str, pos: int) -> int:
    end = pos + 1
    while end < len(text) and (text[end].isalnum() or text[end] == "_"):
        end += 1
    return end


def tokenize(text: str, operators: dict[str, OperatorInfo] | None = None) -> list[Token]:
    """Tokenize formula text.

    A single flag tracks whether a value (number, identifier, prefix
    operator or '(') is expected next. It decides whether '-' is prefix or
    infix and rejects two adjacent values.

    Args:
        text: Formula text
        operators: Operator table to match against (default: all operators)

    Returns:
        Tokens in source order. Prefix minus is tagged with the "-u" lexeme.

    Raises:
        UnexpectedNumberError: Number literal where an operator was expected
        UnexpectedIdentifierError: Identifier where an operator was expected
        OperandMissingError: Infix operator where a value was expected
        BadOperatorError: Characters that match no known operator
    """
    if operators is None:
        operators = OPERATORS
    candidates = by_length(operators)
    tokens = []
    expect_value = True
    pos = 0

    while pos < len(text):
        c = text[pos]

        if c.isspace():
            pos += 1
            continue

        if c.isdecimal():
            if not expect_value:
                raise UnexpectedNumberError(f"Unexpected number at {text[pos:]!r}")
            end = _scan_number(text, pos)
            tokens.append(Token(TokenKind.NUMBER, text[pos:end]))
            expect_value = False
        elif c.isalpha():
            if not expect_value:
                raise UnexpectedIdentifierError(f"Unexpected identifier at {text[pos:]!r}")
            end = _scan_identifier(text, pos)
            tokens.append(Token(TokenKind.IDENTIFIER, text[pos:end]))
            expect_value = False
        elif c in _PUNCTUATION:
            end = pos + 1
            tokens.append(_PUNCTUATION[c])
            expect_value = c != ")"
        elif c == "-":
            end = pos + 1
            lexeme = UNARY_MINUS if expect_value else "-"
            tokens.append(Token(TokenKind.OPERATOR, lexeme))
            expect_value = True
        else:
            lexeme = match_operator(text, pos, candidates)
            if lexeme is None:
                raise BadOperatorError(f"Unknown operator at {text[pos:]!r}")
            if expect_value and not operators[lexeme].is_unary:
                raise OperandMissingError(f"Missing operand before {lexeme!r}")
            end = pos + len(lexeme)
            tokens.append(Token(TokenKind.OPERATOR, lexeme))
            expect_value = True

        pos = end

    return tokens

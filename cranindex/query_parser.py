"""
Boolean query parser
Builds an expression tree from AND/OR/NOT queries with grouping
"""

import re
from typing import List, Optional

from .core import ParseError
from .expression import (
    BINARY_OPERATORS, NOT, BinaryExpression, Expression, Identifier, UnaryExpression
)

_IDENTIFIER_RE = re.compile(r'^[a-z]+$')
_PAREN_RE = re.compile(r'([()])')


class BooleanExprParser:
    """
    Operator-precedence parser for boolean queries.
    Precedence: NOT > AND > OR, binary operators are left-associative.

    The query is read as whitespace-delimited tokens; parentheses are
    split off the words they touch. Errors carry the token position.
    """

    def __init__(self):
        self.tokens: List[str] = []
        self.pos = 0

    def parse(self, query: str) -> Expression:
        """Parse a boolean query into an expression tree"""
        self.tokens = self._tokenize(query)
        self.pos = 0

        if not self.tokens:
            raise ParseError("Empty query", 0)

        node = self._parse_expression()

        token = self._current_token()
        if token == ')':
            raise ParseError("Unmatched closing parenthesis", self.pos, token)
        if token is not None:
            raise ParseError(f"Expected operator, got {token!r}", self.pos, token)

        return node

    @staticmethod
    def _tokenize(query: str) -> List[str]:
        return _PAREN_RE.sub(r' \1 ', query).split()

    def _current_token(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _gobble_binary_op(self) -> Optional[str]:
        """Consume and return AND/OR if it is the current token"""
        token = self._current_token()
        if token in BINARY_OPERATORS:
            self.pos += 1
            return token
        return None

    def _parse_expression(self) -> Expression:
        """
        Expr := Term (BinOp Term)*

        (node, operator) pairs go on an explicit stack; the three topmost
        entries are reduced whenever the incoming operator does not bind
        tighter than the operator already on the stack.
        """
        left = self._parse_term()
        op = self._gobble_binary_op()
        if op is None:
            return left

        stack = [left, op, self._parse_term()]

        while True:
            op = self._gobble_binary_op()
            if op is None:
                break
            prec = BINARY_OPERATORS[op]

            while len(stack) > 2 and prec <= BINARY_OPERATORS[stack[-2]]:
                right = stack.pop()
                biop = stack.pop()
                left = stack.pop()
                stack.append(BinaryExpression(biop, left, right))

            stack.append(op)
            stack.append(self._parse_term())

        i = len(stack) - 1
        node = stack[i]
        while i > 1:
            node = BinaryExpression(stack[i - 1], stack[i - 2], node)
            i -= 2

        return node

    def _parse_term(self) -> Expression:
        """Term := Identifier | '(' Expr ')' | 'NOT' Term"""
        token = self._current_token()

        if token is None:
            raise ParseError("Expected expression, got end of query", self.pos)

        if _IDENTIFIER_RE.match(token):
            self.pos += 1
            return Identifier(token)

        if token == '(':
            self.pos += 1
            node = self._parse_expression()
            closing = self._current_token()
            if closing != ')':
                if closing is None:
                    raise ParseError("Unclosed parenthesis", self.pos)
                raise ParseError(f"Expected operator or ')', got {closing!r}",
                                 self.pos, closing)
            self.pos += 1
            return node

        if token == NOT:
            self.pos += 1
            return UnaryExpression(NOT, self._parse_term())

        if token in BINARY_OPERATORS:
            raise ParseError(f"Expected expression, got operator {token}", self.pos, token)

        if token == ')':
            raise ParseError("Unexpected closing parenthesis", self.pos, token)

        raise ParseError(f"Invalid token {token!r}", self.pos, token)


def parse(query: str) -> Expression:
    return BooleanExprParser().parse(query)

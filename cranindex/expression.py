"""
Boolean query expression tree
"""

from dataclasses import dataclass
from typing import Union

NOT = 'NOT'
AND = 'AND'
OR = 'OR'

BINARY_OPERATORS = {OR: 1, AND: 2}


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class UnaryExpression:
    op: str
    arg: 'Expression'


@dataclass(frozen=True)
class BinaryExpression:
    op: str
    left: 'Expression'
    right: 'Expression'


Expression = Union[Identifier, UnaryExpression, BinaryExpression]


def to_sexpr(node) -> str:
    """Render a tree as e.g. OR(AND(a, b), NOT(c))"""
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, UnaryExpression):
        return f"{node.op}({to_sexpr(node.arg)})"
    if isinstance(node, BinaryExpression):
        return f"{node.op}({to_sexpr(node.left)}, {to_sexpr(node.right)})"
    return repr(node)

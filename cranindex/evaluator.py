"""
Boolean evaluator
Exact set evaluation of expression trees over sorted postings
"""

from typing import Callable, List, Optional, Sequence

from .core import EvaluationError
from .expression import AND, NOT, OR, BinaryExpression, Identifier, UnaryExpression
from .index import InvertedIndex


def intersect(a: Sequence[int], b: Sequence[int]) -> List[int]:
    """
    Intersect two sorted duplicate-free sequences.
    Two pointers, advancing past the smaller element.
    """
    result = []
    i = j = 0
    while i < len(a) and j < len(b):
        if a[i] < b[j]:
            i += 1
        elif a[i] > b[j]:
            j += 1
        else:
            result.append(a[i])
            i += 1
            j += 1
    return result


def union(a: Sequence[int], b: Sequence[int]) -> List[int]:
    """Union of two sorted duplicate-free sequences"""
    result = []
    i = j = 0
    while i < len(a) and j < len(b):
        if a[i] < b[j]:
            result.append(a[i])
            i += 1
        elif a[i] > b[j]:
            result.append(b[j])
            j += 1
        else:
            result.append(a[i])
            i += 1
            j += 1
    result.extend(a[i:])
    result.extend(b[j:])
    return result


def complement(a: Sequence[int], universe: Sequence[int]) -> List[int]:
    """Ids of `universe` missing from `a`; both sorted"""
    result = []
    i = 0
    for doc_id in universe:
        while i < len(a) and a[i] < doc_id:
            i += 1
        if i < len(a) and a[i] == doc_id:
            continue
        result.append(doc_id)
    return result


def evaluate(node,
             index: InvertedIndex,
             universe: Optional[Sequence[int]] = None,
             stem: Optional[Callable[[str], str]] = None) -> List[int]:
    """
    Evaluate an expression tree against the index.

    Args:
        node: Tree produced by the query parser
        index: Inverted index to look terms up in
        universe: Sorted ids used for NOT, defaults to every indexed document
        stem: Applied to identifier names before lookup

    Returns:
        Sorted list of matching document ids
    """
    if universe is None:
        universe = index.universe

    if isinstance(node, Identifier):
        term = stem(node.name) if stem else node.name
        return index.get_doc_ids(term)

    if isinstance(node, UnaryExpression):
        if node.op != NOT:
            raise EvaluationError(f"Unknown unary operator: {node.op!r}")
        return complement(evaluate(node.arg, index, universe, stem), universe)

    if isinstance(node, BinaryExpression):
        if node.op == AND:
            merge = intersect
        elif node.op == OR:
            merge = union
        else:
            raise EvaluationError(f"Unknown binary operator: {node.op!r}")
        return merge(evaluate(node.left, index, universe, stem),
                     evaluate(node.right, index, universe, stem))

    raise EvaluationError(f"Unknown node type: {type(node).__name__}")

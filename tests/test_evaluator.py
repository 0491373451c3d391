import random

import pytest

from cranindex.core import EvaluationError
from cranindex.evaluator import complement, evaluate, intersect, union
from cranindex.expression import BinaryExpression, Identifier, UnaryExpression
from cranindex.query_parser import parse


def _random_sorted(rng, size):
    return sorted(rng.sample(range(50), size))


@pytest.mark.parametrize("seed", range(20))
def test_set_operations_match_python_sets(seed):
    rng = random.Random(seed)
    a = _random_sorted(rng, rng.randint(0, 20))
    b = _random_sorted(rng, rng.randint(0, 20))

    assert intersect(a, b) == sorted(set(a) & set(b))
    assert union(a, b) == sorted(set(a) | set(b))


@pytest.mark.parametrize(
    "a, b, expected_and, expected_or",
    [
        ([], [], [], []),
        ([1, 2, 3], [], [], [1, 2, 3]),
        ([1, 3, 5], [2, 4, 6], [], [1, 2, 3, 4, 5, 6]),
        ([1, 2, 3], [2, 3, 4], [2, 3], [1, 2, 3, 4]),
    ],
)
def test_set_operations_edges(a, b, expected_and, expected_or):
    assert intersect(a, b) == expected_and
    assert union(a, b) == expected_or
    assert intersect(b, a) == expected_and
    assert union(b, a) == expected_or


def test_complement():
    assert complement([2, 4], [1, 2, 3, 4, 5]) == [1, 3, 5]
    assert complement([], [1, 2]) == [1, 2]
    assert complement([1, 2], [1, 2]) == []


def test_identifier_lookup(small_index):
    assert evaluate(Identifier("cat"), small_index) == [1]
    assert evaluate(Identifier("zebra"), small_index) == []


def test_small_corpus_and_or(small_index):
    cat, dog = Identifier("cat"), Identifier("dog")
    assert evaluate(BinaryExpression("AND", cat, dog), small_index) == []
    assert evaluate(BinaryExpression("OR", cat, dog), small_index) == [1, 2]


def test_not_uses_universe(cranfield_index):
    assert evaluate(parse("NOT cat"), cranfield_index) == [2]
    assert evaluate(parse("NOT cat"), cranfield_index, universe=[1, 2, 3, 4]) == [2, 4]


@pytest.mark.parametrize("query", ["cat", "dog AND cat", "sat OR ran", "NOT dog", "zebra"])
def test_double_negation(cranfield_index, query):
    node = parse(query)
    double = UnaryExpression("NOT", UnaryExpression("NOT", node))
    assert evaluate(double, cranfield_index) == evaluate(node, cranfield_index)


@pytest.mark.parametrize(
    "query, expected",
    [
        ("cat AND dog", [3]),
        ("cat OR dog", [1, 2, 3]),
        ("cat AND NOT dog", [1]),
        ("( sat OR ran ) AND NOT cat", [2]),
        ("sat OR ran AND dog", [1, 2]),
        ("zebra OR sat", [1]),
    ],
)
def test_parsed_queries(cranfield_index, query, expected):
    assert evaluate(parse(query), cranfield_index) == expected


def test_identifier_is_stemmed(cranfield_index):
    assert evaluate(Identifier("cats"), cranfield_index, stem=lambda t: t.rstrip("s")) == [1, 3]


@pytest.mark.parametrize(
    "node",
    [
        UnaryExpression("MAYBE", Identifier("cat")),
        BinaryExpression("XOR", Identifier("cat"), Identifier("dog")),
        "cat",
        None,
        BinaryExpression("AND", Identifier("cat"), {"type": "Literal"}),
    ],
)
def test_invalid_tree(cranfield_index, node):
    with pytest.raises(EvaluationError):
        evaluate(node, cranfield_index)

"""
cranindex: inverted index with boolean and TF-IDF retrieval
Builds an index over the Cranfield collection and evaluates queries against it
"""

from .core import (
    AggregateMode, Compression, QueryMode, CompressionUtils,
    CranIndexError, CorpusFormatError, ParseError, EvaluationError
)
from .config import IndexConfig
from .preprocessor import TextPreprocessor, load_stopwords
from .corpus import Document, Query, read_collection, read_queries, read_relevance
from .index import Posting, IndexEntry, InvertedIndex
from .expression import Identifier, UnaryExpression, BinaryExpression, to_sexpr
from .query_parser import BooleanExprParser, parse
from .evaluator import intersect, union, complement, evaluate
from .ranking import rank
from .query_processor import QueryProcessor
from .index_builder import IndexAccumulator, IndexBuilder, build_index
from .metrics import MetricsCollector, Reporter, evaluate_run

__version__ = "1.0.0"
__all__ = [
    "AggregateMode",
    "Compression",
    "QueryMode",
    "CompressionUtils",
    "CranIndexError",
    "CorpusFormatError",
    "ParseError",
    "EvaluationError",
    "IndexConfig",
    "TextPreprocessor",
    "load_stopwords",
    "Document",
    "Query",
    "read_collection",
    "read_queries",
    "read_relevance",
    "Posting",
    "IndexEntry",
    "InvertedIndex",
    "Identifier",
    "UnaryExpression",
    "BinaryExpression",
    "to_sexpr",
    "BooleanExprParser",
    "parse",
    "intersect",
    "union",
    "complement",
    "evaluate",
    "rank",
    "QueryProcessor",
    "IndexAccumulator",
    "IndexBuilder",
    "build_index",
    "MetricsCollector",
    "Reporter",
    "evaluate_run",
]

"""
Query processing module
Handles boolean and ranked query processing against a built index
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Sequence, Union

from .core import QueryMode
from .evaluator import evaluate
from .index import InvertedIndex
from .preprocessor import TextPreprocessor
from .query_parser import BooleanExprParser
from .ranking import rank

logger = logging.getLogger(__name__)


class QueryProcessor:
    """
    Handles boolean and ranked query processing.
    Holds no per-query state, so one instance can serve many threads.
    """

    def __init__(self, index: InvertedIndex,
                 preprocessor: TextPreprocessor,
                 top_k: int = 30,
                 query_mode: QueryMode = QueryMode.RANKED,
                 score_threshold: float = 0.40):
        self.index = index
        self.preprocessor = preprocessor
        self.top_k = top_k
        self.query_mode = query_mode
        self.score_threshold = score_threshold

    def process_query(self, query: str) -> Union[List[int], List[Dict]]:
        """Process a query in the configured query mode"""
        if self.query_mode == QueryMode.BOOLEAN:
            return self.process_boolean_query(query)
        return self.process_ranked_query(query)

    def process_boolean_query(self, query: str) -> List[int]:
        """Process boolean query with AND, OR, NOT operators"""
        tree = BooleanExprParser().parse(query)
        result = evaluate(tree, self.index, self.index.universe, self.preprocessor.stem)
        logger.debug("Boolean query %r matched %d documents", query, len(result))
        return result

    def rank_query(self, query: str):
        """All (doc_id, score) pairs for a free-text query"""
        terms = self.preprocessor.preprocess(query)
        return rank(terms, self.index, self.index.num_docs, self.index.doc_norms)

    def process_ranked_query(self, query: str, top_k: int = None) -> List[Dict]:
        """Process ranked query and return top-k documents with scores"""
        if top_k is None:
            top_k = self.top_k
        results = self.rank_query(query)[:top_k]

        # Enrich results with titles from metadata
        show_results = []
        for doc_id, score in results:
            metadata = self.index.doc_metadata.get(doc_id, {})
            show_results.append({
                "doc_id": doc_id,
                "title": metadata.get("title", ""),
                "authors": metadata.get("authors", ""),
                "score": float(score),
            })

        return show_results

    def batch_ranked(self, queries: Sequence[str], workers: int = 1) -> List[List[Dict]]:
        """Run independent ranked queries, in parallel when workers > 1"""
        if workers <= 1 or len(queries) < 2:
            return [self.process_ranked_query(query) for query in queries]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.process_ranked_query, queries))

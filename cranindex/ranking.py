"""
Ranked retrieval
Cosine-normalized TF-IDF scoring, term at a time
"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from .index import InvertedIndex


def idf_weight(corpus_size: int, aggregate_frequency: int) -> float:
    return math.log(1 + corpus_size / aggregate_frequency) ** 2


def rank(query_terms: Iterable[str],
         index: InvertedIndex,
         corpus_size: Optional[int] = None,
         doc_norms: Optional[Dict[int, float]] = None) -> List[Tuple[int, float]]:
    """
    Score documents for stemmed query terms.

    Returns (doc_id, score) pairs by descending score, ties by ascending
    doc_id. Terms absent from the index are skipped; when no term is
    found the result is empty.
    """
    if corpus_size is None:
        corpus_size = index.num_docs
    if doc_norms is None:
        doc_norms = index.doc_norms

    scores: Dict[int, float] = defaultdict(float)
    w_q = 0.0

    for term in query_terms:
        entry = index.get_entry(term)
        if entry is None or entry.aggregate_frequency <= 0:
            continue

        idf = idf_weight(corpus_size, entry.aggregate_frequency)
        w_q += idf
        for doc_id, tf in entry.postings:
            scores[doc_id] += (1 + math.log(tf)) * idf

    w_q = math.sqrt(w_q)
    if w_q == 0:
        return []

    ranked = []
    for doc_id, score in scores.items():
        norm = doc_norms.get(doc_id, 0.0)
        if norm == 0:
            continue
        ranked.append((doc_id, score / (w_q * norm)))

    ranked.sort(key=lambda x: (-x[1], x[0]))
    return ranked

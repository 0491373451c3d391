"""
Index builder module
Accumulates per-document term statistics into an inverted index
"""

import logging
import math
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import IndexConfig
from .core import AggregateMode, CorpusFormatError
from .corpus import Document, load_collection
from .index import IndexEntry, InvertedIndex, Posting
from .preprocessor import TextPreprocessor
from .query_processor import QueryProcessor

logger = logging.getLogger(__name__)

DocumentInput = Union[Document, Tuple[int, Sequence[str]]]


def document_norm(term_counts: Dict[str, int]) -> float:
    """Euclidean norm of the log-scaled term frequency vector"""
    return math.sqrt(sum((1 + math.log(tf)) ** 2 for tf in term_counts.values()))


class IndexAccumulator:
    """
    Explicit accumulator for one index build.
    Documents must be added in strictly ascending id order so postings
    lists stay sorted without re-sorting.
    """

    def __init__(self, aggregate_mode: AggregateMode = AggregateMode.OCCURRENCES):
        self.aggregate_mode = aggregate_mode
        self.entries: Dict[str, IndexEntry] = {}
        self.doc_norms: Dict[int, float] = {}
        self.doc_metadata: Dict[int, Dict] = {}
        self.last_doc_id: Optional[int] = None

    def add_document(self, doc_id: int, terms: Iterable[str], metadata: Dict = None):
        """
        Add one document's normalized terms to the index.

        Args:
            doc_id: Integer document id, greater than every id added before
            terms: Normalized terms of the document, any order
            metadata: Optional title/authors dictionary
        """
        if self.last_doc_id is not None and doc_id <= self.last_doc_id:
            raise CorpusFormatError(
                f"Document {doc_id} added after document {self.last_doc_id}")
        self.last_doc_id = doc_id

        # Lexicographical order keeps postings generation diff-stable
        term_counts = Counter(sorted(terms))

        for term, tf in term_counts.items():
            entry = self.entries.get(term)
            if entry is None:
                entry = self.entries[term] = IndexEntry()
            # OCCURRENCES totals tf over the corpus, including the first document
            if self.aggregate_mode == AggregateMode.OCCURRENCES:
                entry.aggregate_frequency += tf
            else:
                entry.aggregate_frequency += 1
            entry.postings.append(Posting(doc_id, tf))

        self.doc_norms[doc_id] = document_norm(term_counts)
        if metadata is not None:
            self.doc_metadata[doc_id] = metadata

    def build(self, stop_words: Optional[Iterable[str]] = None) -> InvertedIndex:
        return InvertedIndex(
            entries=self.entries,
            doc_norms=self.doc_norms,
            doc_metadata=self.doc_metadata,
            aggregate_mode=self.aggregate_mode,
            stop_words=stop_words,
        )


def _unpack(document: DocumentInput) -> Tuple[int, Sequence[str], Optional[Dict]]:
    if isinstance(document, Document):
        return document.doc_id, document.lines, document.metadata
    doc_id, lines = document
    return doc_id, lines, None


def build_index(documents: Iterable[DocumentInput],
                preprocessor: TextPreprocessor,
                aggregate_mode: AggregateMode = AggregateMode.OCCURRENCES,
                workers: int = 1) -> InvertedIndex:
    """
    Build an inverted index from (doc_id, lines) pairs or Documents.

    Normalization runs on a thread pool when workers > 1; merging into
    the accumulator is always serial and in input order.
    """
    unpacked = [_unpack(document) for document in documents]
    all_lines = [lines for _, lines, _ in unpacked]

    if workers > 1 and len(unpacked) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            normalized = list(executor.map(preprocessor.preprocess_lines, all_lines))
    else:
        normalized = [preprocessor.preprocess_lines(lines) for lines in all_lines]

    accumulator = IndexAccumulator(aggregate_mode)
    for count, ((doc_id, _, metadata), terms) in enumerate(zip(unpacked, normalized), start=1):
        accumulator.add_document(doc_id, terms, metadata)
        if count % 100 == 0:
            logger.debug("Indexed %d documents...", count)

    return accumulator.build(stop_words=preprocessor.stop_words)


class IndexBuilder:
    """
    Main interface for building and loading indices with a configuration
    """

    def __init__(self, config: IndexConfig = None, preprocessor: TextPreprocessor = None):
        """
        Args:
            config: Build and query settings
            preprocessor: Normalizer for documents and queries. When omitted,
                building uses NLTK defaults and loading reuses the stopwords
                stored in the index.
        """
        self.config = config or IndexConfig()
        self.preprocessor = preprocessor
        self.index: Optional[InvertedIndex] = None

    def build_index(self, collection: Union[str, Path, List[Document]]) -> InvertedIndex:
        """Build index from a collection file or already parsed documents"""
        logger.info("Building index %s", self.config.to_version())
        logger.info("  AggregateMode: %s", self.config.aggregate_mode)
        logger.info("  Compression: %s", self.config.compression)

        if self.preprocessor is None:
            self.preprocessor = TextPreprocessor()

        if isinstance(collection, (str, Path)):
            documents = load_collection(collection)
        else:
            documents = collection

        start_time = time.time()
        self.index = build_index(
            documents,
            self.preprocessor,
            aggregate_mode=self.config.aggregate_mode,
            workers=self.config.workers,
        )
        logger.info("Indexed %d documents (%d terms) in %.2fs",
                    self.index.num_docs, len(self.index), time.time() - start_time)
        return self.index

    def save_index(self, path):
        if not self.index:
            raise ValueError("Index not built or loaded")
        self.index.save(path, self.config.compression)

    def load_index(self, path) -> InvertedIndex:
        """Load existing index"""
        self.index = InvertedIndex.load(path)
        stored = self.index.stop_words

        if self.preprocessor is None:
            self.preprocessor = TextPreprocessor(stop_words=stored)
        elif stored is not None and set(stored) != self.preprocessor.stop_words:
            logger.warning("Query stopwords differ from the %d stopwords the index "
                           "was built with; some query terms may never match",
                           len(stored))
        return self.index

    def get_query_processor(self) -> QueryProcessor:
        """Get query processor for this index"""
        if not self.index:
            raise ValueError("Index not built or loaded")

        return QueryProcessor(
            self.index,
            self.preprocessor,
            top_k=self.config.top_k,
            query_mode=self.config.query_mode,
            score_threshold=self.config.score_threshold,
        )

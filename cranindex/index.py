"""
Inverted Index artifact
Read-only term statistics, postings and document norms with JSON persistence
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional

from .core import AggregateMode, Compression, CompressionUtils

logger = logging.getLogger(__name__)


class Posting(NamedTuple):
    """Occurrences of a term within one document"""
    doc_id: int
    tf: int


@dataclass
class IndexEntry:
    """Aggregate statistic and id-ascending postings for one term"""
    aggregate_frequency: int = 0
    postings: List[Posting] = field(default_factory=list)

    def doc_ids(self) -> List[int]:
        return [posting.doc_id for posting in self.postings]


class InvertedIndex:
    """
    Core inverted index structure
    Built once per corpus by the index builder, read-only afterwards
    """

    def __init__(self,
                 entries: Optional[Dict[str, IndexEntry]] = None,
                 doc_norms: Optional[Dict[int, float]] = None,
                 doc_metadata: Optional[Dict[int, Dict]] = None,
                 aggregate_mode: AggregateMode = AggregateMode.OCCURRENCES,
                 stop_words: Optional[List[str]] = None):
        self.entries: Dict[str, IndexEntry] = entries or {}
        self.doc_norms: Dict[int, float] = doc_norms or {}
        self.doc_metadata: Dict[int, Dict] = doc_metadata or {}
        self.aggregate_mode = aggregate_mode
        # stopwords used at build time, reused for queries
        self.stop_words = sorted(stop_words) if stop_words is not None else None
        self._universe = sorted(self.doc_norms)

    @property
    def num_docs(self) -> int:
        """Runtime corpus size"""
        return len(self.doc_norms)

    @property
    def universe(self) -> List[int]:
        """All document ids in ascending order"""
        return self._universe

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, term: str) -> bool:
        return term in self.entries

    def terms(self) -> Iterator[str]:
        return iter(self.entries)

    def get_entry(self, term: str) -> Optional[IndexEntry]:
        return self.entries.get(term)

    def get_postings(self, term: str) -> List[Posting]:
        """Get postings list for a term, empty if absent"""
        entry = self.entries.get(term)
        return entry.postings if entry else []

    def get_doc_ids(self, term: str) -> List[int]:
        entry = self.entries.get(term)
        return entry.doc_ids() if entry else []

    def to_dict(self) -> Dict:
        """Serialize to the persisted artifact layout"""
        return {
            'index': {
                term: [entry.aggregate_frequency,
                       [[p.doc_id, p.tf] for p in entry.postings]]
                for term, entry in self.entries.items()
            },
            'documentNorms': {str(doc_id): norm for doc_id, norm in self.doc_norms.items()},
            'documentMetadata': {
                str(doc_id): metadata for doc_id, metadata in self.doc_metadata.items()
            },
            'aggregateMode': self.aggregate_mode.name,
            'stopWords': self.stop_words,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'InvertedIndex':
        entries = {}
        for term, (aggregate_frequency, postings) in data['index'].items():
            entries[term] = IndexEntry(
                aggregate_frequency=int(aggregate_frequency),
                postings=[Posting(int(doc_id), int(tf)) for doc_id, tf in postings],
            )

        doc_norms = {int(doc_id): float(norm)
                     for doc_id, norm in data['documentNorms'].items()}
        doc_metadata = {int(doc_id): dict(metadata)
                        for doc_id, metadata in data.get('documentMetadata', {}).items()}
        mode = AggregateMode[data.get('aggregateMode', AggregateMode.OCCURRENCES.name)]

        return cls(entries, doc_norms, doc_metadata, mode, data.get('stopWords'))

    def save(self, path, compression: Compression = Compression.NONE):
        """Save index to disk as JSON, gzip-compressed for Compression.CLIB"""
        path = Path(path)
        if path.parent:
            path.parent.mkdir(parents=True, exist_ok=True)

        payload = json.dumps(self.to_dict()).encode('utf-8')
        with open(path, 'wb') as f:
            f.write(CompressionUtils.compress(payload, compression))

        logger.info("Saved index with %d terms and %d documents to %s",
                    len(self), self.num_docs, path)

    @classmethod
    def load(cls, path) -> 'InvertedIndex':
        """Load index from disk"""
        with open(Path(path), 'rb') as f:
            raw = f.read()

        data = json.loads(CompressionUtils.decompress(raw).decode('utf-8'))
        index = cls.from_dict(data)
        logger.info("Loaded index with %d terms and %d documents from %s",
                    len(index), index.num_docs, path)
        return index

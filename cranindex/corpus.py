"""
Cranfield collection reader
Splits collection, query and relevance files into records
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from .core import CorpusFormatError

logger = logging.getLogger(__name__)

FIELD_MARKERS = ('.T', '.A', '.B', '.W')


@dataclass
class Document:
    doc_id: int
    title: str = ''
    authors: str = ''
    lines: List[str] = field(default_factory=list)

    @property
    def metadata(self) -> Dict[str, str]:
        return {'title': self.title, 'authors': self.authors}


@dataclass
class Query:
    query_id: int
    text: str


def _read_records(text: str) -> Iterator[Tuple[int, int, Dict[str, List[str]]]]:
    """
    Yield (record_id, line_number, fields) for every `.I` record.
    `fields` maps a marker such as '.W' to the lines that follow it.
    """
    record_id = None
    record_line = 0
    fields: Dict[str, List[str]] = {}
    current = None

    for line_number, line in enumerate(text.split('\n'), start=1):
        marker = line[:2]
        if marker == '.I':
            if record_id is not None:
                yield record_id, record_line, fields
            parts = line.split()
            if len(parts) != 2 or not parts[1].isdigit():
                raise CorpusFormatError(f"Invalid record id: {line!r}", line_number)
            record_id = int(parts[1])
            record_line = line_number
            fields = {}
            current = None
        elif marker in FIELD_MARKERS and line.strip() == marker:
            if record_id is None:
                raise CorpusFormatError(f"Field {marker} outside of a record", line_number)
            current = marker
            fields[current] = []
        elif record_id is None:
            if line.strip():
                raise CorpusFormatError("Text before the first .I marker", line_number)
        elif current is not None:
            fields[current].append(line)

    if record_id is not None:
        yield record_id, record_line, fields


def _join(lines: List[str]) -> str:
    return ' '.join(line.strip() for line in lines if line.strip())


def read_collection(text: str) -> List[Document]:
    """Parse a Cranfield collection into documents in ascending id order"""
    documents = []
    last_id = None
    for doc_id, line_number, fields in _read_records(text):
        if '.W' not in fields:
            raise CorpusFormatError(f"Document {doc_id} has no .W body", line_number)
        if last_id is not None and doc_id <= last_id:
            raise CorpusFormatError(
                f"Document {doc_id} is out of order (previous {last_id})", line_number)
        last_id = doc_id

        body = list(fields['.W'])
        # trailing blank line before the next record
        while body and not body[-1].strip():
            body.pop()

        documents.append(Document(
            doc_id=doc_id,
            title=_join(fields.get('.T', [])),
            authors=_join(fields.get('.A', [])),
            lines=body,
        ))
    return documents


def read_queries(text: str) -> List[Query]:
    """
    Parse a Cranfield query file.
    Queries are numbered by position because relevance files use
    sequential numbers rather than the `.I` values.
    """
    queries = []
    for position, (_, line_number, fields) in enumerate(_read_records(text), start=1):
        if '.W' not in fields:
            raise CorpusFormatError(f"Query {position} has no .W body", line_number)
        queries.append(Query(query_id=position, text=_join(fields['.W'])))
    return queries


def read_relevance(text: str) -> Dict[int, List[Tuple[int, int]]]:
    """Parse `query_id doc_id grade` lines into query_id -> [(doc_id, grade)]"""
    relevance: Dict[int, List[Tuple[int, int]]] = defaultdict(list)
    for line_number, line in enumerate(text.split('\n'), start=1):
        parts = line.split()
        if not parts:
            continue
        try:
            query_id, doc_id = int(parts[0]), int(parts[1])
            grade = int(parts[2]) if len(parts) > 2 else 0
        except (ValueError, IndexError) as e:
            raise CorpusFormatError(f"Invalid relevance line: {line!r}", line_number) from e
        relevance[query_id].append((doc_id, grade))
    return dict(relevance)


def _read_text(path) -> str:
    with open(Path(path), encoding='utf-8') as f:
        return f.read()


def load_collection(path) -> List[Document]:
    documents = read_collection(_read_text(path))
    logger.info("Read %d documents from %s", len(documents), path)
    return documents


def load_queries(path) -> List[Query]:
    queries = read_queries(_read_text(path))
    logger.info("Read %d queries from %s", len(queries), path)
    return queries


def load_relevance(path) -> Dict[int, List[Tuple[int, int]]]:
    return read_relevance(_read_text(path))

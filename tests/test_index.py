import json
import math

import pytest

from cranindex.core import AggregateMode, Compression, CorpusFormatError
from cranindex.index import IndexEntry, InvertedIndex, Posting
from cranindex.index_builder import IndexAccumulator, build_index, document_norm


def test_small_corpus_entries(small_index):
    cat = small_index.get_entry("cat")
    assert cat.aggregate_frequency == 1
    assert cat.postings == [Posting(1, 1)]
    assert small_index.get_entry("sat") == IndexEntry(1, [Posting(1, 1)])
    assert "the" not in small_index
    assert small_index.num_docs == 2
    assert small_index.universe == [1, 2]


def test_absent_term_is_empty(small_index):
    assert small_index.get_entry("zebra") is None
    assert small_index.get_postings("zebra") == []
    assert small_index.get_doc_ids("zebra") == []


def test_document_norms(cranfield_index):
    assert cranfield_index.doc_norms[1] == pytest.approx(math.sqrt(2))
    expected = math.sqrt((1 + math.log(2)) ** 2 + 1)
    assert cranfield_index.doc_norms[3] == pytest.approx(expected)


def test_postings_are_id_ascending(cranfield_index):
    for term in cranfield_index.terms():
        doc_ids = cranfield_index.get_doc_ids(term)
        assert doc_ids == sorted(set(doc_ids))


@pytest.mark.parametrize(
    "mode, expected",
    [
        (AggregateMode.OCCURRENCES, 3),
        (AggregateMode.DOCUMENTS, 2),
    ],
)
def test_aggregate_mode(cranfield_documents, preprocessor, mode, expected):
    index = build_index(cranfield_documents, preprocessor, aggregate_mode=mode)
    cat = index.get_entry("cat")
    assert cat.aggregate_frequency == expected
    assert cat.postings == [Posting(1, 1), Posting(3, 2)]


def test_metadata_from_documents(cranfield_index):
    assert cranfield_index.doc_metadata[2] == {"title": "the dog paper", "authors": "doe,a."}


def test_accumulator_rejects_out_of_order_ids():
    accumulator = IndexAccumulator()
    accumulator.add_document(5, ["wing"])
    with pytest.raises(CorpusFormatError):
        accumulator.add_document(5, ["flow"])
    with pytest.raises(CorpusFormatError):
        accumulator.add_document(3, ["flow"])


def test_accumulators_are_isolated():
    first = IndexAccumulator()
    first.add_document(1, ["wing"])
    second = IndexAccumulator()
    second.add_document(1, ["flow"])
    assert "flow" not in first.build()
    assert "wing" not in second.build()


def test_empty_document_has_zero_norm():
    accumulator = IndexAccumulator()
    accumulator.add_document(1, [])
    index = accumulator.build()
    assert index.doc_norms == {1: 0.0}
    assert index.universe == [1]


def test_document_norm():
    assert document_norm({"a": 1, "b": 1}) == pytest.approx(math.sqrt(2))
    assert document_norm({}) == 0.0


def test_parallel_build_matches_serial(cranfield_documents, preprocessor):
    serial = build_index(cranfield_documents, preprocessor)
    parallel = build_index(cranfield_documents, preprocessor, workers=4)
    assert parallel.to_dict() == serial.to_dict()


def test_to_dict_layout(small_index):
    data = small_index.to_dict()
    assert data["index"]["cat"] == [1, [[1, 1]]]
    assert set(data["documentNorms"]) == {"1", "2"}
    assert data["aggregateMode"] == "OCCURRENCES"


@pytest.mark.parametrize("compression", [Compression.NONE, Compression.CLIB])
def test_save_load_round_trip(tmp_path, cranfield_index, compression):
    path = tmp_path / "indices" / "cran.json"
    cranfield_index.save(path, compression)
    loaded = InvertedIndex.load(path)

    assert loaded.entries == cranfield_index.entries
    assert loaded.doc_norms == cranfield_index.doc_norms
    assert loaded.doc_metadata == cranfield_index.doc_metadata
    assert loaded.aggregate_mode == cranfield_index.aggregate_mode
    assert loaded.universe == [1, 2, 3]


def test_uncompressed_artifact_is_json(tmp_path, small_index):
    path = tmp_path / "small.json"
    small_index.save(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["index"]["dog"] == [1, [[2, 1]]]


def test_stopwords_are_stored_in_artifact(tmp_path, cranfield_index):
    assert cranfield_index.stop_words == ["the"]
    assert cranfield_index.to_dict()["stopWords"] == ["the"]

    path = tmp_path / "cran.json"
    cranfield_index.save(path)
    assert InvertedIndex.load(path).stop_words == ["the"]


def test_artifact_without_stopwords_loads(small_index):
    data = small_index.to_dict()
    del data["stopWords"]
    assert InvertedIndex.from_dict(data).stop_words is None

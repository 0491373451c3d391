import pytest

from cranindex.config import IndexConfig
from cranindex.core import AggregateMode, Compression, QueryMode


def test_defaults():
    config = IndexConfig()
    assert config.aggregate_mode == AggregateMode.OCCURRENCES
    assert config.compression == Compression.NONE
    assert config.top_k == 30
    assert config.score_threshold == pytest.approx(0.40)


def test_from_version():
    config = IndexConfig.from_version("CranIndex-v1.22B", top_k=5)
    assert config.aggregate_mode == AggregateMode.DOCUMENTS
    assert config.compression == Compression.CLIB
    assert config.query_mode == QueryMode.BOOLEAN
    assert config.top_k == 5


@pytest.mark.parametrize("version", ["CranIndex-v1.11R", "CranIndex-v1.21B", "CranIndex-v1.12R"])
def test_version_round_trip(version):
    assert IndexConfig.from_version(version).to_version() == version


@pytest.mark.parametrize("version", ["", "CranIndex-v2.11R", "CranIndex-v1.31R", "CranIndex-v1.11X"])
def test_invalid_version(version):
    with pytest.raises(ValueError):
        IndexConfig.from_version(version)

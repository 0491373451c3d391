import pytest

from cranindex.corpus import read_collection
from cranindex.index_builder import build_index
from cranindex.preprocessor import TextPreprocessor


CRANFIELD_SAMPLE = """.I 1
.T
the cat paper
.A
smith,j.
.B
j. ae. scs. 25, 1958, 324.
.W
the cat sat
.I 2
.T
the dog paper
.A
doe,a.
.B
j. ae. scs. 26, 1959, 12.
.W
the dog ran
.I 3
.T
mixed animals
.A
roe,b.
.B
j. ae. scs. 27, 1960, 7.
.W
cat cat dog
"""


@pytest.fixture
def preprocessor():
    return TextPreprocessor(stop_words={"the"}, stemmer=lambda token: token)


@pytest.fixture
def small_index(preprocessor):
    documents = [
        (1, ["the cat sat"]),
        (2, ["the dog ran"]),
    ]
    return build_index(documents, preprocessor)


@pytest.fixture
def cranfield_documents():
    return read_collection(CRANFIELD_SAMPLE)


@pytest.fixture
def cranfield_index(cranfield_documents, preprocessor):
    return build_index(cranfield_documents, preprocessor)


@pytest.fixture
def cranfield_text():
    return CRANFIELD_SAMPLE

"""
Text preprocessing module
Handles tokenization, stemming, and stop word removal
"""

import logging
import re
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

import nltk
from nltk.corpus import stopwords
from nltk.stem import PorterStemmer

logger = logging.getLogger(__name__)

# \W is every non-word character: [^A-Za-z0-9_]
_SPLIT_RE = re.compile(r'\W+', re.ASCII)


def load_stopwords(path) -> Set[str]:
    """Read one stopword per line, ignoring blank lines"""
    with open(Path(path), encoding='utf-8') as f:
        words = {line.strip().lower() for line in f if line.strip()}
    logger.info("Loaded %d stopwords from %s", len(words), path)
    return words


def download_nltk_data() -> bool:
    """Download required NLTK data"""
    try:
        nltk.download('stopwords', quiet=True)
    except OSError as e:
        logger.error("Failed to download NLTK data: %s", e)
        return False
    return True


class TextPreprocessor:
    """Handles text preprocessing: tokenization, stemming, stop word removal"""

    def __init__(self,
                 stop_words: Optional[Iterable[str]] = None,
                 stemmer: Optional[Callable[[str], str]] = None):
        if stop_words is None:
            stop_words = stopwords.words('english')
        if stemmer is None:
            stemmer = PorterStemmer().stem
        self.stop_words = frozenset(stop_words)
        self.stemmer = stemmer

    def stem(self, token: str) -> str:
        return self.stemmer(token)

    def preprocess(self, text: str) -> List[str]:
        """
        Preprocess text: lowercase, tokenize, remove stopwords, stem
        Returns list of processed terms in input order
        """
        if not text:
            return []

        processed_tokens = []
        for token in _SPLIT_RE.split(text.lower()):
            if len(token) > 1 and token not in self.stop_words:
                processed_tokens.append(self.stemmer(token))

        return processed_tokens

    def preprocess_lines(self, lines: Iterable[str]) -> List[str]:
        """Preprocess every line and return one flat term sequence"""
        terms = []
        for line in lines:
            terms.extend(self.preprocess(line))
        return terms

"""
Core utilities, enums and errors for cranindex
Handles artifact compression, configuration enums and the error taxonomy
"""

import gzip
from enum import Enum
from typing import Optional


class AggregateMode(Enum):
    """How the per-term aggregate counter is updated for each document"""
    OCCURRENCES = 1
    DOCUMENTS = 2


class Compression(Enum):
    """Compression method for the persisted index artifact"""
    NONE = 1
    CLIB = 2


class QueryMode(Enum):
    """Query language used by the query processor"""
    BOOLEAN = 'B'
    RANKED = 'R'


class CranIndexError(Exception):
    """Base class for all cranindex errors"""


class CorpusFormatError(CranIndexError):
    """Malformed document boundaries in a collection"""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class ParseError(CranIndexError):
    """Malformed boolean query"""

    def __init__(self, message: str, position: int, token: Optional[str] = None):
        self.position = position
        self.token = token
        super().__init__(f"{message} at position {position}")


class EvaluationError(CranIndexError):
    """Structurally invalid expression tree"""


class CompressionUtils:
    """Handles compression of the serialized index artifact"""

    GZIP_MAGIC = b'\x1f\x8b'

    @staticmethod
    def gzip_compress(data: bytes) -> bytes:
        """Compress using gzip (library-based)"""
        return gzip.compress(data)

    @staticmethod
    def gzip_decompress(data: bytes) -> bytes:
        """Decompress gzip data"""
        return gzip.decompress(data)

    @staticmethod
    def is_gzip(data: bytes) -> bool:
        return data[:2] == CompressionUtils.GZIP_MAGIC

    @staticmethod
    def compress(data: bytes, method: Compression) -> bytes:
        if method == Compression.CLIB:
            return CompressionUtils.gzip_compress(data)
        return data

    @staticmethod
    def decompress(data: bytes) -> bytes:
        """Decompress artifact bytes, detecting gzip by its magic number"""
        if CompressionUtils.is_gzip(data):
            return CompressionUtils.gzip_decompress(data)
        return data

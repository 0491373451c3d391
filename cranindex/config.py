"""
Index configuration
Parses compact version strings into enum-driven settings
"""

import re
from dataclasses import dataclass

from .core import AggregateMode, Compression, QueryMode


VERSION_PREFIX = "CranIndex-v1."


@dataclass
class IndexConfig:
    """
    Settings for building and querying an index.

    Version string: CranIndex-v1.xyq
    x = AggregateMode (1=OCCURRENCES, 2=DOCUMENTS)
    y = Compression (1=NONE, 2=CLIB)
    q = QueryMode (B=BOOLEAN, R=RANKED)
    """
    aggregate_mode: AggregateMode = AggregateMode.OCCURRENCES
    compression: Compression = Compression.NONE
    query_mode: QueryMode = QueryMode.RANKED
    top_k: int = 30
    score_threshold: float = 0.40
    workers: int = 1

    @classmethod
    def from_version(cls, version: str, **overrides) -> "IndexConfig":
        """Parse version string into configuration"""
        match = re.search(r'v1\.(\d)(\d)([BR])$', version)
        if not match:
            raise ValueError(f"Invalid version string: {version}")

        x, y, q = match.groups()
        try:
            return cls(
                aggregate_mode=AggregateMode(int(x)),
                compression=Compression(int(y)),
                query_mode=QueryMode(q),
                **overrides
            )
        except ValueError as e:
            raise ValueError(f"Invalid version string: {version}") from e

    def to_version(self) -> str:
        return (f"{VERSION_PREFIX}{self.aggregate_mode.value}"
                f"{self.compression.value}{self.query_mode.value}")

"""
Metrics collection and reporting module
Retrieval quality against relevance judgments and query performance
"""

import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import psutil

from .corpus import Query


def precision_recall(ranked: Sequence[Tuple[int, float]],
                     relevant: Iterable[int],
                     threshold: float = 0.40) -> Tuple[float, float]:
    """
    Precision and recall over the results scoring above `threshold`.
    Precision is 0 when nothing clears the threshold.
    """
    relevant = set(relevant)
    retrieved = [doc_id for doc_id, score in ranked if score > threshold]
    hits = sum(1 for doc_id in retrieved if doc_id in relevant)

    precision = hits / len(retrieved) if retrieved else 0.0
    recall = hits / len(relevant) if relevant else 0.0
    return precision, recall


def precision_at_k(ranked: Sequence[Tuple[int, float]], relevant: Iterable[int], k: int) -> float:
    if k <= 0:
        return 0.0
    relevant = set(relevant)
    return sum(1 for doc_id, _ in ranked[:k] if doc_id in relevant) / k


def average_precision(ranked: Sequence[Tuple[int, float]], relevant: Iterable[int]) -> float:
    """Mean of precision values at the rank of each relevant hit"""
    relevant = set(relevant)
    if not relevant:
        return 0.0

    hits = 0
    total = 0.0
    for rank_position, (doc_id, _) in enumerate(ranked, start=1):
        if doc_id in relevant:
            hits += 1
            total += hits / rank_position
    return total / len(relevant)


def evaluate_run(query_processor,
                 queries: Sequence[Query],
                 relevance: Dict[int, List[Tuple[int, int]]],
                 threshold: Optional[float] = None,
                 k: int = 10) -> Dict:
    """
    Score every query that has judgments and average the metrics.
    `threshold` defaults to the processor's score_threshold.

    Returns dict with a 'per_query' list and mean 'precision', 'recall',
    'p_at_k' and 'map' values, plus the 'threshold' used.
    """
    if threshold is None:
        threshold = query_processor.score_threshold

    per_query = []
    for query in queries:
        judgments = relevance.get(query.query_id)
        if not judgments:
            continue
        relevant = [doc_id for doc_id, _ in judgments]
        ranked = query_processor.rank_query(query.text)
        precision, recall = precision_recall(ranked, relevant, threshold)
        per_query.append({
            'query_id': query.query_id,
            'precision': precision,
            'recall': recall,
            'p_at_k': precision_at_k(ranked, relevant, k),
            'ap': average_precision(ranked, relevant),
        })

    summary = {'per_query': per_query, 'num_queries': len(per_query), 'k': k,
               'threshold': threshold}
    for key in ('precision', 'recall', 'p_at_k', 'ap'):
        values = [row[key] for row in per_query]
        summary[key] = float(np.mean(values)) if values else 0.0
    summary['map'] = summary.pop('ap')
    return summary


class MetricsCollector:
    """Collect and analyze system metrics"""

    @staticmethod
    def measure_memory() -> float:
        """Get current process memory usage in MB"""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    @staticmethod
    def measure_index_size(path) -> float:
        """Get index artifact size on disk in MB"""
        path = Path(path)
        if not path.exists():
            return 0.0
        return path.stat().st_size / 1024 / 1024

    @staticmethod
    def measure_query_latency(query_processor,
                              queries: List[str],
                              repetitions: int = 1) -> Dict:
        """
        Measure ranked query latency statistics in milliseconds,
        averaged over repetitions
        """
        if not queries:
            return {}

        all_results = []
        for _ in range(repetitions):
            latencies = []
            for query in queries:
                start_time = time.perf_counter()
                query_processor.rank_query(query)
                latencies.append((time.perf_counter() - start_time) * 1000)

            all_results.append({
                'mean': np.mean(latencies),
                'median': np.median(latencies),
                'p95': np.percentile(latencies, 95),
                'p99': np.percentile(latencies, 99),
                'min': min(latencies),
                'max': max(latencies),
            })

        return {k: float(np.mean([res[k] for res in all_results])) for k in all_results[0]}


class Reporter:
    """Print result tables and reports"""

    @staticmethod
    def print_ranked_results(query: str, results: List[Dict]):
        print(f"\n{'='*100}")
        print(f"Query: {query}")
        print(f"{'='*100}")
        print(f"{'Doc Id':<8} {'Title':<60} {'Authors':<22} {'Score':<8}")
        print(f"{'-'*100}")
        for res in results:
            title = res['title'].title()[:58]
            authors = res['authors'].title()[:20]
            print(f"{res['doc_id']:<8} {title:<60} {authors:<22} {res['score']:<8.4f}")

    @staticmethod
    def print_evaluation_report(summary: Dict):
        threshold = summary['threshold']
        print(f"\n{'='*70}")
        print(f"Evaluation Report ({summary['num_queries']} queries, threshold {threshold:.2f})")
        print(f"{'='*70}")
        print(f"  Precision:   {summary['precision']:.4f}")
        print(f"  Recall:      {summary['recall']:.4f}")
        print(f"  P@{summary['k']:<9} {summary['p_at_k']:.4f}")
        print(f"  MAP:         {summary['map']:.4f}")

    @staticmethod
    def print_metrics_report(metrics: Dict):
        """Print formatted performance report"""
        if 'latency' in metrics:
            print("\nLatency Statistics (ms):")
            print(f"  Mean:     {metrics['latency']['mean']:.2f}")
            print(f"  Median:   {metrics['latency']['median']:.2f}")
            print(f"  P95:      {metrics['latency']['p95']:.2f}")
            print(f"  P99:      {metrics['latency']['p99']:.2f}")

        if 'memory' in metrics:
            print(f"\nMemory Usage: {metrics['memory']:.2f} MB")

        if 'index_size' in metrics:
            print(f"Index Size on Disk: {metrics['index_size']:.2f} MB")

        print(f"{'='*70}\n")

"""
Command line interface

Usage:
    cranindex build --collection docs/cran.all.1400 --output indices/cran.json
    cranindex boolean --index indices/cran.json "shock AND ( wave OR flow )"
    cranindex search --index indices/cran.json "boundary layer transition"
    cranindex query --version CranIndex-v1.11B --index indices/cran.json "shock AND flow"
    cranindex evaluate --index indices/cran.json --queries docs/cran.qry \
        --relevance docs/cranqrel
"""

import argparse
import json
import logging
import sys

from .config import IndexConfig
from .core import CorpusFormatError, EvaluationError, ParseError, QueryMode
from .corpus import load_queries, load_relevance
from .index_builder import IndexBuilder
from .metrics import MetricsCollector, Reporter, evaluate_run
from .preprocessor import TextPreprocessor, download_nltk_data, load_stopwords

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "CranIndex-v1.11R"


def _make_builder(args) -> IndexBuilder:
    overrides = {}
    if getattr(args, 'workers', None):
        overrides['workers'] = args.workers
    if getattr(args, 'top_k', None):
        overrides['top_k'] = args.top_k
    if getattr(args, 'threshold', None) is not None:
        overrides['score_threshold'] = args.threshold
    config = IndexConfig.from_version(args.version, **overrides)

    # without -w, loading an index reuses the stopwords stored in it
    preprocessor = None
    if args.stop_words:
        preprocessor = TextPreprocessor(stop_words=load_stopwords(args.stop_words))
    return IndexBuilder(config, preprocessor)


def cmd_build(args) -> int:
    builder = _make_builder(args)
    try:
        builder.build_index(args.collection)
    except CorpusFormatError as e:
        logger.error("Index build aborted: %s", e)
        return 1
    builder.save_index(args.output)
    size = MetricsCollector.measure_index_size(args.output)
    logger.info("Index size on disk: %.2f MB", size)
    return 0


def cmd_boolean(args) -> int:
    builder = _make_builder(args)
    builder.load_index(args.index)
    processor = builder.get_query_processor()

    status = 0
    for query in args.queries:
        try:
            result = processor.process_boolean_query(query)
        except (ParseError, EvaluationError) as e:
            logger.warning("Query %r failed: %s", query, e)
            status = 1
            continue
        print(json.dumps(result))
    return status


def cmd_search(args) -> int:
    builder = _make_builder(args)
    builder.load_index(args.index)
    processor = builder.get_query_processor()

    for query, results in zip(args.queries, processor.batch_ranked(args.queries, args.workers)):
        Reporter.print_ranked_results(query, results)
    return 0


def cmd_query(args) -> int:
    """Run queries in the mode selected by the version string"""
    builder = _make_builder(args)
    builder.load_index(args.index)
    processor = builder.get_query_processor()

    status = 0
    for query in args.queries:
        try:
            result = processor.process_query(query)
        except (ParseError, EvaluationError) as e:
            logger.warning("Query %r failed: %s", query, e)
            status = 1
            continue
        if processor.query_mode == QueryMode.BOOLEAN:
            print(json.dumps(result))
        else:
            Reporter.print_ranked_results(query, result)
    return status


def cmd_evaluate(args) -> int:
    builder = _make_builder(args)
    builder.load_index(args.index)
    processor = builder.get_query_processor()

    queries = load_queries(args.queries)
    relevance = load_relevance(args.relevance)
    summary = evaluate_run(processor, queries, relevance, k=args.k)
    Reporter.print_evaluation_report(summary)

    latency = MetricsCollector.measure_query_latency(processor, [q.text for q in queries])
    Reporter.print_metrics_report({
        'latency': latency,
        'memory': MetricsCollector.measure_memory(),
        'index_size': MetricsCollector.measure_index_size(args.index),
    })
    return 0


def cmd_setup(args) -> int:
    return 0 if download_nltk_data() else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cranindex",
                                     description="Boolean and TF-IDF search over the Cranfield collection")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--version", default=DEFAULT_VERSION,
                        help="index configuration string (default: %(default)s)")
    common.add_argument("-w", "--stop-words", help="custom stopwords file, one word per line")

    p = sub.add_parser("build", parents=[common], help="build and save an index")
    p.add_argument("-c", "--collection", required=True, help="Cranfield collection file")
    p.add_argument("-o", "--output", required=True, help="index artifact path")
    p.add_argument("--workers", type=int, default=1)
    p.set_defaults(func=cmd_build)

    p = sub.add_parser("boolean", parents=[common], help="run boolean queries")
    p.add_argument("-i", "--index", required=True)
    p.add_argument("queries", nargs="+")
    p.set_defaults(func=cmd_boolean)

    p = sub.add_parser("search", parents=[common], help="run ranked queries")
    p.add_argument("-i", "--index", required=True)
    p.add_argument("-k", "--top-k", type=int, default=30)
    p.add_argument("--workers", type=int, default=1)
    p.add_argument("queries", nargs="+")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("query", parents=[common],
                       help="run queries in the mode of --version (B=boolean, R=ranked)")
    p.add_argument("-i", "--index", required=True)
    p.add_argument("-k", "--top-k", type=int, default=30)
    p.add_argument("queries", nargs="+")
    p.set_defaults(func=cmd_query)

    p = sub.add_parser("evaluate", parents=[common], help="precision/recall against judgments")
    p.add_argument("-i", "--index", required=True)
    p.add_argument("-q", "--queries", required=True, help="Cranfield query file")
    p.add_argument("-r", "--relevance", required=True, help="relevance judgments file")
    p.add_argument("--threshold", type=float, default=None,
                   help="score threshold (default: the configured score_threshold, 0.40)")
    p.add_argument("-k", type=int, default=10)
    p.set_defaults(func=cmd_evaluate)

    p = sub.add_parser("setup", help="download NLTK data")
    p.set_defaults(func=cmd_setup)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())

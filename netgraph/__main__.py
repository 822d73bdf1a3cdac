"""
Command-line interface for the network scheduler.

Loads an ``event predecessor duration`` file, runs the CPM calculation and
prints the schedule table with the critical path.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .loader import SAMPLE_NETWORK, load_file, load_text
from .report import format_events, format_table

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m netgraph",
        description="Critical path scheduling of an activity-on-arc network",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input format (one activity per line):
  event predecessor duration
  predecessor 0 means the activity starts at event 1; '#' lines are comments.

Examples:
  python -m netgraph network.txt
  python -m netgraph --sample --events-table
  python -m netgraph network.txt --sink 12 -v
  python -m netgraph --sample --name 1=Start --name 7=Finish
""",
    )
    parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        help="Network description file",
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Use the built-in 7-event sample network",
    )
    parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Do not treat lines starting with '#' as comments",
    )
    parser.add_argument(
        "--source",
        type=int,
        default=1,
        help="Start event of the critical path (default: 1)",
    )
    parser.add_argument(
        "--sink",
        type=int,
        help="Terminal event of the critical path (default: highest event id)",
    )
    parser.add_argument(
        "--name",
        action="append",
        default=[],
        metavar="EVENT=NAME",
        help="Name an event in the printed critical path (repeatable)",
    )
    parser.add_argument(
        "--events-table",
        action="store_true",
        help="Also print early/late times of every event",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log the step-by-step calculation",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.sample == (args.file is not None):
        parser.error("give either a network file or --sample")

    skip_comments = not args.no_comments
    if args.sample:
        graph, message = load_text(SAMPLE_NETWORK, skip_comments=skip_comments)
    else:
        graph, message = load_file(args.file, skip_comments=skip_comments)

    if graph is None:
        logger.error(message)
        return 1
    logger.info(message)

    for item in args.name:
        event, sep, name = item.partition("=")
        if not sep or not event.strip().isdigit():
            parser.error(f"--name expects EVENT=NAME, got {item!r}")
        graph.set_event_name(int(event), name.strip())

    graph.source_event = args.source
    if args.sink is not None:
        graph.sink_event = args.sink

    ok, message = graph.calculate_all()
    for line in graph.calculation_log:
        logger.debug(line)
    if not ok:
        logger.error(message)
        return 1

    print(format_table(graph))
    if args.events_table:
        print()
        print(format_events(graph))
    return 0


if __name__ == "__main__":
    sys.exit(main())

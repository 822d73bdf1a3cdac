from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .engine import NetworkGraph

# Textbook network: "event predecessor duration" per line.
SAMPLE_NETWORK = """\
# event predecessor duration
2 1 4
3 1 6
4 2 3
5 3 5
6 4 4
6 5 4
7 6 3
"""

Triple = Tuple[int, int, int]


def parse_lines(lines: Iterable[str], skip_comments: bool = True) -> List[Triple]:
    """
    Parse ``event predecessor duration`` lines into activity triples.

    Blank lines are skipped, as are lines starting with ``#`` when
    ``skip_comments`` is set. Lines whose first three tokens are not integers
    are ignored. A predecessor of 0 means "no predecessor" and is mapped to
    the start event 1; a line declaring event 1 itself that way is dropped.

    Returns:
        List of (predecessor, event, duration) triples in input order
    """
    triples: List[Triple] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if skip_comments and line.startswith("#"):
            continue

        parts = line.split()
        if len(parts) < 3:
            continue
        try:
            event, predecessor, duration = (int(p) for p in parts[:3])
        except ValueError:
            continue

        if predecessor <= 0:
            # "1 0 d" only declares the start event
            if event == 1:
                continue
            predecessor = 1
        triples.append((predecessor, event, duration))

    return triples


def num_events_for(triples: Iterable[Triple]) -> int:
    """Highest event id referenced by the triples."""
    return max((max(pred, event) for pred, event, _ in triples), default=0)


def build_graph(triples: List[Triple]) -> Tuple[Optional[NetworkGraph], str]:
    """Create a graph sized to the triples and add every activity."""
    graph = NetworkGraph(num_events=num_events_for(triples))
    for predecessor, event, duration in triples:
        ok, msg = graph.add_activity(predecessor, event, duration)
        if not ok:
            return None, f"Invalid activity {predecessor}-{event}: {msg}"
    return graph, f"Loaded {len(graph.activities)} activities over {graph.num_events} events."


def load_text(text: str, skip_comments: bool = True) -> Tuple[Optional[NetworkGraph], str]:
    triples = parse_lines(text.splitlines(), skip_comments=skip_comments)
    if not triples:
        return None, "File contains no data."
    return build_graph(triples)


def load_file(path: Union[str, Path], skip_comments: bool = True) -> Tuple[Optional[NetworkGraph], str]:
    """
    Load a network from a text file.

    Returns:
        Tuple of (graph or None, message)
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        return None, f"Cannot open file {path}: {exc.strerror or exc}"
    return load_text(text, skip_comments=skip_comments)

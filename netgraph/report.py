from __future__ import annotations

from .engine import NetworkGraph

COLUMNS = [
    ("Code", 10),
    ("t(i,j)", 8),
    ("ES", 8),
    ("EF", 8),
    ("LS", 8),
    ("LF", 8),
    ("TF", 8),
    ("FF", 8),
]


def _cell(value: object, width: int) -> str:
    text = "-" if value is None else str(value)
    return text.ljust(width)


def format_table(graph: NetworkGraph) -> str:
    """Render the network schedule as a fixed-width text table."""
    if not graph.activities:
        return "No data to display."

    width = sum(w for _, w in COLUMNS) + len("Critical")
    lines = [
        "=" * width,
        "NETWORK SCHEDULE",
        "=" * width,
        "".join(_cell(name, w) for name, w in COLUMNS) + "Critical",
        "-" * width,
    ]

    for act in graph.activities:
        values = [act.code, act.duration, act.es, act.ef, act.ls, act.lf, act.total_float, act.free_float]
        row = "".join(_cell(v, w) for v, (_, w) in zip(values, COLUMNS))
        lines.append(row + ("Yes" if act.is_critical else "No"))

    lines.append("-" * width)
    lines.append(f"Critical path length: {graph.project_duration}")

    path = graph.critical_path
    lines.append(f"Critical path: {graph.format_path()}")
    if path is not None and not path.complete:
        lines.append(
            f"Warning: critical chain stops at event {path.reached_event} "
            f"before reaching event {graph.sink_event}."
        )
    return "\n".join(lines)


def format_events(graph: NetworkGraph) -> str:
    """Render early/late event times as text."""
    df = graph.get_events_dataframe()
    if df.empty:
        return "No event times calculated."
    return df.to_string(index=False)

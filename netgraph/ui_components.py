from typing import Any, Dict, Optional, Tuple
import html

import matplotlib.pyplot as plt
import pandas as pd

from .engine import NetworkGraph
from .loader import load_text
from .visualizations import create_network_diagram, create_gantt_chart, fig_to_base64


def read_uploaded_network(data: bytes, skip_comments: bool = True) -> Tuple[Optional[NetworkGraph], str]:
    """Decode an uploaded network file and load it."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None, "File is not valid UTF-8 text."
    return load_text(text, skip_comments=skip_comments)


def build_report_html(graph: NetworkGraph, theme: Dict[str, Any]) -> str:
    """
    Build a standalone HTML report of a calculated network.
    """
    graph_data = graph.to_dict()
    net_fig = create_network_diagram(graph_data, theme)
    gantt_fig = create_gantt_chart(graph_data, theme)

    net_b64 = fig_to_base64(net_fig)
    gantt_b64 = fig_to_base64(gantt_fig)

    plt.close(net_fig)
    plt.close(gantt_fig)

    results_df = graph.get_results_dataframe()
    rows_html = ""
    for _, row in results_df.iterrows():
        style = f"background-color: {theme['critical_soft']}; font-weight: bold;" if row['Critical'] == 'Yes' else ""
        cells = "".join(
            f"<td>{html.escape(str(row[col]))}</td>"
            for col in ("Code", "Duration", "ES", "EF", "LS", "LF", "TF", "FF", "Critical")
        )
        rows_html += f'<tr style="{style}">{cells}</tr>\n'

    path = graph.critical_path
    path_html = html.escape(graph.format_path()).replace("-&gt;", "&rarr;")
    if path is not None and not path.complete:
        path_html += (
            f"<p><em>Chain stops at event {path.reached_event}; "
            f"sink event is {graph.sink_event}.</em></p>"
        )

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Network Schedule Report</title>
    <style>
        body {{ font-family: 'Segoe UI', Tahoma, sans-serif; color: {theme['ink']}; background: {theme['bg']}; }}
        .container {{ max-width: 1000px; margin: 0 auto; padding: 40px; background: {theme['surface']}; }}
        h1 {{ color: {theme['accent']}; border-bottom: 2px solid {theme['accent']}; padding-bottom: 10px; }}
        table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
        th, td {{ padding: 8px; border: 1px solid {theme['border']}; text-align: left; }}
        img {{ max-width: 100%; height: auto; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>Network Schedule Report</h1>
        <p>Critical path length: <strong>{graph.project_duration}</strong>
           &bull; Activities: <strong>{len(graph.activities)}</strong>
           &bull; Events: <strong>{graph.num_events}</strong></p>

        <h2>Schedule Table</h2>
        <table>
            <thead><tr><th>Code</th><th>t</th><th>ES</th><th>EF</th><th>LS</th><th>LF</th><th>TF</th><th>FF</th><th>Crit</th></tr></thead>
            <tbody>
{rows_html}            </tbody>
        </table>

        <h2>Critical Path</h2>
        <div>{path_html}</div>

        <h2>Gantt Chart</h2>
        <img src="data:image/png;base64,{gantt_b64}" alt="Gantt Chart">

        <h2>Network Diagram</h2>
        <img src="data:image/png;base64,{net_b64}" alt="Network Diagram">

        <p style="font-size: 12px; color: {theme['muted']}; text-align: center;">
            Generated {pd.Timestamp.now().strftime('%Y-%m-%d %H:%M')}
        </p>
    </div>
</body>
</html>
"""

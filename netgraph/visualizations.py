import io
import base64
from typing import Any, Dict

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx
import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

import streamlit as st
from .engine import NetworkGraph


def _build_event_graph(graph: NetworkGraph) -> nx.DiGraph:
    """Events as nodes; parallel activities between the same events share one edge."""
    G = nx.DiGraph()
    G.add_nodes_from(range(1, graph.num_events + 1))

    for act in graph.activities:
        if G.has_edge(act.start, act.end):
            data = G[act.start][act.end]
            data["durations"].append(act.duration)
            data["critical"] = data["critical"] or act.is_critical
        else:
            G.add_edge(act.start, act.end, durations=[act.duration], critical=act.is_critical)

    for node in G.nodes():
        G.nodes[node]["layer"] = graph.event_early.get(node, 0)
    return G


def _layout(G: nx.DiGraph) -> Dict[int, Any]:
    try:
        return nx.nx_agraph.graphviz_layout(G, prog="dot", args="-Grankdir=LR")
    except ImportError:
        return nx.multipartite_layout(G, subset_key="layer")


@st.cache_resource(show_spinner="Generating Network Diagram...")
def create_network_diagram(graph_data: Dict[str, Any], theme: Dict[str, Any]) -> plt.Figure:
    """
    Draw the activity-on-arc network: events as circles, activities as arrows.
    Expects graph_data from graph.to_dict() for caching compatibility.
    """
    graph = NetworkGraph.from_dict(graph_data)

    if not graph.activities:
        fig, ax = plt.subplots(figsize=(10, 6))
        ax.text(0.5, 0.5, 'No activities to display', ha='center', va='center', fontsize=14)
        ax.axis('off')
        return fig

    G = _build_event_graph(graph)
    pos = _layout(G)

    num_nodes = G.number_of_nodes()
    fig, ax = plt.subplots(figsize=(max(12, int(num_nodes * 1.2)), max(7, int(num_nodes * 0.6))))

    path_events = set(graph.critical_path.events) if graph.critical_path else set()
    critical_edges = [(u, v) for u, v, d in G.edges(data=True) if d["critical"]]
    other_edges = [(u, v) for u, v, d in G.edges(data=True) if not d["critical"]]

    nx.draw_networkx_edges(G, pos, edgelist=other_edges, edge_color=theme["graph_edge"],
                           arrows=True, arrowsize=18, width=1.5, node_size=900, ax=ax)
    nx.draw_networkx_edges(G, pos, edgelist=critical_edges, edge_color=theme["critical"],
                           arrows=True, arrowsize=22, width=3, node_size=900, ax=ax)

    edge_labels = {
        (u, v): ", ".join(str(d) for d in data["durations"]) for u, v, data in G.edges(data=True)
    }
    nx.draw_networkx_edge_labels(G, pos, edge_labels, font_size=9, ax=ax)

    nx.draw_networkx_nodes(G, pos, nodelist=[n for n in G.nodes() if n not in path_events],
                           node_color=theme["event_node"], node_size=900,
                           edgecolors=theme["graph_edge"], ax=ax)
    nx.draw_networkx_nodes(G, pos, nodelist=[n for n in G.nodes() if n in path_events],
                           node_color=theme["event_node_crit"], node_size=900,
                           edgecolors=theme["critical"], linewidths=2.5, ax=ax)

    labels = {}
    for node in G.nodes():
        if node in graph.event_early:
            labels[node] = f"{graph.event_names.get(node, node)}\n{graph.event_early[node]}/{graph.event_late[node]}"
        else:
            labels[node] = str(graph.event_names.get(node, node))
    nx.draw_networkx_labels(G, pos, labels, font_size=8, ax=ax)

    legend_elements = [
        mpatches.Patch(color=theme["event_node_crit"], label='Event on Critical Path'),
        mpatches.Patch(color=theme["event_node"], label='Other Event'),
        plt.Line2D([0], [0], color=theme["critical"], linewidth=3, label='Critical Activity (TF = 0)'),
        plt.Line2D([0], [0], color=theme["graph_edge"], linewidth=1.5, label='Activity with Float'),
    ]
    ax.legend(handles=legend_elements, loc='upper left', bbox_to_anchor=(1.02, 1), fontsize=8, frameon=True)
    ax.set_title('Network Graph (Activity on Arc) - labels: event, early/late time', fontsize=13, fontweight='bold')
    ax.axis('off')
    plt.tight_layout()
    return fig


@st.cache_resource(show_spinner="Generating Gantt Chart...")
def create_gantt_chart(graph_data: Dict[str, Any], theme: Dict[str, Any]) -> plt.Figure:
    """
    Create a Gantt chart of activities at their early times, with total float.
    """
    graph = NetworkGraph.from_dict(graph_data)
    if not graph.activities or not graph.is_calculated:
        fig, ax = plt.subplots(figsize=(12, 6))
        ax.text(0.5, 0.5, 'No calculated activities to display', ha='center', va='center', fontsize=14)
        ax.axis('off')
        return fig

    ordered = sorted(graph.activities, key=lambda a: (a.es, a.start, a.end), reverse=True)

    fig, ax = plt.subplots(figsize=(14, max(5, len(ordered) * 0.5)))

    for i, act in enumerate(ordered):
        color = theme["critical"] if act.is_critical else theme["noncritical"]
        ax.barh(i, act.duration, left=act.es, height=0.6, color=color, edgecolor=color, linewidth=2)
        ax.text(act.es + act.duration / 2, i, f"{act.code} ({act.duration})",
                ha='center', va='center', color='white', fontweight='bold', fontsize=9)

        if act.total_float > 0:
            ax.barh(i, act.total_float, left=act.ef, height=0.3,
                    color=theme["float_bar"], edgecolor='gray', linewidth=1, alpha=0.7)
            ax.text(act.ef + act.total_float / 2, i, f'TF:{act.total_float}',
                    ha='center', va='center', fontsize=7, color='gray')

    ax.set_yticks(range(len(ordered)))
    ax.set_yticklabels([act.code for act in ordered])
    ax.set_xlabel('Time', fontsize=12)
    ax.set_ylabel('Activities', fontsize=12)
    ax.set_title('Activity Gantt Chart', fontsize=14, fontweight='bold')

    horizon = graph.project_duration + 1
    ax.set_xticks(np.arange(0, horizon + 1, max(1, int(horizon / 20))))
    ax.set_xlim(-0.5, horizon)
    ax.grid(axis='x', linestyle='--', alpha=0.7)
    ax.set_axisbelow(True)

    ax.axvline(x=graph.project_duration, color=theme["critical"], linestyle='--', linewidth=2)
    ax.legend(handles=[
        mpatches.Patch(color=theme["critical"], label='Critical Activity'),
        mpatches.Patch(color=theme["noncritical"], label='Non-Critical Activity'),
        mpatches.Patch(color=theme["float_bar"], label='Total Float'),
    ], loc='upper right')

    plt.tight_layout()
    return fig


@st.cache_data(show_spinner="Generating Interactive Gantt...")
def create_plotly_gantt(graph_data: Dict[str, Any], theme: Dict[str, Any]) -> go.Figure:
    """
    Interactive Gantt timeline; time units are mapped onto days from a base date.
    """
    graph = NetworkGraph.from_dict(graph_data)
    df = graph.get_results_dataframe() if graph.is_calculated else pd.DataFrame()
    if df.empty:
        fig = go.Figure()
        fig.add_annotation(text="No calculated activities to display", x=0.5, y=0.5, showarrow=False)
        fig.update_layout(height=400)
        return fig

    base_date = pd.Timestamp("2000-01-01")
    df["Begin"] = base_date + pd.to_timedelta(df["ES"].astype(int), unit="D")
    df["Finish"] = base_date + pd.to_timedelta(df["EF"].astype(int), unit="D")

    fig = px.timeline(
        df,
        x_start="Begin",
        x_end="Finish",
        y="Code",
        color="Critical",
        color_discrete_map={"Yes": theme["critical"], "No": theme["noncritical"]},
        hover_data=["Duration", "ES", "EF", "LS", "LF", "TF", "FF"],
    )
    fig.update_yaxes(autorange="reversed", gridcolor=theme["border"])
    fig.update_xaxes(gridcolor=theme["border"])
    fig.update_layout(
        height=max(400, len(df) * 32),
        margin=dict(l=10, r=10, t=30, b=10),
        title="Interactive Gantt Timeline",
        xaxis_title="Timeline (1 day = 1 time unit)",
        yaxis_title="Activity",
        template="plotly_white",
        paper_bgcolor=theme["surface"],
        plot_bgcolor=theme["surface"],
        font=dict(color=theme["ink"]),
    )
    return fig


def fig_to_base64(fig: plt.Figure) -> str:
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=150, bbox_inches="tight")
    buffer.seek(0)
    encoded = base64.b64encode(buffer.read()).decode("utf-8")
    buffer.close()
    return encoded

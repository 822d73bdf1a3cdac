import unittest

import matplotlib

matplotlib.use("Agg")

from netgraph.engine import NetworkGraph  # noqa: E402
from netgraph.loader import SAMPLE_NETWORK, load_text  # noqa: E402
from netgraph.ui_components import build_report_html, read_uploaded_network  # noqa: E402
from netgraph.ui_styles import DEFAULT_THEME, get_active_theme, get_theme_css  # noqa: E402
from netgraph.visualizations import _build_event_graph  # noqa: E402


class TestUiComponents(unittest.TestCase):
    def test_read_uploaded_network(self):
        graph, msg = read_uploaded_network(SAMPLE_NETWORK.encode("utf-8"))
        self.assertIsNotNone(graph, msg)
        self.assertEqual(len(graph.activities), 7)

    def test_read_uploaded_binary(self):
        graph, msg = read_uploaded_network(b"\xff\xfe\x00")
        self.assertIsNone(graph)
        self.assertIn("UTF-8", msg)

    def test_report_html(self):
        graph, _ = load_text(SAMPLE_NETWORK)
        graph.calculate_all()
        report = build_report_html(graph, get_active_theme(DEFAULT_THEME))
        self.assertIn("Critical path length: <strong>18</strong>", report)
        self.assertIn("1 &rarr; 3 &rarr; 5 &rarr; 6 &rarr; 7", report)
        self.assertIn("data:image/png;base64,", report)

    def test_report_uses_event_names(self):
        graph, _ = load_text(SAMPLE_NETWORK)
        graph.set_event_name(7, "Finish")
        graph.calculate_all()
        report = build_report_html(graph, get_active_theme(DEFAULT_THEME))
        self.assertIn("1 &rarr; 3 &rarr; 5 &rarr; 6 &rarr; Finish", report)

    def test_event_layers_follow_early_times(self):
        graph, _ = load_text(SAMPLE_NETWORK)
        graph.calculate_all()
        G = _build_event_graph(graph)
        self.assertEqual(G.nodes[5]["layer"], 11)
        self.assertEqual(G.nodes[7]["layer"], 18)

    def test_event_layers_default_to_zero_when_not_calculated(self):
        graph = NetworkGraph(num_events=3)
        for arc in [(1, 2, 1), (2, 3, 1), (3, 2, 1)]:
            graph.add_activity(*arc)
        self.assertFalse(graph.calculate_all()[0])
        G = _build_event_graph(graph)
        self.assertEqual({G.nodes[n]["layer"] for n in G.nodes()}, {0})

    def test_unknown_theme_falls_back(self):
        theme = get_active_theme("missing")
        self.assertEqual(theme, get_active_theme(DEFAULT_THEME))
        self.assertIn(theme["bg"], get_theme_css(theme))


if __name__ == "__main__":
    unittest.main()

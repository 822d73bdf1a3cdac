import contextlib
import io
import os
import tempfile
import unittest

from netgraph.__main__ import main
from netgraph.engine import NetworkGraph
from netgraph.loader import SAMPLE_NETWORK, load_text
from netgraph.report import format_events, format_table


class TestFormatTable(unittest.TestCase):
    def test_calculated_table(self):
        graph, _ = load_text(SAMPLE_NETWORK)
        graph.calculate_all()
        text = format_table(graph)

        self.assertIn("NETWORK SCHEDULE", text)
        self.assertIn("Critical path length: 18", text)
        self.assertIn("Critical path: 1 -> 3 -> 5 -> 6 -> 7", text)
        row = next(line for line in text.splitlines() if line.startswith("1-3"))
        self.assertEqual(row.split(), ["1-3", "6", "0", "6", "0", "6", "0", "0", "Yes"])
        self.assertNotIn("Warning", text)

    def test_empty_graph(self):
        self.assertEqual(format_table(NetworkGraph(num_events=2)), "No data to display.")

    def test_uncalculated_graph_shows_dashes(self):
        graph = NetworkGraph(num_events=2)
        graph.add_activity(1, 2, 3)
        text = format_table(graph)
        self.assertIn("Critical path: (not calculated)", text)
        row = next(line for line in text.splitlines() if line.startswith("1-2"))
        self.assertEqual(row.split(), ["1-2", "3", "-", "-", "-", "-", "-", "-", "No"])

    def test_truncated_path_warning(self):
        graph, _ = load_text("2 1 10\n3 1 1\n4 3 1\n")
        graph.calculate_all()
        text = format_table(graph)
        self.assertIn("Critical path: 1 -> 2", text)
        self.assertIn("stops at event 2 before reaching event 4", text)

    def test_named_events_in_critical_path(self):
        graph, _ = load_text(SAMPLE_NETWORK)
        graph.set_event_name(1, "Start")
        graph.set_event_name(7, "Finish")
        graph.calculate_all()
        self.assertIn("Critical path: Start -> 3 -> 5 -> 6 -> Finish", format_table(graph))

    def test_table_after_failed_recalculation(self):
        graph, _ = load_text(SAMPLE_NETWORK)
        graph.calculate_all()
        graph.add_activity(6, 5, 1)
        ok, _ = graph.calculate_all()
        self.assertFalse(ok)

        text = format_table(graph)
        self.assertIn("Critical path length: 0", text)
        self.assertIn("Critical path: (not calculated)", text)
        row = next(line for line in text.splitlines() if line.startswith("1-3"))
        self.assertEqual(row.split()[-1], "No")

    def test_events_table(self):
        graph, _ = load_text(SAMPLE_NETWORK)
        self.assertEqual(format_events(graph), "No event times calculated.")
        graph.calculate_all()
        self.assertIn("Slack", format_events(graph))


class TestCli(unittest.TestCase):
    def run_cli(self, argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(argv)
        return code, out.getvalue()

    def test_sample(self):
        code, out = self.run_cli(["--sample", "--events-table"])
        self.assertEqual(code, 0)
        self.assertIn("Critical path: 1 -> 3 -> 5 -> 6 -> 7", out)
        self.assertIn("Slack", out)

    def test_file_with_sink_override(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "net.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write("2 1 10\n3 1 1\n4 3 1\n")
            code, out = self.run_cli([path, "--sink", "2"])
        self.assertEqual(code, 0)
        self.assertIn("Critical path: 1 -> 2", out)
        self.assertNotIn("Warning", out)

    def test_event_names_option(self):
        code, out = self.run_cli(["--sample", "--name", "1=Start", "--name", "7=Finish"])
        self.assertEqual(code, 0)
        self.assertIn("Critical path: Start -> 3 -> 5 -> 6 -> Finish", out)

    def test_malformed_event_name_option(self):
        with self.assertRaises(SystemExit):
            with contextlib.redirect_stderr(io.StringIO()):
                main(["--sample", "--name", "Start"])

    def test_missing_file_fails(self):
        code, out = self.run_cli(["/nonexistent/net.txt"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")

    def test_cyclic_network_fails(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "cycle.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write("2 1 1\n3 2 1\n2 3 1\n")
            code, _ = self.run_cli([path])
        self.assertEqual(code, 1)

    def test_file_and_sample_are_exclusive(self):
        with self.assertRaises(SystemExit):
            with contextlib.redirect_stderr(io.StringIO()):
                main([])


if __name__ == "__main__":
    unittest.main()

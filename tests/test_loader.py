import os
import tempfile
import unittest

from netgraph.loader import SAMPLE_NETWORK, build_graph, load_file, load_text, num_events_for, parse_lines


class TestParseLines(unittest.TestCase):
    def test_triples_are_reordered_to_predecessor_event_duration(self):
        triples = parse_lines(["2 1 4", "3 1 6"])
        self.assertEqual(triples, [(1, 2, 4), (1, 3, 6)])

    def test_zero_predecessor_starts_at_event_one(self):
        self.assertEqual(parse_lines(["3 0 5"]), [(1, 3, 5)])

    def test_start_event_declaration_is_dropped(self):
        self.assertEqual(parse_lines(["1 0 0", "2 0 3"]), [(1, 2, 3)])

    def test_blank_comment_and_malformed_lines_are_skipped(self):
        lines = ["", "   ", "# event predecessor duration", "2 1", "x 1 2", "3 2 7 trailing"]
        self.assertEqual(parse_lines(lines), [(2, 3, 7)])

    def test_comments_can_be_disabled(self):
        # "#2 1 4" then no longer parses as integers and is ignored as malformed
        triples = parse_lines(["#2 1 4", "2 1 4"], skip_comments=False)
        self.assertEqual(triples, [(1, 2, 4)])

    def test_num_events_is_highest_id(self):
        self.assertEqual(num_events_for([(1, 2, 4), (5, 3, 1)]), 5)
        self.assertEqual(num_events_for([]), 0)


class TestLoad(unittest.TestCase):
    def test_sample_network(self):
        graph, msg = load_text(SAMPLE_NETWORK)
        self.assertIsNotNone(graph, msg)
        self.assertEqual(graph.num_events, 7)
        self.assertEqual(len(graph.activities), 7)

        ok, _ = graph.calculate_all()
        self.assertTrue(ok)
        self.assertEqual(graph.project_duration, 18)
        self.assertEqual(graph.critical_path.events, [1, 3, 5, 6, 7])

    def test_empty_input(self):
        graph, msg = load_text("# nothing here\n\n")
        self.assertIsNone(graph)
        self.assertEqual(msg, "File contains no data.")

    def test_self_loop_is_rejected(self):
        graph, msg = build_graph([(2, 2, 1)])
        self.assertIsNone(graph)
        self.assertIn("2-2", msg)

    def test_load_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "network.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write("2 0 5\n")
            graph, msg = load_file(path)

        self.assertIsNotNone(graph, msg)
        self.assertEqual(graph.num_events, 2)
        graph.calculate_all()
        self.assertEqual(graph.activities[0].ef, 5)

    def test_missing_file(self):
        graph, msg = load_file("/nonexistent/network.txt")
        self.assertIsNone(graph)
        self.assertIn("Cannot open file", msg)


if __name__ == "__main__":
    unittest.main()

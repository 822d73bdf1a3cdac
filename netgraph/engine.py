from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
import heapq

import pandas as pd

from .models import Activity, CompletePath, CriticalPath, TruncatedPath


class NetworkGraph:
    """
    Activity-on-Arc (AoA) network scheduler.

    Events are dense integer ids in ``[1, num_events]``; activities are arcs
    between them. Implements the classic three-pass CPM calculation (early
    times, late times, floats) and recovers one critical path from the
    source event towards the sink event.
    """

    def __init__(self, num_events: int = 0, source_event: int = 1, sink_event: Optional[int] = None):
        self.num_events = num_events
        self.source_event = source_event
        self._explicit_sink = sink_event
        self.activities: List[Activity] = []
        self.successors: Dict[int, List[int]] = {}
        self.predecessors: Dict[int, List[int]] = {}
        self.event_early: Dict[int, int] = {}
        self.event_late: Dict[int, int] = {}
        self.event_names: Dict[int, str] = {}
        self.calculation_log: List[str] = []
        self.project_duration: int = 0
        self.critical_path: Optional[CriticalPath] = None
        self.is_calculated = False

    @property
    def sink_event(self) -> int:
        if self._explicit_sink is not None:
            return self._explicit_sink
        return self.num_events

    @sink_event.setter
    def sink_event(self, value: Optional[int]) -> None:
        self._explicit_sink = value

    def clear(self) -> None:
        """Clear all activities and calculations."""
        self.activities.clear()
        self.calculation_log.clear()
        self.event_names.clear()
        self._reset_results()
        self._rebuild_indexes()

    def _reset_results(self) -> None:
        for act in self.activities:
            act.reset_calculations()
        self.event_early = {}
        self.event_late = {}
        self.project_duration = 0
        self.critical_path = None
        self.is_calculated = False

    def set_event_name(self, event: int, name: str) -> None:
        """Label an event; names replace ids when paths are printed."""
        self.event_names[event] = name

    def format_path(self, path: Optional[CriticalPath] = None) -> str:
        path = path if path is not None else self.critical_path
        if path is None:
            return "(not calculated)"
        return path.format(self.event_names)

    def resize(self, num_events: int) -> None:
        """Grow the event range so that ids up to ``num_events`` are valid."""
        if num_events > self.num_events:
            self.num_events = num_events
            self._rebuild_indexes()

    def add_activity(self, predecessor: int, event: int, duration: int) -> Tuple[bool, str]:
        """
        Add an activity running from event ``predecessor`` to event ``event``.

        Args:
            predecessor: Start event id, 1..num_events
            event: End event id, 1..num_events
            duration: Duration in time units (must be >= 0)

        Returns:
            Tuple of (success, message)
        """
        for name, value in (("Predecessor", predecessor), ("Event", event)):
            if not 1 <= value <= self.num_events:
                return False, f"{name} {value} is outside the event range 1..{self.num_events}."
        if predecessor == event:
            return False, "An activity cannot start and end at the same event."
        if duration < 0:
            return False, "Duration must be non-negative."

        self.activities.append(Activity(start=predecessor, end=event, duration=duration))
        self._rebuild_indexes()
        self.is_calculated = False

        return True, f"Activity '{predecessor}-{event}' added successfully."

    def _rebuild_indexes(self) -> None:
        successors: Dict[int, List[int]] = {e: [] for e in range(1, self.num_events + 1)}
        predecessors: Dict[int, List[int]] = {e: [] for e in range(1, self.num_events + 1)}
        for idx, act in enumerate(self.activities):
            successors[act.start].append(idx)
            predecessors[act.end].append(idx)
        self.successors = successors
        self.predecessors = predecessors

    def _log(self, message: str) -> None:
        self.calculation_log.append(message)

    def _get_topological_order(self) -> List[int]:
        """Get events in topological order, smallest id first among ready events."""
        in_degree = {e: len(self.predecessors[e]) for e in self.predecessors}
        ready = [e for e, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        order: List[int] = []

        while ready:
            event = heapq.heappop(ready)
            order.append(event)
            for idx in self.successors[event]:
                nxt = self.activities[idx].end
                in_degree[nxt] -= 1
                if in_degree[nxt] == 0:
                    heapq.heappush(ready, nxt)

        return order

    def validate_network(self) -> Tuple[bool, str]:
        """Check the network is ready for calculation."""
        if not self.activities:
            return False, "No data for calculation: the network has no activities."

        order = self._get_topological_order()
        if len(order) < len(self.successors):
            stuck = sorted(set(self.successors) - set(order))
            return False, f"Circular dependency detected among events: {', '.join(map(str, stuck))}"

        return True, "Network is valid."

    def calculate_all(self) -> Tuple[bool, str]:
        """
        Perform full CPM calculation: early times, late times, floats.
        """
        self.calculation_log.clear()
        self._log("=" * 70)
        self._log("CPM CALCULATION")
        self._log("Network graph (Activity-on-Arc)")
        self._log("=" * 70)
        self._log("")

        self._reset_results()

        valid, msg = self.validate_network()
        if not valid:
            self._log(f"ERROR: {msg}")
            return False, msg

        self.calculate_early_times()
        self.calculate_late_times()
        self.calculate_floats()
        self.critical_path = self.find_critical_path()
        self.is_calculated = True

        self._log("")
        self._log("=" * 70)
        self._log("CALCULATION COMPLETE")
        self._log(f"Critical Path Length: {self.project_duration}")
        self._log(f"Critical Path: {self.format_path()}")
        if not self.critical_path.complete:
            self._log(f"  (stopped at event {self.critical_path.reached_event}, sink is {self.sink_event})")
        self._log("=" * 70)

        return True, "Calculation completed successfully."

    def calculate_early_times(self) -> None:
        """
        Forward pass: earliest time of every event, then ES and EF of activities.
        """
        self._log("FORWARD PASS (Calculating ES and EF)")
        self._log("-" * 50)

        early = {e: 0 for e in self.successors}
        for event in self._get_topological_order():
            for idx in self.successors[event]:
                act = self.activities[idx]
                candidate = early[event] + act.duration
                if candidate > early[act.end]:
                    self._log(
                        f"  Event {act.end}: via {act.code} = {early[event]} + {act.duration} = {candidate}"
                    )
                    early[act.end] = candidate

        for act in self.activities:
            act.es = early[act.start]
            act.ef = act.es + act.duration
            self._log(f"{act.code}: ES = {act.es}, EF = ES + Duration = {act.es} + {act.duration} = {act.ef}")

        self.event_early = early

    def calculate_late_times(self) -> None:
        """
        Backward pass: latest time of every event, then LS and LF of activities.
        """
        self._log("\n\nBACKWARD PASS (Calculating LS and LF)")
        self._log("-" * 50)

        critical_time = max((act.ef for act in self.activities), default=0)
        self.project_duration = critical_time
        self._log(f"Project Finish = max(all EF values) = {critical_time}")

        late = {e: critical_time for e in self.predecessors}
        for event in reversed(self._get_topological_order()):
            for idx in self.predecessors[event]:
                act = self.activities[idx]
                candidate = late[event] - act.duration
                if candidate < late[act.start]:
                    self._log(
                        f"  Event {act.start}: via {act.code} = {late[event]} - {act.duration} = {candidate}"
                    )
                    late[act.start] = candidate

        for act in self.activities:
            act.lf = late[act.end]
            act.ls = act.lf - act.duration
            self._log(f"{act.code}: LF = {act.lf}, LS = LF - Duration = {act.lf} - {act.duration} = {act.ls}")

        self.event_late = late

    def calculate_floats(self) -> None:
        """
        Calculate Total Float (R) and Free Float (r) for all activities.
        """
        self._log("\n\nFLOAT CALCULATIONS")
        self._log("-" * 50)

        for act in self.activities:
            act.total_float = act.ls - act.es
            act.is_critical = act.total_float == 0

            next_es = [self.activities[idx].es for idx in self.successors.get(act.end, [])]
            if next_es:
                act.free_float = min(next_es) - act.ef
                ff_note = f"min(ES of successors) - EF = {min(next_es)} - {act.ef}"
            else:
                act.free_float = 0
                ff_note = "no successors"

            self._log(
                f"{act.code}: TF = LS - ES = {act.ls} - {act.es} = {act.total_float}; "
                f"FF = {act.free_float} ({ff_note})"
                + (" -> CRITICAL" if act.is_critical else "")
            )

    def find_critical_path(self) -> CriticalPath:
        """
        Follow zero-float activities from the source event towards the sink.

        Ties are broken by input order. The walk stops at the sink or at the
        first event without an unvisited critical outgoing activity.
        """
        current = self.source_event
        path = [current]
        visited = {current}

        while current != self.sink_event:
            nxt = None
            for idx in self.successors.get(current, []):
                act = self.activities[idx]
                if act.total_float == 0 and act.end not in visited:
                    nxt = act.end
                    break
            if nxt is None:
                return TruncatedPath(events=path, reached_event=current)
            current = nxt
            path.append(current)
            visited.add(current)

        return CompletePath(events=path)

    def critical_activities(self) -> List[Activity]:
        return [act for act in self.activities if act.is_critical]

    def get_results_dataframe(self) -> pd.DataFrame:
        """Get calculation results as a pandas DataFrame."""
        data = []
        for act in self.activities:
            data.append(
                {
                    "Code": act.code,
                    "Start": act.start,
                    "End": act.end,
                    "Duration": act.duration,
                    "ES": act.es if act.es is not None else "-",
                    "EF": act.ef if act.ef is not None else "-",
                    "LS": act.ls if act.ls is not None else "-",
                    "LF": act.lf if act.lf is not None else "-",
                    "TF": act.total_float if act.total_float is not None else "-",
                    "FF": act.free_float if act.free_float is not None else "-",
                    "Critical": "Yes" if act.is_critical else "No",
                }
            )
        return pd.DataFrame(data)

    def get_activities_dataframe(self) -> pd.DataFrame:
        """Get activities list as a pandas DataFrame."""
        data = [
            {"Code": act.code, "Start": act.start, "End": act.end, "Duration": act.duration}
            for act in self.activities
        ]
        return pd.DataFrame(data)

    def get_events_dataframe(self) -> pd.DataFrame:
        """Early and late time of every event with its slack."""
        data = []
        for event in sorted(self.event_early):
            early = self.event_early[event]
            late = self.event_late.get(event)
            data.append(
                {
                    "Event": event,
                    "Early": early,
                    "Late": late if late is not None else "-",
                    "Slack": late - early if late is not None else "-",
                }
            )
        return pd.DataFrame(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_events": self.num_events,
            "source_event": self.source_event,
            "sink_event": self._explicit_sink,
            "activities": [[act.start, act.end, act.duration] for act in self.activities],
            "event_names": dict(self.event_names),
            "calculated": self.is_calculated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkGraph":
        graph = cls(
            num_events=data["num_events"],
            source_event=data.get("source_event", 1),
            sink_event=data.get("sink_event"),
        )
        for event, name in data.get("event_names", {}).items():
            graph.set_event_name(int(event), name)
        for start, end, duration in data["activities"]:
            ok, msg = graph.add_activity(start, end, duration)
            if not ok:
                raise ValueError(msg)
        if data.get("calculated"):
            graph.calculate_all()
        return graph

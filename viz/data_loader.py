"""
data_loader.py — Loads search JSONL logs into structured Python objects
for the Dash visualization app.
"""

import json


class SearchData:
    """Parsed search log — provides series and results access for the UI."""

    def __init__(self, events: list[dict]):
        self.events = events
        self.progress = [e for e in events if e.get("event") == "progress"]
        self.improvements = [e for e in events if e.get("event") == "improvement"]
        finished = [e for e in events if e.get("event") == "finished"]
        self.summary: dict = finished[-1] if finished else {}

    @property
    def finished(self) -> bool:
        return bool(self.summary)

    # -- Series ---------------------------------------------------------------

    def get_iterations(self) -> list[int]:
        return [e.get("iteration", 0) for e in self.progress]

    def get_mean_series(self) -> list[float]:
        return [e.get("mean", 0.0) for e in self.progress]

    def get_best_series(self) -> list[float]:
        return [e.get("best", 0.0) for e in self.progress]

    def get_worst_series(self) -> list[float]:
        return [e.get("worst", 0.0) for e in self.progress]

    def get_best_ever_series(self) -> list[float]:
        return [e.get("best_ever", 0.0) for e in self.progress]

    def get_improvement_series(self) -> list[float]:
        """Evaluation of every successive new best."""
        return [e.get("evaluation", 0.0) for e in self.improvements]

    # -- Results --------------------------------------------------------------

    def get_results(self) -> list[dict]:
        """Ranked results: [{"rank", "evaluation", "automaton"}], best first."""
        return list(self.summary.get("results", []))

    def get_result(self, rank: int) -> dict:
        """Get a ranked result by rank (0 = best)."""
        results = self.get_results()
        if 0 <= rank < len(results):
            return results[rank]
        return {}

    def get_best_evaluation(self) -> float | None:
        results = self.get_results()
        if results:
            return results[0].get("evaluation")
        if self.improvements:
            return self.improvements[-1].get("evaluation")
        return None

    # -- Narrative ------------------------------------------------------------

    def generate_summary(self) -> str:
        """Generate a human-readable account of the search."""
        if not self.events:
            return "No data."

        lines = ["🔎 Search summary", ""]
        sample = self.summary.get("sample", {})
        if sample:
            lines.append(
                f"SAMPLE: {sample.get('size', 0)} words "
                f"({sample.get('accepted', 0)} accepted, {sample.get('rejected', 0)} rejected)"
            )

        if self.progress:
            first, last = self.progress[0], self.progress[-1]
            lines.append(f"PROGRESS: {len(self.progress)} reports, "
                         f"iterations {first.get('iteration', 0)}–{last.get('iteration', 0)}")
            lines.append(f"  swarm mean {first.get('mean', 0):.4f} → {last.get('mean', 0):.4f}")
        lines.append(f"IMPROVEMENTS: {len(self.improvements)}")

        if not self.finished:
            lines.append("")
            lines.append("STATUS: search did not finish")
            return "\n".join(lines)

        reason = self.summary.get("termination_reason")
        iterations = self.summary.get("iterations")
        if reason:
            lines.append(f"STOPPED: {reason} after {iterations} iterations "
                         f"({self.summary.get('elapsed', 0):.1f} s)")

        lines.append("")
        lines.append("RESULTS:")
        for result in self.get_results():
            automaton = result.get("automaton", {})
            evaluation = result.get("evaluation", 0.0)
            bar_len = int((1 - evaluation) * 20)
            bar = "█" * bar_len + "░" * (20 - bar_len)
            lines.append(
                f"  #{result.get('rank', '?')} {bar} cost={evaluation:.4f} "
                f"states={len(automaton.get('states', []))} "
                f"accepting={automaton.get('accepting_states', [])}"
            )

        best = self.get_best_evaluation()
        if best == 0:
            lines.append("")
            lines.append("RESULT: perfect automaton found")
        return "\n".join(lines)


def load_search_log(path: str) -> SearchData:
    """Load a JSONL search log file."""
    events = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                events.append(json.loads(line))
    return SearchData(events)

"""
SearchLogger — Captures swarm search events for visualization.

Logs progress statistics, improvements and the final ranked automata
to a single JSONL file.
"""

import json
import os
import time
from dataclasses import dataclass, field, asdict

from listeners import PSOEventListener
from solution import dfa_from_solution


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class ProgressRecord:
    """Swarm statistics at one reported generation."""
    iteration: int
    mean: float
    best: float
    worst: float
    best_ever: float
    elapsed: float = 0.0              # seconds since search start


@dataclass
class ImprovementRecord:
    """A new overall best evaluation."""
    index: int                        # order of the improvement within the search
    evaluation: float
    elapsed: float = 0.0


@dataclass
class SearchSummary:
    """Outcome of a finished search."""
    sample: dict = field(default_factory=dict)       # size / accepted / rejected
    results: list = field(default_factory=list)      # [{"rank", "evaluation", "automaton"}]
    params: dict | None = None
    termination_reason: str | None = None
    iterations: int | None = None
    elapsed: float = 0.0


# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------

class SearchLogger(PSOEventListener):
    """Records search events and writes them to JSONL."""

    def __init__(self, log_dir: str = "logs", params=None, pso=None):
        self.log_dir = log_dir
        self.log_path = os.path.join(log_dir, "search_log.jsonl")
        self.params = params
        self.pso = pso                  # optional, for termination details
        self.progress: list[ProgressRecord] = []
        self.improvements: list[ImprovementRecord] = []
        self.summary: SearchSummary | None = None
        self._order: list[tuple[str, object]] = []   # (event, record) as received
        self._started: float | None = None

    def _elapsed(self) -> float:
        if self._started is None:
            return 0.0
        return time.monotonic() - self._started

    # -- Listener hooks ------------------------------------------------------

    def on_search_started(self):
        self._started = time.monotonic()
        self.progress = []
        self.improvements = []
        self.summary = None
        self._order = []

    def on_progress(self, iteration, mean, best, worst, best_ever):
        record = ProgressRecord(
            iteration=int(iteration), mean=float(mean), best=float(best),
            worst=float(worst), best_ever=float(best_ever), elapsed=self._elapsed(),
        )
        self.progress.append(record)
        self._order.append(("progress", record))

    def on_improvement(self, evaluation):
        record = ImprovementRecord(
            index=len(self.improvements), evaluation=float(evaluation),
            elapsed=self._elapsed(),
        )
        self.improvements.append(record)
        self._order.append(("improvement", record))

    def on_search_finished(self, results, sample):
        ranked = [
            {
                "rank": rank,
                "evaluation": solution.evaluation,
                "automaton": dfa_from_solution(solution).to_dict(),
            }
            for rank, solution in enumerate(results)
        ]
        reason = None
        iterations = None
        if self.pso is not None:
            if self.pso.termination_reason is not None:
                reason = self.pso.termination_reason.value
            iterations = self.pso.iterations
        self.summary = SearchSummary(
            sample=sample.stats(),
            results=ranked,
            params=self.params.to_dict() if self.params is not None else None,
            termination_reason=reason,
            iterations=iterations,
            elapsed=self._elapsed(),
        )

    # -- Serialization -------------------------------------------------------

    def events(self) -> list[dict]:
        """All recorded events in order, as JSON-serializable dicts."""
        rows = [{"event": "started"}]
        rows += [{"event": event, **asdict(record)} for event, record in self._order]
        if self.summary is not None:
            rows.append({"event": "finished", **asdict(self.summary)})
        return rows

    def save(self) -> str:
        """Write all events to the JSONL file and return its path."""
        os.makedirs(self.log_dir, exist_ok=True)
        with open(self.log_path, "w", encoding="utf-8") as f:
            for row in self.events():
                f.write(json.dumps(row, separators=(",", ":")) + "\n")
        return self.log_path

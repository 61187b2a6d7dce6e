"""
pso.py - Particle swarm search for an automaton matching a word sample.

Each particle carries a continuous encoding of an automaton (see
solution.py). Velocities pull every particle towards its own best position
and towards the best solution found so far among particles with the same
number of states. Since the state count of a particle never changes, the
swarm effectively runs one sub-swarm per state count, sharing results.
"""

import logging
import time
from dataclasses import dataclass, asdict
from datetime import timedelta
from enum import Enum

import numpy as np

from evaluator import Evaluator
from listeners import PSOEventListener
from particle import Particle
from results import Results
from solution import Solution
from word_sample import WordSample

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 50
RESULTS_CAPACITY = 5


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

@dataclass
class PSOParams:
    """Search configuration."""
    max_iterations: int = 40000
    particles_count: int = 50
    velocity_weight: float = 2.0
    personal_weight: float = 10.0
    global_weight: float = 2.0
    allowed_time: timedelta = timedelta(minutes=3)
    max_states: int = 20
    acceptance_velocity_bound: float = 0.4

    def __post_init__(self):
        if self.max_iterations < 0:
            raise ValueError("max_iterations must not be negative")
        if self.particles_count < 1:
            raise ValueError("particles_count must be at least 1")
        if self.max_states < 1:
            raise ValueError("max_states must be at least 1")
        if not isinstance(self.allowed_time, timedelta):
            self.allowed_time = timedelta(seconds=float(self.allowed_time))

    @classmethod
    def from_dict(cls, d: dict) -> "PSOParams":
        """Build from a JSON-compatible mapping; `allowed_time` is in seconds."""
        known = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        if "allowed_time" in known:
            known["allowed_time"] = timedelta(seconds=float(known["allowed_time"]))
        return cls(**known)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["allowed_time"] = self.allowed_time.total_seconds()
        return d


class SearchState(Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    TERMINATED = "terminated"


class TerminationReason(Enum):
    PERFECT = "perfect"
    TIMEOUT = "timeout"
    ITERATIONS_EXHAUSTED = "iterations_exhausted"


def swarm_statistics(particles) -> tuple[float, float, float]:
    """Mean, best (lowest) and worst (highest) current evaluation of the swarm."""
    evaluations = np.array([p.current.evaluation for p in particles], dtype=np.float64)
    return float(evaluations.mean()), float(evaluations.min()), float(evaluations.max())


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

class PSO:
    """Runs one search at a time; `search` may be called again for a fresh run."""

    def __init__(self, params: PSOParams, rng: np.random.Generator,
                 listener: PSOEventListener | None = None):
        self.params = params
        self.rng = rng
        self.listener = listener or PSOEventListener()
        self.state = SearchState.IDLE
        self.termination_reason: TerminationReason | None = None
        self.iterations = 0
        self.particles: list[Particle] = []
        self.best_so_far: Solution | None = None
        self.best_per_state_count: dict[int, Solution] = {}
        self.evaluator: Evaluator | None = None

    def search(self, inputs, sample: WordSample) -> Results:
        """Search for automata over `inputs` that classify `sample` correctly.

        Raises ValueError for an empty sample, before any listener is notified.
        """
        evaluator = Evaluator(sample)
        self.listener.on_search_started()
        started = time.monotonic()
        self.state = SearchState.INITIALIZING
        self.termination_reason = None
        self.iterations = 0
        self.best_so_far = None
        self.best_per_state_count = {}

        results = Results(RESULTS_CAPACITY)
        self.evaluator = evaluator
        self._init_particles(inputs)
        self._evaluate_particles(results)
        logger.info(self._statistics())

        self.state = SearchState.ITERATING
        if self.best_so_far.evaluation == 0:
            # Generation 0 is still reported when the initial swarm is perfect.
            mean, best, worst = swarm_statistics(self.particles)
            self.listener.on_progress(0, mean, best, worst, self.best_so_far.evaluation)
            self.termination_reason = TerminationReason.PERFECT
        else:
            self._iterate(results, started)
        logger.info(self._statistics())

        logger.info("Processing time: %.3f s", time.monotonic() - started)
        self.state = SearchState.TERMINATED
        self.listener.on_search_finished(results, sample)
        return results

    def _iterate(self, results: Results, started: float):
        allowed = self.params.allowed_time.total_seconds()
        self.termination_reason = TerminationReason.ITERATIONS_EXHAUSTED
        for i in range(self.params.max_iterations):
            if i % PROGRESS_INTERVAL == 0:
                mean, best, worst = swarm_statistics(self.particles)
                self.listener.on_progress(i, mean, best, worst, self.best_so_far.evaluation)
            self._update_velocities()
            self._move_particles()
            self._evaluate_particles(results)
            self.iterations = i + 1
            if i % PROGRESS_INTERVAL == 0:
                logger.info(self._statistics())

            if self.best_so_far.evaluation == 0:
                self.termination_reason = TerminationReason.PERFECT
                break
            if time.monotonic() - started > allowed:
                self.termination_reason = TerminationReason.TIMEOUT
                break

    # -- Swarm steps ---------------------------------------------------------

    def _init_particles(self, inputs):
        self.particles = []
        for _ in range(self.params.particles_count):
            solution = Solution(self.params.max_states, inputs, self.rng)
            solution.randomise_continuous()
            self.particles.append(Particle(
                solution, self.rng,
                acceptance_speed_bound=self.params.acceptance_velocity_bound,
            ))

    def _update_velocities(self):
        for particle in self.particles:
            particle.update_velocity(self.params,
                                     self.best_per_state_count.get(particle.state_count))

    def _move_particles(self):
        for particle in self.particles:
            particle.move()

    def _evaluate_particles(self, results: Results):
        best = self.best_so_far.evaluation if self.best_so_far is not None else float("inf")
        for particle in self.particles:
            evaluation = particle.evaluate(self.evaluator)
            if evaluation < best:
                logger.info("Found new best %s", evaluation)
                best = evaluation
                self.best_so_far = particle.current
                results.add(particle.current)
                self.listener.on_improvement(evaluation)

            cohort_best = self.best_per_state_count.get(particle.state_count)
            if cohort_best is None or evaluation < cohort_best.evaluation:
                self.best_per_state_count[particle.state_count] = particle.current

    def _statistics(self) -> str:
        mean, best, worst = swarm_statistics(self.particles)
        return (f"Average {mean}, min {best}, max {worst}, "
                f"best so far {self.best_so_far.evaluation}")

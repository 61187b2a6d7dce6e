"""
particle.py - A member of the swarm: position, personal best and velocity.
"""

import logging

import numpy as np

from evaluator import Evaluator
from solution import Solution
from velocity import Velocity, update_velocity

logger = logging.getLogger(__name__)

TRANSITION_STEP = 0.25
ACCEPTANCE_STEP = 0.75


class Particle:
    """Tracks the current solution, the best one it has visited and its velocity."""

    def __init__(self, solution: Solution, rng: np.random.Generator,
                 initial_transition_speed: float = 1.0,
                 initial_acceptance_speed: float = 0.2,
                 acceptance_speed_bound: float = 0.4):
        self.rng = rng
        self.current = solution
        self.best = solution
        self.velocity = Velocity(solution.states, solution.inputs, rng,
                                 initial_transition_speed, initial_acceptance_speed,
                                 acceptance_speed_bound)
        self.velocity.randomise()

    @property
    def state_count(self) -> int:
        return self.current.state_count

    def update_velocity(self, params, cohort_best: Solution | None) -> bool:
        """Pull the velocity towards the personal and cohort bests.

        Returns False when there is no cohort best yet and nothing changed.
        """
        if cohort_best is None:
            logger.warning("Best so far for %d states is missing, velocity not updated",
                           self.state_count)
            return False
        logger.debug("Velocity %r", self.velocity)
        update_velocity(self.velocity, params, self.current, self.best, cohort_best, self.rng)
        return True

    def move(self):
        """Step the position along the velocity; the previous position is discarded."""
        moved = self.current.copy()
        for symbol in moved.inputs:
            table = moved.transitions[symbol]
            table.set_all(table.values + TRANSITION_STEP * self.velocity.transitions[symbol].values)
        for state in moved.states:
            moved.set_acceptance(
                state,
                self.current.acceptance_value(state)
                + ACCEPTANCE_STEP * self.velocity.acceptance_value(state),
            )
        self.current = moved

    def evaluate(self, evaluator: Evaluator) -> float:
        """Evaluate the current position, promoting it to personal best if strictly better."""
        evaluation = evaluator.evaluate(self.current)
        if self.current is not self.best and evaluation < self.best.evaluation:
            self.best = self.current
        return evaluation

    def __repr__(self):
        return f"Particle(current={self.current!r}, best={self.best!r})"

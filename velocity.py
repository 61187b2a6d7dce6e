"""
velocity.py - Particle velocity and the PSO velocity update rule.

A Velocity has the same shape as a Solution: one delta per (state, input)
transition cell and one per acceptance cell.

Transition deltas live in tables bounded to +/-TRANSITION_VELOCITY_BOUND,
which is fixed. Acceptance deltas are clamped to `acceptance_bound`, which
is configurable.
"""

import numpy as np

from solution import Solution, TransitionTable


TRANSITION_VELOCITY_BOUND = 2.0


class Velocity:
    """Per-cell rate of change of a particle's position."""

    def __init__(self, states, inputs, rng: np.random.Generator,
                 initial_transition_max_abs: float = 1.0,
                 initial_acceptance_max_abs: float = 0.2,
                 acceptance_bound: float = 0.4):
        self.states = tuple(sorted(states))
        self.inputs = tuple(sorted(inputs))
        self.rng = rng
        self.initial_transition_max_abs = initial_transition_max_abs
        self.initial_acceptance_max_abs = initial_acceptance_max_abs
        self.acceptance_bound = acceptance_bound
        self.transitions = {
            symbol: TransitionTable(self.states, -TRANSITION_VELOCITY_BOUND,
                                    TRANSITION_VELOCITY_BOUND,
                                    f"Velocity table for input {symbol}")
            for symbol in self.inputs
        }
        self.acceptance = np.zeros(len(self.states), dtype=np.float64)

    def _random_signed(self, max_abs: float) -> np.ndarray:
        magnitude = self.rng.random(len(self.states)) * max_abs
        negate = self.rng.random(len(self.states)) < 0.5
        return np.where(negate, -magnitude, magnitude)

    def randomise(self):
        """Random deltas with random sign, bounded by the initial magnitudes."""
        for table in self.transitions.values():
            table.set_all(self._random_signed(self.initial_transition_max_abs))
        self.acceptance = self._random_signed(self.initial_acceptance_max_abs)

    def transition_value(self, state: int, symbol: int) -> float:
        return self.transitions[symbol].get(state)

    def acceptance_value(self, state: int) -> float:
        return float(self.acceptance[self.states.index(state)])

    def set_acceptance_all(self, values):
        self.acceptance = np.clip(np.asarray(values, dtype=np.float64),
                                  -self.acceptance_bound, self.acceptance_bound)

    def __repr__(self):
        tables = "\n".join(repr(t) for t in self.transitions.values())
        accepted = "\n".join(f"{s}:\t{v:.4f}" for s, v in zip(self.states, self.acceptance))
        return f"Velocity\n{tables}\nAccepted:\n{accepted}"


def update_velocity(velocity: Velocity, params, current: Solution,
                    personal_best: Solution, global_best: Solution,
                    rng: np.random.Generator):
    """
    Apply v' = w_v*r1*v + w_p*r2*(pbest - x) + w_g*r3*(gbest - x) to every cell.

    r1, r2 and r3 are drawn independently for each cell. `params` supplies
    velocity_weight, personal_weight and global_weight.
    """
    n = len(velocity.states)
    for symbol in velocity.inputs:
        table = velocity.transitions[symbol]
        x = current.transitions[symbol].values
        r1, r2, r3 = rng.random((3, n))
        table.set_all(
            params.velocity_weight * r1 * table.values
            + params.personal_weight * r2 * (personal_best.transitions[symbol].values - x)
            + params.global_weight * r3 * (global_best.transitions[symbol].values - x)
        )

    x = current.acceptance
    r1, r2, r3 = rng.random((3, n))
    velocity.set_acceptance_all(
        params.velocity_weight * r1 * velocity.acceptance
        + params.personal_weight * r2 * (personal_best.acceptance - x)
        + params.global_weight * r3 * (global_best.acceptance - x)
    )

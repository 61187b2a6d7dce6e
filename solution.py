"""
solution.py - Continuous encoding of an automaton, used as a PSO position.

Each input owns a TransitionTable holding one real "next state" value per
state; rounding the value gives the discrete next state. Each state also
carries a real acceptance score in [0, 1]; scores >= 0.5 mean accepting.
"""

import math

import numpy as np

from automaton import DFA, integer_set


ACCEPTANCE_MIN = 0.0
ACCEPTANCE_MAX = 1.0
ACCEPTANCE_THRESHOLD = 0.5
STATE_MARGIN = 0.4999


class UnevaluatedSolutionError(RuntimeError):
    """The evaluation of a solution was read before it was computed."""


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------

class TransitionTable:
    """Real values indexed by state, clamped on write to [minimum, maximum]."""

    def __init__(self, states, minimum: float, maximum: float, name: str = ""):
        self.states = tuple(sorted(states))
        self.minimum = minimum
        self.maximum = maximum
        self.name = name
        self._index = {state: i for i, state in enumerate(self.states)}
        self.values = np.full(len(self.states), minimum, dtype=np.float64)

    @classmethod
    def for_states(cls, states, name: str = "") -> "TransitionTable":
        """Table bounded to half a state beyond the first and last state."""
        return cls(states, min(states) - STATE_MARGIN, max(states) + STATE_MARGIN, name)

    def copy(self) -> "TransitionTable":
        other = TransitionTable(self.states, self.minimum, self.maximum, self.name)
        other.values = self.values.copy()
        return other

    def clamp(self, value):
        return np.clip(value, self.minimum, self.maximum)

    def get(self, state: int) -> float:
        return float(self.values[self._index[state]])

    def set(self, state: int, value: float):
        self.values[self._index[state]] = self.clamp(value)

    def set_all(self, values):
        self.values = self.clamp(np.asarray(values, dtype=np.float64)).astype(np.float64)

    def __repr__(self):
        rows = "\n".join(f"{s}:\t{v:.4f}" for s, v in zip(self.states, self.values))
        return f"{self.name}\n{rows}"


# ---------------------------------------------------------------------------
# Solution
# ---------------------------------------------------------------------------

class Solution:
    """
    Candidate automaton for the swarm.

    The number of states is drawn once at construction as
    round(max(0.5, random() * max_states)) unless `state_count` is given,
    and never changes afterwards. Every mutation invalidates the cached
    evaluation.
    """

    def __init__(self, max_states: int, inputs, rng: np.random.Generator,
                 state_count: int | None = None):
        self.rng = rng
        if state_count is None:
            state_count = round_half_up(max(0.5, rng.random() * max_states))
        self.state_count = state_count
        self.states = tuple(sorted(integer_set(state_count)))
        self.inputs = tuple(sorted(inputs))
        self.transitions = {
            symbol: TransitionTable.for_states(self.states, f"Transition table for input {symbol}")
            for symbol in self.inputs
        }
        self.acceptance = np.zeros(len(self.states), dtype=np.float64)
        self._evaluation = 0.0
        self._evaluated = False

    @classmethod
    def from_dfa(cls, automaton: DFA, rng: np.random.Generator) -> "Solution":
        """Exact encoding of an automaton over states 1..N with initial state 1."""
        states = sorted(automaton.states)
        if states != list(range(1, len(states) + 1)) or automaton.initial_state != 1:
            raise ValueError("Only automata over states 1..N starting in state 1 can be encoded")
        solution = cls(len(states), automaton.inputs, rng, state_count=len(states))
        for state in states:
            for symbol in solution.inputs:
                solution.set_transition(state, symbol, automaton.transition(state, symbol))
            solution.set_acceptance(state, 1.0 if automaton.is_accepted(state) else 0.0)
        return solution

    def copy(self) -> "Solution":
        """Independent copy sharing the state count, inputs and evaluation."""
        other = Solution(self.state_count, self.inputs, self.rng, state_count=self.state_count)
        other.transitions = {symbol: table.copy() for symbol, table in self.transitions.items()}
        other.acceptance = self.acceptance.copy()
        other._evaluation = self._evaluation
        other._evaluated = self._evaluated
        return other

    # -- Evaluation cache ----------------------------------------------------

    @property
    def evaluated(self) -> bool:
        return self._evaluated

    @property
    def evaluation(self) -> float:
        if not self._evaluated:
            raise UnevaluatedSolutionError("This solution is not evaluated")
        return self._evaluation

    @evaluation.setter
    def evaluation(self, value: float):
        self._evaluation = float(value)
        self._evaluated = True

    # -- Mutation ------------------------------------------------------------

    def set_transition(self, state: int, symbol: int, value: float):
        self._evaluated = False
        self.transitions[symbol].set(state, value)

    def set_acceptance(self, state: int, value: float):
        self._evaluated = False
        self.acceptance[self.states.index(state)] = np.clip(value, ACCEPTANCE_MIN, ACCEPTANCE_MAX)

    def randomise(self):
        """Integer-valued transitions to uniformly chosen states, uniform acceptance."""
        self._evaluated = False
        states = np.asarray(self.states, dtype=np.float64)
        for table in self.transitions.values():
            table.set_all(states[self.rng.integers(0, len(states), size=len(states))])
        self.acceptance = self.rng.random(len(self.states))

    def randomise_continuous(self):
        """Transitions spread uniformly within half a unit of a randomly chosen state."""
        self._evaluated = False
        states = np.asarray(self.states, dtype=np.float64)
        for table in self.transitions.values():
            chosen = states[self.rng.integers(0, len(states), size=len(states))]
            table.set_all(chosen - 0.5 + self.rng.random(len(states)))
        self.acceptance = self.rng.random(len(self.states))

    # -- Decoding ------------------------------------------------------------

    def transition_value(self, state: int, symbol: int) -> float:
        return self.transitions[symbol].get(state)

    def acceptance_value(self, state: int) -> float:
        return float(self.acceptance[self.states.index(state)])

    def next_state(self, state: int, symbol: int) -> int:
        """Rounded next state, snapped to the nearest existing state if out of range."""
        rounded = round_half_up(self.transition_value(state, symbol))
        if rounded in self.states:
            return rounded
        closest, difference = None, math.inf
        for candidate in self.states:
            if abs(rounded - candidate) < difference:
                closest, difference = candidate, abs(rounded - candidate)
        return closest

    def accepted_states(self) -> frozenset:
        return frozenset(s for s, value in zip(self.states, self.acceptance)
                         if value >= ACCEPTANCE_THRESHOLD)

    def to_dfa(self) -> DFA:
        return dfa_from_solution(self)

    def __repr__(self):
        evaluation = f"{self._evaluation:.6f}" if self._evaluated else "None"
        return f"Solution(states={self.state_count}, evaluation={evaluation})"

    def describe(self) -> str:
        """Raw encoded values of every table and acceptance score."""
        parts = [repr(table) for table in self.transitions.values()]
        parts.append("Accepted:")
        parts += [f"{s}:\t{v:.4f}" for s, v in zip(self.states, self.acceptance)]
        return "\n".join(parts)


def dfa_from_solution(solution: Solution) -> DFA:
    """Decode a solution into a discrete automaton starting in state 1."""
    transitions = {
        (state, symbol): solution.next_state(state, symbol)
        for state in solution.states
        for symbol in solution.inputs
    }
    return DFA(solution.states, solution.inputs, transitions, 1, solution.accepted_states())

"""
automaton.py - Deterministic finite automaton, its step-by-step computer
and the plain-text automaton description format.

States and inputs are positive integers. By convention states are the
contiguous range 1..N and state 1 is the initial state.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping


class InvalidTransitionError(ValueError):
    """A state or input outside the automaton's declared sets was used."""


class DFAFormatError(OSError):
    """An automaton description could not be read."""


def integer_set(count: int) -> frozenset:
    """Return {1, ..., count}."""
    return frozenset(range(1, count + 1))


# ---------------------------------------------------------------------------
# Automaton
# ---------------------------------------------------------------------------

class DFA:
    """
    Deterministic finite automaton.

    The transition table maps every (state, input) pair to exactly one
    state. The automaton is immutable once constructed.
    """

    def __init__(self, states, inputs, transitions: Mapping, initial_state: int,
                 accepting_states):
        self._states = frozenset(states)
        self._inputs = frozenset(inputs)
        self._transitions = dict(transitions)
        self._initial_state = initial_state
        self._accepting = frozenset(accepting_states)
        self._validate()

    def _validate(self):
        if self._initial_state not in self._states:
            raise InvalidTransitionError(
                f"Initial state {self._initial_state} is not one of {sorted(self._states)}")
        unknown = self._accepting - self._states
        if unknown:
            raise InvalidTransitionError(
                f"Accepting states {sorted(unknown)} are not one of {sorted(self._states)}")
        for state in self._states:
            for symbol in self._inputs:
                if (state, symbol) not in self._transitions:
                    raise InvalidTransitionError(
                        f"No transition defined for state {state}, input {symbol}")
                target = self._transitions[(state, symbol)]
                if target not in self._states:
                    raise InvalidTransitionError(
                        f"Transition ({state}, {symbol}) -> {target} leads to an unknown state")
        extra = [key for key in self._transitions
                 if key[0] not in self._states or key[1] not in self._inputs]
        if extra:
            raise InvalidTransitionError(
                f"Transitions defined outside the automaton: {sorted(extra)}")

    # -- Accessors -----------------------------------------------------------

    @property
    def states(self) -> frozenset:
        return self._states

    @property
    def inputs(self) -> frozenset:
        return self._inputs

    @property
    def initial_state(self) -> int:
        return self._initial_state

    @property
    def accepting_states(self) -> frozenset:
        return self._accepting

    @property
    def transitions(self) -> dict:
        """Safe copy of the (state, input) -> state table."""
        return dict(self._transitions)

    def transition(self, state: int, symbol: int) -> int:
        """Next state for `state` after reading `symbol`."""
        if state not in self._states:
            raise InvalidTransitionError(
                f"State {state} is not supported by this automaton, states: {sorted(self._states)}")
        if symbol not in self._inputs:
            raise InvalidTransitionError(
                f"Input {symbol} is not supported by this automaton, inputs: {sorted(self._inputs)}")
        return self._transitions[(state, symbol)]

    def is_accepted(self, state: int) -> bool:
        return state in self._accepting

    def complement(self) -> "DFA":
        """Same transitions, inverted accepting set."""
        return DFA(self._states, self._inputs, self._transitions,
                   self._initial_state, self._states - self._accepting)

    # -- Serialization -------------------------------------------------------

    def to_dict(self) -> dict:
        """JSON-serializable form, used by the search log and the viz app."""
        return {
            "states": sorted(self._states),
            "inputs": sorted(self._inputs),
            "initial_state": self._initial_state,
            "accepting_states": sorted(self._accepting),
            "transitions": [
                [state, symbol, self._transitions[(state, symbol)]]
                for state in sorted(self._states)
                for symbol in sorted(self._inputs)
            ],
        }

    @staticmethod
    def from_dict(d: dict) -> "DFA":
        transitions = {(s, a): t for s, a, t in d["transitions"]}
        return DFA(d["states"], d["inputs"], transitions,
                   d.get("initial_state", 1), d.get("accepting_states", []))

    def __eq__(self, other):
        if not isinstance(other, DFA):
            return NotImplemented
        return (self._states == other._states
                and self._inputs == other._inputs
                and self._transitions == other._transitions
                and self._initial_state == other._initial_state
                and self._accepting == other._accepting)

    def __hash__(self):
        return hash((self._states, self._inputs, self._initial_state, self._accepting,
                     frozenset(self._transitions.items())))

    def __repr__(self):
        return (f"DFA(states={len(self._states)}, inputs={sorted(self._inputs)}, "
                f"initial={self._initial_state}, accepting={sorted(self._accepting)})")

    def describe(self) -> str:
        """Multi-line description with the transition table laid out per state."""
        inputs = sorted(self._inputs)
        lines = [
            f"States ({len(self._states)}): {sorted(self._states)}",
            f"Inputs ({len(inputs)}): {inputs}",
            "Transition table:",
            "      " + "".join(f"{symbol:>6}" for symbol in inputs),
            "------" + "------" * len(inputs),
        ]
        for state in sorted(self._states):
            row = "".join(f"{'q' + str(self._transitions[(state, s)]):>6}" for s in inputs)
            lines.append(f"{'q' + str(state):<5}|{row}")
        lines.append(f"Initial state: {self._initial_state}")
        lines.append(f"Accepted states ({len(self._accepting)}): {sorted(self._accepting)}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Computer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ComputeResult:
    """Final state reached by a run and whether it accepts."""
    final_state: int
    accepted: bool


class DFAComputer:
    """Runs words through an automaton, keeping a current-state cursor."""

    def __init__(self, automaton: DFA):
        self.automaton = automaton
        self.current_state = automaton.initial_state

    def reset(self):
        self.current_state = self.automaton.initial_state

    def step(self, symbol: int) -> ComputeResult:
        """Apply one transition from the current state."""
        self.current_state = self.automaton.transition(self.current_state, symbol)
        return ComputeResult(self.current_state, self.automaton.is_accepted(self.current_state))

    def run(self, word: Iterable[int]) -> ComputeResult:
        """Reset, consume `word` and return where the automaton ended up."""
        self.reset()
        for symbol in word:
            self.current_state = self.automaton.transition(self.current_state, symbol)
        return ComputeResult(self.current_state, self.automaton.is_accepted(self.current_state))


# ---------------------------------------------------------------------------
# Description format
# ---------------------------------------------------------------------------
#
#   state_count, symbol_count, t(1,1), t(1,2), ..., t(N,K), accepting...
#
# Transitions are listed state-major. State 1 is the initial state.

def parse_dfa(text: str) -> DFA:
    """Parse an automaton description record."""
    line = text.strip().splitlines()[0] if text.strip() else ""
    elements = [e.strip() for e in line.split(",") if e.strip()]
    if len(elements) < 2:
        raise DFAFormatError("Automaton description needs at least the state and symbol counts")
    try:
        values = [int(e) for e in elements]
    except ValueError as e:
        raise DFAFormatError(f"Automaton description contains a non-integer value: {e}") from e

    state_count, symbol_count = values[0], values[1]
    if state_count < 1 or symbol_count < 1:
        raise DFAFormatError(
            f"State and symbol counts must be positive, got {state_count}, {symbol_count}")
    table_size = state_count * symbol_count
    if len(values) < 2 + table_size:
        raise DFAFormatError(
            f"Expected {table_size} transitions, found {len(values) - 2}")

    transitions = {}
    for i, target in enumerate(values[2:2 + table_size]):
        state, symbol = divmod(i, symbol_count)
        transitions[(state + 1, symbol + 1)] = target
    accepting = values[2 + table_size:]

    try:
        return DFA(integer_set(state_count), integer_set(symbol_count),
                   transitions, 1, accepting)
    except InvalidTransitionError as e:
        raise DFAFormatError(str(e)) from e


def load_dfa(path: str) -> DFA:
    """Load an automaton description file."""
    with open(path, "r", encoding="utf-8") as f:
        return parse_dfa(f.read())


def format_dfa(automaton: DFA) -> str:
    """Inverse of `parse_dfa` for automata over 1..N states and 1..K inputs."""
    states = sorted(automaton.states)
    inputs = sorted(automaton.inputs)
    if states != list(range(1, len(states) + 1)) or inputs != list(range(1, len(inputs) + 1)):
        raise InvalidTransitionError("Only contiguous 1..N states and 1..K inputs can be formatted")
    values = [len(states), len(inputs)]
    values += [automaton.transition(s, a) for s in states for a in inputs]
    values += sorted(automaton.accepting_states)
    return ", ".join(str(v) for v in values)

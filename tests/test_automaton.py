"""Tests for automaton.py — automaton model, computer and description format."""

import os
import sys
import tempfile

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from automaton import (
    DFA,
    ComputeResult,
    DFAComputer,
    DFAFormatError,
    InvalidTransitionError,
    format_dfa,
    integer_set,
    load_dfa,
    parse_dfa,
)


def last_symbol_one() -> DFA:
    """Accepts words whose last symbol is 1."""
    transitions = {(1, 1): 2, (1, 2): 1, (2, 1): 2, (2, 2): 1}
    return DFA({1, 2}, {1, 2}, transitions, 1, {2})


AUTOMATA_DIR = os.path.join(os.path.dirname(__file__), "..", "automata")


# ── Model ───────────────────────────────────────────────────────────────────

class TestDFA:
    def test_integer_set(self):
        assert integer_set(3) == frozenset({1, 2, 3})
        assert integer_set(0) == frozenset()

    def test_transition(self):
        dfa = last_symbol_one()
        assert dfa.transition(1, 1) == 2
        assert dfa.transition(2, 2) == 1

    def test_unknown_state(self):
        with pytest.raises(InvalidTransitionError):
            last_symbol_one().transition(3, 1)

    def test_unknown_input(self):
        with pytest.raises(InvalidTransitionError):
            last_symbol_one().transition(1, 5)

    def test_invalid_transition_is_value_error(self):
        assert issubclass(InvalidTransitionError, ValueError)

    def test_partial_table_rejected(self):
        with pytest.raises(InvalidTransitionError):
            DFA({1, 2}, {1}, {(1, 1): 2}, 1, set())

    def test_unknown_target_rejected(self):
        with pytest.raises(InvalidTransitionError):
            DFA({1}, {1}, {(1, 1): 7}, 1, set())

    def test_transition_outside_automaton_rejected(self):
        transitions = {(1, 1): 2, (1, 2): 1, (2, 1): 2, (2, 2): 1}
        with pytest.raises(InvalidTransitionError):
            DFA({1, 2}, {1, 2}, {**transitions, (3, 1): 1}, 1, {2})
        with pytest.raises(InvalidTransitionError):
            DFA({1, 2}, {1, 2}, {**transitions, (1, 9): 2}, 1, {2})

    def test_unknown_initial_state_rejected(self):
        with pytest.raises(InvalidTransitionError):
            DFA({1}, {1}, {(1, 1): 1}, 2, set())

    def test_unknown_accepting_state_rejected(self):
        with pytest.raises(InvalidTransitionError):
            DFA({1}, {1}, {(1, 1): 1}, 1, {4})

    def test_is_accepted(self):
        dfa = last_symbol_one()
        assert dfa.is_accepted(2)
        assert not dfa.is_accepted(1)

    def test_transitions_returns_copy(self):
        dfa = last_symbol_one()
        table = dfa.transitions
        table[(1, 1)] = 1
        assert dfa.transition(1, 1) == 2

    def test_complement(self):
        comp = last_symbol_one().complement()
        assert comp.accepting_states == frozenset({1})
        assert comp.transitions == last_symbol_one().transitions

    def test_equality_and_hash(self):
        assert last_symbol_one() == last_symbol_one()
        assert hash(last_symbol_one()) == hash(last_symbol_one())
        assert last_symbol_one() != last_symbol_one().complement()

    def test_dict_round_trip(self):
        dfa = last_symbol_one()
        d = dfa.to_dict()
        assert d["transitions"][0] == [1, 1, 2]
        assert DFA.from_dict(d) == dfa

    def test_describe(self):
        text = last_symbol_one().describe()
        assert "Transition table:" in text
        assert "Initial state: 1" in text
        assert "Accepted states (1): [2]" in text


# ── Computer ────────────────────────────────────────────────────────────────

class TestDFAComputer:
    def test_empty_word_stays_in_initial_state(self):
        result = DFAComputer(last_symbol_one()).run(())
        assert result == ComputeResult(final_state=1, accepted=False)

    def test_empty_word_accepted_when_initial_accepting(self):
        dfa = last_symbol_one().complement()
        assert DFAComputer(dfa).run([]).accepted

    def test_last_symbol_one(self):
        computer = DFAComputer(last_symbol_one())
        assert computer.run([1]).accepted
        assert computer.run([2, 1]).accepted
        assert not computer.run([1, 2]).accepted
        assert not computer.run([2, 2, 2]).accepted

    def test_step_moves_cursor(self):
        computer = DFAComputer(last_symbol_one())
        assert computer.step(1) == ComputeResult(2, True)
        assert computer.step(2) == ComputeResult(1, False)
        assert computer.current_state == 1

    def test_run_resets_first(self):
        computer = DFAComputer(last_symbol_one())
        computer.step(1)
        assert computer.run([2]).final_state == 1

    def test_deterministic(self):
        computer = DFAComputer(last_symbol_one())
        word = [1, 2, 2, 1, 2]
        assert computer.run(word) == computer.run(word)

    def test_invalid_symbol_in_word(self):
        with pytest.raises(InvalidTransitionError):
            DFAComputer(last_symbol_one()).run([1, 3])


# ── Description format ──────────────────────────────────────────────────────

class TestDescriptionFormat:
    def test_parse(self):
        assert parse_dfa("2, 2, 2, 1, 2, 1, 2") == last_symbol_one()

    def test_parse_without_accepting_states(self):
        dfa = parse_dfa("1, 2, 1, 1")
        assert dfa.accepting_states == frozenset()

    def test_parse_ignores_following_lines(self):
        assert parse_dfa("2,2,2,1,2,1,2\nnot part of it") == last_symbol_one()

    def test_parse_non_integer(self):
        with pytest.raises(DFAFormatError):
            parse_dfa("2, 2, x")

    def test_parse_too_short(self):
        with pytest.raises(DFAFormatError):
            parse_dfa("2, 2, 1, 1")

    def test_parse_empty(self):
        with pytest.raises(DFAFormatError):
            parse_dfa("")

    def test_parse_unknown_target(self):
        with pytest.raises(DFAFormatError):
            parse_dfa("1, 1, 3")

    def test_format_error_is_os_error(self):
        assert issubclass(DFAFormatError, OSError)

    def test_format_round_trip(self):
        dfa = last_symbol_one()
        assert format_dfa(dfa) == "2, 2, 2, 1, 2, 1, 2"
        assert parse_dfa(format_dfa(dfa)) == dfa

    def test_load_from_file(self):
        tmpdir = tempfile.mkdtemp()
        path = os.path.join(tmpdir, "a.dfa")
        with open(path, "w") as f:
            f.write("2, 2, 2, 1, 2, 1, 2\n")
        assert load_dfa(path) == last_symbol_one()

    def test_load_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_dfa(os.path.join(tempfile.mkdtemp(), "missing.dfa"))

    @pytest.mark.parametrize("name", [
        "last_symbol_one.dfa", "non_accepting.dfa", "two_even.dfa", "three_inputs.dfa",
    ])
    def test_bundled_automata_load(self, name):
        dfa = load_dfa(os.path.join(AUTOMATA_DIR, name))
        assert dfa.initial_state == 1
        assert format_dfa(dfa).startswith(str(len(dfa.states)))

    def test_bundled_last_symbol_one(self):
        assert load_dfa(os.path.join(AUTOMATA_DIR, "last_symbol_one.dfa")) == last_symbol_one()

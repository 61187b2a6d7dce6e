"""Tests for word_sample.py — labeled samples and exhaustive generation."""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from automaton import DFA, DFAComputer, integer_set
from word_sample import WordSample, WordSampleGenerator


def last_symbol_one() -> DFA:
    transitions = {(1, 1): 2, (1, 2): 1, (2, 1): 2, (2, 2): 1}
    return DFA({1, 2}, {1, 2}, transitions, 1, {2})


def single_state(symbols: int) -> DFA:
    transitions = {(1, a): 1 for a in integer_set(symbols)}
    return DFA({1}, integer_set(symbols), transitions, 1, {1})


# ── WordSample ──────────────────────────────────────────────────────────────

class TestWordSample:
    def test_empty(self):
        sample = WordSample()
        assert len(sample) == 0
        assert sample.accepted == []
        assert sample.rejected == []

    def test_add_and_size(self):
        sample = WordSample()
        assert sample.add_accepted([1])
        assert sample.add_rejected([2])
        assert len(sample) == 2
        assert (1,) in sample
        assert sample.label([1]) is True
        assert sample.label((2,)) is False
        assert sample.label([3]) is None

    def test_duplicate_dropped_with_warning(self, caplog):
        sample = WordSample()
        sample.add_accepted([1, 2])
        with caplog.at_level(logging.WARNING):
            assert not sample.add_accepted((1, 2))
        assert len(sample) == 1
        assert "Duplicate" in caplog.text

    def test_accepted_word_not_added_as_rejected(self, caplog):
        sample = WordSample()
        sample.add_accepted([1])
        with caplog.at_level(logging.WARNING):
            assert not sample.add_rejected([1])
        assert sample.rejected == []
        assert sample.label([1]) is True
        assert "other partition" in caplog.text

    def test_rejected_word_not_added_as_accepted(self, caplog):
        sample = WordSample()
        sample.add_rejected([2, 2])
        with caplog.at_level(logging.WARNING):
            assert not sample.add_accepted([2, 2])
        assert sample.accepted == []
        assert sample.label([2, 2]) is False

    def test_insertion_order(self):
        sample = WordSample()
        for word in ([2], [1], [1, 1]):
            sample.add_accepted(word)
        assert sample.accepted == [(2,), (1,), (1, 1)]

    def test_stats(self):
        sample = WordSample()
        sample.add_accepted([1])
        sample.add_rejected([2])
        sample.add_rejected([2, 2])
        assert sample.stats() == {"size": 3, "accepted": 1, "rejected": 2}

    def test_repr(self):
        sample = WordSample()
        sample.add_accepted([1])
        assert repr(sample) == "WordSample (1 words, 1 accepted, 0 rejected)"

    def test_describe_content(self):
        sample = WordSample()
        sample.add_accepted([1, 2])
        sample.add_rejected([2])
        text = sample.describe(content=True)
        assert "Accepted:" in text
        assert "[1, 2]" in text
        assert "Rejected:" in text

    def test_describe_wraps_lines(self):
        sample = WordSample()
        for i in range(1, 40):
            sample.add_accepted([i])
        text = sample.describe(content=True, line_width=30)
        body = text.split("Accepted:\n")[1].split("\n\nRejected:")[0]
        assert all(len(line) <= 31 for line in body.splitlines())


# ── WordSampleGenerator ─────────────────────────────────────────────────────

class TestWordSampleGenerator:
    @pytest.mark.parametrize("symbols,length", [(1, 4), (2, 3), (2, 5), (3, 3)])
    def test_exhaustive_size(self, symbols, length):
        sample = WordSampleGenerator(single_state(symbols)).generate(length)
        assert len(sample) == sum(symbols ** i for i in range(1, length + 1))

    def test_empty_word_not_generated(self):
        sample = WordSampleGenerator(last_symbol_one()).generate(3)
        assert () not in sample

    def test_labels_follow_reference(self):
        dfa = last_symbol_one()
        sample = WordSampleGenerator(dfa).generate(4)
        computer = DFAComputer(dfa)
        for word in sample.accepted:
            assert computer.run(word).accepted
            assert word[-1] == 1
        for word in sample.rejected:
            assert not computer.run(word).accepted
            assert word[-1] == 2

    def test_partitions_disjoint(self):
        sample = WordSampleGenerator(last_symbol_one()).generate(5)
        assert not set(sample.accepted) & set(sample.rejected)

    def test_breadth_first_order(self):
        sample = WordSampleGenerator(last_symbol_one()).generate(2)
        assert sample.accepted == [(1,), (1, 1), (2, 1)]
        assert sample.rejected == [(2,), (1, 2), (2, 2)]

    def test_cap_inside_layer(self):
        sample = WordSampleGenerator(last_symbol_one()).generate(5, max_elements=3)
        assert len(sample) == 3
        assert sample.accepted + sample.rejected == [(1,), (1, 1), (2,)]

    def test_cap_at_layer_boundary(self):
        sample = WordSampleGenerator(last_symbol_one()).generate(5, max_elements=6)
        assert len(sample) == 6

    def test_zero_cap_means_unbounded(self):
        sample = WordSampleGenerator(last_symbol_one()).generate(3, max_elements=0)
        assert len(sample) == 2 + 4 + 8

    def test_zero_length(self):
        assert len(WordSampleGenerator(last_symbol_one()).generate(0)) == 0

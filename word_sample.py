"""
word_sample.py - Labeled word sets used to train and evaluate learned automata.

A sample is split into accepted and rejected words. Words are tuples of
input symbols.
"""

import logging

from automaton import DFA, DFAComputer

logger = logging.getLogger(__name__)


class WordSample:
    """Accepted / rejected word partitions with set semantics."""

    def __init__(self):
        # dicts keep insertion order, which makes evaluation order reproducible
        self._accepted: dict[tuple, None] = {}
        self._rejected: dict[tuple, None] = {}

    @property
    def accepted(self) -> list[tuple]:
        return list(self._accepted)

    @property
    def rejected(self) -> list[tuple]:
        return list(self._rejected)

    def add_accepted(self, word) -> bool:
        """Add a word to the accepted partition. Returns False if it was dropped."""
        return self._add(tuple(word), self._accepted, self._rejected, "accepted")

    def add_rejected(self, word) -> bool:
        """Add a word to the rejected partition. Returns False if it was dropped."""
        return self._add(tuple(word), self._rejected, self._accepted, "rejected")

    def _add(self, word: tuple, target: dict, other: dict, label: str) -> bool:
        if word in target:
            logger.warning("Duplicate %s word dropped: %s", label, list(word))
            return False
        if word in other:
            logger.warning("Word %s is already in the other partition, not added as %s",
                           list(word), label)
            return False
        target[word] = None
        return True

    def __len__(self):
        return len(self._accepted) + len(self._rejected)

    def __contains__(self, word):
        word = tuple(word)
        return word in self._accepted or word in self._rejected

    def label(self, word) -> bool | None:
        """True for accepted, False for rejected, None for unknown words."""
        word = tuple(word)
        if word in self._accepted:
            return True
        if word in self._rejected:
            return False
        return None

    def stats(self) -> dict:
        return {
            "size": len(self),
            "accepted": len(self._accepted),
            "rejected": len(self._rejected),
        }

    def __repr__(self):
        return (f"WordSample ({len(self)} words, {len(self._accepted)} accepted, "
                f"{len(self._rejected)} rejected)")

    def describe(self, content: bool = False, line_width: int = 80) -> str:
        """Summary line, optionally followed by both partitions wrapped to `line_width`."""
        text = repr(self)
        if not content:
            return text
        parts = [text, "", "Accepted:", _wrap_words(self._accepted, line_width),
                 "", "Rejected:", _wrap_words(self._rejected, line_width)]
        return "\n".join(parts)


def _wrap_words(words, line_width: int) -> str:
    lines, current = [], ""
    for word in words:
        token = str(list(word))
        if current and len(current) + len(token) + 2 > line_width:
            lines.append(current + ",")
            current = token
        else:
            current = f"{current}, {token}" if current else token
    if current:
        lines.append(current)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class WordSampleGenerator:
    """Builds exhaustive samples by classifying words with a reference automaton."""

    def __init__(self, automaton: DFA):
        self.automaton = automaton
        self.inputs = sorted(automaton.inputs)
        self.computer = DFAComputer(automaton)

    def generate(self, max_word_length: int, max_elements: int = 0) -> WordSample:
        """
        Enumerate every word of length 1..max_word_length breadth-first.

        With `max_elements` > 0 generation stops before a word is added once
        the sample already holds `max_elements` words, and after a layer once
        it holds more than that.
        """
        sample = WordSample()
        frontier: list[tuple] = [()]
        for _ in range(max_word_length):
            frontier = self._add_layer(sample, frontier, max_elements)
            if max_elements > 0 and len(sample) >= max_elements:
                break
        return sample

    def _add_layer(self, sample: WordSample, frontier: list[tuple],
                   max_elements: int) -> list[tuple]:
        added = []
        for prefix in frontier:
            for symbol in self.inputs:
                if max_elements > 0 and len(sample) >= max_elements:
                    return added
                word = prefix + (symbol,)
                if self.computer.run(word).accepted:
                    sample.add_accepted(word)
                else:
                    sample.add_rejected(word)
                added.append(word)
        return added

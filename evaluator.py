"""
evaluator.py - Fitness of candidate solutions against a labeled word sample.

The fitness is the share of misclassified words: 0 means the decoded
automaton agrees with every label, 1 means it disagrees with all of them.
"""

from automaton import DFAComputer
from solution import Solution, dfa_from_solution
from word_sample import WordSample


class Evaluator:
    """Scores solutions against one word sample."""

    def __init__(self, sample: WordSample):
        if len(sample) == 0:
            raise ValueError("Cannot evaluate against an empty word sample")
        self.sample = sample

    def _misclassified(self, solution: Solution) -> list[tuple]:
        computer = DFAComputer(dfa_from_solution(solution))
        failed = [w for w in self.sample.accepted if not computer.run(w).accepted]
        failed += [w for w in self.sample.rejected if computer.run(w).accepted]
        return failed

    def evaluate(self, solution: Solution) -> float:
        """Compute the error ratio and store it on the solution."""
        evaluation = len(self._misclassified(solution)) / len(self.sample)
        solution.evaluation = evaluation
        return evaluation

    def evaluate_verbose(self, solution: Solution | None) -> list[tuple] | None:
        """Like `evaluate`, but return the misclassified words."""
        if solution is None:
            return None
        failed = self._misclassified(solution)
        solution.evaluation = len(failed) / len(self.sample)
        return failed

"""
results.py - The few best solutions found during one search, best first.
"""

import logging

from solution import Solution, dfa_from_solution

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5


class Results:
    """
    Fixed-size ranking of solutions ordered by ascending evaluation.

    Unused slots hold None. A new solution goes in front of the first empty
    slot or strictly worse entry; everything behind it shifts one place and
    the last entry falls off.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Results capacity must be positive, got {capacity}")
        self.best_solutions: list[Solution | None] = [None] * capacity

    @property
    def capacity(self) -> int:
        return len(self.best_solutions)

    def add(self, solution: Solution) -> int | None:
        """Insert by rank. Returns the slot used, or None if it did not qualify."""
        evaluation = solution.evaluation
        position = None
        for i, ranked in enumerate(self.best_solutions):
            if ranked is None or evaluation < ranked.evaluation:
                position = i
                break
        if position is None:
            return None
        self.best_solutions.insert(position, solution)
        self.best_solutions.pop()
        logger.debug("Found new top %d, place %d", self.capacity, position)
        return position

    def __iter__(self):
        return (s for s in self.best_solutions if s is not None)

    def __len__(self):
        return sum(1 for s in self.best_solutions if s is not None)

    @property
    def best(self) -> Solution | None:
        return self.best_solutions[0]

    def describe(self) -> str:
        """Every slot with its cost and the raw encoded values."""
        lines = ["PSO optimisation results"]
        for i, solution in enumerate(self.best_solutions):
            if solution is None:
                lines.append(f"Solution {i}: None")
                continue
            tag = "best found, cost" if i == 0 else "cost"
            lines.append(f"Solution {i} ({tag}: {solution.evaluation}):")
            lines.append(solution.describe())
        return "\n".join(lines)

    def describe_automata(self) -> str:
        """The ranked solutions decoded into automaton tables."""
        blocks = ["PSO results"]
        for i, solution in enumerate(self):
            title = "Best found" if i == 0 else f"Solution {i}"
            blocks.append(f"{title}\nEvaluation: {solution.evaluation}\n"
                          f"{dfa_from_solution(solution).describe()}")
        return "\n\n".join(blocks)

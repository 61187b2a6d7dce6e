"""
listeners.py - Observer hooks for the swarm driver.

The driver holds a single listener; use ListenerGroup to attach several.
"""


class PSOEventListener:
    """Base listener; every hook is a no-op so subclasses override what they need."""

    def on_search_started(self):
        pass

    def on_progress(self, iteration: int, mean: float, best: float, worst: float,
                    best_ever: float):
        """Called every 50th generation with the swarm's evaluation statistics."""

    def on_improvement(self, evaluation: float):
        """Called whenever a new overall best evaluation is found."""

    def on_search_finished(self, results, sample):
        """Called once when the search stops, whatever the reason."""


class ListenerGroup(PSOEventListener):
    """Forwards every event to each member in order."""

    def __init__(self, listeners=None):
        self.listeners: list[PSOEventListener] = list(listeners or [])

    def add(self, listener: PSOEventListener):
        self.listeners.append(listener)

    def on_search_started(self):
        for listener in self.listeners:
            listener.on_search_started()

    def on_progress(self, iteration, mean, best, worst, best_ever):
        for listener in self.listeners:
            listener.on_progress(iteration, mean, best, worst, best_ever)

    def on_improvement(self, evaluation):
        for listener in self.listeners:
            listener.on_improvement(evaluation)

    def on_search_finished(self, results, sample):
        for listener in self.listeners:
            listener.on_search_finished(results, sample)


class ConsoleListener(PSOEventListener):
    """Prints progress the way the runner scripts report it."""

    def __init__(self, print_fn=print):
        self.print_fn = print_fn

    def on_search_started(self):
        self.print_fn("Search started")

    def on_progress(self, iteration, mean, best, worst, best_ever):
        self.print_fn(f"  Iteration {iteration:>6}: mean={mean:.4f} best={best:.4f} "
                      f"worst={worst:.4f} best so far={best_ever:.4f}")

    def on_improvement(self, evaluation):
        self.print_fn(f"  New best: {evaluation:.4f}")

    def on_search_finished(self, results, sample):
        best = results.best
        cost = f"{best.evaluation:.4f}" if best is not None else "n/a"
        self.print_fn(f"Search finished: best cost {cost} on {sample!r}")

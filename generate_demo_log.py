"""
Generate a demo search log for the visualization app.
Run: python generate_demo_log.py
"""

from datetime import timedelta

import numpy as np

from automaton import load_dfa
from pso import PSO, PSOParams
from search_logger import SearchLogger
from word_sample import WordSampleGenerator


def main(automaton_path: str = "automata/last_symbol_one.dfa", log_dir: str = "logs",
         seed: int = 7) -> str:
    reference = load_dfa(automaton_path)
    sample = WordSampleGenerator(reference).generate(max_word_length=6)
    print(f"Reference automaton: {automaton_path}")
    print(f"Training sample: {sample!r}")

    # Small swarm and few states so the log stays readable
    params = PSOParams(max_iterations=500, particles_count=20, max_states=4,
                       allowed_time=timedelta(seconds=30))
    pso = PSO(params, np.random.default_rng(seed))
    search_log = SearchLogger(log_dir=log_dir, params=params, pso=pso)
    pso.listener = search_log

    results = pso.search(reference.inputs, sample)
    best = results.best
    print(f"Best cost: {best.evaluation:.4f} after {pso.iterations} iterations "
          f"({pso.termination_reason.value})")

    path = search_log.save()
    print(f"\n✅ Log saved to: {path}")
    print(f"   Progress points logged: {len(search_log.progress)}")
    print(f"   Improvements logged: {len(search_log.improvements)}")
    return path


if __name__ == "__main__":
    main()

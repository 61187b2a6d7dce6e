"""
Learn an automaton from the words a reference automaton accepts.

Loads the reference automaton, enumerates a labeled word sample from it,
runs the swarm search and prints the best automata found together with
the words the best one still misclassifies.

Run: python dfa_runner.py automata/last_symbol_one.dfa --seed 7
"""

import argparse
import logging
import sys
from datetime import timedelta

import matplotlib.pyplot as plt
import numpy as np

from automaton import load_dfa
from evaluator import Evaluator
from listeners import ConsoleListener, ListenerGroup
from pso import PSO, PSOParams
from search_logger import SearchLogger
from word_sample import WordSampleGenerator


def build_parser() -> argparse.ArgumentParser:
    defaults = PSOParams()
    parser = argparse.ArgumentParser(description="Learn a DFA with particle swarm optimisation")
    parser.add_argument("automaton", help="Reference automaton description file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--max-word-length", type=int, default=5,
                        help="Longest word in the training sample")
    parser.add_argument("--max-words", type=int, default=0,
                        help="Cap on the sample size (0 = no cap)")
    parser.add_argument("--max-iterations", type=int, default=defaults.max_iterations)
    parser.add_argument("--particles", type=int, default=defaults.particles_count)
    parser.add_argument("--velocity-weight", type=float, default=defaults.velocity_weight)
    parser.add_argument("--personal-weight", type=float, default=defaults.personal_weight)
    parser.add_argument("--global-weight", type=float, default=defaults.global_weight)
    parser.add_argument("--allowed-time", type=float,
                        default=defaults.allowed_time.total_seconds(),
                        help="Time limit in seconds")
    parser.add_argument("--max-states", type=int, default=defaults.max_states)
    parser.add_argument("--acceptance-velocity-bound", type=float,
                        default=defaults.acceptance_velocity_bound)
    parser.add_argument("--log-dir", default=None,
                        help="Write a JSONL search log to this directory")
    parser.add_argument("--plot", default=None, help="Save a convergence plot (PNG)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--quiet", action="store_true", help="No per-iteration progress")
    return parser


def params_from_args(args) -> PSOParams:
    return PSOParams(
        max_iterations=args.max_iterations,
        particles_count=args.particles,
        velocity_weight=args.velocity_weight,
        personal_weight=args.personal_weight,
        global_weight=args.global_weight,
        allowed_time=timedelta(seconds=args.allowed_time),
        max_states=args.max_states,
        acceptance_velocity_bound=args.acceptance_velocity_bound,
    )


def run_learning(automaton_path: str, params: PSOParams, seed: int | None = None,
                 max_word_length: int = 5, max_words: int = 0,
                 log_dir: str | None = None, plot_path: str | None = None,
                 verbose: bool = True):
    """Run one learning session. Returns (results, sample, misclassified words)."""
    reference = load_dfa(automaton_path)
    print("=== Reference automaton ===")
    print(reference.describe())

    sample = WordSampleGenerator(reference).generate(max_word_length, max_words)
    print(f"\n{sample!r}")

    rng = np.random.default_rng(seed)
    listeners = ListenerGroup()
    if verbose:
        listeners.add(ConsoleListener())
    pso = PSO(params, rng, listeners)
    search_log = None
    if log_dir is not None or plot_path is not None:
        search_log = SearchLogger(log_dir or "logs", params=params, pso=pso)
        listeners.add(search_log)

    results = pso.search(reference.inputs, sample)
    reason = pso.termination_reason.value if pso.termination_reason else "none"
    print(f"\nStopped after {pso.iterations} iterations ({reason})")
    print(results.describe_automata())

    failed = Evaluator(sample).evaluate_verbose(results.best)
    if failed:
        print(f"\nMisclassified words ({len(failed)}):")
        for word in failed:
            print(f"  {list(word)}")
    else:
        print("\nAll words classified correctly")

    if search_log is not None and log_dir is not None:
        print(f"\nSearch log saved to: {search_log.save()}")
    if plot_path is not None:
        plot_convergence(search_log, plot_path)
        print(f"Convergence plot saved to: {plot_path}")
    return results, sample, failed


def plot_convergence(search_log: SearchLogger, path: str):
    """Mean / best / worst swarm evaluation per reported generation."""
    iterations = [r.iteration for r in search_log.progress]
    plt.figure(figsize=(10, 6))
    plt.plot(iterations, [r.mean for r in search_log.progress], label="Mean")
    plt.plot(iterations, [r.best for r in search_log.progress], label="Best")
    plt.plot(iterations, [r.worst for r in search_log.progress], label="Worst", alpha=0.5)
    plt.plot(iterations, [r.best_ever for r in search_log.progress], linestyle="--",
             label="Best so far")
    plt.title("Swarm convergence")
    plt.xlabel("Iteration")
    plt.ylabel("Misclassified share of the sample")
    plt.ylim(0, 1.05)
    plt.legend()
    plt.tight_layout()
    plt.savefig(path)
    plt.close()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        run_learning(args.automaton, params_from_args(args), seed=args.seed,
                     max_word_length=args.max_word_length, max_words=args.max_words,
                     log_dir=args.log_dir, plot_path=args.plot, verbose=not args.quiet)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

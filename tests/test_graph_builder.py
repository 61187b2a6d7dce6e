"""Tests for viz/graph_builder.py — automaton graph elements."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from viz.graph_builder import (
    GRAPH_STYLESHEET,
    build_automaton_graph,
    create_graph_component,
    create_graph_panel,
    reachable_states,
)


LAST_SYMBOL_ONE = {
    "states": [1, 2],
    "inputs": [1, 2],
    "initial_state": 1,
    "accepting_states": [2],
    "transitions": [[1, 1, 2], [1, 2, 1], [2, 1, 2], [2, 2, 1]],
}

WITH_UNREACHABLE = {
    "states": [1, 2, 3],
    "inputs": [1, 2],
    "initial_state": 1,
    "accepting_states": [1],
    "transitions": [[1, 1, 1], [1, 2, 2], [2, 1, 1], [2, 2, 2], [3, 1, 1], [3, 2, 1]],
}


def _nodes(elements):
    return [e for e in elements if "source" not in e["data"]]


def _edges(elements):
    return [e for e in elements if "source" in e["data"]]


class TestBuildAutomatonGraph:
    def test_node_per_state(self):
        nodes = _nodes(build_automaton_graph(LAST_SYMBOL_ONE))
        assert [n["data"]["id"] for n in nodes] == ["q1", "q2"]

    def test_node_classes(self):
        nodes = {n["data"]["id"]: n for n in _nodes(build_automaton_graph(LAST_SYMBOL_ONE))}
        assert "initial" in nodes["q1"]["classes"]
        assert "accepting" not in nodes["q1"]["classes"]
        assert "accepting" in nodes["q2"]["classes"]
        assert nodes["q2"]["data"]["accepting"] is True

    def test_self_loops_and_merged_labels(self):
        edges = {e["data"]["id"]: e for e in _edges(build_automaton_graph(LAST_SYMBOL_ONE))}
        assert set(edges) == {"q1-q2", "q1-q1", "q2-q2", "q2-q1"}
        assert edges["q1-q1"]["classes"] == "loop"
        assert edges["q1-q2"]["data"]["label"] == "1"

    def test_parallel_transitions_merged(self):
        edges = {e["data"]["id"]: e for e in _edges(build_automaton_graph(WITH_UNREACHABLE))}
        assert edges["q3-q1"]["data"]["label"] == "1,2"

    def test_unreachable_marked(self):
        nodes = {n["data"]["id"]: n for n in _nodes(build_automaton_graph(WITH_UNREACHABLE))}
        assert "unreachable" in nodes["q3"]["classes"]
        assert "unreachable" not in nodes["q2"]["classes"]

    def test_positions_distinct(self):
        nodes = _nodes(build_automaton_graph(WITH_UNREACHABLE))
        positions = {(n["position"]["x"], n["position"]["y"]) for n in nodes}
        assert len(positions) == 3

    def test_single_state(self):
        automaton = {"states": [1], "inputs": [1], "initial_state": 1,
                     "accepting_states": [], "transitions": [[1, 1, 1]]}
        elements = build_automaton_graph(automaton)
        assert len(_nodes(elements)) == 1
        assert len(_edges(elements)) == 1

    def test_reachable_states(self):
        assert reachable_states(LAST_SYMBOL_ONE) == {1, 2}
        assert reachable_states(WITH_UNREACHABLE) == {1, 2}


class TestComponents:
    def test_stylesheet_selectors(self):
        selectors = {rule["selector"] for rule in GRAPH_STYLESHEET}
        assert {"node", "node.initial", "node.accepting", "edge", "edge.loop"} <= selectors

    def test_create_graph_component(self):
        component = create_graph_component(build_automaton_graph(LAST_SYMBOL_ONE))
        assert component.id == "cyto-graph"
        assert component.stylesheet == GRAPH_STYLESHEET

    def test_graph_panel(self):
        panel = create_graph_panel({"rank": 0, "evaluation": 0.0, "automaton": LAST_SYMBOL_ONE})
        assert "Rank 0" in panel.children[0].children

    def test_graph_panel_empty(self):
        panel = create_graph_panel(None)
        assert "No automaton" in panel.children

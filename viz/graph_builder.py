"""
Cytoscape Graph Builder — Draws learned automata as interactive graphs.

States become nodes (initial and accepting states get their own classes),
transitions become labeled edges. Parallel transitions between the same
pair of states are merged into one edge listing every input symbol.
"""

import math

import dash_cytoscape as cyto
from dash import html


# ── Cytoscape stylesheet ────────────────────────────────────────────────────

GRAPH_STYLESHEET = [
    # Default node style
    {
        "selector": "node",
        "style": {
            "label": "data(label)",
            "text-valign": "center",
            "text-halign": "center",
            "background-color": "#2a2a4a",
            "color": "#e0e0ee",
            "font-size": "12px",
            "border-width": 2,
            "border-color": "#3a3a5a",
            "width": 55,
            "height": 55,
        },
    },
    # Initial state
    {
        "selector": "node.initial",
        "style": {
            "background-color": "#4f46e5",
            "border-color": "#c4b5fd",
            "border-width": 4,
            "font-weight": "bold",
        },
    },
    # Accepting state (double ring)
    {
        "selector": "node.accepting",
        "style": {
            "border-style": "double",
            "border-width": 6,
            "border-color": "#4ade80",
        },
    },
    # State no word ever reaches
    {
        "selector": "node.unreachable",
        "style": {
            "background-color": "#1a1a2e",
            "border-color": "#2a2a4a",
            "opacity": 0.5,
        },
    },
    # Default edge style
    {
        "selector": "edge",
        "style": {
            "label": "data(label)",
            "width": 2,
            "color": "#c0c0d0",
            "font-size": "11px",
            "line-color": "#6366f1",
            "target-arrow-color": "#6366f1",
            "target-arrow-shape": "triangle",
            "curve-style": "bezier",
            "text-background-color": "#0f0f1a",
            "text-background-opacity": 1,
        },
    },
    # Self loop
    {
        "selector": "edge.loop",
        "style": {
            "loop-direction": "-45deg",
            "loop-sweep": "60deg",
            "line-color": "#a78bfa",
            "target-arrow-color": "#a78bfa",
        },
    },
]


# ── Automaton graph ─────────────────────────────────────────────────────────

def reachable_states(automaton: dict) -> set[int]:
    """States reachable from the initial state."""
    successors: dict[int, set[int]] = {}
    for src, _, tgt in automaton.get("transitions", []):
        successors.setdefault(src, set()).add(tgt)
    start = automaton.get("initial_state", 1)
    seen = {start}
    frontier = [start]
    while frontier:
        state = frontier.pop()
        for nxt in successors.get(state, ()):
            if nxt not in seen:
                seen.add(nxt)
                frontier.append(nxt)
    return seen


def build_automaton_graph(automaton: dict) -> list[dict]:
    """Build Cytoscape elements for an automaton dict (see DFA.to_dict).

    Returns:
        List of Cytoscape node/edge elements.
    """
    states = automaton.get("states", [])
    accepting = set(automaton.get("accepting_states", []))
    initial = automaton.get("initial_state", 1)
    reachable = reachable_states(automaton)

    elements = []
    positions = _calculate_positions(states)
    for state in states:
        classes = []
        if state == initial:
            classes.append("initial")
        if state in accepting:
            classes.append("accepting")
        if state not in reachable:
            classes.append("unreachable")
        elements.append({
            "data": {
                "id": f"q{state}",
                "label": f"q{state}",
                "accepting": state in accepting,
            },
            "position": positions.get(state, {"x": 0, "y": 0}),
            "classes": " ".join(classes),
        })

    for (src, tgt), symbols in _merge_edges(automaton.get("transitions", [])).items():
        elements.append({
            "data": {
                "id": f"q{src}-q{tgt}",
                "source": f"q{src}",
                "target": f"q{tgt}",
                "label": ",".join(str(s) for s in symbols),
            },
            "classes": "loop" if src == tgt else "",
        })

    return elements


def _merge_edges(transitions) -> dict[tuple[int, int], list[int]]:
    """Group input symbols by (source, target) pair."""
    merged: dict[tuple[int, int], list[int]] = {}
    for src, symbol, tgt in transitions:
        merged.setdefault((src, tgt), []).append(symbol)
    for symbols in merged.values():
        symbols.sort()
    return merged


def _calculate_positions(states: list[int]) -> dict[int, dict]:
    """Place states on a circle, state 1 on the left."""
    n = len(states)
    if n == 1:
        return {states[0]: {"x": 200, "y": 150}}
    radius = 60 + 25 * n
    positions = {}
    for i, state in enumerate(sorted(states)):
        angle = math.pi + 2 * math.pi * i / n
        positions[state] = {
            "x": round(200 + radius * math.cos(angle), 1),
            "y": round(150 + radius * math.sin(angle), 1),
        }
    return positions


# ── Component builders ───────────────────────────────────────────────────────

def create_graph_component(
    elements: list[dict],
    graph_id: str = "cyto-graph",
    height: str = "360px",
    layout_name: str = "preset",
) -> cyto.Cytoscape:
    """Create a Cytoscape component with the standard stylesheet."""
    return cyto.Cytoscape(
        id=graph_id,
        elements=elements,
        stylesheet=GRAPH_STYLESHEET,
        style={"width": "100%", "height": height,
               "backgroundColor": "#0f0f1a"},
        layout={"name": layout_name},
        userZoomingEnabled=True,
        userPanningEnabled=True,
        boxSelectionEnabled=False,
    )


def create_graph_panel(result: dict | None) -> html.Div:
    """Graph panel for one ranked result ({"rank", "evaluation", "automaton"})."""
    if not result:
        return html.Div("No automaton to show.",
                        style={"color": "#888", "fontSize": "12px"})
    automaton = result["automaton"]
    caption = (f"Rank {result['rank']} · cost {result['evaluation']:.4f}, "
               f"{len(automaton['states'])} states, "
               f"{len(reachable_states(automaton))} reachable")
    return html.Div([
        html.Div(caption, style={"color": "#888", "fontSize": "12px", "marginBottom": "8px"}),
        create_graph_component(build_automaton_graph(automaton)),
    ])

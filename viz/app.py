"""
Swarm Search Viewer — Inspect a logged DFA learning run.

Loads a JSONL search log (see search_logger.py) and shows how the swarm
converged and which automata it ended up with.

Panels:
  Left sidebar: Search summary, result selector, transition table
  Right: Convergence chart, improvement chart, Cytoscape automaton graph
"""

import argparse
import os
import sys

from dash import Dash, html, dcc, Input, Output
import plotly.graph_objects as go

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from viz.data_loader import SearchData, load_search_log
from viz.graph_builder import create_graph_panel

# ── Globals ──────────────────────────────────────────────────────────────────

_app = None
_data = SearchData([])


def create_app(data: SearchData | None = None):
    """Create and return a configured Dash app."""
    global _data, _app
    if data is not None:
        _data = data

    app = Dash(__name__)
    _app = app

    # ── Styles ───────────────────────────────────────────────────────────
    dark_bg = "#0f0f1a"
    panel_bg = "#1a1a2e"
    accent = "#6366f1"
    text_color = "#e0e0ee"
    muted = "#888"

    def _panel(title, children, style_override=None):
        base_style = {
            "backgroundColor": panel_bg,
            "borderRadius": "12px",
            "padding": "16px",
            "border": "1px solid #2a2a4a",
            "marginBottom": "12px",
        }
        if style_override:
            base_style.update(style_override)
        return html.Div([
            html.H3(title, style={
                "color": text_color, "margin": "0 0 12px 0",
                "fontSize": "15px", "fontWeight": "600",
            }),
            html.Div(children),
        ], style=base_style)

    results = _data.get_results()
    options = [
        {"label": f"#{r['rank']}  cost {r['evaluation']:.4f}", "value": r["rank"]}
        for r in results
    ]

    # ── Layout ───────────────────────────────────────────────────────────

    app.layout = html.Div(
        style={
            "backgroundColor": dark_bg, "minHeight": "100vh",
            "padding": "20px", "fontFamily": "'Inter', 'Segoe UI', sans-serif",
            "color": text_color,
        },
        children=[
            # Header
            html.Div(
                style={"display": "flex", "alignItems": "center",
                       "justifyContent": "space-between", "marginBottom": "20px"},
                children=[
                    html.H1("🐝 Swarm Search Viewer", style={
                        "margin": "0", "fontSize": "24px",
                        "background": f"linear-gradient(135deg, {accent}, #a78bfa)",
                        "WebkitBackgroundClip": "text",
                        "WebkitTextFillColor": "transparent",
                    }),
                    html.Div(_status_text(), id="status-bar", style={
                        "fontSize": "13px", "color": muted,
                    }),
                ],
            ),

            html.Div(
                style={"display": "grid",
                       "gridTemplateColumns": "360px 1fr",
                       "gap": "16px"},
                children=[
                    # ── LEFT SIDEBAR ─────────────────────────────────
                    html.Div([
                        _panel("📋 Summary", [
                            html.Pre(_data.generate_summary(), style={
                                "fontSize": "11px", "color": "#ccc",
                                "whiteSpace": "pre-wrap", "margin": 0,
                            }),
                        ]),
                        _panel("🏆 Results", [
                            dcc.Dropdown(
                                id="result-select",
                                options=options,
                                value=options[0]["value"] if options else None,
                                placeholder="No results",
                                clearable=False,
                                style={"backgroundColor": "#1e1e3a",
                                       "color": "#000", "fontSize": "12px"},
                            ),
                            html.Div(id="transition-table",
                                     style={"marginTop": "10px"}),
                        ]),
                    ]),

                    # ── RIGHT CONTENT ────────────────────────────────
                    html.Div([
                        _panel("📉 Convergence", [
                            dcc.Graph(id="convergence-chart",
                                      figure=_render_convergence(),
                                      config={"displayModeBar": False}),
                        ]),
                        _panel("✨ Improvements", [
                            dcc.Graph(id="improvement-chart",
                                      figure=_render_improvements(),
                                      config={"displayModeBar": False}),
                        ]),
                        _panel("🔗 Automaton", [
                            html.Div(id="automaton-graph"),
                        ]),
                    ]),
                ],
            ),
        ],
    )

    # ── Callbacks ────────────────────────────────────────────────────────

    @app.callback(
        Output("automaton-graph", "children"),
        Output("transition-table", "children"),
        Input("result-select", "value"),
    )
    def select_result(rank):
        return _render_graph(rank), _render_transition_table(rank)

    return app


# ── Render Helpers ───────────────────────────────────────────────────────────

_CHART_LAYOUT = dict(
    plot_bgcolor="#1a1a2e",
    paper_bgcolor="#1a1a2e",
    font={"color": "#aaa", "size": 10},
    margin={"l": 35, "r": 15, "t": 15, "b": 30},
)


def _status_text():
    best = _data.get_best_evaluation()
    if best is None:
        return "No search loaded"
    reason = _data.summary.get("termination_reason") or "running"
    return f"Best cost {best:.4f} · {reason}"


def _render_graph(rank):
    """Render the automaton graph for a ranked result."""
    if rank is None:
        return html.Div("Select a result to draw its automaton.",
                        style={"color": "#666", "fontSize": "12px",
                               "padding": "8px", "textAlign": "center"})
    return create_graph_panel(_data.get_result(rank))


def _render_transition_table(rank):
    """Render a state × input table of the selected automaton."""
    result = _data.get_result(rank) if rank is not None else {}
    automaton = result.get("automaton")
    if not automaton:
        return html.Div("No automaton selected.", style={"color": "#666"})

    table = {(s, a): t for s, a, t in automaton["transitions"]}
    inputs = automaton["inputs"]
    accepting = set(automaton["accepting_states"])
    cell = {"padding": "3px 8px", "fontSize": "11px", "borderBottom": "1px solid #2a2a4a"}

    header = html.Tr([html.Th("State", style=cell)] +
                     [html.Th(str(a), style=cell) for a in inputs])
    rows = [header]
    for state in automaton["states"]:
        name = f"q{state}"
        if state == automaton.get("initial_state", 1):
            name = "→" + name
        if state in accepting:
            name += " ✓"
        rows.append(html.Tr(
            [html.Td(name, style={**cell, "color": "#4ade80" if state in accepting else "#ccc"})]
            + [html.Td(f"q{table[(state, a)]}", style=cell) for a in inputs]
        ))
    return html.Table(rows, style={"width": "100%", "borderCollapse": "collapse"})


def _render_convergence():
    """Render swarm mean / best / worst evaluation over iterations."""
    fig = go.Figure()
    iterations = _data.get_iterations()

    if iterations:
        fig.add_trace(go.Scatter(
            x=iterations, y=_data.get_worst_series(),
            mode="lines", name="Worst",
            line={"color": "#f87171", "width": 1, "dash": "dot"},
        ))
        fig.add_trace(go.Scatter(
            x=iterations, y=_data.get_mean_series(),
            mode="lines", name="Mean",
            line={"color": "#6366f1", "width": 2},
        ))
        fig.add_trace(go.Scatter(
            x=iterations, y=_data.get_best_series(),
            mode="lines", name="Best in swarm",
            line={"color": "#10b981", "width": 2},
        ))
        fig.add_trace(go.Scatter(
            x=iterations, y=_data.get_best_ever_series(),
            mode="lines", name="Best so far",
            line={"color": "#fbbf24", "width": 2, "dash": "dash"},
            fill="tozeroy",
            fillcolor="rgba(251, 191, 36, 0.08)",
        ))

    fig.update_layout(
        **_CHART_LAYOUT,
        xaxis={"gridcolor": "#2a2a4a", "title": "Iteration", "title_font_size": 10},
        yaxis={"gridcolor": "#2a2a4a", "range": [-0.05, 1.05],
               "title": "Misclassified share", "title_font_size": 10},
        legend={"orientation": "h", "y": 1.15, "font": {"size": 9}},
        height=260,
    )
    return fig


def _render_improvements():
    """Render the cost of each successive new best."""
    fig = go.Figure()
    series = _data.get_improvement_series()
    if series:
        fig.add_trace(go.Scatter(
            y=series,
            mode="lines+markers",
            name="New best",
            line={"color": "#10b981", "width": 2, "shape": "hv"},
            marker={"size": 5},
        ))

    fig.update_layout(
        **_CHART_LAYOUT,
        xaxis={"gridcolor": "#2a2a4a", "title": "Improvement", "title_font_size": 10},
        yaxis={"gridcolor": "#2a2a4a", "range": [-0.05, 1.05],
               "title": "Cost", "title_font_size": 10},
        height=200,
    )
    return fig


# ── Main ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="View a logged swarm search")
    parser.add_argument("log", nargs="?", default=os.path.join("logs", "search_log.jsonl"),
                        help="Search log written by dfa_runner.py --log-dir")
    args = parser.parse_args()
    app = create_app(load_search_log(args.log))
    print("🐝 Swarm Search Viewer starting...")
    print("   Open http://127.0.0.1:8050 in your browser")
    app.run(debug=True, port=8050)

"""
Flask web application serving deck battle statistics.
"""
from flask import Flask, jsonify, request

from ..analyzer.entrants import annotate_entrants
from ..analyzer.matchups import MatchupAnalyzer, build_matrix
from ..analyzer.rating import RatingAnalyzer
from ..analyzer.suggestions import suggest_matchups
from ..analyzer.triangles import find_cycles, find_triangles
from ..analyzer.winrate import RANKING_MODES, WinRateAnalyzer
from ..config import AppConfig
from ..records.loader import SnapshotError
from .data_manager import DataManager


app = Flask(__name__)

config = AppConfig.from_env()
data_manager = DataManager(config.snapshot_path, cache_ttl=config.cache_ttl)


def _snapshot():
    data = data_manager.get_data()
    return data["decks"], data["battles"]


@app.errorhandler(SnapshotError)
def handle_snapshot_error(error):
    return jsonify({"error": str(error)}), 500


@app.route("/api/overview")
def api_overview():
    """Get overview statistics."""
    data = data_manager.get_data()
    decks, battles = data["decks"], data["battles"]

    return jsonify({
        "project": data.get("project"),
        "exported_at": data.get("exported_at"),
        "total_decks": len(decks),
        "total_battles": len(battles),
        "battles_per_week": data_manager.get_weekly_counts(),
    })


@app.route("/api/ratings")
def api_ratings():
    """Get the rating leaderboard."""
    decks, battles = _snapshot()
    return jsonify({"ratings": RatingAnalyzer(decks, battles).get_leaderboard()})


@app.route("/api/matchups")
def api_matchups():
    """Get matchup matrix data."""
    decks, battles = _snapshot()
    analyzer = MatchupAnalyzer(decks, battles)

    return jsonify({
        "heatmap": analyzer.get_heatmap_data(),
        "matrix": analyzer.get_matrix_data()
    })


@app.route("/api/triangles")
def api_triangles():
    """Get three-deck dominance loops."""
    decks, battles = _snapshot()
    matrix = build_matrix(decks, battles)
    return jsonify({"triangles": [t.to_dict() for t in find_triangles(decks, matrix)]})


@app.route("/api/cycles")
def api_cycles():
    """Get dominance loops of three to five decks."""
    decks, battles = _snapshot()
    matrix = build_matrix(decks, battles)
    return jsonify({"cycles": [c.to_dict() for c in find_cycles(decks, matrix)]})


@app.route("/api/rivalries")
def api_rivalries():
    """Get evenly matched pairs."""
    decks, battles = _snapshot()
    return jsonify({"rivalries": MatchupAnalyzer(decks, battles).get_rivalries()})


@app.route("/api/rankings")
def api_rankings():
    """Get deck rankings by plain or normalized win rate."""
    mode = request.args.get("mode", "plain")
    if mode not in RANKING_MODES:
        return jsonify({"error": f"mode must be one of {', '.join(RANKING_MODES)}"}), 400

    decks, battles = _snapshot()
    analyzer = WinRateAnalyzer(decks, battles)

    return jsonify({
        "mode": mode,
        "rankings": analyzer.get_rankings(mode),
        "chart_data": analyzer.get_chart_data(mode)
    })


@app.route("/api/suggestions")
def api_suggestions():
    """Get recommended matchups to play next."""
    decks, battles = _snapshot()
    matrix = build_matrix(decks, battles)
    return jsonify({"suggestions": [s.to_dict() for s in suggest_matchups(decks, matrix)]})


@app.route("/api/deck/<deck_id>/detail")
def api_deck_detail(deck_id: str):
    """Get detailed analysis for a specific deck."""
    decks, battles = _snapshot()

    detail = WinRateAnalyzer(decks, battles).get_deck_detail(deck_id)
    if detail is None:
        return jsonify({"error": f"Unknown deck: {deck_id}"}), 404

    return jsonify({
        "stats": detail,
        "matchups": MatchupAnalyzer(decks, battles).get_deck_matchups(deck_id),
        "rating_history": RatingAnalyzer(decks, battles).get_history(deck_id),
    })


@app.route("/api/entrants")
def api_entrants():
    """Annotate tournament entrants with rating and win rate."""
    raw_ids = request.args.get("ids", "")
    entrant_ids = [i.strip() for i in raw_ids.split(",") if i.strip()]

    decks, battles = _snapshot()
    return jsonify({"entrants": annotate_entrants(entrant_ids, decks, battles)})


def run(host: str = "127.0.0.1", port: int = 5000, debug: bool = True):
    """Run the Flask application."""
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run()

"""
CLI entry point for the deck battle analyzer.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import AppConfig

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    try:
        config = AppConfig.from_env()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 1

    parser = argparse.ArgumentParser(
        description="Deck Battle Analyzer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m battle_analyzer.main analyze                    # Show analysis summary
  python -m battle_analyzer.main analyze --mode normalized  # Rank by per-opponent average
  python -m battle_analyzer.main analyze --deck "Mono Red"  # Show detail for one deck
  python -m battle_analyzer.main web                        # Start JSON API
        """
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging (lists skipped records)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Show analysis summary")
    analyze_parser.add_argument(
        "--data",
        type=Path,
        default=config.snapshot_path,
        help=f"Snapshot file to analyze (default: {config.snapshot_path})"
    )
    analyze_parser.add_argument(
        "--deck", "-d",
        type=str,
        help="Show detail for a specific deck (id or name)"
    )
    analyze_parser.add_argument(
        "--mode", "-m",
        choices=["plain", "normalized"],
        default="plain",
        help="Ranking mode (default: plain)"
    )

    # Web command
    web_parser = subparsers.add_parser("web", help="Start web interface")
    web_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    web_parser.add_argument(
        "--port", "-p",
        type=int,
        default=5000,
        help="Port to bind to (default: 5000)"
    )
    web_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.command == "analyze":
        return run_analyze(args)
    elif args.command == "web":
        return run_web(args)

    parser.print_help()
    return 0


def run_analyze(args) -> int:
    """Run analysis and print summary."""
    from .analyzer.matchups import MatchupAnalyzer, build_matrix
    from .analyzer.rating import compute_ratings
    from .analyzer.suggestions import suggest_matchups
    from .analyzer.triangles import find_triangles
    from .analyzer.winrate import deck_profile, rank_decks
    from .records.loader import SnapshotError, load_snapshot, parse_snapshot

    try:
        raw = load_snapshot(args.data)
        if raw is None:
            print(f"❌ No data found at {args.data}. Export a snapshot first.")
            return 1
        decks, battles = parse_snapshot(raw)
    except SnapshotError as e:
        print(f"❌ Could not read snapshot: {e}")
        return 1

    ratings = compute_ratings(decks, battles)

    if args.deck:
        deck = next((d for d in decks if args.deck in (d.id, d.name)), None)
        if deck is None:
            print(f"❌ Unknown deck: {args.deck}")
            return 1

        profile = deck_profile(deck, decks, battles)
        matchups = MatchupAnalyzer(decks, battles).get_deck_matchups(deck.id)

        print(f"\n📊 {deck.name} Analysis")
        print("=" * 50)
        print(f"   Rating: {ratings[deck.id].rating:.0f}")
        print(f"   Record: {profile.wins}W {profile.losses}L ({profile.battles} battles)")
        print(f"   Win Rate: {profile.win_rate:.1f}% | Normalized: {profile.normalized_win_rate:.1f}%")
        if profile.going_first_rate > 0:
            print(f"   Going First: {profile.going_first_rate:.1f}% "
                  f"(win {profile.going_first_win_rate:.1f}% first / "
                  f"{profile.going_second_win_rate:.1f}% second)")
        if profile.recent_form:
            print(f"   Recent Form: {' '.join(profile.recent_form)}")

        if matchups["favorable"]:
            print(f"\n✅ Favorable Matchups:")
            for m in matchups["favorable"][:5]:
                print(f"   vs {m['opponent']}: {m['winrate']}% ({m['matches']} games)")

        if matchups["unfavorable"]:
            print(f"\n❌ Unfavorable Matchups:")
            for m in matchups["unfavorable"][:5]:
                print(f"   vs {m['opponent']}: {m['winrate']}% ({m['matches']} games)")
        return 0

    matrix = build_matrix(decks, battles)
    rankings = rank_decks(decks, battles, args.mode)

    print(f"\n📊 Deck Battle Analysis Summary")
    print("=" * 50)
    print(f"Decks: {len(decks)} | Battles: {len(battles)}")

    print(f"\n🏆 Rankings ({args.mode}):")
    for i, entry in enumerate(rankings, 1):
        rate = entry.normalized_win_rate if args.mode == "normalized" else entry.win_rate
        print(f"   {i:2}. {entry.deck.name}")
        print(f"       Win Rate: {rate:.1f}% | {entry.wins}W {entry.losses}L | "
              f"Rating: {ratings[entry.deck.id].rating:.0f}")

    triangles = find_triangles(decks, matrix)
    if triangles:
        print(f"\n🔺 Rock-Paper-Scissors:")
        for t in triangles:
            print(f"   {t.deck1.name} → {t.deck2.name} → {t.deck3.name} "
                  f"(avg {t.avg_win_rate:.1f}%)")

    suggestions = suggest_matchups(decks, matrix)
    if suggestions:
        print(f"\n🎯 Suggested Matchups:")
        for s in suggestions:
            print(f"   {s.deck1.name} vs {s.deck2.name} [{s.reason}]")

    return 0


def run_web(args) -> int:
    """Run the web interface."""
    from .web.app import run

    print(f"🌐 Starting web interface at http://{args.host}:{args.port}")
    run(host=args.host, port=args.port, debug=args.debug)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Analyse a pasted race card from a file or stdin and print the picks.

Usage (local):
    python scripts/analyze_paste.py paste.txt
    pbpaste | python scripts/analyze_paste.py --all
    python scripts/analyze_paste.py paste.txt --correct "中山_7_ホース=odds.txt"
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from chuuana.config import settings  # noqa: E402
from chuuana.models import PickCard, Rank, race_label  # noqa: E402
from chuuana.session import AnalysisOutcome, AnalysisSession, CorrectionError  # noqa: E402

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def format_card(card: PickCard) -> str:
    head = f"[{card.rank.value}] {race_label(card)}"
    if card.rank is Rank.C:
        return f"{head}  {card.reason or ''}"
    jockey = f"（{card.jockey_name}）" if card.jockey_name else ""
    line = f"{head}  ◎ {card.display_horse}{jockey}  複勝 {card.place_range_text}"
    if card.rank is Rank.S and card.win_odds is not None:
        line += f"  単勝 {card.win_odds:.1f}"
    if card.tags:
        line += "  " + " ".join(f"#{t}" for t in card.tags)
    return line


def main() -> int:
    parser = argparse.ArgumentParser(description="Mid-tier place picks from a pasted race card")
    parser.add_argument("path", nargs="?", help="Paste file (default: stdin)")
    parser.add_argument("--all", action="store_true", help="Show every race, not just S/A")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--policy", choices=["popularity", "odds"], help="Strong-field veto policy")
    parser.add_argument(
        "--correct", action="append", default=[], metavar="KEY=FILE",
        help="Re-grade a pick from a fresh odds paste (repeatable)",
    )
    args = parser.parse_args()

    text = Path(args.path).read_text(encoding="utf-8") if args.path else sys.stdin.read()

    session = AnalysisSession(policy=args.policy)
    session.analyze(text)

    if args.correct:
        session.begin_update()
        for item in args.correct:
            key, _, odds_path = item.partition("=")
            try:
                result = session.apply_update(key, Path(odds_path).read_text(encoding="utf-8"))
            except CorrectionError as e:
                logger.error(f"{key}: {e}")
                continue
            if not result.ok:
                logger.warning(f"{key}: {result.message}")

    # Corrected picks stay listed even if a correction dropped them to B
    cards = session.cards if args.all else (session.update_targets or session.recommended)

    if args.json:
        payload = {
            "outcome": session.outcome.value,
            "stats": session.stats.to_dict(),
            "cards": [c.to_dict() for c in cards],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(session.stats_text)
    if session.outcome is AnalysisOutcome.UNPARSED:
        print("解析できませんでした（レース見出しや人気・オッズが含まれているか確認してください）")
        return 1

    if not cards:
        counts = session.rank_counts
        print("S/A候補なし（今日は見送り）")
        print(f"内訳：S {counts['S']} / A {counts['A']} / B {counts['B']} / C {counts['C']}")
        return 0

    for card in cards:
        print(format_card(card))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Race grading, cross-race ordering and pre-post corrections."""

from chuuana.scoring.correction import (
    OddsUpdate,
    apply_correction,
    correct_pick,
    extract_odds_from_pasted_text,
)
from chuuana.scoring.evaluator import (
    estimate_place_low_from_win_odds,
    evaluate,
    evaluate_all,
    rank_from_place_low,
)
from chuuana.scoring.ranking import rank_counts, recommended_sorted, top_picks

__all__ = [
    "OddsUpdate",
    "apply_correction",
    "correct_pick",
    "extract_odds_from_pasted_text",
    "estimate_place_low_from_win_odds",
    "evaluate",
    "evaluate_all",
    "rank_from_place_low",
    "rank_counts",
    "recommended_sorted",
    "top_picks",
]

"""Per-race verdicts: pick one mid-tier runner and grade its place odds.

Fixed heuristics, no learning:

- a field with two or more strong runners is skipped (C)
- candidates are 4th to 8th favourite
- the candidate with the highest place-odds floor wins, ties going to the
  more-favoured runner
- S at a floor of 3.0 or better, A at 2.2 or better, otherwise B

When a paste carried no place range the floor is estimated from win
odds, and the card says so in both its range text and its tags.
"""

import logging
import math
from typing import Optional

from chuuana.config import settings
from chuuana.models import (
    Estimated,
    Measured,
    PickCard,
    PlaceFloor,
    RaceBlock,
    Rank,
    RunnerParsed,
    Unpriced,
)

logger = logging.getLogger(__name__)

# Mid-tier popularity window (inclusive)
MID_POP_MIN = 4
MID_POP_MAX = 8

# Place-odds floors for each grade
S_FLOOR = 3.0
A_FLOOR = 2.2

# Popularity ranks counted as strong under the popularity policy
STRONG_POPULARITY = (1, 2)
STRONG_FIELD_LIMIT = 2

# Win odds -> place floor estimate: 1.2 + 0.25 * odds, clamped
ESTIMATE_BASE = 1.2
ESTIMATE_SLOPE = 0.25
ESTIMATE_MIN = 1.2
ESTIMATE_MAX = 6.0

MAX_TAGS = 3
MID_TAG_PREFIX = "中穴("
TAG_VALUE = "妙味あり"
TAG_WEAK_FIELD = "相手弱め"
TAG_REFRESH = "要更新"

REASON_STRONG_BY_POPULARITY = "相手強すぎ（1・2番人気が2頭以上）"
REASON_NO_CANDIDATE = "中穴候補なし（4〜8人気なし）"


def strong_by_odds_reason(threshold: float) -> str:
    return f"相手強すぎ（単勝{threshold}倍以下が2頭以上）"


def estimate_place_low_from_win_odds(win_odds: Optional[float]) -> Optional[float]:
    """Estimate the place-odds floor from win odds (4.0 -> 2.2, 8.0 -> 3.2).

    Result is clamped to [1.2, 6.0] and rounded half-up to one decimal.
    """
    if win_odds is None or math.isnan(win_odds):
        return None
    raw = ESTIMATE_BASE + win_odds * ESTIMATE_SLOPE
    clamped = max(ESTIMATE_MIN, min(ESTIMATE_MAX, raw))
    return math.floor(clamped * 10 + 0.5) / 10


def place_floor(runner: RunnerParsed) -> PlaceFloor:
    """Measured floor if the paste had one, else an estimate, else unpriced."""
    if runner.place_low is not None:
        return Measured(runner.place_low)
    estimate = estimate_place_low_from_win_odds(runner.win_odds)
    if estimate is not None:
        return Estimated(estimate)
    return Unpriced()


def rank_from_place_low(place_low: float) -> Rank:
    if place_low >= S_FLOOR:
        return Rank.S
    if place_low >= A_FLOOR:
        return Rank.A
    return Rank.B


def mid_tier_tag(win_popularity: Optional[int]) -> str:
    if win_popularity is None:
        return f"{MID_TAG_PREFIX}{MID_POP_MIN}–{MID_POP_MAX}人気)"
    return f"{MID_TAG_PREFIX}{win_popularity}人気)"


def count_strong_runners(
    runners: list[RunnerParsed],
    policy: str,
    strong_odds: float,
) -> int:
    if policy == "odds":
        return sum(1 for r in runners if r.win_odds is not None and r.win_odds <= strong_odds)
    return sum(1 for r in runners if r.win_popularity in STRONG_POPULARITY)


def build_tags(
    win_popularity: Optional[int],
    place_low: float,
    strong_count: int,
    estimated: bool,
) -> list[str]:
    """Mid-tier tag first, then value, weak field, and a refresh hint for estimates."""
    tags = [mid_tier_tag(win_popularity)]
    if place_low >= A_FLOOR:
        tags.append(TAG_VALUE)
    if strong_count <= 1:
        tags.append(TAG_WEAK_FIELD)
    if estimated and len(tags) < MAX_TAGS:
        tags.append(TAG_REFRESH)
    return tags[:MAX_TAGS]


def place_range_text(runner: RunnerParsed, floor: PlaceFloor) -> str:
    if isinstance(floor, Measured):
        if runner.place_range_raw:
            return runner.place_range_raw.replace("-", "–")
        return f"{floor.value:.1f}+"
    if isinstance(floor, Estimated):
        return f"推定{floor.value:.1f}+"
    return "オッズ不明"


def _no_pick(block: RaceBlock, reason: str) -> PickCard:
    logger.debug(f"{block.track_name or '-'} {block.race_no}R: no pick ({reason})")
    return PickCard(
        rank=Rank.C,
        race_no=block.race_no,
        track_name=block.track_name,
        reason=reason,
    )


def evaluate(
    block: RaceBlock,
    policy: Optional[str] = None,
    strong_odds: Optional[float] = None,
) -> PickCard:
    """Grade one race. Never raises; "no pick" is a C card with a reason."""
    policy = policy or settings.strong_field_policy
    strong_odds = strong_odds if strong_odds is not None else settings.strong_odds
    runners = block.runners

    strong_count = count_strong_runners(runners, policy, strong_odds)
    if strong_count >= STRONG_FIELD_LIMIT:
        reason = strong_by_odds_reason(strong_odds) if policy == "odds" else REASON_STRONG_BY_POPULARITY
        return _no_pick(block, reason)

    candidates = [r for r in runners if MID_POP_MIN <= r.popularity_or_worst <= MID_POP_MAX]
    if not candidates:
        return _no_pick(block, REASON_NO_CANDIDATE)

    # Highest floor first; on equal floors the more-favoured runner wins.
    # sorted() is stable so paste order settles anything left.
    scored = sorted(
        ((r, place_floor(r)) for r in candidates),
        key=lambda pair: (-pair[1].value, pair[0].popularity_or_worst),
    )
    best, floor = scored[0]

    card = PickCard(
        rank=rank_from_place_low(floor.value),
        race_no=block.race_no,
        track_name=block.track_name,
        horse_name=best.horse_name,
        jockey_name=best.jockey_name,
        win_popularity=best.win_popularity,
        win_odds=best.win_odds,
        place_range_text=place_range_text(best, floor),
        place_low=None if isinstance(floor, Unpriced) else floor.value,
        tags=build_tags(best.win_popularity, floor.value, strong_count, floor.estimated),
    )
    logger.debug(
        f"{block.track_name or '-'} {block.race_no}R: {card.rank.value} "
        f"{card.display_horse} floor={floor.value} estimated={floor.estimated}"
    )
    return card


def evaluate_all(
    blocks: list[RaceBlock],
    policy: Optional[str] = None,
    strong_odds: Optional[float] = None,
) -> list[PickCard]:
    """One card per block, in block order."""
    return [evaluate(b, policy=policy, strong_odds=strong_odds) for b in blocks]

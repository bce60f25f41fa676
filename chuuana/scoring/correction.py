"""Re-grade a single pick from freshly pasted odds, just before post time."""

import logging
from dataclasses import dataclass
from typing import Optional

from chuuana.models import PickCard
from chuuana.parsing.lines import find_place_range, find_win_odds
from chuuana.parsing.normalizer import normalize
from chuuana.scoring.evaluator import (
    A_FLOOR,
    MAX_TAGS,
    TAG_VALUE,
    TAG_WEAK_FIELD,
    mid_tier_tag,
    rank_from_place_low,
)

logger = logging.getLogger(__name__)


@dataclass
class OddsUpdate:
    """Odds pulled out of a correction paste; every field absent on a miss."""

    place_low: Optional[float] = None
    place_high: Optional[float] = None
    place_range_raw: Optional[str] = None
    win_odds: Optional[float] = None

    @property
    def found(self) -> bool:
        return self.place_low is not None and self.place_high is not None and self.place_range_raw is not None

    def to_dict(self) -> dict:
        return {
            "place_low": self.place_low,
            "place_high": self.place_high,
            "place_range_raw": self.place_range_raw,
            "win_odds": self.win_odds,
        }


def extract_odds_from_pasted_text(text: str, horse_name: Optional[str]) -> OddsUpdate:
    """Find the place range (and win odds, if labelled) for one horse.

    Looks at the first line mentioning the horse; when no line does, the
    whole paste is searched instead.
    """
    normalized = normalize(text)
    lines = [ln.strip() for ln in normalized.splitlines() if ln.strip()]
    target = normalize(horse_name or "").strip()

    target_line = normalized
    if target:
        target_line = next((ln for ln in lines if target in ln), normalized)

    update = OddsUpdate(win_odds=find_win_odds(target_line))
    place = find_place_range(target_line)
    if place:
        update.place_low = place.low
        update.place_high = place.high
        update.place_range_raw = place.raw
    return update


def update_tags(prev_tags: list[str], win_popularity: Optional[int], place_low: float) -> list[str]:
    """Refresh the mid-tier tag, toggle the value tag, keep a weak-field tag."""
    ordered = [mid_tier_tag(win_popularity)]
    if place_low >= A_FLOOR:
        ordered.append(TAG_VALUE)
    if TAG_WEAK_FIELD in prev_tags:
        ordered.append(TAG_WEAK_FIELD)
    return ordered[:MAX_TAGS]


def apply_correction(card: PickCard, update: OddsUpdate) -> bool:
    """Mutate card in place from update. Returns False, untouched, on a miss."""
    if not update.found:
        logger.info(f"No place range found for {card.key}")
        return False

    card.rank = rank_from_place_low(update.place_low)
    card.place_low = update.place_low
    card.place_range_text = update.place_range_raw.replace("-", "–")
    if update.win_odds is not None:
        card.win_odds = update.win_odds
    card.tags = update_tags(card.tags, card.win_popularity, update.place_low)
    card.reason = None

    logger.info(f"Corrected {card.key}: {card.rank.value} place {card.place_range_text}")
    return True


def correct_pick(card: PickCard, text: str) -> bool:
    """Extract odds for the card's horse from text and apply them."""
    return apply_correction(card, extract_odds_from_pasted_text(text, card.horse_name))

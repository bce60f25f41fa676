"""Cross-race ordering of S/A picks."""

from typing import Optional

from chuuana.config import settings
from chuuana.models import PickCard, Rank
from chuuana.tracks import track_label

RECOMMENDED_RANKS = (Rank.S, Rank.A)


def _sort_key(card: PickCard) -> tuple[int, float, str]:
    place_low = card.place_low if card.place_low is not None else -1.0
    return (card.rank.order, -place_low, f"{track_label(card.track_name)}{card.race_no}")


def recommended_sorted(cards: list[PickCard]) -> list[PickCard]:
    """S before A, higher place floor first, then venue+race as text."""
    return sorted((c for c in cards if c.rank in RECOMMENDED_RANKS), key=_sort_key)


def top_picks(cards: list[PickCard], limit: Optional[int] = None) -> list[PickCard]:
    if limit is None:
        limit = settings.recommended_preview
    return recommended_sorted(cards)[:limit]


def rank_counts(cards: list[PickCard]) -> dict[str, int]:
    counts = {r.value: 0 for r in Rank}
    for card in cards:
        counts[card.rank.value] += 1
    return counts

"""One operator session: analyse a paste, then correct picks before post time.

The correction worklist is a snapshot of the S/A picks taken when update
mode starts. It holds the same card objects as the main list, so a pick
downgraded to B by a correction stays on the worklist while the main
list sees the same change.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from chuuana.models import ParseStats, PickCard, Rank
from chuuana.parsing import parse_all
from chuuana.scoring.correction import apply_correction, extract_odds_from_pasted_text
from chuuana.scoring.evaluator import evaluate_all
from chuuana.scoring.ranking import rank_counts, recommended_sorted, top_picks

logger = logging.getLogger(__name__)

MSG_EMPTY_PASTE = "貼り付けテキストが空です。"
MSG_RANGE_NOT_FOUND = (
    "複勝レンジ（例: 2.2-3.4）が見つかりませんでした。馬名が含まれる行を貼るのがおすすめです。"
)
MSG_NOT_A_PICK = "見送りのレースは補正できません。"


class CorrectionError(Exception):
    """Raised when a correction request itself is unusable."""

    pass


class AnalysisOutcome(str, Enum):
    """What the operator should be told about an analysis run."""

    UNPARSED = "unparsed"    # nothing recognisable in the paste
    NO_PICKS = "no_picks"    # parsed fine, nothing graded S/A
    PICKS = "picks"


@dataclass
class CorrectionResult:
    ok: bool
    card: PickCard
    message: str = ""


def format_stats(stats: ParseStats) -> str:
    """One-line parse summary for the operator."""
    return (
        f"検出: 競馬場{stats.detected_tracks} / レース{stats.detected_races} / "
        f"ヘッダー{stats.detected_headers} / 馬行{stats.detected_runner_lines} / "
        f"無視{stats.ignored_lines}"
    )


class AnalysisSession:
    """Holds one analysis run and its correction worklist."""

    def __init__(self, policy: Optional[str] = None, strong_odds: Optional[float] = None):
        self.policy = policy
        self.strong_odds = strong_odds
        self.cards: list[PickCard] = []
        self.stats: Optional[ParseStats] = None
        self.update_targets: list[PickCard] = []

    @property
    def analyzed(self) -> bool:
        return self.stats is not None

    def analyze(self, text: str) -> list[PickCard]:
        """Parse and grade a paste, replacing any previous run."""
        result = parse_all(text)
        self.cards = evaluate_all(result.blocks, policy=self.policy, strong_odds=self.strong_odds)
        self.stats = result.stats
        self.update_targets = []
        logger.info(f"Analysis: {self.stats_text} -> {self.outcome.value}")
        return self.cards

    def clear(self) -> None:
        self.cards = []
        self.stats = None
        self.update_targets = []

    @property
    def recommended(self) -> list[PickCard]:
        return recommended_sorted(self.cards)

    def preview(self, limit: Optional[int] = None) -> list[PickCard]:
        return top_picks(self.cards, limit)

    @property
    def rank_counts(self) -> dict[str, int]:
        return rank_counts(self.cards)

    @property
    def stats_text(self) -> str:
        return format_stats(self.stats) if self.stats else ""

    @property
    def outcome(self) -> AnalysisOutcome:
        if not self.cards:
            return AnalysisOutcome.UNPARSED
        if not self.recommended:
            return AnalysisOutcome.NO_PICKS
        return AnalysisOutcome.PICKS

    # --- update mode ---

    def begin_update(self) -> list[PickCard]:
        """Snapshot the current S/A picks as the correction worklist."""
        self.update_targets = self.recommended
        return self.update_targets

    def find(self, key: str) -> Optional[PickCard]:
        for card in self.update_targets:
            if card.key == key:
                return card
        for card in self.cards:
            if card.key == key:
                return card
        return None

    def apply_update(self, key: str, text: str) -> CorrectionResult:
        """Re-grade the pick identified by key from freshly pasted odds.

        A missing range leaves every card as it was and reports ok=False.
        """
        if not text or not text.strip():
            raise CorrectionError(MSG_EMPTY_PASTE)
        card = self.find(key)
        if card is None:
            raise CorrectionError(f"Unknown pick: {key}")
        if card.rank is Rank.C:
            raise CorrectionError(MSG_NOT_A_PICK)

        update = extract_odds_from_pasted_text(text, card.horse_name)
        if not apply_correction(card, update):
            return CorrectionResult(ok=False, card=card, message=MSG_RANGE_NOT_FOUND)
        return CorrectionResult(ok=True, card=card)

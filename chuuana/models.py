"""Data shapes passed between the parser, the evaluator and the session."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from chuuana.tracks import track_label

# Shown wherever a pick has no recoverable horse name
UNKNOWN_HORSE = "（馬名不明）"


class Rank(str, Enum):
    """Verdict for one race, S most desirable."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"

    @property
    def order(self) -> int:
        return _RANK_ORDER[self]


_RANK_ORDER = {Rank.S: 0, Rank.A: 1, Rank.B: 2, Rank.C: 3}


# ──────────────────────────────────────────────
# Place-odds floor with provenance
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Measured:
    """Place-odds lower bound read straight off the paste."""

    value: float
    estimated: ClassVar[bool] = False


@dataclass(frozen=True)
class Estimated:
    """Place-odds lower bound derived from win odds."""

    value: float
    estimated: ClassVar[bool] = True


@dataclass(frozen=True)
class Unpriced:
    """Neither a place range nor win odds was available."""

    value: ClassVar[float] = -1.0
    estimated: ClassVar[bool] = True


PlaceFloor = Measured | Estimated | Unpriced


# ──────────────────────────────────────────────
# Parser output
# ──────────────────────────────────────────────

@dataclass
class RunnerParsed:
    """Facts recovered from one runner's line (or lines)."""

    raw_line: str = ""
    horse_name: Optional[str] = None
    jockey_name: Optional[str] = None
    win_popularity: Optional[int] = None
    win_odds: Optional[float] = None
    place_low: Optional[float] = None
    place_high: Optional[float] = None
    place_range_raw: Optional[str] = None  # "2.2-3.4"

    @property
    def popularity_or_worst(self) -> int:
        return self.win_popularity if self.win_popularity is not None else 99


@dataclass
class RaceBlock:
    """One race's runners, in paste order."""

    race_no: int
    track_name: Optional[str] = None
    runners: list[RunnerParsed] = field(default_factory=list)


@dataclass
class ParseStats:
    """Operator feedback counters for one parse run."""

    detected_tracks: int = 0
    detected_races: int = 0
    detected_headers: int = 0
    detected_runner_lines: int = 0
    ignored_lines: int = 0

    def to_dict(self) -> dict:
        return {
            "detected_tracks": self.detected_tracks,
            "detected_races": self.detected_races,
            "detected_headers": self.detected_headers,
            "detected_runner_lines": self.detected_runner_lines,
            "ignored_lines": self.ignored_lines,
        }


@dataclass
class ParseResult:
    blocks: list[RaceBlock]
    stats: ParseStats


# ──────────────────────────────────────────────
# Evaluator output
# ──────────────────────────────────────────────

@dataclass
class PickCard:
    """One race's verdict; mutated in place by odds corrections."""

    rank: Rank
    race_no: int
    track_name: Optional[str] = None
    horse_name: Optional[str] = None
    jockey_name: Optional[str] = None
    win_popularity: Optional[int] = None
    win_odds: Optional[float] = None
    place_range_text: str = ""
    place_low: Optional[float] = None
    tags: list[str] = field(default_factory=list)
    reason: Optional[str] = None  # only on C cards

    @property
    def key(self) -> str:
        return card_key(self)

    @property
    def display_horse(self) -> str:
        return self.horse_name or UNKNOWN_HORSE

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "rank": self.rank.value,
            "track_name": self.track_name,
            "race_no": self.race_no,
            "race_label": race_label(self),
            "horse_name": self.horse_name,
            "jockey_name": self.jockey_name,
            "win_popularity": self.win_popularity,
            "win_odds": self.win_odds,
            "place_range_text": self.place_range_text,
            "place_low": self.place_low,
            "tags": list(self.tags),
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PickCard":
        return cls(
            rank=Rank(data["rank"]),
            race_no=int(data["race_no"]),
            track_name=data.get("track_name"),
            horse_name=data.get("horse_name"),
            jockey_name=data.get("jockey_name"),
            win_popularity=data.get("win_popularity"),
            win_odds=data.get("win_odds"),
            place_range_text=data.get("place_range_text") or "",
            place_low=data.get("place_low"),
            tags=list(data.get("tags") or []),
            reason=data.get("reason"),
        )


def card_key(card: PickCard) -> str:
    """Identity of a pick across re-scoring: venue, race and horse."""
    return f"{track_label(card.track_name)}_{card.race_no}_{card.horse_name or ''}"


def race_label(card: PickCard) -> str:
    return f"{track_label(card.track_name)} {card.race_no}R"

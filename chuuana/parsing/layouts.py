"""State machines for layouts that spread one runner over several lines.

Frame-block layout (one value per line, after a "枠N" marker)::

    枠3
    ホースネーム        -> name
    57.0               -> odds (overwritten by the next decimal)
    12.3               -> odds
    (5番人気)           -> popularity, emit

Legacy two-line layout (name line, then a table row)::

    ホースネーム
    牡3  57.0  横山武  美浦・鹿戸  480(+2)  28.8  7
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from chuuana.models import RunnerParsed
from chuuana.parsing.lines import (
    looks_like_horse_name,
    parse_decimal_only,
    parse_frame_popularity,
    parse_odds_popularity_at_end,
)

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    IDLE = "idle"
    AWAITING_NAME = "awaiting_name"
    AWAITING_ODDS = "awaiting_odds"
    AWAITING_POPULARITY = "awaiting_popularity"
    COMPLETE = "complete"


class FrameLine(str, Enum):
    NAME = "name"
    ODDS = "odds"
    POPULARITY = "popularity"
    ODDS_AND_POPULARITY = "odds_and_popularity"
    OTHER = "other"


# (state, line kind) -> next state; pairs not listed leave the state alone
FRAME_TRANSITIONS: dict[tuple[CaptureState, FrameLine], CaptureState] = {
    (CaptureState.AWAITING_NAME, FrameLine.NAME): CaptureState.AWAITING_ODDS,
    (CaptureState.AWAITING_ODDS, FrameLine.ODDS): CaptureState.AWAITING_POPULARITY,
    (CaptureState.AWAITING_ODDS, FrameLine.ODDS_AND_POPULARITY): CaptureState.COMPLETE,
    (CaptureState.AWAITING_POPULARITY, FrameLine.ODDS): CaptureState.AWAITING_POPULARITY,
    (CaptureState.AWAITING_POPULARITY, FrameLine.POPULARITY): CaptureState.COMPLETE,
    (CaptureState.AWAITING_POPULARITY, FrameLine.ODDS_AND_POPULARITY): CaptureState.COMPLETE,
}


@dataclass
class FeedResult:
    """What a machine did with one line."""

    consumed: bool
    runner: Optional[RunnerParsed] = None


def _classify_frame_line(line: str) -> tuple[FrameLine, Optional[float], Optional[int]]:
    pop = parse_frame_popularity(line)
    if pop:
        odds, popularity = pop
        kind = FrameLine.ODDS_AND_POPULARITY if odds is not None else FrameLine.POPULARITY
        return kind, odds, popularity
    odds = parse_decimal_only(line)
    if odds is not None:
        return FrameLine.ODDS, odds, None
    if looks_like_horse_name(line):
        return FrameLine.NAME, None, None
    return FrameLine.OTHER, None, None


class FrameBlockMachine:
    """Collects name, win odds and popularity for one runner after a frame marker.

    Capture ends the moment all three are known, so a "N番人気" in the same
    horse's past-performance lines is never picked up.
    """

    def __init__(self) -> None:
        self.state = CaptureState.IDLE
        self._lines: list[str] = []
        self._horse_name: Optional[str] = None
        self._win_odds: Optional[float] = None

    @property
    def active(self) -> bool:
        return self.state is not CaptureState.IDLE

    def start(self) -> None:
        """A frame marker was seen: drop any partial runner and start over."""
        if self.state in (CaptureState.AWAITING_ODDS, CaptureState.AWAITING_POPULARITY):
            logger.debug(f"Frame capture restarted, dropping partial runner {self._horse_name!r}")
        self._clear()
        self.state = CaptureState.AWAITING_NAME

    def reset(self) -> None:
        self._clear()
        self.state = CaptureState.IDLE

    def _clear(self) -> None:
        self._lines = []
        self._horse_name = None
        self._win_odds = None

    def feed(self, line: str) -> FeedResult:
        if not self.active:
            return FeedResult(consumed=False)

        kind, odds, popularity = _classify_frame_line(line)
        next_state = FRAME_TRANSITIONS.get((self.state, kind))
        if next_state is None:
            return FeedResult(consumed=False)

        self._lines.append(line)
        if kind is FrameLine.NAME:
            self._horse_name = line.strip()
        if odds is not None:
            self._win_odds = odds
        self.state = next_state

        if self.state is not CaptureState.COMPLETE:
            return FeedResult(consumed=True)

        runner = RunnerParsed(
            raw_line=" / ".join(self._lines),
            horse_name=self._horse_name,
            win_odds=self._win_odds,
            win_popularity=popularity,
        )
        self.reset()
        return FeedResult(consumed=True, runner=runner)


class TwoLineMachine:
    """Pairs a bare horse-name line with the table row right after it."""

    def __init__(self) -> None:
        self.state = CaptureState.IDLE
        self.pending_name: Optional[str] = None

    def reset(self) -> None:
        self.state = CaptureState.IDLE
        self.pending_name = None

    def feed(self, line: str) -> FeedResult:
        if self.state is CaptureState.AWAITING_ODDS:
            row = parse_odds_popularity_at_end(line)
            if row:
                runner = RunnerParsed(
                    raw_line=f"{self.pending_name} / {line}",
                    horse_name=self.pending_name,
                    jockey_name=row.jockey_name,
                    win_odds=row.win_odds,
                    win_popularity=row.win_popularity,
                )
                self.reset()
                return FeedResult(consumed=True, runner=runner)

        if looks_like_horse_name(line):
            self.state = CaptureState.AWAITING_ODDS
            self.pending_name = line.strip()
            return FeedResult(consumed=True)

        # Only the very next line may complete a pending name
        self.reset()
        return FeedResult(consumed=False)

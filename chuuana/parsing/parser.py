"""Split a pasted race card into race blocks of runners.

Single pass over normalised lines. Every line goes through the same
ordered chain of recognisers and the first one that claims it wins:

1. race header (always, even mid frame capture)
2. noise line
3. self-contained runner line
4. frame-block layout (marker + positional lines)
5. legacy two-line layout (name line + table row)

Lines nobody claims are counted as ignored. Pastes with no header at all
are treated as race 1 with no venue.
"""

import logging
from typing import Callable, Optional

from chuuana.models import ParseResult, ParseStats, RaceBlock, RunnerParsed
from chuuana.parsing.layouts import FrameBlockMachine, TwoLineMachine
from chuuana.parsing.lines import (
    detect_header,
    is_frame_marker,
    is_noise_line,
    parse_self_contained,
)
from chuuana.parsing.normalizer import normalize

logger = logging.getLogger(__name__)

# Race number used when runners turn up before any header
IMPLICIT_RACE_NO = 1


class RaceCardParser:
    """Accumulates race blocks from one paste."""

    def __init__(self) -> None:
        self.blocks: list[RaceBlock] = []
        self.stats = ParseStats()
        self._track: Optional[str] = None
        self._race_no: Optional[int] = None
        self._runners: list[RunnerParsed] = []
        self._frame = FrameBlockMachine()
        self._two_line = TwoLineMachine()
        self._chain: list[Callable[[str], bool]] = [
            self._try_header,
            self._try_noise,
            self._try_self_contained,
            self._try_frame_block,
            self._try_two_line,
        ]

    def feed(self, line: str) -> None:
        for recognise in self._chain:
            if recognise(line):
                return
        self.stats.ignored_lines += 1

    def finish(self) -> ParseResult:
        self._flush()
        self.stats.detected_races = len({(b.track_name, b.race_no) for b in self.blocks})
        self.stats.detected_tracks = len({b.track_name for b in self.blocks if b.track_name})
        return ParseResult(blocks=self.blocks, stats=self.stats)

    # --- block lifecycle ---

    def _flush(self) -> None:
        if self._race_no is not None and self._runners:
            block = RaceBlock(race_no=self._race_no, track_name=self._track, runners=self._runners)
            self.blocks.append(block)
            logger.debug(f"Block {self._track or '-'} {self._race_no}R: {len(self._runners)} runners")
        elif self._race_no is not None:
            logger.debug(f"Dropping empty block {self._track or '-'} {self._race_no}R")
        self._runners = []
        self._frame.reset()
        self._two_line.reset()

    def _add_runner(self, runner: RunnerParsed) -> None:
        if self._race_no is None:
            self._race_no = IMPLICIT_RACE_NO
        self._runners.append(runner)
        self.stats.detected_runner_lines += 1

    # --- recognisers, in priority order ---

    def _try_header(self, line: str) -> bool:
        header = detect_header(line)
        if not header:
            return False
        self._flush()
        self._track = header.track_name
        self._race_no = header.race_no
        self.stats.detected_headers += 1
        return True

    def _try_noise(self, line: str) -> bool:
        if not is_noise_line(line):
            return False
        self.stats.ignored_lines += 1
        return True

    def _try_self_contained(self, line: str) -> bool:
        runner = parse_self_contained(line)
        if not runner:
            return False
        self._add_runner(runner)
        self._two_line.reset()
        return True

    def _try_frame_block(self, line: str) -> bool:
        if is_frame_marker(line):
            self._frame.start()
            self._two_line.reset()
            return True
        if not self._frame.active:
            return False

        # While capturing, the frame layout owns every line
        result = self._frame.feed(line)
        if result.runner:
            self._add_runner(result.runner)
        elif not result.consumed:
            self.stats.ignored_lines += 1
        return True

    def _try_two_line(self, line: str) -> bool:
        result = self._two_line.feed(line)
        if result.runner:
            self._add_runner(result.runner)
        return result.consumed


def parse_all(text: str) -> ParseResult:
    """Parse a whole paste into race blocks plus operator stats."""
    lines = [ln.strip() for ln in normalize(text).splitlines()]

    parser = RaceCardParser()
    for line in lines:
        if line:
            parser.feed(line)
    result = parser.finish()

    s = result.stats
    logger.info(
        f"Parsed paste: {s.detected_races} races, {s.detected_runner_lines} runners, "
        f"{s.detected_headers} headers, {s.ignored_lines} ignored"
    )
    return result

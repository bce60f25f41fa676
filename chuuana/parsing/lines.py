"""Line recognisers for pasted race cards.

Each function looks at one normalised, stripped line and either returns
the structured facts it found or None. The parser decides the order in
which they are tried; nothing in here carries state between lines.
"""

import re
from dataclasses import dataclass
from typing import Optional

from chuuana.models import RunnerParsed
from chuuana.tracks import TRACKS, is_known_track, is_valid_race_no

_NUM = r"\d+(?:\.\d+)?"

# --- Race headers ---
# "中山 7R", "東京第11レース", "阪神 12競走"
_TRACK_ALT = "|".join(TRACKS)
_HEADER_WITH_TRACK = re.compile(
    rf"({_TRACK_ALT})\s*(?:第\s*)?(1[0-2]|[1-9])\s*(?:R|レース|競走)"
)
# "7R", "第7レース" with no venue. Not "55.5 R.ムーア" (weight, then a jockey initial)
_HEADER_BARE = re.compile(
    r"(?:第\s*)?(?<![\d.])(1[0-2]|[1-9])\s*(?:R(?![.A-Za-z])|レース|競走)"
)

# --- Noise ---
_POST_POSITION_PAIR = re.compile(r"^\d+\s+\d+$")
_PEDIGREE_LABEL = re.compile(r"^(?:父|母|母父|母の父)(?:$|[\s:(])")
_STABLE_LABEL = re.compile(r"^(?:美浦|栗東)(?:$|[\s・:(])")
_NOISE_EXACT = {"--", "-", "編集", "血統", "馬主", "生産者", "調教師"}

# --- Self-contained runner lines ---
# a. "ホースネーム 12.3 (5番人気)"
_NAME_ODDS_POP = re.compile(rf"^(.+?)\s+({_NUM})\s*\(\s*(\d{{1,2}})\s*番人気\s*\)")
# b. popularity marker plus a place range
_POPULARITY = re.compile(r"(\d{1,2})\s*番?人気")
_PLACE_RANGE_LABELLED = re.compile(rf"複勝?\s*:?\s*({_NUM})\s*-\s*({_NUM})")
_PLACE_RANGE_LABELLED_SPACED = re.compile(rf"複勝?\s*:?\s*({_NUM})\s+({_NUM})")
_PLACE_RANGE_BARE = re.compile(rf"({_NUM})\s*-\s*({_NUM})")
_WIN_ODDS_LABELLED = re.compile(rf"単勝?\s*:?\s*({_NUM})")
_ODDS_LABELS = {"単", "単勝", "複", "複勝"}

# Prediction marks some sites prefix to names (◎○▲△☆注×)
_PREDICTION_MARKS = "◎○〇▲△☆★注×"

# --- Horse-name heuristic ---
_HAS_DIGIT = re.compile(r"\d")
_SEX_AGE = re.compile(r"[牡牝]|(?:^|\s)セン?(?:\s|$)")
_NAME_MIN_LEN = 2
_NAME_MAX_LEN = 30

# --- Legacy table row ending in "... 28.8 7" ---
_ODDS_POP_AT_END = re.compile(rf"({_NUM})\s+(\d{{1,2}})\s*$")
# Jockey weight window used to find the jockey token on a table row
WEIGHT_MIN = 45
WEIGHT_MAX = 65

# --- Frame-block layout ---
_FRAME_MARKER = re.compile(r"^(?:枠番?\s*([1-8])|([1-8])\s*枠)$")
_DECIMAL_ONLY = re.compile(r"^(\d+\.\d+)$")
_FRAME_POPULARITY = re.compile(r"^(?:(\d+\.\d+)\s*)?\(?\s*(\d{1,2})\s*番人気\s*\)?$")


@dataclass(frozen=True)
class Header:
    race_no: int
    track_name: Optional[str] = None


@dataclass(frozen=True)
class OddsPopularity:
    win_odds: float
    win_popularity: int
    jockey_name: Optional[str] = None


@dataclass(frozen=True)
class PlaceRange:
    low: float
    high: float
    raw: str


def detect_header(line: str) -> Optional[Header]:
    """Recognise a race header, with or without a venue."""
    m = _HEADER_WITH_TRACK.search(line)
    if m:
        track, race_no = m.group(1), int(m.group(2))
        if is_known_track(track) and is_valid_race_no(race_no):
            return Header(race_no=race_no, track_name=track)

    m = _HEADER_BARE.search(line)
    if m:
        race_no = int(m.group(1))
        if is_valid_race_no(race_no):
            return Header(race_no=race_no)

    return None


def is_noise_line(line: str) -> bool:
    """Separators, post-position columns, pedigree and stable labels."""
    t = line.strip()
    if not t:
        return True
    if t in _NOISE_EXACT:
        return True
    if _POST_POSITION_PAIR.match(t):
        return True
    if _PEDIGREE_LABEL.match(t) or _STABLE_LABEL.match(t):
        return True
    return False


def looks_like_horse_name(line: str) -> bool:
    """A bare name line: no digits, no sex/age marks, sensible length."""
    t = line.strip()
    if is_noise_line(t):
        return False
    if _HAS_DIGIT.search(t):
        return False
    if _SEX_AGE.search(t):
        return False
    if "栗東" in t or "美浦" in t:
        return False
    return _NAME_MIN_LEN <= len(t) <= _NAME_MAX_LEN


def is_likely_jockey_name(token: str) -> bool:
    # Up to 6 so that "C.デムーロ" style names still count
    if len(token) < 2 or len(token) > 6:
        return False
    return not _HAS_DIGIT.search(token)


def _strip_marks(token: str) -> str:
    return token.lstrip(_PREDICTION_MARKS).strip()


def find_place_range(line: str) -> Optional[PlaceRange]:
    """Labelled 複勝 range first, bare "a-b" only as a last resort."""
    m = (
        _PLACE_RANGE_LABELLED.search(line)
        or _PLACE_RANGE_LABELLED_SPACED.search(line)
        or _PLACE_RANGE_BARE.search(line)
    )
    if not m:
        return None
    return PlaceRange(low=float(m.group(1)), high=float(m.group(2)), raw=f"{m.group(1)}-{m.group(2)}")


def find_win_odds(line: str) -> Optional[float]:
    m = _WIN_ODDS_LABELLED.search(line)
    return float(m.group(1)) if m else None


def parse_name_odds_popularity(line: str) -> Optional[RunnerParsed]:
    """Shape a: "<name> <win odds> (<n>番人気)", optionally followed by a place range."""
    m = _NAME_ODDS_POP.match(line)
    if not m:
        return None
    runner = RunnerParsed(
        raw_line=line,
        horse_name=_strip_marks(m.group(1)) or None,
        win_odds=float(m.group(2)),
        win_popularity=int(m.group(3)),
    )
    place = find_place_range(line[m.end():])
    if place:
        runner.place_low = place.low
        runner.place_high = place.high
        runner.place_range_raw = place.raw
    return runner


def parse_popularity_with_range(line: str) -> Optional[RunnerParsed]:
    """Shape b: a popularity marker and a place range on the same line.

    Names are best effort: the two tokens left of the marker are read as
    horse then jockey, but the rightmost only counts as a jockey when it is
    short and another token sits before it. A lone name token is the horse.
    """
    pop_m = _POPULARITY.search(line)
    if not pop_m:
        return None
    place = find_place_range(line)
    if not place:
        return None

    runner = RunnerParsed(
        raw_line=line,
        win_popularity=int(pop_m.group(1)),
        place_low=place.low,
        place_high=place.high,
        place_range_raw=place.raw,
        win_odds=find_win_odds(line),
    )

    # Odds, weights and numbers to the left are never names
    tokens = [_strip_marks(t) for t in line[: pop_m.start()].split()]
    tokens = [
        t for t in tokens
        if t and t.rstrip(":") not in _ODDS_LABELS and not _HAS_DIGIT.search(t)
    ]
    if tokens:
        last = tokens[-1]
        if is_likely_jockey_name(last) and len(tokens) >= 2:
            runner.jockey_name = last
            if looks_like_horse_name(tokens[-2]):
                runner.horse_name = tokens[-2]
        elif looks_like_horse_name(last):
            runner.horse_name = last
    return runner


def parse_self_contained(line: str) -> Optional[RunnerParsed]:
    return parse_name_odds_popularity(line) or parse_popularity_with_range(line)


def parse_odds_popularity_at_end(line: str) -> Optional[OddsPopularity]:
    """Table row ending in "<win odds> <popularity>", tab or space separated."""
    m = _ODDS_POP_AT_END.search(line)
    if not m:
        return None

    jockey = None
    parts = line.split()
    # The last two tokens are the odds and popularity themselves
    for i, part in enumerate(parts[:-3]):
        try:
            weight = float(part)
        except ValueError:
            continue
        if WEIGHT_MIN <= weight <= WEIGHT_MAX:
            candidate = parts[i + 1]
            if not _HAS_DIGIT.search(candidate):
                jockey = candidate
            break

    return OddsPopularity(
        win_odds=float(m.group(1)),
        win_popularity=int(m.group(2)),
        jockey_name=jockey,
    )


def is_frame_marker(line: str) -> bool:
    return bool(_FRAME_MARKER.match(line.strip()))


def parse_decimal_only(line: str) -> Optional[float]:
    m = _DECIMAL_ONLY.match(line.strip())
    return float(m.group(1)) if m else None


def parse_frame_popularity(line: str) -> Optional[tuple[Optional[float], int]]:
    """"(5番人気)", "5番人気" or "12.3 (5番人気)" on a line of its own."""
    m = _FRAME_POPULARITY.match(line.strip())
    if not m:
        return None
    odds = float(m.group(1)) if m.group(1) else None
    return odds, int(m.group(2))

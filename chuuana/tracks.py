"""JRA venue registry: the ten central racecourses a paste can name."""

# Order follows the JRA course code (01 Sapporo .. 10 Kokura)
TRACKS = (
    "札幌", "函館", "福島", "新潟", "東京",
    "中山", "中京", "京都", "阪神", "小倉",
)

# Label used wherever a block carried no venue
UNKNOWN_TRACK = "不明"

RACE_NO_MIN = 1
RACE_NO_MAX = 12


def is_known_track(name: str | None) -> bool:
    return name in TRACKS


def track_label(name: str | None) -> str:
    """Display name for a venue, falling back to 不明."""
    return name or UNKNOWN_TRACK


def is_valid_race_no(race_no: int) -> bool:
    return RACE_NO_MIN <= race_no <= RACE_NO_MAX

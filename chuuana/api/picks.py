"""API endpoints for analysing pastes and correcting picks."""

from typing import Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from chuuana.models import PickCard, Rank
from chuuana.scoring.correction import apply_correction, extract_odds_from_pasted_text
from chuuana.session import MSG_EMPTY_PASTE, MSG_NOT_A_PICK, MSG_RANGE_NOT_FOUND, AnalysisSession
from chuuana.tracks import RACE_NO_MAX, RACE_NO_MIN, TRACKS

router = APIRouter()


class AnalyzeRequest(BaseModel):
    """A whole pasted race card, any number of races."""

    text: str


class PickCardIn(BaseModel):
    """A pick card as previously returned by /analyze."""

    rank: Literal["S", "A", "B", "C"]
    race_no: int = Field(ge=RACE_NO_MIN, le=RACE_NO_MAX)
    track_name: Optional[str] = None
    horse_name: Optional[str] = None
    jockey_name: Optional[str] = None
    win_popularity: Optional[int] = None
    win_odds: Optional[float] = None
    place_range_text: str = ""
    place_low: Optional[float] = None
    tags: list[str] = []
    reason: Optional[str] = None


class CorrectRequest(BaseModel):
    """Fresh odds text for the race the card belongs to."""

    card: PickCardIn
    text: str


@router.get("/tracks")
async def list_tracks():
    """Venues a race header can name."""
    return {"tracks": list(TRACKS)}


@router.post("/analyze")
async def analyze(request: AnalyzeRequest):
    """Parse and grade a paste; recommended holds the S/A picks in order."""
    session = AnalysisSession()
    session.analyze(request.text)
    return {
        "outcome": session.outcome.value,
        "cards": [c.to_dict() for c in session.cards],
        "recommended": [c.to_dict() for c in session.recommended],
        "rank_counts": session.rank_counts,
        "stats": session.stats.to_dict(),
        "stats_text": session.stats_text,
    }


@router.post("/correct")
async def correct(request: CorrectRequest):
    """Re-grade one card from its race's latest odds."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail=MSG_EMPTY_PASTE)

    card = PickCard.from_dict(request.card.model_dump())
    if card.rank is Rank.C:
        raise HTTPException(status_code=400, detail=MSG_NOT_A_PICK)

    update = extract_odds_from_pasted_text(request.text, card.horse_name)
    if not apply_correction(card, update):
        raise HTTPException(status_code=422, detail=MSG_RANGE_NOT_FOUND)

    return {"card": card.to_dict(), "update": update.to_dict()}

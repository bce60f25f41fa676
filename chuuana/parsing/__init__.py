"""Text-to-race-block extraction for pasted race cards."""

from chuuana.parsing.normalizer import normalize
from chuuana.parsing.parser import RaceCardParser, parse_all

__all__ = ["normalize", "parse_all", "RaceCardParser"]

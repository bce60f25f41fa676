"""Canonicalise pasted race-card text before line parsing."""

import unicodedata

# Dash-like characters that sites use for odds ranges ("2.2〜3.4", "2.2–3.4").
# The katakana prolonged sound mark (ー) is part of horse names and stays.
_DASHES = (
    "〜"  # 〜 wave dash
    "~"       # ～ (fullwidth tilde) after NFKC
    "‐"  # ‐ hyphen
    "‒"  # ‒ figure dash
    "–"  # – en dash
    "—"  # — em dash
    "―"  # ― horizontal bar
    "−"  # − minus sign
)

_TRANSLATION = str.maketrans({**{ch: "-" for ch in _DASHES}, "　": " "})


def normalize(text: str) -> str:
    """Fold full-width forms to half-width and collapse dash variants to '-'.

    NFKC handles full-width digits, latin letters, punctuation and the
    ideographic space; the translation table then unifies range dashes.
    """
    if not text:
        return ""
    return unicodedata.normalize("NFKC", text).translate(_TRANSLATION)

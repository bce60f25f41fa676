"""Shared test fixtures for chuuana."""

import pytest


@pytest.fixture
def single_line_paste() -> str:
    """Popularity + place range on one line per runner."""
    return (
        "中山 7R\n"
        "◎ホース 2人気 複勝2.2-3.4\n"
        "対抗 6人気 複勝2.0-2.8\n"
    )


@pytest.fixture
def frame_block_paste() -> str:
    """One value per line after each 枠 marker, with past-performance noise."""
    return "\n".join([
        "阪神 11R",
        "枠1",
        "1",
        "サンプルホース",
        "牡4/鹿",
        "川田",
        "58.0",
        "6.8",
        "(4番人気)",
        "前走 3番人気 1着",
        "枠2",
        "2",
        "テストラン",
        "牝5",
        "武豊",
        "56.0",
        "1.9",
        "(1番人気)",
    ])


@pytest.fixture
def two_line_paste() -> str:
    """Name line followed by a tab-separated table row."""
    return "\n".join([
        "東京 5R",
        "ホースアルファ",
        "牡3\t57.0\tルメール\t美浦・木村\t480(+2)\t28.8\t7",
        "ホースベータ",
        "牝3\t55.0\t戸崎圭\t美浦・堀\t462(0)\t2.1\t1",
        "ホースガンマ",
        "牡3\t57.0\t横山武\t栗東・友道\t500(-4)\t3.0\t2",
    ])


@pytest.fixture
def multi_race_paste() -> str:
    """Three headers; the last race has no runners."""
    return "\n".join([
        "中山 1R",
        "アオゾラ 騎手ア 5人気 複勝3.1-4.5",
        "ユウヒ 騎手イ 1人気 複勝1.1-1.2",
        "阪神 2R",
        "ホシゾラ 騎手ウ 7人気 複勝2.4-3.9",
        "3R",
    ])

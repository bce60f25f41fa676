"""Tests for the analyse-then-correct operator session."""

import pytest

from chuuana.models import Rank
from chuuana.session import (
    MSG_EMPTY_PASTE,
    MSG_NOT_A_PICK,
    MSG_RANGE_NOT_FOUND,
    AnalysisOutcome,
    AnalysisSession,
    CorrectionError,
)


@pytest.fixture
def session(multi_race_paste):
    s = AnalysisSession(policy="popularity")
    s.analyze(multi_race_paste)
    return s


class TestAnalyze:
    def test_cards_and_recommended(self, session):
        assert [c.key for c in session.cards] == ["中山_1_アオゾラ", "阪神_2_ホシゾラ"]
        assert [c.rank for c in session.recommended] == [Rank.S, Rank.A]
        assert session.outcome is AnalysisOutcome.PICKS

    def test_stats_text(self, session):
        assert session.stats_text == "検出: 競馬場2 / レース2 / ヘッダー3 / 馬行3 / 無視0"

    def test_rank_counts(self, session):
        assert session.rank_counts == {"S": 1, "A": 1, "B": 0, "C": 0}

    def test_preview(self, session):
        assert [c.key for c in session.preview(limit=1)] == ["中山_1_アオゾラ"]

    def test_nothing_recognised(self):
        s = AnalysisSession()
        s.analyze("こんにちは\nよろしく\n")
        assert s.cards == []
        assert s.outcome is AnalysisOutcome.UNPARSED

    def test_no_s_or_a(self, single_line_paste):
        s = AnalysisSession(policy="popularity")
        s.analyze(single_line_paste)
        assert s.outcome is AnalysisOutcome.NO_PICKS
        assert s.rank_counts["B"] == 1

    def test_reanalyze_replaces_previous_run(self, session, single_line_paste):
        session.begin_update()
        session.analyze(single_line_paste)
        assert session.update_targets == []
        assert len(session.cards) == 1

    def test_clear(self, session):
        session.clear()
        assert not session.analyzed
        assert session.cards == []
        assert session.stats_text == ""


# ──────────────────────────────────────────────
# Update mode
# ──────────────────────────────────────────────

class TestUpdateMode:
    def test_worklist_is_recommended_snapshot(self, session):
        targets = session.begin_update()
        assert [c.key for c in targets] == ["中山_1_アオゾラ", "阪神_2_ホシゾラ"]

    def test_downgraded_card_stays_on_worklist(self, session):
        session.begin_update()
        result = session.apply_update("中山_1_アオゾラ", "アオゾラ 複勝1.8-2.5")
        assert result.ok
        assert result.card.rank is Rank.B
        assert "中山_1_アオゾラ" in [c.key for c in session.update_targets]
        assert "中山_1_アオゾラ" not in [c.key for c in session.recommended]
        # Worklist and main list share the card
        assert session.cards[0] is session.update_targets[0]

    def test_upgrade_reorders_recommended(self, session):
        session.begin_update()
        session.apply_update("阪神_2_ホシゾラ", "ホシゾラ 複勝3.6-5.0")
        assert [c.key for c in session.recommended] == ["阪神_2_ホシゾラ", "中山_1_アオゾラ"]

    def test_miss_reports_and_keeps_card(self, session):
        session.begin_update()
        result = session.apply_update("中山_1_アオゾラ", "アオゾラ 5人気")
        assert not result.ok
        assert result.message == MSG_RANGE_NOT_FOUND
        assert result.card.rank is Rank.S
        assert result.card.place_low == 3.1

    def test_find_without_update_mode(self, session):
        assert session.find("阪神_2_ホシゾラ") is session.cards[1]
        assert session.find("阪神_9_ホシゾラ") is None

    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_empty_paste_rejected(self, session, text):
        with pytest.raises(CorrectionError, match=MSG_EMPTY_PASTE):
            session.apply_update("中山_1_アオゾラ", text)

    def test_no_pick_card_rejected(self, two_line_paste):
        s = AnalysisSession(policy="popularity")
        s.analyze(two_line_paste)
        vetoed = s.cards[0]
        assert vetoed.rank is Rank.C
        with pytest.raises(CorrectionError, match=MSG_NOT_A_PICK):
            s.apply_update(vetoed.key, "複勝3.1-4.0")
        assert vetoed.rank is Rank.C
        assert vetoed.horse_name is None
        assert vetoed.tags == []

    def test_unknown_key_rejected(self, session):
        with pytest.raises(CorrectionError):
            session.apply_update("東京_1_ナイ", "ナイ 複勝2.0-3.0")

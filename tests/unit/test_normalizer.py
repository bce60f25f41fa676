"""Tests for paste text normalisation."""

import pytest

from chuuana.parsing.normalizer import normalize


class TestNormalize:
    """Tests for full-width folding and dash unification."""

    def test_full_width_digits_and_letters(self):
        assert normalize("中山　７Ｒ") == "中山 7R"

    @pytest.mark.parametrize("dash", ["〜", "～", "–", "—", "―", "‐", "−", "－"])
    def test_dash_variants_become_hyphen(self, dash):
        assert normalize(f"2.2{dash}3.4") == "2.2-3.4"

    def test_prolonged_sound_mark_kept(self):
        assert normalize("ドウデュース") == "ドウデュース"
        assert normalize("ルメール") == "ルメール"

    def test_half_width_katakana_folded(self):
        assert normalize("ﾎｰｽ") == "ホース"

    def test_full_width_parentheses(self):
        assert normalize("（５番人気）") == "(5番人気)"

    def test_empty(self):
        assert normalize("") == ""

    @pytest.mark.parametrize("text", [
        "中山　７Ｒ\n◎ホース　２人気　複勝２．２〜３．４",
        "ﾎｰｽ　12.3　（５番人気）",
        "abc",
        "",
    ])
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once

"""Tests for modifiers and difficulty settings."""
import pytest

from mods import Mod, apply_mods, clock_rate, difficulty_range, hit_window_great, mods_str, parse_mods, preempt


class TestParseMods:
    def test_combined(self):
        assert parse_mods(["DTHR"]) == frozenset({Mod.DT, Mod.HR})

    def test_repeated_and_lowercase(self):
        assert parse_mods(["dt", "fl"]) == frozenset({Mod.DT, Mod.FL})

    def test_no_mod(self):
        assert parse_mods(["NM"]) == frozenset()
        assert parse_mods(None) == frozenset()

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_mods(["XY"])
        with pytest.raises(ValueError):
            parse_mods(["D"])

    def test_mods_str(self):
        assert mods_str(frozenset()) == "NM"
        assert mods_str(frozenset({Mod.HR, Mod.DT})) == "HRDT"

    def test_hidden(self):
        assert parse_mods(["HDDT"]) == frozenset({Mod.HD, Mod.DT})
        assert mods_str(frozenset({Mod.HD, Mod.HR})) == "HRHD"


class TestDifficulty:
    def test_difficulty_range(self):
        assert difficulty_range(0, 100, 75, 50) == 100
        assert difficulty_range(5, 100, 75, 50) == 75
        assert difficulty_range(10, 100, 75, 50) == 50
        assert difficulty_range(7.5, 100, 75, 50) == pytest.approx(62.5)

    def test_clock_rate(self):
        assert clock_rate(frozenset()) == 1.0
        assert clock_rate(frozenset({Mod.DT})) == 1.5
        assert clock_rate(frozenset({Mod.HT})) == 0.75

    def test_hit_window(self):
        assert hit_window_great(10, frozenset()) == 50
        assert hit_window_great(10, frozenset({Mod.PR})) == 20
        assert hit_window_great(10, frozenset({Mod.DT}), 1.5) == pytest.approx(50 / 1.5)

    def test_preempt(self):
        assert preempt(0) == 1800
        assert preempt(5) == 1200
        assert preempt(10) == 450
        assert preempt(10, 1.5) == pytest.approx(300)

    def test_hard_rock_caps(self):
        cs, ar, od, hp = apply_mods(5, 9, 8, 6, frozenset({Mod.HR}))
        assert cs == pytest.approx(6.5)
        assert ar == 10
        assert od == 10
        assert hp == pytest.approx(8.4)

    def test_easy_halves(self):
        assert apply_mods(4, 8, 6, 2, frozenset({Mod.EZ})) == (2, 4, 3, 1)

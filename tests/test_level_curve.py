"""Tests for level_curve module."""
import pytest

from idleskills.level_curve import LevelCurve
from idleskills.settings import EngineSettings
from idleskills.skill import Skill


def test_xp_for_next_level_defaults():
    curve = LevelCurve()
    assert curve.xp_for_next_level(1) == 10
    assert curve.xp_for_next_level(2) == 11
    assert curve.xp_for_next_level(3) == 12
    assert curve.xp_for_next_level(10) == 23


def test_xp_for_next_level_positive_and_non_decreasing():
    for curve in (LevelCurve(), LevelCurve(base_xp=1, scaling_factor=1.0), LevelCurve(base_xp=3, scaling_factor=1.5)):
        previous = 0
        for level in range(1, 201):
            required = curve.xp_for_next_level(level)
            assert required > 0
            assert required >= previous
            previous = required


def test_xp_for_next_level_rejects_zero():
    with pytest.raises(ValueError):
        LevelCurve().xp_for_next_level(0)


def test_constructor_validation():
    with pytest.raises(ValueError):
        LevelCurve(base_xp=0)
    with pytest.raises(ValueError):
        LevelCurve(scaling_factor=0.9)


def test_flat_curve():
    curve = LevelCurve(base_xp=5, scaling_factor=1.0)
    assert curve.xp_for_next_level(1) == 5
    assert curve.xp_for_next_level(50) == 5


def test_from_settings():
    curve = LevelCurve.from_settings(EngineSettings(base_xp=20, scaling_factor=1.5))
    assert curve.xp_for_next_level(1) == 20
    assert curve.xp_for_next_level(2) == 30


def test_apply_xp_without_level_up():
    skill = LevelCurve().apply_xp(Skill("Woodcutting"), 9)
    assert skill == Skill("Woodcutting", level=1, xp=9)


def test_apply_xp_exact_threshold():
    skill = LevelCurve().apply_xp(Skill("Woodcutting"), 10)
    assert skill.level == 2
    assert skill.xp == 0


def test_apply_xp_cascades_multiple_levels():
    # 10 for level 2, 11 for level 3, nothing left over
    skill = LevelCurve().apply_xp(Skill("Woodcutting"), 21)
    assert skill.level == 3
    assert skill.xp == 0


def test_apply_xp_keeps_surplus():
    skill = LevelCurve().apply_xp(Skill("Woodcutting", level=1, xp=5), 10)
    assert skill.level == 2
    assert skill.xp == 5


def test_apply_xp_zero_delta_returns_same_skill():
    skill = Skill("Mining", level=4, xp=3)
    assert LevelCurve().apply_xp(skill, 0) is skill


def test_apply_xp_negative_rejected():
    with pytest.raises(ValueError):
        LevelCurve().apply_xp(Skill("Mining"), -1)


def test_apply_xp_result_is_normalized():
    curve = LevelCurve()
    skill = Skill("Fishing")
    for _ in range(50):
        skill = curve.apply_xp(skill, 37)
        assert 0 <= skill.xp < curve.xp_for_next_level(skill.level)


def test_total_xp_for_level():
    curve = LevelCurve()
    assert curve.total_xp_for_level(1) == 0
    assert curve.total_xp_for_level(2) == 10
    assert curve.total_xp_for_level(3) == 21


def test_progress_fraction():
    curve = LevelCurve()
    assert curve.progress_fraction(Skill("Cooking", level=1, xp=5)) == pytest.approx(0.5)

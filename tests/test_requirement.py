"""Tests for requirement module."""
import pytest

from idleskills.requirement import Req, Requirement
from idleskills.skill import Skill


def _make_skills() -> dict[str, Skill]:
    """Skill snapshot with known levels."""
    return {
        "Woodcutting": Skill("Woodcutting", level=99),
        "Mining": Skill("Mining", level=50),
        "Fishing": Skill("Fishing", level=10),
    }


def test_skill_level():
    skills = _make_skills()
    assert Req.skill_level("Woodcutting", ">=", 99).evaluate(skills)
    assert not Req.skill_level("Mining", ">=", 99).evaluate(skills)
    assert Req.skill_level("Fishing", "<", 20).evaluate(skills)


def test_skill_level_missing_skill_is_unmet():
    assert not Req.skill_level("Cooking", ">=", 1).evaluate(_make_skills())
    assert not Req.skill_level("Cooking", "<", 5).evaluate(_make_skills())


def test_total_level():
    skills = _make_skills()
    assert Req.total_level(">=", 159).evaluate(skills)
    assert not Req.total_level(">", 159).evaluate(skills)


def test_all():
    skills = _make_skills()
    req = Req.all(
        Req.skill_level("Woodcutting", ">=", 99),
        Req.skill_level("Mining", ">=", 50),
    )
    assert req.evaluate(skills)

    req_fail = Req.all(
        Req.skill_level("Woodcutting", ">=", 99),
        Req.skill_level("Fishing", ">=", 99),
    )
    assert not req_fail.evaluate(skills)


def test_all_empty_is_met():
    assert Req.all().evaluate({})


def test_any():
    skills = _make_skills()
    req = Req.any(
        Req.skill_level("Fishing", ">=", 99),
        Req.skill_level("Woodcutting", ">=", 99),
    )
    assert req.evaluate(skills)
    assert not Req.any().evaluate(skills)


def test_operators():
    skills = _make_skills()
    wc = Req.skill_level("Woodcutting", ">=", 99)
    fish = Req.skill_level("Fishing", ">=", 99)
    assert not (wc & fish).evaluate(skills)
    assert (wc | fish).evaluate(skills)


def test_custom():
    req = Req.custom(lambda s: len(s) == 3, "three skills tracked")
    assert req.evaluate(_make_skills())
    assert req.describe() == "three skills tracked"


def test_describe():
    req = Req.skill_level("Mining", ">=", 99) & Req.total_level(">", 100)
    assert req.describe() == "Mining level >= 99 AND total level > 100"


def test_is_abstract():
    with pytest.raises(TypeError):
        Requirement()

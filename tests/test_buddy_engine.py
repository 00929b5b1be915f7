"""Unit tests for BuddyEngine mood, XP and evolution."""

from custom_components.kidstraining import const
from custom_components.kidstraining.engines.buddy_engine import BuddyEngine

BONECA = const.SKIN_ID_BONECA


def test_default_progress() -> None:
    """A new buddy is level 1 with mood 80."""
    assert BuddyEngine.default_progress() == {
        "level": 1,
        "xp": 0,
        "stage_index": 0,
        "mood": 80,
    }


def test_mood_actions_cap_at_100() -> None:
    """Pet, feed and training raise mood and cap it."""
    progress = BuddyEngine.default_progress()
    assert BuddyEngine.pet(progress)["mood"] == 85
    assert BuddyEngine.after_training(progress)["mood"] == 90
    assert BuddyEngine.feed(progress)["mood"] == 100
    assert BuddyEngine.feed(BuddyEngine.feed(progress))["mood"] == 100


def test_apply_and_revert_xp() -> None:
    """XP uses the child ladder; reverting floors at zero."""
    progress, gained = BuddyEngine.apply_xp(None, 300)
    assert progress["level"] == 3
    assert gained == 2

    reverted = BuddyEngine.revert_xp(progress, 500)
    assert reverted["xp"] == 0
    assert reverted["level"] == 1


def test_normalize_clamps_mood_and_rederives_level() -> None:
    """Stored level is ignored; mood is clamped into 0..100."""
    progress = BuddyEngine.normalize({"xp": 120, "level": 9, "mood": 250})
    assert progress["level"] == 2
    assert progress["mood"] == 100


def test_evolution_needs_level() -> None:
    """A buddy below the evolution level is not ready."""
    result, progress = BuddyEngine.evolve(BONECA, BuddyEngine.default_progress())
    assert result == const.RESULT_NOT_READY
    assert progress["stage_index"] == 0


def test_evolution_advances_stage_once() -> None:
    """At level 10 the buddy moves to its last stage and stops there."""
    progress = {"xp": 1800, "stage_index": 0, "mood": 80}
    assert BuddyEngine.can_evolve(BONECA, progress)

    result, evolved = BuddyEngine.evolve(BONECA, progress)

    assert result == const.RESULT_OK
    assert evolved["stage_index"] == 1
    assert BuddyEngine.form_id(BONECA, 1) == f"{BONECA}_evo2"
    assert not BuddyEngine.can_evolve(BONECA, evolved)


def test_buddy_without_line() -> None:
    """Skins without a line never evolve and their form is the skin id."""
    assert BuddyEngine.form_id("owl_scholar_pixel", 3) == "owl_scholar_pixel"
    assert not BuddyEngine.can_evolve("owl_scholar_pixel", {"xp": 99999})

"""Unit tests for the pure utils (dates, tags, math)."""

from datetime import date
import random
from zoneinfo import ZoneInfo

import pytest

from custom_components.kidstraining.utils import dt_utils, math_utils, tag_utils

UTC_TZ = ZoneInfo("UTC")
TOKYO = ZoneInfo("Asia/Tokyo")


class TestDateKeys:
    """Local calendar-day keys."""

    def test_to_date_key_uses_local_day(self) -> None:
        """A late UTC time falls on the next day in Tokyo."""
        assert dt_utils.to_date_key("2025-04-07T23:30:00+00:00", TOKYO) == "2025-04-08"
        assert dt_utils.to_date_key("2025-04-07T23:30:00+00:00", UTC_TZ) == "2025-04-07"

    def test_to_date_key_accepts_dates(self) -> None:
        """Plain dates and date strings keep their day."""
        assert dt_utils.to_date_key(date(2025, 4, 7), TOKYO) == "2025-04-07"
        assert dt_utils.to_date_key("2025-04-07", TOKYO) == "2025-04-07"

    def test_bare_date_parses_to_noon(self) -> None:
        """A date-only string becomes local noon."""
        parsed = dt_utils.dt_parse("2025-04-07", UTC_TZ)
        assert parsed is not None
        assert parsed.hour == 12
        assert parsed.tzinfo is not None

    def test_unparseable_input(self) -> None:
        """Garbage gives None instead of raising."""
        assert dt_utils.dt_parse("not a date", UTC_TZ) is None
        assert dt_utils.to_date_key(None, UTC_TZ) is None
        assert dt_utils.date_key_to_date("2025-13-01") is None

    def test_shift_and_distance(self) -> None:
        """Shifting and distances follow the calendar."""
        assert dt_utils.shift_date_key("2025-03-01", -1) == "2025-02-28"
        assert dt_utils.shift_date_key("2024-12-31", 1) == "2025-01-01"
        assert dt_utils.days_between("2025-02-28", "2025-03-02") == 2
        assert dt_utils.days_between("bogus", "2025-03-02") is None

    def test_shift_invalid_key_raises(self) -> None:
        """A malformed key cannot be shifted."""
        with pytest.raises(ValueError):
            dt_utils.shift_date_key("bogus", 1)


class TestTags:
    """Session tag normalization."""

    def test_normalize_tag(self) -> None:
        """Trim, drop leading hashes, remove spaces, lowercase."""
        assert tag_utils.normalize_tag("  #Soccer Drills ") == "soccerdrills"
        assert tag_utils.normalize_tag("＃Piano") == "piano"
        assert tag_utils.normalize_tag("＃") == ""

    def test_normalize_tags_dedupes_in_order(self) -> None:
        """Empties are dropped and the first occurrence wins."""
        assert tag_utils.normalize_tags(["#B", "a", " ", "b", "#a"]) == ["b", "a"]
        assert tag_utils.normalize_tags(None) == []

    def test_parse_tags_from_text(self) -> None:
        """Free text is split on whitespace."""
        assert tag_utils.parse_tags_from_text("#run  fast\t#Run") == ["run", "fast"]


class TestMath:
    """Math helpers."""

    def test_clamp_and_fraction(self) -> None:
        """Values are bounded; a zero target gives zero progress."""
        assert math_utils.clamp(150, 0, 100) == 100
        assert math_utils.clamp(-10, 0, 100) == 0
        assert math_utils.progress_fraction(30, 120) == 0.25
        assert math_utils.progress_fraction(500, 120) == 1.0
        assert math_utils.progress_fraction(5, 0) == 0.0

    def test_weighted_choice(self) -> None:
        """Picks come from the items and bad input raises."""
        rng = random.Random(11)
        picks = {math_utils.weighted_choice(["a", "b"], [1, 0], rng) for _ in range(50)}
        assert picks <= {"a", "b"}
        with pytest.raises(ValueError):
            math_utils.weighted_choice([], [], rng)
        with pytest.raises(ValueError):
            math_utils.weighted_choice(["a"], [1, 2], rng)

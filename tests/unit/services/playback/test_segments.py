"""
Tests unitaires pour SegmentTracker.
"""

from kinoplay.core.entities import Segment, SegmentType
from kinoplay.services.playback.segments import SegmentTracker

INTRO = Segment(SegmentType.INTRO, 10.0, 40.0)
RECAP = Segment(SegmentType.RECAP, 0.0, 8.0)
CREDITS = Segment(SegmentType.OUTRO, 1300.0, 1400.0)
PREVIEW = Segment(SegmentType.PREVIEW, 1400.0, 1420.0)
AD = Segment(SegmentType.COMMERCIAL, 600.0, 630.0)


class TestSegment:
    def test_interval_is_half_open(self) -> None:
        assert INTRO.contains(10.0) is True
        assert INTRO.contains(39.99) is True
        assert INTRO.contains(40.0) is False
        assert INTRO.duration_seconds == 30.0


class TestManualSkip:
    """Sans saut automatique, le bouton "Passer" est expose."""

    def test_entering_segment_shows_button(self) -> None:
        tracker = SegmentTracker([INTRO, CREDITS])

        assert tracker.update(15.0) is None

        assert tracker.current == INTRO
        assert tracker.showing_skip_button is True

    def test_leaving_segment_hides_button(self) -> None:
        tracker = SegmentTracker([INTRO])
        tracker.update(15.0)

        tracker.update(40.0)

        assert tracker.current is None
        assert tracker.showing_skip_button is False

    def test_dismiss_returns_segment_end(self) -> None:
        tracker = SegmentTracker([INTRO])
        tracker.update(12.0)

        assert tracker.dismiss() == 40.0
        assert tracker.showing_skip_button is False

    def test_dismiss_outside_segment(self) -> None:
        tracker = SegmentTracker([INTRO])
        tracker.update(100.0)
        assert tracker.dismiss() is None

    def test_dismissed_segment_not_shown_again(self) -> None:
        """Le bouton ne reapparait pas tant que la position reste dans le meme segment."""
        tracker = SegmentTracker([INTRO])
        tracker.update(12.0)
        tracker.dismiss()

        tracker.update(13.0)

        assert tracker.showing_skip_button is False

    def test_commercials_are_never_active(self) -> None:
        tracker = SegmentTracker([AD])
        assert tracker.update(610.0) is None
        assert tracker.current is None
        assert tracker.showing_skip_button is False


class TestAutoSkip:
    """Saut automatique par categorie."""

    def test_auto_skip_intro_and_recap(self) -> None:
        tracker = SegmentTracker([RECAP, INTRO], auto_skip_intro=True)

        assert tracker.update(2.0) == 8.0
        assert tracker.update(11.0) == 40.0
        assert tracker.showing_skip_button is False

    def test_auto_skip_intro_only_fires_once(self) -> None:
        tracker = SegmentTracker([INTRO], auto_skip_intro=True)
        assert tracker.update(11.0) == 40.0
        assert tracker.update(11.5) is None

    def test_credits_setting_covers_previews(self) -> None:
        tracker = SegmentTracker([INTRO, CREDITS, PREVIEW], auto_skip_credits=True)

        assert tracker.update(15.0) is None
        assert tracker.showing_skip_button is True
        assert tracker.update(1350.0) == 1400.0
        assert tracker.update(1405.0) == 1420.0

    def test_set_segments_resets_state(self) -> None:
        tracker = SegmentTracker([INTRO])
        tracker.update(12.0)

        tracker.set_segments([CREDITS])

        assert tracker.current is None
        assert tracker.segments == [CREDITS]


class TestSegmentType:
    def test_from_api(self) -> None:
        assert SegmentType.from_api("Introduction") == SegmentType.INTRO
        assert SegmentType.from_api("Credits") == SegmentType.OUTRO
        assert SegmentType.from_api("Something") == SegmentType.UNKNOWN

    def test_display_names(self) -> None:
        assert SegmentType.INTRO.display_name == "Intro"
        assert SegmentType.UNKNOWN.display_name == "Segment"

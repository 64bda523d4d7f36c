"""
Tests unitaires pour les entites du domaine.
"""

from kinoplay.core.entities import (
    ItemKind,
    Library,
    MediaSource,
    MediaStream,
    QualityOption,
    SegmentType,
    ShelfEntry,
)
from tests.fixtures.factories import make_episode, make_item


class TestMediaItem:
    """Tests des proprietes de MediaItem."""

    def test_episode_display_title(self) -> None:
        assert make_episode("e1", 2).display_title == "Middle Earth S1E2"

    def test_episode_display_title_without_numbers(self) -> None:
        item = make_episode("e1", None, season_number=None)
        assert item.display_title == "Middle Earth"

    def test_movie_display_title(self) -> None:
        assert make_item("m1", name="Heat").display_title == "Heat"

    def test_progress_percent(self) -> None:
        item = make_item("m1", position_ticks=250, run_time_ticks=1000)
        assert item.progress_percent == 0.25

    def test_progress_percent_unknown_runtime(self) -> None:
        item = make_item("m1", position_ticks=250)
        assert item.progress_percent == 0.0

    def test_resume_position_ticks(self) -> None:
        assert make_item("m1", position_ticks=42).resume_position_ticks == 42


class TestItemKind:
    def test_known_value(self) -> None:
        assert ItemKind.from_api("Episode") == ItemKind.EPISODE

    def test_unknown_value(self) -> None:
        assert ItemKind.from_api("MusicAlbum") == ItemKind.UNKNOWN
        assert ItemKind.from_api(None) == ItemKind.UNKNOWN


class TestLibrary:
    """Filtrage des bibliotheques de medias."""

    def test_media_types(self) -> None:
        assert Library("1", "Films", "movies").is_media_library
        assert Library("2", "Series", "TVShows").is_media_library

    def test_untyped_library_is_media(self) -> None:
        assert Library("3", "Divers").is_media_library

    def test_non_media_types(self) -> None:
        assert not Library("4", "Collections", "boxsets").is_media_library
        assert not Library("5", "Listes", "playlists").is_media_library


class TestMediaSource:
    """Proprietes derivees des flux d'une source."""

    SOURCE = MediaSource(
        id="src1",
        streams=(
            MediaStream(type="Video", codec="hevc", height=2160),
            MediaStream(type="Audio", codec="eac3", channels=6),
            MediaStream(type="Subtitle", codec="srt", language="fre"),
        ),
    )

    def test_codecs(self) -> None:
        assert self.SOURCE.video_codec == "hevc"
        assert self.SOURCE.audio_codec == "eac3"
        assert self.SOURCE.audio_channels == 6

    def test_subtitle_streams(self) -> None:
        assert [s.language for s in self.SOURCE.subtitle_streams] == ["fre"]

    def test_video_resolution_labels(self) -> None:
        def resolution(height):
            return MediaSource(id="s", streams=(MediaStream(type="Video", height=height),)).video_resolution

        assert resolution(2160) == "4K"
        assert resolution(1080) == "1080p"
        assert resolution(720) == "720p"
        assert resolution(576) == "576p"
        assert resolution(None) is None

    def test_no_streams(self) -> None:
        source = MediaSource(id="s")
        assert source.video_codec is None
        assert source.video_resolution is None


class TestQualityOption:
    def test_bitrates(self) -> None:
        assert QualityOption.AUTO.max_bitrate is None
        assert QualityOption.QUALITY_1080P.max_bitrate == 20_000_000
        assert QualityOption.QUALITY_720P.max_bitrate == 8_000_000
        assert QualityOption.QUALITY_480P.max_bitrate == 4_000_000

    def test_display_names(self) -> None:
        assert QualityOption.AUTO.display_name == "Auto"
        assert QualityOption.QUALITY_720P.display_name == "720p"


class TestSegmentType:
    def test_from_api(self) -> None:
        assert SegmentType.from_api("Introduction") == SegmentType.INTRO
        assert SegmentType.from_api("Credits") == SegmentType.OUTRO
        assert SegmentType.from_api("Bogus") == SegmentType.UNKNOWN

    def test_commercial_is_not_skippable(self) -> None:
        assert SegmentType.INTRO.is_skippable
        assert not SegmentType.COMMERCIAL.is_skippable
        assert not SegmentType.UNKNOWN.is_skippable

    def test_recap_shares_intro_category(self) -> None:
        assert SegmentType.RECAP.is_intro_category
        assert not SegmentType.OUTRO.is_intro_category


class TestShelfEntry:
    def test_to_dict_uses_export_keys(self) -> None:
        entry = ShelfEntry(
            id="ep2",
            name="Middle Earth",
            subtitle="Middle Earth • S1:E2",
            image_url="https://media.example.com/Items/ep2/Images/Backdrop?maxWidth=1920",
            type="Episode",
            progress=16.7,
        )

        assert entry.to_dict() == {
            "id": "ep2",
            "name": "Middle Earth",
            "subtitle": "Middle Earth • S1:E2",
            "imageURL": "https://media.example.com/Items/ep2/Images/Backdrop?maxWidth=1920",
            "type": "Episode",
            "progress": 16.7,
        }

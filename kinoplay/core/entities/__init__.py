"""
Entites du domaine : elements du catalogue et objets de lecture.

Exports:
- MediaItem, UserData, ItemKind : elements du catalogue
- Library, User, AuthenticationResult : bibliotheques et identite
- ShelfEntry : ligne du panneau de raccourcis
- MediaSource, MediaStream, PlaybackInfo : sources jouables
- Segment, SegmentType : segments nommes (intro, generique, ...)
- PlaybackSession, PlayerState, PlayMethod : etat de la session de lecture
- TrackOption, QualityOption : pistes et plafond de debit
"""

from kinoplay.core.entities.media import (
    AuthenticationResult,
    ItemKind,
    Library,
    MediaItem,
    ShelfEntry,
    User,
    UserData,
)
from kinoplay.core.entities.playback import (
    SUBTITLES_OFF,
    MediaSource,
    MediaStream,
    PlaybackInfo,
    PlaybackSession,
    PlayerState,
    PlayMethod,
    QualityOption,
    Segment,
    SegmentType,
    TrackOption,
)

__all__ = [
    "AuthenticationResult",
    "ItemKind",
    "Library",
    "MediaItem",
    "ShelfEntry",
    "User",
    "UserData",
    "SUBTITLES_OFF",
    "MediaSource",
    "MediaStream",
    "PlaybackInfo",
    "PlaybackSession",
    "PlayerState",
    "PlayMethod",
    "QualityOption",
    "Segment",
    "SegmentType",
    "TrackOption",
]

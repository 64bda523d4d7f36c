"""
Session de lecture : controleur, segments, element suivant et preferences.
"""

from kinoplay.services.playback.controller import PlaybackSessionController
from kinoplay.services.playback.next_item import (
    NextItemResolver,
    find_next_by_index,
    find_next_episode,
)
from kinoplay.services.playback.preferences import PlaybackPreferences
from kinoplay.services.playback.segments import SegmentTracker

__all__ = [
    "PlaybackSessionController",
    "NextItemResolver",
    "find_next_by_index",
    "find_next_episode",
    "PlaybackPreferences",
    "SegmentTracker",
]

"""
Entites de lecture : sources, pistes, segments et session active.

MediaSource et Segment sont des objets valeur crees depuis le serveur a chaque
demarrage de lecture (jamais mis en cache d'une session a l'autre).
PlaybackSession est l'etat d'execution mutable possede par le controleur de
lecture.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kinoplay.core.entities.media import MediaItem


class PlayerState(Enum):
    """Etats du controleur de session de lecture."""

    IDLE = "idle"
    RESOLVING = "resolving"
    PLAYING = "playing"
    ENDED = "ended"
    NEXT_PROMPT = "next_prompt"
    STOPPED = "stopped"


class PlayMethod(Enum):
    """Strategie de diffusion retenue pour la source."""

    TRANSCODE = "Transcode"
    DIRECT_STREAM = "DirectStream"
    DIRECT_PLAY = "DirectPlay"


class QualityOption(Enum):
    """Plafond de debit demande au serveur (None = pas de plafond)."""

    AUTO = "auto"
    QUALITY_1080P = "1080"
    QUALITY_720P = "720"
    QUALITY_480P = "480"

    @property
    def display_name(self) -> str:
        if self is QualityOption.AUTO:
            return "Auto"
        return f"{self.value}p"

    @property
    def max_bitrate(self) -> Optional[int]:
        return _QUALITY_BITRATES[self]


_QUALITY_BITRATES = {
    QualityOption.AUTO: None,
    QualityOption.QUALITY_1080P: 20_000_000,
    QualityOption.QUALITY_720P: 8_000_000,
    QualityOption.QUALITY_480P: 4_000_000,
}


@dataclass(frozen=True)
class MediaStream:
    """Flux elementaire d'une source (video, audio ou sous-titre)."""

    type: Optional[str] = None
    codec: Optional[str] = None
    language: Optional[str] = None
    display_title: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None
    channels: Optional[int] = None
    index: Optional[int] = None
    is_default: bool = False
    is_external: bool = False


@dataclass(frozen=True)
class MediaSource:
    """
    Rendu jouable d'un element, negocie par le serveur.

    Attributs:
        id: Identifiant de la source
        container: Format conteneur (mkv, mp4, ...)
        path: Chemin du fichier cote serveur
        supports_direct_play / supports_direct_stream / supports_transcoding:
            Strategies acceptees par le serveur
        transcoding_url: Chemin relatif du manifeste de transcodage
        direct_stream_url: Chemin relatif du flux direct
        streams: Flux elementaires
    """

    id: str
    container: Optional[str] = None
    path: Optional[str] = None
    supports_direct_play: bool = False
    supports_direct_stream: bool = False
    supports_transcoding: bool = False
    transcoding_url: Optional[str] = None
    direct_stream_url: Optional[str] = None
    streams: tuple[MediaStream, ...] = ()

    def _first_stream(self, stream_type: str) -> Optional[MediaStream]:
        return next((s for s in self.streams if s.type == stream_type), None)

    @property
    def video_codec(self) -> Optional[str]:
        stream = self._first_stream("Video")
        return stream.codec if stream else None

    @property
    def audio_codec(self) -> Optional[str]:
        stream = self._first_stream("Audio")
        return stream.codec if stream else None

    @property
    def audio_channels(self) -> Optional[int]:
        stream = self._first_stream("Audio")
        return stream.channels if stream else None

    @property
    def subtitle_streams(self) -> list[MediaStream]:
        return [s for s in self.streams if s.type == "Subtitle"]

    @property
    def video_resolution(self) -> Optional[str]:
        """Libelle de resolution (4K, 1080p, 720p, ou "<hauteur>p")."""
        stream = self._first_stream("Video")
        if stream is None or stream.height is None:
            return None
        if stream.height >= 2160:
            return "4K"
        if stream.height >= 1080:
            return "1080p"
        if stream.height >= 720:
            return "720p"
        return f"{stream.height}p"


@dataclass(frozen=True)
class PlaybackInfo:
    """Reponse de resolution de lecture : sources negociees + session serveur."""

    media_sources: tuple[MediaSource, ...] = ()
    play_session_id: Optional[str] = None


class SegmentType(Enum):
    """Type de segment nomme (valeurs telles que publiees par le serveur)."""

    INTRO = "Introduction"
    OUTRO = "Credits"
    RECAP = "Recap"
    PREVIEW = "Preview"
    COMMERCIAL = "Commercial"
    UNKNOWN = "Unknown"

    @classmethod
    def from_api(cls, value: Optional[str]) -> "SegmentType":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_skippable(self) -> bool:
        """Les publicites sont suivies mais jamais proposees au saut."""
        return self in (SegmentType.INTRO, SegmentType.OUTRO, SegmentType.RECAP, SegmentType.PREVIEW)

    @property
    def is_intro_category(self) -> bool:
        """Intro et recap partagent le reglage de saut automatique d'intro."""
        return self in (SegmentType.INTRO, SegmentType.RECAP)

    @property
    def display_name(self) -> str:
        return _SEGMENT_DISPLAY_NAMES.get(self, "Segment")


_SEGMENT_DISPLAY_NAMES = {
    SegmentType.INTRO: "Intro",
    SegmentType.OUTRO: "Credits",
    SegmentType.RECAP: "Recap",
    SegmentType.PREVIEW: "Preview",
    SegmentType.COMMERCIAL: "Commercial",
}


@dataclass(frozen=True)
class Segment:
    """Intervalle nomme [start, end) d'un element, en secondes."""

    type: SegmentType
    start_seconds: float
    end_seconds: float

    def contains(self, position_seconds: float) -> bool:
        return self.start_seconds <= position_seconds < self.end_seconds

    @property
    def duration_seconds(self) -> float:
        return self.end_seconds - self.start_seconds


@dataclass(frozen=True)
class TrackOption:
    """
    Piste audio ou sous-titre proposee par le moteur de lecture.

    L'option "off" (sous-titres desactives) a un index de -1.
    """

    id: str
    display_name: str
    language_code: Optional[str] = None
    index: int = -1
    is_off_option: bool = False
    is_external: bool = False


SUBTITLES_OFF = TrackOption(id="off", display_name="Off", index=-1, is_off_option=True)


@dataclass
class PlaybackSession:
    """
    Session de lecture active (etat d'execution du controleur).

    Creee a l'entree en lecture, detruite a l'arret ou au passage a
    l'element suivant.

    Attributs:
        item: Element en cours (copie fraiche du serveur)
        source: Source resolue
        stream_url: URL effectivement chargee dans le moteur
        play_method: Strategie de diffusion
        play_session_id: Identifiant de session serveur
        started_at: Horloge monotone au demarrage (protection sortie rapide)
        resume_position_ticks: Position de depart (0 sans reprise)
        last_position_ticks: Derniere position connue de la tete de lecture
        next_item: Element suivant trouve en fin de lecture
    """

    item: MediaItem
    source: MediaSource
    stream_url: str
    play_method: PlayMethod
    play_session_id: Optional[str] = None
    started_at: float = 0.0
    resume_position_ticks: int = 0
    last_position_ticks: int = 0
    next_item: Optional[MediaItem] = None

"""
Interface port pour le serveur multimédia.

Contrat abstrait de la passerelle HTTP vers le serveur (dialecte REST
Jellyfin / Emby). L'adaptateur concret gère l'authentification, les en-têtes,
les relances et le décodage des réponses.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from kinoplay.core.entities import (
    AuthenticationResult,
    Library,
    MediaItem,
    PlaybackInfo,
    PlayMethod,
    Segment,
)

SessionExpiredHandler = Callable[[], Awaitable[None]]


class IMediaServerClient(ABC):
    """
    Passerelle vers le serveur multimédia.

    Toutes les opérations (sauf authenticate et les constructeurs d'URL)
    exigent une connexion configurée et lèvent NotConfiguredError sinon.
    """

    @abstractmethod
    async def configure(
        self,
        server_url: str,
        access_token: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> None:
        """Établit (ou remplace) les paramètres de connexion."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Oublie la connexion courante (serveur, jeton, utilisateur)."""
        ...

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        ...

    @abstractmethod
    def set_session_expired_handler(self, handler: Optional[SessionExpiredHandler]) -> None:
        """Enregistre le rappel invoqué sur une réponse 401/403."""
        ...

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> AuthenticationResult:
        """
        Authentifie l'utilisateur auprès du serveur configuré.

        Args:
            username: Nom d'utilisateur
            password: Mot de passe

        Returns:
            Utilisateur, jeton d'accès et identifiant serveur
        """
        ...

    # Catalogue

    @abstractmethod
    async def get_resume_items(self, limit: int = 20) -> list[MediaItem]:
        ...

    @abstractmethod
    async def get_next_up(self, limit: int = 12) -> list[MediaItem]:
        ...

    @abstractmethod
    async def get_latest(
        self,
        parent_id: Optional[str] = None,
        limit: int = 16,
        include_watched: bool = True,
    ) -> list[MediaItem]:
        ...

    @abstractmethod
    async def get_libraries(self) -> list[Library]:
        ...

    @abstractmethod
    async def get_item(self, item_id: str) -> MediaItem:
        ...

    @abstractmethod
    async def get_items(
        self,
        parent_id: Optional[str] = None,
        include_types: Optional[list[str]] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        limit: Optional[int] = None,
        start_index: Optional[int] = None,
    ) -> list[MediaItem]:
        ...

    @abstractmethod
    async def get_episodes(self, series_id: str, season_id: Optional[str] = None) -> list[MediaItem]:
        ...

    @abstractmethod
    async def get_ancestors(self, item_id: str) -> list[MediaItem]:
        """Retourne les ancêtres d'un élément, du plus proche au plus lointain."""
        ...

    @abstractmethod
    async def get_segments(self, item_id: str) -> list[Segment]:
        """Segments nommés de l'élément (liste vide si le serveur n'en publie pas)."""
        ...

    # Lecture

    @abstractmethod
    async def get_playback_info(
        self,
        item_id: str,
        max_bitrate: Optional[int] = None,
        force_direct_play: bool = False,
    ) -> PlaybackInfo:
        ...

    @abstractmethod
    async def report_playback_start(
        self,
        item_id: str,
        position_ticks: int,
        play_method: PlayMethod = PlayMethod.TRANSCODE,
        play_session_id: Optional[str] = None,
        media_source_id: Optional[str] = None,
    ) -> None:
        ...

    @abstractmethod
    async def report_playback_progress(
        self,
        item_id: str,
        position_ticks: int,
        is_paused: bool,
        play_method: PlayMethod = PlayMethod.TRANSCODE,
        play_session_id: Optional[str] = None,
        media_source_id: Optional[str] = None,
    ) -> None:
        ...

    @abstractmethod
    async def report_playback_stopped(
        self,
        item_id: str,
        position_ticks: int,
        play_session_id: Optional[str] = None,
        media_source_id: Optional[str] = None,
    ) -> None:
        ...

    # État utilisateur

    @abstractmethod
    async def mark_played(self, item_id: str) -> None:
        ...

    @abstractmethod
    async def mark_unplayed(self, item_id: str) -> None:
        ...

    @abstractmethod
    async def mark_favorite(self, item_id: str) -> None:
        ...

    @abstractmethod
    async def remove_favorite(self, item_id: str) -> None:
        ...

    # URLs

    @abstractmethod
    def build_url(self, path: str) -> str:
        """Résout un chemin relatif renvoyé par le serveur en URL absolue authentifiée."""
        ...

    @abstractmethod
    def get_static_stream_url(self, item_id: str, media_source_id: str, container: Optional[str] = None) -> str:
        ...

    @abstractmethod
    def image_url(self, item_id: str, image_type: str = "Primary", max_width: Optional[int] = 400) -> str:
        ...

"""
Interface port pour le moteur de lecture.

Le moteur (lecteur vidéo natif de l'hôte) est fourni de l'extérieur. Le
contrôleur de session ne dépend que de ce contrat : charger une URL, lire,
mettre en pause, chercher, observer la position, signaler la fin ou une
erreur fatale, exposer les pistes audio / sous-titres.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from kinoplay.core.entities import TrackOption

PositionCallback = Callable[[float], Awaitable[None]]
EndCallback = Callable[[], Awaitable[None]]
ErrorCallback = Callable[[Exception], Awaitable[None]]


class IPlaybackEngine(ABC):
    """Moteur de lecture piloté par le contrôleur de session."""

    @abstractmethod
    async def load(self, url: str) -> None:
        """Prépare la lecture d'une URL (sans démarrer)."""
        ...

    @abstractmethod
    def play(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    async def seek(self, seconds: float) -> None:
        ...

    @abstractmethod
    def current_position(self) -> float:
        """Position courante de la tête de lecture, en secondes."""
        ...

    @abstractmethod
    def duration(self) -> Optional[float]:
        """Durée du média chargé en secondes, None si inconnue."""
        ...

    @property
    @abstractmethod
    def is_paused(self) -> bool:
        ...

    @abstractmethod
    def on_reached_end(self, callback: Optional[EndCallback]) -> None:
        """Enregistre le rappel de fin de média (None pour le retirer)."""
        ...

    @abstractmethod
    def on_error(self, callback: Optional[ErrorCallback]) -> None:
        """Enregistre le rappel d'erreur fatale (None pour le retirer)."""
        ...

    @abstractmethod
    def add_position_observer(self, interval: float, callback: PositionCallback) -> Any:
        """
        Observe périodiquement la position de lecture.

        Args:
            interval: Période d'observation en secondes
            callback: Coroutine appelée avec la position en secondes

        Returns:
            Jeton opaque à passer à remove_position_observer
        """
        ...

    @abstractmethod
    def remove_position_observer(self, handle: Any) -> None:
        ...

    @abstractmethod
    def audio_tracks(self) -> list[TrackOption]:
        ...

    @abstractmethod
    def subtitle_tracks(self) -> list[TrackOption]:
        """Pistes de sous-titres du média, sans l'option "off"."""
        ...

    @abstractmethod
    def select_audio_track(self, index: int) -> None:
        ...

    @abstractmethod
    def select_subtitle_track(self, index: Optional[int]) -> None:
        """Sélectionne une piste de sous-titres, None pour les désactiver."""
        ...

    @abstractmethod
    async def release(self) -> None:
        """Arrête la lecture et libère le média chargé."""
        ...

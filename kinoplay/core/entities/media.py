"""
Entites du catalogue : elements multimedia et etat utilisateur.

Les elements sont des objets valeur immutables crees a partir des reponses du
serveur. Ils ne sont jamais modifies localement : un changement d'etat
(favori, vu, position) fait l'aller-retour par le serveur et une copie
fraiche est rechargee.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kinoplay.utils.constants import MEDIA_LIBRARY_TYPES


class ItemKind(Enum):
    """Type d'element du catalogue tel que renvoye par le serveur.

    Valeurs:
        MOVIE, SERIES, SEASON, EPISODE, VIDEO: types manipules par le coeur
        BOX_SET, FOLDER, COLLECTION_FOLDER: conteneurs (ancetres, collections)
        UNKNOWN: type non reconnu
    """

    MOVIE = "Movie"
    SERIES = "Series"
    SEASON = "Season"
    EPISODE = "Episode"
    VIDEO = "Video"
    BOX_SET = "BoxSet"
    FOLDER = "Folder"
    COLLECTION_FOLDER = "CollectionFolder"
    UNKNOWN = "Unknown"

    @classmethod
    def from_api(cls, value: Optional[str]) -> "ItemKind":
        """Convertit la valeur "Type" du serveur, UNKNOWN si non reconnue."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class UserData:
    """
    Etat de lecture propre a l'utilisateur.

    Attributs:
        playback_position_ticks: Position de reprise sauvegardee
        play_count: Nombre de lectures
        is_favorite: Element marque comme favori
        played: Element marque comme vu
        last_played_date: Date ISO-8601 de derniere lecture (brute)
    """

    playback_position_ticks: int = 0
    play_count: int = 0
    is_favorite: bool = False
    played: bool = False
    last_played_date: Optional[str] = None


@dataclass(frozen=True)
class MediaItem:
    """
    Element du catalogue (film, serie, saison, episode ou video).

    Les references parent (serie, saison, parent) forment un arbre lache.
    Les index peuvent etre sequentiels (series TV) ou epars / encodes par
    date (collections "video" importees, ex: 20241105).

    Attributs:
        id: Identifiant stable
        name: Nom affiche
        kind: Type d'element
        series_id, series_name: Serie parente (episodes)
        season_id: Saison parente (episodes)
        parent_id: Dossier parent
        index_number: Index dans la saison / collection
        parent_index_number: Numero de saison
        run_time_ticks: Duree totale
        user_data: Etat de lecture utilisateur
        has_primary_image: Presence d'une image principale
        backdrop_image_tags: Tags des fonds propres a l'element
        parent_backdrop_image_tags: Tags des fonds du parent (serie)
        overview: Resume
        production_year: Annee de production
        library_name: Bibliotheque d'origine (renseignee par les agregateurs)
    """

    id: str
    name: str
    kind: ItemKind = ItemKind.UNKNOWN
    series_id: Optional[str] = None
    series_name: Optional[str] = None
    season_id: Optional[str] = None
    parent_id: Optional[str] = None
    index_number: Optional[int] = None
    parent_index_number: Optional[int] = None
    run_time_ticks: Optional[int] = None
    user_data: UserData = UserData()
    has_primary_image: bool = False
    backdrop_image_tags: tuple[str, ...] = ()
    parent_backdrop_image_tags: tuple[str, ...] = ()
    overview: Optional[str] = None
    production_year: Optional[int] = None
    library_name: Optional[str] = None

    @property
    def is_episode(self) -> bool:
        return self.kind == ItemKind.EPISODE

    @property
    def resume_position_ticks(self) -> int:
        """Position de reprise sauvegardee (0 si aucune)."""
        return self.user_data.playback_position_ticks or 0

    @property
    def display_title(self) -> str:
        """Titre affiche : "Serie S1E2" pour un episode, le nom sinon."""
        if self.is_episode and self.series_name:
            parts = []
            if self.parent_index_number is not None:
                parts.append(f"S{self.parent_index_number}")
            if self.index_number is not None:
                parts.append(f"E{self.index_number}")
            if parts:
                return f"{self.series_name} {''.join(parts)}"
            return self.series_name
        return self.name

    @property
    def progress_percent(self) -> float:
        """Progression de lecture entre 0 et 1 (0 si duree inconnue)."""
        if not self.run_time_ticks or self.run_time_ticks <= 0:
            return 0.0
        return self.resume_position_ticks / self.run_time_ticks


@dataclass(frozen=True)
class Library:
    """
    Bibliotheque visible par l'utilisateur (vue racine du serveur).

    Attributs:
        id: Identifiant de la vue
        name: Nom affiche
        collection_type: Type de collection ("movies", "tvshows", ...) ou None
    """

    id: str
    name: str
    collection_type: Optional[str] = None

    @property
    def is_media_library(self) -> bool:
        """Vrai pour les bibliotheques de medias (les collections sans type incluses)."""
        if not self.collection_type:
            return True
        return self.collection_type.lower() in MEDIA_LIBRARY_TYPES


@dataclass(frozen=True)
class User:
    """Utilisateur authentifie."""

    id: str
    name: str
    server_id: Optional[str] = None


@dataclass(frozen=True)
class AuthenticationResult:
    """Resultat d'authentification : utilisateur, jeton d'acces et serveur."""

    user: User
    access_token: str
    server_id: Optional[str] = None


@dataclass(frozen=True)
class ShelfEntry:
    """
    Ligne du panneau de raccourcis "Reprendre la lecture" (hors application).

    Attributs:
        id: Identifiant de l'element
        name: Titre (nom de la serie pour un episode)
        subtitle: Sous-titre ("Serie • S1:E2") ou None
        image_url: URL du visuel
        type: Type serveur de l'element ("Episode", "Movie", ...)
        progress: Progression en pourcentage (0-100)
    """

    id: str
    name: str
    subtitle: Optional[str]
    image_url: Optional[str]
    type: str
    progress: float = 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "subtitle": self.subtitle,
            "imageURL": self.image_url,
            "type": self.type,
            "progress": self.progress,
        }

"""
Interfaces ports pour l'état local persistant.

Les identifiants de connexion et l'identifiant d'appareil survivent aux
redémarrages. Le stockage sécurisé réel est hors périmètre : seul le contrat
est défini ici.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from kinoplay.core.entities import ShelfEntry


@dataclass(frozen=True)
class StoredCredentials:
    """
    Identifiants persistés d'une session.

    Attributs:
        server_url: Adresse du serveur
        access_token: Jeton d'accès
        user_id: Identifiant de l'utilisateur
        user_name: Nom affiché de l'utilisateur
    """

    server_url: Optional[str] = None
    access_token: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """Vrai si la session peut être restaurée (serveur, jeton et utilisateur)."""
        return bool(self.server_url and self.access_token and self.user_id)


class ICredentialStore(ABC):
    """Stockage des identifiants et de l'identifiant d'appareil."""

    @abstractmethod
    def load_credentials(self) -> StoredCredentials:
        ...

    @abstractmethod
    def save_credentials(self, credentials: StoredCredentials) -> None:
        ...

    @abstractmethod
    def clear_credentials(self) -> None:
        """Efface les identifiants ; l'identifiant d'appareil est conservé."""
        ...

    @abstractmethod
    def get_device_id(self) -> str:
        """Retourne l'identifiant d'appareil, généré une seule fois."""
        ...


class IShelfSnapshotStore(ABC):
    """Export du fil "Reprendre la lecture" vers le panneau de raccourcis."""

    @abstractmethod
    def write_shelf_snapshot(self, entries: list[ShelfEntry]) -> None:
        ...

    @abstractmethod
    def read_shelf_snapshot(self) -> list[ShelfEntry]:
        ...

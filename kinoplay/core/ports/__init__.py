"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Port serveur : Contrat de la passerelle HTTP
- IMediaServerClient : Catalogue, lecture, rapports de progression

Port lecture : Contrat du moteur natif
- IPlaybackEngine : Chargement, lecture, position, pistes

Ports stockage : Contrats de l'état local
- ICredentialStore : Identifiants et identifiant d'appareil
- IShelfSnapshotStore : Export du fil "Reprendre la lecture"
- StoredCredentials : Identifiants persistés
"""

from kinoplay.core.ports.media_server import (
    IMediaServerClient,
    SessionExpiredHandler,
)
from kinoplay.core.ports.playback_engine import (
    EndCallback,
    ErrorCallback,
    IPlaybackEngine,
    PositionCallback,
)
from kinoplay.core.ports.storage import (
    ICredentialStore,
    IShelfSnapshotStore,
    StoredCredentials,
)

__all__ = [
    # Serveur
    "IMediaServerClient",
    "SessionExpiredHandler",
    # Lecture
    "IPlaybackEngine",
    "PositionCallback",
    "EndCallback",
    "ErrorCallback",
    # Stockage
    "ICredentialStore",
    "IShelfSnapshotStore",
    "StoredCredentials",
]

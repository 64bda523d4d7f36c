"""
Passerelle HTTP vers le serveur multimedia.

Ce module fournit l'adaptateur pour communiquer avec le serveur:
- JellyfinClient: dialecte REST Jellyfin / Emby

Infrastructure partagee:
- APICache: Cache persistant avec TTL (ancetres 24h)
- TransientServerError: Exception pour les erreurs 5xx relancables
- with_retry: Decorateur avec backoff exponentiel (1s, 2s, 4s)

Le client implemente IMediaServerClient defini dans core/ports/media_server.py.
"""

from kinoplay.adapters.api.cache import APICache
from kinoplay.adapters.api.jellyfin_client import JellyfinClient
from kinoplay.adapters.api.retry import (
    TransientServerError,
    request_with_retry,
    with_retry,
)

__all__ = [
    "APICache",
    "JellyfinClient",
    "TransientServerError",
    "request_with_retry",
    "with_retry",
]

"""
Cache persistant pour les reponses du serveur avec TTL.

Le cache utilise diskcache pour la persistence sur disque, ce qui permet
de conserver les donnees entre les redemarrages de l'application.

TTL par defaut:
- Ancetres (ANCESTORS_TTL): 24 heures - l'arborescence des bibliotheques change rarement
"""

import asyncio
from functools import partial
from typing import Any, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone avec TTL pour les appels au serveur.

    Utilise diskcache pour la persistence et run_in_executor pour
    les operations asynchrones non-bloquantes.

    Attributes:
        ANCESTORS_TTL: Duree de vie des listes d'ancetres (24h)

    Example:
        cache = APICache(cache_dir=".cache/kinoplay")
        await cache.set_ancestors("ancestors:user:item", payload)
        data = await cache.get("ancestors:user:item")
    """

    ANCESTORS_TTL = 24 * 60 * 60  # 24 heures en secondes (86400)

    def __init__(self, cache_dir: str = ".cache/kinoplay") -> None:
        """
        Initialise le cache avec un repertoire de stockage.

        Args:
            cache_dir: Chemin vers le repertoire du cache (cree si inexistant)
        """
        self._cache = Cache(cache_dir)

    async def get(self, key: str) -> Optional[Any]:
        """
        Recupere une valeur du cache.

        Args:
            key: Cle unique identifiant la donnee

        Returns:
            La valeur stockee ou None si absente ou expiree
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Stocke une valeur dans le cache avec un TTL.

        Args:
            key: Cle unique identifiant la donnee
            value: Valeur a stocker (doit etre serializable)
            ttl: Duree de vie en secondes
        """
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_ancestors(self, key: str, value: Any) -> None:
        """Stocke la reponse brute d'une requete d'ancetres (TTL de 24h)."""
        await self.set(key, value, self.ANCESTORS_TTL)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()

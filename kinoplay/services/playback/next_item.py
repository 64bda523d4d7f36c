"""
Recherche de l'element suivant en fin de lecture.

Episodes : l'episode d'index courant + 1 dans la saison, sinon le premier
d'index strictement superieur (index epars ou encodes par date).
Videos : le premier element d'index strictement superieur dans le premier
perimetre connu (saison, serie, puis dossier parent).
Autres types (film, serie, saison) : pas d'element suivant.
"""

from typing import Optional

from loguru import logger

from kinoplay.core.entities import ItemKind, MediaItem
from kinoplay.core.errors import MediaServerError
from kinoplay.core.ports.media_server import IMediaServerClient


def _indexed(items: list[MediaItem], exclude_id: str) -> list[MediaItem]:
    return sorted(
        (i for i in items if i.index_number is not None and i.id != exclude_id),
        key=lambda i: i.index_number,
    )


def find_next_by_index(current: MediaItem, items: list[MediaItem]) -> Optional[MediaItem]:
    """Premier element d'index strictement superieur a celui de `current`."""
    if current.index_number is None:
        return None
    return next(
        (i for i in _indexed(items, current.id) if i.index_number > current.index_number),
        None,
    )


def find_next_episode(current: MediaItem, episodes: list[MediaItem]) -> Optional[MediaItem]:
    """Episode d'index + 1 si present, sinon le premier d'index superieur."""
    if current.index_number is None:
        return None
    candidates = _indexed(episodes, current.id)
    exact = next((e for e in candidates if e.index_number == current.index_number + 1), None)
    if exact is not None:
        return exact
    return find_next_by_index(current, candidates)


class NextItemResolver:
    """
    Recherche asynchrone de l'element suivant via le serveur.

    Les echecs serveur sont journalises et donnent "pas d'element suivant".
    """

    def __init__(self, client: IMediaServerClient) -> None:
        self._client = client

    async def find_next(self, item: MediaItem) -> Optional[MediaItem]:
        if item.index_number is None:
            return None
        try:
            if item.kind == ItemKind.EPISODE:
                return await self._next_episode(item)
            if item.kind == ItemKind.VIDEO:
                return await self._next_in_scope(item)
            return None
        except MediaServerError as e:
            logger.warning(f"Recherche de l'element suivant impossible pour {item.id}: {e}")
            return None

    async def _next_episode(self, item: MediaItem) -> Optional[MediaItem]:
        if item.series_id:
            episodes = await self._client.get_episodes(item.series_id, season_id=item.season_id)
            if not item.season_id and item.parent_index_number is not None:
                episodes = [e for e in episodes if e.parent_index_number == item.parent_index_number]
        elif item.season_id:
            episodes = await self._client.get_items(
                parent_id=item.season_id,
                include_types=["Episode"],
                sort_by="IndexNumber",
                sort_order="Ascending",
                limit=None,
            )
        else:
            return None
        return find_next_episode(item, episodes)

    async def _next_in_scope(self, item: MediaItem) -> Optional[MediaItem]:
        scope = item.season_id or item.series_id or item.parent_id
        if not scope:
            return None
        items = await self._client.get_items(
            parent_id=scope,
            sort_by="IndexNumber",
            sort_order="Ascending",
            limit=None,
        )
        return find_next_by_index(item, items)

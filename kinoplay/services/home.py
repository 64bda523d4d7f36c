"""
Service d'accueil : fil "Reprendre la lecture", ajouts recents, rotation
"hero" et bibliotheques.

Les quatre requetes principales sont lancees en parallele et jointes : un
echec de l'une d'elles fait echouer tout le chargement. Les etapes
decoratives (export du fil, noms de bibliotheques, rotation hero) sont au
mieux : leurs echecs sont journalises et ignores.
"""

import asyncio
import random
from dataclasses import dataclass, field, replace
from typing import Optional

from loguru import logger

from kinoplay.core.entities import ItemKind, Library, MediaItem
from kinoplay.core.errors import MediaServerError
from kinoplay.core.ports.media_server import IMediaServerClient
from kinoplay.core.ports.storage import IShelfSnapshotStore
from kinoplay.services.continue_watching import merge_continue_watching
from kinoplay.services.shelf import build_shelf_snapshot
from kinoplay.utils.constants import (
    CONTINUE_WATCHING_LIMIT,
    HERO_ITEMS_PER_LIBRARY,
    LATEST_LIMIT,
    NEXT_UP_LIMIT,
    RESUME_LIMIT,
    SHELF_SNAPSHOT_LIMIT,
)


@dataclass
class HomeContent:
    """
    Contenu de l'ecran d'accueil.

    Attributs:
        continue_watching: Fil fusionne, avec le nom de bibliotheque quand il est connu
        recently_added: Derniers ajouts toutes bibliotheques confondues
        hero_items: Rotation melangee des derniers ajouts par bibliotheque
        libraries: Bibliotheques de medias visibles
    """

    continue_watching: list[MediaItem] = field(default_factory=list)
    recently_added: list[MediaItem] = field(default_factory=list)
    hero_items: list[MediaItem] = field(default_factory=list)
    libraries: list[Library] = field(default_factory=list)


class HomeService:
    """
    Agregation des donnees de l'ecran d'accueil.

    Example:
        service = HomeService(client, snapshot_store)
        content = await service.load_content()
    """

    def __init__(
        self,
        client: IMediaServerClient,
        snapshot_store: Optional[IShelfSnapshotStore] = None,
        resume_limit: int = RESUME_LIMIT,
        next_up_limit: int = NEXT_UP_LIMIT,
        latest_limit: int = LATEST_LIMIT,
        continue_watching_limit: int = CONTINUE_WATCHING_LIMIT,
        hero_items_per_library: int = HERO_ITEMS_PER_LIBRARY,
        shelf_snapshot_limit: int = SHELF_SNAPSHOT_LIMIT,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialise le service.

        Args:
            client: Passerelle vers le serveur
            snapshot_store: Destination de l'export du fil (optionnel)
            rng: Generateur pour le melange de la rotation (injectable en test)
        """
        self._client = client
        self._snapshot_store = snapshot_store
        self._resume_limit = resume_limit
        self._next_up_limit = next_up_limit
        self._latest_limit = latest_limit
        self._continue_watching_limit = continue_watching_limit
        self._hero_items_per_library = hero_items_per_library
        self._shelf_snapshot_limit = shelf_snapshot_limit
        self._rng = rng or random.Random()

    async def load_content(self) -> HomeContent:
        """
        Charge tout le contenu de l'accueil.

        Raises:
            MediaServerError: Si l'une des quatre requetes principales echoue
        """
        resume, next_up, latest, views = await asyncio.gather(
            self._client.get_resume_items(limit=self._resume_limit),
            self._client.get_next_up(limit=self._next_up_limit),
            self._client.get_latest(limit=self._latest_limit),
            self._client.get_libraries(),
        )

        continue_watching = merge_continue_watching(
            resume, next_up, limit=self._continue_watching_limit
        )
        libraries = [library for library in views if library.is_media_library]
        logger.debug(
            f"Accueil: {len(resume)} en cours, {len(next_up)} a suivre, "
            f"{len(continue_watching)} dans le fil, {len(libraries)} bibliotheques"
        )

        self._write_snapshot(continue_watching)
        continue_watching = await self.resolve_library_names(continue_watching)
        hero_items = await self.load_hero_items(libraries)

        return HomeContent(
            continue_watching=continue_watching,
            recently_added=latest,
            hero_items=hero_items,
            libraries=libraries,
        )

    def _write_snapshot(self, items: list[MediaItem]) -> None:
        if self._snapshot_store is None:
            return
        try:
            entries = build_shelf_snapshot(items, self._client.image_url, self._shelf_snapshot_limit)
            self._snapshot_store.write_shelf_snapshot(entries)
        except (MediaServerError, OSError) as e:
            logger.warning(f"Export du fil impossible: {e}")

    async def resolve_library_names(self, items: list[MediaItem]) -> list[MediaItem]:
        """
        Renseigne le nom de bibliotheque de chaque element via ses ancetres.

        Les episodes sont resolus par leur serie (une requete par serie ou
        element distinct). Un echec laisse l'element sans nom.
        """
        lookup_ids: list[str] = []
        for item in items:
            lookup_id = item.series_id if item.kind == ItemKind.EPISODE else item.id
            if lookup_id and lookup_id not in lookup_ids:
                lookup_ids.append(lookup_id)

        names: dict[str, str] = {}
        for lookup_id in lookup_ids:
            try:
                ancestors = await self._client.get_ancestors(lookup_id)
            except MediaServerError as e:
                logger.debug(f"Ancetres indisponibles pour {lookup_id}: {e}")
                continue
            library = next(
                (a for a in ancestors if a.kind == ItemKind.COLLECTION_FOLDER), None
            )
            if library is not None:
                names[lookup_id] = library.name

        resolved = []
        for item in items:
            name = names.get(item.series_id or "") or names.get(item.id)
            resolved.append(replace(item, library_name=name) if name else item)
        return resolved

    async def load_hero_items(self, libraries: list[Library]) -> list[MediaItem]:
        """
        Construit la rotation hero : derniers ajouts de chaque bibliotheque,
        etiquetes du nom de la bibliotheque puis entierement melanges.

        Une bibliotheque en echec ne contribue rien.
        """
        hero_items: list[MediaItem] = []
        for library in libraries:
            try:
                items = await self._client.get_latest(
                    parent_id=library.id, limit=self._hero_items_per_library
                )
            except MediaServerError as e:
                logger.debug(f"Derniers ajouts indisponibles pour {library.name}: {e}")
                continue
            hero_items.extend(replace(item, library_name=library.name) for item in items)

        self._rng.shuffle(hero_items)
        return hero_items

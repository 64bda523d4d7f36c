"""
Fabriques d'objets de test : elements du catalogue, horloge pilotable et
utilitaire de vidage de la boucle asyncio.
"""

import asyncio
from typing import Optional

from kinoplay.core.entities import ItemKind, MediaItem, UserData


def make_item(
    item_id: str,
    kind: ItemKind = ItemKind.MOVIE,
    name: Optional[str] = None,
    last_played: Optional[str] = None,
    position_ticks: int = 0,
    **fields,
) -> MediaItem:
    """Construit un MediaItem de test avec des valeurs par defaut raisonnables."""
    return MediaItem(
        id=item_id,
        name=name or item_id,
        kind=kind,
        user_data=UserData(
            playback_position_ticks=position_ticks,
            last_played_date=last_played,
        ),
        **fields,
    )


def make_episode(
    item_id: str,
    index: Optional[int],
    series_id: Optional[str] = "s1",
    season_id: Optional[str] = "season1",
    season_number: Optional[int] = 1,
    **fields,
) -> MediaItem:
    """Construit un episode de test rattache a une serie et une saison."""
    fields.setdefault("series_name", "Middle Earth")
    return make_item(
        item_id,
        kind=ItemKind.EPISODE,
        series_id=series_id,
        season_id=season_id,
        index_number=index,
        parent_index_number=season_number,
        **fields,
    )


async def drain(iterations: int = 10) -> None:
    """Laisse tourner la boucle pour que les taches de fond progressent."""
    for _ in range(iterations):
        await asyncio.sleep(0)


class FakeClock:
    """Horloge monotone pilotable."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

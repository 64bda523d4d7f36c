"""
Construction de l'export "Reprendre la lecture" pour le panneau de raccourcis.
"""

from typing import Callable

from kinoplay.core.entities import ItemKind, MediaItem, ShelfEntry
from kinoplay.utils.constants import SHELF_IMAGE_MAX_WIDTH, SHELF_SNAPSHOT_LIMIT


def _artwork(item: MediaItem) -> tuple[str, str]:
    """Retourne (id de l'image, type d'image) selon le type d'element."""
    if item.kind == ItemKind.EPISODE:
        # Fond de la serie si elle en a un, sinon l'image de l'episode
        if item.parent_backdrop_image_tags:
            return item.series_id or item.id, "Backdrop"
        return item.id, "Primary"
    if item.kind == ItemKind.VIDEO:
        return item.id, "Primary"
    return item.id, "Backdrop"


ImageURLBuilder = Callable[[str, str, int], str]


def build_shelf_entry(item: MediaItem, image_url: ImageURLBuilder) -> ShelfEntry:
    """
    Construit la ligne exportee pour un element.

    Args:
        item: Element du fil
        image_url: Constructeur d'URL d'image (id, type, largeur max)

    Returns:
        ShelfEntry avec visuel, sous-titre "Serie • S1:E2" et progression en %
    """
    image_id, image_type = _artwork(item)
    artwork_url = image_url(image_id, image_type, SHELF_IMAGE_MAX_WIDTH)

    subtitle = ""
    name = item.name
    if item.kind == ItemKind.EPISODE:
        season = item.parent_index_number if item.parent_index_number is not None else 1
        episode = item.index_number if item.index_number is not None else 1
        subtitle = f"S{season}:E{episode}"
        if item.series_name:
            subtitle = f"{item.series_name} • {subtitle}"
            name = item.series_name

    return ShelfEntry(
        id=item.id,
        name=name,
        subtitle=subtitle,
        image_url=artwork_url,
        type=item.kind.value,
        progress=round(item.progress_percent * 100, 2),
    )


def build_shelf_snapshot(
    items: list[MediaItem],
    image_url: ImageURLBuilder,
    limit: int = SHELF_SNAPSHOT_LIMIT,
) -> list[ShelfEntry]:
    """Construit l'export des `limit` premiers elements du fil."""
    return [build_shelf_entry(item, image_url) for item in items[:limit]]

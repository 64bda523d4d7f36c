"""
Tests unitaires pour la recherche de l'element suivant.

Tests couvrant:
- Episode suivant exact (index + 1)
- Repli sur le premier index superieur (index epars, encodes par date)
- Aucun element suivant en fin de saison
- Perimetres de recherche via la passerelle et echecs serveur
"""

from unittest.mock import AsyncMock

import pytest

from kinoplay.core.entities import ItemKind
from kinoplay.core.errors import NetworkError
from kinoplay.services.playback.next_item import (
    NextItemResolver,
    find_next_by_index,
    find_next_episode,
)
from tests.fixtures.factories import make_episode, make_item


class TestFindNextEpisode:
    """Regles pures de selection."""

    def test_exact_match(self) -> None:
        episodes = [make_episode(f"e{n}", n) for n in (1, 2, 3, 4)]
        assert find_next_episode(episodes[1], episodes).id == "e3"

    def test_unordered_input(self) -> None:
        episodes = [make_episode(f"e{n}", n) for n in (4, 1, 3, 2)]
        current = make_episode("e2", 2)
        assert find_next_episode(current, episodes).id == "e3"

    def test_gap_falls_back_to_next_greater(self) -> None:
        episodes = [make_episode(f"e{n}", n) for n in (1, 2, 5, 7)]
        assert find_next_episode(episodes[1], episodes).id == "e5"

    def test_sparse_date_indices(self) -> None:
        """Index encodes par date : le premier strictement superieur, pas +1."""
        videos = [
            make_item(f"v{n}", kind=ItemKind.VIDEO, index_number=n)
            for n in (20241101, 20241105, 20241110)
        ]
        assert find_next_episode(videos[0], videos).id == "v20241105"
        assert find_next_by_index(videos[0], videos).id == "v20241105"

    def test_no_next_at_end(self) -> None:
        episodes = [make_episode("e1", 1), make_episode("e2", 2)]
        assert find_next_episode(episodes[1], episodes) is None

    def test_current_without_index(self) -> None:
        episodes = [make_episode("e1", 1)]
        assert find_next_episode(make_episode("x", None), episodes) is None

    def test_items_without_index_are_ignored(self) -> None:
        items = [make_episode("special", None), make_episode("e3", 3)]
        assert find_next_by_index(make_episode("e2", 2), items).id == "e3"


class TestNextItemResolver:
    """Recherche via la passerelle."""

    @pytest.mark.asyncio
    async def test_episode_searches_its_season(self, mock_client: AsyncMock) -> None:
        mock_client.get_episodes.return_value = [make_episode(f"e{n}", n) for n in (1, 2, 3)]
        resolver = NextItemResolver(mock_client)

        following = await resolver.find_next(make_episode("e2", 2))

        assert following.id == "e3"
        mock_client.get_episodes.assert_awaited_once_with("s1", season_id="season1")

    @pytest.mark.asyncio
    async def test_episode_without_season_id_filters_by_number(
        self, mock_client: AsyncMock
    ) -> None:
        """Sans identifiant de saison, seuls les episodes du meme numero de saison comptent."""
        mock_client.get_episodes.return_value = [
            make_episode("s1e2", 2, season_id=None, season_number=1),
            make_episode("s2e3", 3, season_id=None, season_number=2),
        ]
        resolver = NextItemResolver(mock_client)

        following = await resolver.find_next(make_episode("s1e2", 2, season_id=None))

        assert following is None

    @pytest.mark.asyncio
    async def test_episode_with_only_season_uses_items(self, mock_client: AsyncMock) -> None:
        mock_client.get_items.return_value = [make_episode(f"e{n}", n, series_id=None) for n in (1, 2)]
        resolver = NextItemResolver(mock_client)

        following = await resolver.find_next(make_episode("e1", 1, series_id=None))

        assert following.id == "e2"
        kwargs = mock_client.get_items.await_args.kwargs
        assert kwargs["parent_id"] == "season1"
        assert kwargs["include_types"] == ["Episode"]
        assert kwargs["limit"] is None

    @pytest.mark.asyncio
    async def test_video_searches_parent_scope(self, mock_client: AsyncMock) -> None:
        current = make_item("v1", kind=ItemKind.VIDEO, index_number=20241101, parent_id="folder")
        mock_client.get_items.return_value = [
            current,
            make_item("v3", kind=ItemKind.VIDEO, index_number=20241110),
            make_item("v2", kind=ItemKind.VIDEO, index_number=20241105),
        ]
        resolver = NextItemResolver(mock_client)

        following = await resolver.find_next(current)

        assert following.id == "v2"
        assert mock_client.get_items.await_args.kwargs["parent_id"] == "folder"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", [ItemKind.MOVIE, ItemKind.SERIES, ItemKind.SEASON])
    async def test_other_kinds_have_no_next(self, mock_client: AsyncMock, kind: ItemKind) -> None:
        """Seuls les episodes et les videos ont un element suivant."""
        resolver = NextItemResolver(mock_client)
        current = make_item("x1", kind=kind, index_number=1, parent_id="folder")

        assert await resolver.find_next(current) is None
        mock_client.get_items.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_scope_or_index(self, mock_client: AsyncMock) -> None:
        resolver = NextItemResolver(mock_client)

        assert await resolver.find_next(make_item("m1", index_number=1)) is None
        assert await resolver.find_next(make_episode("e1", None)) is None
        mock_client.get_items.assert_not_awaited()
        mock_client.get_episodes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_server_failure_means_no_next(self, mock_client: AsyncMock) -> None:
        mock_client.get_episodes.side_effect = NetworkError()
        resolver = NextItemResolver(mock_client)

        assert await resolver.find_next(make_episode("e2", 2)) is None

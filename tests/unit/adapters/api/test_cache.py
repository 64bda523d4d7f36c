"""
Tests unitaires pour le cache des reponses serveur (diskcache).
"""

from pathlib import Path

import pytest

from kinoplay.adapters.api.cache import APICache


@pytest.fixture
def cache(tmp_path: Path):
    """APICache dans un repertoire temporaire."""
    api_cache = APICache(cache_dir=str(tmp_path / "api"))
    yield api_cache
    api_cache.close()


class TestAPICache:
    """Tests pour APICache."""

    @pytest.mark.asyncio
    async def test_get_returns_none_when_missing(self, cache: APICache) -> None:
        """Une cle absente renvoie None."""
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache: APICache) -> None:
        """Une valeur stockee est relue telle quelle."""
        await cache.set("key", {"Items": [1, 2]}, ttl=60)
        assert await cache.get("key") == {"Items": [1, 2]}

    @pytest.mark.asyncio
    async def test_set_ancestors_uses_day_ttl(self, cache: APICache) -> None:
        """set_ancestors stocke la reponse brute avec un TTL de 24h."""
        payload = [{"Id": "lib", "Type": "CollectionFolder"}]
        await cache.set_ancestors("jellyfin:ancestors:u1:ep1", payload)

        assert APICache.ANCESTORS_TTL == 86400
        assert await cache.get("jellyfin:ancestors:u1:ep1") == payload

    @pytest.mark.asyncio
    async def test_clear_removes_entries(self, cache: APICache) -> None:
        """clear vide le cache."""
        await cache.set("key", "value", ttl=60)
        await cache.clear()
        assert await cache.get("key") is None

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path: Path) -> None:
        """Les donnees survivent a la fermeture du cache."""
        first = APICache(cache_dir=str(tmp_path / "api"))
        await first.set("key", "value", ttl=60)
        first.close()

        second = APICache(cache_dir=str(tmp_path / "api"))
        try:
            assert await second.get("key") == "value"
        finally:
            second.close()

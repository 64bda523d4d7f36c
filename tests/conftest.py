"""
Fixtures pytest partagees pour les tests Kinoplay.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires
- Mock de la passerelle IMediaServerClient
- Moteur de lecture simule
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from kinoplay.config import Settings
from kinoplay.core.ports.media_server import IMediaServerClient
from tests.fixtures.factories import FakeClock
from tests.fixtures.fake_engine import FakePlaybackEngine


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler l'etat, le cache et les logs
    de chaque test.
    """
    return Settings(
        state_dir=tmp_path / "state",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "test.log",
        retry_backoff=0,
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    """
    Mock de IMediaServerClient pour les tests.

    Les methodes async sont des AsyncMock, les constructeurs d'URL des
    MagicMock. Les valeurs de retour doivent etre configurees dans chaque test.
    """
    client = AsyncMock(spec=IMediaServerClient)
    client.image_url.side_effect = (
        lambda item_id, image_type="Primary", max_width=400:
        f"https://media.example.com/Items/{item_id}/Images/{image_type}?maxWidth={max_width}"
    )
    return client


@pytest.fixture
def fake_engine() -> FakePlaybackEngine:
    """Moteur de lecture simule."""
    return FakePlaybackEngine()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


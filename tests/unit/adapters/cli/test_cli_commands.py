"""
Tests unitaires pour les commandes CLI.

Tests couvrant:
- version: affichage de la version
- login / logout: connexion, identifiants refuses, deconnexion
- home: session requise, rendu de l'accueil, erreurs de la passerelle
- next: element suivant trouve ou absent
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from kinoplay.core.entities import Library, User
from kinoplay.core.errors import NetworkError, ServerHTTPError
from kinoplay.main import app
from kinoplay.services.home import HomeContent
from tests.fixtures.factories import make_episode, make_item

runner = CliRunner()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_container():
    """Mock le Container pour les tests.

    Patche Container dans helpers.py car c'est la que le decorateur
    @with_container() l'importe et l'instancie.
    """
    with patch("kinoplay.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance

        session = MagicMock()
        session.restore_session = AsyncMock(return_value=True)
        session.login = AsyncMock(return_value=User(id="u1", name="alice"))
        session.logout = AsyncMock()
        session.is_authenticated = True
        session.server_url = "https://media.example.com"
        session.current_user = User(id="u1", name="alice")
        container_instance.session_manager.return_value = session

        client = MagicMock()
        client.close = AsyncMock()
        client.get_item = AsyncMock()
        container_instance.media_server_client.return_value = client

        home_service = MagicMock()
        home_service.load_content = AsyncMock(return_value=HomeContent())
        container_instance.home_service.return_value = home_service

        resolver = MagicMock()
        resolver.find_next = AsyncMock(return_value=None)
        container_instance.next_item_resolver.return_value = resolver

        yield container_instance


# ============================================================================
# Tests version
# ============================================================================


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Kinoplay v0.1.0" in result.output


# ============================================================================
# Tests login / logout
# ============================================================================


class TestLogin:
    """Tests pour la commande login."""

    def test_login_success(self, mock_container) -> None:
        session = mock_container.session_manager.return_value

        result = runner.invoke(
            app, ["login", "https://media.example.com", "-u", "alice", "-p", "secret"]
        )

        assert result.exit_code == 0
        assert "Connecte" in result.output
        assert "alice" in result.output
        session.login.assert_awaited_once_with("https://media.example.com", "alice", "secret")
        session.restore_session.assert_not_awaited()
        mock_container.media_server_client.return_value.close.assert_awaited_once()

    def test_login_rejected_credentials(self, mock_container) -> None:
        session = mock_container.session_manager.return_value
        session.login.side_effect = ServerHTTPError(401)

        result = runner.invoke(
            app, ["login", "https://media.example.com", "-u", "alice", "-p", "wrong"]
        )

        assert result.exit_code == 1
        assert "Invalid username or password." in result.output

    def test_login_network_error(self, mock_container) -> None:
        session = mock_container.session_manager.return_value
        session.login.side_effect = NetworkError()

        result = runner.invoke(
            app, ["login", "https://media.example.com", "-u", "alice", "-p", "secret"]
        )

        assert result.exit_code == 1
        assert "No internet connection" in result.output
        mock_container.media_server_client.return_value.close.assert_awaited_once()


class TestLogout:
    """Tests pour la commande logout."""

    def test_logout(self, mock_container) -> None:
        session = mock_container.session_manager.return_value

        result = runner.invoke(app, ["logout"])

        assert result.exit_code == 0
        assert "Deconnecte" in result.output
        assert "(alice)" in result.output
        session.logout.assert_awaited_once()

    def test_logout_without_session(self, mock_container) -> None:
        session = mock_container.session_manager.return_value
        session.is_authenticated = False

        result = runner.invoke(app, ["logout"])

        assert result.exit_code == 0
        assert "Aucune session active." in result.output
        session.logout.assert_not_awaited()


# ============================================================================
# Tests home
# ============================================================================


class TestHome:
    """Tests pour la commande home."""

    def test_requires_session(self, mock_container) -> None:
        mock_container.session_manager.return_value.is_authenticated = False

        result = runner.invoke(app, ["home"])

        assert result.exit_code == 1
        assert "Not connected to a server. Please sign in." in result.output
        mock_container.home_service.return_value.load_content.assert_not_awaited()
        mock_container.media_server_client.return_value.close.assert_awaited_once()

    def test_renders_sections(self, mock_container) -> None:
        content = HomeContent(
            continue_watching=[
                make_episode(
                    "ep2", 2, position_ticks=6_000_000_000,
                    run_time_ticks=36_000_000_000, library_name="Series",
                )
            ],
            recently_added=[make_item("m9", name="Heat")],
            libraries=[Library("lib-movies", "Films", "movies")],
        )
        mock_container.home_service.return_value.load_content.return_value = content

        result = runner.invoke(app, ["home"])

        assert result.exit_code == 0
        assert "Reprendre la lecture" in result.output
        assert "ep2" in result.output
        assert "Ajouts recents" in result.output
        assert "Heat" in result.output
        assert "Films" in result.output
        mock_container.session_manager.return_value.restore_session.assert_awaited_once()

    def test_nothing_to_resume(self, mock_container) -> None:
        result = runner.invoke(app, ["home"])

        assert result.exit_code == 0
        assert "Rien a reprendre." in result.output

    def test_gateway_error(self, mock_container) -> None:
        service = mock_container.home_service.return_value
        service.load_content.side_effect = ServerHTTPError(503)

        result = runner.invoke(app, ["home"])

        assert result.exit_code == 1
        assert "Server is having issues. Try again later." in result.output


# ============================================================================
# Tests next
# ============================================================================


class TestNext:
    """Tests pour la commande next."""

    def test_next_found(self, mock_container) -> None:
        client = mock_container.media_server_client.return_value
        client.get_item.return_value = make_episode("ep2", 2)
        resolver = mock_container.next_item_resolver.return_value
        resolver.find_next.return_value = make_episode("ep3", 3)

        result = runner.invoke(app, ["next", "ep2"])

        assert result.exit_code == 0
        assert "Middle Earth S1E3" in result.output
        assert "ep3" in result.output
        client.get_item.assert_awaited_once_with("ep2")

    def test_next_absent(self, mock_container) -> None:
        client = mock_container.media_server_client.return_value
        client.get_item.return_value = make_episode("ep9", 9)

        result = runner.invoke(app, ["next", "ep9"])

        assert result.exit_code == 0
        assert "Aucun element apres" in result.output

    def test_unknown_item(self, mock_container) -> None:
        client = mock_container.media_server_client.return_value
        client.get_item.side_effect = ServerHTTPError(404)

        result = runner.invoke(app, ["next", "missing"])

        assert result.exit_code == 1
        assert "Content not found" in result.output
        mock_container.next_item_resolver.return_value.find_next.assert_not_awaited()

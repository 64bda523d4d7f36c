"""
Tests unitaires pour la taxonomie des erreurs et les messages utilisateur.
"""

import pytest

from kinoplay.core.errors import (
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NoMediaSourceError,
    NoStreamURLError,
    NotConfiguredError,
    PlaybackEngineError,
    ServerHTTPError,
    SessionExpiredError,
    user_message,
)


class TestUserMessages:
    """Correspondance erreur -> message affiche."""

    @pytest.mark.parametrize(
        "error, expected",
        [
            (NotConfiguredError(), "Not connected to a server. Please sign in."),
            (InvalidURLError("ftp://x"), "Could not connect to the server. Check server address."),
            (InvalidResponseError("bad json"), "The server returned an unexpected response. Try again."),
            (SessionExpiredError(), "Session expired. Please sign in again."),
            (NetworkError(), "No internet connection. Check your network."),
            (NoMediaSourceError(), "No playable media source found"),
            (NoStreamURLError(), "Could not generate stream URL"),
        ],
    )
    def test_messages(self, error, expected) -> None:
        assert user_message(error) == expected

    @pytest.mark.parametrize(
        "status, expected",
        [
            (404, "Content not found. It may have been removed."),
            (503, "Server is having issues. Try again later."),
            (401, "Session expired. Please sign in again."),
            (403, "Session expired. Please sign in again."),
            (418, "Something went wrong. Please try again."),
        ],
    )
    def test_http_status_messages(self, status, expected) -> None:
        assert user_message(ServerHTTPError(status)) == expected

    def test_engine_error_carries_its_message(self) -> None:
        assert user_message(PlaybackEngineError("decoder stalled")) == "decoder stalled"
        assert user_message(PlaybackEngineError()) == "Unknown playback error"

    def test_unknown_error_is_generic(self) -> None:
        assert user_message(ValueError("boom")) == "Something went wrong. Please try again."


class TestErrorAttributes:
    def test_status_code_kept(self) -> None:
        assert ServerHTTPError(502).status_code == 502
        assert SessionExpiredError(403).status_code == 403

    def test_network_error_keeps_cause(self) -> None:
        cause = ConnectionError("refused")
        error = NetworkError(cause)
        assert error.cause is cause
        assert "refused" in str(error)

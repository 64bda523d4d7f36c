"""
Tests unitaires pour le mecanisme de retry avec backoff exponentiel.

Ces tests verifient:
- TransientServerError capture le statut HTTP
- with_retry relance sur erreur transitoire puis abandonne apres les relances
- request_with_retry convertit les 5xx et renvoie les 4xx sans relance
"""

import httpx
import pytest
import respx

from kinoplay.adapters.api.retry import (
    TransientServerError,
    request_with_retry,
    with_retry,
)


class TestTransientServerError:
    """Tests pour l'exception TransientServerError."""

    def test_stores_status_code(self) -> None:
        """TransientServerError conserve le statut HTTP."""
        error = TransientServerError(503)
        assert error.status_code == 503
        assert "503" in str(error)


class TestWithRetryDecorator:
    """Tests pour le decorateur with_retry."""

    @pytest.mark.asyncio
    async def test_retries_on_transient_error(self) -> None:
        """with_retry relance quand TransientServerError est levee."""
        call_count = 0

        @with_retry(max_retries=3, backoff=0)
        async def flaky_function() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise TransientServerError(502)
            return "success"

        result = await flaky_function()
        assert result == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_stops_after_three_retries(self) -> None:
        """Trois relances apres la premiere tentative, puis l'erreur remonte."""
        call_count = 0

        @with_retry(max_retries=3, backoff=0)
        async def always_fails() -> str:
            nonlocal call_count
            call_count += 1
            raise TransientServerError(500)

        with pytest.raises(TransientServerError):
            await always_fails()
        assert call_count == 4

    @pytest.mark.asyncio
    async def test_retries_on_transport_error(self) -> None:
        """Les echecs de transport httpx sont aussi relances."""
        call_count = 0

        @with_retry(max_retries=2, backoff=0)
        async def unreachable() -> str:
            nonlocal call_count
            call_count += 1
            raise httpx.ConnectError("connection refused")

        with pytest.raises(httpx.ConnectError):
            await unreachable()
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_does_not_retry_other_exceptions(self) -> None:
        """Les autres exceptions remontent immediatement."""
        call_count = 0

        @with_retry(max_retries=3, backoff=0)
        async def broken() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("bug")

        with pytest.raises(ValueError):
            await broken()
        assert call_count == 1


class TestRequestWithRetry:
    """Tests pour request_with_retry."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_successful_response(self) -> None:
        """Une reponse 200 est renvoyee directement."""
        route = respx.get("https://media.example.com/System/Info").mock(
            return_value=httpx.Response(200, json={"Version": "10.9.0"})
        )
        async with httpx.AsyncClient() as client:
            response = await request_with_retry(
                client, "GET", "https://media.example.com/System/Info", backoff=0
            )
        assert response.status_code == 200
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_5xx_then_succeeds(self) -> None:
        """Les 5xx sont relances jusqu'au succes."""
        route = respx.get("https://media.example.com/System/Info").mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(502),
                httpx.Response(200, json={}),
            ]
        )
        async with httpx.AsyncClient() as client:
            response = await request_with_retry(
                client, "GET", "https://media.example.com/System/Info", backoff=0
            )
        assert response.status_code == 200
        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_raises_after_exhausting_retries(self) -> None:
        """Un 5xx persistant leve TransientServerError apres 4 tentatives."""
        route = respx.get("https://media.example.com/System/Info").mock(
            return_value=httpx.Response(500)
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(TransientServerError) as exc_info:
                await request_with_retry(
                    client, "GET", "https://media.example.com/System/Info", backoff=0
                )
        assert exc_info.value.status_code == 500
        assert route.call_count == 4

    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_is_returned_without_retry(self) -> None:
        """Les 4xx sont renvoyes a l'appelant sans relance."""
        route = respx.get("https://media.example.com/Items/x").mock(
            return_value=httpx.Response(404)
        )
        async with httpx.AsyncClient() as client:
            response = await request_with_retry(
                client, "GET", "https://media.example.com/Items/x", backoff=0
            )
        assert response.status_code == 404
        assert route.call_count == 1

"""
Mecanisme de retry avec backoff exponentiel pour le serveur multimedia.

Les erreurs transitoires (statut 5xx, echec de transport ou timeout) sont
relancees avec un delai croissant : 1 s, 2 s puis 4 s (trois relances apres
la premiere tentative). Les autres statuts sont renvoyes tels quels a
l'appelant qui decide (401/403 = session expiree, autres 4xx = erreur
immediate).

Usage:
    # Avec le decorateur
    @with_retry(max_retries=3, backoff=1.0)
    async def my_call():
        ...

    # Avec la fonction helper
    response = await request_with_retry(client, "GET", url)
"""

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)


class TransientServerError(Exception):
    """
    Exception levee quand le serveur repond avec un statut 5xx.

    Attributes:
        status_code: Code HTTP renvoye par le serveur
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Server error {status_code}")


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.debug(
        f"Nouvelle tentative {retry_state.attempt_number + 1} apres erreur: {error}"
    )


def with_retry(max_retries: int = 3, backoff: float = 1.0):
    """
    Decorateur pour relancer sur erreur transitoire avec backoff exponentiel.

    Le delai avant la relance n vaut backoff * 2^(n-1) secondes.

    Args:
        max_retries: Nombre de relances apres la premiere tentative (defaut: 3)
        backoff: Delai de base en secondes (defaut: 1.0, 0 pour les tests)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type((TransientServerError, httpx.TransportError)),
        wait=wait_exponential(multiplier=backoff, min=0),
        stop=stop_after_attempt(max_retries + 1),
        before_sleep=_log_retry,
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_retries: int = 3,
    backoff: float = 1.0,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur erreur transitoire.

    Convertit les reponses 5xx en TransientServerError et relance avec
    backoff exponentiel. Les statuts 4xx sont renvoyes sans retry.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler
        max_retries: Nombre de relances apres la premiere tentative
        backoff: Delai de base du backoff en secondes
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response (statut 2xx, 3xx ou 4xx)

    Raises:
        TransientServerError: Si 5xx apres epuisement des tentatives
        httpx.TransportError: Si le transport echoue apres epuisement des tentatives
    """

    @with_retry(max_retries=max_retries, backoff=backoff)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if 500 <= response.status_code <= 599:
            raise TransientServerError(response.status_code)
        return response

    return await _do_request()

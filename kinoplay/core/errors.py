"""
Taxonomie des erreurs du client.

Erreurs de passerelle (MediaServerError) :
- NotConfiguredError : aucune session etablie (jamais relancee)
- InvalidURLError : adresse de serveur ou chemin invalide
- InvalidResponseError : reponse du serveur illisible
- ServerHTTPError : statut HTTP en echec (apres epuisement des relances pour 5xx)
- SessionExpiredError : 401/403, declenche la deconnexion globale
- NetworkError : echec de transport (apres epuisement des relances)

Erreurs de lecture (PlaybackError) :
- NoMediaSourceError : le serveur ne renvoie aucune source
- NoStreamURLError : aucune strategie ne produit d'URL exploitable
- PlaybackEngineError : erreur fatale du moteur (decodage, blocage)
"""

from typing import Optional


class MediaServerError(Exception):
    """Erreur de base de la passerelle vers le serveur multimedia."""

    default_message = "Something went wrong. Please try again."

    @property
    def user_message(self) -> str:
        """Message lisible a afficher a l'utilisateur."""
        return self.default_message


class NotConfiguredError(MediaServerError):
    default_message = "Not connected to a server. Please sign in."

    def __init__(self) -> None:
        super().__init__("No active server session")


class InvalidURLError(MediaServerError):
    default_message = "Could not connect to the server. Check server address."

    def __init__(self, url: str = "") -> None:
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")


class InvalidResponseError(MediaServerError):
    default_message = "The server returned an unexpected response. Try again."


class ServerHTTPError(MediaServerError):
    """
    Statut HTTP en echec.

    Attributes:
        status_code: Code HTTP renvoye par le serveur
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"HTTP error {status_code}")

    @property
    def user_message(self) -> str:
        if self.status_code in (401, 403):
            return SessionExpiredError.default_message
        if self.status_code == 404:
            return "Content not found. It may have been removed."
        if 500 <= self.status_code <= 599:
            return "Server is having issues. Try again later."
        return self.default_message


class SessionExpiredError(MediaServerError):
    default_message = "Session expired. Please sign in again."

    def __init__(self, status_code: int = 401) -> None:
        self.status_code = status_code
        super().__init__(f"Session expired (HTTP {status_code})")


class NetworkError(MediaServerError):
    default_message = "No internet connection. Check your network."

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(f"Network error: {cause}")


class PlaybackError(Exception):
    """Erreur de base de la resolution ou de la lecture d'un media."""

    default_message = "Playback failed."

    @property
    def user_message(self) -> str:
        return self.default_message


class NoMediaSourceError(PlaybackError):
    default_message = "No playable media source found"


class NoStreamURLError(PlaybackError):
    default_message = "Could not generate stream URL"


class PlaybackEngineError(PlaybackError):
    default_message = "Unknown playback error"

    @property
    def user_message(self) -> str:
        return str(self) or self.default_message


def user_message(error: BaseException) -> str:
    """Retourne le message utilisateur d'une erreur, generique si inconnue."""
    if isinstance(error, (MediaServerError, PlaybackError)):
        return error.user_message
    return MediaServerError.default_message

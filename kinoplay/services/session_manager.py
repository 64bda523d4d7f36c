"""
Gestion de la session utilisateur : restauration, connexion, deconnexion.

Seul ce service ecrit l'etat de connexion de la passerelle (adresse, jeton,
utilisateur). Il s'enregistre comme gestionnaire de session expiree : toute
reponse 401/403 d'une requete en cours provoque une deconnexion globale.
"""

from enum import Enum
from typing import Awaitable, Callable, Optional

from loguru import logger

from kinoplay.core.entities import User
from kinoplay.core.errors import InvalidURLError
from kinoplay.core.ports.media_server import IMediaServerClient
from kinoplay.core.ports.storage import ICredentialStore, StoredCredentials
from kinoplay.utils.helpers import is_valid_server_url, normalize_server_url


class LogoutReason(Enum):
    """Motif de la derniere deconnexion."""

    USER_INITIATED = "user_initiated"
    SESSION_EXPIRED = "session_expired"


LogoutListener = Callable[[LogoutReason], Awaitable[None]]


class SessionManager:
    """
    Proprietaire de l'identite et des identifiants persistes.

    Attributs:
        is_authenticated: Session etablie
        current_user: Utilisateur connecte
        server_url: Adresse du serveur connecte
        logout_reason: Motif de la derniere deconnexion (None apres connexion)
    """

    def __init__(self, client: IMediaServerClient, store: ICredentialStore) -> None:
        self._client = client
        self._store = store
        self._listeners: list[LogoutListener] = []
        self.is_authenticated = False
        self.current_user: Optional[User] = None
        self.server_url: Optional[str] = None
        self.logout_reason: Optional[LogoutReason] = None
        client.set_session_expired_handler(self._on_session_expired)

    def add_logout_listener(self, listener: LogoutListener) -> None:
        self._listeners.append(listener)

    def remove_logout_listener(self, listener: LogoutListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def restore_session(self) -> bool:
        """
        Restaure la session persistee si elle est complete.

        Returns:
            True si la passerelle a ete configuree, False sinon
        """
        credentials = self._store.load_credentials()
        if not credentials.is_complete:
            logger.debug("Aucune session persistee")
            return False

        await self._client.configure(
            credentials.server_url,
            access_token=credentials.access_token,
            user_id=credentials.user_id,
        )
        self.server_url = credentials.server_url
        self.current_user = User(id=credentials.user_id, name=credentials.user_name or "User")
        self.is_authenticated = True
        logger.info(f"Session restauree pour {self.current_user.name} sur {self.server_url}")
        return True

    async def login(self, server_url: str, username: str, password: str) -> User:
        """
        Connecte l'utilisateur et persiste ses identifiants.

        Args:
            server_url: Adresse du serveur (http ou https)
            username: Nom d'utilisateur
            password: Mot de passe

        Returns:
            Utilisateur connecte

        Raises:
            InvalidURLError: Adresse de serveur invalide
            MediaServerError: Echec d'authentification ou de transport
        """
        if not is_valid_server_url(server_url):
            raise InvalidURLError(server_url)
        server_url = normalize_server_url(server_url)

        await self._client.configure(server_url)
        result = await self._client.authenticate(username, password)

        self._store.save_credentials(
            StoredCredentials(
                server_url=server_url,
                access_token=result.access_token,
                user_id=result.user.id,
                user_name=result.user.name,
            )
        )
        self.server_url = server_url
        self.current_user = result.user
        self.logout_reason = None
        self.is_authenticated = True
        logger.info(f"Connecte a {server_url} en tant que {result.user.name}")
        return result.user

    async def logout(self, reason: LogoutReason = LogoutReason.USER_INITIATED) -> None:
        """Efface les identifiants (l'identifiant d'appareil est conserve) et previent les abonnes."""
        self._store.clear_credentials()
        await self._client.clear()
        self.server_url = None
        self.current_user = None
        self.logout_reason = reason
        self.is_authenticated = False
        logger.info(f"Deconnexion ({reason.value})")

        for listener in list(self._listeners):
            await listener(reason)

    def clear_logout_reason(self) -> None:
        self.logout_reason = None

    async def _on_session_expired(self) -> None:
        await self.logout(LogoutReason.SESSION_EXPIRED)

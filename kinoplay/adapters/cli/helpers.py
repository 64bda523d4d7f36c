"""
Utilitaires partages pour les commandes CLI de Kinoplay.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container initialise
- print_error : affichage du message utilisateur d'une erreur
"""

from contextlib import contextmanager
from functools import wraps

from loguru import logger as loguru_logger
from rich.console import Console

from kinoplay.container import Container
from kinoplay.core.errors import ServerHTTPError, user_message

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("kinoplay")
    try:
        yield
    finally:
        loguru_logger.enable("kinoplay")


def with_container(restore_session: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Le client HTTP de la passerelle est ferme a la fin de la commande.

    Args:
        restore_session: Si True (defaut), restaure la session persistee
            avant d'appeler la commande.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            if restore_session:
                await container.session_manager().restore_session()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await container.media_server_client().close()
        return wrapper
    return decorator


def print_error(error: BaseException, during_login: bool = False) -> None:
    """
    Affiche le message utilisateur d'une erreur de la passerelle ou de lecture.

    Args:
        error: Erreur a afficher
        during_login: Un 401/403 pendant la connexion signifie des
            identifiants refuses, pas une session expiree
    """
    if during_login and isinstance(error, ServerHTTPError) and error.status_code in (401, 403):
        message = "Invalid username or password."
    else:
        message = user_message(error)
    console.print(f"[red]Erreur:[/red] {message}")

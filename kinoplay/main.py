"""
Point d'entrée CLI de Kinoplay.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from kinoplay import __version__

from .adapters.cli.commands import home, login, logout, next_item
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="kinoplay",
    help="Client Jellyfin : session, accueil et lecture",
)
container = Container()

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}


def _configure_from_settings(settings: Settings, log_level: str) -> None:
    configure_logging(
        log_level=log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """Kinoplay - Client de serveur multimedia Jellyfin."""
    if quiet:
        state["quiet"] = True
        _configure_from_settings(get_config(), "ERROR")
    elif verbose:
        state["verbose"] = verbose
        _configure_from_settings(get_config(), "DEBUG")


# Monter les commandes
app.command()(login)
app.command()(logout)
app.command()(home)
# Note: "next" masque un builtin Python, donc on utilise name= explicitement
app.command(name="next")(next_item)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle et la session mémorisée."""
    config = get_config()
    credentials = container.state_store().load_credentials()
    logger.info("Configuration Kinoplay")
    typer.echo(f"Serveur : {credentials.server_url or 'non connecté'}")
    typer.echo(f"Utilisateur : {credentials.user_name or '-'}")
    typer.echo(f"Appareil : {container.state_store().get_device_id()}")
    typer.echo(f"État : {config.state_file}")
    typer.echo(f"Cache : {config.api_cache_dir}")
    bitrate = f"{config.max_bitrate // 1_000_000} Mb/s" if config.max_bitrate else "illimité"
    typer.echo(f"Débit maximal : {bitrate}")
    typer.echo(f"Saut auto intro : {'activé' if config.auto_skip_intro else 'désactivé'}")
    typer.echo(f"Saut auto générique : {'activé' if config.auto_skip_credits else 'désactivé'}")
    typer.echo(f"Épisode suivant auto : {'activé' if config.auto_play_next_episode else 'désactivé'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Kinoplay v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    _configure_from_settings(settings, settings.log_level)

    logger.info("Démarrage de Kinoplay", version=__version__)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()

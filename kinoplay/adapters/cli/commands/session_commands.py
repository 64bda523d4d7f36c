"""
Commandes CLI de session : login et logout.
"""

import asyncio
from typing import Annotated

import typer

from kinoplay.adapters.cli.helpers import console, print_error, with_container
from kinoplay.core.errors import MediaServerError


def login(
    server_url: Annotated[
        str,
        typer.Argument(help="Adresse du serveur (ex: https://media.example.com)"),
    ],
    username: Annotated[
        str,
        typer.Option("--username", "-u", help="Nom d'utilisateur"),
    ],
    password: Annotated[
        str,
        typer.Option(
            "--password", "-p",
            prompt=True,
            hide_input=True,
            help="Mot de passe (demande si absent)",
        ),
    ],
) -> None:
    """Se connecte a un serveur et memorise la session."""
    asyncio.run(_login_async(server_url, username, password))


@with_container(restore_session=False)
async def _login_async(container, server_url: str, username: str, password: str) -> None:
    """Implementation async de la commande login."""
    session = container.session_manager()
    try:
        user = await session.login(server_url, username, password)
    except MediaServerError as e:
        print_error(e, during_login=True)
        raise typer.Exit(code=1)

    console.print(
        f"[green]Connecte[/green] a [bold]{session.server_url}[/bold] "
        f"en tant que [cyan]{user.name}[/cyan]"
    )


def logout() -> None:
    """Oublie la session memorisee (l'identifiant d'appareil est conserve)."""
    asyncio.run(_logout_async())


@with_container()
async def _logout_async(container) -> None:
    """Implementation async de la commande logout."""
    session = container.session_manager()
    if not session.is_authenticated:
        console.print("[yellow]Aucune session active.[/yellow]")
        return

    name = session.current_user.name if session.current_user else "?"
    await session.logout()
    console.print(f"[green]Deconnecte[/green] ({name}).")

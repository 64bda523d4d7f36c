"""
Commandes CLI de consultation : ecran d'accueil et element suivant.
"""

import asyncio
from typing import Annotated

import typer
from rich.table import Table

from kinoplay.adapters.cli.helpers import (
    console,
    print_error,
    suppress_loguru,
    with_container,
)
from kinoplay.core.entities import MediaItem
from kinoplay.core.errors import MediaServerError, NotConfiguredError
from kinoplay.services.home import HomeContent
from kinoplay.utils.helpers import format_runtime


def _require_session(container) -> None:
    """Interrompt la commande si aucune session n'est restauree."""
    if not container.session_manager().is_authenticated:
        print_error(NotConfiguredError())
        console.print("[dim]Utilisez 'kinoplay login URL -u USER'.[/dim]")
        raise typer.Exit(code=1)


def _progress_label(item: MediaItem) -> str:
    if item.progress_percent <= 0:
        return "[dim]-[/dim]"
    return f"{item.progress_percent * 100:.0f}%"


def _render_items_table(title: str, items: list[MediaItem], with_progress: bool) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Titre", style="bold")
    table.add_column("Type", style="dim")
    table.add_column("Bibliotheque", style="cyan")
    if with_progress:
        table.add_column("Progression", justify="right")
    table.add_column("Duree", justify="right")
    table.add_column("ID", style="dim")

    for item in items:
        row = [item.display_title, item.kind.value, item.library_name or ""]
        if with_progress:
            row.append(_progress_label(item))
        row.extend([format_runtime(item.run_time_ticks), item.id])
        table.add_row(*row)
    return table


def _render_home(content: HomeContent) -> None:
    if content.continue_watching:
        console.print(_render_items_table("Reprendre la lecture", content.continue_watching, True))
    else:
        console.print("[dim]Rien a reprendre.[/dim]")

    if content.hero_items:
        console.print(_render_items_table("A la une", content.hero_items, False))

    if content.recently_added:
        console.print(_render_items_table("Ajouts recents", content.recently_added, False))

    libraries = Table(title="Bibliotheques")
    libraries.add_column("Nom", style="bold")
    libraries.add_column("Type", style="dim")
    libraries.add_column("ID", style="dim")
    for library in content.libraries:
        libraries.add_row(library.name, library.collection_type or "", library.id)
    console.print(libraries)


def home() -> None:
    """Affiche l'ecran d'accueil : reprise, a la une, ajouts et bibliotheques."""
    asyncio.run(_home_async())


@with_container()
async def _home_async(container) -> None:
    """Implementation async de la commande home."""
    _require_session(container)
    service = container.home_service()

    with suppress_loguru():
        try:
            with console.status("[cyan]Chargement de l'accueil..."):
                content = await service.load_content()
        except MediaServerError as e:
            print_error(e)
            raise typer.Exit(code=1)
        _render_home(content)


def next_item(
    item_id: Annotated[
        str,
        typer.Argument(help="Identifiant de l'element en cours"),
    ],
) -> None:
    """Affiche l'element qui suivrait l'element donne en fin de lecture."""
    asyncio.run(_next_item_async(item_id))


@with_container()
async def _next_item_async(container, item_id: str) -> None:
    """Implementation async de la commande next."""
    _require_session(container)
    client = container.media_server_client()
    resolver = container.next_item_resolver()

    try:
        item = await client.get_item(item_id)
    except MediaServerError as e:
        print_error(e)
        raise typer.Exit(code=1)

    following = await resolver.find_next(item)
    if following is None:
        console.print(f"[yellow]Aucun element apres[/yellow] {item.display_title}.")
        return

    console.print(
        f"{item.display_title} [dim]->[/dim] [bold green]{following.display_title}[/bold green] "
        f"[dim]({following.id})[/dim]"
    )

"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI et pour les
hotes qui embarquent le coeur de lecture (ils fournissent le moteur).
"""

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.jellyfin_client import JellyfinClient
from .adapters.storage.state_store import JsonStateStore
from .config import Settings
from .services.home import HomeService
from .services.playback.controller import PlaybackSessionController
from .services.playback.next_item import NextItemResolver
from .services.playback.preferences import PlaybackPreferences
from .services.session_manager import SessionManager


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        session = container.session_manager()
        await session.restore_session()
        content = await container.home_service().load_content()

    Le moteur de lecture est une dependance fournie par l'hote :
        container.playback_engine.override(providers.Object(engine))
        controller = container.playback_controller()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Etat local - identifiants, identifiant d'appareil, export du fil
    state_store = providers.Singleton(
        JsonStateStore,
        state_file=config.provided.state_file,
        snapshot_file=config.provided.snapshot_file,
    )

    # Cache API - Singleton partage (ancetres)
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.api_cache_dir,
    )

    # Passerelle serveur - Singleton : l'etat de connexion est unique par processus
    media_server_client = providers.Singleton(
        JellyfinClient,
        device_id=state_store.provided.get_device_id.call(),
        cache=api_cache,
        client_name=config.provided.client_name,
        device_name=config.provided.device_name,
        client_version=config.provided.client_version,
        request_timeout=config.provided.request_timeout,
        connect_timeout=config.provided.connect_timeout,
        max_retries=config.provided.max_retries,
        retry_backoff=config.provided.retry_backoff,
    )

    # Session utilisateur - Singleton, seul ecrivain de l'etat de connexion
    session_manager = providers.Singleton(
        SessionManager,
        client=media_server_client,
        store=state_store,
    )

    # Accueil - Factory
    home_service = providers.Factory(
        HomeService,
        client=media_server_client,
        snapshot_store=state_store,
        resume_limit=config.provided.resume_limit,
        next_up_limit=config.provided.next_up_limit,
        latest_limit=config.provided.latest_limit,
        continue_watching_limit=config.provided.continue_watching_limit,
        hero_items_per_library=config.provided.hero_items_per_library,
        shelf_snapshot_limit=config.provided.shelf_snapshot_limit,
    )

    # Lecture
    playback_preferences = providers.Singleton(
        PlaybackPreferences.from_settings,
        settings=config,
    )

    next_item_resolver = providers.Factory(
        NextItemResolver,
        client=media_server_client,
    )

    # Moteur de lecture - fourni par l'hote (override obligatoire avant usage)
    playback_engine = providers.Dependency()

    # Controleur - Singleton : une seule session de lecture active par processus
    playback_controller = providers.Singleton(
        PlaybackSessionController,
        client=media_server_client,
        engine=playback_engine,
        preferences=playback_preferences,
        next_item_resolver=next_item_resolver,
    )

"""
Controleur de session de lecture.

Machine a etats possedant l'unique session de lecture active :

    IDLE -> RESOLVING -> PLAYING -> ENDED -> (NEXT_PROMPT | fin)
    STOPPED atteignable depuis tout etat actif via stop()

Responsabilites : resolution de la source, decision de reprise, rapports de
progression, suivi des segments (saut automatique ou manuel), fin de media
et recherche de l'element suivant. Les appels de telemetrie (rapports,
segments, marquage "vu") sont au mieux : leurs echecs sont journalises et ne
sortent jamais du controleur. Les echecs de resolution sont propages a
l'appelant.
"""

import asyncio
import time
from typing import Any, Callable, Optional

from loguru import logger

from kinoplay.core.entities import (
    SUBTITLES_OFF,
    MediaItem,
    MediaSource,
    PlaybackInfo,
    PlaybackSession,
    PlayerState,
    PlayMethod,
    TrackOption,
)
from kinoplay.core.errors import (
    InvalidURLError,
    MediaServerError,
    NoMediaSourceError,
    NoStreamURLError,
    NotConfiguredError,
    PlaybackEngineError,
    PlaybackError,
)
from kinoplay.core.ports.media_server import IMediaServerClient
from kinoplay.core.ports.playback_engine import IPlaybackEngine
from kinoplay.services.playback.next_item import NextItemResolver
from kinoplay.services.playback.preferences import PlaybackPreferences
from kinoplay.services.playback.segments import SegmentTracker
from kinoplay.utils.helpers import seconds_to_ticks, ticks_to_seconds

StateListener = Callable[[PlayerState], None]


class PlaybackSessionController:
    """
    Pilote une session de lecture contre un moteur abstrait.

    Une seule session existe a la fois : charger un nouveau media arrete
    la session precedente. Chaque chargement porte un numero de generation ;
    un chargement dont la generation est depassee (stop() ou nouveau
    chargement) est abandonne sans effet.

    Attributs:
        state: Etat courant de la machine
        session: Session active (None hors lecture)
        last_error: Derniere erreur fatale du moteur ou de resolution

    Example:
        controller = PlaybackSessionController(client, engine, preferences)
        await controller.load_media(item)
        ...
        await controller.stop()
    """

    def __init__(
        self,
        client: IMediaServerClient,
        engine: IPlaybackEngine,
        preferences: Optional[PlaybackPreferences] = None,
        next_item_resolver: Optional[NextItemResolver] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialise le controleur.

        Args:
            client: Passerelle vers le serveur
            engine: Moteur de lecture fourni par l'hote
            preferences: Preferences de lecture (defauts si absentes)
            next_item_resolver: Recherche de l'element suivant (construite si absente)
            clock: Horloge monotone en secondes (injectable en test)
        """
        self._client = client
        self._engine = engine
        self._preferences = preferences or PlaybackPreferences()
        self._resolver = next_item_resolver or NextItemResolver(client)
        self._clock = clock

        self.state = PlayerState.IDLE
        self.session: Optional[PlaybackSession] = None
        self.last_error: Optional[Exception] = None

        self._generation = 0
        self._progress_task: Optional[asyncio.Task] = None
        self._segment_task: Optional[asyncio.Task] = None
        self._observer_handle: Any = None
        self._tracker = SegmentTracker(
            auto_skip_intro=self._preferences.auto_skip_intro,
            auto_skip_credits=self._preferences.auto_skip_credits,
        )
        self._listeners: list[StateListener] = []
        self.selected_audio_track: Optional[TrackOption] = None
        self.selected_subtitle_track: Optional[TrackOption] = None

    # Etat

    def add_state_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _set_state(self, state: PlayerState) -> None:
        if state == self.state:
            return
        logger.debug(f"Lecture: {self.state.value} -> {state.value}")
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    @property
    def segment_tracker(self) -> SegmentTracker:
        return self._tracker

    @property
    def showing_skip_button(self) -> bool:
        return self.state == PlayerState.PLAYING and self._tracker.showing_skip_button

    @property
    def next_item(self) -> Optional[MediaItem]:
        return self.session.next_item if self.session else None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    # Chargement

    async def load_media(
        self,
        item: MediaItem,
        start_from_beginning: bool = False,
    ) -> Optional[PlaybackSession]:
        """
        Charge et demarre la lecture d'un element.

        L'element est recharge depuis le serveur pour obtenir la derniere
        position sauvegardee. Au-dela du seuil de reprise, la lecture reprend
        automatiquement a cette position ; sinon elle part de zero.

        Args:
            item: Element a lire (eventuellement perime)
            start_from_beginning: Ignore la position sauvegardee

        Returns:
            La session creee, ou None si le chargement a ete abandonne

        Raises:
            NoMediaSourceError: Le serveur ne renvoie aucune source
            NoStreamURLError: Aucune URL de flux exploitable
            MediaServerError: Echec de la passerelle pendant la resolution
        """
        if self.state not in (PlayerState.IDLE, PlayerState.STOPPED):
            await self.stop()

        self._generation += 1
        generation = self._generation
        self.last_error = None
        self.session = None
        self._set_state(PlayerState.RESOLVING)
        logger.info(f"Chargement de {item.display_title} ({item.id})")

        try:
            fresh = await self._client.get_item(item.id)
            if not self._is_current(generation):
                return None

            info = await self._client.get_playback_info(
                fresh.id,
                max_bitrate=self._preferences.max_bitrate,
                force_direct_play=self._preferences.force_direct_play,
            )
            if not self._is_current(generation):
                return None

            source, stream_url, play_method = self._resolve_stream(fresh, info)
            try:
                await self._engine.load(stream_url)
            except PlaybackError:
                raise
            except Exception as e:
                raise PlaybackEngineError(str(e) or PlaybackEngineError.default_message) from e
            if not self._is_current(generation):
                await self._release_if_unowned()
                return None

            saved_ticks = 0 if start_from_beginning else fresh.resume_position_ticks
            start_ticks = saved_ticks if saved_ticks > self._preferences.resume_threshold_ticks else 0
            if start_ticks:
                await self._engine.seek(ticks_to_seconds(start_ticks))
                if not self._is_current(generation):
                    await self._release_if_unowned()
                    return None
        except asyncio.CancelledError:
            if self._is_current(generation):
                self._set_state(PlayerState.IDLE)
            raise
        except (MediaServerError, PlaybackError) as e:
            if self._is_current(generation):
                self.last_error = e
                self._set_state(PlayerState.IDLE)
            logger.warning(f"Resolution de la lecture impossible pour {item.id}: {e}")
            raise

        session = PlaybackSession(
            item=fresh,
            source=source,
            stream_url=stream_url,
            play_method=play_method,
            play_session_id=info.play_session_id,
            started_at=self._clock(),
            resume_position_ticks=start_ticks,
            last_position_ticks=start_ticks,
        )
        if not await self._enter_playing(session, generation):
            return None
        return session

    def _resolve_stream(
        self, item: MediaItem, info: PlaybackInfo
    ) -> tuple[MediaSource, str, PlayMethod]:
        """
        Choisit la source et l'URL : transcodage, puis flux direct, puis
        fichier statique.
        """
        if not info.media_sources:
            raise NoMediaSourceError()
        source = info.media_sources[0]

        try:
            if source.transcoding_url:
                url = self._client.build_url(source.transcoding_url)
                method = PlayMethod.TRANSCODE
            elif source.direct_stream_url:
                url = self._client.build_url(source.direct_stream_url)
                method = PlayMethod.DIRECT_STREAM
            else:
                url = self._client.get_static_stream_url(item.id, source.id, source.container)
                method = PlayMethod.DIRECT_PLAY
        except (InvalidURLError, NotConfiguredError) as e:
            raise NoStreamURLError() from e

        if not url:
            raise NoStreamURLError()
        logger.debug(f"Flux retenu ({method.value}): {url}")
        return source, url, method

    async def _release_if_unowned(self) -> None:
        # Un chargement abandonne ne libere le moteur que si personne d'autre ne l'utilise
        if self.state in (PlayerState.IDLE, PlayerState.STOPPED):
            await self._engine.release()

    async def _enter_playing(self, session: PlaybackSession, generation: int) -> bool:
        self.session = session
        self._tracker.set_segments([])
        self._set_state(PlayerState.PLAYING)

        self._engine.on_reached_end(self._handle_reached_end)
        self._engine.on_error(self._handle_engine_error)

        await self._report_start(session)
        # stop() ou nouveau chargement pendant le rapport de demarrage
        if not self._is_current(generation) or self.session is not session:
            return False

        self._progress_task = asyncio.create_task(self._progress_loop(session, generation))
        self._observer_handle = self._engine.add_position_observer(
            self._preferences.segment_poll_interval, self._on_position
        )
        self._segment_task = asyncio.create_task(self._load_segments(session, generation))
        self._apply_preferred_tracks()
        self._engine.play()
        logger.info(
            f"Lecture de {session.item.display_title} a "
            f"{ticks_to_seconds(session.resume_position_ticks):.0f}s ({session.play_method.value})"
        )
        return True

    # Taches de fond

    async def _progress_loop(self, session: PlaybackSession, generation: int) -> None:
        interval = self._preferences.progress_report_interval
        while self._is_current(generation) and self.state == PlayerState.PLAYING:
            await asyncio.sleep(interval)
            if not self._is_current(generation) or self.state != PlayerState.PLAYING:
                return
            await self.report_progress(session)

    async def report_progress(self, session: Optional[PlaybackSession] = None) -> None:
        """Envoie la position courante au serveur (au mieux)."""
        session = session or self.session
        if session is None:
            return
        position = seconds_to_ticks(self._engine.current_position())
        session.last_position_ticks = position
        try:
            await self._client.report_playback_progress(
                session.item.id,
                position,
                is_paused=self._engine.is_paused,
                play_method=session.play_method,
                play_session_id=session.play_session_id,
                media_source_id=session.source.id,
            )
        except MediaServerError as e:
            logger.debug(f"Rapport de progression ignore: {e}")

    async def _load_segments(self, session: PlaybackSession, generation: int) -> None:
        try:
            segments = await self._client.get_segments(session.item.id)
        except MediaServerError as e:
            logger.debug(f"Segments indisponibles pour {session.item.id}: {e}")
            return
        if self._is_current(generation) and self.session is session:
            self._tracker.set_segments(segments)
            logger.debug(f"{len(segments)} segment(s) pour {session.item.id}")

    async def _on_position(self, position_seconds: float) -> None:
        session = self.session
        if self.state != PlayerState.PLAYING or session is None:
            return
        session.last_position_ticks = seconds_to_ticks(position_seconds)
        target = self._tracker.update(position_seconds)
        if target is not None:
            logger.info(f"Saut automatique: {self._tracker.current.type.display_name}")
            await self._engine.seek(target)

    def _cancel_background(self) -> None:
        for task in (self._progress_task, self._segment_task):
            if task is not None and not task.done():
                task.cancel()
        self._progress_task = None
        self._segment_task = None
        if self._observer_handle is not None:
            self._engine.remove_position_observer(self._observer_handle)
            self._observer_handle = None
        self._engine.on_reached_end(None)
        self._engine.on_error(None)
        self._tracker.reset()

    # Segments

    async def skip_current_segment(self) -> bool:
        """
        Saute le segment actif (bouton "Passer").

        Returns:
            True si un saut a eu lieu
        """
        if self.state != PlayerState.PLAYING:
            return False
        target = self._tracker.dismiss()
        if target is None:
            return False
        await self._engine.seek(target)
        return True

    # Fin de media

    async def _handle_reached_end(self) -> None:
        session = self.session
        if self.state != PlayerState.PLAYING or session is None:
            return

        self._cancel_background()
        self._set_state(PlayerState.ENDED)

        final_ticks = session.item.run_time_ticks
        if not final_ticks:
            duration = self._engine.duration()
            final_ticks = seconds_to_ticks(duration) if duration else session.last_position_ticks
        await self._report_stopped(session, final_ticks)

        try:
            await self._client.mark_played(session.item.id)
        except MediaServerError as e:
            logger.debug(f"Marquage comme vu ignore: {e}")
        if self.state != PlayerState.ENDED or self.session is not session:
            return

        next_item = await self._resolver.find_next(session.item)
        if self.state != PlayerState.ENDED or self.session is not session:
            return

        if next_item is None:
            logger.info(f"Fin de {session.item.display_title}, pas d'element suivant")
            await self._engine.release()
            return

        session.next_item = next_item
        self._set_state(PlayerState.NEXT_PROMPT)
        logger.info(f"Element suivant: {next_item.display_title}")
        if self._preferences.auto_play_next_episode:
            try:
                await self.play_next()
            except (MediaServerError, PlaybackError) as e:
                logger.warning(f"Enchainement impossible: {e}")

    async def play_next(self) -> Optional[PlaybackSession]:
        """Lance l'element suivant propose (etat NEXT_PROMPT uniquement)."""
        if self.state != PlayerState.NEXT_PROMPT or self.session is None:
            return None
        next_item = self.session.next_item
        if next_item is None:
            return None
        return await self.load_media(next_item)

    # Arret

    def _stop_position(self, session: PlaybackSession) -> int:
        """
        Position rapportee a l'arret manuel.

        Protection contre les sorties rapides : si la session a demarre d'une
        position de reprise il y a moins de quick_exit_seconds, cette position
        est conservee. La position est ensuite plafonnee a
        manual_stop_cap_percent de la duree.
        """
        head = seconds_to_ticks(self._engine.current_position())
        elapsed = self._clock() - session.started_at
        if elapsed < self._preferences.quick_exit_seconds and session.resume_position_ticks > 0:
            position = session.resume_position_ticks
        else:
            position = head

        run_time = session.item.run_time_ticks
        if run_time:
            cap = run_time * self._preferences.manual_stop_cap_percent // 100
            position = min(position, cap)
        return position

    async def stop(self) -> None:
        """
        Arrete la session courante.

        RESOLVING : le chargement en cours est abandonne, sans rapport.
        PLAYING : rapport d'arret (protection + plafond) puis liberation.
        ENDED / NEXT_PROMPT : liberation du moteur uniquement.
        """
        state = self.state
        if state in (PlayerState.IDLE, PlayerState.STOPPED):
            return

        self._generation += 1
        if state == PlayerState.RESOLVING:
            self._set_state(PlayerState.STOPPED)
            return

        session = self.session
        self._cancel_background()
        if state == PlayerState.PLAYING and session is not None:
            position = self._stop_position(session)
            await self._report_stopped(session, position)

        await self._engine.release()
        self.session = None
        self._set_state(PlayerState.STOPPED)

    async def _handle_engine_error(self, error: Exception) -> None:
        if self.state not in (PlayerState.PLAYING, PlayerState.RESOLVING):
            return
        if isinstance(error, PlaybackError):
            self.last_error = error
        else:
            self.last_error = PlaybackEngineError(str(error) or PlaybackEngineError.default_message)
        logger.error(f"Erreur fatale du moteur de lecture: {error}")
        await self.stop()

    # Rapports

    async def _report_start(self, session: PlaybackSession) -> None:
        try:
            await self._client.report_playback_start(
                session.item.id,
                session.resume_position_ticks,
                play_method=session.play_method,
                play_session_id=session.play_session_id,
                media_source_id=session.source.id,
            )
        except MediaServerError as e:
            logger.debug(f"Rapport de demarrage ignore: {e}")

    async def _report_stopped(self, session: PlaybackSession, position_ticks: int) -> None:
        try:
            await self._client.report_playback_stopped(
                session.item.id,
                position_ticks,
                play_session_id=session.play_session_id,
                media_source_id=session.source.id,
            )
        except MediaServerError as e:
            logger.debug(f"Rapport d'arret ignore: {e}")

    # Pistes

    def audio_tracks(self) -> list[TrackOption]:
        return self._engine.audio_tracks()

    def subtitle_tracks(self) -> list[TrackOption]:
        """Pistes de sous-titres, precedees de l'option "Off"."""
        return [SUBTITLES_OFF] + self._engine.subtitle_tracks()

    def select_audio_track(self, track: TrackOption) -> None:
        self._engine.select_audio_track(track.index)
        self.selected_audio_track = track

    def select_subtitle_track(self, track: Optional[TrackOption]) -> None:
        if track is None or track.is_off_option:
            self._engine.select_subtitle_track(None)
            self.selected_subtitle_track = SUBTITLES_OFF
            return
        self._engine.select_subtitle_track(track.index)
        self.selected_subtitle_track = track

    def _apply_preferred_tracks(self) -> None:
        prefs = self._preferences
        if prefs.preferred_audio_language:
            track = _match_language(self._engine.audio_tracks(), prefs.preferred_audio_language)
            if track is not None:
                self.select_audio_track(track)

        if not prefs.subtitles_enabled:
            self.select_subtitle_track(None)
        elif prefs.preferred_subtitle_language:
            track = _match_language(self._engine.subtitle_tracks(), prefs.preferred_subtitle_language)
            if track is not None:
                self.select_subtitle_track(track)


def _match_language(tracks: list[TrackOption], language: str) -> Optional[TrackOption]:
    """Premiere piste dont le code langue correspond (prefixe, insensible a la casse)."""
    wanted = language.lower()
    for track in tracks:
        code = (track.language_code or "").lower()
        if code and (code == wanted or code.startswith(wanted) or wanted.startswith(code)):
            return track
    return None

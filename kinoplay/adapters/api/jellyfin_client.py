"""
Client HTTP pour les serveurs multimedia Jellyfin / Emby.

Implemente IMediaServerClient : authentification, catalogue, resolution de
lecture, rapports de progression, etat utilisateur et segments nommes.
Gere l'en-tete d'autorisation MediaBrowser, les relances sur erreur
transitoire, la deconnexion globale sur 401/403 et le cache des ancetres.

Reference API: https://api.jellyfin.org
"""

import asyncio
from typing import Any, Optional
from urllib.parse import quote, urlencode

import httpx
from loguru import logger

from kinoplay import __version__
from kinoplay.adapters.api.cache import APICache
from kinoplay.adapters.api.retry import TransientServerError, request_with_retry
from kinoplay.core.entities import (
    AuthenticationResult,
    ItemKind,
    Library,
    MediaItem,
    MediaSource,
    MediaStream,
    PlaybackInfo,
    PlayMethod,
    Segment,
    SegmentType,
    User,
    UserData,
)
from kinoplay.core.errors import (
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NotConfiguredError,
    ServerHTTPError,
    SessionExpiredError,
)
from kinoplay.core.ports.media_server import IMediaServerClient, SessionExpiredHandler
from kinoplay.utils.constants import IMAGE_TYPES, ITEM_FIELDS
from kinoplay.utils.helpers import normalize_server_url


class JellyfinClient(IMediaServerClient):
    """
    Passerelle vers un serveur Jellyfin.

    L'etat de connexion (adresse, jeton, utilisateur) est ecrit uniquement par
    configure() / clear() et lu par chaque requete sous un verrou asyncio.

    Example:
        cache = APICache(cache_dir=".cache/kinoplay")
        client = JellyfinClient(device_id="abc", cache=cache)
        await client.configure("https://media.example.com")
        auth = await client.authenticate("alice", "secret")
        items = await client.get_resume_items()
        await client.close()
    """

    def __init__(
        self,
        device_id: str,
        cache: Optional[APICache] = None,
        client_name: str = "Kinoplay",
        device_name: str = "Kinoplay CLI",
        client_version: str = __version__,
        request_timeout: float = 30.0,
        connect_timeout: float = 10.0,
        max_retries: int = 3,
        retry_backoff: float = 1.0,
    ) -> None:
        """
        Initialise le client.

        Args:
            device_id: Identifiant stable de l'installation
            cache: Cache disque pour les requetes d'ancetres (optionnel)
            client_name / device_name / client_version: Valeurs de l'en-tete MediaBrowser
            request_timeout: Timeout global d'une requete en secondes
            connect_timeout: Timeout de connexion en secondes
            max_retries: Relances apres la premiere tentative sur erreur transitoire
            retry_backoff: Delai de base du backoff exponentiel en secondes
        """
        self._device_id = device_id
        self._cache = cache
        self._client_name = client_name
        self._device_name = device_name
        self._client_version = client_version
        self._timeout = httpx.Timeout(request_timeout, connect=connect_timeout)
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff

        self._lock = asyncio.Lock()
        self._server_url: Optional[str] = None
        self._access_token: Optional[str] = None
        self._user_id: Optional[str] = None
        self._session_expired_handler: Optional[SessionExpiredHandler] = None
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, cree s'il n'existe pas.

        Utilise un client unique pour beneficier du connection pooling.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    # Etat de connexion

    async def configure(
        self,
        server_url: str,
        access_token: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> None:
        async with self._lock:
            self._server_url = normalize_server_url(server_url)
            self._access_token = access_token
            self._user_id = user_id
        logger.debug(f"Serveur configure: {self._server_url}")

    async def clear(self) -> None:
        async with self._lock:
            self._server_url = None
            self._access_token = None
            self._user_id = None

    @property
    def is_configured(self) -> bool:
        return bool(self._server_url and self._access_token and self._user_id)

    @property
    def server_url(self) -> Optional[str]:
        return self._server_url

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def device_id(self) -> str:
        return self._device_id

    def set_session_expired_handler(self, handler: Optional[SessionExpiredHandler]) -> None:
        self._session_expired_handler = handler

    def _authorization_header(self, token: Optional[str]) -> str:
        parts = [
            f'MediaBrowser Client="{self._client_name}"',
            f'Device="{self._device_name}"',
            f'DeviceId="{self._device_id}"',
            f'Version="{self._client_version}"',
        ]
        if token:
            parts.append(f'Token="{token}"')
        return ", ".join(parts)

    async def _snapshot(self) -> tuple[Optional[str], Optional[str], Optional[str]]:
        async with self._lock:
            return self._server_url, self._access_token, self._user_id

    async def _require_user(self) -> str:
        _, _, user_id = await self._snapshot()
        if not user_id:
            raise NotConfiguredError()
        return user_id

    # Requete unifiee

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        notify_expired: bool = True,
    ) -> httpx.Response:
        """
        Execute une requete vers le serveur configure.

        Les 5xx et echecs de transport sont relances (backoff exponentiel).
        Les 401/403 declenchent le gestionnaire de session expiree puis
        levent SessionExpiredError. Les autres statuts en echec levent
        ServerHTTPError sans relance.

        Raises:
            NotConfiguredError: Aucun serveur configure
            InvalidURLError: URL non constructible
            SessionExpiredError: 401/403
            ServerHTTPError: Statut en echec (5xx apres relances)
            NetworkError: Transport en echec apres relances
        """
        server_url, token, _ = await self._snapshot()
        if not server_url:
            raise NotConfiguredError()

        url = server_url + (path if path.startswith("/") else f"/{path}")
        headers = {
            "Authorization": self._authorization_header(token),
            "Accept": "application/json",
        }
        client = await self._get_client()

        try:
            response = await request_with_retry(
                client,
                method,
                url,
                max_retries=self._max_retries,
                backoff=self._retry_backoff,
                params=params,
                json=json,
                headers=headers,
            )
        except TransientServerError as e:
            logger.warning(f"{method} {path}: erreur serveur {e.status_code} apres relances")
            raise ServerHTTPError(e.status_code) from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {path}: erreur reseau apres relances: {e}")
            raise NetworkError(e) from e
        except httpx.InvalidURL as e:
            raise InvalidURLError(url) from e

        status = response.status_code
        if status in (401, 403):
            if not notify_expired:
                raise ServerHTTPError(status)
            logger.warning(f"{method} {path}: session expiree (HTTP {status})")
            if self._session_expired_handler is not None:
                await self._session_expired_handler()
            raise SessionExpiredError(status)
        if not 200 <= status < 300:
            raise ServerHTTPError(status)
        return response

    async def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        response = await self._request("GET", path, params=params)
        return _decode_json(response)

    # Authentification

    async def authenticate(self, username: str, password: str) -> AuthenticationResult:
        """
        Authentifie l'utilisateur et memorise le jeton obtenu.

        Un 401/403 ici signifie des identifiants refuses : il n'est pas
        traite comme une expiration de session.
        """
        response = await self._request(
            "POST",
            "/Users/AuthenticateByName",
            json={"Username": username, "Pw": password},
            notify_expired=False,
        )
        data = _decode_json(response)
        try:
            user_data = data["User"]
            user = User(
                id=user_data["Id"],
                name=user_data.get("Name", username),
                server_id=user_data.get("ServerId"),
            )
            result = AuthenticationResult(
                user=user,
                access_token=data["AccessToken"],
                server_id=data.get("ServerId"),
            )
        except (KeyError, TypeError) as e:
            raise InvalidResponseError("Malformed authentication response") from e

        async with self._lock:
            self._access_token = result.access_token
            self._user_id = result.user.id
        logger.info(f"Authentifie en tant que {user.name}")
        return result

    # Catalogue

    async def get_resume_items(self, limit: int = 20) -> list[MediaItem]:
        user_id = await self._require_user()
        data = await self._get_json(
            f"/Users/{user_id}/Items/Resume",
            params={
                "Limit": limit,
                "Fields": ITEM_FIELDS,
                "EnableImageTypes": IMAGE_TYPES,
                "Recursive": "true",
            },
        )
        return _parse_items_response(data)

    async def get_next_up(self, limit: int = 12) -> list[MediaItem]:
        user_id = await self._require_user()
        data = await self._get_json(
            "/Shows/NextUp",
            params={
                "UserId": user_id,
                "Limit": limit,
                "Fields": ITEM_FIELDS,
                "EnableImageTypes": IMAGE_TYPES,
            },
        )
        return _parse_items_response(data)

    async def get_latest(
        self,
        parent_id: Optional[str] = None,
        limit: int = 16,
        include_watched: bool = True,
    ) -> list[MediaItem]:
        user_id = await self._require_user()
        params: dict[str, Any] = {
            "Limit": limit,
            "Fields": ITEM_FIELDS,
            "EnableImageTypes": IMAGE_TYPES,
        }
        if parent_id:
            params["ParentId"] = parent_id
        if not include_watched:
            params["IsPlayed"] = "false"
        data = await self._get_json(f"/Users/{user_id}/Items/Latest", params=params)
        if not isinstance(data, list):
            raise InvalidResponseError("Expected a list of items")
        return [_parse_item(entry) for entry in data]

    async def get_libraries(self) -> list[Library]:
        user_id = await self._require_user()
        data = await self._get_json(f"/Users/{user_id}/Views")
        try:
            return [
                Library(
                    id=entry["Id"],
                    name=entry.get("Name", ""),
                    collection_type=entry.get("CollectionType"),
                )
                for entry in data.get("Items", [])
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidResponseError("Malformed library views") from e

    async def get_item(self, item_id: str) -> MediaItem:
        user_id = await self._require_user()
        data = await self._get_json(
            f"/Users/{user_id}/Items/{item_id}",
            params={"Fields": ITEM_FIELDS, "EnableImageTypes": IMAGE_TYPES},
        )
        return _parse_item(data)

    async def get_items(
        self,
        parent_id: Optional[str] = None,
        include_types: Optional[list[str]] = None,
        sort_by: Optional[str] = "SortName",
        sort_order: Optional[str] = "Ascending",
        limit: Optional[int] = 100,
        start_index: Optional[int] = 0,
    ) -> list[MediaItem]:
        user_id = await self._require_user()
        params: dict[str, Any] = {
            "Recursive": "true",
            "Fields": ITEM_FIELDS,
            "EnableImageTypes": IMAGE_TYPES,
        }
        if sort_by:
            params["SortBy"] = sort_by
        if sort_order:
            params["SortOrder"] = sort_order
        if limit is not None:
            params["Limit"] = limit
        if start_index is not None:
            params["StartIndex"] = start_index
        if parent_id:
            params["ParentId"] = parent_id
        if include_types:
            params["IncludeItemTypes"] = ",".join(include_types)
        data = await self._get_json(f"/Users/{user_id}/Items", params=params)
        return _parse_items_response(data)

    async def get_episodes(self, series_id: str, season_id: Optional[str] = None) -> list[MediaItem]:
        user_id = await self._require_user()
        params: dict[str, Any] = {
            "UserId": user_id,
            "Fields": "Overview,PrimaryImageAspectRatio,UserData",
            "EnableImageTypes": "Primary,Thumb",
        }
        if season_id:
            params["SeasonId"] = season_id
        data = await self._get_json(f"/Shows/{series_id}/Episodes", params=params)
        return _parse_items_response(data)

    async def get_ancestors(self, item_id: str) -> list[MediaItem]:
        """
        Retourne les ancetres d'un element (du plus proche au plus lointain).

        Cache-first : la reponse brute est conservee 24h par utilisateur.
        """
        user_id = await self._require_user()
        cache_key = f"jellyfin:ancestors:{user_id}:{item_id}"
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return [_parse_item(entry) for entry in cached]

        data = await self._get_json(f"/Items/{item_id}/Ancestors", params={"UserId": user_id})
        if not isinstance(data, list):
            raise InvalidResponseError("Expected a list of ancestors")
        ancestors = [_parse_item(entry) for entry in data]

        if self._cache is not None:
            await self._cache.set_ancestors(cache_key, data)
        return ancestors

    async def get_segments(self, item_id: str) -> list[Segment]:
        """
        Retourne les segments nommes publies par le plugin de detection.

        Un 404 (plugin absent ou aucun segment) donne une liste vide.
        """
        try:
            data = await self._get_json(f"/Episode/{item_id}/IntroSkipperSegments")
        except ServerHTTPError as e:
            if e.status_code == 404:
                return []
            raise
        return _parse_segments(data)

    # Lecture

    async def get_playback_info(
        self,
        item_id: str,
        max_bitrate: Optional[int] = None,
        force_direct_play: bool = False,
    ) -> PlaybackInfo:
        user_id = await self._require_user()
        body = {
            "UserId": user_id,
            "DeviceProfile": _device_profile(max_bitrate),
            "EnableDirectPlay": True,
            "EnableDirectStream": not force_direct_play,
            "EnableTranscoding": not force_direct_play,
            "AllowVideoStreamCopy": True,
            "AllowAudioStreamCopy": True,
            "AutoOpenLiveStream": True,
        }
        if max_bitrate:
            body["MaxStreamingBitrate"] = max_bitrate
        response = await self._request(
            "POST",
            f"/Items/{item_id}/PlaybackInfo",
            params={"UserId": user_id},
            json=body,
        )
        data = _decode_json(response)
        try:
            sources = tuple(_parse_media_source(entry) for entry in data.get("MediaSources") or [])
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidResponseError("Malformed playback info") from e
        return PlaybackInfo(media_sources=sources, play_session_id=data.get("PlaySessionId"))

    async def report_playback_start(
        self,
        item_id: str,
        position_ticks: int,
        play_method: PlayMethod = PlayMethod.TRANSCODE,
        play_session_id: Optional[str] = None,
        media_source_id: Optional[str] = None,
    ) -> None:
        body = _report_body(item_id, position_ticks, play_session_id, media_source_id)
        body["IsPaused"] = False
        body["PlayMethod"] = play_method.value
        await self._request("POST", "/Sessions/Playing", json=body)

    async def report_playback_progress(
        self,
        item_id: str,
        position_ticks: int,
        is_paused: bool,
        play_method: PlayMethod = PlayMethod.TRANSCODE,
        play_session_id: Optional[str] = None,
        media_source_id: Optional[str] = None,
    ) -> None:
        body = _report_body(item_id, position_ticks, play_session_id, media_source_id)
        body["IsPaused"] = is_paused
        body["PlayMethod"] = play_method.value
        await self._request("POST", "/Sessions/Playing/Progress", json=body)

    async def report_playback_stopped(
        self,
        item_id: str,
        position_ticks: int,
        play_session_id: Optional[str] = None,
        media_source_id: Optional[str] = None,
    ) -> None:
        body = _report_body(item_id, position_ticks, play_session_id, media_source_id)
        await self._request("POST", "/Sessions/Playing/Stopped", json=body)

    # Etat utilisateur

    async def mark_played(self, item_id: str) -> None:
        user_id = await self._require_user()
        await self._request("POST", f"/Users/{user_id}/PlayedItems/{item_id}")

    async def mark_unplayed(self, item_id: str) -> None:
        user_id = await self._require_user()
        await self._request("DELETE", f"/Users/{user_id}/PlayedItems/{item_id}")

    async def mark_favorite(self, item_id: str) -> None:
        user_id = await self._require_user()
        await self._request("POST", f"/Users/{user_id}/FavoriteItems/{item_id}")

    async def remove_favorite(self, item_id: str) -> None:
        user_id = await self._require_user()
        await self._request("DELETE", f"/Users/{user_id}/FavoriteItems/{item_id}")

    # URLs

    def _require_server(self) -> str:
        if not self._server_url:
            raise NotConfiguredError()
        return self._server_url

    def build_url(self, path: str) -> str:
        """
        Resout un chemin relatif (ex: TranscodingUrl) en URL absolue.

        Le jeton est ajoute en parametre api_key s'il n'y figure pas deja,
        pour que le moteur de lecture puisse ouvrir l'URL sans en-tete.
        """
        server_url = self._require_server()
        if not path:
            raise InvalidURLError(path)
        if path.startswith(("http://", "https://")):
            url = path
        else:
            url = server_url + (path if path.startswith("/") else f"/{path}")
        if self._access_token and "api_key=" not in url:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}api_key={quote(self._access_token)}"
        return url

    def get_static_stream_url(self, item_id: str, media_source_id: str, container: Optional[str] = None) -> str:
        server_url = self._require_server()
        if not self._access_token:
            raise NotConfiguredError()
        extension = container or "mp4"
        query = urlencode({
            "Static": "true",
            "MediaSourceId": media_source_id,
            "Container": extension,
            "api_key": self._access_token,
            "DeviceId": self._device_id,
        })
        return f"{server_url}/Videos/{item_id}/stream.{extension}?{query}"

    def image_url(self, item_id: str, image_type: str = "Primary", max_width: Optional[int] = 400) -> str:
        server_url = self._require_server()
        url = f"{server_url}/Items/{item_id}/Images/{image_type}"
        if max_width:
            url = f"{url}?maxWidth={max_width}"
        return url

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Decodage des reponses


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise InvalidResponseError("Response body is not valid JSON") from e


def _parse_items_response(data: Any) -> list[MediaItem]:
    if not isinstance(data, dict):
        raise InvalidResponseError("Expected an items response")
    return [_parse_item(entry) for entry in data.get("Items") or []]


def _parse_item(data: Any) -> MediaItem:
    """
    Convertit un BaseItemDto du serveur en MediaItem.

    Raises:
        InvalidResponseError: Si l'identifiant est absent ou le format inattendu
    """
    try:
        user_data = data.get("UserData") or {}
        image_tags = data.get("ImageTags") or {}
        return MediaItem(
            id=data["Id"],
            name=data.get("Name") or "",
            kind=ItemKind.from_api(data.get("Type")),
            series_id=data.get("SeriesId"),
            series_name=data.get("SeriesName"),
            season_id=data.get("SeasonId"),
            parent_id=data.get("ParentId"),
            index_number=data.get("IndexNumber"),
            parent_index_number=data.get("ParentIndexNumber"),
            run_time_ticks=data.get("RunTimeTicks"),
            user_data=UserData(
                playback_position_ticks=user_data.get("PlaybackPositionTicks") or 0,
                play_count=user_data.get("PlayCount") or 0,
                is_favorite=bool(user_data.get("IsFavorite", False)),
                played=bool(user_data.get("Played", False)),
                last_played_date=user_data.get("LastPlayedDate"),
            ),
            has_primary_image="Primary" in image_tags,
            backdrop_image_tags=tuple(data.get("BackdropImageTags") or ()),
            parent_backdrop_image_tags=tuple(data.get("ParentBackdropImageTags") or ()),
            overview=data.get("Overview"),
            production_year=data.get("ProductionYear"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise InvalidResponseError("Malformed item") from e


def _parse_media_source(data: dict) -> MediaSource:
    streams = tuple(
        MediaStream(
            type=stream.get("Type"),
            codec=stream.get("Codec"),
            language=stream.get("Language"),
            display_title=stream.get("DisplayTitle") or stream.get("Title"),
            height=stream.get("Height"),
            width=stream.get("Width"),
            channels=stream.get("Channels"),
            index=stream.get("Index"),
            is_default=bool(stream.get("IsDefault", False)),
            is_external=bool(stream.get("IsExternal", False)),
        )
        for stream in data.get("MediaStreams") or []
    )
    return MediaSource(
        id=data["Id"],
        container=data.get("Container"),
        path=data.get("Path"),
        supports_direct_play=bool(data.get("SupportsDirectPlay", False)),
        supports_direct_stream=bool(data.get("SupportsDirectStream", False)),
        supports_transcoding=bool(data.get("SupportsTranscoding", False)),
        transcoding_url=data.get("TranscodingUrl"),
        direct_stream_url=data.get("DirectStreamUrl"),
        streams=streams,
    )


def _parse_segments(data: Any) -> list[Segment]:
    """Convertit la table type -> {Start, End} en segments tries par debut."""
    if not data:
        return []
    if not isinstance(data, dict):
        raise InvalidResponseError("Expected a segment map")
    segments = []
    for raw_type, bounds in data.items():
        try:
            start = float(bounds["Start"])
            end = float(bounds["End"])
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Segment ignore (bornes illisibles): {raw_type}")
            continue
        if end <= start:
            continue
        segments.append(Segment(type=SegmentType.from_api(raw_type), start_seconds=start, end_seconds=end))
    return sorted(segments, key=lambda s: s.start_seconds)


def _report_body(
    item_id: str,
    position_ticks: int,
    play_session_id: Optional[str],
    media_source_id: Optional[str],
) -> dict[str, Any]:
    body: dict[str, Any] = {"ItemId": item_id, "PositionTicks": int(position_ticks)}
    if play_session_id:
        body["PlaySessionId"] = play_session_id
    if media_source_id:
        body["MediaSourceId"] = media_source_id
    return body


def _device_profile(max_bitrate: Optional[int]) -> dict[str, Any]:
    """Profil d'appareil envoye a la negociation (conteneurs et codecs acceptes)."""
    return {
        "MaxStreamingBitrate": max_bitrate or 120_000_000,
        "MaxStaticBitrate": 100_000_000,
        "MusicStreamingTranscodingBitrate": 384_000,
        "DirectPlayProfiles": [
            {"Container": "mp4,m4v", "Type": "Video", "VideoCodec": "h264,hevc", "AudioCodec": "aac,ac3,eac3"},
            {"Container": "mov", "Type": "Video", "VideoCodec": "h264,hevc", "AudioCodec": "aac,ac3,eac3"},
        ],
        "TranscodingProfiles": [
            {
                "Container": "ts",
                "Type": "Video",
                "VideoCodec": "h264",
                "AudioCodec": "aac,ac3",
                "Protocol": "hls",
                "Context": "Streaming",
                "MaxAudioChannels": "6",
                "MinSegments": "2",
                "BreakOnNonKeyFrames": True,
            }
        ],
        "ContainerProfiles": [],
        "CodecProfiles": [],
        "SubtitleProfiles": [
            {"Format": "vtt", "Method": "External"},
            {"Format": "srt", "Method": "External"},
        ],
    }

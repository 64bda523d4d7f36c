"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe KINOPLAY_,
et peut optionnellement être fournie via un fichier .env.

Les identifiants de connexion ne sont pas ici : ils sont persistés par le
stockage d'état (voir adapters/storage) après un `kinoplay login`.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kinoplay import __version__

# Trouver le fichier .env à la racine du projet (parent de kinoplay/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe KINOPLAY_.
    Exemple : KINOPLAY_AUTO_SKIP_INTRO=true

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="KINOPLAY_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Chemins (avec expansion ~)
    state_dir: Path = Field(default=Path("~/.config/kinoplay"))
    cache_dir: Path = Field(default=Path("~/.cache/kinoplay"))

    # Identité du client (en-tête MediaBrowser)
    client_name: str = Field(default="Kinoplay")
    device_name: str = Field(default="Kinoplay CLI")
    client_version: str = Field(default=__version__)

    # Réseau
    request_timeout: float = Field(default=30.0, gt=0)
    connect_timeout: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    retry_backoff: float = Field(default=1.0, ge=0)

    # Accueil
    resume_limit: int = Field(default=20, ge=1)
    next_up_limit: int = Field(default=12, ge=1)
    latest_limit: int = Field(default=16, ge=1)
    continue_watching_limit: int = Field(default=20, ge=1)
    hero_items_per_library: int = Field(default=5, ge=1)
    shelf_snapshot_limit: int = Field(default=10, ge=0)

    # Préférences de lecture
    resume_threshold_seconds: float = Field(default=30.0, ge=0)
    auto_play_next_episode: bool = Field(default=True)
    auto_skip_intro: bool = Field(default=False)
    auto_skip_credits: bool = Field(default=False)
    max_bitrate: Optional[int] = Field(default=20_000_000)
    force_direct_play: bool = Field(default=False)
    preferred_audio_language: Optional[str] = Field(default=None)
    preferred_subtitle_language: Optional[str] = Field(default=None)
    subtitles_enabled: bool = Field(default=False)

    # Contrôleur de lecture
    progress_report_interval: float = Field(default=5.0, gt=0)
    segment_poll_interval: float = Field(default=0.5, gt=0)
    quick_exit_seconds: float = Field(default=10.0, ge=0)
    manual_stop_cap_percent: int = Field(default=90, ge=1, le=100)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("~/.cache/kinoplay/logs/kinoplay.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("state_dir", "cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("max_bitrate", mode="before")
    @classmethod
    def zero_means_unlimited(cls, v):
        """Un débit maximal de 0 (ou vide) signifie « pas de plafond »."""
        if v in (0, "0", ""):
            return None
        return v

    @property
    def state_file(self) -> Path:
        """Fichier des identifiants et de l'identifiant d'appareil."""
        return self.state_dir / "state.json"

    @property
    def snapshot_file(self) -> Path:
        """Export du fil « Reprendre la lecture »."""
        return self.state_dir / "continue_watching.json"

    @property
    def api_cache_dir(self) -> str:
        """Répertoire du cache diskcache des réponses serveur."""
        return str(self.cache_dir / "api")

"""Preferences de lecture de l'utilisateur et reglages du controleur."""

from dataclasses import dataclass
from typing import Optional

from kinoplay.utils.helpers import seconds_to_ticks


@dataclass(frozen=True)
class PlaybackPreferences:
    """
    Reglages lus par le controleur de session de lecture.

    Attributs:
        resume_threshold_seconds: En dessous (ou egal), la lecture repart de zero
        auto_play_next_episode: Enchaine l'element suivant sans confirmation
        auto_skip_intro: Saute automatiquement intros et recaps
        auto_skip_credits: Saute automatiquement generiques et apercus
        max_bitrate: Plafond de debit demande au serveur (None = aucun)
        force_direct_play: Interdit le transcodage et le flux direct
        preferred_audio_language: Code langue de la piste audio preferee
        preferred_subtitle_language: Code langue des sous-titres preferes
        subtitles_enabled: Active les sous-titres au demarrage
        progress_report_interval: Periode des rapports de progression (s)
        segment_poll_interval: Periode d'observation de la position (s)
        quick_exit_seconds: Fenetre de protection contre les sorties rapides (s)
        manual_stop_cap_percent: Plafond de la position rapportee a l'arret manuel
    """

    resume_threshold_seconds: float = 30.0
    auto_play_next_episode: bool = True
    auto_skip_intro: bool = False
    auto_skip_credits: bool = False
    max_bitrate: Optional[int] = 20_000_000
    force_direct_play: bool = False
    preferred_audio_language: Optional[str] = None
    preferred_subtitle_language: Optional[str] = None
    subtitles_enabled: bool = False
    progress_report_interval: float = 5.0
    segment_poll_interval: float = 0.5
    quick_exit_seconds: float = 10.0
    manual_stop_cap_percent: int = 90

    @property
    def resume_threshold_ticks(self) -> int:
        return seconds_to_ticks(self.resume_threshold_seconds)

    @classmethod
    def from_settings(cls, settings) -> "PlaybackPreferences":
        """Construit les preferences depuis la configuration de l'application."""
        return cls(
            resume_threshold_seconds=settings.resume_threshold_seconds,
            auto_play_next_episode=settings.auto_play_next_episode,
            auto_skip_intro=settings.auto_skip_intro,
            auto_skip_credits=settings.auto_skip_credits,
            max_bitrate=settings.max_bitrate,
            force_direct_play=settings.force_direct_play,
            preferred_audio_language=settings.preferred_audio_language,
            preferred_subtitle_language=settings.preferred_subtitle_language,
            subtitles_enabled=settings.subtitles_enabled,
            progress_report_interval=settings.progress_report_interval,
            segment_poll_interval=settings.segment_poll_interval,
            quick_exit_seconds=settings.quick_exit_seconds,
            manual_stop_cap_percent=settings.manual_stop_cap_percent,
        )

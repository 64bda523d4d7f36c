"""
Utilitaires partages de Kinoplay.

Exports:
- constants : unites de temps, limites par defaut, types de bibliotheques
- helpers : conversions ticks/secondes, dates ISO-8601, validation d'URL
"""

from kinoplay.utils.helpers import (
    format_runtime,
    is_valid_server_url,
    normalize_server_url,
    parse_iso_datetime,
    seconds_to_ticks,
    ticks_to_seconds,
)

__all__ = [
    "format_runtime",
    "is_valid_server_url",
    "normalize_server_url",
    "parse_iso_datetime",
    "seconds_to_ticks",
    "ticks_to_seconds",
]

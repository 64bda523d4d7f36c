"""
Fonctions utilitaires : conversions ticks/secondes, dates ISO-8601 du serveur
et validation d'adresse de serveur.
"""

import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from kinoplay.utils.constants import TICKS_PER_SECOND

# Fraction .NET sur 7 chiffres (ex: 2024-01-15T10:30:00.1234567Z)
_FRACTION_RE = re.compile(r"\.(\d+)")


def seconds_to_ticks(seconds: float) -> int:
    """Convertit une duree en secondes vers des ticks serveur."""
    return int(round(seconds * TICKS_PER_SECOND))


def ticks_to_seconds(ticks: int) -> float:
    """Convertit des ticks serveur vers des secondes."""
    return ticks / TICKS_PER_SECOND


def format_runtime(ticks: Optional[int]) -> str:
    """Formate une duree en ticks (ex: "2h 30m", "45m"). Chaine vide si inconnue."""
    if not ticks or ticks <= 0:
        return ""
    total_seconds = ticks // TICKS_PER_SECOND
    hours, remainder = divmod(total_seconds, 3600)
    minutes = remainder // 60
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse une date ISO-8601 du serveur, avec ou sans fraction de seconde.

    Accepte le suffixe "Z" ou un decalage explicite. Les fractions a plus de
    6 chiffres (format .NET) sont tronquees a la microseconde. Une date sans
    fuseau est consideree en UTC.

    Args:
        value: Chaine de date (ex: "2024-01-15T10:30:00.123Z")

    Returns:
        datetime avec fuseau UTC, ou None si absente ou illisible
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def is_valid_server_url(url: str) -> bool:
    """Verifie qu'une adresse de serveur est en http(s) avec un hote."""
    if not url:
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme.lower() in ("http", "https") and bool(parsed.hostname)


def normalize_server_url(url: str) -> str:
    """Supprime les espaces et le slash final d'une adresse de serveur."""
    return url.strip().rstrip("/")

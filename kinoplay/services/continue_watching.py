"""
Fusion du fil "Reprendre la lecture".

Combine deux listes triees independamment par le serveur :
- les elements en cours (tries par date de derniere lecture)
- les prochains episodes a voir (tries par activite de la serie, sans date)

Le resultat est un fil unique, du plus recent au plus ancien, avec au plus un
element par serie (les films, sans serie, ne sont jamais dedupliques entre
eux) et plafonne a 20 elements.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from kinoplay.core.entities import MediaItem
from kinoplay.utils.constants import CONTINUE_WATCHING_LIMIT
from kinoplay.utils.helpers import parse_iso_datetime


def parse_last_played(value: Optional[str]) -> Optional[datetime]:
    """
    Parse la date de derniere lecture d'un element.

    Args:
        value: Chaine ISO-8601 (avec ou sans fraction, "Z" ou decalage)

    Returns:
        datetime UTC, ou None si absente ou illisible
    """
    return parse_iso_datetime(value)


def merge_continue_watching(
    resume: list[MediaItem],
    next_up: list[MediaItem],
    limit: int = CONTINUE_WATCHING_LIMIT,
    now: Optional[datetime] = None,
) -> list[MediaItem]:
    """
    Fusionne les elements en cours et les prochains episodes.

    Chaque element en cours recoit sa date de derniere lecture ("maintenant"
    si absente ou illisible). Le n-ieme prochain episode recoit
    "maintenant - n secondes", ce qui conserve l'ordre du serveur. Les deux
    listes sont ensuite fusionnees par deux curseurs (a egalite, l'element en
    cours passe en premier), sans retrier la liste combinee.

    Args:
        resume: Elements en cours, les plus recents d'abord
        next_up: Prochains episodes, series les plus actives d'abord
        limit: Nombre maximum d'elements (defaut: 20)
        now: Instant de reference (defaut: maintenant, UTC)

    Returns:
        Fil dedoublonne par identifiant et par serie, au plus `limit` elements
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    resume_dates = [parse_last_played(item.user_data.last_played_date) or now for item in resume]
    next_up_dates = [now - timedelta(seconds=index) for index in range(len(next_up))]

    merged: list[MediaItem] = []
    seen_ids: set[str] = set()
    seen_series_ids: set[str] = set()
    resume_idx = 0
    next_up_idx = 0

    while len(merged) < limit and (resume_idx < len(resume) or next_up_idx < len(next_up)):
        if resume_idx >= len(resume):
            use_resume = False
        elif next_up_idx >= len(next_up):
            use_resume = True
        else:
            use_resume = resume_dates[resume_idx] >= next_up_dates[next_up_idx]

        if use_resume:
            item = resume[resume_idx]
            resume_idx += 1
        else:
            item = next_up[next_up_idx]
            next_up_idx += 1

        if item.id in seen_ids:
            continue
        if item.series_id:
            if item.series_id in seen_series_ids:
                continue
            seen_series_ids.add(item.series_id)

        seen_ids.add(item.id)
        merged.append(item)

    return merged

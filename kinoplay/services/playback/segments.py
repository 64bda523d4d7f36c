"""
Suivi des segments nommes (intro, generique, recap, apercu) pendant la lecture.
"""

from typing import Optional

from kinoplay.core.entities import Segment


class SegmentTracker:
    """
    Determine le segment actif a partir de la position de lecture.

    Un segment est actif si la position est dans [debut, fin) et que son type
    est proposable au saut (les publicites sont conservees mais jamais
    activees). A l'entree dans un nouveau segment, update() renvoie la
    position cible si le saut automatique de sa categorie est active, sinon
    le bouton de saut est expose.

    Attributs:
        current: Segment actif, None hors segment
        showing_skip_button: Bouton "Passer" a afficher
    """

    def __init__(
        self,
        segments: Optional[list[Segment]] = None,
        auto_skip_intro: bool = False,
        auto_skip_credits: bool = False,
    ) -> None:
        self._segments: list[Segment] = list(segments or [])
        self._auto_skip_intro = auto_skip_intro
        self._auto_skip_credits = auto_skip_credits
        self.current: Optional[Segment] = None
        self.showing_skip_button = False

    @property
    def segments(self) -> list[Segment]:
        return list(self._segments)

    def set_segments(self, segments: list[Segment]) -> None:
        self._segments = list(segments)
        self.reset()

    def reset(self) -> None:
        self.current = None
        self.showing_skip_button = False

    def _should_auto_skip(self, segment: Segment) -> bool:
        if segment.type.is_intro_category:
            return self._auto_skip_intro
        return self._auto_skip_credits

    def update(self, position_seconds: float) -> Optional[float]:
        """
        Met a jour le segment actif pour une position de lecture.

        Args:
            position_seconds: Position de la tete de lecture

        Returns:
            Position cible (fin du segment) si un saut automatique doit avoir lieu
        """
        match = next(
            (s for s in self._segments if s.type.is_skippable and s.contains(position_seconds)),
            None,
        )
        if match is None:
            self.reset()
            return None
        if match == self.current:
            return None

        self.current = match
        if self._should_auto_skip(match):
            self.showing_skip_button = False
            return match.end_seconds
        self.showing_skip_button = True
        return None

    def dismiss(self) -> Optional[float]:
        """Quitte le segment actif (saut manuel) et renvoie sa fin, None hors segment."""
        if self.current is None:
            return None
        target = self.current.end_seconds
        self.showing_skip_button = False
        return target

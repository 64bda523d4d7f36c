"""Stockage local de l'etat (identifiants, appareil, export du fil)."""

from kinoplay.adapters.storage.state_store import JsonStateStore

__all__ = ["JsonStateStore"]

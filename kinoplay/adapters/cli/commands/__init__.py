"""Sous-package CLI commands - re-exporte les commandes publiques."""

from kinoplay.adapters.cli.commands.home_commands import (
    home,
    next_item,
)
from kinoplay.adapters.cli.commands.session_commands import (
    login,
    logout,
)

__all__ = [
    # session
    "login",
    "logout",
    # consultation
    "home",
    "next_item",
]

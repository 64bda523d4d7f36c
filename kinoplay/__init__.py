"""
Kinoplay - Client de serveur multimedia (Jellyfin/Emby).

Ce package fournit le coeur d'un client de serveur multimedia : authentification,
recuperation du catalogue, fil "Reprendre la lecture", rotation d'accueil et
pilotage d'une session de lecture (reprise, rapports de progression, saut
d'intro/generique, episode suivant).

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, erreurs)
- services/ : Couche application (fusion, accueil, session, lecture)
- adapters/ : Couche infrastructure (client HTTP, stockage local, CLI)
"""

__version__ = "0.1.0"

"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites) et la taxonomie
des erreurs. Cette couche n'a AUCUNE dépendance vers l'infrastructure
(adapters, frameworks, HTTP).

Sous-packages :
- entities/ : Entités métier (MediaItem, MediaSource, Segment, PlaybackSession)
- ports/ : Interfaces abstraites (serveur multimédia, moteur de lecture, stockage)
- errors : Erreurs de passerelle et de lecture, messages utilisateur
"""

"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Passerelle HTTP vers le serveur multimédia (httpx, tenacity, diskcache)
- storage/ : État local en JSON (identifiants, appareil, export du fil)
- cli/ : Interface ligne de commande (Typer + Rich)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
Le moteur de lecture est fourni par l'hôte et n'a pas d'adaptateur ici.
"""

"""
Constantes partagees de Kinoplay.

Regroupe les unites de temps du serveur, les limites par defaut des listes
d'accueil et les types de bibliotheques affichees.
"""

# Unite de temps du serveur : 10 000 000 ticks par seconde
TICKS_PER_SECOND = 10_000_000

# Fil "Reprendre la lecture"
CONTINUE_WATCHING_LIMIT = 20
SHELF_SNAPSHOT_LIMIT = 10

# Limites par defaut des requetes d'accueil
RESUME_LIMIT = 20
NEXT_UP_LIMIT = 12
LATEST_LIMIT = 16
HERO_ITEMS_PER_LIBRARY = 5

# Types de collections considerees comme bibliotheques de medias.
# Une bibliotheque sans type est aussi acceptee.
MEDIA_LIBRARY_TYPES = frozenset({"movies", "tvshows", "music", "mixed", "homevideos"})

# Champs demandes au serveur pour les listes d'elements
ITEM_FIELDS = (
    "Overview,PrimaryImageAspectRatio,CommunityRating,OfficialRating,"
    "Genres,Taglines,ParentBackdropImageTags,UserData"
)
IMAGE_TYPES = "Primary,Backdrop,Thumb"

# Largeur des visuels exportes pour le panneau de raccourcis
SHELF_IMAGE_MAX_WIDTH = 1920

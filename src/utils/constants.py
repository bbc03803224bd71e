"""
Constantes globales pour Monynha Fun.

Ce module contient les constantes partagees par le domaine et les adaptateurs:
- Seuil de votes par defaut pour la publication
- Langues supportees
- Tags speciaux reconnus par les filtres rapides
- Categories de reference
- Domaines des plateformes video reconnues
"""

# Seuil applique quand MONYNHA_VOTES_TO_PUBLISH est absent ou invalide
DEFAULT_VOTES_TO_PUBLISH = 10

# Langues supportees (code -> libelle)
SUPPORTED_LANGUAGES = {
    "pt": "Português",
    "en": "English",
    "es": "Español",
    "fr": "Français",
}

DEFAULT_LANGUAGE = "pt"

# Tags speciaux proposes en filtre rapide (ordre d'affichage)
SPECIAL_TAGS = ("biscoito", "viral", "clássico")

# Tag mis en avant avec un rendu dedie
BISCOITO_TAG = "biscoito"

# Categories de reference: slug -> titres localises (pt, en, es, fr)
DEFAULT_CATEGORIES = {
    "educacao": ("Educação", "Education", "Educación", "Éducation"),
    "memes": ("Memes", "Memes", "Memes", "Mèmes"),
    "cultura": ("Cultura", "Culture", "Cultura", "Culture"),
    "receitas": ("Receitas", "Recipes", "Recetas", "Recettes"),
    "musica": ("Música", "Music", "Música", "Musique"),
    "tecnologia": ("Tecnologia", "Technology", "Tecnología", "Technologie"),
}

# YouTube: domaines courts (id dans le chemin) et canoniques (id dans ?v=)
YOUTUBE_SHORT_HOSTS = frozenset({"youtu.be"})
YOUTUBE_CANONICAL_HOSTS = frozenset({"youtube.com"})

YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"
YOUTUBE_THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/mqdefault.jpg"

# Plateforme attribuee a une URL impossible a analyser
EXTERNAL_PLATFORM = "external"

# Mode de stockage des nouvelles soumissions (lien distant, pas d'upload)
REMOTE_STORAGE_MODE = "remote"

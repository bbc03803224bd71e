"""
Couche services (cas d'utilisation).

- video_filter : filtrage par facettes, pur et sans effet de bord
- vote_threshold : progression vers le seuil de publication
- submission : normalisation d'URL et soumission de videos
- vote_ledger : votes de l'utilisateur courant
- catalog : orchestration de l'etat client (chargement, votes, soumissions)

Les services dependent des ports (core/ports), jamais des adaptateurs.
"""

"""
Exceptions du domaine Monynha Fun.

Toutes les erreurs sont recuperables a la frontiere de l'interface:
aucune n'est fatale pour le client en cours d'execution.
"""

from typing import Optional


class MonynhaError(Exception):
    """Erreur de base de l'application."""


class StoreError(MonynhaError):
    """
    Echec d'une operation sur le store externe (reseau ou backend).

    Attributs :
        operation : Nom de l'operation en echec (ex: "fetch_videos")
    """

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        self.operation = operation
        super().__init__(message)


class DuplicateVoteError(StoreError):
    """
    Vote refuse par la contrainte d'unicite (video_id, user_id) du store.

    Attributs :
        video_id : Video deja votee
        user_id : Utilisateur ayant deja vote
    """

    def __init__(self, video_id: str, user_id: str) -> None:
        self.video_id = video_id
        self.user_id = user_id
        super().__init__(
            f"L'utilisateur {user_id} a deja vote pour la video {video_id}",
            operation="insert_vote",
        )


class AuthenticationRequiredError(MonynhaError):
    """Action (vote, soumission) tentee sans session utilisateur."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Connexion requise pour l'action: {action}")


class InvalidSubmissionError(MonynhaError):
    """
    Formulaire de soumission invalide.

    Attributs :
        errors : Messages d'erreur par champ
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        details = ", ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(f"Soumission invalide ({details})")

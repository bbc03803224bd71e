"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe MONYNHA_,
et peut optionnellement être fournie via un fichier .env.

Le store distant (Supabase) est optionnel : sans URL ni clé, seul le store local
SQLite est utilisable.
"""

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.services.vote_threshold import parse_threshold
from src.utils.constants import DEFAULT_LANGUAGE, DEFAULT_VOTES_TO_PUBLISH, SUPPORTED_LANGUAGES

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe MONYNHA_.
    Exemple : MONYNHA_VOTES_TO_PUBLISH=5

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="MONYNHA_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Store : "local" (SQLite) ou "supabase" (PostgREST)
    store_backend: Literal["local", "supabase"] = Field(default="local")

    # Base de données locale
    database_url: str = Field(default="sqlite:///data/monynha.db")

    # Supabase (OPTIONNEL - store distant désactivé si non défini)
    supabase_url: Optional[str] = Field(default=None)
    supabase_anon_key: Optional[str] = Field(default=None)

    # Seuil de publication, partagé par le client et le store local
    votes_to_publish: int = Field(default=DEFAULT_VOTES_TO_PUBLISH)

    # Langue par défaut des titres de catégorie
    default_language: str = Field(default=DEFAULT_LANGUAGE)

    # Cache des catégories et tags
    reference_cache_dir: Path = Field(default=Path(".cache/reference"))

    # Session utilisateur (aucune = consultation anonyme)
    user_id: Optional[str] = Field(default=None)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/monynha.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("votes_to_publish", mode="before")
    @classmethod
    def parse_votes_to_publish(cls, v: Any) -> int:
        """Valeur absente, non numérique ou <= 0 : seuil par défaut (10)."""
        return parse_threshold(v)

    @field_validator("default_language", mode="before")
    @classmethod
    def check_language(cls, v: Any) -> str:
        """Langue inconnue : portugais."""
        code = str(v or "").strip().lower()
        return code if code in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE

    @field_validator("user_id", "supabase_url", "supabase_anon_key", mode="before")
    @classmethod
    def empty_as_none(cls, v: Any) -> Optional[str]:
        """Les chaînes vides sont traitées comme absentes."""
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    @field_validator("reference_cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def supabase_enabled(self) -> bool:
        """Vérifie si le store Supabase est configuré."""
        return self.supabase_url is not None and self.supabase_anon_key is not None

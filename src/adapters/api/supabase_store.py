"""
Store Supabase (PostgREST) pour les videos, le catalogue et les votes.

Implemente l'interface IVideoStore au-dessus de l'API REST de Supabase.
Les categories et tags sont mis en cache (ReferenceCache) ; les videos
et les votes sont toujours lus depuis le backend.

La contrainte d'unicite (video_id, user_id) de la table 'suggestions'
est appliquee par le backend : une violation (HTTP 409 / code 23505)
est convertie en DuplicateVoteError.

Usage:
    store = SupabaseStore(base_url="https://xyz.supabase.co", api_key="anon")
    approved = await store.fetch_videos(VideoStatus.APPROVED)
    await store.close()
"""

from typing import Any, Callable, Optional, Sequence, TypeVar

import httpx
from loguru import logger

from src.adapters.api.cache import ReferenceCache
from src.adapters.api.retry import TransientResponseError, request_with_retry
from src.core.entities.catalog import Category, Tag
from src.core.entities.video import VideoRecord, VideoStatus
from src.core.entities.vote import Vote
from src.core.errors import DuplicateVoteError, StoreError
from src.core.ports.store import IVideoStore, NewVideo
from src.utils.helpers import parse_category_row, parse_tag_row, parse_video_row

T = TypeVar("T")

# Code Postgres de violation de contrainte d'unicite
_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(response: httpx.Response) -> bool:
    if response.status_code == 409:
        return True
    try:
        body = response.json()
    except ValueError:
        return False
    return isinstance(body, dict) and body.get("code") == _UNIQUE_VIOLATION


def _decode(operation: str, response: httpx.Response) -> Any:
    """Decode le corps JSON ; un corps illisible devient une StoreError."""
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"{operation}: reponse illisible - {response.text[:200]}")
        raise StoreError("Reponse du store illisible", operation=operation) from e


def _parse_rows(operation: str, rows: Any, parser: Callable[[dict], T]) -> list[T]:
    """Convertit des lignes PostgREST ; une ligne malformee devient une StoreError."""
    try:
        return [parser(row) for row in rows]
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"{operation}: ligne malformee - {e!r}")
        raise StoreError("Donnees du store malformees", operation=operation) from e


def _in_filter(values: Sequence[str]) -> str:
    """Construit un filtre PostgREST 'in.(...)' avec valeurs entre guillemets."""
    quoted = ",".join(f'"{value}"' for value in values)
    return f"in.({quoted})"


class SupabaseStore(IVideoStore):
    """
    Client du store Supabase.

    Attributes:
        REST_PATH: Prefixe de l'API PostgREST
        VIDEO_SELECT: Projection des videos avec tags et slugs de categorie
    """

    REST_PATH = "/rest/v1"
    VIDEO_SELECT = (
        "*,video_tags(tags(name,is_special,color)),"
        "video_categories(category:categories(slug))"
    )
    CATEGORIES_CACHE_KEY = "supabase:categories"
    TAGS_CACHE_KEY = "supabase:tags"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        cache: Optional[ReferenceCache] = None,
        access_token: Optional[str] = None,
    ) -> None:
        """
        Initialise le client.

        Args:
            base_url: URL du projet Supabase
            api_key: Cle anonyme du projet
            cache: Cache des donnees de reference (optionnel)
            access_token: Jeton de session utilisateur (sinon la cle anonyme)
        """
        self._base_url = (base_url or "").rstrip("/")
        self._api_key = api_key
        self._access_token = access_token
        self._cache = cache
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=f"{self._base_url}{self.REST_PATH}",
                headers={
                    "apikey": self._api_key or "",
                    "Authorization": f"Bearer {self._access_token or self._api_key}",
                    "Accept": "application/json",
                },
                timeout=30.0,
            )
        return self._client

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _request(
        self, operation: str, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        """Execute une requete et convertit les erreurs en StoreError."""
        try:
            return await request_with_retry(self._get_client(), method, path, **kwargs)
        except httpx.HTTPStatusError as e:
            logger.error(f"{operation}: HTTP {e.response.status_code} - {e.response.text}")
            raise StoreError(
                f"Erreur du store ({e.response.status_code})", operation=operation
            ) from e
        except (TransientResponseError, httpx.HTTPError) as e:
            logger.error(f"{operation}: {e}")
            raise StoreError(f"Store indisponible: {e}", operation=operation) from e

    async def _reference_rows(
        self,
        key: str,
        operation: str,
        path: str,
        params: dict,
        parser: Callable[[dict], T],
    ) -> list[T]:
        """
        Lit des donnees de reference, cache d'abord.

        Une entree de cache illisible est supprimee puis rechargee depuis le store ;
        seules des lignes valides sont mises en cache.
        """
        if self._cache is not None:
            cached = await self._cache.get(key)
            if cached is not None:
                try:
                    return _parse_rows(operation, cached, parser)
                except StoreError:
                    logger.warning(f"{operation}: cache invalide, rechargement")
                    await self._cache.invalidate(key)

        response = await self._request(operation, "GET", path, params=params)
        rows = _decode(operation, response)
        items = _parse_rows(operation, rows, parser)

        if self._cache is not None:
            await self._cache.set_reference(key, rows)
        return items

    async def fetch_videos(self, status: VideoStatus) -> list[VideoRecord]:
        order = "created_at.desc" if status is VideoStatus.APPROVED else "votes_count.desc"
        response = await self._request(
            "fetch_videos",
            "GET",
            "/videos",
            params={
                "select": self.VIDEO_SELECT,
                "status": f"eq.{status.value}",
                "order": order,
            },
        )
        videos = _parse_rows("fetch_videos", _decode("fetch_videos", response), parse_video_row)
        logger.debug(f"{len(videos)} videos '{status.value}' chargees")
        return videos

    async def fetch_categories(self) -> list[Category]:
        return await self._reference_rows(
            self.CATEGORIES_CACHE_KEY,
            "fetch_categories",
            "/categories",
            {"select": "*", "order": "title_pt.asc"},
            parse_category_row,
        )

    async def fetch_tags(self) -> list[Tag]:
        return await self._reference_rows(
            self.TAGS_CACHE_KEY,
            "fetch_tags",
            "/tags",
            {"select": "*", "order": "name.asc"},
            parse_tag_row,
        )

    async def fetch_user_votes(self, user_id: str, video_ids: Sequence[str]) -> set[str]:
        if not video_ids:
            return set()
        response = await self._request(
            "fetch_user_votes",
            "GET",
            "/suggestions",
            params={
                "select": "video_id",
                "user_id": f"eq.{user_id}",
                "video_id": _in_filter(video_ids),
            },
        )
        rows = _decode("fetch_user_votes", response)
        return set(_parse_rows("fetch_user_votes", rows, lambda row: str(row["video_id"])))

    async def insert_vote(self, vote: Vote) -> None:
        try:
            await request_with_retry(
                self._get_client(),
                "POST",
                "/suggestions",
                json={"video_id": vote.video_id, "user_id": vote.user_id, "vote": vote.weight},
                headers={"Prefer": "return=minimal"},
            )
        except httpx.HTTPStatusError as e:
            if _is_unique_violation(e.response):
                raise DuplicateVoteError(vote.video_id, vote.user_id) from e
            logger.error(f"insert_vote: HTTP {e.response.status_code} - {e.response.text}")
            raise StoreError(
                f"Erreur du store ({e.response.status_code})", operation="insert_vote"
            ) from e
        except (TransientResponseError, httpx.HTTPError) as e:
            logger.error(f"insert_vote: {e}")
            raise StoreError(f"Store indisponible: {e}", operation="insert_vote") from e

    async def insert_video(self, video: NewVideo) -> VideoRecord:
        response = await self._request(
            "insert_video",
            "POST",
            "/videos",
            json={
                "title": video.title,
                "description": video.description,
                "embed_url": video.embed_url,
                "platform": video.platform,
                "platform_id": video.platform_id,
                "language": video.language,
                "status": video.status.value,
                "storage_mode": video.storage_mode,
                "submitted_by": video.submitted_by,
            },
            headers={"Prefer": "return=representation"},
        )
        rows = _decode("insert_video", response)
        if not rows:
            raise StoreError("Le store n'a pas retourne la video creee", operation="insert_video")
        if not isinstance(rows, list):
            rows = [rows]
        return _parse_rows("insert_video", rows[:1], parse_video_row)[0]

    async def link_categories(self, video_id: str, category_ids: Sequence[str]) -> None:
        if not category_ids:
            return
        await self._request(
            "link_categories",
            "POST",
            "/video_categories",
            json=[{"video_id": video_id, "category_id": cid} for cid in category_ids],
            headers={"Prefer": "return=minimal"},
        )

    async def link_tags(self, video_id: str, tag_ids: Sequence[str]) -> None:
        if not tag_ids:
            return
        await self._request(
            "link_tags",
            "POST",
            "/video_tags",
            json=[{"video_id": video_id, "tag_id": tid} for tid in tag_ids],
            headers={"Prefer": "return=minimal"},
        )

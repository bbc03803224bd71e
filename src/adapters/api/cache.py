"""
Cache persistant des donnees de reference du store distant.

Les categories et les tags changent rarement : ils sont conserves sur disque
via diskcache pour eviter de les recharger a chaque demarrage du client.
Les videos et les votes ne sont jamais mis en cache.
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Optional

from diskcache import Cache


class ReferenceCache:
    """
    Cache asynchrone avec TTL pour les donnees de reference.

    Utilise diskcache pour la persistence et run_in_executor pour
    ne pas bloquer la boucle d'evenements.

    Attributes:
        REFERENCE_TTL: Duree de vie des categories et tags (1h)

    Example:
        cache = ReferenceCache(cache_dir=".cache/reference")
        await cache.set_reference("supabase:categories", rows)
        rows = await cache.get("supabase:categories")
    """

    REFERENCE_TTL = 60 * 60  # 1 heure en secondes (3600)

    def __init__(self, cache_dir: str | Path = ".cache/reference") -> None:
        self._cache = Cache(cache_dir)

    async def get(self, key: str) -> Optional[Any]:
        """Retourne la valeur stockee, ou None si absente ou expiree."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Stocke une valeur avec une duree de vie en secondes."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_reference(self, key: str, value: Any) -> None:
        """Stocke des donnees de reference (TTL d'une heure)."""
        await self.set(key, value, self.REFERENCE_TTL)

    async def invalidate(self, key: str) -> None:
        """Supprime une entree (ex: apres une relance manuelle)."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.delete, key)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()

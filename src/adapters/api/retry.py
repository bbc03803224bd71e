"""
Mecanisme de retry avec backoff exponentiel pour le store distant.

Relance automatiquement les requetes sur les reponses transitoires
(429 rate limiting, 502/503/504 indisponibilite) et sur les erreurs de
transport httpx, avec un delai croissant et du jitter aleatoire.

Usage:
    @with_retry(max_attempts=3, max_wait=10)
    async def my_call():
        ...

    response = await request_with_retry(client, "GET", "/videos")
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

# Statuts HTTP consideres comme transitoires
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


class TransientResponseError(Exception):
    """
    Reponse HTTP transitoire (rate limiting ou backend indisponible).

    Attributes:
        status_code: Statut HTTP recu
        retry_after: Secondes a attendre (header Retry-After), ou None
    """

    def __init__(self, status_code: int, retry_after: Optional[int] = None) -> None:
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(f"HTTP {status_code}. Retry after: {retry_after}s")


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Lit Retry-After en secondes (les dates HTTP sont ignorees)."""
    if value and value.strip().isdigit():
        return int(value.strip())
    return None


def with_retry(max_attempts: int = 3, max_wait: int = 10):
    """
    Decorateur de relance sur erreurs transitoires.

    Relance sur TransientResponseError et httpx.TransportError (connexion
    refusee, timeout...). Les autres exceptions remontent immediatement.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 10)
    """
    return retry(
        retry=retry_if_exception_type((TransientResponseError, httpx.TransportError)),
        wait=wait_random_exponential(multiplier=0.5, min=0.5, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 3,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec relance sur erreurs transitoires.

    Les reponses 4xx/5xx non transitoires levent httpx.HTTPStatusError
    sans relance.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL (relative a base_url du client)
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        TransientResponseError: Si la reponse reste transitoire apres les tentatives
        httpx.TransportError: Si le transport echoue apres les tentatives
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise TransientResponseError(
                response.status_code,
                _parse_retry_after(response.headers.get("Retry-After")),
            )
        response.raise_for_status()
        return response

    return await _do_request()

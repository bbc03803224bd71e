"""
Adaptateurs HTTP pour le store distant (Supabase/PostgREST).

- SupabaseStore : implementation de IVideoStore via httpx
- ReferenceCache : cache disque des categories et tags
- request_with_retry : relance sur erreurs transitoires (tenacity)
"""

from src.adapters.api.cache import ReferenceCache
from src.adapters.api.retry import TransientResponseError, request_with_retry, with_retry
from src.adapters.api.supabase_store import SupabaseStore

__all__ = [
    "SupabaseStore",
    "ReferenceCache",
    "TransientResponseError",
    "request_with_retry",
    "with_retry",
]

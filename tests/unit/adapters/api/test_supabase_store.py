"""
Tests pour SupabaseStore - store distant via PostgREST.

Utilise respx pour simuler httpx et verifie:
- La conversion des lignes et jointures en entites
- Les filtres et tris PostgREST envoyes
- Le cache des categories et tags (cache d'abord)
- La conversion des erreurs (StoreError, DuplicateVoteError)
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from src.adapters.api.cache import ReferenceCache
from src.adapters.api.supabase_store import SupabaseStore
from src.core.entities.video import TagRef, VideoStatus
from src.core.entities.vote import Vote
from src.core.errors import DuplicateVoteError, StoreError
from src.core.ports.store import IVideoStore, NewVideo
from src.services.catalog import CatalogService, Section
from src.services.vote_threshold import VoteThresholdEvaluator
from tests.fixtures.supabase_responses import (
    SUPABASE_APPROVED_VIDEOS,
    SUPABASE_CATEGORIES,
    SUPABASE_INSERTED_VIDEO,
    SUPABASE_PENDING_VIDEOS,
    SUPABASE_TAGS,
    SUPABASE_UNIQUE_VIOLATION,
)

BASE_URL = "https://example.supabase.co/rest/v1"


@pytest.fixture
def mock_cache() -> AsyncMock:
    cache = AsyncMock(spec=ReferenceCache)
    cache.get.return_value = None
    return cache


@pytest.fixture
def store(mock_cache: AsyncMock) -> SupabaseStore:
    return SupabaseStore(
        base_url="https://example.supabase.co/",
        api_key="anon-key",
        cache=mock_cache,
    )


def test_implements_interface(store: SupabaseStore) -> None:
    assert isinstance(store, IVideoStore)


class TestFetchVideos:
    @pytest.mark.asyncio
    @respx.mock
    async def test_approved_videos_are_parsed(self, store: SupabaseStore) -> None:
        route = respx.get(f"{BASE_URL}/videos").mock(
            return_value=httpx.Response(200, json=SUPABASE_APPROVED_VIDEOS)
        )

        videos = await store.fetch_videos(VideoStatus.APPROVED)

        assert [v.title for v in videos] == ["Gato tocando piano", "Aula de física"]
        first = videos[0]
        assert first.status is VideoStatus.APPROVED
        assert first.category_slugs == frozenset({"memes"})
        assert TagRef("biscoito", True, "#f59e0b") in first.tags
        assert first.is_biscoito
        assert first.created_at.year == 2024
        assert videos[1].description is None

        params = route.calls.last.request.url.params
        assert params["status"] == "eq.approved"
        assert params["order"] == "created_at.desc"
        assert "video_categories" in params["select"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_pending_videos_ordered_by_votes(self, store: SupabaseStore) -> None:
        route = respx.get(f"{BASE_URL}/videos").mock(
            return_value=httpx.Response(200, json=SUPABASE_PENDING_VIDEOS)
        )

        videos = await store.fetch_videos(VideoStatus.PENDING)

        assert videos[0].votes_count == 3
        assert videos[0].is_pending
        params = route.calls.last.request.url.params
        assert params["status"] == "eq.pending"
        assert params["order"] == "votes_count.desc"

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_api_key_headers(self, store: SupabaseStore) -> None:
        route = respx.get(f"{BASE_URL}/videos").mock(return_value=httpx.Response(200, json=[]))

        await store.fetch_videos(VideoStatus.APPROVED)

        headers = route.calls.last.request.headers
        assert headers["apikey"] == "anon-key"
        assert headers["Authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    @respx.mock
    async def test_access_token_is_used_when_provided(self) -> None:
        store = SupabaseStore("https://example.supabase.co", "anon-key", access_token="jwt")
        route = respx.get(f"{BASE_URL}/videos").mock(return_value=httpx.Response(200, json=[]))

        await store.fetch_videos(VideoStatus.APPROVED)

        assert route.calls.last.request.headers["Authorization"] == "Bearer jwt"

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_becomes_store_error(self, store: SupabaseStore) -> None:
        respx.get(f"{BASE_URL}/videos").mock(return_value=httpx.Response(500, json={}))

        with pytest.raises(StoreError) as exc_info:
            await store.fetch_videos(VideoStatus.APPROVED)
        assert exc_info.value.operation == "fetch_videos"

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error_becomes_store_error(self, store: SupabaseStore) -> None:
        respx.get(f"{BASE_URL}/videos").mock(side_effect=httpx.ConnectError("down"))

        with pytest.raises(StoreError):
            await store.fetch_videos(VideoStatus.PENDING)


    @pytest.mark.asyncio
    @respx.mock
    async def test_unreadable_body_becomes_store_error(self, store: SupabaseStore) -> None:
        respx.get(f"{BASE_URL}/videos").mock(
            return_value=httpx.Response(200, text="<html>Bad gateway</html>")
        )

        with pytest.raises(StoreError) as exc_info:
            await store.fetch_videos(VideoStatus.APPROVED)
        assert exc_info.value.operation == "fetch_videos"

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_row_becomes_store_error(self, store: SupabaseStore) -> None:
        respx.get(f"{BASE_URL}/videos").mock(
            return_value=httpx.Response(200, json=[{"title": "sans id"}])
        )

        with pytest.raises(StoreError):
            await store.fetch_videos(VideoStatus.PENDING)


class TestReferenceData:
    @pytest.mark.asyncio
    @respx.mock
    async def test_categories_are_fetched_and_cached(
        self, store: SupabaseStore, mock_cache: AsyncMock
    ) -> None:
        route = respx.get(f"{BASE_URL}/categories").mock(
            return_value=httpx.Response(200, json=SUPABASE_CATEGORIES)
        )

        categories = await store.fetch_categories()

        assert [c.slug for c in categories] == ["educacao", "memes"]
        assert categories[0].title_for("fr") == "Éducation"
        assert categories[1].title_for("es") == "Memes"
        assert route.calls.last.request.url.params["order"] == "title_pt.asc"
        mock_cache.set_reference.assert_called_once_with("supabase:categories", SUPABASE_CATEGORIES)

    @pytest.mark.asyncio
    @respx.mock
    async def test_cache_hit_skips_request(
        self, store: SupabaseStore, mock_cache: AsyncMock
    ) -> None:
        mock_cache.get.return_value = SUPABASE_TAGS
        route = respx.get(f"{BASE_URL}/tags")

        tags = await store.fetch_tags()

        assert [t.name for t in tags] == ["biscoito", "gatos"]
        assert tags[0].is_special
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_works_without_cache(self) -> None:
        store = SupabaseStore("https://example.supabase.co", "anon-key")
        respx.get(f"{BASE_URL}/tags").mock(return_value=httpx.Response(200, json=SUPABASE_TAGS))

        assert len(await store.fetch_tags()) == 2


    @pytest.mark.asyncio
    @respx.mock
    async def test_corrupted_cache_is_invalidated_and_reloaded(
        self, store: SupabaseStore, mock_cache: AsyncMock
    ) -> None:
        mock_cache.get.return_value = [{"name": "sans id"}]
        route = respx.get(f"{BASE_URL}/tags").mock(
            return_value=httpx.Response(200, json=SUPABASE_TAGS)
        )

        tags = await store.fetch_tags()

        assert [t.name for t in tags] == ["biscoito", "gatos"]
        assert route.called
        mock_cache.invalidate.assert_called_once_with("supabase:tags")
        mock_cache.set_reference.assert_called_once_with("supabase:tags", SUPABASE_TAGS)

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_rows_are_not_cached(
        self, store: SupabaseStore, mock_cache: AsyncMock
    ) -> None:
        respx.get(f"{BASE_URL}/categories").mock(
            return_value=httpx.Response(200, json=[{"slug": "memes"}])
        )

        with pytest.raises(StoreError):
            await store.fetch_categories()
        mock_cache.set_reference.assert_not_called()


class TestVotes:
    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_user_votes_is_scoped(self, store: SupabaseStore) -> None:
        route = respx.get(f"{BASE_URL}/suggestions").mock(
            return_value=httpx.Response(200, json=[{"video_id": "v1"}])
        )

        voted = await store.fetch_user_votes("user-1", ["v1", "v2"])

        assert voted == {"v1"}
        params = route.calls.last.request.url.params
        assert params["user_id"] == "eq.user-1"
        assert params["video_id"] == 'in.("v1","v2")'

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_user_votes_without_ids_makes_no_request(
        self, store: SupabaseStore
    ) -> None:
        route = respx.get(f"{BASE_URL}/suggestions")

        assert await store.fetch_user_votes("user-1", []) == set()
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_insert_vote_posts_suggestion(self, store: SupabaseStore) -> None:
        route = respx.post(f"{BASE_URL}/suggestions").mock(return_value=httpx.Response(201))

        await store.insert_vote(Vote(user_id="user-1", video_id="v1"))

        body = json.loads(route.calls.last.request.content)
        assert body == {"video_id": "v1", "user_id": "user-1", "vote": 1}

    @pytest.mark.asyncio
    @respx.mock
    async def test_conflict_becomes_duplicate_vote_error(self, store: SupabaseStore) -> None:
        respx.post(f"{BASE_URL}/suggestions").mock(
            return_value=httpx.Response(409, json=SUPABASE_UNIQUE_VIOLATION)
        )

        with pytest.raises(DuplicateVoteError) as exc_info:
            await store.insert_vote(Vote(user_id="user-1", video_id="v1"))
        assert exc_info.value.video_id == "v1"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unique_violation_code_without_409(self, store: SupabaseStore) -> None:
        respx.post(f"{BASE_URL}/suggestions").mock(
            return_value=httpx.Response(400, json=SUPABASE_UNIQUE_VIOLATION)
        )

        with pytest.raises(DuplicateVoteError):
            await store.insert_vote(Vote(user_id="user-1", video_id="v1"))

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_vote_error_is_store_error(self, store: SupabaseStore) -> None:
        respx.post(f"{BASE_URL}/suggestions").mock(
            return_value=httpx.Response(401, json={"message": "JWT expired"})
        )

        with pytest.raises(StoreError) as exc_info:
            await store.insert_vote(Vote(user_id="user-1", video_id="v1"))
        assert not isinstance(exc_info.value, DuplicateVoteError)


class TestSubmission:
    @pytest.mark.asyncio
    @respx.mock
    async def test_insert_video_returns_created_record(self, store: SupabaseStore) -> None:
        route = respx.post(f"{BASE_URL}/videos").mock(
            return_value=httpx.Response(201, json=SUPABASE_INSERTED_VIDEO)
        )
        new_video = NewVideo(
            title="Nova soumission",
            embed_url="https://www.youtube.com/embed/new",
            platform="youtube",
            platform_id="new",
            language="pt",
            submitted_by="user-1",
        )

        record = await store.insert_video(new_video)

        assert record.id == SUPABASE_INSERTED_VIDEO[0]["id"]
        assert record.status is VideoStatus.PENDING
        request = route.calls.last.request
        assert request.headers["Prefer"] == "return=representation"
        body = json.loads(request.content)
        assert body["status"] == "pending"
        assert body["storage_mode"] == "remote"

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_insert_response_is_store_error(self, store: SupabaseStore) -> None:
        respx.post(f"{BASE_URL}/videos").mock(return_value=httpx.Response(201, json=[]))
        new_video = NewVideo("T", "e", "p", "i", "pt", "user-1")

        with pytest.raises(StoreError):
            await store.insert_video(new_video)

    @pytest.mark.asyncio
    @respx.mock
    async def test_link_categories_and_tags(self, store: SupabaseStore) -> None:
        categories = respx.post(f"{BASE_URL}/video_categories").mock(
            return_value=httpx.Response(201)
        )
        tags = respx.post(f"{BASE_URL}/video_tags").mock(return_value=httpx.Response(201))

        await store.link_categories("v9", ["cat-1", "cat-2"])
        await store.link_tags("v9", ["tag-1"])

        assert json.loads(categories.calls.last.request.content) == [
            {"video_id": "v9", "category_id": "cat-1"},
            {"video_id": "v9", "category_id": "cat-2"},
        ]
        assert json.loads(tags.calls.last.request.content) == [
            {"video_id": "v9", "tag_id": "tag-1"}
        ]

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_links_make_no_request(self, store: SupabaseStore) -> None:
        route = respx.post(f"{BASE_URL}/video_tags")

        await store.link_tags("v9", [])

        assert not route.called


class TestClose:
    @pytest.mark.asyncio
    async def test_close_is_safe_without_client(self, store: SupabaseStore) -> None:
        await store.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_is_recreated_after_close(self, store: SupabaseStore) -> None:
        respx.get(f"{BASE_URL}/videos").mock(return_value=httpx.Response(200, json=[]))
        await store.fetch_videos(VideoStatus.APPROVED)
        await store.close()

        assert await store.fetch_videos(VideoStatus.APPROVED) == []


class TestCatalogOverSupabase:
    @pytest.mark.asyncio
    @respx.mock
    async def test_unreadable_section_does_not_block_the_others(self) -> None:
        def videos_by_status(request: httpx.Request) -> httpx.Response:
            if request.url.params["status"] == "eq.approved":
                return httpx.Response(200, text="<html>Bad gateway</html>")
            return httpx.Response(200, json=SUPABASE_PENDING_VIDEOS)

        respx.get(f"{BASE_URL}/videos").mock(side_effect=videos_by_status)
        respx.get(f"{BASE_URL}/categories").mock(
            return_value=httpx.Response(200, json=SUPABASE_CATEGORIES)
        )
        respx.get(f"{BASE_URL}/tags").mock(return_value=httpx.Response(200, json=SUPABASE_TAGS))
        store = SupabaseStore("https://example.supabase.co", "anon-key")
        catalog = CatalogService(store, VoteThresholdEvaluator(10))

        snapshot = await catalog.refresh()
        await store.close()

        assert set(snapshot.errors) == {Section.APPROVED}
        assert len(catalog.pending_videos()) == 1
        assert len(catalog.categories) == 2
        assert len(catalog.tags) == 2

"""
Store en memoire et fabrique de videos pour les tests.

FakeStore implemente IVideoStore sans reseau ni base de donnees ;
les echecs et les latences sont pilotes par le test.
"""

import asyncio
import itertools
from dataclasses import replace
from typing import Optional, Sequence

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import TagRef, VideoRecord, VideoStatus
from src.core.entities.vote import Vote
from src.core.errors import DuplicateVoteError, StoreError
from src.core.ports.store import IVideoStore, NewVideo


def build_video(
    id: str = "v1",
    title: str = "Video",
    status: VideoStatus = VideoStatus.APPROVED,
    votes_count: int = 0,
    categories: Sequence[str] = (),
    tags: Sequence[str] = (),
    language: str = "pt",
    description: Optional[str] = None,
    **kwargs,
) -> VideoRecord:
    """Construit un VideoRecord ; biscoito, viral et clássico sont marques speciaux."""
    special = {"biscoito", "viral", "clássico"}
    return VideoRecord(
        id=id,
        title=title,
        embed_url=kwargs.pop("embed_url", f"https://www.youtube.com/embed/{id}"),
        platform=kwargs.pop("platform", "youtube"),
        platform_id=kwargs.pop("platform_id", id),
        language=language,
        status=status,
        votes_count=votes_count,
        description=description,
        category_slugs=frozenset(categories),
        tags=tuple(TagRef(name=t, is_special=t in special) for t in tags),
        **kwargs,
    )


class FakeStore(IVideoStore):
    """
    Store en memoire.

    - fail_on : noms d'operations levant StoreError
    - gates : operation -> asyncio.Event a attendre avant de repondre
    - votes_to_publish : seuil de promotion applique par insert_vote (None = jamais)
    """

    def __init__(
        self,
        videos: Sequence[VideoRecord] = (),
        categories: Sequence[Category] = (),
        tags: Sequence[Tag] = (),
        votes_to_publish: Optional[int] = None,
    ) -> None:
        self.videos: dict[str, VideoRecord] = {v.id: v for v in videos}
        self.categories = list(categories)
        self.tags = list(tags)
        self.votes: set[tuple[str, str]] = set()
        self.links: list[tuple[str, str, str]] = []
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.votes_to_publish = votes_to_publish
        self._ids = itertools.count(1)

    async def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        gate = self.gates.get(operation)
        if gate is not None:
            await gate.wait()
        if operation in self.fail_on:
            raise StoreError(f"{operation} indisponible", operation=operation)

    async def fetch_videos(self, status: VideoStatus) -> list[VideoRecord]:
        await self._enter(f"fetch_videos:{status.value}")
        selected = [v for v in self.videos.values() if v.status is status]
        if status is VideoStatus.PENDING:
            return sorted(selected, key=lambda v: v.votes_count, reverse=True)
        return selected

    async def fetch_categories(self) -> list[Category]:
        await self._enter("fetch_categories")
        return list(self.categories)

    async def fetch_tags(self) -> list[Tag]:
        await self._enter("fetch_tags")
        return list(self.tags)

    async def fetch_user_votes(self, user_id: str, video_ids: Sequence[str]) -> set[str]:
        await self._enter("fetch_user_votes")
        return {vid for (vid, uid) in self.votes if uid == user_id and vid in video_ids}

    async def insert_vote(self, vote: Vote) -> None:
        await self._enter("insert_vote")
        key = (vote.video_id, vote.user_id)
        if key in self.votes:
            raise DuplicateVoteError(vote.video_id, vote.user_id)
        self.votes.add(key)
        video = self.videos.get(vote.video_id)
        if video is not None:
            video = video.with_vote_added()
            if self.votes_to_publish and video.votes_count >= self.votes_to_publish:
                video = replace(video, status=VideoStatus.APPROVED)
            self.videos[video.id] = video

    async def insert_video(self, video: NewVideo) -> VideoRecord:
        await self._enter("insert_video")
        record = VideoRecord(
            id=f"new-{next(self._ids)}",
            title=video.title,
            embed_url=video.embed_url,
            platform=video.platform,
            platform_id=video.platform_id,
            language=video.language,
            status=video.status,
            description=video.description,
            submitted_by=video.submitted_by,
            storage_mode=video.storage_mode,
        )
        self.videos[record.id] = record
        return record

    async def link_categories(self, video_id: str, category_ids: Sequence[str]) -> None:
        await self._enter("link_categories")
        self.links.extend(("category", video_id, cid) for cid in category_ids)

    async def link_tags(self, video_id: str, tag_ids: Sequence[str]) -> None:
        await self._enter("link_tags")
        self.links.extend(("tag", video_id, tid) for tid in tag_ids)

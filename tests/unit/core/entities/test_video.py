"""
Tests pour les entites du domaine (videos, catalogue, votes).
"""

import pytest

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import TagRef, VideoRecord, VideoStatus
from src.core.entities.vote import VOTE_WEIGHT, Vote


class TestVideoRecord:
    def test_defaults(self) -> None:
        video = VideoRecord(id="v1", title="T", embed_url="https://x", platform="x.com")

        assert video.status is VideoStatus.PENDING
        assert video.votes_count == 0
        assert video.language == "pt"
        assert video.storage_mode == "remote"
        assert video.category_slugs == frozenset()

    def test_negative_votes_rejected(self) -> None:
        with pytest.raises(ValueError):
            VideoRecord(id="v1", title="T", embed_url="e", platform="p", votes_count=-1)

    def test_collections_are_coerced(self) -> None:
        video = VideoRecord(
            id="v1",
            title="T",
            embed_url="e",
            platform="p",
            category_slugs=["memes", "memes"],
            tags=[TagRef("gatos")],
        )

        assert video.category_slugs == frozenset({"memes"})
        assert video.tags == (TagRef("gatos"),)

    def test_is_frozen(self, make_video) -> None:
        video = make_video()
        with pytest.raises(AttributeError):
            video.votes_count = 5

    def test_with_vote_added_returns_copy(self, make_video) -> None:
        video = make_video(votes_count=3, status=VideoStatus.PENDING)

        voted = video.with_vote_added()

        assert voted.votes_count == 4
        assert video.votes_count == 3

    def test_special_tag_helpers(self, make_video) -> None:
        video = make_video(tags=["biscoito", "gatos"])

        assert video.tag_names == frozenset({"biscoito", "gatos"})
        assert video.has_special_tag
        assert video.is_biscoito
        assert not make_video(tags=["gatos"]).has_special_tag


class TestCategory:
    def test_title_for_language(self) -> None:
        category = Category(id="c", slug="musica", title_pt="Música", title_en="Music")

        assert category.title_for("en") == "Music"
        assert category.title_for("EN") == "Music"

    def test_title_falls_back_to_portuguese(self) -> None:
        category = Category(id="c", slug="musica", title_pt="Música", title_en="Music")

        assert category.title_for("fr") == "Música"
        assert category.title_for("de") == "Música"
        assert category.title_for(None) == "Música"
        assert category.title_for("pt-BR") == "Música"


class TestTagAndVote:
    def test_tag_as_ref(self) -> None:
        tag = Tag(id="t1", name="viral", is_special=True, color="#0f0")
        assert tag.as_ref() == TagRef(name="viral", is_special=True, color="#0f0")

    def test_vote_has_unit_weight(self) -> None:
        vote = Vote(user_id="u1", video_id="v1")
        assert vote.weight == VOTE_WEIGHT == 1

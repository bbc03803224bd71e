"""
Fixtures pytest partagees pour les tests Monynha Fun.

Ce module contient les fixtures communes utilisees dans les tests:
- make_video : fabrique de VideoRecord
- fake_store : FakeStore (tests/fixtures/fake_store.py) avec donnees de reference
- Settings de test avec chemins temporaires
"""

from pathlib import Path

import pytest

from src.config import Settings
from src.core.entities.catalog import Category, Tag
from tests.fixtures.fake_store import FakeStore, build_video


@pytest.fixture
def make_video():
    """Fabrique de VideoRecord pour les tests."""
    return build_video


@pytest.fixture
def reference_categories() -> list[Category]:
    return [
        Category(id="c1", slug="memes", title_pt="Memes", title_fr="Mèmes"),
        Category(id="c2", slug="educacao", title_pt="Educação", title_en="Education"),
    ]


@pytest.fixture
def reference_tags() -> list[Tag]:
    return [
        Tag(id="t1", name="biscoito", is_special=True, color="#f5a"),
        Tag(id="t2", name="viral", is_special=True),
        Tag(id="t3", name="gatos"),
    ]


@pytest.fixture
def fake_store(reference_categories, reference_tags) -> FakeStore:
    """Store en memoire avec donnees de reference, sans videos."""
    return FakeStore(categories=reference_categories, tags=reference_tags)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler la base locale, le cache
    et les logs de chaque test.
    """
    return Settings(
        _env_file=None,
        store_backend="local",
        database_url=f"sqlite:///{tmp_path / 'monynha.db'}",
        reference_cache_dir=tmp_path / "cache",
        log_file=tmp_path / "logs" / "monynha.log",
    )

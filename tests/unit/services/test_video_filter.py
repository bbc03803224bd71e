"""
Tests unitaires pour le moteur de filtrage par facettes.

Ces tests verifient:
- Chaque clause (categorie, tags, langue, texte) isolement
- La combinaison en ET des clauses et le OU interne des tags
- Le sous-ensemble et la conservation de l'ordre
- L'absence de mutation des entrees
"""

import pytest

from src.core.entities.video import VideoStatus
from src.core.value_objects.facet_query import FacetQuery
from src.services.video_filter import filter_videos, fold_case, matches


@pytest.fixture
def catalog(make_video):
    return [
        make_video(id="a", title="Gato pianista", categories=["memes"], tags=["gatos", "viral"]),
        make_video(id="b", title="Aula de física", categories=["educacao"], language="en"),
        make_video(
            id="c",
            title="Bolo de cenoura",
            categories=["receitas", "memes"],
            description="Receita da vovó",
            tags=["biscoito"],
            language="pt",
        ),
        make_video(id="d", title="Rock clássico", categories=["musica"], tags=["clássico"], language="es"),
    ]


class TestFilterInvariants:
    """Proprietes generales du filtrage."""

    @pytest.mark.parametrize(
        "query",
        [
            FacetQuery(),
            FacetQuery(category="memes"),
            FacetQuery(tags=frozenset({"gatos", "biscoito"})),
            FacetQuery(language="PT"),
            FacetQuery(search="o"),
            FacetQuery(category="memes", tags=frozenset({"viral"}), search="gato"),
        ],
    )
    def test_output_is_ordered_subset(self, catalog, query) -> None:
        """La sortie est un sous-ensemble de l'entree dans le meme ordre."""
        result = filter_videos(catalog, query)

        positions = [catalog.index(video) for video in result]
        assert positions == sorted(positions)
        assert all(video in catalog for video in result)

    def test_empty_query_returns_everything(self, catalog) -> None:
        assert filter_videos(catalog, FacetQuery()) == catalog

    def test_input_is_not_mutated(self, catalog) -> None:
        snapshot = list(catalog)
        filter_videos(catalog, FacetQuery(category="memes"))
        assert catalog == snapshot

    def test_is_deterministic(self, catalog) -> None:
        query = FacetQuery(search="de")
        assert filter_videos(catalog, query) == filter_videos(catalog, query)

    def test_returns_new_list(self, catalog) -> None:
        result = filter_videos(catalog, FacetQuery())
        assert result is not catalog

    def test_accepts_any_iterable(self, catalog) -> None:
        result = filter_videos(iter(catalog), FacetQuery(category="musica"))
        assert [v.id for v in result] == ["d"]


class TestCategoryClause:
    def test_keeps_only_matching_category(self, make_video) -> None:
        """filter([funny, serious], category=funny) -> seulement le premier."""
        funny = make_video(id="1", categories=["funny"])
        serious = make_video(id="2", categories=["serious"])

        assert filter_videos([funny, serious], FacetQuery(category="funny")) == [funny]

    def test_video_with_several_categories_matches_each(self, catalog) -> None:
        assert [v.id for v in filter_videos(catalog, FacetQuery(category="receitas"))] == ["c"]
        assert [v.id for v in filter_videos(catalog, FacetQuery(category="memes"))] == ["a", "c"]

    def test_unknown_category_matches_nothing(self, catalog) -> None:
        assert filter_videos(catalog, FacetQuery(category="inexistente")) == []


class TestTagClause:
    def test_tag_combined_with_category(self, make_video) -> None:
        """Deux videos 'funny', une 'cats' et une 'dogs' : seul 'cats' reste."""
        cats = make_video(id="1", categories=["funny"], tags=["cats"])
        dogs = make_video(id="2", categories=["funny"], tags=["dogs"])

        result = filter_videos([cats, dogs], FacetQuery(category="funny", tags=frozenset({"cats"})))

        assert result == [cats]

    def test_tags_are_or_within_clause(self, catalog) -> None:
        query = FacetQuery(tags=frozenset({"gatos", "biscoito"}))
        assert [v.id for v in filter_videos(catalog, query)] == ["a", "c"]

    def test_video_without_tags_never_matches_tag_filter(self, catalog) -> None:
        result = filter_videos(catalog, FacetQuery(tags=frozenset({"viral"})))
        assert "b" not in [v.id for v in result]

    def test_tag_names_match_exactly(self, catalog) -> None:
        assert filter_videos(catalog, FacetQuery(tags=frozenset({"Viral"}))) == []


class TestLanguageClause:
    def test_keeps_only_matching_language(self, make_video) -> None:
        pt = make_video(id="1", language="pt")
        en = make_video(id="2", language="en")

        assert filter_videos([pt, en], FacetQuery(language="en")) == [en]

    def test_language_is_case_insensitive(self, make_video) -> None:
        pt = make_video(id="1", language="pt")
        en = make_video(id="2", language="EN")

        assert filter_videos([pt, en], FacetQuery(language="en")) == [en]
        assert filter_videos([pt, en], FacetQuery(language="Pt")) == [pt]


class TestSearchClause:
    def test_matches_title_description_or_tag_independently(self, make_video) -> None:
        """Le terme n'apparait que dans un titre et une description."""
        in_title = make_video(id="1", title="Tutorial de Python")
        in_description = make_video(id="2", title="Aula", description="Aprenda python hoje")
        unrelated = make_video(id="3", title="Receita", description="Bolo")

        result = filter_videos([in_title, in_description, unrelated], FacetQuery(search="PYTHON"))

        assert result == [in_title, in_description]

    def test_matches_tag_name(self, catalog) -> None:
        assert [v.id for v in filter_videos(catalog, FacetQuery(search="viral"))] == ["a"]

    def test_search_is_trimmed(self, catalog) -> None:
        assert [v.id for v in filter_videos(catalog, FacetQuery(search="  cenoura  "))] == ["c"]

    def test_blank_search_is_ignored(self, catalog) -> None:
        assert filter_videos(catalog, FacetQuery(search="   ")) == catalog

    def test_search_folds_non_ascii_case(self, catalog) -> None:
        assert [v.id for v in filter_videos(catalog, FacetQuery(search="FÍSICA"))] == ["b"]

    def test_accents_are_not_stripped(self, catalog) -> None:
        assert filter_videos(catalog, FacetQuery(search="fisica")) == []

    def test_video_without_description(self, make_video) -> None:
        video = make_video(title="Sem descrição", description=None)
        assert not matches(video, FacetQuery(search="xyz"))


class TestCombinedClauses:
    def test_all_clauses_are_anded(self, catalog) -> None:
        query = FacetQuery(category="memes", tags=frozenset({"biscoito"}), language="pt", search="vovó")
        assert [v.id for v in filter_videos(catalog, query)] == ["c"]

    def test_one_failing_clause_excludes_video(self, catalog) -> None:
        query = FacetQuery(category="memes", language="en")
        assert filter_videos(catalog, query) == []

    def test_status_is_not_a_facet(self, make_video) -> None:
        pending = make_video(id="p", status=VideoStatus.PENDING, categories=["memes"])
        assert filter_videos([pending], FacetQuery(category="memes")) == [pending]


def test_fold_case_handles_german_sharp_s() -> None:
    assert fold_case("STRASSE") == fold_case("straße")

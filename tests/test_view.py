"""
Unit tests for view derivation.
"""

from showcase.domain.view import (
    ALL_LANGUAGES,
    SortMode,
    ViewState,
    compute_facets,
    derive_view,
    freshest_update,
    sort_records,
)

from conftest import make_record


def _dataset():
    return (
        make_record(1, "alpha", "2024-03-01T00:00:00Z", language="Go", stars=5, topics=["cli", "tools"],
                    description="Fast command runner"),
        make_record(2, "Beta", "2024-02-01T00:00:00Z", language="Rust", stars=1, topics=["web"]),
        make_record(3, "gamma", "2024-01-01T00:00:00Z", language="Go", stars=9, topics=["cli"]),
    )


class TestFiltering:
    """Test cases for filter composition."""

    def test_language_filter_keeps_matching_records_in_order(self):
        """Test that filtering by Go yields both Go records in relative order."""
        records = (
            make_record(1, "a", "2024-01-01T00:00:00Z", language="Go"),
            make_record(2, "b", "2024-01-01T00:00:00Z", language="Rust"),
            make_record(3, "c", "2024-01-01T00:00:00Z", language="Go"),
        )

        view = derive_view(records, ViewState(language_filter="Go"))

        assert [r.id for r in view.records] == [1, 3]
        assert view.count == 2

    def test_all_languages_keeps_everything(self):
        view = derive_view(_dataset(), ViewState(language_filter=ALL_LANGUAGES))

        assert view.count == 3

    def test_active_tag_filter(self):
        view = derive_view(_dataset(), ViewState(active_tag="cli"))

        assert [r.id for r in view.records] == [1, 3]

    def test_query_is_case_insensitive_over_name_description_and_topics(self):
        dataset = _dataset()

        assert [r.id for r in derive_view(dataset, ViewState(query="BETA")).records] == [2]
        assert [r.id for r in derive_view(dataset, ViewState(query="command")).records] == [1]
        assert [r.id for r in derive_view(dataset, ViewState(query="web")).records] == [2]
        assert [r.id for r in derive_view(dataset, ViewState(query="  tools ")).records] == [1]

    def test_filters_compose(self):
        """Test that language, tag and query must all match."""
        state = ViewState(query="gamma", language_filter="Go", active_tag="cli")

        view = derive_view(_dataset(), state)

        assert [r.id for r in view.records] == [3]

    def test_no_match_yields_empty_view(self):
        view = derive_view(_dataset(), ViewState(query="nothing-like-this"))

        assert view.records == ()
        assert view.count == 0

    def test_does_not_mutate_dataset(self):
        dataset = list(_dataset())
        snapshot = list(dataset)

        derive_view(dataset, ViewState(sort_mode=SortMode.NAME))

        assert dataset == snapshot


class TestSorting:
    """Test cases for sort modes."""

    def test_stars_descending(self):
        """Test that star counts 5, 1, 9 sort as 9, 5, 1."""
        view = derive_view(_dataset(), ViewState(sort_mode=SortMode.STARS))

        assert [r.star_count for r in view.records] == [9, 5, 1]

    def test_recency_descending(self):
        view = derive_view(tuple(reversed(_dataset())), ViewState(sort_mode=SortMode.RECENCY))

        assert [r.id for r in view.records] == [1, 2, 3]

    def test_name_ascending_ignores_case(self):
        view = derive_view(_dataset(), ViewState(sort_mode="name"))

        assert [r.name for r in view.records] == ["alpha", "Beta", "gamma"]

    def test_sort_is_stable(self):
        """Test that ties keep their original order."""
        records = (
            make_record(1, "a", stars=3),
            make_record(2, "b", stars=3),
            make_record(3, "c", stars=3),
        )

        assert [r.id for r in sort_records(records, SortMode.STARS)] == [1, 2, 3]
        assert [r.id for r in sort_records(records, SortMode.RECENCY)] == [1, 2, 3]

    def test_missing_timestamps_sort_last(self):
        records = (
            make_record(1, "old", None),
            make_record(2, "new", "2024-06-01T00:00:00Z"),
        )

        assert [r.id for r in sort_records(records, SortMode.RECENCY)] == [2, 1]


class TestFacets:
    """Test cases for facet computation."""

    def test_distinct_sorted_languages_and_tags(self):
        records = _dataset() + (make_record(4, "delta", language=None, topics=["aaa"]),)

        facets = compute_facets(records)

        assert facets.languages == ("Go", "Rust")
        assert facets.tags == ("aaa", "cli", "tools", "web")

    def test_empty_dataset(self):
        facets = compute_facets(())

        assert facets.languages == ()
        assert facets.tags == ()

    def test_freshest_update(self):
        assert freshest_update(_dataset()) == _dataset()[0].updated_at
        assert freshest_update(()) is None

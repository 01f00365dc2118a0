"""Unit tests for author extraction."""

import pytest

from courses_scraper.course_author import (
    build_author,
    extract_authors,
    get_author_name,
    get_contact_link,
)
from courses_scraper.models import AuthorRecord


def _doc(instructors) -> dict:
    return {"course": {"instructors": instructors}}


class TestExtractAuthors:
    def test_full_document(self, full_doc) -> None:
        authors = extract_authors(full_doc)
        assert [a.name for a in authors] == ["Ada Byron", "Example Academy"]

    def test_positional_integrity(self) -> None:
        authors = extract_authors(
            _doc([
                {"display_name": "First", "url": "https://example.com/1"},
                {"url": "https://example.com/2"},
                {"display_name": "Third"},
            ])
        )
        assert authors == [
            AuthorRecord(name="First", contact_link="https://example.com/1"),
            AuthorRecord(name="", contact_link="https://example.com/2"),
            AuthorRecord(name="Third", contact_link=None),
        ]

    @pytest.mark.parametrize(
        "doc",
        [{}, {"course": {}}, _doc(None), _doc({"display_name": "Solo"}), _doc("Solo"), None],
    )
    def test_absent_or_not_a_sequence(self, doc) -> None:
        assert extract_authors(doc) == []

    def test_empty_list(self) -> None:
        assert extract_authors(_doc([])) == []

    def test_non_mapping_entries_are_kept(self) -> None:
        authors = extract_authors(_doc(["Ada", None, {"name": "Linus"}]))
        assert authors == [AuthorRecord(), AuthorRecord(), AuthorRecord(name="Linus")]

    def test_relative_link_uses_base_url(self) -> None:
        authors = extract_authors(
            _doc([{"name": "Ada", "url": "/user/ada/"}]), base_url="https://courses.example.org/"
        )
        assert authors[0].contact_link == "https://courses.example.org/user/ada/"


class TestFieldHelpers:
    def test_display_name_preferred(self) -> None:
        assert get_author_name({"display_name": "Ada L.", "name": "ada"}) == "Ada L."

    def test_falls_back_to_name(self) -> None:
        assert get_author_name({"display_name": "  ", "name": "ada"}) == "ada"
        assert get_author_name({"display_name": ["x"], "name": "ada"}) == "ada"

    def test_missing_name(self) -> None:
        assert get_author_name({}) == ""

    def test_default_base_url(self) -> None:
        assert get_contact_link({"url": "/user/ada/"}) == "https://www.udemy.com/user/ada/"

    def test_protocol_relative_link_keeps_its_host(self) -> None:
        assert get_contact_link({"url": "//cdn.example.com/u/ada"}) == "https://cdn.example.com/u/ada"

    def test_relative_link_against_base_with_path(self) -> None:
        link = get_contact_link({"url": "/user/ada/"}, base_url="https://courses.example.org/catalog/")
        assert link == "https://courses.example.org/user/ada/"

    @pytest.mark.parametrize("entry", [{}, {"url": ""}, {"url": None}, {"url": {"href": "x"}}])
    def test_missing_link(self, entry) -> None:
        assert get_contact_link(entry) is None

    def test_build_author_from_scalar(self) -> None:
        assert build_author(7) == AuthorRecord(name="", contact_link=None)

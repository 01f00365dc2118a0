"""Unit tests for document parsing."""

import html
import json
from types import MappingProxyType

import pytest

from courses_scraper.document import NO_RECOGNIZABLE_DOCUMENT, ParseError, freeze, parse
from courses_scraper.query import ABSENT, PathQuery, resolve


class TestParseDirect:
    def test_json_object(self, course_json_body: str) -> None:
        doc = parse(course_json_body)
        assert resolve(doc, PathQuery.parse("course.category.title")) == "Development"

    def test_json_array_root(self) -> None:
        assert parse("[1, 2]") == (1, 2)

    def test_surrounding_whitespace(self) -> None:
        assert parse('\n  {"a": 1}  \n')["a"] == 1

    def test_result_is_read_only(self, course_json_body: str) -> None:
        doc = parse(course_json_body)
        with pytest.raises(TypeError):
            doc["course"] = None
        assert isinstance(doc["course"]["instructors"], tuple)


class TestParseEmbedded:
    def test_script_block(self, course_html_page: str) -> None:
        doc = parse(course_html_page)
        assert resolve(doc, PathQuery.parse("course.stats.rating")) == 4.6

    def test_script_block_by_alternate_id(self) -> None:
        page = '<html><body><script type="application/json" id="course-data">{"course": {"id": 7}}</script></body></html>'
        assert parse(page)["course"]["id"] == 7

    def test_script_with_wrong_type_is_ignored(self) -> None:
        page = '<html><body><script id="course-data">{"course": {"id": 7}}</script></body></html>'
        with pytest.raises(ParseError):
            parse(page)

    def test_module_args_attribute(self) -> None:
        payload = html.escape(json.dumps({"course": {"id": 9, "title": "A & B"}}), quote=True)
        page = (
            "<html><body>"
            f'<div data-module-args="{html.escape(json.dumps({"widget": 1}), quote=True)}"></div>'
            f'<div class="landing" data-module-args="{payload}"></div>'
            "</body></html>"
        )
        doc = parse(page)
        assert doc["course"]["title"] == "A & B"

    def test_text_marker(self) -> None:
        page = (
            "<html><body><script>"
            'window.__COURSE_DATA__ = {"course": {"id": 3, "tags": ["x"]}}; startApp();'
            "</script></body></html>"
        )
        doc = parse(page)
        assert doc["course"]["id"] == 3
        assert doc["course"]["tags"] == ("x",)

    def test_broken_candidate_falls_through(self) -> None:
        page = (
            '<html><body><script type="application/json" id="__COURSE_DATA__">{broken</script>'
            '<script>__COURSE_DATA__ = {"course": {"id": 5}};</script></body></html>'
        )
        assert parse(page)["course"]["id"] == 5

    def test_embedded_code_is_not_evaluated(self) -> None:
        page = "<html><body><script>__COURSE_DATA__ = (function(){ return {}; })();</script></body></html>"
        with pytest.raises(ParseError):
            parse(page)


class TestParseErrors:
    @pytest.mark.parametrize("body", ["", "   ", "just some text", "42", '"a string"', "null"])
    def test_unrecognisable(self, body: str) -> None:
        with pytest.raises(ParseError) as excinfo:
            parse(body)
        assert excinfo.value.reason == NO_RECOGNIZABLE_DOCUMENT

    def test_nesting_beyond_decoder_limit(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            parse("[" * 100_000 + "]" * 100_000)
        assert excinfo.value.reason == NO_RECOGNIZABLE_DOCUMENT

    def test_html_without_data(self, empty_html: str) -> None:
        with pytest.raises(ParseError, match=NO_RECOGNIZABLE_DOCUMENT):
            parse(empty_html)

    def test_parse_error_is_value_error(self) -> None:
        assert issubclass(ParseError, ValueError)


class TestFreeze:
    def test_deep_nesting(self) -> None:
        depth = 700
        doc = parse("[" * depth + "]" * depth)
        assert resolve(doc, PathQuery.of(*([0] * (depth - 1)))) == ()
        assert resolve(doc, PathQuery.of(*([0] * depth))) is ABSENT

    def test_deep_nested_mappings(self) -> None:
        depth = 2000
        value: dict = {}
        for _ in range(depth):
            value = {"a": [value]}
        frozen = freeze(value)
        assert resolve(frozen, PathQuery.of(*(["a", 0] * depth))) == MappingProxyType({})

    def test_nested(self) -> None:
        frozen = freeze({"a": [{"b": [1, 2]}], "c": None})
        assert frozen["a"][0]["b"] == (1, 2)
        assert frozen["c"] is None
        with pytest.raises(TypeError):
            frozen["a"][0]["b"] = ()

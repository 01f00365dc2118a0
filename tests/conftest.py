"""Shared test fixtures for courses-scraper tests."""

import copy
import json
from typing import Any, Dict

import pytest


FULL_COURSE: Dict[str, Any] = {
    "course": {
        "id": 1001,
        "title": "Python From Scratch",
        "category": {
            "title": "Development",
            "subcategory": {"title": "Programming Languages"},
        },
        "topic": {"title": "Python"},
        "stats": {"rating": 4.6, "num_students": 1523456, "num_reviews": 480000},
        "price": {"amount": 84.99, "currency": "USD", "is_free": False},
        "ratings": {
            "entries": [
                {"title": "Basics", "rating": 4.5},
                {"title": "Objects", "rating": 4.7},
                {"title": "Decorators", "rating": 4.9},
            ]
        },
        "instructors": [
            {"display_name": "Ada Byron", "url": "https://www.udemy.com/user/adabyron/"},
            {"display_name": "Example Academy", "url": "https://example.com/example-academy"},
        ],
    }
}


@pytest.fixture
def full_doc() -> Dict[str, Any]:
    """A course document where every extraction path is present and valid."""
    return copy.deepcopy(FULL_COURSE)


@pytest.fixture
def course_json_body() -> str:
    """The full course document served as a direct JSON response."""
    return json.dumps(FULL_COURSE)


@pytest.fixture
def course_html_page() -> str:
    """An HTML listing page carrying the course document in a JSON script block."""
    return f"""
    <html><head><title>Python From Scratch</title></head>
    <body>
    <h1>Python From Scratch</h1>
    <script id="__COURSE_DATA__" type="application/json">{json.dumps(FULL_COURSE)}</script>
    </body></html>
    """


@pytest.fixture
def empty_html() -> str:
    """HTML page with no embedded course data."""
    return "<html><body><p>Nothing to see here.</p></body></html>"

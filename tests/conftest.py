"""Configuration for pytest."""
import sys
import os

# Make the app package importable without installing the project
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest
from datetime import datetime, timezone


@pytest.fixture
def asker():
    """The user who owns the question."""
    return {"id": "user-asker", "name": "Alice Asker"}


@pytest.fixture
def answerer():
    """A different user who writes answers."""
    return {"id": "user-answerer", "name": "Bob Answerer"}


@pytest.fixture
def question_row():
    """A stored question row as returned by the repository."""
    return {
        "id": "q1",
        "title": "How do I use decorators?",
        "content": "I want to wrap a function.",
        "asker_id": "user-asker",
        "asker_display_name": "Alice Asker",
        "created_at": datetime(2026, 1, 21, 6, 45, 31, tzinfo=timezone.utc),
        "updated_at": None,
        "view_count": 3,
        "tag_slugs": ["python"],
        "has_accepted_answer": False,
        "answer_count": 1,
    }


@pytest.fixture
def answer_row():
    """A stored answer row as returned by the repository."""
    return {
        "id": "a1",
        "content": "Use functools.wraps.",
        "question_id": "q1",
        "user_id": "user-answerer",
        "user_display_name": "Bob Answerer",
        "accepted": False,
        "created_at": datetime(2026, 1, 22, 14, 49, 57, tzinfo=timezone.utc),
        "updated_at": None,
    }

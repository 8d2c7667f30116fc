"""Tests for the search projection handlers."""
from datetime import datetime, timezone
from unittest.mock import Mock

from app.models.events import (
    AnswerAccepted,
    AnswerCountUpdated,
    QuestionCreated,
    QuestionDeleted,
    QuestionUpdated,
)
from app.services.search_projection import SearchProjection

CREATED_AT = datetime(2026, 1, 21, 6, 45, 31, tzinfo=timezone.utc)


class InMemoryIndex:
    """Dict-backed index with the same create/update/delete rules as Typesense."""

    def __init__(self):
        self.documents = {}

    def create_document(self, document):
        if document["id"] in self.documents:
            return False
        self.documents[document["id"]] = dict(document)
        return True

    def update_document(self, document_id, fields):
        if document_id not in self.documents:
            return False
        self.documents[document_id].update(fields)
        return True

    def delete_document(self, document_id):
        return self.documents.pop(document_id, None) is not None


def _created(**overrides):
    fields = dict(question_id="q1", title="T", content="C", created_at=CREATED_AT, tags=["python"])
    fields.update(overrides)
    return QuestionCreated(**fields)


def _projection():
    index = Mock()
    return SearchProjection(index=index), index


class TestSearchProjectionCalls:

    def test_question_created_creates_full_document(self):
        projection, index = _projection()
        index.create_document.return_value = True

        assert projection.handle_question_created(_created()) is True

        index.create_document.assert_called_once_with({
            "id": "q1",
            "title": "T",
            "content": "C",
            "tags": ["python"],
            "createdAt": int(CREATED_AT.timestamp()),
            "answerCount": 0,
            "hasAcceptedAnswer": False,
        })
        index.update_document.assert_not_called()

    def test_question_updated_sets_editable_fields(self):
        projection, index = _projection()
        index.update_document.return_value = True

        applied = projection.handle_question_updated(QuestionUpdated(
            question_id="q1", title="T2", content="C2", tags=["python", "postgres"]
        ))

        assert applied is True
        index.update_document.assert_called_once_with(
            "q1", {"title": "T2", "content": "C2", "tags": ["python", "postgres"]}
        )

    def test_question_deleted_removes_document(self):
        projection, index = _projection()
        index.delete_document.return_value = False

        assert projection.handle_question_deleted(QuestionDeleted(question_id="q1")) is True
        index.delete_document.assert_called_once_with("q1")

    def test_answer_accepted_sets_flag(self):
        projection, index = _projection()
        index.update_document.return_value = True

        projection.handle_answer_accepted(AnswerAccepted(question_id="q1"))

        index.update_document.assert_called_once_with("q1", {"hasAcceptedAnswer": True})


class TestSearchProjectionOrdering:
    """Index state under redelivery and reordering."""

    def test_answer_count_is_set_absolutely(self):
        index = InMemoryIndex()
        projection = SearchProjection(index=index)
        projection.handle_question_created(_created())
        event = AnswerCountUpdated(question_id="q1", answer_count=3)

        projection.handle_answer_count_updated(event)
        projection.handle_answer_count_updated(event)

        assert index.documents["q1"]["answerCount"] == 3

    def test_count_before_create_is_not_applied_then_applies_on_redelivery(self):
        index = InMemoryIndex()
        projection = SearchProjection(index=index)
        count = AnswerCountUpdated(question_id="q1", answer_count=2)

        assert projection.handle_answer_count_updated(count) is False
        assert index.documents == {}

        projection.handle_question_created(_created())
        assert projection.handle_answer_count_updated(count) is True

        assert index.documents["q1"]["answerCount"] == 2
        assert index.documents["q1"]["title"] == "T"

    def test_redelivered_create_keeps_counters(self):
        index = InMemoryIndex()
        projection = SearchProjection(index=index)
        projection.handle_question_created(_created())
        projection.handle_answer_count_updated(AnswerCountUpdated(question_id="q1", answer_count=2))
        projection.handle_answer_accepted(AnswerAccepted(question_id="q1"))

        projection.handle_question_created(_created())

        assert index.documents["q1"]["answerCount"] == 2
        assert index.documents["q1"]["hasAcceptedAnswer"] is True

    def test_count_after_delete_does_not_resurrect_question(self):
        index = InMemoryIndex()
        projection = SearchProjection(index=index)
        projection.handle_question_created(_created())
        projection.handle_question_deleted(QuestionDeleted(question_id="q1"))

        applied = projection.handle_answer_count_updated(AnswerCountUpdated(question_id="q1", answer_count=1))

        assert applied is False
        assert index.documents == {}

    def test_update_after_delete_does_not_resurrect_question(self):
        index = InMemoryIndex()
        projection = SearchProjection(index=index)
        projection.handle_question_created(_created())
        projection.handle_question_deleted(QuestionDeleted(question_id="q1"))

        projection.handle_question_updated(QuestionUpdated(question_id="q1", title="T2", content="C2", tags=["python"]))
        projection.handle_answer_accepted(AnswerAccepted(question_id="q1"))

        assert index.documents == {}

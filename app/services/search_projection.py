"""Projects domain events into search index documents."""
import logging
from typing import Optional

from app.models.events import (
    AnswerAccepted,
    AnswerCountUpdated,
    QuestionCreated,
    QuestionDeleted,
    QuestionUpdated,
)
from app.models.schemas import SearchDocument
from app.services.search_index import SearchIndexClient

logger = logging.getLogger(__name__)


class SearchProjection:
    """Stateless handlers, one per event type.

    Each handler writes absolute field values, so a redelivered event
    reapplies the same state and handlers are safe under at-least-once
    delivery. Nothing orders events for the same question.

    Only ``QuestionCreated`` creates a document. The other handlers update
    an existing document and return False when the question is not indexed,
    leaving the caller to retry or drop the event. A deleted question is
    never brought back by a late update.
    """

    def __init__(self, index: Optional[SearchIndexClient] = None):
        self.index = index or SearchIndexClient()

    def handle_question_created(self, event: QuestionCreated) -> bool:
        document = SearchDocument(
            id=event.question_id,
            title=event.title,
            content=event.content,
            tags=list(event.tags),
            created_at=int(event.created_at.timestamp()),
            answer_count=0,
            has_accepted_answer=False,
        ).model_dump(by_alias=True)

        if self.index.create_document(document):
            logger.info(f"Indexed question {event.question_id}")
            return True

        # Redelivered create: keep the counters written since the first delivery
        self.index.update_document(event.question_id, {
            "title": document["title"],
            "content": document["content"],
            "tags": document["tags"],
            "createdAt": document["createdAt"],
        })
        logger.info(f"Question {event.question_id} already indexed")
        return True

    def _update(self, question_id: str, fields: dict) -> bool:
        if self.index.update_document(question_id, fields):
            logger.info(f"Question {question_id} index fields set: {fields}")
            return True
        logger.info(f"Question {question_id} is not indexed, skipped {sorted(fields)}")
        return False

    def handle_question_updated(self, event: QuestionUpdated) -> bool:
        return self._update(event.question_id, {
            "title": event.title,
            "content": event.content,
            "tags": list(event.tags),
        })

    def handle_question_deleted(self, event: QuestionDeleted) -> bool:
        if self.index.delete_document(event.question_id):
            logger.info(f"Removed question {event.question_id} from index")
        else:
            logger.info(f"Question {event.question_id} was not in the index")
        return True

    def handle_answer_count_updated(self, event: AnswerCountUpdated) -> bool:
        return self._update(event.question_id, {"answerCount": event.answer_count})

    def handle_answer_accepted(self, event: AnswerAccepted) -> bool:
        return self._update(event.question_id, {"hasAcceptedAnswer": True})

"""Business logic for questions and answers."""
import logging
import uuid
from typing import Optional

from app.models.events import (
    AnswerAccepted,
    AnswerCountUpdated,
    QuestionCreated,
    QuestionDeleted,
    QuestionUpdated,
)
from app.models.schemas import Answer, AnswerCreate, Question, QuestionCreate
from app.repositories.answer import AnswerRepository
from app.repositories.question import QuestionRepository
from app.services.event_publisher import EventPublisher
from app.services.tag_service import TagService
from app.utils.exceptions import ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class QuestionService:
    """Service for question and answer mutations.

    Every mutation follows the same shape: load and check (existence,
    ownership, tags, state), perform one relational write, then publish one
    domain event describing the change.
    """

    def __init__(self):
        self.question_repo = QuestionRepository()
        self.answer_repo = AnswerRepository()
        self.tag_service = TagService()
        self.publisher = EventPublisher()

    def _validate_tags(self, tags: list) -> None:
        missing = self.tag_service.find_invalid_tags(tags)
        if missing:
            raise ValidationError(f"Invalid tags: {', '.join(missing)}")

    def _require_question(self, question_id: str) -> dict:
        question = self.question_repo.get_question(question_id)
        if question is None:
            raise NotFoundError("Question not found")
        return question

    def _require_answer(self, question_id: str, answer_id: str) -> dict:
        answer = self.answer_repo.get_answer(question_id, answer_id)
        if answer is None:
            raise NotFoundError("Answer not found")
        return answer

    # Questions

    def create_question(self, dto: QuestionCreate, user: dict) -> Question:
        self._validate_tags(dto.tags)

        row = self.question_repo.create_question(
            question_id=_new_id(),
            title=dto.title,
            content=dto.content,
            asker_id=user["id"],
            asker_display_name=user["name"],
            tag_slugs=dto.tags,
        )
        logger.info(f"User {user['id']} created question {row['id']}")

        self.publisher.publish(QuestionCreated(
            question_id=row["id"],
            title=row["title"],
            content=row["content"],
            created_at=row["created_at"],
            tags=list(row["tag_slugs"]),
        ))
        return Question(**row)

    def list_questions(self, tag: Optional[str] = None) -> list:
        return [Question(**row) for row in self.question_repo.list_questions(tag)]

    def get_question(self, question_id: str) -> Question:
        """Return a question with its answers and count the view."""
        question = self._require_question(question_id)
        answers = self.answer_repo.list_answers(question_id)
        self.question_repo.increment_view_count(question_id)
        return Question(**question, answers=[Answer(**a) for a in answers])

    def update_question(self, question_id: str, dto: QuestionCreate, user: dict) -> None:
        question = self._require_question(question_id)
        if question["asker_id"] != user["id"]:
            raise ForbiddenError()

        self._validate_tags(dto.tags)

        row = self.question_repo.update_question(question_id, dto.title, dto.content, dto.tags)
        if row is None:
            raise NotFoundError("Question not found")
        logger.info(f"User {user['id']} updated question {question_id}")

        self.publisher.publish(QuestionUpdated(
            question_id=question_id,
            title=row["title"],
            content=row["content"],
            tags=list(row["tag_slugs"]),
        ))

    def delete_question(self, question_id: str, user: dict) -> None:
        question = self._require_question(question_id)
        if question["asker_id"] != user["id"]:
            raise ForbiddenError()

        if not self.question_repo.delete_question(question_id):
            raise NotFoundError("Question not found")
        logger.info(f"User {user['id']} deleted question {question_id}")

        self.publisher.publish(QuestionDeleted(question_id=question_id))

    # Answers

    def create_answer(self, question_id: str, dto: AnswerCreate, user: dict) -> Answer:
        self._require_question(question_id)

        row, answer_count = self.answer_repo.create_answer(
            answer_id=_new_id(),
            question_id=question_id,
            content=dto.content,
            user_id=user["id"],
            user_display_name=user["name"],
        )
        logger.info(f"User {user['id']} answered question {question_id} ({answer_count} answers)")

        self.publisher.publish(AnswerCountUpdated(question_id=question_id, answer_count=answer_count))
        return Answer(**row)

    def update_answer(self, question_id: str, answer_id: str, dto: AnswerCreate, user: dict) -> None:
        answer = self._require_answer(question_id, answer_id)
        if answer["user_id"] != user["id"]:
            raise ForbiddenError()

        if self.answer_repo.update_answer(question_id, answer_id, dto.content) is None:
            raise NotFoundError("Answer not found")
        logger.info(f"User {user['id']} updated answer {answer_id}")

    def delete_answer(self, question_id: str, answer_id: str, user: dict) -> None:
        answer = self._require_answer(question_id, answer_id)
        if answer["user_id"] != user["id"]:
            raise ForbiddenError()
        if answer["accepted"]:
            raise ValidationError("Cannot delete an accepted answer")

        answer_count = self.answer_repo.delete_answer(question_id, answer_id)
        if answer_count is None:
            # Accepted or removed between the read and the delete.
            raise ValidationError("Answer can no longer be deleted")
        logger.info(f"User {user['id']} deleted answer {answer_id} ({answer_count} answers left)")

        self.publisher.publish(AnswerCountUpdated(question_id=question_id, answer_count=answer_count))

    def accept_answer(self, question_id: str, answer_id: str, user: dict) -> None:
        question = self._require_question(question_id)
        self._require_answer(question_id, answer_id)
        if question["asker_id"] != user["id"]:
            raise ForbiddenError("Only the asker can accept an answer")
        if question["has_accepted_answer"]:
            raise ValidationError("Question already has an accepted answer")

        if not self.answer_repo.accept_answer(question_id, answer_id):
            raise ValidationError("Question already has an accepted answer")
        logger.info(f"User {user['id']} accepted answer {answer_id} on question {question_id}")

        self.publisher.publish(AnswerAccepted(question_id=question_id))

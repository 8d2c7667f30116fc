"""Celery worker that keeps the search index in sync with question events.

Run with:
    celery -A app.worker worker -Q search.questions --loglevel=INFO
"""
import logging

from celery.signals import worker_ready

from app.celery_app import celery_app
from app.config import get_settings
from app.models.events import (
    AnswerAccepted,
    AnswerCountUpdated,
    DomainEvent,
    QuestionCreated,
    QuestionDeleted,
    QuestionUpdated,
)
from app.services.search_projection import SearchProjection
from app.utils.exceptions import SearchIndexError

logger = logging.getLogger(__name__)

settings = get_settings()

projection = SearchProjection()


@worker_ready.connect
def ensure_search_collection(**kwargs):
    """Create the search collection once the worker is up."""
    try:
        projection.index.ensure_collection()
    except SearchIndexError as e:
        logger.error(f"Could not ensure search collection: {e.detail}")


def retry_until_indexed(task, event: DomainEvent, applied: bool) -> None:
    """Retry an update whose question is not indexed yet.

    Covers an update overtaking the create. Once retries run out (the
    question was deleted, or its create was lost) the event is dropped.
    """
    if applied:
        return
    if task.request.retries >= task.max_retries:
        logger.warning(
            f"Dropping {type(event).__name__} for question {event.question_id}: "
            f"not indexed after {task.request.retries} retries"
        )
        return
    raise task.retry(countdown=settings.search_retry_delay)


@celery_app.task(name=QuestionCreated.task_name)
def question_created(payload: dict) -> None:
    projection.handle_question_created(QuestionCreated.model_validate(payload))


@celery_app.task(bind=True, name=QuestionUpdated.task_name, max_retries=settings.search_retry_max)
def question_updated(self, payload: dict) -> None:
    event = QuestionUpdated.model_validate(payload)
    retry_until_indexed(self, event, projection.handle_question_updated(event))


@celery_app.task(name=QuestionDeleted.task_name)
def question_deleted(payload: dict) -> None:
    projection.handle_question_deleted(QuestionDeleted.model_validate(payload))


@celery_app.task(bind=True, name=AnswerCountUpdated.task_name, max_retries=settings.search_retry_max)
def answer_count_updated(self, payload: dict) -> None:
    event = AnswerCountUpdated.model_validate(payload)
    retry_until_indexed(self, event, projection.handle_answer_count_updated(event))


@celery_app.task(bind=True, name=AnswerAccepted.task_name, max_retries=settings.search_retry_max)
def answer_accepted(self, payload: dict) -> None:
    event = AnswerAccepted.model_validate(payload)
    retry_until_indexed(self, event, projection.handle_answer_accepted(event))

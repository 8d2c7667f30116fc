"""Domain events published by the question service.

Events are immutable facts carrying a copy of the fields the search
projection needs. They have no version or sequence number; consumers treat
every event as a last-write-wins field set.
"""
from datetime import datetime
from typing import ClassVar, List

from pydantic import BaseModel, ConfigDict


class DomainEvent(BaseModel):
    """Base class for all domain events."""
    model_config = ConfigDict(frozen=True)

    routing_key: ClassVar[str] = ""
    task_name: ClassVar[str] = ""


class QuestionCreated(DomainEvent):
    routing_key: ClassVar[str] = "question.created"
    task_name: ClassVar[str] = "search.question_created"

    question_id: str
    title: str
    content: str
    created_at: datetime
    tags: List[str]


class QuestionUpdated(DomainEvent):
    routing_key: ClassVar[str] = "question.updated"
    task_name: ClassVar[str] = "search.question_updated"

    question_id: str
    title: str
    content: str
    tags: List[str]


class QuestionDeleted(DomainEvent):
    routing_key: ClassVar[str] = "question.deleted"
    task_name: ClassVar[str] = "search.question_deleted"

    question_id: str


class AnswerCountUpdated(DomainEvent):
    routing_key: ClassVar[str] = "answer.count_updated"
    task_name: ClassVar[str] = "search.answer_count_updated"

    question_id: str
    answer_count: int


class AnswerAccepted(DomainEvent):
    routing_key: ClassVar[str] = "answer.accepted"
    task_name: ClassVar[str] = "search.answer_accepted"

    question_id: str


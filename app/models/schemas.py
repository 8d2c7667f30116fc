"""Pydantic models for request/response schemas."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

from app.config import get_settings


class QuestionCreate(BaseModel):
    """Request model for creating or updating a question."""
    title: str = Field(..., min_length=1, max_length=300, description="Question title")
    content: str = Field(..., min_length=1, description="Question body")
    tags: List[str] = Field(..., description="Tag slugs")

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("tags")
    @classmethod
    def validate_tag_list(cls, tags: List[str]) -> List[str]:
        settings = get_settings()
        if len(tags) < settings.min_tags or len(tags) > settings.max_tags:
            raise ValueError(f"Tags must be between {settings.min_tags} and {settings.max_tags}.")
        if any(not tag or not tag.strip() for tag in tags):
            raise ValueError("Tags cannot be empty or whitespace.")
        return [tag.strip() for tag in tags]


class AnswerCreate(BaseModel):
    """Request model for posting or editing an answer."""
    content: str = Field(..., min_length=1, description="Answer body")

    @field_validator("content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class Answer(BaseModel):
    """Response model for an answer."""
    id: str
    content: str
    question_id: str
    user_id: str
    user_display_name: str
    accepted: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None


class Question(BaseModel):
    """Response model for a question."""
    id: str
    title: str
    content: str
    asker_id: str
    asker_display_name: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    view_count: int = 0
    tag_slugs: List[str] = Field(default_factory=list)
    has_accepted_answer: bool = False
    answer_count: int = 0
    answers: List[Answer] = Field(default_factory=list)


class Tag(BaseModel):
    """Response model for a tag."""
    slug: str
    name: str
    description: Optional[str] = None


class SearchDocument(BaseModel):
    """Denormalized question projection stored in the search index."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[int] = Field(default=None, alias="createdAt")
    answer_count: int = Field(default=0, alias="answerCount")
    has_accepted_answer: bool = Field(default=False, alias="hasAcceptedAnswer")


class HealthCheck(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    version: str = "1.0.0"

"""Repository modules for database operations.

All repository classes are re-exported here for convenient imports.
"""
from app.repositories.question import QuestionRepository
from app.repositories.answer import AnswerRepository
from app.repositories.tag import TagRepository

__all__ = [
    "QuestionRepository",
    "AnswerRepository",
    "TagRepository",
]

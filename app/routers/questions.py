"""Question and answer routes."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.auth import get_current_user
from app.models.schemas import Answer, AnswerCreate, Question, QuestionCreate
from app.services.question_service import QuestionService

router = APIRouter(prefix="/questions", tags=["questions"])

CurrentUser = Annotated[dict, Depends(get_current_user)]

question_service = QuestionService()


@router.post("", response_model=Question, status_code=status.HTTP_201_CREATED)
async def create_question(data: QuestionCreate, current_user: CurrentUser, response: Response):
    """Ask a new question."""
    question = question_service.create_question(data, current_user)
    response.headers["Location"] = f"/questions/{question.id}"
    return question


@router.get("", response_model=List[Question])
async def list_questions(tag: Optional[str] = Query(default=None, description="Filter by tag slug")):
    """List questions, newest first."""
    return question_service.list_questions(tag)


@router.get("/{question_id}", response_model=Question)
async def get_question(question_id: str):
    """Get a question with its answers. Counts as a view."""
    return question_service.get_question(question_id)


@router.put("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_question(question_id: str, data: QuestionCreate, current_user: CurrentUser):
    question_service.update_question(question_id, data, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(question_id: str, current_user: CurrentUser):
    question_service.delete_question(question_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{question_id}/answers", response_model=Answer, status_code=status.HTTP_201_CREATED)
async def create_answer(question_id: str, data: AnswerCreate, current_user: CurrentUser):
    """Post an answer to a question."""
    return question_service.create_answer(question_id, data, current_user)


@router.put("/{question_id}/answers/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_answer(question_id: str, answer_id: str, data: AnswerCreate, current_user: CurrentUser):
    question_service.update_answer(question_id, answer_id, data, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{question_id}/answers/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_answer(question_id: str, answer_id: str, current_user: CurrentUser):
    """Delete an answer. Accepted answers cannot be deleted."""
    question_service.delete_answer(question_id, answer_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{question_id}/answers/{answer_id}/accept", status_code=status.HTTP_204_NO_CONTENT)
async def accept_answer(question_id: str, answer_id: str, current_user: CurrentUser):
    """Accept an answer. Only the asker can accept, and only once per question."""
    question_service.accept_answer(question_id, answer_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

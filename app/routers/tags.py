"""Tag routes."""
from typing import List

from fastapi import APIRouter

from app.models.schemas import Tag
from app.services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])

tag_service = TagService()


@router.get("", response_model=List[Tag])
async def list_tags():
    """List all known tags."""
    return tag_service.list_tags()

"""Search routes backed by the search index."""
import re
from typing import List, Optional, Tuple

from fastapi import APIRouter, Query

from app.config import get_settings
from app.models.schemas import SearchDocument
from app.services.search_index import SearchIndexClient

router = APIRouter(prefix="/search", tags=["search"])

search_index = SearchIndexClient()

TAG_QUERY_PATTERN = re.compile(r"^\s*\[(?P<tag>[^\]]+)\]\s*(?P<term>.*)$")


def parse_search_query(query: str) -> Tuple[str, Optional[str]]:
    """Split a leading ``[tag]`` off a search query.

    ``"[python] decorators"`` -> ``("decorators", "python")``. An empty
    term becomes ``"*"`` (match everything).
    """
    match = TAG_QUERY_PATTERN.match(query or "")
    if match:
        term = match.group("term").strip()
        return term or "*", match.group("tag").strip()
    return (query or "").strip() or "*", None


@router.get("", response_model=List[SearchDocument])
async def search_questions(query: str = Query(default="", description="Search text, optionally prefixed with [tag]")):
    """Full-text search over question titles and bodies, newest first."""
    term, tag = parse_search_query(query)
    filter_by = f"tags:=`{tag}`" if tag else None
    return await search_index.search(
        term,
        query_by="title,content",
        filter_by=filter_by,
        sort_by="createdAt:desc",
        per_page=get_settings().search_page_size,
    )


@router.get("/similar-titles", response_model=List[SearchDocument])
async def similar_titles(query: str = Query(..., min_length=1)):
    """Titles resembling the given text, for duplicate hints while asking."""
    return await search_index.search(query, query_by="title", per_page=5)

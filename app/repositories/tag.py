"""Repository for tag lookups."""
from typing import List, Set

from app.database import get_db_connection


class TagRepository:
    """Repository for tag lookups."""

    @staticmethod
    def list_tags() -> list:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT slug, name, description FROM tags ORDER BY slug")
                return cur.fetchall()

    @staticmethod
    def find_existing_slugs(slugs: List[str]) -> Set[str]:
        """Return the subset of ``slugs`` that exist in the tags table."""
        if not slugs:
            return set()
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT slug FROM tags WHERE slug = ANY(%s)",
                    (list(slugs),)
                )
                return {row["slug"] for row in cur.fetchall()}

"""Repository for question-related database operations."""
from typing import List, Optional

from app.database import get_db_connection

QUESTION_COLUMNS = """
    id, title, content, asker_id, asker_display_name, created_at, updated_at,
    view_count, tag_slugs, has_accepted_answer, answer_count
"""


class QuestionRepository:
    """Repository for question-related database operations."""

    @staticmethod
    def create_question(
        question_id: str,
        title: str,
        content: str,
        asker_id: str,
        asker_display_name: str,
        tag_slugs: List[str],
    ) -> dict:
        """Insert a new question and return the stored row."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO questions (id, title, content, asker_id, asker_display_name, tag_slugs)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING {QUESTION_COLUMNS}
                    """,
                    (question_id, title, content, asker_id, asker_display_name, tag_slugs)
                )
                row = cur.fetchone()
                conn.commit()
                return row

    @staticmethod
    def list_questions(tag: Optional[str] = None) -> list:
        """List questions newest first, optionally filtered by tag slug."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                if tag:
                    cur.execute(
                        f"""
                        SELECT {QUESTION_COLUMNS}
                        FROM questions
                        WHERE %s = ANY(tag_slugs)
                        ORDER BY created_at DESC
                        """,
                        (tag,)
                    )
                else:
                    cur.execute(
                        f"SELECT {QUESTION_COLUMNS} FROM questions ORDER BY created_at DESC"
                    )
                return cur.fetchall()

    @staticmethod
    def get_question(question_id: str) -> Optional[dict]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {QUESTION_COLUMNS} FROM questions WHERE id = %s",
                    (question_id,)
                )
                return cur.fetchone()

    @staticmethod
    def increment_view_count(question_id: str) -> bool:
        """Bump the view counter in place.

        The increment is a single field-level UPDATE so concurrent readers
        never overwrite each other's increments.
        """
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE questions SET view_count = view_count + 1 WHERE id = %s",
                    (question_id,)
                )
                updated = cur.rowcount > 0
                conn.commit()
                return updated

    @staticmethod
    def update_question(question_id: str, title: str, content: str, tag_slugs: List[str]) -> Optional[dict]:
        """Overwrite the editable fields of a question and stamp updated_at."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE questions
                    SET title = %s, content = %s, tag_slugs = %s, updated_at = NOW()
                    WHERE id = %s
                    RETURNING {QUESTION_COLUMNS}
                    """,
                    (title, content, tag_slugs, question_id)
                )
                row = cur.fetchone()
                conn.commit()
                return row

    @staticmethod
    def delete_question(question_id: str) -> bool:
        """Delete a question; its answers go with it (ON DELETE CASCADE)."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM questions WHERE id = %s",
                    (question_id,)
                )
                deleted = cur.rowcount > 0
                conn.commit()
                return deleted

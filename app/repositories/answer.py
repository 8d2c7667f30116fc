"""Repository for answer-related database operations."""
from typing import Optional, Tuple

from app.database import get_db_connection

ANSWER_COLUMNS = """
    id, content, question_id, user_id, user_display_name, accepted, created_at, updated_at
"""


class AnswerRepository:
    """Repository for answer-related database operations.

    Statements that touch both an answer and its question's denormalized
    counters run inside one connection block and commit once, so the
    answer row and ``answer_count`` / ``has_accepted_answer`` never diverge.
    """

    @staticmethod
    def list_answers(question_id: str) -> list:
        """Return a question's answers, accepted answer first, then oldest first."""
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {ANSWER_COLUMNS}
                    FROM answers
                    WHERE question_id = %s
                    ORDER BY accepted DESC, created_at ASC
                    """,
                    (question_id,)
                )
                return cur.fetchall()

    @staticmethod
    def get_answer(question_id: str, answer_id: str) -> Optional[dict]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {ANSWER_COLUMNS} FROM answers WHERE id = %s AND question_id = %s",
                    (answer_id, question_id)
                )
                return cur.fetchone()

    @staticmethod
    def create_answer(
        answer_id: str,
        question_id: str,
        content: str,
        user_id: str,
        user_display_name: str,
    ) -> Tuple[dict, int]:
        """Insert an answer and bump the question's answer count.

        Returns:
            The stored answer row and the question's new answer count.
        """
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO answers (id, question_id, content, user_id, user_display_name)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {ANSWER_COLUMNS}
                    """,
                    (answer_id, question_id, content, user_id, user_display_name)
                )
                answer = cur.fetchone()
                cur.execute(
                    """
                    UPDATE questions SET answer_count = answer_count + 1
                    WHERE id = %s
                    RETURNING answer_count
                    """,
                    (question_id,)
                )
                answer_count = cur.fetchone()["answer_count"]
                conn.commit()
                return answer, answer_count

    @staticmethod
    def update_answer(question_id: str, answer_id: str, content: str) -> Optional[dict]:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE answers SET content = %s, updated_at = NOW()
                    WHERE id = %s AND question_id = %s
                    RETURNING {ANSWER_COLUMNS}
                    """,
                    (content, answer_id, question_id)
                )
                row = cur.fetchone()
                conn.commit()
                return row

    @staticmethod
    def delete_answer(question_id: str, answer_id: str) -> Optional[int]:
        """Delete a non-accepted answer and decrement the question's answer count.

        Returns:
            The question's new answer count, or None when nothing was deleted
            (missing answer, or the answer is accepted).
        """
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    DELETE FROM answers
                    WHERE id = %s AND question_id = %s AND NOT accepted
                    """,
                    (answer_id, question_id)
                )
                if cur.rowcount == 0:
                    conn.rollback()
                    return None
                cur.execute(
                    """
                    UPDATE questions SET answer_count = GREATEST(answer_count - 1, 0)
                    WHERE id = %s
                    RETURNING answer_count
                    """,
                    (question_id,)
                )
                answer_count = cur.fetchone()["answer_count"]
                conn.commit()
                return answer_count

    @staticmethod
    def accept_answer(question_id: str, answer_id: str) -> bool:
        """Mark an answer accepted if the question has none yet.

        The question flag is claimed with a conditional UPDATE, so of two
        concurrent accepts only one succeeds.

        Returns:
            True when the answer was accepted, False when the question
            already had an accepted answer.
        """
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE questions SET has_accepted_answer = TRUE
                    WHERE id = %s AND NOT has_accepted_answer
                    """,
                    (question_id,)
                )
                if cur.rowcount == 0:
                    conn.rollback()
                    return False
                cur.execute(
                    """
                    UPDATE answers SET accepted = TRUE, updated_at = NOW()
                    WHERE id = %s AND question_id = %s
                    """,
                    (answer_id, question_id)
                )
                if cur.rowcount == 0:
                    conn.rollback()
                    return False
                conn.commit()
                return True

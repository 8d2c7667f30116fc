"""Shared fixtures for repository unit tests."""
import pytest
from contextlib import ExitStack
from unittest.mock import MagicMock, patch

REPOSITORY_MODULES = (
    "app.repositories.question",
    "app.repositories.answer",
    "app.repositories.tag",
)


@pytest.fixture
def mock_db():
    """Mock get_db_connection in every repository module, yielding (connection, cursor).

    Usage in tests:
        def test_something(self, mock_db):
            conn, cur = mock_db
            cur.fetchone.return_value = {"id": "q1"}
            # ... call repository method ...
            cur.execute.assert_called_once()
    """
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)

    with ExitStack() as stack:
        for module in REPOSITORY_MODULES:
            mock_get_conn = stack.enter_context(patch(f"{module}.get_db_connection"))
            mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
            mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
        yield mock_conn, mock_cursor

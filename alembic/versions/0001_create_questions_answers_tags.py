"""Questions, answers and tags tables

Revision ID: 0001_create_questions_answers_tags
Revises:
Create Date: 2026-01-21
"""
from alembic import op

revision = '0001_create_questions_answers_tags'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS tags (
            slug TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT
        );
        CREATE TABLE IF NOT EXISTS questions (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            content TEXT NOT NULL,
            asker_id TEXT NOT NULL,
            asker_display_name TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ,
            view_count INTEGER NOT NULL DEFAULT 0,
            tag_slugs TEXT[] NOT NULL DEFAULT '{}',
            has_accepted_answer BOOLEAN NOT NULL DEFAULT FALSE,
            answer_count INTEGER NOT NULL DEFAULT 0
        );
        CREATE TABLE IF NOT EXISTS answers (
            id TEXT PRIMARY KEY,
            question_id TEXT NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
            content TEXT NOT NULL,
            user_id TEXT NOT NULL,
            user_display_name TEXT NOT NULL,
            accepted BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ
        );
        CREATE INDEX IF NOT EXISTS idx_questions_created_at ON questions(created_at);
        CREATE INDEX IF NOT EXISTS idx_questions_tag_slugs ON questions USING GIN (tag_slugs);
        CREATE INDEX IF NOT EXISTS idx_answers_question_id ON answers(question_id);
        -- At most one accepted answer per question
        CREATE UNIQUE INDEX IF NOT EXISTS ux_answers_one_accepted
            ON answers(question_id) WHERE accepted;
        """
    )

def downgrade():
    op.execute(
        """
        DROP TABLE IF EXISTS answers;
        DROP TABLE IF EXISTS questions;
        DROP TABLE IF EXISTS tags;
        """
    )

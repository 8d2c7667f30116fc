"""Seed the default tag set

Revision ID: 0002_seed_tags
Revises: 0001_create_questions_answers_tags
Create Date: 2026-01-22
"""
from alembic import op

revision = '0002_seed_tags'
down_revision = '0001_create_questions_answers_tags'
branch_labels = None
depends_on = None

TAGS = [
    ("aspire", "Aspire", "Orchestrating distributed applications for local development"),
    ("csharp", "C#", "The C# programming language"),
    ("dotnet", ".NET", "The .NET runtime and SDK"),
    ("efcore", "EF Core", "Entity Framework Core object-relational mapper"),
    ("javascript", "JavaScript", "The JavaScript programming language"),
    ("keycloak", "Keycloak", "Open source identity and access management"),
    ("nextjs", "Next.js", "React framework for web applications"),
    ("postgres", "PostgreSQL", "The PostgreSQL relational database"),
    ("python", "Python", "The Python programming language"),
    ("rabbitmq", "RabbitMQ", "Message broker implementing AMQP"),
    ("typescript", "TypeScript", "Typed superset of JavaScript"),
    ("typesense", "Typesense", "Typo-tolerant full-text search engine"),
]

def upgrade():
    values = ",\n".join(
        "('{}', '{}', '{}')".format(*(part.replace("'", "''") for part in tag))
        for tag in TAGS
    )
    op.execute(
        f"""
        INSERT INTO tags (slug, name, description) VALUES
        {values}
        ON CONFLICT (slug) DO NOTHING;
        """
    )

def downgrade():
    slugs = ", ".join(f"'{slug}'" for slug, _, _ in TAGS)
    op.execute(f"DELETE FROM tags WHERE slug IN ({slugs});")

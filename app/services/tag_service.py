"""Tag validation against the tags table."""
from typing import List

from app.repositories.tag import TagRepository


class TagService:
    """Checks candidate tag slugs against the known tags.

    Tags are never created from a question submission; an unknown slug is a
    client error.
    """

    def __init__(self):
        self.tag_repo = TagRepository()

    def find_invalid_tags(self, slugs: List[str]) -> List[str]:
        """Return the slugs that do not exist, in input order without duplicates."""
        existing = self.tag_repo.find_existing_slugs(slugs)
        missing = []
        for slug in slugs:
            if slug not in existing and slug not in missing:
                missing.append(slug)
        return missing

    def list_tags(self) -> list:
        return self.tag_repo.list_tags()

"""Post (article) documents."""

from __future__ import annotations

from lateedition.schemas.base import Document


class PostMeta(Document):
    """Index entry for a post: everything except the body."""

    id: str
    title: str
    slug: str
    excerpt: str = ""
    cover_image: str = ""
    created_at: str
    updated_at: str


class Post(PostMeta):
    """Full post document."""

    content: str = ""

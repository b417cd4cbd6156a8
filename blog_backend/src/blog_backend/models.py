from __future__ import annotations

from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class PostEntity(TypedDict, total=False):
    """
    A blog post as it is stored in the posts file and passed between layers.

    Keys use the on-disk (camelCase) names so the stored JSON array can be
    read and written without translation.

    Fields:
    - id: Millisecond epoch assigned at creation; doubles as the ordering key
    - title: Post title (required at creation, may be cleared by an update)
    - content: Optional body text (markdown in practice)
    - createdAt: ISO8601 UTC creation timestamp
    - updatedAt: ISO8601 UTC timestamp of the last update; absent until then
    """

    id: int
    title: Optional[str]
    content: Optional[str]
    createdAt: str
    updatedAt: str

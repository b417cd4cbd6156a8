from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .errors import NotFound, ValidationError
from .models import PostEntity
from .schemas import PostCreate, PostUpdate
from .settings import get_settings
from .utils import iso_now, now_ms

logger = logging.getLogger(__name__)


def _set_or_drop(post: PostEntity, key: str, value: Optional[str]) -> None:
    # Absent values leave no key behind in the stored JSON
    if value is None:
        post.pop(key, None)  # type: ignore[misc]
    else:
        post[key] = value  # type: ignore[literal-required]


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for post storage backends."""

    @abstractmethod
    def list(self) -> List[PostEntity]:
        """Return every post, newest (highest id) first."""

    @abstractmethod
    def get(self, post_id: int) -> Optional[PostEntity]:
        """Return a post by id, or None if not found."""

    @abstractmethod
    def create(self, data: PostCreate) -> PostEntity:
        """
        Create and return a new post.

        Raises:
            ValidationError if the title is missing or empty.
        """

    @abstractmethod
    def update(self, post_id: int, data: PostUpdate) -> PostEntity:
        """
        Overwrite title/content of an existing post and stamp updatedAt.

        Raises:
            NotFound if no post has this id.
        """

    @abstractmethod
    def delete(self, post_id: int) -> None:
        """Remove any post with this id. Unknown ids are a no-op."""


class CollectionRepository(Repository):
    """
    Repository whose unit of persistence is the whole post collection.

    Every operation loads the full collection, changes it, and writes the full
    collection back. A per-instance lock serializes these cycles so that
    concurrent writers within one process cannot lose each other's updates.
    """

    def __init__(self) -> None:
        self._lock = RLock()

    @abstractmethod
    def _load(self) -> List[PostEntity]:
        """Read the complete collection from the backing store."""

    @abstractmethod
    def _save(self, posts: List[PostEntity]) -> None:
        """Replace the complete collection in the backing store."""

    def _allocate_id(self, posts: List[PostEntity]) -> int:
        # Clock-derived, bumped past the newest id so same-millisecond creates stay unique
        newest = max((p["id"] for p in posts), default=0)
        return max(now_ms(), newest + 1)

    def list(self) -> List[PostEntity]:
        with self._lock:
            posts = self._load()
        return sorted(posts, key=lambda p: p["id"], reverse=True)

    def get(self, post_id: int) -> Optional[PostEntity]:
        with self._lock:
            for post in self._load():
                if post["id"] == post_id:
                    return post
        return None

    def create(self, data: PostCreate) -> PostEntity:
        if not data.title:
            raise ValidationError("Title is required")

        with self._lock:
            posts = self._load()
            post: PostEntity = {"id": self._allocate_id(posts), "title": data.title}
            _set_or_drop(post, "content", data.content)
            post["createdAt"] = iso_now()
            posts.insert(0, post)
            self._save(posts)

        logger.info("Created post %s", post["id"])
        return post

    def update(self, post_id: int, data: PostUpdate) -> PostEntity:
        with self._lock:
            posts = self._load()
            for post in posts:
                if post["id"] == post_id:
                    break
            else:
                raise NotFound("Post not found")

            _set_or_drop(post, "title", data.title)
            _set_or_drop(post, "content", data.content)
            post["updatedAt"] = iso_now()
            self._save(posts)

        logger.info("Updated post %s", post_id)
        return post

    def delete(self, post_id: int) -> None:
        with self._lock:
            posts = self._load()
            remaining = [p for p in posts if p["id"] != post_id]
            self._save(remaining)

        if len(remaining) != len(posts):
            logger.info("Deleted post %s", post_id)


class InMemoryRepository(CollectionRepository):
    """
    Thread-safe in-memory repository suitable for testing.
    """

    def __init__(self, posts: Optional[List[PostEntity]] = None) -> None:
        super().__init__()
        self._posts: List[PostEntity] = [p.copy() for p in posts or []]

    def _load(self) -> List[PostEntity]:
        # Return copies to avoid external mutation
        return [p.copy() for p in self._posts]

    def _save(self, posts: List[PostEntity]) -> None:
        self._posts = [p.copy() for p in posts]


# PUBLIC_INTERFACE
@lru_cache(maxsize=None)
def get_repository() -> Repository:
    """
    Factory returning the process-wide repository configured in settings.
    - json: JsonFileRepository backed by POSTS_FILE
    - memory: InMemoryRepository (contents are lost on restart)
    """
    settings = get_settings()
    if settings.persistence_backend == "memory":
        return InMemoryRepository()

    from .db import JsonFileRepository

    return JsonFileRepository(settings.posts_file)

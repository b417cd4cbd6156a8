from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import List

from .models import PostEntity
from .repositories import CollectionRepository
from .settings import Settings

logger = logging.getLogger(__name__)


class JsonFileRepository(CollectionRepository):
    """
    Repository persisting all posts as one pretty-printed JSON array file.

    The file is re-read on every operation and rewritten in full on every
    mutation; writes go through a temporary sibling file and os.replace so the
    file is never observed half-written.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self._path = path
        init_posts_file(path)

    def _load(self) -> List[PostEntity]:
        with open(self._path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, posts: List[PostEntity]) -> None:
        directory = os.path.dirname(self._path) or "."
        fd, tmp_path = tempfile.mkstemp(prefix=".posts-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(posts, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


# PUBLIC_INTERFACE
def init_posts_file(path: str) -> None:
    """Create the posts file (and its directory) holding an empty array if missing."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    if not os.path.exists(path):
        with open(path, "w", encoding="utf-8") as f:
            f.write("[]")
        logger.info("Initialized empty posts file at %s", path)


# PUBLIC_INTERFACE
def ensure_storage(settings: Settings) -> None:
    """
    Create the data, upload and public directories plus the posts file.

    Errors are not handled here: a filesystem that cannot hold these paths is
    fatal at startup.
    """
    for directory in (settings.data_dir, settings.upload_dir, settings.public_dir):
        os.makedirs(directory, exist_ok=True)
    init_posts_file(settings.posts_file)

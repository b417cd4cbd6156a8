from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from ..auth import require_admin
from ..errors import NotFound
from ..repositories import Repository, get_repository
from ..schemas import DeleteResult, ErrorOut, PostCreate, PostOut, PostUpdate
from ..utils import parse_post_id

router = APIRouter(
    prefix="/api/posts",
    tags=["posts"],
)

_auth_responses = {401: {"model": ErrorOut, "description": "Not logged in or session expired"}}


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[PostOut],
    response_model_exclude_none=True,
    summary="List Posts",
    description="Return every post, newest first. There is no pagination.",
)
def list_posts(repo: Repository = Depends(_get_repo)) -> List[PostOut]:
    return [PostOut(**p) for p in repo.list()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{post_id}",
    response_model=PostOut,
    response_model_exclude_none=True,
    summary="Get Post",
    responses={404: {"model": ErrorOut, "description": "Post not found"}},
)
def get_post(post_id: str, repo: Repository = Depends(_get_repo)) -> PostOut:
    """
    Retrieve a single post. Non-numeric ids simply match nothing.
    """
    pid = parse_post_id(post_id)
    item = repo.get(pid) if pid is not None else None
    if item is None:
        raise NotFound("Post not found")
    return PostOut(**item)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=PostOut,
    response_model_exclude_none=True,
    summary="Create Post",
    dependencies=[Depends(require_admin)],
    responses={400: {"model": ErrorOut, "description": "Title missing"}, **_auth_responses},
)
def create_post(payload: PostCreate, repo: Repository = Depends(_get_repo)) -> PostOut:
    created = repo.create(payload)
    return PostOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{post_id}",
    response_model=PostOut,
    response_model_exclude_none=True,
    summary="Update Post",
    description=(
        "Overwrite title and content of a post and stamp updatedAt. "
        "Fields left out of the body are cleared."
    ),
    dependencies=[Depends(require_admin)],
    responses={404: {"model": ErrorOut, "description": "Post not found"}, **_auth_responses},
)
def update_post(post_id: str, payload: PostUpdate, repo: Repository = Depends(_get_repo)) -> PostOut:
    pid = parse_post_id(post_id)
    if pid is None:
        raise NotFound("Post not found")
    updated = repo.update(pid, payload)
    return PostOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{post_id}",
    response_model=DeleteResult,
    summary="Delete Post",
    description="Delete a post by id. Unknown ids still succeed.",
    dependencies=[Depends(require_admin)],
    responses=_auth_responses,
)
def delete_post(post_id: str, repo: Repository = Depends(_get_repo)) -> DeleteResult:
    pid = parse_post_id(post_id)
    if pid is not None:
        repo.delete(pid)
    return DeleteResult(ok=True)

"""
Comment API routes for the burritos webapp.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .auth import require_user
from .comment_store import CommentStore
from .settings import Settings, get_settings
from .shared.filenames import DateKey
from .shared.json_io import run_blocking
from .shared.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


class CommentRequest(BaseModel):
    comment: str


def get_comment_store(settings: Settings = Depends(get_settings)) -> CommentStore:
    return CommentStore(settings.main_dir)


@router.get("/comments/{json_filename}")
async def get_comments(json_filename: str, store: CommentStore = Depends(get_comment_store)):
    """Comment attached to an acquisition, ``{"comment": null}`` if none."""
    comment = await run_blocking(store.get_comment, json_filename)
    logger.debug("Comments found for %s: %s", json_filename, "Yes" if comment else "No")
    return {"comment": comment}


@router.post("/comments/{json_filename}", dependencies=[Depends(require_user)])
async def post_comments(
    json_filename: str,
    body: CommentRequest,
    store: CommentStore = Depends(get_comment_store),
):
    await run_blocking(store.set_comment, json_filename, body.comment)
    return {"success": True, "message": "Comment updated successfully"}


@router.get("/{year}/{month}/{day}/comments")
async def get_day_comments(year: str, month: str, day: str, store: CommentStore = Depends(get_comment_store)):
    """Every comment recorded for one day."""
    return await run_blocking(store.list_comments, DateKey.from_parts(year, month, day))

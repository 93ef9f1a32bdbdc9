"""Mapping functions to convert Reddit listing JSON to our data models."""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from penny_trends.exceptions import RecordValidationError
from penny_trends.models.submission import Comment, Post

logger = logging.getLogger(__name__)

POST_FIELDS = ("id", "title", "selftext", "score", "created_utc", "subreddit", "permalink", "author")
COMMENT_FIELDS = ("id", "body", "score", "created_utc", "author")


def listing_children(payload: Any) -> List[Dict[str, Any]]:
    """
    Return the ``children`` of a Reddit listing.

    Raises:
        RecordValidationError: If the payload is not a listing
    """
    try:
        children = payload["data"]["children"]
    except (KeyError, TypeError) as e:
        raise RecordValidationError(f"Malformed listing payload: {e!r}") from e
    if not isinstance(children, list):
        raise RecordValidationError("Listing children is not a list")
    return children


def child_to_post(child: Dict[str, Any]) -> Post:
    """
    Convert one listing child into a Post.

    Args:
        child: ``{"kind": "t3", "data": {...}}`` entry from a listing

    Returns:
        Post without comments

    Raises:
        RecordValidationError: If required fields are missing or malformed
    """
    data = child.get("data") if isinstance(child, dict) else None
    if not isinstance(data, dict):
        raise RecordValidationError("Listing child has no data")

    try:
        return Post.model_validate({key: data.get(key) for key in POST_FIELDS if key in data})
    except ValidationError as e:
        raise RecordValidationError(f"Invalid post {data.get('id')}: {e.error_count()} field errors") from e


def children_to_posts(children: List[Dict[str, Any]]) -> List[Post]:
    """
    Convert listing children to posts, skipping the ones that fail validation.

    Args:
        children: Listing children

    Returns:
        List of valid posts, in listing order
    """
    posts = []

    for child in children:
        try:
            posts.append(child_to_post(child))
        except RecordValidationError as e:
            logger.warning(f"Skipping post: {e}")

    return posts


def child_to_comment(child: Dict[str, Any]) -> Comment:
    """
    Convert a ``t1`` thread child into a Comment.

    Raises:
        RecordValidationError: If required fields are missing or malformed
    """
    data = child.get("data") if isinstance(child, dict) else None
    if not isinstance(data, dict):
        raise RecordValidationError("Comment child has no data")

    try:
        return Comment.model_validate({key: data.get(key) for key in COMMENT_FIELDS if key in data})
    except ValidationError as e:
        raise RecordValidationError(f"Invalid comment {data.get('id')}: {e.error_count()} field errors") from e

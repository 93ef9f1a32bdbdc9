"""Shared fixtures for the Penny Trends test-suite."""

import pytest

from penny_trends.models import Comment, Post


@pytest.fixture
def post_data():
    """Factory for raw listing ``data`` dicts as Reddit returns them."""

    def make(post_id="p1", title="$GME to the moon", score=12, author="alice", subreddit="pennystocks", **extra):
        data = {
            "id": post_id,
            "title": title,
            "selftext": "",
            "score": score,
            "created_utc": 1700000000.0,
            "subreddit": subreddit,
            "permalink": f"/r/{subreddit}/comments/{post_id}/slug/",
            "author": author,
        }
        data.update(extra)
        return data

    return make


@pytest.fixture
def listing():
    """Wrap raw ``data`` dicts into a listing payload."""

    def make(*datas, kind="t3"):
        return {"kind": "Listing", "data": {"children": [{"kind": kind, "data": d} for d in datas]}}

    return make


@pytest.fixture
def make_post(post_data):
    """Factory for validated Post models."""

    def make(post_id="p1", title="$GME to the moon", score=12, author="alice", comments=(), **extra):
        post = Post.model_validate(post_data(post_id, title, score, author, **extra))
        return post.with_comments(comments) if comments else post

    return make


@pytest.fixture
def make_comment():
    def make(comment_id="c1", body="GME looks good", score=3, author="bob"):
        return Comment(id=comment_id, body=body, score=score, created_utc=1700000100.0, author=author)

    return make

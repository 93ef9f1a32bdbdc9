"""Tests for the listing mapping functions."""

import pytest

from penny_trends.exceptions import RecordValidationError
from penny_trends.models.mapping import (
    child_to_comment,
    child_to_post,
    children_to_posts,
    listing_children,
)


def test_child_to_post(post_data):
    data = post_data("abc", "Is ABCD stock worth it?", score=42, selftext="Some DD here")

    post = child_to_post({"kind": "t3", "data": data})

    assert post.id == "abc"
    assert post.title == "Is ABCD stock worth it?"
    assert post.body == "Some DD here"
    assert post.score == 42
    assert post.forum_name == "pennystocks"
    assert post.permalink == "/r/pennystocks/comments/abc/slug/"
    assert post.comments == ()
    assert post.content == "Is ABCD stock worth it?\nSome DD here"


def test_child_to_post_deleted_author_and_null_body(post_data):
    data = post_data(author=None, selftext=None)

    post = child_to_post({"kind": "t3", "data": data})

    assert post.author == "[deleted]"
    assert post.body == ""


@pytest.mark.parametrize("field", ["id", "title", "permalink", "created_utc"])
def test_child_to_post_missing_required_field(post_data, field):
    data = post_data()
    del data[field]

    with pytest.raises(RecordValidationError):
        child_to_post({"kind": "t3", "data": data})


def test_child_to_post_blank_title(post_data):
    with pytest.raises(RecordValidationError):
        child_to_post({"kind": "t3", "data": post_data(title="   ")})


def test_children_to_posts_skips_invalid(post_data, listing):
    bad = post_data("bad")
    del bad["title"]
    payload = listing(post_data("p1"), bad, post_data("p2"))

    posts = children_to_posts(listing_children(payload))

    assert [p.id for p in posts] == ["p1", "p2"]


@pytest.mark.parametrize("payload", [None, {}, {"data": {}}, {"data": {"children": "nope"}}, []])
def test_listing_children_rejects_malformed_payload(payload):
    with pytest.raises(RecordValidationError):
        listing_children(payload)


def test_child_to_comment():
    child = {
        "kind": "t1",
        "data": {"id": "c1", "body": "$GME!", "score": 7, "created_utc": 1700000000, "author": None},
    }

    comment = child_to_comment(child)

    assert comment.id == "c1"
    assert comment.body == "$GME!"
    assert comment.score == 7
    assert comment.author == "[deleted]"


def test_child_to_comment_without_data():
    with pytest.raises(RecordValidationError):
        child_to_comment({"kind": "more"})

"""Tests for the collector module."""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock

from penny_trends.collector.collector import SubmissionCollector
from penny_trends.collector.comment_sampler import CommentSampler
from penny_trends.config import ScoringConfig
from penny_trends.exceptions import FetchExhausted, RecordValidationError
from penny_trends.models import Comment
from penny_trends.reddit_client import RedditClient


def post_child(post_id, title="$GME to the moon", score=12):
    return {
        "kind": "t3",
        "data": {
            "id": post_id,
            "title": title,
            "selftext": "",
            "score": score,
            "created_utc": 1700000000.0,
            "subreddit": "pennystocks",
            "permalink": f"/r/pennystocks/comments/{post_id}/slug/",
            "author": "alice",
        },
    }


def listing(*children):
    return {"kind": "Listing", "data": {"children": list(children)}}


class TestSubmissionCollector(unittest.TestCase):
    """Test cases for the SubmissionCollector class."""

    def setUp(self):
        self.mock_reddit_client = MagicMock(spec=RedditClient)
        self.mock_sampler = MagicMock(spec=CommentSampler)
        self.mock_sampler.sample = AsyncMock(return_value=[])
        self.mock_prometheus_exporter = MagicMock()

        self.collector = SubmissionCollector(
            self.mock_reddit_client,
            ScoringConfig(),
            comment_sampler=self.mock_sampler,
            prometheus_exporter=self.mock_prometheus_exporter,
        )

    def test_collect_reads_new_and_top_listings(self):
        self.mock_reddit_client.get_listing = AsyncMock(side_effect=[
            listing(post_child("p1"), post_child("p2")),
            listing(post_child("p2"), post_child("p3")),
        ])

        posts = asyncio.run(self.collector.collect("pennystocks"))

        self.assertEqual([p.id for p in posts], ["p1", "p2", "p3"])
        calls = self.mock_reddit_client.get_listing.await_args_list
        self.assertEqual(calls[0].args, ("pennystocks", "new", {"limit": 50}))
        self.assertEqual(calls[1].args, ("pennystocks", "top", {"limit": 50, "t": "week"}))
        self.assertEqual(self.mock_sampler.sample.await_count, 3)
        self.mock_prometheus_exporter.record_submissions_collected.assert_called_once_with("pennystocks", 3)

    def test_collect_attaches_sampled_comments(self):
        comment = Comment(id="c1", body="GME!", score=4, created_utc=1700000000.0, author="bob")
        self.mock_reddit_client.get_listing = AsyncMock(side_effect=[listing(post_child("p1")), listing()])
        self.mock_sampler.sample = AsyncMock(return_value=[comment])

        posts = asyncio.run(self.collector.collect("pennystocks"))

        self.assertEqual(posts[0].comments, (comment,))

    def test_collect_skips_invalid_posts(self):
        invalid = post_child("bad")
        del invalid["data"]["permalink"]
        self.mock_reddit_client.get_listing = AsyncMock(side_effect=[listing(invalid, post_child("p1")), listing()])

        posts = asyncio.run(self.collector.collect("pennystocks"))

        self.assertEqual([p.id for p in posts], ["p1"])

    def test_collect_propagates_fetch_errors(self):
        self.mock_reddit_client.get_listing = AsyncMock(
            side_effect=FetchExhausted("Failed after 5 attempts", url="u", attempts=5)
        )

        with self.assertRaises(FetchExhausted):
            asyncio.run(self.collector.collect("pennystocks"))

    def test_collect_rejects_malformed_listing(self):
        self.mock_reddit_client.get_listing = AsyncMock(return_value={"error": 403})

        with self.assertRaises(RecordValidationError):
            asyncio.run(self.collector.collect("pennystocks"))


if __name__ == "__main__":
    unittest.main()

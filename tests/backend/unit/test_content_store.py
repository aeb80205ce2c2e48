"""
Unit tests for services.content_store module.
Runs against an in-memory database with the fake classifier from conftest.
"""
import asyncio

import pytest

from app.core.errors import PostNotFoundError, ValidationError
from app.models.post import Post


pytestmark = pytest.mark.asyncio


@pytest.mark.parametrize(
    "title, content, expected",
    [
        ("Sunny day", "Went to the beach", False),
        ("badword title", "Went to the beach", True),
        ("Sunny day", "badword content", True),
        ("badword", "badword", True),
    ],
)
async def test_post_flagged_if_title_or_content_flagged(services, title, content, expected):
    post = await services.posts.create_post(title, content, "alice")
    stored = await Post.get(id=post.id)
    assert stored.is_flagged is expected
    assert stored.likes == 0
    assert stored.comments == []
    assert stored.username == "alice"


async def test_title_and_content_are_both_classified(services, fake_classifier):
    await services.posts.create_post("badword title", "plain content", "alice")
    # Both calls happen, title first, even though the title alone decides the outcome
    assert fake_classifier.texts == ["badword title", "plain content"]


async def test_safety_block_flags_post(services):
    post = await services.posts.create_post("blockme", "fine", "alice")
    assert post.is_flagged is True


async def test_classifier_outage_publishes_post(services):
    post = await services.posts.create_post("outage", "outage again", "alice")
    assert post.is_flagged is False


@pytest.mark.parametrize("title, content", [(None, "c"), ("t", None), ("", "c"), ("t", "   ")])
async def test_create_post_requires_title_and_content(services, fake_classifier, title, content):
    with pytest.raises(ValidationError):
        await services.posts.create_post(title, content, "alice")
    assert fake_classifier.texts == []
    assert await Post.all().count() == 0


async def test_media_reference_recorded_as_is(services):
    post = await services.posts.create_post("t", "c", "alice", media="file-1-abcdef01.mp4")
    assert (await Post.get(id=post.id)).file == "file-1-abcdef01.mp4"


async def test_list_posts_in_insertion_order(services):
    for i in range(5):
        await services.posts.create_post(f"title {i}", f"content {i}", "alice")
    posts = await services.posts.list_posts()
    assert [p.title for p in posts] == [f"title {i}" for i in range(5)]


async def test_like_once(services):
    post = await services.posts.create_post("t", "c", "alice")
    liked = await services.posts.like_post(post.id)
    assert liked.likes == 1


async def test_like_n_times_sequentially(services):
    post = await services.posts.create_post("t", "c", "alice")
    for _ in range(7):
        await services.posts.like_post(str(post.id))
    assert (await Post.get(id=post.id)).likes == 7


async def test_concurrent_likes_are_not_lost(services):
    post = await services.posts.create_post("t", "c", "alice")
    await asyncio.gather(*(services.posts.like_post(post.id) for _ in range(10)))
    assert (await Post.get(id=post.id)).likes == 10


@pytest.mark.parametrize("post_id", [9999, "9999", "abc", "-1", "0", "99999999999999999999", None])
async def test_like_unknown_post(services, post_id):
    with pytest.raises(PostNotFoundError):
        await services.posts.like_post(post_id)


async def test_add_comment_appends_unflagged_hello(services):
    post = await services.posts.create_post("t", "c", "alice")
    updated = await services.posts.add_comment(post.id, "hello", "bob")

    comments = updated.comment_list()
    assert len(comments) == 1
    assert comments[0].text == "hello"
    assert comments[0].is_flagged is False
    assert comments[0].username == "bob"


async def test_comments_keep_arrival_order(services):
    post = await services.posts.create_post("t", "c", "alice")
    for text in ["first", "badword second", "third"]:
        await services.posts.add_comment(post.id, text, "bob")

    stored = await Post.get(id=post.id)
    assert [c["text"] for c in stored.comments] == ["first", "badword second", "third"]
    assert [c["isFlagged"] for c in stored.comments] == [False, True, False]


async def test_comment_does_not_touch_post_flag(services):
    post = await services.posts.create_post("t", "c", "alice")
    await services.posts.add_comment(post.id, "badword", "bob")
    assert (await Post.get(id=post.id)).is_flagged is False


async def test_comment_on_unknown_post(services, fake_classifier):
    with pytest.raises(PostNotFoundError):
        await services.posts.add_comment(4242, "hello", "bob")
    assert fake_classifier.texts == []


@pytest.mark.parametrize("text", [None, "", "   "])
async def test_blank_comment_on_unknown_post_is_not_found(services, text):
    with pytest.raises(PostNotFoundError):
        await services.posts.add_comment(4242, text, "bob")


async def test_comment_requires_text(services):
    post = await services.posts.create_post("t", "c", "alice")
    with pytest.raises(ValidationError):
        await services.posts.add_comment(post.id, "  ", "bob")

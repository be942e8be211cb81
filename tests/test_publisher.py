"""Tests for the scheduled post publisher."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from mindcanvus.database import SessionLocal
from mindcanvus.models import Post
from mindcanvus.services.publisher_service import ScheduledPublisher, publish_due_posts, run_publisher


def _scheduled_post(author, *, title: str, when: datetime) -> Post:
    with SessionLocal() as session:
        post = Post(
            user_id=author.id,
            title=title,
            content=f"{title} body",
            category="Technology",
            status="scheduled",
            scheduled_for=when,
        )
        session.add(post)
        session.commit()
        session.refresh(post)
        return post


def _statuses() -> dict[str, str]:
    with SessionLocal() as session:
        return {post.title: post.status for post in session.scalars(select(Post))}


def test_due_posts_are_published(user_factory):
    author = user_factory("writer")
    now = datetime.now(timezone.utc)
    due = _scheduled_post(author, title="due", when=now - timedelta(minutes=5))
    _scheduled_post(author, title="later", when=now + timedelta(hours=1))

    with SessionLocal() as session:
        summary = publish_due_posts(session, now=now)

    assert summary.published == 1
    assert summary.failed == 0
    assert _statuses() == {"due": "published", "later": "scheduled"}

    with SessionLocal() as session:
        stored = session.get(Post, due.id)
        assert stored is not None
        published_at = stored.published_at
        assert published_at is not None
        if published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)
        assert published_at == now


def test_failed_post_does_not_block_batch(user_factory, monkeypatch):
    author = user_factory("writer")
    now = datetime.now(timezone.utc)
    _scheduled_post(author, title="first", when=now - timedelta(minutes=2))
    _scheduled_post(author, title="second", when=now - timedelta(minutes=1))

    session = SessionLocal()
    real_commit = session.commit
    calls = {"count": 0}

    def flaky_commit() -> None:
        calls["count"] += 1
        if calls["count"] == 1:
            raise SQLAlchemyError("simulated write failure")
        real_commit()

    monkeypatch.setattr(session, "commit", flaky_commit)
    try:
        summary = publish_due_posts(session, now=now)
    finally:
        session.close()

    assert summary.published == 1
    assert summary.failed == 1
    assert sorted(_statuses().values()) == ["published", "scheduled"]

    # The next pass picks up the post that failed.
    summary = run_publisher(SessionLocal)
    assert summary.published == 1
    assert set(_statuses().values()) == {"published"}


def test_nothing_due_is_a_noop(user_factory):
    author = user_factory("writer")
    _scheduled_post(author, title="later", when=datetime.now(timezone.utc) + timedelta(days=1))

    summary = run_publisher(SessionLocal)

    assert summary.published == 0
    assert summary.total == 0


def test_scheduled_publisher_ticks_until_stopped(user_factory):
    author = user_factory("writer")
    _scheduled_post(author, title="due", when=datetime.now(timezone.utc) - timedelta(seconds=1))

    async def _exercise() -> bool:
        publisher = ScheduledPublisher(SessionLocal, interval_seconds=3600)
        publisher.start()
        assert publisher.running
        for _ in range(100):
            if _statuses()["due"] == "published":
                break
            await asyncio.sleep(0.05)
        await publisher.stop()
        return publisher.running

    still_running = asyncio.run(_exercise())

    assert still_running is False
    assert _statuses()["due"] == "published"


def test_publisher_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        ScheduledPublisher(SessionLocal, interval_seconds=0)

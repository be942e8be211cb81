"""Background publishing of scheduled posts once their time arrives."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Post

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PublishSummary:
    """Counts from a single publisher pass."""

    published: int
    failed: int

    @property
    def total(self) -> int:
        return self.published + self.failed


def publish_due_posts(session: Session, *, now: datetime | None = None) -> PublishSummary:
    """Flip every scheduled post whose ``scheduled_for`` has passed to published.

    Each post is committed on its own so that one failing row does not hold
    back the rest; a failed post stays scheduled and is retried on the next
    pass.
    """

    moment = now or datetime.now(timezone.utc)
    due_ids = list(
        session.scalars(
            select(Post.id).where(
                Post.status == "scheduled",
                Post.scheduled_for.is_not(None),
                Post.scheduled_for <= moment,
            )
        )
    )

    published = 0
    failed = 0
    for post_id in due_ids:
        try:
            post = session.get(Post, post_id)
            if post is None or post.status != "scheduled":
                continue
            post.status = "published"
            post.published_at = moment
            session.commit()
            published += 1
        except SQLAlchemyError:
            session.rollback()
            failed += 1
            logger.exception("Failed to publish scheduled post %s", post_id)

    return PublishSummary(published=published, failed=failed)


def run_publisher(session_factory: Callable[[], Session]) -> PublishSummary:
    """Execute one publishing pass using a fresh session from ``session_factory``."""

    session = session_factory()
    try:
        summary = publish_due_posts(session)
    finally:
        session.close()

    if summary.total:
        logger.info("Publisher pass: %d published, %d failed", summary.published, summary.failed)
    return summary


class ScheduledPublisher:
    """Runs :func:`run_publisher` on a fixed interval inside the event loop."""

    def __init__(self, session_factory: Callable[[], Session], *, interval_seconds: float = 60.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._session_factory = session_factory
        self._interval = interval_seconds
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> PublishSummary | None:
        try:
            return await asyncio.to_thread(run_publisher, self._session_factory)
        except Exception:  # pragma: no cover
            logger.exception("Scheduled publisher pass failed")
            return None

    async def _loop(self) -> None:
        while not self._stop.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._loop())
        logger.info("Scheduled publisher started (every %.0fs)", self._interval)

    async def stop(self) -> None:
        self._stop.set()
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:  # pragma: no cover
                pass
            self._task = None


__all__ = ["PublishSummary", "publish_due_posts", "run_publisher", "ScheduledPublisher"]

"""Comment Store: per-session comment cache with optimistic inserts.

The store is seeded with the persisted comments delivered with a video's
tabs. New comments are appended immediately with a temporary id and a
``pending`` status, then persisted in the background. A failed save is
retried with exponential backoff and, if it still fails, the comment stays
visible marked ``failed`` so the reviewer can retry it. Nothing is rolled
back.

When a tab is fetched again, ``reconcile`` swaps optimistic entries for
their persisted counterparts, matching on content and a timestamp window.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import (
        Awaitable,
        Callable,
        Iterable,
        Iterator,
        Mapping,
        Sequence,
    )
    from uuid import UUID

logger = logging.getLogger(__name__)

TEMP_ID_PREFIX = "temp-"


class CommentStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class CommentRecord(Protocol):
    """Shape of a persisted comment (``scriptflow.db.models.Comment``)."""

    id: UUID
    tab_id: UUID
    block_id: str
    selected_text: str | None
    text: str
    author_name: str
    author_color: str
    created_at: datetime


@dataclass(frozen=True)
class NewComment:
    """Payload for creating a comment, built by the composer on submit."""

    tab_id: str
    block_id: str
    text: str
    selected_text: str | None
    author_name: str
    author_color: str


class CommentGateway(Protocol):
    """Persistence collaborator used by ``CommentStore.persist``."""

    async def create_comment(self, new: NewComment) -> CommentRecord: ...


@dataclass
class ClientComment:
    """A comment as held by the browser session.

    Attributes:
        id: Persisted id, or a ``temp-`` id for optimistic entries.
        tab_id: Tab the comment belongs to.
        block_id: Anchored block id or ``"general"``.
        selected_text: Quoted selection, if any.
        text: Comment body.
        author_name: Display name of the commenter.
        author_color: Hex swatch colour.
        created_at: Creation time (client clock for optimistic entries).
        status: Persistence state.
        server_id: Persisted id once an optimistic entry is confirmed.
        error: Last persistence error message, for failed entries.
    """

    id: str
    tab_id: str
    block_id: str
    selected_text: str | None
    text: str
    author_name: str
    author_color: str
    created_at: datetime
    status: CommentStatus = CommentStatus.CONFIRMED
    server_id: str | None = None
    error: str | None = field(default=None, compare=False)

    @property
    def is_temporary(self) -> bool:
        return self.id.startswith(TEMP_ID_PREFIX)

    @property
    def persisted_id(self) -> str | None:
        if self.is_temporary:
            return self.server_id
        return self.id

    @classmethod
    def from_record(cls, record: CommentRecord) -> ClientComment:
        return cls(
            id=str(record.id),
            tab_id=str(record.tab_id),
            block_id=record.block_id,
            selected_text=record.selected_text,
            text=record.text,
            author_name=record.author_name,
            author_color=record.author_color,
            created_at=record.created_at,
        )


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CommentStore:
    """In-memory list of comments for one review session.

    Args:
        initial: Persisted comments keyed by the tab they were loaded with.
        attempts: Total persistence attempts before a comment is marked failed.
        backoff_seconds: Delay before the first retry, doubled each retry.
        reconcile_window: Maximum clock skew between an optimistic entry and
            the persisted comment it is matched with.
        clock: Source of "now" for optimistic timestamps.
        sleep: Awaitable delay, replaceable in tests.
    """

    def __init__(
        self,
        initial: Mapping[str, Iterable[CommentRecord]] | None = None,
        *,
        attempts: int = 3,
        backoff_seconds: float = 0.5,
        reconcile_window: timedelta = timedelta(minutes=2),
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._comments: list[ClientComment] = []
        self._loaded: dict[str, set[str]] = {}
        self._attempts = max(1, attempts)
        self._backoff = backoff_seconds
        self._window = reconcile_window
        self._clock = clock
        self._sleep = sleep
        self._temp_counter = itertools.count(1)
        # temp id -> persisted id, for entries swapped out by reconcile
        self._reloaded_as: dict[str, str] = {}
        for tab_id, records in (initial or {}).items():
            self.load_tab(tab_id, records)

    def __len__(self) -> int:
        return len(self._comments)

    def __iter__(self) -> Iterator[ClientComment]:
        return iter(list(self._comments))

    def get(self, comment_id: str) -> ClientComment | None:
        for comment in self._comments:
            if comment.id == comment_id:
                return comment
        return None

    def load_tab(self, tab_id: str, records: Iterable[CommentRecord]) -> None:
        """Add comments that were delivered as part of ``tab_id``."""
        loaded = self._loaded.setdefault(tab_id, set())
        known = {c.id for c in self._comments}
        for record in records:
            comment = ClientComment.from_record(record)
            loaded.add(comment.id)
            if comment.id not in known:
                self._comments.append(comment)
                known.add(comment.id)

    # ------------------------------------------------------------------
    # Optimistic insert and persistence
    # ------------------------------------------------------------------

    def add_optimistic(self, new: NewComment) -> ClientComment:
        """Append ``new`` immediately under a temporary id, status pending."""
        now = self._clock()
        temp_id = (
            f"{TEMP_ID_PREFIX}{int(now.timestamp() * 1000)}-{next(self._temp_counter)}"
        )
        comment = ClientComment(
            id=temp_id,
            tab_id=new.tab_id,
            block_id=new.block_id,
            selected_text=new.selected_text,
            text=new.text,
            author_name=new.author_name,
            author_color=new.author_color,
            created_at=now,
            status=CommentStatus.PENDING,
        )
        self._comments.append(comment)
        logger.debug(
            "Optimistic comment %s on %s/%s", temp_id, new.tab_id, new.block_id
        )
        return comment

    async def persist(
        self, comment: ClientComment, gateway: CommentGateway
    ) -> ClientComment:
        """Save an optimistic comment, retrying with exponential backoff.

        Never raises for persistence errors: the outcome is recorded on the
        comment's ``status``. ``ValueError`` from the gateway means the
        payload itself was rejected and is not retried. If a reconcile has
        already swapped the entry for its persisted comment, no further
        attempt is made and that comment is returned.

        Returns:
            The comment as now held by the store.
        """
        payload = NewComment(
            tab_id=comment.tab_id,
            block_id=comment.block_id,
            text=comment.text,
            selected_text=comment.selected_text,
            author_name=comment.author_name,
            author_color=comment.author_color,
        )
        delay = self._backoff
        last_error = ""
        for attempt in range(1, self._attempts + 1):
            reloaded = self._reloaded(comment.id)
            if reloaded is not None:
                logger.info(
                    "Comment %s was already reloaded as %s", comment.id, reloaded.id
                )
                return reloaded
            try:
                record = await gateway.create_comment(payload)
            except ValueError as exc:
                logger.warning("Comment %s rejected: %s", comment.id, exc)
                return self._settle(comment, CommentStatus.FAILED, error=str(exc))
            except Exception as exc:
                last_error = str(exc) or type(exc).__name__
                if attempt < self._attempts:
                    logger.warning(
                        "Comment %s save attempt %d/%d failed (%s); retrying in %.2fs",
                        comment.id,
                        attempt,
                        self._attempts,
                        type(exc).__name__,
                        delay,
                    )
                    await self._sleep(delay)
                    delay *= 2
                    continue
                logger.exception(
                    "Comment %s failed to save after %d attempts", comment.id, attempt
                )
            else:
                logger.info("Comment %s saved as %s", comment.id, record.id)
                return self._settle(
                    comment, CommentStatus.CONFIRMED, server_id=str(record.id)
                )
        return self._settle(comment, CommentStatus.FAILED, error=last_error)

    async def retry(
        self, comment_id: str, gateway: CommentGateway
    ) -> ClientComment | None:
        """Re-run persistence for a failed comment. No-op otherwise.

        Returns the persisted comment when a reconcile has replaced the
        entry, and None for an id the store has never held.
        """
        comment = self.get(comment_id)
        if comment is None:
            return self._reloaded(comment_id)
        if comment.status is not CommentStatus.FAILED:
            return comment
        pending = self._mark(comment_id, CommentStatus.PENDING, error=None)
        return await self.persist(pending, gateway)

    def _reloaded(self, comment_id: str) -> ClientComment | None:
        """The loaded comment a reconcile put in place of ``comment_id``."""
        if self.get(comment_id) is not None:
            return None
        persisted_id = self._reloaded_as.get(comment_id)
        return None if persisted_id is None else self.get(persisted_id)

    def _settle(
        self,
        comment: ClientComment,
        status: CommentStatus,
        *,
        server_id: str | None = None,
        error: str | None = None,
    ) -> ClientComment:
        """Record a save outcome on ``comment`` if the store still holds it."""
        if self.get(comment.id) is not None:
            return self._mark(comment.id, status, server_id=server_id, error=error)
        settled = self._reloaded(comment.id)
        if settled is None and server_id is not None:
            settled = self.get(server_id)
        if settled is not None:
            return settled
        logger.debug("Comment %s left the store before its save finished", comment.id)
        return replace(comment, status=status, server_id=server_id, error=error)

    def _mark(
        self,
        comment_id: str,
        status: CommentStatus,
        *,
        server_id: str | None = None,
        error: str | None = None,
    ) -> ClientComment:
        for index, existing in enumerate(self._comments):
            if existing.id == comment_id:
                updated = replace(
                    existing,
                    status=status,
                    server_id=server_id or existing.server_id,
                    error=error,
                )
                self._comments[index] = updated
                return updated
        msg = f"Comment {comment_id} is not in the store"
        raise KeyError(msg)

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def filter_by_tab(self, tab_id: str) -> list[ClientComment]:
        """Comments loaded with ``tab_id`` or optimistically tagged with it.

        Order is insertion order; use ``filter_by_block`` for display order.
        """
        loaded = self._loaded.get(tab_id, set())
        return [
            c
            for c in self._comments
            if c.id in loaded or (c.is_temporary and c.tab_id == tab_id)
        ]

    @staticmethod
    def filter_by_block(
        comments: Sequence[ClientComment], block_id: str
    ) -> list[ClientComment]:
        """Comments on ``block_id``, most recent first.

        The sort is stable, so applying it to its own output is a no-op.
        """
        matching = [c for c in comments if c.block_id == block_id]
        return sorted(matching, key=lambda c: c.created_at, reverse=True)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _matches(self, comment: ClientComment, record: CommentRecord) -> bool:
        return (
            comment.tab_id == str(record.tab_id)
            and comment.block_id == record.block_id
            and comment.text == record.text
            and comment.selected_text == record.selected_text
            and comment.author_name == record.author_name
            and abs(comment.created_at - record.created_at) <= self._window
        )

    def reconcile(self, tab_id: str, records: Iterable[CommentRecord]) -> int:
        """Merge a fresh fetch of ``tab_id`` into the store.

        Optimistic entries for the tab are replaced by the persisted comment
        they correspond to, matched by server id when known and otherwise by
        content within the timestamp window. Unmatched pending entries stay
        as they are (their save may still be in flight).

        Returns:
            Number of optimistic entries replaced.
        """
        records = list(records)
        by_id = {str(r.id): r for r in records}
        claimed: set[str] = set()
        replaced = 0
        kept: list[ClientComment] = []

        for comment in self._comments:
            if not (comment.is_temporary and comment.tab_id == tab_id):
                kept.append(comment)
                continue
            match_id = self._find_match(comment, by_id, claimed)
            if match_id is None:
                kept.append(comment)
                continue
            claimed.add(match_id)
            self._reloaded_as[comment.id] = match_id
            replaced += 1

        # Loaded entries for this tab are superseded by the fetch.
        previously_loaded = self._loaded.pop(tab_id, set())
        self._comments = [c for c in kept if c.id not in previously_loaded]
        self.load_tab(tab_id, records)

        logger.debug(
            "Reconciled tab %s: %d fetched, %d optimistic replaced",
            tab_id,
            len(records),
            replaced,
        )
        return replaced

    def _find_match(
        self,
        comment: ClientComment,
        by_id: Mapping[str, CommentRecord],
        claimed: set[str],
    ) -> str | None:
        if comment.server_id in by_id and comment.server_id not in claimed:
            return comment.server_id
        for record_id, record in by_id.items():
            if record_id not in claimed and self._matches(comment, record):
                return record_id
        return None

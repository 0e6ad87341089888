"""Shared fixtures for unit tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from scriptflow.review.anchors import AnchorRegistry
from scriptflow.review.identity import CommenterIdentity
from scriptflow.review.store import NewComment

# Standard ids for test references
SAMPLE_TAB_ID = UUID("12345678-1234-5678-1234-567812345678")
OTHER_TAB_ID = UUID("87654321-4321-8765-4321-876543218765")
T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


@dataclass
class FakeRecord:
    """Stand-in for a persisted ``Comment`` row."""

    text: str
    block_id: str = "block-1"
    tab_id: UUID = SAMPLE_TAB_ID
    selected_text: str | None = None
    author_name: str = "Alex"
    author_color: str = "#3B82F6"
    created_at: datetime = T0
    id: UUID = field(default_factory=uuid4)


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class FakeGateway:
    """Records create calls; fails the first ``failures`` of them."""

    def __init__(
        self,
        *,
        failures: int = 0,
        error: Exception | None = None,
        created_at: datetime = T0,
    ) -> None:
        self.failures = failures
        self.error = error or ConnectionError("database unavailable")
        self.created_at = created_at
        self.calls: list[NewComment] = []
        self.records: list[FakeRecord] = []

    async def create_comment(self, new: NewComment) -> FakeRecord:
        self.calls.append(new)
        if len(self.calls) <= self.failures:
            raise self.error
        record = FakeRecord(
            text=new.text,
            block_id=new.block_id,
            tab_id=UUID(new.tab_id),
            selected_text=new.selected_text,
            author_name=new.author_name,
            author_color=new.author_color,
            created_at=self.created_at,
        )
        self.records.append(record)
        return record


class FakeIdentity:
    """In-memory identity provider."""

    def __init__(self, identity: CommenterIdentity | None = None) -> None:
        self.identity = identity

    def load(self) -> CommenterIdentity | None:
        return self.identity

    def save(self, identity: CommenterIdentity) -> None:
        self.identity = identity

    def clear(self) -> None:
        self.identity = None


async def no_sleep(_seconds: float) -> None:
    return None


@pytest.fixture
def registry() -> AnchorRegistry:
    """Registry with two scene rows."""
    reg = AnchorRegistry()
    reg.register("sf-10", "block-1")
    reg.register("sf-11", "block-2")
    return reg


@pytest.fixture
def alex() -> CommenterIdentity:
    return CommenterIdentity(name="Alex", color="#3B82F6", browser_id="browser_1_abc")


def new_comment(
    text: str = "Love this line.",
    *,
    block_id: str = "block-2",
    tab_id: UUID = SAMPLE_TAB_ID,
    selected_text: str | None = "Some mornings demand more than coffee.",
) -> NewComment:
    return NewComment(
        tab_id=str(tab_id),
        block_id=block_id,
        text=text,
        selected_text=selected_text,
        author_name="Alex",
        author_color="#3B82F6",
    )

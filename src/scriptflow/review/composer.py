"""Comment Composer: trigger placement, dialog state and submission.

The composer is UI-agnostic. Pages feed it the active anchor, the draft
text and key presses; it decides when submission is allowed, builds the
``NewComment`` from the injected identity provider, and computes where the
trigger and dialog go so they stay on screen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from scriptflow.review.store import NewComment

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scriptflow.review.anchors import SelectionAnchor, SelectionRect
    from scriptflow.review.identity import CommenterIdentity, IdentityProvider

logger = logging.getLogger(__name__)

GENERAL_BLOCK_ID = "general"

DIALOG_WIDTH = 360
DIALOG_HEIGHT = 300
VIEWPORT_MARGIN = 20
DIALOG_GAP = 10
TRIGGER_OFFSET = 40

DIALOG_PREVIEW_CHARS = 100
SIDEBAR_PREVIEW_CHARS = 150
BADGE_PREVIEW_CHARS = 50


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Viewport | None:
        """None unless both ``width`` and ``height`` are positive numbers."""
        if not data:
            return None
        width, height = data.get("width"), data.get("height")
        for value in (width, height):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            if value <= 0:
                return None
        return cls(float(width), float(height))


def _clamp(value: float, low: float, high: float) -> float:
    # A box larger than the viewport pins to the low edge.
    return max(low, min(value, high))


def trigger_position(
    rect: SelectionRect,
    viewport: Viewport,
    *,
    offset: float = TRIGGER_OFFSET,
    margin: float = VIEWPORT_MARGIN,
) -> Point:
    """Centre-top point for the trigger button, just above the selection."""
    return Point(
        x=_clamp(rect.center_x, margin, viewport.width - margin),
        y=_clamp(rect.top - offset, 0, viewport.height - offset),
    )


def composer_position(
    origin: Point,
    viewport: Viewport,
    *,
    width: float = DIALOG_WIDTH,
    height: float = DIALOG_HEIGHT,
    margin: float = VIEWPORT_MARGIN,
) -> Point:
    """Top-left corner for the dialog opened from ``origin``.

    The dialog sits just below the origin and is kept at least ``margin``
    from every edge of the viewport.
    """
    return Point(
        x=_clamp(origin.x, margin, viewport.width - width - margin),
        y=_clamp(origin.y + DIALOG_GAP, margin, viewport.height - height - margin),
    )


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def is_submit_chord(key: str, *, ctrl: bool = False, meta: bool = False) -> bool:
    """Ctrl+Enter or Cmd+Enter."""
    return key == "Enter" and (ctrl or meta)


def is_cancel_key(key: str) -> bool:
    return key == "Escape"


class CommentComposer:
    """State of the comment dialog for one review view.

    Args:
        identity: Provider of the commenter's name and colour.
    """

    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity
        self._open = False
        self._tab_id: str | None = None
        self._block_id = GENERAL_BLOCK_ID
        self._selected_text: str | None = None
        self.text = ""

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def block_id(self) -> str:
        return self._block_id

    @property
    def selected_text(self) -> str | None:
        return self._selected_text

    @property
    def identity(self) -> CommenterIdentity | None:
        return self._identity.load()

    def open(self, tab_id: str, anchor: SelectionAnchor | None = None) -> None:
        """Open for ``anchor``, or unanchored (``general``) when None.

        The anchor's text and block are copied, so the caller may clear the
        selection straight after opening.
        """
        self._open = True
        self._tab_id = tab_id
        self._block_id = anchor.block_id if anchor else GENERAL_BLOCK_ID
        self._selected_text = anchor.text if anchor else None
        self.text = ""

    def cancel(self) -> None:
        """Close without submitting. Nothing is sent anywhere."""
        self._reset()

    @property
    def can_submit(self) -> bool:
        return (
            self._open
            and self._tab_id is not None
            and bool(self.text.strip())
            and self._identity.load() is not None
        )

    def submit(self) -> NewComment | None:
        """Build the comment to create, or None when submission is not allowed.

        Whitespace-only text is rejected here, before any store or network
        call is made.
        """
        identity = self._identity.load()
        if not self.can_submit or identity is None or self._tab_id is None:
            logger.debug("Composer submit ignored (open=%s)", self._open)
            return None

        new = NewComment(
            tab_id=self._tab_id,
            block_id=self._block_id,
            text=self.text.strip(),
            selected_text=self._selected_text,
            author_name=identity.name,
            author_color=identity.color,
        )
        self._reset()
        return new

    def handle_key(
        self, key: str, *, ctrl: bool = False, meta: bool = False
    ) -> NewComment | None:
        """Apply a key press: submit chord submits, Escape cancels."""
        if is_submit_chord(key, ctrl=ctrl, meta=meta):
            return self.submit()
        if is_cancel_key(key):
            self.cancel()
        return None

    def _reset(self) -> None:
        self._open = False
        self._tab_id = None
        self._block_id = GENERAL_BLOCK_ID
        self._selected_text = None
        self.text = ""

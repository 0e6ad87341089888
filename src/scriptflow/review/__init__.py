"""Anchored comments on rendered tab content.

The pieces here hold no UI code, so the whole flow can be exercised
without a browser:

- ``anchors``: region registry and selection anchors.
- ``selection``: the Selection Tracker.
- ``store``: the Comment Store with optimistic inserts and reconciliation.
- ``composer``: dialog state, submission rules and on-screen placement.
- ``identity``: who comments are attributed to.
- ``overlay``: per-tab render plan with comment badges.
"""

from __future__ import annotations

from scriptflow.review.anchors import AnchorRegistry, SelectionAnchor, SelectionRect
from scriptflow.review.composer import CommentComposer, Point, Viewport
from scriptflow.review.identity import (
    CommenterIdentity,
    IdentityProvider,
    SessionIdentityProvider,
    StorageIdentityProvider,
)
from scriptflow.review.overlay import RenderPlan, build_render_plan
from scriptflow.review.selection import SelectionSnapshot, SelectionTracker
from scriptflow.review.store import (
    ClientComment,
    CommentGateway,
    CommentStatus,
    CommentStore,
    NewComment,
)

__all__ = [
    "AnchorRegistry",
    "ClientComment",
    "CommentComposer",
    "CommentGateway",
    "CommentStatus",
    "CommentStore",
    "CommenterIdentity",
    "IdentityProvider",
    "NewComment",
    "Point",
    "RenderPlan",
    "SelectionAnchor",
    "SelectionRect",
    "SelectionSnapshot",
    "SelectionTracker",
    "SessionIdentityProvider",
    "StorageIdentityProvider",
    "Viewport",
    "build_render_plan",
]

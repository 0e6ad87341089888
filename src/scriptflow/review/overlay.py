"""Content Renderer plan: which anchors a tab exposes and the badges on them.

``build_render_plan`` takes a tab's typed content and the comments the
store holds for that tab, and decides what the page paints: one anchored
row per scene, a single anchored body for text, an un-anchored moodboard,
or a placeholder. Each anchor carries a badge listing its comments most
recent first. Comments whose block no longer renders are reported as
orphans rather than shown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scriptflow.content import (
    EmptyScript,
    Moodboard,
    MoodboardItem,
    RichText,
    SceneScript,
    ScriptBlock,
    TabContent,
    TextScript,
)
from scriptflow.review.composer import GENERAL_BLOCK_ID
from scriptflow.review.store import CommentStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scriptflow.review.store import ClientComment

SCRIPT_TEXT_ANCHOR = "script-text"
RICH_TEXT_ANCHOR = "rich-text-block"

EMPTY_SCRIPT_MESSAGE = (
    'No script content yet. Click "Edit Text" to paste a script or '
    '"Edit Scenes" to create scenes.'
)
EMPTY_RICH_TEXT_MESSAGES = {
    "overview": "No overview content yet.",
    "preproduction": "No pre-production notes yet.",
}
EMPTY_MOODBOARD_MESSAGE = "No moodboard items yet"


@dataclass(frozen=True)
class BlockBadge:
    """Comment count and popover list for one anchor."""

    block_id: str
    comments: tuple[ClientComment, ...] = ()

    @property
    def count(self) -> int:
        return len(self.comments)

    @property
    def visible(self) -> bool:
        return self.count > 0


@dataclass(frozen=True)
class SceneRow:
    block: ScriptBlock
    badge: BlockBadge


@dataclass(frozen=True)
class ScenesView:
    rows: tuple[SceneRow, ...]


@dataclass(frozen=True)
class TextView:
    """A single commentable body of text."""

    text: str
    badge: BlockBadge
    placeholder: bool = False

    @property
    def anchor_id(self) -> str:
        return self.badge.block_id


@dataclass(frozen=True)
class MoodboardView:
    items: tuple[MoodboardItem, ...]


@dataclass(frozen=True)
class PlaceholderView:
    message: str


View = ScenesView | TextView | MoodboardView | PlaceholderView


@dataclass(frozen=True)
class RenderPlan:
    """Everything the page needs to paint one tab.

    Attributes:
        tab_id: Tab the plan was built for.
        view: What to render.
        general: Unanchored comments, most recent first.
        orphaned: Comments whose block id renders nowhere in this tab.
    """

    tab_id: str
    view: View
    general: tuple[ClientComment, ...] = ()
    orphaned: tuple[ClientComment, ...] = ()

    @property
    def anchors(self) -> tuple[str, ...]:
        """Block ids that must be registered as selection targets."""
        match self.view:
            case ScenesView(rows=rows):
                return tuple(row.block.id for row in rows)
            case TextView(badge=badge):
                return (badge.block_id,)
            case _:
                return ()

    def badge_for(self, block_id: str) -> BlockBadge | None:
        match self.view:
            case ScenesView(rows=rows):
                for row in rows:
                    if row.block.id == block_id:
                        return row.badge
            case TextView(badge=badge) if badge.block_id == block_id:
                return badge
        return None


def _badge(comments: Sequence[ClientComment], block_id: str) -> BlockBadge:
    return BlockBadge(
        block_id=block_id,
        comments=tuple(CommentStore.filter_by_block(comments, block_id)),
    )


def _build_view(
    tab_type: str, content: TabContent, comments: Sequence[ClientComment]
) -> View:
    match content:
        case SceneScript(blocks=blocks) if blocks:
            return ScenesView(
                rows=tuple(
                    SceneRow(block=block, badge=_badge(comments, block.id))
                    for block in blocks
                )
            )
        case TextScript(text=text) if text:
            return TextView(text=text, badge=_badge(comments, SCRIPT_TEXT_ANCHOR))
        case SceneScript() | TextScript() | EmptyScript():
            return PlaceholderView(EMPTY_SCRIPT_MESSAGE)
        case RichText(text=text):
            empty = not text.strip()
            return TextView(
                text=EMPTY_RICH_TEXT_MESSAGES.get(tab_type, "") if empty else text,
                badge=_badge(comments, RICH_TEXT_ANCHOR),
                placeholder=empty,
            )
        case Moodboard(items=items) if items:
            return MoodboardView(items=tuple(items))
        case Moodboard():
            return PlaceholderView(EMPTY_MOODBOARD_MESSAGE)


def build_render_plan(
    tab_id: str,
    tab_type: str,
    content: TabContent,
    comments: Sequence[ClientComment],
) -> RenderPlan:
    """Plan the rendering of one tab.

    Args:
        tab_id: Tab being rendered.
        tab_type: The tab's type, used for placeholder wording.
        content: Parsed content of the tab.
        comments: The tab's comments, i.e. ``store.filter_by_tab(tab_id)``.
            Comments for other tabs are ignored.
    """
    own = [c for c in comments if c.tab_id == tab_id]
    view = _build_view(tab_type, content, own)
    plan = RenderPlan(tab_id=tab_id, view=view)
    anchored = set(plan.anchors)

    general = CommentStore.filter_by_block(own, GENERAL_BLOCK_ID)
    orphaned = sorted(
        (
            c
            for c in own
            if c.block_id != GENERAL_BLOCK_ID and c.block_id not in anchored
        ),
        key=lambda c: c.created_at,
        reverse=True,
    )
    return RenderPlan(
        tab_id=tab_id, view=view, general=tuple(general), orphaned=tuple(orphaned)
    )

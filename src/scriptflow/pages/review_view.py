"""Tabbed review view with anchored comments.

Shared by the signed-in ``/video/{id}`` page and the anonymous
``/review/{token}`` link. The view owns one comment store, one region
registry and one selection tracker for its lifetime; switching tabs
repaints the content area and re-registers its regions without
rebuilding the rest of the page.

Painting is split so that comment changes only touch the badge slots and
the sidebar. Tab content is repainted on tab switch or after an edit.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from nicegui import ui

from scriptflow.auth import UnauthorisedError, get_session_info, require_staff
from scriptflow.content import (
    EmptyScript,
    Moodboard,
    RichText,
    SceneScript,
    TextScript,
    parse_tab_content,
)
from scriptflow.db.comments import CommentService
from scriptflow.db.models import TAB_TYPES
from scriptflow.db.tabs import (
    TabNotFoundError,
    create_tab,
    delete_tab,
    fetch_tab_with_comments,
    update_tab_content,
)
from scriptflow.db.videos import set_review_status
from scriptflow.pages import editors
from scriptflow.pages.components import (
    STATUS_LABELS,
    TAB_ICONS,
    comment_card,
    status_chip,
)
from scriptflow.pages.selection_bridge import SelectionBridge
from scriptflow.review.anchors import REGION_ATTRIBUTE, AnchorRegistry
from scriptflow.review.composer import (
    DIALOG_PREVIEW_CHARS,
    SIDEBAR_PREVIEW_CHARS,
    CommentComposer,
    Point,
    Viewport,
    composer_position,
    trigger_position,
    truncate,
)
from scriptflow.review.overlay import (
    MoodboardView,
    PlaceholderView,
    ScenesView,
    TextView,
    build_render_plan,
)
from scriptflow.review.selection import SelectionTracker
from scriptflow.review.store import CommentStatus, CommentStore

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine
    from typing import Any

    from nicegui.events import GenericEventArguments

    from scriptflow.auth import AccessMode
    from scriptflow.config import ReviewConfig
    from scriptflow.content import TabContent
    from scriptflow.db.models import Tab
    from scriptflow.db.videos import VideoWithTabs
    from scriptflow.review.anchors import SelectionAnchor
    from scriptflow.review.identity import IdentityProvider
    from scriptflow.review.overlay import BlockBadge, RenderPlan
    from scriptflow.review.store import ClientComment, CommentGateway, NewComment

logger = logging.getLogger(__name__)

# Comment saves outlive the handler that started them.
_background_tasks: set[asyncio.Task[None]] = set()

# Used until the browser has reported its real size.
DEFAULT_VIEWPORT = Viewport(1280, 800)

TAB_TYPE_LABELS = {
    "overview": "Overview",
    "preproduction": "Pre-production",
    "script": "Script",
    "moodboard": "Moodboard",
}


def _spawn(coro: Coroutine[Any, Any, None]) -> None:
    task = asyncio.create_task(coro)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


class ReviewView:
    """One reviewer's view of a video.

    Args:
        data: The video with its project, tabs and comments.
        mode: ``staff`` shows editing controls, ``client`` hides them.
        identity: Who new comments are attributed to.
        config: Selection, composer and persistence tuning.
        can_approve: Whether the approval footer is shown.
        ensure_identity: Awaited before the composer opens when the
            identity provider has nothing yet; resolves False to abort.
        gateway: Persistence for new comments.
        preview: Show the staff preview banner above a client-mode view.
    """

    def __init__(
        self,
        data: VideoWithTabs,
        *,
        mode: AccessMode,
        identity: IdentityProvider,
        config: ReviewConfig,
        can_approve: bool = False,
        ensure_identity: Callable[[], Awaitable[bool]] | None = None,
        gateway: CommentGateway | None = None,
        preview: bool = False,
    ) -> None:
        self.video = data.video
        self.project = data.project
        self.mode = mode
        self.config = config
        self.can_approve = can_approve
        self._ensure_identity = ensure_identity
        self._gateway = gateway or CommentService()
        self._preview = preview

        self._tabs: list[Tab] = [entry.tab for entry in data.tabs]
        self._contents: dict[str, TabContent] = {
            str(entry.tab.id): entry.content for entry in data.tabs
        }
        self.active_tab_id: str | None = (
            str(self._tabs[0].id) if self._tabs else None
        )

        self.registry = AnchorRegistry()
        self.store = CommentStore(
            {str(entry.tab.id): entry.comments for entry in data.tabs},
            attempts=config.persist_attempts,
            backoff_seconds=config.persist_backoff_seconds,
            reconcile_window=timedelta(seconds=config.reconcile_window_seconds),
        )
        self.tracker = SelectionTracker(
            self.registry,
            on_change=self._on_anchor_change,
            collapse_native=SelectionBridge.collapse_native,
        )
        self.composer = CommentComposer(identity)
        self._pending_status: str | None = None
        self._badge_slots: dict[str, ui.element] = {}

    @property
    def is_staff_mode(self) -> bool:
        return self.mode == "staff"

    def _staff_allowed(self) -> bool:
        try:
            require_staff(get_session_info())
        except UnauthorisedError:
            ui.notify("Only production staff can change this", type="negative")
            return False
        return self.is_staff_mode

    @property
    def viewport(self) -> Viewport:
        return self._bridge.viewport or DEFAULT_VIEWPORT

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    async def build(self) -> None:
        """Create the page body and attach the selection listeners."""
        with ui.column().classes("w-full gap-2") as self._root:
            self._build_header()
            self._tab_bar = ui.row().classes("w-full items-center gap-1")
            with ui.row().classes("w-full no-wrap items-start gap-6"):
                self._content = (
                    ui.column()
                    .classes("grow gap-2 min-w-0")
                    .props('data-testid="review-content"')
                )
                self._sidebar = ui.column().classes("w-80 shrink-0 gap-2")
            if self.can_approve:
                self._footer = ui.row().classes(
                    "w-full items-center justify-end gap-2 border-t pt-3"
                )
                self._paint_footer()

        self._trigger = (
            ui.button("Comment", icon="add_comment", on_click=self._on_trigger)
            .classes("fixed z-40 shadow-lg")
            .props('rounded color=dark data-testid="comment-trigger"')
        )
        # Pressing the trigger must not collapse the selection it belongs to
        self._trigger.on("mousedown.prevent", lambda: None)
        self._trigger.set_visibility(False)
        self._backdrop =ui.element("div").classes("fixed inset-0 z-40")
        self._backdrop.on("click", self._cancel_composer)
        self._backdrop.set_visibility(False)
        self._composer_card = (
            ui.card()
            .classes("fixed z-50 shadow-xl")
            .props('data-testid="comment-composer"')
        )
        self._composer_card.set_visibility(False)

        self._bridge = SelectionBridge(
            self.tracker, self._content, debounce_ms=self.config.selection_debounce_ms
        )
        self._paint_tab_bar()
        self._paint_tab()
        await self._bridge.attach()

    def _build_header(self) -> None:
        with ui.row().classes("w-full items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label(self.project.title).classes(
                    "text-xs uppercase tracking-wide text-grey-7"
                )
                ui.label(self.video.title).classes("text-2xl font-semibold")
            with ui.row().classes("items-center gap-2"):
                self._status_slot = ui.row().classes("items-center")
                with self._status_slot:
                    status_chip(self.video.review_status)
                if self.video.youtube_url:
                    ui.button(
                        "Watch",
                        icon="play_circle",
                        on_click=lambda: ui.navigate.to(
                            self.video.youtube_url, new_tab=True
                        ),
                    ).props("flat")
        if self.mode == "client" and self._preview:
            with ui.row().classes(
                "w-full items-center gap-2 bg-amber-1 text-amber-10 rounded p-2"
            ):
                ui.icon("visibility")
                ui.label("Previewing as the client sees it.")
                ui.link("Back to editing", f"/video/{self.video.id}")

    # ------------------------------------------------------------------
    # Tabs
    # ------------------------------------------------------------------

    def _tab(self, tab_id: str | None) -> Tab | None:
        for tab in self._tabs:
            if str(tab.id) == tab_id:
                return tab
        return None

    def _paint_tab_bar(self) -> None:
        self._tab_bar.clear()
        with self._tab_bar:
            with ui.tabs(
                value=self.active_tab_id, on_change=self._on_tab_change
            ).props("dense no-caps align=left"):
                for tab in self._tabs:
                    ui.tab(
                        str(tab.id),
                        label=tab.title,
                        icon=TAB_ICONS.get(tab.tab_type, "tab"),
                    )
            if self.is_staff_mode:
                ui.button(icon="add", on_click=self._add_tab).props(
                    "flat dense round"
                ).tooltip("Add tab")
                if len(self._tabs) > 1:
                    ui.button(icon="delete", on_click=self._delete_active_tab).props(
                        "flat dense round color=negative"
                    ).tooltip("Delete this tab")

    async def _on_tab_change(self, e: Any) -> None:
        await self.select_tab(e.value)

    async def select_tab(self, tab_id: str | None) -> None:
        """Switch tabs, refreshing the tab's content and comments first."""
        if tab_id is None or tab_id == self.active_tab_id:
            return
        self._close_composer()
        self.tracker.clear_selection()
        try:
            fresh = await fetch_tab_with_comments(UUID(tab_id))
        except TabNotFoundError:
            ui.notify("That tab no longer exists", type="warning")
            self._tabs = [t for t in self._tabs if str(t.id) != tab_id]
            self._paint_tab_bar()
            return
        self.store.reconcile(tab_id, fresh.comments)
        self._contents[tab_id] = fresh.content
        self.active_tab_id = tab_id
        self._paint_tab()

    async def _add_tab(self) -> None:
        if not self._staff_allowed():
            return
        with ui.dialog() as dialog, ui.card().classes("w-96"):
            ui.label("New tab").classes("text-lg font-semibold")
            title = ui.input("Title").classes("w-full")
            tab_type = ui.select(
                {t: TAB_TYPE_LABELS[t] for t in TAB_TYPES},
                value="script",
                label="Type",
            ).classes("w-full")
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button(
                    "Add",
                    on_click=lambda: dialog.submit(
                        ((title.value or "").strip(), tab_type.value)
                    ),
                )
        result = await dialog
        if not result:
            return
        tab_title, chosen = result
        tab = await create_tab(
            self.video.id, tab_title or TAB_TYPE_LABELS[chosen], chosen
        )
        self._tabs.append(tab)
        self._contents[str(tab.id)] = parse_tab_content(tab.tab_type, tab.content)
        self.store.load_tab(str(tab.id), [])
        self.active_tab_id = str(tab.id)
        self._paint_tab_bar()
        self._paint_tab()

    async def _delete_active_tab(self) -> None:
        if not self._staff_allowed():
            return
        tab = self._tab(self.active_tab_id)
        if tab is None:
            return
        with ui.dialog() as dialog, ui.card():
            ui.label(f"Delete {tab.title} and its comments?")
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=lambda: dialog.submit(False)).props(
                    "flat"
                )
                ui.button("Delete", on_click=lambda: dialog.submit(True)).props(
                    "color=negative"
                )
        if not await dialog:
            return
        await delete_tab(tab.id)
        self._tabs = [t for t in self._tabs if t.id != tab.id]
        self._contents.pop(str(tab.id), None)
        self.active_tab_id = str(self._tabs[0].id) if self._tabs else None
        self._paint_tab_bar()
        self._paint_tab()

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def _plan(self) -> RenderPlan | None:
        tab = self._tab(self.active_tab_id)
        if tab is None:
            return None
        tab_id = str(tab.id)
        return build_render_plan(
            tab_id,
            tab.tab_type,
            self._contents[tab_id],
            self.store.filter_by_tab(tab_id),
        )

    def _region(self, block_id: str) -> ui.element:
        """A commentable wrapper registered for ``block_id``."""
        element = ui.element("div").classes("min-w-0")
        key = f"sf-{element.id}"
        element.props(f"{REGION_ATTRIBUTE}={key} data-block-id={block_id}")
        self.registry.register(key, block_id)
        return element

    def _badge_slot(self, block_id: str) -> None:
        self._badge_slots[block_id] = ui.element("div").classes("shrink-0")

    def _paint_tab(self) -> None:
        """Repaint the active tab's content, regions and badges."""
        self.registry.clear()
        self._badge_slots.clear()
        self._content.clear()
        plan = self._plan()
        with self._content:
            if plan is None:
                ui.label("This video has no tabs yet.").classes("text-grey-6")
            else:
                if self.is_staff_mode:
                    self._edit_controls()
                self._paint_view(plan)
        self._paint_comments(plan)

    def _paint_view(self, plan: RenderPlan) -> None:
        match plan.view:
            case ScenesView(rows=rows):
                with ui.row().classes(
                    "w-full no-wrap text-xs uppercase text-grey-6 px-2"
                ):
                    ui.label("Time").classes("w-28 shrink-0")
                    ui.label("Visual").classes("w-1/2")
                    ui.label("Audio").classes("w-1/2")
                for row in rows:
                    block = row.block
                    with ui.row().classes(
                        "w-full no-wrap items-start border-b py-2 px-2 gap-2"
                    ):
                        with self._region(block.id).classes(
                            "grow flex no-wrap gap-4"
                        ):
                            ui.label(block.timecode).classes(
                                "w-28 shrink-0 font-mono text-sm text-grey-7"
                            )
                            with ui.column().classes("w-1/2 gap-1"):
                                ui.label(block.visual).classes("whitespace-pre-wrap")
                                if block.notes:
                                    ui.label(block.notes).classes(
                                        "text-xs italic text-grey-6"
                                    )
                            ui.label(block.audio).classes(
                                "w-1/2 whitespace-pre-wrap"
                            )
                        self._badge_slot(block.id)
            case TextView(text=text, placeholder=placeholder) as view:
                with ui.row().classes("w-full no-wrap items-start gap-2"):
                    with self._region(view.anchor_id).classes("grow"):
                        ui.label(text).classes(
                            "whitespace-pre-wrap italic text-grey-6"
                            if placeholder
                            else "whitespace-pre-wrap"
                        )
                    self._badge_slot(view.anchor_id)
            case MoodboardView(items=items):
                with ui.element("div").classes(
                    "relative w-full h-[520px] bg-grey-2 rounded overflow-hidden"
                ):
                    for item in items:
                        with (
                            ui.card()
                            .classes("absolute w-48 p-2")
                            .style(f"left: {item.x}px; top: {item.y}px")
                        ):
                            if item.type == "image":
                                ui.image(item.content).classes("w-full")
                            else:
                                ui.label(item.content).classes("text-sm")
            case PlaceholderView(message=message):
                ui.label(message).classes("text-grey-6 italic")

    def _edit_controls(self) -> None:
        tab = self._tab(self.active_tab_id)
        if tab is None:
            return
        content = self._contents[str(tab.id)]
        with ui.row().classes("w-full justify-end gap-1"):
            match content:
                case SceneScript() | TextScript() | EmptyScript():
                    ui.button(
                        "Edit Scenes",
                        icon="view_agenda",
                        on_click=lambda: self._edit(editors.edit_scenes(content)),
                    ).props("flat dense")
                    ui.button(
                        "Edit Text",
                        icon="notes",
                        on_click=lambda: self._edit(editors.edit_script_text(content)),
                    ).props("flat dense")
                case RichText():
                    ui.button(
                        "Edit",
                        icon="edit",
                        on_click=lambda: self._edit(
                            editors.edit_rich_text(content, tab.title)
                        ),
                    ).props("flat dense")
                case Moodboard():
                    ui.button(
                        "Edit Moodboard",
                        icon="palette",
                        on_click=lambda: self._edit(editors.edit_moodboard(content)),
                    ).props("flat dense")

    async def _edit(self, editing: Coroutine[Any, Any, TabContent | None]) -> None:
        if not self._staff_allowed():
            editing.close()
            return
        tab_id = self.active_tab_id
        updated = await editing
        if updated is None or tab_id is None:
            return
        try:
            tab = await update_tab_content(UUID(tab_id), updated)
        except TabNotFoundError:
            ui.notify("That tab no longer exists", type="warning")
            return
        self._contents[tab_id] = parse_tab_content(tab.tab_type, tab.content)
        ui.notify("Saved", type="positive")
        if tab_id == self.active_tab_id:
            self._paint_tab()

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _paint_badge(self, badge: BlockBadge) -> None:
        with (
            ui.button(str(badge.count), icon="chat_bubble_outline")
            .props(f'flat dense no-caps size=sm data-testid="badge-{badge.block_id}"')
            .classes("text-grey-8")
        ):
            with ui.menu().props("anchor='bottom right' self='top right'"):
                with ui.column().classes("w-80 p-2 gap-2"):
                    for comment in badge.comments:
                        comment_card(comment, on_retry=self.retry)

    def _paint_comments(self, plan: RenderPlan | None = None) -> None:
        """Repaint badge slots and the sidebar without touching content."""
        plan = plan if plan is not None else self._plan()
        for block_id, slot in self._badge_slots.items():
            slot.clear()
            badge = plan.badge_for(block_id) if plan else None
            if badge is not None and badge.visible:
                with slot:
                    self._paint_badge(badge)

        self._sidebar.clear()
        with self._sidebar:
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("General comments").classes("font-semibold")
                if plan is not None:
                    ui.button(
                        icon="add_comment",
                        on_click=lambda: self.open_composer(None),
                    ).props('flat dense round data-testid="general-comment"').tooltip(
                        "Comment on this tab"
                    )
            if plan is None:
                return
            if not plan.general:
                ui.label("No general comments yet.").classes("text-sm text-grey-6")
            for comment in plan.general:
                comment_card(
                    comment, on_retry=self.retry, preview_chars=SIDEBAR_PREVIEW_CHARS
                )
            if plan.orphaned:
                count = len(plan.orphaned)
                noun = "comment" if count == 1 else "comments"
                ui.label(
                    f"{count} {noun} on content that has since been removed"
                ).classes("text-xs text-grey-6 italic")

    def _after_save(self, comment: ClientComment) -> None:
        if self._root.is_deleted:
            return
        with self._root:
            self._paint_comments()
            if comment.status is CommentStatus.FAILED:
                ui.notify(
                    "Your comment could not be saved. Use Retry to try again.",
                    type="negative",
                )

    async def _persist(self, comment: ClientComment) -> None:
        saved = await self.store.persist(comment, self._gateway)
        self._after_save(saved)

    async def _retry(self, comment_id: str) -> None:
        saved = await self.store.retry(comment_id, self._gateway)
        if saved is not None:
            self._after_save(saved)

    def retry(self, comment_id: str) -> None:
        ui.notify("Retrying...")
        _spawn(self._retry(comment_id))

    async def add_comment(self, new: NewComment) -> ClientComment:
        """Show ``new`` straight away and save it in the background."""
        comment = self.store.add_optimistic(new)
        self._paint_comments()
        _spawn(self._persist(comment))
        if self._pending_status is not None:
            status, self._pending_status = self._pending_status, None
            await self._set_status(status)
        return comment

    # ------------------------------------------------------------------
    # Trigger and composer
    # ------------------------------------------------------------------

    def _on_anchor_change(self, anchor: SelectionAnchor | None) -> None:
        if anchor is None or self.composer.is_open:
            self._trigger.set_visibility(False)
            return
        position = trigger_position(
            anchor.rect,
            self.viewport,
            offset=self.config.trigger_offset,
            margin=self.config.viewport_margin,
        )
        self._trigger.style(
            f"left: {position.x}px; top: {position.y}px; transform: translateX(-50%)"
        )
        self._trigger.set_visibility(True)

    async def _on_trigger(self) -> None:
        anchor = self.tracker.anchor
        if anchor is not None:
            await self.open_composer(anchor)

    async def open_composer(self, anchor: SelectionAnchor | None) -> None:
        """Open the composer for ``anchor``, or for a general comment."""
        if self.active_tab_id is None:
            return
        if self.composer.identity is None:
            if self._ensure_identity is None or not await self._ensure_identity():
                return
        self.composer.open(self.active_tab_id, anchor)
        self._bridge.suspended = True
        self.tracker.clear_selection()

        viewport = self.viewport
        width, height = self.config.composer_width, self.config.composer_height
        if anchor is not None:
            origin = Point(anchor.rect.left, anchor.rect.bottom)
        else:
            origin = Point((viewport.width - width) / 2, viewport.height / 4)
        position = composer_position(
            origin,
            viewport,
            width=width,
            height=height,
            margin=self.config.viewport_margin,
        )
        self._paint_composer()
        self._composer_card.style(
            f"left: {position.x}px; top: {position.y}px; width: {width}px"
        )
        self._backdrop.set_visibility(True)
        self._composer_card.set_visibility(True)

    def _paint_composer(self) -> None:
        composer = self.composer
        identity = composer.identity
        self._composer_card.clear()
        with self._composer_card:
            title = "Request changes" if self._pending_status else "Add comment"
            ui.label(title).classes("font-semibold")
            if composer.selected_text:
                ui.label(
                    f'"{truncate(composer.selected_text, DIALOG_PREVIEW_CHARS)}"'
                ).classes("text-sm italic text-grey-7 border-l-4 pl-2")
            if identity is not None:
                with ui.row().classes("items-center gap-2"):
                    ui.element("div").classes("w-3 h-3 rounded-full").style(
                        f"background-color: {identity.color}"
                    )
                    ui.label(f"Commenting as {identity.name}").classes(
                        "text-xs text-grey-7"
                    )
            area = (
                ui.textarea(placeholder="Write your comment...")
                .props('outlined autofocus autogrow data-testid="composer-text"')
                .classes("w-full")
            )
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Ctrl+Enter to post, Esc to cancel").classes(
                    "text-xs text-grey-6"
                )
                with ui.row().classes("gap-1"):
                    ui.button("Cancel", on_click=self._cancel_composer).props("flat")
                    submit = ui.button("Comment", on_click=self._submit).props(
                        'color=dark data-testid="composer-submit"'
                    )
            submit.set_enabled(False)

            def on_text(e: Any) -> None:
                composer.text = e.value or ""
                submit.set_enabled(composer.can_submit)

            area.on_value_change(on_text)
            area.on("keydown", self._on_composer_key, ["key", "ctrlKey", "metaKey"])

    async def _on_composer_key(self, e: GenericEventArguments) -> None:
        args = e.args if isinstance(e.args, dict) else {}
        new = self.composer.handle_key(
            str(args.get("key", "")),
            ctrl=bool(args.get("ctrlKey")),
            meta=bool(args.get("metaKey")),
        )
        if new is not None:
            self._close_composer()
            await self.add_comment(new)
        elif not self.composer.is_open:
            self._cancel_composer()

    async def _submit(self) -> None:
        new = self.composer.submit()
        if new is None:
            return
        self._close_composer()
        await self.add_comment(new)

    def _cancel_composer(self) -> None:
        self.composer.cancel()
        self._pending_status = None
        self._close_composer()

    def _close_composer(self) -> None:
        if self.composer.is_open:
            self.composer.cancel()
        self._composer_card.set_visibility(False)
        self._backdrop.set_visibility(False)
        self._bridge.suspended = False

    # ------------------------------------------------------------------
    # Approval
    # ------------------------------------------------------------------

    def _paint_footer(self) -> None:
        self._footer.clear()
        with self._footer:
            status = self.video.review_status
            ui.label(f"Status: {STATUS_LABELS.get(status, status)}").classes(
                "text-sm text-grey-7 mr-auto"
            )
            ui.button(
                "Request changes",
                icon="rate_review",
                on_click=self._request_changes,
            ).props('outline color=negative data-testid="request-changes"')
            ui.button(
                "Approve",
                icon="check",
                on_click=lambda: self._set_status("approved"),
            ).props('color=positive data-testid="approve"').set_enabled(
                status != "approved"
            )

    async def _request_changes(self) -> None:
        self._pending_status = "changes_requested"
        await self.open_composer(None)
        if not self.composer.is_open:
            self._pending_status = None

    async def _set_status(self, status: str) -> None:
        self.video = await set_review_status(self.video.id, status)
        self._status_slot.clear()
        with self._status_slot:
            status_chip(self.video.review_status)
        if self.can_approve:
            self._paint_footer()
        ui.notify(
            f"Marked as {STATUS_LABELS.get(status, status)}",
            type="positive" if status == "approved" else "info",
        )

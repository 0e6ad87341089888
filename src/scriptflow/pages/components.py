"""Small UI pieces shared by the dashboard, admin and review pages."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from nicegui import ui

from scriptflow.review.composer import BADGE_PREVIEW_CHARS, truncate
from scriptflow.review.store import CommentStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from scriptflow.review.store import ClientComment

TAB_ICONS = {
    "overview": "assignment",
    "preproduction": "edit_note",
    "script": "description",
    "moodboard": "palette",
}

STATUS_LABELS = {
    "in_review": "In Review",
    "approved": "Approved",
    "changes_requested": "Changes Requested",
}

STATUS_COLORS = {
    "in_review": "amber-8",
    "approved": "green-7",
    "changes_requested": "red-7",
}


def format_timestamp(created_at: datetime, now: datetime | None = None) -> str:
    """Relative time for recent comments, an absolute date after a day."""
    now = now or datetime.now(UTC)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    seconds = (now - created_at).total_seconds()
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    return created_at.strftime("%d %b %Y, %H:%M")


def status_chip(review_status: str) -> ui.chip:
    return ui.chip(
        STATUS_LABELS.get(review_status, review_status),
        color=STATUS_COLORS.get(review_status, "grey-7"),
        text_color="white",
    ).props("dense")


def color_swatch(color: str) -> None:
    ui.element("div").classes("w-3 h-3 rounded-full shrink-0").style(
        f"background-color: {color}"
    )


def comment_card(
    comment: ClientComment,
    *,
    on_retry: Callable[[str], object] | None = None,
    preview_chars: int = BADGE_PREVIEW_CHARS,
) -> None:
    """One comment: author swatch, time, quoted selection, body, save state."""
    with ui.card().classes("w-full p-3 bg-grey-1").props("flat bordered"):
        with ui.row().classes("w-full items-center justify-between no-wrap"):
            with ui.row().classes("items-center gap-2 no-wrap"):
                color_swatch(comment.author_color)
                ui.label(comment.author_name).classes("text-sm font-medium")
            ui.label(format_timestamp(comment.created_at)).classes(
                "text-xs text-grey-6"
            )
        if comment.selected_text:
            ui.label(
                f'On: "{truncate(comment.selected_text, preview_chars)}"'
            ).classes("text-xs italic text-grey-7 pb-1")
        ui.label(comment.text).classes("text-sm whitespace-pre-wrap")

        match comment.status:
            case CommentStatus.PENDING:
                ui.label("Saving...").classes("text-xs text-grey-6")
            case CommentStatus.FAILED:
                with ui.row().classes("items-center gap-2"):
                    ui.icon("error_outline", color="negative").classes("text-sm")
                    ui.label("Failed to save").classes("text-xs text-negative")
                    if on_retry is not None:
                        ui.button(
                            "Retry", on_click=lambda: on_retry(comment.id)
                        ).props("flat dense size=sm color=negative")

"""Staff editing dialogs for tab content.

Each editor works on a copy of the content and resolves to the new typed
content on Save, or None on Cancel. Persisting the result is left to the
caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import ui

from scriptflow.content import (
    EmptyScript,
    Moodboard,
    RichText,
    SceneScript,
    TextScript,
    add_image,
    add_note,
    append_scene,
    default_content,
    remove_item,
    remove_scene,
    word_count,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _dialog_actions(dialog: ui.dialog, on_save: Callable[[], object]) -> None:
    with ui.row().classes("w-full justify-end gap-2 mt-2"):
        ui.button("Cancel", on_click=lambda: dialog.submit(None)).props("flat")
        ui.button("Save", on_click=on_save).props('data-testid="editor-save"')


async def edit_scenes(
    current: SceneScript | TextScript | EmptyScript,
) -> SceneScript | None:
    """Edit a script scene by scene.

    Text and empty scripts start from a single default scene; saving drops
    the pasted text.
    """
    if isinstance(current, SceneScript) and current.blocks:
        script = current.model_copy(deep=True)
    else:
        script = default_content("script")
    state = {"script": script}

    with ui.dialog() as dialog, ui.card().classes("w-full max-w-4xl"):
        ui.label("Edit scenes").classes("text-lg font-semibold")

        @ui.refreshable
        def scene_rows() -> None:
            blocks = state["script"].blocks
            for index, block in enumerate(blocks, start=1):
                with ui.card().classes("w-full p-3").props("flat bordered"):
                    with ui.row().classes("w-full items-center justify-between"):
                        ui.label(f"Scene {index}").classes("font-medium")
                        ui.button(
                            icon="delete",
                            on_click=lambda b=block.id: remove(b),
                        ).props("flat dense round color=negative").set_enabled(
                            len(blocks) > 1
                        )
                    ui.input("Timecode").bind_value(block, "timecode").classes("w-48")
                    with ui.row().classes("w-full no-wrap gap-4"):
                        ui.textarea("Visual").bind_value(block, "visual").classes(
                            "w-1/2"
                        )
                        ui.textarea("Audio").bind_value(block, "audio").classes(
                            "w-1/2"
                        )
                    ui.input("Production notes").bind_value(block, "notes").classes(
                        "w-full"
                    )

        def add() -> None:
            state["script"] = append_scene(state["script"])
            scene_rows.refresh()

        def remove(block_id: str) -> None:
            state["script"] = remove_scene(state["script"], block_id)
            scene_rows.refresh()

        with ui.scroll_area().classes("w-full h-[60vh]"):
            scene_rows()
        ui.button("Add scene", icon="add", on_click=add).props("flat")
        _dialog_actions(dialog, lambda: dialog.submit(state["script"]))

    result = await dialog
    dialog.delete()
    return result


async def edit_script_text(
    current: SceneScript | TextScript | EmptyScript,
) -> TextScript | None:
    """Edit a script as one pasted block of text; saving drops any scenes."""
    initial = current.text if isinstance(current, TextScript) else ""

    with ui.dialog() as dialog, ui.card().classes("w-full max-w-3xl"):
        ui.label("Edit script text").classes("text-lg font-semibold")
        area = (
            ui.textarea(value=initial, placeholder="Paste the script here")
            .props("outlined autogrow")
            .classes("w-full font-mono")
        )
        counts = ui.label().classes("text-xs text-grey-6")

        def update_counts() -> None:
            text = area.value or ""
            counts.set_text(f"{word_count(text)} words, {len(text)} characters")

        area.on_value_change(lambda _e: update_counts())
        update_counts()
        _dialog_actions(
            dialog, lambda: dialog.submit(TextScript(text=area.value or ""))
        )

    result = await dialog
    dialog.delete()
    return result


async def edit_rich_text(current: RichText, title: str) -> RichText | None:
    with ui.dialog() as dialog, ui.card().classes("w-full max-w-3xl"):
        ui.label(f"Edit {title}").classes("text-lg font-semibold")
        area = (
            ui.textarea(value=current.text)
            .props("outlined autogrow")
            .classes("w-full")
        )
        _dialog_actions(
            dialog, lambda: dialog.submit(RichText(text=area.value or ""))
        )

    result = await dialog
    dialog.delete()
    return result


async def edit_moodboard(current: Moodboard) -> Moodboard | None:
    """Add notes and image links to a moodboard, or remove items."""
    state = {"board": current.model_copy(deep=True)}

    with ui.dialog() as dialog, ui.card().classes("w-full max-w-3xl"):
        ui.label("Edit moodboard").classes("text-lg font-semibold")

        @ui.refreshable
        def item_list() -> None:
            items = state["board"].items
            if not items:
                ui.label("No moodboard items yet").classes("text-grey-6")
            for item in items:
                with ui.row().classes("w-full items-center no-wrap gap-2"):
                    ui.icon("image" if item.type == "image" else "sticky_note_2")
                    if item.type == "note":
                        ui.input().bind_value(item, "content").classes("grow")
                    else:
                        ui.label(item.content).classes("grow truncate")
                    ui.button(
                        icon="delete", on_click=lambda i=item.id: remove(i)
                    ).props("flat dense round color=negative")

        def remove(item_id: str) -> None:
            state["board"] = remove_item(state["board"], item_id)
            item_list.refresh()

        def new_note() -> None:
            state["board"] = add_note(state["board"])
            item_list.refresh()

        def new_image() -> None:
            url = (image_url.value or "").strip()
            if not url:
                ui.notify("Enter an image URL first", type="warning")
                return
            state["board"] = add_image(state["board"], url)
            image_url.set_value("")
            item_list.refresh()

        with ui.column().classes("w-full gap-1"):
            item_list()
        with ui.row().classes("w-full items-center gap-2"):
            ui.button("Add note", icon="add", on_click=new_note).props("flat")
            image_url = ui.input(placeholder="https://...").classes("grow")
            ui.button(
                "Add image", icon="add_photo_alternate", on_click=new_image
            ).props("flat")
        _dialog_actions(dialog, lambda: dialog.submit(state["board"]))

    result = await dialog
    dialog.delete()
    return result

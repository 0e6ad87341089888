"""Typed tab content.

A tab's ``content`` column holds JSON whose shape depends on ``tab_type``
(and, for scripts, on ``mode``). This module turns that JSON into one of a
closed set of pydantic variants so renderers can ``match`` on the type
instead of sniffing keys, and writes it back in a canonical shape that
holds exactly one representation.

Reading is tolerant: legacy script content without ``mode`` but with a
``blocks`` list is a scene script, malformed blocks or moodboard items are
dropped, and content with neither blocks nor text becomes ``EmptyScript``.
"""

from __future__ import annotations

import logging
import random
import re
import string
import time
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMECODE = "00:00 - 00:05"
DEFAULT_SCENE_SECONDS = 5
NOTE_PLACEHOLDER = "Double-click to edit"

_TIMECODE_RE = re.compile(r"(\d+):(\d+)\s*-\s*(\d+):(\d+)")
_YOUTUBE_ID_RE = re.compile(
    r"(?:youtu\.be/|youtube\.com/(?:watch\?v=|embed/))([^&\s?]+)"
)


class InvalidTabTypeError(ValueError):
    """Raised when a tab type is not one of the known tab types."""

    def __init__(self, tab_type: str) -> None:
        self.tab_type = tab_type
        super().__init__(f"Unknown tab type: {tab_type!r}")


class ScriptBlock(BaseModel):
    """One timecoded row of a two-column (visual/audio) script."""

    id: str
    timecode: str = ""
    visual: str = ""
    audio: str = ""
    notes: str | None = None


class SceneScript(BaseModel):
    mode: Literal["scenes"] = "scenes"
    blocks: list[ScriptBlock] = Field(default_factory=list)


class TextScript(BaseModel):
    mode: Literal["text"] = "text"
    text: str = ""


class EmptyScript(BaseModel):
    """Script content with neither blocks nor text."""


class RichText(BaseModel):
    """Overview and pre-production notes."""

    text: str = ""


class MoodboardItem(BaseModel):
    id: str
    type: Literal["image", "note"]
    content: str = ""
    x: float = 0
    y: float = 0


class Moodboard(BaseModel):
    items: list[MoodboardItem] = Field(default_factory=list)


TabContent = SceneScript | TextScript | EmptyScript | RichText | Moodboard


T = TypeVar("T", bound=BaseModel)


def _parse_list(model: type[T], raw: object, what: str) -> list[T]:
    """Validate each entry of ``raw`` against ``model``, dropping bad entries."""
    if not isinstance(raw, list):
        return []
    parsed: list[T] = []
    for entry in raw:
        try:
            parsed.append(model.model_validate(entry))
        except ValidationError:
            logger.warning("Dropping malformed %s: %r", what, entry)
    return parsed


def _parse_script(raw: dict[str, Any]) -> SceneScript | TextScript | EmptyScript:
    mode = raw.get("mode")
    blocks = raw.get("blocks")
    text = raw.get("text")

    if mode == "text":
        return TextScript(text=text if isinstance(text, str) else "")
    if mode == "scenes" and not isinstance(blocks, list):
        return EmptyScript()
    if isinstance(blocks, list) and mode in (None, "scenes"):
        return SceneScript(blocks=_parse_list(ScriptBlock, blocks, "script block"))
    if isinstance(text, str) and text:
        return TextScript(text=text)
    return EmptyScript()


def parse_tab_content(tab_type: str, raw: object) -> TabContent:
    """Read stored JSON into the variant for ``tab_type``.

    Args:
        tab_type: One of overview, preproduction, script, moodboard.
        raw: Stored JSON. Anything that is not a dict is treated as empty.

    Returns:
        The typed content variant.

    Raises:
        InvalidTabTypeError: If ``tab_type`` is unknown.
    """
    data: dict[str, Any] = raw if isinstance(raw, dict) else {}

    match tab_type:
        case "script":
            return _parse_script(data)
        case "overview" | "preproduction":
            text = data.get("text")
            return RichText(text=text if isinstance(text, str) else "")
        case "moodboard":
            return Moodboard(
                items=_parse_list(MoodboardItem, data.get("items"), "moodboard item")
            )
        case _:
            raise InvalidTabTypeError(tab_type)


def dump_tab_content(content: TabContent) -> dict[str, Any]:
    """Serialise content to its canonical stored shape.

    Scene and text scripts each write only their own fields, so switching
    modes discards the other representation on save.
    """
    return content.model_dump(mode="json", exclude_none=True)


def default_content(tab_type: str) -> TabContent:
    """Return the content a freshly created tab of ``tab_type`` starts with."""
    match tab_type:
        case "script":
            return SceneScript(
                blocks=[ScriptBlock(id="block-1", timecode=DEFAULT_TIMECODE)]
            )
        case "overview" | "preproduction":
            return RichText()
        case "moodboard":
            return Moodboard()
        case _:
            raise InvalidTabTypeError(tab_type)


# ---------------------------------------------------------------------------
# Editor helpers
# ---------------------------------------------------------------------------


def _random_suffix(length: int = 9) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def new_block_id() -> str:
    """Generate a block id unique enough for one script."""
    return f"block-{int(time.time() * 1000)}-{_random_suffix()}"


def new_moodboard_item_id(item_type: Literal["image", "note"]) -> str:
    return f"{item_type}-{int(time.time() * 1000)}-{_random_suffix(4)}"


def _format_timecode(total_seconds: int) -> str:
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def next_timecode(previous: str | None) -> str:
    """Timecode for a scene appended after ``previous``.

    The new scene starts one second after the previous one ends and runs
    for ``DEFAULT_SCENE_SECONDS``. Unparseable input restarts at
    ``DEFAULT_TIMECODE``.

    >>> next_timecode("00:05 - 00:10")
    '00:11 - 00:16'
    """
    match = _TIMECODE_RE.search(previous or "")
    if match is None:
        return DEFAULT_TIMECODE

    end = int(match.group(3)) * 60 + int(match.group(4))
    start = end + 1
    return (
        f"{_format_timecode(start)} - "
        f"{_format_timecode(start + DEFAULT_SCENE_SECONDS)}"
    )


def append_scene(script: SceneScript) -> SceneScript:
    """Return ``script`` with one empty scene appended."""
    previous = script.blocks[-1].timecode if script.blocks else None
    block = ScriptBlock(id=new_block_id(), timecode=next_timecode(previous))
    return script.model_copy(update={"blocks": [*script.blocks, block]})


def remove_scene(script: SceneScript, block_id: str) -> SceneScript:
    """Return ``script`` without ``block_id``. The last scene is never removed."""
    if len(script.blocks) <= 1:
        return script
    blocks = [block for block in script.blocks if block.id != block_id]
    return script.model_copy(update={"blocks": blocks})


def add_note(board: Moodboard, content: str = NOTE_PLACEHOLDER) -> Moodboard:
    """Return ``board`` with a note dropped at a random offset."""
    item = MoodboardItem(
        id=new_moodboard_item_id("note"),
        type="note",
        content=content,
        x=random.uniform(50, 250),
        y=random.uniform(50, 250),
    )
    return board.model_copy(update={"items": [*board.items, item]})


def add_image(board: Moodboard, url: str) -> Moodboard:
    item = MoodboardItem(
        id=new_moodboard_item_id("image"),
        type="image",
        content=url,
        x=random.uniform(50, 250),
        y=random.uniform(50, 250),
    )
    return board.model_copy(update={"items": [*board.items, item]})


def remove_item(board: Moodboard, item_id: str) -> Moodboard:
    items = [item for item in board.items if item.id != item_id]
    return board.model_copy(update={"items": items})


def word_count(text: str) -> int:
    return len(text.split())


def youtube_thumbnail(url: str | None) -> str | None:
    """Derive a thumbnail URL from a YouTube watch, short or embed link."""
    if not url:
        return None
    match = _YOUTUBE_ID_RE.search(url)
    if match is None:
        return None
    return f"https://img.youtube.com/vi/{match.group(1)}/maxresdefault.jpg"

"""Selection Tracker: turns browser selection reports into anchors.

The page forwards three kinds of browser events here: pointer-down,
pointer-up (after a short debounce so the native selection settles) and
selection-change. A selection only becomes final after pointer-up; while a
drag is in progress the previous anchor is kept so the comment trigger
does not flicker.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from scriptflow.review.anchors import ZERO_RECT, SelectionAnchor, SelectionRect

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from scriptflow.review.anchors import AnchorRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionSnapshot:
    """One report of the browser's current selection.

    Attributes:
        text: ``Selection.toString()``, untrimmed.
        collapsed: Whether the selection has zero length.
        regions: Keys of marked regions enclosing the range's common
            ancestor, innermost first.
        rect: Bounding box of the range, if the browser supplied one.
        range_ref: Handle for the saved browser range.
    """

    text: str = ""
    collapsed: bool = True
    regions: tuple[str, ...] = field(default_factory=tuple)
    rect: SelectionRect | None = None
    range_ref: str | None = None

    @classmethod
    def from_event(cls, args: Mapping[str, Any] | None) -> SelectionSnapshot:
        """Build a snapshot from an event payload sent by the browser.

        Fields of the wrong type are treated as absent, so a malformed
        payload reads as "no selection".
        """
        if not args:
            return cls()
        text = args.get("text")
        collapsed = args.get("collapsed")
        regions = args.get("regions")
        range_ref = args.get("range_ref")
        return cls(
            text=text if isinstance(text, str) else "",
            collapsed=collapsed if isinstance(collapsed, bool) else True,
            regions=tuple(r for r in regions if isinstance(r, str))
            if isinstance(regions, list)
            else (),
            rect=SelectionRect.from_mapping(args.get("rect")),
            range_ref=range_ref if isinstance(range_ref, str) else None,
        )


class SelectionTracker:
    """Holds the active selection anchor for one rendered view.

    Args:
        registry: Regions of the currently rendered content.
        on_change: Called with the new anchor (or None) whenever it changes.
        collapse_native: Called by ``clear_selection`` to collapse the
            browser's own selection.
    """

    def __init__(
        self,
        registry: AnchorRegistry,
        *,
        on_change: Callable[[SelectionAnchor | None], None] | None = None,
        collapse_native: Callable[[], object] | None = None,
    ) -> None:
        self._registry = registry
        self._on_change = on_change
        self._collapse_native = collapse_native
        self._anchor: SelectionAnchor | None = None
        self._dragging = False

    @property
    def anchor(self) -> SelectionAnchor | None:
        return self._anchor

    @property
    def dragging(self) -> bool:
        return self._dragging

    def pointer_down(self) -> None:
        self._dragging = True

    def pointer_up(self, snapshot: SelectionSnapshot) -> SelectionAnchor | None:
        """Finalise the selection at the end of a drag."""
        self._dragging = False
        return self._evaluate(snapshot)

    def selection_changed(self, snapshot: SelectionSnapshot) -> SelectionAnchor | None:
        """Handle a selection-change report.

        Mid-drag reports are ignored and the prior anchor is returned.
        Outside a drag (keyboard selection, programmatic collapse) the
        report is evaluated immediately.
        """
        if self._dragging:
            return self._anchor
        return self._evaluate(snapshot)

    def clear_selection(self) -> None:
        """Collapse the native selection and drop the anchor."""
        self._dragging = False
        if self._collapse_native is not None:
            self._collapse_native()
        self._set(None)

    def _evaluate(self, snapshot: SelectionSnapshot) -> SelectionAnchor | None:
        text = snapshot.text.strip()
        if snapshot.collapsed or not text:
            self._set(None)
            return None

        block_id = self._registry.resolve(snapshot.regions)
        if block_id is None:
            logger.debug(
                "Selection outside commentable content (regions=%s)",
                snapshot.regions,
            )
            self._set(None)
            return None

        anchor = SelectionAnchor(
            text=text,
            block_id=block_id,
            rect=snapshot.rect or ZERO_RECT,
            range_ref=snapshot.range_ref,
        )
        self._set(anchor)
        return anchor

    def _set(self, anchor: SelectionAnchor | None) -> None:
        if anchor == self._anchor:
            return
        self._anchor = anchor
        if self._on_change is not None:
            self._on_change(anchor)

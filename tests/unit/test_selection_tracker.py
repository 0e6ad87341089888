"""Tests for the Selection Tracker."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scriptflow.review.anchors import ZERO_RECT, SelectionAnchor, SelectionRect
from scriptflow.review.selection import SelectionSnapshot, SelectionTracker

if TYPE_CHECKING:
    from scriptflow.review.anchors import AnchorRegistry

RECT = SelectionRect(left=120, top=300, width=240, height=18)


def snapshot(
    text: str = "Some mornings demand more than coffee.",
    *,
    regions: tuple[str, ...] = ("sf-11",),
    collapsed: bool = False,
    rect: SelectionRect | None = RECT,
    range_ref: str | None = "sf-5-1",
) -> SelectionSnapshot:
    return SelectionSnapshot(
        text=text,
        collapsed=collapsed,
        regions=regions,
        rect=rect,
        range_ref=range_ref,
    )


class TestSnapshotFromEvent:
    """Decoding browser payloads."""

    def test_full_payload(self) -> None:
        """All fields are carried through."""
        snap = SelectionSnapshot.from_event(
            {
                "text": "coffee",
                "collapsed": False,
                "regions": ["sf-11", "sf-10"],
                "rect": {"left": 1, "top": 2, "width": 3, "height": 4},
                "range_ref": "sf-5-2",
                "viewport": {"width": 1024, "height": 768},
            }
        )
        assert snap.text == "coffee"
        assert snap.collapsed is False
        assert snap.regions == ("sf-11", "sf-10")
        assert snap.rect == SelectionRect(1, 2, 3, 4)
        assert snap.range_ref == "sf-5-2"

    def test_empty_payload_is_no_selection(self) -> None:
        """None or {} reads as a collapsed, empty selection."""
        assert SelectionSnapshot.from_event(None) == SelectionSnapshot()
        assert SelectionSnapshot.from_event({}).collapsed is True

    def test_malformed_fields_are_dropped(self) -> None:
        """Wrong types are treated as absent."""
        snap = SelectionSnapshot.from_event(
            {"text": 5, "collapsed": "no", "regions": ["ok", 7], "range_ref": 1}
        )
        assert snap.text == ""
        assert snap.collapsed is True
        assert snap.regions == ("ok",)
        assert snap.range_ref is None


class TestSelectionTracker:
    """Anchor lifecycle across pointer and selection events."""

    def test_pointer_up_produces_anchor(self, registry: AnchorRegistry) -> None:
        """A finished drag inside a block yields an anchor for that block."""
        tracker = SelectionTracker(registry)
        tracker.pointer_down()
        anchor = tracker.pointer_up(snapshot())
        assert anchor == SelectionAnchor(
            text="Some mornings demand more than coffee.",
            block_id="block-2",
            rect=RECT,
            range_ref="sf-5-1",
        )
        assert tracker.anchor == anchor
        assert tracker.dragging is False

    def test_text_is_trimmed(self, registry: AnchorRegistry) -> None:
        """Surrounding whitespace is removed from the anchor text."""
        tracker = SelectionTracker(registry)
        anchor = tracker.pointer_up(snapshot("  coffee \n"))
        assert anchor is not None
        assert anchor.text == "coffee"

    def test_whitespace_only_selection_is_no_anchor(
        self, registry: AnchorRegistry
    ) -> None:
        """Selecting only whitespace clears the anchor."""
        tracker = SelectionTracker(registry)
        assert tracker.pointer_up(snapshot("   \n\t")) is None
        assert tracker.anchor is None

    def test_collapsed_selection_clears_anchor(
        self, registry: AnchorRegistry
    ) -> None:
        """A click without a drag drops the previous anchor."""
        tracker = SelectionTracker(registry)
        tracker.pointer_up(snapshot())
        assert tracker.pointer_up(snapshot("", collapsed=True)) is None
        assert tracker.anchor is None

    def test_selection_outside_content_is_ignored(
        self, registry: AnchorRegistry
    ) -> None:
        """Text selected outside every registered region is not commentable."""
        tracker = SelectionTracker(registry)
        assert tracker.pointer_up(snapshot(regions=("sf-header",))) is None

    def test_mid_drag_changes_keep_prior_anchor(
        self, registry: AnchorRegistry
    ) -> None:
        """Selection changes during a drag return the previous anchor."""
        tracker = SelectionTracker(registry)
        first = tracker.pointer_up(snapshot())
        tracker.pointer_down()
        during = tracker.selection_changed(snapshot("Some", regions=("sf-10",)))
        assert during == first
        assert tracker.anchor == first

    def test_keyboard_selection_is_evaluated_immediately(
        self, registry: AnchorRegistry
    ) -> None:
        """Outside a drag, a selection change becomes the anchor."""
        tracker = SelectionTracker(registry)
        anchor = tracker.selection_changed(snapshot("FADE IN", regions=("sf-10",)))
        assert anchor is not None
        assert anchor.block_id == "block-1"

    def test_missing_rect_uses_zero_rect(self, registry: AnchorRegistry) -> None:
        """Geometry is optional; the anchor still resolves."""
        tracker = SelectionTracker(registry)
        anchor = tracker.pointer_up(snapshot(rect=None))
        assert anchor is not None
        assert anchor.rect == ZERO_RECT

    def test_on_change_fires_only_on_change(self, registry: AnchorRegistry) -> None:
        """Identical reports do not notify twice."""
        seen: list[SelectionAnchor | None] = []
        tracker = SelectionTracker(registry, on_change=seen.append)
        tracker.pointer_up(snapshot())
        tracker.pointer_up(snapshot())
        tracker.pointer_up(snapshot("", collapsed=True))
        assert len(seen) == 2
        assert seen[-1] is None

    def test_clear_selection_collapses_native_selection(
        self, registry: AnchorRegistry
    ) -> None:
        """clear_selection collapses the browser selection and drops the anchor."""
        collapsed: list[bool] = []
        tracker = SelectionTracker(
            registry, collapse_native=lambda: collapsed.append(True)
        )
        tracker.pointer_down()
        tracker.pointer_up(snapshot())
        tracker.clear_selection()
        assert collapsed == [True]
        assert tracker.anchor is None
        assert tracker.dragging is False

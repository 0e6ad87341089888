"""Tests for the Comment Composer and its on-screen placement."""

from __future__ import annotations

import pytest

from scriptflow.review.anchors import SelectionAnchor, SelectionRect
from scriptflow.review.composer import (
    DIALOG_HEIGHT,
    DIALOG_WIDTH,
    GENERAL_BLOCK_ID,
    CommentComposer,
    Point,
    Viewport,
    composer_position,
    is_submit_chord,
    trigger_position,
    truncate,
)
from scriptflow.review.identity import CommenterIdentity
from tests.unit.conftest import SAMPLE_TAB_ID, FakeIdentity

TAB = str(SAMPLE_TAB_ID)
DESKTOP = Viewport(width=1280, height=800)

ANCHOR = SelectionAnchor(
    text="Some mornings demand more than coffee.",
    block_id="block-2",
    rect=SelectionRect(left=400, top=300, width=200, height=20),
)


@pytest.fixture
def composer(alex: CommenterIdentity) -> CommentComposer:
    return CommentComposer(FakeIdentity(alex))


class TestViewport:
    """Viewport.from_mapping."""

    def test_valid_mapping(self) -> None:
        assert Viewport.from_mapping({"width": 1024, "height": 768}) == Viewport(
            1024.0, 768.0
        )

    @pytest.mark.parametrize(
        "payload",
        [None, {}, {"width": 0, "height": 10}, {"width": "1", "height": 2}],
    )
    def test_unusable_mapping(self, payload) -> None:
        """Zero, missing or non-numeric sizes yield None."""
        assert Viewport.from_mapping(payload) is None


class TestTriggerPosition:
    """Trigger button placement above a selection."""

    def test_centred_above_selection(self) -> None:
        point = trigger_position(ANCHOR.rect, DESKTOP)
        assert point == Point(x=500, y=260)

    def test_clamped_to_left_margin(self) -> None:
        """A selection hugging the left edge keeps the trigger on screen."""
        rect = SelectionRect(left=0, top=300, width=10, height=10)
        assert trigger_position(rect, DESKTOP).x == 20

    def test_selection_at_top_of_viewport(self) -> None:
        """The trigger never goes above the viewport."""
        rect = SelectionRect(left=400, top=5, width=100, height=10)
        assert trigger_position(rect, DESKTOP).y == 0


class TestComposerPosition:
    """Dialog placement relative to its origin."""

    def test_opens_below_origin(self) -> None:
        point = composer_position(Point(100, 320), DESKTOP)
        assert point == Point(x=100, y=330)

    def test_pulled_back_from_right_edge(self) -> None:
        """A dialog that would overflow right is shifted left."""
        point = composer_position(Point(1200, 100), DESKTOP)
        assert point.x == DESKTOP.width - DIALOG_WIDTH - 20
        assert point.x + DIALOG_WIDTH <= DESKTOP.width

    def test_pulled_up_from_bottom_edge(self) -> None:
        """A dialog that would overflow the bottom is shifted up."""
        point = composer_position(Point(100, 780), DESKTOP)
        assert point.y == DESKTOP.height - DIALOG_HEIGHT - 20

    def test_kept_off_left_and_top_edges(self) -> None:
        """An origin in the top-left corner still leaves the margin."""
        point = composer_position(Point(0, -40), DESKTOP)
        assert point == Point(20, 20)

    def test_tiny_viewport_pins_to_top_left_margin(self) -> None:
        """When nothing fits, the dialog pins to the top-left margin."""
        point = composer_position(Point(50, 50), Viewport(200, 150))
        assert point == Point(20, 20)


class TestComposerSubmission:
    """Opening, submitting and cancelling."""

    def test_anchored_submit_builds_comment(self, composer: CommentComposer) -> None:
        """The selection's block and text travel with the comment."""
        composer.open(TAB, ANCHOR)
        composer.text = "  Love this line.  "

        new = composer.submit()

        assert new is not None
        assert new.tab_id == TAB
        assert new.block_id == "block-2"
        assert new.selected_text == "Some mornings demand more than coffee."
        assert new.text == "Love this line."
        assert new.author_name == "Alex"
        assert new.author_color == "#3B82F6"
        assert composer.is_open is False

    def test_unanchored_submit_uses_general_block(
        self, composer: CommentComposer
    ) -> None:
        """Opening without an anchor attaches to the general block."""
        composer.open(TAB)
        composer.text = "Overall this works."

        new = composer.submit()

        assert new is not None
        assert new.block_id == GENERAL_BLOCK_ID
        assert new.selected_text is None

    @pytest.mark.parametrize("text", ["", "   ", "\n\t "])
    def test_whitespace_only_is_rejected(
        self, composer: CommentComposer, text: str
    ) -> None:
        """Blank drafts are refused and the dialog stays open."""
        composer.open(TAB, ANCHOR)
        composer.text = text

        assert composer.can_submit is False
        assert composer.submit() is None
        assert composer.is_open is True

    def test_submit_requires_identity(self) -> None:
        """Without a commenter identity nothing can be submitted."""
        composer = CommentComposer(FakeIdentity())
        composer.open(TAB, ANCHOR)
        composer.text = "Hello"
        assert composer.submit() is None

    def test_submit_when_closed(self, composer: CommentComposer) -> None:
        composer.text = "Stray"
        assert composer.submit() is None

    def test_cancel_discards_draft(self, composer: CommentComposer) -> None:
        """Cancel closes and forgets the anchor and draft."""
        composer.open(TAB, ANCHOR)
        composer.text = "Half written"
        composer.cancel()
        assert composer.is_open is False
        assert composer.text == ""
        assert composer.block_id == GENERAL_BLOCK_ID
        assert composer.selected_text is None

    def test_reopen_clears_previous_draft(self, composer: CommentComposer) -> None:
        composer.open(TAB, ANCHOR)
        composer.text = "Old"
        composer.open(TAB)
        assert composer.text == ""
        assert composer.block_id == GENERAL_BLOCK_ID


class TestComposerKeys:
    """Keyboard shortcuts in the dialog."""

    @pytest.mark.parametrize(
        ("ctrl", "meta", "expected"),
        [(True, False, True), (False, True, True), (False, False, False)],
    )
    def test_submit_chord(self, ctrl: bool, meta: bool, expected: bool) -> None:
        assert is_submit_chord("Enter", ctrl=ctrl, meta=meta) is expected

    def test_ctrl_enter_submits(self, composer: CommentComposer) -> None:
        composer.open(TAB, ANCHOR)
        composer.text = "Ship it"
        new = composer.handle_key("Enter", ctrl=True)
        assert new is not None
        assert new.text == "Ship it"

    def test_plain_enter_does_nothing(self, composer: CommentComposer) -> None:
        composer.open(TAB, ANCHOR)
        composer.text = "Line one"
        assert composer.handle_key("Enter") is None
        assert composer.is_open is True

    def test_escape_cancels(self, composer: CommentComposer) -> None:
        composer.open(TAB, ANCHOR)
        composer.text = "Never mind"
        assert composer.handle_key("Escape") is None
        assert composer.is_open is False


class TestTruncate:
    """Preview truncation."""

    def test_short_text_unchanged(self) -> None:
        assert truncate("short", 10) == "short"

    def test_long_text_gets_ellipsis(self) -> None:
        assert truncate("abcdefghij", 4) == "abcd..."

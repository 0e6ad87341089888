"""E2E tests for the browser side of selection tracking.

A reviewer opens the share link, drags across text and the page decides
whether to offer the floating comment trigger. Covers scene rows,
the moodboard and what is left behind once the view goes away.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from playwright.sync_api import expect

from tests.e2e.review_data import MOODBOARD_NOTE, SCENE_LINE

if TYPE_CHECKING:
    from playwright.sync_api import Page

_BRIDGE_COUNT = "() => Object.keys(window.__sfBridges || {}).length"


def _open_review(page: Page, review_url: str) -> None:
    page.goto(review_url)
    page.wait_for_selector('[data-selection-ready="true"]', timeout=10000)


def _drag_select(page: Page, scope: str, text: str) -> None:
    """Select ``text`` inside the first element matching ``scope`` by mouse drag."""
    coords = page.evaluate(
        """([scope, text]) => {
            const c = document.querySelector(scope);
            if (!c) return null;
            const walker = document.createTreeWalker(c, NodeFilter.SHOW_TEXT, null);
            let node;
            while ((node = walker.nextNode())) {
                const idx = node.textContent.indexOf(text);
                if (idx >= 0) {
                    const range = document.createRange();
                    range.setStart(node, idx);
                    range.setEnd(node, idx + text.length);
                    const rect = range.getBoundingClientRect();
                    return {
                        x1: rect.left + 1,
                        y: rect.top + rect.height / 2,
                        x2: rect.right - 1
                    };
                }
            }
            return null;
        }""",
        [scope, text],
    )
    assert coords is not None, f"Could not find {text!r} in {scope}"

    page.mouse.move(coords["x1"], coords["y"])
    page.mouse.down()
    page.mouse.move(coords["x2"], coords["y"], steps=5)
    page.mouse.up()
    page.wait_for_timeout(300)


class TestSelectionBridge:
    """Selections reported from the browser."""

    def test_scene_selection_offers_comment_on_that_row(
        self, page: Page, review_url: str
    ) -> None:
        """Selecting a line in a scene row shows the trigger for that row."""
        _open_review(page, review_url)
        trigger = page.get_by_test_id("comment-trigger")
        expect(trigger).to_be_hidden()

        _drag_select(page, '[data-block-id="block-2"]', SCENE_LINE)
        expect(trigger).to_be_visible()

        trigger.click()
        page.get_by_test_id("commenter-name").locator("input").fill("Robin")
        page.get_by_role("button", name="Continue").click()

        composer = page.get_by_test_id("comment-composer")
        expect(composer).to_be_visible()
        expect(composer).to_contain_text("mornings demand more")
        page.get_by_test_id("composer-text").locator("textarea").fill(
            "Love this line."
        )
        page.get_by_test_id("composer-submit").click()

        expect(composer).to_be_hidden()
        badge = page.get_by_test_id("badge-block-2")
        expect(badge).to_be_visible()
        expect(badge).to_contain_text("1")
        expect(page.get_by_test_id("badge-block-1")).to_have_count(0)

    def test_click_collapses_selection_and_hides_trigger(
        self, page: Page, review_url: str
    ) -> None:
        _open_review(page, review_url)
        trigger = page.get_by_test_id("comment-trigger")
        _drag_select(page, '[data-block-id="block-2"]', SCENE_LINE)
        expect(trigger).to_be_visible()

        page.locator('[data-block-id="block-1"]').click()

        expect(trigger).to_be_hidden()

    def test_moodboard_selection_offers_nothing(
        self, page: Page, review_url: str
    ) -> None:
        """Moodboard notes are not commentable content."""
        _open_review(page, review_url)
        page.get_by_role("tab", name="Moodboard").click()
        note = page.get_by_text(MOODBOARD_NOTE)
        expect(note).to_be_visible()

        _drag_select(page, '[data-testid="review-content"]', MOODBOARD_NOTE)

        selected = page.evaluate("() => window.getSelection().toString()")
        assert "amber tones" in selected
        expect(page.get_by_test_id("comment-trigger")).to_be_hidden()

    def test_listeners_removed_when_page_hidden(
        self, page: Page, review_url: str
    ) -> None:
        """After pagehide no listeners remain and selections go unreported."""
        _open_review(page, review_url)
        assert page.evaluate(_BRIDGE_COUNT) == 1

        page.evaluate("() => window.dispatchEvent(new Event('pagehide'))")

        assert page.evaluate(_BRIDGE_COUNT) == 0
        expect(page.locator("[data-selection-ready]")).to_have_count(0)

        _drag_select(page, '[data-block-id="block-2"]', SCENE_LINE)
        page.wait_for_timeout(300)
        expect(page.get_by_test_id("comment-trigger")).to_be_hidden()

"""Browser half of the Selection Tracker.

Installs document listeners that report pointer-down, pointer-up (after a
short debounce) and selection changes back to the server with
``emitEvent``. Each report carries the selected text, whether it is
collapsed, the region keys of marked ancestors (innermost first), the
range's bounding box and the viewport size. Listeners are keyed per view so
re-attaching replaces them, and they are removed on detach or page hide.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from nicegui import ui

from scriptflow.review.anchors import REGION_ATTRIBUTE
from scriptflow.review.composer import Viewport
from scriptflow.review.selection import SelectionSnapshot

if TYPE_CHECKING:
    from nicegui.element import Element
    from nicegui.events import GenericEventArguments

    from scriptflow.review.selection import SelectionTracker

logger = logging.getLogger(__name__)

POINTER_DOWN_EVENT = "sf_pointer_down"
POINTER_UP_EVENT = "sf_pointer_up"
SELECTION_CHANGE_EVENT = "sf_selection_change"

_ATTACH_JS = """
(function(cfg) {
    window.__sfBridges = window.__sfBridges || {};
    if (window.__sfBridges[cfg.key]) window.__sfBridges[cfg.key].detach();
    const root = getHtmlElement(cfg.rootId);
    if (!root) return;
    window.__sfRanges = window.__sfRanges || {};
    let refCounter = 0;
    let upTimer = null;
    let changeTimer = null;
    let lastSignature = null;

    function snapshot() {
        const out = {
            text: '', collapsed: true, regions: [], rect: null, range_ref: null,
            viewport: {width: window.innerWidth, height: window.innerHeight},
        };
        const sel = window.getSelection();
        if (!sel || sel.rangeCount === 0) return out;
        const range = sel.getRangeAt(0);
        out.text = sel.toString();
        out.collapsed = sel.isCollapsed;
        let node = range.commonAncestorContainer;
        if (node && node.nodeType !== Node.ELEMENT_NODE) node = node.parentElement;
        while (node && node !== document.documentElement) {
            const key = node.getAttribute(cfg.attribute);
            if (key) out.regions.push(key);
            node = node.parentElement;
        }
        if (!out.collapsed) {
            const r = range.getBoundingClientRect();
            out.rect = {left: r.left, top: r.top, width: r.width, height: r.height};
            const ref = cfg.key + '-' + (++refCounter);
            window.__sfRanges = {[ref]: range.cloneRange()};
            out.range_ref = ref;
        }
        return out;
    }

    function onDown(e) {
        if (root.contains(e.target)) emitEvent(cfg.events.down, {});
    }
    function onUp() {
        clearTimeout(upTimer);
        upTimer = setTimeout(function() {
            emitEvent(cfg.events.up, snapshot());
        }, cfg.debounce);
    }
    function onChange() {
        clearTimeout(changeTimer);
        changeTimer = setTimeout(function() {
            const sel = window.getSelection();
            const signature = sel ? sel.isCollapsed + '|' + sel.toString() : '';
            if (signature === lastSignature) return;
            lastSignature = signature;
            emitEvent(cfg.events.change, snapshot());
        }, cfg.debounce);
    }

    document.addEventListener('pointerdown', onDown);
    document.addEventListener('pointerup', onUp);
    document.addEventListener('selectionchange', onChange);

    function detach() {
        clearTimeout(upTimer);
        clearTimeout(changeTimer);
        document.removeEventListener('pointerdown', onDown);
        document.removeEventListener('pointerup', onUp);
        document.removeEventListener('selectionchange', onChange);
        window.removeEventListener('pagehide', detach);
        delete window.__sfBridges[cfg.key];
        root.removeAttribute('data-selection-ready');
    }
    window.addEventListener('pagehide', detach);
    window.__sfBridges[cfg.key] = {detach: detach};
    root.setAttribute('data-selection-ready', 'true');
})(%s);
"""

_DETACH_JS = """
(function(key) {
    if (window.__sfBridges && window.__sfBridges[key]) window.__sfBridges[key].detach();
})(%s);
"""

COLLAPSE_JS = """
window.getSelection() && window.getSelection().removeAllRanges();
window.__sfRanges = {};
"""


class SelectionBridge:
    """Wires the browser's selection events to a ``SelectionTracker``.

    Args:
        tracker: Receives the decoded reports.
        root: Element whose subtree starts a drag on pointer-down.
        debounce_ms: Delay before a pointer-up or selection change is read.
    """

    def __init__(
        self,
        tracker: SelectionTracker,
        root: Element,
        *,
        debounce_ms: int = 10,
    ) -> None:
        self._tracker = tracker
        self._root = root
        self._debounce_ms = debounce_ms
        self._key = f"sf-{root.id}"
        self._client = ui.context.client
        self.viewport: Viewport | None = None
        self.suspended = False
        self.attached = False
        self._disconnect_hooked = False

        ui.on(POINTER_DOWN_EVENT, self._on_pointer_down)
        ui.on(POINTER_UP_EVENT, self._on_pointer_up)
        ui.on(SELECTION_CHANGE_EVENT, self._on_selection_change)

    def _remember_viewport(self, args: dict) -> None:
        viewport = Viewport.from_mapping(args.get("viewport"))
        if viewport is not None:
            self.viewport = viewport

    def _on_pointer_down(self, _e: GenericEventArguments) -> None:
        if not self.suspended:
            self._tracker.pointer_down()

    def _on_pointer_up(self, e: GenericEventArguments) -> None:
        if self.suspended or not isinstance(e.args, dict):
            return
        self._remember_viewport(e.args)
        self._tracker.pointer_up(SelectionSnapshot.from_event(e.args))

    def _on_selection_change(self, e: GenericEventArguments) -> None:
        if self.suspended or not isinstance(e.args, dict):
            return
        self._remember_viewport(e.args)
        self._tracker.selection_changed(SelectionSnapshot.from_event(e.args))

    async def attach(self) -> None:
        """Install the browser listeners once the websocket is up.

        The bridge detaches itself when the client disconnects.
        """
        await self._client.connected()
        config = {
            "key": self._key,
            "rootId": self._root.id,
            "attribute": REGION_ATTRIBUTE,
            "debounce": self._debounce_ms,
            "events": {
                "down": POINTER_DOWN_EVENT,
                "up": POINTER_UP_EVENT,
                "change": SELECTION_CHANGE_EVENT,
            },
        }
        self._client.run_javascript(_ATTACH_JS % json.dumps(config))
        if not self._disconnect_hooked:
            self._client.on_disconnect(self.detach)
            self._disconnect_hooked = True
        self.attached = True
        logger.debug("Selection bridge %s attached", self._key)

    def detach(self) -> None:
        """Remove the browser listeners; safe to call more than once.

        A page that has already gone removed its own listeners on
        ``pagehide``, so only a live socket is sent the detach script.
        """
        if not self.attached:
            return
        self.attached = False
        if self._client.has_socket_connection:
            self._client.run_javascript(_DETACH_JS % json.dumps(self._key))
        logger.debug("Selection bridge %s detached", self._key)

    @staticmethod
    def collapse_native() -> None:
        ui.run_javascript(COLLAPSE_JS)

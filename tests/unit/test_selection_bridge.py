"""Tests for the server side of the selection bridge, with the client mocked."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from scriptflow.pages import selection_bridge
from scriptflow.pages.selection_bridge import SelectionBridge
from scriptflow.review.anchors import AnchorRegistry
from scriptflow.review.selection import SelectionTracker

SCENE_SELECTION = {
    "text": "Some mornings demand more than coffee.",
    "collapsed": False,
    "regions": ["sf-11"],
    "rect": {"left": 300, "top": 240, "width": 280, "height": 18},
    "viewport": {"width": 1280, "height": 800},
}


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """The NiceGUI client the bridge talks to."""
    ui = MagicMock()
    ui.context.client.connected = AsyncMock()
    ui.context.client.has_socket_connection = True
    monkeypatch.setattr(selection_bridge, "ui", ui)
    return ui.context.client


@pytest.fixture
def bridge(client: MagicMock, registry: AnchorRegistry) -> SelectionBridge:  # noqa: ARG001
    return SelectionBridge(SelectionTracker(registry), SimpleNamespace(id=7))


def _scripts(client: MagicMock) -> list[str]:
    return [call.args[0] for call in client.run_javascript.call_args_list]


class TestAttach:
    async def test_installs_listeners_for_root(
        self, bridge: SelectionBridge, client: MagicMock
    ) -> None:
        await bridge.attach()

        client.connected.assert_awaited_once()
        [script] = _scripts(client)
        assert '"rootId": 7' in script
        assert '"key": "sf-7"' in script
        assert bridge.attached is True

    async def test_detaches_when_client_disconnects(
        self, bridge: SelectionBridge, client: MagicMock
    ) -> None:
        """The disconnect hook is registered once, however often it attaches."""
        await bridge.attach()
        await bridge.attach()

        client.on_disconnect.assert_called_once_with(bridge.detach)


class TestDetach:
    async def test_sends_detach_script_once(
        self, bridge: SelectionBridge, client: MagicMock
    ) -> None:
        await bridge.attach()
        client.run_javascript.reset_mock()

        bridge.detach()
        bridge.detach()

        [script] = _scripts(client)
        assert "__sfBridges" in script
        assert '"sf-7"' in script
        assert bridge.attached is False

    async def test_gone_page_is_not_sent_anything(
        self, bridge: SelectionBridge, client: MagicMock
    ) -> None:
        """A closed socket has already run its own pagehide cleanup."""
        await bridge.attach()
        client.run_javascript.reset_mock()
        client.has_socket_connection = False

        bridge.detach()

        client.run_javascript.assert_not_called()
        assert bridge.attached is False

    def test_never_attached(self, bridge: SelectionBridge, client: MagicMock) -> None:
        bridge.detach()
        client.run_javascript.assert_not_called()


class TestEvents:
    """Browser reports decoded into the tracker."""

    def test_pointer_up_sets_anchor_and_viewport(
        self, bridge: SelectionBridge
    ) -> None:
        bridge._on_pointer_down(SimpleNamespace(args={}))
        bridge._on_pointer_up(SimpleNamespace(args=SCENE_SELECTION))

        anchor = bridge._tracker.anchor
        assert anchor is not None
        assert anchor.block_id == "block-2"
        assert bridge.viewport is not None
        assert bridge.viewport.width == 1280

    def test_suspended_bridge_ignores_reports(self, bridge: SelectionBridge) -> None:
        """While the composer is open selections do not move the anchor."""
        bridge.suspended = True
        bridge._on_pointer_down(SimpleNamespace(args={}))
        bridge._on_pointer_up(SimpleNamespace(args=SCENE_SELECTION))
        bridge._on_selection_change(SimpleNamespace(args=SCENE_SELECTION))

        assert bridge._tracker.anchor is None
        assert bridge.viewport is None

    def test_malformed_payload_ignored(self, bridge: SelectionBridge) -> None:
        bridge._on_pointer_up(SimpleNamespace(args=["not", "a", "dict"]))
        assert bridge._tracker.anchor is None

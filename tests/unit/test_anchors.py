"""Tests for the region registry and selection geometry."""

from __future__ import annotations

import pytest

from scriptflow.review.anchors import AnchorRegistry, SelectionRect


class TestSelectionRect:
    """SelectionRect parsing and derived edges."""

    def test_derived_edges(self) -> None:
        """right, bottom and center_x follow from left/top/width/height."""
        rect = SelectionRect(left=100, top=50, width=200, height=20)
        assert rect.right == 300
        assert rect.bottom == 70
        assert rect.center_x == 200

    def test_from_mapping_accepts_ints_and_floats(self) -> None:
        """A DOMRect-like payload parses to floats."""
        rect = SelectionRect.from_mapping(
            {"left": 10, "top": 20.5, "width": 30, "height": 4}
        )
        assert rect == SelectionRect(10.0, 20.5, 30.0, 4.0)

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {},
            {"left": 1, "top": 2, "width": 3},
            {"left": "1", "top": 2, "width": 3, "height": 4},
            {"left": True, "top": 2, "width": 3, "height": 4},
        ],
    )
    def test_from_mapping_rejects_unusable_payloads(self, payload) -> None:
        """Missing or non-numeric fields yield None."""
        assert SelectionRect.from_mapping(payload) is None


class TestAnchorRegistry:
    """Registering regions and resolving selections to block ids."""

    def test_resolve_returns_first_registered_key(
        self, registry: AnchorRegistry
    ) -> None:
        """Innermost registered region wins."""
        assert registry.resolve(["sf-99", "sf-11", "sf-10"]) == "block-2"

    def test_resolve_outside_every_region(self, registry: AnchorRegistry) -> None:
        """Selections in unregistered regions resolve to None."""
        assert registry.resolve(["sf-1", "sf-2"]) is None
        assert registry.resolve([]) is None

    def test_nested_regions_prefer_inner(self) -> None:
        """An inner region inside an outer one takes precedence."""
        reg = AnchorRegistry()
        reg.register("outer", "script-text")
        reg.register("inner", "block-3")
        assert reg.resolve(["inner", "outer"]) == "block-3"
        assert reg.resolve(["outer"]) == "script-text"

    def test_reregister_replaces_block(self, registry: AnchorRegistry) -> None:
        """A reused element key maps to its new block id."""
        registry.register("sf-10", "block-9")
        assert registry.block_for("sf-10") == "block-9"
        assert len(registry) == 2

    def test_clear_and_unregister(self, registry: AnchorRegistry) -> None:
        """Cleared or unregistered keys no longer resolve."""
        registry.unregister("sf-10")
        assert "sf-10" not in registry
        assert registry.block_for("sf-11") == "block-2"
        registry.clear()
        assert len(registry) == 0
        assert registry.resolve(["sf-11"]) is None

    def test_unregister_unknown_key_is_noop(self, registry: AnchorRegistry) -> None:
        """Removing a key that was never registered does nothing."""
        registry.unregister("sf-404")
        assert len(registry) == 2

    @pytest.mark.parametrize(("key", "block"), [("", "block-1"), ("sf-1", "")])
    def test_register_rejects_empty_values(self, key: str, block: str) -> None:
        """Both the region key and block id must be non-empty."""
        with pytest.raises(ValueError, match="non-empty"):
            AnchorRegistry().register(key, block)

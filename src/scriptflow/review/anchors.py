"""Selection anchors and the region registry used to resolve them.

Every commentable piece of rendered content is registered here under a
region key (the DOM id of the element that wraps it) together with the
block id it represents. The browser only reports which marked regions
enclose a selection, innermost first; deciding which block that means is
a lookup in the registry, not a walk over a live document tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

# Attribute placed on every registered region element so the browser-side
# walk knows which ancestors to report.
REGION_ATTRIBUTE = "data-sf-region"


@dataclass(frozen=True)
class SelectionRect:
    """Viewport-relative bounding box of a selection, in CSS pixels."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> SelectionRect | None:
        """Build from a ``DOMRect``-like mapping; None if any field is unusable."""
        if not data:
            return None
        values = []
        for key in ("left", "top", "width", "height"):
            value = data.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            values.append(float(value))
        return cls(*values)


ZERO_RECT = SelectionRect(0, 0, 0, 0)


@dataclass(frozen=True)
class SelectionAnchor:
    """What a comment is about: a block and the text selected inside it.

    Attributes:
        text: Selected text, trimmed and non-empty.
        block_id: Id of the block enclosing the selection.
        rect: Bounding box, used only to position the composer.
        range_ref: Handle for the live browser range, kept on the page so the
            native selection can be restored or collapsed.
    """

    text: str
    block_id: str
    rect: SelectionRect
    range_ref: str | None = None


class AnchorRegistry:
    """Map of rendered region keys to the block ids they represent."""

    def __init__(self) -> None:
        self._regions: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._regions)

    def __contains__(self, region_key: object) -> bool:
        return region_key in self._regions

    def register(self, region_key: str, block_id: str) -> None:
        """Tag ``region_key`` as the commentable region for ``block_id``.

        Re-registering a key replaces its block id, since a re-render may
        reuse an element for a different block.
        """
        if not region_key or not block_id:
            msg = "region_key and block_id must be non-empty"
            raise ValueError(msg)
        self._regions[region_key] = block_id

    def unregister(self, region_key: str) -> None:
        self._regions.pop(region_key, None)

    def clear(self) -> None:
        """Forget every region, e.g. before painting a different tab."""
        self._regions.clear()

    def block_for(self, region_key: str) -> str | None:
        return self._regions.get(region_key)

    def resolve(self, enclosing: Iterable[str]) -> str | None:
        """Block id of the nearest registered region enclosing a selection.

        Args:
            enclosing: Region keys around the selection's common ancestor,
                ordered innermost first.

        Returns:
            The block id of the first registered key, or None when the
            selection lies outside every registered region.
        """
        for key in enclosing:
            block_id = self._regions.get(key)
            if block_id is not None:
                return block_id
        return None

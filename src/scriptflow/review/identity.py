"""Commenter Identity: who a comment is attributed to.

Signed-in reviewers are labelled from their session. Reviewers arriving on
an anonymous share link are asked for a name once; the name, a palette
colour and a generated browser id are then kept in per-browser storage
under ``scriptflow_commenter`` and reused on later visits. None of this is
verified against the account system.
"""

from __future__ import annotations

import json
import logging
import random
import string
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import MutableMapping

logger = logging.getLogger(__name__)

STORAGE_KEY = "scriptflow_commenter"

PALETTE: tuple[str, ...] = (
    "#3B82F6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#8B5CF6",
    "#EC4899",
    "#06B6D4",
    "#F97316",
)


@dataclass(frozen=True)
class CommenterIdentity:
    name: str
    color: str
    browser_id: str


class IdentityProvider(Protocol):
    """Lifecycle of the identity the composer attributes comments to."""

    def load(self) -> CommenterIdentity | None: ...

    def save(self, identity: CommenterIdentity) -> None: ...

    def clear(self) -> None: ...


def color_for_name(name: str) -> str:
    """Deterministic palette colour: sum of code points modulo palette size."""
    return PALETTE[sum(ord(ch) for ch in name) % len(PALETTE)]


def random_color() -> str:
    return random.choice(PALETTE)


def generate_browser_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"browser_{int(time.time() * 1000)}_{suffix}"


class StorageIdentityProvider:
    """Identity kept as JSON in a per-browser storage mapping.

    ``storage`` is normally NiceGUI's ``app.storage.user``. It is read once,
    when the provider is created; ``save`` and ``clear`` write through.
    """

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage
        self._identity = self._read()

    def _read(self) -> CommenterIdentity | None:
        raw = self._storage.get(STORAGE_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
            return CommenterIdentity(
                name=str(data["name"]),
                color=str(data["color"]),
                browser_id=str(data["browserId"]),
            )
        except (json.JSONDecodeError, KeyError, TypeError):
            logger.warning("Discarding unreadable commenter identity: %r", raw)
            self._storage.pop(STORAGE_KEY, None)
            return None

    def load(self) -> CommenterIdentity | None:
        return self._identity

    def save(self, identity: CommenterIdentity) -> None:
        self._storage[STORAGE_KEY] = json.dumps(
            {
                "name": identity.name,
                "color": identity.color,
                "browserId": identity.browser_id,
            }
        )
        self._identity = identity

    def clear(self) -> None:
        self._storage.pop(STORAGE_KEY, None)
        self._identity = None

    def remember(self, name: str, color: str | None = None) -> CommenterIdentity:
        """Save ``name`` as this browser's identity, keeping its browser id.

        Raises:
            ValueError: If ``name`` is blank.
        """
        name = name.strip()
        if not name:
            msg = "Commenter name must not be blank"
            raise ValueError(msg)
        previous = self.load()
        identity = CommenterIdentity(
            name=name,
            color=color or random_color(),
            browser_id=previous.browser_id if previous else generate_browser_id(),
        )
        self.save(identity)
        logger.info("Commenter identity set for %s", identity.browser_id)
        return identity


class SessionIdentityProvider:
    """Identity of a signed-in reviewer, owned by the account system.

    ``save`` and ``clear`` do nothing: the name comes from the session and
    is not editable from the review page.
    """

    def __init__(self, user_id: str, name: str) -> None:
        self._identity = CommenterIdentity(
            name=name, color=color_for_name(name), browser_id=f"user_{user_id}"
        )

    def load(self) -> CommenterIdentity | None:
        return self._identity

    def save(self, identity: CommenterIdentity) -> None:
        pass

    def clear(self) -> None:
        pass

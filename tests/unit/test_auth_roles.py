"""Tests for role checks, access modes and per-browser sessions."""

from __future__ import annotations

from uuid import uuid4

import pytest

from scriptflow.auth import (
    SessionInfo,
    UnauthorisedError,
    UserIdentity,
    can_view_video,
    create_session,
    destroy_session,
    get_active_user,
    get_session_info,
    is_staff,
    require_staff,
    resolve_access_mode,
)
from scriptflow.auth.session import SESSION_KEY
from scriptflow.db.models import Project

CLIENT_ID = uuid4()

STAFF = SessionInfo(user_id=str(uuid4()), email="ed@krtva.com", name="Ed", role="krtva")
CLIENT = SessionInfo(
    user_id=str(CLIENT_ID), email="client@example.com", name="Mia", role="client"
)


class TestIsStaff:
    """is_staff accepts session records and active-user dicts."""

    def test_session_info(self) -> None:
        assert is_staff(STAFF) is True
        assert is_staff(CLIENT) is False

    def test_dict(self) -> None:
        assert is_staff({"id": "1", "name": "Ed", "role": "krtva"}) is True
        assert is_staff({"id": "2", "name": "Mia", "role": "client"}) is False

    def test_anonymous(self) -> None:
        assert is_staff(None) is False


class TestRequireStaff:
    def test_staff_passes(self) -> None:
        require_staff(STAFF)

    @pytest.mark.parametrize("user", [CLIENT, None])
    def test_others_rejected(self, user: SessionInfo | None) -> None:
        with pytest.raises(UnauthorisedError):
            require_staff(user)


class TestResolveAccessMode:
    """Which view a video page renders."""

    @pytest.mark.parametrize(
        ("param", "staff", "expected"),
        [
            (None, True, "staff"),
            ("client", True, "client"),
            ("staff", True, "staff"),
            (None, False, "client"),
            ("staff", False, "client"),
        ],
    )
    def test_modes(self, param: str | None, staff: bool, expected: str) -> None:
        assert resolve_access_mode(param, staff) == expected


class TestCanViewVideo:
    """Clients see only their own projects; staff see everything."""

    def test_staff_any_project(self) -> None:
        assert can_view_video(STAFF, Project(title="Other", client_id=uuid4()))

    def test_owning_client(self) -> None:
        assert can_view_video(CLIENT, Project(title="Mine", client_id=CLIENT_ID))

    def test_other_client(self) -> None:
        assert not can_view_video(CLIENT, Project(title="Theirs", client_id=uuid4()))

    def test_unowned_project(self) -> None:
        assert not can_view_video(CLIENT, Project(title="Unassigned"))

    def test_signed_out(self) -> None:
        assert not can_view_video(None, Project(title="Mine", client_id=CLIENT_ID))


class TestSessionStorage:
    """create_session, get_session_info and destroy_session on a plain dict."""

    def test_round_trip(self) -> None:
        storage: dict[str, object] = {}
        identity = UserIdentity(
            user_id=CLIENT_ID,
            email="client@example.com",
            name="Mia",
            role="client",
            session_token="tok",
        )

        info = create_session(identity, storage)

        assert info.user_id == str(CLIENT_ID)
        assert get_session_info(storage) == info
        assert get_active_user(storage) == {
            "id": str(CLIENT_ID),
            "name": "Mia",
            "role": "client",
        }

    def test_destroy(self) -> None:
        storage: dict[str, object] = {}
        create_session(UserIdentity(uuid4(), "a@example.com", "A", "client"), storage)
        destroy_session(storage)
        assert get_session_info(storage) is None
        assert get_active_user(storage) is None

    @pytest.mark.parametrize(
        "raw",
        [
            "not a dict",
            {"email": "a@example.com", "role": "client"},
            {"user_id": "1", "email": "a@example.com", "role": "admin"},
        ],
    )
    def test_incomplete_record_is_signed_out(self, raw: object) -> None:
        assert get_session_info({SESSION_KEY: raw}) is None

    def test_missing_name_falls_back_to_email(self) -> None:
        storage = {
            SESSION_KEY: {"user_id": "1", "email": "a@example.com", "role": "client"}
        }
        info = get_session_info(storage)
        assert info is not None
        assert info.name == "a@example.com"

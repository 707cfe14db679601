"""Tests for IdentityService — login, registration, logout, profile edits."""

from __future__ import annotations

import json

import pytest

from milaan.config.settings import MilaanSettings
from milaan.infrastructure.session import SessionStore
from milaan.infrastructure.storage import IDENTITY_KEY
from milaan.services.identity import IdentityService
from tests.conftest import ASKER_ID, HELPER_ID, login_as


class TestLogin:
    @pytest.mark.anyio
    async def test_known_email_any_password(self, store: SessionStore) -> None:
        result = await IdentityService(store).login("helper@example.com", "anything")
        assert result.ok
        assert result.data["id"] == HELPER_ID
        assert store.current_user is not None
        assert store.current_user.id == HELPER_ID

    @pytest.mark.anyio
    async def test_email_case_insensitive(self, store: SessionStore) -> None:
        result = await IdentityService(store).login("Asker@Example.com", "")
        assert result.ok
        assert result.data["id"] == ASKER_ID

    @pytest.mark.anyio
    async def test_unknown_email(self, store: SessionStore) -> None:
        result = await IdentityService(store).login("unknown@x.com", "secret")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_CREDENTIALS"
        assert store.current_user is None

    @pytest.mark.anyio
    async def test_persists_identity(self, store: SessionStore) -> None:
        await IdentityService(store).login("helper@example.com", "")
        assert store.storage is not None
        raw = store.storage.get_item(IDENTITY_KEY)
        assert raw is not None
        assert json.loads(raw)["id"] == HELPER_ID

    @pytest.mark.anyio
    async def test_identity_survives_new_session(
        self, store: SessionStore, settings: MilaanSettings
    ) -> None:
        await IdentityService(store).login("asker@example.com", "")
        next_session = SessionStore(settings)
        assert next_session.current_user is not None
        assert next_session.current_user.id == ASKER_ID


class TestRegister:
    def test_helper_registration(self, store: SessionStore) -> None:
        result = IdentityService(store).register(
            {"name": "Asha Rao", "email": "asha@example.com", "role": "helper"}, "pw"
        )
        assert result.ok
        data = result.data
        assert data["id"] == "user_5"
        assert data["help_count"] == 0
        assert data["problem_count"] is None
        assert store.current_user is not None
        assert store.current_user.id == "user_5"
        assert store.get_user("user_5") is not None

    def test_asker_registration(self, store: SessionStore) -> None:
        result = IdentityService(store).register(
            {
                "name": "Ravi",
                "email": "ravi@example.com",
                "role": "asker",
                "location": {"address": "Pune"},
            },
            "pw",
        )
        assert result.ok
        assert result.data["problem_count"] == 0
        assert result.data["help_count"] is None
        assert result.data["location"]["address"] == "Pune"

    @pytest.mark.parametrize("missing", ["name", "email", "role"])
    def test_missing_required_field(self, store: SessionStore, missing: str) -> None:
        profile = {"name": "Asha", "email": "asha@example.com", "role": "helper"}
        del profile[missing]
        result = IdentityService(store).register(profile, "pw")
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert store.current_user is None

    def test_invalid_role(self, store: SessionStore) -> None:
        result = IdentityService(store).register(
            {"name": "Asha", "email": "asha@example.com", "role": "admin"}, "pw"
        )
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"

    @pytest.mark.parametrize("role", [["helper"], {"role": "helper"}])
    def test_non_string_role(self, store: SessionStore, role: object) -> None:
        before = len(store.list_users())
        result = IdentityService(store).register(
            {"name": "Asha", "email": "asha@example.com", "role": role}, "pw"
        )
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert len(store.list_users()) == before
        assert store.current_user is None

    def test_out_of_range_rating(self, store: SessionStore) -> None:
        result = IdentityService(store).register(
            {"name": "Asha", "email": "a@example.com", "role": "helper", "rating": 9}, "pw"
        )
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert "rating" in result.error.message
        again = IdentityService(store).register(
            {"name": "Asha", "email": "a@example.com", "role": "helper"}, "pw"
        )
        assert again.data["id"] == "user_5"

    @pytest.mark.anyio
    async def test_registered_user_can_log_in(self, store: SessionStore) -> None:
        svc = IdentityService(store)
        svc.register({"name": "Asha", "email": "asha@example.com", "role": "helper"}, "pw")
        svc.logout()
        result = await svc.login("asha@example.com", "")
        assert result.ok
        assert result.data["id"] == "user_5"


class TestLogout:
    def test_clears_current_user_and_slot(self, store: SessionStore) -> None:
        login_as(store, HELPER_ID)
        result = IdentityService(store).logout()
        assert result.ok
        assert result.data == {"user_id": HELPER_ID}
        assert store.current_user is None
        assert store.storage is not None
        assert store.storage.get_item(IDENTITY_KEY) is None

    def test_nobody_logged_in(self, store: SessionStore) -> None:
        result = IdentityService(store).logout()
        assert result.ok
        assert result.data == {"user_id": None}


class TestUpdateUser:
    def test_requires_login(self, store: SessionStore) -> None:
        result = IdentityService(store).update_user({"bio": "hi"})
        assert result.error is not None
        assert result.error.code == "UNAUTHORIZED"

    def test_edits_own_record(self, store: SessionStore) -> None:
        login_as(store, HELPER_ID)
        result = IdentityService(store).update_user({"bio": "Weekend volunteer"})
        assert result.ok
        assert result.data["fields_changed"] == ["bio"]
        directory = store.get_user(HELPER_ID)
        assert directory is not None
        assert directory.bio == "Weekend volunteer"
        assert store.current_user is not None
        assert store.current_user.bio == "Weekend volunteer"

    def test_immutable_fields_warned(self, store: SessionStore) -> None:
        login_as(store, HELPER_ID)
        result = IdentityService(store).update_user(
            {"role": "asker", "id": "user_99", "name": "Johnny"}
        )
        assert result.ok
        assert len(result.warnings) == 2
        user = store.current_user
        assert user is not None
        assert user.id == HELPER_ID
        assert user.role == "helper"
        assert user.name == "Johnny"

    def test_unknown_field(self, store: SessionStore) -> None:
        login_as(store, HELPER_ID)
        result = IdentityService(store).update_user({"nickname": "JJ"})
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"

    def test_edit_persisted_to_slot(self, store: SessionStore, settings: MilaanSettings) -> None:
        login_as(store, HELPER_ID)
        IdentityService(store).update_user({"bio": "Edited"})
        next_session = SessionStore(settings)
        user = next_session.get_user(HELPER_ID)
        assert user is not None
        assert user.bio == "Edited"


class TestWhoami:
    def test_nobody(self, store: SessionStore) -> None:
        result = IdentityService(store).whoami()
        assert result.error is not None
        assert result.error.code == "UNAUTHORIZED"

    def test_current(self, store: SessionStore) -> None:
        login_as(store, ASKER_ID)
        assert IdentityService(store).whoami().data["id"] == ASKER_ID
        assert IdentityService(store).current_user() == store.current_user

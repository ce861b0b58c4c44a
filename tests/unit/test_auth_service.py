"""
Unit tests for the account service.

Tests cover:
- Registration validation, duplicate detection and hashing
- Login with identical failures for unknown email and wrong password
- Partial profile updates
- Store failures passed through unchanged
- Password hashing kept off the event loop
"""

import asyncio
import copy
import time

import pytest
import pytest_asyncio

from shelf_api.src.errors import (
    AuthError, ConflictError, Failure, Ok, UpstreamError, ValidationError
)
from shelf_api.src.repositories.user_repo import UserRepository
from shelf_api.src.services.auth_service import AuthService
from shelf_common.security import PasswordCodec


@pytest.fixture
def service(airtable) -> AuthService:
    return AuthService(UserRepository(airtable), PasswordCodec(rounds=4))


@pytest_asyncio.fixture
async def registered(service):
    result = await service.register("Ada", "ada@example.com", "correct-horse")
    return result.unwrap()


class TestRegister:
    """Test registration."""

    @pytest.mark.asyncio
    async def test_register_stores_hash(self, service, airtable):
        result = await service.register("Ada", "ada@example.com", "correct-horse")

        assert isinstance(result, Ok)
        assert result.value.email == "ada@example.com"
        stored = airtable.records("Users")[0]["fields"]
        assert stored["Password"] != "correct-horse"
        assert stored["Password"].startswith("$2b$")
        assert stored["CreatedAt"].endswith("Z")

    @pytest.mark.asyncio
    async def test_response_has_no_password(self, service):
        result = await service.register("Ada", "ada@example.com", "correct-horse")

        dumped = result.value.model_dump(by_alias=True)
        assert "password" not in dumped
        assert "passwordHash" not in dumped
        assert dumped["airtableId"] == dumped["id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,email,password", [
        (None, "a@b.c", "secret1"),
        ("Ada", "", "secret1"),
        ("Ada", "a@b.c", None),
    ])
    async def test_missing_fields(self, service, airtable, name, email, password):
        result = await service.register(name, email, password)

        assert isinstance(result.error, ValidationError)
        assert result.error.message == "Name, email, and password are required"
        assert airtable.calls == []

    @pytest.mark.asyncio
    async def test_short_password(self, service):
        result = await service.register("Ada", "ada@example.com", "12345")

        assert result.error.message == "Password must be at least 6 characters long"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service, airtable, registered):
        before = copy.deepcopy(airtable.records("Users"))

        result = await service.register("Imposter", "ada@example.com", "another-pass")

        assert isinstance(result.error, ConflictError)
        assert result.error.status_code == 409
        assert airtable.records("Users") == before

    @pytest.mark.asyncio
    async def test_store_failure(self, service, airtable):
        airtable.fail_with("Invalid permissions")

        result = await service.register("Ada", "ada@example.com", "correct-horse")

        assert isinstance(result.error, UpstreamError)
        assert result.error.message == "Invalid permissions"


class TestLogin:
    """Test credential verification."""

    @pytest.mark.asyncio
    async def test_login_success(self, service, registered):
        result = await service.login("ada@example.com", "correct-horse")

        assert result.value.id == registered.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_are_identical(self, service, registered):
        wrong_password = await service.login("ada@example.com", "wrong-horse")
        unknown_email = await service.login("nobody@example.com", "correct-horse")

        assert isinstance(wrong_password.error, AuthError)
        assert isinstance(unknown_email.error, AuthError)
        assert wrong_password.error.message == unknown_email.error.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_email_match_is_case_sensitive(self, service, registered):
        result = await service.login("ADA@example.com", "correct-horse")

        assert isinstance(result, Failure)

    @pytest.mark.asyncio
    async def test_missing_credentials(self, service):
        result = await service.login("ada@example.com", "")

        assert result.error.message == "Email and password are required"


class TestUpdateUser:
    """Test profile updates."""

    @pytest.mark.asyncio
    async def test_partial_update(self, service, airtable, registered):
        result = await service.update_user(registered.airtable_id, {"profile_picture": "/uploads/p.png"})

        assert result.value.profile_picture == "/uploads/p.png"
        assert result.value.name == "Ada"
        assert airtable.records("Users")[0]["fields"]["ProfilePicture"] == "/uploads/p.png"

    @pytest.mark.asyncio
    async def test_no_fields(self, service, registered):
        result = await service.update_user(registered.airtable_id, {})

        assert isinstance(result.error, ValidationError)

    @pytest.mark.asyncio
    async def test_unknown_record(self, service):
        result = await service.update_user("recMissing", {"name": "Ghost"})

        assert result.error.status_code == 500
        assert "recMissing" in result.error.message


class TestEventLoopResponsiveness:
    """Hashing runs in a worker thread, so other tasks keep being served."""

    @pytest.mark.asyncio
    async def test_register_and_login_do_not_stall_loop(self, airtable):
        service = AuthService(UserRepository(airtable), PasswordCodec(rounds=12))
        gaps = []
        done = asyncio.Event()

        async def ticker():
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(0.005)
                now = time.perf_counter()
                gaps.append(now - last)
                last = now

        tick_task = asyncio.create_task(ticker())
        try:
            registered = await service.register("Ada", "ada@example.com", "correct-horse")
            logged_in = await service.login("ada@example.com", "correct-horse")
        finally:
            done.set()
            await tick_task

        assert isinstance(registered, Ok)
        assert isinstance(logged_in, Ok)
        assert gaps
        assert max(gaps) < 0.1

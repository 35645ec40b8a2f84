import pytest

from src.application.services.session_manager import (
    CONTEXT_RESET,
    CONTEXT_SIGN_IN,
    CONTEXT_SIGN_UP,
    SessionManager,
    auth_error_message,
)
from src.domain.entities.user_profile import UserProfile
from src.domain.errors import (
    AccountSuspendedError,
    AdminRequiredError,
    AuthenticationError,
    NotAuthenticatedError,
    SnippetValidationError,
)


def _session(identity, directory, admin_email="boss@example.com"):
    return SessionManager(identity, directory, admin_email=admin_email, clock=lambda: "2024-01-01T00:00:00+00:00")


@pytest.mark.asyncio
async def test_sign_up_creates_user_profile(identity, directory):
    session = _session(identity, directory)
    profile = await session.sign_up(" dev@example.com ", "secret1", " Dev ")

    assert profile.role == "user"
    assert profile.display_name == "Dev"
    assert directory.profiles[profile.uid].email == "dev@example.com"
    assert session.current_user_id == profile.uid
    assert session.is_admin is False


@pytest.mark.asyncio
async def test_sign_up_with_admin_email_gets_admin_role(identity, directory):
    session = _session(identity, directory)
    profile = await session.sign_up("Boss@Example.com", "secret1", "Boss")
    assert profile.role == "admin"
    assert session.is_admin is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password,name",
    [
        ("", "secret1", "A"),
        ("not-an-email", "secret1", "A"),
        ("a@b.co", "", "A"),
        ("a@b.co", "12345", "A"),
        ("a@b.co", "secret1", "  "),
    ],
)
async def test_sign_up_validation(identity, directory, email, password, name):
    session = _session(identity, directory)
    with pytest.raises(SnippetValidationError):
        await session.sign_up(email, password, name)
    assert identity.accounts == {}


@pytest.mark.asyncio
async def test_provider_error_is_mapped_to_message(identity, directory):
    session = _session(identity, directory)
    await session.sign_up("a@b.co", "secret1", "A")
    with pytest.raises(AuthenticationError) as exc:
        await session.sign_up("a@b.co", "secret1", "A")
    assert exc.value.code == "auth/email-already-in-use"
    assert exc.value.message.startswith("This email is already registered")


@pytest.mark.asyncio
async def test_sign_in_records_last_login(identity, directory):
    session = _session(identity, directory)
    created = await session.sign_up("a@b.co", "secret1", "A")
    await session.sign_out()
    directory.profiles[created.uid].last_login_at = None

    profile = await session.sign_in("a@b.co", "secret1")

    assert profile.last_login_at == "2024-01-01T00:00:00+00:00"
    assert session.profile is profile


@pytest.mark.asyncio
async def test_sign_in_survives_last_login_write_failure(identity, directory):
    session = _session(identity, directory)
    await session.sign_up("a@b.co", "secret1", "A")
    directory.fail_updates = True
    profile = await session.sign_in("a@b.co", "secret1")
    assert profile is not None


@pytest.mark.asyncio
async def test_wrong_password_message(identity, directory):
    session = _session(identity, directory)
    await session.sign_up("a@b.co", "secret1", "A")
    with pytest.raises(AuthenticationError) as exc:
        await session.sign_in("a@b.co", "nope123")
    assert exc.value.message == "Incorrect password. Please try again."


@pytest.mark.asyncio
async def test_suspended_account_is_signed_out(identity, directory):
    session = _session(identity, directory)
    created = await session.sign_up("a@b.co", "secret1", "A")
    directory.profiles[created.uid].is_active = False

    with pytest.raises(AccountSuspendedError) as exc:
        await session.sign_in("a@b.co", "secret1")

    assert str(exc.value) == "Account suspended. Please contact administrator."
    assert session.current_user_id is None
    assert session.profile is None


@pytest.mark.asyncio
async def test_restore_picks_up_persisted_admin_session(identity, directory):
    identity.current = "u-boss"
    directory.profiles["u-boss"] = UserProfile(uid="u-boss", email="boss@example.com", role="admin")
    session = _session(identity, directory)
    assert session.is_admin is False

    profile = await session.restore()

    assert profile.uid == "u-boss"
    assert session.profile is profile
    assert session.is_admin is True
    assert session.current_user_id == "u-boss"
    assert identity.sign_outs == 0


@pytest.mark.asyncio
async def test_restore_signs_out_suspended_persisted_session(identity, directory):
    identity.current = "u-2"
    directory.profiles["u-2"] = UserProfile(uid="u-2", email="b@example.com", is_active=False)
    session = _session(identity, directory)

    with pytest.raises(AccountSuspendedError):
        await session.restore()

    assert session.current_user_id is None
    assert session.profile is None
    assert identity.sign_outs == 1


@pytest.mark.asyncio
async def test_restore_without_persisted_session(identity, directory):
    session = _session(identity, directory)
    assert await session.restore() is None
    assert session.profile is None
    assert directory.calls == []


@pytest.mark.asyncio
async def test_reset_password(identity, directory):
    session = _session(identity, directory)
    await session.reset_password("a@b.co")
    assert identity.reset_requests == ["a@b.co"]

    identity.fail_code = "auth/user-not-found"
    with pytest.raises(AuthenticationError) as exc:
        await session.reset_password("a@b.co")
    assert exc.value.message == "No account found with this email"


def test_auth_error_message_tables_and_fallbacks():
    assert auth_error_message("auth/invalid-credential", CONTEXT_SIGN_IN).startswith("Invalid email or password")
    assert auth_error_message("user-disabled", CONTEXT_SIGN_IN).startswith("This account has been disabled")
    assert auth_error_message("auth/weak-password", CONTEXT_SIGN_UP).startswith("Password is too weak")
    assert auth_error_message("auth/whatever", CONTEXT_SIGN_IN) == "Sign in failed. Please try again."
    assert auth_error_message("auth/whatever", CONTEXT_SIGN_UP) == "Failed to create account. Please try again."
    assert auth_error_message(None, CONTEXT_RESET) == "Failed to send reset email"


def test_require_user(identity, directory):
    session = _session(identity, directory)
    with pytest.raises(NotAuthenticatedError):
        session.require_user()
    identity.current = "u1"
    assert session.require_user() == "u1"


@pytest.mark.asyncio
async def test_admin_operations_rejected_without_directory_call(identity, directory):
    session = _session(identity, directory)
    await session.sign_up("a@b.co", "secret1", "A")
    directory.calls.clear()

    for op in (session.list_users(), session.suspend_user("x"), session.activate_user("x"), session.user_stats()):
        with pytest.raises(AdminRequiredError) as exc:
            await op
        assert str(exc.value) == "Unauthorized: Admin access required"
    assert directory.calls == []


@pytest.mark.asyncio
async def test_admin_operations(identity, directory):
    session = _session(identity, directory)
    await session.sign_up("boss@example.com", "secret1", "Boss")
    directory.profiles["u-2"] = UserProfile(uid="u-2", email="x@y.z")
    directory.profiles["u-3"] = UserProfile(uid="u-3", email="q@y.z", is_active=False)

    await session.suspend_user("u-2")
    assert directory.profiles["u-2"].is_active is False
    assert directory.profiles["u-2"].suspended_at == "2024-01-01T00:00:00+00:00"

    await session.activate_user("u-3")
    assert directory.profiles["u-3"].is_active is True
    assert directory.profiles["u-3"].suspended_at is None

    stats = await session.user_stats()
    assert (stats.total_users, stats.active_users, stats.suspended_users) == (3, 2, 1)
    assert (stats.admin_users, stats.regular_users) == (1, 2)
    assert len(await session.list_users()) == 3

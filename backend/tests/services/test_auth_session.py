"""Auth Session — login/logout, cached session, registration rules, theme preference."""

import pytest

from origen.core.domain_types import Theme, UserRole
from origen.core.errors import AdminLimitError, DatabaseError, UserAlreadyExistsError
from origen.infrastructure.gateway import SqlGateway
from origen.infrastructure.local_state import LocalStateStore
from origen.services.auth_session import SESSION_KEY, AuthSession, ThemePreference
from tests.services.fake_gateway import TEST_ROUNDS, FakeAccounts


@pytest.fixture
def accounts():
    return FakeAccounts()


@pytest.fixture
def auth(accounts, local_state):
    return AuthSession(accounts, local_state, rounds=TEST_ROUNDS)


async def test_register_then_login(auth):
    user = await auth.register_user("ana", "secreta", full_name="Ana")
    assert user.role == UserRole.USER
    assert "password_hash" not in user.model_dump()

    assert await auth.login("ana", "secreta") is True
    assert auth.current_user.username == "ana"
    assert auth.auth_error is None


async def test_wrong_password_sets_auth_error(auth):
    await auth.register_user("ana", "secreta")
    assert await auth.login("ana", "otra") is False
    assert auth.current_user is None
    assert auth.auth_error


async def test_unknown_user_fails_login(auth):
    assert await auth.login("nadie", "x") is False
    assert auth.auth_error


async def test_backend_failure_during_login_is_reported_not_raised(accounts, local_state):
    class _Down(FakeAccounts):
        async def get_by_username(self, username):
            raise DatabaseError("timeout", "select")

    auth = AuthSession(_Down(), local_state, rounds=TEST_ROUNDS)
    assert await auth.login("ana", "x") is False
    assert auth.auth_error


async def test_session_restored_by_new_instance(auth, accounts, tmp_path):
    await auth.register_user("ana", "secreta")
    await auth.login("ana", "secreta")

    restored = AuthSession(accounts, LocalStateStore(tmp_path / "state.json"), rounds=TEST_ROUNDS)
    assert restored.current_user.username == "ana"


async def test_logout_clears_cached_session(auth, local_state):
    await auth.register_user("ana", "secreta")
    await auth.login("ana", "secreta")
    auth.logout()
    assert auth.current_user is None
    assert local_state.get(SESSION_KEY) is None


async def test_corrupt_cached_session_is_dropped(accounts, local_state):
    local_state.set(SESSION_KEY, {"username": "ana", "role": "superuser"})
    auth = AuthSession(accounts, local_state, rounds=TEST_ROUNDS)
    assert auth.current_user is None
    assert local_state.get(SESSION_KEY) is None


async def test_duplicate_username_rejected(auth):
    await auth.register_user("ana", "secreta")
    with pytest.raises(UserAlreadyExistsError):
        await auth.register_user("ana", "otra")


async def test_only_one_admin_allowed(auth):
    await auth.register_user("jefe", "x", role=UserRole.ADMIN)
    with pytest.raises(AdminLimitError):
        await auth.register_user("otro", "y", role=UserRole.ADMIN)


async def test_validate_user_leaves_session_alone(auth):
    await auth.register_user("ana", "secreta")
    assert await auth.validate_user("ana", "secreta") is True
    assert await auth.validate_user("ana", "mal") is False
    assert auth.current_user is None


async def test_check_user_exists(auth):
    await auth.register_user("ana", "secreta")
    assert await auth.check_user_exists("ana") is True
    assert await auth.check_user_exists("luis") is False


def test_theme_defaults_to_light_and_toggles(local_state, tmp_path):
    theme = ThemePreference(local_state)
    assert theme.theme == Theme.LIGHT
    assert theme.toggle() == Theme.DARK
    assert ThemePreference(LocalStateStore(tmp_path / "state.json")).theme == Theme.DARK


def test_unknown_stored_theme_falls_back(local_state):
    local_state.set("theme", "sepia")
    assert ThemePreference(local_state).theme == Theme.LIGHT


async def test_refused_connection_fails_login_without_raising(unreachable_db_manager, local_state):
    auth = AuthSession(
        SqlGateway(unreachable_db_manager).accounts, local_state, rounds=TEST_ROUNDS,
    )
    assert await auth.login("Punto", "x") is False
    assert auth.auth_error
    assert auth.current_user is None

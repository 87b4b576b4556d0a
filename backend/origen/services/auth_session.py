"""Auth Session — current-user lifecycle, account helpers, and the local theme preference.

Invariants:
    - current_user is restored from local state on construction; a corrupt entry is dropped
    - login() returns bool and sets auth_error on failure; it never raises for bad credentials
      or an unreachable backend
    - register_user() refuses an existing username and a second admin before writing
    - Theme preference lives only in local state, independent of the remote settings record

Design Decisions:
    - Password hash never leaves this module: accounts become User schemas before being cached
    - One AuthSession per instance, like the store: the session is per instance, not global
"""

import logging

from pydantic import ValidationError

from origen.core.domain_types import Theme, UserRole
from origen.core.repository_protocols import AccountDirectory, LocalState
from origen.core.errors import (
    AdminLimitError, DatabaseError, ErrorContext, UserAlreadyExistsError,
)
from origen.core.workflow import utc_now_iso
from origen.schemas.entities import User
from origen.services.passwords import DEFAULT_ROUNDS, hash_password, verify_password

logger = logging.getLogger(__name__)

SESSION_KEY = "session_user"
THEME_KEY = "theme"


def _public(account: dict) -> User:
    return User.model_validate(
        {k: v for k, v in account.items() if k != "password_hash"},
    )


class AuthSession:
    """Login state for one running instance."""

    def __init__(
        self, accounts: AccountDirectory, local_state: LocalState, rounds: int = DEFAULT_ROUNDS,
    ):
        self._accounts = accounts
        self._local = local_state
        self._rounds = rounds
        self.auth_error: str | None = None
        self.current_user: User | None = self._restore()

    def _restore(self) -> User | None:
        cached = self._local.get(SESSION_KEY)
        if cached is None:
            return None
        try:
            return User.model_validate(cached)
        except ValidationError:
            logger.warning("Dropping unreadable cached session")
            self._local.remove(SESSION_KEY)
            return None

    async def login(self, username: str, password: str) -> bool:
        self.auth_error = None
        try:
            account = await self._accounts.get_by_username(username)
        except DatabaseError as e:
            logger.error(f"Login lookup failed: {e.message}", extra={"username": username})
            self.auth_error = "Login failed, try again later."
            return False
        if account is None or not verify_password(password, account.get("password_hash")):
            self.auth_error = "Invalid username or password."
            return False
        self.current_user = _public(account)
        self._local.set(SESSION_KEY, self.current_user.model_dump(mode="json"))
        logger.info("User logged in", extra={"username": username})
        return True

    def logout(self) -> None:
        self.current_user = None
        self._local.remove(SESSION_KEY)

    async def check_user_exists(self, username: str) -> bool:
        return await self._accounts.exists(username)

    async def validate_user(self, username: str, password: str) -> bool:
        """Check credentials without touching the current session."""
        try:
            account = await self._accounts.get_by_username(username)
        except DatabaseError:
            return False
        return account is not None and verify_password(password, account.get("password_hash"))

    async def register_user(
        self,
        username: str,
        password: str,
        role: UserRole = UserRole.USER,
        full_name: str = "",
    ) -> User:
        role = UserRole(role)
        ctx = ErrorContext(collection="users", operation="register", username=username)
        if await self._accounts.exists(username):
            raise UserAlreadyExistsError(username, ctx)
        if role == UserRole.ADMIN and await self._accounts.count_by_role(UserRole.ADMIN.value) >= 1:
            raise AdminLimitError(ctx)
        account = {
            "username": username,
            "password_hash": hash_password(password, self._rounds),
            "role": role.value,
            "full_name": full_name,
            "created_at": utc_now_iso(),
        }
        await self._accounts.insert(account)
        return _public(account)


class ThemePreference:
    """Light/dark choice cached per instance."""

    def __init__(self, local_state: LocalState, default: Theme = Theme.LIGHT):
        self._local = local_state
        stored = local_state.get(THEME_KEY)
        self._theme = Theme(stored) if stored in {t.value for t in Theme} else default

    @property
    def theme(self) -> Theme:
        return self._theme

    def set(self, theme: Theme) -> Theme:
        self._theme = Theme(theme)
        self._local.set(THEME_KEY, self._theme.value)
        return self._theme

    def toggle(self) -> Theme:
        return self.set(Theme.DARK if self._theme == Theme.LIGHT else Theme.LIGHT)

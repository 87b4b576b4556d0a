"""Account Bootstrap — converge a fixed set of accounts on every startup.

Invariants:
    - Absent account → created; present with a password that does not verify → password
      and role updated in place; otherwise untouched
    - Never creates a second row for a username (lookup first, username is the primary key)
    - Unreachable users table (schema missing, connection down) → logged, returns {} —
      startup continues and the degraded state surfaces through the store's reload
    - A failure on one account is logged and does not stop the others

Design Decisions:
    - Passwords compared with bcrypt verify, not by re-hashing: salts differ on every hash,
      so comparing hashes would rewrite the row on every run
    - Returns an outcome per username ("created" / "updated" / "unchanged" / "failed")
      for startup logging and tests
"""

import logging

from origen.core.domain_types import UserRole
from origen.core.errors import DatabaseError
from origen.core.repository_protocols import AccountDirectory
from origen.core.workflow import utc_now_iso
from origen.services.passwords import DEFAULT_ROUNDS, hash_password, verify_password

logger = logging.getLogger(__name__)


async def ensure_fixed_accounts(
    accounts: AccountDirectory, fixed: list[dict], rounds: int = DEFAULT_ROUNDS,
) -> dict[str, str]:
    """Make every account in `fixed` exist with its configured password and role."""
    try:
        await accounts.probe()
    except DatabaseError as e:
        logger.error(
            f"Users table unreachable, skipping account bootstrap: {e.message}",
            extra={"error_code": e.code},
        )
        return {}

    outcomes = {}
    for wanted in fixed:
        outcomes[wanted["username"]] = await _ensure_account(accounts, wanted, rounds)
    logger.info(f"Account bootstrap finished: {outcomes}")
    return outcomes


async def _ensure_account(accounts, wanted: dict, rounds: int) -> str:
    username = wanted["username"]
    role = UserRole(wanted["role"]).value
    try:
        existing = await accounts.get_by_username(username)
        if existing is None:
            await accounts.insert({
                "username": username,
                "password_hash": hash_password(wanted["password"], rounds),
                "role": role,
                "full_name": wanted.get("full_name", ""),
                "created_at": utc_now_iso(),
            })
            return "created"
        if not verify_password(wanted["password"], existing.get("password_hash")):
            await accounts.update(
                username,
                password_hash=hash_password(wanted["password"], rounds),
                role=role,
            )
            return "updated"
        return "unchanged"
    except DatabaseError as e:
        logger.error(
            f"Failed to ensure account: {e.message}",
            extra={"username": username, "error_code": e.code},
        )
        return "failed"

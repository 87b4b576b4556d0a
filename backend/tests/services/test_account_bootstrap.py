"""Account Bootstrap — fixed accounts converge on every startup.

Invariants:
    - Fresh database → every fixed account created with a verifying bcrypt hash
    - Re-running with the same config changes nothing and never duplicates a row
    - Changed password in config → stored hash and role updated in place
    - Unreachable users table → {} and no exception
"""

from origen.core.errors import DatabaseError
from origen.infrastructure.gateway import SqlGateway
from origen.services.account_bootstrap import ensure_fixed_accounts
from origen.services.passwords import verify_password
from tests.services.fake_gateway import TEST_ROUNDS, FakeAccounts

FIXED = [
    {"username": "Punto", "password": "clave-admin", "role": "admin", "full_name": "Punto"},
    {"username": "Info", "password": "clave-info", "role": "moderator", "full_name": "Info"},
]


async def test_creates_missing_accounts(sql_gateway):
    accounts = sql_gateway.accounts
    outcomes = await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS)

    assert outcomes == {"Punto": "created", "Info": "created"}
    admin = await accounts.get_by_username("Punto")
    assert admin["role"] == "admin"
    assert admin["password_hash"] != "clave-admin"
    assert verify_password("clave-admin", admin["password_hash"])


async def test_second_run_is_unchanged(sql_gateway):
    accounts = sql_gateway.accounts
    await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS)
    first_hash = (await accounts.get_by_username("Info"))["password_hash"]

    outcomes = await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS)

    assert outcomes == {"Punto": "unchanged", "Info": "unchanged"}
    assert (await accounts.get_by_username("Info"))["password_hash"] == first_hash
    assert await accounts.count_by_role("admin") == 1
    assert await accounts.count_by_role("moderator") == 1


async def test_changed_password_updates_hash_and_role(sql_gateway):
    accounts = sql_gateway.accounts
    await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS)
    await accounts.update("Info", role="user")

    rotated = [FIXED[0], {**FIXED[1], "password": "nueva-clave"}]
    outcomes = await ensure_fixed_accounts(accounts, rotated, rounds=TEST_ROUNDS)

    assert outcomes["Info"] == "updated"
    info = await accounts.get_by_username("Info")
    assert info["role"] == "moderator"
    assert verify_password("nueva-clave", info["password_hash"])
    assert not verify_password("clave-info", info["password_hash"])


async def test_unprovisioned_database_is_skipped(empty_db_manager):
    accounts = SqlGateway(empty_db_manager).accounts
    assert await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS) == {}


async def test_one_failure_does_not_stop_the_rest():
    class _FailsForPunto(FakeAccounts):
        async def insert(self, account):
            if account["username"] == "Punto":
                raise DatabaseError("constraint", "insert")
            await super().insert(account)

    accounts = _FailsForPunto()
    outcomes = await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS)

    assert outcomes == {"Punto": "failed", "Info": "created"}
    assert await accounts.exists("Info")


async def test_unreachable_directory_returns_empty():
    accounts = FakeAccounts()
    accounts.unreachable = DatabaseError("connection refused", "connect")
    assert await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS) == {}
    assert accounts.rows == {}


async def test_refused_connection_is_skipped(unreachable_db_manager):
    accounts = SqlGateway(unreachable_db_manager).accounts
    assert await ensure_fixed_accounts(accounts, FIXED, rounds=TEST_ROUNDS) == {}

"""Cross-Instance Sync Channel — broadcast transports plus the notifier the store talks to.

Invariants:
    - The only message is SYNC_SIGNAL ("data changed"); no payload describes what changed
    - SyncNotifier.notify() never raises — a broken transport degrades to "peers reload later"
    - Subscribers are invoked on the event loop, never inline inside publish()
    - A handle does not receive its own messages unless opened with echo=True
    - close() is idempotent and detaches every subscriber

Design Decisions:
    - Three transports behind one protocol:
        NullSyncChannel — sync disabled / unavailable (single-instance deployments)
        InProcessBroadcastChannel — instances sharing one process (same "origin")
        PostgresNotifyChannel — instances in separate processes sharing the database
      (ADR: the store depends on publish/subscribe only, transports are swappable)
    - Delivery via loop.call_soon: a publisher finishing its mutation is never re-entered
      by a reload triggered from its own notify()
"""

import asyncio
import logging
from collections.abc import Callable

import asyncpg

from origen.core.domain_types import SYNC_SIGNAL
from origen.core.repository_protocols import SyncChannel

logger = logging.getLogger(__name__)

Callback = Callable[[str], object]


def _invoke(callback: Callback, message: str) -> None:
    try:
        callback(message)
    except Exception as e:
        logger.error(f"Sync subscriber failed: {e}", exc_info=True)


def _dispatch(callbacks: list[Callback], message: str) -> None:
    """Schedule callbacks on the running loop, or call them directly without one."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None
    for callback in callbacks:
        if loop is not None:
            loop.call_soon(_invoke, callback, message)
        else:
            _invoke(callback, message)


class _Subscribers:
    """Subscriber list with unsubscribe handles."""

    def __init__(self):
        self._callbacks: list[Callback] = []

    def add(self, callback: Callback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def snapshot(self) -> list[Callback]:
        return list(self._callbacks)

    def clear(self) -> None:
        self._callbacks.clear()


# ─── No-op transport ─────────────────────────────────────────────

class NullSyncChannel:
    """Channel used when broadcasting is unavailable. Publishes go nowhere."""

    def publish(self, message: str) -> None:
        pass

    def subscribe(self, callback: Callback) -> Callable[[], None]:
        return lambda: None

    def close(self) -> None:
        pass


# ─── In-process transport ────────────────────────────────────────

class BroadcastHub:
    """Routes messages between handles opened on the same channel name."""

    def __init__(self):
        self._handles: dict[str, list["InProcessBroadcastChannel"]] = {}

    def open(self, name: str, echo: bool = False) -> "InProcessBroadcastChannel":
        handle = InProcessBroadcastChannel(self, name, echo=echo)
        self._handles.setdefault(name, []).append(handle)
        return handle

    def detach(self, handle: "InProcessBroadcastChannel") -> None:
        handles = self._handles.get(handle.name, [])
        if handle in handles:
            handles.remove(handle)

    def deliver(self, sender: "InProcessBroadcastChannel", message: str) -> None:
        for handle in list(self._handles.get(sender.name, [])):
            if handle is sender and not sender.echo:
                continue
            handle.receive(message)

    def handle_count(self, name: str) -> int:
        return len(self._handles.get(name, []))


class InProcessBroadcastChannel:
    """One instance's handle on a hub channel."""

    def __init__(self, hub: BroadcastHub, name: str, echo: bool = False):
        self.hub = hub
        self.name = name
        self.echo = echo
        self.closed = False
        self._subscribers = _Subscribers()

    def publish(self, message: str) -> None:
        if self.closed:
            return
        self.hub.deliver(self, message)

    def subscribe(self, callback: Callback) -> Callable[[], None]:
        return self._subscribers.add(callback)

    def receive(self, message: str) -> None:
        _dispatch(self._subscribers.snapshot(), message)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._subscribers.clear()
        self.hub.detach(self)


# Process-wide hub: every instance in this process shares it, like tabs on one origin
default_hub = BroadcastHub()


# ─── Postgres LISTEN/NOTIFY transport ────────────────────────────

def _asyncpg_dsn(database_url: str) -> str:
    return database_url.replace("postgresql+asyncpg://", "postgresql://", 1)


class PostgresNotifyChannel:
    """Broadcast over LISTEN/NOTIFY on a dedicated asyncpg connection."""

    def __init__(self, connection: asyncpg.Connection, name: str, echo: bool = False):
        self._conn = connection
        self.name = name
        self.echo = echo
        self.closed = False
        self._subscribers = _Subscribers()
        self._pending: set[asyncio.Task] = set()
        self._own_pid = connection.get_server_pid()

    @classmethod
    async def connect(
        cls, database_url: str, name: str, echo: bool = False,
    ) -> "PostgresNotifyChannel":
        conn = await asyncpg.connect(_asyncpg_dsn(database_url))
        channel = cls(conn, name, echo=echo)
        await conn.add_listener(name, channel._on_notify)
        return channel

    def _on_notify(self, connection, pid: int, channel: str, payload: str) -> None:
        if pid == self._own_pid and not self.echo:
            return
        _dispatch(self._subscribers.snapshot(), payload)

    def publish(self, message: str) -> None:
        if self.closed:
            return
        task = asyncio.get_running_loop().create_task(
            self._conn.execute("SELECT pg_notify($1, $2)", self.name, message),
        )
        self._pending.add(task)
        task.add_done_callback(self._publish_done)

    def _publish_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"pg_notify failed: {task.exception()}")

    def subscribe(self, callback: Callback) -> Callable[[], None]:
        return self._subscribers.add(callback)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._subscribers.clear()
        asyncio.get_running_loop().create_task(self._shutdown())

    async def _shutdown(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        try:
            await self._conn.remove_listener(self.name, self._on_notify)
        finally:
            await self._conn.close()


# ─── Factory & notifier ──────────────────────────────────────────

async def open_sync_channel(settings, hub: BroadcastHub | None = None) -> SyncChannel:
    """Open the configured transport; fall back to NullSyncChannel when unavailable."""
    if not settings.sync_enabled or settings.sync_transport == "none":
        logger.info("Cross-instance sync disabled")
        return NullSyncChannel()
    if settings.sync_transport == "postgres":
        try:
            return await PostgresNotifyChannel.connect(
                settings.database_url,
                settings.sync_channel_name,
                echo=settings.sync_echo_to_sender,
            )
        except (OSError, asyncpg.PostgresError) as e:
            logger.warning(f"LISTEN/NOTIFY unavailable, sync disabled: {e}")
            return NullSyncChannel()
    return (hub or default_hub).open(
        settings.sync_channel_name, echo=settings.sync_echo_to_sender,
    )


class SyncNotifier:
    """Publishes and filters the data-changed signal on a channel."""

    def __init__(self, channel: SyncChannel | None = None):
        self.channel = channel if channel is not None else NullSyncChannel()

    def notify(self) -> None:
        try:
            self.channel.publish(SYNC_SIGNAL)
        except Exception as e:
            logger.warning(f"Sync notify dropped: {e}")

    def subscribe(self, on_change: Callable[[], object]) -> Callable[[], None]:
        def handler(message: str) -> None:
            if message == SYNC_SIGNAL:
                on_change()

        try:
            return self.channel.subscribe(handler)
        except Exception as e:
            logger.warning(f"Sync subscribe failed, running without peers: {e}")
            return lambda: None

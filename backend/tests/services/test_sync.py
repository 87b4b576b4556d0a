"""Cross-Instance Sync — a mutation on one instance makes its peers reload.

Invariants:
    - Peer receives DATA_UPDATED and reloads; the sender does not receive its own signal
    - A broken channel never fails a mutation
    - Closed handles stop delivering; close() is idempotent
    - Non-signal messages are ignored by the notifier
"""

import asyncio

from origen.config import Settings
from origen.core.domain_types import ItemType, SYNC_SIGNAL
from origen.infrastructure.sync_channel import (
    InProcessBroadcastChannel, NullSyncChannel, SyncNotifier, open_sync_channel,
)
from origen.schemas.entities import Baptism, Item
from origen.services.ledger_store import LedgerStore
from tests.services.fake_gateway import FakeGateway


async def _flush_callbacks():
    for _ in range(3):
        await asyncio.sleep(0)


def _item(code="A1"):
    return Item(code=code, name="Buzo", type=ItemType.HOODIES, size="L")


async def test_peer_reloads_after_mutation(fake_gateway, hub):
    a = await LedgerStore.create(fake_gateway, SyncNotifier(hub.open("sync")))
    b = await LedgerStore.create(fake_gateway, SyncNotifier(hub.open("sync")))
    try:
        await a.add_item(_item())
        await _flush_callbacks()
        await b.settle()
        assert [i.code for i in b.items] == ["A1"]
    finally:
        await a.dispose()
        await b.dispose()


async def test_peer_sees_new_baptism(fake_gateway, hub):
    received = []
    a = await LedgerStore.create(fake_gateway, SyncNotifier(hub.open("sync")))
    b_channel = hub.open("sync")
    b_channel.subscribe(received.append)
    b = await LedgerStore.create(fake_gateway, SyncNotifier(b_channel))
    try:
        saved = await a.add_baptism(Baptism(full_name="Ana Pérez"))
        await _flush_callbacks()
        await b.settle()
        assert received == [SYNC_SIGNAL]
        assert [r.id for r in b.baptisms] == [saved.id]
    finally:
        await a.dispose()
        await b.dispose()


async def test_sender_does_not_reload_itself(hub):
    gw_a, gw_b = FakeGateway(), FakeGateway()
    a = await LedgerStore.create(gw_a, SyncNotifier(hub.open("sync")))
    b = await LedgerStore.create(gw_b, SyncNotifier(hub.open("sync")))
    try:
        await a.add_item(_item())
        await _flush_callbacks()
        await a.settle()
        await b.settle()
        assert gw_a.count("items", "get_all") == 1
        assert gw_b.count("items", "get_all") == 2
    finally:
        await a.dispose()
        await b.dispose()


async def test_disposed_store_stops_listening(hub):
    gw_a, gw_b = FakeGateway(), FakeGateway()
    a = await LedgerStore.create(gw_a, SyncNotifier(hub.open("sync")))
    b = await LedgerStore.create(gw_b, SyncNotifier(hub.open("sync")))
    await b.dispose()
    try:
        await a.add_item(_item())
        await _flush_callbacks()
        assert gw_b.count("items", "get_all") == 1
    finally:
        await a.dispose()


async def test_broken_channel_never_fails_mutation(fake_gateway):
    class _Broken(NullSyncChannel):
        def publish(self, message):
            raise ConnectionError("channel gone")

    store = await LedgerStore.create(fake_gateway, SyncNotifier(_Broken()))
    try:
        await store.add_item(_item())
        assert [i.code for i in store.items] == ["A1"]
    finally:
        await store.dispose()


async def test_echo_handle_receives_own_messages(hub):
    received = []
    handle = hub.open("sync", echo=True)
    handle.subscribe(received.append)
    handle.publish(SYNC_SIGNAL)
    await _flush_callbacks()
    assert received == [SYNC_SIGNAL]


async def test_channels_are_isolated_by_name(hub):
    received = []
    hub.open("other").subscribe(received.append)
    hub.open("sync").publish(SYNC_SIGNAL)
    await _flush_callbacks()
    assert received == []


async def test_close_detaches_and_is_idempotent(hub):
    received = []
    listener = hub.open("sync")
    listener.subscribe(received.append)
    sender = hub.open("sync")
    assert hub.handle_count("sync") == 2

    listener.close()
    listener.close()
    sender.publish(SYNC_SIGNAL)
    await _flush_callbacks()

    assert hub.handle_count("sync") == 1
    assert received == []


async def test_failing_subscriber_does_not_block_others(hub):
    received = []

    def broken(message):
        raise RuntimeError("subscriber bug")

    listener = hub.open("sync")
    listener.subscribe(broken)
    listener.subscribe(received.append)
    hub.open("sync").publish(SYNC_SIGNAL)
    await _flush_callbacks()
    assert received == [SYNC_SIGNAL]


async def test_notifier_ignores_unknown_messages(hub):
    calls = []
    notifier = SyncNotifier(hub.open("sync"))
    notifier.subscribe(lambda: calls.append(1))
    other = hub.open("sync")
    other.publish("SOMETHING_ELSE")
    other.publish(SYNC_SIGNAL)
    await _flush_callbacks()
    assert calls == [1]


async def test_unsubscribe_stops_delivery(hub):
    calls = []
    notifier = SyncNotifier(hub.open("sync"))
    unsubscribe = notifier.subscribe(lambda: calls.append(1))
    unsubscribe()
    hub.open("sync").publish(SYNC_SIGNAL)
    await _flush_callbacks()
    assert calls == []


async def test_open_sync_channel_honours_transport_setting(hub):
    disabled = await open_sync_channel(Settings(sync_enabled=False), hub)
    assert isinstance(disabled, NullSyncChannel)

    none = await open_sync_channel(Settings(sync_transport="none"), hub)
    assert isinstance(none, NullSyncChannel)

    memory = await open_sync_channel(Settings(sync_transport="memory", sync_channel_name="x"), hub)
    assert isinstance(memory, InProcessBroadcastChannel)
    assert hub.handle_count("x") == 1

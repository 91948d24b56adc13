import json

import pytest

from socialhub import presence
from socialhub.crud import get_user_last_seen
from socialhub.ws_manager import PresenceConnectionManager


def decoded(published):
    return [(channel, json.loads(message)) for channel, message in published]


@pytest.mark.asyncio
async def test_online_sets_key_with_ttl(users, fake_redis):
    payload = await presence.set_online('user_alice')

    assert payload == {'userId': 'user_alice', 'isOnline': True, 'lastSeen': None}
    assert fake_redis.ttls['user:user_alice:status'] == presence.PRESENCE_TTL_SECONDS == 60
    assert await presence.presence_cache.get(presence.status_key('user_alice')) == {'userId': 'user_alice', 'status': 'online'}
    assert await presence.is_online('user_alice') is True
    assert await presence.is_online('user_bob') is False


@pytest.mark.asyncio
async def test_online_then_offline_broadcasts_in_order(users, fake_redis):
    await presence.set_online('user_alice')
    offline = await presence.set_offline('user_alice')

    events = decoded(fake_redis.published)
    assert [channel for channel, _ in events] == ['online-presence', 'online-presence']
    assert [m['event'] for _, m in events] == ['user-status', 'user-status']
    assert [m['data']['isOnline'] for _, m in events] == [True, False]
    assert events[1][1]['data']['lastSeen'] == offline['lastSeen']
    assert 'user:user_alice:status' not in fake_redis.store
    assert await presence.is_online('user_alice') is False


@pytest.mark.asyncio
async def test_offline_persists_last_seen(users, fake_redis):
    assert await get_user_last_seen('user_alice') is None
    await presence.set_offline('user_alice')
    assert await get_user_last_seen('user_alice') is not None


@pytest.mark.asyncio
async def test_offline_for_unknown_user_still_broadcasts(db, fake_redis):
    payload = await presence.set_offline('ghost')
    assert payload['isOnline'] is False
    assert len(fake_redis.published) == 1


@pytest.mark.asyncio
async def test_broadcast_failure_does_not_fail_the_transition(users, fake_redis):
    fake_redis.fail_publish = True
    payload = await presence.set_online('user_alice')
    assert payload['isOnline'] is True
    assert await presence.is_online('user_alice') is True


@pytest.mark.asyncio
async def test_without_redis_presence_degrades(users, monkeypatch):
    from socialhub import core
    monkeypatch.setattr(core, 'REDIS', None)
    await presence.set_online('user_alice')
    assert await presence.is_online('user_alice') is False


class FakeWebSocket:
    def __init__(self, broken=False):
        self.accepted = False
        self.sent = []
        self.broken = broken

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.broken:
            raise RuntimeError('socket closed')
        self.sent.append(message)


@pytest.mark.asyncio
async def test_manager_goes_offline_after_last_socket(users, fake_redis):
    manager = PresenceConnectionManager()
    first, second = FakeWebSocket(), FakeWebSocket()

    await manager.connect('user_alice', first)
    await manager.connect('user_alice', second)
    assert first.accepted and second.accepted
    assert await presence.is_online('user_alice') is True

    await manager.disconnect('user_alice', first)
    assert await presence.is_online('user_alice') is True

    await manager.disconnect('user_alice', second)
    assert await presence.is_online('user_alice') is False
    assert 'user_alice' not in manager.connections


@pytest.mark.asyncio
async def test_manager_broadcast_drops_dead_sockets(users, fake_redis):
    manager = PresenceConnectionManager()
    alive, dead = FakeWebSocket(), FakeWebSocket(broken=True)
    await manager.connect('user_alice', alive)
    await manager.connect('user_bob', dead)

    message = {'event': 'user-status', 'data': {'userId': 'user_carol', 'isOnline': True, 'lastSeen': None}}
    await manager.broadcast(message)

    assert alive.sent == [message]
    assert 'user_bob' not in manager.connections
    assert await presence.is_online('user_bob') is False


@pytest.mark.asyncio
async def test_dropped_socket_goes_offline_once(users, fake_redis):
    manager = PresenceConnectionManager()
    dead = FakeWebSocket(broken=True)
    await manager.connect('user_bob', dead)

    await manager.broadcast({'event': 'user-status', 'data': {}})
    # the receive loop of the dropped socket disconnects it again
    await manager.disconnect('user_bob', dead)

    events = [m['data'] for _, m in decoded(fake_redis.published) if m['data'].get('userId') == 'user_bob']
    assert [e['isOnline'] for e in events] == [True, False]

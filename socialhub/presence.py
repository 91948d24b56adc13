"""
Online presence.

A user is online while ``user:<id>:status`` exists in Redis. Every transition
is also published on the ``online-presence`` channel. Key expiry does not
publish anything: a client that vanishes without going through
``set_offline`` stays "online" for subscribers until they poll ``is_online``.
"""
import logging
from .broadcast import publish
from .cache import KeyValueCache
from .core import PRESENCE_BROADCASTS
from .crud import update_user_last_seen
from .models.utils import utcnow

logger = logging.getLogger(__name__)

PRESENCE_TTL_SECONDS = 60
PRESENCE_CHANNEL = 'online-presence'
PRESENCE_EVENT = 'user-status'
presence_cache = KeyValueCache('user', PRESENCE_TTL_SECONDS)

def status_key(user_id: str) -> str:
    return f'{user_id}:status'

async def _broadcast_status(user_id: str, is_online: bool, last_seen: str | None):
    payload = {'userId': user_id, 'isOnline': is_online, 'lastSeen': last_seen}
    try:
        await publish(PRESENCE_CHANNEL, PRESENCE_EVENT, payload)
        PRESENCE_BROADCASTS.labels(online=str(is_online).lower()).inc()
    except Exception as e:
        logger.warning({'msg': 'presence_broadcast_failed', 'user_id': user_id, 'error': str(e)})
    return payload

async def set_online(user_id: str) -> dict:
    await presence_cache.set(status_key(user_id), {'userId': user_id, 'status': 'online'})
    return await _broadcast_status(user_id, True, None)

async def set_offline(user_id: str) -> dict:
    logger.info({'msg': 'presence_offline', 'user_id': user_id})
    await presence_cache.delete(status_key(user_id))
    now = utcnow()
    await update_user_last_seen(user_id, now)
    return await _broadcast_status(user_id, False, now.isoformat())

async def is_online(user_id: str) -> bool:
    return await presence_cache.exists(status_key(user_id))

from typing import Dict, Set
from fastapi import WebSocket
import json
import logging
from . import core
from .presence import PRESENCE_CHANNEL, set_online, set_offline

logger = logging.getLogger(__name__)

class PresenceConnectionManager:
    """Tracks local presence sockets and relays the presence channel to them."""

    def __init__(self):
        self.connections: Dict[str, Set[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket):
        await websocket.accept()
        self.connections.setdefault(user_id, set()).add(websocket)
        await set_online(user_id)

    async def heartbeat(self, user_id: str):
        # renewing is just another set_online
        await set_online(user_id)

    async def disconnect(self, user_id: str, websocket: WebSocket):
        sockets = self.connections.get(user_id)
        # a socket dropped during broadcast is disconnected again by its receive loop
        if not sockets or websocket not in sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            self.connections.pop(user_id, None)
            await set_offline(user_id)

    async def broadcast(self, message: dict):
        for uid, ws_set in list(self.connections.items()):
            for ws in list(ws_set):
                try:
                    await ws.send_json(message)
                except Exception as e:
                    logger.info({'msg': 'presence_socket_dropped', 'user_id': uid, 'error': str(e)})
                    await self.disconnect(uid, ws)

    # Redis pub/sub listener to route presence events between app instances
    async def start_redis_listener(self):
        if not core.REDIS:
            logger.warning({'msg': 'presence_listener_skipped', 'reason': 'redis unavailable'})
            return
        pubsub = core.REDIS.pubsub()
        await pubsub.subscribe(PRESENCE_CHANNEL)
        try:
            async for item in pubsub.listen():
                if item and item.get('type') == 'message':
                    try:
                        message = json.loads(item.get('data'))
                    except (TypeError, ValueError) as e:
                        logger.warning({'msg': 'presence_message_invalid', 'error': str(e)})
                        continue
                    await self.broadcast(message)
        finally:
            await pubsub.unsubscribe(PRESENCE_CHANNEL)
            await pubsub.aclose()

manager = PresenceConnectionManager()

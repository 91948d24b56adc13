from . import core
import json

async def publish(channel: str, event: str, data: dict):
    """Publish an event on a Redis pub/sub channel.

    Delivery is fire-and-forget: the number of subscribers that received the
    message is returned but never checked.
    """
    if not core.REDIS:
        raise RuntimeError('Redis client not started')
    message = json.dumps({'event': event, 'data': data})
    return await core.REDIS.publish(channel, message)

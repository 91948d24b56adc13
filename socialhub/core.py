import os
import asyncio
from prometheus_client import Counter, start_http_server
import logging

logger = logging.getLogger(__name__)

REDIS = None

METRICS_PORT = int(os.getenv('METRICS_PORT', '8001'))

FRIENDSHIP_TRANSITIONS = Counter(
    'socialhub_friendship_transitions_total',
    'Friendship records moved into a status',
    ['status'],
)
NOTIFICATIONS_CREATED = Counter(
    'socialhub_notifications_created_total',
    'Notification rows written',
    ['type'],
)
PRESENCE_BROADCASTS = Counter(
    'socialhub_presence_broadcasts_total',
    'Presence events published',
    ['online'],
)

def init_metrics(port: int = METRICS_PORT):
    """Expose the counters above on a Prometheus scrape endpoint"""
    try:
        start_http_server(port)
        logger.info(f"Metrics exporter listening on :{port}")
    except Exception as e:
        logger.warning(f"Metrics exporter not started: {e}")

REDIS_URL = os.getenv('REDIS_URL', 'redis://redis:6379/0')
REDIS_CONNECT_ATTEMPTS = 3
REDIS_RETRY_DELAY = 3  # seconds

async def _open_redis(url: str):
    import redis.asyncio as aioredis

    client = aioredis.from_url(
        url,
        decode_responses=True,
        max_connections=20,
        health_check_interval=30,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    return client

async def redis_startup(url: str = REDIS_URL):
    """Connect the shared Redis client; leaves REDIS as None if every attempt fails"""
    global REDIS
    for attempt in range(1, REDIS_CONNECT_ATTEMPTS + 1):
        try:
            REDIS = await _open_redis(url)
            logger.info(f"Redis connected: {url}")
            return REDIS
        except Exception as e:
            logger.warning(f'Redis connect attempt {attempt}/{REDIS_CONNECT_ATTEMPTS} failed: {e}')
            if attempt < REDIS_CONNECT_ATTEMPTS:
                await asyncio.sleep(REDIS_RETRY_DELAY)
    logger.error("Redis unavailable, presence and broadcasts are disabled")
    return None

async def get_redis():
    return REDIS

async def shutdown_connections():
    """Close the Redis client and the database pool"""
    global REDIS
    client, REDIS = REDIS, None
    if client:
        try:
            await client.aclose()
        except Exception as e:
            logger.error(f"Redis close failed: {e}")

    from .models import engine
    await engine.dispose()
    logger.info("Connections closed")

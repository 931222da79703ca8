from redis import Redis

from app.config import REDIS_DB, REDIS_HOST, REDIS_PORT

_client = None


def get_redis_client() -> Redis:
    # Redis() connects lazily, so building it never touches the network
    global _client
    if _client is None:
        _client = Redis(
            host=REDIS_HOST,
            port=REDIS_PORT,
            db=REDIS_DB,
            socket_connect_timeout=2,
            socket_timeout=2,
            decode_responses=True,
        )
    return _client

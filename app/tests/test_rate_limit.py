import asyncio
import json
from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.infrastructure.cache.rate_limit import client_identifier, rate_limit


class FakeRedis:
    """In-memory Redis: pipeline applies all queued commands or none"""

    def __init__(self, fail_executes=0):
        self.values = {}
        self.ttls = {}
        self.fail_executes = fail_executes

    def pipeline(self):
        return FakePipeline(self)

    def expire_window(self, key):
        self.values.pop(key, None)
        self.ttls.pop(key, None)


class FakePipeline:
    def __init__(self, redis):
        self._redis = redis
        self._commands = []

    def incr(self, key):
        self._commands.append(("incr", key, None, False))

    def expire(self, key, seconds, nx=False):
        self._commands.append(("expire", key, seconds, nx))

    def execute(self):
        if self._redis.fail_executes:
            self._redis.fail_executes -= 1
            raise RedisConnectionError("connection reset")
        results = []
        for name, key, seconds, nx in self._commands:
            if name == "incr":
                self._redis.values[key] = self._redis.values.get(key, 0) + 1
                results.append(self._redis.values[key])
            elif nx and key in self._redis.ttls:
                results.append(False)
            else:
                self._redis.ttls[key] = seconds
                results.append(True)
        return results


def create_test_request(forwarded_for=None):
    request = MagicMock()
    request.headers = {"x-forwarded-for": forwarded_for} if forwarded_for else {}
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    return request


@rate_limit(scope="videos", max_requests=2, window=60)
async def endpoint(fastapi_request):
    return "ok"


def call():
    result = asyncio.run(endpoint(fastapi_request=create_test_request()))
    return result if result == "ok" else result.status_code


def test_disabled_by_default(monkeypatch):
    monkeypatch.delenv("RATE_LIMIT_ENABLED", raising=False)
    with patch("app.infrastructure.cache.rate_limit.get_redis_client") as mock_redis:
        assert call() == "ok"
    mock_redis.assert_not_called()


def test_blocks_after_max_requests(monkeypatch):
    """Третий запрос в окне получает 429"""
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    redis = FakeRedis()
    with patch("app.infrastructure.cache.rate_limit.get_redis_client", return_value=redis):
        first, second = call(), call()
        third = asyncio.run(endpoint(fastapi_request=create_test_request()))

    assert first == "ok" and second == "ok"
    assert third.status_code == 429
    assert json.loads(third.body) == {"message": "Rate limit exceeded. Try again later."}
    assert redis.values == {"rate_limit:videos:127.0.0.1": 3}
    assert redis.ttls == {"rate_limit:videos:127.0.0.1": 60}


def test_failed_first_hit_does_not_leave_key_without_ttl(monkeypatch):
    """Сбой Redis на первом запросе не должен блокировать клиента навсегда"""
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    redis = FakeRedis(fail_executes=1)
    key = "rate_limit:videos:127.0.0.1"
    with patch("app.infrastructure.cache.rate_limit.get_redis_client", return_value=redis):
        results = [call() for _ in range(4)]
        assert redis.ttls == {key: 60}

        redis.expire_window(key)
        assert call() == "ok"

    assert results == ["ok", "ok", "ok", 429]
    assert redis.ttls == {key: 60}


def test_redis_outage_fails_open(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "1")
    with patch("app.infrastructure.cache.rate_limit.get_redis_client", return_value=FakeRedis(fail_executes=5)):
        assert call() == "ok"


def test_missing_request_is_a_programming_error(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")

    @rate_limit(scope="videos")
    async def broken():
        return "ok"

    with pytest.raises(RuntimeError):
        asyncio.run(broken())


def test_client_identifier_prefers_forwarded_for():
    assert client_identifier(create_test_request("10.1.1.1, 172.16.0.1")) == "10.1.1.1"
    assert client_identifier(create_test_request()) == "127.0.0.1"

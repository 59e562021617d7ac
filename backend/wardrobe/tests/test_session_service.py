"""
Unit tests for the bearer token store.

Redis is replaced by a Mock so every command can be asserted.
"""
import json
import uuid
from unittest.mock import Mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from wardrobe.services.session_service import SessionStore


@pytest.fixture
def mock_redis():
    redis_mock = Mock()
    redis_mock.setex.return_value = True
    redis_mock.get.return_value = None
    redis_mock.expire.return_value = True
    redis_mock.delete.return_value = 1
    redis_mock.ping.return_value = True
    return redis_mock


@pytest.fixture
def store(mock_redis):
    return SessionStore(redis_client=mock_redis)


@pytest.mark.unit
class TestTokenIssue:

    def test_tokens_are_64_hex_chars(self, store):
        token = store.generate_session_id()

        assert len(token) == 64
        int(token, 16)

    def test_tokens_are_unique(self, store):
        tokens = {store.generate_session_id() for _ in range(100)}
        assert len(tokens) == 100

    def test_create_session_writes_payload_with_expiry(self, store, mock_redis):
        user_id = uuid.uuid4()

        token = store.create_session(user_id, {"username": "tester"})

        key, expiry, raw = mock_redis.setex.call_args[0]
        payload = json.loads(raw)
        assert key == f"session:{token}"
        assert expiry == store.session_expiry
        assert payload["user_id"] == str(user_id)
        assert payload["username"] == "tester"
        assert "issued_at" in payload

    def test_user_data_cannot_override_user_id(self, store, mock_redis):
        user_id = uuid.uuid4()

        store.create_session(user_id, {"user_id": "someone-else"})

        payload = json.loads(mock_redis.setex.call_args[0][2])
        assert payload["user_id"] == str(user_id)


@pytest.mark.unit
class TestTokenLookup:

    def test_known_token_extends_expiry(self, store, mock_redis):
        user_id = str(uuid.uuid4())
        mock_redis.get.return_value = json.dumps({"user_id": user_id})

        payload = store.get_session("a" * 64)

        assert payload == {"user_id": user_id}
        mock_redis.get.assert_called_once_with(f"session:{'a' * 64}")
        mock_redis.expire.assert_called_once_with(f"session:{'a' * 64}", store.session_expiry)

    def test_unknown_token(self, store, mock_redis):
        assert store.get_session("nonexistent") is None
        mock_redis.expire.assert_not_called()

    def test_redis_failure_propagates(self, store, mock_redis):
        mock_redis.get.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(RedisConnectionError):
            store.get_session("a" * 64)


@pytest.mark.unit
class TestTokenRevocation:

    def test_delete_existing(self, store, mock_redis):
        assert store.delete_session("a" * 64) is True
        mock_redis.delete.assert_called_once_with(f"session:{'a' * 64}")

    def test_delete_missing(self, store, mock_redis):
        mock_redis.delete.return_value = 0

        assert store.delete_session("missing") is False


@pytest.mark.unit
class TestHealthCheck:

    def test_reachable(self, store):
        assert store.health_check() is True

    def test_unreachable(self, store, mock_redis):
        mock_redis.ping.side_effect = RedisConnectionError("Connection refused")

        assert store.health_check() is False

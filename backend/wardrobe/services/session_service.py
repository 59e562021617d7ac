"""
Bearer token store backed by Redis.

A token is a random 64-character hex string. Its Redis key holds a small
JSON document identifying the user it was issued to. Tokens expire after
``SESSION_EXPIRY_SECONDS`` of inactivity: every successful lookup pushes the
expiry forward.
"""
import json
import secrets
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from redis import Redis
from redis.exceptions import RedisError

from wardrobe.core.config import settings
from wardrobe.core.redis_client import get_redis_client

KEY_PREFIX = "session:"


class SessionStore:
    """Issue, resolve and revoke bearer tokens."""

    def __init__(self, redis_client: Optional[Redis] = None):
        self.redis_client: Redis = redis_client or get_redis_client()
        self.session_expiry = settings.SESSION_EXPIRY_SECONDS

    @staticmethod
    def _key(token: str) -> str:
        return f"{KEY_PREFIX}{token}"

    def generate_session_id(self) -> str:
        return secrets.token_hex(32)

    def create_session(self, user_id: UUID, user_data: Dict[str, Any]) -> str:
        """
        Issue a new token for ``user_id``.

        ``user_data`` is stored alongside the user id for logging and display;
        authorization only ever trusts ``user_id``.

        Returns:
            The bearer token
        """
        token = self.generate_session_id()
        payload = dict(user_data, user_id=str(user_id), issued_at=datetime.utcnow().isoformat())

        self.redis_client.setex(self._key(token), self.session_expiry, json.dumps(payload))
        return token

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        """
        Look up a token and extend its lifetime.

        Returns:
            The stored payload, or None for unknown or expired tokens

        Raises:
            RedisError: If Redis cannot be reached
        """
        key = self._key(session_id)
        raw = self.redis_client.get(key)
        if raw is None:
            return None

        self.redis_client.expire(key, self.session_expiry)
        return json.loads(raw)

    def delete_session(self, session_id: str) -> bool:
        """Revoke a token. Returns False if it was already gone."""
        return self.redis_client.delete(self._key(session_id)) > 0

    def health_check(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except RedisError:
            return False


_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Shared store using the process-wide Redis connection."""
    global _session_store

    if _session_store is None:
        _session_store = SessionStore()

    return _session_store

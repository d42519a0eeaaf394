"""Redis-backed LeaseStore.

``SET key value EX ttl`` makes Redis the expiry clock: once the key is
gone the reservation has left HELD, whoever asks.
"""

from __future__ import annotations

import json
import math
from datetime import timedelta

import redis

from storefront.domain.repository.lease_store import LeaseStore

KEY_PREFIX = "reservation:"


class RedisLeaseStore(LeaseStore):

    def __init__(self, client: redis.Redis, prefix: str = KEY_PREFIX) -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> RedisLeaseStore:
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def put(self, reservation_id: str, payload: dict, ttl: timedelta) -> None:
        self._client.set(
            self._key(reservation_id),
            json.dumps(payload),
            ex=max(1, math.ceil(ttl.total_seconds())),
        )

    def get(self, reservation_id: str) -> dict | None:
        raw = self._client.get(self._key(reservation_id))
        if raw is None:
            return None
        return json.loads(raw)

    def delete(self, reservation_id: str) -> bool:
        return self._client.delete(self._key(reservation_id)) == 1

    def _key(self, reservation_id: str) -> str:
        return f"{self._prefix}{reservation_id}"

"""
Durable key-value storage for cart snapshots.

The cart only needs string get/set under one key per session. Three backends:
- MemoryStorage: per-process dict (tests, ephemeral sessions)
- FileStorage: one JSON document per profile holding every key
- RedisStorage: Upstash Redis, shared across processes
"""
import json
import os
from pathlib import Path
from typing import Optional, Protocol, Union

from upstash_redis import Redis

from cubtton.logging import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    """What the cart manager needs from a durable store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class StorageKeys:
    """Key layout in the durable store."""

    CART = "cubtton_cart"  # cubtton_cart:{session_id}

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{StorageKeys.CART}:{session_id}"


class MemoryStorage:
    """In-process storage."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStorage:
    """
    JSON file acting as a profile-wide key-value store.

    Every write rewrites the whole document through a temporary file and an
    atomic rename, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"storage file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except (json.JSONDecodeError, ValueError) as e:
            # An unreadable document would otherwise block every future write
            logger.warning(f"Discarding unreadable storage file {self.path}: {e}")
            data = {}
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self.path)


class RedisStorage:
    """Upstash Redis storage (sync REST client)."""

    def __init__(self, redis: Redis, ttl_seconds: Optional[int] = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> Optional[str]:
        value = self.redis.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        if self.ttl_seconds:
            self.redis.set(key, value, ex=self.ttl_seconds)
        else:
            self.redis.set(key, value)

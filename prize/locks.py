from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Optional

import redis
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, connection

logger = logging.getLogger(__name__)


class PrizeLockError(Exception):
    """Raised when the draw lock cannot be acquired or released."""


_LOCK_NAME = "prize:draw"
_BUSY_MESSAGE = "Draw system is busy. Please try again later."

_local_lock = threading.Lock()


@contextmanager
def _local_draw_lock(timeout: float):
    if not _local_lock.acquire(timeout=timeout):
        raise PrizeLockError(_BUSY_MESSAGE)
    try:
        yield
    finally:
        _local_lock.release()


@contextmanager
def _mysql_draw_lock(timeout: float):
    """Acquire a MySQL named lock to serialize draw operations."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT GET_LOCK(%s, %s)", [_LOCK_NAME, timeout])
            row = cursor.fetchone()
    except DatabaseError as exc:
        raise PrizeLockError(f"Failed to acquire draw lock: {exc}") from exc

    if not row or row[0] != 1:
        raise PrizeLockError(_BUSY_MESSAGE)

    try:
        yield
    finally:
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT RELEASE_LOCK(%s)", [_LOCK_NAME])
        except DatabaseError as exc:
            # Lock is dropped server-side when the session ends; the draw already committed.
            logger.warning("Failed to release draw lock: %s", exc)


def _redis_client() -> redis.Redis:
    redis_url = getattr(settings, "REDIS_URL", None)
    if not redis_url:
        raise ImproperlyConfigured("REDIS_URL is not configured in settings.")
    return redis.Redis.from_url(redis_url, decode_responses=True)


@contextmanager
def _redis_draw_lock(timeout: float):
    client = _redis_client()
    lock = client.lock(_LOCK_NAME, timeout=timeout, blocking_timeout=timeout)
    try:
        acquired = lock.acquire(blocking=True)
    except redis.RedisError as exc:
        raise PrizeLockError(f"Failed to acquire draw lock: {exc}") from exc
    if not acquired:
        raise PrizeLockError(_BUSY_MESSAGE)
    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockError:
            logger.warning("Draw lock expired before it was released.")
        except redis.RedisError as exc:
            # Lock expires after its timeout; the draw already committed.
            logger.warning("Failed to release draw lock: %s", exc)


_BACKENDS = {
    "local": _local_draw_lock,
    "mysql": _mysql_draw_lock,
    "redis": _redis_draw_lock,
}


@contextmanager
def prize_draw_lock(timeout: Optional[float] = None):
    """Serialize draws using the backend named by PRIZE_DRAW_LOCK_BACKEND.

    ``local`` only covers threads of one process; multi-process deployments
    need ``mysql`` or ``redis``.
    """

    backend = getattr(settings, "PRIZE_DRAW_LOCK_BACKEND", "local")
    try:
        factory = _BACKENDS[backend]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown PRIZE_DRAW_LOCK_BACKEND {backend!r}; expected one of {sorted(_BACKENDS)}."
        ) from None

    if timeout is None:
        timeout = getattr(settings, "PRIZE_DRAW_LOCK_TIMEOUT", 5)

    with factory(timeout):
        yield

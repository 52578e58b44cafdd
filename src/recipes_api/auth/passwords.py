"""Password hashing with bcrypt.

bcrypt is deliberately slow, so hashing and checking run in a worker thread
to keep the event loop responsive.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt
from starlette.concurrency import run_in_threadpool


# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


@lru_cache(maxsize=1)
def _dummy_hash() -> bytes:
    return bcrypt.hashpw(b"no-such-account", bcrypt.gensalt())


def hash_password_sync(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password_sync(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored hash.

    A missing hash still costs one bcrypt round so that unknown accounts
    cannot be told apart by response time.
    """
    if password_hash is None:
        bcrypt.checkpw(_encode(password), _dummy_hash())
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False


async def hash_password(password: str) -> str:
    return await run_in_threadpool(hash_password_sync, password)


async def verify_password(password: str, password_hash: str | None) -> bool:
    return await run_in_threadpool(verify_password_sync, password, password_hash)

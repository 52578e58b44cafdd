"""Server-side session state.

A session is known to the browser only by its random cookie value; the
store keys records by a hash of that value, so a leaked Redis dump cannot
be replayed as cookies.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import orjson


COOKIE_VALUE_BYTES = 64

_MISSING = object()


def session_id_from_cookie_value(cookie_value: str) -> str:
    """Derive the storage id of the session a cookie value refers to."""
    digest = hashlib.sha256(cookie_value.encode()).digest()
    return base64.b64encode(digest).decode()


def _new_cookie_value() -> str:
    return base64.b64encode(secrets.token_bytes(COOKIE_VALUE_BYTES)).decode()


class Session:
    """Mutable session data plus lifecycle flags read by the middleware.

    Only freshly created (or rotated) sessions carry a ``cookie_value``;
    sessions loaded from the store know just their id.
    """

    def __init__(
        self,
        *,
        session_id: str | None = None,
        data: dict[str, Any] | None = None,
        expiry: datetime | None = None,
    ) -> None:
        if session_id is None:
            self.cookie_value: str | None = _new_cookie_value()
            self.id = session_id_from_cookie_value(self.cookie_value)
        else:
            self.cookie_value = None
            self.id = session_id
        self._data: dict[str, Any] = dict(data or {})
        self.expiry = expiry
        self.data_changed = False
        self.destroyed = False
        self.should_regenerate = False

    def __repr__(self) -> str:
        return f"Session(id={self.id[:8]}..., keys={sorted(self._data)})"

    # -- data -----------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def insert(self, key: str, value: Any) -> None:
        """Set a value; the session is only marked changed if it differs."""
        if self._data.get(key, _MISSING) != value:
            self._data[key] = value
            self.data_changed = True

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self.data_changed = True

    def clear(self) -> None:
        if self._data:
            self._data.clear()
            self.data_changed = True

    def __contains__(self, key: object) -> bool:
        return key in self._data

    @property
    def data(self) -> dict[str, Any]:
        """A copy of the session data."""
        return dict(self._data)

    # -- lifecycle ------------------------------------------------------------

    def destroy(self) -> None:
        """Remove the session from the store and the browser after this request."""
        self.destroyed = True

    def regenerate(self) -> None:
        """Issue a new cookie value for the same data after this request."""
        self.should_regenerate = True

    def rotate(self) -> None:
        """Switch to a fresh cookie value and id, keeping the data."""
        self.cookie_value = _new_cookie_value()
        self.id = session_id_from_cookie_value(self.cookie_value)
        self.should_regenerate = False

    def expire_in(self, seconds: int) -> None:
        self.expiry = datetime.now(UTC) + timedelta(seconds=seconds)

    @property
    def expires_in(self) -> int | None:
        """Whole seconds until expiry, or None for sessions without one."""
        if self.expiry is None:
            return None
        return max(int((self.expiry - datetime.now(UTC)).total_seconds()), 0)

    @property
    def is_expired(self) -> bool:
        return self.expiry is not None and self.expiry <= datetime.now(UTC)

    def validate(self) -> Session | None:
        """Return the session, or None if it has expired."""
        return None if self.is_expired else self

    def take_cookie_value(self) -> str | None:
        """Hand out the cookie value once; later calls return None."""
        value, self.cookie_value = self.cookie_value, None
        return value

    # -- serialization --------------------------------------------------------

    def to_json(self) -> bytes:
        return orjson.dumps(
            {
                "id": self.id,
                "expiry": self.expiry.isoformat() if self.expiry else None,
                "data": self._data,
            }
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> Session:
        payload = orjson.loads(raw)
        expiry = payload.get("expiry")
        return cls(
            session_id=payload["id"],
            data=payload.get("data") or {},
            expiry=datetime.fromisoformat(expiry) if expiry else None,
        )


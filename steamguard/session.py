"""
The authenticated session record and the wrapper that keeps it secret.

A :class:`Session` is the sole source of truth for who the client is logged
in as.  It is only ever handled through a :class:`Secret`, which keeps the
serialized record in a private buffer that is overwritten with zeros when
the secret is dropped, replaced or explicitly wiped.  Reading the record
requires calling :meth:`Secret.expose_secret`, so every access is visible
in review.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import MalformedSession

STEAM_ID_MAX = 2 ** 64 - 1

# Persisted field names, shared with the authenticator manifest format
_FIELD_KEYS = {
    "session_id":         "SessionID",
    "steam_login":        "SteamLogin",
    "steam_login_secure": "SteamLoginSecure",
    "web_cookie":         "WebCookie",
    "token":              "OAuthToken",
    "steam_id":           "SteamID",
}


def parse_steam_id(value: Any, operation: str = "parse_steam_id") -> int:
    """Parse a 64-bit unsigned account id from an int or a decimal string."""
    if isinstance(value, bool):
        raise MalformedSession(operation, f"steam id is not a number: {value!r}")
    if isinstance(value, int):
        steam_id = value
    else:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise MalformedSession(operation, f"steam id is not a number: {value!r}")
        steam_id = int(text)
    if not 0 <= steam_id <= STEAM_ID_MAX:
        raise MalformedSession(operation, f"steam id out of range: {value!r}")
    return steam_id


@dataclass(frozen=True)
class Session:
    """Secret session material produced by a successful login."""

    session_id: str = field(repr=False)
    steam_login: str = field(repr=False)
    steam_login_secure: str = field(repr=False)
    web_cookie: Optional[str] = field(repr=False)
    token: str = field(repr=False)
    steam_id: int = field(repr=False)

    def serialize(self) -> dict[str, Any]:
        """Return the persisted form.  The result is as secret as the session."""
        return {key: getattr(self, attr) for attr, key in _FIELD_KEYS.items()}

    @classmethod
    def deserialize(cls, data: dict[str, Any]) -> "Session":
        """
        Rebuild a session from its persisted form.

        Raises MalformedSession when a required key is missing, a string
        field has the wrong type, or SteamID is not an unsigned integer.
        """
        op = "Session.deserialize"
        if not isinstance(data, dict):
            raise MalformedSession(op, f"expected an object, got {type(data).__name__}")
        values: dict[str, Any] = {}
        for attr, key in _FIELD_KEYS.items():
            if key not in data:
                if attr == "web_cookie":
                    values[attr] = None
                    continue
                raise MalformedSession(op, f"missing field {key}")
            values[attr] = data[key]

        for attr in ("session_id", "steam_login", "steam_login_secure", "token"):
            if not isinstance(values[attr], str):
                raise MalformedSession(op, f"field {_FIELD_KEYS[attr]} must be a string")
        if values["web_cookie"] is not None and not isinstance(values["web_cookie"], str):
            raise MalformedSession(op, "field WebCookie must be a string or null")
        values["steam_id"] = parse_steam_id(values["steam_id"], op)
        return cls(**values)


class Secret:
    """
    Holds a :class:`Session` without exposing it by accident.

    ``repr`` and ``str`` never show field values, pickling is refused, and
    equality is identity.  Clones own an independent buffer, so each copy
    is wiped on its own.
    """

    __slots__ = ("_buf",)

    def __init__(self, session: Session):
        self._buf = bytearray(json.dumps(session.serialize()).encode("utf-8"))

    def expose_secret(self) -> Session:
        if not self._buf:
            raise ValueError("secret has been zeroized")
        return Session.deserialize(json.loads(self._buf))

    @property
    def is_zeroized(self) -> bool:
        return not self._buf

    def zeroize(self) -> None:
        """Overwrite the backing buffer with zeros and empty it."""
        buf = getattr(self, "_buf", None)
        if buf is None:
            return
        buf[:] = bytes(len(buf))
        del buf[:]

    def clone(self) -> "Secret":
        twin = Secret.__new__(Secret)
        twin._buf = bytearray(self._buf)
        return twin

    def __copy__(self) -> "Secret":
        return self.clone()

    def __deepcopy__(self, memo: dict) -> "Secret":
        return self.clone()

    def to_json(self) -> str:
        """The one persistence path.  Callers must store the result as a secret."""
        return json.dumps(self.expose_secret().serialize())

    @classmethod
    def from_json(cls, text: str) -> "Secret":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise MalformedSession("Secret.from_json", f"invalid JSON: {exc}") from exc
        return cls(Session.deserialize(data))

    def __reduce_ex__(self, protocol):
        raise TypeError("refusing to pickle a Secret; use to_json() deliberately")

    def __repr__(self) -> str:
        return "Secret([REDACTED Session])"

    __str__ = __repr__

    def __del__(self):
        self.zeroize()

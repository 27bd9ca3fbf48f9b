"""
Typed response bodies for the Steam web and mobile endpoints.

Steam sends most 64-bit numbers as JSON strings; ``from_dict`` parses them
to ``int``.  Unknown keys are ignored.  A missing required key raises
``KeyError`` and a bad value ``ValueError``/``TypeError``; the client turns
either into a :class:`~steamguard.errors.DecodeError`.
"""

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional


def _int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)


def _bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")
    return value


def _str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else _str(value)


def unwrap_response(data: Any) -> dict[str, Any]:
    """Return the inner object of a ``{"response": {...}}`` envelope."""
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    inner = data["response"]
    if not isinstance(inner, dict):
        raise TypeError("'response' is not an object")
    return inner


@dataclass
class QueryTimeResponse:
    """Server clock and the provider's advice on how to keep in sync."""

    server_time: int
    skew_tolerance_seconds: int
    large_time_jink: int
    probe_frequency_seconds: int
    adjusted_time_probe_frequency_seconds: int
    hint_probe_frequency_seconds: int
    sync_timeout: int
    try_again_seconds: int
    max_attempts: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QueryTimeResponse":
        return cls(**{name: _int(data[name]) for name in cls.__dataclass_fields__})


@dataclass
class OAuthData:
    """Inline OAuth payload of a completed login."""

    oauth_token: str = field(repr=False)
    steamid: str
    wgtoken: str = field(repr=False)
    wgtoken_secure: str = field(repr=False)
    webcookie: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OAuthData":
        return cls(
            oauth_token=_str(data["oauth_token"]),
            steamid=str(data["steamid"]),
            wgtoken=_str(data["wgtoken"]),
            wgtoken_secure=_str(data["wgtoken_secure"]),
            webcookie=_opt_str(data.get("webcookie")),
        )


@dataclass
class LoginTransferParameters:
    """Parameters to relay to every transfer URL."""

    steamid: str
    token_secure: str = field(repr=False)
    auth: str = field(repr=False)
    remember_login: bool = False
    webcookie: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LoginTransferParameters":
        return cls(
            steamid=str(data["steamid"]),
            token_secure=_str(data["token_secure"]),
            auth=_str(data["auth"]),
            remember_login=bool(data.get("remember_login", False)),
            webcookie=_opt_str(data.get("webcookie")),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "steamid": self.steamid,
            "token_secure": self.token_secure,
            "auth": self.auth,
            "remember_login": self.remember_login,
        }
        if self.webcookie is not None:
            body["webcookie"] = self.webcookie
        return body


@dataclass
class LoginResponse:
    """Body of ``/login/dologin``."""

    success: bool = False
    login_complete: bool = False
    captcha_needed: bool = False
    captcha_gid: str = ""
    emailsteamid: int = 0
    emailauth_needed: bool = False
    requires_twofactor: bool = False
    message: str = ""
    transfer_urls: Optional[List[str]] = None
    transfer_parameters: Optional[LoginTransferParameters] = None
    oauth: Optional[OAuthData] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LoginResponse":
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")

        oauth = data.get("oauth")
        if isinstance(oauth, str):
            # The live endpoint sends this object JSON-encoded inside a string
            oauth = json.loads(oauth) if oauth else None

        urls = data.get("transfer_urls")
        if urls is not None:
            if not isinstance(urls, list):
                raise TypeError("transfer_urls is not a list")
            urls = [_str(u) for u in urls]

        params = data.get("transfer_parameters")
        captcha_gid = data.get("captcha_gid", "")
        return cls(
            success=bool(data.get("success", False)),
            login_complete=bool(data.get("login_complete", False)),
            captcha_needed=bool(data.get("captcha_needed", False)),
            captcha_gid="" if captcha_gid is None else str(captcha_gid),
            emailsteamid=_int(data.get("emailsteamid") or 0),
            emailauth_needed=bool(data.get("emailauth_needed", False)),
            requires_twofactor=bool(data.get("requires_twofactor", False)),
            message=str(data.get("message") or ""),
            transfer_urls=urls,
            transfer_parameters=None if params is None else LoginTransferParameters.from_dict(params),
            oauth=None if oauth is None else OAuthData.from_dict(oauth),
        )


@dataclass
class PhoneValidateResponse:
    success: bool
    number: str
    is_valid: bool
    is_voip: bool
    is_fixed: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PhoneValidateResponse":
        return cls(
            success=_bool(data["success"]),
            number=_str(data["number"]),
            is_valid=_bool(data["is_valid"]),
            is_voip=_bool(data["is_voip"]),
            is_fixed=_bool(data["is_fixed"]),
        )


@dataclass
class AddAuthenticatorResponse:
    """
    Result of starting authenticator enrollment.

    ``status`` 1 means success; the secrets must be persisted by the caller
    before finalizing, since the provider never returns them again.
    """

    status: int
    shared_secret: str = field(default="", repr=False)
    serial_number: str = ""
    revocation_code: str = field(default="", repr=False)
    uri: str = field(default="", repr=False)
    server_time: int = 0
    account_name: str = ""
    token_gid: str = ""
    identity_secret: str = field(default="", repr=False)
    secret_1: str = field(default="", repr=False)
    phone_number_hint: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AddAuthenticatorResponse":
        return cls(
            status=_int(data["status"]),
            shared_secret=_str(data.get("shared_secret", "")),
            serial_number=str(data.get("serial_number", "")),
            revocation_code=_str(data.get("revocation_code", "")),
            uri=_str(data.get("uri", "")),
            server_time=_int(data.get("server_time", 0)),
            account_name=_str(data.get("account_name", "")),
            token_gid=_str(data.get("token_gid", "")),
            identity_secret=_str(data.get("identity_secret", "")),
            secret_1=_str(data.get("secret_1", "")),
            phone_number_hint=_opt_str(data.get("phone_number_hint")),
        )


@dataclass
class FinalizeAddAuthenticatorResponse:
    status: int
    server_time: int
    want_more: bool
    success: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FinalizeAddAuthenticatorResponse":
        return cls(
            status=_int(data["status"]),
            server_time=_int(data["server_time"]),
            want_more=_bool(data["want_more"]),
            success=_bool(data["success"]),
        )


@dataclass
class RemoveAuthenticatorResponse:
    success: bool
    revocation_attempts_remaining: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoveAuthenticatorResponse":
        remaining = data.get("revocation_attempts_remaining")
        return cls(
            success=_bool(data["success"]),
            revocation_attempts_remaining=None if remaining is None else _int(remaining),
        )

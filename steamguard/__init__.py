"""
steamguard
==========
Client for the Steam mobile authenticator API: login, session handling,
and the account operations needed to enroll or remove a Steam Guard
mobile authenticator.

Package structure
-----------------
steamguard/
├── __init__.py        – package init and public API
├── config.py          – endpoint constants and ClientConfig
├── logging_setup.py   – package logger, TRACE level, redaction, setup_logging()
├── errors.py          – exception hierarchy
├── session.py         – Session record and the Secret wrapper
├── client.py          – SteamApiClient (request facade, login, operations)
├── auth/
│   └── login.py       – login protocol: form fields, outcome variants,
│                         session materialization
├── network/
│   ├── client.py      – requests.Session factory, raw Set-Cookie access
│   └── cookies.py     – CookieStore scoped to steamcommunity.com
└── api/
    ├── responses.py   – typed response bodies
    └── ajax.py        – ordered probing rules for phone ajax results

Quick start
-----------
    from steamguard import SteamApiClient, NoCredentialsReceived

    client = SteamApiClient()
    try:
        client.login("alice", encrypted_password, rsa_timestamp=ts,
                     twofactor_code=code)
    except NoCredentialsReceived as exc:
        if exc.login_response.captcha_needed:
            ...  # ask for the captcha, then log in again
    print(client.has_phone())

The password must already be RSA-encrypted with the key Steam hands out
for the account; this package does not perform that step.
"""

from .client import SteamApiClient, get_server_time
from .config import ClientConfig, DEFAULT_CONFIG
from .errors import (
    DecodeError,
    LoginProtocolError,
    MalformedSession,
    NoCredentialsReceived,
    NotLoggedIn,
    SteamApiError,
    TransportError,
    UnsupportedOperation,
)
from .logging_setup import TRACE, RedactingFilter, redact, setup_logging
from .session import Secret, Session

__all__ = [
    "SteamApiClient",
    "get_server_time",
    "ClientConfig",
    "DEFAULT_CONFIG",
    "DecodeError",
    "LoginProtocolError",
    "MalformedSession",
    "NoCredentialsReceived",
    "NotLoggedIn",
    "SteamApiError",
    "TransportError",
    "UnsupportedOperation",
    "TRACE",
    "RedactingFilter",
    "redact",
    "setup_logging",
    "Secret",
    "Session",
]

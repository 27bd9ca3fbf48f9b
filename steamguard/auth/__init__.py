"""Authentication submodule – login protocol steps and session materialization."""

from steamguard.auth.login import (
    LoginOutcome,
    NoCredentials,
    OAuthOutcome,
    TransferOutcome,
    build_login_params,
    build_session_record,
    classify_login,
    classify_transfer,
    login_cookie,
    oauth_from_transfer,
)

__all__ = [
    "LoginOutcome",
    "NoCredentials",
    "OAuthOutcome",
    "TransferOutcome",
    "build_login_params",
    "build_session_record",
    "classify_login",
    "classify_transfer",
    "login_cookie",
    "oauth_from_transfer",
]

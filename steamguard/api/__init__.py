"""Response types and result probing for Steam endpoints."""

from steamguard.api.ajax import AJAX_RULES, BoolFieldRule, probe_ajax_result
from steamguard.api.responses import (
    AddAuthenticatorResponse,
    FinalizeAddAuthenticatorResponse,
    LoginResponse,
    LoginTransferParameters,
    OAuthData,
    PhoneValidateResponse,
    QueryTimeResponse,
    RemoveAuthenticatorResponse,
    unwrap_response,
)

__all__ = [
    "AJAX_RULES",
    "BoolFieldRule",
    "probe_ajax_result",
    "AddAuthenticatorResponse",
    "FinalizeAddAuthenticatorResponse",
    "LoginResponse",
    "LoginTransferParameters",
    "OAuthData",
    "PhoneValidateResponse",
    "QueryTimeResponse",
    "RemoveAuthenticatorResponse",
    "unwrap_response",
]

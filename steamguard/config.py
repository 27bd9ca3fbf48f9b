"""Configuration constants for the Steam mobile API client."""

import os
from dataclasses import dataclass, field

COMMUNITY_URL = "https://steamcommunity.com"
STORE_URL     = "https://store.steampowered.com"
API_URL       = "https://api.steampowered.com"

# All cookies are stored and sent against this one authority
COOKIE_AUTHORITY = "steamcommunity.com"

USER_AGENT = (
    "Mozilla/5.0 (Linux; U; Android 4.1.1; en-us; Google Nexus 4 - 4.1.1 - "
    "API 16 - 768x1280 Build/JRO03S) AppleWebKit/534.30 (KHTML, like Gecko) "
    "Version/4.0 Mobile Safari/534.30"
)
REQUESTED_WITH = "com.valvesoftware.android.steam.community"

# name -> value, forced onto every outgoing request
IDENTITY_COOKIES: dict[str, str] = {
    "mobileClientVersion": "0 (2.1.3)",
    "mobileClient":        "android",
    "Steam_Language":      "english",
}
SESSION_COOKIE = "sessionid"

OAUTH_CLIENT_ID = "DE45CD61"
OAUTH_SCOPE     = "read_profile write_profile read_client write_client"

# steamLogin / steamLoginSecure are "<steamid>%7C%7C<wgtoken>"
LOGIN_COOKIE_SEPARATOR = "%7C%7C"

LOGIN_PATH            = "/login/dologin"
LOGIN_PAGE_PATH       = "/login"
PHONEAJAX_PATH        = "/steamguard/phoneajax"
PHONE_ADD_AJAXOP_PATH = "/phone/add_ajaxop"
PHONE_VALIDATE_PATH   = "/phone/validate"
QUERY_TIME_PATH       = "/ITwoFactorService/QueryTime/v0001"
ADD_AUTH_PATH         = "/ITwoFactorService/AddAuthenticator/v0001"
FINALIZE_AUTH_PATH    = "/ITwoFactorService/FinalizeAddAuthenticator/v0001"
REMOVE_AUTH_PATH      = "/ITwoFactorService/RemoveAuthenticator/v0001"


@dataclass(frozen=True)
class ClientConfig:
    """Base addresses and client-identity constants, resolved once."""

    community_url: str = COMMUNITY_URL
    store_url: str = STORE_URL
    api_url: str = API_URL
    cookie_authority: str = COOKIE_AUTHORITY
    user_agent: str = USER_AGENT
    requested_with: str = REQUESTED_WITH
    identity_cookies: dict[str, str] = field(default_factory=lambda: dict(IDENTITY_COOKIES))
    oauth_client_id: str = OAUTH_CLIENT_ID
    oauth_scope: str = OAUTH_SCOPE

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Build a config, letting STEAMGUARD_COMMUNITY_URL, STEAMGUARD_STORE_URL
        and STEAMGUARD_API_URL override the base addresses.
        """
        return cls(
            community_url=os.environ.get("STEAMGUARD_COMMUNITY_URL", COMMUNITY_URL).rstrip("/"),
            store_url=os.environ.get("STEAMGUARD_STORE_URL", STORE_URL).rstrip("/"),
            api_url=os.environ.get("STEAMGUARD_API_URL", API_URL).rstrip("/"),
        )

    @property
    def login_url(self) -> str:
        return self.community_url + LOGIN_PATH

    @property
    def login_page_url(self) -> str:
        return self.community_url + LOGIN_PAGE_PATH

    @property
    def phoneajax_url(self) -> str:
        return self.community_url + PHONEAJAX_PATH

    @property
    def phone_add_ajaxop_url(self) -> str:
        return self.store_url + PHONE_ADD_AJAXOP_PATH

    @property
    def phone_validate_url(self) -> str:
        return self.store_url + PHONE_VALIDATE_PATH

    @property
    def query_time_url(self) -> str:
        return self.api_url + QUERY_TIME_PATH

    @property
    def add_authenticator_url(self) -> str:
        return self.api_url + ADD_AUTH_PATH

    @property
    def finalize_authenticator_url(self) -> str:
        return self.api_url + FINALIZE_AUTH_PATH

    @property
    def remove_authenticator_url(self) -> str:
        return self.api_url + REMOVE_AUTH_PATH


DEFAULT_CONFIG = ClientConfig()

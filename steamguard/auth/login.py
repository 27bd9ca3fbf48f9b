"""
The Steam mobile login protocol, minus the network calls.

``/login/dologin`` ends in one of three ways:

* an inline OAuth payload (``OAuthOutcome``),
* transfer URLs plus transfer parameters that must be relayed before the
  session is usable (``TransferOutcome``),
* neither (``NoCredentials``): the server wants a captcha, an email code or
  a 2FA code first.

Any other combination is a :class:`~steamguard.errors.LoginProtocolError`.
"""

import time
from dataclasses import dataclass
from typing import List, Union

from ..api.responses import LoginResponse, LoginTransferParameters, OAuthData
from ..config import DEFAULT_CONFIG, LOGIN_COOKIE_SEPARATOR, ClientConfig
from ..errors import LoginProtocolError
from ..session import Session, parse_steam_id


@dataclass
class OAuthOutcome:
    oauth: OAuthData


@dataclass
class TransferOutcome:
    urls: List[str]
    parameters: LoginTransferParameters


@dataclass
class NoCredentials:
    pass


LoginOutcome = Union[OAuthOutcome, TransferOutcome, NoCredentials]


def build_login_params(
    username: str,
    encrypted_password: str,
    twofactor_code: str = "",
    email_code: str = "",
    captcha_gid: str = "",
    captcha_text: str = "",
    rsa_timestamp: str = "",
    config: ClientConfig = DEFAULT_CONFIG,
) -> dict[str, str]:
    """Form fields for ``/login/dologin``.  The password arrives pre-encrypted."""
    return {
        "donotcache": str(int(time.time()) * 1000),
        "username": username,
        "password": encrypted_password,
        "twofactorcode": twofactor_code,
        "emailauth": email_code,
        "captchagid": captcha_gid,
        "captcha_text": captcha_text,
        "rsatimestamp": rsa_timestamp,
        "remember_login": "true",
        "oauth_client_id": config.oauth_client_id,
        "oauth_scope": config.oauth_scope,
    }


def classify_transfer(resp: LoginResponse, operation: str = "transfer_login") -> LoginOutcome:
    """Look only at the transfer fields of a login response."""
    has_urls = resp.transfer_urls is not None
    has_params = resp.transfer_parameters is not None
    if has_urls and has_params:
        return TransferOutcome(urls=list(resp.transfer_urls), parameters=resp.transfer_parameters)
    if has_urls:
        raise LoginProtocolError(operation, "did not receive transfer_parameters")
    if has_params:
        raise LoginProtocolError(operation, "did not receive transfer_urls")
    return NoCredentials()


def classify_login(resp: LoginResponse, operation: str = "login") -> LoginOutcome:
    """An inline OAuth payload wins; otherwise the transfer fields decide."""
    if resp.oauth is not None:
        return OAuthOutcome(oauth=resp.oauth)
    return classify_transfer(resp, operation)


def oauth_from_transfer(params: LoginTransferParameters) -> OAuthData:
    """
    Synthesize OAuth data from relayed transfer parameters.

    The transfer only carries ``token_secure``; it is used for both the
    plain and the secure login cookie.
    """
    return OAuthData(
        oauth_token=params.auth,
        steamid=params.steamid,
        wgtoken=params.token_secure,
        wgtoken_secure=params.token_secure,
        webcookie=params.webcookie,
    )


def login_cookie(steamid: str, wgtoken: str) -> str:
    """The steamid is used exactly as the provider sent it."""
    return f"{steamid}{LOGIN_COOKIE_SEPARATOR}{wgtoken}"


def build_session_record(oauth: OAuthData, session_id: str, operation: str = "login") -> Session:
    """Materialize a :class:`Session`; raises MalformedSession on a bad steamid."""
    steam_id = parse_steam_id(oauth.steamid, operation)
    return Session(
        session_id=session_id,
        steam_login=login_cookie(oauth.steamid, oauth.wgtoken),
        steam_login_secure=login_cookie(oauth.steamid, oauth.wgtoken_secure),
        web_cookie=oauth.webcookie,
        token=oauth.oauth_token,
        steam_id=steam_id,
    )

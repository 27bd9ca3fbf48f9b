"""
Raw access to the Steam mobile API.

:class:`SteamApiClient` covers ``ITwoFactorService`` on the web API plus the
mobile-app endpoints on steamcommunity.com and store.steampowered.com.  It
owns one logical session: a :class:`~steamguard.session.Secret` produced by
:meth:`SteamApiClient.login` (or handed in by a caller who persisted one),
and the :class:`~steamguard.network.cookies.CookieStore` derived from it.

Calls are synchronous and never retried here.  A client instance is not
safe to share between threads.
"""

import json
from typing import Any, Callable, Optional, TypeVar

import requests

from .api.ajax import probe_ajax_result
from .api.responses import (
    AddAuthenticatorResponse,
    FinalizeAddAuthenticatorResponse,
    LoginResponse,
    OAuthData,
    PhoneValidateResponse,
    QueryTimeResponse,
    RemoveAuthenticatorResponse,
    unwrap_response,
)
from .auth.login import (
    NoCredentials,
    TransferOutcome,
    build_login_params,
    build_session_record,
    classify_login,
    classify_transfer,
    oauth_from_transfer,
)
from .config import DEFAULT_CONFIG, SESSION_COOKIE, ClientConfig
from .errors import (
    DecodeError,
    NoCredentialsReceived,
    NotLoggedIn,
    TransportError,
    UnsupportedOperation,
)
from .logging_setup import TRACE, log
from .network.client import build_session, set_cookie_headers
from .network.cookies import CookieStore
from .session import Secret, Session

T = TypeVar("T")


class SteamApiClient:
    def __init__(
        self,
        session: Optional[Secret] = None,
        config: Optional[ClientConfig] = None,
        http: Optional[requests.Session] = None,
    ):
        self.config = config if config is not None else DEFAULT_CONFIG
        self.http = http if http is not None else build_session()
        self.cookies = CookieStore(self.config.cookie_authority, self.config.identity_cookies)
        self._session = session

    # ------------------------------------------------------------------
    # Session ownership
    # ------------------------------------------------------------------

    @property
    def session(self) -> Optional[Secret]:
        return self._session

    @property
    def is_logged_in(self) -> bool:
        return self._session is not None

    def set_session(self, session: Optional[Secret]) -> None:
        """Install a new session; the previous one is wiped."""
        old, self._session = self._session, session
        if old is not None and old is not session:
            old.zeroize()

    def clear_session(self) -> None:
        self.set_session(None)

    def close(self) -> None:
        self.clear_session()
        self.http.close()

    def __enter__(self) -> "SteamApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_session(self, operation: str) -> Session:
        if self._session is None:
            raise NotLoggedIn(operation)
        return self._session.expose_secret()

    # ------------------------------------------------------------------
    # Request facade
    # ------------------------------------------------------------------

    def request(self, method: str, url: str, force_session: bool = True) -> requests.Request:
        """
        Return a request pre-populated with the mobile client headers and the
        Cookie header.  Identity cookies are forced first, and so is the
        installed session's ``sessionid`` unless ``force_session`` is off.
        """
        log.log(TRACE, "making request: %s %s", method, url)
        self.cookies.apply_identity(self._session if force_session else None)
        return requests.Request(
            method,
            url,
            headers={
                "User-Agent": self.config.user_agent,
                "X-Requested-With": self.config.requested_with,
                "Cookie": self.cookies.header_value(),
            },
        )

    def get(self, url: str) -> requests.Request:
        return self.request("GET", url)

    def post(self, url: str) -> requests.Request:
        return self.request("POST", url)

    def send(self, req: requests.Request, operation: str) -> requests.Response:
        """Send a request built by :meth:`request` and merge its cookies."""
        try:
            resp = self.http.send(self.http.prepare_request(req))
        except requests.RequestException as exc:
            log.error("%s: request to %s failed: %s", operation, req.url, exc)
            raise TransportError(operation, exc) from exc
        log.debug("%s: HTTP %s", operation, resp.status_code)
        self.save_cookies_from_response(resp)
        return resp

    def save_cookies_from_response(self, resp: requests.Response) -> None:
        stored = self.cookies.merge_set_cookie(set_cookie_headers(resp))
        if stored:
            log.debug("Stored %d cookie(s); now holding: %s", stored, self.cookies.names())

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _decode_json(self, resp: requests.Response, operation: str, secret_body: bool = False) -> Any:
        text = resp.text
        if not secret_body:
            log.log(TRACE, "raw %s response: %s", operation, text)
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError(
                operation, f"invalid JSON: {exc}", text, resp.status_code, secret_body=secret_body
            ) from exc

    def _parse(
        self,
        resp: requests.Response,
        operation: str,
        parser: Callable[[Any], T],
        secret_body: bool = False,
    ) -> T:
        data = self._decode_json(resp, operation, secret_body)
        try:
            return parser(data)
        except KeyError as exc:
            reason = f"missing field {exc}"
        except (TypeError, ValueError) as exc:
            reason = str(exc)
        raise DecodeError(operation, reason, resp.text, resp.status_code, secret_body=secret_body)

    # ------------------------------------------------------------------
    # Unauthenticated
    # ------------------------------------------------------------------

    def get_server_time(self) -> QueryTimeResponse:
        """
        Query Steam's clock.

        Endpoint: POST /ITwoFactorService/QueryTime/v0001
        """
        op = "get_server_time"
        req = self.post(self.config.query_time_url)
        req.data = {"steamid": "0"}
        resp = self.send(req, op)
        return self._parse(resp, op, lambda d: QueryTimeResponse.from_dict(unwrap_response(d)))

    def update_session(self) -> None:
        """Visit the community login page to pick up a fresh ``sessionid`` cookie."""
        op = "update_session"
        req = self.get(self.config.login_page_url)
        req.params = {
            "oauth_client_id": self.config.oauth_client_id,
            "oauth_scope": self.config.oauth_scope,
        }
        self.send(req, op)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def login(
        self,
        username: str,
        encrypted_password: str,
        twofactor_code: str = "",
        email_code: str = "",
        captcha_gid: str = "",
        captcha_text: str = "",
        rsa_timestamp: str = "",
    ) -> LoginResponse:
        """
        Log in and install a new session.

        Endpoint: POST /login/dologin, then one POST per transfer URL when
        the response asks for a transfer.

        Raises NoCredentialsReceived when the server wants more input
        (captcha, email code, 2FA code); the exception carries the
        LoginResponse.  The current session is left untouched on failure.
        """
        op = "login"
        req = self.post(self.config.login_url)
        req.data = build_login_params(
            username,
            encrypted_password,
            twofactor_code=twofactor_code,
            email_code=email_code,
            captcha_gid=captcha_gid,
            captcha_text=captcha_text,
            rsa_timestamp=rsa_timestamp,
            config=self.config,
        )
        resp = self.send(req, op)
        login_resp = self._parse(resp, op, LoginResponse.from_dict, secret_body=True)

        outcome = classify_login(login_resp, op)
        if isinstance(outcome, NoCredentials):
            log.warning(
                "Login returned no credentials (captcha_needed=%s, emailauth_needed=%s, "
                "requires_twofactor=%s): %s",
                login_resp.captcha_needed,
                login_resp.emailauth_needed,
                login_resp.requires_twofactor,
                login_resp.message or "no message",
            )
            raise NoCredentialsReceived(op, login_resp)
        if isinstance(outcome, TransferOutcome):
            oauth = self._relay_transfer(outcome, op)
        else:
            oauth = outcome.oauth

        self._install_session(oauth, op)
        log.info("Login successful (%s)", "transfer" if isinstance(outcome, TransferOutcome) else "oauth")
        return login_resp

    def transfer_login(self, login_resp: LoginResponse) -> OAuthData:
        """
        Relay the transfer parameters of a login response and install the
        resulting session.  Returns the OAuth data synthesized from them.
        """
        op = "transfer_login"
        outcome = classify_transfer(login_resp, op)
        if isinstance(outcome, NoCredentials):
            raise NoCredentialsReceived(op, login_resp)
        oauth = self._relay_transfer(outcome, op)
        self._install_session(oauth, op)
        return oauth

    def _relay_transfer(self, outcome: TransferOutcome, operation: str) -> OAuthData:
        log.debug("Received transfer parameters, relaying to %d URL(s)", len(outcome.urls))
        body = outcome.parameters.to_dict()
        for url in outcome.urls:
            log.log(TRACE, "posting transfer to %s", url)
            # The sessionid just issued by dologin must not be overwritten
            # by the one of the session being replaced.
            req = self.request("POST", url, force_session=False)
            req.json = body
            self.send(req, operation)
        return oauth_from_transfer(outcome.parameters)

    def _install_session(self, oauth: OAuthData, operation: str) -> None:
        session_id = self.cookies.get(SESSION_COOKIE)
        if session_id is None:
            raise RuntimeError(f"{operation}: no {SESSION_COOKIE} cookie after login")
        record = build_session_record(oauth, session_id, operation)
        self.set_session(Secret(record))

    # ------------------------------------------------------------------
    # Phone
    # ------------------------------------------------------------------

    def phoneajax(self, op: str, arg: str) -> bool:
        """
        Multi-purpose phone endpoint; answers vary in shape per ``op``.

        Host: steamcommunity.com
        Endpoint: POST /steamguard/phoneajax
        """
        operation = f"phoneajax:{op}"
        session = self._require_session(operation)
        params = {
            "op": op,
            "arg": arg,
            "sessionid": session.session_id,
        }
        if op == "check_sms_code":
            params["checkfortos"] = "0"
            params["skipvoip"] = "1"

        req = self.post(self.config.phoneajax_url)
        req.data = params
        resp = self.send(req, operation)
        return self._parse(resp, operation, probe_ajax_result)

    def has_phone(self) -> bool:
        return self.phoneajax("has_phone", "null")

    def check_sms_code(self, sms_code: str) -> bool:
        return self.phoneajax("check_sms_code", sms_code)

    def check_email_confirmation(self) -> bool:
        return self.phoneajax("email_confirmation", "")

    def add_phone_number(self, phone_number: str) -> bool:
        raise UnsupportedOperation("add_phone_number")

    def phone_add_ajaxop(self, op: str, value: str) -> None:
        # Host: store.steampowered.com, Endpoint: POST /phone/add_ajaxop.
        # The answer format of its sub-operations has not been mapped yet.
        raise UnsupportedOperation(f"phone_add_ajaxop:{op}")

    def phone_validate(self, phone_number: str) -> PhoneValidateResponse:
        """
        Check a phone number (validity, VOIP, fixed line).

        Host: store.steampowered.com
        Endpoint: POST /phone/validate
        """
        op = "phone_validate"
        session = self._require_session(op)
        req = self.post(self.config.phone_validate_url)
        req.data = {
            "sessionID": session.session_id,
            "phoneNumber": phone_number,
        }
        resp = self.send(req, op)
        return self._parse(resp, op, PhoneValidateResponse.from_dict)

    # ------------------------------------------------------------------
    # Authenticator lifecycle
    # ------------------------------------------------------------------

    def add_authenticator(self, device_id: str) -> AddAuthenticatorResponse:
        """
        Start linking an authenticator.  No prerequisite (SMS or email
        confirmation) is checked here.

        Endpoint: POST /ITwoFactorService/AddAuthenticator/v0001
        """
        op = "add_authenticator"
        session = self._require_session(op)
        req = self.post(self.config.add_authenticator_url)
        req.data = {
            "access_token": session.token,
            "steamid": str(session.steam_id),
            "authenticator_type": "1",
            "device_identifier": device_id,
            "sms_phone_id": "1",
        }
        resp = self.send(req, op)
        return self._parse(
            resp, op, lambda d: AddAuthenticatorResponse.from_dict(unwrap_response(d)), secret_body=True
        )

    def finalize_authenticator(
        self, sms_code: str, code_2fa: str, time_2fa: int
    ) -> FinalizeAddAuthenticatorResponse:
        """Endpoint: POST /ITwoFactorService/FinalizeAddAuthenticator/v0001"""
        op = "finalize_authenticator"
        session = self._require_session(op)
        req = self.post(self.config.finalize_authenticator_url)
        req.data = {
            "steamid": str(session.steam_id),
            "access_token": session.token,
            "activation_code": sms_code,
            "authenticator_code": code_2fa,
            "authenticator_time": str(time_2fa),
        }
        resp = self.send(req, op)
        return self._parse(
            resp, op, lambda d: FinalizeAddAuthenticatorResponse.from_dict(unwrap_response(d))
        )

    def remove_authenticator(self, revocation_code: str) -> RemoveAuthenticatorResponse:
        """Endpoint: POST /ITwoFactorService/RemoveAuthenticator/v0001"""
        op = "remove_authenticator"
        session = self._require_session(op)
        req = self.post(self.config.remove_authenticator_url)
        req.data = {
            "steamid": str(session.steam_id),
            "steamguard_scheme": "2",
            "revocation_code": revocation_code,
            "access_token": session.token,
        }
        resp = self.send(req, op)
        return self._parse(
            resp, op, lambda d: RemoveAuthenticatorResponse.from_dict(unwrap_response(d))
        )


def get_server_time(
    config: Optional[ClientConfig] = None, http: Optional[requests.Session] = None
) -> QueryTimeResponse:
    """Query Steam's clock without a logged-in client."""
    return SteamApiClient(config=config, http=http).get_server_time()

"""
Cookie store scoped to the Steam community authority.

Requests never read cookies from the HTTP session's own jar: the Cookie
header is computed here, from the identity cookies, the current session
and whatever the server has set so far.
"""

from http.cookies import CookieError, SimpleCookie
from typing import Iterable, Optional

from requests.cookies import RequestsCookieJar

from ..config import COOKIE_AUTHORITY, IDENTITY_COOKIES, SESSION_COOKIE
from ..logging_setup import log
from ..session import Secret


class CookieStore:
    """Name -> value cookies for one fixed authority; last write wins."""

    def __init__(
        self,
        authority: str = COOKIE_AUTHORITY,
        identity_cookies: Optional[dict[str, str]] = None,
    ):
        self.authority = authority
        self.identity_cookies = dict(IDENTITY_COOKIES if identity_cookies is None else identity_cookies)
        self.jar = RequestsCookieJar()

    def set(self, name: str, value: str) -> None:
        self.jar.set(name, value, domain=self.authority, path="/")

    def get(self, name: str) -> Optional[str]:
        return self.jar.get(name, domain=self.authority, path="/")

    def apply_identity(self, session: Optional[Secret] = None) -> None:
        """Force the client-identity cookies and, with a session, ``sessionid``."""
        for name, value in self.identity_cookies.items():
            self.set(name, value)
        if session is not None:
            self.set(SESSION_COOKIE, session.expose_secret().session_id)

    def merge_set_cookie(self, headers: Iterable[str]) -> int:
        """
        Store every cookie from a list of raw ``Set-Cookie`` header values.

        Domain and path attributes are ignored: everything lands on the
        store's authority.  Malformed headers are logged and skipped.
        Returns the number of cookies stored.
        """
        stored = 0
        for header in headers:
            parsed = SimpleCookie()
            try:
                parsed.load(header)
            except CookieError as exc:
                log.debug("Skipping malformed Set-Cookie header: %s", exc)
                continue
            if not parsed:
                log.debug("Skipping unparseable Set-Cookie header (%d chars)", len(header))
                continue
            for morsel in parsed.values():
                self.set(morsel.key, morsel.value)
                stored += 1
        return stored

    def names(self) -> list[str]:
        return [c.name for c in self.jar if c.domain == self.authority]

    def header_value(self) -> str:
        """Serialize the store into a single ``Cookie:`` header value."""
        return "; ".join(
            f"{c.name}={c.value}" for c in self.jar if c.domain == self.authority
        )

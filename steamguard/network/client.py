"""
HTTP plumbing for talking to Steam.

Provides the underlying ``requests.Session`` and access to raw
``Set-Cookie`` headers.  The session never keeps cookies of its own:
:class:`~steamguard.network.cookies.CookieStore` is the only cookie jar.
"""

from http.cookiejar import DefaultCookiePolicy

import requests
from requests.cookies import RequestsCookieJar
from urllib3 import HTTPHeaderDict


def build_session(verify_ssl: bool = True) -> requests.Session:
    """
    Return a requests.Session with keep-alive and its cookie jar disabled.

    No retry adapter is mounted: transport failures reach the caller as-is.
    """
    session = requests.Session()
    session.verify = verify_ssl
    # An empty allow-list makes the built-in jar refuse every cookie,
    # so Set-Cookie headers only reach CookieStore.
    session.cookies = RequestsCookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
    session.headers.update({
        "Connection": "keep-alive",
    })
    return session


def set_cookie_headers(resp: requests.Response) -> list[str]:
    """
    Return every ``Set-Cookie`` header value of a response, one per cookie.

    ``resp.headers`` folds repeated headers into one comma-joined string,
    which is ambiguous for cookies with an ``Expires`` date, so the raw
    urllib3 header dict is preferred when available.
    """
    raw_headers = getattr(getattr(resp, "raw", None), "headers", None)
    if isinstance(raw_headers, HTTPHeaderDict):
        return raw_headers.getlist("Set-Cookie")
    value = resp.headers.get("Set-Cookie") if resp.headers is not None else None
    return [value] if value else []

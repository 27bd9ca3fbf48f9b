"""
HTTP client setup and cookie handling.
"""

from steamguard.network.client import build_session, set_cookie_headers
from steamguard.network.cookies import CookieStore

__all__ = ["build_session", "set_cookie_headers", "CookieStore"]

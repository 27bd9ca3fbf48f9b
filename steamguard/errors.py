"""Exception types raised by the Steam mobile API client."""

from typing import Any


class SteamApiError(Exception):
    """Base exception; ``operation`` names the call that failed."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class TransportError(SteamApiError):
    """The request never produced a response (DNS, TLS, connection, timeout)."""

    def __init__(self, operation: str, cause: Exception):
        self.cause = cause
        super().__init__(operation, f"transport failure: {cause}")


class DecodeError(SteamApiError):
    """The server answered, but not in the shape we expected."""

    def __init__(
        self,
        operation: str,
        reason: str,
        body: str = "",
        status_code: int | None = None,
        secret_body: bool = False,
    ):
        self.reason = reason
        self.body = body
        self.status_code = status_code
        if secret_body:
            # body may hold tokens; it stays on the attribute only
            shown = f"<{len(body)} chars withheld>"
        else:
            shown = repr(body if len(body) <= 200 else body[:200] + "...")
        super().__init__(
            operation,
            f"could not decode response (HTTP {status_code}): {reason}; body={shown}",
        )


class LoginProtocolError(SteamApiError):
    """The login result carried an inconsistent combination of fields."""


class NoCredentialsReceived(SteamApiError):
    """
    Login answered without an OAuth payload or transfer data.

    ``login_response`` tells the caller whether a captcha, email code or
    2FA code is wanted before trying again.
    """

    def __init__(self, operation: str, login_response: Any):
        self.login_response = login_response
        message = getattr(login_response, "message", "")
        super().__init__(
            operation, f"no credentials received ({message})" if message else "no credentials received"
        )


class NotLoggedIn(SteamApiError):
    """An authenticated operation was called without a session."""

    def __init__(self, operation: str):
        super().__init__(operation, "no session; call login() first")


class MalformedSession(SteamApiError, ValueError):
    """A session field had the right shape but an unusable value."""


class UnsupportedOperation(SteamApiError, NotImplementedError):
    """The provider flow behind this call is not implemented."""

    def __init__(self, operation: str):
        super().__init__(operation, "not supported by this client")

"""
Logging configuration for the Steam mobile API client.

Every handler installed by :func:`setup_logging` carries a
:class:`RedactingFilter`, so a token or cookie value that slips into a
message (a traced response body, a caller's own message) is masked before
it reaches the console or the log file.
"""

import logging
import re
from pathlib import Path

try:
    import colorlog
    _COLORLOG_AVAILABLE = True
except ImportError:
    _COLORLOG_AVAILABLE = False

# Below DEBUG: raw response bodies and request lines
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

log = logging.getLogger("steamguard")

_CONSOLE_FMT     = "%(asctime)s [%(levelname)s] %(message)s"
_FILE_LOG_FMT    = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_FILE_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Form fields, JSON keys and cookie names whose values are credentials.
# Longer names first so steamLoginSecure is not cut at steamLogin.
SECRET_KEYS: tuple[str, ...] = (
    "access_token",
    "oauth_token",
    "wgtoken_secure",
    "wgtoken",
    "token_secure",
    "auth",
    "sessionid",
    "sessionID",
    "steamLoginSecure",
    "steamLogin",
    "webcookie",
    "shared_secret",
    "identity_secret",
    "secret_1",
    "revocation_code",
    "password",
)

_SECRET_RE = re.compile(
    r'(?P<key>\b(?:%s)\b"?\s*[=:]\s*"?)(?P<value>[^"&;,\s}]+)'
    % "|".join(re.escape(k) for k in SECRET_KEYS)
)


def redact(text: str) -> str:
    """Replace the value of every ``key=value`` / ``"key": "value"`` secret."""
    return _SECRET_RE.sub(lambda m: m.group("key") + "[REDACTED]", text)


class RedactingFilter(logging.Filter):
    """Masks secret values in the fully formatted message of a record."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(debug: bool = False, trace: bool = False, log_file: str | None = None) -> None:
    """
    Attach a console handler (and optionally a file handler) to the package
    logger.

    ``trace`` implies ``debug`` and additionally shows raw response bodies.
    The console uses colorlog when the ``ui`` extra is installed.  The file,
    when given, always records at TRACE so a failing exchange can be
    replayed from it.
    """
    if trace:
        level = TRACE
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO
    log.handlers.clear()

    if _COLORLOG_AVAILABLE:
        handler = colorlog.StreamHandler()
        handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(message)s",
            datefmt="%H:%M:%S",
            log_colors={
                "TRACE":    "white",
                "DEBUG":    "cyan",
                "INFO":     "green",
                "WARNING":  "yellow",
                "ERROR":    "red",
                "CRITICAL": "bold_red",
            },
        ))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_CONSOLE_FMT, datefmt="%H:%M:%S"))
    handler.setLevel(level)
    handler.addFilter(RedactingFilter())
    log.addHandler(handler)
    log.setLevel(level)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(TRACE)
        fh.setFormatter(logging.Formatter(_FILE_LOG_FMT, datefmt=_FILE_LOG_DATEFMT))
        fh.addFilter(RedactingFilter())
        log.addHandler(fh)
        log.setLevel(TRACE)
        log.info("Logging to file: %s", log_path.resolve())

import logging
import os
from typing import Callable, TypeVar

from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)

Number = TypeVar("Number", int, float)


def _number(name: str, default: Number, cast: Callable[[str], Number]) -> Number:
    try:
        return cast(os.getenv(name, str(default)).strip())
    except ValueError:
        log.warning("config.invalid_number name=%s default=%s", name, default)
        return default


def _choice(name: str, default: str, allowed: tuple[str, ...]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        log.warning(
            "config.invalid_choice name=%s value=%s allowed=%s default=%s",
            name,
            value,
            ",".join(allowed),
            default,
        )
        return default
    return value


UPSTREAM_URL = os.getenv(
    "QUOTES_UPSTREAM_URL", "http://dev.markitondemand.com/Api/v2"
).rstrip("/")

BACKENDS = ("http", "static")
BACKEND = _choice("QUOTES_BACKEND", "http", BACKENDS)

# fail_fast: one unknown symbol fails the batch; best_effort: marker quote instead
BATCH_POLICIES = ("fail_fast", "best_effort")
BATCH_POLICY = _choice("QUOTES_BATCH_POLICY", "fail_fast", BATCH_POLICIES)

# flat: every error is a 500; classified: 404 / 400 / 500 by error kind
ERROR_MODES = ("flat", "classified")
ERROR_MODE = _choice("QUOTES_ERROR_MODE", "flat", ERROR_MODES)

CONNECT_TIMEOUT = _number("QUOTES_CONNECT_TIMEOUT", 5.0, float)
READ_TIMEOUT = _number("QUOTES_READ_TIMEOUT", 10.0, float)
WRITE_TIMEOUT = _number("QUOTES_WRITE_TIMEOUT", 10.0, float)
POOL_TIMEOUT = _number("QUOTES_POOL_TIMEOUT", 5.0, float)

RETRY_ATTEMPTS = _number("QUOTES_RETRY_ATTEMPTS", 3, int)

USER_AGENT = os.getenv("USER_AGENT", "quotes-service (+contact@example.com)")

HOST = os.getenv("QUOTES_HOST", "0.0.0.0")
PORT = _number("QUOTES_PORT", 8086, int)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

import logging
import time
from typing import Callable, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


def run_traced_command(group_key: str, command_key: str, fn: Callable[[], T]) -> T:
    """Run `fn` as a named command, logging start, finish and failure events."""
    log.debug("command.start group=%s key=%s", group_key, command_key)
    started = time.perf_counter()
    try:
        result = fn()
    except Exception:
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.warning(
            "command.failed group=%s key=%s elapsed_ms=%.1f",
            group_key,
            command_key,
            elapsed_ms,
        )
        raise
    elapsed_ms = (time.perf_counter() - started) * 1000
    log.info(
        "command.done group=%s key=%s elapsed_ms=%.1f", group_key, command_key, elapsed_ms
    )
    return result

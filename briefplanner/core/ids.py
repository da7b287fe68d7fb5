"""Identifier utilities for briefs and planning runs."""

from __future__ import annotations

import secrets
import threading
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_state = {"millis": 0, "counter": 0}
_LOCK = threading.Lock()


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def _next_counter(now_millis: int) -> int:
    with _LOCK:
        if now_millis == _state["millis"]:
            _state["counter"] += 1
        else:
            _state["millis"] = now_millis
            _state["counter"] = 0
        return _state["counter"]


def generate_cuid(prefix: str = "c", length: int = 24) -> str:
    """Generate a time-ordered lowercase identifier.

    Layout is `<prefix><base36 millis><4-char counter><random padding>`,
    truncated to `length` characters in total.
    """
    now_millis = int(time.time() * 1000)
    counter = _next_counter(now_millis)

    body_len = max(length - len(prefix), 8)
    stamp = f"{_base36(now_millis)}{_base36(counter).rjust(4, '0')}"
    padding = "".join(
        secrets.choice(_ALPHABET) for _ in range(max(body_len - len(stamp), 0))
    )
    return f"{prefix}{stamp}{padding}"[: len(prefix) + body_len]


def generate_run_id() -> str:
    """Identifier shared by every brief produced in one planning run."""
    return generate_cuid(prefix="r")

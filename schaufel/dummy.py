"""Endpoints that produce and consume fixed test data."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from schaufel.core import ConfigError, Message

_DUMMY_PAYLOAD = b'{"type":"dummy"}'


class DummyProducer:
    """Producer that prints every message to standard output."""

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self.config = dict(config or {})

    def produce(self, message: Message) -> None:
        """Print the message payload."""
        text = (message.data or b"").decode("utf-8", errors="replace")
        print(f"dummy: {text}")


class DummyConsumer:
    """Consumer that yields the same small JSON document forever."""

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self.config = dict(config or {})

    def consume(self, message: Message) -> bool:
        """Fill the message with the dummy document; the source never ends."""
        message.data = _DUMMY_PAYLOAD
        return True


def validate(config: Any) -> None:
    """Accept any dummy configuration given as a group."""
    if not isinstance(config, Mapping):
        raise ConfigError("dummy configuration must be a group")
"""Message type and configuration error shared by every endpoint and hook."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class ConfigError(ValueError):
    """Raised when a consumer, producer or hook configuration is invalid."""


@dataclass
class Message:
    """A unit of data travelling from a consumer to a producer.

    ``xmark`` is a routing mark that hooks may set; ``metadata`` carries
    named values (strings, callbacks, opaque envelopes) between hooks and
    endpoints.
    """

    data: bytes | None = None
    xmark: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def clear(self) -> None:
        """Drop the payload and metadata, keeping the routing mark.

        The metadata mapping is replaced rather than emptied, so a mapping
        already handed on with the payload stays intact.
        """
        self.data = None
        self.metadata = {}
"""Endpoints that append messages to a file and read them back line by line."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import IO, Any

from schaufel.core import ConfigError, Message

_log = logging.getLogger(__name__)


def _filename(config: Mapping[str, Any]) -> str:
    fname = config.get("file")
    if not isinstance(fname, str) or not fname:
        raise ConfigError("file consumer/producer needs a valid filename!")
    return fname


class _FileEndpoint:
    """Owns the open file shared by the producer and the consumer."""

    _fp: IO[bytes]

    def close(self) -> None:
        """Close the underlying file."""
        try:
            self._fp.close()
        except OSError as exc:
            _log.error("closing file failed: %s", exc)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FileProducer(_FileEndpoint):
    """Producer that appends each payload, as it is, to a file."""

    def __init__(self, config: Mapping[str, Any]) -> None:
        self.filename = _filename(config)
        self._fp = open(self.filename, "ab")

    def produce(self, message: Message) -> None:
        """Append the message payload to the file."""
        self._fp.write(message.data or b"")

    def close(self) -> None:
        """Flush and close the file."""
        super().close()


class FileConsumer(_FileEndpoint):
    """Consumer that yields one line of a file per message."""

    def __init__(self, config: Mapping[str, Any]) -> None:
        self.filename = _filename(config)
        self._fp = open(self.filename, "rb")

    def consume(self, message: Message) -> bool:
        """Read the next line, newline included; return False at end of file."""
        line = self._fp.readline()
        if not line:
            _log.info("reached EOF")
            return False
        message.data = line
        return True

    def close(self) -> None:
        """Close the file."""
        super().close()


def validate(config: Mapping[str, Any]) -> None:
    """Check a file endpoint configuration; raise ConfigError when it is unusable."""
    threads = config.get("threads", 0)
    if isinstance(threads, int) and not isinstance(threads, bool) and threads > 1:
        raise ConfigError("file consumer/producer is not thread safe!")
    _filename(config)
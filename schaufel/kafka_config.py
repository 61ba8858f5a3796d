"""Configuration helpers for the Kafka endpoints: partitions, option names, defaults."""

from __future__ import annotations

import re
from collections.abc import MutableMapping
from typing import Any

from schaufel.core import ConfigError

_ULONG_MAX = 2**64 - 1
_MAX_PARTITIONS = 8190
_OPTION_NAME_MAX = 127
_NUMBER = re.compile(
    r"[ \t\n\v\f\r]*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)"
)


def _strtoul(text: str, pos: int) -> tuple[int | None, int]:
    """Parse an unsigned number the way C's strtoul with base 0 does."""
    match = _NUMBER.match(text, pos)
    if match is None:
        return None, pos
    digits = match.group(2)
    if digits[:2] in ("0x", "0X"):
        value = int(digits, 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    if value > _ULONG_MAX:
        raise ConfigError(f"partition out of range {text}")
    if match.group(1) == "-":
        value = -value % 2**64
    return value, match.end()


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 2**32 if value >= 2**31 else value


def explode_partitions(parts: str | None) -> list[int]:
    """Expand a partition list such as ``0-5,7,9`` into partition numbers.

    Numbers may be decimal, octal or hexadecimal; a reversed range is
    swapped. Raises ConfigError on bad tokens, out-of-range numbers or
    more than 8190 partitions.
    """
    if parts is None:
        raise ConfigError("partition list undefined!")
    result: list[int] = []
    pos = 0
    while pos < len(parts):
        low, end = _strtoul(parts, pos)
        if low is None:
            low = 0
        if parts.startswith("-", end):
            high, end = _strtoul(parts, end + 1)
            if high is None:
                high, end = 0, end + 1
        elif end == pos:
            raise ConfigError(f"invalid token: {parts[pos:]}")
        else:
            high = low
        low, high = min(low, high), max(low, high)
        if len(result) + (high - low + 1) > _MAX_PARTITIONS:
            raise ConfigError(
                "manual assignment of more than 8000 partitions? "
                "Did you mean to do that?"
            )
        result.extend(_int32(p) for p in range(low, high + 1))
        # Commas separate the entries of the list.
        if parts.startswith(",", end):
            end += 1
        pos = end
    return result


def option_name(key: str) -> str:
    """Turn a configuration key into a Kafka option name (``_`` becomes ``.``)."""
    return key[:_OPTION_NAME_MAX].replace("_", ".")


def _group(config: MutableMapping[str, Any], name: str) -> MutableMapping[str, Any]:
    group = config.setdefault(name, {})
    if not isinstance(group, MutableMapping):
        raise ConfigError(f"{name} must be a group type!")
    return group


def producer_defaults(config: MutableMapping[str, Any]) -> None:
    """Fill in the default Kafka producer options that are not set."""
    options = _group(config, "kafka_options")
    options.setdefault("compression_codec", "lz4")
    options.setdefault("queue_buffering_max_ms", "1000")


def consumer_defaults(config: MutableMapping[str, Any]) -> None:
    """Fill in the default Kafka consumer and topic options that are not set."""
    options = _group(config, "kafka_options")
    options.setdefault("enable_auto_commit", "true")
    options.setdefault("enable_auto_offset_store", "true")
    options.setdefault("auto_commit_interval_ms", "5000")
    # Past data is left alone unless asked for.
    _group(config, "topic_options").setdefault("auto_offset_reset", "latest")
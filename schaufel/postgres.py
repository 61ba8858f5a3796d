"""Configuration helpers for the PostgreSQL producer: host lists, connection
strings, COPY commands, defaults and validation."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping, MutableSequence
from enum import Enum
from typing import Any

from schaufel.core import ConfigError

_log = logging.getLogger(__name__)


class CopyFormat(Enum):
    """Payload formats the PostgreSQL producer can write with COPY."""

    JSON = "json"
    CSV = "csv"
    BINARY = "binary"

    @property
    def copy_name(self) -> str:
        """The name COPY uses for this format."""
        return "text" if self is CopyFormat.JSON else self.value


def _coerce_format(fmt: CopyFormat | str) -> CopyFormat:
    try:
        return CopyFormat(fmt)
    except ValueError:
        raise ConfigError(f"Unknown format: {fmt}") from None


def _parse_connstring(host: str) -> tuple[str, int]:
    """Split ``<host>:<port>`` into its parts."""
    hostname, sep, port = host.rpartition(":")
    if not sep or not hostname:
        raise ConfigError(f"{host} is not of the form <host>:<port>")
    try:
        number = int(port)
    except ValueError:
        raise ConfigError(f"invalid port in {host}") from None
    if number < 0:
        raise ConfigError(f"invalid port in {host}")
    return hostname, number


def parse_hostinfo(hosts: str) -> tuple[list[str], list[str]]:
    """Split a host specification into master and replica lists.

    Hosts are separated by commas; an optional second list of replicas
    follows a semicolon.
    """
    masters, _, replicas = hosts.partition(";")

    def split(part: str) -> list[str]:
        return [host.strip() for host in part.split(",") if host.strip()]

    return split(masters), split(replicas)


def connect_info(host: str | None, dbname: str, user: str) -> str | None:
    """Build a libpq connection string for ``<host>:<port>``, or None without a host."""
    if host is None:
        return None
    hostname, port = _parse_connstring(host)
    return f"dbname={dbname} user={user} host={hostname} port={port}"


def copy_command(
    host: str | None, generation: str, fmt: CopyFormat | str
) -> str | None:
    """Build the COPY statement for a host and generation, or None without a host.

    CSV and binary data go straight into the table named by the
    generation; JSON goes into ``<host>_<port>_<generation>.data`` with
    dashes and dots in the host name turned into underscores.
    """
    fmt = _coerce_format(fmt)
    if host is None:
        return None
    hostname, port = _parse_connstring(host)
    if fmt in (CopyFormat.CSV, CopyFormat.BINARY):
        return f"COPY {generation} FROM STDIN (FORMAT {fmt.copy_name})"
    schema = hostname.replace("-", "_").replace(".", "_")
    return f"COPY {schema}_{port}_{generation}.data FROM STDIN (FORMAT {fmt.copy_name})"


def apply_defaults(config: MutableMapping[str, Any]) -> None:
    """Fill in user, database name and format where they are not set."""
    config.setdefault("user", "postgres")
    config.setdefault("dbname", "data")
    config.setdefault("format", CopyFormat.JSON.value)


def validate(config: MutableMapping[str, Any], parent: MutableSequence[Any]) -> None:
    """Check a PostgreSQL producer configuration and fan it out per master host.

    The first master (and replica) stays in ``config``; every further
    master is appended to ``parent`` as a new producer group with the same
    topic and thread count. Raises ConfigError listing the problems found.
    """
    problems = []
    hosts = config.get("host")
    threads = config.get("threads")
    if not isinstance(hosts, str):
        problems.append("require host string!")
    if not isinstance(threads, int) or isinstance(threads, bool):
        problems.append("require a threads integer")
    if problems:
        raise ConfigError("; ".join(problems))

    masters, replicas = parse_hostinfo(hosts)
    if isinstance(config.get("replica"), str) and replicas:
        problems.append(f"replica {config['replica']} conflicts with host list!")
    topic = config.get("topic")
    if not isinstance(topic, str):
        problems.append("need a topic/generation!")
    if problems:
        raise ConfigError("; ".join(problems))

    if not masters:
        raise ConfigError("I require at least one host!")
    if replicas and len(replicas) != len(masters):
        _log.warning("master/replica count uneven!")

    config["host"] = masters[0]
    if replicas:
        config["replica"] = replicas[0]

    for index, master in enumerate(masters[1:], start=1):
        instance: dict[str, Any] = {
            "type": "postgres",
            "host": master,
            "topic": topic,
            "threads": threads,
        }
        if index < len(replicas):
            instance["replica"] = replicas[index]
        parent.append(instance)
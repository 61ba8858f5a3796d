"""Validation and normalisation of Kafka consumer and producer configurations."""

from __future__ import annotations

import logging
import re
from collections.abc import MutableMapping
from typing import Any

from schaufel.core import ConfigError

_log = logging.getLogger(__name__)

# A Kafka topic name, optionally followed by a partition list,
# e.g. kafka.topic.events.3:0-5,7,9,13
_TOPIC_PARTITIONS = re.compile(
    r"([A-Za-z0-9._-]+)(:(([0-9]+(-[0-9]+)?,?)+))?", re.ASCII
)
_PARTITIONS = re.compile(r"([0-9]+(-[0-9]+)?,?)+", re.ASCII)


def _options_group(config: MutableMapping[str, Any], name: str) -> MutableMapping[str, Any]:
    group = config.setdefault(name, {})
    if not isinstance(group, MutableMapping):
        raise ConfigError(f"{name} must be a group type!")
    return group


def _is_true(value: Any) -> bool:
    return isinstance(value, bool) and value


def _split_topic(config: MutableMapping[str, Any], topic: str) -> None:
    match = _TOPIC_PARTITIONS.fullmatch(topic)
    if match is None:
        raise ConfigError(f"{topic} isn't a kafka topic/partition name")
    if match.group(2) is None:
        return

    config["topic"] = match.group(1)
    if "partitions" in config:
        raise ConfigError("partitions already specified in topic with partitions")
    config["partitions"] = match.group(3)

    # A high level consumer would rebalance the manual assignment away.
    _log.warning(
        "Manual partition assignment found. Disabling librdkafka high level consumer"
    )
    options = config.get("kafka_options")
    if options is None:
        config["kafka_options"] = {"enable_auto_commit": "false"}
    elif not isinstance(options, MutableMapping):
        raise ConfigError("kafka_options must be a group type!")
    else:
        options["enable_auto_commit"] = "false"


def _check_partitions(config: MutableMapping[str, Any]) -> None:
    if "partitions" not in config:
        return
    partitions = config["partitions"]
    if isinstance(partitions, str):
        if _PARTITIONS.fullmatch(partitions) is None:
            raise ConfigError(f"invalid partition string: {partitions}")
    elif isinstance(partitions, int) and not isinstance(partitions, bool):
        if partitions < 0:
            raise ConfigError("partitions must be a positive integer!")
        config["partitions"] = str(partitions)
    else:
        raise ConfigError("partitions is of unknown type")


def validate(config: MutableMapping[str, Any]) -> None:
    """Check broker, topic and partitions, normalising them in place.

    A topic of the form ``name:0-5,7`` is split into ``topic`` and
    ``partitions`` and disables automatic offset commits; integer
    partitions become strings. Raises ConfigError when invalid.
    """
    if not isinstance(config.get("broker"), str):
        raise ConfigError("kafka: need a broker!")
    topic = config.get("topic")
    if isinstance(topic, (list, tuple)):
        raise ConfigError("kafka: topic lists are not supported")
    if not isinstance(topic, str):
        raise ConfigError("kafka: need a topic!")
    _split_topic(config, topic)
    _check_partitions(config)


def validate_producer(config: MutableMapping[str, Any]) -> None:
    """Validate a Kafka producer configuration.

    A transactional producer gets ``enable_idempotence`` switched on
    unless it is set already.
    """
    if _is_true(config.get("transactional")):
        _log.warning("Transactional producer detected. Setting enable.idempotence=true")
        _options_group(config, "kafka_options").setdefault("enable_idempotence", "true")
        opts = config.get("kafka_opts")
        if isinstance(opts, MutableMapping) and isinstance(opts.get("transactional_id"), str):
            raise ConfigError("No support for transactional.id!")
    validate(config)


def validate_consumer(config: MutableMapping[str, Any]) -> None:
    """Validate a Kafka consumer configuration.

    Without a group id automatic commits default to off; a transactional
    consumer needs a group id and defaults to manual offset storing.
    """
    groupid = config.get("groupid")
    if not isinstance(groupid, str):
        groupid = None
        _log.warning("No groupid found. Disabling high level consumer!")
        _options_group(config, "kafka_options").setdefault("enable_auto_commit", "false")

    if _is_true(config.get("transactional")):
        if groupid is None:
            raise ConfigError("transactional consumer but no group!")
        _log.warning(
            "Transactional consumer detected. Setting enable.auto.offset.store=false"
        )
        _options_group(config, "kafka_options").setdefault(
            "enable_auto_offset_store", "false"
        )
    validate(config)
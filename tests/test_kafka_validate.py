import pytest

from schaufel.core import ConfigError
from schaufel.kafka_config import explode_partitions
from schaufel.kafka_validate import validate, validate_consumer, validate_producer


def _config(**extra):
    config = {"broker": "localhost:9092", "topic": "events"}
    config.update(extra)
    return config


def test_plain_topic_is_left_alone():
    config = _config()
    validate(config)
    assert config == {"broker": "localhost:9092", "topic": "events"}


def test_missing_broker():
    with pytest.raises(ConfigError):
        validate({"topic": "events"})


def test_missing_topic():
    with pytest.raises(ConfigError):
        validate({"broker": "localhost:9092"})


def test_topic_list_not_supported():
    with pytest.raises(ConfigError):
        validate(_config(topic=["a", "b"]))


@pytest.mark.parametrize("topic", ["bad topic", "events:", "events:a", ""])
def test_invalid_topic(topic):
    with pytest.raises(ConfigError):
        validate(_config(topic=topic))


def test_topic_with_partitions_is_split():
    config = _config(topic="kafka.topic.events.3:0-5,7,9,13")
    validate(config)
    assert config["topic"] == "kafka.topic.events.3"
    assert config["partitions"] == "0-5,7,9,13"
    assert config["kafka_options"] == {"enable_auto_commit": "false"}


def test_split_partitions_expand():
    config = _config(topic="events:0-2,7")
    validate(config)
    assert explode_partitions(config["partitions"]) == [0, 1, 2, 7]


def test_split_overrides_auto_commit_and_keeps_other_options():
    config = _config(
        topic="events:1",
        kafka_options={"enable_auto_commit": "true", "client_id": "me"},
    )
    validate(config)
    assert config["kafka_options"] == {"enable_auto_commit": "false", "client_id": "me"}


def test_split_with_existing_partitions_fails():
    with pytest.raises(ConfigError):
        validate(_config(topic="events:1", partitions="2"))


def test_split_with_non_group_options_fails():
    with pytest.raises(ConfigError):
        validate(_config(topic="events:1", kafka_options="oops"))


def test_valid_partition_string_kept():
    config = _config(partitions="1,2-4")
    validate(config)
    assert config["partitions"] == "1,2-4"


@pytest.mark.parametrize("partitions", ["a-b", "", "1;2", "-1"])
def test_invalid_partition_string(partitions):
    with pytest.raises(ConfigError):
        validate(_config(partitions=partitions))


def test_integer_partitions_become_string():
    config = _config(partitions=3)
    validate(config)
    assert config["partitions"] == "3"


def test_negative_integer_partitions():
    with pytest.raises(ConfigError):
        validate(_config(partitions=-1))


@pytest.mark.parametrize("partitions", [[1, 2], True, 1.5])
def test_partitions_of_unknown_type(partitions):
    with pytest.raises(ConfigError):
        validate(_config(partitions=partitions))


def test_transactional_producer_enables_idempotence():
    config = _config(transactional=True)
    validate_producer(config)
    assert config["kafka_options"]["enable_idempotence"] == "true"


def test_transactional_producer_keeps_explicit_idempotence():
    config = _config(transactional=True, kafka_options={"enable_idempotence": "false"})
    validate_producer(config)
    assert config["kafka_options"]["enable_idempotence"] == "false"


def test_non_transactional_producer_untouched():
    config = _config()
    validate_producer(config)
    assert "kafka_options" not in config


def test_producer_transactional_id_rejected():
    config = _config(transactional=True, kafka_opts={"transactional_id": "tx"})
    with pytest.raises(ConfigError):
        validate_producer(config)


def test_producer_checks_topic():
    with pytest.raises(ConfigError):
        validate_producer(_config(topic="bad topic"))


def test_consumer_without_group_disables_auto_commit():
    config = _config()
    validate_consumer(config)
    assert config["kafka_options"]["enable_auto_commit"] == "false"


def test_consumer_without_group_keeps_explicit_auto_commit():
    config = _config(kafka_options={"enable_auto_commit": "true"})
    validate_consumer(config)
    assert config["kafka_options"]["enable_auto_commit"] == "true"


def test_consumer_with_group_untouched():
    config = _config(groupid="group")
    validate_consumer(config)
    assert "kafka_options" not in config


def test_transactional_consumer_needs_group():
    with pytest.raises(ConfigError):
        validate_consumer(_config(transactional=True))


def test_transactional_consumer_disables_offset_store():
    config = _config(groupid="group", transactional=True)
    validate_consumer(config)
    assert config["kafka_options"]["enable_auto_offset_store"] == "false"


def test_consumer_splits_topic():
    config = _config(groupid="group", topic="events:4-6")
    validate_consumer(config)
    assert config["topic"] == "events"
    assert explode_partitions(config["partitions"]) == [4, 5, 6]
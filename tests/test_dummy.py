import json

import pytest

from schaufel.core import ConfigError, Message
from schaufel.dummy import DummyConsumer, DummyProducer, validate


def test_producer_prints_payload(capsys):
    DummyProducer().produce(Message(data=b"hello"))
    assert capsys.readouterr().out == "dummy: hello\n"


def test_producer_keeps_message(capsys):
    message = Message(data=b"abc", xmark=3)
    DummyProducer({"type": "dummy"}).produce(message)
    capsys.readouterr()
    assert message.data == b"abc"
    assert message.xmark == 3


def test_consumer_fills_message():
    message = Message()
    assert DummyConsumer().consume(message) is True
    assert message.data == b'{"type":"dummy"}'
    assert json.loads(message.data) == {"type": "dummy"}


def test_consumer_overwrites_previous_payload():
    message = Message(data=b"old")
    consumer = DummyConsumer({"type": "dummy"})
    consumer.consume(message)
    first = message.data
    consumer.consume(message)
    assert message.data == first
    assert message.data != b"old"


def test_validate_accepts_group_unchanged():
    config = {"type": "dummy", "threads": 2}
    assert validate(config) is None
    assert config == {"type": "dummy", "threads": 2}


def test_validate_rejects_non_group():
    with pytest.raises(ConfigError):
        validate(["dummy"])
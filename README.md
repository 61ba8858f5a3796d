# schaufel

`schaufel` provides the building blocks for moving messages from a
consumer to a producer. It has a shared message type, simple dummy and
file endpoints, and helpers that check and complete Kafka and PostgreSQL
endpoint configurations.

Configurations are plain Python mappings. Invalid configurations raise
`schaufel.core.ConfigError`, which is a subclass of `ValueError`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Messages

`schaufel.core.Message` is a dataclass with these fields:

* `data`: the payload as `bytes`, or `None`
* `xmark`: an integer routing mark
* `metadata`: a dict of named values

`Message.clear()` drops the payload and replaces the metadata with a new
empty dict. It leaves the routing mark as it is.

## Endpoints

Every consumer has a `consume(message)` method. It fills the message and
returns `True`, or returns `False` when there is nothing more to read.
Every producer has a `produce(message)` method.

`schaufel.dummy`:

* `DummyConsumer` fills every message with `{"type":"dummy"}` and never
  runs out.
* `DummyProducer` prints `dummy: <data>` to standard output.
* `validate(config)` accepts any mapping.

`schaufel.file`:

* `FileConsumer(config)` reads the file named by `config["file"]` one
  line at a time, keeping the newline.
* `FileProducer(config)` appends each payload, unchanged, to that file.
* Both have a `close()` method and can be used as context managers.
* `validate(config)` rejects a missing or empty `file`. It also rejects
  `threads` greater than 1, because the file endpoints are not thread
  safe.

```python
from schaufel.core import Message
from schaufel.file import FileConsumer, FileProducer

with FileProducer({"file": "out.log"}) as producer:
    producer.produce(Message(data=b"hello\n"))

with FileConsumer({"file": "out.log"}) as consumer:
    message = Message()
    while consumer.consume(message):
        print(message.data)
```

## Kafka configuration

`schaufel.kafka_config`:

* `explode_partitions("0-2,5")` returns `[0, 1, 2, 5]`. Numbers may be
  written in decimal, octal or hexadecimal, and a reversed range is
  swapped. A bad token, an out-of-range number or more than 8190
  partitions raises `ConfigError`.
* `option_name("queue_buffering_max_ms")` returns
  `"queue.buffering.max.ms"`.
* `producer_defaults(config)` sets these values in `kafka_options` when
  they are missing: `compression_codec="lz4"` and
  `queue_buffering_max_ms="1000"`.
* `consumer_defaults(config)` sets these values when they are missing:
  * in `kafka_options`: `enable_auto_commit`, `enable_auto_offset_store`
    and `auto_commit_interval_ms`
  * in `topic_options`: `auto_offset_reset="latest"`

`schaufel.kafka_validate` changes the configuration in place:

* `validate(config)` requires `broker` and `topic` strings. A topic such
  as `events:0-3` is split into `topic="events"` and `partitions="0-3"`,
  and `kafka_options.enable_auto_commit` is set to `"false"`. A
  `partitions` value given as an integer is turned into a string.
* `validate_producer(config)` defaults `enable_idempotence` to `"true"`
  for a transactional producer.
* `validate_consumer(config)`:
  * defaults automatic commits to off when there is no `groupid`
  * requires a `groupid` for a transactional consumer, whose automatic
    offset storing defaults to off

## PostgreSQL configuration

`schaufel.postgres`:

* `CopyFormat` has the members `JSON`, `CSV` and `BINARY`.
* `parse_hostinfo("a:1,b:2;c:1")` returns `(["a:1", "b:2"], ["c:1"])`,
  that is the master hosts and the replica hosts.
* `connect_info("localhost:5432", "data", "postgres")` returns
  `"dbname=data user=postgres host=localhost port=5432"`.
* `copy_command(host, generation, fmt)` builds the `COPY ... FROM STDIN`
  statement:
  * CSV and binary data go into the table named by the generation.
  * JSON data goes into `<host>_<port>_<generation>.data`. Dashes and dots
    in the host name become underscores.
* `apply_defaults(config)` sets `user`, `dbname` and `format` when they
  are missing.
* `validate(config, parent)` checks `host`, `threads` and `topic`. It
  keeps the first master host, and the first replica, in `config`. For
  each further master it appends a new producer group to the list
  `parent`.

## What this package does not do

This package has no command-line program and no running pipeline. It does
not implement:

* the queue
* worker threads
* message hooks such as routing marks or JSON export

It makes no connections to Kafka, Redis or PostgreSQL. For those systems
it only validates and completes configurations and builds connection
strings and COPY statements.
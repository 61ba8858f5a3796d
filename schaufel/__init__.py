"""Message type, dummy and file endpoints, and Kafka and PostgreSQL configuration helpers."""

__version__ = "0.11"
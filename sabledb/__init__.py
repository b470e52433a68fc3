"""Building blocks of a Redis-compatible key-value server: request parsing,
RESP replies, value metadata, replication messages and configuration."""

__version__ = "0.1.0"
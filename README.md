# sabledb

Building blocks for a Redis-compatible key-value server, in pure Python
with no third-party dependencies.

## What is inside

- `sabledb.request_parser`: `RequestParser` parses client requests in
  inline form (`SET KEY VALUE\r\n`, with single or double quotes grouping
  words) and as RESP arrays of bulk strings. It raises `NeedMoreData` when
  the buffer holds only part of a request; call `parse` again with the grown
  buffer once more bytes arrive. Malformed input raises `ProtocolError`, and
  over-long lengths or buffers (over 512 MB) raise `BufferTooBig`. All three
  derive from `ParserError`. A successful parse returns a `ParseResult` with
  `args`, `arg(index)`, `arg_count()` and `bytes_consumed`.
- `sabledb.resp`: functions returning RESP replies as `bytes`: `ok()`,
  `pong()`, `null_string()`, `empty_string()`, `empty_array()`,
  `error_string(msg)`, `bulk_string(content)`, `number(num, is_float)`,
  `array_len(num)` and `strings(items)`.
- `sabledb.codec`: big-endian `ByteWriter` and `ByteReader`, the `Encoding`
  byte markers of the storage format, and `SerialisationError`, raised when
  a buffer is too short to decode.
- `sabledb.expiration`: `Expiration` (TTL bookkeeping, serialisable to 16
  bytes), `epoch_ms()` and a microsecond `StopWatch`.
- `sabledb.value_metadata`, `sabledb.list_metadata`,
  `sabledb.hash_metadata`: the fixed-size records stored in front of string,
  list and hash values (`CommonValueMetadata`, `StringValueMetadata`,
  `ListValueMetadata`, `HashValueMetadata`), plus `HashFieldKey`, the storage
  key of a single hash field.
- `sabledb.storage_updates`: `StorageUpdates`, a serialised batch of
  `PutRecord` / `DeleteRecord` changes between two sequence numbers;
  `changes()` yields them in order.
- `sabledb.repl_messages`: `ReplRequest`, a replica's request for a full
  sync or for the updates since a sequence number.
- `sabledb.framing`: `MessageWriter` and `MessageReader` send and receive
  messages prefixed with an 8-byte big-endian length over a socket;
  `prepare_socket(sock)` sets a 100 ms timeout and disables Nagle's delay.
- `sabledb.replication_config`: `ReplicationConfig` and `ServerRole`, kept
  in `replication.json` in a configuration directory (or the working
  directory).
- `sabledb.server_options`: `ServerOptions` and its parts, loaded from an
  INI file with `ServerOptions.from_config`.

## Installation

```
pip install .
```

## Example

```python
from sabledb.request_parser import RequestParser, NeedMoreData
from sabledb import resp

parser = RequestParser()
buffer = bytearray(b"*2\r\n$3\r\nGET\r\n$3\r\nK")
try:
    parser.parse(bytes(buffer))
except NeedMoreData:
    buffer += b"EY\r\n"

result = parser.parse(bytes(buffer))
print(result.arg(0), result.arg(1))   # b'GET' b'KEY'
del buffer[: result.bytes_consumed]

reply = resp.bulk_string(b"value")    # b'$5\r\nvalue\r\n'
```

Encoding a batch of changes for a replica:

```python
from sabledb.storage_updates import StorageUpdates

updates = StorageUpdates.from_seq_number(42)
updates.add_put(b"key", b"value")
updates.add_delete(b"old")
wire = updates.to_bytes()

for change in StorageUpdates.from_bytes(wire).changes():
    print(change)
```

Loading server options from an INI file:

```python
from sabledb.server_options import ServerOptions

options = ServerOptions.from_config("sabledb.ini")
print(options.general_settings.port, options.use_tls())
```

Recognised sections are `[general]`, `[rocksdb]`, `[replication_limits]`
and `[client_limits]`; unknown keys are ignored.

## What this package does not do

It is a set of components, not a running server. There is no network
listener, no command execution, no storage engine and no replication
client or server loop. `RocksDbParams` and `StorageOpenParams` only hold
configuration values; nothing in the package opens a database with them.

## Running the tests

```
pip install .[test]
pytest
```
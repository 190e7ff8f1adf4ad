# tondilisten

Building blocks for a service that listens to a blockchain node and serves
what it has seen: which events to subscribe to, how to reach the node, how
blocks and transactions are stored and queried, and how answers and errors
are shaped for clients.

## What is inside

| Module | Purpose |
| --- | --- |
| `tondilisten.events` | `EventType`, `EventConfig` and the real-time, batch and priority strategies |
| `tondilisten.client_config` | `ListenerConfig`: network, encoding, host and the URL derived from them |
| `tondilisten.endpoint` | `resolve_endpoint` and `Protocol`: pick wRPC or gRPC from a URL |
| `tondilisten.pool` | `Pool`: keeps one element and rebuilds it when it stops being live |
| `tondilisten.dispatch` | `ListenerManager`, `Listener`, `NotificationChannel`: route incoming events |
| `tondilisten.models` | SQLAlchemy tables and the `Header`, `Tx`, `TxIn`, `TxOu` row models |
| `tondilisten.queries` | latest header, latest transaction, statistics and lookups by id |
| `tondilisten.hexutil` | `Hex` values, `hash_from_hex` and `DbError` |
| `tondilisten.envelope` | `Envelope` and `Status`: the `{status, data, cause}` reply shape |
| `tondilisten.errors` | `ServerError` with HTTP status, error code and user message; `ClientError` |
| `tondilisten.websocket` | the JSON message protocol of the live socket |
| `tondilisten.pingpong` | the ping/pong health service |

## Events

Event names are kebab-case, as the node spells them:

```python
from tondilisten.events import EventConfig, EventType

EventType.parse("block-added")          # EventType.BLOCK_ADDED
str(EventType.parse("utxos-changed"))   # "utxos-changed"

config = EventConfig.from_dict({"enabled_events": ["block-added", "utxos-changed"]})
config.validate()
config.parse_event_types()              # a set of EventType
```

An unknown name raises `ValueError` instead of being ignored. `validate()`
also rejects a batch strategy with a zero size or timeout, and unknown names
in a priority strategy.

`EventConfig.from_dict` fills missing keys with defaults: `block-added`,
`utxos-changed` and `virtual-chain-changed` enabled, the real-time strategy,
a buffer of 1000 and deduplication on. An `EventConfig()` built directly
starts empty instead. Strategies are read from their tagged form:
`"RealTime"`, `{"Batch": {"batch_size": ..., "batch_timeout_ms": ...}}` or
`{"Priority": {"high_priority": [...], "medium_priority": [...], "low_priority": [...]}}`.

## Reaching a node

When no URL is given, the port follows from the network and the encoding
(unknown pairs fall back to devnet with borsh):

| network | borsh | json |
| --- | --- | --- |
| mainnet | 17110 | 18110 |
| testnet | 17210 | 18210 |
| devnet | 17610 | 18610 |
| simnet | 17310 | 18310 |

```python
from tondilisten.client_config import ListenerConfig

config = ListenerConfig.from_dict({"network_id": "mainnet", "encoding": "json"})
config.default_port()   # 18110
config.build_url()      # "wss://8.210.45.192:18110"
config.rpc_settings()   # RpcSettings(url=..., encoding="json", network_id=None)
```

An explicit `url` always wins. `available_events()` lists every event name a
client may handle.

`resolve_endpoint` in `tondilisten.endpoint` treats `ws://` and `wss://` as
wRPC, `grpc://`, `http://` and `https://` as gRPC, and a bare `host:port` as
wRPC over `ws://`; anything else raises `PoolError`.

## Routing notifications

```python
from tondilisten.dispatch import ListenerManager
from tondilisten.events import EventType

manager = ListenerManager([EventType.BLOCK_ADDED])
await manager.handle_event({"type": "block-added", "hash": "ab"})
notification = await manager.get(EventType.BLOCK_ADDED).receive()
```

An event without a `type` raises `PoolError`; unknown or unsubscribed types
are dropped. Asking for the channel of an unsubscribed type raises a
`ServerError` of kind `NOT_FOUND`.

## Stored chain and queries

`tondilisten.models` defines the `blocks`, `transactions`,
`transactions_inputs` and `transactions_outputs` tables on `metadata`. Binary
columns come back as lower-case `Hex` strings. The functions in
`tondilisten.queries` take a SQLAlchemy connection and return JSON-ready
dicts of the form `{"success": True, "data": {...}}`; failures raise
`QueryError` with an HTTP status (404 for an unknown transaction id).

## Replies and errors

```python
from tondilisten.envelope import Envelope

Envelope.ok({"hash": "ab"}).to_dict()   # {"status": 0, "data": {"hash": "ab"}}
Envelope.fail("no such block").to_dict()
# {"status": 1, "data": None, "cause": "no such block"}
```

`Envelope.capture(func, *args)` wraps a result, or the message of the
exception raised. `ServerError` carries an `ErrorKind`; `status_code()`,
`error_code()` and `user_message()` give what a client sees, and
`to_response()` returns the status with the
`{"error": {"code", "message", "status"}}` body.

## WebSocket protocol

`welcome_message()` is sent on connect; `respond(text, now)` answers `ping`,
`subscribe`, `unsubscribe`, `get_status` and `get_events` messages.
`handle_socket(socket)` serves any object that is an async iterable of
incoming messages with an async `send(text)`.

## What it does not do

The package has no command and no server of its own: it does not bind a
port, route HTTP requests or accept WebSocket connections. Nor does it hold a
network client for the node: `resolve_endpoint` only chooses the protocol,
and `Pool` and `ListenerManager` work with whatever elements and events they
are given. It does not create or fill the database either; the queries read
tables that something else keeps up to date.

## Tests

The test suite uses pytest and pytest-asyncio, available through the `test`
extra.
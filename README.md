# plugrpc

Building blocks for the JSON-RPC layer of an EVM-compatible chain node:

- `plugrpc.config`: the server configuration (`Config`, `EVMConfig`,
  `JSONRPCConfig`, `TLSConfig`) with defaults, validation and rendering to an
  `app.toml` section. `default_config()`, `app_config(denom)`,
  `get_config(values)` and `parse_config(values)` build configurations;
  `Config.validate_basic()` raises `ConfigError` on a bad value and
  `Config.render()` returns the TOML text.
- `plugrpc.flags`: flag names and `add_tx_flags(parser)`, which adds the
  common transaction flags (`--chain-id`, `--from`, `--fees`, `--gas-prices`,
  `--node`, `--gas-adjustment`, `-b/--broadcast-mode`, `--keyring-backend`) to
  an `argparse` parser.
- `plugrpc.coin`: `Coin` and `DecCoin`, and `new_socket_coin`,
  `new_socket_dec_coin` and `new_socket_coin_int64` for the native `uplugcn`
  denomination.
- `plugrpc.pubsub`: an in-memory `EventBus` that reads each topic's events from
  an iterable in a background thread and hands them to `Subscription`s.
- `plugrpc.addrlock`: `AddrLocker`, one lock per address.
- `plugrpc.block`: `BlockNumber` and `BlockNumberOrHash`, parsed from JSON.
- `plugrpc.rpc_types`: RPC result types (`RPCTransaction`, `AccountResult`,
  `StorageResult`, `FeeHistoryResult`, `Log`, ...), hex encoders and helpers
  that read the base fee and EVM logs out of events.
- `plugrpc.addresses`: bech32 encoding and decoding, hex address checks,
  EIP-55 checksums and `address_translation`.
- `plugrpc.results`: JSON forms of logs, account proofs and transactions whose
  addresses are written as bech32 account addresses.
- `plugrpc.txpool` and `plugrpc.web3`: `TxPoolAPI` (always an empty pool) and
  `Web3API`.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Examples

Configuration:

```python
from plugrpc.config import default_config

cfg = default_config()
cfg.validate_basic()
print(cfg.json_rpc.address)   # 0.0.0.0:8545
print(cfg.render())           # app.toml section for EVM, JSON-RPC and TLS
```

Block numbers:

```python
from plugrpc.block import BlockNumber, BlockNumberOrHash

BlockNumber.from_json('"latest"')                                     # BlockNumber(-1)
BlockNumberOrHash.from_json('{"blockNumber": "0x35"}').block_number   # BlockNumber(53)
```

Event bus. A topic's source is any iterable; the topic closes its
subscriptions when the iterable ends. Delivery is unbuffered: an event reaches
a subscription only if a caller is waiting in `get()` (or iterating it) when
the event is published, otherwise it is dropped.

```python
import queue
from plugrpc.pubsub import EventBus

bus = EventBus()
source = queue.Queue()
bus.add_topic("blocks", iter(source.get, None))   # putting None ends the topic
sub = bus.subscribe("blocks")
# in another thread: source.put({"height": 1}) while this call is waiting
event = sub.get(timeout=1.0)   # raises TimeoutError if nothing arrives
```

Addresses:

```python
from plugrpc.addresses import address_translation

address_translation("0x" + "11" * 20, "gx", "gxvaloper")
# {"bytes": "[17 17 ...]", "bech32": "gx1...", "hex": "1111...", "EIP-55": "0x1111..."}
```

Web3 namespace:

```python
from plugrpc.web3 import Web3API

api = Web3API()
api.sha3(b"")             # keccak-256 digest
api.sha3("0x68656c6c6f")  # hex input with 0x prefix
api.client_version()      # "plugchaind//python3.x.y"
```

## What it does not do

The package holds no server and no command. It does not start a JSON-RPC
HTTP server or a WebSocket server, does not run or connect to a node, and has
no `eth_`, `personal_` or `net_` namespace, no keyring and no transaction
signing. It provides the configuration, parsing, encoding and event-bus pieces
such a server is built from.
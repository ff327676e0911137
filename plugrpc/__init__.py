"""Configuration, block-number parsing, an event bus, address encodings and JSON-RPC result types for an EVM-compatible chain node."""

__version__ = "0.1.0"

__all__ = [
    "addresses",
    "addrlock",
    "block",
    "coin",
    "config",
    "flags",
    "pubsub",
    "results",
    "rpc_types",
    "txpool",
    "web3",
]
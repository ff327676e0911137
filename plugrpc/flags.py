"""Command line flag names and the common transaction flags."""

from __future__ import annotations

import argparse

# Full-node start flags
WITH_TENDERMINT = "with-tendermint"
ADDRESS = "address"
TRANSPORT = "transport"
TRACE_STORE = "trace-store"
CPU_PROFILE = "cpu-profile"

# gRPC flags
GRPC_ENABLE = "grpc.enable"
GRPC_ADDRESS = "grpc.address"
GRPC_WEB_ENABLE = "grpc-web.enable"
GRPC_WEB_ADDRESS = "grpc-web.address"

# JSON-RPC flags
JSONRPC_ENABLE = "json-rpc.enable"
JSONRPC_API = "json-rpc.api"
JSONRPC_ADDRESS = "json-rpc.address"
JSON_WS_ADDRESS = "json-rpc.ws-address"
JSONRPC_GAS_CAP = "json-rpc.gas-cap"
JSONRPC_EVM_TIMEOUT = "json-rpc.evm-timeout"
JSONRPC_TX_FEE_CAP = "json-rpc.txfee-cap"
JSONRPC_FILTER_CAP = "json-rpc.filter-cap"
JSONRPC_FEE_HISTORY_CAP = "json-rpc.feehistory-cap"

# EVM flags
EVM_TRACER = "evm.tracer"

# TLS flags
TLS_CERT_PATH = "tls.certificate-path"
TLS_KEY_PATH = "tls.key-path"

# Transaction flags
FLAG_CHAIN_ID = "chain-id"
FLAG_FROM = "from"
FLAG_FEES = "fees"
FLAG_GAS_PRICES = "gas-prices"
FLAG_NODE = "node"
FLAG_GAS_ADJUSTMENT = "gas-adjustment"
FLAG_BROADCAST_MODE = "broadcast-mode"
FLAG_KEYRING_BACKEND = "keyring-backend"

DEFAULT_GAS_ADJUSTMENT = 1.0
BROADCAST_SYNC = "sync"
KEYRING_BACKEND_OS = "os"


def add_tx_flags(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add the flags common to commands that post a transaction."""
    parser.add_argument(
        f"--{FLAG_CHAIN_ID}", default="testnet", help="Specify Chain ID for sending Tx"
    )
    parser.add_argument(
        f"--{FLAG_FROM}",
        default="",
        help="Name or address of private key with which to sign",
    )
    parser.add_argument(
        f"--{FLAG_FEES}",
        default="",
        help="Fees to pay along with transaction; eg: 20uplugcn",
    )
    parser.add_argument(
        f"--{FLAG_GAS_PRICES}",
        default="",
        help="Gas prices to determine the transaction fee (e.g. 10uplugcn)",
    )
    parser.add_argument(
        f"--{FLAG_NODE}",
        default="tcp://localhost:26657",
        help="<host>:<port> to tendermint rpc interface for this chain",
    )
    parser.add_argument(
        f"--{FLAG_GAS_ADJUSTMENT}",
        type=float,
        default=DEFAULT_GAS_ADJUSTMENT,
        help=(
            "adjustment factor to be multiplied against the estimate returned by the "
            "tx simulation; if the gas limit is set manually this flag is ignored"
        ),
    )
    parser.add_argument(
        "-b",
        f"--{FLAG_BROADCAST_MODE}",
        default=BROADCAST_SYNC,
        help="Transaction broadcasting mode (sync|async|block)",
    )
    parser.add_argument(
        f"--{FLAG_KEYRING_BACKEND}",
        default=KEYRING_BACKEND_OS,
        help="Select keyring's backend",
    )
    return parser
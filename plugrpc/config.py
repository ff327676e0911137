"""Server configuration for the EVM JSON-RPC, WebSocket and TLS settings."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable

DEFAULT_GRPC_ADDRESS = "0.0.0.0:9900"
DEFAULT_JSONRPC_ADDRESS = "0.0.0.0:8545"
DEFAULT_JSONRPC_WS_ADDRESS = "0.0.0.0:8546"
DEFAULT_EVM_TRACER = ""
DEFAULT_GAS_CAP = 25_000_000
DEFAULT_FILTER_CAP = 200
DEFAULT_FEE_HISTORY_CAP = 100
DEFAULT_EVM_TIMEOUT = timedelta(seconds=5)
DEFAULT_TX_FEE_CAP = 1.0

EVM_TRACERS = ("json", "markdown", "struct", "access_list")

_APP_CONFIG_ERROR = "error in app.toml"

CONFIG_TEMPLATE = """
###############################################################################
###                             EVM Configuration                           ###
###############################################################################

[evm]

# Tracer defines the 'vm.Tracer' type that the EVM will use when the node is run in
# debug mode. To enable tracing use the '--trace' flag when starting your node.
# Valid types are: json|struct|access_list|markdown
tracer = "{tracer}"

###############################################################################
###                           JSON RPC Configuration                        ###
###############################################################################

[json-rpc]

# Enable defines if the gRPC server should be enabled.
enable = {enable}

# Address defines the EVM RPC HTTP server address to bind to.
address = "{address}"

# Address defines the EVM WebSocket server address to bind to.
ws-address = "{ws_address}"

# API defines a list of JSON-RPC namespaces that should be enabled
# Example: "eth,txpool,personal,net,debug,web3"
api = "{api}"

# GasCap sets a cap on gas that can be used in eth_call/estimateGas (0=infinite). Default: 25,000,000.
gas-cap = {gas_cap}

# EVMTimeout is the global timeout for eth_call. Default: 5s.
evm-timeout = "{evm_timeout}"

# TxFeeCap is the global tx-fee cap for send transaction. Default: 1eth.
txfee-cap = {tx_fee_cap}

# FilterCap sets the global cap for total number of filters that can be created
filter-cap = {filter_cap}

# FeeHistoryCap sets the global cap for total number of blocks that can be fetched
feehistory-cap = {fee_history_cap}


###############################################################################
###                             TLS Configuration                           ###
###############################################################################

[tls]

# Certificate path defines the cert.pem file path for the TLS configuration.
certificate-path = "{certificate_path}"

# Key path defines the key.pem file path for the TLS configuration.
key-path = "{key_path}"
"""


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


def get_default_api_namespaces() -> list[str]:
    """Return the JSON-RPC namespaces enabled by default."""
    return ["eth", "net", "web3", "rpc"]


def get_api_namespaces() -> list[str]:
    """Return every available JSON-RPC namespace."""
    return ["web3", "eth", "personal", "net", "txpool", "debug", "miner", "rpc"]


@dataclass
class EVMConfig:
    """EVM settings of the application."""

    tracer: str = DEFAULT_EVM_TRACER

    def validate(self) -> None:
        if self.tracer and self.tracer not in EVM_TRACERS:
            raise ConfigError(
                f"invalid tracer type {self.tracer}, "
                f"available types: [{' '.join(EVM_TRACERS)}]"
            )


@dataclass
class JSONRPCConfig:
    """Settings of the EVM JSON-RPC server."""

    api: list[str] = field(default_factory=get_default_api_namespaces)
    address: str = DEFAULT_JSONRPC_ADDRESS
    ws_address: str = DEFAULT_JSONRPC_WS_ADDRESS
    gas_cap: int = DEFAULT_GAS_CAP
    evm_timeout: timedelta = DEFAULT_EVM_TIMEOUT
    tx_fee_cap: float = DEFAULT_TX_FEE_CAP
    filter_cap: int = DEFAULT_FILTER_CAP
    fee_history_cap: int = DEFAULT_FEE_HISTORY_CAP
    enable: bool = True

    def validate(self) -> None:
        if self.enable and not self.api:
            raise ConfigError("cannot enable JSON-RPC without defining any API namespace")
        if self.filter_cap < 0:
            raise ConfigError("JSON-RPC filter-cap cannot be negative")
        if self.fee_history_cap <= 0:
            raise ConfigError("JSON-RPC feehistory-cap cannot be negative or 0")
        if self.tx_fee_cap < 0:
            raise ConfigError("JSON-RPC tx fee cap cannot be negative")
        if self.evm_timeout < timedelta(0):
            raise ConfigError("JSON-RPC EVM timeout duration cannot be negative")
        seen: set[str] = set()
        for namespace in self.api:
            if namespace in seen:
                raise ConfigError(f"repeated API namespace '{namespace}'")
            seen.add(namespace)


def _ext(path: str) -> str:
    """Return the extension of the last path element, dot included."""
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


@dataclass
class TLSConfig:
    """Certificate and key files used by the servers."""

    certificate_path: str = ""
    key_path: str = ""

    def validate(self) -> None:
        cert_ext = _ext(self.certificate_path)
        if self.certificate_path and cert_ext != ".pem":
            raise ConfigError(
                f"invalid extension {cert_ext} for certificate path "
                f"{self.certificate_path}, expected '.pem'"
            )
        key_ext = _ext(self.key_path)
        if self.key_path and key_ext != ".pem":
            raise ConfigError(
                f"invalid extension {key_ext} for key path {self.key_path}, expected '.pem'"
            )


def _frac(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = str(rest).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def _format_duration(duration: timedelta) -> str:
    ns = ((duration.days * 86400 + duration.seconds) * 10**6 + duration.microseconds) * 1000
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns == 0:
        return "0s"
    if ns < 1000:
        return f"{sign}{ns}ns"
    if ns < 10**6:
        return f"{sign}{_frac(ns, 1000)}µs"
    if ns < 10**9:
        return f"{sign}{_frac(ns, 10**6)}ms"
    hours, rest = divmod(ns, 3600 * 10**9)
    minutes, rest = divmod(rest, 60 * 10**9)
    seconds = _frac(rest, 10**9)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _format_float(value: float) -> str:
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


@dataclass
class Config:
    """Top level server configuration."""

    evm: EVMConfig = field(default_factory=EVMConfig)
    json_rpc: JSONRPCConfig = field(default_factory=JSONRPCConfig)
    tls: TLSConfig = field(default_factory=TLSConfig)
    min_gas_prices: str = ""

    def validate_basic(self) -> None:
        """Raise ConfigError if any section holds an invalid value."""
        sections = (("evm", self.evm), ("json-rpc", self.json_rpc), ("tls", self.tls))
        for name, section in sections:
            try:
                section.validate()
            except ConfigError as err:
                raise ConfigError(
                    f"invalid {name} config value: {err}: {_APP_CONFIG_ERROR}"
                ) from err

    def render(self) -> str:
        """Render the EVM, JSON-RPC and TLS sections as TOML text."""
        rpc = self.json_rpc
        return CONFIG_TEMPLATE.format(
            tracer=self.evm.tracer,
            enable="true" if rpc.enable else "false",
            address=rpc.address,
            ws_address=rpc.ws_address,
            api=",".join(rpc.api),
            gas_cap=rpc.gas_cap,
            evm_timeout=_format_duration(rpc.evm_timeout),
            tx_fee_cap=_format_float(float(rpc.tx_fee_cap)),
            filter_cap=rpc.filter_cap,
            fee_history_cap=rpc.fee_history_cap,
            certificate_path=self.tls.certificate_path,
            key_path=self.tls.key_path,
        )


def default_evm_config() -> EVMConfig:
    return EVMConfig()


def default_jsonrpc_config() -> JSONRPCConfig:
    return JSONRPCConfig()


def default_tls_config() -> TLSConfig:
    return TLSConfig()


def default_config() -> Config:
    """Return the default server configuration."""
    return Config(
        evm=default_evm_config(),
        json_rpc=default_jsonrpc_config(),
        tls=default_tls_config(),
    )


def app_config(denom: str) -> tuple[str, Config]:
    """Return the configuration template and the default configuration for an app."""
    cfg = default_config()
    if denom:
        cfg.min_gas_prices = "0.0001" + denom
    return CONFIG_TEMPLATE, cfg


# --- value conversion -------------------------------------------------------

_MISSING = object()
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_UNITS = {
    "ns": 1,
    "us": 10**3,
    "µs": 10**3,
    "μs": 10**3,
    "ms": 10**6,
    "s": 10**9,
    "m": 60 * 10**9,
    "h": 3600 * 10**9,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def _lookup(values: Mapping[str, Any], key: str) -> Any:
    if key in values:
        return values[key]
    current: Any = values
    for part in key.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"cannot convert {value!r} to a boolean")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return int(str(value).strip(), 0)


def _to_uint(value: Any) -> int:
    number = _to_int(value)
    if number < 0:
        raise ValueError(f"cannot convert negative value {value!r} to an unsigned integer")
    return number


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    return float(value)


def _to_str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [item for item in re.split(r"[,\s]+", value) if item]
    if isinstance(value, (list, tuple)):
        return [_to_str(item) for item in value]
    raise ValueError(f"cannot convert {value!r} to a list of strings")


def _parse_duration(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"cannot convert {value!r} to a duration")
    if isinstance(value, (int, float)):
        return timedelta(microseconds=value / 1000)
    text = str(value).strip()
    if re.fullmatch(r"[-+]?\d+", text):
        return timedelta(microseconds=int(text) / 1000)
    sign = 1
    if text[:1] in "+-" and text:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {value!r}")
    total_ns = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            raise ValueError(f"invalid duration {value!r}")
        total_ns += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    if position != len(text):
        raise ValueError(f"invalid duration {value!r}")
    return timedelta(microseconds=sign * total_ns / 1000)


_FIELDS: tuple[tuple[str, str, str, Callable[[Any], Any], Any], ...] = (
    ("evm", "tracer", "evm.tracer", _to_str, ""),
    ("json_rpc", "enable", "json-rpc.enable", _to_bool, False),
    ("json_rpc", "api", "json-rpc.api", _to_str_list, []),
    ("json_rpc", "address", "json-rpc.address", _to_str, ""),
    ("json_rpc", "ws_address", "json-rpc.ws-address", _to_str, ""),
    ("json_rpc", "gas_cap", "json-rpc.gas-cap", _to_uint, 0),
    ("json_rpc", "filter_cap", "json-rpc.filter-cap", _to_int, 0),
    ("json_rpc", "fee_history_cap", "json-rpc.feehistory-cap", _to_int, 0),
    ("json_rpc", "tx_fee_cap", "json-rpc.txfee-cap", _to_float, 0.0),
    ("json_rpc", "evm_timeout", "json-rpc.evm-timeout", _parse_duration, timedelta(0)),
    ("tls", "certificate_path", "tls.certificate-path", _to_str, ""),
    ("tls", "key_path", "tls.key-path", _to_str, ""),
)


def get_config(values: Mapping[str, Any]) -> Config:
    """Read a Config from flat dotted keys or nested sections.

    Missing or unreadable values take the zero value of their type.
    """
    cfg = Config(
        evm=EVMConfig(tracer=""),
        json_rpc=JSONRPCConfig(
            api=[],
            address="",
            ws_address="",
            gas_cap=0,
            evm_timeout=timedelta(0),
            tx_fee_cap=0.0,
            filter_cap=0,
            fee_history_cap=0,
            enable=False,
        ),
        tls=TLSConfig(),
    )
    for section, attr, key, convert, zero in _FIELDS:
        raw = _lookup(values, key)
        value = zero
        if raw is not _MISSING and raw is not None:
            try:
                value = convert(raw)
            except (TypeError, ValueError):
                value = zero
        setattr(getattr(cfg, section), attr, value)
    return cfg


def parse_config(values: Mapping[str, Any]) -> Config:
    """Overlay the given values on the default configuration.

    Raises ConfigError when a present value cannot be converted.
    """
    cfg = default_config()
    for section, attr, key, convert, _zero in _FIELDS:
        raw = _lookup(values, key)
        if raw is _MISSING or raw is None:
            continue
        try:
            value = convert(raw)
        except (TypeError, ValueError) as err:
            raise ConfigError(f"cannot decode '{key}': {err}") from err
        setattr(getattr(cfg, section), attr, value)
    return cfg
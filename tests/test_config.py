from datetime import timedelta

import pytest

from plugrpc.config import (
    CONFIG_TEMPLATE,
    DEFAULT_GAS_CAP,
    DEFAULT_JSONRPC_ADDRESS,
    DEFAULT_JSONRPC_WS_ADDRESS,
    Config,
    ConfigError,
    EVMConfig,
    JSONRPCConfig,
    TLSConfig,
    app_config,
    default_config,
    default_evm_config,
    default_jsonrpc_config,
    default_tls_config,
    get_api_namespaces,
    get_config,
    get_default_api_namespaces,
    parse_config,
)


def test_default_config():
    cfg = default_config()
    assert cfg.json_rpc.enable is True
    assert cfg.json_rpc.address == DEFAULT_JSONRPC_ADDRESS
    assert cfg.json_rpc.ws_address == DEFAULT_JSONRPC_WS_ADDRESS


def test_default_addresses_pinned():
    cfg = default_config()
    assert cfg.json_rpc.address == "0.0.0.0:8545"
    assert cfg.json_rpc.ws_address == "0.0.0.0:8546"
    assert cfg.json_rpc.gas_cap == 25000000
    assert cfg.json_rpc.filter_cap == 200
    assert cfg.json_rpc.fee_history_cap == 100
    assert cfg.json_rpc.evm_timeout == timedelta(seconds=5)
    assert cfg.json_rpc.tx_fee_cap == 1.0


def test_default_sections():
    assert default_evm_config().tracer == ""
    assert default_tls_config() == TLSConfig("", "")
    assert default_jsonrpc_config().api == ["eth", "net", "web3", "rpc"]


def test_namespaces():
    assert get_default_api_namespaces() == ["eth", "net", "web3", "rpc"]
    assert get_api_namespaces() == [
        "web3", "eth", "personal", "net", "txpool", "debug", "miner", "rpc",
    ]
    assert set(get_default_api_namespaces()) <= set(get_api_namespaces())


def test_default_config_validates():
    default_config().validate_basic()
    assert default_config().json_rpc.enable


@pytest.mark.parametrize("tracer", ["", "json", "markdown", "struct", "access_list"])
def test_evm_valid_tracers(tracer):
    cfg = EVMConfig(tracer=tracer)
    cfg.validate()
    assert cfg.tracer == tracer


def test_evm_invalid_tracer():
    with pytest.raises(ConfigError, match="invalid tracer type bogus"):
        EVMConfig(tracer="bogus").validate()


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"api": []}, "without defining any API namespace"),
        ({"filter_cap": -1}, "filter-cap cannot be negative"),
        ({"fee_history_cap": 0}, "feehistory-cap cannot be negative or 0"),
        ({"tx_fee_cap": -0.5}, "tx fee cap cannot be negative"),
        ({"evm_timeout": timedelta(seconds=-1)}, "EVM timeout duration cannot be negative"),
        ({"api": ["eth", "eth"]}, "repeated API namespace 'eth'"),
    ],
)
def test_jsonrpc_invalid(kwargs, message):
    with pytest.raises(ConfigError, match=message):
        JSONRPCConfig(**kwargs).validate()


def test_jsonrpc_disabled_without_api_is_valid():
    cfg = JSONRPCConfig(api=[], enable=False)
    cfg.validate()
    assert cfg.api == []


def test_tls_validation():
    TLSConfig(certificate_path="/etc/cert.pem", key_path="key.pem").validate()
    with pytest.raises(ConfigError, match="expected '.pem'"):
        TLSConfig(certificate_path="/etc/cert.crt").validate()
    with pytest.raises(ConfigError, match="for key path key"):
        TLSConfig(key_path="key").validate()


def test_validate_basic_wraps_section_errors():
    cfg = default_config()
    cfg.tls.key_path = "key.txt"
    with pytest.raises(ConfigError, match="invalid tls config value"):
        cfg.validate_basic()
    cfg = default_config()
    cfg.evm.tracer = "nope"
    with pytest.raises(ConfigError, match="invalid evm config value"):
        cfg.validate_basic()
    cfg = default_config()
    cfg.json_rpc.api = []
    with pytest.raises(ConfigError, match="invalid json-rpc config value"):
        cfg.validate_basic()


def test_render_default():
    text = default_config().render()
    assert 'tracer = ""' in text
    assert "enable = true" in text
    assert 'address = "0.0.0.0:8545"' in text
    assert 'ws-address = "0.0.0.0:8546"' in text
    assert 'api = "eth,net,web3,rpc"' in text
    assert f"gas-cap = {DEFAULT_GAS_CAP}" in text
    assert 'evm-timeout = "5s"' in text
    assert "filter-cap = 200" in text
    assert "feehistory-cap = 100" in text


def test_render_custom_values():
    cfg = Config(
        evm=EVMConfig(tracer="json"),
        json_rpc=JSONRPCConfig(enable=False, tx_fee_cap=0.5),
        tls=TLSConfig(certificate_path="cert.pem", key_path="key.pem"),
    )
    text = cfg.render()
    assert 'tracer = "json"' in text
    assert "enable = false" in text
    assert "txfee-cap = 0.5" in text
    assert 'certificate-path = "cert.pem"' in text
    assert 'key-path = "key.pem"' in text


def test_app_config():
    template, cfg = app_config("uplugcn")
    assert template == CONFIG_TEMPLATE
    assert cfg.min_gas_prices == "0.0001uplugcn"
    _, empty = app_config("")
    assert empty.min_gas_prices == ""


def test_get_config_nested():
    cfg = get_config(
        {
            "evm": {"tracer": "struct"},
            "json-rpc": {
                "enable": "true",
                "api": "eth,net",
                "address": "127.0.0.1:8545",
                "evm-timeout": "10s",
                "gas-cap": 100,
                "txfee-cap": "2.5",
            },
            "tls": {"certificate-path": "c.pem"},
        }
    )
    assert cfg.evm.tracer == "struct"
    assert cfg.json_rpc.enable is True
    assert cfg.json_rpc.api == ["eth", "net"]
    assert cfg.json_rpc.address == "127.0.0.1:8545"
    assert cfg.json_rpc.evm_timeout == timedelta(seconds=10)
    assert cfg.json_rpc.gas_cap == 100
    assert cfg.json_rpc.tx_fee_cap == 2.5
    assert cfg.tls.certificate_path == "c.pem"


def test_get_config_missing_values_are_zero():
    cfg = get_config({"json-rpc.enable": True})
    assert cfg.json_rpc.enable is True
    assert cfg.json_rpc.address == ""
    assert cfg.json_rpc.api == []
    assert cfg.json_rpc.fee_history_cap == 0
    assert cfg.json_rpc.evm_timeout == timedelta(0)


def test_get_config_bad_value_is_zero():
    cfg = get_config({"json-rpc.gas-cap": "lots"})
    assert cfg.json_rpc.gas_cap == 0


def test_parse_config_overlays_defaults():
    cfg = parse_config({"json-rpc.address": "127.0.0.1:9000", "json-rpc.evm-timeout": "1m30s"})
    assert cfg.json_rpc.address == "127.0.0.1:9000"
    assert cfg.json_rpc.evm_timeout == timedelta(seconds=90)
    assert cfg.json_rpc.ws_address == DEFAULT_JSONRPC_WS_ADDRESS


def test_parse_config_bad_value_raises():
    with pytest.raises(ConfigError):
        parse_config({"json-rpc": {"enable": "maybe"}})


def test_duration_render_round_trip():
    cfg = default_config()
    cfg.json_rpc.evm_timeout = timedelta(minutes=1, seconds=30)
    text = cfg.render()
    line = next(l for l in text.splitlines() if l.startswith("evm-timeout"))
    value = line.split("=", 1)[1].strip().strip('"')
    assert parse_config({"json-rpc.evm-timeout": value}).json_rpc.evm_timeout == timedelta(seconds=90)
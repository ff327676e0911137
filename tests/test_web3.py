import pytest

from plugrpc.web3 import Web3API

EMPTY_KECCAK = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_sha3_of_empty_input():
    assert Web3API().sha3(b"").hex() == EMPTY_KECCAK


def test_sha3_accepts_hex_string():
    api = Web3API()
    assert api.sha3("0x68656c6c6f") == api.sha3(b"hello")
    assert api.sha3("0x").hex() == EMPTY_KECCAK


def test_sha3_length_and_distinct():
    api = Web3API()
    assert len(api.sha3(b"a")) == 32
    assert api.sha3(b"a") != api.sha3(b"b")


@pytest.mark.parametrize("bad", ["abcd", "0xabc", "0xzz"])
def test_sha3_rejects_bad_hex(bad):
    with pytest.raises(ValueError):
        Web3API().sha3(bad)


def test_client_version_default():
    version = Web3API().client_version()
    assert version.startswith("plugchaind/")
    assert "/python" in version


def test_client_version_custom():
    version = Web3API("myapp", "abc123").client_version()
    assert version.split("/")[:2] == ["myapp", "abc123"]
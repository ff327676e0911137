from plugrpc.txpool import TxPoolAPI


def test_content_is_empty():
    assert TxPoolAPI().content() == {"pending": {}, "queued": {}}


def test_inspect_is_empty():
    assert TxPoolAPI().inspect() == {"pending": {}, "queued": {}}


def test_status_counts_are_zero():
    assert TxPoolAPI().status() == {"pending": "0x0", "queued": "0x0"}


def test_content_returns_fresh_maps():
    api = TxPoolAPI()
    first = api.content()
    first["pending"]["0xabc"] = {}
    assert api.content()["pending"] == {}
import json

import pytest
import trio

from lnd_credentials import config
from lnd_credentials.errors import LoaderFailed
from lnd_credentials.nodes import NodeProfile, NodeStore


def save(data_dir, name, data):
    node_dir = data_dir / name
    node_dir.mkdir(parents=True)
    (node_dir / "credentials.json").write_text(json.dumps(data))


@pytest.fixture
def store(tmp_path):
    save(tmp_path, "alice", {"cert": "Y2VydA==", "macaroon": "bWFj", "socket": "a:10009"})
    save(
        tmp_path,
        "bob",
        {"cert": "Y2VydA==", "encrypted_macaroon": "c1f3", "socket": "b:10009"},
    )
    (tmp_path / "empty").mkdir()
    return NodeStore(tmp_path)


def test_get(store):
    alice = trio.run(store.get, "alice")
    assert alice == NodeProfile("alice", cert="Y2VydA==", macaroon="bWFj", socket="a:10009")
    assert not alice.encrypted


def test_get_encrypted(store):
    bob = trio.run(store.get, "bob")
    assert bob.encrypted
    assert bob.macaroon is None
    assert bob.encrypted_macaroon == "c1f3"
    assert "encrypted: True" in str(bob)


@pytest.mark.parametrize("name", ["carol", "empty", "", "..", "../alice", "alice/.."])
def test_get_missing(store, name):
    assert trio.run(store.get, name) is None


def test_get_malformed_json(store, tmp_path):
    (tmp_path / "carol").mkdir()
    (tmp_path / "carol" / "credentials.json").write_text("{not json")
    with pytest.raises(LoaderFailed) as excinfo:
        trio.run(store.get, "carol")
    assert excinfo.value.details == {"node": "carol"}


def test_get_without_macaroon(store, tmp_path):
    save(tmp_path, "dave", {"cert": "Y2VydA==", "socket": "d:10009"})
    with pytest.raises(LoaderFailed, match="macaroon"):
        trio.run(store.get, "dave")


def test_names(store):
    assert trio.run(store.names) == ["alice", "bob"]


def test_names_without_data_dir(tmp_path):
    assert trio.run(NodeStore(tmp_path / "missing").names) == []


def test_default_data_dir(monkeypatch, tmp_path):
    monkeypatch.setitem(config.user["nodes"], "DATA_DIR", str(tmp_path))
    assert NodeStore().data_dir == tmp_path

#!/usr/bin/env python3
"""Unit tests for ChannelRegistry and ClientStream."""

import pytest

from proxy import ChannelRegistry, ClientStream
from transport import JsonStream
from test_helpers import MockUART


def make_registry():
    return ChannelRegistry([
        ClientStream(0, "local", JsonStream(MockUART(), name="local")),
        ClientStream(1, "remote-A", JsonStream(MockUART(), name="remote-A")),
    ])


def test_resolve_configured_ids():
    registry = make_registry()

    assert registry.resolve(0).name == "local"
    assert registry.resolve(1).name == "remote-A"
    assert len(registry) == 2
    assert registry.ids() == [0, 1]
    assert 1 in registry
    print("✓ Registry resolve test passed")


def test_resolve_unknown_ids_returns_none():
    registry = make_registry()

    for channel_id in (2, 9, -1, 255, 10 ** 9):
        assert registry.resolve(channel_id) is None


def test_resolve_never_raises_on_odd_ids():
    registry = make_registry()

    for channel_id in ("1", 1.0, None, [1], True, False):
        assert registry.resolve(channel_id) is None


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        ChannelRegistry([ClientStream(1, "a", None), ClientStream(1, "b", None)])


def test_capacity_is_fixed():
    streams = [ClientStream(i, f"s{i}", None) for i in range(3)]
    with pytest.raises(ValueError, match="slots"):
        ChannelRegistry(streams, capacity=2)

    registry = ChannelRegistry(streams[:2], capacity=2)
    assert registry.capacity == 2
    print("✓ Registry capacity test passed")


@pytest.mark.parametrize("bad_id", [-1, "1", 1.5, None, True])
def test_client_stream_id_validation(bad_id):
    with pytest.raises(ValueError):
        ClientStream(bad_id, "bad", None)


def test_from_config_pairs_entries_with_streams():
    streams = [JsonStream(MockUART()), JsonStream(MockUART())]
    registry = ChannelRegistry.from_config(
        [{"id": 3, "name": "serial1"}, {"id": 5}],
        streams,
    )

    assert registry.resolve(3).stream is streams[0]
    assert registry.resolve(5).name == "stream5"


def test_from_config_rejects_mismatch_and_missing_id():
    with pytest.raises(ValueError):
        ChannelRegistry.from_config([{"id": 1}], [])
    with pytest.raises(ValueError, match="missing 'id'"):
        ChannelRegistry.from_config([{"name": "x"}], [None])


def test_info_reports_stream_state():
    registry = make_registry()
    registry.resolve(1).stream.write(["ping"])

    info = registry.info()

    assert [entry["id"] for entry in info] == [0, 1]
    assert info[0]["frames_written"] == 0
    assert info[0]["idle_ms"] is None
    assert info[1]["frames_written"] == 1
    assert info[1]["pending_bytes"] == len(b'["ping"]\n')
    assert info[1]["idle_ms"] >= 0


def test_info_for_unavailable_stream():
    registry = ChannelRegistry([ClientStream(4, "spare", None)])
    assert registry.info() == [{
        "id": 4,
        "name": "spare",
        "pending_bytes": 0,
        "frames_written": 0,
        "frames_dropped": 0,
        "idle_ms": None,
    }]

from __future__ import annotations

import dataclasses
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from config_server.domain.config import PORT_MAX, PORT_MIN, ServerConfig
from config_server.domain.errors import InvalidFormat


def test_from_mapping_ignores_extra_fields() -> None:
    config = ServerConfig.from_mapping({"message": "hello", "port": 8080, "debug": True, "nested": {"a": 1}})
    assert config == ServerConfig(message="hello", port=8080)


@pytest.mark.parametrize(
    ("payload", "detail"),
    [
        ({"port": 8080}, "missing field `message`"),
        ({"message": "hi"}, "missing field `port`"),
        ({"message": 42, "port": 8080}, "field `message` must be a string"),
        ({"message": "\ud800", "port": 8080}, "field `message` is not valid UTF-8"),
        ({"message": "ok \udfff", "port": 8080}, "field `message` is not valid UTF-8"),
        ({"message": "hi", "port": "8080"}, "field `port` must be an integer"),
        ({"message": "hi", "port": 80.0}, "field `port` must be an integer"),
        ({"message": "hi", "port": True}, "field `port` must be an integer"),
        ({"message": "hi", "port": None}, "field `port` must be an integer"),
        ({"message": "hi", "port": -1}, "out of range"),
        ({"message": "hi", "port": 65536}, "out of range"),
    ],
)
def test_from_mapping_rejects_malformed_shapes(payload, detail) -> None:
    with pytest.raises(InvalidFormat, match=detail):
        ServerConfig.from_mapping(payload)


@given(st.text(), st.integers(min_value=PORT_MIN, max_value=PORT_MAX))
def test_from_mapping_accepts_every_valid_port_and_message(message, port) -> None:
    config = ServerConfig.from_mapping({"message": message, "port": port})
    assert config.message == message
    assert config.port == port


def test_config_is_frozen() -> None:
    config = ServerConfig(message="hello", port=8080)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.message = "changed"  # type: ignore[misc]


def test_to_json_round_trips_through_json_module() -> None:
    config = ServerConfig(message="grüße\n", port=1)
    assert json.loads(config.to_json()) == {"message": "grüße\n", "port": 1}
    assert config.to_json(indent=2).startswith("{\n")

import pytest

from houdini_livelink_python.config import (
    DEFAULT_SUBJECT_NAME,
    FALLBACK_UPDATE_PERIOD,
    SourceConfig,
    parse_endpoint,
)
from houdini_livelink_python.errors import EndpointParseError


def test_defaults():
    config = SourceConfig()
    assert config.endpoint == "127.0.0.1:8010"
    assert config.url == "http://127.0.0.1:8010"
    assert config.subject_name == DEFAULT_SUBJECT_NAME
    assert config.transport == "udp"


def test_update_period():
    assert SourceConfig(refresh_rate=50.0).update_period == pytest.approx(0.02)
    assert SourceConfig(refresh_rate=0.0).update_period == FALLBACK_UPDATE_PERIOD
    assert SourceConfig(refresh_rate=-5.0).update_period == FALLBACK_UPDATE_PERIOD


def test_empty_subject_falls_back_to_default():
    assert SourceConfig(subject_name="").subject_name == DEFAULT_SUBJECT_NAME


def test_unknown_transport():
    with pytest.raises(ValueError):
        SourceConfig(transport="tcp")


@pytest.mark.parametrize("text, expected", [
    ("127.0.0.1:8010", ("127.0.0.1", 8010)),
    ("houdini-box:9000", ("houdini-box", 9000)),
    (" 10.0.0.2:0 ", ("10.0.0.2", 0)),
])
def test_parse_endpoint(text, expected):
    assert parse_endpoint(text) == expected


@pytest.mark.parametrize("text", ["127.0.0.1", ":8010", "127.0.0.1:port", "127.0.0.1:70000", ""])
def test_parse_endpoint_rejects(text):
    with pytest.raises(EndpointParseError):
        parse_endpoint(text)


def test_from_connection_string():
    config = SourceConfig.from_connection_string("192.168.1.4:8011", refresh_rate=30.0, transport="http")
    assert (config.host, config.port) == ("192.168.1.4", 8011)
    assert config.update_period == pytest.approx(1 / 30.0)
    assert config.url == "http://192.168.1.4:8011"

"""Unit tests for relayping.directory.relay_directory."""

import pytest
import requests

from relayping.core.config import DirectoryConfig
from relayping.core.models import RelayRecord
from relayping.directory.relay_directory import DirectoryError, RelayDirectory, list_countries

RELAY_JSON = {
    "hostname": "ch-zrh-wg-001",
    "country_code": "ch",
    "country_name": "Switzerland",
    "city_code": "zrh",
    "city_name": "Zurich",
    "active": True,
    "owned": True,
    "provider": "M247",
    "ipv4_addr_in": "193.32.127.66",
    "ipv6_addr_in": "2a03:1b20:5:f011::a01f",
    "network_port_speed": 10,
    "stboot": True,
    "type": "wireguard",
    "pubkey": "ignored",
}


class FakeResponse:
    def __init__(self, payload=None, status=200, error=None):
        self.payload = payload
        self.status_code = status
        self.error = error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.error:
            raise self.error
        return self.payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        if self.exc:
            raise self.exc
        return self.response


class TestRelayRecord:

    def test_from_dict(self):
        relay = RelayRecord.from_dict(RELAY_JSON)
        assert relay.hostname == "ch-zrh-wg-001"
        assert relay.ipv4_addr_in == "193.32.127.66"
        assert relay.network_port_speed == 10
        assert relay.stboot is True

    def test_optional_fields_default(self):
        relay = RelayRecord.from_dict({"hostname": "x", "ipv4_addr_in": "10.0.0.1",
                                       "ipv6_addr_in": None, "network_port_speed": None})
        assert relay.ipv6_addr_in == ""
        assert relay.network_port_speed == 0
        assert relay.owned is False

    def test_missing_required_field(self):
        with pytest.raises(ValueError, match="ipv4_addr_in"):
            RelayRecord.from_dict({"hostname": "x"})


class TestRelayDirectory:

    def test_fetch(self):
        session = FakeSession(FakeResponse([RELAY_JSON, dict(RELAY_JSON, hostname="b")]))
        directory = RelayDirectory(DirectoryConfig(timeout=3.0), session=session)

        relays = directory.fetch("wireguard")

        assert [r.hostname for r in relays] == ["ch-zrh-wg-001", "b"]
        assert session.requests == [("https://api.mullvad.net/www/relays/wireguard/", 3.0)]

    def test_default_type_and_trailing_slash(self):
        session = FakeSession(FakeResponse([]))
        config = DirectoryConfig(url="http://localhost:8080/relays/", relay_type="openvpn")
        assert RelayDirectory(config, session=session).fetch() == []
        assert session.requests[0][0] == "http://localhost:8080/relays/openvpn/"

    def test_http_error(self):
        session = FakeSession(FakeResponse(status=503))
        with pytest.raises(DirectoryError, match="503"):
            RelayDirectory(DirectoryConfig(), session=session).fetch()

    def test_connection_error(self):
        session = FakeSession(exc=requests.ConnectionError("refused"))
        with pytest.raises(DirectoryError, match="refused"):
            RelayDirectory(DirectoryConfig(), session=session).fetch()

    def test_invalid_json(self):
        session = FakeSession(FakeResponse(error=ValueError("Expecting value")))
        with pytest.raises(DirectoryError, match="invalid JSON"):
            RelayDirectory(DirectoryConfig(), session=session).fetch()

    def test_unexpected_payload(self):
        session = FakeSession(FakeResponse({"relays": []}))
        with pytest.raises(DirectoryError):
            RelayDirectory(DirectoryConfig(), session=session).fetch()

    def test_malformed_entry(self):
        session = FakeSession(FakeResponse([{"hostname": "x"}]))
        with pytest.raises(DirectoryError, match="Malformed"):
            RelayDirectory(DirectoryConfig(), session=session).fetch()


def test_list_countries(catalog):
    assert list_countries(catalog) == ["ch - Switzerland", "de - Germany", "se - Sweden"]

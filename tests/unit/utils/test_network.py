"""Tests for the network utility module."""
from unittest.mock import Mock

from app.utils.network import append_forwarded_for, get_client_ip


def _request(headers=None, host="10.0.0.1"):
    request = Mock()
    request.headers = headers or {}
    request.client = Mock(host=host) if host is not None else None
    return request


class TestGetClientIP:
    """Tests for get_client_ip()."""

    def test_first_x_forwarded_for_entry_wins(self):
        request = _request({"X-Forwarded-For": "  203.0.113.50 , 70.41.3.18"})
        assert get_client_ip(request) == "203.0.113.50"

    def test_falls_back_to_x_real_ip(self):
        request = _request({"X-Real-IP": " 198.51.100.23 "})
        assert get_client_ip(request) == "198.51.100.23"

    def test_falls_back_to_peer_address(self):
        assert get_client_ip(_request(host="192.168.1.5")) == "192.168.1.5"

    def test_unknown_without_client(self):
        assert get_client_ip(_request(host=None)) == "unknown"


class TestAppendForwardedFor:
    """Tests for append_forwarded_for()."""

    def test_starts_chain_with_peer(self):
        assert append_forwarded_for(_request(host="172.18.0.4")) == "172.18.0.4"

    def test_appends_peer_to_existing_chain(self):
        request = _request({"X-Forwarded-For": "203.0.113.50"}, host="172.18.0.4")
        assert append_forwarded_for(request) == "203.0.113.50, 172.18.0.4"

    def test_unknown_peer(self):
        assert append_forwarded_for(_request(host=None)) == "unknown"

# ruff: noqa: S101
"""Tests for the DN and network helpers."""

from __future__ import annotations

import socket

import pytest

from ou_audit.utils import looks_like_ip, tcp_probe
from ou_audit.utils.dn import dn_first_component_value, unescape_rdn_value


@pytest.mark.parametrize(
    ("dn", "expected"),
    [
        ("OU=Sales,DC=corp,DC=local", "Sales"),
        ("OU=Sales\\, East,DC=corp,DC=local", "Sales, East"),
        ("OU=\\D0\\9F\\D1\\80\\D0\\BE\\D0\\B4\\D0\\B0\\D0\\B6\\D0\\B8,DC=corp,DC=local", "Продажи"),
        ("", ""),
    ],
)
def test_dn_first_component_value(dn: str, expected: str) -> None:
    assert dn_first_component_value(dn) == expected


def test_unescape_keeps_plain_text() -> None:
    assert unescape_rdn_value("R&D \\28EU\\29") == "R&D (EU)"


def test_looks_like_ip() -> None:
    assert looks_like_ip("10.0.0.5")
    assert looks_like_ip("fe80::1")
    assert not looks_like_ip("dc01.corp.local")


def test_tcp_probe_reports_closed_port() -> None:
    # bind without listen: connection is refused immediately
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
        assert tcp_probe("127.0.0.1", port, 0.5) is False


def test_tcp_probe_reports_open_port() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(1)
        assert tcp_probe("127.0.0.1", s.getsockname()[1], 0.5) is True

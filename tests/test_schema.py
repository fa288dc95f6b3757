# ruff: noqa: S101
"""Tests for run parameter validation."""

from __future__ import annotations

import pytest

from ou_audit.errors import ConfigurationError
from ou_audit.schema import build_params


def test_local_run_needs_only_ou_name() -> None:
    params = build_params(ou_name="  Sales ")

    assert params.ou_name == "Sales"
    assert not params.is_remote


def test_remote_domain_without_ip_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        build_params(ou_name="Sales", remote_domain="corp.local")


@pytest.mark.parametrize("ip", ["999.999.1.1", "10.0.0", "dc01", "fe80::zz"])
def test_malformed_ip_is_rejected(ip: str) -> None:
    with pytest.raises(ConfigurationError):
        build_params(ou_name="Sales", remote_domain="corp.local", remote_dc_ip=ip)


@pytest.mark.parametrize(("ip", "normalized"), [("10.0.0.5", "10.0.0.5"), ("FE80::1", "fe80::1")])
def test_valid_ipv4_and_ipv6_are_accepted(ip: str, normalized: str) -> None:
    params = build_params(ou_name="Sales", remote_domain="Corp.Local.", remote_dc_ip=ip)

    assert params.is_remote
    assert params.remote_domain == "corp.local"
    assert params.remote_dc_ip == normalized


@pytest.mark.parametrize("domain", ["corp..local", "bad_domain.local", "-corp.local"])
def test_bad_domain_name_is_rejected(domain: str) -> None:
    with pytest.raises(ConfigurationError):
        build_params(ou_name="Sales", remote_domain=domain, remote_dc_ip="10.0.0.5")


def test_empty_ou_name_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        build_params(ou_name="   ")

# ruff: noqa: S101
"""End-to-end tests for the command line entry point with a fake directory."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from ou_audit.cli import build_parser, main

from .factories import FakeDirectory, ProbeRecorder, sales_ou


@pytest.fixture
def local_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OU_AUDIT_DC_HOST", "dc01.corp.local")
    monkeypatch.setenv("OU_AUDIT_DOMAIN", "corp.local")


def test_parser_accepts_remote_options() -> None:
    args = build_parser().parse_args(["Sales*", "-d", "corp.local", "-i", "10.0.0.5", "-e", "--xlsx"])

    assert args.ou_name == "Sales*"
    assert (args.remote_domain, args.remote_dc_ip) == ("corp.local", "10.0.0.5")
    assert args.export and args.xlsx


@pytest.mark.usefixtures("local_env")
def test_local_run_prints_findings_and_exits_zero() -> None:
    directory = FakeDirectory([sales_ou()])
    out = io.StringIO()

    code = main(["Sales"], directory_factory=lambda cfg: directory, stdout=out)

    assert code == 0
    assert directory.calls == ["open", "iter:Sales", "close"]
    assert "DOMAIN\\Helpdesk" in out.getvalue()


@pytest.mark.usefixtures("local_env")
def test_export_writes_csv_into_output_dir(tmp_path: Path) -> None:
    code = main(
        ["Sales", "-e", "-o", str(tmp_path)],
        directory_factory=lambda cfg: FakeDirectory([sales_ou()]),
        stdout=io.StringIO(),
    )

    assert code == 0
    assert len(list(tmp_path.glob("OU_ACE_Audit_*.csv"))) == 1


def test_unreachable_remote_controller_exits_nonzero(tmp_path: Path) -> None:
    directory = FakeDirectory([sales_ou()])

    code = main(
        ["Sales", "-d", "corp.local", "-i", "10.0.0.5", "-u", "auditor", "-e", "-o", str(tmp_path)],
        directory_factory=lambda cfg: directory,
        probe=ProbeRecorder(result=False),
        stdout=io.StringIO(),
    )

    assert code == 1
    assert directory.calls == []
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "argv",
    [
        ["Sales", "-d", "corp.local"],
        ["Sales", "-d", "corp.local", "-i", "999.999.1.1"],
    ],
)
def test_bad_remote_parameters_fail_before_any_network_attempt(argv: list[str]) -> None:
    probe = ProbeRecorder()
    created: list[FakeDirectory] = []

    def factory(cfg) -> FakeDirectory:
        created.append(FakeDirectory([sales_ou()]))
        return created[-1]

    code = main(argv, directory_factory=factory, probe=probe, stdout=io.StringIO())

    assert code == 1
    assert probe.calls == []
    assert created == []


@pytest.mark.usefixtures("local_env")
def test_directory_failure_exits_nonzero_without_report() -> None:
    out = io.StringIO()

    code = main(
        ["*"],
        directory_factory=lambda cfg: FakeDirectory([sales_ou(), sales_ou()], fail_after=1),
        stdout=out,
    )

    assert code == 1
    assert out.getvalue() == ""

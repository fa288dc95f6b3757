from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Protocol

from ..ad.models import Credentials
from ..classifier import classify
from ..env_settings import EnvSettings, get_env
from ..errors import ConnectivityError
from ..models import AuditFinding, OrganizationalUnit
from ..schema import AuditParams
from ..utils.tcp_probe import tcp_probe


class Directory(Protocol):
    def open(self, credentials: Optional[Credentials] = None) -> None: ...

    def close(self) -> None: ...

    def iter_organizational_units(self, name_pattern: str) -> Iterable[OrganizationalUnit]: ...


@dataclass
class AuditReport:
    ou_name: str
    findings: list[AuditFinding] = field(default_factory=list)
    ou_count: int = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)


def preflight_check(
    host: str,
    port: int,
    timeout_s: float,
    *,
    log: logging.Logger,
    probe: Callable[[str, int, float], bool] = tcp_probe,
) -> None:
    """TCP reachability of the DC on the LDAPS port; raises ConnectivityError."""
    log.info("Проверка доступности %s:%s (таймаут %.1f с)", host, port, timeout_s)
    if not probe(host, port, timeout_s):
        raise ConnectivityError(
            f"Контроллер домена {host} недоступен на порту {port} (таймаут {timeout_s:.1f} с)."
        )


def run_audit(
    params: AuditParams,
    directory: Directory,
    *,
    log: logging.Logger,
    credential_provider: Callable[[], Optional[Credentials]] | None = None,
    probe: Callable[[str, int, float], bool] = tcp_probe,
    env: EnvSettings | None = None,
) -> AuditReport:
    """Run one audit pass: preflight (remote only), bind, enumerate, classify.

    Strictly sequential. Any error propagates and the findings gathered so far
    are dropped together with the report.
    """
    env = env or get_env()
    report = AuditReport(ou_name=params.ou_name)

    credentials: Optional[Credentials] = None
    if params.is_remote:
        preflight_check(params.remote_dc_ip, env.ldaps_port, env.probe_timeout_s, log=log, probe=probe)
        if credential_provider is not None:
            credentials = credential_provider()

    directory.open(credentials)
    # Учётные данные больше не нужны после bind
    credentials = None
    try:
        for ou in directory.iter_organizational_units(params.ou_name):
            report.ou_count += 1
            found = classify(ou)
            log.debug("%s: записей ACE=%d, находок=%d", ou.distinguished_name, len(ou.access_entries), len(found))
            report.findings.extend(found)
    finally:
        directory.close()

    report.finished_at = datetime.now(timezone.utc)
    log.info("Проверено OU: %d, находок: %d", report.ou_count, len(report.findings))
    return report

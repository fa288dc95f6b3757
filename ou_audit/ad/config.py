from __future__ import annotations

import logging

from ..env_settings import EnvSettings
from ..errors import ConfigurationError, ConnectivityError
from ..schema import AuditParams
from ..utils.net import discover_domain_controllers
from .models import ADConfig

log = logging.getLogger(__name__)


def resolve_dc_config(params: AuditParams, env: EnvSettings) -> ADConfig:
    """Build ADConfig for the run.

    Remote mode: the DC given by IP, LDAPS.
    Current context: OU_AUDIT_DC_HOST, otherwise the first DC from DNS SRV
    records of the caller's domain.
    """
    common = dict(
        port=env.ldaps_port,
        use_ssl=True,
        tls_validate=env.tls_validate,
        connect_timeout_s=env.connect_timeout_s,
        page_size=env.page_size,
    )

    if params.is_remote:
        return ADConfig(host=params.remote_dc_ip, domain=params.remote_domain, **common)

    domain = env.default_domain
    host = (env.dc_host or "").strip()
    if not host:
        if not domain:
            raise ConfigurationError(
                "Не удалось определить домен: задайте OU_AUDIT_DOMAIN/OU_AUDIT_DC_HOST "
                "или используйте удалённый домен (--remote-domain)."
            )
        dcs = discover_domain_controllers(domain, env.dns_server)
        if not dcs:
            raise ConnectivityError(f"Контроллер домена для '{domain}' не найден в DNS.")
        host = dcs[0]
        log.debug("Найден контроллер домена через DNS: %s", host)

    return ADConfig(host=host, domain=domain, **common)

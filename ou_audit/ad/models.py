from __future__ import annotations

from dataclasses import dataclass, field

from .utils import domain_to_base_dn, ntlm_principal


@dataclass
class ADConfig:
    host: str
    domain: str
    port: int = 636
    use_ssl: bool = True
    tls_validate: bool = False
    connect_timeout_s: float = 5.0
    page_size: int = 500

    @property
    def base_dn(self) -> str:
        return domain_to_base_dn(self.domain)


@dataclass
class Credentials:
    """Explicit bind credentials; kept in memory only for the bind."""

    username: str
    password: str = field(repr=False)
    domain: str = ""

    @property
    def bind_principal(self) -> str:
        return ntlm_principal(self.username, self.domain)

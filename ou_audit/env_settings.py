from functools import lru_cache

from pydantic_settings import BaseSettings
from pydantic import Field


class EnvSettings(BaseSettings):
    # Контроллер домена для текущего контекста безопасности (Kerberos)
    dc_host: str = Field("", alias="OU_AUDIT_DC_HOST")
    domain: str = Field("", alias="OU_AUDIT_DOMAIN")
    user_dns_domain: str = Field("", alias="USERDNSDOMAIN")
    dns_server: str = Field("", alias="OU_AUDIT_DNS_SERVER")

    ldaps_port: int = Field(636, alias="OU_AUDIT_LDAPS_PORT")
    tls_validate: bool = Field(False, alias="OU_AUDIT_TLS_VALIDATE")
    probe_timeout_s: float = Field(1.0, alias="OU_AUDIT_PROBE_TIMEOUT_S")
    connect_timeout_s: float = Field(5.0, alias="OU_AUDIT_CONNECT_TIMEOUT_S")
    page_size: int = Field(500, alias="OU_AUDIT_PAGE_SIZE")

    export_dir: str = Field("", alias="OU_AUDIT_EXPORT_DIR")
    log_level: str = Field("INFO", alias="OU_AUDIT_LOG_LEVEL")
    log_file: str = Field("", alias="OU_AUDIT_LOG_FILE")

    class Config:
        populate_by_name = True

    @property
    def default_domain(self) -> str:
        return (self.domain or self.user_dns_domain or "").strip().strip(".").lower()


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()

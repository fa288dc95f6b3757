from __future__ import annotations

import ipaddress
import re

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError


class AuditParams(BaseModel):
    """Validated run parameters (CLI input)."""

    ou_name: str = Field(min_length=1, max_length=256)
    remote_domain: str = Field(default="", max_length=255)
    remote_dc_ip: str = Field(default="")
    export_csv: bool = Field(default=False)
    export_xlsx: bool = Field(default=False)
    output_dir: str = Field(default="")

    @field_validator("ou_name", "remote_domain", "remote_dc_ip", "output_dir")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("ou_name")
    @classmethod
    def _validate_ou_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Имя OU не должно быть пустым.")
        return v

    @field_validator("remote_domain")
    @classmethod
    def _validate_domain(cls, v: str) -> str:
        s = (v or "").strip().strip(".").lower()
        if not s:
            return s
        for lab in s.split("."):
            if not re.fullmatch(r"[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?", lab):
                raise ValueError(f"Некорректное имя домена: недопустимая часть '{lab}'.")
        return s

    @field_validator("remote_dc_ip")
    @classmethod
    def _validate_ip(cls, v: str) -> str:
        if not v:
            return v
        try:
            return str(ipaddress.ip_address(v))
        except ValueError:
            raise ValueError(f"'{v}' не является корректным IPv4/IPv6 адресом.") from None

    @model_validator(mode="after")
    def _remote_requires_ip(self) -> "AuditParams":
        if self.remote_domain and not self.remote_dc_ip:
            raise ValueError("Для удалённого домена необходимо указать IP контроллера домена.")
        return self

    @property
    def is_remote(self) -> bool:
        return bool(self.remote_domain)


def build_params(**kwargs) -> AuditParams:
    """Validate raw parameters; any problem becomes a ConfigurationError."""
    try:
        return AuditParams(**kwargs)
    except ValidationError as e:
        msgs = [str(err.get("msg", "")).removeprefix("Value error, ") for err in e.errors()]
        raise ConfigurationError("; ".join(m for m in msgs if m) or str(e)) from e

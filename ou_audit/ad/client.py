from __future__ import annotations

import logging
import ssl
from dataclasses import replace
from typing import Any, Iterator, Optional

from ldap3 import (
    Server,
    Connection,
    ALL,
    LEVEL,
    NTLM,
    SASL,
    KERBEROS,
    SUBTREE,
    Tls,
)
from ldap3.core.exceptions import LDAPException, LDAPSocketOpenError
from ldap3.protocol.microsoft import security_descriptor_control

from ..errors import AuthenticationError, ConnectivityError, DirectoryQueryError
from ..models import OrganizationalUnit
from .descriptor import SD_FLAGS_OWNER_DACL, parse_security_descriptor
from .models import ADConfig, Credentials
from .sids import SidResolver
from .utils import build_ou_filter, escape_ldap_filter_value, guess_netbios

log = logging.getLogger(__name__)

_OU_ATTRIBUTES = ["distinguishedName", "name", "nTSecurityDescriptor"]


def _first_raw(entry: dict, name: str) -> Optional[bytes]:
    raw = entry.get("raw_attributes") or {}
    values = raw.get(name)
    if values is None:
        key = name.lower()
        for k, v in raw.items():
            if k.lower() == key:
                values = v
                break
    if not values:
        return None
    return values[0] if isinstance(values, list) else values


def _root_dse_value(server: Server, name: str) -> str:
    info = getattr(server, "info", None)
    other = getattr(info, "other", None) or {}
    v = other.get(name)
    if isinstance(v, list):
        v = v[0] if v else ""
    return str(v or "")


class ADClient:
    """Read-only LDAP session used to enumerate OUs with their security descriptors.

    One instance = one bind. Use as a context manager or call open()/close().
    """

    def __init__(self, cfg: ADConfig) -> None:
        self.cfg = cfg

        tls = Tls(validate=ssl.CERT_REQUIRED if cfg.tls_validate else ssl.CERT_NONE)

        self.server = Server(
            host=cfg.host,
            port=cfg.port,
            use_ssl=cfg.use_ssl,
            get_info=ALL,
            tls=tls,
            connect_timeout=float(cfg.connect_timeout_s),
        )
        self.conn: Connection | None = None
        self.base_dn = ""
        self.sids: SidResolver | None = None

    def __enter__(self) -> "ADClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _connection(self, credentials: Credentials | None) -> Connection:
        if credentials is None:
            # Текущий контекст безопасности: Kerberos из кеша билетов вызывающего
            return Connection(
                self.server,
                authentication=SASL,
                sasl_mechanism=KERBEROS,
                auto_bind=False,
                read_only=True,
                receive_timeout=int(self.cfg.connect_timeout_s * 6),
            )
        return Connection(
            self.server,
            user=credentials.bind_principal,
            password=credentials.password,
            authentication=NTLM,
            auto_bind=False,
            read_only=True,
            receive_timeout=int(self.cfg.connect_timeout_s * 6),
        )

    def open(self, credentials: Credentials | None = None) -> None:
        """Connect and bind. Raises ConnectivityError / AuthenticationError."""
        conn = self._connection(credentials)
        try:
            conn.open()
        except LDAPSocketOpenError as e:
            raise ConnectivityError(f"Не удалось подключиться к {self.cfg.host}:{self.cfg.port}: {e}") from e
        except LDAPException as e:
            raise ConnectivityError(f"Ошибка соединения с {self.cfg.host}: {e}") from e

        try:
            ok = bool(conn.bind())
        except LDAPException as e:
            self._unbind(conn)
            raise AuthenticationError(f"Ошибка bind: {e}") from e
        if not ok:
            res = dict(conn.result or {})
            self._unbind(conn)
            desc = res.get("description") or res.get("message") or "неизвестная ошибка"
            raise AuthenticationError(f"Ошибка bind: {desc}")

        # пароль нужен только для bind; ldap3 хранит его в Connection
        conn.password = None
        self.conn = conn
        self.base_dn = _root_dse_value(self.server, "defaultNamingContext") or self.cfg.base_dn
        if not self.base_dn:
            self.close()
            raise DirectoryQueryError("BaseDN пустой: сервер не вернул defaultNamingContext.")

        self.sids = SidResolver(conn, self.base_dn, self._netbios_name())
        log.info("Подключено к %s, BaseDN=%s", self.cfg.host, self.base_dn)

    @staticmethod
    def _unbind(conn: Connection) -> None:
        try:
            conn.unbind()
        except LDAPException:
            log.debug("unbind failed", exc_info=True)

    def close(self) -> None:
        if self.conn is not None:
            self._unbind(self.conn)
        self.conn = None
        self.sids = None

    def _netbios_name(self) -> str:
        """nETBIOSName of the domain from the Partitions container, best-effort."""
        fallback = guess_netbios(self.cfg.domain)
        config_nc = _root_dse_value(self.server, "configurationNamingContext")
        if not config_nc or self.conn is None:
            return fallback
        try:
            self.conn.search(
                search_base=f"CN=Partitions,{config_nc}",
                search_filter=f"(&(objectClass=crossRef)(nCName={escape_ldap_filter_value(self.base_dn)}))",
                search_scope=LEVEL,
                attributes=["nETBIOSName"],
            )
        except LDAPException:
            log.debug("Не удалось получить NetBIOS-имя домена", exc_info=True)
            return fallback
        for entry in self.conn.response or []:
            if entry.get("type") != "searchResEntry":
                continue
            name = entry.get("attributes", {}).get("nETBIOSName")
            if isinstance(name, list):
                name = name[0] if name else ""
            if name:
                return str(name)
        return fallback

    def _to_ou(self, entry: dict) -> OrganizationalUnit:
        dn = str(entry.get("dn") or "")
        raw_sd = _first_raw(entry, "nTSecurityDescriptor")
        if not raw_sd:
            raise DirectoryQueryError(f"Нет доступа к дескриптору безопасности: {dn}")
        try:
            parsed = parse_security_descriptor(bytes(raw_sd))
        except Exception as e:
            raise DirectoryQueryError(f"Не удалось разобрать дескриптор безопасности {dn}: {e}") from e

        resolve = self.sids.resolve  # type: ignore[union-attr]
        return OrganizationalUnit(
            distinguished_name=dn,
            owner=resolve(parsed.owner_sid),
            access_entries=tuple(replace(e, identity=resolve(e.identity)) for e in parsed.entries),
        )

    def iter_organizational_units(self, name_pattern: str) -> Iterator[OrganizationalUnit]:
        """Yield matching OUs one by one (paged search, no size limit)."""
        if self.conn is None:
            raise DirectoryQueryError("Сессия LDAP не открыта.")

        flt = build_ou_filter(name_pattern)
        log.debug("Поиск OU: base=%s filter=%s", self.base_dn, flt)
        try:
            for entry in self.conn.extend.standard.paged_search(
                search_base=self.base_dn,
                search_filter=flt,
                search_scope=SUBTREE,
                attributes=_OU_ATTRIBUTES,
                controls=security_descriptor_control(sdflags=SD_FLAGS_OWNER_DACL),
                paged_size=int(self.cfg.page_size),
                generator=True,
            ):
                if entry.get("type") != "searchResEntry":
                    continue
                yield self._to_ou(entry)
        except LDAPException as e:
            raise DirectoryQueryError(f"Ошибка поиска OU: {e}") from e

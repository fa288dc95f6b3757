from __future__ import annotations

import logging
from typing import Any

from ldap3 import SUBTREE
from ldap3.core.exceptions import LDAPException

log = logging.getLogger(__name__)

WELL_KNOWN_SIDS: dict[str, str] = {
    "S-1-0-0": "NULL SID",
    "S-1-1-0": "Everyone",
    "S-1-3-0": "CREATOR OWNER",
    "S-1-3-1": "CREATOR GROUP",
    "S-1-3-4": "OWNER RIGHTS",
    "S-1-5-7": "NT AUTHORITY\\ANONYMOUS LOGON",
    "S-1-5-9": "NT AUTHORITY\\ENTERPRISE DOMAIN CONTROLLERS",
    "S-1-5-10": "NT AUTHORITY\\SELF",
    "S-1-5-11": "NT AUTHORITY\\Authenticated Users",
    "S-1-5-18": "NT AUTHORITY\\SYSTEM",
    "S-1-5-32-544": "BUILTIN\\Administrators",
    "S-1-5-32-545": "BUILTIN\\Users",
    "S-1-5-32-546": "BUILTIN\\Guests",
    "S-1-5-32-548": "BUILTIN\\Account Operators",
    "S-1-5-32-549": "BUILTIN\\Server Operators",
    "S-1-5-32-550": "BUILTIN\\Print Operators",
    "S-1-5-32-551": "BUILTIN\\Backup Operators",
    "S-1-5-32-554": "BUILTIN\\Pre-Windows 2000 Compatible Access",
    "S-1-5-32-560": "BUILTIN\\Windows Authorization Access Group",
    "S-1-5-32-561": "BUILTIN\\Terminal Server License Servers",
}


class SidResolver:
    """SID -> 'DOMAIN\\name' with a per-run cache.

    Unresolvable SIDs (foreign domains, deleted principals) are returned as is.
    """

    def __init__(self, conn: Any, base_dn: str, netbios: str) -> None:
        self.conn = conn
        self.base_dn = base_dn
        self.netbios = netbios
        self._cache: dict[str, str] = {}

    def resolve(self, sid: str) -> str:
        if not sid:
            return ""
        if sid in self._cache:
            return self._cache[sid]

        name = WELL_KNOWN_SIDS.get(sid) or self._lookup(sid) or sid
        self._cache[sid] = name
        return name

    def _lookup(self, sid: str) -> str:
        if not self.base_dn or not sid.startswith("S-1-5-21-"):
            return ""
        try:
            self.conn.search(
                search_base=self.base_dn,
                search_filter=f"(objectSid={sid})",
                search_scope=SUBTREE,
                attributes=["sAMAccountName"],
                size_limit=1,
            )
        except LDAPException:
            log.debug("Не удалось разрешить SID %s", sid, exc_info=True)
            return ""

        for entry in self.conn.response or []:
            if entry.get("type") != "searchResEntry":
                continue
            sam = entry.get("attributes", {}).get("sAMAccountName")
            if isinstance(sam, list):
                sam = sam[0] if sam else ""
            sam = str(sam or "").strip()
            if sam:
                return f"{self.netbios}\\{sam}" if self.netbios else sam
        return ""

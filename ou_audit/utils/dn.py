from __future__ import annotations

import re

from ldap3.core.exceptions import LDAPInvalidDnError
from ldap3.utils.dn import parse_dn

# RFC 4514: "\" followed by two hex digits or by a single special character
_ESCAPE_RE = re.compile(r"\\([0-9A-Fa-f]{2}|.)")


def unescape_rdn_value(value: str) -> str:
    # hex escapes are UTF-8 bytes (\D0\9F...), so decode them together
    out = bytearray()
    pos = 0
    for m in _ESCAPE_RE.finditer(value):
        out += value[pos:m.start()].encode("utf-8")
        tok = m.group(1)
        out += bytes([int(tok, 16)]) if len(tok) == 2 else tok.encode("utf-8")
        pos = m.end()
    out += value[pos:].encode("utf-8")
    return out.decode("utf-8", errors="replace")


def dn_first_component_value(dn: str) -> str:
    """Display value of the leaf RDN: 'OU=Sales\\, East,DC=corp' -> 'Sales, East'.

    Malformed DNs are returned as-is so the console never hides an entry.
    """
    s = (dn or "").strip()
    if not s:
        return ""
    try:
        _, value, _ = parse_dn(s)[0]
    except (LDAPInvalidDnError, IndexError):
        return s
    return unescape_rdn_value(value).strip()

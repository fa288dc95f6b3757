"""Parsing of binary nTSecurityDescriptor values into access entries.

Identities are left as SID strings here; name resolution is done by the
client (see sids.SidResolver).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from impacket.ldap import ldaptypes
from impacket.uuid import bin_to_string

from ..models import NULL_GUID, AccessEntry, AccessType, ADRights

EVERYONE_SID = "S-1-1-0"

_ALLOW_TYPES = {
    ldaptypes.ACCESS_ALLOWED_ACE.ACE_TYPE,
    ldaptypes.ACCESS_ALLOWED_OBJECT_ACE.ACE_TYPE,
}
_DENY_TYPES = {
    ldaptypes.ACCESS_DENIED_ACE.ACE_TYPE,
    ldaptypes.ACCESS_DENIED_OBJECT_ACE.ACE_TYPE,
}
_OBJECT_TYPES = {
    ldaptypes.ACCESS_ALLOWED_OBJECT_ACE.ACE_TYPE,
    ldaptypes.ACCESS_DENIED_OBJECT_ACE.ACE_TYPE,
}

INHERITED_ACE = ldaptypes.ACE.INHERITED_ACE
ACE_OBJECT_TYPE_PRESENT = ldaptypes.ACCESS_ALLOWED_OBJECT_ACE.ACE_OBJECT_TYPE_PRESENT

# OWNER_SECURITY_INFORMATION | DACL_SECURITY_INFORMATION
SD_FLAGS_OWNER_DACL = 0x05


@dataclass(frozen=True)
class ParsedDescriptor:
    owner_sid: str
    entries: tuple[AccessEntry, ...]


def _access_type(ace_type: int) -> AccessType | None:
    if ace_type in _ALLOW_TYPES:
        return AccessType.ALLOW
    if ace_type in _DENY_TYPES:
        return AccessType.DENY
    return None


def _object_type(ace: Any) -> str | None:
    if ace["AceType"] not in _OBJECT_TYPES:
        return None
    body = ace["Ace"]
    if not int(body["Flags"]) & ACE_OBJECT_TYPE_PRESENT:
        return None
    guid = bin_to_string(body["ObjectType"]).lower()
    return None if guid == NULL_GUID else guid


def access_entry_from_ace(ace: Any) -> AccessEntry | None:
    """Convert one impacket ACE; None for ACE types that are neither allow nor deny."""
    access_type = _access_type(ace["AceType"])
    if access_type is None:
        return None
    body = ace["Ace"]
    return AccessEntry(
        identity=body["Sid"].formatCanonical(),
        rights=ADRights.from_mask(body["Mask"]["Mask"]),
        access_type=access_type,
        is_inherited=bool(int(ace["AceFlags"]) & INHERITED_ACE),
        object_type=_object_type(ace),
    )


def entries_from_dacl(dacl: Any) -> tuple[AccessEntry, ...]:
    # Null DACL: no restrictions at all, equivalent to Everyone / full control.
    if not isinstance(dacl, ldaptypes.ACL):
        return (
            AccessEntry(
                identity=EVERYONE_SID,
                rights=ADRights.GENERIC_ALL,
                access_type=AccessType.ALLOW,
            ),
        )
    out: list[AccessEntry] = []
    for ace in dacl.aces:
        entry = access_entry_from_ace(ace)
        if entry is not None:
            out.append(entry)
    return tuple(out)


def parse_security_descriptor(data: bytes) -> ParsedDescriptor:
    sd = ldaptypes.SR_SECURITY_DESCRIPTOR(data=data)
    owner = sd["OwnerSid"]
    owner_sid = owner.formatCanonical() if isinstance(owner, ldaptypes.LDAP_SID) else ""
    return ParsedDescriptor(owner_sid=owner_sid, entries=entries_from_dacl(sd["Dacl"]))

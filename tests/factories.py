"""Factories and fakes shared by the OU audit tests."""

from __future__ import annotations

from typing import Iterable, Optional

from impacket.ldap import ldaptypes
from impacket.uuid import string_to_bin

from ou_audit.ad.models import Credentials
from ou_audit.errors import DirectoryQueryError
from ou_audit.models import AccessEntry, AccessType, ADRights, OrganizationalUnit

SALES_DN = "OU=Sales,DC=corp,DC=local"


def allow(identity: str, rights: ADRights, inherited: bool = False, object_type: str | None = None) -> AccessEntry:
    return AccessEntry(identity, rights, AccessType.ALLOW, inherited, object_type)


def deny(identity: str, rights: ADRights, inherited: bool = False, object_type: str | None = None) -> AccessEntry:
    return AccessEntry(identity, rights, AccessType.DENY, inherited, object_type)


def sales_ou() -> OrganizationalUnit:
    return OrganizationalUnit(
        distinguished_name=SALES_DN,
        owner="DOMAIN\\Admins",
        access_entries=(
            allow("DOMAIN\\Helpdesk", ADRights.CREATE_CHILD),
            deny("DOMAIN\\Guests", ADRights.GENERIC_ALL, inherited=True),
            allow("DOMAIN\\Everyone", ADRights.READ_PROPERTY, inherited=True),
        ),
    )


class FakeDirectory:
    """In-memory stand-in for ADClient that records the calls it receives."""

    def __init__(self, ous: Iterable[OrganizationalUnit] = (), fail_after: int | None = None) -> None:
        self.ous = list(ous)
        self.fail_after = fail_after
        self.calls: list[str] = []
        self.credentials: Optional[Credentials] = None

    def open(self, credentials: Optional[Credentials] = None) -> None:
        self.calls.append("open")
        self.credentials = credentials

    def close(self) -> None:
        self.calls.append("close")

    def iter_organizational_units(self, name_pattern: str):
        self.calls.append(f"iter:{name_pattern}")
        for i, ou in enumerate(self.ous):
            if self.fail_after is not None and i >= self.fail_after:
                raise DirectoryQueryError("boom")
            yield ou


class ProbeRecorder:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.calls: list[tuple[str, int, float]] = []

    def __call__(self, host: str, port: int, timeout_s: float) -> bool:
        self.calls.append((host, port, timeout_s))
        return self.result


HELPDESK_SID = "S-1-5-21-1004336348-1177238915-682003330-1105"
GUESTS_SID = "S-1-5-21-1004336348-1177238915-682003330-514"
COMPUTER_GUID = "bf967a86-0de6-11d0-a285-00aa003049e2"


def make_ace(sid: str, mask: int, *, allowed: bool = True, inherited: bool = False) -> ldaptypes.ACE:
    nace = ldaptypes.ACE()
    if allowed:
        nace["AceType"] = ldaptypes.ACCESS_ALLOWED_ACE.ACE_TYPE
        acedata = ldaptypes.ACCESS_ALLOWED_ACE()
    else:
        nace["AceType"] = ldaptypes.ACCESS_DENIED_ACE.ACE_TYPE
        acedata = ldaptypes.ACCESS_DENIED_ACE()
    nace["AceFlags"] = ldaptypes.ACE.INHERITED_ACE if inherited else 0x00
    acedata["Mask"] = ldaptypes.ACCESS_MASK()
    acedata["Mask"]["Mask"] = mask
    acedata["Sid"] = ldaptypes.LDAP_SID()
    acedata["Sid"].fromCanonical(sid)
    nace["Ace"] = acedata
    return nace


def make_object_ace(sid: str, mask: int, guid: str) -> ldaptypes.ACE:
    nace = ldaptypes.ACE()
    nace["AceType"] = ldaptypes.ACCESS_ALLOWED_OBJECT_ACE.ACE_TYPE
    nace["AceFlags"] = 0x00
    acedata = ldaptypes.ACCESS_ALLOWED_OBJECT_ACE()
    acedata["Mask"] = ldaptypes.ACCESS_MASK()
    acedata["Mask"]["Mask"] = mask
    acedata["ObjectType"] = string_to_bin(guid)
    acedata["InheritedObjectType"] = b""
    acedata["Sid"] = ldaptypes.LDAP_SID()
    acedata["Sid"].fromCanonical(sid)
    acedata["Flags"] = ldaptypes.ACCESS_ALLOWED_OBJECT_ACE.ACE_OBJECT_TYPE_PRESENT
    nace["Ace"] = acedata
    return nace


def make_acl(*aces: ldaptypes.ACE) -> ldaptypes.ACL:
    acl = ldaptypes.ACL()
    acl["AclRevision"] = 4
    acl["Sbz1"] = 0
    acl["Sbz2"] = 0
    acl.aces = list(aces)
    return acl


def make_sd_bytes(owner_sid: str, dacl: ldaptypes.ACL) -> bytes:
    sd = ldaptypes.SR_SECURITY_DESCRIPTOR()
    sd["Revision"] = b"\x01"
    sd["Sbz1"] = b"\x00"
    sd["Control"] = 32772
    sd["OwnerSid"] = ldaptypes.LDAP_SID()
    sd["OwnerSid"].fromCanonical(owner_sid)
    sd["GroupSid"] = b""
    sd["Sacl"] = b""
    sd["Dacl"] = dacl
    return sd.getData()



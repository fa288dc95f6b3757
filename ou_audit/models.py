from __future__ import annotations

import enum
from dataclasses import dataclass, field


class ADRights(enum.IntFlag):
    """Active Directory access mask bits (names follow ActiveDirectoryRights)."""

    CREATE_CHILD = 0x00000001
    DELETE_CHILD = 0x00000002
    LIST_CHILDREN = 0x00000004
    SELF = 0x00000008
    READ_PROPERTY = 0x00000010
    WRITE_PROPERTY = 0x00000020
    DELETE_TREE = 0x00000040
    LIST_OBJECT = 0x00000080
    EXTENDED_RIGHT = 0x00000100
    DELETE = 0x00010000
    READ_CONTROL = 0x00020000
    GENERIC_EXECUTE = 0x00020004
    GENERIC_WRITE = 0x00020028
    GENERIC_READ = 0x00020094
    WRITE_DACL = 0x00040000
    WRITE_OWNER = 0x00080000
    GENERIC_ALL = 0x000F01FF
    SYNCHRONIZE = 0x00100000
    ACCESS_SYSTEM_SECURITY = 0x01000000

    @classmethod
    def from_mask(cls, mask: int) -> "ADRights":
        """Build rights from a raw ACE mask, mapping generic bits to AD composites."""
        m = int(mask)
        out = m & ~_RAW_GENERIC_BITS
        for raw_bit, mapped in _RAW_GENERIC_MAP:
            if m & raw_bit:
                out |= int(mapped)
        return cls(out)


# Raw ACCESS_MASK generic bits, as they may appear in a stored descriptor.
_RAW_GENERIC_MAP = (
    (0x10000000, ADRights.GENERIC_ALL),
    (0x20000000, ADRights.GENERIC_EXECUTE),
    (0x40000000, ADRights.GENERIC_WRITE),
    (0x80000000, ADRights.GENERIC_READ),
)
_RAW_GENERIC_BITS = 0xF0000000

# Largest value first: same decomposition as .NET Enum.ToString() for [Flags].
_RIGHT_LABELS: tuple[tuple[ADRights, str], ...] = (
    (ADRights.ACCESS_SYSTEM_SECURITY, "AccessSystemSecurity"),
    (ADRights.SYNCHRONIZE, "Synchronize"),
    (ADRights.GENERIC_ALL, "GenericAll"),
    (ADRights.WRITE_OWNER, "WriteOwner"),
    (ADRights.WRITE_DACL, "WriteDacl"),
    (ADRights.GENERIC_READ, "GenericRead"),
    (ADRights.GENERIC_WRITE, "GenericWrite"),
    (ADRights.GENERIC_EXECUTE, "GenericExecute"),
    (ADRights.READ_CONTROL, "ReadControl"),
    (ADRights.DELETE, "Delete"),
    (ADRights.EXTENDED_RIGHT, "ExtendedRight"),
    (ADRights.LIST_OBJECT, "ListObject"),
    (ADRights.DELETE_TREE, "DeleteTree"),
    (ADRights.WRITE_PROPERTY, "WriteProperty"),
    (ADRights.READ_PROPERTY, "ReadProperty"),
    (ADRights.SELF, "Self"),
    (ADRights.LIST_CHILDREN, "ListChildren"),
    (ADRights.DELETE_CHILD, "DeleteChild"),
    (ADRights.CREATE_CHILD, "CreateChild"),
)
_LABEL_TO_RIGHT = {label.casefold(): right for right, label in _RIGHT_LABELS}


def format_rights(rights: ADRights | int) -> str:
    """Render rights as a comma separated list of names (e.g. 'CreateChild, DeleteChild')."""
    remaining = int(rights)
    if remaining == 0:
        return "0"
    names: list[str] = []
    for right, label in _RIGHT_LABELS:
        v = int(right)
        if remaining & v == v:
            names.append(label)
            remaining &= ~v
    if remaining:
        names.append(f"0x{remaining:X}")
    return ", ".join(names)


def parse_rights(text: str) -> ADRights:
    """Inverse of format_rights(). Accepts names, hex literals or a bare integer."""
    s = (text or "").strip()
    if not s:
        raise ValueError("empty rights value")
    value = 0
    for token in s.split(","):
        t = token.strip()
        if not t:
            continue
        right = _LABEL_TO_RIGHT.get(t.casefold())
        if right is not None:
            value |= int(right)
            continue
        try:
            value |= int(t, 0)
        except ValueError:
            raise ValueError(f"unknown right: {t!r}") from None
    return ADRights(value)


class AccessType(str, enum.Enum):
    ALLOW = "Allow"
    DENY = "Deny"


NULL_GUID = "00000000-0000-0000-0000-000000000000"

# schemaIDGUID -> lDAPDisplayName, only for console labels.
KNOWN_OBJECT_TYPES: dict[str, str] = {
    "bf967aba-0de6-11d0-a285-00aa003049e2": "user",
    "bf967a86-0de6-11d0-a285-00aa003049e2": "computer",
    "bf967a9c-0de6-11d0-a285-00aa003049e2": "group",
    "5cb41ed0-0e4c-11d0-a286-00aa003049e2": "contact",
    "bf967aa5-0de6-11d0-a285-00aa003049e2": "organizationalUnit",
    "bf967aa8-0de6-11d0-a285-00aa003049e2": "printQueue",
    "ce206244-5827-4a86-ba1c-1c0c386c1b64": "msDS-ManagedServiceAccount",
    "7b8b558a-93a5-4af7-adca-c017e67f1057": "msDS-GroupManagedServiceAccount",
    "0feb936f-47b3-49f2-9386-1dedc2c23765": "msDS-DelegatedManagedServiceAccount",
    "bf967a8b-0de6-11d0-a285-00aa003049e2": "container",
}


def object_type_label(object_type: str | None) -> str:
    if not object_type:
        return "(все типы объектов)"
    name = KNOWN_OBJECT_TYPES.get(object_type.lower())
    return f"{object_type} ({name})" if name else object_type


@dataclass(frozen=True)
class AccessEntry:
    identity: str
    rights: ADRights
    access_type: AccessType
    is_inherited: bool = False
    # None for an unscoped grant; otherwise a lower-case schemaIDGUID.
    object_type: str | None = None


@dataclass(frozen=True)
class OrganizationalUnit:
    distinguished_name: str
    owner: str
    access_entries: tuple[AccessEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AuditFinding:
    identity: str
    rights: ADRights
    is_inherited: bool
    object_type: str | None
    owner: str
    distinguished_name: str

    @classmethod
    def from_entry(cls, ou: OrganizationalUnit, entry: AccessEntry) -> "AuditFinding":
        return cls(
            identity=entry.identity,
            rights=entry.rights,
            is_inherited=entry.is_inherited,
            object_type=entry.object_type,
            owner=ou.owner,
            distinguished_name=ou.distinguished_name,
        )

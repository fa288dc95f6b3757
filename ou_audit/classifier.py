"""Classification of OU access entries.

An access entry is reported when it *grants* (Allow) either CreateChild or
GenericAll. Inheritance and object type scoping are carried into the finding
as context, they never filter.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from .models import AccessEntry, AccessType, ADRights, AuditFinding, OrganizationalUnit

RISKY_RIGHTS: tuple[ADRights, ...] = (ADRights.CREATE_CHILD, ADRights.GENERIC_ALL)


def is_reportable(entry: AccessEntry) -> bool:
    if entry.access_type is not AccessType.ALLOW:
        return False
    return any(right in entry.rights for right in RISKY_RIGHTS)


# TODO: weight CreateChild scoped to a single object class (object_type set)
# lower than an unscoped grant once a severity column exists.
def classify(ou: OrganizationalUnit) -> list[AuditFinding]:
    """Return one finding per reportable entry, in access list order."""
    return [AuditFinding.from_entry(ou, e) for e in ou.access_entries if is_reportable(e)]


def classify_all(ous: Iterable[OrganizationalUnit]) -> Iterator[AuditFinding]:
    for ou in ous:
        yield from classify(ou)

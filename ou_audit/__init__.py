"""Audit of Active Directory OUs for GenericAll / CreateChild grants."""

from .classifier import classify, classify_all, is_reportable
from .models import AccessEntry, AccessType, ADRights, AuditFinding, OrganizationalUnit

__version__ = "1.0.0"

__all__ = [
    "classify",
    "classify_all",
    "is_reportable",
    "AccessEntry",
    "AccessType",
    "ADRights",
    "AuditFinding",
    "OrganizationalUnit",
]

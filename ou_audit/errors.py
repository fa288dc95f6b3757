from __future__ import annotations


class AuditError(Exception):
    """Base class for errors that terminate an audit run."""


class ConfigurationError(AuditError):
    """Invalid or incomplete run parameters; raised before any directory contact."""


class ConnectivityError(AuditError):
    """Domain controller is not reachable."""


class AuthenticationError(AuditError):
    """Bind to the directory was rejected."""


class DirectoryQueryError(AuditError):
    """OU search or security descriptor retrieval failed."""


class ExportError(AuditError):
    """Findings could not be written to the export file."""

"""Active Directory (LDAP) access for the OU audit.

Public API:
    - ADConfig
    - Credentials
    - ADClient
    - resolve_dc_config
"""

from .models import ADConfig, Credentials
from .client import ADClient
from .config import resolve_dc_config

__all__ = ["ADConfig", "Credentials", "ADClient", "resolve_dc_config"]

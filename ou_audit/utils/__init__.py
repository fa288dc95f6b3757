"""Small, side-effect free helpers.

Keep this package dependency-light to avoid circular imports.
"""

from .net import looks_like_ip  # noqa: F401
from .tcp_probe import tcp_probe  # noqa: F401

from __future__ import annotations

import logging
import socket

log = logging.getLogger(__name__)


def tcp_probe(host: str, port: int, timeout_s: float) -> bool:
    """Fast TCP connect probe. Returns False on refusal, timeout or resolution error."""
    try:
        with socket.create_connection((host, int(port)), timeout=float(timeout_s)):
            return True
    except OSError as e:
        log.debug("TCP probe %s:%s failed: %s", host, port, e)
        return False
